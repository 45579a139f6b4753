"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from depmap import __version__
from depmap.config import AnalysisConfig
from depmap.web.api import router
from depmap.web.state import state


def create_app(config: AnalysisConfig | None = None) -> FastAPI:
    """Build the API app. *config* seeds every graph session the app loads."""
    state.config = config
    app = FastAPI(title="depmap", version=__version__)
    app.include_router(router)
    return app
