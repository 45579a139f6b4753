"""HTTP API for graph sessions."""

from depmap.web.app import create_app

__all__ = ["create_app"]
