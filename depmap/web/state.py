"""In-memory state for the HTTP API: no database required."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from depmap.analysis import AnalysisReport, DependencyGraph
from depmap.config import AnalysisConfig


@dataclass
class GraphSession:
    graph: DependencyGraph
    config: AnalysisConfig
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    report: AnalysisReport | None = None


class AppState:
    """Graph sessions shared by all API routes. Graphs are read-only once stored."""

    def __init__(self):
        self.sessions: dict[str, GraphSession] = {}
        # Base config for new sessions; None means defaults plus environment
        self.config: AnalysisConfig | None = None

    def add_session(self, session: GraphSession) -> None:
        self.sessions[session.id] = session

    def get_session(self, session_id: str) -> GraphSession | None:
        return self.sessions.get(session_id)

    def delete_session(self, session_id: str) -> bool:
        return self.sessions.pop(session_id, None) is not None


# Module-level singleton: all routers import this
state = AppState()
