"""Data models for the dependency graph."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from depmap.models import DependencyKind


@dataclass
class DependencyNode:
    package_id: str
    name: str
    version: str
    source: str | None = None
    features: set[str] = field(default_factory=set)
    size_bytes: int | None = None
    license: str | None = None
    is_dev: bool = False
    is_build: bool = False
    depth: int = 0

    @property
    def label(self) -> str:
        return f"{self.name} v{self.version}"


@dataclass
class DependencyEdge:
    source: int  # index of the depending package
    target: int  # index of the package depended upon
    kind: DependencyKind = DependencyKind.NORMAL


@dataclass
class DependencyGraph:
    """Arena graph: nodes and edges in flat lists, addressed by index."""
    nodes: list[DependencyNode] = field(default_factory=list)
    edges: list[DependencyEdge] = field(default_factory=list)
    index: dict[str, int] = field(default_factory=dict)  # package id -> node index
    forward: list[list[int]] = field(default_factory=list)  # node -> [edge indices]
    root: int | None = None

    def add_node(self, node: DependencyNode) -> int:
        idx = len(self.nodes)
        self.nodes.append(node)
        self.forward.append([])
        self.index[node.package_id] = idx
        return idx

    def add_edge(self, source: int, target: int, kind: DependencyKind) -> int:
        idx = len(self.edges)
        self.edges.append(DependencyEdge(source=source, target=target, kind=kind))
        self.forward[source].append(idx)
        return idx

    def neighbors(self, idx: int) -> list[int]:
        """Targets of *idx*'s outgoing edges, in declaration order."""
        return [self.edges[e].target for e in self.forward[idx]]

    def out_degree(self, idx: int) -> int:
        return len(self.forward[idx])

    def find_by_name(self, name: str) -> int | None:
        """Index of the first node called *name*, if any."""
        return next((i for i, n in enumerate(self.nodes) if n.name == name), None)

    @property
    def root_node(self) -> DependencyNode | None:
        return self.nodes[self.root] if self.root is not None else None


@dataclass
class DuplicateDependency:
    name: str
    versions: list[str] = field(default_factory=list)


@dataclass
class OutdatedDependency:
    name: str
    current_version: str
    latest_version: str


@dataclass
class SecurityIssue:
    package: str
    advisory: str
    severity: str


class EnrichmentStatus(enum.Enum):
    CHECKED = "checked"
    NOT_CHECKED = "not_checked"


@dataclass
class EnrichmentResult:
    """Outcome of one best-effort external check."""
    status: EnrichmentStatus = EnrichmentStatus.NOT_CHECKED
    items: list = field(default_factory=list)
    reason: str | None = None

    @classmethod
    def checked(cls, items: list) -> EnrichmentResult:
        return cls(status=EnrichmentStatus.CHECKED, items=list(items))

    @classmethod
    def not_checked(cls, reason: str | None = None) -> EnrichmentResult:
        return cls(status=EnrichmentStatus.NOT_CHECKED, reason=reason)

    @property
    def was_checked(self) -> bool:
        return self.status is EnrichmentStatus.CHECKED


@dataclass
class AnalysisReport:
    total_dependencies: int = 0
    direct_dependencies: int = 0
    dev_dependencies: int = 0
    max_depth: int = 0
    duplicate_deps: list[DuplicateDependency] = field(default_factory=list)
    circular_deps: list[list[str]] = field(default_factory=list)
    total_size: int = 0
    largest_deps: list[tuple[str, int]] = field(default_factory=list)
    outdated: EnrichmentResult = field(default_factory=EnrichmentResult)
    security: EnrichmentResult = field(default_factory=EnrichmentResult)
    unused: EnrichmentResult = field(default_factory=EnrichmentResult)

    @property
    def outdated_deps(self) -> list[OutdatedDependency]:
        return self.outdated.items

    @property
    def security_issues(self) -> list[SecurityIssue]:
        return self.security.items

    def to_dict(self) -> dict:
        def _enrichment(result: EnrichmentResult) -> dict:
            items = [
                item if isinstance(item, str) else vars(item)
                for item in result.items
            ]
            return {"status": result.status.value, "items": items, "reason": result.reason}

        return {
            "total_dependencies": self.total_dependencies,
            "direct_dependencies": self.direct_dependencies,
            "dev_dependencies": self.dev_dependencies,
            "max_depth": self.max_depth,
            "duplicate_deps": [
                {"name": d.name, "versions": d.versions} for d in self.duplicate_deps
            ],
            "circular_deps": self.circular_deps,
            "total_size": self.total_size,
            "largest_deps": [
                {"name": name, "size_bytes": size} for name, size in self.largest_deps
            ],
            "outdated": _enrichment(self.outdated),
            "security": _enrichment(self.security),
            "unused": _enrichment(self.unused),
        }
