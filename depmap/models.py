"""Data models for the package metadata snapshot consumed by depmap."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class DependencyKind(enum.Enum):
    NORMAL = "normal"
    DEVELOPMENT = "dev"
    BUILD = "build"

    @classmethod
    def parse(cls, value: str | None) -> DependencyKind:
        """Map a cargo ``kind`` field (``null``, ``"dev"``, ``"build"``) to a kind."""
        if value == "dev":
            return cls.DEVELOPMENT
        if value == "build":
            return cls.BUILD
        return cls.NORMAL


@dataclass
class PackageTarget:
    src_path: str


@dataclass
class DeclaredDependency:
    """A dependency as written in the dependent's manifest."""
    name: str
    version_requirement: str = "*"
    kind: DependencyKind = DependencyKind.NORMAL


@dataclass
class PackageMetadata:
    """One resolved package from the metadata source."""
    id: str
    name: str
    version: str
    source: str | None = None  # None for workspace members
    license: str | None = None
    features: set[str] = field(default_factory=set)
    targets: list[PackageTarget] = field(default_factory=list)
    dependencies: list[DeclaredDependency] = field(default_factory=list)


@dataclass
class MetadataSnapshot:
    """Immutable input for one analysis run."""
    packages: list[PackageMetadata] = field(default_factory=list)
    root_id: str | None = None
    workspace_root: str | None = None

    @property
    def root_package(self) -> PackageMetadata | None:
        if self.root_id is None:
            return None
        return next((p for p in self.packages if p.id == self.root_id), None)
