"""Graph construction and analysis."""

from depmap.analysis.dependency_graph import DependencyGraphBuilder, estimate_package_size
from depmap.analysis.depth import annotate_depths
from depmap.analysis.enrichment import Enrichment
from depmap.analysis.graph_models import (
    AnalysisReport,
    DependencyEdge,
    DependencyGraph,
    DependencyNode,
    DuplicateDependency,
    EnrichmentResult,
    EnrichmentStatus,
)
from depmap.analysis.metrics import analyze, find_cycles, find_duplicates
from depmap.analysis.paths import find_path

__all__ = [
    "AnalysisReport",
    "DependencyEdge",
    "DependencyGraph",
    "DependencyGraphBuilder",
    "DependencyNode",
    "DuplicateDependency",
    "Enrichment",
    "EnrichmentResult",
    "EnrichmentStatus",
    "analyze",
    "annotate_depths",
    "estimate_package_size",
    "find_cycles",
    "find_duplicates",
    "find_path",
]
