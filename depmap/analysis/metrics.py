"""Aggregate metrics: counts, duplicate versions, cycles, sizes."""

from __future__ import annotations

import logging

from depmap.analysis.enrichment import Enrichment
from depmap.analysis.graph_models import (
    AnalysisReport,
    DependencyGraph,
    DuplicateDependency,
)

logger = logging.getLogger(__name__)


def analyze(
    graph: DependencyGraph,
    enrichment: Enrichment | None = None,
    largest_limit: int = 10,
) -> AnalysisReport:
    """Compute the full analysis report for an annotated graph.

    Without an *enrichment* collaborator the outdated, security and unused
    slots stay *not checked*.
    """
    report = AnalysisReport(
        total_dependencies=len(graph.nodes),
        direct_dependencies=graph.out_degree(graph.root) if graph.root is not None else 0,
        dev_dependencies=sum(1 for n in graph.nodes if n.is_dev),
        max_depth=max((n.depth for n in graph.nodes), default=0),
        duplicate_deps=find_duplicates(graph),
        circular_deps=find_cycles(graph),
        total_size=total_size(graph),
        largest_deps=find_largest(graph, largest_limit),
    )

    if enrichment is not None:
        report.outdated = enrichment.check_outdated()
        report.security = enrichment.check_security()
        report.unused = enrichment.find_unused()

    logger.info(
        "analysis: %d deps, %d duplicates, %d cycles",
        report.total_dependencies, len(report.duplicate_deps), len(report.circular_deps),
    )
    return report


def find_duplicates(graph: DependencyGraph) -> list[DuplicateDependency]:
    """Names observed with two or more distinct versions, sorted by name."""
    versions_by_name: dict[str, list[str]] = {}
    for node in graph.nodes:
        versions_by_name.setdefault(node.name, []).append(node.version)

    return [
        DuplicateDependency(name=name, versions=versions)
        for name, versions in sorted(versions_by_name.items())
        if len(set(versions)) > 1
    ]


def find_cycles(graph: DependencyGraph) -> list[list[str]]:
    """Detect cycles with a depth-first search over every unvisited node.

    Each back edge to a node on the current traversal stack emits the stack
    slice from that node, in discovery order. The same cycle may show up
    more than once, rotated, when reached from different entry points.
    """
    cycles: list[list[str]] = []
    visited: set[int] = set()

    for start in range(len(graph.nodes)):
        if start in visited:
            continue
        visited.add(start)
        path = [start]
        on_path = {start: 0}  # node -> position in path
        frames = [iter(graph.neighbors(start))]

        while frames:
            neighbor = next(frames[-1], None)
            if neighbor is None:
                frames.pop()
                del on_path[path.pop()]
                continue
            if neighbor in on_path:
                cycles.append([graph.nodes[i].name for i in path[on_path[neighbor]:]])
            elif neighbor not in visited:
                visited.add(neighbor)
                on_path[neighbor] = len(path)
                path.append(neighbor)
                frames.append(iter(graph.neighbors(neighbor)))

    return cycles


def total_size(graph: DependencyGraph) -> int:
    return sum(n.size_bytes or 0 for n in graph.nodes)


def find_largest(graph: DependencyGraph, limit: int = 10) -> list[tuple[str, int]]:
    """Top *limit* nodes by estimated size as ``("name vX", bytes)`` pairs."""
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    sized = [(n.label, n.size_bytes) for n in graph.nodes if n.size_bytes is not None]
    sized.sort(key=lambda x: -x[1])
    return sized[:limit]
