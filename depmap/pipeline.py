"""Analysis pipeline: metadata -> graph -> depths -> report."""

from __future__ import annotations

from typing import Callable

from depmap.analysis import (
    AnalysisReport,
    DependencyGraph,
    DependencyGraphBuilder,
    Enrichment,
    analyze,
    annotate_depths,
)
from depmap.config import AnalysisConfig
from depmap.metadata import fetch_metadata, load_metadata_file
from depmap.models import MetadataSnapshot
from depmap.tools import SubprocessToolRunner, ToolRunner

ProgressCallback = Callable[[str, int, int], None]


def make_runner(config: AnalysisConfig) -> ToolRunner:
    return SubprocessToolRunner(timeout=config.tool_timeout)


def load_snapshot(config: AnalysisConfig, runner: ToolRunner | None = None) -> MetadataSnapshot:
    """Read the saved metadata file if configured, otherwise ask cargo."""
    if config.metadata_file:
        return load_metadata_file(config.metadata_file)
    return fetch_metadata(
        runner or make_runner(config),
        manifest_path=config.manifest_path,
        cargo=config.cargo,
    )


def load_graph(
    config: AnalysisConfig,
    runner: ToolRunner | None = None,
    progress: ProgressCallback | None = None,
) -> DependencyGraph:
    """Stages 1-3: load metadata, build the graph, annotate depths."""
    if progress:
        progress("Loading metadata", 0, 3)
    snapshot = load_snapshot(config, runner)

    if progress:
        progress("Building graph", 1, 3)
    graph = DependencyGraphBuilder().build(snapshot)

    if progress:
        progress("Annotating depths", 2, 3)
    annotate_depths(graph)

    if progress:
        progress("Annotating depths", 3, 3)
    return graph


def run_analysis(
    config: AnalysisConfig,
    runner: ToolRunner | None = None,
    progress: ProgressCallback | None = None,
) -> tuple[DependencyGraph, AnalysisReport]:
    """Run the full pipeline; enrichment only when ``config.enrich`` is set."""
    runner = runner or make_runner(config)
    graph = load_graph(config, runner, progress)

    if progress:
        progress("Analyzing", 0, 1)
    enrichment = Enrichment(runner, cargo=config.cargo) if config.enrich else None
    report = analyze(graph, enrichment=enrichment, largest_limit=config.largest_limit)
    if progress:
        progress("Analyzing", 1, 1)

    return graph, report
