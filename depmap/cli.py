"""Click CLI with map, analyze, export, path, unused and serve subcommands."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from depmap import __version__
from depmap.analysis import DependencyGraph, Enrichment, find_path
from depmap.config import AnalysisConfig, ConfigError
from depmap.exporter import export_dot, print_tree, render_report
from depmap.metadata import MetadataError
from depmap.pipeline import load_graph, make_runner, run_analysis


@click.group()
@click.version_option(version=__version__)
@click.option("--manifest-path", type=click.Path(dir_okay=False, path_type=Path), help="Path to Cargo.toml")
@click.option("--metadata-file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Saved `cargo metadata --format-version 1` output")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="YAML config file (default: ./depmap.yaml if present)")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
@click.pass_context
def cli(ctx, manifest_path: Path | None, metadata_file: Path | None, config_path: Path | None, verbose: bool):
    """depmap: Map, analyze and export a Cargo project's dependency graph."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        config = AnalysisConfig.load(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))

    ctx.obj = config.merged(
        manifest_path=str(manifest_path) if manifest_path else None,
        metadata_file=str(metadata_file) if metadata_file else None,
    )


def _load(config: AnalysisConfig) -> DependencyGraph:
    try:
        return load_graph(config)
    except MetadataError as e:
        raise click.ClickException(str(e))


@cli.command("map")
@click.pass_obj
def map_(config: AnalysisConfig):
    """Print the dependency tree."""
    graph = _load(config)
    click.echo(click.style("Dependency map", fg="blue", bold=True))
    click.echo()
    if graph.root is None:
        click.echo("No root package (virtual workspace?); nothing to print.")
        return
    print_tree(graph, deep_threshold=config.deep_threshold)


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Emit the report as JSON")
@click.option("--enrich/--no-enrich", default=None, help="Run cargo outdated/audit/machete")
@click.option("--top", "largest_limit", type=click.IntRange(min=0), help="How many of the largest packages to list")
@click.pass_obj
def analyze(config: AnalysisConfig, as_json: bool, enrich: bool | None, largest_limit: int | None):
    """Summarize counts, duplicates, cycles and sizes."""
    config = config.merged(enrich=enrich, largest_limit=largest_limit)
    try:
        _, report = run_analysis(config)
    except MetadataError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return
    for line in render_report(report, color=True):
        click.echo(line)


@cli.command()
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path), default="dependencies.dot")
@click.pass_obj
def export(config: AnalysisConfig, output: Path):
    """Export the graph in Graphviz DOT format."""
    graph = _load(config)
    try:
        path = export_dot(graph, output, deep_threshold=config.deep_threshold)
    except OSError as e:
        raise click.ClickException(f"Failed to write {output}: {e}")
    click.echo(f"Dependency graph exported to {path}")


@cli.command()
@click.argument("from_name")
@click.argument("to_name")
@click.pass_obj
def path(config: AnalysisConfig, from_name: str, to_name: str):
    """Show the shortest dependency path between two packages."""
    graph = _load(config)
    found = find_path(graph, from_name, to_name)
    if found is None:
        raise click.ClickException(f"No path from {from_name} to {to_name}")
    click.echo(" → ".join(found))


@cli.command()
@click.pass_obj
def unused(config: AnalysisConfig):
    """List unused dependencies reported by cargo machete."""
    result = Enrichment(make_runner(config), cargo=config.cargo).find_unused()
    if not result.was_checked:
        click.echo(f"Unused dependencies: not checked ({result.reason})")
        return
    if not result.items:
        click.echo("Unused dependencies: checked, none found")
        return
    for name in result.items:
        click.echo(name)


@cli.command()
@click.option("--port", "-p", default=8430, help="Port number")
@click.option("--host", default="127.0.0.1", help="Host address")
@click.pass_obj
def serve(config: AnalysisConfig, port: int, host: str):
    """Start the HTTP API.

    The global options and config file become the defaults for graphs
    loaded over the API; a request naming its own manifest or metadata
    file overrides them.
    """
    import uvicorn

    from depmap.web import create_app

    click.echo(f"Starting depmap API at http://{host}:{port}")
    uvicorn.run(create_app(config), host=host, port=port, log_level="info")


if __name__ == "__main__":
    cli()
