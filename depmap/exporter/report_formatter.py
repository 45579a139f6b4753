"""Human-readable rendering of an analysis report."""

from __future__ import annotations

import click

from depmap.analysis.graph_models import AnalysisReport, EnrichmentResult

_UNITS = ["B", "KB", "MB", "GB"]


def format_size(size_bytes: int) -> str:
    size = float(size_bytes)
    unit = 0
    while size >= 1024.0 and unit < len(_UNITS) - 1:
        size /= 1024.0
        unit += 1
    return f"{size:.2f} {_UNITS[unit]}"


def render_report(report: AnalysisReport, color: bool = False) -> list[str]:
    def style(text: str, **kwargs) -> str:
        return click.style(text, **kwargs) if color else text

    lines = [
        style("=== Dependency Analysis ===", fg="blue", bold=True),
        f"Total dependencies: {report.total_dependencies}",
        f"   Direct: {report.direct_dependencies}",
        f"   Dev: {report.dev_dependencies}",
        f"   Max depth: {report.max_depth}",
    ]
    if report.total_size > 0:
        lines.append(f"Total size: {format_size(report.total_size)}")

    if report.duplicate_deps:
        lines.append("")
        lines.append(f"{style(str(len(report.duplicate_deps)), fg='yellow')} duplicate dependencies found:")
        for dup in report.duplicate_deps[:5]:
            lines.append(f"   {style(dup.name, fg='yellow')} has versions: {', '.join(dup.versions)}")

    if report.circular_deps:
        lines.append("")
        lines.append(f"{style(str(len(report.circular_deps)), fg='red')} circular dependencies found:")
        for cycle in report.circular_deps[:3]:
            lines.append(f"   {style(' → '.join(cycle), fg='red')}")

    if report.largest_deps:
        lines.append("")
        lines.append("Largest dependencies:")
        for name, size in report.largest_deps[:5]:
            lines.append(f"   {name} - {format_size(size)}")

    lines.append("")
    lines.append(_enrichment_line("Security advisories", report.security, style))
    for issue in report.security_issues[:3]:
        lines.append(f"   {style(issue.package, fg='red')} - {issue.advisory}")
    lines.append(_enrichment_line("Outdated dependencies", report.outdated, style))
    for dep in report.outdated_deps[:5]:
        lines.append(f"   {dep.name} {dep.current_version} -> {dep.latest_version}")
    lines.append(_enrichment_line("Unused dependencies", report.unused, style))
    for name in report.unused.items[:5]:
        lines.append(f"   {name}")

    return lines


def _enrichment_line(title: str, result: EnrichmentResult, style) -> str:
    if not result.was_checked:
        reason = f" ({result.reason})" if result.reason else ""
        return f"{title}: {style('not checked', dim=True)}{reason}"
    if not result.items:
        return f"{title}: checked, none found"
    return f"{title}: {style(str(len(result.items)), fg='red', bold=True)} found"
