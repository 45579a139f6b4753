"""Best-effort enrichment from external cargo subcommands.

``cargo outdated``, ``cargo audit`` and ``cargo machete`` are optional
tools. A check that cannot run, exits with a non-zero status or prints
something unparseable is reported as *not checked*; it never raises.
"""

from __future__ import annotations

import json
import logging

from depmap.analysis.graph_models import (
    EnrichmentResult,
    OutdatedDependency,
    SecurityIssue,
)
from depmap.tools import ToolInvocationError, ToolOutput, ToolRunner

logger = logging.getLogger(__name__)

# cargo-outdated prints these instead of a version when nothing applies
_NO_VERSION = {"---", "Removed", ""}


class Enrichment:
    """Runs the optional checks through an injected tool runner."""

    def __init__(self, runner: ToolRunner, cargo: str = "cargo"):
        self.runner = runner
        self.cargo = cargo

    def check_outdated(self) -> EnrichmentResult:
        output, reason = self._run(["outdated", "--format", "json"])
        if output is None:
            return EnrichmentResult.not_checked(reason)
        try:
            return EnrichmentResult.checked(parse_outdated(output.stdout))
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("could not parse cargo outdated output: %s", e)
            return EnrichmentResult.not_checked(f"unparseable output: {e}")

    def check_security(self) -> EnrichmentResult:
        output, reason = self._run(["audit", "--json"])
        if output is None:
            return EnrichmentResult.not_checked(reason)
        try:
            return EnrichmentResult.checked(parse_audit(output.stdout))
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("could not parse cargo audit output: %s", e)
            return EnrichmentResult.not_checked(f"unparseable output: {e}")

    def find_unused(self) -> EnrichmentResult:
        output, reason = self._run(["machete"])
        if output is None:
            return EnrichmentResult.not_checked(reason)
        return EnrichmentResult.checked(parse_machete(output.stdout))

    def _run(self, args: list[str]) -> tuple[ToolOutput | None, str | None]:
        tool = f"{self.cargo} {args[0]}"
        try:
            output = self.runner.run(self.cargo, args)
        except ToolInvocationError as e:
            logger.debug("%s unavailable: %s", tool, e.reason)
            return None, e.reason
        if not output.ok:
            logger.debug("%s exited with status %d", tool, output.returncode)
            return None, f"exit status {output.returncode}"
        return output, None


def parse_outdated(stdout: str) -> list[OutdatedDependency]:
    """Parse ``cargo outdated --format json`` (one JSON object per crate)."""
    results: list[OutdatedDependency] = []
    for line in stdout.splitlines():
        line = line.strip()
        if not line:
            continue
        report = json.loads(line)
        for dep in report.get("dependencies", []):
            current = str(dep.get("project", ""))
            latest = str(dep.get("latest", ""))
            if latest in _NO_VERSION or latest == current:
                continue
            results.append(OutdatedDependency(
                name=dep["name"],
                current_version=current,
                latest_version=latest,
            ))
    return results


def parse_audit(stdout: str) -> list[SecurityIssue]:
    """Parse the ``vulnerabilities.list`` section of ``cargo audit --json``."""
    report = json.loads(stdout)
    issues: list[SecurityIssue] = []
    for vuln in report.get("vulnerabilities", {}).get("list", []):
        advisory = vuln.get("advisory") or {}
        package = vuln.get("package") or {}
        name = package.get("name") or advisory.get("package", "?")
        advisory_id = advisory.get("id", "")
        title = advisory.get("title", "")
        issues.append(SecurityIssue(
            package=name,
            advisory=f"{advisory_id}: {title}" if title else advisory_id,
            severity=advisory.get("cvss") or advisory.get("informational") or "unknown",
        ))
    return issues


def parse_machete(stdout: str) -> list[str]:
    """Collect the indented dependency names listed under each crate header."""
    unused: list[str] = []
    in_crate = False
    for line in stdout.splitlines():
        if not line.strip():
            in_crate = False
            continue
        if " -- " in line and line.rstrip().endswith(":"):
            in_crate = True
            continue
        if in_crate and line[:1].isspace():
            unused.append(line.strip())
    return unused
