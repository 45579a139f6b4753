"""Metadata source: parse ``cargo metadata --format-version 1`` output."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from depmap.models import (
    DeclaredDependency,
    DependencyKind,
    MetadataSnapshot,
    PackageMetadata,
    PackageTarget,
)
from depmap.tools import ToolInvocationError, ToolRunner

logger = logging.getLogger(__name__)


class MetadataError(Exception):
    """The package metadata could not be obtained or is malformed."""


def parse_metadata(data: Any) -> MetadataSnapshot:
    """Build a :class:`MetadataSnapshot` from a decoded cargo metadata document."""
    if not isinstance(data, dict):
        raise MetadataError("metadata document must be a JSON object")
    raw_packages = data.get("packages")
    if not isinstance(raw_packages, list):
        raise MetadataError("metadata document has no 'packages' list")

    packages = [_parse_package(raw, i) for i, raw in enumerate(raw_packages)]
    workspace_root = data.get("workspace_root")
    root_id = _find_root_id(data, raw_packages, workspace_root)

    return MetadataSnapshot(
        packages=packages,
        root_id=root_id,
        workspace_root=workspace_root,
    )


def load_metadata_file(path: Path | str) -> MetadataSnapshot:
    """Read a saved ``cargo metadata`` JSON document."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise MetadataError(f"Failed to read metadata file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise MetadataError(f"Invalid JSON in metadata file {path}: {e}") from e
    return parse_metadata(data)


def fetch_metadata(
    runner: ToolRunner,
    manifest_path: Path | str | None = None,
    cargo: str = "cargo",
) -> MetadataSnapshot:
    """Run ``cargo metadata`` through *runner* and parse the result."""
    args = ["metadata", "--format-version", "1"]
    if manifest_path:
        args += ["--manifest-path", str(manifest_path)]

    try:
        output = runner.run(cargo, args)
    except ToolInvocationError as e:
        raise MetadataError(f"Failed to get cargo metadata: {e}") from e

    if not output.ok:
        detail = output.stderr.strip().splitlines()[-1:] or [f"exit status {output.returncode}"]
        raise MetadataError(f"Failed to get cargo metadata: {detail[0]}")

    try:
        data = json.loads(output.stdout)
    except json.JSONDecodeError as e:
        raise MetadataError(f"Failed to get cargo metadata: invalid JSON ({e})") from e

    snapshot = parse_metadata(data)
    logger.info("loaded metadata for %d packages", len(snapshot.packages))
    return snapshot


def _parse_package(raw: Any, position: int) -> PackageMetadata:
    if not isinstance(raw, dict):
        raise MetadataError(f"package #{position} is not an object")
    for key in ("id", "name", "version"):
        if not raw.get(key):
            raise MetadataError(f"package #{position} is missing '{key}'")

    features = raw.get("features") or {}
    targets = [
        PackageTarget(src_path=t["src_path"])
        for t in raw.get("targets") or []
        if isinstance(t, dict) and t.get("src_path")
    ]
    dependencies = [
        DeclaredDependency(
            name=d["name"],
            version_requirement=d.get("req") or "*",
            kind=DependencyKind.parse(d.get("kind")),
        )
        for d in raw.get("dependencies") or []
        if isinstance(d, dict) and d.get("name")
    ]

    return PackageMetadata(
        id=str(raw["id"]),
        name=str(raw["name"]),
        version=str(raw["version"]),
        source=raw.get("source"),
        license=raw.get("license"),
        features=set(features) if isinstance(features, (dict, list)) else set(),
        targets=targets,
        dependencies=dependencies,
    )


def _find_root_id(
    data: dict,
    raw_packages: list,
    workspace_root: str | None,
) -> str | None:
    resolve = data.get("resolve")
    if isinstance(resolve, dict) and resolve.get("root"):
        return str(resolve["root"])

    # No resolved root: fall back to the package at the workspace root
    if workspace_root:
        root_manifest = Path(workspace_root) / "Cargo.toml"
        for raw in raw_packages:
            manifest = raw.get("manifest_path")
            if manifest and Path(manifest) == root_manifest:
                return str(raw["id"])
    return None
