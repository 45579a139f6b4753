"""Dependency graph builder: turns a metadata snapshot into an indexed graph."""

from __future__ import annotations

import logging
import os

from depmap.analysis.graph_models import DependencyGraph, DependencyNode
from depmap.metadata import MetadataError
from depmap.models import DependencyKind, MetadataSnapshot, PackageMetadata

logger = logging.getLogger(__name__)


class DependencyGraphBuilder:
    """Build a dependency graph from resolved package metadata.

    Dependencies are resolved by package name only: the first package in
    the snapshot with a matching name becomes the edge target, whatever the
    declared version requirement says. When several versions of one crate
    coexist, edges can therefore point at the wrong version node.
    """

    def build(self, snapshot: MetadataSnapshot) -> DependencyGraph:
        graph = DependencyGraph()

        # Step 1: one node per package, indexed by package id
        for package in snapshot.packages:
            if package.id in graph.index:
                raise MetadataError(f"duplicate package id in metadata: {package.id}")
            graph.add_node(DependencyNode(
                package_id=package.id,
                name=package.name,
                version=package.version,
                source=package.source,
                features=set(package.features),
                size_bytes=estimate_package_size(package),
                license=package.license,
            ))

        # Step 2: edges from declared dependencies, first name match wins
        first_by_name: dict[str, int] = {}
        for idx, node in enumerate(graph.nodes):
            first_by_name.setdefault(node.name, idx)

        for package in snapshot.packages:
            from_idx = graph.index[package.id]
            for dep in package.dependencies:
                to_idx = first_by_name.get(dep.name)
                if to_idx is None:
                    logger.debug("%s: dependency %s not in metadata, skipping", package.name, dep.name)
                    continue
                graph.add_edge(from_idx, to_idx, dep.kind)
                if dep.kind is DependencyKind.DEVELOPMENT:
                    graph.nodes[to_idx].is_dev = True
                if dep.kind is DependencyKind.BUILD:
                    graph.nodes[to_idx].is_build = True

        if snapshot.root_id is not None:
            graph.root = graph.index.get(snapshot.root_id)
            if graph.root is None:
                logger.warning("root package %s not found among packages", snapshot.root_id)

        logger.info("built graph: %d nodes, %d edges", len(graph.nodes), len(graph.edges))
        return graph


def estimate_package_size(package: PackageMetadata) -> int | None:
    """Sum the on-disk size of the package's target source files.

    Unreadable or missing files count as zero; a zero total is ``None``.
    """
    size = 0
    for target in package.targets:
        try:
            size += os.stat(target.src_path).st_size
        except OSError:
            continue
    return size or None
