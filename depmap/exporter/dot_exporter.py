"""Graphviz DOT export."""

from __future__ import annotations

import enum
import logging
from pathlib import Path

from depmap.analysis.graph_models import DependencyGraph, DependencyNode
from depmap.models import DependencyKind

logger = logging.getLogger(__name__)

DEEP_THRESHOLD = 3


class NodeClass(enum.Enum):
    ROOT = "root"
    DEV = "dev"
    BUILD = "build"
    DEEP = "deep"
    NORMAL = "normal"


NODE_COLORS: dict[NodeClass, str] = {
    NodeClass.ROOT: "green",
    NodeClass.DEV: "blue",
    NodeClass.BUILD: "red",
    NodeClass.DEEP: "gray",
    NodeClass.NORMAL: "yellow",
}

EDGE_STYLES: dict[DependencyKind, str] = {
    DependencyKind.DEVELOPMENT: "dashed",
    DependencyKind.BUILD: "dotted",
    DependencyKind.NORMAL: "solid",
}


def classify_node(node: DependencyNode, deep_threshold: int = DEEP_THRESHOLD) -> NodeClass:
    """Root/workspace members first, then dev, build, deep, normal."""
    if node.source is None:
        return NodeClass.ROOT
    if node.is_dev:
        return NodeClass.DEV
    if node.is_build:
        return NodeClass.BUILD
    if node.depth > deep_threshold:
        return NodeClass.DEEP
    return NodeClass.NORMAL


def render_dot(graph: DependencyGraph, deep_threshold: int = DEEP_THRESHOLD) -> str:
    lines = [
        "digraph dependencies {",
        "    rankdir=LR;",
        "    node [shape=box];",
        "",
    ]
    for node in graph.nodes:
        color = NODE_COLORS[classify_node(node, deep_threshold)]
        name = _quote(node.name)
        lines.append(
            f'    "{name}" [label="{name}\\nv{_quote(node.version)}", color="{color}"];'
        )
    for edge in graph.edges:
        src = _quote(graph.nodes[edge.source].name)
        dst = _quote(graph.nodes[edge.target].name)
        lines.append(f'    "{src}" -> "{dst}" [style="{EDGE_STYLES[edge.kind]}"];')
    lines.append("}")
    return "\n".join(lines) + "\n"


def export_dot(
    graph: DependencyGraph,
    path: Path | str,
    deep_threshold: int = DEEP_THRESHOLD,
) -> Path:
    """Write the DOT rendering to *path*; I/O errors propagate."""
    path = Path(path)
    path.write_text(render_dot(graph, deep_threshold), encoding="utf-8")
    logger.info("dependency graph exported to %s", path)
    return path


def _quote(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')
