"""Terminal tree view of the dependency graph."""

from __future__ import annotations

import click

from depmap.analysis.graph_models import DependencyGraph, DependencyNode
from depmap.exporter.dot_exporter import DEEP_THRESHOLD, NodeClass, classify_node

CIRCULAR_MARKER = "[circular]"

_STYLES: dict[NodeClass, dict] = {
    NodeClass.ROOT: {"fg": "green"},
    NodeClass.DEV: {"fg": "blue"},
    NodeClass.BUILD: {"fg": "red"},
    NodeClass.DEEP: {"dim": True},
    NodeClass.NORMAL: {"fg": "yellow"},
}


def node_icon(node: DependencyNode) -> str:
    if node.source is None:
        return "📦"
    if node.is_dev:
        return "🔧"
    if node.is_build:
        return "🔨"
    return "📚"


def render_tree(
    graph: DependencyGraph,
    root: int | None = None,
    color: bool = False,
    deep_threshold: int = DEEP_THRESHOLD,
) -> list[str]:
    """Render the graph as a tree rooted at *root* (default: graph root).

    Children are sorted by name. A node reached a second time is printed
    with a ``[circular]`` marker and not expanded again.
    """
    if root is None:
        root = graph.root
    if root is None:
        return []

    lines: list[str] = []
    visited: set[int] = set()
    stack: list[tuple[int, str, bool]] = [(root, "", True)]

    while stack:
        idx, prefix, is_last = stack.pop()
        node = graph.nodes[idx]
        text = f"{node_icon(node)} {node.name} v{node.version}"
        if color:
            text = click.style(text, **_STYLES[classify_node(node, deep_threshold)])
        if idx in visited:
            text = f"{text} {CIRCULAR_MARKER}"
        lines.append(f"{prefix}{'└── ' if is_last else '├── '}{text}")

        if idx in visited:
            continue
        visited.add(idx)

        children = sorted(graph.neighbors(idx), key=lambda i: graph.nodes[i].name)
        child_prefix = prefix + ("    " if is_last else "│   ")
        # Reversed so the first child is popped first
        for position in range(len(children) - 1, -1, -1):
            stack.append((children[position], child_prefix, position == len(children) - 1))

    return lines


def print_tree(
    graph: DependencyGraph,
    root: int | None = None,
    color: bool = True,
    deep_threshold: int = DEEP_THRESHOLD,
) -> None:
    for line in render_tree(graph, root, color=color, deep_threshold=deep_threshold):
        click.echo(line)
