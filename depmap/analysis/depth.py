"""Depth annotation: first-discovery depth from the root package."""

from __future__ import annotations

from depmap.analysis.graph_models import DependencyGraph


def annotate_depths(graph: DependencyGraph, root: int | None = None) -> None:
    """Assign ``depth`` to every node reachable from *root* (default: graph root).

    Depth-first, pre-order, neighbours in declaration order. A node keeps the
    depth at which it was first visited, so a longer path explored first wins
    over a shorter one explored later. Unreachable nodes keep depth 0.
    """
    if root is None:
        root = graph.root
    if root is None:
        return

    visited: set[int] = {root}
    graph.nodes[root].depth = 0
    stack = [(root, iter(graph.neighbors(root)))]

    while stack:
        node, children = stack[-1]
        child = next(children, None)
        if child is None:
            stack.pop()
            continue
        if child in visited:
            continue
        visited.add(child)
        graph.nodes[child].depth = graph.nodes[node].depth + 1
        stack.append((child, iter(graph.neighbors(child))))
