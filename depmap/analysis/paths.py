"""Shortest path (by hop count) between two packages."""

from __future__ import annotations

from collections import deque

from depmap.analysis.graph_models import DependencyGraph


def find_path(graph: DependencyGraph, from_name: str, to_name: str) -> list[str] | None:
    """Return package names along a shortest path, endpoints included.

    Both endpoints resolve to the first node with that name. ``None`` when
    either name is unknown or *to_name* is unreachable.
    """
    start = graph.find_by_name(from_name)
    goal = graph.find_by_name(to_name)
    if start is None or goal is None:
        return None

    parent: dict[int, int | None] = {start: None}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if current == goal:
            return _unwind(graph, parent, goal)
        for neighbor in graph.neighbors(current):
            if neighbor not in parent:
                parent[neighbor] = current
                queue.append(neighbor)
    return None


def _unwind(graph: DependencyGraph, parent: dict[int, int | None], goal: int) -> list[str]:
    path: list[str] = []
    node: int | None = goal
    while node is not None:
        path.append(graph.nodes[node].name)
        node = parent[node]
    path.reverse()
    return path
