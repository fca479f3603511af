"""Betweenness centrality for module dependency graphs."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from graph.dag import DependencyGraph


def _single_source_shortest_paths(
    graph: DependencyGraph, source: str
) -> tuple[list[str], dict[str, list[str]], dict[str, float]]:
    """BFS from ``source``.

    Returns the visit order, the shortest-path predecessors of every vertex
    and the number of shortest paths from ``source`` to every vertex.
    """
    order: list[str] = []
    predecessors: dict[str, list[str]] = {vertex: [] for vertex in graph.vertices}
    sigma = dict.fromkeys(graph.vertices, 0.0)
    distance: dict[str, int] = {source: 0}
    sigma[source] = 1.0

    queue = deque([source])
    while queue:
        vertex = queue.popleft()
        order.append(vertex)
        for successor in graph.successors(vertex):
            if successor not in distance:
                distance[successor] = distance[vertex] + 1
                queue.append(successor)
            if distance[successor] == distance[vertex] + 1:
                sigma[successor] += sigma[vertex]
                predecessors[successor].append(vertex)

    return order, predecessors, sigma


def betweenness_centrality(graph: DependencyGraph) -> dict[str, float]:
    """Compute unnormalized betweenness centrality with Brandes' algorithm.

    For each ordered pair ``(s, t)`` every vertex strictly between them on a
    shortest ``s -> t`` path gains the fraction of shortest paths that pass
    through it. Vertices on no such path score ``0.0``.
    """
    scores = dict.fromkeys(graph.vertices, 0.0)
    for source in graph.vertices:
        order, predecessors, sigma = _single_source_shortest_paths(graph, source)
        delta = dict.fromkeys(order, 0.0)
        for vertex in reversed(order):
            for predecessor in predecessors[vertex]:
                delta[predecessor] += (
                    sigma[predecessor] / sigma[vertex] * (1.0 + delta[vertex])
                )
            if vertex != source:
                scores[vertex] += delta[vertex]
    return scores


__all__ = ["betweenness_centrality"]
