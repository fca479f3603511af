from __future__ import annotations

import pytest

from graph.centrality import betweenness_centrality
from graph.dag import build_dependency_graph


def test_path_graph_middle_vertex_is_central() -> None:
    graph = build_dependency_graph({"A": ["B"], "B": ["C"]})

    scores = betweenness_centrality(graph)

    assert scores == {"A": 0.0, "B": 1.0, "C": 0.0}


def test_ties_split_evenly() -> None:
    # Two shortest A -> D paths, one through B and one through C.
    graph = build_dependency_graph({"A": ["B", "C"], "B": ["D"], "C": ["D"]})

    scores = betweenness_centrality(graph)

    assert scores["B"] == pytest.approx(0.5)
    assert scores["C"] == pytest.approx(0.5)
    assert scores["A"] == 0.0
    assert scores["D"] == 0.0


def test_shortcut_edge_removes_through_path() -> None:
    graph = build_dependency_graph({"A": ["B", "C"], "B": ["C"]})

    assert betweenness_centrality(graph) == {"A": 0.0, "B": 0.0, "C": 0.0}


def test_hub_counts_every_pair_it_connects() -> None:
    graph = build_dependency_graph(
        {"app1": ["hub"], "app2": ["hub"], "hub": ["lib1", "lib2"]}
    )

    scores = betweenness_centrality(graph)

    assert scores["hub"] == pytest.approx(4.0)
    assert scores["lib1"] == 0.0


def test_empty_graph() -> None:
    assert betweenness_centrality(build_dependency_graph({})) == {}
