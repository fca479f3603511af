from __future__ import annotations

import pytest

from graph.dag import (
    CyclePolicy,
    CycleProhibitedError,
    DependencyCycleError,
    DependencyGraph,
    build_dependency_graph,
)


def test_add_edge_rejects_self_loop() -> None:
    graph = DependencyGraph()

    with pytest.raises(CycleProhibitedError):
        graph.add_edge(":a", ":a")


def test_add_edge_rejects_transitive_cycle() -> None:
    graph = DependencyGraph()
    graph.add_edge(":a", ":b")
    graph.add_edge(":b", ":c")

    with pytest.raises(CycleProhibitedError) as exc_info:
        graph.add_edge(":c", ":a")

    assert exc_info.value.source == ":c"
    assert exc_info.value.target == ":a"
    assert list(graph.edges()) == [(":a", ":b"), (":b", ":c")]


def test_graph_includes_unanalyzed_dependency_targets() -> None:
    graph = build_dependency_graph({":app": [":lib", ":external"]})

    assert graph.vertices == [":app", ":lib", ":external"]
    assert graph.successors(":app") == [":lib", ":external"]
    assert ":external" in graph


def test_test_fixtures_cycle_edge_is_dropped() -> None:
    graph = build_dependency_graph(
        {
            ":a": [":a-test-fixtures"],
            ":a-test-fixtures": [":a"],
        }
    )

    assert list(graph.edges()) == [(":a", ":a-test-fixtures")]


def test_plain_cycle_is_fatal_and_names_both_modules() -> None:
    with pytest.raises(DependencyCycleError) as exc_info:
        build_dependency_graph({":a": [":b"], ":b": [":a"]})

    assert exc_info.value.source == ":b"
    assert exc_info.value.target == ":a"
    assert ":a" in str(exc_info.value)
    assert ":b" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, CycleProhibitedError)


def test_both_test_fixtures_cycle_is_fatal() -> None:
    with pytest.raises(DependencyCycleError):
        build_dependency_graph(
            {
                ":a:test-fixtures": [":b:test-fixtures"],
                ":b:test-fixtures": [":a:test-fixtures"],
            }
        )


def test_model_layer_cycle_is_fatal() -> None:
    with pytest.raises(DependencyCycleError) as exc_info:
        build_dependency_graph(
            {
                ":a:model": [":b:model"],
                ":b:model": [":a:model"],
            }
        )

    assert exc_info.value.source == ":b:model"
    assert exc_info.value.target == ":a:model"


def test_test_fixtures_cycle_touching_model_layer_is_fatal() -> None:
    with pytest.raises(DependencyCycleError):
        build_dependency_graph(
            {
                ":lib:model": [":lib:model-test-fixtures-x"],
                ":lib:model-test-fixtures-x": [":lib:model"],
            }
        )


def test_policy_only_tolerates_test_fixtures_outside_model_layer() -> None:
    policy = CyclePolicy()

    assert policy.is_tolerated(":a", ":a-test-fixtures")
    assert policy.is_tolerated(":a-test-fixtures", ":a")
    assert not policy.is_tolerated(":a", ":b")
    assert not policy.is_tolerated(":a:model", ":b:model")
    assert not policy.is_tolerated(":model", ":a-test-fixtures")
    assert not policy.is_tolerated(":a-test-fixtures", ":b-test-fixtures")


def test_policy_markers_are_configurable() -> None:
    policy = CyclePolicy(always_allowed_marker="", test_fixtures_marker="fixtures")

    assert policy.is_tolerated(":a", ":a-fixtures")
    assert not policy.is_tolerated(":model", ":test-model")
    with pytest.raises(DependencyCycleError):
        build_dependency_graph(
            {":model": [":test-model"], ":test-model": [":model"]}, policy
        )
