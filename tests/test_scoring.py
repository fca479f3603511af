from __future__ import annotations

import pytest

from scoring.aggregate import UnknownProjectAccessorError, aggregate_module_stats
from scoring.weights import Weights, percent_of, weighted
from stats.language_stats import LanguageStats
from stats.module_stats import (
    TAG_ANDROID,
    TAG_DAGGER_COMPILER,
    TAG_KAPT,
    TAG_KSP,
    TAG_RESOURCES_ENABLED,
    TAG_VARIANTS,
    ModuleStats,
)


def _weights(
    *,
    percent: float = 0.0,
    ratio: float = 0.0,
    centrality: float = 0.0,
    tags: frozenset[str] = frozenset(),
) -> Weights:
    return Weights(
        percent_of_total_code=percent,
        java_kotlin_ratio=ratio,
        centrality=centrality,
        loc=0,
        loc_generated=0,
        tags=tags,
        module_path=":m",
    )


def _stats(
    path: str,
    *,
    kotlin: int = 0,
    java: int = 0,
    generated_java: int = 0,
    deps: frozenset[str] = frozenset(),
    tags: frozenset[str] = frozenset(),
) -> ModuleStats:
    source = {}
    if kotlin:
        source["Kotlin"] = LanguageStats(files=1, code=kotlin)
    if java:
        source["Java"] = LanguageStats(files=1, code=java)
    generated = {}
    if generated_java:
        generated["Java"] = LanguageStats(files=1, code=generated_java)
    return ModuleStats(
        module_path=path, source=source, generated=generated, tags=tags, deps=deps
    )


def test_percent_of_zero_sides() -> None:
    assert percent_of(0, 10) == 0.0
    assert percent_of(10, 0) == 0.0
    assert percent_of(1, 4) == 25.0


def test_baseline_score_is_zero() -> None:
    assert _weights().score() == 0


def test_double_tooling_increments() -> None:
    for base in (_weights(), _weights(percent=42.0, ratio=55.0, centrality=13.0)):
        kapt_only = base.model_copy(update={"tags": frozenset({TAG_KAPT})})
        ksp_only = base.model_copy(update={"tags": frozenset({TAG_KSP})})
        both = base.model_copy(update={"tags": frozenset({TAG_KAPT, TAG_KSP})})

        assert kapt_only.score() - base.score() == 10
        assert ksp_only.score() - base.score() == 2
        assert both.score() - base.score() == 22


def test_tag_increments() -> None:
    assert _weights(tags=frozenset({TAG_KAPT, TAG_DAGGER_COMPILER})).score() == 5
    assert _weights(tags=frozenset({TAG_DAGGER_COMPILER})).score() == 0
    assert _weights(tags=frozenset({TAG_ANDROID})).score() == 5
    assert _weights(tags=frozenset({TAG_RESOURCES_ENABLED})).score() == 1
    assert _weights(tags=frozenset({TAG_VARIANTS})).score() == 10


def test_code_share_and_ratio_terms() -> None:
    assert _weights(centrality=7.9).score() == 1
    assert _weights(percent=10.0).score() == 0
    assert _weights(percent=10.5).score() == 10
    assert _weights(ratio=99.9).score() == 9
    assert _weights(ratio=100.0).score() == 10


def test_weighted_uses_total_source() -> None:
    stats = _stats(":m", kotlin=30, java=10, generated_java=10)
    global_stats = {"Kotlin": LanguageStats(code=150), "Java": LanguageStats(code=50)}

    weights = weighted(stats, global_stats, 2.0)

    assert weights.percent_of_total_code == pytest.approx(25.0)
    assert weights.java_kotlin_ratio == pytest.approx(40.0)
    assert weights.loc == 40
    assert weights.loc_generated == 10
    assert weights.centrality == 2.0


def test_weights_serialize_with_camel_case_names() -> None:
    payload = _weights(tags=frozenset({"b", "a"})).model_dump(by_alias=True, mode="json")

    assert set(payload) == {
        "percentOfTotalCode",
        "javaKotlinRatio",
        "centrality",
        "loc",
        "locGenerated",
        "tags",
        "modulePath",
    }
    assert payload["tags"] == ["a", "b"]


def test_aggregate_is_sorted_stable_permutation() -> None:
    all_stats = [
        _stats(":c", kotlin=10),
        _stats(":a", kotlin=10, deps=frozenset({"b"})),
        _stats(":b", kotlin=10, java=10, deps=frozenset({"c"})),
        _stats(":d", kotlin=10),
    ]
    accessors = {"a": ":a", "b": ":b", "c": ":c", "d": ":d"}

    aggregate = aggregate_module_stats(all_stats, accessors, include_generated=True)

    names = [score.module_name for score in aggregate.scores]
    assert sorted(names) == [":a", ":b", ":c", ":d"]
    scores = [score.score for score in aggregate.scores]
    assert scores == sorted(scores, reverse=True)
    # :b has 40% of code and half of it is Java: 40 + 5
    assert aggregate.scores[0].module_name == ":b"
    assert aggregate.scores[0].score == 45
    assert aggregate.scores[0].weights.centrality == 1.0
    # Equal scores keep module path order.
    assert names[1:] == [":a", ":c", ":d"]
    assert all(score.includes_generated for score in aggregate.scores)


def test_aggregate_unknown_accessor_is_fatal() -> None:
    with pytest.raises(UnknownProjectAccessorError, match="projects.missing"):
        aggregate_module_stats(
            [_stats(":a", deps=frozenset({"missing"}))],
            {"a": ":a"},
            include_generated=False,
        )


def test_aggregate_of_no_modules_is_empty() -> None:
    assert aggregate_module_stats([], {}, include_generated=True).scores == []
