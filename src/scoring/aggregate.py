"""Aggregate per-module stats into ranked module scores."""

from __future__ import annotations

from typing import TYPE_CHECKING

from graph.centrality import betweenness_centrality
from graph.dag import build_dependency_graph
from logs import get_logger
from scoring.weights import AggregateModuleScore, ModuleScore, weighted
from stats.language_stats import merge_all

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from graph.dag import CyclePolicy
    from stats.module_stats import ModuleStats

LOGGER = get_logger("scoring")


class UnknownProjectAccessorError(Exception):
    """Raised when a module depends on an accessor that maps to no module."""

    def __init__(self, module_path: str, accessor: str) -> None:
        super().__init__(
            f"{module_path} depends on unknown project accessor 'projects.{accessor}'"
        )
        self.module_path = module_path
        self.accessor = accessor


def resolve_shallow_deps(
    all_stats: Iterable[ModuleStats],
    accessors_to_paths: Mapping[str, str],
) -> dict[str, list[str]]:
    """Map each module's dependency accessors back to module paths."""
    shallow_deps: dict[str, list[str]] = {}
    for stats in all_stats:
        resolved: list[str] = []
        for accessor in sorted(stats.deps):
            path = accessors_to_paths.get(accessor)
            if path is None:
                raise UnknownProjectAccessorError(stats.module_path, accessor)
            resolved.append(path)
        shallow_deps[stats.module_path] = resolved
    return shallow_deps


def aggregate_module_stats(
    all_stats: Iterable[ModuleStats],
    accessors_to_paths: Mapping[str, str],
    *,
    include_generated: bool,
    policy: CyclePolicy | None = None,
) -> AggregateModuleScore:
    """Score every module and rank them, worst first.

    Raises:
        UnknownProjectAccessorError: If a dependency accessor is not mapped.
        DependencyCycleError: If the dependency graph has a prohibited cycle.
    """
    sorted_stats = sorted(all_stats, key=lambda stats: stats.module_path)
    global_stats = merge_all(stats.total_source for stats in sorted_stats)

    shallow_deps = resolve_shallow_deps(sorted_stats, accessors_to_paths)
    graph = build_dependency_graph(shallow_deps, policy)
    centralities = betweenness_centrality(graph)

    scores: list[ModuleScore] = []
    for stats in sorted_stats:
        weights = weighted(stats, global_stats, centralities.get(stats.module_path, 0.0))
        scores.append(
            ModuleScore(
                module_name=stats.module_path,
                score=weights.score(),
                weights=weights,
                includes_generated=include_generated,
            )
        )
    # Stable, so ties keep module path order.
    scores.sort(key=lambda module_score: module_score.score, reverse=True)

    LOGGER.debug(
        "Scores are %s",
        "\n".join(f"{score.module_name}: {score.score}" for score in scores),
    )
    return AggregateModuleScore(scores=scores)


__all__ = [
    "UnknownProjectAccessorError",
    "aggregate_module_stats",
    "resolve_shallow_deps",
]
