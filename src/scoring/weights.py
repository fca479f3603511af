"""Module score weights and the scoring formula."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from stats.language_stats import EMPTY, JAVA, jvm_code
from stats.module_stats import (
    TAG_ANDROID,
    TAG_DAGGER_COMPILER,
    TAG_KAPT,
    TAG_KSP,
    TAG_RESOURCES_ENABLED,
    TAG_VARIANTS,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from stats.language_stats import LanguageStats
    from stats.module_stats import ModuleStats

# Centrality can range from 0 to a few hundred; dampen it so it doesn't dominate.
CENTRALITY_DAMPENING = 0.25
PERCENT_OF_TOTAL_CODE_THRESHOLD = 10.0


def percent_of(part: int, whole: int) -> float:
    """Percentage of ``part`` in ``whole``; 0.0 when either side is 0."""
    if whole == 0 or part == 0:
        return 0.0
    return part / whole * 100


class Weights(BaseModel):
    """Inputs of a module's score."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    percent_of_total_code: float = Field(alias="percentOfTotalCode")
    java_kotlin_ratio: float = Field(
        alias="javaKotlinRatio",
        description="Percent of JVM code written in Java",
    )
    centrality: float
    loc: int
    loc_generated: int = Field(alias="locGenerated")
    tags: frozenset[str] = Field(default_factory=frozenset)
    module_path: str = Field(alias="modulePath")

    @field_serializer("tags")
    def _serialize_tags(self, v: frozenset[str]) -> list[str]:
        return sorted(v)

    def score(self) -> int:
        """Compute the build-cost score. Higher is worse."""
        score = int(self.centrality * CENTRALITY_DAMPENING)

        # Large modules add every percentage point of total code.
        if self.percent_of_total_code > PERCENT_OF_TOTAL_CODE_THRESHOLD:
            score += int(self.percent_of_total_code)

        # Pure Kotlin adds nothing, all-Java adds 10.
        score += int(self.java_kotlin_ratio // 10)

        kapt = TAG_KAPT in self.tags
        ksp = TAG_KSP in self.tags

        if kapt:
            # Dagger is a necessary cost; anything else under kapt is likely avoidable.
            score += 5 if TAG_DAGGER_COMPILER in self.tags else 10

        if ksp:
            score += 2

        if ksp and kapt:
            score += 10

        if TAG_ANDROID in self.tags:
            score += 5

        if TAG_RESOURCES_ENABLED in self.tags:
            score += 1

        if TAG_VARIANTS in self.tags:
            score += 10

        return score


def weighted(
    stats: ModuleStats,
    global_stats: Mapping[str, LanguageStats],
    centrality: float,
) -> Weights:
    """Build the weights of one module relative to the whole build."""
    total_source = stats.total_source
    module_jvm_total = jvm_code(total_source).total
    return Weights(
        percent_of_total_code=percent_of(module_jvm_total, jvm_code(global_stats).total),
        java_kotlin_ratio=percent_of(total_source.get(JAVA, EMPTY).total, module_jvm_total),
        centrality=centrality,
        loc=jvm_code(stats.source).total,
        loc_generated=jvm_code(stats.generated).total,
        tags=stats.tags,
        module_path=stats.module_path,
    )


class ModuleScore(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    module_name: str = Field(alias="moduleName")
    score: int
    weights: Weights
    includes_generated: bool = Field(alias="includesGenerated")


class AggregateModuleScore(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    scores: list[ModuleScore] = Field(default_factory=list)


__all__ = [
    "AggregateModuleScore",
    "ModuleScore",
    "Weights",
    "percent_of",
    "weighted",
]
