"""Per-language line counts and their merge operations.

Example payload for one language::

    "XML": {"nFiles": 1000, "blank": 3575, "comment": 0, "code": 116111}
"""

from __future__ import annotations

from functools import reduce
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

KOTLIN = "Kotlin"
JAVA = "Java"
XML = "XML"

JVM_LANGUAGES = (KOTLIN, JAVA)


class LanguageStats(BaseModel):
    """Line counts for a single language."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    files: int = Field(default=0, alias="nFiles")
    code: int = 0
    comment: int = 0
    blank: int = 0

    @property
    def total(self) -> int:
        return self.code + self.comment + self.blank

    def __add__(self, other: object) -> LanguageStats:
        if not isinstance(other, LanguageStats):
            return NotImplemented
        return LanguageStats(
            files=self.files + other.files,
            code=self.code + other.code,
            comment=self.comment + other.comment,
            blank=self.blank + other.blank,
        )


EMPTY = LanguageStats()


def merge(left: LanguageStats, right: LanguageStats) -> LanguageStats:
    """Field-wise sum of two stats records."""
    return left + right


def merge_with(
    left: Mapping[str, LanguageStats],
    right: Mapping[str, LanguageStats],
) -> dict[str, LanguageStats]:
    """Merge two language mappings. Keys present in both are summed."""
    merged = dict(left)
    for language, stats in right.items():
        existing = merged.get(language)
        merged[language] = stats if existing is None else existing + stats
    return merged


def merge_all(mappings: Iterable[Mapping[str, LanguageStats]]) -> dict[str, LanguageStats]:
    """Fold any number of language mappings into one."""
    return reduce(merge_with, mappings, {})


def jvm_code(stats: Mapping[str, LanguageStats]) -> LanguageStats:
    """Sum of the Kotlin and Java buckets."""
    total = EMPTY
    for language in JVM_LANGUAGES:
        language_stats = stats.get(language)
        if language_stats is not None:
            total += language_stats
    return total


__all__ = [
    "EMPTY",
    "JAVA",
    "JVM_LANGUAGES",
    "KOTLIN",
    "XML",
    "LanguageStats",
    "jvm_code",
    "merge",
    "merge_all",
    "merge_with",
]
