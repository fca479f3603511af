"""Feature and topography models for module build configuration checks."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


@lru_cache(maxsize=None)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def _sorted_or_none(values: frozenset[str] | None) -> list[str] | None:
    return None if values is None else sorted(values)


class ModuleFeature(BaseModel):
    """An optional build feature and the evidence that it is in use.

    A module either uses a feature or not. Each configured check
    (``matching_sources_dir``, ``generated_sources_dir``, ``matching_text``)
    must find evidence, otherwise the feature is considered unused.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    name: str
    explanation: str
    advice: str
    removal_patterns: frozenset[str] | None = Field(
        default=None,
        alias="removalPatterns",
        description="Regexes whose matches are deleted from the build file",
    )
    generated_sources_dir: str | None = Field(
        default=None,
        alias="generatedSourcesDir",
        description="Generated sources root relative to the module dir, checked recursively",
    )
    generated_sources_extensions: frozenset[str] = Field(
        default_factory=frozenset, alias="generatedSourcesExtensions"
    )
    matching_text: frozenset[str] = Field(
        default_factory=frozenset, alias="matchingText"
    )
    matching_text_file_extensions: frozenset[str] = Field(
        default_factory=frozenset, alias="matchingTextFileExtensions"
    )
    matching_sources_dir: str | None = Field(
        default=None,
        alias="matchingSourcesDir",
        description="Sources dir relative to the module dir, checked recursively",
    )
    matching_plugin: str | None = Field(default=None, alias="matchingPlugin")

    @field_validator("removal_patterns")
    @classmethod
    def validate_removal_patterns(
        cls, v: frozenset[str] | None
    ) -> frozenset[str] | None:
        if v is None:
            return v
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as exc:
                msg = f"Invalid removal pattern {pattern!r}: {exc}"
                raise ValueError(msg) from exc
        return v

    @field_serializer("removal_patterns")
    def _serialize_removal_patterns(self, v: frozenset[str] | None) -> list[str] | None:
        return _sorted_or_none(v)

    @field_serializer(
        "generated_sources_extensions",
        "matching_text",
        "matching_text_file_extensions",
    )
    def _serialize_string_sets(self, v: frozenset[str]) -> list[str]:
        return sorted(v)

    @property
    def compiled_removal_patterns(self) -> tuple[re.Pattern[str], ...]:
        return tuple(_compile(pattern) for pattern in sorted(self.removal_patterns or ()))

    @property
    def is_auto_fixable(self) -> bool:
        return bool(self.removal_patterns)

    @property
    def has_usage_checks(self) -> bool:
        return bool(
            self.matching_sources_dir
            or self.generated_sources_dir
            or self.matching_text
        )


class FeatureOverride(BaseModel):
    """A partial update to a default feature. Only set fields are applied."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str
    explanation: str | None = None
    advice: str | None = None
    removal_patterns: frozenset[str] | None = Field(default=None, alias="removalPatterns")
    generated_sources_dir: str | None = Field(default=None, alias="generatedSourcesDir")
    generated_sources_extensions: frozenset[str] | None = Field(
        default=None, alias="generatedSourcesExtensions"
    )
    matching_text: frozenset[str] | None = Field(default=None, alias="matchingText")
    matching_text_file_extensions: frozenset[str] | None = Field(
        default=None, alias="matchingTextFileExtensions"
    )
    matching_sources_dir: str | None = Field(default=None, alias="matchingSourcesDir")
    matching_plugin: str | None = Field(default=None, alias="matchingPlugin")

    def apply_to(self, base: ModuleFeature) -> ModuleFeature:
        """Overlay the explicitly set fields of this override onto ``base``."""
        updates: dict[str, Any] = {
            field_name: getattr(self, field_name)
            for field_name in self.model_fields_set
            if field_name != "name"
        }
        merged = base.model_dump() | updates
        return ModuleFeature.model_validate(merged)


class ModuleTopography(BaseModel):
    """Detected enabled features and applied plugins of one module."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    gradle_path: str = Field(alias="gradlePath")
    features: frozenset[str] = Field(default_factory=frozenset)
    plugins: frozenset[str] = Field(default_factory=frozenset)

    @field_serializer("features", "plugins")
    def _serialize_sorted(self, v: frozenset[str]) -> list[str]:
        return sorted(v)


__all__ = ["FeatureOverride", "ModuleFeature", "ModuleTopography"]
