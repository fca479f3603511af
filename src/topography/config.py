"""JSON-encoded feature catalog configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from topography.defaults import load_default_features
from topography.models import FeatureOverride, ModuleFeature

if TYPE_CHECKING:
    from pathlib import Path


class FeatureConfigError(Exception):
    """Raised when a feature catalog document is invalid."""


class ModuleFeaturesConfig(BaseModel):
    """A feature catalog document.

    ``features`` are user-defined features, added to (or replacing by name)
    the built-in catalog. ``build_upon_defaults`` controls whether the
    built-in catalog is used at all, and ``default_feature_overrides`` are
    partial updates overlaid onto built-in features of the same name.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    features: list[ModuleFeature] = Field(default_factory=list)
    build_upon_defaults: bool = Field(default=True, alias="buildUponDefaults")
    default_feature_overrides: list[FeatureOverride] = Field(
        default_factory=list, alias="defaultFeatureOverrides"
    )

    def load_features(self) -> dict[str, ModuleFeature]:
        """Resolve the effective catalog keyed by feature name."""
        loaded: dict[str, ModuleFeature] = {}
        if self.build_upon_defaults:
            defaults = load_default_features()
            loaded.update(defaults)
            for override in self.default_feature_overrides:
                default_to_override = defaults.get(override.name)
                if default_to_override is None:
                    msg = f"No default feature found for '{override.name}'"
                    raise FeatureConfigError(msg)
                try:
                    loaded[override.name] = override.apply_to(default_to_override)
                except ValidationError as exc:
                    msg = f"Invalid override for feature '{override.name}': {exc}"
                    raise FeatureConfigError(msg) from exc

        for feature in self.features:
            loaded[feature.name] = feature
        return loaded

    @classmethod
    def load(cls, path: Path) -> ModuleFeaturesConfig:
        """Load a feature catalog document from a JSON file."""
        try:
            data = orjson.loads(path.read_bytes())
        except OSError as exc:
            msg = f"Failed to read features config {path}: {exc}"
            raise FeatureConfigError(msg) from exc
        except orjson.JSONDecodeError as exc:
            msg = f"Invalid JSON in features config {path}: {exc}"
            raise FeatureConfigError(msg) from exc

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            msg = f"Invalid features config in {path}: {exc}"
            raise FeatureConfigError(msg) from exc


DEFAULT_FEATURES_CONFIG = ModuleFeaturesConfig()


def load_features(path: Path | None) -> dict[str, ModuleFeature]:
    """Load the effective feature catalog, from ``path`` when given."""
    config = DEFAULT_FEATURES_CONFIG if path is None else ModuleFeaturesConfig.load(path)
    return config.load_features()


__all__ = [
    "DEFAULT_FEATURES_CONFIG",
    "FeatureConfigError",
    "ModuleFeaturesConfig",
    "load_features",
]
