"""Detect declared build features that a module does not actually use."""

from __future__ import annotations

from typing import TYPE_CHECKING

from logs import get_logger
from scan.files import has_any_file, walk_each_file
from topography.config import FeatureConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from topography.models import ModuleFeature, ModuleTopography

LOGGER = get_logger("topography")


def features_to_check(
    topography: ModuleTopography,
    features: Mapping[str, ModuleFeature],
) -> list[ModuleFeature]:
    """Enabled features plus every feature matched by an applied plugin."""
    checked: dict[str, ModuleFeature] = {}
    for feature_key in sorted(topography.features):
        feature = features.get(feature_key)
        if feature is None:
            msg = f"Unknown feature '{feature_key}' in topography of {topography.gradle_path}"
            raise FeatureConfigError(msg)
        checked[feature.name] = feature

    for feature in features.values():
        if feature.matching_plugin is not None and feature.matching_plugin in topography.plugins:
            checked.setdefault(feature.name, feature)

    return [checked[name] for name in sorted(checked)]


def has_matching_text_in(feature: ModuleFeature, srcs_dir: Path) -> bool:
    """Return True when any line of any source file contains a marker text."""
    LOGGER.debug("Checking for %s annotation usages in sources", feature.name)
    extensions = feature.matching_text_file_extensions
    for path in walk_each_file(srcs_dir):
        if extensions and path.suffix.removeprefix(".") not in extensions:
            continue
        try:
            with path.open(encoding="utf-8", errors="replace") as handle:
                for line in handle:
                    if any(text in line for text in feature.matching_text):
                        return True
        except OSError as exc:
            LOGGER.warning("Skipping unreadable file %s: %s", path, exc)
    return False


def is_unused(feature: ModuleFeature, project_dir: Path) -> bool:
    """Return True when any configured usage check finds no evidence."""
    if feature.matching_sources_dir is not None and not has_any_file(
        project_dir / feature.matching_sources_dir
    ):
        return True

    if feature.generated_sources_dir is not None and not has_any_file(
        project_dir / feature.generated_sources_dir
    ):
        return True

    return bool(feature.matching_text) and not has_matching_text_in(
        feature, project_dir / "src"
    )


def find_features_to_remove(
    topography: ModuleTopography,
    features: Mapping[str, ModuleFeature],
    project_dir: Path,
) -> list[ModuleFeature]:
    """Return the checked features of a module that appear to be unused.

    Features with none of the usage checks configured are never reported.
    The result is sorted by feature name.
    """
    features_to_remove: list[ModuleFeature] = []
    for feature in features_to_check(topography, features):
        if not feature.has_usage_checks:
            continue
        if is_unused(feature, project_dir):
            LOGGER.debug("%s: feature %s appears unused", topography.gradle_path, feature.name)
            features_to_remove.append(feature)
    return features_to_remove


__all__ = [
    "features_to_check",
    "find_features_to_remove",
    "has_matching_text_in",
    "is_unused",
]
