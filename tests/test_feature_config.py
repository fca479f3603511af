from __future__ import annotations

from typing import TYPE_CHECKING

import orjson
import pytest

from topography.config import FeatureConfigError, ModuleFeaturesConfig, load_features
from topography.defaults import COMPOSE, DEFAULT_FEATURES, load_default_features
from topography.models import FeatureOverride, ModuleFeature

if TYPE_CHECKING:
    from pathlib import Path


def _write_features_config(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "features.json"
    path.write_bytes(orjson.dumps(payload))
    return path


def test_default_catalog_has_every_builtin_feature() -> None:
    features = load_default_features()

    assert list(features) == [feature.name for feature in DEFAULT_FEATURES]
    assert set(features) == {
        "androidTest",
        "robolectric",
        "compose",
        "dagger-compiler",
        "dagger",
        "moshi-codegen",
        "circuit-inject",
        "parcelize",
        "ksp",
        "kapt",
        "viewbinding",
    }
    assert features["moshi-codegen"].removal_patterns is None
    assert features["kapt"].matching_plugin == "org.jetbrains.kotlin.kapt"
    assert "@Inject" in features["dagger"].matching_text
    assert features["dagger-compiler"].matching_text < features["dagger"].matching_text


def test_load_features_without_path_returns_defaults() -> None:
    assert load_features(None) == load_default_features()


def test_override_merges_only_set_fields() -> None:
    override = FeatureOverride.model_validate(
        {"name": "compose", "matchingText": ["@Preview"]}
    )

    merged = override.apply_to(COMPOSE)

    assert merged.matching_text == frozenset({"@Preview"})
    assert merged.explanation == COMPOSE.explanation
    assert merged.removal_patterns == COMPOSE.removal_patterns
    assert COMPOSE.matching_text == frozenset({"@Composable", "setContent {"})


def test_override_can_clear_optional_field() -> None:
    override = FeatureOverride.model_validate({"name": "compose", "removalPatterns": None})

    assert override.apply_to(COMPOSE).removal_patterns is None


def test_config_file_extends_and_overrides_catalog(tmp_path: Path) -> None:
    path = _write_features_config(
        tmp_path,
        {
            "features": [
                {
                    "name": "room",
                    "explanation": "Room was requested but no @Database was found",
                    "advice": "Remove room()",
                    "removalPatterns": [r"\broom\(\)"],
                    "matchingText": ["@Database"],
                }
            ],
            "defaultFeatureOverrides": [
                {"name": "robolectric", "matchingSourcesDir": "src/testDebug"}
            ],
        },
    )

    features = load_features(path)

    assert features["room"].matching_text == frozenset({"@Database"})
    assert features["robolectric"].matching_sources_dir == "src/testDebug"
    assert "compose" in features


def test_config_without_defaults(tmp_path: Path) -> None:
    path = _write_features_config(
        tmp_path,
        {
            "buildUponDefaults": False,
            "features": [{"name": "only", "explanation": "e", "advice": "a"}],
        },
    )

    assert list(load_features(path)) == ["only"]


def test_unknown_override_is_fatal() -> None:
    config = ModuleFeaturesConfig.model_validate(
        {"defaultFeatureOverrides": [{"name": "does-not-exist"}]}
    )

    with pytest.raises(FeatureConfigError, match="No default feature found for 'does-not-exist'"):
        config.load_features()


def test_unknown_override_key_rejected(tmp_path: Path) -> None:
    path = _write_features_config(
        tmp_path,
        {"defaultFeatureOverrides": [{"name": "compose", "bogus": True}]},
    )

    with pytest.raises(FeatureConfigError, match="Invalid features config"):
        load_features(path)


def test_invalid_removal_pattern_rejected() -> None:
    with pytest.raises(ValueError, match="Invalid removal pattern"):
        ModuleFeature(name="x", explanation="e", advice="a", removal_patterns=frozenset({"("}))


def test_invalid_json_is_config_error(tmp_path: Path) -> None:
    path = tmp_path / "features.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(FeatureConfigError, match="Invalid JSON"):
        load_features(path)


def test_missing_file_is_config_error(tmp_path: Path) -> None:
    with pytest.raises(FeatureConfigError, match="Failed to read"):
        load_features(tmp_path / "missing.json")


def test_feature_serializes_with_sorted_sets() -> None:
    payload = COMPOSE.model_dump(by_alias=True, mode="json")

    assert payload["matchingText"] == ["@Composable", "setContent {"]
    assert payload["removalPatterns"] == [r"\bcompose\(\)"]
    assert ModuleFeature.model_validate(payload) == COMPOSE
