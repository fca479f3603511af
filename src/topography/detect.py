"""Infer a module's topography from its build file text."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from topography.models import ModuleTopography

if TYPE_CHECKING:
    from collections.abc import Mapping

    from topography.models import ModuleFeature

# Version catalog plugin aliases -> plugin ids.
DEFAULT_PLUGIN_ALIASES: dict[str, str] = {
    "android.application": "com.android.application",
    "android.library": "com.android.library",
    "kotlin.android": "org.jetbrains.kotlin.android",
    "kotlin.jvm": "org.jetbrains.kotlin.jvm",
    "kotlin.kapt": "org.jetbrains.kotlin.kapt",
    "kotlin.plugin.parcelize": "org.jetbrains.kotlin.plugin.parcelize",
    "ksp": "com.google.devtools.ksp",
    "sqldelight": "app.cash.sqldelight",
    "wire": "com.squareup.wire",
}

# Features without removal patterns still need a way to be seen as enabled.
FEATURE_DECLARATION_PATTERNS: dict[str, tuple[str, ...]] = {
    "moshi-codegen": (r"\bmoshi\(\s*codeGen\s*=\s*true",),
    "circuit-inject": (r"\bcircuit\(\s*codegen\s*=\s*true",),
}

_PLUGIN_ID = re.compile(r"""\bid\(\s*["']([\w.\-]+)["']\s*\)""")
_KOTLIN_PLUGIN = re.compile(r"""\bkotlin\(\s*["']([\w.\-]+)["']\s*\)""")
_PLUGIN_ALIAS = re.compile(r"\balias\(\s*libs\.plugins\.([\w.]+)\s*\)")


def detect_plugins(
    build_text: str,
    plugin_aliases: Mapping[str, str] | None = None,
) -> set[str]:
    """Collect plugin ids applied in a build file.

    Recognizes ``id("...")``, ``kotlin("...")`` and
    ``alias(libs.plugins.<alias>)``. Unknown aliases are kept verbatim.
    """
    aliases = dict(DEFAULT_PLUGIN_ALIASES)
    if plugin_aliases:
        aliases.update(plugin_aliases)

    plugins: set[str] = set(_PLUGIN_ID.findall(build_text))
    plugins.update(f"org.jetbrains.kotlin.{name}" for name in _KOTLIN_PLUGIN.findall(build_text))
    for alias in _PLUGIN_ALIAS.findall(build_text):
        plugins.add(aliases.get(alias, alias))
    return plugins


def _declaration_patterns(feature: ModuleFeature) -> tuple[str, ...]:
    extra = FEATURE_DECLARATION_PATTERNS.get(feature.name, ())
    return tuple(sorted(feature.removal_patterns or ())) + extra


def detect_features(
    build_text: str,
    features: Mapping[str, ModuleFeature],
) -> set[str]:
    """Names of catalog features declared in the build file."""
    enabled: set[str] = set()
    for name, feature in features.items():
        if any(re.search(pattern, build_text) for pattern in _declaration_patterns(feature)):
            enabled.add(name)
    return enabled


def compute_topography(
    *,
    name: str,
    gradle_path: str,
    build_text: str,
    features: Mapping[str, ModuleFeature],
    plugin_aliases: Mapping[str, str] | None = None,
) -> ModuleTopography:
    """Compute the topography of one module from its build file text."""
    return ModuleTopography(
        name=name,
        gradle_path=gradle_path,
        features=frozenset(detect_features(build_text, features)),
        plugins=frozenset(detect_plugins(build_text, plugin_aliases)),
    )


__all__ = [
    "DEFAULT_PLUGIN_ALIASES",
    "FEATURE_DECLARATION_PATTERNS",
    "compute_topography",
    "detect_features",
    "detect_plugins",
]
