"""Per-module stats collection.

Each module yields a ``ModuleStats`` record: its line counts (hand-written and
generated), a set of build tags used for scoring, and the project accessors
it depends on.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from logs import get_logger
from stats.language_stats import LanguageStats, merge_with
from stats.loc import count_loc
from topography.detect import compute_topography

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from rules.config import ModScoreConfig
    from scan.files import ModuleLocation
    from stats.loc import LocData
    from topography.models import ModuleFeature, ModuleTopography

LOGGER = get_logger("stats")

TAG_KAPT = "kapt"
TAG_KSP = "ksp"
TAG_KOTLIN = "kotlin"
TAG_DAGGER_COMPILER = "dagger-compiler"
TAG_VIEW_BINDING = "viewbinding"
TAG_ANDROID = "android"
TAG_WIRE = "wire"
TAG_SQLDELIGHT = "sqldelight"
TAG_RESOURCES_ENABLED = "android-resources"
TAG_PARCELIZE = "android-parcelize"
TAG_VARIANTS = "android-variants"

MAIN_SRC_DIRS = ("main", "commonMain", "internal", "debug", "internalDebug")
GENERATED_SRCS_DIR = "build/generated"

PLUGIN_KOTLIN_JVM = "org.jetbrains.kotlin.jvm"
PLUGIN_KOTLIN_ANDROID = "org.jetbrains.kotlin.android"
PLUGIN_KAPT = "org.jetbrains.kotlin.kapt"
PLUGIN_KSP = "com.google.devtools.ksp"
PLUGIN_PARCELIZE = "org.jetbrains.kotlin.plugin.parcelize"
PLUGIN_WIRE = "com.squareup.wire"
PLUGIN_SQLDELIGHT = "app.cash.sqldelight"
PLUGIN_ANDROID_APPLICATION = "com.android.application"
PLUGIN_ANDROID_LIBRARY = "com.android.library"

# Plugin id -> (tag, whether the plugin generates sources)
PLUGIN_TAGS: dict[str, tuple[str, bool]] = {
    PLUGIN_KOTLIN_JVM: (TAG_KOTLIN, False),
    PLUGIN_KOTLIN_ANDROID: (TAG_KOTLIN, False),
    PLUGIN_KAPT: (TAG_KAPT, True),
    PLUGIN_KSP: (TAG_KSP, True),
    PLUGIN_PARCELIZE: (TAG_PARCELIZE, False),
    PLUGIN_WIRE: (TAG_WIRE, True),
    PLUGIN_SQLDELIGHT: (TAG_SQLDELIGHT, True),
    PLUGIN_ANDROID_APPLICATION: (TAG_ANDROID, False),
    PLUGIN_ANDROID_LIBRARY: (TAG_ANDROID, False),
}

_ANDROID_RESOURCES_ENABLED = re.compile(r"\bandroidResources\s*=\s*true\b")
_VIEW_BINDING_ENABLED = re.compile(r"\bviewBinding\s*=\s*true\b")

_PROJECTS_PREFIX = "(projects."
# testFixtures*( only feed module metadata and are not real dependencies.
_IGNORED_DEPENDENCY_CALLS = ("testFixturesApi(", "testFixturesImplementation(")


class ModuleStats(BaseModel):
    """Collected stats of one module."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    module_path: str = Field(alias="modulePath")
    source: dict[str, LanguageStats] = Field(default_factory=dict)
    generated: dict[str, LanguageStats] = Field(default_factory=dict)
    tags: frozenset[str] = Field(default_factory=frozenset)
    deps: frozenset[str] = Field(
        default_factory=frozenset,
        description="Project accessors this module depends on",
    )

    @field_serializer("tags", "deps")
    def _serialize_sorted(self, v: frozenset[str]) -> list[str]:
        return sorted(v)

    @property
    def total_source(self) -> dict[str, LanguageStats]:
        return merge_with(self.source, self.generated)


def parse_project_deps(text: str) -> list[str]:
    """Extract project accessors from ``projects.*`` dependency declarations.

    Examples:
        >>> parse_project_deps('api(projects.libraries.foundation)')
        ['libraries.foundation']
        >>> parse_project_deps('implementation(projects.app.dependencyProject)')
        ['app']
    """
    deps: set[str] = set()
    for line in text.splitlines():
        if _PROJECTS_PREFIX not in line:
            continue
        if any(call in line for call in _IGNORED_DEPENDENCY_CALLS):
            continue
        accessor = line.split(_PROJECTS_PREFIX, 1)[1]
        accessor = accessor.split(")", 1)[0]
        accessor = accessor.split(".dependencyProject", 1)[0]
        deps.add(accessor)
    return sorted(deps)


def find_main_source_dir(
    src_dir: Path, candidates: tuple[str, ...] | list[str] = MAIN_SRC_DIRS
) -> Path | None:
    """Return the first existing main source set directory under ``src_dir``."""
    for candidate in candidates:
        path = src_dir / candidate
        if path.exists():
            return path
    return None


def compute_tags(
    topography: ModuleTopography,
    build_text: str,
    *,
    variant_module: bool = False,
) -> tuple[frozenset[str], bool]:
    """Derive stats tags from a module's plugins, features and build text.

    Returns the tags and whether generated sources should be counted.
    """
    tags: set[str] = set()
    generates_sources = False
    for plugin in topography.plugins:
        tag_and_generated = PLUGIN_TAGS.get(plugin)
        if tag_and_generated is None:
            continue
        tag, generated = tag_and_generated
        tags.add(tag)
        generates_sources = generates_sources or generated

    if PLUGIN_ANDROID_LIBRARY in topography.plugins:
        if variant_module:
            tags.add(TAG_VARIANTS)
        if _ANDROID_RESOURCES_ENABLED.search(build_text):
            tags.add(TAG_RESOURCES_ENABLED)
        if _VIEW_BINDING_ENABLED.search(build_text):
            tags.add(TAG_VIEW_BINDING)
            generates_sources = True

    if TAG_DAGGER_COMPILER in topography.features:
        tags.add(TAG_DAGGER_COMPILER)

    return frozenset(tags), generates_sources


@dataclass(frozen=True)
class CollectedModule:
    """Everything computed for one module before aggregation."""

    module: ModuleLocation
    build_text: str
    topography: ModuleTopography
    loc: LocData
    stats: ModuleStats


def collect_module_stats(
    module: ModuleLocation,
    config: ModScoreConfig,
    features: Mapping[str, ModuleFeature],
) -> CollectedModule:
    """Compute topography, line counts and stats of one module.

    Only reads from the filesystem, so modules can be collected in parallel.
    An unreadable build file is treated as empty.
    """
    try:
        build_text = module.build_file.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        LOGGER.warning(
            "%s: skipping unreadable build file %s: %s", module.path, module.build_file, exc
        )
        build_text = ""
    topography = compute_topography(
        name=module.name,
        gradle_path=module.path,
        build_text=build_text,
        features=features,
        plugin_aliases=config.topography.plugin_aliases,
    )
    tags, generates_sources = compute_tags(
        topography,
        build_text,
        variant_module=module.path in config.variant_modules,
    )

    main_src_dir = find_main_source_dir(module.project_dir / "src", config.main_src_dirs)
    generated_dir = None
    if main_src_dir is not None and generates_sources and config.include_generated:
        generated_dir = module.project_dir / GENERATED_SRCS_DIR

    if main_src_dir is None:
        LOGGER.debug("%s: no main source set found", module.path)
    loc = count_loc(main_src_dir, generated_dir)

    stats = ModuleStats(
        module_path=module.path,
        source=loc.srcs,
        generated=loc.generated_srcs,
        tags=tags,
        deps=frozenset(parse_project_deps(build_text)),
    )
    return CollectedModule(
        module=module,
        build_text=build_text,
        topography=topography,
        loc=loc,
        stats=stats,
    )


__all__ = [
    "GENERATED_SRCS_DIR",
    "MAIN_SRC_DIRS",
    "PLUGIN_TAGS",
    "TAG_ANDROID",
    "TAG_DAGGER_COMPILER",
    "TAG_KAPT",
    "TAG_KOTLIN",
    "TAG_KSP",
    "TAG_PARCELIZE",
    "TAG_RESOURCES_ENABLED",
    "TAG_SQLDELIGHT",
    "TAG_VARIANTS",
    "TAG_VIEW_BINDING",
    "TAG_WIRE",
    "CollectedModule",
    "ModuleStats",
    "collect_module_stats",
    "compute_tags",
    "find_main_source_dir",
    "parse_project_deps",
]
