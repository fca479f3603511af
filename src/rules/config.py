from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

from stats.module_stats import MAIN_SRC_DIRS

CONFIG_FILENAME = "modscore.toml"
INCLUDE_GENERATED_ENV = "MODULE_SCORE_INCLUDE_GENERATED"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class GraphConfig(BaseModel):
    """Cycle tolerance for the module dependency graph."""

    model_config = ConfigDict(extra="forbid")

    always_allowed_marker: str = Field(
        default="model",
        description="Cycles touching a module whose path contains this are always fatal",
    )
    test_fixtures_marker: str = Field(
        default="test-fixtures",
        description="Cycles with exactly one test-fixtures endpoint are dropped",
    )


class TopographyConfig(BaseModel):
    """Feature validation settings."""

    model_config = ConfigDict(extra="forbid")

    features_config: str | None = Field(
        default=None,
        description="Path to a JSON feature catalog, relative to the root",
    )
    auto_fix: bool = Field(
        default=False,
        description="Rewrite build files in place to remove unused features",
    )
    fail_on_unused: bool = Field(
        default=True,
        description="Fail the run when unused features remain",
    )
    plugin_aliases: dict[str, str] = Field(
        default_factory=dict,
        description="Additional version catalog plugin aliases: alias -> plugin id",
    )


class ModScoreConfig(BaseModel):
    """Configuration for modscore artifact generation."""

    model_config = ConfigDict(extra="forbid")

    output_dir: str = Field(
        default=".modscore",
        description="Output directory for generated artifacts",
    )
    build_file_name: str = Field(
        default="build.gradle.kts",
        description="File name marking a module directory",
    )
    main_src_dirs: list[str] = Field(
        default_factory=lambda: list(MAIN_SRC_DIRS),
        description="Main source set candidates under src/, first existing wins",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for module directories to skip",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    include_generated: bool = Field(
        default=True,
        description=f"Count generated sources (overridden by ${INCLUDE_GENERATED_ENV})",
    )
    ignore: list[str] = Field(
        default_factory=list,
        description="Module paths excluded from stats and scoring",
    )
    platform_project_path: str | None = Field(
        default=None,
        description="Module path of the platform project, never scored",
    )
    variant_modules: list[str] = Field(
        default_factory=list,
        description="Library module paths built with multiple variants",
    )
    max_workers: int | None = Field(
        default=None,
        description="Worker threads for per-module collection (default: CPU count)",
    )
    graph: GraphConfig = Field(default_factory=GraphConfig)
    topography: TopographyConfig = Field(default_factory=TopographyConfig)

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            msg = "max_workers must be at least 1"
            raise ValueError(msg)
        return v

    @field_validator("main_src_dirs")
    @classmethod
    def validate_main_src_dirs(cls, v: list[str]) -> list[str]:
        if not v:
            msg = "main_src_dirs must name at least one source set"
            raise ValueError(msg)
        return v

    def is_ignored(self, module_path: str) -> bool:
        return module_path in self.ignore or module_path == self.platform_project_path


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    """Resolve a config-provided output_dir safely within the project root.

    The config output_dir must be a non-empty relative path that remains
    within the project root after resolution. Absolute paths and paths
    that escape the root are rejected.
    """
    if not output_dir:
        msg = "output_dir must be a non-empty relative path"
        raise ConfigError(msg)

    if output_dir.startswith("~"):
        msg = "output_dir must be a relative path within the project root"
        raise ConfigError(msg)

    output_path = Path(output_dir)
    if output_path.is_absolute():
        msg = "output_dir must be a relative path within the project root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_output = (resolved_root / output_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output_dir '{output_dir}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_output.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"output_dir '{output_dir}' escapes the project root"
        raise ConfigError(msg) from exc

    return resolved_output


def _env_include_generated() -> bool | None:
    raw = os.environ.get(INCLUDE_GENERATED_ENV)
    if raw is None or not raw.strip():
        return None
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    msg = f"Invalid boolean for {INCLUDE_GENERATED_ENV}: {raw!r}"
    raise ConfigError(msg)


def load_config(root: Path) -> ModScoreConfig:
    """Load configuration from modscore.toml if it exists.

    ``MODULE_SCORE_INCLUDE_GENERATED`` takes precedence over the file's
    ``include_generated``.
    """
    config_path = Path(root) / CONFIG_FILENAME

    data: dict[str, Any] = {}
    if config_path.is_file():
        try:
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {config_path}: {e}"
            raise ConfigError(msg) from e

    include_generated = _env_include_generated()
    if include_generated is not None:
        data = {**data, "include_generated": include_generated}

    try:
        return ModScoreConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
