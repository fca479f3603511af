"""Configuration rules for modscore."""

from rules.config import (
    ConfigError,
    GraphConfig,
    ModScoreConfig,
    TopographyConfig,
    load_config,
    resolve_output_dir,
)

__all__ = [
    "ConfigError",
    "GraphConfig",
    "ModScoreConfig",
    "TopographyConfig",
    "load_config",
    "resolve_output_dir",
]
