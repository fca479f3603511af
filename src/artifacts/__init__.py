"""Artifact generation entry points."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import ModScoreConfig


def generate_all_artifacts(
    *,
    root: Path,
    out_dir: Path | None = None,
    config: ModScoreConfig | None = None,
    auto_fix: bool | None = None,
    fail_on_unused: bool | None = None,
    features_config: Path | None = None,
) -> dict[str, object]:
    """Generate artifacts via lazy import to avoid package import cycles."""
    from artifacts.write import generate_all_artifacts as _generate_all_artifacts

    return _generate_all_artifacts(
        root=root,
        out_dir=out_dir,
        config=config,
        auto_fix=auto_fix,
        fail_on_unused=fail_on_unused,
        features_config=features_config,
    )


__all__ = ["generate_all_artifacts"]
