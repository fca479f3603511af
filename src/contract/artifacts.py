"""Artifact contract definitions.

Aggregate artifacts live at the top of the output directory. Per-module
artifacts live under ``modules/<module dir>/``, where the module dir is the
module path with ``:`` separators turned into path separators.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from utils import project_path_to_relative_dir

if TYPE_CHECKING:
    from pathlib import Path

# Artifact filename constants (stable contract identifiers).
MODULE_SCORES_JSON = "moduleScores.json"
MODULES_DIR = "modules"
LOC_JSON = "loc.json"
TOPOGRAPHY_JSON = "topography.json"
MODULE_STATS_JSON = "moduleStats.json"
FEATURES_TO_REMOVE_JSON = "featuresToRemove.json"
MODIFIED_BUILD_FILE = "modified-build.gradle.kts"

ArtifactScope = Literal["aggregate", "module"]


@dataclass(frozen=True)
class ArtifactSpec:
    """Specification for a contract artifact."""

    filename: str
    scope: ArtifactScope
    required_fields_note: str


def module_artifacts_dir(out_dir: Path, module_path: str) -> Path:
    """Directory holding the per-module artifacts of ``module_path``.

    Examples:
        >>> from pathlib import PurePosixPath
        >>> module_artifacts_dir(PurePosixPath(".modscore"), ":libraries:foundation")
        PurePosixPath('.modscore/modules/libraries/foundation')
    """
    return out_dir / MODULES_DIR / project_path_to_relative_dir(module_path)


ARTIFACT_SPECS: dict[str, ArtifactSpec] = {
    "module_scores": ArtifactSpec(
        filename=MODULE_SCORES_JSON,
        scope="aggregate",
        required_fields_note="AggregateModuleScore: scores sorted by score, descending.",
    ),
    "loc": ArtifactSpec(
        filename=LOC_JSON,
        scope="module",
        required_fields_note="LocData fields srcs and generatedSrcs.",
    ),
    "topography": ArtifactSpec(
        filename=TOPOGRAPHY_JSON,
        scope="module",
        required_fields_note="ModuleTopography fields name, gradlePath, features, plugins.",
    ),
    "module_stats": ArtifactSpec(
        filename=MODULE_STATS_JSON,
        scope="module",
        required_fields_note="ModuleStats fields modulePath, source, generated, tags, deps.",
    ),
    "features_to_remove": ArtifactSpec(
        filename=FEATURES_TO_REMOVE_JSON,
        scope="module",
        required_fields_note="List of ModuleFeature records.",
    ),
}
