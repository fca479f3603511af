"""Validation helpers for generated artifacts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import orjson
from pydantic import TypeAdapter, ValidationError

from contract.artifacts import (
    ARTIFACT_SPECS,
    MODULE_SCORES_JSON,
    MODULE_STATS_JSON,
    MODULES_DIR,
    module_artifacts_dir,
)
from contract.models import (
    AggregateModuleScore,
    LocData,
    ModuleFeature,
    ModuleStats,
    ModuleTopography,
)

if TYPE_CHECKING:
    from pathlib import Path

_MODULE_ARTIFACT_VALIDATORS: dict[str, TypeAdapter[Any]] = {
    "loc": TypeAdapter(LocData),
    "topography": TypeAdapter(ModuleTopography),
    "module_stats": TypeAdapter(ModuleStats),
    "features_to_remove": TypeAdapter(list[ModuleFeature]),
}


@dataclass(frozen=True)
class ValidationMessage:
    artifact: str
    path: Path
    message: str

    def location(self) -> str:
        return str(self.path)

    def to_dict(self) -> dict[str, object]:
        return {
            "artifact": self.artifact,
            "path": str(self.path),
            "message": self.message,
        }


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def error(self, artifact: str, path: Path, message: str) -> None:
        self.errors.append(ValidationMessage(artifact=artifact, path=path, message=message))

    def warning(self, artifact: str, path: Path, message: str) -> None:
        self.warnings.append(
            ValidationMessage(artifact=artifact, path=path, message=message)
        )


def validate_artifacts(artifacts_dir: Path) -> ValidationResult:
    result = ValidationResult()

    if not artifacts_dir.exists():
        result.error("artifacts_dir", artifacts_dir, "Artifacts directory does not exist.")
        return result

    if not artifacts_dir.is_dir():
        result.error("artifacts_dir", artifacts_dir, "Artifacts path is not a directory.")
        return result

    aggregate = _validate_module_scores(artifacts_dir / MODULE_SCORES_JSON, result)

    modules_root = artifacts_dir / MODULES_DIR
    stats_files = sorted(modules_root.rglob(MODULE_STATS_JSON)) if modules_root.is_dir() else []
    validated_paths: set[str] = set()
    for stats_path in stats_files:
        module_stats = _validate_module_dir(stats_path.parent, result)
        if module_stats is not None:
            validated_paths.add(module_stats.module_path)

    if aggregate is not None:
        for module_score in aggregate.scores:
            if module_score.module_name in validated_paths:
                continue
            expected = module_artifacts_dir(artifacts_dir, module_score.module_name)
            result.error(
                "module_stats",
                expected / MODULE_STATS_JSON,
                f"Scored module {module_score.module_name} has no module stats.",
            )

    return result


def _load_json(artifact_name: str, path: Path, result: ValidationResult) -> Any | None:
    if not path.exists():
        result.error(artifact_name, path, "Required artifact file is missing.")
        return None
    try:
        return orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        result.error(artifact_name, path, f"Invalid JSON: {exc}.")
        return None


def _validate_module_scores(
    path: Path, result: ValidationResult
) -> AggregateModuleScore | None:
    data = _load_json("module_scores", path, result)
    if data is None:
        return None

    try:
        aggregate = AggregateModuleScore.model_validate(data)
    except ValidationError as exc:
        result.error("module_scores", path, f"Schema validation failed: {exc}.")
        return None

    scores = [module_score.score for module_score in aggregate.scores]
    if scores != sorted(scores, reverse=True):
        result.error("module_scores", path, "Scores are not sorted in descending order.")

    for module_score in aggregate.scores:
        if module_score.module_name != module_score.weights.module_path:
            result.error(
                "module_scores",
                path,
                f"Module name {module_score.module_name} does not match weights "
                f"module path {module_score.weights.module_path}.",
            )
        if module_score.score != module_score.weights.score():
            result.warning(
                "module_scores",
                path,
                f"Score of {module_score.module_name} does not match its weights.",
            )

    return aggregate


def _validate_module_dir(module_dir: Path, result: ValidationResult) -> ModuleStats | None:
    module_stats: ModuleStats | None = None
    for artifact_name, spec in ARTIFACT_SPECS.items():
        if spec.scope != "module":
            continue
        path = module_dir / spec.filename
        data = _load_json(artifact_name, path, result)
        if data is None:
            continue
        try:
            validated = _MODULE_ARTIFACT_VALIDATORS[artifact_name].validate_python(data)
        except ValidationError as exc:
            result.error(artifact_name, path, f"Schema validation failed: {exc}.")
            continue
        if isinstance(validated, ModuleStats):
            module_stats = validated
    return module_stats


__all__ = [
    "ValidationMessage",
    "ValidationResult",
    "validate_artifacts",
]
