"""Stable artifact contract surface for modscore.

Treat these exports as the authoritative description of what
``modscore generate`` writes.
"""

from contract.artifacts import (
    ARTIFACT_SPECS,
    FEATURES_TO_REMOVE_JSON,
    LOC_JSON,
    MODIFIED_BUILD_FILE,
    MODULE_SCORES_JSON,
    MODULE_STATS_JSON,
    MODULES_DIR,
    TOPOGRAPHY_JSON,
    ArtifactSpec,
    module_artifacts_dir,
)


def __getattr__(name: str) -> object:
    if name in {"ValidationMessage", "ValidationResult", "validate_artifacts"}:
        from contract.validation import (
            ValidationMessage,
            ValidationResult,
            validate_artifacts,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "validate_artifacts": validate_artifacts,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "ARTIFACT_SPECS",
    "FEATURES_TO_REMOVE_JSON",
    "LOC_JSON",
    "MODIFIED_BUILD_FILE",
    "MODULES_DIR",
    "MODULE_SCORES_JSON",
    "MODULE_STATS_JSON",
    "TOPOGRAPHY_JSON",
    "ArtifactSpec",
    "ValidationMessage",
    "ValidationResult",
    "module_artifacts_dir",
    "validate_artifacts",
]
