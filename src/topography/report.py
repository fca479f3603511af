"""Validation outcome of one module's declared features."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from logs import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from topography.models import ModuleFeature
    from topography.rewrite import RewriteResult

LOGGER = get_logger("topography")

NOT_ALL_FIXED_MESSAGE = "Not all issues could be fixed automatically"


class TopographyValidationError(Exception):
    """Raised when unused features are found and the run should fail."""


@dataclass(frozen=True)
class ValidationReport:
    module_path: str
    features_to_remove: tuple[ModuleFeature, ...]
    rewrite: RewriteResult
    auto_fix: bool
    features_to_remove_file: Path | None = None

    @property
    def ok(self) -> bool:
        return not self.features_to_remove

    @property
    def all_auto_fixed(self) -> bool:
        return self.rewrite.all_auto_fixed

    def render_message(self) -> str:
        lines = [
            f"{self.module_path}: Validation failed! The following features appear "
            "to be unused and can be removed.",
            "",
        ]
        for index, feature in enumerate(self.features_to_remove):
            if index:
                lines.append("")
            lines.append(f"- {feature.name}: {feature.explanation}")
            lines.append(f"  - Advice: {feature.advice}")
        if self.features_to_remove_file is not None:
            lines.append("")
            lines.append(f"Full list written to {self.features_to_remove_file.resolve()}")
        return "\n".join(lines)


def enforce(reports: Sequence[ValidationReport], *, fail_on_unused: bool) -> None:
    """Apply the validation policy to every module report.

    Raises:
        TopographyValidationError: If ``fail_on_unused`` is set and any module
            still has unused features that were not all auto-fixed.
    """
    failures: list[str] = []
    for report in reports:
        if report.ok:
            continue
        message = report.render_message()
        if report.auto_fix and report.all_auto_fixed:
            LOGGER.info("%s\n%s: All issues auto-fixed", message, report.module_path)
            continue
        if report.auto_fix:
            unfixable = ", ".join(report.rewrite.unfixable)
            message = f"{message}\n{NOT_ALL_FIXED_MESSAGE}: {unfixable}"
        if fail_on_unused:
            failures.append(message)
        else:
            LOGGER.warning("%s", message)

    if failures:
        raise TopographyValidationError("\n\n".join(failures))


__all__ = [
    "NOT_ALL_FIXED_MESSAGE",
    "TopographyValidationError",
    "ValidationReport",
    "enforce",
]
