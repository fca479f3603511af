"""Determinism verification for modscore artifacts.

Artifacts are regenerated into a temporary directory and compared with the
existing ones. JSON artifacts are compared by value, so key order and
indentation do not count as drift. Rewritten build files are left out: they
only exist when a run reports without auto-fixing, so their presence depends
on how the artifacts were produced rather than on the project.
"""

from __future__ import annotations

import filecmp
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

import orjson

from artifacts.write import generate_all_artifacts
from contract.artifacts import MODIFIED_BUILD_FILE


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    mismatches: tuple[str, ...] = field(default_factory=tuple)
    missing: tuple[str, ...] = field(default_factory=tuple)
    extra: tuple[str, ...] = field(default_factory=tuple)


def _artifact_files(root: Path) -> set[Path]:
    return {
        path.relative_to(root)
        for path in root.rglob("*")
        if path.is_file() and path.name != MODIFIED_BUILD_FILE
    }


def _same_content(left: Path, right: Path) -> bool:
    if left.suffix != ".json":
        return filecmp.cmp(left, right, shallow=False)
    try:
        return orjson.loads(left.read_bytes()) == orjson.loads(right.read_bytes())
    except orjson.JSONDecodeError:
        return filecmp.cmp(left, right, shallow=False)


def verify_determinism(*, root: Path, artifacts_dir: Path) -> DeterminismResult:
    """Check that regenerating a project's artifacts reproduces ``artifacts_dir``.

    Regeneration runs in report-only mode, so no build file is rewritten and
    unused features never fail the run.

    Raises:
        FileNotFoundError: If artifacts_dir does not exist.
        NotADirectoryError: If artifacts_dir is not a directory.
    """
    if not artifacts_dir.exists():
        msg = f"Artifacts directory does not exist: {artifacts_dir}"
        raise FileNotFoundError(msg)
    if not artifacts_dir.is_dir():
        msg = f"Artifacts path is not a directory: {artifacts_dir}"
        raise NotADirectoryError(msg)

    with tempfile.TemporaryDirectory() as temp_dir:
        regenerated_dir = Path(temp_dir)
        generate_all_artifacts(
            root=root,
            out_dir=regenerated_dir,
            auto_fix=False,
            fail_on_unused=False,
        )

        existing = _artifact_files(artifacts_dir)
        regenerated = _artifact_files(regenerated_dir)
        mismatches = [
            str(path)
            for path in sorted(existing & regenerated)
            if not _same_content(artifacts_dir / path, regenerated_dir / path)
        ]

    missing = sorted(str(path) for path in existing - regenerated)
    extra = sorted(str(path) for path in regenerated - existing)
    return DeterminismResult(
        ok=not (missing or extra or mismatches),
        mismatches=tuple(mismatches),
        missing=tuple(missing),
        extra=tuple(extra),
    )
