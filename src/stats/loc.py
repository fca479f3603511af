"""Lines-of-code counting for Kotlin, Java and XML sources."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from logs import get_logger
from scan.files import walk_each_file
from stats.language_stats import JAVA, KOTLIN, XML, LanguageStats, merge_with

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

LOGGER = get_logger("loc")


@dataclass(frozen=True)
class CommentSyntax:
    """Comment tokens of one source dialect."""

    line: str | None
    block_open: str
    block_close: str


JVM_SYNTAX = CommentSyntax(line="//", block_open="/*", block_close="*/")
XML_SYNTAX = CommentSyntax(line=None, block_open="<!--", block_close="-->")

EXTENSION_TO_LANGUAGE: dict[str, str] = {"kt": KOTLIN, "java": JAVA, "xml": XML}
EXTENSION_TO_SYNTAX: dict[str, CommentSyntax] = {
    "kt": JVM_SYNTAX,
    "java": JVM_SYNTAX,
    "xml": XML_SYNTAX,
}


def _trace(kind: str, line: str) -> None:
    if LOGGER.isEnabledFor(logging.DEBUG):
        LOGGER.debug("%s|%s", kind, line.rstrip("\n"))


def classify_lines(lines: Iterable[str], syntax: CommentSyntax) -> LanguageStats:
    """Count code, comment and blank lines of a single file.

    A line that opens a block comment is counted as a comment as a whole,
    even when code follows the close token on the same line.
    """
    blank = 0
    comment = 0
    code = 0
    in_block_comment = False
    for line in lines:
        if not in_block_comment and not line.strip():
            _trace("blnk", line)
            blank += 1
            continue

        trimmed = line.lstrip()
        if in_block_comment:
            _trace("mcmt", line)
            comment += 1
            if trimmed.startswith(syntax.block_close):
                in_block_comment = False
            continue

        if syntax.line is not None and trimmed.startswith(syntax.line):
            _trace("comt", line)
            comment += 1
            continue

        if trimmed.startswith(syntax.block_open):
            _trace("comt", line)
            comment += 1
            # The close token is searched over the whole line, so "/*/" closes.
            if syntax.block_close not in trimmed:
                in_block_comment = True
            continue

        _trace("code", line)
        code += 1

    # Always one per file, aggregated later.
    return LanguageStats(files=1, code=code, comment=comment, blank=blank)


def process_file(path: Path) -> LanguageStats | None:
    """Classify one source file, or return None if it cannot be read."""
    syntax = EXTENSION_TO_SYNTAX.get(path.suffix.removeprefix("."))
    if syntax is None:
        return None
    LOGGER.debug("Logging LoC of %s", path)
    try:
        with path.open(encoding="utf-8", errors="replace") as handle:
            return classify_lines(handle, syntax)
    except OSError as exc:
        LOGGER.warning("Skipping unreadable file %s: %s", path, exc)
        return None


def process_dir(directory: Path) -> dict[str, LanguageStats]:
    """Count every recognized source file below ``directory`` by language."""
    stats: dict[str, LanguageStats] = {}
    for path in walk_each_file(directory):
        extension = path.suffix.removeprefix(".")
        language = EXTENSION_TO_LANGUAGE.get(extension)
        if language is None:
            continue
        file_stats = process_file(path)
        if file_stats is None:
            continue
        stats = merge_with(stats, {language: file_stats})
    return stats


class LocData(BaseModel):
    """Hand-written and generated line counts of one module."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    srcs: dict[str, LanguageStats] = Field(default_factory=dict)
    generated_srcs: dict[str, LanguageStats] = Field(
        default_factory=dict, alias="generatedSrcs"
    )


def count_loc(srcs_dir: Path | None, generated_srcs_dir: Path | None = None) -> LocData:
    """Count sources and generated sources separately."""
    srcs = process_dir(srcs_dir) if srcs_dir is not None else {}
    generated = (
        process_dir(generated_srcs_dir) if generated_srcs_dir is not None else {}
    )
    return LocData(srcs=srcs, generated_srcs=generated)


__all__ = [
    "EXTENSION_TO_LANGUAGE",
    "EXTENSION_TO_SYNTAX",
    "JVM_SYNTAX",
    "XML_SYNTAX",
    "CommentSyntax",
    "LocData",
    "classify_lines",
    "count_loc",
    "process_dir",
    "process_file",
]
