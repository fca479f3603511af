from __future__ import annotations

import logging

import pytest

from stats.language_stats import LanguageStats
from stats.loc import JVM_SYNTAX, XML_SYNTAX, classify_lines


def test_brace_dialect_counts() -> None:
    lines = ["", "// c", "int x = 1;", "/* open", "still comment", "*/", "/* closed */"]

    stats = classify_lines(lines, JVM_SYNTAX)

    assert stats == LanguageStats(files=1, blank=1, comment=5, code=1)


def test_code_after_closed_block_comment_counts_as_comment() -> None:
    stats = classify_lines(["/* a */ val x = 1", "val y = 2"], JVM_SYNTAX)

    assert stats.comment == 1
    assert stats.code == 1


def test_close_token_overlapping_open_token_closes_comment() -> None:
    assert classify_lines(["/*/", "val x = 1"], JVM_SYNTAX) == LanguageStats(
        files=1, comment=1, code=1
    )
    assert classify_lines(["<!--->", "<View />"], XML_SYNTAX) == LanguageStats(
        files=1, comment=1, code=1
    )


def test_blank_lines_inside_block_comment_are_comments() -> None:
    stats = classify_lines(["/**", "", " * doc", " */", "fun f() = 1"], JVM_SYNTAX)

    assert stats == LanguageStats(files=1, blank=0, comment=4, code=1)


def test_indented_comment_markers_are_recognized() -> None:
    stats = classify_lines(["    // indented", "\t/* tab", "\t*/", "  call()"], JVM_SYNTAX)

    assert stats == LanguageStats(files=1, blank=0, comment=3, code=1)


def test_markup_dialect_counts() -> None:
    lines = [
        '<?xml version="1.0"?>',
        "<!-- single -->",
        "<!--",
        "  multi",
        "-->",
        "",
        "<root/>",
        "// not a comment in markup",
    ]

    stats = classify_lines(lines, XML_SYNTAX)

    assert stats == LanguageStats(files=1, blank=1, comment=4, code=3)


def test_empty_file_counts_one_file() -> None:
    assert classify_lines([], JVM_SYNTAX) == LanguageStats(files=1)


def test_debug_trace_emitted_when_enabled(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="modscore.loc"):
        classify_lines(["", "// c", "x"], JVM_SYNTAX)

    messages = [record.getMessage() for record in caplog.records]
    assert "blnk|" in messages
    assert "comt|// c" in messages
    assert "code|x" in messages
