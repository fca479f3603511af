from __future__ import annotations

from pathlib import Path

import pytest

from stats.language_stats import LanguageStats
from stats.loc import count_loc, process_dir, process_file

_FIXTURE_ROOT = Path(__file__).parent / "fixtures" / "mini_project"


def test_process_dir_groups_by_language() -> None:
    stats = process_dir(_FIXTURE_ROOT / "libraries" / "foundation" / "src" / "main")

    assert stats == {
        "Kotlin": LanguageStats(files=1, code=4, comment=3, blank=1),
        "Java": LanguageStats(files=1, code=6, comment=1, blank=1),
    }


def test_process_dir_counts_markup() -> None:
    stats = process_dir(_FIXTURE_ROOT / "app" / "src" / "main")

    assert stats["Kotlin"] == LanguageStats(files=1, code=6, comment=2, blank=2)
    assert stats["XML"] == LanguageStats(files=1, code=4, comment=1, blank=0)


def test_process_dir_missing_root_is_empty(tmp_path: Path) -> None:
    assert process_dir(tmp_path / "missing") == {}


def test_unrecognized_extensions_are_ignored(tmp_path: Path) -> None:
    (tmp_path / "notes.md").write_text("# notes\n", encoding="utf-8")
    (tmp_path / "Main.kt").write_text("fun main() {}\n", encoding="utf-8")

    assert process_dir(tmp_path) == {"Kotlin": LanguageStats(files=1, code=1)}
    assert process_file(tmp_path / "notes.md") is None


def test_invalid_utf8_is_replaced(tmp_path: Path) -> None:
    (tmp_path / "Bad.java").write_bytes(b"class Bad {}\n// \xff\xfe\n")

    assert process_file(tmp_path / "Bad.java") == LanguageStats(files=1, code=1, comment=1)


def test_unreadable_file_is_skipped(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    (tmp_path / "Good.kt").write_text("val a = 1\n", encoding="utf-8")
    (tmp_path / "Locked.kt").write_text("val b = 2\n", encoding="utf-8")

    original_open = Path.open

    def fake_open(self: Path, *args: object, **kwargs: object) -> object:
        if self.name == "Locked.kt":
            msg = "permission denied"
            raise PermissionError(msg)
        return original_open(self, *args, **kwargs)

    monkeypatch.setattr(Path, "open", fake_open)

    stats = process_dir(tmp_path)

    assert stats == {"Kotlin": LanguageStats(files=1, code=1)}
    assert "Skipping unreadable file" in caplog.text


def test_count_loc_keeps_generated_separate(tmp_path: Path) -> None:
    srcs = tmp_path / "src" / "main"
    generated = tmp_path / "build" / "generated"
    srcs.mkdir(parents=True)
    generated.mkdir(parents=True)
    (srcs / "A.kt").write_text("val a = 1\n", encoding="utf-8")
    (generated / "B.java").write_text("class B {}\n\n", encoding="utf-8")

    loc = count_loc(srcs, generated)

    assert loc.srcs == {"Kotlin": LanguageStats(files=1, code=1)}
    assert loc.generated_srcs == {"Java": LanguageStats(files=1, code=1, blank=1)}
    assert set(loc.model_dump(by_alias=True)) == {"srcs", "generatedSrcs"}
    assert count_loc(None).srcs == {}
