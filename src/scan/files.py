"""File and module scanning utilities for modscore."""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

from utils import relative_dir_to_project_path

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

# Directories that never hold modules of their own.
_SKIPPED_DIR_NAMES = frozenset({"build", "src", "node_modules", "__pycache__"})


@dataclass(frozen=True)
class ModuleLocation:
    """A discovered module directory and its canonical module path."""

    path: str
    name: str
    project_dir: Path
    build_file: Path


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        root_resolved = root.resolve()
        path_resolved = path.resolve()
    except OSError:
        return False

    try:
        path_resolved.relative_to(root_resolved)
    except ValueError:
        return False

    return True


def _iter_gitignore_files(root: Path) -> list[Path]:
    """Return sorted list of .gitignore files under root (including root)."""
    gitignore_paths = [root / ".gitignore"]
    gitignore_paths.extend(root.rglob(".gitignore"))
    unique_paths = {
        path for path in gitignore_paths if path.is_file() and not path.is_symlink()
    }
    return sorted(unique_paths, key=lambda p: p.relative_to(root).as_posix())


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> Callable[[str], bool] | None:
    if not nested_gitignore:
        gitignore_path = root / ".gitignore"
        if gitignore_path.is_file():
            return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
        return None

    gitignore_paths = _iter_gitignore_files(root)
    if not gitignore_paths:
        return None

    matchers = [parse_gitignore(path) for path in gitignore_paths]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                continue
        return False

    return matches


def _should_descend(
    path: Path,
    root: Path,
    output_dir: str,
    gitignore_matches: Callable[[str], bool] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    """Check whether a directory may contain modules."""
    if path.is_symlink() or not path.is_dir():
        return False

    if path.name.startswith(".") or path.name in _SKIPPED_DIR_NAMES:
        return False

    if not _is_within_root(path, root):
        return False

    rel_path = path.relative_to(root)
    rel_path_str = rel_path.as_posix()

    if output_dir and rel_path.parts and rel_path.parts[0] == output_dir:
        return False

    if gitignore_matches is not None and gitignore_matches(str(path)):
        return False

    has_excluded_match = exclude_patterns and any(
        fnmatch(rel_path_str, pat) for pat in exclude_patterns
    )
    return not has_excluded_match


def find_modules(
    root: Path,
    *,
    build_file_name: str = "build.gradle.kts",
    output_dir: str = ".modscore",
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> list[ModuleLocation]:
    """Find every module below ``root``, respecting .gitignore.

    A module is any directory (other than the root itself) that holds a
    build file. Modules may nest.

    Args:
        root: Build root to search
        build_file_name: File name that marks a module directory
        output_dir: Directory name to skip (default ".modscore")
        exclude_patterns: Optional fnmatch patterns on relative directory
            paths; matching directories and everything below them are skipped
        nested_gitignore: Compose nested .gitignore files instead of only
            the root one

    Returns:
        Module locations sorted by module path.
    """
    gitignore_matches = _build_gitignore_matcher(
        root,
        nested_gitignore=nested_gitignore,
    )

    modules: list[ModuleLocation] = []
    pending = [root]
    while pending:
        directory = pending.pop()
        try:
            children = sorted(directory.iterdir())
        except OSError:
            continue
        for child in children:
            if not _should_descend(
                child, root, output_dir, gitignore_matches, exclude_patterns
            ):
                continue
            build_file = child / build_file_name
            if build_file.is_file():
                rel_dir = child.relative_to(root)
                modules.append(
                    ModuleLocation(
                        path=relative_dir_to_project_path(rel_dir),
                        name=child.name,
                        project_dir=child,
                        build_file=build_file,
                    )
                )
            pending.append(child)

    modules.sort(key=lambda module: module.path)
    return modules


def _iter_files(directory: Path) -> Iterator[Path]:
    if not directory.is_dir():
        return
    for path in directory.rglob("*"):
        if path.is_symlink() or not path.is_file():
            continue
        if not _is_within_root(path, directory):
            continue
        yield path


def walk_each_file(directory: Path) -> Iterator[Path]:
    """Yield every regular file below ``directory`` in sorted order.

    Symlinks, and files reached through symlinked directories, are skipped.
    A missing directory yields nothing.
    """
    files = list(_iter_files(directory))
    files.sort(key=lambda p: p.relative_to(directory).as_posix())

    yield from files


def has_any_file(directory: Path) -> bool:
    """Return True when ``directory`` holds at least one file, recursively."""
    return any(True for _ in _iter_files(directory))


__all__ = ["ModuleLocation", "find_modules", "has_any_file", "walk_each_file"]
