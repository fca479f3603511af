"""Shared utilities for modscore."""

from __future__ import annotations

from pathlib import Path


def _kebab_to_lower_camel(segment: str) -> str:
    words = [word for word in segment.split("-") if word]
    if not words:
        return ""
    head, *tail = words
    return head.lower() + "".join(word[:1].upper() + word[1:].lower() for word in tail)


def convert_project_path_to_accessor(project_path: str) -> str:
    """Convert a module path to its typesafe project accessor.

    Examples:
        >>> convert_project_path_to_accessor(":libraries:foundation")
        'libraries.foundation'
        >>> convert_project_path_to_accessor(":services:slack-kit-integrations")
        'services.slackKitIntegrations'
    """
    stripped = project_path.removeprefix(":")
    return ".".join(_kebab_to_lower_camel(segment) for segment in stripped.split(":"))


def relative_dir_to_project_path(relative_dir: str | Path) -> str:
    """Convert a directory relative to the build root to a module path.

    Examples:
        >>> relative_dir_to_project_path("libraries/foundation")
        ':libraries:foundation'
        >>> relative_dir_to_project_path(Path("app"))
        ':app'
    """
    path_str = (
        relative_dir.as_posix() if isinstance(relative_dir, Path) else str(relative_dir)
    )
    parts = [part for part in path_str.replace("\\", "/").split("/") if part]
    return ":" + ":".join(parts)


def project_path_to_relative_dir(project_path: str) -> str:
    """Inverse of :func:`relative_dir_to_project_path`.

    Examples:
        >>> project_path_to_relative_dir(":libraries:foundation")
        'libraries/foundation'
    """
    return "/".join(part for part in project_path.split(":") if part)


__all__ = [
    "convert_project_path_to_accessor",
    "project_path_to_relative_dir",
    "relative_dir_to_project_path",
]
