"""Utility functions for artifact generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

if TYPE_CHECKING:
    from pathlib import Path


def _to_dict(obj: object) -> object:
    """Convert object to a JSON-ready structure using field aliases."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump(by_alias=True, mode="json")
    if isinstance(obj, (list, tuple)):
        return [_to_dict(item) for item in obj]
    return obj


def _write_json(path: Path, obj: object) -> None:
    payload = _to_dict(obj)
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(payload, option=opts))


def _get_output_dir_name(out_dir: Path, root: Path) -> str:
    """Get the output directory name for filtering."""
    try:
        if out_dir.is_relative_to(root):
            rel = out_dir.relative_to(root)
            if rel.parts:
                return rel.parts[0]
            return ""
    except ValueError:
        # Non-comparable paths mean out_dir is external; avoid filtering.
        return ""
    return ""
