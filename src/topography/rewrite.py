"""Remove unused feature declarations from build file text.

Usage::

    code = "foundry { features { compose() } }"
    code = re.sub(r"\\bcompose\\(\\)", "", code)  # remove compose()
    code = remove_empty_braces(code)  # recursively remove empty blocks
    assert code == ""
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from topography.models import ModuleFeature

EMPTY_DSL_BLOCK = re.compile(r"(\w*)\s*\{\s*\}")


def remove_empty_braces(text: str) -> str:
    """Delete empty ``name { }`` blocks until none are left."""
    result = text
    while True:
        result, count = EMPTY_DSL_BLOCK.subn("", result)
        if count == 0:
            return result


@dataclass(frozen=True)
class RewriteResult:
    original: str
    text: str
    unfixable: tuple[str, ...] = field(default_factory=tuple)

    @property
    def changed(self) -> bool:
        return self.original != self.text

    @property
    def all_auto_fixed(self) -> bool:
        return not self.unfixable


def rewrite_build_file(
    text: str,
    features_to_remove: Iterable[ModuleFeature],
) -> RewriteResult:
    """Strip every removal pattern of the given features from ``text``.

    Empty blocks are collapsed afterwards whenever any feature is auto-fixable. Features without
    removal patterns are listed in ``unfixable``.
    """
    rewritten = text
    unfixable: list[str] = []
    any_fixable = False
    for feature in features_to_remove:
        if not feature.is_auto_fixable:
            unfixable.append(feature.name)
            continue
        any_fixable = True
        for pattern in feature.compiled_removal_patterns:
            rewritten = pattern.sub("", rewritten)

    # Collapse even when no pattern matched, so pre-existing empty blocks go too.
    if any_fixable:
        rewritten = remove_empty_braces(rewritten)

    return RewriteResult(
        original=text,
        text=rewritten,
        unfixable=tuple(sorted(unfixable)),
    )


__all__ = ["EMPTY_DSL_BLOCK", "RewriteResult", "remove_empty_braces", "rewrite_build_file"]
