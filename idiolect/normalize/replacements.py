"""
idiolect.normalize.replacements -- Safe text-range substitution.

Normalizers never edit strings in place: they collect
``TextReplacement`` objects against one source string and hand them to
``apply_replacements``, which applies them right-to-left so every
offset still refers to the input text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List

log = logging.getLogger(__name__)

# Upper bound on re-runs while waiting for a normalizer to settle.
MAX_PASSES = 8


@dataclass(frozen=True)
class TextReplacement:
    """Replace ``source[start:end]`` with ``text`` (character offsets)."""

    start: int
    end: int
    text: str


def apply_replacements(source: str, replacements: Iterable[TextReplacement]) -> str:
    """Apply replacements in descending start order against ``source``.

    Invalid ranges (negative start, end before start) and no-op entries
    are dropped.  When two ranges overlap, the one applied first (the
    later one in the text) wins and the other is dropped.
    """
    valid = []
    seen = set()
    for rep in replacements:
        if rep.start < 0 or rep.end < rep.start or rep.end > len(source):
            log.debug("Dropping invalid replacement %r", rep)
            continue
        if rep.start == rep.end and not rep.text:
            continue
        if source[rep.start:rep.end] == rep.text:
            continue
        key = (rep.start, rep.end, rep.text)
        if key in seen:
            continue
        seen.add(key)
        valid.append(rep)

    if not valid:
        return source

    valid.sort(key=lambda r: (r.start, r.end), reverse=True)
    parts: List[str] = []
    cursor = len(source)
    floor = len(source) + 1
    for rep in valid:
        if rep.end > floor or (rep.end == floor and rep.start == floor):
            log.debug("Dropping overlapping replacement %r", rep)
            continue
        parts.append(source[rep.end:cursor])
        parts.append(rep.text)
        cursor = rep.start
        floor = rep.start
    parts.append(source[:cursor])
    return "".join(reversed(parts))


# ---------------------------------------------------------------------------
# Indentation helpers
# ---------------------------------------------------------------------------


def indent_for_column(column: int, kind: str = "space", width: int = 2) -> str:
    """Render leading whitespace reaching visual ``column``.

    Spaces render as ``column`` spaces; tabs as ``column // width`` tabs
    followed by ``column % width`` spaces.
    """
    column = max(0, column)
    if kind != "tab":
        return " " * column
    width = max(1, int(width or 2))
    return "\t" * (column // width) + " " * (column % width)


def visual_width(text: str, width: int = 2) -> int:
    """Visual width of leading whitespace, counting a tab as ``width``."""
    width = max(1, int(width or 2))
    return sum(width if ch == "\t" else 1 for ch in text)


def dedent_indent(indent: str, count: int) -> str:
    """Remove up to ``count`` leading space/tab characters."""
    if count <= 0 or not indent:
        return indent
    remove = 0
    while remove < len(indent) and remove < count and indent[remove] in " \t":
        remove += 1
    return indent[remove:]


def until_stable(step: Callable[[str], str], source: str) -> str:
    """Re-run ``step`` until its output stops changing.

    Nested constructs whose edits overlap are resolved over successive
    passes, which keeps each normalizer idempotent.
    """
    current = source
    for _ in range(MAX_PASSES):
        following = step(current)
        if following == current:
            return current
        current = following
    log.debug("Normalizer did not settle after %d passes", MAX_PASSES)
    return current
