"""
idiolect.normalize.switch_breaks -- Re-indent ``break`` inside switch cases.

Only the leading whitespace of a line that starts with ``break`` is
rewritten: to the case label's column (``match-case``) or one indent
step past it (``indent``).
"""

from __future__ import annotations

from typing import List, Optional

from idiolect.extraction.parser import parse_clean, walk
from idiolect.normalize.replacements import (
    TextReplacement,
    apply_replacements,
    indent_for_column,
    visual_width,
)

CASE_TYPES = frozenset({"switch_case", "switch_default"})


def normalize_switch_breaks(
    source: str,
    value: Optional[str],
    *,
    indent_kind: str = "space",
    indent_width: int = 2,
    reference: Optional[str] = None,
    language: str = "javascript",
) -> str:
    """Apply the switch break indentation rule (``match-case``/``indent``)."""
    if value not in ("match-case", "indent"):
        return source
    parsed = parse_clean(source, language)
    if parsed is None:
        return source

    step = max(1, indent_width)
    replacements: List[TextReplacement] = []
    for node, _ in walk(parsed.root):
        if node.type not in CASE_TYPES:
            continue
        case_row = parsed.row(node)
        case_prefix = parsed.line(case_row)[: parsed.column(node)]
        if case_prefix.strip():
            continue
        desired = visual_width(case_prefix, indent_width)
        if value == "indent":
            desired += step
        target = indent_for_column(desired, indent_kind, indent_width)

        for statement in node.children_by_field_name("body"):
            if statement.type != "break_statement":
                continue
            row = parsed.row(statement)
            if row == case_row:
                continue
            current = parsed.line(row)[: parsed.column(statement)]
            if current.strip() or current == target:
                continue
            start = parsed.line_start(row)
            replacements.append(TextReplacement(start, start + len(current), target))

    return apply_replacements(source, replacements)
