"""
idiolect.normalize.ternaries -- Leading-operator multiline ternaries.

With the ``leading`` rule:

* a ternary the reference source laid out over several lines with
  leading ``?``/``:`` but which is now on one line is split again at
  the reference's operator columns;
* any remaining multiline ternary with trailing operators is turned
  into leading form, operators one indent step past its first line.

Only ternaries whose three parts are single-line and comment-free are
touched; the parts are copied verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from idiolect.extraction.fingerprint import SignatureQueue, node_signature
from idiolect.extraction.parser import ParsedSource, contains_comment, parse_clean, walk
from idiolect.extraction.predicates import ternary_placement
from idiolect.normalize.replacements import (
    TextReplacement,
    apply_replacements,
    indent_for_column,
    until_stable,
    visual_width,
)


@dataclass(frozen=True)
class TernaryLayout:
    question_column: int
    colon_column: int


def _parts(node) -> Optional[Tuple]:
    test = node.child_by_field_name("condition")
    consequence = node.child_by_field_name("consequence")
    alternative = node.child_by_field_name("alternative")
    if test is None or consequence is None or alternative is None:
        return None
    return test, consequence, alternative


def _placement(parsed: ParsedSource, node) -> Optional[str]:
    parts = _parts(node)
    if parts is None or not parsed.is_multiline(node):
        return None
    test, consequence, alternative = parts
    return ternary_placement(
        parsed.text,
        parsed.end(test),
        parsed.start(consequence),
        parsed.end(consequence),
        parsed.start(alternative),
    )


def _has_interior_comment(parsed: ParsedSource, node) -> bool:
    if contains_comment(node):
        return True
    test, consequence, alternative = _parts(node)
    gaps = (
        parsed.text[parsed.end(test):parsed.start(consequence)],
        parsed.text[parsed.end(consequence):parsed.start(alternative)],
    )
    return any("//" in gap or "/*" in gap for gap in gaps)


def _operator_column(parsed: ParsedSource, start: int, end: int, operator: str, width: int) -> int:
    index = parsed.text.find(operator, start, end)
    line_start = parsed.text.rfind("\n", 0, index) + 1
    return visual_width(parsed.text[line_start:index], width)


def collect_reference_ternaries(parsed: ParsedSource, width: int) -> SignatureQueue:
    layouts: SignatureQueue = SignatureQueue()
    for node, _ in walk(parsed.root):
        if node.type != "ternary_expression" or _placement(parsed, node) != "leading":
            continue
        if _has_interior_comment(parsed, node):
            continue
        test, consequence, alternative = _parts(node)
        layouts.push(
            node_signature(node, parsed.data),
            TernaryLayout(
                question_column=_operator_column(
                    parsed, parsed.end(test), parsed.start(consequence), "?", width
                ),
                colon_column=_operator_column(
                    parsed, parsed.end(consequence), parsed.start(alternative), ":", width
                ),
            ),
        )
    return layouts


def _rebuild(
    parsed: ParsedSource, node, layout: TernaryLayout, kind: str, width: int
) -> Optional[TextReplacement]:
    if _has_interior_comment(parsed, node):
        return None
    texts = [parsed.node_text(part).strip() for part in _parts(node)]
    if not all(texts) or any("\n" in t for t in texts):
        return None
    test, consequence, alternative = texts
    text = (
        f"{test}\n"
        f"{indent_for_column(layout.question_column, kind, width)}? {consequence}\n"
        f"{indent_for_column(layout.colon_column, kind, width)}: {alternative}"
    )
    return TextReplacement(parsed.start(node), parsed.end(node), text)


def _ternary_pass(
    source: str, kind: str, width: int, reference: Optional[ParsedSource], language: str
) -> str:
    parsed = parse_clean(source, language)
    if parsed is None:
        return source
    layouts = collect_reference_ternaries(reference, width) if reference else SignatureQueue()
    step = max(1, width)

    replacements: List[TextReplacement] = []
    for node, _ in walk(parsed.root):
        if node.type != "ternary_expression" or _parts(node) is None:
            continue
        layout = layouts.pop(node_signature(node, parsed.data)) if layouts else None
        if layout is not None and not parsed.is_multiline(node):
            replacement = _rebuild(parsed, node, layout, kind, width)
        elif _placement(parsed, node) == "trailing":
            column = visual_width(parsed.line_indent(parsed.row(node)), width) + step
            replacement = _rebuild(parsed, node, TernaryLayout(column, column), kind, width)
        else:
            replacement = None
        if replacement is not None:
            replacements.append(replacement)
    return apply_replacements(source, replacements)


def normalize_ternaries(
    source: str,
    value: Optional[str],
    *,
    indent_kind: str = "space",
    indent_width: int = 2,
    reference: Optional[str] = None,
    language: str = "javascript",
) -> str:
    """Apply the multiline ternary operator rule (only ``leading`` edits)."""
    if value != "leading":
        return source
    if parse_clean(source, language) is None:
        return source
    ref_parsed = None
    if reference:
        ref_parsed = parse_clean(reference, language)
        if ref_parsed is None:
            return source
    return until_stable(
        lambda text: _ternary_pass(text, indent_kind, indent_width, ref_parsed, language),
        source,
    )
