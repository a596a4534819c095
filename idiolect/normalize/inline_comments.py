"""
idiolect.normalize.inline_comments -- Trailing ``//`` comment spacing.

Groups of trailing comments (same indent, no blank line between, at
most a few lines apart) are either aligned to one shared column two
spaces past the longest code, or each separated from its code by a
single space.

Before aligning, comments that a formatter moved onto their own line
are put back after the code they followed in the reference source,
provided the reference shows that exact comment after that exact code
and the code is something alignment would consider.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Set

from idiolect.extraction.comments import group_inline_entries, inline_comment_entries
from idiolect.extraction.parser import ParsedSource, parse_clean, walk
from idiolect.extraction.predicates import is_alignment_prefix, line_comment_body
from idiolect.normalize.replacements import TextReplacement, apply_replacements

log = logging.getLogger(__name__)

ALIGNMENT_GAP = 2

_WHITESPACE_RE = re.compile(r"\s+")

_MULTILINE_TEXT_TYPES = frozenset({"string", "template_string", "jsx_text"})


def _line_comments(parsed: ParsedSource) -> list:
    return [
        node
        for node, _ in walk(parsed.root)
        if node.type == "comment" and line_comment_body(parsed.node_text(node)) is not None
    ]


def _context_key(code: str) -> str:
    return _WHITESPACE_RE.sub(" ", code.strip())


# ---------------------------------------------------------------------------
# Reattachment
# ---------------------------------------------------------------------------


def _reference_contexts(reference: ParsedSource) -> Dict[str, Set[str]]:
    """Map normalized left-hand code to the trailing comments it carried."""
    contexts: Dict[str, Set[str]] = {}
    for node in _line_comments(reference):
        prefix = reference.line(reference.row(node))[: reference.column(node)]
        if not is_alignment_prefix(prefix):
            continue
        contexts.setdefault(_context_key(prefix), set()).add(reference.node_text(node))
    return contexts


def _inside_multiline_text(parsed: ParsedSource, offset: int) -> bool:
    for node, _ in walk(parsed.root):
        if node.type in _MULTILINE_TEXT_TYPES and parsed.is_multiline(node):
            if parsed.start(node) < offset < parsed.end(node):
                return True
    return False


def _reattach(parsed: ParsedSource, contexts: Dict[str, Set[str]]) -> List[TextReplacement]:
    comments = _line_comments(parsed)
    commented_rows = {parsed.row(node) for node in comments}
    replacements: List[TextReplacement] = []
    for node in comments:
        row = parsed.row(node)
        if row == 0 or parsed.line(row)[: parsed.column(node)].strip():
            continue
        previous = parsed.line(row - 1)
        if not is_alignment_prefix(previous) or (row - 1) in commented_rows:
            continue
        text = parsed.node_text(node)
        if text not in contexts.get(_context_key(previous), ()):
            continue
        code_end = parsed.line_start(row - 1) + len(previous.rstrip())
        if _inside_multiline_text(parsed, code_end):
            continue
        replacements.append(TextReplacement(code_end, parsed.end(node), f" {text}"))
    return replacements


# ---------------------------------------------------------------------------
# Spacing
# ---------------------------------------------------------------------------


def _spacing(parsed: ParsedSource, value: str) -> List[TextReplacement]:
    entries = inline_comment_entries(parsed, _line_comments(parsed))
    replacements: List[TextReplacement] = []
    for group in group_inline_entries(entries, parsed.lines):
        if value == "aligned":
            if len(group) < 2:
                continue
            columns = {entry.column for entry in group}
            if len(columns) == 1 and min(entry.gap for entry in group) >= ALIGNMENT_GAP:
                continue
            target = max(entry.code_length for entry in group) + ALIGNMENT_GAP
        for entry in group:
            gap = target - entry.code_length if value == "aligned" else 1
            if gap == entry.gap:
                continue
            start = parsed.line_start(entry.row) + entry.code_length
            replacements.append(TextReplacement(start, start + entry.gap, " " * gap))
    return replacements


def normalize_inline_comments(
    source: str,
    value: Optional[str],
    *,
    indent_kind: str = "space",
    indent_width: int = 2,
    reference: Optional[str] = None,
    language: str = "javascript",
) -> str:
    """Apply the trailing comment alignment rule (``aligned``/``single-space``)."""
    if value not in ("aligned", "single-space"):
        return source
    parsed = parse_clean(source, language)
    if parsed is None:
        return source

    if value == "aligned" and reference:
        ref_parsed = parse_clean(reference, language)
        if ref_parsed is None:
            return source
        reattached = apply_replacements(source, _reattach(parsed, _reference_contexts(ref_parsed)))
        if reattached != source:
            reparsed = parse_clean(reattached, language)
            if reparsed is None:
                log.debug("Comment reattachment broke the parse; keeping input")
                return source
            parsed = reparsed

    return apply_replacements(parsed.text, _spacing(parsed, value))
