"""
idiolect.normalize.calls -- Compact expanded call arguments.

With the ``compact`` rule, a call whose argument list is broken after
``(``, between arguments or before ``)`` gets its arguments rejoined
with ``", "``.  A trailing comma survives, and multiline argument
bodies lose the extra indentation the expanded form gave them.
"""

from __future__ import annotations

import re
from typing import List, Optional

from idiolect.extraction.parser import ParsedSource, code_children, contains_comment, parse_clean, walk
from idiolect.normalize.replacements import (
    TextReplacement,
    apply_replacements,
    dedent_indent,
    until_stable,
)

_CONTINUATION_INDENT_RE = re.compile(r"\n([ \t]+)")

_TEXT_TYPES = frozenset({"string", "template_string", "jsx_text"})


def _has_multiline_text(parsed: ParsedSource, nodes) -> bool:
    """Line breaks inside literals must never be re-indented."""
    for arg in nodes:
        for node, _ in walk(arg):
            if node.type in _TEXT_TYPES and parsed.is_multiline(node):
                return True
    return False


def _compact(parsed: ParsedSource, node) -> Optional[TextReplacement]:
    arguments = node.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        return None
    if not parsed.is_multiline(arguments) or contains_comment(arguments):
        return None
    args = code_children(arguments)
    if not args or _has_multiline_text(parsed, args):
        return None

    text = parsed.text
    open_paren = parsed.start(arguments)
    close_paren = parsed.end(arguments) - 1
    if text[open_paren] != "(" or text[close_paren] != ")":
        return None

    expanded = "\n" in text[open_paren + 1:parsed.start(args[0])]
    for previous, current in zip(args, args[1:]):
        between = text[parsed.end(previous):parsed.start(current)]
        if "," not in between:
            return None
        if "\n" in between:
            expanded = True
    tail = text[parsed.end(args[-1]):close_paren]
    if "\n" in tail:
        expanded = True
    if not expanded:
        return None

    trailing_comma = bool(re.search(r",\s*$", tail))
    joined = ", ".join(parsed.node_text(arg) for arg in args)
    rebuilt = f"({joined}{',' if trailing_comma else ''})"

    first_row = parsed.row(args[0])
    paren_row = parsed.row(arguments)
    if first_row > paren_row:
        call_indent = len(parsed.line_indent(paren_row))
        arg_indent = len(parsed.line_indent(first_row))
        dedent_by = max(0, arg_indent - call_indent)
        if dedent_by:
            rebuilt = _CONTINUATION_INDENT_RE.sub(
                lambda m: "\n" + dedent_indent(m.group(1), dedent_by), rebuilt
            )

    return TextReplacement(open_paren, close_paren + 1, rebuilt)


def _compact_pass(source: str, language: str) -> str:
    parsed = parse_clean(source, language)
    if parsed is None:
        return source
    replacements: List[TextReplacement] = []
    for node, _ in walk(parsed.root):
        if node.type != "call_expression":
            continue
        replacement = _compact(parsed, node)
        if replacement is not None:
            replacements.append(replacement)
    return apply_replacements(source, replacements)


def normalize_call_arguments(
    source: str,
    value: Optional[str],
    *,
    indent_kind: str = "space",
    indent_width: int = 2,
    reference: Optional[str] = None,
    language: str = "javascript",
) -> str:
    """Apply the multiline call layout rule (only ``compact`` edits)."""
    if value != "compact":
        return source
    if parse_clean(source, language) is None:
        return source
    return until_stable(lambda text: _compact_pass(text, language), source)
