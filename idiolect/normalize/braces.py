"""
idiolect.normalize.braces -- Collapse single-statement conditionals.

With the ``omit`` rule, a conditional without an alternate whose single
statement sits alone on the line below is rewritten to one line:

    if (ready)            if (ready) start();
      start();      ->

    if (ready) {
      start();      ->    if (ready) start();
    }

Text is reassembled from verbatim slices; nothing is re-rendered.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from idiolect.extraction.parser import (
    ParsedSource,
    code_children,
    contains_comment,
    parse_clean,
    walk,
)
from idiolect.normalize.replacements import TextReplacement, apply_replacements, until_stable

log = logging.getLogger(__name__)

# Declarations are not allowed as the bare body of an `if`.
_UNBRACEABLE = frozenset(
    {
        "lexical_declaration",
        "class_declaration",
        "function_declaration",
        "generator_function_declaration",
    }
)


def _has_comment_text(text: str) -> bool:
    return "//" in text or "/*" in text


def _collapse(parsed: ParsedSource, node) -> Optional[TextReplacement]:
    if node.child_by_field_name("alternative") is not None:
        return None
    condition = node.child_by_field_name("condition")
    body = node.child_by_field_name("consequence")
    if condition is None or body is None:
        return None

    if_row = parsed.row(node)
    if parsed.row(condition) != if_row or parsed.end_row(condition) != if_row:
        return None

    statement = body
    if body.type == "statement_block":
        if contains_comment(body):
            return None
        statements = code_children(body)
        if len(statements) != 1:
            return None
        statement = statements[0]
        # `{` stays on the `if` line, `}` alone on the line after the statement
        if parsed.row(body) != if_row or parsed.end_row(body) != if_row + 2:
            return None
        if parsed.text[parsed.end(statement):parsed.end(body) - 1].strip():
            return None
    if statement.type in _UNBRACEABLE:
        return None

    stmt_row = parsed.row(statement)
    if stmt_row != if_row + 1 or parsed.end_row(statement) != stmt_row:
        return None
    if "//" in parsed.line(stmt_row):
        return None
    if _has_comment_text(parsed.text[parsed.end(condition):parsed.start(statement)]):
        return None

    text = f"if {parsed.node_text(condition)} {parsed.node_text(statement)}"
    return TextReplacement(parsed.start(node), parsed.end(node), text)


def _collapse_pass(source: str, language: str) -> str:
    parsed = parse_clean(source, language)
    if parsed is None:
        return source
    replacements: List[TextReplacement] = []
    for node, _ in walk(parsed.root):
        if node.type != "if_statement":
            continue
        replacement = _collapse(parsed, node)
        if replacement is not None:
            replacements.append(replacement)
    return apply_replacements(source, replacements)


def normalize_single_line_if(
    source: str,
    value: Optional[str],
    *,
    indent_kind: str = "space",
    indent_width: int = 2,
    reference: Optional[str] = None,
    language: str = "javascript",
) -> str:
    """Apply the single-line conditional brace rule (only ``omit`` edits)."""
    if value != "omit":
        return source
    if parse_clean(source, language) is None:
        return source
    return until_stable(lambda text: _collapse_pass(text, language), source)
