"""
idiolect.extraction.predicates -- Small pure classification helpers.

Kept free of tree walking so each one can be unit-tested on its own.
Node-based helpers only read ``type`` and children, never positions.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

_SEPARATOR_RE = re.compile(r"^[-=*_/#]+$")
_DIRECTIVE_RE = re.compile(
    r"^(?:eslint|istanbul|jshint|jscs|sourceMappingURL|region|endregion)\b",
    re.IGNORECASE,
)
_PRAGMA_RE = re.compile(r"^(?:#|@ts-)", re.IGNORECASE)


def is_ignorable_line_comment(body: str) -> bool:
    """True for ``//`` bodies that say nothing about spacing preference.

    ``body`` is the text after the slashes.  Empty comments, separator
    rules and tool directives are ignored.
    """
    trimmed = body.strip()
    if not trimmed:
        return True
    if _SEPARATOR_RE.match(trimmed):
        return True
    if _DIRECTIVE_RE.match(trimmed):
        return True
    if _PRAGMA_RE.match(trimmed):
        return True
    return False


def is_meaningful_comment(body: str) -> bool:
    return not is_ignorable_line_comment(body)


_CONTROL_PREFIX_RE = re.compile(r"^(?:if|for|while|switch|catch)\s*\(")
_EXIT_PREFIX_RE = re.compile(r"^(?:return|throw)\b")
_CASE_PREFIX_RE = re.compile(r"^(?:case|default)\b")
_KEY_PREFIX_RE = re.compile(r"""^(?:['"][^'"]+['"]|[A-Za-z_$][\w$]*)\s*:""")
_ASSIGNMENT_RE = re.compile(r"(?:^|[^=!<>])(?:[+\-*/%&|^]?=)(?!=)")


def is_alignment_prefix(prefix: str) -> bool:
    """Does the code left of a trailing comment look worth aligning?

    Assignments, object keys, bracket openers and comma-terminated
    items qualify; control-flow headers and exits do not.
    """
    trimmed = prefix.strip()
    if not trimmed:
        return False
    if _CONTROL_PREFIX_RE.match(trimmed):
        return False
    if _EXIT_PREFIX_RE.match(trimmed):
        return False
    if _CASE_PREFIX_RE.match(trimmed):
        return False
    if trimmed.startswith("["):
        return True
    if re.search(r",\s*$", trimmed):
        return True
    if re.search(r"\{\s*$", trimmed):
        return True
    if _KEY_PREFIX_RE.match(trimmed):
        return True
    return bool(_ASSIGNMENT_RE.search(trimmed))


def line_comment_body(text: str) -> Optional[str]:
    """Return the body of a ``//`` comment node's text, else None."""
    if text.startswith("//"):
        return text[2:]
    return None


def is_doc_comment(text: str) -> bool:
    return text.startswith("/**") and not text.startswith("/**/")


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------

_CASE_BOUNDARY_RE = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATORS_RE = re.compile(r"[_\-]+")


def name_word_count(name: str) -> int:
    """Number of words in an identifier (camelCase, snake_case, kebab)."""
    if not name:
        return 0
    normalized = _SEPARATORS_RE.sub(" ", _CASE_BOUNDARY_RE.sub(r"\1 \2", name)).strip()
    if not normalized:
        return 0
    return len(normalized.split())


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

LITERAL_TYPES = frozenset(
    {"string", "number", "true", "false", "null", "undefined", "regex"}
)

COMPARISON_OPERATORS = frozenset({"==", "===", "!=", "!==", "<", "<=", ">", ">="})
LOGICAL_OPERATORS = frozenset({"&&", "||", "??"})


def is_literal_like(node) -> bool:
    """Literals, including template strings without substitutions."""
    if node is None:
        return False
    if node.type in LITERAL_TYPES:
        return True
    if node.type == "template_string":
        return not any(c.type == "template_substitution" for c in node.named_children)
    return False


def yoda_classification(left, right) -> Optional[bool]:
    """True when only the left operand is literal, False when only the
    right one is, None when the comparison says nothing."""
    left_literal = is_literal_like(left)
    right_literal = is_literal_like(right)
    if left_literal == right_literal:
        return None
    return left_literal


def is_guard_exit(node) -> bool:
    """A return/throw, possibly wrapped in single-statement blocks."""
    if node is None:
        return False
    if node.type in ("return_statement", "throw_statement"):
        return True
    if node.type == "statement_block":
        body = [c for c in node.named_children if c.type != "comment"]
        if len(body) != 1:
            return False
        return is_guard_exit(body[0])
    return False


def ternary_placement(
    source: str, test_end: int, cons_start: int, cons_end: int, alt_start: int
) -> Optional[str]:
    """Classify a multiline ternary as ``"leading"`` or ``"trailing"``.

    Scans the raw text between the sub-expressions for ``?`` and ``:``;
    leading when a line break precedes either operator.
    """
    question_segment = source[test_end:cons_start]
    colon_segment = source[cons_end:alt_start]
    q_index = question_segment.find("?")
    c_index = colon_segment.find(":")
    if q_index == -1 or c_index == -1:
        return None
    if "\n" in question_segment[:q_index] or "\n" in colon_segment[:c_index]:
        return "leading"
    return "trailing"


# ---------------------------------------------------------------------------
# Lines and ordering
# ---------------------------------------------------------------------------


def is_blank(line: str) -> bool:
    return not line.strip()


def has_blank_line_before(row: int, lines: Sequence[str]) -> bool:
    """Is the line directly above 0-based ``row`` blank?"""
    if row <= 0 or row - 1 >= len(lines):
        return False
    return is_blank(lines[row - 1])


def ordering_vote(values: Sequence[str]) -> Optional[tuple]:
    """Return ``(is_sorted, weight)`` for a list of module specifiers.

    Comparison is case-insensitive; weight is ``count - 1``.  Lists of
    fewer than two items do not vote.
    """
    if len(values) < 2:
        return None
    lowered = [v.lower() for v in values]
    return lowered == sorted(lowered), max(1, len(values) - 1)


def declaration_comma_placement(between: str) -> Optional[str]:
    """Classify the text between two declarators of one list.

    ``"leading"`` when the comma opens the next item's line,
    ``"trailing"`` when it ends the previous item's line, else None.
    Text containing comments is never classified.
    """
    if "\n" not in between or "//" in between or "/*" in between:
        return None
    comma = between.find(",")
    if comma == -1:
        return None
    before, after = between[:comma], between[comma + 1:]
    if "\n" in before:
        return "leading" if not before.rsplit("\n", 1)[-1].strip() else None
    if "\n" in after:
        return "trailing"
    return None
