"""
idiolect.normalize.member_chains -- Member-chain break replay and indentation.

Two passes:

1. With a reference source, every outermost call whose callee is a
   chain of two or more member accesses is paired with the same chain
   in the reference (by node signature).  Line breaks before ``.`` or
   ``?.`` are re-inserted or removed to match the reference.
2. Unconditionally, every continuation line that starts with ``.`` or
   ``?.`` is re-indented to the object's column (``aligned``) or one
   indent step past it (``indented``).

A chain with a comment between any of its links is left as it is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from idiolect.extraction.fingerprint import SignatureQueue, node_signature
from idiolect.extraction.parser import ParsedSource, parse_clean, walk
from idiolect.normalize.replacements import (
    TextReplacement,
    apply_replacements,
    indent_for_column,
    until_stable,
    visual_width,
)

log = logging.getLogger(__name__)

MEMBER_TYPES = frozenset({"member_expression"})


@dataclass(frozen=True)
class Separator:
    start: int
    end: int
    delimiter: str
    broken: bool
    has_comment: bool


@dataclass(frozen=True)
class ChainSegment:
    broken: bool
    column: Optional[int]


def _visual_column(parsed: ParsedSource, node, width: int) -> int:
    row = parsed.row(node)
    return visual_width(parsed.line(row)[: parsed.column(node)], width)


def _is_outermost_call(node, ancestors: Tuple) -> bool:
    if node.type != "call_expression":
        return False
    if ancestors:
        parent = ancestors[-1]
        if parent.type in MEMBER_TYPES and parent.child_by_field_name("object") == node:
            return False
    return True


def _chain_top(node, ancestors: Tuple):
    """The outermost call or member access whose spine contains ``node``."""
    top = node
    for parent in reversed(ancestors):
        if parent.type in MEMBER_TYPES:
            field = "object"
        elif parent.type == "call_expression":
            field = "function"
        else:
            break
        if parent.child_by_field_name(field) != top:
            break
        top = parent
    return top


def spine_members(node) -> List:
    """Member expressions along the object/callee spine of ``node``, innermost first."""
    stack = []
    while node is not None:
        if node.type == "call_expression":
            node = node.child_by_field_name("function")
        elif node.type in MEMBER_TYPES:
            stack.append(node)
            node = node.child_by_field_name("object")
        else:
            break
    return list(reversed(stack))


def callee_members(call) -> List:
    """Member expressions along a call's callee chain, innermost first."""
    return spine_members(call.child_by_field_name("function"))


def _separator(parsed: ParsedSource, member) -> Optional[Separator]:
    obj = member.child_by_field_name("object")
    prop = member.child_by_field_name("property")
    if obj is None or prop is None:
        return None
    start, end = parsed.end(obj), parsed.start(prop)
    between = parsed.text[start:end]
    if "." not in between:
        return None
    return Separator(
        start=start,
        end=end,
        delimiter="?." if "?." in between else ".",
        broken="\n" in between,
        has_comment="//" in between or "/*" in between,
    )


def _separators(parsed: ParsedSource, members: List) -> List[Separator]:
    return [s for s in (_separator(parsed, m) for m in members) if s is not None]


# ---------------------------------------------------------------------------
# Reference replay
# ---------------------------------------------------------------------------


def collect_reference_chains(parsed: ParsedSource, width: int) -> SignatureQueue:
    """Record break decisions of every multiline chain in the reference."""
    layouts: SignatureQueue = SignatureQueue()
    for node, ancestors in walk(parsed.root):
        if not _is_outermost_call(node, ancestors):
            continue
        members = callee_members(node)
        if len(members) < 2:
            continue
        if any(sep.has_comment for sep in _separators(parsed, members)):
            continue
        segments: List[ChainSegment] = []
        for member in members:
            sep = _separator(parsed, member)
            if sep is None:
                continue
            column = None
            if sep.broken:
                prop = member.child_by_field_name("property")
                column = max(0, _visual_column(parsed, prop, width) - len(sep.delimiter))
            segments.append(ChainSegment(broken=sep.broken, column=column))
        if any(s.broken for s in segments):
            layouts.push(node_signature(node, parsed.data), segments)
    return layouts


def _replay_breaks(
    parsed: ParsedSource, value: str, kind: str, width: int, layouts: SignatureQueue
) -> List[TextReplacement]:
    step = max(1, width)
    replacements: List[TextReplacement] = []
    for node, ancestors in walk(parsed.root):
        if not _is_outermost_call(node, ancestors):
            continue
        layout = layouts.pop(node_signature(node, parsed.data))
        if layout is None:
            continue

        base = _visual_column(parsed, node, width)
        fallback = base if value == "aligned" else base + step
        current = _separators(parsed, callee_members(node))
        if any(sep.has_comment for sep in current):
            continue
        for target, sep in zip(layout, current):
            if target.broken and not sep.broken:
                column = target.column if target.column is not None else fallback
                text = "\n" + indent_for_column(column, kind, width) + sep.delimiter
                replacements.append(TextReplacement(sep.start, sep.end, text))
            elif not target.broken and sep.broken:
                replacements.append(TextReplacement(sep.start, sep.end, sep.delimiter))
    return replacements


# ---------------------------------------------------------------------------
# Continuation indentation
# ---------------------------------------------------------------------------


def _indent_pass(source: str, value: str, kind: str, width: int, language: str) -> str:
    parsed = parse_clean(source, language)
    if parsed is None:
        return source
    step = max(1, width)
    replacements: List[TextReplacement] = []
    commented: Dict[Tuple[int, int], bool] = {}
    for node, ancestors in walk(parsed.root):
        if node.type not in MEMBER_TYPES:
            continue
        sep = _separator(parsed, node)
        if sep is None or not sep.broken:
            continue
        # a comment anywhere in the chain leaves the whole chain alone
        top = _chain_top(node, ancestors)
        key = (top.start_byte, top.end_byte)
        if key not in commented:
            commented[key] = any(s.has_comment for s in _separators(parsed, spine_members(top)))
        if commented[key]:
            continue
        obj = node.child_by_field_name("object")
        prop = node.child_by_field_name("property")
        row = parsed.row(prop)
        line = parsed.line(row)
        stripped = line.lstrip(" \t")
        if not (stripped.startswith(".") or stripped.startswith("?.")):
            continue
        # the delimiter must open the line, not sit after another access
        if not sep.start <= parsed.line_start(row) + len(line) - len(stripped) < sep.end:
            continue

        desired = _visual_column(parsed, obj, width)
        if value != "aligned":
            desired += step
        current = line[: len(line) - len(stripped)]
        target = indent_for_column(desired, kind, width)
        if current != target:
            start = parsed.line_start(row)
            replacements.append(TextReplacement(start, start + len(current), target))
    return apply_replacements(source, replacements)


def normalize_member_chains(
    source: str,
    value: Optional[str],
    *,
    indent_kind: str = "space",
    indent_width: int = 2,
    reference: Optional[str] = None,
    language: str = "javascript",
) -> str:
    """Apply the member-chain indentation rule (``aligned``/``indented``)."""
    if value not in ("aligned", "indented"):
        return source
    parsed = parse_clean(source, language)
    if parsed is None:
        return source

    result = source
    if reference:
        ref_parsed = parse_clean(reference, language)
        if ref_parsed is None:
            return source
        layouts = collect_reference_chains(ref_parsed, indent_width)
        if layouts:
            replayed = apply_replacements(
                source, _replay_breaks(parsed, value, indent_kind, indent_width, layouts)
            )
            if parse_clean(replayed, language) is not None:
                result = replayed
            else:
                log.debug("Discarding member-chain replay that broke the parse")

    return until_stable(
        lambda text: _indent_pass(text, value, indent_kind, indent_width, language), result
    )
