"""
idiolect.extraction.comments -- Comment-derived style signals.

Covers ``//`` spacing, framed comment blocks and the alignment of
trailing inline comments.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Sequence

from idiolect.extraction.parser import ParsedSource
from idiolect.extraction.predicates import (
    is_alignment_prefix,
    is_blank,
    is_ignorable_line_comment,
    is_meaningful_comment,
    line_comment_body,
)
from idiolect.extraction.signals import SignalAccumulator

_LINE_COMMENT_RE = re.compile(r"^\s*//(.*)$")

# Consecutive inline comments further apart than this start a new group.
MAX_GROUP_GAP = 3


@dataclass(frozen=True)
class InlineCommentEntry:
    row: int
    column: int
    gap: int
    code_length: int
    indent: int


def collect_comment_signals(
    parsed: ParsedSource, comments: Sequence, acc: SignalAccumulator
) -> None:
    lines = parsed.lines
    _collect_block_framing(lines, acc)
    _collect_inline_alignment(parsed, comments, acc)

    for node in comments:
        body = line_comment_body(parsed.node_text(node))
        if body is None or is_ignorable_line_comment(body):
            continue
        acc.vote(body[:1].isspace(), "line_comment_space", "line_comment_tight")


def _collect_block_framing(lines: Sequence[str], acc: SignalAccumulator) -> None:
    index = 0
    while index < len(lines):
        if not _LINE_COMMENT_RE.match(lines[index]):
            index += 1
            continue

        group: List[str] = []
        while index < len(lines):
            match = _LINE_COMMENT_RE.match(lines[index])
            if not match:
                break
            group.append(match.group(1).strip())
            index += 1

        if not any(is_meaningful_comment(text) for text in group):
            continue

        framed = len(group) >= 3 and group[0] == "" and group[-1] == ""
        acc.vote(framed, "comment_framed_blocks", "comment_plain_blocks")


def inline_comment_entries(parsed: ParsedSource, comments: Sequence) -> List[InlineCommentEntry]:
    """Trailing ``//`` comments whose left-hand code is alignment-worthy."""
    entries: List[InlineCommentEntry] = []
    for node in comments:
        if line_comment_body(parsed.node_text(node)) is None:
            continue
        row = parsed.row(node)
        column = parsed.column(node)
        if column < 1:
            continue

        prefix = parsed.line(row)[:column]
        if not prefix.strip():
            continue
        code = prefix.rstrip()
        gap = len(prefix) - len(code)
        if gap < 1 or not is_alignment_prefix(code):
            continue

        entries.append(
            InlineCommentEntry(
                row=row,
                column=column,
                gap=gap,
                code_length=len(code),
                indent=len(prefix) - len(prefix.lstrip()),
            )
        )
    return entries


def group_inline_entries(
    entries: Sequence[InlineCommentEntry], lines: Sequence[str]
) -> List[List[InlineCommentEntry]]:
    """Split entries into runs sharing an indent, with no blank line
    between members and at most ``MAX_GROUP_GAP`` lines apart."""
    groups: List[List[InlineCommentEntry]] = []
    for entry in entries:
        if groups:
            group = groups[-1]
            previous = group[-1]
            gap = entry.row - previous.row - 1
            between = lines[previous.row + 1:entry.row] if gap > 0 else []
            if (
                entry.indent == group[0].indent
                and 0 <= gap <= MAX_GROUP_GAP
                and not any(is_blank(line) for line in between)
            ):
                group.append(entry)
                continue
        groups.append([entry])
    return groups


def _collect_inline_alignment(
    parsed: ParsedSource, comments: Sequence, acc: SignalAccumulator
) -> None:
    entries = inline_comment_entries(parsed, comments)
    for group in group_inline_entries(entries, parsed.lines):
        for previous, current in zip(group, group[1:]):
            # One space each and equal code length: aligned and
            # single-spaced look identical, so the pair is not counted.
            if previous.gap == 1 and current.gap == 1 and previous.code_length == current.code_length:
                continue
            acc.vote(
                previous.column == current.column,
                "inline_comment_aligned_pairs",
                "inline_comment_unaligned_pairs",
            )
