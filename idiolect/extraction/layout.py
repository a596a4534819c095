"""
idiolect.extraction.layout -- Line-oriented layout signals.

Blank lines, longest line and indentation histogram come from the raw
text alone; no tree is needed.
"""

from __future__ import annotations

import re
from typing import Sequence

from idiolect.extraction.predicates import is_blank
from idiolect.extraction.signals import SignalAccumulator

_INDENT_RE = re.compile(r"^([ \t]+)")


def collect_line_layout(lines: Sequence[str], acc: SignalAccumulator) -> None:
    for line in lines:
        if is_blank(line):
            acc.add("blank_lines")
            continue

        acc.observe_line_length(len(line.rstrip("\r")))

        match = _INDENT_RE.match(line)
        if not match:
            continue
        indent = match.group(1)
        if "\t" in indent:
            acc.add("indent_tab_lines")
            continue

        acc.add("indent_space_lines")
        acc.observe_indent(len(indent))
