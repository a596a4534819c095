"""
idiolect.normalize.declarations -- Comma placement in declaration lists.

Converts between the two multiline forms of ``var``/``let``/``const``
lists, keeping the next declarator's indentation text::

    var a = 1,          var a = 1
        b = 2;              , b = 2;
      (trailing)          (leading)
"""

from __future__ import annotations

from typing import List, Optional

from idiolect.extraction.parser import parse_clean, walk
from idiolect.extraction.predicates import declaration_comma_placement
from idiolect.normalize.replacements import TextReplacement, apply_replacements

DECLARATION_TYPES = frozenset({"lexical_declaration", "variable_declaration"})


def normalize_declaration_commas(
    source: str,
    value: Optional[str],
    *,
    indent_kind: str = "space",
    indent_width: int = 2,
    reference: Optional[str] = None,
    language: str = "javascript",
) -> str:
    """Apply the declaration comma placement rule (``leading``/``trailing``)."""
    if value not in ("leading", "trailing"):
        return source
    parsed = parse_clean(source, language)
    if parsed is None:
        return source

    replacements: List[TextReplacement] = []
    for node, _ in walk(parsed.root):
        if node.type not in DECLARATION_TYPES:
            continue
        declarators = [c for c in node.named_children if c.type == "variable_declarator"]
        for previous, current in zip(declarators, declarators[1:]):
            start, end = parsed.end(previous), parsed.start(current)
            placement = declaration_comma_placement(parsed.text[start:end])
            if placement is None or placement == value:
                continue
            indent = parsed.line_indent(parsed.row(current))
            if value == "leading":
                text = f"\n{indent}, "
            else:
                text = f",\n{indent}"
            replacements.append(TextReplacement(start, end, text))

    return apply_replacements(source, replacements)
