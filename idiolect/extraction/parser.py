"""
idiolect.extraction.parser -- tree-sitter parsing for JavaScript/TypeScript.

Grammars are loaded lazily and cached per language.  Parsing is
error-recovering: a broken file still yields a (partial) tree, and any
failure inside the binding is logged and reported as ``None``.

tree-sitter reports positions in UTF-8 bytes.  ``ParsedSource`` maps
them back to character offsets and columns so every consumer can slice
the original ``str`` directly.
"""

from __future__ import annotations

import logging
from pathlib import PurePath
from typing import Dict, Iterator, List, Optional, Tuple

import tree_sitter as _ts

log = logging.getLogger(__name__)

LANGUAGES = ("javascript", "typescript", "tsx")

_TS_LANGUAGES: Dict[str, object] = {}

_EXTENSION_LANGUAGES = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}


# ---------------------------------------------------------------------------
# Grammar loading
# ---------------------------------------------------------------------------


def _get_ts_language(lang: str) -> Optional[object]:
    """Lazily load and cache a tree-sitter Language object."""
    if lang in _TS_LANGUAGES:
        return _TS_LANGUAGES[lang]

    try:
        if lang == "javascript":
            import tree_sitter_javascript as tsj

            language = _ts.Language(tsj.language())
        elif lang in ("typescript", "tsx"):
            import tree_sitter_typescript as tst

            ts_lang = tst.language_tsx() if lang == "tsx" else tst.language_typescript()
            language = _ts.Language(ts_lang)
        else:
            return None

        _TS_LANGUAGES[lang] = language
        return language
    except Exception as exc:
        log.debug("tree-sitter grammar for %s not available: %s", lang, exc)
        return None


def language_for_path(path: Optional[str]) -> str:
    """Pick a grammar from a file name; anything unknown is JavaScript."""
    if not path:
        return "javascript"
    return _EXTENSION_LANGUAGES.get(PurePath(path).suffix.lower(), "javascript")


# ---------------------------------------------------------------------------
# ParsedSource
# ---------------------------------------------------------------------------


class ParsedSource:
    """Source text plus its tree, with character-based position helpers."""

    def __init__(self, text: str, tree, language: str = "javascript"):
        self.text = text
        self.data = text.encode("utf-8")
        self.tree = tree
        self.root = tree.root_node
        self.language = language
        self.lines: List[str] = text.split("\n")

        self.line_starts: List[int] = []
        offset = 0
        for line in self.lines:
            self.line_starts.append(offset)
            offset += len(line) + 1

        # byte offset -> char offset, only needed for non-ASCII input
        self._char_index: Optional[List[int]] = None
        if len(self.data) != len(text):
            index: List[int] = []
            for i, ch in enumerate(text):
                index.extend([i] * len(ch.encode("utf-8")))
            index.append(len(text))
            self._char_index = index

    # -- offsets ------------------------------------------------------------

    def char_offset(self, byte_offset: int) -> int:
        if self._char_index is None:
            return byte_offset
        if byte_offset >= len(self._char_index):
            return len(self.text)
        return self._char_index[byte_offset]

    def start(self, node) -> int:
        return self.char_offset(node.start_byte)

    def end(self, node) -> int:
        return self.char_offset(node.end_byte)

    def row(self, node) -> int:
        return node.start_point[0]

    def end_row(self, node) -> int:
        return node.end_point[0]

    def column(self, node) -> int:
        """Character column of the node start within its line."""
        row = node.start_point[0]
        if row >= len(self.line_starts):
            return 0
        return self.start(node) - self.line_starts[row]

    def end_column(self, node) -> int:
        row = node.end_point[0]
        if row >= len(self.line_starts):
            return 0
        return self.end(node) - self.line_starts[row]

    def node_text(self, node) -> str:
        return self.data[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def is_multiline(self, node) -> bool:
        return node.end_point[0] > node.start_point[0]

    # -- lines --------------------------------------------------------------

    def line(self, row: int) -> str:
        if 0 <= row < len(self.lines):
            return self.lines[row]
        return ""

    def line_indent(self, row: int) -> str:
        line = self.line(row)
        return line[: len(line) - len(line.lstrip(" \t"))]

    def is_blank_line(self, row: int) -> bool:
        return not self.line(row).strip()

    def line_start(self, row: int) -> int:
        if 0 <= row < len(self.line_starts):
            return self.line_starts[row]
        return len(self.text)

    @property
    def has_errors(self) -> bool:
        return bool(self.root.has_error)


# ---------------------------------------------------------------------------
# Parsing and traversal
# ---------------------------------------------------------------------------


def parse_source(text: str, language: str = "javascript") -> Optional[ParsedSource]:
    """Parse ``text``; returns ``None`` when no tree could be produced."""
    language_obj = _get_ts_language(language)
    if language_obj is None:
        return None
    try:
        parser = _ts.Parser(language_obj)
        tree = parser.parse(text.encode("utf-8"))
    except Exception as exc:
        log.debug("tree-sitter parse failed for %s: %s", language, exc)
        return None
    if tree is None:
        return None
    return ParsedSource(text, tree, language)


def parse_clean(text: str, language: str = "javascript") -> Optional[ParsedSource]:
    """Like ``parse_source`` but treats any syntax error as a failure."""
    parsed = parse_source(text, language)
    if parsed is None or parsed.has_errors:
        return None
    return parsed


def walk(root) -> Iterator[Tuple[object, Tuple[object, ...]]]:
    """Pre-order walk over named nodes, yielding ``(node, ancestors)``.

    ``ancestors`` runs from the root down to the node's parent.
    """
    stack = [(root, ())]
    while stack:
        node, ancestors = stack.pop()
        yield node, ancestors
        children = node.named_children
        if children:
            path = ancestors + (node,)
            for child in reversed(children):
                stack.append((child, path))


def is_comment(node) -> bool:
    return node.type == "comment"


def code_children(node) -> list:
    """Named children with comments filtered out."""
    return [c for c in node.named_children if c.type != "comment"]


def contains_comment(node) -> bool:
    for child, _ in walk(node):
        if child.type == "comment":
            return True
    return False
