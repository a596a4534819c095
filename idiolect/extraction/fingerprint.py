"""
idiolect.extraction.fingerprint -- Position-independent node signatures.

A signature is a SHA-256 digest over a canonical token stream of a
subtree: node kinds, leaf text and operator/keyword tokens.  Positions,
whitespace, comments and pure punctuation never enter the stream, so
the same construct laid out differently hashes the same, while any
change to an operator, literal or shape changes the digest.

``SignatureQueue`` pairs observations from a reference parse with
nodes in a current parse.  Identical shapes are paired first-in,
first-out, which is an approximation when a construct repeats.
"""

from __future__ import annotations

import hashlib
from collections import deque
from typing import Deque, Dict, Generic, Iterator, List, Optional, TypeVar

T = TypeVar("T")

# Tokens a formatter may add, drop or swap without changing meaning.
_IGNORED_TOKENS = frozenset({",", ";", "(", ")", "{", "}", "[", "]", "'", '"'})

_OPEN = "\x02"
_CLOSE = "\x03"
_SEP = "\x1f"


def _leaf_text(node, source_bytes: bytes) -> str:
    text = source_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")
    if node.type == "string" and len(text) >= 2:
        return text[1:-1]
    return text


def signature_tokens(node, source_bytes: bytes) -> Iterator[str]:
    """Yield the canonical token stream for ``node``'s subtree."""
    stack: List[object] = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            yield item
            continue
        if item.type == "comment":
            continue
        if not item.is_named:
            if item.type not in _IGNORED_TOKENS:
                yield item.type
            continue

        children = [c for c in item.children if c.type != "comment"]
        if not children or (item.type == "string" and not any(c.is_named for c in children)):
            yield f"{item.type}={_leaf_text(item, source_bytes)}"
            continue

        yield _OPEN + item.type
        stack.append(_CLOSE)
        stack.extend(reversed(children))


def node_signature(node, source_bytes: bytes) -> str:
    """64-character hex SHA-256 of the node's canonical shape."""
    canonical = _SEP.join(signature_tokens(node, source_bytes))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class SignatureQueue(Generic[T]):
    """FIFO queues of layout observations keyed by node signature."""

    def __init__(self) -> None:
        self._queues: Dict[str, Deque[T]] = {}

    def push(self, signature: str, observation: T) -> None:
        self._queues.setdefault(signature, deque()).append(observation)

    def pop(self, signature: str) -> Optional[T]:
        queue = self._queues.get(signature)
        if not queue:
            return None
        return queue.popleft()

    def __len__(self) -> int:
        return sum(len(q) for q in self._queues.values())

    def __bool__(self) -> bool:
        return any(self._queues.values())
