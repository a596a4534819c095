"""
idiolect.normalize.pipeline -- Apply a learned profile to one source file.

Normalizers run in a fixed order, each on the previous one's output,
with the enforced value of its dimension.  Undetermined dimensions are
skipped.  Every step is a no-op on text it cannot parse cleanly, so a
broken file comes back unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from idiolect.core.config import Config
from idiolect.core.types import Dimension, InferredRule
from idiolect.extraction.parser import language_for_path
from idiolect.inference.profile import StyleProfile
from idiolect.normalize.braces import normalize_single_line_if
from idiolect.normalize.calls import normalize_call_arguments
from idiolect.normalize.declarations import normalize_declaration_commas
from idiolect.normalize.inline_comments import normalize_inline_comments
from idiolect.normalize.member_chains import normalize_member_chains
from idiolect.normalize.replacements import until_stable
from idiolect.normalize.switch_breaks import normalize_switch_breaks
from idiolect.normalize.ternaries import normalize_ternaries

log = logging.getLogger(__name__)

DEFAULT_INDENT_KIND = "space"
DEFAULT_INDENT_WIDTH = 2

Normalizer = Callable[..., str]

NORMALIZERS: List[Tuple[Dimension, Normalizer]] = [
    (Dimension.SINGLE_LINE_IF_BRACES, normalize_single_line_if),
    (Dimension.TERNARY_OPERATOR_PLACEMENT, normalize_ternaries),
    (Dimension.CALL_ARGUMENT_LAYOUT, normalize_call_arguments),
    (Dimension.MEMBER_CHAIN_INDENTATION, normalize_member_chains),
    (Dimension.DECLARATION_COMMA_PLACEMENT, normalize_declaration_commas),
    (Dimension.SWITCH_BREAK_INDENTATION, normalize_switch_breaks),
    (Dimension.TRAILING_INLINE_COMMENT_ALIGNMENT, normalize_inline_comments),
]

RuleSource = Union[StyleProfile, Mapping[Dimension, InferredRule]]


def _rules_of(rules: RuleSource) -> Mapping[Dimension, InferredRule]:
    if isinstance(rules, StyleProfile):
        return rules.rules
    return rules


def enforced_value(rules: RuleSource, dimension: Dimension) -> Any:
    """The rule's value when enforced, else None."""
    rule = _rules_of(rules).get(dimension)
    if rule is None or not rule.enforced:
        return None
    return rule.value


def indentation(rules: RuleSource) -> Tuple[str, int]:
    """Indent kind and width from the profile, defaulting to two spaces."""
    kind = enforced_value(rules, Dimension.INDENTATION_KIND) or DEFAULT_INDENT_KIND
    width = enforced_value(rules, Dimension.INDENTATION_SIZE)
    if not isinstance(width, int) or width < 1:
        width = DEFAULT_INDENT_WIDTH
    return kind, width


def safe_only(rules: RuleSource) -> Dict[Dimension, InferredRule]:
    """Copy of ``rules`` with every non auto-fix-safe rule demoted."""
    return {
        dimension: rule if rule.auto_fix_safe or not rule.enforced else rule.demoted()
        for dimension, rule in _rules_of(rules).items()
    }


def _apply_all(
    text: str,
    steps: List[Tuple[Dimension, Normalizer, Any]],
    kind: str,
    width: int,
    reference: Optional[str],
    language: str,
) -> str:
    for dimension, normalizer, value in steps:
        updated = normalizer(
            text,
            value,
            indent_kind=kind,
            indent_width=width,
            reference=reference,
            language=language,
        )
        if updated != text:
            log.debug("Normalized %s (%s)", dimension.value, value)
        text = updated
    return text


def normalize_source(
    current: str,
    rules: RuleSource,
    reference: Optional[str] = None,
    language: str = "javascript",
) -> str:
    """Run every normalizer whose dimension is enforced in ``rules``.

    The chain is repeated until it settles: compacting a call can make
    a conditional collapsible, and so on.
    """
    kind, width = indentation(rules)
    steps = [
        (dimension, normalizer, enforced_value(rules, dimension))
        for dimension, normalizer in NORMALIZERS
    ]
    steps = [step for step in steps if step[2] is not None]
    if not steps:
        return current
    return until_stable(
        lambda text: _apply_all(text, steps, kind, width, reference, language), current
    )


def normalize_file(
    current: str,
    rules: RuleSource,
    config: Optional[Config] = None,
    reference: Optional[str] = None,
    path: Optional[str] = None,
) -> str:
    """Normalize one file using the settings in ``config``.

    The grammar comes from ``path`` when given, else from
    ``config.default_language``.  With ``config.safe_only`` only rules
    marked auto-fix safe are applied.
    """
    config = config or Config()
    language = language_for_path(path) if path else config.default_language
    applied: RuleSource = safe_only(rules) if config.safe_only else rules
    return normalize_source(current, applied, reference=reference, language=language)
