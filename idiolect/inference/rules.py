"""
idiolect.inference.rules -- Confidence-gated rule inference.

Turns ``AggregateSignals`` into one ``InferredRule`` per ``Dimension``.
A rule is enforced only when its winning value clears both the
evidence floor and the confidence floor; everything else stays
undetermined so sparse samples never masquerade as conventions.
"""

from __future__ import annotations

import math
from functools import reduce
from typing import Any, Dict, Mapping, Optional

from idiolect.core.types import (
    RULE_DESCRIPTORS,
    Dimension,
    InferredRule,
    RuleStatus,
    Thresholds,
)
from idiolect.extraction.signals import AggregateSignals

LINE_WIDTH_CANDIDATES = (80, 90, 100, 110, 120, 140, 160)
INDENT_UNIT_CANDIDATES = (2, 4, 8)

COMPACT_DENSITY_LIMIT = 0.15
COMPACT_DENSITY_TARGET = 0.12
SPACIOUS_DENSITY_TARGET = 0.25


# ---------------------------------------------------------------------------
# Rule primitives
# ---------------------------------------------------------------------------


def _gated(
    value: Any,
    confidence: float,
    evidence: int,
    passes: bool,
    auto_fix_safe: bool,
) -> InferredRule:
    if passes:
        return InferredRule(
            value=value,
            status=RuleStatus.ENFORCED,
            confidence=confidence,
            evidence_count=evidence,
            auto_fix_safe=auto_fix_safe,
        )
    return InferredRule.undetermined(
        confidence=confidence, evidence_count=evidence, auto_fix_safe=auto_fix_safe
    )


def binary_rule(
    yes: int,
    no: int,
    yes_value: Any,
    no_value: Any,
    min_evidence: int,
    min_confidence: float,
    auto_fix_safe: bool = False,
) -> InferredRule:
    """Majority vote between two outcomes; ties favour ``yes``."""
    total = yes + no
    if total <= 0:
        return InferredRule.undetermined(auto_fix_safe=auto_fix_safe)

    winner, value = (yes, yes_value) if yes >= no else (no, no_value)
    confidence = winner / total
    return _gated(
        value,
        confidence,
        winner,
        winner >= min_evidence and confidence >= min_confidence,
        auto_fix_safe,
    )


def density_rule(
    blank_lines: int, total_lines: int, min_evidence: int, min_confidence: float
) -> InferredRule:
    """Blank-line density: ``compact`` up to 15% blank lines, else ``spacious``."""
    if total_lines <= 0:
        return InferredRule.undetermined()

    ratio = blank_lines / total_lines
    if ratio <= COMPACT_DENSITY_LIMIT:
        value, target = "compact", COMPACT_DENSITY_TARGET
    else:
        value, target = "spacious", SPACIOUS_DENSITY_TARGET
    confidence = 1 - min(abs(ratio - target), 0.2)
    return _gated(
        value,
        confidence,
        total_lines,
        total_lines >= min_evidence and confidence >= min_confidence,
        False,
    )


def infer_indent_unit(histogram: Mapping[int, int]) -> int:
    """Estimate the indentation step from a width -> line-count histogram."""
    entries = [(size, count) for size, count in histogram.items() if size > 0 and count > 0]
    if not entries:
        return 2

    unit = reduce(math.gcd, (size for size, _ in entries))
    if 2 <= unit <= 8:
        return unit

    best_value, best_score = 2, -1
    for candidate in INDENT_UNIT_CANDIDATES:
        score = sum(count for size, count in entries if size % candidate == 0)
        if score > best_score:
            best_value, best_score = candidate, score
    if best_score > 0:
        return best_value

    return min(size for size, _ in entries)


def infer_line_width(
    max_line_length: int, non_blank_lines: int, min_evidence: int, min_confidence: float
) -> InferredRule:
    """Round the longest observed line up to a conventional width."""
    evidence = max(0, non_blank_lines)
    if max_line_length <= 0 or evidence == 0:
        return InferredRule.undetermined(evidence_count=evidence)

    target = max(80, min(max_line_length, 160))
    value = next((c for c in LINE_WIDTH_CANDIDATES if c >= target), 160)
    confidence = max(0.5, min(1.0, max_line_length / value))
    return _gated(
        value,
        confidence,
        evidence,
        evidence >= min_evidence and confidence >= min_confidence,
        False,
    )


# ---------------------------------------------------------------------------
# Whole-profile inference
# ---------------------------------------------------------------------------


def _member_chain_rule(agg: AggregateSignals, thresholds: Thresholds, safe: bool) -> InferredRule:
    """Prefer one vote per file over raw chain counts when any file voted."""
    file_votes = agg.member_aligned_files + agg.member_indented_files
    if file_votes > 0:
        return binary_rule(
            agg.member_aligned_files,
            agg.member_indented_files,
            "aligned",
            "indented",
            1 if thresholds.min_evidence <= 2 else 2,
            max(0.6, thresholds.min_confidence - 0.15),
            safe,
        )
    return binary_rule(
        agg.member_aligned,
        agg.member_indented,
        "aligned",
        "indented",
        thresholds.quarter_evidence,
        thresholds.min_confidence,
        safe,
    )


def infer_rules(
    agg: AggregateSignals, thresholds: Optional[Thresholds] = None
) -> Dict[Dimension, InferredRule]:
    """Infer every dimension from aggregated signals."""
    t = thresholds or Thresholds()
    full = t.min_evidence
    conf = t.min_confidence
    sparse = t.sparse_evidence
    quarter = t.quarter_evidence
    ultra = t.ultra_sparse_evidence

    def safe(dimension: Dimension) -> bool:
        return RULE_DESCRIPTORS[dimension].auto_fix_safe

    def binary(dimension: Dimension, yes: int, no: int, min_evidence: int, min_confidence: float = conf):
        yes_value, no_value = RULE_DESCRIPTORS[dimension].values
        return binary_rule(yes, no, yes_value, no_value, min_evidence, min_confidence, safe(dimension))

    D = Dimension
    rules: Dict[Dimension, InferredRule] = {
        D.LINE_COMMENT_SPACING: binary(
            D.LINE_COMMENT_SPACING, agg.line_comment_space, agg.line_comment_tight, full
        ),
        D.PREFER_DOC_COMMENTS: binary(
            D.PREFER_DOC_COMMENTS,
            agg.functions_with_doc,
            max(agg.functions_total - agg.functions_with_doc, 0),
            sparse,
        ),
        D.COMMENT_BLOCK_FRAMING: binary(
            D.COMMENT_BLOCK_FRAMING, agg.comment_framed_blocks, agg.comment_plain_blocks, sparse
        ),
        D.TRAILING_INLINE_COMMENT_ALIGNMENT: binary(
            D.TRAILING_INLINE_COMMENT_ALIGNMENT,
            agg.inline_comment_aligned_pairs,
            agg.inline_comment_unaligned_pairs,
            ultra,
        ),
        D.FUNCTION_WORD_COUNT: binary(
            D.FUNCTION_WORD_COUNT, agg.function_names_single, agg.function_names_multi, full
        ),
        D.FUNCTION_EXPRESSION_NAMING: binary(
            D.FUNCTION_EXPRESSION_NAMING,
            agg.function_expr_named,
            agg.function_expr_anonymous,
            sparse,
        ),
        D.SINGLE_LINE_IF_BRACES: binary(
            D.SINGLE_LINE_IF_BRACES, agg.if_without_braces, agg.if_with_braces, full
        ),
        D.GUARD_CLAUSES: binary(
            D.GUARD_CLAUSES, agg.guard_clause_functions, agg.non_guard_clause_functions, sparse
        ),
        D.QUOTES: binary(D.QUOTES, agg.quotes_double, agg.quotes_single, full),
        D.SEMICOLONS: binary(D.SEMICOLONS, agg.semicolons_yes, agg.semicolons_no, full),
        D.TRAILING_COMMAS: binary(
            D.TRAILING_COMMAS, agg.trailing_comma_yes, agg.trailing_comma_no, full
        ),
        D.DECLARATION_COMMA_PLACEMENT: binary(
            D.DECLARATION_COMMA_PLACEMENT, agg.var_comma_leading, agg.var_comma_trailing, sparse
        ),
        D.YODA_CONDITIONS: binary(D.YODA_CONDITIONS, agg.yoda_yes, agg.yoda_no, sparse),
        D.TERNARY_OPERATOR_PLACEMENT: binary(
            D.TERNARY_OPERATOR_PLACEMENT, agg.ternary_leading, agg.ternary_trailing, ultra
        ),
        D.LINE_WIDTH: infer_line_width(
            agg.line_length_max, agg.total_lines - agg.blank_lines, full, conf
        ),
        D.SWITCH_CASE_INDENTATION: binary(
            D.SWITCH_CASE_INDENTATION, agg.switch_case_indented, agg.switch_case_flat, quarter
        ),
        D.SWITCH_BREAK_INDENTATION: binary(
            D.SWITCH_BREAK_INDENTATION,
            agg.switch_break_match_case,
            agg.switch_break_indented,
            quarter,
            max(0.55, conf - 0.2),
        ),
        D.MEMBER_CHAIN_INDENTATION: _member_chain_rule(agg, t, safe(D.MEMBER_CHAIN_INDENTATION)),
        D.CALL_ARGUMENT_LAYOUT: binary(
            D.CALL_ARGUMENT_LAYOUT, agg.call_args_compact, agg.call_args_expanded, sparse
        ),
        D.BLANK_LINE_DENSITY: density_rule(agg.blank_lines, agg.total_lines, full, conf),
        D.BLANK_LINE_BEFORE_RETURN: binary(
            D.BLANK_LINE_BEFORE_RETURN,
            agg.blank_before_return_yes,
            agg.blank_before_return_no,
            sparse,
        ),
        D.BLANK_LINE_BEFORE_IF: binary(
            D.BLANK_LINE_BEFORE_IF, agg.blank_before_if_yes, agg.blank_before_if_no, sparse
        ),
        D.IMPORT_ORDERING: binary(
            D.IMPORT_ORDERING, agg.import_sorted_groups, agg.import_unsorted_groups, quarter
        ),
    }

    kind = binary(D.INDENTATION_KIND, agg.indent_space_lines, agg.indent_tab_lines, full)
    rules[D.INDENTATION_KIND] = kind
    size_safe = safe(D.INDENTATION_SIZE)
    if kind.enforced and kind.value == "space":
        rules[D.INDENTATION_SIZE] = InferredRule(
            value=infer_indent_unit(agg.indent_histogram),
            status=RuleStatus.ENFORCED,
            confidence=kind.confidence,
            evidence_count=agg.indent_space_lines,
            auto_fix_safe=size_safe,
        )
    else:
        rules[D.INDENTATION_SIZE] = InferredRule.undetermined(
            confidence=kind.confidence,
            evidence_count=agg.indent_space_lines,
            auto_fix_safe=size_safe,
        )

    # Dimension order, independent of the construction order above.
    return {dimension: rules[dimension] for dimension in Dimension}
