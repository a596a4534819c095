"""
idiolect.inference.profile -- The learned style profile.

``StyleProfile`` bundles the inferred rules with the evidence totals
behind them, a confidence summary and the preferences that are
deliberately never auto-fixed.  Document formats beyond ``to_dict``
belong to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from idiolect.core.types import Dimension, InferredRule, Thresholds
from idiolect.extraction.signals import AggregateSignals
from idiolect.inference.rules import infer_rules

# Preferences that only a human should act on.
NON_FIXABLE_PREFERENCES: Dict[Dimension, str] = {
    Dimension.FUNCTION_WORD_COUNT: "Renaming functions can break public APIs and call sites.",
    Dimension.FUNCTION_EXPRESSION_NAMING: (
        "Converting anonymous functions to named forms can alter stack traces "
        "and callback semantics."
    ),
    Dimension.PREFER_DOC_COMMENTS: (
        "Automatically generating doc comments is lossy without semantic context."
    ),
    Dimension.GUARD_CLAUSES: (
        "Guard-clause refactors can alter readability and control flow intent."
    ),
    Dimension.COMMENT_BLOCK_FRAMING: (
        "Comment framing style is context-sensitive and should be reviewed "
        "before enforcement."
    ),
    Dimension.TRAILING_INLINE_COMMENT_ALIGNMENT: (
        "Aligning trailing inline comments is layout-sensitive and can conflict "
        "with line-length constraints."
    ),
}


def evidence_totals(agg: AggregateSignals) -> Dict[str, int]:
    """Observation counts per construct, for reporting."""
    return {
        "lineComments": agg.line_comment_space + agg.line_comment_tight,
        "functions": agg.functions_total,
        "functionNames": agg.function_names_single + agg.function_names_multi,
        "functionExpressions": agg.function_expr_named + agg.function_expr_anonymous,
        "ifStatements": agg.if_with_braces + agg.if_without_braces,
        "yodaComparisons": agg.yoda_yes + agg.yoda_no,
        "multilineTernaries": agg.ternary_leading + agg.ternary_trailing,
        "guardClauseFunctions": agg.guard_clause_functions + agg.non_guard_clause_functions,
        "commentBlocks": agg.comment_framed_blocks + agg.comment_plain_blocks,
        "trailingInlineCommentPairs": (
            agg.inline_comment_aligned_pairs + agg.inline_comment_unaligned_pairs
        ),
        "strings": agg.quotes_single + agg.quotes_double,
        "semicolonStatements": agg.semicolons_yes + agg.semicolons_no,
        "trailingCommaSites": agg.trailing_comma_yes + agg.trailing_comma_no,
        "variableDeclarationCommaPlacements": agg.var_comma_leading + agg.var_comma_trailing,
        "indentationLines": agg.indent_space_lines + agg.indent_tab_lines,
        "blankLineBeforeReturnSites": agg.blank_before_return_yes + agg.blank_before_return_no,
        "blankLineBeforeIfSites": agg.blank_before_if_yes + agg.blank_before_if_no,
        "switchCaseLabels": agg.switch_case_indented + agg.switch_case_flat,
        "switchCaseBreaks": agg.switch_break_match_case + agg.switch_break_indented,
        "memberExpressionChains": agg.member_aligned + agg.member_indented,
        "multilineCalls": agg.call_args_compact + agg.call_args_expanded,
        "maxLineLength": agg.line_length_max,
        "importGroups": agg.import_sorted_groups + agg.import_unsorted_groups,
    }


@dataclass
class StyleProfile:
    """Inferred rules for one learning run."""

    rules: Dict[Dimension, InferredRule]
    evidence: Dict[str, int] = field(default_factory=dict)
    files_analyzed: int = 0
    sampled_files: List[str] = field(default_factory=list)
    augmented_rules: int = 0

    def rule(self, dimension: Dimension) -> InferredRule:
        return self.rules[dimension]

    def value(self, dimension: Dimension) -> Any:
        """The enforced value of ``dimension``, or None."""
        rule = self.rules.get(dimension)
        return rule.value if rule is not None else None

    def enforced(self) -> Dict[Dimension, InferredRule]:
        return {d: r for d, r in self.rules.items() if r.enforced}

    @property
    def confidence_by_rule(self) -> Dict[str, float]:
        return {d.value: r.confidence for d, r in self.rules.items()}

    @property
    def overall_confidence(self) -> float:
        values = list(self.confidence_by_rule.values())
        return sum(values) / len(values) if values else 0.0

    @property
    def non_fixable_preferences(self) -> List[Dict[str, str]]:
        return [
            {"rule": dimension.value, "reason": reason}
            for dimension, reason in NON_FIXABLE_PREFERENCES.items()
        ]

    def to_dict(self) -> Dict[str, Any]:
        rules: Dict[str, Dict[str, Any]] = {}
        for dimension, rule in self.rules.items():
            group, name = dimension.value.split(".", 1)
            rules.setdefault(group, {})[name] = rule.to_dict()
        return {
            "rules": rules,
            "evidence": dict(self.evidence),
            "sources": {
                "filesAnalyzed": self.files_analyzed,
                "sampledFiles": list(self.sampled_files),
            },
            "confidenceSummary": {
                "overall": round(self.overall_confidence, 4),
                "byRule": {k: round(v, 4) for k, v in self.confidence_by_rule.items()},
            },
            "nonFixablePreferences": self.non_fixable_preferences,
            "augmentedRules": self.augmented_rules,
        }


def infer_profile(
    agg: AggregateSignals,
    thresholds: Optional[Thresholds] = None,
    sampled_files: Optional[List[str]] = None,
) -> StyleProfile:
    """Infer every rule and wrap the result with its evidence."""
    return StyleProfile(
        rules=infer_rules(agg, thresholds),
        evidence=evidence_totals(agg),
        files_analyzed=agg.file_count,
        sampled_files=list(sampled_files or []),
    )
