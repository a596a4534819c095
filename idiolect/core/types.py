"""
idiolect.core.types -- Data types shared by inference and normalization.

Every structure here is a plain dataclass or enum: no magic,
serialisable to dict/JSON in one call.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Rule status / provenance
# ---------------------------------------------------------------------------


class RuleStatus(str, Enum):
    """Whether a rule cleared both evidence and confidence thresholds."""

    ENFORCED = "enforced"
    UNDETERMINED = "undetermined"


class Provenance(str, Enum):
    """Where a rule's value came from."""

    DETERMINISTIC = "deterministic"
    EXTERNALLY_AUGMENTED = "externally-augmented"


# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Thresholds:
    """Evidence/confidence gates for rule inference.

    ``min_evidence`` is the full-strength floor.  Dimensions that are
    naturally rare use the reduced floors below, none of which drops
    under two observations.
    """

    min_evidence: int = 30
    min_confidence: float = 0.75

    @property
    def sparse_evidence(self) -> int:
        return max(2, self.min_evidence // 3)

    @property
    def quarter_evidence(self) -> int:
        return max(2, self.min_evidence // 4)

    @property
    def ultra_sparse_evidence(self) -> int:
        return max(2, self.min_evidence // 5)


# ---------------------------------------------------------------------------
# InferredRule
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InferredRule(Generic[T]):
    """One inferred style decision.

    ``value`` is ``None`` exactly when ``status`` is undetermined.
    """

    value: Optional[T]
    status: RuleStatus
    confidence: float
    evidence_count: int
    provenance: Provenance = Provenance.DETERMINISTIC
    auto_fix_safe: bool = False

    def __post_init__(self) -> None:
        if (self.value is None) != (self.status == RuleStatus.UNDETERMINED):
            raise ValueError(
                f"Inconsistent rule: value={self.value!r} with status={self.status.value}"
            )
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Rule confidence out of range: {self.confidence!r}")
        if self.evidence_count < 0:
            raise ValueError(f"Negative evidence count: {self.evidence_count!r}")

    @property
    def enforced(self) -> bool:
        return self.status == RuleStatus.ENFORCED

    @classmethod
    def undetermined(
        cls,
        confidence: float = 0.0,
        evidence_count: int = 0,
        provenance: Provenance = Provenance.DETERMINISTIC,
        auto_fix_safe: bool = False,
    ) -> "InferredRule[Any]":
        return cls(
            value=None,
            status=RuleStatus.UNDETERMINED,
            confidence=confidence,
            evidence_count=evidence_count,
            provenance=provenance,
            auto_fix_safe=auto_fix_safe,
        )

    def demoted(self) -> "InferredRule[T]":
        """Same evidence, but undetermined (used by safe-only application)."""
        return InferredRule(
            value=None,
            status=RuleStatus.UNDETERMINED,
            confidence=self.confidence,
            evidence_count=self.evidence_count,
            provenance=self.provenance,
            auto_fix_safe=self.auto_fix_safe,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "status": self.status.value,
            "confidence": round(self.confidence, 4),
            "evidenceCount": self.evidence_count,
            "provenance": self.provenance.value,
            "autoFixSafe": self.auto_fix_safe,
        }


# ---------------------------------------------------------------------------
# Dimensions
# ---------------------------------------------------------------------------


class Dimension(str, Enum):
    """Closed set of style dimensions a profile can hold."""

    LINE_COMMENT_SPACING = "comments.lineCommentSpacing"
    PREFER_DOC_COMMENTS = "comments.preferJsdocForFunctions"
    COMMENT_BLOCK_FRAMING = "comments.commentBlockFraming"
    TRAILING_INLINE_COMMENT_ALIGNMENT = "comments.trailingInlineCommentAlignment"
    FUNCTION_WORD_COUNT = "naming.functionWordCountPreference"
    FUNCTION_EXPRESSION_NAMING = "naming.functionExpressionNamingPreference"
    SINGLE_LINE_IF_BRACES = "controlFlow.singleLineIfBraces"
    GUARD_CLAUSES = "controlFlow.guardClauses"
    QUOTES = "syntax.quotes"
    SEMICOLONS = "syntax.semicolons"
    TRAILING_COMMAS = "syntax.trailingCommas"
    DECLARATION_COMMA_PLACEMENT = "syntax.variableDeclarationCommaPlacement"
    YODA_CONDITIONS = "syntax.yodaConditions"
    TERNARY_OPERATOR_PLACEMENT = "syntax.multilineTernaryOperatorPlacement"
    LINE_WIDTH = "syntax.lineWidth"
    INDENTATION_KIND = "whitespace.indentationKind"
    INDENTATION_SIZE = "whitespace.indentationSize"
    SWITCH_CASE_INDENTATION = "whitespace.switchCaseIndentation"
    SWITCH_BREAK_INDENTATION = "whitespace.switchCaseBreakIndentation"
    MEMBER_CHAIN_INDENTATION = "whitespace.memberExpressionIndentation"
    CALL_ARGUMENT_LAYOUT = "whitespace.multilineCallArgumentLayout"
    BLANK_LINE_DENSITY = "whitespace.blankLineDensity"
    BLANK_LINE_BEFORE_RETURN = "whitespace.blankLineBeforeReturn"
    BLANK_LINE_BEFORE_IF = "whitespace.blankLineBeforeIf"
    IMPORT_ORDERING = "imports.ordering"

    @classmethod
    def lookup(cls, name: str) -> Optional["Dimension"]:
        """Return the dimension for a dotted name, or None if unknown."""
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass(frozen=True)
class RuleDescriptor:
    """Valid values and auto-fix safety for one dimension.

    Numeric dimensions have no enumerated values; any finite,
    non-negative number is accepted (rounded to an integer).
    """

    values: Tuple[Any, ...] = ()
    numeric: bool = False
    auto_fix_safe: bool = False

    def accepts(self, value: Any) -> bool:
        if self.numeric:
            return False
        # bool is an int subclass; keep True/False from matching 1/0
        return any(type(value) is type(v) and value == v for v in self.values)


RULE_DESCRIPTORS: Dict[Dimension, RuleDescriptor] = {
    Dimension.LINE_COMMENT_SPACING: RuleDescriptor(
        ("space-after-slashes", "tight"), auto_fix_safe=True
    ),
    Dimension.PREFER_DOC_COMMENTS: RuleDescriptor((True, False)),
    Dimension.COMMENT_BLOCK_FRAMING: RuleDescriptor(("framed", "plain")),
    Dimension.TRAILING_INLINE_COMMENT_ALIGNMENT: RuleDescriptor(
        ("aligned", "single-space")
    ),
    Dimension.FUNCTION_WORD_COUNT: RuleDescriptor(("single-word", "multi-word")),
    Dimension.FUNCTION_EXPRESSION_NAMING: RuleDescriptor(("named", "allow-anonymous")),
    Dimension.SINGLE_LINE_IF_BRACES: RuleDescriptor(("omit", "require")),
    Dimension.GUARD_CLAUSES: RuleDescriptor(("prefer", "neutral")),
    Dimension.QUOTES: RuleDescriptor(("double", "single")),
    Dimension.SEMICOLONS: RuleDescriptor(("always", "never")),
    Dimension.TRAILING_COMMAS: RuleDescriptor(("always-multiline", "never")),
    Dimension.DECLARATION_COMMA_PLACEMENT: RuleDescriptor(("leading", "trailing")),
    Dimension.YODA_CONDITIONS: RuleDescriptor(("always", "never"), auto_fix_safe=True),
    Dimension.TERNARY_OPERATOR_PLACEMENT: RuleDescriptor(("leading", "trailing")),
    Dimension.LINE_WIDTH: RuleDescriptor(numeric=True),
    Dimension.INDENTATION_KIND: RuleDescriptor(("space", "tab"), auto_fix_safe=True),
    Dimension.INDENTATION_SIZE: RuleDescriptor(numeric=True, auto_fix_safe=True),
    Dimension.SWITCH_CASE_INDENTATION: RuleDescriptor(
        ("indent", "flat"), auto_fix_safe=True
    ),
    Dimension.SWITCH_BREAK_INDENTATION: RuleDescriptor(
        ("match-case", "indent"), auto_fix_safe=True
    ),
    Dimension.MEMBER_CHAIN_INDENTATION: RuleDescriptor(("aligned", "indented")),
    Dimension.CALL_ARGUMENT_LAYOUT: RuleDescriptor(("compact", "expanded")),
    Dimension.BLANK_LINE_DENSITY: RuleDescriptor(("compact", "spacious")),
    Dimension.BLANK_LINE_BEFORE_RETURN: RuleDescriptor(("always", "never")),
    Dimension.BLANK_LINE_BEFORE_IF: RuleDescriptor(("always", "never")),
    Dimension.IMPORT_ORDERING: RuleDescriptor(("alphabetical", "none")),
}

_missing = set(Dimension) - set(RULE_DESCRIPTORS)
if _missing:  # pragma: no cover - guards edits to the tables above
    raise RuntimeError(f"Dimensions without descriptors: {sorted(d.value for d in _missing)}")
