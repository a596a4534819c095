"""Tests for idiolect.normalize.pipeline -- applying a whole profile."""

from idiolect.core.config import Config
from idiolect.core.types import Dimension, InferredRule, RuleStatus
from idiolect.extraction.signals import AggregateSignals
from idiolect.inference.profile import infer_profile
from idiolect.normalize.pipeline import (
    enforced_value,
    indentation,
    normalize_file,
    normalize_source,
    safe_only,
)

TS_SOURCE = "const a: number = 1;\nif (a)\n  go();\n"


class TestRuleHelpers:
    """Reading enforced values from rules."""

    def test_enforced_value(self, enforced):
        rules = {
            Dimension.QUOTES: enforced("double"),
            Dimension.SEMICOLONS: InferredRule.undetermined(confidence=0.5, evidence_count=3),
        }
        assert enforced_value(rules, Dimension.QUOTES) == "double"
        assert enforced_value(rules, Dimension.SEMICOLONS) is None
        assert enforced_value(rules, Dimension.YODA_CONDITIONS) is None

    def test_default_indentation(self):
        assert indentation({}) == ("space", 2)

    def test_enforced_indentation(self, enforced):
        rules = {
            Dimension.INDENTATION_KIND: enforced("space"),
            Dimension.INDENTATION_SIZE: enforced(4),
        }
        assert indentation(rules) == ("space", 4)

    def test_tabs_without_size(self, enforced):
        assert indentation({Dimension.INDENTATION_KIND: enforced("tab")}) == ("tab", 2)

    def test_safe_only_demotes_unsafe_rules(self, enforced):
        rules = {
            Dimension.SINGLE_LINE_IF_BRACES: enforced("omit"),
            Dimension.SWITCH_BREAK_INDENTATION: enforced("match-case", auto_fix_safe=True),
        }
        filtered = safe_only(rules)
        assert filtered[Dimension.SINGLE_LINE_IF_BRACES].status == RuleStatus.UNDETERMINED
        assert filtered[Dimension.SWITCH_BREAK_INDENTATION].value == "match-case"
        assert rules[Dimension.SINGLE_LINE_IF_BRACES].enforced

    def test_accepts_profile(self):
        profile = infer_profile(AggregateSignals(indent_tab_lines=50))
        assert indentation(profile) == ("tab", 2)


class TestNormalizeSource:
    """Chaining normalizers over one source."""

    def test_chain_repeats_until_settled(self, enforced):
        rules = {
            Dimension.SINGLE_LINE_IF_BRACES: enforced("omit"),
            Dimension.CALL_ARGUMENT_LAYOUT: enforced("compact"),
        }
        source = "if (a)\n  go(\n    1,\n    2\n  );\n"
        assert normalize_source(source, rules) == "if (a) go(1, 2);\n"

    def test_undetermined_rules_skipped(self):
        rules = {Dimension.SINGLE_LINE_IF_BRACES: InferredRule.undetermined()}
        source = "if (a)\n  go();\n"
        assert normalize_source(source, rules) == source

    def test_uses_profile_indentation(self, enforced):
        rules = {
            Dimension.INDENTATION_KIND: enforced("space"),
            Dimension.INDENTATION_SIZE: enforced(4),
            Dimension.MEMBER_CHAIN_INDENTATION: enforced("indented"),
        }
        source = "promise\n.then(a);\n"
        assert normalize_source(source, rules) == "promise\n    .then(a);\n"

    def test_reference_passed_through(self, enforced):
        rules = {Dimension.TERNARY_OPERATOR_PLACEMENT: enforced("leading")}
        reference = "const v = ok\n    ? a\n    : b;\n"
        assert normalize_source("const v = ok ? a : b;\n", rules, reference=reference) == reference

    def test_idempotent(self, enforced):
        rules = {
            Dimension.SINGLE_LINE_IF_BRACES: enforced("omit"),
            Dimension.MEMBER_CHAIN_INDENTATION: enforced("aligned"),
            Dimension.DECLARATION_COMMA_PLACEMENT: enforced("leading"),
            Dimension.TRAILING_INLINE_COMMENT_ALIGNMENT: enforced("aligned"),
        }
        source = (
            "var a = 1,\n    b = 2;\n"
            "const x = 1; // one\nconst yy = 22; // two\n"
            "if (a)\n  run();\n"
        )
        once = normalize_source(source, rules)
        assert once != source
        assert normalize_source(once, rules) == once


class TestNormalizeFile:
    """Config and path handling."""

    def test_safe_only_config(self, enforced):
        rules = {
            Dimension.SINGLE_LINE_IF_BRACES: enforced("omit"),
            Dimension.SWITCH_BREAK_INDENTATION: enforced("match-case", auto_fix_safe=True),
        }
        source = "if (a)\n  go();\nswitch (x) {\n  case 1:\n    break;\n}\n"
        result = normalize_file(source, rules, Config(safe_only=True))
        assert result == "if (a)\n  go();\nswitch (x) {\n  case 1:\n  break;\n}\n"

    def test_language_from_path(self, enforced):
        rules = {Dimension.SINGLE_LINE_IF_BRACES: enforced("omit")}
        expected = "const a: number = 1;\nif (a) go();\n"
        assert normalize_file(TS_SOURCE, rules, path="src/a.ts") == expected

    def test_default_language_from_config(self, enforced):
        rules = {Dimension.SINGLE_LINE_IF_BRACES: enforced("omit")}
        assert normalize_file(TS_SOURCE, rules) == TS_SOURCE
        typed = normalize_file(TS_SOURCE, rules, Config(default_language="typescript"))
        assert typed == "const a: number = 1;\nif (a) go();\n"
