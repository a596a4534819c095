"""Tests for idiolect.extraction -- parsing and per-file signal extraction."""

from idiolect.core.types import Dimension, RuleStatus, Thresholds
from idiolect.extraction.parser import language_for_path, parse_clean, parse_source, walk
from idiolect.extraction.signals import aggregate_signals
from idiolect.inference.rules import infer_rules


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParser:
    """Parsing, offsets and traversal."""

    def test_language_for_path(self):
        assert language_for_path("src/app.ts") == "typescript"
        assert language_for_path("src/app.mts") == "typescript"
        assert language_for_path("src/App.tsx") == "tsx"
        assert language_for_path("src/app.js") == "javascript"
        assert language_for_path("src/App.jsx") == "javascript"
        assert language_for_path(None) == "javascript"

    def test_unknown_language(self):
        assert parse_source("const a = 1;", "cobol") is None

    def test_errors_are_reported(self, parse):
        assert not parse("const a = 1;\n").has_errors
        assert parse("function (\n").has_errors
        assert parse_clean("function (\n") is None

    def test_typescript(self, parse):
        parsed = parse("const a: number = 1;\n", "typescript")
        assert not parsed.has_errors
        assert parse("const a: number = 1;\n").has_errors

    def test_character_columns_with_non_ascii(self, parse):
        parsed = parse('const s = "héllo"; const t = 1;\n')
        names = [
            parsed.node_text(n)
            for n, _ in walk(parsed.root)
            if n.type == "identifier"
        ]
        assert names == ["s", "t"]
        t_node = next(
            n for n, _ in walk(parsed.root)
            if n.type == "identifier" and parsed.node_text(n) == "t"
        )
        assert parsed.column(t_node) == parsed.lines[0].index("t =")
        assert parsed.text[parsed.start(t_node):parsed.end(t_node)] == "t"

    def test_walk_yields_ancestors(self, parse):
        parsed = parse("foo(bar);\n")
        for node, ancestors in walk(parsed.root):
            if node.type == "identifier" and parsed.node_text(node) == "bar":
                assert [a.type for a in ancestors] == [
                    "program",
                    "expression_statement",
                    "call_expression",
                    "arguments",
                ]
                break
        else:
            raise AssertionError("identifier not found")


# ---------------------------------------------------------------------------
# Rule outcomes
# ---------------------------------------------------------------------------


class TestRuleOutcomes:
    """Signals that decide quote and brace rules."""

    def test_braced_single_line_if_requires_braces(self, signals):
        record = signals("if (a) { b(); }\n")
        assert record.if_with_braces == 1
        assert record.if_without_braces == 0

        rules = infer_rules(aggregate_signals([record]), Thresholds(1, 0.5))
        rule = rules[Dimension.SINGLE_LINE_IF_BRACES]
        assert rule.status == RuleStatus.ENFORCED
        assert rule.value == "require"

    def test_double_quotes_win(self, signals):
        record = signals(
            'const a = "x";\nconst b = "y";\nconst c = "z";\nconst d = \'w\';\n'
        )
        assert record.quotes_double == 3
        assert record.quotes_single == 1

        rules = infer_rules(aggregate_signals([record]), Thresholds(2, 0.75))
        rule = rules[Dimension.QUOTES]
        assert rule.confidence == 0.75
        assert rule.status == RuleStatus.ENFORCED
        assert rule.value == "double"


# ---------------------------------------------------------------------------
# Individual signals
# ---------------------------------------------------------------------------


class TestCommentSignals:
    """Line comment, doc comment and framing signals."""

    def test_line_comment_spacing(self, signals):
        record = signals("// hello\n//tight\n// eslint-disable\nconst a = 1;\n")
        assert record.line_comment_space == 1
        assert record.line_comment_tight == 1

    def test_framed_block(self, signals):
        record = signals("//\n// Section\n//\nconst a = 1;\n")
        assert record.comment_framed_blocks == 1
        assert record.comment_plain_blocks == 0

    def test_plain_block(self, signals):
        record = signals("// first\n// second\nconst a = 1;\n")
        assert record.comment_plain_blocks == 1

    def test_aligned_inline_comments(self, signals):
        record = signals("const a = 1;     // one\nconst bb = 22;   // two\n")
        assert record.inline_comment_aligned_pairs == 1
        assert record.inline_comment_unaligned_pairs == 0

    def test_single_spaced_inline_comments(self, signals):
        record = signals("const a = 1; // one\nconst bb = 22; // two\n")
        assert record.inline_comment_unaligned_pairs == 1

    def test_ambiguous_pair_is_not_counted(self, signals):
        record = signals("const a = 1; // one\nconst b = 2; // two\n")
        assert record.inline_comment_aligned_pairs == 0
        assert record.inline_comment_unaligned_pairs == 0

    def test_blank_line_splits_groups(self, signals):
        record = signals("const a = 1;   // one\n\nconst bb = 22; // two\n")
        assert record.inline_comment_aligned_pairs == 0
        assert record.inline_comment_unaligned_pairs == 0


class TestFunctionSignals:
    """Function naming, docs and guard clauses."""

    SOURCE = (
        "/** Adds. */\n"
        "function add(a, b) {\n"
        "  return a + b;\n"
        "}\n"
        "\n"
        "export function fetchUserData() {}\n"
        "\n"
        "const run = () => {};\n"
    )

    def test_top_level_functions(self, signals):
        record = signals(self.SOURCE)
        assert record.functions_total == 3
        assert record.functions_with_doc == 1

    def test_name_words(self, signals):
        record = signals(self.SOURCE)
        assert record.function_names_single == 2
        assert record.function_names_multi == 1

    def test_nested_functions_are_not_top_level(self, signals):
        record = signals("function outer() {\n  function inner() {}\n}\n")
        assert record.functions_total == 1

    def test_function_expression_naming(self, signals):
        record = signals("setTimeout(function () {}, 1);\nlist.map(function each(x) {});\n")
        assert record.function_expr_named == 1
        assert record.function_expr_anonymous == 1

    def test_guard_clauses(self, signals):
        record = signals(
            "function a(x) {\n  if (!x) return;\n  run(x);\n}\n"
            "function b(x) {\n  run(x);\n  return x;\n}\n"
        )
        assert record.guard_clause_functions == 1
        assert record.non_guard_clause_functions == 1


class TestStatementSignals:
    """Statement-level syntax signals."""

    def test_semicolons(self, signals):
        record = signals("a();\nb()\n")
        assert record.semicolons_yes == 1
        assert record.semicolons_no == 1

    def test_for_header_is_not_a_statement(self, signals):
        record = signals("for (let i = 0; i < n; i++) {}\n")
        assert record.semicolons_yes == 0
        assert record.semicolons_no == 0

    def test_trailing_commas(self, signals):
        record = signals("foo(\n  a,\n  b,\n);\nbar(\n  a,\n  b\n);\n")
        assert record.trailing_comma_yes == 1
        assert record.trailing_comma_no == 1

    def test_declaration_commas(self, signals):
        record = signals("var a = 1,\n    b = 2;\nvar c = 3\n  , d = 4;\n")
        assert record.var_comma_trailing == 1
        assert record.var_comma_leading == 1

    def test_yoda(self, signals):
        record = signals("if (1 === x) {}\nif (x === 1) {}\nif (a && 'b' == c) {}\n")
        assert record.yoda_yes == 2
        assert record.yoda_no == 1

    def test_blank_line_before_if(self, signals):
        record = signals("if (1 === x) {}\nif (x === 1) {}\n\nif (y) {}\n")
        assert record.blank_before_if_no == 1
        assert record.blank_before_if_yes == 1

    def test_blank_line_before_return(self, signals):
        record = signals(
            "function f() {\n  a();\n\n  return 1;\n}\n"
            "function g() {\n  a();\n  return 2;\n}\n"
            "function h() {\n  return 3;\n}\n"
        )
        assert record.blank_before_return_yes == 1
        assert record.blank_before_return_no == 1

    def test_single_line_if_without_braces(self, signals):
        record = signals("if (a) b();\nif (c) {\n  d();\n}\n")
        assert record.if_without_braces == 1
        assert record.if_with_braces == 0


class TestLayoutSignals:
    """Indentation, switch and chain layout."""

    def test_indentation(self, signals):
        record = signals("function f() {\n  a();\n    b();\n\tc();\n}\n")
        assert record.indent_space_lines == 2
        assert record.indent_tab_lines == 1
        assert record.indent_histogram == {2: 1, 4: 1}
        assert record.total_lines == 6
        assert record.blank_lines == 1

    def test_line_length(self, signals):
        record = signals("a();\nconst longer = 1;\n")
        assert record.line_length_max == len("const longer = 1;")

    def test_switch(self, signals):
        record = signals(
            "switch (x) {\n"
            "  case 1:\n"
            "    go();\n"
            "    break;\n"
            "  default:\n"
            "  break;\n"
            "}\n"
        )
        assert record.switch_case_indented == 2
        assert record.switch_case_flat == 0
        assert record.switch_break_indented == 1
        assert record.switch_break_match_case == 1

    def test_member_chain(self, signals):
        record = signals("promise\n  .then(a)\n  .catch(b);\n")
        assert record.member_indented == 2
        assert record.member_aligned == 0
        assert record.member_indented_files == 1

    def test_aligned_member_chain(self, signals):
        record = signals("const p = promise\n          .then(a);\n")
        assert record.member_aligned == 1
        assert record.member_aligned_files == 0

    def test_ternaries(self, signals):
        record = signals("const v = ok\n  ? a\n  : b;\nconst w = ok ?\n  a :\n  b;\n")
        assert record.ternary_leading == 1
        assert record.ternary_trailing == 1

    def test_call_layout(self, signals):
        record = signals("foo(a,\n  b);\nbar(\n  a,\n  b\n);\n")
        assert record.call_args_compact == 1
        assert record.call_args_expanded == 1


class TestImportSignals:
    """Import ordering."""

    def test_sorted_imports_weighted(self, signals):
        record = signals("import a from 'a';\nimport b from 'b';\nimport c from 'c';\n")
        assert record.import_sorted_groups == 2
        assert record.import_unsorted_groups == 0

    def test_unsorted_requires(self, signals):
        record = signals("const z = require('z');\nconst y = require('y');\n")
        assert record.import_unsorted_groups == 1


class TestBrokenSource:
    """Extraction on source with syntax errors."""

    def test_extraction_does_not_raise(self, signals):
        record = signals("function (\n  if (a {\n")
        assert record.total_lines == 3
