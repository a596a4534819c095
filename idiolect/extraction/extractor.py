"""
idiolect.extraction.extractor -- Turn one parsed file into FileSignals.

Combines the line scan (``layout``), the comment scan (``comments``)
and a single pre-order walk over the syntax tree.  Every handler reads
positions from ``ParsedSource`` and bails out quietly on anything it
cannot classify, so broken trees produce fewer signals instead of
errors.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List, Optional, Tuple

from idiolect.extraction.comments import collect_comment_signals
from idiolect.extraction.layout import collect_line_layout
from idiolect.extraction.parser import ParsedSource, code_children, walk
from idiolect.extraction.predicates import (
    COMPARISON_OPERATORS,
    LOGICAL_OPERATORS,
    declaration_comma_placement,
    has_blank_line_before,
    is_doc_comment,
    is_guard_exit,
    name_word_count,
    ordering_vote,
    ternary_placement,
    yoda_classification,
)
from idiolect.extraction.signals import FileSignals, SignalAccumulator

log = logging.getLogger(__name__)

FUNCTION_TYPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "function_expression",
        "function",
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)
FUNCTION_EXPRESSION_TYPES = frozenset({"function_expression", "function", "generator_function"})
DECLARATION_TYPES = frozenset({"lexical_declaration", "variable_declaration"})
BLOCK_TYPES = frozenset({"statement_block", "program"})
LIST_TYPES = frozenset({"formal_parameters", "arguments", "array", "object"})
FOR_HEADER_PARENTS = frozenset({"for_statement", "for_in_statement"})

_CONTINUATION_RE = re.compile(r"^(\s*)\??\.")


def extract_file_signals(parsed: ParsedSource) -> FileSignals:
    """Collect every style signal from one parsed file."""
    acc = SignalAccumulator()
    acc.add("total_lines", len(parsed.lines))
    collect_line_layout(parsed.lines, acc)

    extractor = _TreeExtractor(parsed, acc)
    comments = extractor.run()
    collect_comment_signals(parsed, comments, acc)

    acc.finalize_member_votes()
    return acc.freeze()


class _TreeExtractor:
    """One walk over the tree, dispatching by node type."""

    def __init__(self, parsed: ParsedSource, acc: SignalAccumulator):
        self.parsed = parsed
        self.acc = acc
        self._handlers: Dict[str, Callable] = {
            "if_statement": self._on_if,
            "ternary_expression": self._on_ternary,
            "switch_statement": self._on_switch,
            "member_expression": self._on_member,
            "string": self._on_string,
            "expression_statement": self._on_semicolon_statement,
            "return_statement": self._on_return,
            "import_statement": self._on_semicolon_statement,
            "call_expression": self._on_call,
        }
        for kind in FUNCTION_TYPES:
            self._handlers[kind] = self._on_function
        for kind in DECLARATION_TYPES:
            self._handlers[kind] = self._on_declaration
        for kind in LIST_TYPES:
            self._handlers[kind] = self._on_list

    def run(self) -> List:
        comments = []
        for node, ancestors in walk(self.parsed.root):
            if node.type == "comment":
                comments.append(node)
                continue
            if node.is_missing or node.type == "ERROR":
                continue
            handler = self._handlers.get(node.type)
            if handler is None:
                continue
            try:
                handler(node, ancestors)
            except (AttributeError, IndexError, TypeError, ValueError) as exc:
                log.debug("Skipping %s at row %d: %s", node.type, node.start_point[0], exc)
        self._collect_imports()
        return comments

    # -- functions ----------------------------------------------------------

    def _on_function(self, node, ancestors: Tuple) -> None:
        parsed = self.parsed
        if node.type in FUNCTION_EXPRESSION_TYPES:
            named = node.child_by_field_name("name") is not None
            self.acc.vote(named, "function_expr_named", "function_expr_anonymous")

        top_level = _top_level_binding(node, ancestors)
        if top_level is not None:
            name_node, statement = top_level
            self.acc.add("functions_total")
            if name_node is not None and name_node.type == "identifier":
                words = name_word_count(parsed.node_text(name_node))
                self.acc.vote(words <= 1, "function_names_single", "function_names_multi")
            previous = statement.prev_named_sibling
            if (
                previous is not None
                and previous.type == "comment"
                and is_doc_comment(parsed.node_text(previous))
                and parsed.row(statement) - parsed.end_row(previous) <= 1
            ):
                self.acc.add("functions_with_doc")

        body = node.child_by_field_name("body")
        if body is not None and body.type == "statement_block":
            statements = [c for c in code_children(body) if c.type != "empty_statement"]
            if len(statements) >= 2:
                first = statements[0]
                guard = (
                    first.type == "if_statement"
                    and first.child_by_field_name("alternative") is None
                    and is_guard_exit(first.child_by_field_name("consequence"))
                )
                self.acc.vote(guard, "guard_clause_functions", "non_guard_clause_functions")

    # -- conditionals -------------------------------------------------------

    def _on_if(self, node, ancestors: Tuple) -> None:
        parsed = self.parsed
        condition = node.child_by_field_name("condition")
        self._yoda(condition)

        if _is_later_statement(node, ancestors):
            self.acc.vote(
                has_blank_line_before(parsed.row(node), parsed.lines),
                "blank_before_if_yes",
                "blank_before_if_no",
            )

        if node.child_by_field_name("alternative") is not None:
            return
        consequence = node.child_by_field_name("consequence")
        if consequence is None or parsed.is_multiline(node):
            return
        if consequence.type == "statement_block":
            if len(code_children(consequence)) == 1:
                self.acc.add("if_with_braces")
            return
        self.acc.add("if_without_braces")

    def _yoda(self, node) -> None:
        if node is None:
            return
        if node.type == "parenthesized_expression":
            for child in code_children(node):
                self._yoda(child)
            return
        if node.type != "binary_expression":
            return
        operator = node.child_by_field_name("operator")
        op = operator.type if operator is not None else ""
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if op in LOGICAL_OPERATORS:
            self._yoda(left)
            self._yoda(right)
            return
        if op not in COMPARISON_OPERATORS:
            return
        verdict = yoda_classification(left, right)
        if verdict is not None:
            self.acc.vote(verdict, "yoda_yes", "yoda_no")

    def _on_ternary(self, node, ancestors: Tuple) -> None:
        parsed = self.parsed
        if not parsed.is_multiline(node):
            return
        test = node.child_by_field_name("condition")
        consequence = node.child_by_field_name("consequence")
        alternative = node.child_by_field_name("alternative")
        if test is None or consequence is None or alternative is None:
            return
        placement = ternary_placement(
            parsed.text,
            parsed.end(test),
            parsed.start(consequence),
            parsed.end(consequence),
            parsed.start(alternative),
        )
        if placement is not None:
            self.acc.vote(placement == "leading", "ternary_leading", "ternary_trailing")

    def _on_switch(self, node, ancestors: Tuple) -> None:
        parsed = self.parsed
        body = node.child_by_field_name("body")
        if body is None:
            return
        switch_column = parsed.column(node)
        for case in code_children(body):
            if case.type not in ("switch_case", "switch_default"):
                continue
            case_column = parsed.column(case)
            self.acc.vote(case_column > switch_column, "switch_case_indented", "switch_case_flat")
            for statement in case.children_by_field_name("body"):
                if statement.type != "break_statement":
                    continue
                self.acc.vote(
                    parsed.column(statement) <= case_column,
                    "switch_break_match_case",
                    "switch_break_indented",
                )

    # -- expressions --------------------------------------------------------

    def _on_member(self, node, ancestors: Tuple) -> None:
        parsed = self.parsed
        obj = node.child_by_field_name("object")
        prop = node.child_by_field_name("property")
        if obj is None or prop is None:
            return
        prop_row = parsed.row(prop)
        if prop_row <= parsed.row(obj):
            return
        match = _CONTINUATION_RE.match(parsed.line(prop_row))
        if not match:
            return
        self.acc.vote(
            len(match.group(1)) <= parsed.column(obj), "member_aligned", "member_indented"
        )

    def _on_string(self, node, ancestors: Tuple) -> None:
        first = self.parsed.node_text(node)[:1]
        if first == "'":
            self.acc.add("quotes_single")
        elif first == '"':
            self.acc.add("quotes_double")

    def _on_call(self, node, ancestors: Tuple) -> None:
        parsed = self.parsed
        arguments = node.child_by_field_name("arguments")
        if arguments is None or arguments.type != "arguments":
            return
        items = code_children(arguments)
        if not items or not parsed.is_multiline(arguments):
            return
        self.acc.vote(
            parsed.row(items[0]) == parsed.row(arguments),
            "call_args_compact",
            "call_args_expanded",
        )

    def _on_list(self, node, ancestors: Tuple) -> None:
        parsed = self.parsed
        items = code_children(node)
        if len(items) < 2 or not parsed.is_multiline(node):
            return
        between = parsed.text[parsed.end(items[-1]):parsed.end(node) - 1]
        self.acc.vote("," in between, "trailing_comma_yes", "trailing_comma_no")

    # -- statements ---------------------------------------------------------

    def _on_semicolon_statement(self, node, ancestors: Tuple) -> None:
        if ancestors and ancestors[-1].type in FOR_HEADER_PARENTS:
            if ancestors[-1].child_by_field_name("body") != node:
                return
        text = self.parsed.node_text(node)
        if text:
            self.acc.vote(text.rstrip().endswith(";"), "semicolons_yes", "semicolons_no")

    def _on_return(self, node, ancestors: Tuple) -> None:
        self._on_semicolon_statement(node, ancestors)
        if _is_later_statement(node, ancestors):
            self.acc.vote(
                has_blank_line_before(self.parsed.row(node), self.parsed.lines),
                "blank_before_return_yes",
                "blank_before_return_no",
            )

    def _on_declaration(self, node, ancestors: Tuple) -> None:
        self._on_semicolon_statement(node, ancestors)

        text = self.parsed.text
        declarators = [c for c in node.named_children if c.type == "variable_declarator"]
        for previous, current in zip(declarators, declarators[1:]):
            placement = declaration_comma_placement(
                text[self.parsed.end(previous):self.parsed.start(current)]
            )
            if placement is not None:
                self.acc.vote(placement == "leading", "var_comma_leading", "var_comma_trailing")

    def _collect_imports(self) -> None:
        parsed = self.parsed
        imports: List[str] = []
        requires: List[str] = []
        for statement in code_children(parsed.root):
            if statement.type == "import_statement":
                source = statement.child_by_field_name("source")
                if source is not None:
                    imports.append(_string_value(parsed, source))
            elif statement.type in DECLARATION_TYPES:
                for declarator in statement.named_children:
                    if declarator.type != "variable_declarator":
                        continue
                    module = _require_target(parsed, declarator.child_by_field_name("value"))
                    if module is not None:
                        requires.append(module)
            elif statement.type == "expression_statement":
                children = code_children(statement)
                module = _require_target(parsed, children[0] if children else None)
                if module is not None:
                    requires.append(module)

        for group in (imports, requires):
            vote = ordering_vote(group)
            if vote is not None:
                is_sorted, weight = vote
                self.acc.vote(is_sorted, "import_sorted_groups", "import_unsorted_groups", weight)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _unwrap_export(statement, ancestors: Tuple, depth: int):
    """Return the outermost top-level statement for ``statement``, or None.

    ``depth`` is the index of ``statement``'s parent in ``ancestors``.
    """
    if depth < 0:
        return None
    parent = ancestors[depth]
    if parent.type == "program":
        return statement
    if parent.type == "export_statement" and depth >= 1 and ancestors[depth - 1].type == "program":
        return parent
    return None


def _top_level_binding(node, ancestors: Tuple) -> Optional[Tuple[object, object]]:
    """``(name_node, outer_statement)`` for top-level functions, else None."""
    if not ancestors:
        return None
    if node.type in ("function_declaration", "generator_function_declaration"):
        statement = _unwrap_export(node, ancestors, len(ancestors) - 1)
        if statement is None:
            return None
        return node.child_by_field_name("name"), statement

    if node.type in ("function_expression", "function", "generator_function", "arrow_function"):
        if len(ancestors) < 3:
            return None
        declarator = ancestors[-1]
        declaration = ancestors[-2]
        if declarator.type != "variable_declarator" or declaration.type not in DECLARATION_TYPES:
            return None
        if declarator.child_by_field_name("value") != node:
            return None
        statement = _unwrap_export(declaration, ancestors, len(ancestors) - 3)
        if statement is None:
            return None
        return declarator.child_by_field_name("name"), statement
    return None


def _is_later_statement(node, ancestors: Tuple) -> bool:
    """In a block of two or more statements, and not the first one."""
    if not ancestors or ancestors[-1].type not in BLOCK_TYPES:
        return False
    siblings = code_children(ancestors[-1])
    return len(siblings) >= 2 and siblings[0] != node


def _string_value(parsed: ParsedSource, node) -> str:
    return parsed.node_text(node)[1:-1]


def _require_target(parsed: ParsedSource, node) -> Optional[str]:
    if node is None or node.type != "call_expression":
        return None
    function = node.child_by_field_name("function")
    if function is None or function.type != "identifier" or parsed.node_text(function) != "require":
        return None
    arguments = node.child_by_field_name("arguments")
    if arguments is None:
        return None
    items = code_children(arguments)
    if len(items) != 1 or items[0].type != "string":
        return None
    return _string_value(parsed, items[0])
