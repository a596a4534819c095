"""
idiolect.extraction.signals -- Per-file signal records and aggregation.

Extraction threads one ``SignalAccumulator`` through a single file and
freezes it into a ``FileSignals`` record.  ``aggregate_signals`` merges
any number of records into an ``AggregateSignals`` without touching
its inputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, Tuple


@dataclass(frozen=True)
class FileSignals:
    """Counters observed in one source file.

    Paired counters hold the two outcomes of one style decision.
    ``indent_space_sizes`` is a sorted tuple of ``(width, lines)``.
    """

    line_comment_space: int = 0
    line_comment_tight: int = 0
    functions_total: int = 0
    functions_with_doc: int = 0
    function_names_single: int = 0
    function_names_multi: int = 0
    function_expr_named: int = 0
    function_expr_anonymous: int = 0
    if_with_braces: int = 0
    if_without_braces: int = 0
    quotes_single: int = 0
    quotes_double: int = 0
    semicolons_yes: int = 0
    semicolons_no: int = 0
    trailing_comma_yes: int = 0
    trailing_comma_no: int = 0
    var_comma_leading: int = 0
    var_comma_trailing: int = 0
    indent_space_lines: int = 0
    indent_tab_lines: int = 0
    switch_case_indented: int = 0
    switch_case_flat: int = 0
    switch_break_match_case: int = 0
    switch_break_indented: int = 0
    member_aligned: int = 0
    member_indented: int = 0
    member_aligned_files: int = 0
    member_indented_files: int = 0
    yoda_yes: int = 0
    yoda_no: int = 0
    ternary_leading: int = 0
    ternary_trailing: int = 0
    guard_clause_functions: int = 0
    non_guard_clause_functions: int = 0
    blank_before_return_yes: int = 0
    blank_before_return_no: int = 0
    blank_before_if_yes: int = 0
    blank_before_if_no: int = 0
    comment_framed_blocks: int = 0
    comment_plain_blocks: int = 0
    inline_comment_aligned_pairs: int = 0
    inline_comment_unaligned_pairs: int = 0
    call_args_compact: int = 0
    call_args_expanded: int = 0
    import_sorted_groups: int = 0
    import_unsorted_groups: int = 0
    blank_lines: int = 0
    total_lines: int = 0
    line_length_max: int = 0
    indent_space_sizes: Tuple[Tuple[int, int], ...] = ()

    @property
    def indent_histogram(self) -> Dict[int, int]:
        return dict(self.indent_space_sizes)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {f.name: getattr(self, f.name) for f in fields(self)}
        data["indent_space_sizes"] = {str(k): v for k, v in self.indent_space_sizes}
        return data


@dataclass(frozen=True)
class AggregateSignals(FileSignals):
    """Sum of many ``FileSignals`` (max for ``line_length_max``)."""

    file_count: int = 0


# Every counter that aggregates by summation.
SUMMED_COUNTERS: Tuple[str, ...] = tuple(
    f.name
    for f in fields(FileSignals)
    if f.name not in ("line_length_max", "indent_space_sizes")
)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


@dataclass
class SignalAccumulator:
    """Mutable counter bag for a single file's extraction pass."""

    counts: Dict[str, int] = field(
        default_factory=lambda: dict.fromkeys(SUMMED_COUNTERS, 0)
    )
    line_length_max: int = 0
    indent_space_sizes: Dict[int, int] = field(default_factory=dict)

    def add(self, name: str, amount: int = 1) -> None:
        if name not in self.counts:
            raise KeyError(f"Unknown signal counter: {name}")
        self.counts[name] += amount

    def vote(self, yes: bool, yes_name: str, no_name: str, amount: int = 1) -> None:
        self.add(yes_name if yes else no_name, amount)

    def observe_line_length(self, length: int) -> None:
        if length > self.line_length_max:
            self.line_length_max = length

    def observe_indent(self, width: int) -> None:
        self.indent_space_sizes[width] = self.indent_space_sizes.get(width, 0) + 1

    def finalize_member_votes(self) -> None:
        """Turn this file's chain observations into at most one vote."""
        aligned = self.counts["member_aligned"]
        indented = self.counts["member_indented"]
        if aligned + indented < 2:
            return
        if aligned > indented:
            self.counts["member_aligned_files"] += 1
        elif indented > aligned:
            self.counts["member_indented_files"] += 1

    def freeze(self) -> FileSignals:
        return FileSignals(
            line_length_max=self.line_length_max,
            indent_space_sizes=tuple(sorted(self.indent_space_sizes.items())),
            **self.counts,
        )


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def aggregate_signals(records: Iterable[FileSignals]) -> AggregateSignals:
    """Merge per-file records into corpus totals."""
    totals = dict.fromkeys(SUMMED_COUNTERS, 0)
    histogram: Dict[int, int] = {}
    line_length_max = 0
    file_count = 0

    for record in records:
        file_count += 1
        for name in SUMMED_COUNTERS:
            totals[name] += getattr(record, name)
        line_length_max = max(line_length_max, record.line_length_max)
        for width, count in record.indent_space_sizes:
            histogram[width] = histogram.get(width, 0) + count

    return AggregateSignals(
        line_length_max=line_length_max,
        indent_space_sizes=tuple(sorted(histogram.items())),
        file_count=file_count,
        **totals,
    )
