"""Tests for idiolect.extraction.signals -- accumulation and aggregation."""

import dataclasses

import pytest

from idiolect.extraction.signals import (
    SUMMED_COUNTERS,
    AggregateSignals,
    FileSignals,
    SignalAccumulator,
    aggregate_signals,
)


class TestSignalAccumulator:
    """Counting and voting per file."""

    def test_starts_at_zero(self):
        acc = SignalAccumulator()
        assert all(v == 0 for v in acc.counts.values())
        assert set(acc.counts) == set(SUMMED_COUNTERS)

    def test_add_and_vote(self):
        acc = SignalAccumulator()
        acc.add("quotes_single")
        acc.vote(True, "yoda_yes", "yoda_no")
        acc.vote(False, "yoda_yes", "yoda_no", amount=3)
        assert acc.counts["quotes_single"] == 1
        assert acc.counts["yoda_yes"] == 1
        assert acc.counts["yoda_no"] == 3

    def test_unknown_counter(self):
        with pytest.raises(KeyError):
            SignalAccumulator().add("not_a_counter")

    def test_line_length_keeps_max(self):
        acc = SignalAccumulator()
        for length in (10, 42, 7):
            acc.observe_line_length(length)
        assert acc.line_length_max == 42

    def test_freeze_sorts_histogram(self):
        acc = SignalAccumulator()
        for width in (4, 2, 4, 8):
            acc.observe_indent(width)
        frozen = acc.freeze()
        assert isinstance(frozen, FileSignals)
        assert frozen.indent_space_sizes == ((2, 1), (4, 2), (8, 1))
        assert frozen.indent_histogram == {2: 1, 4: 2, 8: 1}


class TestMemberFileVotes:
    """Per-file member chain votes."""

    def test_majority_becomes_one_vote(self):
        acc = SignalAccumulator()
        acc.add("member_aligned", 2)
        acc.add("member_indented", 1)
        acc.finalize_member_votes()
        assert acc.counts["member_aligned_files"] == 1
        assert acc.counts["member_indented_files"] == 0

    def test_single_observation_does_not_vote(self):
        acc = SignalAccumulator()
        acc.add("member_indented")
        acc.finalize_member_votes()
        assert acc.counts["member_indented_files"] == 0

    def test_tie_does_not_vote(self):
        acc = SignalAccumulator()
        acc.add("member_aligned")
        acc.add("member_indented")
        acc.finalize_member_votes()
        assert acc.counts["member_aligned_files"] == 0
        assert acc.counts["member_indented_files"] == 0


class TestFileSignals:
    """Frozen per-file records."""

    def test_frozen(self):
        record = FileSignals()
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.quotes_single = 3

    def test_to_dict(self):
        record = FileSignals(quotes_double=2, indent_space_sizes=((2, 5),))
        data = record.to_dict()
        assert data["quotes_double"] == 2
        assert data["indent_space_sizes"] == {"2": 5}


class TestAggregateSignals:
    """Summing records across files."""

    def test_sums_counters(self):
        first = FileSignals(quotes_single=1, semicolons_yes=4, line_length_max=80)
        second = FileSignals(quotes_single=2, semicolons_no=1, line_length_max=120)
        agg = aggregate_signals([first, second])
        assert isinstance(agg, AggregateSignals)
        assert agg.quotes_single == 3
        assert agg.semicolons_yes == 4
        assert agg.semicolons_no == 1
        assert agg.file_count == 2

    def test_line_length_is_max(self):
        agg = aggregate_signals(
            [FileSignals(line_length_max=80), FileSignals(line_length_max=120)]
        )
        assert agg.line_length_max == 120

    def test_histograms_merge(self):
        first = FileSignals(indent_space_sizes=((2, 3), (4, 1)))
        second = FileSignals(indent_space_sizes=((4, 2), (6, 1)))
        agg = aggregate_signals([first, second])
        assert agg.indent_histogram == {2: 3, 4: 3, 6: 1}

    def test_inputs_untouched(self):
        first = FileSignals(quotes_single=1)
        aggregate_signals([first, first])
        assert first.quotes_single == 1

    def test_empty(self):
        agg = aggregate_signals([])
        assert agg.file_count == 0
        assert agg.line_length_max == 0
        assert agg.indent_space_sizes == ()

    def test_accepts_generator(self):
        agg = aggregate_signals(FileSignals(yoda_no=1) for _ in range(3))
        assert agg.yoda_no == 3
        assert agg.file_count == 3
