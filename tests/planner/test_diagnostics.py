"""
Tests for round and ledger diagnostics.
"""

import pytest

from lunch_grouper.planner.diagnostics import ledger_statistics, summarize_partition


class TestSummarizePartition:
    """Tests for summarize_partition()."""

    def test_summarize_when_some_repeats_then_counts_them(self):
        # Arrange
        ledger = {"1-2": 2, "4-5": 1, "7-8": 9}

        # Act
        report = summarize_partition([[1, 2, 3], [4, 5, 6]], ledger)

        # Assert
        assert report.group_sizes == (3, 3)
        assert report.group_costs == (2, 1)
        assert report.total_cost == 3
        assert report.repeated_pairs == 2
        assert report.max_pair_weight == 2
        assert report.total_pairs == 6
        assert report.repeat_ratio == pytest.approx(1 / 3)

    def test_summarize_when_empty_ledger_then_no_repeats(self):
        report = summarize_partition([[1, 2, 3, 4]], {})

        assert report.repeated_pairs == 0
        assert report.max_pair_weight == 0
        assert report.repeat_ratio == 0.0

    def test_to_dict_when_called_then_includes_total_cost(self):
        data = summarize_partition([[1, 2, 3]], {"1-3": 4}).to_dict()

        assert data["total_cost"] == 4
        assert data["group_sizes"] == [3]


class TestLedgerStatistics:
    """Tests for ledger_statistics()."""

    def test_statistics_when_zero_weights_then_excluded(self):
        stats = ledger_statistics({"1-2": 1, "1-3": 3, "2-3": 0})

        assert stats.pair_count == 2
        assert stats.total_weight == 4
        assert stats.mean_weight == pytest.approx(2.0)
        assert stats.max_weight == 3
        assert stats.p90_weight == pytest.approx(2.8)

    def test_statistics_when_empty_then_zeros(self):
        stats = ledger_statistics({})

        assert stats.pair_count == 0
        assert stats.max_weight == 0
        assert stats.mean_weight == 0.0
