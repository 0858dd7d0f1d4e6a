"""
Unit tests for SearchResult and AnnealingStats models.
"""

import pytest

from lunch_grouper.core.models.partition import AnnealingStats, SearchResult, freeze_partition


class TestSearchResult:
    """Tests for SearchResult dataclass."""

    def test_init_when_valid_then_exposes_members_and_sizes(self):
        # Act
        result = SearchResult(partition=((1, 2, 3, 4), (5, 6, 7)), cost=2)

        # Assert
        assert result.members == frozenset(range(1, 8))
        assert result.group_sizes == (4, 3)

    def test_init_when_duplicate_member_then_raises(self):
        with pytest.raises(ValueError, match="Duplicate"):
            SearchResult(partition=((1, 2, 3), (3, 4, 5)), cost=0)

    def test_groups_as_lists_when_mutated_then_result_unchanged(self):
        """The list copy shares nothing with the frozen partition."""
        result = SearchResult(partition=((1, 2, 3),), cost=0)

        groups = result.groups_as_lists()
        groups[0].append(99)

        assert result.partition == ((1, 2, 3),)

    def test_equality_when_stats_differ_then_equal(self):
        """Stats are bookkeeping and excluded from comparison."""
        a = SearchResult(((1, 2, 3),), 0, stats=AnnealingStats(iterations=5))
        b = SearchResult(((1, 2, 3),), 0, stats=AnnealingStats(iterations=9))
        assert a == b

    def test_freeze_partition_when_lists_then_nested_tuples(self):
        assert freeze_partition([[1, 2, 3], [4, 5, 6]]) == ((1, 2, 3), (4, 5, 6))
