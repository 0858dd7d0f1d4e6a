"""
Tests for the partition generator and structural checks.
"""

import random

import pytest

from lunch_grouper.core.errors import InvalidInputError
from lunch_grouper.optimizer.grouping import (
    copy_partition,
    initial_partition,
    valid_coverage,
    valid_sizes,
)


def _sizes(partition):
    return [len(group) for group in partition]


class TestInitialPartition:
    """Tests for initial_partition()."""

    @pytest.mark.parametrize(
        "count,expected",
        [
            (8, [4, 4]),
            (9, [4, 5]),
            (10, [4, 3, 3]),
            (11, [4, 4, 3]),
            (12, [4, 4, 4]),
            (14, [4, 4, 3, 3]),
        ],
    )
    def test_initial_partition_when_target_four_then_remainder_policy(self, count, expected, rng):
        partition = initial_partition(list(range(1, count + 1)), 4, rng)
        assert _sizes(partition) == expected

    @pytest.mark.parametrize("count,expected", [(3, [3]), (4, [4]), (5, [5]), (6, [3, 3]), (7, [4, 3])])
    def test_initial_partition_when_small_roster_then_single_or_split(self, count, expected, rng):
        partition = initial_partition(list(range(1, count + 1)), 4, rng)
        assert _sizes(partition) == expected

    def test_initial_partition_when_many_sizes_then_always_valid(self):
        """Every roster from 3 to 203 members gets a complete, in-window partition."""
        rng = random.Random(42)

        for count in range(3, 204):
            members = rng.sample(range(1, 10_000), count)

            partition = initial_partition(members, 4, rng)

            assert valid_sizes(partition), f"Bad sizes for {count}: {_sizes(partition)}"
            assert valid_coverage(partition, members)

    @pytest.mark.parametrize("target", [3, 5])
    def test_initial_partition_when_other_target_then_sizes_still_valid(self, target):
        """Out-of-window remainder groups fall back to an even split."""
        rng = random.Random(7)

        for count in range(3, 60):
            partition = initial_partition(list(range(1, count + 1)), target, rng)
            assert valid_sizes(partition), f"Bad sizes for {count}@{target}: {_sizes(partition)}"

    def test_initial_partition_when_target_five_and_six_members_then_two_trios(self, rng):
        partition = initial_partition(list(range(1, 7)), 5, rng)
        assert _sizes(partition) == [3, 3]

    def test_initial_partition_when_same_seed_then_same_partition(self):
        members = list(range(1, 21))
        first = initial_partition(members, 4, random.Random(99))
        second = initial_partition(members, 4, random.Random(99))
        assert first == second

    def test_initial_partition_when_called_then_input_not_mutated(self, rng):
        members = list(range(1, 13))
        initial_partition(members, 4, rng)
        assert members == list(range(1, 13))

    @pytest.mark.parametrize("members", [[], [1], [1, 2]])
    def test_initial_partition_when_fewer_than_three_then_raises(self, members, rng):
        with pytest.raises(InvalidInputError, match="At least 3"):
            initial_partition(members, 4, rng)

    def test_initial_partition_when_bad_target_then_raises(self, rng):
        with pytest.raises(InvalidInputError, match="target_size"):
            initial_partition([1, 2, 3, 4], 6, rng)


class TestStructuralChecks:
    """Tests for valid_sizes, valid_coverage and copy_partition."""

    def test_valid_sizes_when_group_too_small_then_false(self):
        assert not valid_sizes([[1, 2, 3], [4, 5]])

    def test_valid_sizes_when_group_too_large_then_false(self):
        assert not valid_sizes([[1, 2, 3, 4, 5, 6]])

    def test_valid_coverage_when_duplicate_then_false(self):
        assert not valid_coverage([[1, 2, 3], [3, 4, 5]], [1, 2, 3, 4, 5])

    def test_valid_coverage_when_member_missing_then_false(self):
        assert not valid_coverage([[1, 2, 3]], [1, 2, 3, 4])

    def test_valid_coverage_when_unexpected_member_then_false(self):
        assert not valid_coverage([[1, 2, 3, 9]], [1, 2, 3])

    def test_copy_partition_when_copy_mutated_then_original_unchanged(self):
        # Arrange
        original = [[1, 2, 3], [4, 5, 6]]

        # Act
        copied = copy_partition(original)
        copied[0][0] = 99
        copied.append([7, 8, 9])

        # Assert
        assert original == [[1, 2, 3], [4, 5, 6]]
