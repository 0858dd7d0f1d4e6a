"""
Module: optimizer.cost

Purpose:
    Cost model for candidate partitions. Lower is better: the cost is the
    number of repeated pairings a partition would create, plus an optional
    soft penalty for groups outside the 3-5 size window.

Key Functions:
    - group_cost(): Sum of ledger weights over a group's pairs
    - partition_cost(): Sum of group costs
    - size_penalty(): Penalty for out-of-window group sizes
    - combined_cost(): partition_cost + penalty_weight * size_penalty
    - group_score(): Per-group term of combined_cost (incremental scoring)

Dependencies:
    - itertools (std)
    - core.models.ledger: weight_of

Used By:
    - optimizer.annealer: Scores proposals
    - planner.diagnostics: Per-group cost breakdown
"""

from __future__ import annotations

import itertools
from typing import Sequence

from lunch_grouper.core.models.ledger import Ledger, weight_of
from lunch_grouper.core.models.partition import Cost

from .config import DEFAULT_GROUP_SIZE, DEFAULT_PENALTY_WEIGHT, MAX_GROUP_SIZE, MIN_GROUP_SIZE

# Penalty per member of distance from the target size
SIZE_PENALTY_SCALE = 100


def group_cost(group: Sequence[int], ledger: Ledger) -> int:
    """
    Sum the ledger weight of every unordered pair in a group.

    O(k^2) for a group of k members (k <= 5).
    """
    return sum(weight_of(ledger, a, b) for a, b in itertools.combinations(group, 2))


def partition_cost(partition: Sequence[Sequence[int]], ledger: Ledger) -> int:
    """
    Total repeated-pairing cost of a partition.

    Returns 0 for any partition against an empty ledger.
    """
    return sum(group_cost(group, ledger) for group in partition)


def _group_size_penalty(size: int, target_size: int) -> int:
    if MIN_GROUP_SIZE <= size <= MAX_GROUP_SIZE:
        return 0
    return abs(size - target_size) * SIZE_PENALTY_SCALE


def size_penalty(
    partition: Sequence[Sequence[int]],
    target_size: int = DEFAULT_GROUP_SIZE,
) -> int:
    """
    Penalty for groups whose size falls outside [3, 5].

    Each such group adds |size - target_size| * 100.
    """
    return sum(_group_size_penalty(len(group), target_size) for group in partition)


def combined_cost(
    partition: Sequence[Sequence[int]],
    ledger: Ledger,
    target_size: int = DEFAULT_GROUP_SIZE,
    penalty_weight: float = DEFAULT_PENALTY_WEIGHT,
) -> Cost:
    """
    Objective minimised by the annealer.

    Args:
        partition: Candidate partition
        ledger: Pair weight ledger
        target_size: Preferred group size
        penalty_weight: Multiplier for size_penalty

    Returns:
        partition_cost + penalty_weight * size_penalty. Stays an int when
        every group is inside the size window.
    """
    return sum(
        group_score(group, ledger, target_size, penalty_weight)
        for group in partition
    )


def group_score(
    group: Sequence[int],
    ledger: Ledger,
    target_size: int = DEFAULT_GROUP_SIZE,
    penalty_weight: float = DEFAULT_PENALTY_WEIGHT,
) -> Cost:
    """Per-group term of combined_cost."""
    score: Cost = group_cost(group, ledger)
    penalty = _group_size_penalty(len(group), target_size)
    if penalty:
        score += penalty_weight * penalty
    return score
