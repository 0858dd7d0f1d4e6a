"""
Module: partition

Purpose:
    Partition types and the SearchResult produced by an annealing run.

Key Classes:
    - AnnealingStats: Counters and timing for a single run
    - SearchResult: Best partition found plus its cost

Dependencies:
    - dataclasses (std)
    - functools (std)

Used By:
    - optimizer.annealer: Builds SearchResult at termination
    - optimizer.multi_run: Compares results across attempts
    - planner.controller: Extracts the winning groups

Design Note:
    Working partitions inside the annealer are lists of lists so that
    neighbour proposals can swap members in place on a copy. Results are
    frozen into tuples so a returned SearchResult can never be changed by
    a later run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import FrozenSet, List, Optional, Sequence, Tuple, Union

Group = List[int]
Partition = List[Group]

Cost = Union[int, float]


def freeze_partition(partition: Sequence[Sequence[int]]) -> Tuple[Tuple[int, ...], ...]:
    """Convert a working partition into nested tuples."""
    return tuple(tuple(group) for group in partition)


@dataclass(frozen=True)
class AnnealingStats:
    """
    Bookkeeping for one annealing run.

    Attributes:
        iterations: Neighbour proposals drawn
        temperature_steps: Cooling steps performed
        accepted: Proposals accepted (improving or Metropolis)
        improved: Times the best partition was replaced
        rejected_invalid: Proposals discarded for out-of-window sizes
        no_ops: Degenerate proposals (fewer than 2 groups, empty group)
        cancelled: True if the run stopped early on cancel/time limit
        elapsed_seconds: Wall time of the run
        seed: Seed of the run's generator, if it was seeded
    """

    iterations: int = 0
    temperature_steps: int = 0
    accepted: int = 0
    improved: int = 0
    rejected_invalid: int = 0
    no_ops: int = 0
    cancelled: bool = False
    elapsed_seconds: float = 0.0
    seed: Optional[int] = None


@dataclass(frozen=True)
class SearchResult:
    """
    Best partition found by a run, with its cost.

    Attributes:
        partition: Groups as nested tuples
        cost: Combined cost of the partition (lower is better)
        stats: Run statistics (None for hand-built results)
        attempt: Index of the attempt that produced it (multi-run)

    Invariants:
        - Every member appears in exactly one group

    Example:
        >>> result = SearchResult(partition=((1, 2, 3),), cost=0)
        >>> result.members
        frozenset({1, 2, 3})
    """

    partition: Tuple[Tuple[int, ...], ...]
    cost: Cost
    stats: Optional[AnnealingStats] = field(default=None, compare=False)
    attempt: int = 0

    def __post_init__(self) -> None:
        """Validate result on construction."""
        flat = [m for group in self.partition for m in group]
        if len(flat) != len(set(flat)):
            raise ValueError("Duplicate members in search result partition")

    @cached_property
    def members(self) -> FrozenSet[int]:
        """All members covered by the partition."""
        return frozenset(m for group in self.partition for m in group)

    @property
    def group_sizes(self) -> Tuple[int, ...]:
        """Size of each group, in partition order."""
        return tuple(len(group) for group in self.partition)

    def groups_as_lists(self) -> List[List[int]]:
        """Independent list-of-lists copy of the partition."""
        return [list(group) for group in self.partition]

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return (
            f"SearchResult(groups={len(self.partition)}, "
            f"members={len(self.members)}, cost={self.cost})"
        )
