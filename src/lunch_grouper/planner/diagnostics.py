"""
Module: planner.diagnostics

Purpose:
    Summaries of a planned round and of the pair ledger: how many
    repeated pairings a round creates and how concentrated past pairings
    are.

Key Functions:
    - summarize_partition(): RoundReport for one partition
    - ledger_statistics(): LedgerStats for a ledger

Key Classes:
    - RoundReport: Per-round breakdown
    - LedgerStats: Distribution of pair weights

Dependencies:
    - numpy: Weight distribution statistics
    - optimizer.cost: group_cost

Used By:
    - planner.controller: RoundPlan.report, warnings
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

import numpy as np

from lunch_grouper.core.models.ledger import Ledger, weight_of
from lunch_grouper.optimizer.cost import group_cost


@dataclass(frozen=True)
class RoundReport:
    """
    Breakdown of a partition against the ledger it was planned with.

    Attributes:
        group_sizes: Size of each group
        group_costs: Repeated-pairing cost of each group
        repeated_pairs: Pairs in this round that have met before
        max_pair_weight: Highest prior count among this round's pairs
        total_pairs: Number of intra-group pairs in the round
    """

    group_sizes: Tuple[int, ...]
    group_costs: Tuple[int, ...]
    repeated_pairs: int
    max_pair_weight: int
    total_pairs: int

    @property
    def total_cost(self) -> int:
        """Sum of group costs (equals partition_cost)."""
        return sum(self.group_costs)

    @property
    def repeat_ratio(self) -> float:
        """Fraction of this round's pairs that are repeats."""
        if self.total_pairs == 0:
            return 0.0
        return self.repeated_pairs / self.total_pairs

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group_sizes": list(self.group_sizes),
            "group_costs": list(self.group_costs),
            "repeated_pairs": self.repeated_pairs,
            "max_pair_weight": self.max_pair_weight,
            "total_pairs": self.total_pairs,
            "total_cost": self.total_cost,
        }


@dataclass(frozen=True)
class LedgerStats:
    """
    Distribution of pair weights in a ledger (zero weights excluded).

    Attributes:
        pair_count: Pairs that have met at least once
        total_weight: Sum of all counts
        mean_weight: Mean count over met pairs
        max_weight: Highest count
        p90_weight: 90th percentile count
    """

    pair_count: int
    total_weight: int
    mean_weight: float
    max_weight: int
    p90_weight: float


def summarize_partition(
    partition: Sequence[Sequence[int]],
    ledger: Ledger,
) -> RoundReport:
    """
    Summarise how much a partition repeats past pairings.

    Args:
        partition: Groups of the round
        ledger: Ledger BEFORE the round's increments are applied

    Returns:
        RoundReport
    """
    weights = [
        weight_of(ledger, a, b)
        for group in partition
        for a, b in itertools.combinations(group, 2)
    ]
    arr = np.asarray(weights, dtype=np.int64)
    return RoundReport(
        group_sizes=tuple(len(g) for g in partition),
        group_costs=tuple(group_cost(g, ledger) for g in partition),
        repeated_pairs=int(np.count_nonzero(arr)),
        max_pair_weight=int(arr.max()) if arr.size else 0,
        total_pairs=int(arr.size),
    )


def ledger_statistics(ledger: Ledger) -> LedgerStats:
    """
    Describe the distribution of pair weights.

    Example:
        >>> ledger_statistics({"1-2": 1, "1-3": 3}).max_weight
        3
    """
    arr = np.fromiter((w for w in ledger.values() if w > 0), dtype=np.int64)
    if arr.size == 0:
        return LedgerStats(pair_count=0, total_weight=0, mean_weight=0.0, max_weight=0, p90_weight=0.0)
    return LedgerStats(
        pair_count=int(arr.size),
        total_weight=int(arr.sum()),
        mean_weight=float(arr.mean()),
        max_weight=int(arr.max()),
        p90_weight=float(np.percentile(arr, 90)),
    )
