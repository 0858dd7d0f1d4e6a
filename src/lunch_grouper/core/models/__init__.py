"""
Core Models Package

Ledger helpers and immutable result models shared by the optimizer and
the planner.
"""

from .ledger import (
    Ledger,
    WeightIncrement,
    all_pair_keys,
    apply_increments,
    increments_for_partition,
    match_counts,
    pair_key,
    parse_pair_key,
    record_round,
    weight_of,
)
from .partition import AnnealingStats, Group, Partition, SearchResult, freeze_partition

__all__ = [
    "Ledger",
    "WeightIncrement",
    "all_pair_keys",
    "apply_increments",
    "increments_for_partition",
    "match_counts",
    "pair_key",
    "parse_pair_key",
    "record_round",
    "weight_of",
    "AnnealingStats",
    "Group",
    "Partition",
    "SearchResult",
    "freeze_partition",
]
