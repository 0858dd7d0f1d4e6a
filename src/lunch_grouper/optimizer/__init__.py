"""
Module: optimizer

Purpose:
    Search for a partition of members into lunch groups that repeats as
    few past pairings as possible.

Key Functions:
    - best_of_n(): Multi-run driver, main entry point
    - run_annealing(): Single annealing run
    - initial_partition(): Random partition following the size policy
    - partition_cost() / combined_cost(): Cost model

Key Classes:
    - AnnealingParams: Temperature schedule
    - OptimizerConfig: Search settings
    - Annealer: Single-run orchestrator

Dependencies:
    - lunch_grouper.core.models: Ledger helpers, SearchResult

Used By:
    - planner.controller: Round planning
"""

from .config import (
    DEFAULT_GROUP_SIZE,
    MAX_GROUP_SIZE,
    MIN_GROUP_SIZE,
    AnnealingParams,
    OptimizerConfig,
)
from .cost import combined_cost, group_cost, partition_cost, size_penalty
from .grouping import copy_partition, initial_partition, valid_coverage, valid_sizes
from .neighbors import NeighborStrategy, move_neighbor, swap_neighbor
from .annealer import Annealer, ProgressSnapshot, run_annealing, temperature_steps
from .multi_run import best_of_n
from .timing import TimingLog

__all__ = [
    "DEFAULT_GROUP_SIZE",
    "MAX_GROUP_SIZE",
    "MIN_GROUP_SIZE",
    "AnnealingParams",
    "OptimizerConfig",
    "combined_cost",
    "group_cost",
    "partition_cost",
    "size_penalty",
    "copy_partition",
    "initial_partition",
    "valid_coverage",
    "valid_sizes",
    "NeighborStrategy",
    "move_neighbor",
    "swap_neighbor",
    "Annealer",
    "ProgressSnapshot",
    "run_annealing",
    "temperature_steps",
    "best_of_n",
    "TimingLog",
]
