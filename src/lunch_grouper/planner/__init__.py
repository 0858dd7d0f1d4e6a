"""
Module: planner

Purpose:
    Round planning on top of the optimizer: validates caller input,
    picks the best partition, and returns the ledger delta to persist.

Key Functions:
    - plan_round(): Main entry point
    - summarize_partition() / ledger_statistics(): Diagnostics

Key Classes:
    - PlannerConfig: Planning configuration
    - RoundPlan: Planning result
"""

from .config import PlannerConfig
from .controller import RoundPlan, plan_round
from .diagnostics import LedgerStats, RoundReport, ledger_statistics, summarize_partition

__all__ = [
    "PlannerConfig",
    "RoundPlan",
    "plan_round",
    "LedgerStats",
    "RoundReport",
    "ledger_statistics",
    "summarize_partition",
]
