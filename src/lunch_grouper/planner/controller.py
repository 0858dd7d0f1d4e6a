"""
Module: planner.controller

Purpose:
    Plan one lunch round end to end.
    Validate → Search → Verify → Increments → Report

Key Functions:
    - plan_round(): Main entry point for planning a round

Key Classes:
    - RoundPlan: Complete planning result

Dependencies:
    - core.schemas.validator: Input validation
    - optimizer.multi_run: best_of_n
    - planner.diagnostics: Round report

Used By:
    - Callers that own persistence and display (desktop app, bots, scripts)

Boundary:
    The planner performs no I/O. The caller persists RoundPlan.to_dict()
    and RoundPlan.updated_ledger.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from lunch_grouper.core.errors import NoResultError
from lunch_grouper.core.models.ledger import Ledger, WeightIncrement, record_round
from lunch_grouper.core.schemas.validator import validate_ledger, validate_member_ids
from lunch_grouper.optimizer.annealer import ProgressCallback
from lunch_grouper.optimizer.grouping import valid_coverage, valid_sizes
from lunch_grouper.optimizer.multi_run import best_of_n
from lunch_grouper.optimizer.timing import TimingLog, timed_phase

from .config import PlannerConfig
from .diagnostics import RoundReport, summarize_partition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundPlan:
    """
    Complete planning result (immutable).

    Attributes:
        groups: Winning partition as nested tuples
        cost: Combined cost of the partition
        increments: One +1 record per intra-group pair
        updated_ledger: New ledger with increments applied
        report: Repeated-pairing breakdown against the input ledger
        metadata: Planning metadata dictionary
        warnings: Any warnings during planning

    Example:
        >>> plan = plan_round(list(range(1, 9)), {}, PlannerConfig(seed=1))
        >>> [len(g) for g in plan.groups]
        [4, 4]
    """
    groups: Tuple[Tuple[int, ...], ...]
    cost: Any
    increments: Tuple[WeightIncrement, ...]
    updated_ledger: Dict[str, int]
    report: RoundReport
    metadata: Dict[str, Any]
    warnings: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        """
        Round record for the caller to persist.

        Keys follow the stored assignment format: timestamp (ms),
        groups ({"members": [...]}), participatingMembers, edgeUpdates.
        """
        return {
            "timestamp": self.metadata["timestamp"],
            "groups": [{"members": list(g)} for g in self.groups],
            "participatingMembers": list(self.metadata["member_ids"]),
            "edgeUpdates": [inc.to_dict() for inc in self.increments],
        }


def plan_round(
    member_ids: Sequence[int],
    ledger: Ledger,
    config: Optional[PlannerConfig] = None,
    *,
    progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
) -> RoundPlan:
    """
    Plan a round of lunch groups.

    Pipeline:
    1. Validate member ids and ledger (fail fast, no search work)
    2. Run best_of_n annealing attempts
    3. Re-check coverage and group sizes of the winner
    4. Derive weight increments and the updated ledger
    5. Summarise repeated pairings

    Args:
        member_ids: Distinct positive member ids (at least 3)
        ledger: Pair weight ledger, "<small>-<large>" -> count (not modified)
        config: Planning configuration (defaults when None)
        progress: Annealer progress observer
        cancel_event: Cooperative cancellation; best-so-far is returned

    Returns:
        RoundPlan with groups, increments and updated ledger

    Raises:
        InvalidInputError: If inputs violate a precondition
        NoResultError: If no usable partition was produced
    """
    config = config or PlannerConfig()
    warnings: List[str] = []
    timing = TimingLog()
    start_time = time.perf_counter()

    with timed_phase(timing, "validation"):
        validate_member_ids(member_ids)
        validate_ledger(ledger, strict=config.strict_validation)

    members = list(member_ids)
    logger.info(
        f"Planning round for {len(members)} members "
        f"(target size {config.target_size}, {config.attempts} attempts)"
    )

    with timed_phase(timing, "search"):
        result = best_of_n(
            members,
            ledger,
            attempts=config.attempts,
            config=config.optimizer_config(),
            workers=config.workers,
            progress=progress,
            cancel_event=cancel_event,
            timing=timing,
        )

    if not valid_sizes(result.partition) or not valid_coverage(result.partition, members):
        raise NoResultError("Best partition failed coverage or size checks")

    updated_ledger, increments = record_round(ledger, result.partition)
    report = summarize_partition(result.partition, ledger)

    if report.repeated_pairs:
        warnings.append(
            f"{report.repeated_pairs} of {report.total_pairs} pairs have met before "
            f"(highest prior count {report.max_pair_weight})"
        )
    if result.stats is not None and result.stats.cancelled:
        warnings.append("Search stopped early; groups are the best found before stopping")
    for message in warnings:
        logger.warning(message)

    elapsed = time.perf_counter() - start_time
    generated_at = datetime.now(timezone.utc)
    metadata = {
        "generated_at": generated_at.isoformat(),
        "timestamp": int(generated_at.timestamp() * 1000),
        "member_ids": tuple(members),
        "member_count": len(members),
        "group_count": len(result.partition),
        "attempts": config.attempts,
        "winning_attempt": result.attempt,
        "seed": config.seed,
        "elapsed_seconds": elapsed,
        "timings": timing.to_dict(),
    }

    logger.info(
        f"Planned {len(result.partition)} groups with cost {result.cost} "
        f"in {elapsed:.2f}s"
    )

    return RoundPlan(
        groups=result.partition,
        cost=result.cost,
        increments=tuple(increments),
        updated_ledger=updated_ledger,
        report=report,
        metadata=metadata,
        warnings=tuple(warnings),
    )
