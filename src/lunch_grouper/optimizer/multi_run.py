"""
Module: optimizer.multi_run

Purpose:
    Multi-run driver. Runs several independent annealing attempts and
    keeps the cheapest result, which mitigates a single run stalling in
    a poor local optimum.

Key Functions:
    - best_of_n(): Main entry point

Algorithm:
    1. Attempt i gets its own generator (seed + i when seeded)
    2. Attempts run sequentially, or on a thread pool when workers > 1
    3. Results failing the size or coverage checks are discarded
    4. Lowest cost wins; ties go to the lowest attempt index

Dependencies:
    - concurrent.futures (std): Parallel attempts
    - optimizer.annealer: Annealer

Used By:
    - planner.controller: plan_round
"""

from __future__ import annotations

import dataclasses
import logging
import random
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from lunch_grouper.core.errors import InvalidInputError, NoResultError
from lunch_grouper.core.models.ledger import Ledger
from lunch_grouper.core.models.partition import SearchResult
from lunch_grouper.core.schemas.validator import validate_member_ids

from .annealer import Annealer, ProgressCallback
from .config import DEFAULT_ATTEMPTS, AnnealingParams, OptimizerConfig
from .grouping import valid_coverage, valid_sizes
from .timing import TimingLog, timed_phase

logger = logging.getLogger(__name__)


def best_of_n(
    member_ids: Sequence[int],
    ledger: Ledger,
    attempts: int = DEFAULT_ATTEMPTS,
    params: Optional[AnnealingParams] = None,
    *,
    config: Optional[OptimizerConfig] = None,
    workers: int = 1,
    progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
    timing: Optional[TimingLog] = None,
) -> SearchResult:
    """
    Run independent annealing attempts and return the cheapest result.

    Args:
        member_ids: Distinct member ids (at least 3)
        ledger: Pair weight ledger (read only, shared by all attempts)
        attempts: Number of independent runs (>= 1)
        params: Temperature schedule; overrides config.params when given
        config: Search settings (defaults when None)
        workers: Attempts run concurrently on this many threads
        progress: Progress observer passed to every attempt
        cancel_event: Stops running attempts and skips pending ones
        timing: Optional TimingLog receiving per-attempt durations

    Returns:
        SearchResult with the lowest cost; result.attempt names the winner

    Raises:
        InvalidInputError: attempts < 1, workers < 1, or invalid member ids
        NoResultError: No attempt produced a usable partition

    Invariants:
        - result.cost <= cost of every constituent attempt

    Example:
        >>> result = best_of_n(list(range(1, 13)), {}, attempts=2,
        ...                    config=OptimizerConfig(seed=1))
        >>> result.cost
        0
    """
    if attempts < 1:
        raise InvalidInputError(f"attempts must be at least 1: {attempts}")
    if workers < 1:
        raise InvalidInputError(f"workers must be at least 1: {workers}")
    validate_member_ids(member_ids)

    config = config or OptimizerConfig()
    if params is not None:
        config = dataclasses.replace(config, params=params)

    timing = timing if timing is not None else TimingLog()
    expected = list(member_ids)

    def _attempt(index: int) -> Optional[SearchResult]:
        if cancel_event is not None and cancel_event.is_set():
            logger.debug(f"Skipping attempt {index + 1}/{attempts}: cancelled")
            return None
        seed = config.seed_for_attempt(index)
        annealer = Annealer(
            member_ids=expected,
            ledger=ledger,
            config=config,
            rng=random.Random(seed),
            progress=progress,
            cancel_event=cancel_event,
            seed=seed,
        )
        with timed_phase(timing, "attempt", attempt=index):
            result = annealer.run()
        logger.info(f"SA attempt {index + 1}/{attempts}: cost={result.cost}")
        return dataclasses.replace(result, attempt=index)

    if workers > 1 and attempts > 1:
        with ThreadPoolExecutor(max_workers=min(workers, attempts)) as executor:
            futures = [executor.submit(_attempt, i) for i in range(attempts)]
            outcomes = [future.result() for future in futures]
    else:
        outcomes = [_attempt(i) for i in range(attempts)]

    usable: List[Tuple[int, SearchResult]] = []
    for index, result in enumerate(outcomes):
        if result is None:
            continue
        if not valid_sizes(result.partition) or not valid_coverage(result.partition, expected):
            logger.warning(f"Discarding attempt {index + 1}: partition failed structural checks")
            continue
        usable.append((index, result))

    if not usable:
        raise NoResultError(f"No result found after {attempts} attempts")

    _, best = min(usable, key=lambda item: (item[1].cost, item[0]))
    logger.info(
        f"Best of {len(usable)} attempts: cost={best.cost} (attempt {best.attempt + 1})"
    )
    return best
