"""
Module: optimizer.annealer

Purpose:
    Simulated annealing over partitions. Starting from a random partition,
    repeatedly proposes neighbours, accepts or rejects them with the
    Metropolis criterion, cools the temperature geometrically, and keeps
    the best partition seen.

Key Functions:
    - run_annealing(): Main entry point for a single run
    - temperature_steps(): Number of cooling steps a schedule performs

Key Classes:
    - Annealer: Runs the state machine for one attempt
    - ProgressSnapshot: Values passed to the progress callback

Algorithm:
    Initializing  current = initial_partition(), best = copy(current)
    Searching     iterations_per_temperature proposals:
                    - no-op proposal: skip
                    - out-of-window sizes: discard before scoring
                    - delta < 0: accept; else accept with exp(-delta / T)
                    - accepted and cheaper than best: snapshot best
    Cooling-check T *= cooling_rate; continue while T > min_temperature
    Terminated    return best partition and its cost

    The number of proposals is bounded by
    temperature_steps(params) * iterations_per_temperature, independent of
    the member count.

Dependencies:
    - math, random, threading, time (std)
    - optimizer.grouping, optimizer.neighbors, optimizer.cost

Used By:
    - optimizer.multi_run: best_of_n
"""

from __future__ import annotations

import logging
import math
import random
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from lunch_grouper.core.models.ledger import Ledger
from lunch_grouper.core.models.partition import (
    AnnealingStats,
    Cost,
    SearchResult,
    freeze_partition,
)
from lunch_grouper.core.schemas.validator import validate_member_ids
from lunch_grouper.utils.logging_utils import log_progress

from .config import AnnealingParams, OptimizerConfig
from .cost import group_score
from .grouping import copy_partition, initial_partition, valid_sizes
from .neighbors import propose

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressSnapshot:
    """
    Annealer state reported to progress observers.

    Attributes:
        iteration: Proposals drawn so far
        temperature: Temperature after the latest cooling step
        current_cost: Cost of the current partition
        best_cost: Cost of the best partition so far
        elapsed_seconds: Wall time since the run started
    """

    iteration: int
    temperature: float
    current_cost: Cost
    best_cost: Cost
    elapsed_seconds: float


ProgressCallback = Callable[[ProgressSnapshot], None]


def temperature_steps(params: AnnealingParams) -> int:
    """
    Count the cooling steps the annealing loop performs for a schedule.

    Mirrors the loop exactly (same floating point operations), so the
    result is the true step count, about
    ceil(log(min / initial) / log(cooling_rate)).

    Example:
        >>> temperature_steps(AnnealingParams())
        2297
    """
    steps = 0
    temperature = params.initial_temperature
    while temperature > params.min_temperature:
        temperature *= params.cooling_rate
        steps += 1
    return steps


def run_annealing(
    member_ids: Sequence[int],
    ledger: Ledger,
    config: Optional[OptimizerConfig] = None,
    *,
    rng: Optional[random.Random] = None,
    progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
) -> SearchResult:
    """
    Run one simulated annealing search.

    Args:
        member_ids: Distinct member ids (at least 3)
        ledger: Pair weight ledger (read only)
        config: Search settings (defaults when None)
        rng: Random source; seeded from config.seed when None
        progress: Observer called every config.progress_every iterations
        cancel_event: When set, the run stops and returns its best so far

    Returns:
        SearchResult with the best partition found

    Raises:
        InvalidInputError: Fewer than 3 members, or ids repeated or not
            positive integers

    Example:
        >>> result = run_annealing([1, 2, 3, 4, 5, 6, 7, 8], {}, rng=random.Random(3))
        >>> result.cost
        0
    """
    annealer = Annealer(
        member_ids=member_ids,
        ledger=ledger,
        config=config or OptimizerConfig(),
        rng=rng,
        progress=progress,
        cancel_event=cancel_event,
    )
    return annealer.run()


@dataclass
class Annealer:
    """
    Simulated annealing orchestrator for one attempt.

    Attributes:
        member_ids: Members to partition
        ledger: Pair weight ledger
        config: Search settings
        rng: Random source (seeded from config.seed when omitted)
        progress: Progress observer (logs at DEBUG when omitted)
        cancel_event: Cooperative cancellation flag
        seed: Seed recorded in the stats (defaults to config.seed)
    """

    member_ids: Sequence[int]
    ledger: Ledger
    config: OptimizerConfig = field(default_factory=OptimizerConfig)
    rng: Optional[random.Random] = None
    progress: Optional[ProgressCallback] = None
    cancel_event: Optional[threading.Event] = None
    seed: Optional[int] = None

    # Internal state
    _current: List[List[int]] = field(init=False, default_factory=list)
    _scores: List[Cost] = field(init=False, default_factory=list)
    _current_cost: Cost = field(init=False, default=0)
    _best: List[List[int]] = field(init=False, default_factory=list)
    _best_cost: Cost = field(init=False, default=0)

    def __post_init__(self) -> None:
        """Initialize random source and observer."""
        if self.seed is None:
            self.seed = self.config.seed
        if self.rng is None:
            self.rng = random.Random(self.seed)
        if self.progress is None:
            self.progress = log_progress

    def run(self) -> SearchResult:
        """
        Execute the annealing state machine.

        Returns:
            SearchResult with the best partition and its stats
        """
        validate_member_ids(self.member_ids)

        params = self.config.params
        start = time.perf_counter()
        deadline = start + self.config.time_limit if self.config.time_limit else None

        # Initializing
        self._current = initial_partition(self.member_ids, self.config.target_size, self.rng)
        self._scores = [self._score(group) for group in self._current]
        self._current_cost = sum(self._scores)
        self._best = copy_partition(self._current)
        self._best_cost = self._current_cost

        temperature = params.initial_temperature
        iteration = steps = accepted = improved = rejected = no_ops = 0
        cancelled = False

        while temperature > params.min_temperature:
            # Searching
            for _ in range(params.iterations_per_temperature):
                if self._should_stop(deadline):
                    cancelled = True
                    break
                iteration += 1

                neighbor, touched = propose(self.config.neighbor_strategy, self._current, self.rng)
                if not touched:
                    no_ops += 1
                    continue
                if not valid_sizes(neighbor):
                    rejected += 1
                    continue

                new_scores = {i: self._score(neighbor[i]) for i in touched}
                delta = sum(new_scores[i] - self._scores[i] for i in touched)

                if delta < 0 or self.rng.random() < math.exp(-delta / temperature):
                    self._current = neighbor
                    for i, score in new_scores.items():
                        self._scores[i] = score
                    self._current_cost += delta
                    accepted += 1

                    if self._current_cost < self._best_cost:
                        self._best = copy_partition(self._current)
                        self._best_cost = self._current_cost
                        improved += 1

            if cancelled:
                break

            # Cooling-check
            temperature *= params.cooling_rate
            steps += 1

            if iteration % self.config.progress_every == 0:
                self.progress(ProgressSnapshot(
                    iteration=iteration,
                    temperature=temperature,
                    current_cost=self._current_cost,
                    best_cost=self._best_cost,
                    elapsed_seconds=time.perf_counter() - start,
                ))

        # Terminated
        elapsed = time.perf_counter() - start
        if cancelled:
            logger.warning(
                f"Annealing stopped early after {iteration} iterations "
                f"(T={temperature:.4f}), best cost={self._best_cost}"
            )
        else:
            logger.debug(
                f"Annealing completed: {iteration} iterations, "
                f"best cost={self._best_cost}, time={elapsed:.2f}s"
            )

        stats = AnnealingStats(
            iterations=iteration,
            temperature_steps=steps,
            accepted=accepted,
            improved=improved,
            rejected_invalid=rejected,
            no_ops=no_ops,
            cancelled=cancelled,
            elapsed_seconds=elapsed,
            seed=self.seed,
        )
        return SearchResult(
            partition=freeze_partition(self._best),
            cost=self._best_cost,
            stats=stats,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _score(self, group: Sequence[int]) -> Cost:
        return group_score(
            group,
            self.ledger,
            self.config.target_size,
            self.config.penalty_weight,
        )

    def _should_stop(self, deadline: Optional[float]) -> bool:
        if self.cancel_event is not None and self.cancel_event.is_set():
            return True
        return deadline is not None and time.perf_counter() >= deadline
