"""
Module: optimizer.config

Purpose:
    Configuration dataclasses for the annealing search. Immutable
    configuration with validation on construction.

Key Classes:
    - AnnealingParams: Temperature schedule of one annealing run
    - OptimizerConfig: Search settings shared by the annealer and driver

Dependencies:
    - dataclasses, math (std)

Used By:
    - optimizer.annealer: Annealer
    - optimizer.multi_run: best_of_n
    - planner.config: PlannerConfig
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from lunch_grouper.core.errors import InvalidInputError

from .neighbors import NeighborStrategy

DEFAULT_GROUP_SIZE = 4
MIN_GROUP_SIZE = 3
MAX_GROUP_SIZE = 5
DEFAULT_PENALTY_WEIGHT = 0.1
DEFAULT_ATTEMPTS = 3
DEFAULT_PROGRESS_EVERY = 100


@dataclass(frozen=True)
class AnnealingParams:
    """
    Temperature schedule for simulated annealing (immutable).

    Attributes:
        initial_temperature: Starting temperature (> 0)
        cooling_rate: Multiplicative decay per temperature step (0 < rate < 1)
        min_temperature: Loop ends once temperature falls to this value
        iterations_per_temperature: Proposals evaluated before each cooling step

    Invariants:
        - 0 < min_temperature < initial_temperature, both finite
        - 0 < cooling_rate < 1
        - iterations_per_temperature >= 1

    Example:
        >>> params = AnnealingParams(initial_temperature=10, cooling_rate=0.9)
        >>> params.cooling_rate
        0.9
    """

    initial_temperature: float = 1000.0
    cooling_rate: float = 0.995
    min_temperature: float = 0.01
    iterations_per_temperature: int = 100

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not math.isfinite(self.initial_temperature) or not math.isfinite(self.min_temperature):
            raise InvalidInputError(
                f"temperatures must be finite: initial={self.initial_temperature}, "
                f"min={self.min_temperature}"
            )
        if not self.initial_temperature > 0:
            raise InvalidInputError(
                f"initial_temperature must be positive: {self.initial_temperature}"
            )
        if not 0 < self.cooling_rate < 1:
            raise InvalidInputError(
                f"cooling_rate must be between 0 and 1 (exclusive): {self.cooling_rate}"
            )
        if not self.min_temperature > 0:
            raise InvalidInputError(
                f"min_temperature must be positive: {self.min_temperature}"
            )
        if self.min_temperature >= self.initial_temperature:
            raise InvalidInputError(
                f"min_temperature ({self.min_temperature}) must be below "
                f"initial_temperature ({self.initial_temperature})"
            )
        if self.iterations_per_temperature < 1:
            raise InvalidInputError(
                f"iterations_per_temperature must be at least 1: "
                f"{self.iterations_per_temperature}"
            )


@dataclass(frozen=True)
class OptimizerConfig:
    """
    Search settings for the annealer and multi-run driver (immutable).

    Attributes:
        params: Temperature schedule
        target_size: Preferred group size (3-5, default 4)
        penalty_weight: Weight of the size penalty in the combined cost
        neighbor_strategy: Neighbour proposal strategy (SWAP by default)
        seed: Base seed; attempt i uses seed + i. None = unseeded
        progress_every: Progress callback cadence in iterations
        time_limit: Per-run wall-clock budget in seconds (None = unlimited)

    Example:
        >>> config = OptimizerConfig(seed=7)
        >>> config.target_size
        4
    """

    params: AnnealingParams = field(default_factory=AnnealingParams)
    target_size: int = DEFAULT_GROUP_SIZE
    penalty_weight: float = DEFAULT_PENALTY_WEIGHT
    neighbor_strategy: NeighborStrategy = NeighborStrategy.SWAP
    seed: Optional[int] = None
    progress_every: int = DEFAULT_PROGRESS_EVERY
    time_limit: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not MIN_GROUP_SIZE <= self.target_size <= MAX_GROUP_SIZE:
            raise InvalidInputError(
                f"target_size must be between {MIN_GROUP_SIZE} and "
                f"{MAX_GROUP_SIZE}: {self.target_size}"
            )
        if self.penalty_weight < 0:
            raise InvalidInputError(
                f"penalty_weight must be non-negative: {self.penalty_weight}"
            )
        if self.progress_every < 1:
            raise InvalidInputError(
                f"progress_every must be at least 1: {self.progress_every}"
            )
        if self.time_limit is not None and self.time_limit <= 0:
            raise InvalidInputError(
                f"time_limit must be positive when set: {self.time_limit}"
            )

    def seed_for_attempt(self, attempt: int) -> Optional[int]:
        """Seed for the given attempt index, or None when unseeded."""
        if self.seed is None:
            return None
        return self.seed + attempt
