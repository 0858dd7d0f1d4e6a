"""
Module: planner.config

Purpose:
    Configuration dataclass for planning a lunch round. Immutable
    configuration with validation on construction, plus a tolerant
    reader for settings dictionaries supplied by the caller.

Key Classes:
    - PlannerConfig: Main configuration for plan_round

Dependencies:
    - dataclasses (std)
    - optimizer.config: AnnealingParams, OptimizerConfig

Used By:
    - planner.controller: plan_round
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from lunch_grouper.core.errors import InvalidInputError
from lunch_grouper.optimizer.config import (
    DEFAULT_ATTEMPTS,
    DEFAULT_GROUP_SIZE,
    DEFAULT_PENALTY_WEIGHT,
    AnnealingParams,
    OptimizerConfig,
)

logger = logging.getLogger(__name__)

# Settings keys accepted by from_mapping: field name -> aliases
_ANNEALING_KEYS = {
    "initial_temperature": ("initial_temperature", "initialTemperature", "initialTemp"),
    "cooling_rate": ("cooling_rate", "coolingRate"),
    "min_temperature": ("min_temperature", "minTemperature", "minTemp"),
    "iterations_per_temperature": (
        "iterations_per_temperature",
        "iterationsPerTemperature",
        "maxItersPerTemp",
    ),
}


@dataclass(frozen=True)
class PlannerConfig:
    """
    Configuration for planning one round (immutable).

    Attributes:
        target_size: Preferred group size (3-5)
        attempts: Independent annealing runs (>= 1)
        seed: Base seed for reproducible planning (None = unseeded)
        workers: Attempts run concurrently on this many threads
        annealing: Temperature schedule
        penalty_weight: Weight of the size penalty in the combined cost
        time_limit: Per-attempt wall-clock budget in seconds
        strict_validation: Validate the ledger against the JSON schema

    Example:
        >>> config = PlannerConfig(attempts=5, seed=42)
        >>> config.optimizer_config().seed
        42
    """

    target_size: int = DEFAULT_GROUP_SIZE
    attempts: int = DEFAULT_ATTEMPTS
    seed: Optional[int] = None
    workers: int = 1
    annealing: AnnealingParams = field(default_factory=AnnealingParams)
    penalty_weight: float = DEFAULT_PENALTY_WEIGHT
    time_limit: Optional[float] = None
    strict_validation: bool = False

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.attempts < 1:
            raise InvalidInputError(f"attempts must be at least 1: {self.attempts}")
        if self.workers < 1:
            raise InvalidInputError(f"workers must be at least 1: {self.workers}")
        # Remaining fields are validated by OptimizerConfig
        self.optimizer_config()

    def optimizer_config(self) -> OptimizerConfig:
        """Search settings derived from this configuration."""
        return OptimizerConfig(
            params=self.annealing,
            target_size=self.target_size,
            penalty_weight=self.penalty_weight,
            seed=self.seed,
            time_limit=self.time_limit,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> PlannerConfig:
        """
        Build a configuration from a caller settings dictionary.

        Accepts snake_case field names and the camelCase names used by
        stored application settings (initialTemp, coolingRate, minTemp,
        maxItersPerTemp). Annealing keys may sit at the top level or
        under "annealing". Values that cannot be parsed fall back to the
        default with a warning; parsed values out of range still raise.

        Raises:
            InvalidInputError: If a parsed value violates a constraint
        """
        defaults = cls()
        nested = data.get("annealing")
        annealing_source: Mapping[str, Any] = nested if isinstance(nested, Mapping) else data

        annealing_values: dict[str, Any] = {}
        for name, aliases in _ANNEALING_KEYS.items():
            default = getattr(defaults.annealing, name)
            raw = _first_present(annealing_source, aliases)
            if name == "iterations_per_temperature":
                annealing_values[name] = _safe_int(raw, default, name)
            else:
                annealing_values[name] = _safe_float(raw, default, name)

        seed_raw = _first_present(data, ("seed",))
        time_limit_raw = _first_present(data, ("time_limit", "timeLimit"))

        return cls(
            target_size=_safe_int(
                _first_present(data, ("target_size", "targetSize")),
                defaults.target_size, "target_size",
            ),
            attempts=_safe_int(_first_present(data, ("attempts",)), defaults.attempts, "attempts"),
            seed=_safe_int(seed_raw, None, "seed") if seed_raw is not None else None,
            workers=_safe_int(_first_present(data, ("workers",)), defaults.workers, "workers"),
            annealing=AnnealingParams(**annealing_values),
            penalty_weight=_safe_float(
                _first_present(data, ("penalty_weight", "penaltyWeight", "sizePenaltyWeight")),
                defaults.penalty_weight, "penalty_weight",
            ),
            time_limit=(
                _safe_float(time_limit_raw, None, "time_limit")
                if time_limit_raw is not None else None
            ),
            strict_validation=bool(data.get("strict_validation", defaults.strict_validation)),
        )


def _first_present(data: Mapping[str, Any], keys: tuple) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _safe_int(value: Any, default: Any, name: str) -> Any:
    """Safely convert a value to int, returning default on failure."""
    if value is None:
        return default
    if isinstance(value, bool):
        logger.warning(f"Ignoring boolean setting {name}={value!r}, using {default!r}")
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        logger.warning(f"Ignoring unparseable setting {name}={value!r}, using {default!r}")
        return default


def _safe_float(value: Any, default: Any, name: str) -> Any:
    """Safely convert a value to float, returning default on failure."""
    if value is None:
        return default
    if isinstance(value, bool):
        logger.warning(f"Ignoring boolean setting {name}={value!r}, using {default!r}")
        return default
    try:
        return float(value)
    except (ValueError, TypeError):
        logger.warning(f"Ignoring unparseable setting {name}={value!r}, using {default!r}")
        return default
