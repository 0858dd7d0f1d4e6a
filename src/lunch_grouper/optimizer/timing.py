"""
Module: optimizer.timing

Purpose:
    Timing instrumentation for multi-run searches, to see how long each
    attempt took and which attempt won.

Key Classes:
    - TimingLog: Collects per-attempt timing metrics

Key Functions:
    - timed_phase: Context manager for timing code blocks

Dependencies:
    - time (std)
    - contextlib (std)
    - dataclasses (std)

Used By:
    - optimizer.multi_run: Records each attempt
    - planner.controller: Round metadata
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, List, Optional


@dataclass
class TimingLog:
    """
    Timing metrics for one planning request.

    Attributes:
        phase_timings: Dict of phase_name -> duration_seconds
        attempt_timings: Dict of attempt index -> duration_seconds

    Example:
        >>> log = TimingLog()
        >>> log.log_attempt(0, 1.25)
        >>> log.total_attempt_seconds
        1.25
    """
    phase_timings: Dict[str, float] = field(default_factory=dict)
    attempt_timings: Dict[int, float] = field(default_factory=dict)

    def log_phase(self, phase: str, duration: float) -> None:
        """Log a request-level timing metric."""
        self.phase_timings[phase] = duration

    def log_attempt(self, attempt: int, duration: float) -> None:
        """Log the duration of one annealing attempt."""
        self.attempt_timings[attempt] = duration

    @property
    def total_attempt_seconds(self) -> float:
        """Sum of all attempt durations (exceeds wall time when parallel)."""
        return sum(self.attempt_timings.values())

    def get_slowest_attempts(self, n: int = 3) -> List[tuple]:
        """Get the N slowest attempts as (attempt, seconds)."""
        ordered = sorted(self.attempt_timings.items(), key=lambda x: x[1], reverse=True)
        return ordered[:n]

    def summary(self) -> str:
        """Generate human-readable timing summary."""
        lines = ["", "=== Planning Timing Summary ==="]

        if self.phase_timings:
            lines.append("Phases:")
            for phase, duration in sorted(self.phase_timings.items()):
                lines.append(f"  {phase:25s} {duration:.3f}s")

        if self.attempt_timings:
            lines.append("")
            lines.append("Attempts:")
            for attempt, duration in sorted(self.attempt_timings.items()):
                lines.append(f"  attempt {attempt + 1:<17d} {duration:.3f}s")

        lines.append("")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Export timing data as dictionary."""
        return {
            "phase_timings": dict(self.phase_timings),
            "attempt_timings": {str(k): v for k, v in self.attempt_timings.items()},
            "total_attempt_seconds": self.total_attempt_seconds,
        }


@contextmanager
def timed_phase(
    log: TimingLog,
    phase: str,
    attempt: Optional[int] = None,
) -> Generator[None, None, None]:
    """
    Context manager for timing a code phase.

    Args:
        log: TimingLog instance to record metrics
        phase: Name of the phase being timed
        attempt: If provided, records as an attempt metric;
                 otherwise records as a phase metric

    Example:
        >>> log = TimingLog()
        >>> with timed_phase(log, "search"):
        ...     result = best_of_n(members, ledger)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if attempt is not None:
            log.log_attempt(attempt, elapsed)
        else:
            log.log_phase(phase, elapsed)
