"""
Logging utilities for planner progress and for capturing planner logs
in a front end (console widget, web request, test harness).
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from queue import Queue
from typing import TYPE_CHECKING, Generator, NamedTuple, Optional

if TYPE_CHECKING:
    from lunch_grouper.optimizer.annealer import ProgressSnapshot

PACKAGE_LOGGER_NAME = "lunch_grouper"
PROGRESS_LOGGER_NAME = "lunch_grouper.progress"

_progress_logger = logging.getLogger(PROGRESS_LOGGER_NAME)


def log_progress(snapshot: "ProgressSnapshot") -> None:
    """
    Default annealer progress observer: one DEBUG line per report.

    Args:
        snapshot: Current annealer state
    """
    _progress_logger.debug(
        f"SA iteration {snapshot.iteration}: T={snapshot.temperature:.4f}, "
        f"current={snapshot.current_cost}, best={snapshot.best_cost}, "
        f"elapsed={snapshot.elapsed_seconds:.2f}s"
    )


class PlannerLogLine(NamedTuple):
    """One captured planner log record."""

    source: str
    level: str
    message: str
    is_progress: bool


class PlannerLogHandler(logging.Handler):
    """
    Forwards planner log records to a queue as PlannerLogLine tuples.

    Progress lines from the annealer are flagged so a display can show
    them in a status bar instead of the main log.
    """

    def __init__(self, log_queue: Queue, level: int = logging.INFO):
        super().__init__(level)
        self.log_queue = log_queue

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.log_queue.put(PlannerLogLine(
                source=record.name,
                level=record.levelname,
                message=record.getMessage(),
                is_progress=record.name == PROGRESS_LOGGER_NAME,
            ))
        except Exception:
            self.handleError(record)


def attach_planner_handler(
    log_queue: Queue,
    level: int = logging.INFO,
    logger_name: str = PACKAGE_LOGGER_NAME,
) -> PlannerLogHandler:
    """
    Attach a PlannerLogHandler to the package logger.

    Lowers the logger level to `level` when it would otherwise drop
    records the handler should see.

    Returns:
        The attached handler (for later removal).
    """
    logger = logging.getLogger(logger_name)
    handler = PlannerLogHandler(log_queue, level=level)
    logger.addHandler(handler)
    if logger.getEffectiveLevel() > level:
        logger.setLevel(level)
    return handler


def detach_planner_handler(
    handler: PlannerLogHandler,
    logger_name: str = PACKAGE_LOGGER_NAME,
) -> None:
    """Remove a handler added by attach_planner_handler."""
    logging.getLogger(logger_name).removeHandler(handler)


@contextmanager
def capture_planner_logs(
    log_queue: Queue,
    level: int = logging.INFO,
    logger_name: Optional[str] = PACKAGE_LOGGER_NAME,
) -> Generator[PlannerLogHandler, None, None]:
    """
    Capture planner logs into a queue for the duration of a block.

    The logger level is restored on exit.

    Example:
        >>> lines = Queue()
        >>> with capture_planner_logs(lines):
        ...     plan = plan_round(members, ledger)
    """
    name = logger_name or PACKAGE_LOGGER_NAME
    logger = logging.getLogger(name)
    previous_level = logger.level
    handler = attach_planner_handler(log_queue, level, name)
    try:
        yield handler
    finally:
        detach_planner_handler(handler, name)
        logger.setLevel(previous_level)
