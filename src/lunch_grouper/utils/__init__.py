"""Shared utilities (logging)."""

from .logging_utils import (
    PlannerLogHandler,
    PlannerLogLine,
    attach_planner_handler,
    capture_planner_logs,
    detach_planner_handler,
    log_progress,
)

__all__ = [
    "PlannerLogHandler",
    "PlannerLogLine",
    "attach_planner_handler",
    "capture_planner_logs",
    "detach_planner_handler",
    "log_progress",
]
