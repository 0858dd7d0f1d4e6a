"""
Module: core.errors

Purpose:
    Exception types shared by the ledger, optimizer and planner.

Key Classes:
    - InvalidInputError: Precondition violation, raised before any search work
    - NoResultError: No usable partition could be produced

Used By:
    - core.models.ledger, core.schemas.validator
    - optimizer.config, optimizer.grouping, optimizer.multi_run
    - planner.controller
"""


class InvalidInputError(ValueError):
    """Input violates a precondition (member ids, parameters, ledger keys)."""
    pass


class NoResultError(RuntimeError):
    """Every optimisation attempt was unusable."""
    pass
