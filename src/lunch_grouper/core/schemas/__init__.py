"""Schema and input validation for caller-supplied data."""

from .validator import ValidationError, validate_ledger, validate_member_ids

__all__ = ["ValidationError", "validate_ledger", "validate_member_ids"]
