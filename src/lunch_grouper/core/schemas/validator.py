"""
Input Validation Utilities

Validates the values a caller hands to the planner: the member id list
and the pair weight ledger.

**DESIGN:**

- Fail fast before any search work begins; never coerce silently
- Basic structural checks always run
- `strict=True` additionally validates the ledger against
  `ledger.schema.json` with jsonschema
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Sequence

import jsonschema

from ..errors import InvalidInputError
from ..models.ledger import parse_pair_key

MIN_MEMBERS = 3

# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(InvalidInputError):
    """Raised when caller data fails validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_member_ids(member_ids: Sequence[Any]) -> None:
    """
    Validate the members of one round.

    Requirements:
        - at least 3 members
        - every id is an int > 0 (bools rejected)
        - no id repeats

    Raises:
        ValidationError: If any requirement fails
    """
    if len(member_ids) < MIN_MEMBERS:
        raise ValidationError(
            f"At least {MIN_MEMBERS} members are required, got {len(member_ids)}",
            path="member_ids",
        )

    bad = [
        m for m in member_ids
        if isinstance(m, bool) or not isinstance(m, int) or m <= 0
    ]
    if bad:
        raise ValidationError(
            f"Member ids must be positive integers: {bad[:5]}",
            path="member_ids",
            errors=[f"Invalid member id: {m!r}" for m in bad],
        )

    seen: set[int] = set()
    duplicates: list[int] = []
    for m in member_ids:
        if m in seen:
            duplicates.append(m)
        seen.add(m)
    if duplicates:
        raise ValidationError(
            f"Member ids must be distinct, repeated: {sorted(set(duplicates))}",
            path="member_ids",
            errors=[f"Duplicate member id: {m}" for m in duplicates],
        )


def validate_ledger(data: Any, *, strict: bool = False) -> None:
    """
    Validate a pair weight ledger.

    Args:
        data: Mapping of pair key to count
        strict: If True, also validate against the JSON schema

    Raises:
        ValidationError: If the ledger is invalid
    """
    if not isinstance(data, Mapping):
        raise ValidationError(
            f"Ledger must be a dict, got {type(data).__name__}",
            path="",
        )

    errors: list[str] = []
    for key, value in data.items():
        if not isinstance(key, str):
            errors.append(f"Key {key!r} is not a string")
            continue
        try:
            smaller, _ = parse_pair_key(key)
        except InvalidInputError as e:
            errors.append(str(e))
        else:
            if smaller <= 0:
                errors.append(f"Key {key!r} refers to a non-positive member id")
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            errors.append(f"Weight for {key!r} must be a non-negative integer: {value!r}")

    if errors:
        raise ValidationError(
            f"Ledger has {len(errors)} invalid entries: {errors[0]}",
            path="ledger",
            errors=errors,
        )

    if strict:
        schema = _load_schema("ledger")
        try:
            jsonschema.validate(dict(data), schema)
        except jsonschema.ValidationError as e:
            raise ValidationError(
                f"Schema validation failed: {e.message}",
                path=".".join(str(p) for p in e.absolute_path),
                errors=[e.message],
            ) from e
