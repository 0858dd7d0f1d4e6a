"""
Lunch Grouper Core Package

Shared data models, errors and input validation.

**DESIGN NOTES:**

1. **Ledger is never mutated in place**
   - Every update returns a new dict, so readers holding the old
     ledger keep a consistent view.

2. **Canonical pair keys**
   - "<smaller>-<larger>" is the only key format accepted anywhere.

3. **Results are frozen**
   - SearchResult stores nested tuples; working partitions stay private
     to the annealer.
"""

from .errors import InvalidInputError, NoResultError
from .models import (
    AnnealingStats,
    SearchResult,
    WeightIncrement,
    apply_increments,
    increments_for_partition,
    pair_key,
    weight_of,
)

__all__ = [
    "InvalidInputError",
    "NoResultError",
    "AnnealingStats",
    "SearchResult",
    "WeightIncrement",
    "apply_increments",
    "increments_for_partition",
    "pair_key",
    "weight_of",
]
