"""
Module: ledger

Purpose:
    Pair weight ledger: how many times each unordered pair of members has
    shared a lunch group across all past rounds. Provides canonical pair
    keys, lookups, and the per-round weight increments the caller merges
    back into its persisted ledger.

Key Functions:
    - pair_key(a, b): Canonical "<smaller>-<larger>" key
    - parse_pair_key(key): Inverse of pair_key
    - weight_of(ledger, a, b): Count for a pair, 0 when absent
    - increments_for_partition(partition): One +1 record per intra-group pair
    - apply_increments(ledger, increments): New ledger with increments folded in
    - record_round(ledger, partition): Both of the above in one call
    - all_pair_keys(member_ids): Every pair key over a member set
    - match_counts(ledger, member_id): Partners of one member by count

Key Classes:
    - WeightIncrement: (pair key, increment) record

Dependencies:
    - dataclasses (std)
    - itertools (std)

Used By:
    - optimizer.cost: Pair weights for group costs
    - planner.controller: Increments and updated ledger per round

Compatibility:
    The key format "<smaller>-<larger>" is shared with previously stored
    ledgers and must not change.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from ..errors import InvalidInputError

Ledger = Mapping[str, int]


def pair_key(a: int, b: int) -> str:
    """
    Build the canonical key for an unordered pair of members.

    Args:
        a: First member id
        b: Second member id

    Returns:
        "<smaller>-<larger>"

    Raises:
        InvalidInputError: If a == b

    Example:
        >>> pair_key(7, 3)
        '3-7'
    """
    if a == b:
        raise InvalidInputError(f"pair requires two distinct members, got {a} twice")
    smaller, larger = (a, b) if a < b else (b, a)
    return f"{smaller}-{larger}"


def parse_pair_key(key: str) -> Tuple[int, int]:
    """
    Split a canonical pair key back into its two member ids.

    Raises:
        InvalidInputError: If the key is malformed or not canonical
    """
    parts = key.split("-")
    if len(parts) != 2 or not all(p.isascii() and p.isdigit() for p in parts):
        raise InvalidInputError(f"malformed pair key: {key!r}")
    smaller, larger = int(parts[0]), int(parts[1])
    if smaller >= larger or f"{smaller}-{larger}" != key:
        raise InvalidInputError(f"pair key is not canonical: {key!r}")
    return smaller, larger


def weight_of(ledger: Ledger, a: int, b: int) -> int:
    """Return how often a and b were grouped together (0 if never)."""
    return ledger.get(pair_key(a, b), 0)


@dataclass(frozen=True)
class WeightIncrement:
    """
    One ledger delta produced by a round.

    Attributes:
        pair: Canonical pair key
        increment_by: Amount to add (always 1 for generated rounds)
    """

    pair: str
    increment_by: int = 1

    def to_dict(self) -> Dict[str, object]:
        """Record shape stored alongside a round ("edgeUpdates")."""
        return {"pair": self.pair, "incrementBy": self.increment_by}


def increments_for_partition(
    partition: Iterable[Sequence[int]],
) -> List[WeightIncrement]:
    """
    Enumerate every intra-group pair of a partition as a +1 increment.

    Groups are visited in order; pairs within a group follow
    itertools.combinations order.

    Example:
        >>> [i.pair for i in increments_for_partition([[1, 2, 3]])]
        ['1-2', '1-3', '2-3']
    """
    return [
        WeightIncrement(pair_key(a, b))
        for group in partition
        for a, b in itertools.combinations(group, 2)
    ]


def apply_increments(
    ledger: Ledger,
    increments: Iterable[WeightIncrement],
) -> Dict[str, int]:
    """
    Fold increments into a copy of the ledger.

    The caller's ledger is never modified; a new dict is returned.

    Args:
        ledger: Current ledger
        increments: Deltas to add (absent keys start at 0)

    Returns:
        New ledger dict
    """
    updated = dict(ledger)
    for inc in increments:
        updated[inc.pair] = updated.get(inc.pair, 0) + inc.increment_by
    return updated


def record_round(
    ledger: Ledger,
    partition: Iterable[Sequence[int]],
) -> Tuple[Dict[str, int], List[WeightIncrement]]:
    """
    Compute the increments for a round and the ledger they produce.

    Returns:
        (updated ledger, increments)
    """
    increments = increments_for_partition(partition)
    return apply_increments(ledger, increments), increments


def all_pair_keys(member_ids: Sequence[int]) -> List[str]:
    """Every pair key over a member set, in combinations order."""
    return [pair_key(a, b) for a, b in itertools.combinations(member_ids, 2)]


def match_counts(ledger: Ledger, member_id: int) -> List[Tuple[int, int]]:
    """
    List everyone a member has been grouped with and how often.

    Args:
        ledger: Pair weight ledger
        member_id: Member to look up

    Returns:
        (partner id, count) tuples, highest count first, ties by partner id.
        Pairs with a zero count are omitted.
    """
    counts: Dict[int, int] = {}
    for key, weight in ledger.items():
        if weight <= 0:
            continue
        a, b = parse_pair_key(key)
        if a == member_id:
            counts[b] = counts.get(b, 0) + weight
        elif b == member_id:
            counts[a] = counts.get(a, 0) + weight
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))
