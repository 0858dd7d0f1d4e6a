"""
Module: optimizer.grouping

Purpose:
    Partition generator: random initial partitions that follow the group
    size policy, plus the structural checks every returned partition must
    pass.

Key Functions:
    - initial_partition(): Shuffle and split members by the remainder policy
    - valid_sizes(): Every group size within [3, 5]
    - valid_coverage(): Every expected member in exactly one group
    - copy_partition(): Independent deep copy

Algorithm (remainder policy, n members, target t, q = n // t, r = n % t):
    r == 0: q groups of t
    r == 1: q - 1 groups of t, then one group of the remaining t + 1
    r == 2: q - 1 groups of t, then the remaining t + 2 split in two
            (first half takes the ceiling)
    r == 3: q groups of t, then one group of 3
    With t == 4 this always lands inside [3, 5]. For other targets the
    policy can leave an out-of-window group; the generator then splits
    evenly into the fewest groups that fit.

Dependencies:
    - random (std)

Used By:
    - optimizer.annealer: Initial state, best snapshots
    - optimizer.multi_run: Result checks
    - planner.controller: Final checks
"""

from __future__ import annotations

import logging
import math
import random
from typing import Iterable, List, Optional, Sequence

from lunch_grouper.core.errors import InvalidInputError

from .config import DEFAULT_GROUP_SIZE, MAX_GROUP_SIZE, MIN_GROUP_SIZE

logger = logging.getLogger(__name__)


def initial_partition(
    member_ids: Sequence[int],
    target_size: int = DEFAULT_GROUP_SIZE,
    rng: Optional[random.Random] = None,
) -> List[List[int]]:
    """
    Build a random partition respecting the group size policy.

    Args:
        member_ids: Distinct member ids (at least 3)
        target_size: Preferred group size (3-5)
        rng: Random source; a fresh unseeded generator when None

    Returns:
        List of groups (lists of member ids)

    Raises:
        InvalidInputError: Fewer than 3 members, or target_size outside [3, 5]

    Example:
        >>> sizes = [len(g) for g in initial_partition(range(1, 11), rng=random.Random(1))]
        >>> sizes
        [4, 3, 3]
    """
    n = len(member_ids)
    if n < MIN_GROUP_SIZE:
        raise InvalidInputError(
            f"At least {MIN_GROUP_SIZE} members are required to form a group, got {n}"
        )
    if not MIN_GROUP_SIZE <= target_size <= MAX_GROUP_SIZE:
        raise InvalidInputError(
            f"target_size must be between {MIN_GROUP_SIZE} and {MAX_GROUP_SIZE}: {target_size}"
        )

    rng = rng or random.Random()
    shuffled = list(member_ids)
    rng.shuffle(shuffled)

    groups = _split_by_remainder(shuffled, target_size)
    if not valid_sizes(groups):
        logger.debug(
            f"Remainder policy gave sizes {[len(g) for g in groups]} for "
            f"{n} members at target {target_size}; using even split"
        )
        groups = _split_evenly(shuffled, target_size)
    return groups


def _split_by_remainder(shuffled: List[int], target_size: int) -> List[List[int]]:
    """Apply the remainder policy to an already shuffled member list."""
    q, r = divmod(len(shuffled), target_size)

    # Groups of target_size before the tail
    full_groups = q - 1 if r in (1, 2) else q
    full_groups = max(full_groups, 0)

    groups = [
        shuffled[i * target_size:(i + 1) * target_size]
        for i in range(full_groups)
    ]
    tail = shuffled[full_groups * target_size:]
    if not tail:
        return groups

    if r == 2:
        mid = math.ceil(len(tail) / 2)
        groups.append(tail[:mid])
        groups.append(tail[mid:])
    else:
        groups.append(tail)
    return [g for g in groups if g]


def _split_evenly(shuffled: List[int], target_size: int) -> List[List[int]]:
    """Split into the group count closest to n / target whose sizes fit [3, 5]."""
    n = len(shuffled)
    count = max(1, round(n / target_size))
    while math.ceil(n / count) > MAX_GROUP_SIZE:
        count += 1
    while count > 1 and n // count < MIN_GROUP_SIZE:
        count -= 1

    base, extra = divmod(n, count)
    groups: List[List[int]] = []
    start = 0
    for i in range(count):
        size = base + 1 if i < extra else base
        groups.append(shuffled[start:start + size])
        start += size
    return groups


def valid_sizes(partition: Iterable[Sequence[int]]) -> bool:
    """True iff every group has between 3 and 5 members."""
    return all(MIN_GROUP_SIZE <= len(group) <= MAX_GROUP_SIZE for group in partition)


def valid_coverage(
    partition: Iterable[Sequence[int]],
    expected_members: Iterable[int],
) -> bool:
    """
    Check that every expected member appears in exactly one group.

    Returns:
        False on any duplicate, omission, or unexpected member
    """
    assigned: set[int] = set()
    for group in partition:
        for member in group:
            if member in assigned:
                logger.debug(f"Member {member} appears in multiple groups")
                return False
            assigned.add(member)

    expected = set(expected_members)
    if assigned != expected:
        missing = expected - assigned
        unexpected = assigned - expected
        logger.debug(
            f"Coverage mismatch: missing={sorted(missing)[:5]} "
            f"unexpected={sorted(unexpected)[:5]}"
        )
        return False
    return True


def copy_partition(partition: Iterable[Sequence[int]]) -> List[List[int]]:
    """Deep copy with no shared group lists."""
    return [list(group) for group in partition]
