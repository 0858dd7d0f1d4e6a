"""
Module: optimizer.neighbors

Purpose:
    Neighbour proposals for the annealer: small perturbations of a
    partition. Each proposal works on a copy and reports which groups it
    touched so the caller can rescore only those.

Key Classes:
    - NeighborStrategy: Which perturbation to use

Key Functions:
    - swap_neighbor(): Exchange one member between two groups (active)
    - move_neighbor(): Move one member to another group (alternative)
    - propose(): Dispatch on NeighborStrategy

Used By:
    - optimizer.annealer: Annealer inner loop
"""

from __future__ import annotations

import random
from enum import Enum, auto
from typing import List, Sequence, Tuple

Proposal = Tuple[List[List[int]], Tuple[int, ...]]


class NeighborStrategy(Enum):
    """
    How the annealer perturbs the current partition.

    Attributes:
        SWAP: Exchange one member between two random groups. Group sizes
              never change. This is the strategy used by default.
        MOVE: Move one member from one random group to another. Changes
              two group sizes, so many proposals are rejected by the size
              check. Kept as an alternative; never enabled implicitly.
    """

    SWAP = auto()
    MOVE = auto()


def _copy(partition: Sequence[Sequence[int]]) -> List[List[int]]:
    return [list(group) for group in partition]


def _pick_two_groups(count: int, rng: random.Random) -> Tuple[int, int]:
    first, second = rng.sample(range(count), 2)
    return first, second


def swap_neighbor(partition: Sequence[Sequence[int]], rng: random.Random) -> Proposal:
    """
    Swap one randomly chosen member between two distinct random groups.

    Args:
        partition: Current partition (not modified)
        rng: Random source

    Returns:
        (neighbor, touched). touched is () for a no-op proposal, which
        happens when there are fewer than 2 groups or a chosen group is
        empty.
    """
    neighbor = _copy(partition)
    if len(neighbor) < 2:
        return neighbor, ()

    idx1, idx2 = _pick_two_groups(len(neighbor), rng)
    group1, group2 = neighbor[idx1], neighbor[idx2]
    if not group1 or not group2:
        return neighbor, ()

    pos1 = rng.randrange(len(group1))
    pos2 = rng.randrange(len(group2))
    group1[pos1], group2[pos2] = group2[pos2], group1[pos1]
    return neighbor, (idx1, idx2)


def move_neighbor(partition: Sequence[Sequence[int]], rng: random.Random) -> Proposal:
    """
    Move one randomly chosen member into a different random group.

    Same no-op rules as swap_neighbor.
    """
    neighbor = _copy(partition)
    if len(neighbor) < 2:
        return neighbor, ()

    from_idx, to_idx = _pick_two_groups(len(neighbor), rng)
    source = neighbor[from_idx]
    if not source:
        return neighbor, ()

    member = source.pop(rng.randrange(len(source)))
    neighbor[to_idx].append(member)
    return neighbor, (from_idx, to_idx)


def propose(
    strategy: NeighborStrategy,
    partition: Sequence[Sequence[int]],
    rng: random.Random,
) -> Proposal:
    """Generate a neighbour with the given strategy."""
    if strategy is NeighborStrategy.MOVE:
        return move_neighbor(partition, rng)
    return swap_neighbor(partition, rng)
