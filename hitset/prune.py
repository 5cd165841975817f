"""Removal of redundant sets from a feasible cover.

A member of a cover is redundant when every path it hits is also hit by
some other member.  Dropping one redundant member can make another one
essential, so the outcome depends on the order in which members are
examined.  The solver examines them in random order and repeats the
whole construct-and-prune round many times.
"""

from __future__ import annotations

import random

from .core import CoverState
from .errors import InvariantViolationError
from .instance import HitSetInstance


def prune_cover(
    instance: HitSetInstance,
    state: CoverState,
    rng: random.Random | None = None,
) -> CoverState:
    """Drop redundant members of a cover.

    Parameters
    ----------
    instance : HitSetInstance
        The instance the cover belongs to.
    state : CoverState
        A complete cover with its counters.  Not modified.
    rng : random.Random, optional
        Source of the examination order.  If ``None`` members are examined
        in the order they were added.

    Returns
    -------
    CoverState
        A complete cover using a subset of the members of ``state``.  Its
        members keep their relative order of examination.

    Raises
    ------
    InvariantViolationError
        If ``state`` is not a complete cover or its counters are corrupt.
    """
    if not state.is_complete:
        raise InvariantViolationError(
            f"Cannot prune a cover leaving {state.num_uncovered} paths unhit"
        )

    pruned = state.copy()
    order = list(state.members)
    if rng is not None:
        rng.shuffle(order)

    kept = []
    for set_index in order:
        if pruned.is_redundant(instance, set_index):
            pruned.release(instance, set_index)
        else:
            kept.append(set_index)
    pruned.members = kept

    if not pruned.is_complete:
        raise InvariantViolationError(
            f"Pruning left {pruned.num_uncovered} paths unhit"
        )
    return pruned
