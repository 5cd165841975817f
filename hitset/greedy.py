"""Greedy construction of feasible covers.

:func:`construct_cover` is the randomized constructor run once per
restart.  It walks the paths in a random order and, for every path that
is still unhit, picks one of its sets by acceptance sampling on the LP
activities: a uniformly drawn candidate is accepted with probability
equal to its activity.  Sets the LP relaxation uses heavily are therefore
preferred without being forced.

:func:`max_coverage_cover` is the classic deterministic greedy that
always takes the set hitting the most unhit paths.  It ignores the LP
solution and serves as a baseline.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from .core import CoverState
from .errors import InvariantViolationError, ZeroActivityPathError
from .instance import HitSetInstance

logger = logging.getLogger(__name__)

DEFAULT_MAX_DRAWS = 10_000


def check_activity_support(
    instance: HitSetInstance, activities: Sequence[float]
) -> None:
    """Ensure every path is hit by at least one set with positive activity.

    Acceptance sampling never accepts a set with zero activity, so a path
    without such a set could not be covered.

    Raises
    ------
    ZeroActivityPathError
        For the first path whose sets all have zero activity.
    """
    for path, hitting in enumerate(instance.paths):
        if not any(activities[s] > 0 for s in hitting):
            raise ZeroActivityPathError(path)


def _sample_hitting_set(
    hitting: Sequence[int],
    activities: Sequence[float],
    rng: random.Random,
    max_draws: int,
) -> int:
    for _ in range(max_draws):
        candidate = rng.choice(hitting)
        if rng.random() < activities[candidate]:
            return candidate
    # Only reached for tiny activities; sample proportionally instead.
    logger.debug(
        "No set accepted after %d draws; sampling proportionally", max_draws
    )
    weights = [max(activities[s], 0.0) for s in hitting]
    return rng.choices(hitting, weights=weights)[0]


def construct_cover(
    instance: HitSetInstance,
    activities: Sequence[float],
    rng: random.Random,
    max_draws: int = DEFAULT_MAX_DRAWS,
) -> CoverState:
    """Build one feasible cover biased by LP activities.

    Parameters
    ----------
    instance : HitSetInstance
        The instance to cover.  Not modified.
    activities : Sequence[float]
        Activity of each set.  Every path needs a hitting set with positive
        activity (see :func:`check_activity_support`).
    rng : random.Random
        Source of randomness for the path order and the sampling.
    max_draws : int, default 10000
        Acceptance sampling attempts per path before falling back to
        drawing proportionally to activity.

    Returns
    -------
    CoverState
        A complete cover and its coverage counters.

    Raises
    ------
    InvariantViolationError
        If a path is left unhit.
    """
    state = CoverState.empty(instance.num_paths)
    order = list(range(instance.num_paths))
    rng.shuffle(order)

    for path in order:
        if state.counters[path] > 0:
            continue
        chosen = _sample_hitting_set(
            instance.paths[path], activities, rng, max_draws
        )
        state.add(instance, chosen)
        if state.num_uncovered == 0:
            break

    if not state.is_complete:
        raise InvariantViolationError(
            f"Constructed cover leaves {state.num_uncovered} paths unhit"
        )
    return state


def max_coverage_cover(instance: HitSetInstance) -> CoverState:
    """Build a cover by repeatedly taking the set hitting most unhit paths.

    Ties go to the lowest set index.

    Returns
    -------
    CoverState
        A complete cover and its coverage counters.
    """
    state = CoverState.empty(instance.num_paths)
    # Number of still-unhit paths each set would hit.
    gain = [len(members) for members in instance.sets]

    while state.num_uncovered > 0:
        best_set = max(range(len(gain)), key=gain.__getitem__)
        if gain[best_set] <= 0:
            raise InvariantViolationError(
                f"{state.num_uncovered} paths left but no set hits any of them"
            )
        for path in instance.sets[best_set]:
            if state.counters[path] == 0:
                for other in instance.paths[path]:
                    gain[other] -= 1
        state.add(instance, best_set)
        if gain[best_set] != 0:
            raise InvariantViolationError(
                f"Set {best_set} still has gain {gain[best_set]} after selection"
            )

    return state
