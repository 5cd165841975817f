"""Restart-based solvers for the hitting set problem.

The main solver, :class:`LPGuidedSolver`, repeats a round of randomized
greedy construction (:func:`hitset.greedy.construct_cover`) followed by
randomized pruning (:func:`hitset.prune.prune_cover`) and keeps the
smallest cover seen.  The LP relaxation drives it in two ways: its
activities bias the constructor, and the ceiling of its optimum is a
lower bound that ends the search as soon as a cover of that size is
found.

Restarts are independent.  By default they run one after another and
share a single random stream, which makes a run reproducible from its
seed.  With ``workers`` set they run on a thread pool, each restart with
its own stream derived from the seed and its index; the size of the best
cover is then independent of the number of workers.

Algorithms available:
- LP_GREEDY: LP-guided randomized greedy with pruning and restarts
- MAX_COVERAGE: deterministic max-coverage greedy with pruning (baseline)
"""

from __future__ import annotations

import abc
import logging
import random
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np
import pandas as pd

from .core import CoverState
from .greedy import (
    DEFAULT_MAX_DRAWS,
    check_activity_support,
    construct_cover,
    max_coverage_cover,
)
from .instance import HitSetInstance
from .lp_report import LPSolution
from .prune import prune_cover
from .types import SetIndex

logger = logging.getLogger(__name__)

DEFAULT_SEED = 0

ImprovementCallback = Callable[[int, int, int], None]
"""Called as ``callback(round, size, lower_bound)`` when the best cover shrinks."""


class HitSetAlgorithm(Enum):
    """Available hitting set algorithms."""

    LP_GREEDY = "lp-greedy"
    MAX_COVERAGE = "max-coverage"


@dataclass(frozen=True, slots=True)
class HitSetResult:
    """Result of a hitting set solver run.

    Attributes
    ----------
    cover : list[SetIndex]
        Indices of the selected sets.
    algorithm : str
        Name of the algorithm used.
    is_optimal : bool
        Whether the cover is proven optimal, i.e. matches the lower bound.
    size : int
        Number of sets in the cover.
    lower_bound : int | None
        Lower bound from the LP relaxation, if one was available.
    rounds : int
        Number of construct-and-prune rounds completed.
    computation_time : float
        Time taken in seconds.
    history : list[tuple[int, int]]
        ``(round, size)`` for every improvement of the best cover.
    metadata : dict[str, Any]
        Algorithm-specific additional information.
    """

    cover: list[SetIndex]
    algorithm: str
    is_optimal: bool
    size: int
    lower_bound: int | None
    rounds: int
    computation_time: float
    history: list[tuple[int, int]]
    metadata: dict[str, Any]

    def history_frame(self) -> pd.DataFrame:
        """Improvement history as a DataFrame with one row per improvement."""
        frame = pd.DataFrame(self.history, columns=["round", "size"])
        if self.lower_bound is not None:
            frame["lower_bound"] = self.lower_bound
            frame["gap"] = frame["size"] - self.lower_bound
        return frame


def restart_rng(seed: int, index: int) -> random.Random:
    """Independent random stream for restart ``index`` of a run seeded ``seed``."""
    sequence = np.random.SeedSequence(entropy=seed, spawn_key=(index,))
    return random.Random(int(sequence.generate_state(1, dtype=np.uint64)[0]))


class BaseHitSetSolver(abc.ABC):
    """Abstract base class for hitting set solvers."""

    def __init__(self, random_seed: int | None = None) -> None:
        self.random_seed = DEFAULT_SEED if random_seed is None else random_seed

    @abc.abstractmethod
    def solve(
        self,
        instance: HitSetInstance,
        solution: LPSolution | None = None,
        **kwargs: Any,
    ) -> HitSetResult:
        """Find a small cover of ``instance``.

        Parameters
        ----------
        instance : HitSetInstance
            The instance to cover.
        solution : LPSolution, optional
            LP relaxation of ``instance``.
        **kwargs : Any
            Algorithm-specific parameters.

        Returns
        -------
        HitSetResult
            Solution with metadata.
        """
        pass


class LPGuidedSolver(BaseHitSetSolver):
    """LP-guided randomized greedy with pruning and restarts."""

    def solve(
        self,
        instance: HitSetInstance,
        solution: LPSolution | None = None,
        max_rounds: int | None = None,
        workers: int | None = None,
        max_draws: int = DEFAULT_MAX_DRAWS,
        on_improvement: ImprovementCallback | None = None,
        **kwargs: Any,
    ) -> HitSetResult:
        """Solve by repeated construction and pruning.

        Parameters
        ----------
        instance : HitSetInstance
            The instance to cover.
        solution : LPSolution
            LP relaxation of ``instance``; required.
        max_rounds : int, optional
            Restart budget.  Defaults to the number of paths.
        workers : int, optional
            Run restarts on a pool of this many threads, each restart with
            its own random stream.  If ``None`` restarts run sequentially on
            one stream.
        max_draws : int, default 10000
            Acceptance sampling cap per path, see
            :func:`hitset.greedy.construct_cover`.
        on_improvement : callable, optional
            Called as ``on_improvement(round, size, lower_bound)`` whenever
            the best cover shrinks.

        Raises
        ------
        ValueError
            If ``solution`` is missing, or ``workers`` or ``max_rounds`` is
            not positive.
        InstanceMismatchError
            If ``solution`` belongs to a different instance.
        ZeroActivityPathError
            If some path has no hitting set with positive activity.
        """
        if solution is None:
            raise ValueError("LPGuidedSolver requires an LP solution")
        if workers is not None and workers < 1:
            raise ValueError(f"workers must be positive, got {workers}")
        if max_rounds is not None and max_rounds < 1:
            raise ValueError(f"max_rounds must be positive, got {max_rounds}")
        instance.check_solution(solution)
        activities = solution.activities.tolist()
        check_activity_support(instance, activities)

        if max_rounds is None:
            max_rounds = instance.num_paths
        lower_bound = solution.lower_bound

        start_time = time.time()
        if workers is None:
            best, rounds, history, round_sizes = self._solve_sequential(
                instance, activities, lower_bound, max_rounds, max_draws,
                on_improvement,
            )
        else:
            best, rounds, history, round_sizes = self._solve_parallel(
                instance, activities, lower_bound, max_rounds, max_draws,
                on_improvement, workers,
            )
        computation_time = time.time() - start_time

        return HitSetResult(
            cover=best,
            algorithm="lp_greedy",
            is_optimal=len(best) == lower_bound,
            size=len(best),
            lower_bound=lower_bound,
            rounds=rounds,
            computation_time=computation_time,
            history=history,
            metadata={
                "seed": self.random_seed,
                "workers": workers,
                "max_rounds": max_rounds,
                "lp_objective": solution.objective_value,
                "num_active_sets": solution.num_active_sets,
                "round_sizes": round_sizes,
            },
        )

    def _round(
        self,
        instance: HitSetInstance,
        activities: list[float],
        rng: random.Random,
        max_draws: int,
    ) -> tuple[CoverState, CoverState]:
        constructed = construct_cover(instance, activities, rng, max_draws)
        return constructed, prune_cover(instance, constructed, rng)

    def _improved(
        self,
        round_number: int,
        size: int,
        lower_bound: int,
        on_improvement: ImprovementCallback | None,
    ) -> None:
        logger.info(
            "Best solution after %d rounds: %d (lower bound is %d)",
            round_number,
            size,
            lower_bound,
        )
        if on_improvement is not None:
            on_improvement(round_number, size, lower_bound)

    def _solve_sequential(
        self,
        instance: HitSetInstance,
        activities: list[float],
        lower_bound: int,
        max_rounds: int,
        max_draws: int,
        on_improvement: ImprovementCallback | None,
    ):
        rng = random.Random(self.random_seed)
        best: list[SetIndex] | None = None
        history: list[tuple[int, int]] = []
        round_sizes: list[tuple[int, int]] = []
        rounds = 0

        while rounds < max_rounds and (rounds == 0 or len(best) > lower_bound):
            constructed, pruned = self._round(instance, activities, rng, max_draws)
            rounds += 1
            round_sizes.append((constructed.size, pruned.size))
            if best is None or pruned.size < len(best):
                best = pruned.members
                history.append((rounds, pruned.size))
                self._improved(rounds, pruned.size, lower_bound, on_improvement)

        return best or [], rounds, history, round_sizes

    def _solve_parallel(
        self,
        instance: HitSetInstance,
        activities: list[float],
        lower_bound: int,
        max_rounds: int,
        max_draws: int,
        on_improvement: ImprovementCallback | None,
        workers: int,
    ):
        lock = threading.Lock()
        finished = threading.Event()
        best: list[SetIndex] | None = None
        history: list[tuple[int, int]] = []
        round_sizes: dict[int, tuple[int, int]] = {}
        rounds = 0

        def run(index: int) -> None:
            nonlocal best, rounds
            if finished.is_set():
                return
            rng = restart_rng(self.random_seed, index)
            constructed, pruned = self._round(instance, activities, rng, max_draws)
            with lock:
                rounds += 1
                round_sizes[index] = (constructed.size, pruned.size)
                if best is None or pruned.size < len(best):
                    best = pruned.members
                    history.append((rounds, pruned.size))
                    self._improved(rounds, pruned.size, lower_bound, on_improvement)
                if len(best) <= lower_bound:
                    finished.set()

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(run, index) for index in range(max_rounds)]
            try:
                for future in as_completed(futures):
                    future.result()
            except BaseException:
                finished.set()
                for future in futures:
                    future.cancel()
                raise

        ordered_sizes = [round_sizes[index] for index in sorted(round_sizes)]
        return best or [], rounds, history, ordered_sizes


class MaxCoverageSolver(BaseHitSetSolver):
    """Deterministic max-coverage greedy followed by pruning."""

    def solve(
        self,
        instance: HitSetInstance,
        solution: LPSolution | None = None,
        **kwargs: Any,
    ) -> HitSetResult:
        """Solve with a single greedy pass; the LP solution is optional."""
        lower_bound = None
        if solution is not None:
            instance.check_solution(solution)
            lower_bound = solution.lower_bound

        start_time = time.time()
        constructed = max_coverage_cover(instance)
        pruned = prune_cover(instance, constructed)
        computation_time = time.time() - start_time

        return HitSetResult(
            cover=pruned.members,
            algorithm="max_coverage",
            is_optimal=lower_bound is not None and pruned.size == lower_bound,
            size=pruned.size,
            lower_bound=lower_bound,
            rounds=1,
            computation_time=computation_time,
            history=[(1, pruned.size)],
            metadata={"constructed_size": constructed.size},
        )


def solve_hitting_set(
    instance: HitSetInstance,
    solution: LPSolution | None = None,
    algorithm: HitSetAlgorithm | str = HitSetAlgorithm.LP_GREEDY,
    random_seed: int | None = None,
    **kwargs: Any,
) -> HitSetResult:
    """Solve a hitting set instance using the specified algorithm.

    Parameters
    ----------
    instance : HitSetInstance
        The instance to cover.
    solution : LPSolution, optional
        LP relaxation of ``instance``.  Required by ``LP_GREEDY``.
    algorithm : HitSetAlgorithm or str
        Algorithm to use, as enum member or its value.
    random_seed : int, optional
        Random seed for reproducible results.
    **kwargs : Any
        Algorithm-specific parameters.

    Returns
    -------
    HitSetResult
        Solution with metadata.
    """
    if isinstance(algorithm, str):
        try:
            algorithm = HitSetAlgorithm(algorithm)
        except ValueError:
            raise ValueError(f"Unknown algorithm: {algorithm}") from None

    if algorithm == HitSetAlgorithm.LP_GREEDY:
        solver = LPGuidedSolver(random_seed)
    elif algorithm == HitSetAlgorithm.MAX_COVERAGE:
        solver = MaxCoverageSolver(random_seed)
    else:
        raise ValueError(f"Unknown algorithm: {algorithm}")
    return solver.solve(instance, solution, **kwargs)
