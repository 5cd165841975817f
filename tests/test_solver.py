"""Tests for the restart-based solvers in hitset.solver."""

import pandas as pd
import pytest

from hitset import (
    HitSetAlgorithm,
    HitSetInstance,
    HitSetResult,
    InstanceMismatchError,
    LPGuidedSolver,
    LPSolution,
    MaxCoverageSolver,
    ZeroActivityPathError,
    solve_hitting_set,
)
from hitset.solver import DEFAULT_SEED, restart_rng


class TestHitSetResult:
    """Tests for HitSetResult dataclass."""

    def test_result_creation(self):
        """Test creating a HitSetResult."""
        result = HitSetResult(
            cover=[0, 2],
            algorithm="test",
            is_optimal=True,
            size=2,
            lower_bound=2,
            rounds=3,
            computation_time=0.5,
            history=[(1, 3), (3, 2)],
            metadata={"test": True},
        )

        assert result.cover == [0, 2]
        assert result.size == 2
        assert result.metadata["test"] is True

    def test_history_frame(self):
        """The improvement history renders as a DataFrame."""
        result = HitSetResult(
            cover=[0, 2],
            algorithm="test",
            is_optimal=True,
            size=2,
            lower_bound=2,
            rounds=3,
            computation_time=0.5,
            history=[(1, 3), (3, 2)],
            metadata={},
        )
        frame = result.history_frame()

        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == ["round", "size", "lower_bound", "gap"]
        assert frame["gap"].tolist() == [1, 0]


class TestLPGuidedSolver:
    """Tests for the LP-guided restart controller."""

    def test_small_scenario(self, small_instance, small_solution):
        """The three-set instance is solved optimally in the first round."""
        result = LPGuidedSolver(random_seed=42).solve(small_instance, small_solution)

        assert result.lower_bound == 2
        assert result.size == 2
        assert result.is_optimal is True
        assert result.rounds <= small_instance.num_paths
        assert small_instance.is_cover(result.cover)
        assert result.rounds == 1

    def test_stops_at_lower_bound(self):
        """A cover matching the lower bound ends the search immediately."""
        instance = HitSetInstance.from_sets([(0, 1, 2, 3), (0,), (1,), (2,), (3,)])
        solution = LPSolution.from_activities([1.0, 0.0, 0.0, 0.0, 0.0], 4)
        result = LPGuidedSolver(random_seed=1).solve(instance, solution)

        assert result.cover == [0]
        assert result.rounds == 1

    def test_round_budget(self, random_instance, random_solution):
        """Without reaching the bound, all rounds are used."""
        result = LPGuidedSolver(random_seed=3).solve(
            random_instance, random_solution, max_rounds=12
        )
        assert result.rounds == 12
        assert len(result.metadata["round_sizes"]) == 12

    def test_default_budget_is_num_paths(self, random_instance, random_solution):
        """The default budget is one round per path."""
        result = LPGuidedSolver(random_seed=3).solve(random_instance, random_solution)
        assert result.rounds == random_instance.num_paths
        assert result.metadata["max_rounds"] == random_instance.num_paths

    def test_monotonic_improvement(self, random_instance, random_solution):
        """Improvements are strictly smaller and reported in round order."""
        result = LPGuidedSolver(random_seed=5).solve(random_instance, random_solution)

        rounds = [r for r, _ in result.history]
        sizes = [s for _, s in result.history]
        assert rounds == sorted(rounds)
        assert rounds[0] == 1
        assert all(a > b for a, b in zip(sizes, sizes[1:]))
        assert sizes[-1] == result.size
        assert result.size == min(p for _, p in result.metadata["round_sizes"])

    def test_pruning_never_grows(self, random_instance, random_solution):
        """Every round's pruned cover is at most its constructed cover."""
        result = LPGuidedSolver(random_seed=6).solve(random_instance, random_solution)
        for constructed, pruned in result.metadata["round_sizes"]:
            assert pruned <= constructed

    def test_lower_bound_validity(self, random_instance, random_solution):
        """The best cover is never below the lower bound."""
        result = LPGuidedSolver(random_seed=8).solve(random_instance, random_solution)
        assert result.size >= result.lower_bound
        assert random_instance.is_cover(result.cover)
        assert result.is_optimal is (result.size == result.lower_bound)

    def test_reproducible(self, random_instance, random_solution):
        """Equal seeds give equal results."""
        first = LPGuidedSolver(random_seed=13).solve(random_instance, random_solution)
        second = LPGuidedSolver(random_seed=13).solve(random_instance, random_solution)
        assert first.cover == second.cover
        assert first.history == second.history

    def test_default_seed(self, small_instance, small_solution):
        """Without a seed the default seed is used."""
        solver = LPGuidedSolver()
        assert solver.random_seed == DEFAULT_SEED
        result = solver.solve(small_instance, small_solution)
        assert result.metadata["seed"] == DEFAULT_SEED

    def test_improvement_callback(self, random_instance, random_solution):
        """The callback sees every improvement."""
        seen = []
        result = LPGuidedSolver(random_seed=2).solve(
            random_instance,
            random_solution,
            on_improvement=lambda r, s, lb: seen.append((r, s, lb)),
        )
        assert seen == [(r, s, result.lower_bound) for r, s in result.history]

    def test_requires_solution(self, small_instance):
        """The LP solution is mandatory."""
        with pytest.raises(ValueError, match="requires an LP solution"):
            LPGuidedSolver().solve(small_instance)

    def test_mismatched_solution(self, small_instance):
        """A solution for another instance is rejected."""
        solution = LPSolution.from_activities([0.5, 0.5], num_paths=3)
        with pytest.raises(InstanceMismatchError):
            LPGuidedSolver().solve(small_instance, solution)

    def test_zero_activity_path(self, small_instance):
        """A path whose sets all have zero activity is a fatal input error."""
        solution = LPSolution.from_activities([0.0, 1.0, 1.0], num_paths=3)
        with pytest.raises(ZeroActivityPathError):
            LPGuidedSolver().solve(small_instance, solution)

    def test_empty_instance(self):
        """No paths, no rounds, empty cover."""
        instance = HitSetInstance.from_sets([])
        solution = LPSolution.from_activities([], num_paths=0)
        result = LPGuidedSolver().solve(instance, solution)

        assert result.cover == []
        assert result.rounds == 0
        assert result.is_optimal is True


class TestParallelRestarts:
    """Tests for restarts on a thread pool."""

    def test_best_size_invariant(self, random_instance, random_solution):
        """The best size does not depend on the number of workers."""
        results = [
            LPGuidedSolver(random_seed=21).solve(
                random_instance, random_solution, max_rounds=30, workers=workers
            )
            for workers in (1, 2, 4)
        ]

        assert len({result.size for result in results}) == 1
        assert all(result.rounds == 30 for result in results)
        # Restarts have their own streams, so per-restart sizes agree too.
        round_sizes = [result.metadata["round_sizes"] for result in results]
        assert round_sizes[0] == round_sizes[1] == round_sizes[2]

    def test_parallel_cover_valid(self, random_instance, random_solution):
        """Parallel results are covers and improve monotonically."""
        result = LPGuidedSolver(random_seed=4).solve(
            random_instance, random_solution, workers=3
        )
        sizes = [s for _, s in result.history]

        assert random_instance.is_cover(result.cover)
        assert all(a > b for a, b in zip(sizes, sizes[1:]))
        assert result.size >= result.lower_bound

    def test_parallel_stops_at_lower_bound(self, small_instance, small_solution):
        """Reaching the bound skips the remaining restarts."""
        result = LPGuidedSolver(random_seed=0).solve(
            small_instance, small_solution, max_rounds=50, workers=2
        )
        assert result.size == 2
        assert result.is_optimal is True
        assert result.rounds <= 50

    def test_invalid_workers(self, small_instance, small_solution):
        """The pool needs at least one worker."""
        with pytest.raises(ValueError, match="workers"):
            LPGuidedSolver().solve(small_instance, small_solution, workers=0)

    def test_restart_streams(self):
        """Restart streams are reproducible and distinct."""
        assert restart_rng(1, 0).random() == restart_rng(1, 0).random()
        assert restart_rng(1, 0).random() != restart_rng(1, 1).random()
        assert restart_rng(1, 0).random() != restart_rng(2, 0).random()


class TestMaxCoverageSolver:
    """Tests for the max-coverage baseline."""

    def test_without_solution(self, random_instance):
        """The baseline runs without LP information."""
        result = MaxCoverageSolver().solve(random_instance)

        assert result.algorithm == "max_coverage"
        assert result.lower_bound is None
        assert result.is_optimal is False
        assert random_instance.is_cover(result.cover)
        assert result.size <= result.metadata["constructed_size"]
        assert "gap" not in result.history_frame().columns

    def test_with_solution(self, small_instance, small_solution):
        """With an LP solution the bound is reported."""
        result = MaxCoverageSolver().solve(small_instance, small_solution)
        assert result.lower_bound == 2
        assert result.size == 2
        assert result.is_optimal is True


class TestSolveHittingSet:
    """Tests for the solve_hitting_set dispatcher."""

    def test_default_algorithm(self, small_instance, small_solution):
        """LP_GREEDY is the default."""
        result = solve_hitting_set(small_instance, small_solution, random_seed=1)
        assert result.algorithm == "lp_greedy"

    def test_algorithm_by_name(self, small_instance, small_solution):
        """Algorithms can be named by their value."""
        result = solve_hitting_set(
            small_instance, small_solution, algorithm="max-coverage"
        )
        assert result.algorithm == "max_coverage"

    def test_kwargs_forwarded(self, random_instance, random_solution):
        """Algorithm parameters reach the solver."""
        result = solve_hitting_set(
            random_instance,
            random_solution,
            algorithm=HitSetAlgorithm.LP_GREEDY,
            random_seed=1,
            max_rounds=4,
        )
        assert result.rounds == 4

    def test_unknown_algorithm(self, small_instance, small_solution):
        """Unknown algorithm raises ValueError."""
        with pytest.raises(ValueError, match="Unknown algorithm"):
            solve_hitting_set(small_instance, small_solution, algorithm="unknown")
