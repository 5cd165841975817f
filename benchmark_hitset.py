#!/usr/bin/env python3
"""Performance benchmarking suite for hitting set algorithms.

This script benchmarks the LP-guided restart solver against the
max-coverage greedy baseline on synthetic instances of varying size and
density.  The LP relaxation of every instance is solved with PuLP, so the
reported gap is measured against a proven lower bound.
"""

import argparse
import random
import time
from typing import Any

import pandas as pd

from hitset import (
    HitSetInstance,
    solve_hitting_set,
    solve_lp_relaxation,
)


def generate_instance(
    n_paths: int, n_sets: int, density: float, rng: random.Random
) -> HitSetInstance:
    """Generate a random instance in which every path is hit.

    Parameters
    ----------
    n_paths : int
        Number of paths
    n_sets : int
        Number of sets
    density : float
        Probability that a set hits a given path
    rng : random.Random
        Source of randomness

    Returns
    -------
    HitSetInstance
        Synthetic instance
    """
    sets = [
        [p for p in range(n_paths) if rng.random() < density] for _ in range(n_sets)
    ]
    for path in range(n_paths):
        if not any(path in members for members in sets):
            rng.choice(sets).append(path)
    return HitSetInstance.from_sets(sorted(members) for members in sets)


def benchmark_algorithm(
    instance: HitSetInstance, solution, algorithm: str, seed: int, **kwargs
) -> dict[str, Any]:
    """Benchmark a single algorithm on one instance."""
    start_time = time.time()
    result = solve_hitting_set(
        instance, solution, algorithm=algorithm, random_seed=seed, **kwargs
    )
    return {
        "algorithm": algorithm,
        "runtime": time.time() - start_time,
        "solution_size": result.size,
        "lower_bound": result.lower_bound,
        "optimal": result.is_optimal,
        "rounds": result.rounds,
        "valid": instance.is_cover(result.cover),
    }


def run_benchmark_suite(
    n_paths_list: list[int],
    n_sets_list: list[int],
    density_list: list[float],
    algorithms: list[str],
    n_trials: int = 3,
    workers: int | None = None,
    seed: int = 0,
) -> list[dict[str, Any]]:
    """Run the benchmark over all configurations.

    Returns
    -------
    list[dict[str, Any]]
        One record per (configuration, trial, algorithm).
    """
    rng = random.Random(seed)
    results = []
    total_configs = len(n_paths_list) * len(n_sets_list) * len(density_list)
    config_num = 0

    print(
        f"Running benchmark suite: {total_configs} configurations × "
        f"{len(algorithms)} algorithms × {n_trials} trials"
    )
    print()

    for n_paths in n_paths_list:
        for n_sets in n_sets_list:
            for density in density_list:
                config_num += 1
                print(
                    f"[{config_num}/{total_configs}] {n_paths} paths × "
                    f"{n_sets} sets, density={density:.2f}"
                )
                for trial in range(n_trials):
                    instance = generate_instance(n_paths, n_sets, density, rng)
                    solution = solve_lp_relaxation(instance)
                    for algorithm in algorithms:
                        kwargs = {"workers": workers} if algorithm == "lp-greedy" else {}
                        result = benchmark_algorithm(
                            instance, solution, algorithm, seed + trial, **kwargs
                        )
                        result.update(
                            {
                                "n_paths": n_paths,
                                "n_sets": n_sets,
                                "density": density,
                                "trial": trial,
                                "config_id": f"{n_paths}x{n_sets}_d{density:.2f}",
                            }
                        )
                        results.append(result)
                        print(
                            f"  {algorithm}: {result['runtime']:.3f}s "
                            f"(size={result['solution_size']}, "
                            f"bound={result['lower_bound']})"
                        )
                print()

    return results


def analyze_results(results: list[dict[str, Any]]) -> pd.DataFrame:
    """Print a summary of the benchmark and return it as a DataFrame."""
    df = pd.DataFrame(results)
    df["gap"] = df["solution_size"] - df["lower_bound"]

    print("=" * 60)
    print("BENCHMARK RESULTS SUMMARY")
    print("=" * 60)
    print()

    print("SOLUTION QUALITY (SMALLER IS BETTER):")
    quality = df.groupby("algorithm").agg(
        {
            "solution_size": ["mean", "min", "max"],
            "gap": ["mean", "max"],
            "optimal": "mean",
            "runtime": ["mean", "max"],
        }
    )
    print(quality.round(3))
    print()

    invalid = df[~df["valid"]]
    if len(invalid) > 0:
        print(f"WARNING: {len(invalid)} runs returned an infeasible cover")
        print()

    print("BEST ALGORITHM BY CONFIGURATION:")
    winners = df.loc[df.groupby(["config_id", "trial"])["solution_size"].idxmin()]
    print(winners["algorithm"].value_counts())
    return df


def main():
    """Main benchmark runner with command line interface."""
    parser = argparse.ArgumentParser(description="Benchmark hitset algorithms")
    parser.add_argument("--paths", nargs="+", type=int, default=[50, 200],
                        help="List of path counts to test")
    parser.add_argument("--sets", nargs="+", type=int, default=[20, 60],
                        help="List of set counts to test")
    parser.add_argument("--density", nargs="+", type=float, default=[0.05, 0.15],
                        help="List of densities (0.0-1.0)")
    parser.add_argument("--algorithms", nargs="+",
                        default=["lp-greedy", "max-coverage"],
                        choices=["lp-greedy", "max-coverage"],
                        help="Algorithms to benchmark")
    parser.add_argument("--trials", type=int, default=3,
                        help="Number of trials per configuration")
    parser.add_argument("--workers", type=int,
                        help="Thread pool size for lp-greedy restarts")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument("--save", type=str, help="Save detailed results to CSV file")

    args = parser.parse_args()

    results = run_benchmark_suite(
        n_paths_list=args.paths,
        n_sets_list=args.sets,
        density_list=args.density,
        algorithms=args.algorithms,
        n_trials=args.trials,
        workers=args.workers,
        seed=args.seed,
    )
    df = analyze_results(results)

    if args.save:
        df.to_csv(args.save, index=False)
        print(f"\nDetailed results saved to {args.save}")


if __name__ == "__main__":
    main()
