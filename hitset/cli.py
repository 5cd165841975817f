"""Command line interface for the hitting set solver.

Usage::

    hitset-solver SETS_FILE LP_SOLUTION_FILE [SEED] [--workers N]
                  [--max-rounds N] [--algorithm {lp-greedy,max-coverage}]

Progress and the final cover are printed to standard output.  Any error
prints a single ``Error:`` line and exits with status 1.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from .errors import HitSetError
from .instance import load_instance
from .lp_report import read_lp_report
from .solver import HitSetAlgorithm, solve_hitting_set


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return number


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser of ``hitset-solver``."""
    parser = argparse.ArgumentParser(
        prog="hitset-solver",
        description="LP-guided randomized greedy solver for hitting set instances",
    )
    parser.add_argument("sets", help="Coverage file, one line of path indices per set")
    parser.add_argument("lp_solution", help="LP relaxation report of the instance")
    parser.add_argument(
        "seed",
        nargs="?",
        type=_non_negative_int,
        help="Random seed for a reproducible run",
    )
    parser.add_argument(
        "--workers",
        type=_positive_int,
        help="Run restarts on this many threads",
    )
    parser.add_argument(
        "--max-rounds",
        type=_positive_int,
        help="Restart budget (default: number of paths)",
    )
    parser.add_argument(
        "--algorithm",
        default=HitSetAlgorithm.LP_GREEDY.value,
        choices=[algorithm.value for algorithm in HitSetAlgorithm],
        help="Algorithm to use",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log progress details"
    )
    return parser


def _print_improvement(round_number: int, size: int, lower_bound: int) -> None:
    print(
        f"best solution after {round_number} rounds: {size} "
        f"(lower bound is {lower_bound})"
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the solver and return the process exit status."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.seed is not None:
        print(f"Using seed {args.seed}")

    kwargs = {}
    if args.algorithm == HitSetAlgorithm.LP_GREEDY.value:
        kwargs = {
            "max_rounds": args.max_rounds,
            "workers": args.workers,
            "on_improvement": _print_improvement,
        }

    try:
        solution = read_lp_report(args.lp_solution)
        instance = load_instance(args.sets, solution)
        result = solve_hitting_set(
            instance,
            solution,
            algorithm=args.algorithm,
            random_seed=args.seed,
            **kwargs,
        )
    except (HitSetError, OSError) as exc:
        print(f"Error: {exc}")
        return 1

    print(f"Best solution after {result.rounds} rounds: {result.size}")
    print(f"Lower bound: {result.lower_bound}")
    print("cover:" + "".join(f" {set_index}" for set_index in result.cover))
    return 0


if __name__ == "__main__":
    sys.exit(main())
