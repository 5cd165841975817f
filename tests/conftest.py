"""Shared test fixtures for hitset tests."""

import random

import pytest

from hitset import HitSetInstance, LPSolution


def _lp_report(activities, num_paths, objective=None):
    """Render a solver report in the fixed layout read by hitset."""
    if objective is None:
        objective = sum(activities)
    lines = [
        "Problem:    hs",
        f"Rows:       {num_paths}",
        f"Columns:    {len(activities)}",
        "Non-zeros:  0",
        "Status:     OPTIMAL",
        f"Objective:  obj = {objective} (MINimum)",
        "",
        "   No.   Row name   St   Activity     Lower bound   Upper bound",
        "------ ------------ -- ------------- ------------- -------------",
    ]
    lines += [f"{i + 1:6d} c{i + 1:<11} B  1  1" for i in range(num_paths)]
    lines += [
        "",
        "   No. Column name  St   Activity     Lower bound   Upper bound",
        "------ ------------ -- ------------- ------------- -------------",
    ]
    lines += [
        f"{i + 1:6d} x{i + 1:<11} B  {value}  0  1"
        for i, value in enumerate(activities)
    ]
    return "\n".join(lines) + "\n"


@pytest.fixture
def make_report():
    """Factory rendering LP reports from activities."""
    return _lp_report


@pytest.fixture
def small_sets():
    """Three sets over three paths; two sets suffice."""
    return [(0, 1), (1, 2), (2,)]


@pytest.fixture
def small_instance(small_sets):
    """Instance built from ``small_sets``."""
    return HitSetInstance.from_sets(small_sets)


@pytest.fixture
def small_solution():
    """LP solution of ``small_sets`` with lower bound 2."""
    return LPSolution.from_activities([0.5, 0.5, 0.5], num_paths=3)


@pytest.fixture
def small_files(tmp_path, small_sets, make_report):
    """Coverage file and LP report of ``small_sets`` on disk."""
    sets_file = tmp_path / "Sets.out"
    sets_file.write_text(
        "\n".join(" ".join(str(p) for p in members) for members in small_sets)
        + "\n"
    )
    lp_file = tmp_path / "lp.sol"
    lp_file.write_text(make_report([0.5, 0.5, 0.5], num_paths=3))
    return sets_file, lp_file


@pytest.fixture
def random_instance():
    """Random instance of 40 paths and 20 sets without a single-set cover."""
    rng = random.Random(7)
    num_paths, num_sets = 40, 20
    sets = [set(rng.sample(range(num_paths), rng.randint(3, 8))) for _ in range(num_sets)]
    for path in range(num_paths):
        if not any(path in members for members in sets):
            sets[rng.randrange(num_sets)].add(path)
    return HitSetInstance.from_sets([sorted(members) for members in sets])


@pytest.fixture
def random_solution(random_instance):
    """Small positive activities, so the lower bound is 1."""
    n = random_instance.num_sets
    return LPSolution.from_activities([0.04] * n, random_instance.num_paths)
