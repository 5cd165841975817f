"""Reader for the LP relaxation report of an external solver.

The solver writes a plain-text report with a fixed layout:

* a nine line header.  Counting from zero, line 1 carries the number of
  rows (one covering constraint per path) as its second token, line 2 the
  number of columns (one variable per set) as its second token, and line
  5 the objective value as its fourth token;
* ``num_paths + 3`` lines describing the constraints, which are skipped;
* one line per set whose fourth token is the set's activity, i.e. its value
  in the optimal fractional solution.

The sum of all activities equals the LP optimum, so its ceiling is a lower
bound on the size of any integral cover.
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np

from .errors import InconsistentReportError, MalformedReportError

logger = logging.getLogger(__name__)

HEADER_LINES = 9
SKIPPED_EXTRA_LINES = 3
ACTIVITY_TOLERANCE = 0.001
# Float error allowed in the activity sum before rounding up.
ROUNDING_SLACK = 1e-9


@dataclass(frozen=True, slots=True)
class LPSolution:
    """Fractional solution of the hitting set LP relaxation.

    Attributes
    ----------
    num_paths : int
        Number of covering constraints, one per path.
    num_sets : int
        Number of variables, one per set.
    objective_value : float
        Optimal objective value reported by the solver.
    activities : np.ndarray
        Read-only array of shape ``(num_sets,)`` with each set's activity.
    """

    num_paths: int
    num_sets: int
    objective_value: float
    activities: np.ndarray

    def __post_init__(self):
        """Validate the solution against its own objective value."""
        activities = np.array(self.activities, dtype=float)
        if activities.shape != (self.num_sets,):
            raise MalformedReportError(
                f"Expected {self.num_sets} activities, got {activities.size}"
            )
        bad = np.flatnonzero(
            ~np.isfinite(activities)
            | (activities < -ACTIVITY_TOLERANCE)
            | (activities > 1 + ACTIVITY_TOLERANCE)
        )
        if bad.size:
            set_index = int(bad[0])
            raise MalformedReportError(
                f"Activity of set {set_index} must lie in [0, 1], "
                f"got {activities[set_index]}"
            )
        if not math.isfinite(self.objective_value):
            raise MalformedReportError(
                f"Objective value must be finite, got {self.objective_value}"
            )
        activities.setflags(write=False)
        object.__setattr__(self, "activities", activities)
        if abs(self.sum_activity - self.objective_value) >= ACTIVITY_TOLERANCE:
            raise InconsistentReportError(self.sum_activity, self.objective_value)

    @classmethod
    def from_activities(
        cls,
        activities: Iterable[float],
        num_paths: int,
        objective_value: float | None = None,
    ) -> LPSolution:
        """Build a solution from a sequence of activities.

        If ``objective_value`` is omitted the sum of the activities is used.
        """
        values = np.array(list(activities), dtype=float)
        if objective_value is None:
            objective_value = float(values.sum())
        return cls(
            num_paths=num_paths,
            num_sets=len(values),
            objective_value=objective_value,
            activities=values,
        )

    @property
    def sum_activity(self) -> float:
        """Total activity over all sets."""
        return float(np.sum(self.activities))

    @property
    def lower_bound(self) -> int:
        """Lower bound on the size of any cover, ``sum_activity`` rounded up."""
        return math.ceil(self.sum_activity - ROUNDING_SLACK)

    @property
    def num_active_sets(self) -> int:
        """Number of sets with positive activity."""
        return int(np.count_nonzero(self.activities > 0))


def _token(line: str, lineno: int, position: int) -> str:
    tokens = line.split()
    if len(tokens) <= position:
        raise MalformedReportError(
            f"Line {lineno}: expected at least {position + 1} tokens, "
            f"got {len(tokens)}"
        )
    return tokens[position]


def _int_token(line: str, lineno: int, position: int) -> int:
    token = _token(line, lineno, position)
    try:
        value = int(token)
    except ValueError:
        raise MalformedReportError(
            f"Line {lineno}: expected an integer, got {token!r}"
        ) from None
    if value < 0:
        raise MalformedReportError(f"Line {lineno}: negative count {value}")
    return value


def _float_token(line: str, lineno: int, position: int) -> float:
    token = _token(line, lineno, position)
    try:
        value = float(token)
    except ValueError:
        raise MalformedReportError(
            f"Line {lineno}: expected a number, got {token!r}"
        ) from None
    if not math.isfinite(value):
        raise MalformedReportError(
            f"Line {lineno}: expected a finite number, got {token!r}"
        )
    return value


def _take(lines: Iterator[tuple[int, str]], what: str) -> tuple[int, str]:
    try:
        return next(lines)
    except StopIteration:
        raise MalformedReportError(
            f"LP report ended early while reading {what}"
        ) from None


def parse_lp_report(lines: Iterable[str]) -> LPSolution:
    """Parse the text of an LP relaxation report.

    Parameters
    ----------
    lines : Iterable[str]
        Lines of the report, with or without trailing newlines.

    Returns
    -------
    LPSolution
        Counts, objective value and per-set activities.

    Raises
    ------
    MalformedReportError
        If the report is truncated, a required token is missing or not a
        finite number, or an activity lies outside [0, 1].
    InconsistentReportError
        If the activities do not sum to the objective value within
        ``ACTIVITY_TOLERANCE``.
    """
    numbered = enumerate(lines, start=1)

    num_paths = num_sets = None
    objective_value = None
    for index in range(HEADER_LINES):
        lineno, line = _take(numbered, "the header")
        if index == 1:
            num_paths = _int_token(line, lineno, 1)
        elif index == 2:
            num_sets = _int_token(line, lineno, 1)
        elif index == 5:
            objective_value = _float_token(line, lineno, 3)

    for _ in range(num_paths + SKIPPED_EXTRA_LINES):
        _take(numbered, "the constraint section")

    activities = np.empty(num_sets, dtype=float)
    for i in range(num_sets):
        lineno, line = _take(numbered, f"the record of set {i}")
        activities[i] = _float_token(line, lineno, 3)

    solution = LPSolution(
        num_paths=num_paths,
        num_sets=num_sets,
        objective_value=objective_value,
        activities=activities,
    )
    logger.debug(
        "Parsed LP report: %d paths, %d sets (%d active), objective %g, "
        "lower bound %d",
        num_paths,
        num_sets,
        solution.num_active_sets,
        objective_value,
        solution.lower_bound,
    )
    return solution


def read_lp_report(path: str | os.PathLike) -> LPSolution:
    """Read and parse an LP relaxation report from ``path``."""
    try:
        with open(path, encoding="utf-8") as handle:
            return parse_lp_report(handle)
    except UnicodeDecodeError as exc:
        raise MalformedReportError(
            f"{os.fspath(path)}: not a text file ({exc.reason})"
        ) from exc
