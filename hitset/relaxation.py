"""In-process LP relaxation of a hitting set instance.

Normally the relaxation is solved by an external solver and read back with
:func:`hitset.lp_report.read_lp_report`.  For small instances and tests
this module solves it directly with PuLP and CBC and returns the same
:class:`~hitset.lp_report.LPSolution`.
"""

from __future__ import annotations

import logging

import pulp

from .errors import HitSetError
from .instance import HitSetInstance
from .lp_report import LPSolution

logger = logging.getLogger(__name__)


def solve_lp_relaxation(
    instance: HitSetInstance, time_limit: float = 30.0
) -> LPSolution:
    """Solve the LP relaxation of ``instance``.

    Each set gets a variable in [0, 1]; the objective is their sum and every
    path must be hit with total weight at least one.

    Parameters
    ----------
    instance : HitSetInstance
        The instance to relax.
    time_limit : float, default 30.0
        Time limit for CBC in seconds.

    Returns
    -------
    LPSolution
        Activities of the optimal fractional solution.

    Raises
    ------
    HitSetError
        If CBC does not report an optimal solution.
    """
    prob = pulp.LpProblem("HittingSetLP", pulp.LpMinimize)

    # Variables: x[s] in [0,1] for fractional solution
    x = [
        pulp.LpVariable(f"x{s}", lowBound=0, upBound=1, cat="Continuous")
        for s in range(instance.num_sets)
    ]

    # Objective: minimize sum of variables
    prob += pulp.lpSum(x)

    # Constraints: each path must be hit
    for path, hitting in enumerate(instance.paths):
        prob += pulp.lpSum(x[s] for s in hitting) >= 1, f"c{path}"

    solver = pulp.PULP_CBC_CMD(timeLimit=int(time_limit), msg=0)
    prob.solve(solver)

    if prob.status != pulp.LpStatusOptimal:
        raise HitSetError(
            f"LP relaxation not solved to optimality: {pulp.LpStatus[prob.status]}"
        )

    activities = [var.varValue or 0.0 for var in x]
    objective_value = pulp.value(prob.objective) or 0.0
    logger.debug(
        "LP relaxation of %d sets and %d paths has objective %g",
        instance.num_sets,
        instance.num_paths,
        objective_value,
    )
    return LPSolution.from_activities(
        activities,
        num_paths=instance.num_paths,
        objective_value=objective_value,
    )
