"""hitset: LP-guided randomized greedy solver for the hitting set problem.

The hitset package finds small covers of a set/path coverage relation:
- Reading LP relaxation reports and deriving a lower bound
- Loading coverage relations with their inverse index
- Randomized greedy construction biased by LP activities
- Randomized pruning of redundant sets
- Restart control, sequential or on a thread pool
"""

import logging
from importlib import metadata

# Core data structures
from .core import CoverState
from .errors import (
    HitSetError,
    InconsistentReportError,
    InstanceMismatchError,
    InvariantViolationError,
    MalformedCoverageError,
    MalformedReportError,
    UncoverablePathError,
    ZeroActivityPathError,
)

# Construction and pruning
from .greedy import check_activity_support, construct_cover, max_coverage_cover

# Input
from .instance import HitSetInstance, load_instance, read_coverage
from .lp_report import LPSolution, parse_lp_report, read_lp_report
from .prune import prune_cover

# LP relaxation with PuLP
from .relaxation import solve_lp_relaxation

# Solvers
from .solver import (
    HitSetAlgorithm,
    HitSetResult,
    LPGuidedSolver,
    MaxCoverageSolver,
    solve_hitting_set,
)
from .types import Cover, PathIndex, SetIndex

try:
    __version__ = metadata.version("hitset")
except metadata.PackageNotFoundError:
    # Fallback for development installs
    __version__ = "0.1.0"

__all__ = [
    # Types
    "Cover",
    "PathIndex",
    "SetIndex",
    "CoverState",
    # Input
    "LPSolution",
    "parse_lp_report",
    "read_lp_report",
    "HitSetInstance",
    "load_instance",
    "read_coverage",
    "solve_lp_relaxation",
    # Algorithms
    "check_activity_support",
    "construct_cover",
    "max_coverage_cover",
    "prune_cover",
    "HitSetAlgorithm",
    "HitSetResult",
    "LPGuidedSolver",
    "MaxCoverageSolver",
    "solve_hitting_set",
    # Errors
    "HitSetError",
    "MalformedReportError",
    "InconsistentReportError",
    "MalformedCoverageError",
    "InstanceMismatchError",
    "UncoverablePathError",
    "ZeroActivityPathError",
    "InvariantViolationError",
    # Logging
    "get_logger",
]


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger for the hitset package.

    Parameters
    ----------
    name : str | None, optional
        Logger name. If None, uses the package name.

    Returns
    -------
    logging.Logger
        Logger instance.
    """
    if name is None:
        name = __name__.split(".")[0]
    return logging.getLogger(name)
