"""Exceptions raised by hitset.

Every error here is fatal for a run: the package never retries or repairs
input. Library code raises, and only the command-line driver turns an
error into a process exit.
"""


class HitSetError(Exception):
    """Base class for all hitset errors."""


class MalformedReportError(HitSetError, ValueError):
    """The LP solution report is truncated or has unreadable tokens."""


class InconsistentReportError(HitSetError, ValueError):
    """The activities of an LP report do not add up to its objective value."""

    def __init__(self, sum_activity: float, objective_value: float) -> None:
        self.sum_activity = sum_activity
        self.objective_value = objective_value
        self.discrepancy = abs(sum_activity - objective_value)
        super().__init__(
            f"Sum of activities {sum_activity} differs from objective value "
            f"{objective_value} by {self.discrepancy}"
        )


class MalformedCoverageError(HitSetError, ValueError):
    """The coverage relation file contains an unreadable path index."""


class InstanceMismatchError(HitSetError, ValueError):
    """Coverage file and LP report describe different instances."""


class UncoverablePathError(HitSetError, ValueError):
    """A path is not hit by any set."""

    def __init__(self, path: int, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"Path {path} is not covered by any set")


class ZeroActivityPathError(UncoverablePathError):
    """Every set hitting a path has zero LP activity."""

    def __init__(self, path: int) -> None:
        super().__init__(
            path, f"Path {path} is only covered by sets with zero activity"
        )


class InvariantViolationError(HitSetError, RuntimeError):
    """An internal consistency check of the solver failed."""
