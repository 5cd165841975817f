"""Loading of the coverage relation between sets and paths.

The coverage file has one line per set.  Each line lists, separated by
whitespace, the indices of the paths the set hits.  Set ``i`` is the
``i``-th line (0-based) and the number of paths is the largest index
plus one.

The loader builds both directions of the relation once: ``sets[i]`` are
the paths hit by set ``i`` and ``paths[j]`` are the sets hitting path
``j``.  Both are tuples and are shared read-only by every restart of the
solver.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Collection, Iterable
from dataclasses import dataclass

from .errors import (
    InstanceMismatchError,
    MalformedCoverageError,
    UncoverablePathError,
)
from .lp_report import LPSolution
from .types import PathIndex, SetIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HitSetInstance:
    """A hitting set instance in both directions.

    Attributes
    ----------
    sets : tuple[tuple[PathIndex, ...], ...]
        For every set, the duplicate-free paths it hits, in file order.
    paths : tuple[tuple[SetIndex, ...], ...]
        For every path, the sets hitting it, in increasing order.  Never
        empty.
    """

    sets: tuple[tuple[PathIndex, ...], ...]
    paths: tuple[tuple[SetIndex, ...], ...]

    @property
    def num_sets(self) -> int:
        """Number of candidate sets."""
        return len(self.sets)

    @property
    def num_paths(self) -> int:
        """Number of paths to hit."""
        return len(self.paths)

    @classmethod
    def from_sets(
        cls,
        sets: Iterable[Iterable[PathIndex]],
        num_paths: int | None = None,
    ) -> HitSetInstance:
        """Build an instance from the path lists of all sets.

        Parameters
        ----------
        sets : Iterable[Iterable[PathIndex]]
            Path indices hit by each set.  Repeated indices within a set are
            dropped, keeping the first occurrence.
        num_paths : int, optional
            Number of paths.  Defaults to the largest index plus one.

        Returns
        -------
        HitSetInstance
            The instance with its inverse index filled in.

        Raises
        ------
        MalformedCoverageError
            If a path index is negative.
        InstanceMismatchError
            If a path index is not below ``num_paths``.
        UncoverablePathError
            If some path is hit by no set.
        """
        forward: list[tuple[PathIndex, ...]] = []
        largest = -1
        for set_index, members in enumerate(sets):
            members = tuple(members)
            unique = tuple(dict.fromkeys(members))
            if len(unique) != len(members):
                logger.warning(
                    "Set %d lists %d duplicate path indices; ignoring them",
                    set_index,
                    len(members) - len(unique),
                )
            for path in unique:
                if path < 0:
                    raise MalformedCoverageError(
                        f"Set {set_index} contains negative path index {path}"
                    )
            if unique:
                largest = max(largest, max(unique))
            forward.append(unique)

        if num_paths is None:
            num_paths = largest + 1
        elif largest >= num_paths:
            raise InstanceMismatchError(
                f"Path index {largest} out of range for {num_paths} paths"
            )

        # Allocated once at its final size, then filled.
        inverse: list[list[SetIndex]] = [[] for _ in range(num_paths)]
        for set_index, members in enumerate(forward):
            for path in members:
                inverse[path].append(set_index)

        for path, hitting in enumerate(inverse):
            if not hitting:
                raise UncoverablePathError(path)

        return cls(
            sets=tuple(forward),
            paths=tuple(tuple(hitting) for hitting in inverse),
        )

    def uncovered_paths(self, cover: Iterable[SetIndex]) -> list[PathIndex]:
        """Return the paths hit by no set of ``cover``, in increasing order."""
        hit = [False] * self.num_paths
        for set_index in cover:
            for path in self.sets[set_index]:
                hit[path] = True
        return [path for path, is_hit in enumerate(hit) if not is_hit]

    def is_cover(self, cover: Iterable[SetIndex]) -> bool:
        """Check whether ``cover`` hits every path."""
        return not self.uncovered_paths(cover)

    def check_solution(self, solution: LPSolution) -> None:
        """Ensure ``solution`` was computed for this instance.

        Raises
        ------
        InstanceMismatchError
            If path or set counts differ.
        """
        if self.num_paths != solution.num_paths:
            raise InstanceMismatchError(
                f"Coverage file has {self.num_paths} paths but the LP report "
                f"has {solution.num_paths}"
            )
        if self.num_sets != solution.num_sets:
            raise InstanceMismatchError(
                f"Coverage file has {self.num_sets} sets but the LP report "
                f"has {solution.num_sets}"
            )


def parse_coverage(lines: Iterable[str]) -> list[tuple[PathIndex, ...]]:
    """Parse the lines of a coverage file into per-set path indices."""
    sets: list[tuple[PathIndex, ...]] = []
    for lineno, line in enumerate(lines, start=1):
        try:
            members = tuple(int(token) for token in line.split())
        except ValueError:
            raise MalformedCoverageError(
                f"Line {lineno}: path indices must be integers: {line.strip()!r}"
            ) from None
        sets.append(members)
    return sets


def read_coverage(path: str | os.PathLike) -> list[tuple[PathIndex, ...]]:
    """Read a coverage file from ``path``."""
    try:
        with open(path, encoding="utf-8") as handle:
            return parse_coverage(handle)
    except UnicodeDecodeError as exc:
        raise MalformedCoverageError(
            f"{os.fspath(path)}: not a text file ({exc.reason})"
        ) from exc


def load_instance(
    sets: str | os.PathLike | Collection[Iterable[PathIndex]],
    solution: LPSolution | None = None,
) -> HitSetInstance:
    """Load a hitting set instance and validate it against an LP report.

    Parameters
    ----------
    sets : path-like or collection of path lists
        Coverage file location, or already parsed sets.
    solution : LPSolution, optional
        Report the instance must agree with.

    Returns
    -------
    HitSetInstance
        The loaded instance.

    Raises
    ------
    InstanceMismatchError
        If the instance and ``solution`` do not have the same number of
        paths and sets.
    UncoverablePathError
        If some path is hit by no set.
    """
    if isinstance(sets, (str, os.PathLike)):
        sets = read_coverage(sets)
    else:
        sets = [tuple(members) for members in sets]

    if solution is not None:
        num_paths = max((max(members) for members in sets if members), default=-1) + 1
        if num_paths != solution.num_paths or len(sets) != solution.num_sets:
            raise InstanceMismatchError(
                f"Coverage file describes {num_paths} paths and {len(sets)} "
                f"sets, LP report describes {solution.num_paths} paths and "
                f"{solution.num_sets} sets"
            )
        instance = HitSetInstance.from_sets(sets, num_paths=solution.num_paths)
    else:
        instance = HitSetInstance.from_sets(sets)

    logger.debug(
        "Loaded instance with %d sets and %d paths",
        instance.num_sets,
        instance.num_paths,
    )
    return instance
