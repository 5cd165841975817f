"""Round-local state of a cover under construction.

This module defines :class:`CoverState`, the scratch data owned by a
single restart of the solver: the sets selected so far and, for every
path, how many of them hit it.  The constructor fills a state and the
pruner shrinks it; neither touches the shared instance.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvariantViolationError
from .instance import HitSetInstance
from .types import Cover, SetIndex


@dataclass
class CoverState:
    """Selected sets and per-path coverage counters of one restart.

    Attributes
    ----------
    members : list[SetIndex]
        Selected sets in the order they were added.
    counters : list[int]
        ``counters[p]`` is the number of members hitting path ``p``.
    num_uncovered : int
        Number of paths whose counter is zero.
    """

    members: list[SetIndex]
    counters: list[int]
    num_uncovered: int

    def __post_init__(self):
        """Validate state consistency."""
        zeros = sum(1 for count in self.counters if count == 0)
        if zeros != self.num_uncovered:
            raise ValueError(
                f"num_uncovered is {self.num_uncovered} but {zeros} counters "
                "are zero"
            )

    @classmethod
    def empty(cls, num_paths: int) -> CoverState:
        """Create a state with nothing selected."""
        return cls(members=[], counters=[0] * num_paths, num_uncovered=num_paths)

    @classmethod
    def from_cover(cls, instance: HitSetInstance, cover: Cover) -> CoverState:
        """Create the state of an existing cover."""
        state = cls.empty(instance.num_paths)
        for set_index in cover:
            state.add(instance, set_index)
        return state

    @property
    def size(self) -> int:
        """Number of selected sets."""
        return len(self.members)

    @property
    def is_complete(self) -> bool:
        """True if every path is hit."""
        return self.num_uncovered == 0

    def copy(self) -> CoverState:
        """Return an independent copy."""
        return CoverState(
            members=list(self.members),
            counters=list(self.counters),
            num_uncovered=self.num_uncovered,
        )

    def add(self, instance: HitSetInstance, set_index: SetIndex) -> None:
        """Select ``set_index`` and count the paths it hits."""
        self.members.append(set_index)
        counters = self.counters
        for path in instance.sets[set_index]:
            if counters[path] == 0:
                self.num_uncovered -= 1
            counters[path] += 1

    def is_redundant(self, instance: HitSetInstance, set_index: SetIndex) -> bool:
        """Check whether every path of ``set_index`` is hit by another member.

        Raises
        ------
        InvariantViolationError
            If a path of a selected set has a counter below one.
        """
        counters = self.counters
        for path in instance.sets[set_index]:
            count = counters[path]
            if count <= 1:
                if count <= 0:
                    raise InvariantViolationError(
                        f"Path {path} of selected set {set_index} has "
                        f"coverage count {count}"
                    )
                return False
        return True

    def release(self, instance: HitSetInstance, set_index: SetIndex) -> None:
        """Uncount the paths of ``set_index`` after it was dropped."""
        counters = self.counters
        for path in instance.sets[set_index]:
            counters[path] -= 1
            if counters[path] == 0:
                self.num_uncovered += 1
