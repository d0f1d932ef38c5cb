"""
infrastructure/interfaces.py

Base interfaces shared by the search engine and its constraints.

Interface Contract:
    Every constraint attached to a Puzzle implements BasicConstraint. The
    engine only ever calls ``evaluate``; everything else (the index lists,
    the target value) is private to the concrete rule.

    Every diagnostics sink implements SearchObserver. The engine reports one
    SearchEvent per propagation step, conflict, prune, solution and branch.

Usage:
    from infrastructure.interfaces import BasicConstraint

    class AtMostOne(BasicConstraint):
        def __init__(self, name, indexes):
            super().__init__(name)
            self.indexes = tuple(indexes)

        def evaluate(self, solution):
            ...
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from component_1_truth_state import Result, Solution

if TYPE_CHECKING:
    from component_4_search_observer import SearchEvent


class BasicConstraint(ABC):
    """
    Abstract base class for all constraints.

    A constraint is an immutable named rule over a fixed subset of slots. It
    keeps no memory between calls: ``evaluate`` inspects the solution it is
    given, may fill in forced values, and reports what happened.

    Contract of ``evaluate``:
        CONFLICT   the rule can never hold under the current definite values.
                   Partial writes made before detecting this are acceptable
                   because the caller discards the whole candidate.
        PROGRESS   at least one slot moved from MAYBE to a definite value.
        NO_CHANGE  nothing was changed.

    The name is for diagnostics only and plays no part in the logic.
    """

    def __init__(self, name: str):
        self._name = str(name)

    @property
    def name(self) -> str:
        return self._name

    @abstractmethod
    def evaluate(self, solution: Solution) -> Result:
        """
        Apply this rule to ``solution`` in place.

        Args:
            solution: Candidate state owned by the search engine

        Returns:
            Result.CONFLICT, Result.NO_CHANGE or Result.PROGRESS
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self._name!r})"


class SearchObserver(ABC):
    """
    Abstract base class for search diagnostics sinks.

    Observers are notified synchronously from inside the search loop.
    Exceptions raised by an observer propagate out of ``Puzzle.solve``.

    ``on_search_start`` marks the start of each solve run. Candidate ids
    restart at 0 after it, so observers that key state by candidate id
    reset that state here.
    """

    def on_search_start(self, slot_count: int) -> None:
        """Called once at the start of every solve run (no-op by default)."""

    @abstractmethod
    def on_event(self, event: "SearchEvent") -> None:
        """Receive one search event."""
