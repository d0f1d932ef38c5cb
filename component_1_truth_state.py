"""
component_1_truth_state.py
==========================
Three-valued truth lattice and the per-slot assignment vector.

A puzzle is encoded as a fixed number of boolean "slots". During the search
every slot holds one of three values:

    NO    (-1)  definitely false
    MAYBE ( 0)  not determined yet
    YES   (+1)  definitely true

A Solution is the vector of these values. Its only mutation is ``set``, which
moves a slot from MAYBE to a definite value exactly once and reports one of
three outcomes (the ``Result`` every constraint and the engine use):

    PROGRESS   slot changed from MAYBE to the requested value
    NO_CHANGE  slot already held the requested value
    CONFLICT   slot held the opposite definite value (left untouched)
"""

from enum import IntEnum
from typing import Iterable, List, Optional, Tuple

from solver_exceptions import IndeterminateValueError, SlotIndexError


class Truth(IntEnum):
    """Value of a single slot. Ordered NO < MAYBE < YES."""

    NO = -1
    MAYBE = 0
    YES = 1

    def __invert__(self) -> "Truth":
        # NO <-> YES, MAYBE stays MAYBE
        return Truth(-int(self))

    def negate(self) -> "Truth":
        return ~self

    @property
    def is_definite(self) -> bool:
        return self is not Truth.MAYBE


class Result(IntEnum):
    """Outcome of a state mutation or a constraint evaluation."""

    CONFLICT = -1
    NO_CHANGE = 0
    PROGRESS = 1


def require_definite(value: Truth) -> Truth:
    """
    Coerce ``value`` to Truth and reject MAYBE.

    Raises:
        IndeterminateValueError: If value is MAYBE (or not a Truth value)
    """
    try:
        truth = Truth(value)
    except ValueError as e:
        raise IndeterminateValueError(
            f"Not a truth value: {value!r}", value=value, original_exception=e
        ) from e
    if truth is Truth.MAYBE:
        raise IndeterminateValueError(
            "A definite value (NO or YES) is required", value=truth
        )
    return truth


class Solution:
    """
    Fixed-length vector of Truth values, one per slot.

    Value semantics: ``copy()`` duplicates the whole vector, the copies never
    share mutable state, and ``==`` compares contents.

    Example:
        >>> s = Solution(3)
        >>> s.set(0, Truth.YES)
        <Result.PROGRESS: 1>
        >>> s.set(0, Truth.NO)
        <Result.CONFLICT: -1>
        >>> s.first_maybe()
        1
    """

    __slots__ = ("_table",)

    def __init__(self, slots: int):
        if slots < 0:
            raise ValueError(f"Slot count must be >= 0, got {slots}")
        self._table: List[Truth] = [Truth.MAYBE] * slots

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._table):
            raise SlotIndexError(
                f"Slot index {index} out of range",
                index=index,
                slot_count=len(self._table),
            )

    def __getitem__(self, index: int) -> Truth:
        self._check_index(index)
        return self._table[index]

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self):
        return iter(self._table)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Solution):
            return NotImplemented
        return self._table == other._table

    # Mutable value object
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        symbols = {Truth.NO: "-", Truth.MAYBE: "?", Truth.YES: "+"}
        return f"Solution({''.join(symbols[v] for v in self._table)})"

    def set(self, index: int, value: Truth) -> Result:
        """
        Move a slot to a definite value.

        Args:
            index: Slot index in [0, len)
            value: Truth.NO or Truth.YES

        Returns:
            NO_CHANGE if the slot already holds value, CONFLICT if it holds
            the opposite value (state unchanged), PROGRESS otherwise.

        Raises:
            SlotIndexError: Index out of range
            IndeterminateValueError: value is MAYBE
        """
        self._check_index(index)
        value = require_definite(value)
        current = self._table[index]
        if current == value:
            return Result.NO_CHANGE
        if current != Truth.MAYBE:
            return Result.CONFLICT
        self._table[index] = value
        return Result.PROGRESS

    def count(self, indexes: Iterable[int], value: Truth) -> int:
        """Number of ``indexes`` currently holding ``value``."""
        total = 0
        for index in indexes:
            self._check_index(index)
            if self._table[index] == value:
                total += 1
        return total

    def first_maybe(self) -> Optional[int]:
        """Lowest MAYBE index, or None when every slot is definite."""
        try:
            return self._table.index(Truth.MAYBE)
        except ValueError:
            return None

    def is_determined(self) -> bool:
        return Truth.MAYBE not in self._table

    def indexes_of(self, value: Truth) -> List[int]:
        """All slot indexes holding ``value``, ascending."""
        return [i for i, v in enumerate(self._table) if v == value]

    def copy(self) -> "Solution":
        clone = Solution.__new__(Solution)
        clone._table = list(self._table)
        return clone

    def as_tuple(self) -> Tuple[Truth, ...]:
        return tuple(self._table)
