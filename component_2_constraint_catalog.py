"""
component_2_constraint_catalog.py
=================================
Standard library of constraints for setting up puzzles.

Each rule only fires deductions that are provably necessary under the
current definite values. All guessing is left to the search engine.

Rules:
- Fixed(i, v):               slot i holds v
- Implication(P, Q):         P => Q; contrapositive derived, converse not
- Identical(A, B):           A[k] == B[k] for every position k
- ExactlyN(n, S, v):         exactly n slots of S hold v, the rest hold ~v
- ForcedDisjunction(P, Q):   P => at least one of Q

Example:
    puzzle = Puzzle(4)
    puzzle.add_constraint(Fixed("first is true", 0))
    puzzle.add_constraint(Identical("0 equals 1", 0, 1))
    puzzle.add_constraint(ExactlyN("one of 2,3", 1, [2, 3]))
"""

from typing import Iterable, Tuple, Union

from component_1_truth_state import Result, Solution, Truth, require_definite
from infrastructure.interfaces import BasicConstraint
from solver_exceptions import ConstraintDefinitionError

IndexSpec = Union[int, Iterable[int]]


def _as_index_tuple(indexes: IndexSpec) -> Tuple[int, ...]:
    if isinstance(indexes, int):
        return (indexes,)
    return tuple(indexes)


class Fixed(BasicConstraint):
    """The value at a specific index is fixed."""

    def __init__(self, name: str, index: int, value: Truth = Truth.YES):
        super().__init__(name)
        self.index = index
        self.value = require_definite(value)

    def evaluate(self, solution: Solution) -> Result:
        return solution.set(self.index, self.value)


class Implication(BasicConstraint):
    """
    If P is YES then Q must be YES.

    The contrapositive (Q is NO => P is NO) is applied; the converse is not.
    """

    def __init__(self, name: str, p: int, q: int):
        super().__init__(name)
        self.p = p
        self.q = q

    def evaluate(self, solution: Solution) -> Result:
        p_value = solution[self.p]
        q_value = solution[self.q]
        if p_value == Truth.YES and q_value == Truth.NO:
            return Result.CONFLICT
        if p_value == Truth.YES and q_value == Truth.MAYBE:
            return solution.set(self.q, Truth.YES)
        if q_value == Truth.NO and p_value == Truth.MAYBE:
            return solution.set(self.p, Truth.NO)
        return Result.NO_CHANGE


class Identical(BasicConstraint):
    """
    The values at parallel index lists must match pairwise.

    ``Identical(name, 3, 7)`` ties two slots together;
    ``Identical(name, [a0, a1], [b0, b1])`` ties a0==b0 and a1==b1.
    """

    def __init__(self, name: str, indexes1: IndexSpec, indexes2: IndexSpec):
        super().__init__(name)
        self.indexes1 = _as_index_tuple(indexes1)
        self.indexes2 = _as_index_tuple(indexes2)
        if len(self.indexes1) != len(self.indexes2):
            raise ConstraintDefinitionError(
                "Identical needs index lists of equal length",
                constraint_name=self.name,
                context={
                    "len1": len(self.indexes1),
                    "len2": len(self.indexes2),
                },
            )

    def evaluate(self, solution: Solution) -> Result:
        result = Result.NO_CHANGE
        for a, b in zip(self.indexes1, self.indexes2):
            a_value = solution[a]
            b_value = solution[b]
            if a_value == b_value:
                continue
            if a_value != Truth.MAYBE and b_value != Truth.MAYBE:
                return Result.CONFLICT
            if a_value == Truth.MAYBE:
                outcome = solution.set(a, b_value)
            else:
                outcome = solution.set(b, a_value)
            if outcome == Result.CONFLICT:
                return Result.CONFLICT
            if outcome == Result.PROGRESS:
                result = Result.PROGRESS
        return result


class ExactlyN(BasicConstraint):
    """
    Exactly ``n`` of the given slots hold ``value``; the others hold ``~value``.

    Deductions (only while MAYBE slots remain):
    - n matches already present: every remaining MAYBE becomes ~value
    - every remaining MAYBE is needed to reach n: they all become value

    No partial deductions are made in between.
    """

    def __init__(
        self,
        name: str,
        n: int,
        indexes: Iterable[int],
        value: Truth = Truth.YES,
    ):
        super().__init__(name)
        self.indexes = _as_index_tuple(indexes)
        self.value = require_definite(value)
        if not 0 <= n <= len(self.indexes):
            raise ConstraintDefinitionError(
                f"ExactlyN needs 0 <= n <= {len(self.indexes)}, got n={n}",
                constraint_name=self.name,
                context={"n": n, "index_count": len(self.indexes)},
            )
        self.n = n

    def evaluate(self, solution: Solution) -> Result:
        matches = solution.count(self.indexes, self.value)
        maybes = solution.count(self.indexes, Truth.MAYBE)

        # matches > n must be ruled out before n - matches is meaningful
        if matches > self.n:
            return Result.CONFLICT
        if maybes < self.n - matches:
            return Result.CONFLICT
        if maybes == 0:
            return Result.NO_CHANGE

        if matches == self.n:
            fill = ~self.value
        elif maybes == self.n - matches:
            fill = self.value
        else:
            return Result.NO_CHANGE

        for index in self.indexes:
            if solution[index] == Truth.MAYBE:
                solution.set(index, fill)
        return Result.PROGRESS


class ForcedDisjunction(BasicConstraint):
    """
    If slot ``one`` is YES, at least one slot of ``any_of`` must be YES.

    - every member of any_of is NO: ``one`` is forced NO (CONFLICT if YES)
    - ``one`` is YES, no member is YES and exactly one is MAYBE: that member
      is forced YES
    """

    def __init__(self, name: str, one: int, any_of: Iterable[int]):
        super().__init__(name)
        self.one = one
        self.any_of = _as_index_tuple(any_of)

    def evaluate(self, solution: Solution) -> Result:
        noes = solution.count(self.any_of, Truth.NO)
        if noes == len(self.any_of):
            return solution.set(self.one, Truth.NO)

        if solution[self.one] == Truth.YES:
            maybes = [i for i in self.any_of if solution[i] == Truth.MAYBE]
            if len(maybes) == 1 and noes + 1 == len(self.any_of):
                return solution.set(maybes[0], Truth.YES)
        return Result.NO_CHANGE


__all__ = [
    "Fixed",
    "Implication",
    "Identical",
    "ExactlyN",
    "ForcedDisjunction",
]
