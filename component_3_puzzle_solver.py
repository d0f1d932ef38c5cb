"""
component_3_puzzle_solver.py
============================
Propagation-and-search engine for slot puzzles.

A Puzzle owns a slot count and an ordered list of constraints. Solving works
on an explicit LIFO work-list of candidate Solutions, starting from a single
all-MAYBE candidate:

1. Propagate to fixpoint: evaluate every constraint in registration order,
   repeating full passes until one pass makes no progress. A CONFLICT stops
   the pass at once.
2. Conflict: drop the candidate.
3. Fully determined: record the candidate as a solution.
4. Otherwise: split on the lowest MAYBE slot into two independent copies,
   pushing the NO copy first and the YES copy second (YES is explored next).

The search ends when the work-list is empty. Propagation and branch order are
fixed, so reruns are reproducible down to the order of the solutions.

Example:
    puzzle = Puzzle(4)
    puzzle.constrain(Fixed, "slot 0", 0, Truth.YES)
    puzzle.constrain(Identical, "0 == 1", [0], [1])
    puzzle.constrain(ExactlyN, "one of 2, 3", 1, [2, 3])
    solutions = puzzle.solve()  # two solutions
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple, Type

from component_1_truth_state import Result, Solution, Truth
from component_4_search_observer import NullObserver, SearchEvent, SearchEventType
from component_6_logging_config import PerformanceLogger, get_logger
from infrastructure.interfaces import BasicConstraint, SearchObserver
from solver_exceptions import ConstraintDefinitionError, PuzzleDefinitionError

logger = get_logger(__name__)


@dataclass
class SearchStatistics:
    """Counters for one solve run."""

    passes: int = 0
    progress_events: int = 0
    conflicts: int = 0
    branches: int = 0
    solutions: int = 0
    candidates: int = 0
    max_worklist_depth: int = 0
    duration_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Puzzle:
    """
    Search engine over ``slots`` boolean slots.

    Constraints are attached once and shared read-only by every candidate;
    candidates are created, copied and discarded by ``solve`` alone.

    Args:
        slots: Number of slots (>= 0)
        observer: Default diagnostics sink for ``solve`` (silent if None)
    """

    def __init__(self, slots: int, observer: Optional[SearchObserver] = None):
        if isinstance(slots, bool) or not isinstance(slots, int) or slots < 0:
            raise PuzzleDefinitionError(
                f"Slot count must be a non-negative integer, got {slots!r}",
                context={"slots": slots},
            )
        self._slot_count = slots
        self._constraints: List[BasicConstraint] = []
        self.observer: SearchObserver = observer or NullObserver()
        self.last_statistics: Optional[SearchStatistics] = None

    @property
    def slot_count(self) -> int:
        return self._slot_count

    @property
    def constraints(self) -> Tuple[BasicConstraint, ...]:
        return tuple(self._constraints)

    def add_constraint(self, constraint: BasicConstraint) -> None:
        """
        Append a constraint. Index ranges are not checked here; an
        out-of-range index raises SlotIndexError when the constraint is
        first evaluated.
        """
        if not isinstance(constraint, BasicConstraint):
            raise ConstraintDefinitionError(
                f"Not a constraint: {constraint!r}",
                context={"type": type(constraint).__name__},
            )
        self._constraints.append(constraint)

    def constrain(
        self, constraint_class: Type[BasicConstraint], *args: Any, **kwargs: Any
    ) -> BasicConstraint:
        """Build ``constraint_class(*args, **kwargs)``, append it and return it."""
        constraint = constraint_class(*args, **kwargs)
        self.add_constraint(constraint)
        return constraint

    def new_solution(self) -> Solution:
        """A fresh all-MAYBE candidate sized for this puzzle."""
        return Solution(self._slot_count)

    # ------------------------------------------------------------------
    # Propagation
    # ------------------------------------------------------------------

    def apply_constraints(
        self,
        candidate: Solution,
        observer: Optional[SearchObserver] = None,
        candidate_id: int = 0,
        depth: int = 0,
    ) -> Result:
        """
        One pass over all constraints in registration order.

        Returns:
            CONFLICT as soon as any constraint conflicts (the rest of the
            pass is skipped), PROGRESS if any constraint made progress,
            NO_CHANGE otherwise.
        """
        observer = observer or self.observer
        result = Result.NO_CHANGE
        for constraint in self._constraints:
            outcome = constraint.evaluate(candidate)
            if outcome == Result.CONFLICT:
                observer.on_event(
                    SearchEvent(
                        SearchEventType.CONFLICT,
                        candidate_id,
                        depth,
                        constraint_name=constraint.name,
                        result=outcome,
                    )
                )
                return Result.CONFLICT
            if outcome == Result.PROGRESS:
                observer.on_event(
                    SearchEvent(
                        SearchEventType.PROGRESS,
                        candidate_id,
                        depth,
                        constraint_name=constraint.name,
                        result=outcome,
                    )
                )
                result = Result.PROGRESS
        return result

    def propagate(
        self,
        candidate: Solution,
        observer: Optional[SearchObserver] = None,
        candidate_id: int = 0,
        depth: int = 0,
        statistics: Optional[SearchStatistics] = None,
    ) -> Result:
        """
        Repeat constraint passes until a pass makes no progress.

        Returns:
            CONFLICT if any pass conflicted, PROGRESS if anything changed,
            NO_CHANGE if the candidate was already at its fixpoint.
        """
        overall = Result.NO_CHANGE
        while True:
            result = self.apply_constraints(candidate, observer, candidate_id, depth)
            if statistics is not None:
                statistics.passes += 1
            if result == Result.CONFLICT:
                return Result.CONFLICT
            if result == Result.NO_CHANGE:
                return overall
            overall = Result.PROGRESS

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def solve(self, observer: Optional[SearchObserver] = None) -> List[Solution]:
        """
        Find every complete, consistent assignment.

        Args:
            observer: Diagnostics sink for this run (default: self.observer)

        Returns:
            Solutions in discovery order (possibly empty)
        """
        observer = observer or self.observer
        stats = SearchStatistics()
        counting = _CountingObserver(observer, stats)

        solutions: List[Solution] = []
        # Work-list entries: (candidate, candidate_id, depth)
        candidates: List[Tuple[Solution, int, int]] = [(self.new_solution(), 0, 0)]
        next_id = 1
        stats.candidates = 1
        counting.on_search_start(self._slot_count)

        logger.info(
            "Solve started",
            extra={
                "slots": self._slot_count,
                "constraints": len(self._constraints),
            },
        )

        with PerformanceLogger(
            logger.logger,
            "Puzzle.solve",
            slots=self._slot_count,
            constraints=len(self._constraints),
        ) as perf:
            while candidates:
                stats.max_worklist_depth = max(
                    stats.max_worklist_depth, len(candidates)
                )
                candidate, candidate_id, depth = candidates[-1]

                result = self.propagate(
                    candidate, counting, candidate_id, depth, statistics=stats
                )

                if result == Result.CONFLICT:
                    candidates.pop()
                    counting.on_event(
                        SearchEvent(SearchEventType.PRUNE, candidate_id, depth)
                    )
                    continue

                first_maybe = candidate.first_maybe()
                if first_maybe is None:
                    candidates.pop()
                    solutions.append(candidate)
                    counting.on_event(
                        SearchEvent(SearchEventType.SOLUTION, candidate_id, depth)
                    )
                    continue

                # Replace the candidate with two independent guesses
                candidates.pop()
                guess_no = candidate.copy()
                guess_no.set(first_maybe, Truth.NO)
                guess_yes = candidate.copy()
                guess_yes.set(first_maybe, Truth.YES)
                no_id, yes_id = next_id, next_id + 1
                next_id += 2
                stats.candidates += 2
                candidates.append((guess_no, no_id, depth + 1))
                candidates.append((guess_yes, yes_id, depth + 1))
                counting.on_event(
                    SearchEvent(
                        SearchEventType.BRANCH,
                        candidate_id,
                        depth,
                        index=first_maybe,
                        children=(no_id, yes_id),
                    )
                )

        stats.duration_ms = perf.duration_ms
        self.last_statistics = stats
        logger.info(
            "Solve finished",
            extra={
                "solutions": stats.solutions,
                "branches": stats.branches,
                "conflicts": stats.conflicts,
                "duration_ms": round(stats.duration_ms, 2),
            },
        )
        return solutions


class _CountingObserver(SearchObserver):
    """Updates SearchStatistics, then forwards to the caller's observer."""

    def __init__(self, inner: SearchObserver, statistics: SearchStatistics):
        self.inner = inner
        self.statistics = statistics

    def on_search_start(self, slot_count: int) -> None:
        self.inner.on_search_start(slot_count)

    def on_event(self, event: SearchEvent) -> None:
        if event.event_type == SearchEventType.PROGRESS:
            self.statistics.progress_events += 1
        elif event.event_type == SearchEventType.CONFLICT:
            self.statistics.conflicts += 1
        elif event.event_type == SearchEventType.BRANCH:
            self.statistics.branches += 1
        elif event.event_type == SearchEventType.SOLUTION:
            self.statistics.solutions += 1
        self.inner.on_event(event)
