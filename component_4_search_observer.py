"""
component_4_search_observer.py

Injectable diagnostics for the search engine.

Puzzle.solve reports every step of its work as a SearchEvent to one
SearchObserver. The default NullObserver keeps tests and library callers
silent; LoggingObserver reproduces the classic textual trace through the
structured logger; ProofTraceObserver records the run as a ProofTree.

Events:
    PROGRESS   a constraint forced at least one slot (constraint_name set)
    CONFLICT   a constraint reported a conflict (constraint_name set)
    PRUNE      the candidate was discarded after a conflict
    SOLUTION   the candidate is fully determined and consistent
    BRANCH     the candidate was split on ``index``; ``children`` holds the
               candidate ids of the NO and YES copies, in that order

Usage:
    recorder = RecordingObserver()
    solutions = puzzle.solve(observer=recorder)
    print(recorder.count(SearchEventType.BRANCH))
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from component_1_truth_state import Result, Truth
from component_5_proof_explanation import ProofStep, ProofTree, StepType, new_step_id
from component_6_logging_config import StructuredLogger, get_logger
from infrastructure.interfaces import SearchObserver


class SearchEventType(Enum):
    PROGRESS = "progress"
    CONFLICT = "conflict"
    PRUNE = "prune"
    SOLUTION = "solution"
    BRANCH = "branch"


@dataclass(frozen=True)
class SearchEvent:
    """
    One observable step of a search run.

    Attributes:
        event_type: What happened
        candidate_id: Candidate the event belongs to (root candidate is 0)
        depth: Number of branch decisions above the candidate
        constraint_name: Constraint involved (PROGRESS / CONFLICT)
        result: Constraint outcome (PROGRESS / CONFLICT)
        index: Slot that was branched on (BRANCH)
        children: Candidate ids created by a BRANCH, NO side first
    """

    event_type: SearchEventType
    candidate_id: int
    depth: int = 0
    constraint_name: Optional[str] = None
    result: Optional[Result] = None
    index: Optional[int] = None
    children: Tuple[int, ...] = ()

    def describe(self) -> str:
        """One-line text in the classic trace format."""
        if self.event_type == SearchEventType.PROGRESS:
            return f"Progress: {self.constraint_name}"
        if self.event_type == SearchEventType.CONFLICT:
            return f"Conflict: {self.constraint_name}"
        if self.event_type == SearchEventType.PRUNE:
            return "Pruning: Candidate is not consistent."
        if self.event_type == SearchEventType.SOLUTION:
            return "Solution!"
        return f"Guessing: Index {self.index}."


class NullObserver(SearchObserver):
    """Discards every event."""

    def on_event(self, event: SearchEvent) -> None:
        pass


class CallbackObserver(SearchObserver):
    """Adapts a plain callable to the observer interface."""

    def __init__(self, callback: Callable[[SearchEvent], None]):
        self.callback = callback

    def on_event(self, event: SearchEvent) -> None:
        self.callback(event)


class RecordingObserver(SearchObserver):
    """Keeps every event in order (used by tests and reports)."""

    def __init__(self):
        self.events: List[SearchEvent] = []

    def on_event(self, event: SearchEvent) -> None:
        self.events.append(event)

    def count(self, event_type: SearchEventType) -> int:
        return sum(1 for e in self.events if e.event_type == event_type)

    def of_type(self, event_type: SearchEventType) -> List[SearchEvent]:
        return [e for e in self.events if e.event_type == event_type]

    def clear(self) -> None:
        self.events.clear()


class LoggingObserver(SearchObserver):
    """
    Writes one log line per event.

    Args:
        logger: Target logger (default: this module's structured logger)
        level: Logging level for the lines (default DEBUG)
    """

    def __init__(
        self,
        logger: Optional[StructuredLogger] = None,
        level: int = logging.DEBUG,
    ):
        self.logger = logger or get_logger(__name__)
        self.level = level

    def on_event(self, event: SearchEvent) -> None:
        self.logger.log(
            self.level,
            event.describe(),
            extra={"candidate": event.candidate_id, "depth": event.depth},
        )


class CompositeObserver(SearchObserver):
    """Forwards each event to several observers in order."""

    def __init__(self, *observers: SearchObserver):
        self.observers: List[SearchObserver] = list(observers)

    def on_search_start(self, slot_count: int) -> None:
        for observer in self.observers:
            observer.on_search_start(slot_count)

    def on_event(self, event: SearchEvent) -> None:
        for observer in self.observers:
            observer.on_event(event)


class ProofTraceObserver(SearchObserver):
    """
    Records a solve run as a ProofTree.

    The root candidate becomes a PREMISE step. A BRANCH adds two ASSUMPTION
    steps (slot = NO, slot = YES) under the branching candidate's step; the
    child candidates' later steps nest under their ASSUMPTION.

    Each solve run gets its own PREMISE root; ``solution_count`` and
    ``conclusions`` (CONCLUSION steps in discovery order) cover the latest run.
    """

    def __init__(self, query: str = "puzzle"):
        self.tree = ProofTree(query=query)
        self._containers: Dict[int, ProofStep] = {}
        self.solution_count = 0
        self.conclusions: List[ProofStep] = []
        self.runs = 0

    def on_search_start(self, slot_count: int) -> None:
        self._containers.clear()
        self.solution_count = 0
        self.conclusions = []
        self.runs += 1
        self.tree.metadata["runs"] = self.runs

    def _container(self, event: SearchEvent) -> ProofStep:
        step = self._containers.get(event.candidate_id)
        if step is None:
            # First event of a solve: open the premise
            step = ProofStep(
                step_id=new_step_id(),
                step_type=StepType.PREMISE,
                output="all slots undetermined",
                explanation_text="Start with every slot MAYBE",
                metadata={"candidate": event.candidate_id, "run": self.runs},
            )
            self.tree.add_root_step(step)
            self._containers[event.candidate_id] = step
        return step

    def on_event(self, event: SearchEvent) -> None:
        container = self._container(event)
        metadata = {"candidate": event.candidate_id, "depth": event.depth}

        if event.event_type == SearchEventType.PROGRESS:
            container.add_subgoal(
                ProofStep(
                    step_id=new_step_id(),
                    step_type=StepType.INFERENCE,
                    rule_name=event.constraint_name,
                    output="progress",
                    explanation_text=f"'{event.constraint_name}' forced new values",
                    metadata=metadata,
                )
            )
        elif event.event_type == SearchEventType.CONFLICT:
            container.add_subgoal(
                ProofStep(
                    step_id=new_step_id(),
                    step_type=StepType.CONTRADICTION,
                    rule_name=event.constraint_name,
                    output="conflict",
                    explanation_text=f"'{event.constraint_name}' cannot be satisfied",
                    metadata=metadata,
                )
            )
        elif event.event_type == SearchEventType.SOLUTION:
            self.solution_count += 1
            conclusion = ProofStep(
                step_id=new_step_id(),
                step_type=StepType.CONCLUSION,
                output=f"solution #{self.solution_count}",
                explanation_text="Every slot is determined and consistent",
                metadata=metadata,
            )
            container.add_subgoal(conclusion)
            self.conclusions.append(conclusion)
        elif event.event_type == SearchEventType.BRANCH:
            for child_id, value in zip(event.children, (Truth.NO, Truth.YES)):
                assumption = ProofStep(
                    step_id=new_step_id(),
                    step_type=StepType.ASSUMPTION,
                    inputs=[f"slot {event.index} undetermined"],
                    output=f"slot {event.index} = {value.name}",
                    explanation_text=f"Guess slot {event.index} is {value.name}",
                    bindings={str(event.index): value.name},
                    metadata={"candidate": child_id, "depth": event.depth + 1},
                )
                container.add_subgoal(assumption)
                self._containers[child_id] = assumption
        # PRUNE needs no step of its own: the CONTRADICTION already marks it
