"""
Tests for search diagnostics (component_4).

Covers:
- SearchEvent text in the classic trace format
- Event sequence reported by Puzzle.solve
- Recording / callback / composite / logging observers
- ProofTraceObserver tree shape
"""

import logging

import pytest

from component_1_truth_state import Result, Truth
from component_2_constraint_catalog import ExactlyN, Fixed, Identical
from component_3_puzzle_solver import Puzzle
from component_4_search_observer import (
    CallbackObserver,
    CompositeObserver,
    LoggingObserver,
    NullObserver,
    ProofTraceObserver,
    RecordingObserver,
    SearchEvent,
    SearchEventType,
)
from component_5_proof_explanation import StepType
from component_6_logging_config import get_logger


@pytest.fixture
def puzzle():
    """Fixture: two-solution puzzle (one branch)"""
    p = Puzzle(4)
    p.add_constraint(Fixed("Slot 0 is YES.", 0))
    p.add_constraint(Identical("Slots 0 and 1 match.", [0], [1]))
    p.add_constraint(ExactlyN("Exactly one of 2 and 3.", 1, [2, 3]))
    return p


class TestSearchEvent:
    """Tests for the event text"""

    @pytest.mark.parametrize(
        "event, text",
        [
            (
                SearchEvent(SearchEventType.PROGRESS, 0, constraint_name="Rule"),
                "Progress: Rule",
            ),
            (
                SearchEvent(SearchEventType.CONFLICT, 0, constraint_name="Rule"),
                "Conflict: Rule",
            ),
            (
                SearchEvent(SearchEventType.PRUNE, 0),
                "Pruning: Candidate is not consistent.",
            ),
            (SearchEvent(SearchEventType.SOLUTION, 0), "Solution!"),
            (SearchEvent(SearchEventType.BRANCH, 0, index=7), "Guessing: Index 7."),
        ],
    )
    def test_describe(self, event, text):
        assert event.describe() == text

    def test_events_are_frozen(self):
        event = SearchEvent(SearchEventType.SOLUTION, 0)
        with pytest.raises(AttributeError):
            event.depth = 3


class TestEventSequence:
    """Tests for the events reported by Puzzle.solve"""

    def test_full_sequence(self, puzzle):
        recorder = RecordingObserver()
        puzzle.solve(observer=recorder)

        assert [(e.event_type, e.candidate_id) for e in recorder.events] == [
            (SearchEventType.PROGRESS, 0),
            (SearchEventType.PROGRESS, 0),
            (SearchEventType.BRANCH, 0),
            (SearchEventType.PROGRESS, 2),
            (SearchEventType.SOLUTION, 2),
            (SearchEventType.PROGRESS, 1),
            (SearchEventType.SOLUTION, 1),
        ]

    def test_branch_event_details(self, puzzle):
        recorder = RecordingObserver()
        puzzle.solve(observer=recorder)
        (branch,) = recorder.of_type(SearchEventType.BRANCH)

        assert branch.index == 2
        assert branch.children == (1, 2)
        assert branch.depth == 0

    def test_progress_events_name_constraints(self, puzzle):
        recorder = RecordingObserver()
        puzzle.solve(observer=recorder)
        progress = recorder.of_type(SearchEventType.PROGRESS)

        assert progress[0].constraint_name == "Slot 0 is YES."
        assert progress[1].constraint_name == "Slots 0 and 1 match."
        assert all(e.result == Result.PROGRESS for e in progress)
        assert progress[2].depth == 1

    def test_conflict_then_prune(self):
        p = Puzzle(2)
        p.add_constraint(ExactlyN("Exactly one.", 1, [0, 1]))
        p.add_constraint(Identical("Both equal.", [0], [1]))
        recorder = RecordingObserver()

        assert p.solve(observer=recorder) == []
        assert recorder.count(SearchEventType.CONFLICT) == 2
        assert recorder.count(SearchEventType.PRUNE) == 2
        conflict = recorder.of_type(SearchEventType.CONFLICT)[0]
        assert conflict.result == Result.CONFLICT


class TestObservers:
    """Tests for the bundled observer implementations"""

    def test_null_observer_is_silent(self, puzzle):
        assert len(puzzle.solve(observer=NullObserver())) == 2

    def test_callback_observer(self, puzzle):
        seen = []
        puzzle.solve(observer=CallbackObserver(lambda e: seen.append(e.describe())))
        assert seen[0] == "Progress: Slot 0 is YES."
        assert seen.count("Solution!") == 2
        assert "Guessing: Index 2." in seen

    def test_composite_observer_fans_out(self, puzzle):
        first, second = RecordingObserver(), RecordingObserver()
        puzzle.solve(observer=CompositeObserver(first, second))
        assert first.events == second.events
        assert len(first.events) == 7

    def test_composite_observer_forwards_search_start(self, puzzle):
        starts = []

        class StartCounter(NullObserver):
            def on_search_start(self, slot_count):
                starts.append(slot_count)

        puzzle.solve(observer=CompositeObserver(StartCounter(), StartCounter()))
        assert starts == [4, 4]

    def test_recording_observer_clear(self, puzzle):
        recorder = RecordingObserver()
        puzzle.solve(observer=recorder)
        recorder.clear()
        assert recorder.events == []

    def test_logging_observer(self, puzzle, caplog):
        observer = LoggingObserver(get_logger("test.trace"), level=logging.INFO)
        with caplog.at_level(logging.INFO, logger="test.trace"):
            puzzle.solve(observer=observer)

        messages = [r.getMessage() for r in caplog.records if r.name == "test.trace"]
        assert messages[0] == "Progress: Slot 0 is YES."
        assert "Guessing: Index 2." in messages
        assert messages.count("Solution!") == 2
        record = next(r for r in caplog.records if r.name == "test.trace")
        assert record.extra_info == {"candidate": 0, "depth": 0}


class TestProofTraceObserver:
    """Tests for the proof tree recording"""

    def test_tree_shape(self, puzzle):
        observer = ProofTraceObserver(query="two solutions")
        puzzle.solve(observer=observer)
        tree = observer.tree

        assert tree.query == "two solutions"
        assert len(tree.root_steps) == 1
        root = tree.root_steps[0]
        assert root.step_type == StepType.PREMISE
        # two inferences, then the two guesses
        assert [s.step_type for s in root.subgoals] == [
            StepType.INFERENCE,
            StepType.INFERENCE,
            StepType.ASSUMPTION,
            StepType.ASSUMPTION,
        ]

    def test_assumptions_hold_branch_steps(self, puzzle):
        observer = ProofTraceObserver()
        puzzle.solve(observer=observer)
        guess_no, guess_yes = observer.tree.root_steps[0].subgoals[2:]

        assert guess_no.bindings == {"2": "NO"}
        assert guess_yes.bindings == {"2": "YES"}
        assert [s.step_type for s in guess_yes.subgoals] == [
            StepType.INFERENCE,
            StepType.CONCLUSION,
        ]
        assert guess_yes.subgoals[1].output == "solution #1"
        assert guess_no.subgoals[1].output == "solution #2"

    def test_counts(self, puzzle):
        observer = ProofTraceObserver()
        puzzle.solve(observer=observer)

        assert observer.solution_count == 2
        assert len(observer.tree.get_steps_by_type(StepType.CONCLUSION)) == 2
        assert observer.tree.rule_names() == {
            "Slot 0 is YES.",
            "Slots 0 and 1 match.",
            "Exactly one of 2 and 3.",
        }

    def test_contradiction_recorded(self):
        p = Puzzle(1)
        p.add_constraint(Fixed("yes", 0, Truth.YES))
        p.add_constraint(Fixed("no", 0, Truth.NO))
        observer = ProofTraceObserver()
        p.solve(observer=observer)

        (contradiction,) = observer.tree.get_steps_by_type(StepType.CONTRADICTION)
        assert contradiction.rule_name == "no"
        assert observer.solution_count == 0

    def test_reused_observer_keeps_runs_apart(self, puzzle):
        observer = ProofTraceObserver()
        puzzle.solve(observer=observer)
        puzzle.solve(observer=observer)
        tree = observer.tree

        assert observer.runs == 2
        assert tree.metadata["runs"] == 2
        assert len(tree.root_steps) == 2
        assert [r.metadata["run"] for r in tree.root_steps] == [1, 2]
        # the second run counts its own solutions
        assert [c.output for c in observer.conclusions] == [
            "solution #1",
            "solution #2",
        ]
        assert observer.solution_count == 2
        second = tree.root_steps[1]
        assert second.count_descendants(StepType.CONCLUSION) == 2
        assert [s.output for s in second.subgoals[2].subgoals][-1] == "solution #2"
