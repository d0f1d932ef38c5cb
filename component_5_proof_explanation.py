"""
component_5_proof_explanation.py

Proof trace data model for the search engine.

A solve run can be recorded as a ProofTree (see ProofTraceObserver in
component_4_search_observer). Each node is a ProofStep:

- PREMISE:        the all-MAYBE starting candidate
- INFERENCE:      a constraint forced at least one slot
- ASSUMPTION:     one side of a branch (slot forced NO or YES)
- CONTRADICTION:  a constraint reported a conflict, candidate pruned
- CONCLUSION:     a fully determined, consistent candidate

Steps taken on a branch are nested as subgoals of that branch's ASSUMPTION,
so the tree mirrors the search tree.

Functions:
- ProofStep / ProofTree data structures with dict round trips
- format_proof_step / format_proof_tree / format_proof_chain for text output
- write_proof_json for the CLI --proof-json option
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Union


class StepType(Enum):
    """Types of search steps"""

    PREMISE = "premise"  # Starting candidate
    INFERENCE = "inference"  # Constraint propagation made progress
    ASSUMPTION = "assumption"  # Trial assignment (branch)
    CONTRADICTION = "contradiction"  # Conflict detected (prune)
    CONCLUSION = "conclusion"  # Solution found


def new_step_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass
class ProofStep:
    """
    One step of a recorded search.

    Attributes:
        step_id: Unique identifier for this step
        step_type: Kind of step (StepType enum)
        inputs: Premises (e.g. the slot assignments a branch assumed)
        rule_name: Name of the constraint involved (if any)
        output: Short result text ("slot 12 = YES", "conflict")
        explanation_text: Human-readable explanation
        bindings: Slot assignments introduced by this step (index -> value name)
        metadata: Additional data (candidate id, depth, ...)
        timestamp: When this step was created
        subgoals: Child steps
    """

    step_id: str
    step_type: StepType
    inputs: List[str] = field(default_factory=list)
    rule_name: Optional[str] = None
    output: str = ""
    explanation_text: str = ""
    bindings: Dict[str, Any] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)
    subgoals: List["ProofStep"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "step_id": self.step_id,
            "step_type": self.step_type.value,
            "inputs": self.inputs,
            "rule_name": self.rule_name,
            "output": self.output,
            "explanation_text": self.explanation_text,
            "bindings": self.bindings,
            "metadata": self.metadata,
            "timestamp": self.timestamp.isoformat(),
            "subgoals": [sg.to_dict() for sg in self.subgoals],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProofStep":
        """Create ProofStep from dictionary"""
        data_copy = data.copy()
        data_copy["step_type"] = StepType(data_copy["step_type"])
        data_copy["timestamp"] = datetime.fromisoformat(data_copy["timestamp"])
        data_copy["subgoals"] = [
            cls.from_dict(sg) for sg in data_copy.get("subgoals", [])
        ]
        return cls(**data_copy)

    def add_subgoal(self, subgoal: "ProofStep") -> None:
        """Add a child step"""
        self.subgoals.append(subgoal)

    def count_descendants(self, step_type: Optional[StepType] = None) -> int:
        """Count steps below this one, optionally of a single type"""
        total = 0
        for subgoal in self.subgoals:
            if step_type is None or subgoal.step_type == step_type:
                total += 1
            total += subgoal.count_descendants(step_type)
        return total


@dataclass
class ProofTree:
    """
    Hierarchical record of one solve run.
    """

    query: str
    root_steps: List[ProofStep] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.now)

    def add_root_step(self, step: ProofStep) -> None:
        """Add a top-level proof step"""
        self.root_steps.append(step)

    def get_all_steps(self) -> List[ProofStep]:
        """Get all proof steps (flattened, depth-first)"""
        all_steps = []

        def collect_steps(step: ProofStep) -> None:
            all_steps.append(step)
            for subgoal in step.subgoals:
                collect_steps(subgoal)

        for root in self.root_steps:
            collect_steps(root)

        return all_steps

    def get_step_by_id(self, step_id: str) -> Optional[ProofStep]:
        """Find a step by its ID"""
        for step in self.get_all_steps():
            if step.step_id == step_id:
                return step
        return None

    def get_steps_by_type(self, step_type: StepType) -> List[ProofStep]:
        return [s for s in self.get_all_steps() if s.step_type == step_type]

    def path_to(self, step_id: str) -> List[ProofStep]:
        """Steps from a root down to ``step_id`` (empty if not in the tree)"""

        def walk(step: ProofStep, trail: List[ProofStep]) -> List[ProofStep]:
            trail = trail + [step]
            if step.step_id == step_id:
                return trail
            for subgoal in step.subgoals:
                found = walk(subgoal, trail)
                if found:
                    return found
            return []

        for root in self.root_steps:
            found = walk(root, [])
            if found:
                return found
        return []

    def derivation(self, step_id: str) -> List[ProofStep]:
        """
        Linear explanation of ``step_id``: every step on its path, each
        followed by the inferences made at that point.
        """
        path = self.path_to(step_id)
        chain: List[ProofStep] = []
        for step in path[:-1]:
            chain.append(step)
            chain.extend(s for s in step.subgoals if s.step_type == StepType.INFERENCE)
        chain.extend(path[-1:])
        return chain

    def rule_names(self) -> Set[str]:
        """Names of every constraint that appears in the tree"""
        return {s.rule_name for s in self.get_all_steps() if s.rule_name}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "query": self.query,
            "root_steps": [step.to_dict() for step in self.root_steps],
            "metadata": self.metadata,
            "created_at": self.created_at.isoformat(),
        }


# ==================== Formatting ====================


def format_proof_step(
    step: ProofStep, indent: int = 0, show_details: bool = True
) -> str:
    """
    Format a single proof step (and its subgoals) as text.

    Args:
        step: The ProofStep to format
        indent: Indentation level
        show_details: Whether to show inputs, rule and bindings

    Returns:
        Formatted string
    """
    prefix = "  " * indent
    lines = []

    icon = _get_step_icon(step.step_type)
    lines.append(f"{prefix}{icon} [{step.step_type.value}]")

    if step.explanation_text:
        lines.append(f"{prefix}   {step.explanation_text}")

    if step.output:
        lines.append(f"{prefix}   -> {step.output}")

    if show_details:
        if step.inputs:
            lines.append(
                f"{prefix}   Inputs: {', '.join(step.inputs[:3])}"
                + (f" ... (+{len(step.inputs)-3})" if len(step.inputs) > 3 else "")
            )

        if step.rule_name:
            lines.append(f"{prefix}   Rule: {step.rule_name}")

        if step.bindings:
            bindings_str = ", ".join(f"{k}={v}" for k, v in step.bindings.items())
            lines.append(f"{prefix}   Bindings: {bindings_str}")

    for subgoal in step.subgoals:
        lines.append(format_proof_step(subgoal, indent + 1, show_details))

    return "\n".join(lines)


def format_proof_tree(tree: ProofTree, show_details: bool = True) -> str:
    """
    Format an entire proof tree as text.

    Args:
        tree: The ProofTree to format
        show_details: Whether to show full details

    Returns:
        Formatted string
    """
    lines = ["=" * 60, f"Search trace for: {tree.query}", "=" * 60, ""]

    if not tree.root_steps:
        lines.append("No steps recorded.")
        return "\n".join(lines)

    for step in tree.root_steps:
        lines.append(format_proof_step(step, indent=0, show_details=show_details))
        lines.append("")

    all_steps = tree.get_all_steps()
    lines.append(f"Total: {len(all_steps)} steps")

    return "\n".join(lines)


def format_proof_chain(steps: List[ProofStep]) -> str:
    """
    One numbered line per step, e.g. a derivation returned by
    ProofTree.derivation:

        1. [START] all slots undetermined
        2. [INFER] Cell has exactly 1 symbol.
        3. [GUESS] slot 0 = YES
        4. [OK] solution #1
    """
    lines = []
    for number, step in enumerate(steps, 1):
        text = step.rule_name or step.output or step.explanation_text
        lines.append(f"{number}. {_get_step_icon(step.step_type)} {text}")
    return "\n".join(lines)


def _get_step_icon(step_type: StepType) -> str:
    """ASCII marker for a step type"""
    icons = {
        StepType.PREMISE: "[START]",
        StepType.INFERENCE: "[INFER]",
        StepType.ASSUMPTION: "[GUESS]",
        StepType.CONTRADICTION: "[FAIL]",
        StepType.CONCLUSION: "[OK]",
    }
    return icons.get(step_type, "*")


def write_proof_json(tree: ProofTree, path: Union[str, Path]) -> Path:
    """Write ``tree.to_dict()`` as indented UTF-8 JSON and return the path."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(
        json.dumps(tree.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8"
    )
    return target
