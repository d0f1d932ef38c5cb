"""
component_8_zebra_encoding.py

The Zebra puzzle (Einstein's riddle) on top of the slot-puzzle engine.

Slot layout: one slot per (house, item), 5 houses x 25 items = 125 slots:

    index_of(house, item) = house * 25 + item      (both 0-based)

Items come in five categories of five (nationality, color, pet, beverage,
cigarette). Each house holds exactly one item per category and each item is
in exactly one house; the fifteen classic clues are added on top.

Usage:
    puzzle = build_zebra_puzzle()
    (solution,) = puzzle.solve()
    print(render_zebra(solution))
"""

from typing import Dict, List, Optional, Tuple

from common.constants import ZEBRA_HOUSE_COUNT
from component_1_truth_state import Solution, Truth
from component_2_constraint_catalog import ExactlyN, Fixed, ForcedDisjunction, Identical
from component_3_puzzle_solver import Puzzle
from component_6_logging_config import get_logger

logger = get_logger(__name__)

HOUSES: Tuple[int, ...] = tuple(range(ZEBRA_HOUSE_COUNT))

CATEGORIES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("nationality", ("Englishman", "Japanese man", "Norwegian", "Spaniard", "Ukrainian")),
    ("color", ("blue", "green", "ivory", "red", "yellow")),
    ("pet", ("dog", "fox", "horse", "snails", "zebra")),
    ("beverage", ("coffee", "juice", "milk", "tea", "water")),
    ("cigarette brand", ("Chesterfields", "Kools", "Lucky Strike", "Old Gold", "Parliaments")),
)

ITEMS: Tuple[str, ...] = tuple(item for _, items in CATEGORIES for item in items)
ITEM_COUNT = len(ITEMS)
SLOT_COUNT = ZEBRA_HOUSE_COUNT * ITEM_COUNT

_ITEM_INDEX: Dict[str, int] = {name: i for i, name in enumerate(ITEMS)}


def item_index(name: str) -> int:
    return _ITEM_INDEX[name]


def index_of(house: int, item: str) -> int:
    return house * ITEM_COUNT + item_index(item)


def row(item: str) -> List[int]:
    """The slot of ``item`` in every house, house order."""
    return [index_of(house, item) for house in HOUSES]


def col(house: int, category: int) -> List[int]:
    """The slots of every item of one category in one house."""
    _, items = CATEGORIES[category]
    return [index_of(house, item) for item in items]


def neighbors(house: int, item: str) -> List[int]:
    """Slots of ``item`` in the houses directly left and right of ``house``."""
    result = []
    if house > HOUSES[0]:
        result.append(index_of(house - 1, item))
    if house < HOUSES[-1]:
        result.append(index_of(house + 1, item))
    return result


def build_zebra_puzzle() -> Puzzle:
    puzzle = Puzzle(SLOT_COUNT)

    # clue 1: every house has one of each, every item is in one house
    for category, (category_name, items) in enumerate(CATEGORIES):
        for house in HOUSES:
            puzzle.add_constraint(
                ExactlyN(
                    f"Exactly 1 {category_name} in each house.",
                    1,
                    col(house, category),
                )
            )
        for item in items:
            puzzle.add_constraint(
                ExactlyN(f"Exactly 1 house has the {item}.", 1, row(item))
            )

    same_house = [
        ("The Englishman lives in the red house.", "Englishman", "red"),
        ("The Spaniard owns the dog.", "Spaniard", "dog"),
        ("Coffee is drunk in the green house.", "coffee", "green"),
        ("The Ukrainian drinks tea.", "Ukrainian", "tea"),
    ]
    for name, a, b in same_house:
        puzzle.add_constraint(Identical(name, row(a), row(b)))

    # clue 6: ivory in house h <=> green in house h+1 (wraps around, and the
    # wrap is closed off by forbidding green in the first house)
    greens = row("green")
    greens = greens[1:] + greens[:1]
    puzzle.add_constraint(
        Identical(
            "The green house is immediately to the right of the ivory house.",
            row("ivory"),
            greens,
        )
    )
    puzzle.add_constraint(
        Fixed(
            "The green house can't be first because it's to the right of the ivory.",
            index_of(HOUSES[0], "green"),
            Truth.NO,
        )
    )

    puzzle.add_constraint(
        Identical("The Old Gold smoker owns snails.", row("Old Gold"), row("snails"))
    )
    puzzle.add_constraint(
        Identical("Kools are smoked in the yellow house.", row("Kools"), row("yellow"))
    )
    puzzle.add_constraint(
        Fixed("Milk is drunk in the middle house.", index_of(2, "milk"), Truth.YES)
    )
    puzzle.add_constraint(
        Fixed(
            "The Norwegian lives in the first house.",
            index_of(HOUSES[0], "Norwegian"),
            Truth.YES,
        )
    )

    next_to = [
        (
            "Chesterfields are smoked in the house next to the house with the fox.",
            "Chesterfields",
            "fox",
        ),
        (
            "Kools are smoked in the house next to the house where the horse is kept.",
            "Kools",
            "horse",
        ),
    ]
    for name, one, other in next_to:
        for house in HOUSES:
            puzzle.add_constraint(
                ForcedDisjunction(name, index_of(house, one), neighbors(house, other))
            )

    puzzle.add_constraint(
        Identical(
            "The Lucky Strike smoker drinks orange juice.",
            row("Lucky Strike"),
            row("juice"),
        )
    )
    puzzle.add_constraint(
        Identical(
            "The Japanese man smokes Parliaments.",
            row("Japanese man"),
            row("Parliaments"),
        )
    )
    for house in HOUSES:
        puzzle.add_constraint(
            ForcedDisjunction(
                "The Norwegian lives next to the blue house.",
                index_of(house, "Norwegian"),
                neighbors(house, "blue"),
            )
        )

    logger.debug(
        "Zebra puzzle built", extra={"constraints": len(puzzle.constraints)}
    )
    return puzzle


def house_of(solution: Solution, item: str) -> Optional[int]:
    """0-based house holding ``item``, or None if not determined."""
    for house in HOUSES:
        if solution[index_of(house, item)] == Truth.YES:
            return house
    return None


def describe_solution(solution: Solution) -> List[Dict[str, Optional[str]]]:
    """Per house: category name -> item (None where undetermined)."""
    description = []
    for house in HOUSES:
        entry: Dict[str, Optional[str]] = {}
        for category_name, items in CATEGORIES:
            entry[category_name] = next(
                (i for i in items if solution[index_of(house, i)] == Truth.YES),
                None,
            )
        description.append(entry)
    return description


def render_zebra(solution: Solution) -> str:
    """Grid of houses (columns) by items (rows): YES, no, or blank for MAYBE."""
    separator = "+-----" * ZEBRA_HOUSE_COUNT + "+"
    cells = {Truth.YES: " YES ", Truth.MAYBE: "     ", Truth.NO: " no  "}
    lines = []
    for _, items in CATEGORIES:
        lines.append(separator)
        for item in items:
            row_text = "|" + "|".join(
                cells[solution[index_of(house, item)]] for house in HOUSES
            )
            lines.append(f"{row_text}| {item}")
    lines.append(separator)
    return "\n".join(lines)
