"""
Tests for the Zebra puzzle encoding (component_8).

Covers:
- Item / house index layout
- Neighbor lists at the street ends
- The unique solution of the classic puzzle
- Table rendering
"""

import pytest

from component_1_truth_state import Truth
from component_8_zebra_encoding import (
    CATEGORIES,
    ITEMS,
    SLOT_COUNT,
    build_zebra_puzzle,
    col,
    describe_solution,
    house_of,
    index_of,
    neighbors,
    render_zebra,
    row,
)

EXPECTED_HOUSES = [
    {
        "nationality": "Norwegian",
        "color": "yellow",
        "pet": "fox",
        "beverage": "water",
        "cigarette brand": "Kools",
    },
    {
        "nationality": "Ukrainian",
        "color": "blue",
        "pet": "horse",
        "beverage": "tea",
        "cigarette brand": "Chesterfields",
    },
    {
        "nationality": "Englishman",
        "color": "red",
        "pet": "snails",
        "beverage": "milk",
        "cigarette brand": "Old Gold",
    },
    {
        "nationality": "Spaniard",
        "color": "ivory",
        "pet": "dog",
        "beverage": "juice",
        "cigarette brand": "Lucky Strike",
    },
    {
        "nationality": "Japanese man",
        "color": "green",
        "pet": "zebra",
        "beverage": "coffee",
        "cigarette brand": "Parliaments",
    },
]


@pytest.fixture(scope="module")
def solutions():
    """Fixture: solve the puzzle once for the whole module"""
    return build_zebra_puzzle().solve()


class TestLayout:
    """Tests for the slot layout"""

    def test_sizes(self):
        assert len(ITEMS) == 25
        assert len(set(ITEMS)) == 25
        assert SLOT_COUNT == 125
        assert len(CATEGORIES) == 5

    def test_index_of(self):
        assert index_of(0, "Englishman") == 0
        assert index_of(1, "Englishman") == 25
        assert index_of(4, "Parliaments") == 124

    def test_row_and_col(self):
        assert row("blue") == [5, 30, 55, 80, 105]
        assert col(2, 1) == [55, 56, 57, 58, 59]

    def test_neighbors_at_ends(self):
        assert neighbors(0, "fox") == [index_of(1, "fox")]
        assert neighbors(4, "fox") == [index_of(3, "fox")]
        assert neighbors(2, "fox") == [index_of(1, "fox"), index_of(3, "fox")]

    def test_unknown_item(self):
        with pytest.raises(KeyError):
            index_of(0, "cat")


class TestSolve:
    """Tests for the classic answer"""

    def test_unique_solution(self, solutions):
        assert len(solutions) == 1

    def test_full_assignment(self, solutions):
        assert describe_solution(solutions[0]) == EXPECTED_HOUSES

    def test_answers(self, solutions):
        solution = solutions[0]
        assert house_of(solution, "zebra") == house_of(solution, "Japanese man") == 4
        assert house_of(solution, "water") == house_of(solution, "Norwegian") == 0

    def test_exactly_25_yes(self, solutions):
        assert solutions[0].count(range(SLOT_COUNT), Truth.YES) == 25

    def test_partial_description(self):
        puzzle = build_zebra_puzzle()
        solution = puzzle.new_solution()
        assert describe_solution(solution)[0]["nationality"] is None
        assert house_of(solution, "zebra") is None


class TestRender:
    """Tests for the table output"""

    def test_table(self, solutions):
        lines = render_zebra(solutions[0]).splitlines()

        assert lines[0] == "+-----+-----+-----+-----+-----+"
        assert lines[1] == "| no  | no  | YES | no  | no  | Englishman"
        assert lines[-1] == lines[0]
        assert len(lines) == 5 * 6 + 1

    def test_blank_for_maybe(self):
        solution = build_zebra_puzzle().new_solution()
        lines = render_zebra(solution).splitlines()
        assert lines[1] == "|     |     |     |     |     | Englishman"
