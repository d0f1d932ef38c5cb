"""
component_7_sudoku_encoding.py

Sudoku on top of the slot-puzzle engine.

Slot layout: one slot per (row, column, digit), all 1-based, 729 slots:

    index_of(row, col, val) = (row-1)*81 + (col-1)*9 + (val-1)

Rules:
- every cell holds exactly one digit
- every digit appears exactly once per row, column and 3x3 box
- every given is a Fixed YES

Usage:
    givens = parse_grid(text)
    puzzle = build_sudoku_puzzle(givens)
    for solution in puzzle.solve():
        print(render_sudoku(solution))
"""

from pathlib import Path
from typing import Dict, List, Tuple, Union

from common.constants import SUDOKU_ORDER
from component_1_truth_state import Solution, Truth
from component_2_constraint_catalog import ExactlyN, Fixed
from component_3_puzzle_solver import Puzzle
from component_6_logging_config import get_logger
from solver_exceptions import EncodingError

logger = get_logger(__name__)

N = SUDOKU_ORDER
SLOT_COUNT = N * N * N

Givens = Dict[Tuple[int, int], int]

# Classic example grid (Wikipedia "Sudoku"), solvable by propagation alone
EXAMPLE_GRID = (
    "53..7...."
    "6..195..."
    ".98....6."
    "8...6...3"
    "4..8.3..1"
    "7...2...6"
    ".6....28."
    "...419..5"
    "....8..79"
)


def index_of(row: int, col: int, val: int) -> int:
    return (row - 1) * N * N + (col - 1) * N + (val - 1)


def row_indexes(row: int, val: int) -> List[int]:
    """Slots for digit ``val`` across one row."""
    return [index_of(row, col, val) for col in range(1, N + 1)]


def col_indexes(col: int, val: int) -> List[int]:
    """Slots for digit ``val`` down one column."""
    return [index_of(row, col, val) for row in range(1, N + 1)]


def cell_indexes(row: int, col: int) -> List[int]:
    """Slots for every digit of one cell."""
    return [index_of(row, col, val) for val in range(1, N + 1)]


def box_indexes(box: int, val: int) -> List[int]:
    """Slots for digit ``val`` inside box 1..9 (numbered row-major)."""
    row0 = 3 * ((box - 1) // 3) + 1
    col0 = 3 * ((box - 1) % 3) + 1
    return [
        index_of(row, col, val)
        for row in range(row0, row0 + 3)
        for col in range(col0, col0 + 3)
    ]


def parse_grid(text: str) -> Givens:
    """
    Parse 81 cells (digits 1-9, ``0`` or ``.`` for blanks; whitespace and
    ``|``/``-``/``+`` separators ignored) into a givens mapping.

    Raises:
        EncodingError: Wrong cell count or unknown characters
    """
    cells = [ch for ch in text if not ch.isspace() and ch not in "|-+"]
    if len(cells) != N * N:
        raise EncodingError(
            f"Sudoku grid needs {N * N} cells, got {len(cells)}",
            encoding="sudoku",
        )

    givens: Givens = {}
    for position, ch in enumerate(cells):
        if ch in ".0":
            continue
        if ch not in "123456789":
            raise EncodingError(
                f"Invalid sudoku cell {ch!r}",
                encoding="sudoku",
                context={"position": position},
            )
        row, col = divmod(position, N)
        givens[(row + 1, col + 1)] = int(ch)
    return givens


def load_grid(source: Union[str, Path]) -> Givens:
    """Read a grid from a file path, or parse ``source`` itself as a grid."""
    path = Path(source)
    if len(str(source)) < 255 and path.is_file():
        return parse_grid(path.read_text(encoding="utf-8"))
    return parse_grid(str(source))


def build_sudoku_puzzle(givens: Givens) -> Puzzle:
    """
    Create the 729-slot puzzle for a grid.

    Raises:
        EncodingError: Given outside rows/cols/digits 1..9
    """
    puzzle = Puzzle(SLOT_COUNT)

    for i in range(1, N + 1):
        for j in range(1, N + 1):
            puzzle.add_constraint(
                ExactlyN("Cell has exactly 1 digit.", 1, cell_indexes(i, j))
            )
            puzzle.add_constraint(
                ExactlyN("Digit appears exactly once in row.", 1, row_indexes(i, j))
            )
            puzzle.add_constraint(
                ExactlyN(
                    "Digit appears exactly once in column.", 1, col_indexes(i, j)
                )
            )
            puzzle.add_constraint(
                ExactlyN("Digit appears exactly once in box.", 1, box_indexes(i, j))
            )

    for (row, col), val in sorted(givens.items()):
        if not (1 <= row <= N and 1 <= col <= N and 1 <= val <= N):
            raise EncodingError(
                f"Given out of range: r{row}c{col}={val}",
                encoding="sudoku",
            )
        puzzle.add_constraint(
            Fixed(f"Given r{row}c{col} = {val}", index_of(row, col, val))
        )

    logger.debug(
        "Sudoku puzzle built",
        extra={"givens": len(givens), "constraints": len(puzzle.constraints)},
    )
    return puzzle


def solution_to_grid(solution: Solution) -> List[List[int]]:
    """Digits per row; 0 where a cell has no YES digit."""
    grid = []
    for row in range(1, N + 1):
        line = []
        for col in range(1, N + 1):
            digit = 0
            for val in range(1, N + 1):
                if solution[index_of(row, col, val)] == Truth.YES:
                    digit = val
                    break
            line.append(digit)
        grid.append(line)
    return grid


def render_sudoku(solution: Solution) -> str:
    """Nine lines of space-separated digits (``.`` for undetermined cells)."""
    lines = []
    for line in solution_to_grid(solution):
        lines.append(" ".join(str(d) if d else "." for d in line))
    return "\n".join(lines)
