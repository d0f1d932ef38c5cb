"""
component_9_latin_square_encoding.py

Latin squares of order n on top of the slot-puzzle engine.

Slot layout: one slot per (row, column, symbol), all 0-based, n**3 slots:

    index_of(n, row, col, symbol) = (row*n + col)*n + symbol

Every cell holds exactly one symbol and every symbol appears exactly once
per row and per column. Without givens the engine enumerates every square of
the order (1, 2, 12, 576, 161280, ... for n = 1, 2, 3, 4, 5).
"""

from typing import Dict, List, Optional, Tuple

from component_1_truth_state import Solution, Truth
from component_2_constraint_catalog import ExactlyN, Fixed
from component_3_puzzle_solver import Puzzle
from component_6_logging_config import get_logger
from solver_exceptions import EncodingError

logger = get_logger(__name__)

LatinGivens = Dict[Tuple[int, int], int]


def index_of(n: int, row: int, col: int, symbol: int) -> int:
    return (row * n + col) * n + symbol


def build_latin_square_puzzle(n: int, givens: Optional[LatinGivens] = None) -> Puzzle:
    """
    Create the n**3-slot puzzle for Latin squares of order ``n``.

    Args:
        n: Order of the square (>= 1)
        givens: Optional pre-filled cells, (row, col) -> symbol, 0-based

    Raises:
        EncodingError: n < 1, or a given outside the square
    """
    if isinstance(n, bool) or not isinstance(n, int) or n < 1:
        raise EncodingError(
            f"Latin square order must be a positive integer, got {n!r}",
            encoding="latin",
        )

    puzzle = Puzzle(n * n * n)
    span = range(n)

    for a in span:
        for b in span:
            puzzle.add_constraint(
                ExactlyN(
                    "Cell has exactly 1 symbol.",
                    1,
                    [index_of(n, a, b, s) for s in span],
                )
            )
            puzzle.add_constraint(
                ExactlyN(
                    "Symbol appears exactly once in row.",
                    1,
                    [index_of(n, a, c, b) for c in span],
                )
            )
            puzzle.add_constraint(
                ExactlyN(
                    "Symbol appears exactly once in column.",
                    1,
                    [index_of(n, r, a, b) for r in span],
                )
            )

    for (row, col), symbol in sorted((givens or {}).items()):
        if not (0 <= row < n and 0 <= col < n and 0 <= symbol < n):
            raise EncodingError(
                f"Given out of range: ({row}, {col}) = {symbol}",
                encoding="latin",
                context={"order": n},
            )
        puzzle.add_constraint(
            Fixed(f"Given ({row}, {col}) = {symbol}", index_of(n, row, col, symbol))
        )

    logger.debug(
        "Latin square puzzle built",
        extra={"order": n, "constraints": len(puzzle.constraints)},
    )
    return puzzle


def solution_to_rows(solution: Solution, n: int) -> List[List[Optional[int]]]:
    """Symbol per cell, row by row; None where no symbol is YES."""
    rows = []
    for row in range(n):
        line: List[Optional[int]] = []
        for col in range(n):
            line.append(
                next(
                    (
                        s
                        for s in range(n)
                        if solution[index_of(n, row, col, s)] == Truth.YES
                    ),
                    None,
                )
            )
        rows.append(line)
    return rows


def render_latin_square(solution: Solution, n: int) -> str:
    """Symbols printed 1-based, ``.`` for undetermined cells."""
    return "\n".join(
        " ".join("." if s is None else str(s + 1) for s in line)
        for line in solution_to_rows(solution, n)
    )
