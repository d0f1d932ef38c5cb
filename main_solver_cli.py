"""
main_solver_cli.py

Command line front end for the bundled puzzles.

Usage:
    python main_solver_cli.py sudoku [--grid GRID_OR_FILE]
    python main_solver_cli.py zebra
    python main_solver_cli.py latin --size 3

Common options:
    --trace / --no-trace   log every search event (default from config)
    --proof                print the search as a proof tree
    --proof-json PATH      write the proof tree to PATH as JSON
    --stats                print search statistics
    --limit N              print at most N solutions
    --loglevel LEVEL       console log level (overrides config)
    --config PATH          YAML configuration file

Exit codes: 0 solutions found, 1 no solution, 2 invalid input or config.
"""

import argparse
import sys
from typing import Callable, List, Optional, Tuple

from common.constants import DEFAULT_SOLUTION_PRINT_LIMIT, MAX_LATIN_SQUARE_ORDER
from component_1_truth_state import Solution
from component_3_puzzle_solver import Puzzle
from component_4_search_observer import (
    CompositeObserver,
    LoggingObserver,
    ProofTraceObserver,
)
from component_5_proof_explanation import (
    format_proof_chain,
    format_proof_tree,
    write_proof_json,
)
from component_6_logging_config import get_logger, parse_log_level, setup_logging
from component_7_sudoku_encoding import (
    EXAMPLE_GRID,
    build_sudoku_puzzle,
    load_grid,
    render_sudoku,
)
from component_8_zebra_encoding import build_zebra_puzzle, house_of, render_zebra
from component_8_zebra_encoding import describe_solution as describe_zebra
from component_9_latin_square_encoding import (
    build_latin_square_puzzle,
    render_latin_square,
)
from infrastructure.interfaces import SearchObserver
from solver_config import get_config
from solver_exceptions import (
    ConfigurationException,
    DefinitionException,
    EncodingError,
    PreconditionViolation,
    get_user_friendly_message,
)

logger = get_logger(__name__)

EXIT_SOLVED = 0
EXIT_NO_SOLUTION = 1
EXIT_INVALID = 2

Renderer = Callable[[Solution], str]


def non_negative_int(value: str) -> int:
    """argparse type for counts that may be zero but not negative."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or more, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve puzzles with the three-valued propagation/search engine."
    )
    parser.add_argument(
        "puzzle", choices=["sudoku", "zebra", "latin"], help="Puzzle to solve."
    )
    parser.add_argument(
        "--grid",
        help="Sudoku grid: 81 cells (digits, '.' or '0' for blanks) or a file "
        "containing them. Default: a classic example grid.",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=4,
        help=f"Latin square order, 1..{MAX_LATIN_SQUARE_ORDER} (default: 4).",
    )
    parser.add_argument(
        "--trace",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Log every search event (default: solver.trace from config).",
    )
    parser.add_argument(
        "--proof", action="store_true", help="Print the search as a proof tree."
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        default=None,
        help="Print search statistics (default: solver.show_statistics).",
    )
    parser.add_argument(
        "--proof-json",
        metavar="PATH",
        help="Write the proof tree to PATH as JSON (records the proof).",
    )
    parser.add_argument(
        "--limit",
        type=non_negative_int,
        default=DEFAULT_SOLUTION_PRINT_LIMIT,
        help=f"Print at most this many solutions (default: {DEFAULT_SOLUTION_PRINT_LIMIT}).",
    )
    parser.add_argument(
        "-log",
        "--loglevel",
        default=None,
        help="Console logging level, e.g. --loglevel debug "
        "(default: logging.console_level from config).",
    )
    parser.add_argument("--config", help="Path to a YAML configuration file.")
    return parser


def build_puzzle(args: argparse.Namespace) -> Tuple[Puzzle, Renderer, str]:
    """
    Build the requested puzzle and the function that prints its solutions.

    Raises:
        EncodingError: Invalid grid or Latin square order
    """
    if args.puzzle == "sudoku":
        givens = load_grid(args.grid if args.grid else EXAMPLE_GRID)
        return build_sudoku_puzzle(givens), render_sudoku, "sudoku"

    if args.puzzle == "zebra":
        return build_zebra_puzzle(), _render_zebra_with_answer, "zebra puzzle"

    size = args.size
    if not 1 <= size <= MAX_LATIN_SQUARE_ORDER:
        raise EncodingError(
            f"Latin square order must be between 1 and {MAX_LATIN_SQUARE_ORDER}",
            encoding="latin",
            context={"size": size},
        )
    return (
        build_latin_square_puzzle(size),
        lambda solution: render_latin_square(solution, size),
        f"latin square of order {size}",
    )


def _render_zebra_with_answer(solution: Solution) -> str:
    lines = [render_zebra(solution)]
    houses = describe_zebra(solution)
    zebra_house = house_of(solution, "zebra")
    water_house = house_of(solution, "water")
    if zebra_house is not None:
        lines.append(f"The {houses[zebra_house]['nationality']} owns the zebra.")
    if water_house is not None:
        lines.append(f"The {houses[water_house]['nationality']} drinks water.")
    return "\n".join(lines)


def run(args: argparse.Namespace) -> int:
    config = get_config(args.config)

    trace = args.trace if args.trace is not None else config.get("solver.trace")
    show_stats = (
        args.stats if args.stats is not None else config.get("solver.show_statistics")
    )

    console_level = parse_log_level(
        args.loglevel or config.get("logging.console_level")
    )
    trace_level = parse_log_level(config.get("solver.trace_level"))
    if trace:
        # trace lines must reach the console
        console_level = min(console_level, trace_level)
    setup_logging(
        console_level=console_level,
        file_level=config.get("logging.file_level"),
        log_to_file=bool(config.get("logging.log_to_file")),
        log_dir=config.get("logging.log_dir"),
    )

    puzzle, render, title = build_puzzle(args)

    observers: List[SearchObserver] = []
    if trace:
        observers.append(LoggingObserver(level=trace_level))
    proof: Optional[ProofTraceObserver] = None
    if args.proof or args.proof_json:
        proof = ProofTraceObserver(query=title)
        observers.append(proof)

    solutions = puzzle.solve(observer=CompositeObserver(*observers))

    for number, solution in enumerate(solutions[: args.limit], 1):
        print(f"Solution {number}:")
        print(render(solution))
        print()
    if len(solutions) > args.limit:
        print(f"... {len(solutions) - args.limit} more not shown")
    print(f"Found {len(solutions)} solution(s) for the {title}.")

    if proof is not None and args.proof:
        print()
        print(format_proof_tree(proof.tree, show_details=False))
        if proof.conclusions:
            first = proof.conclusions[0]
            print()
            print("Derivation of solution 1:")
            print(format_proof_chain(proof.tree.derivation(first.step_id)))
    if proof is not None and args.proof_json:
        path = write_proof_json(proof.tree, args.proof_json)
        print(f"Proof tree written to {path}")

    if show_stats and puzzle.last_statistics is not None:
        print()
        print("Search statistics:")
        for key, value in puzzle.last_statistics.to_dict().items():
            if isinstance(value, float):
                value = f"{value:.2f}"
            print(f"  {key}: {value}")

    return EXIT_SOLVED if solutions else EXIT_NO_SOLUTION


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except (DefinitionException, ConfigurationException, PreconditionViolation) as e:
        logger.error("Puzzle could not be solved", extra={"error": str(e)})
        print(get_user_friendly_message(e, include_details=True), file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
