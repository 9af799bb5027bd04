"""
Star Battle Engine - Entry Point

Counts completions, verifies forced cells, or builds a row-pair solution for
a board stored as JSON:

    {
        "size": 10,                           # optional, checked against regions
        "required_per_unit": 2,
        "regions": ["0 0 1 1 ...", ...],      # or a 2D list of ints
        "cells": ["..*x......", ...]          # optional, '.' '*' 'x'
    }

Example:
    python main.py count board.json --max-count 2
    python main.py verify board.json 3 4 star
    python main.py solve board.json --debug
"""

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from starbattle.engine import (
    BoardDefinition,
    BoardState,
    Candidate,
    ForcedCellVerifier,
    InvalidBoardError,
    Mark,
    SearchContext,
    SearchLimits,
    VerificationCache,
    VerifyOptions,
    create_counter,
    describe_counters,
    get_counter_names,
    solve_row_pairs,
    validate_state,
)
from starbattle.settings import load_settings

logger = logging.getLogger(__name__)

MARK_NAMES = {"star": Mark.CONFIRMED, "cross": Mark.EXCLUDED}


def configure_logging(debug: bool, log_file: Optional[str] = None) -> None:
    """Log to the console and, if given, to a file."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=True,
    )


def load_board(path: Path) -> BoardState:
    """
    Read a board JSON file.

    Raises:
        InvalidBoardError: If the file is unreadable or malformed
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data: Dict[str, Any] = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        raise InvalidBoardError(f"Cannot read board file {path}: {e}") from e

    if not isinstance(data, dict) or "regions" not in data:
        raise InvalidBoardError("Board file must be an object with a 'regions' entry")

    try:
        required = int(data.get("required_per_unit", 1))
        regions = data["regions"]
        if regions and isinstance(regions[0], str):
            definition = BoardDefinition.from_strings(regions, required)
        else:
            definition = BoardDefinition.from_2d_list(regions, required)

        size = data.get("size")
        if size is not None and int(size) != definition.size:
            raise InvalidBoardError(
                f"Board file declares size {size} but its regions form a "
                f"{definition.size}x{definition.size} grid"
            )

        cells = data.get("cells")
        if cells is None:
            return BoardState.empty(definition)
        return BoardState.from_strings(definition, cells)
    except InvalidBoardError:
        raise
    except (TypeError, ValueError) as e:
        raise InvalidBoardError(f"Malformed board file {path}: {e}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Star Battle solution counter and verifier")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--counter", choices=get_counter_names(),
                        help=f"Counter variant, overrides settings ({describe_counters()})")
    sub = parser.add_subparsers(dest="command", required=True)

    count = sub.add_parser("count", help="Count completions of a board")
    count.add_argument("board", type=Path)
    count.add_argument("--max-count", type=int, help="Stop after this many solutions")
    count.add_argument("--timeout-ms", type=float, help="Search budget in milliseconds")
    count.add_argument("--max-depth", type=int, help="Depth bound")

    verify = sub.add_parser("verify", help="Check whether a cell is forced")
    verify.add_argument("board", type=Path)
    verify.add_argument("row", type=int)
    verify.add_argument("col", type=int)
    verify.add_argument("mark", choices=sorted(MARK_NAMES))
    verify.add_argument("--timeout-ms", type=float, help="Per-check budget in milliseconds")

    solve = sub.add_parser("solve", help="Build one solution with the row-pair solver")
    solve.add_argument("board", type=Path)

    return parser


def run_count(args: argparse.Namespace, state: BoardState, settings: Dict[str, Any]) -> int:
    limits = SearchLimits(
        max_count=args.max_count if args.max_count is not None else math.inf,
        timeout_ms=args.timeout_ms if args.timeout_ms is not None else settings["count_timeout_ms"],
        max_depth=args.max_depth if args.max_depth is not None else math.inf,
    )
    counter = create_counter(args.counter or settings["counter_name"])
    context = SearchContext(yield_every_ms=settings["yield_every_ms"])
    result = counter.count(state, limits, context)

    print(f"count={result.count} timed_out={result.timed_out} "
          f"capped_at_max={result.capped_at_max} aborted={result.aborted}")
    print(f"nodes={result.metrics.nodes_visited} pruned={result.metrics.pruned_branches} "
          f"time={result.metrics.computation_time_ms:.1f}ms "
          f"stop={result.metrics.stop_reason}")
    return 0


def run_verify(args: argparse.Namespace, state: BoardState, settings: Dict[str, Any]) -> int:
    size = state.size
    if not (0 <= args.row < size and 0 <= args.col < size):
        logger.error(f"Cell ({args.row},{args.col}) is outside the {size}x{size} board")
        return 2

    options = VerifyOptions(
        per_check_timeout_ms=(args.timeout_ms if args.timeout_ms is not None
                              else settings["per_check_timeout_ms"]),
        max_solutions_to_find=settings["max_solutions_to_find"],
    )
    verifier = ForcedCellVerifier(
        cache=VerificationCache(max_entries=settings["cache_max_entries"]),
        counter=create_counter(args.counter or settings["counter_name"]),
    )
    candidate = Candidate(args.row, args.col, MARK_NAMES[args.mark])
    verified = verifier.verify(state, candidate, options)

    print(f"status={verified.status.value}")
    print(verified.proof_summary())
    return 0


def run_solve(state: BoardState) -> int:
    solution = solve_row_pairs(state.definition)
    if solution is None:
        print("No solution found by the row-pair solver")
        return 1
    for line in solution.to_strings():
        print(line)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    settings = load_settings()
    configure_logging(args.debug or settings.get("debug_enabled", False), args.log_file)

    try:
        state = load_board(args.board)
    except InvalidBoardError as e:
        logger.error(f"Invalid board: {e}")
        return 2

    issues = validate_state(state)
    for issue in issues:
        logger.warning(issue)

    try:
        if args.command == "count":
            return run_count(args, state, settings)
        if args.command == "verify":
            return run_verify(args, state, settings)
        return run_solve(state)
    except ValueError as e:
        logger.error(f"Invalid arguments: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
