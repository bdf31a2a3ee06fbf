#!/usr/bin/env python3
"""
MineLens - Minesweeper learning-mode probability viewer

Command line entry point. Loads a board snapshot (plain text or the HTML of
a web minesweeper page), runs the probability engine and prints the mine
probability of every hidden cell.

Usage:
    python main.py board.txt --mines 10
    python main.py page.html --html --mines 40 --hint

Requirements:
    - Python 3.8+
    - NumPy
    - BeautifulSoup4 (HTML snapshots)
"""

import argparse
import sys
import logging
from pathlib import Path
from typing import List, Optional

import numpy as np

from minelens.board_loader.html_parser import HTMLBoardParser
from minelens.board_loader.text_parser import BoardParseError, parse_board_text
from minelens.solver.advisor import LearningAdvisor
from minelens.solver.game_state import MinesweeperBoard
from minelens.solver.probability_engine import ProbabilityEngine, probability_grid


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None):
    """Setup application logging"""
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def handle_exception(exc_type, exc_value, exc_traceback):
    """Global exception handler"""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    logger = logging.getLogger(__name__)
    logger.critical(
        "Uncaught exception",
        exc_info=(exc_type, exc_value, exc_traceback)
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minelens",
        description="Print mine probabilities for a minesweeper board snapshot")
    parser.add_argument("board_file", type=Path, help="Board snapshot (text, or HTML with --html)")
    parser.add_argument("--mines", type=int, default=None,
                        help="Total mines on the board, flags included")
    parser.add_argument("--html", action="store_true", help="Parse the snapshot as page HTML")
    parser.add_argument("--definitive", action="store_true",
                        help="Only list cells that are certainly safe or certainly mines")
    parser.add_argument("--hint", action="store_true", help="Print ranked move suggestions")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file")
    return parser


def load_board(path: Path, mines: Optional[int], html: bool) -> Optional[MinesweeperBoard]:
    """Read a snapshot from disk; None if it cannot be parsed"""
    logger = logging.getLogger(__name__)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Cannot read {path}: {e}")
        return None

    if html:
        return HTMLBoardParser().parse_board_html(content, expected_mines=mines)

    if mines is None:
        logger.error("--mines is required for text snapshots")
        return None

    try:
        return parse_board_text(content, mines)
    except BoardParseError as e:
        logger.error(f"Failed to parse {path}: {e}")
        return None


def format_grid(grid: np.ndarray) -> str:
    lines = []
    for row in grid:
        lines.append(' '.join('  -  ' if np.isnan(p) else f'{p:5.3f}' for p in row))
    return '\n'.join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point"""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    sys.excepthook = handle_exception

    board = load_board(args.board_file, args.mines, args.html)
    if board is None:
        print(f"Could not load a board from {args.board_file}", file=sys.stderr)
        return 1

    engine = ProbabilityEngine()
    mines_remaining = board.remaining_mines

    print(board)
    print()

    if args.hint:
        result = LearningAdvisor(engine).analyze(board, mines_remaining)
        for move in result.moves:
            print(f"{move.action:6s} ({move.row}, {move.col})  "
                  f"confidence {move.confidence:.3f}  {move.reasoning}")
        return 0

    if args.definitive:
        cells = engine.get_definitive_cells(board, mines_remaining)
        print("safe: " + ' '.join(f"({r},{c})" for r, c in cells['safe']))
        print("mines: " + ' '.join(f"({r},{c})" for r, c in cells['mines']))
        return 0

    probabilities = engine.calculate_probabilities(board, mines_remaining)
    print(format_grid(probability_grid(board, probabilities)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
