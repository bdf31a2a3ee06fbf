"""
Plain-text board snapshots

One line per row, one symbol per cell, optionally separated by spaces:
  '#' or '?'  unrevealed
  'F'         flagged
  '.' or '0'  revealed, no adjacent mines
  '1'..'8'    revealed clue

This is the same layout MinesweeperBoard.__str__ produces.
"""
import logging
from typing import List

from ..solver.game_state import MinesweeperBoard

logger = logging.getLogger(__name__)

_SYMBOLS = {
    '#': 'unrevealed',
    '?': 'unrevealed',
    'F': 'flag',
    'f': 'flag',
    '.': 'empty',
}
_SYMBOLS.update({str(n): str(n) for n in range(0, 9)})


class BoardParseError(ValueError):
    """Raised when a text snapshot cannot be turned into a board"""


def _tokenize(line: str) -> List[str]:
    tokens = line.split()
    if len(tokens) == 1:
        return list(tokens[0])
    return tokens


def parse_board_text(text: str, total_mines: int) -> MinesweeperBoard:
    """
    Build a board from a text snapshot

    Args:
        text: Snapshot, blank lines and lines starting with ';' are ignored
        total_mines: Total mines on the board, flags included

    Raises:
        BoardParseError: On ragged rows, unknown symbols or an empty snapshot
    """
    rows = [_tokenize(line) for line in text.splitlines()
            if line.strip() and not line.lstrip().startswith(';')]
    if not rows:
        raise BoardParseError("Board snapshot is empty")

    cols = len(rows[0])
    for index, tokens in enumerate(rows):
        if len(tokens) != cols:
            raise BoardParseError(f"Row {index} has {len(tokens)} cells, expected {cols}")

    board = MinesweeperBoard(len(rows), cols, total_mines)
    for r, tokens in enumerate(rows):
        for c, token in enumerate(tokens):
            symbol = _SYMBOLS.get(token)
            if symbol is None:
                raise BoardParseError(f"Unknown symbol {token!r} at row {r}, column {c}")
            board.update_cell(r, c, symbol)

    logger.debug(f"Parsed {board.rows}x{board.cols} board with {board.flagged_count} flags")
    return board
