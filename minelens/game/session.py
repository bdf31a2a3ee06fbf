"""Playable minesweeper session with first-click safety and learning mode."""

import logging
import random
from collections import deque
from enum import Enum
from typing import Deque, List, Optional, Set

from ..config import Difficulty, EngineConfig
from ..solver.game_state import CellContent, CellKey, MinesweeperBoard
from ..solver.probability_engine import ProbabilityEngine, ProbabilityMap

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


def generate_mines(board: MinesweeperBoard, first_row: int, first_col: int,
                   rng: Optional[random.Random] = None) -> Set[CellKey]:
    """
    Place the board's mines uniformly, keeping the first click and its neighbours clear

    When the safe zone leaves fewer cells than requested mines, every
    remaining cell gets a mine and the board's total is lowered to match.

    Returns:
        The set of mined cell keys.
    """
    rng = rng or random.Random()

    # Safe zone = first click + its neighbors
    forbidden = set(board.get_neighbor_coords(first_row, first_col))
    forbidden.add((first_row, first_col))

    eligible = [(r, c) for r in range(board.rows) for c in range(board.cols)
                if (r, c) not in forbidden]
    count = min(board.total_mines, len(eligible))
    if count < board.total_mines:
        logger.warning(
            f"Only {count} of {board.total_mines} mines fit outside the first-click zone")
        board.total_mines = count

    mines = set(rng.sample(eligible, count))
    for row, col in mines:
        board.place_mine(row, col)

    board.calculate_adjacent_mines()
    return mines


class GameSession:
    """
    One game: reveal, flag and chord moves on a live board

    The probability engine is only ever handed a snapshot of the board.
    """

    def __init__(self, difficulty: Difficulty, learning_mode: bool = False,
                 seed: Optional[int] = None, engine_config: Optional[EngineConfig] = None):
        if not difficulty.is_valid():
            raise ValueError(f"Invalid difficulty: {difficulty}")

        self.difficulty = difficulty
        self.board = MinesweeperBoard(difficulty.rows, difficulty.cols, difficulty.mines)
        self.status = GameStatus.PLAYING
        self.learning_mode = learning_mode
        self.mines_generated = False
        self.cells_revealed = 0

        self._rng = random.Random(seed)
        self._engine = ProbabilityEngine(engine_config)
        self.logger = logging.getLogger(__name__)

    @property
    def mines_remaining(self) -> int:
        """Mines not yet flagged; negative when the player over-flags"""
        return self.board.total_mines - self.board.flagged_count

    def reveal(self, row: int, col: int) -> bool:
        """
        Reveal a cell, cascading through empty regions

        Returns:
            True if at least one safe cell was revealed.
        """
        if self.status != GameStatus.PLAYING:
            return False

        cell = self.board.get_cell(row, col)
        if cell is None or not cell.is_unrevealed:
            return False

        if not self.mines_generated:
            generate_mines(self.board, row, col, self._rng)
            self.mines_generated = True
            self.logger.debug(f"Mines generated around first click ({row}, {col})")

        if cell.has_mine:
            self.board.reveal_number(row, col, 0)
            cell.content = CellContent.MINE
            self._end_game(GameStatus.LOST)
            return False

        revealed = self._flood_fill(row, col)
        self.cells_revealed += len(revealed)

        if self.cells_revealed == self.board.rows * self.board.cols - self.board.total_mines:
            self._end_game(GameStatus.WON)

        return bool(revealed)

    def _flood_fill(self, row: int, col: int) -> List[CellKey]:
        frontier: Deque[CellKey] = deque([(row, col)])
        visited = {(row, col)}
        revealed: List[CellKey] = []

        while frontier:
            r, c = frontier.popleft()
            cell = self.board.get_cell(r, c)
            if not cell.is_unrevealed or cell.has_mine:
                continue

            number = cell.number
            self.board.reveal_number(r, c, number)
            revealed.append((r, c))

            if number == 0:
                for neighbor in self.board.get_neighbor_coords(r, c):
                    if neighbor not in visited:
                        visited.add(neighbor)
                        frontier.append(neighbor)

        return revealed

    def toggle_flag(self, row: int, col: int) -> bool:
        if self.status != GameStatus.PLAYING:
            return False

        cell = self.board.get_cell(row, col)
        if cell is None or cell.is_revealed:
            return False

        self.board.set_flag(row, col, not cell.is_flagged)
        return True

    def chord(self, row: int, col: int) -> bool:
        """Reveal all unflagged neighbours once a clue has as many flags as its number"""
        if self.status != GameStatus.PLAYING:
            return False

        cell = self.board.get_cell(row, col)
        if cell is None or not cell.is_revealed or cell.number <= 0:
            return False

        neighbors = self.board.get_neighbors(row, col)
        if sum(1 for n in neighbors if n.is_flagged) != cell.number:
            return False

        revealed_any = False
        for neighbor in neighbors:
            if neighbor.is_unrevealed and self.reveal(neighbor.row, neighbor.col):
                revealed_any = True
        return revealed_any

    def probabilities(self) -> ProbabilityMap:
        """Learning-mode probability map, or {} when learning mode is off"""
        if not self.learning_mode or self.status != GameStatus.PLAYING:
            return {}
        return self._engine.calculate_probabilities(self.board.copy(), max(0, self.mines_remaining))

    def _end_game(self, status: GameStatus) -> None:
        self.status = status
        self.logger.info(f"Game {status.value} after {self.cells_revealed} revealed cells")
