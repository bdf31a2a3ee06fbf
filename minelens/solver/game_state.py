"""
Minesweeper Board Representation

This module provides the board data structures the probability engine reads
from: cell state, clue numbers, flags and neighbour enumeration. The engine
only ever reads a board; mutators exist for loaders and the game session.
"""

from enum import Enum
from typing import Iterator, Set, Tuple, List, Optional, Dict, Any
from dataclasses import dataclass
import numpy as np


CellKey = Tuple[int, int]


class CellState(Enum):
    """Represents the visible state of a minesweeper cell"""
    UNREVEALED = "unrevealed"
    REVEALED = "revealed"
    FLAGGED = "flagged"


class CellContent(Enum):
    """Represents the content of a minesweeper cell"""
    EMPTY = 0
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    MINE = -1
    UNKNOWN = -2


@dataclass
class Cell:
    """Represents a single minesweeper cell"""
    row: int
    col: int
    state: CellState = CellState.UNREVEALED
    content: CellContent = CellContent.UNKNOWN
    has_mine: bool = False  # Ground truth, never read by the engine

    @property
    def is_revealed(self) -> bool:
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        return self.state == CellState.FLAGGED

    @property
    def is_unrevealed(self) -> bool:
        return self.state == CellState.UNREVEALED

    @property
    def is_numbered(self) -> bool:
        return self.content.value > 0 and self.content.value <= 8

    @property
    def number(self) -> int:
        """Get the number on this cell (0 if empty, -1 if not a number)"""
        if self.content.value >= 0 and self.content.value <= 8:
            return self.content.value
        return -1


_SYMBOL_CONTENT = {str(n): CellContent(n) for n in range(0, 9)}


class MinesweeperBoard:
    """
    Minesweeper board representation

    Features:
    - Precomputed 8-neighbourhoods
    - Stable (row, col) cell keys shared with the probability engine
    - Snapshot copies so analysis never aliases a live game board
    """

    def __init__(self, rows: int, cols: int, total_mines: int):
        if rows <= 0 or cols <= 0:
            raise ValueError("rows and cols must be positive")
        if total_mines < 0:
            raise ValueError("total_mines must be non-negative")

        self.rows = rows
        self.cols = cols
        self.total_mines = total_mines

        # Initialize board with unrevealed cells
        self.board: List[List[Cell]] = []
        for r in range(rows):
            row = []
            for c in range(cols):
                row.append(Cell(r, c))
            self.board.append(row)

        # Game state tracking
        self.revealed_count = 0
        self.flagged_count = 0

        # Precompute neighbor mappings for efficiency
        self._neighbor_cache: Dict[CellKey, List[CellKey]] = {}
        self._precompute_neighbors()

    def _precompute_neighbors(self) -> None:
        """Precompute neighbor coordinates for all cells"""
        directions = [(-1, -1), (-1, 0), (-1, 1), (0, -1),
                      (0, 1), (1, -1), (1, 0), (1, 1)]

        for r in range(self.rows):
            for c in range(self.cols):
                neighbors = []
                for dr, dc in directions:
                    nr, nc = r + dr, c + dc
                    if 0 <= nr < self.rows and 0 <= nc < self.cols:
                        neighbors.append((nr, nc))
                self._neighbor_cache[(r, c)] = neighbors

    @property
    def remaining_mines(self) -> int:
        """Mines not yet accounted for by flags (never negative)"""
        return max(0, self.total_mines - self.flagged_count)

    @staticmethod
    def cell_key(row: int, col: int) -> CellKey:
        """Stable identifier for a coordinate, shared by constraints and probability maps"""
        return (row, col)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        """Get cell at specified coordinates"""
        if self.in_bounds(row, col):
            return self.board[row][col]
        return None

    def _require_cell(self, row: int, col: int) -> Cell:
        cell = self.get_cell(row, col)
        if cell is None:
            raise ValueError(f"Cell ({row}, {col}) is outside the {self.rows}x{self.cols} board")
        return cell

    def get_neighbors(self, row: int, col: int) -> List[Cell]:
        """Get all neighboring cells"""
        neighbors = []
        for nr, nc in self._neighbor_cache.get((row, col), []):
            neighbors.append(self.board[nr][nc])
        return neighbors

    def get_neighbor_coords(self, row: int, col: int) -> List[CellKey]:
        """Get coordinates of all neighboring cells"""
        return self._neighbor_cache.get((row, col), [])

    def cells(self) -> Iterator[Cell]:
        """Iterate over all cells in row-major order"""
        for row in self.board:
            yield from row

    def unknown_cells(self) -> Set[CellKey]:
        """Keys of all unrevealed, unflagged cells"""
        return {self.cell_key(cell.row, cell.col) for cell in self.cells() if cell.is_unrevealed}

    # ------------------------------------------------------------------
    # Mutators (used by loaders and the game session, never the engine)
    # ------------------------------------------------------------------

    def update_cell(self, row: int, col: int, symbol: str) -> bool:
        """
        Update a cell from a board-snapshot symbol

        Args:
            row, col: Cell coordinates
            symbol: 'flag', 'empty', '0'-'8' or 'unrevealed'

        Returns:
            True if cell was successfully updated
        """
        cell = self.get_cell(row, col)
        if cell is None:
            return False

        if symbol == 'flag':
            self.set_flag(row, col, True)
        elif symbol == 'empty':
            self.reveal_number(row, col, 0)
        elif symbol in _SYMBOL_CONTENT:
            self.reveal_number(row, col, int(symbol))
        else:  # Unknown or unrevealed
            self._reset_cell(cell)

        return True

    def _reset_cell(self, cell: Cell) -> None:
        if cell.is_revealed:
            self.revealed_count -= 1
        elif cell.is_flagged:
            self.flagged_count -= 1
        cell.state = CellState.UNREVEALED
        cell.content = CellContent.UNKNOWN

    def reveal_number(self, row: int, col: int, number: int) -> Cell:
        """Mark a cell as revealed showing the given adjacent-mine count"""
        if not 0 <= number <= 8:
            raise ValueError(f"Clue number must be between 0 and 8, got {number}")
        cell = self._require_cell(row, col)
        if not cell.is_revealed:
            self._reset_cell(cell)
            cell.state = CellState.REVEALED
            self.revealed_count += 1
        cell.content = CellContent(number)
        return cell

    def set_flag(self, row: int, col: int, flagged: bool = True) -> Cell:
        """Place or clear a flag on an unrevealed cell"""
        cell = self._require_cell(row, col)
        if cell.is_revealed:
            raise ValueError(f"Cannot flag revealed cell ({row}, {col})")
        if flagged and not cell.is_flagged:
            cell.state = CellState.FLAGGED
            self.flagged_count += 1
        elif not flagged and cell.is_flagged:
            cell.state = CellState.UNREVEALED
            self.flagged_count -= 1
        return cell

    def place_mine(self, row: int, col: int) -> None:
        self._require_cell(row, col).has_mine = True

    def calculate_adjacent_mines(self) -> None:
        """Store the true adjacent-mine count of every non-mine cell as its content"""
        for cell in self.cells():
            if cell.has_mine:
                cell.content = CellContent.MINE
            else:
                count = sum(1 for n in self.get_neighbors(cell.row, cell.col) if n.has_mine)
                cell.content = CellContent(count)

    def copy(self) -> 'MinesweeperBoard':
        """Detached snapshot sharing no cell objects with this board"""
        snapshot = MinesweeperBoard(self.rows, self.cols, self.total_mines)
        for cell in self.cells():
            snapshot.board[cell.row][cell.col] = Cell(
                cell.row, cell.col, cell.state, cell.content, cell.has_mine)
        snapshot.revealed_count = self.revealed_count
        snapshot.flagged_count = self.flagged_count
        return snapshot

    def get_game_statistics(self) -> Dict[str, Any]:
        """Get current board statistics"""
        total_cells = self.rows * self.cols
        unrevealed_cells = total_cells - self.revealed_count - self.flagged_count
        safe_cells = total_cells - self.total_mines

        return {
            'total_cells': total_cells,
            'revealed_cells': self.revealed_count,
            'flagged_cells': self.flagged_count,
            'unrevealed_cells': unrevealed_cells,
            'total_mines': self.total_mines,
            'remaining_mines': self.remaining_mines,
            'completion_percentage': (self.revealed_count / safe_cells) * 100 if safe_cells else 100.0
        }

    def to_array(self, property_name: str = 'content') -> np.ndarray:
        """
        Convert board to numpy array for analysis

        Args:
            property_name: Cell property to extract ('content', 'revealed', 'flagged')
        """
        array = np.zeros((self.rows, self.cols), dtype=float)

        for cell in self.cells():
            if property_name == 'content':
                array[cell.row, cell.col] = cell.content.value
            elif property_name == 'revealed':
                array[cell.row, cell.col] = float(cell.is_revealed)
            elif property_name == 'flagged':
                array[cell.row, cell.col] = float(cell.is_flagged)

        return array

    def __str__(self) -> str:
        """String representation of the board"""
        lines = []
        for row in self.board:
            line = []
            for cell in row:
                if cell.is_flagged:
                    line.append('F')
                elif cell.is_revealed:
                    if cell.content == CellContent.EMPTY:
                        line.append('.')
                    elif cell.is_numbered:
                        line.append(str(cell.number))
                    else:
                        line.append('*')
                else:
                    line.append('#')
            lines.append(' '.join(line))
        return '\n'.join(lines)
