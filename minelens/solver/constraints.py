"""
Constraint extraction for the probability engine

Each revealed clue with unresolved neighbours becomes one linear constraint:
"exactly `mines` of these unknown cells are mines".
"""

from typing import AbstractSet, FrozenSet, List, Optional, Set, Tuple
from dataclasses import dataclass
import logging

from .game_state import CellKey, MinesweeperBoard

logger = logging.getLogger(__name__)


@dataclass
class Constraint:
    """Unknown neighbours of one clue and how many of them hold mines"""
    cells: FrozenSet[CellKey]
    mines: int
    source_cell: Optional[CellKey] = None  # None for derived constraints

    @property
    def derived(self) -> bool:
        return self.source_cell is None

    @property
    def key(self) -> Tuple[FrozenSet[CellKey], int]:
        """Structural identity used to deduplicate derived constraints"""
        return (self.cells, self.mines)

    def is_strict_subset_of(self, other: 'Constraint') -> bool:
        return self.cells < other.cells

    def narrow(self, known_safe: AbstractSet[CellKey], known_mines: AbstractSet[CellKey]) -> None:
        """Drop resolved cells in place; mines is clamped into [0, len(cells)]"""
        remaining = []
        mines = self.mines
        for cell in self.cells:
            if cell in known_safe:
                continue
            if cell in known_mines:
                mines -= 1
                continue
            remaining.append(cell)

        self.cells = frozenset(remaining)
        self.mines = min(max(0, mines), len(self.cells))

    def is_satisfied_by(self, mine_cells: AbstractSet[CellKey]) -> bool:
        return sum(1 for cell in self.cells if cell in mine_cells) == self.mines


def extract_constraints(board: MinesweeperBoard) -> Tuple[Set[CellKey], List[Constraint]]:
    """
    Scan the board once for unknown cells and clue constraints

    Returns:
        (unrevealed, constraints) where unrevealed holds every unrevealed,
        unflagged cell key and constraints holds one entry per revealed clue
        that still has unknown neighbours.
    """
    unrevealed: Set[CellKey] = set()
    constraints: List[Constraint] = []

    for cell in board.cells():
        if cell.is_unrevealed:
            unrevealed.add(board.cell_key(cell.row, cell.col))

        if not (cell.is_revealed and cell.number > 0):
            continue

        unknown = []
        flagged_neighbors = 0
        for neighbor in board.get_neighbors(cell.row, cell.col):
            if neighbor.is_unrevealed:
                unknown.append(board.cell_key(neighbor.row, neighbor.col))
            elif neighbor.is_flagged:
                flagged_neighbors += 1

        # Calculate remaining mines needed
        mines_needed = cell.number - flagged_neighbors

        if not unknown:
            continue
        if mines_needed < 0:
            logger.debug(
                f"Discarding over-flagged clue at ({cell.row}, {cell.col}): "
                f"{flagged_neighbors} flags around a {cell.number}")
            continue

        constraints.append(Constraint(
            cells=frozenset(unknown),
            mines=mines_needed,
            source_cell=board.cell_key(cell.row, cell.col)
        ))

    logger.debug(f"Extracted {len(constraints)} constraints over {len(unrevealed)} unknown cells")
    return unrevealed, constraints
