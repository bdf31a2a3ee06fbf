"""
Exact enumeration solver for small constraint components

Every mine/no-mine assignment of a component's cells is checked against the
component's constraints; per-cell probabilities are the fraction of accepted
assignments that place a mine on the cell. Assignments are generated as
bitmasks in ascending order and checked in numpy batches against the
constraint incidence matrix.
"""

from typing import Dict, Optional, Tuple
from dataclasses import dataclass
import logging
import numpy as np

from .game_state import CellKey
from .partition import Component
from ..config import EngineConfig


@dataclass
class ComponentSolution:
    """Accepted-solution tally for one component"""
    cells: Tuple[CellKey, ...]
    solution_count: int
    mine_counts: np.ndarray  # Solutions with a mine on cells[i]

    def probabilities(self) -> Dict[CellKey, float]:
        if self.solution_count == 0:
            return {cell: 0.5 for cell in self.cells}
        return {
            cell: int(count) / self.solution_count
            for cell, count in zip(self.cells, self.mine_counts)
        }


class CSPSolver:
    """
    Brute-force solver for components small enough to enumerate

    Features:
    - Vectorised constraint checks over batches of assignments
    - Solution cap with early exit
    - Neutral 0.5 result for components with no consistent assignment
    """

    def __init__(self, config: EngineConfig = None):
        self.config = config or EngineConfig()
        self.logger = logging.getLogger(__name__)

    def can_solve(self, component: Component) -> bool:
        """True if the component is small enough for exact enumeration"""
        n = len(component)
        return 0 < n <= self.config.max_exact_cells and 2 ** n <= self.config.max_combinations

    def build_matrix(self, component: Component) -> Tuple[Tuple[CellKey, ...], np.ndarray, np.ndarray]:
        """Constraint incidence matrix (constraints x cells) and mine targets"""
        cells = component.cells
        index = {cell: i for i, cell in enumerate(cells)}

        matrix = np.zeros((len(component.constraints), len(cells)), dtype=np.int32)
        for row, constraint in enumerate(component.constraints):
            for cell in constraint.cells:
                matrix[row, index[cell]] = 1

        targets = np.array([c.mines for c in component.constraints], dtype=np.int32)
        return cells, matrix, targets

    def solve_component(self, component: Component) -> Optional[ComponentSolution]:
        """
        Enumerate all assignments of a component

        Returns:
            ComponentSolution, or None if the component exceeds the
            enumeration limits and must be approximated instead.
        """
        if not self.can_solve(component):
            return None

        cells, matrix, targets = self.build_matrix(component)
        n = len(cells)
        total = 1 << n
        bit_positions = np.arange(n, dtype=np.int64)

        mine_counts = np.zeros(n, dtype=np.int64)
        found = 0

        for start in range(0, total, self.config.enumeration_chunk):
            masks = np.arange(start, min(start + self.config.enumeration_chunk, total), dtype=np.int64)
            assignments = ((masks[:, None] >> bit_positions) & 1).astype(np.int32)

            satisfied = np.all(assignments @ matrix.T == targets, axis=1)
            accepted = assignments[satisfied]

            remaining = self.config.max_solutions - found
            if len(accepted) > remaining:
                accepted = accepted[:remaining]

            mine_counts += accepted.sum(axis=0)
            found += len(accepted)

            if found >= self.config.max_solutions:
                self.logger.debug(
                    f"Solution cap of {self.config.max_solutions} reached after "
                    f"{min(start + self.config.enumeration_chunk, total)} of {total} assignments")
                break

        if found == 0:
            self.logger.warning(
                f"No consistent assignment for a {n}-cell component with "
                f"{len(component.constraints)} constraints; using 0.5")

        return ComponentSolution(cells=cells, solution_count=found, mine_counts=mine_counts)
