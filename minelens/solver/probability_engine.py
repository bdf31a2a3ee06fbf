"""
Mine Probability Engine for learning mode

This module estimates, for every unrevealed and unflagged cell, the
probability that it hides a mine:
1. Constraint extraction from revealed clues
2. Deductive propagation with subset derivation
3. Partitioning into independent components
4. Exact enumeration of small components
5. Density and global-budget approximations for everything else

Components are treated as independent of each other; the shared global mine
budget only enters through the non-frontier estimate.
"""

from typing import Dict, List, Set, Optional, Any
from dataclasses import dataclass, field
import logging
import numpy as np

from .constraints import extract_constraints
from .csp_solver import CSPSolver
from .game_state import CellKey, MinesweeperBoard
from .partition import Component, partition_constraints
from .propagation import DeductivePropagator
from ..config import EngineConfig


ProbabilityMap = Dict[CellKey, float]


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


@dataclass
class ProbabilityAnalysis:
    """Probability map plus the diagnostics gathered while computing it"""
    probabilities: ProbabilityMap
    known_safe: Set[CellKey] = field(default_factory=set)
    known_mines: Set[CellKey] = field(default_factory=set)
    frontier: Set[CellKey] = field(default_factory=set)
    exact_components: int = 0
    approximated_components: int = 0
    iterations: int = 0

    @property
    def components(self) -> int:
        return self.exact_components + self.approximated_components

    def summary(self) -> Dict[str, Any]:
        return {
            'cells': len(self.probabilities),
            'known_safe': len(self.known_safe),
            'known_mines': len(self.known_mines),
            'frontier': len(self.frontier),
            'exact_components': self.exact_components,
            'approximated_components': self.approximated_components,
            'iterations': self.iterations,
        }


class ProbabilityEngine:
    """
    Per-cell mine probability estimation

    Features:
    - Exact results for forced cells and small components
    - Bounded running time through configurable limits
    - Never raises for board content; degrades to approximations instead
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = (config or EngineConfig()).validate()
        self.propagator = DeductivePropagator(self.config)
        self.csp_solver = CSPSolver(self.config)
        self.logger = logging.getLogger(__name__)

    def calculate_probabilities(self, board: MinesweeperBoard, mines_remaining: int) -> ProbabilityMap:
        """
        Calculate mine probabilities for all unrevealed, unflagged cells

        Args:
            board: Board to read; it is never modified
            mines_remaining: Mines not yet accounted for by flags

        Returns:
            Mapping from cell key to a probability in [0, 1]
        """
        return self.analyze(board, mines_remaining).probabilities

    def analyze(self, board: MinesweeperBoard, mines_remaining: int) -> ProbabilityAnalysis:
        """Run the full pipeline and keep its diagnostics"""
        unrevealed, constraints = extract_constraints(board)
        propagation = self.propagator.propagate(constraints)

        analysis = ProbabilityAnalysis(
            probabilities={},
            known_safe=propagation.known_safe,
            known_mines=propagation.known_mines,
            iterations=propagation.iterations,
        )
        result = analysis.probabilities

        # Record definitive results
        for key in propagation.known_safe:
            result[key] = 0.0
        for key in propagation.known_mines:
            result[key] = 1.0

        active = propagation.active_constraints
        for constraint in active:
            analysis.frontier.update(constraint.cells)

        for component in partition_constraints(active):
            solution = self.csp_solver.solve_component(component)
            if solution is not None:
                result.update(solution.probabilities())
                analysis.exact_components += 1
            else:
                self.logger.debug(
                    f"Approximating {len(component)}-cell component "
                    f"({len(component.constraints)} constraints)")
                result.update(self._average_constraint_density(component))
                analysis.approximated_components += 1

        self._fill_unconstrained(analysis, unrevealed, mines_remaining)

        self.logger.info(
            f"Probabilities for {len(result)} cells: {len(analysis.known_safe)} safe, "
            f"{len(analysis.known_mines)} mines, {analysis.exact_components} exact / "
            f"{analysis.approximated_components} approximated components")
        return analysis

    def _average_constraint_density(self, component: Component) -> ProbabilityMap:
        """Unweighted mean of mines/len(cells) over the constraints touching each cell"""
        sums: Dict[CellKey, float] = {}
        counts: Dict[CellKey, int] = {}

        for constraint in component.constraints:
            local = constraint.mines / len(constraint.cells)
            for key in constraint.cells:
                sums[key] = sums.get(key, 0.0) + local
                counts[key] = counts.get(key, 0) + 1

        return {key: _clamp(sums[key] / counts[key]) for key in sums}

    def _fill_unconstrained(self, analysis: ProbabilityAnalysis, unrevealed: Set[CellKey],
                            mines_remaining: int) -> None:
        """Spread the leftover mine budget over cells no constraint reaches"""
        result = analysis.probabilities
        mines_left = max(0, mines_remaining - len(analysis.known_mines))

        expected_frontier_mines = sum(result.get(key, 0.0) for key in sorted(analysis.frontier))

        non_frontier = [key for key in unrevealed
                        if key not in analysis.frontier and key not in result]
        if non_frontier:
            share = max(0.0, mines_left - expected_frontier_mines) / len(non_frontier)
            for key in non_frontier:
                result[key] = _clamp(share)

        # Fill any remaining cells with base probability
        base = mines_left / len(unrevealed) if unrevealed else 0.0
        for key in unrevealed:
            if key not in result:
                result[key] = _clamp(base)

    def get_definitive_cells(self, board: MinesweeperBoard,
                             mines_remaining: int) -> Dict[str, List[CellKey]]:
        """
        Cells whose probability is exactly 0 or exactly 1

        Returns:
            Dictionary with sorted 'safe' and 'mines' lists of (row, col)
        """
        probabilities = self.calculate_probabilities(board, mines_remaining)
        return split_definitive(probabilities)


def split_definitive(probabilities: ProbabilityMap) -> Dict[str, List[CellKey]]:
    safe = sorted(key for key, p in probabilities.items() if p == 0.0)
    mines = sorted(key for key, p in probabilities.items() if p == 1.0)
    return {'safe': safe, 'mines': mines}


def probability_grid(board: MinesweeperBoard, probabilities: ProbabilityMap) -> np.ndarray:
    """Probability map as a rows x cols array, NaN where the map has no entry"""
    grid = np.full((board.rows, board.cols), np.nan)
    for (row, col), probability in probabilities.items():
        grid[row, col] = probability
    return grid


def calculate_probabilities(board: MinesweeperBoard, mines_remaining: int,
                            config: Optional[EngineConfig] = None) -> ProbabilityMap:
    """Module-level shortcut for ProbabilityEngine.calculate_probabilities"""
    return ProbabilityEngine(config).calculate_probabilities(board, mines_remaining)


def get_definitive_cells(board: MinesweeperBoard, mines_remaining: int,
                         config: Optional[EngineConfig] = None) -> Dict[str, List[CellKey]]:
    """Module-level shortcut for ProbabilityEngine.get_definitive_cells"""
    return ProbabilityEngine(config).get_definitive_cells(board, mines_remaining)
