"""
Deductive constraint propagation

Repeatedly narrows constraints against what is already known, applies the
two trivial rules (all-safe / all-mine) and derives new constraints from
strict subset pairs, until nothing changes or the pass limit is reached.
"""

from typing import Iterable, List, Set
from dataclasses import dataclass, field
import logging

from .constraints import Constraint
from .game_state import CellKey
from ..config import EngineConfig


@dataclass
class PropagationResult:
    """Outcome of one propagation run"""
    constraints: List[Constraint]
    known_safe: Set[CellKey] = field(default_factory=set)
    known_mines: Set[CellKey] = field(default_factory=set)
    iterations: int = 0
    hit_iteration_cap: bool = False

    @property
    def active_constraints(self) -> List[Constraint]:
        return [c for c in self.constraints if c.cells]


class DeductivePropagator:
    """
    Fixpoint solver for forced-safe and forced-mine cells

    The known sets only ever grow, and a cell is never placed in both; a
    deduction that contradicts an earlier one is ignored.
    """

    def __init__(self, config: EngineConfig = None):
        self.config = config or EngineConfig()
        self.logger = logging.getLogger(__name__)

    def propagate(self, constraints: List[Constraint]) -> PropagationResult:
        """
        Run propagation over the given constraints

        The list is extended with derived constraints and its members are
        narrowed in place.
        """
        result = PropagationResult(constraints=constraints)

        while result.iterations < self.config.max_iterations:
            result.iterations += 1

            changed = self._apply_basic_deductions(result)
            if self._derive_from_subsets(result):
                changed = True

            if not changed:
                break
        else:
            result.hit_iteration_cap = True
            self.logger.warning(
                f"Propagation stopped at the {self.config.max_iterations} pass limit "
                f"with {len(constraints)} constraints")

        # Leave no resolved cells behind for the partitioner and solver
        for constraint in constraints:
            constraint.narrow(result.known_safe, result.known_mines)

        self.logger.debug(
            f"Propagation: {result.iterations} passes, {len(result.known_safe)} safe, "
            f"{len(result.known_mines)} mines, {len(result.active_constraints)} active constraints")
        return result

    def _mark(self, cells: Iterable[CellKey], target: Set[CellKey], other: Set[CellKey]) -> bool:
        changed = False
        for cell in cells:
            if cell not in target and cell not in other:
                target.add(cell)
                changed = True
        return changed

    def _apply_basic_deductions(self, result: PropagationResult) -> bool:
        changed = False

        for constraint in result.constraints:
            constraint.narrow(result.known_safe, result.known_mines)
            if not constraint.cells:
                continue

            if constraint.mines == 0:
                if self._mark(constraint.cells, result.known_safe, result.known_mines):
                    changed = True
            elif constraint.mines == len(constraint.cells):
                if self._mark(constraint.cells, result.known_mines, result.known_safe):
                    changed = True

        return changed

    def _derive_from_subsets(self, result: PropagationResult) -> bool:
        """Apply the subset-difference rule across active constraint pairs"""
        changed = False
        active = result.active_constraints
        seen = {c.key for c in result.constraints}
        derived: List[Constraint] = []

        for smaller in active[:self.config.max_subset_candidates]:
            for larger in active:
                if smaller is larger or not smaller.is_strict_subset_of(larger):
                    continue

                difference = larger.cells - smaller.cells
                diff_mines = larger.mines - smaller.mines
                if diff_mines < 0:
                    continue

                if diff_mines == 0:
                    if self._mark(difference, result.known_safe, result.known_mines):
                        changed = True
                elif diff_mines == len(difference):
                    if self._mark(difference, result.known_mines, result.known_safe):
                        changed = True
                else:
                    candidate = Constraint(cells=difference, mines=diff_mines)
                    if candidate.key not in seen:
                        seen.add(candidate.key)
                        derived.append(candidate)

        if derived:
            result.constraints.extend(derived)
            changed = True
            self.logger.debug(f"Derived {len(derived)} subset constraints")

        return changed
