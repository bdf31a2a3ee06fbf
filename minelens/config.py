"""
Tuning constants and difficulty presets

The engine limits are tuned for interactive responsiveness rather than
derived from the problem; they bound running time, not correctness.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass
class EngineConfig:
    """Limits applied by the probability engine"""
    max_iterations: int = 100           # Propagation passes before giving up refinement
    max_subset_candidates: int = 50     # Constraints tried as the smaller side per pass
    max_exact_cells: int = 20           # Largest component enumerated exactly
    max_combinations: int = 2 ** 20     # Assignments examined per component
    max_solutions: int = 10000          # Accepted solutions retained per component
    enumeration_chunk: int = 65536      # Bitmasks checked per numpy batch

    def validate(self) -> 'EngineConfig':
        for name, value in vars(self).items():
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        return self


@dataclass(frozen=True)
class Difficulty:
    """Board dimensions and mine count for a game"""
    rows: int
    cols: int
    mines: int

    def is_valid(self) -> bool:
        return (
            5 <= self.rows <= 50
            and 5 <= self.cols <= 50
            and 0 < self.mines < self.rows * self.cols
        )


DIFFICULTIES: Dict[str, Difficulty] = {
    'easy': Difficulty(rows=9, cols=9, mines=10),
    'medium': Difficulty(rows=16, cols=16, mines=40),
    'custom': Difficulty(rows=16, cols=16, mines=99),
}


def get_difficulty(name: str) -> Optional[Difficulty]:
    """Get difficulty preset by name"""
    return DIFFICULTIES.get(name)


def get_all_difficulties() -> List[str]:
    return list(DIFFICULTIES)
