"""
Independent component partitioning

Constraints that share an unknown cell are grouped together with a
union-find structure so each group can be enumerated on its own.
"""

from typing import Dict, List, Tuple
from dataclasses import dataclass

from .constraints import Constraint
from .game_state import CellKey


class DisjointSet:
    """Union-find over integer indices with path compression"""

    def __init__(self, size: int):
        self.parent = list(range(size))

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, x: int, y: int) -> None:
        px, py = self.find(x), self.find(y)
        if px != py:
            self.parent[px] = py


@dataclass
class Component:
    """A maximal group of constraints connected through shared cells"""
    constraints: List[Constraint]

    @property
    def cells(self) -> Tuple[CellKey, ...]:
        cells = set()
        for constraint in self.constraints:
            cells.update(constraint.cells)
        return tuple(sorted(cells))

    def __len__(self) -> int:
        return len(self.cells)


def partition_constraints(constraints: List[Constraint]) -> List[Component]:
    """
    Group non-empty constraints into independent components

    Components come back in order of their first constraint; constraints
    keep their relative order inside a component.
    """
    active = [c for c in constraints if c.cells]
    if not active:
        return []

    # Build cell to constraint mapping
    cell_to_constraints: Dict[CellKey, List[int]] = {}
    for idx, constraint in enumerate(active):
        for cell in constraint.cells:
            cell_to_constraints.setdefault(cell, []).append(idx)

    groups = DisjointSet(len(active))
    for indices in cell_to_constraints.values():
        for other in indices[1:]:
            groups.union(indices[0], other)

    # Group constraints by root
    by_root: Dict[int, List[Constraint]] = {}
    for idx, constraint in enumerate(active):
        by_root.setdefault(groups.find(idx), []).append(constraint)

    return [Component(members) for members in by_root.values()]
