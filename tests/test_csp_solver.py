"""Tests for exact component enumeration."""

import pytest

from minelens.config import EngineConfig
from minelens.solver.constraints import Constraint
from minelens.solver.csp_solver import CSPSolver
from minelens.solver.partition import Component

A, B, C, D = (0, 0), (0, 1), (0, 2), (0, 3)


def component(*constraints):
    return Component([Constraint(frozenset(cells), mines) for cells, mines in constraints])


class TestCSPSolver:
    def test_single_constraint_is_uniform(self):
        solution = CSPSolver().solve_component(component(({A, B, C}, 1)))
        assert solution.solution_count == 3
        probabilities = solution.probabilities()
        for cell in (A, B, C):
            assert probabilities[cell] == pytest.approx(1 / 3)

    def test_overlapping_constraints(self):
        # A + B = 1 and B + C = 1: solutions {B} and {A, C}
        solution = CSPSolver().solve_component(component(({A, B}, 1), ({B, C}, 1)))
        probabilities = solution.probabilities()
        assert solution.solution_count == 2
        assert probabilities[A] == 0.5
        assert probabilities[B] == 0.5
        assert probabilities[C] == 0.5

    def test_forced_cells_are_exact(self):
        solution = CSPSolver().solve_component(component(({A, B}, 2), ({B, C}, 1)))
        probabilities = solution.probabilities()
        assert probabilities[A] == 1.0
        assert probabilities[B] == 1.0
        assert probabilities[C] == 0.0

    def test_inconsistent_component_is_neutral(self):
        solution = CSPSolver().solve_component(component(({A, B}, 1), ({A, B}, 2)))
        assert solution.solution_count == 0
        assert solution.probabilities() == {A: 0.5, B: 0.5}

    def test_solution_cap_stops_enumeration(self):
        solver = CSPSolver(EngineConfig(max_solutions=1))
        solution = solver.solve_component(component(({A, B}, 1)))
        assert solution.solution_count == 1
        # Bitmasks are tried in ascending order, so the first cell wins
        assert solution.probabilities() == {A: 1.0, B: 0.0}

    def test_chunk_size_does_not_change_result(self):
        comp = component(({A, B, C}, 1), ({B, C, D}, 2))
        default = CSPSolver().solve_component(comp).probabilities()
        chunked = CSPSolver(EngineConfig(enumeration_chunk=3)).solve_component(comp).probabilities()
        assert chunked == default

    def test_oversized_component_is_declined(self):
        solver = CSPSolver(EngineConfig(max_exact_cells=3))
        comp = component(({A, B, C, D}, 2))
        assert not solver.can_solve(comp)
        assert solver.solve_component(comp) is None

    def test_combination_cap_declines_component(self):
        solver = CSPSolver(EngineConfig(max_combinations=8))
        assert solver.solve_component(component(({A, B, C}, 1))) is not None
        assert solver.solve_component(component(({A, B, C, D}, 1))) is None
