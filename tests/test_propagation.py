"""Tests for deductive propagation."""

from minelens.config import EngineConfig
from minelens.solver.constraints import Constraint
from minelens.solver.propagation import DeductivePropagator

A, B, C, D = (0, 0), (0, 1), (0, 2), (0, 3)


def constraint(cells, mines):
    return Constraint(frozenset(cells), mines, source_cell=(9, 9))


class TestBasicDeduction:
    def test_zero_mines_marks_all_safe(self):
        result = DeductivePropagator().propagate([constraint({A, B}, 0)])
        assert result.known_safe == {A, B}
        assert result.known_mines == set()

    def test_full_count_marks_all_mines(self):
        result = DeductivePropagator().propagate([constraint({A, B}, 2)])
        assert result.known_mines == {A, B}
        assert result.active_constraints == []

    def test_knowledge_chains_across_constraints(self):
        # A is a mine, so the second clue's last mine is accounted for
        result = DeductivePropagator().propagate([
            constraint({A}, 1),
            constraint({A, B, C}, 1),
        ])
        assert result.known_mines == {A}
        assert result.known_safe == {B, C}

    def test_undetermined_constraint_is_kept(self):
        result = DeductivePropagator().propagate([constraint({A, B}, 1)])
        assert result.known_safe == set()
        assert result.known_mines == set()
        assert len(result.active_constraints) == 1


class TestSubsetDerivation:
    def test_difference_with_no_mines_is_safe(self):
        result = DeductivePropagator().propagate([
            constraint({A, B}, 1),
            constraint({A, B, C}, 1),
        ])
        assert result.known_safe == {C}
        assert A not in result.known_safe and B not in result.known_safe

    def test_difference_full_of_mines(self):
        result = DeductivePropagator().propagate([
            constraint({A, B}, 1),
            constraint({A, B, C, D}, 3),
        ])
        assert result.known_mines == {C, D}

    def test_partial_difference_is_appended_once(self):
        constraints = [
            constraint({A, B}, 1),
            constraint({A, B, C, D}, 2),
        ]
        result = DeductivePropagator().propagate(constraints)

        derived = [c for c in result.constraints if c.derived]
        assert len(derived) == 1
        assert derived[0].cells == frozenset({C, D})
        assert derived[0].mines == 1
        assert not result.hit_iteration_cap

    def test_negative_difference_is_ignored(self):
        result = DeductivePropagator().propagate([
            constraint({A, B, C}, 2),
            constraint({A, B, C, D}, 1),
        ])
        assert result.known_safe == set()
        assert result.known_mines == set()


class TestPropagationLimits:
    def test_iteration_cap_stops_early(self):
        propagator = DeductivePropagator(EngineConfig(max_iterations=1))
        result = propagator.propagate([constraint({A}, 1), constraint({A, B}, 1)])
        assert result.iterations == 1
        assert result.hit_iteration_cap

    def test_known_sets_stay_disjoint_on_contradiction(self):
        result = DeductivePropagator().propagate([
            constraint({A}, 0),
            constraint({A}, 1),
        ])
        assert result.known_safe == {A}
        assert result.known_mines == set()

    def test_constraints_leave_without_resolved_cells(self):
        result = DeductivePropagator().propagate([
            constraint({A}, 1),
            constraint({A, B, C}, 2),
        ])
        for c in result.active_constraints:
            assert not c.cells & (result.known_safe | result.known_mines)
