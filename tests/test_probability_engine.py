"""Tests for the probability engine."""

import numpy as np
import pytest

from board_helpers import reveal_all_as_zero, set_revealed
from minelens.config import EngineConfig
from minelens.solver.constraints import Constraint
from minelens.solver.game_state import MinesweeperBoard
from minelens.solver.partition import Component
from minelens.solver.probability_engine import (
    ProbabilityEngine,
    calculate_probabilities,
    get_definitive_cells,
    probability_grid,
)


def two_cluster_board(right_clue: int) -> MinesweeperBoard:
    # Hidden pairs in the first and last column, separated by revealed cells
    board = MinesweeperBoard(2, 7, 3)
    reveal_all_as_zero(board, skip={(0, 0), (1, 0), (0, 6), (1, 6)})
    for row in (0, 1):
        set_revealed(board, row, 1, 1)
        set_revealed(board, row, 5, right_clue)
    return board


class TestScenarios:
    def test_clue_equal_to_unknowns_gives_certain_mines(self):
        board = MinesweeperBoard(2, 2, 0)
        set_revealed(board, 0, 0, 2)
        set_revealed(board, 0, 1, 0)

        probabilities = calculate_probabilities(board, 2)

        assert probabilities[board.cell_key(1, 0)] == 1
        assert probabilities[board.cell_key(1, 1)] == 1

    def test_subset_resolves_safe_cell_and_leaves_fifty_fifty(self):
        board = MinesweeperBoard(3, 2, 0)
        set_revealed(board, 0, 0, 1)
        set_revealed(board, 0, 1, 0)
        set_revealed(board, 2, 0, 1)

        probabilities = calculate_probabilities(board, 1)

        assert probabilities[board.cell_key(2, 1)] == 0
        assert probabilities[board.cell_key(1, 0)] == pytest.approx(0.5)
        assert probabilities[board.cell_key(1, 1)] == pytest.approx(0.5)

    def test_forced_mine_and_far_safe_cell(self):
        board = MinesweeperBoard(4, 4, 0)
        a, b, c, d = (3, 0), (1, 2), (1, 3), (2, 3)
        reveal_all_as_zero(board, skip={a, b, c, d, (2, 0), (0, 2), (2, 2)})

        set_revealed(board, 2, 0, 1)  # A is the only unknown neighbour
        set_revealed(board, 0, 2, 1)  # B + C = 1
        set_revealed(board, 2, 2, 1)  # B + C + D = 1

        probabilities = calculate_probabilities(board, 2)

        assert probabilities[a] == 1
        assert probabilities[d] == 0
        assert probabilities[b] == pytest.approx(0.5)
        assert probabilities[c] == pytest.approx(0.5)

    def test_bottom_row_mine_split_and_safe(self):
        board = MinesweeperBoard(5, 5, 0)
        a, b, c, d = (4, 0), (2, 2), (2, 3), (2, 4)
        reveal_all_as_zero(board, skip={a, b, c, d, (3, 0), (1, 2), (1, 3)})

        set_revealed(board, 3, 0, 1)
        set_revealed(board, 1, 2, 1)
        set_revealed(board, 1, 3, 1)

        probabilities = calculate_probabilities(board, 2)

        assert probabilities[a] == 1
        assert probabilities[b] == pytest.approx(0.5)
        assert probabilities[c] == pytest.approx(0.5)
        assert probabilities[d] == 0

    def test_disjoint_clusters_are_solved_independently(self):
        engine = ProbabilityEngine()
        one = engine.analyze(two_cluster_board(right_clue=1), 3)
        two = engine.analyze(two_cluster_board(right_clue=2), 3)

        assert one.components == 2
        for cell in ((0, 0), (1, 0)):
            assert one.probabilities[cell] == two.probabilities[cell] == 0.5
        assert one.probabilities[(0, 6)] == 0.5
        assert two.probabilities[(0, 6)] == 1.0


class TestInvariants:
    @pytest.fixture
    def mixed_board(self):
        board = MinesweeperBoard(4, 5, 5)
        set_revealed(board, 0, 0, 1)
        set_revealed(board, 0, 1, 2)
        set_revealed(board, 1, 0, 1)
        set_revealed(board, 3, 4, 1)
        board.set_flag(2, 2)
        return board

    def test_every_unknown_cell_gets_exactly_one_value(self, mixed_board):
        probabilities = calculate_probabilities(mixed_board, mixed_board.remaining_mines)
        assert set(probabilities) == mixed_board.unknown_cells()
        assert (2, 2) not in probabilities
        assert (0, 0) not in probabilities

    def test_probabilities_are_clamped(self, mixed_board):
        for mines in (0, 1, 4, 50):
            probabilities = calculate_probabilities(mixed_board, mines)
            assert all(0.0 <= p <= 1.0 for p in probabilities.values())

    def test_repeated_calls_are_identical(self, mixed_board):
        engine = ProbabilityEngine()
        first = engine.calculate_probabilities(mixed_board, 4)
        second = engine.calculate_probabilities(mixed_board, 4)
        assert first == second

    def test_board_is_not_modified(self, mixed_board):
        before = str(mixed_board)
        calculate_probabilities(mixed_board, 4)
        assert str(mixed_board) == before
        assert mixed_board.flagged_count == 1

    def test_inconsistent_board_does_not_raise(self):
        board = MinesweeperBoard(2, 2, 1)
        set_revealed(board, 0, 0, 3)  # Only two unknown neighbours can hold mines
        set_revealed(board, 0, 1, 0)
        probabilities = calculate_probabilities(board, 1)
        assert set(probabilities) == {(1, 0), (1, 1)}
        assert all(0.0 <= p <= 1.0 for p in probabilities.values())


class TestFallbacks:
    def test_unconstrained_board_uses_uniform_density(self):
        board = MinesweeperBoard(3, 3, 3)
        probabilities = calculate_probabilities(board, 3)
        assert len(probabilities) == 9
        assert all(p == pytest.approx(1 / 3) for p in probabilities.values())

    def test_non_frontier_cells_share_leftover_mines(self):
        board = MinesweeperBoard(3, 3, 3)
        set_revealed(board, 0, 0, 1)

        probabilities = calculate_probabilities(board, 3)

        for cell in ((0, 1), (1, 0), (1, 1)):
            assert probabilities[cell] == pytest.approx(1 / 3)
        # Three mines minus one expected on the frontier, over five cells
        for cell in ((0, 2), (1, 2), (2, 0), (2, 1), (2, 2)):
            assert probabilities[cell] == pytest.approx(0.4)

    def test_known_mines_reduce_the_leftover_budget(self):
        # 1 # 1 0 # #  : the left clues pin a mine on (0, 1)
        board = MinesweeperBoard(1, 6, 2)
        set_revealed(board, 0, 0, 1)
        set_revealed(board, 0, 2, 1)
        set_revealed(board, 0, 3, 0)

        analysis = ProbabilityEngine().analyze(board, 2)

        assert analysis.known_mines == {(0, 1)}
        assert analysis.probabilities[(0, 4)] == pytest.approx(0.5)
        assert analysis.probabilities[(0, 5)] == pytest.approx(0.5)

    def test_oversized_component_uses_constraint_density(self):
        board = MinesweeperBoard(3, 3, 3)
        set_revealed(board, 1, 1, 3)
        engine = ProbabilityEngine(EngineConfig(max_exact_cells=4))

        analysis = engine.analyze(board, 3)

        assert analysis.approximated_components == 1
        assert analysis.exact_components == 0
        assert all(p == pytest.approx(3 / 8) for p in analysis.probabilities.values())

    def test_density_is_averaged_over_touching_constraints(self):
        a, b, c, d = (0, 0), (0, 1), (0, 2), (0, 3)
        comp = Component([
            Constraint(frozenset({a, b}), 1),
            Constraint(frozenset({b, c, d}), 2),
        ])
        averaged = ProbabilityEngine()._average_constraint_density(comp)
        assert averaged[a] == pytest.approx(0.5)
        assert averaged[b] == pytest.approx((0.5 + 2 / 3) / 2)
        assert averaged[d] == pytest.approx(2 / 3)

    def test_no_unknown_cells_gives_empty_map(self):
        board = MinesweeperBoard(2, 2, 0)
        reveal_all_as_zero(board, skip=set())
        assert calculate_probabilities(board, 0) == {}


class TestDefinitiveCells:
    def test_partitions_certain_cells(self):
        board = MinesweeperBoard(3, 2, 1)
        set_revealed(board, 0, 0, 1)
        set_revealed(board, 0, 1, 0)
        set_revealed(board, 2, 0, 1)

        cells = get_definitive_cells(board, 1)

        assert cells == {'safe': [(2, 1)], 'mines': []}

    def test_probability_grid_marks_known_cells_nan(self):
        board = MinesweeperBoard(2, 2, 2)
        set_revealed(board, 0, 0, 2)
        set_revealed(board, 0, 1, 0)

        grid = probability_grid(board, calculate_probabilities(board, 2))

        assert np.isnan(grid[0, 0]) and np.isnan(grid[0, 1])
        np.testing.assert_array_equal(grid[1], np.array([1.0, 1.0]))
