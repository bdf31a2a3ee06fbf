"""Tests for learning-mode move suggestions."""

import pytest

from board_helpers import set_revealed
from minelens.solver.advisor import LearningAdvisor
from minelens.solver.game_state import MinesweeperBoard


class TestLearningAdvisor:
    def test_certain_mines_become_flags(self):
        board = MinesweeperBoard(2, 2, 2)
        set_revealed(board, 0, 0, 2)
        set_revealed(board, 0, 1, 0)

        result = LearningAdvisor().analyze(board)

        flags = [(m.row, m.col) for m in result.moves if m.action == 'flag']
        assert flags == [(1, 0), (1, 1)]
        assert all(m.confidence == 1.0 for m in result.moves if m.action == 'flag')
        assert result.statistics['mine_moves_count'] == 2

    def test_safe_cell_is_ranked_first(self):
        board = MinesweeperBoard(3, 2, 1)
        set_revealed(board, 0, 0, 1)
        set_revealed(board, 0, 1, 0)
        set_revealed(board, 2, 0, 1)

        result = LearningAdvisor().analyze(board)

        first = result.moves[0]
        assert (first.row, first.col, first.action) == (2, 1, 'reveal')
        assert first.confidence == 1.0
        assert len(result.moves) == 1

    def test_guess_when_nothing_is_certain(self):
        board = MinesweeperBoard(3, 3, 3)
        set_revealed(board, 0, 0, 1)

        result = LearningAdvisor().analyze(board, 3)

        assert len(result.moves) == 1
        guess = result.moves[0]
        assert guess.action == 'reveal'
        assert guess.metadata['probability'] == pytest.approx(1 / 3)
        assert guess.confidence == pytest.approx(2 / 3)

    def test_statistics_summarise_the_map(self):
        board = MinesweeperBoard(3, 3, 3)
        result = LearningAdvisor().analyze(board, 3)

        stats = result.statistics
        assert stats['total_cells'] == 9
        assert stats['mean_probability'] == pytest.approx(1 / 3)
        assert stats['std_probability'] == pytest.approx(0.0)
        assert stats['engine']['frontier'] == 0
        assert result.analysis_time >= 0.0

    def test_move_limit(self):
        board = MinesweeperBoard(1, 5, 4)
        set_revealed(board, 0, 0, 1)
        set_revealed(board, 0, 2, 2)
        set_revealed(board, 0, 4, 1)

        result = LearningAdvisor(max_moves=1).analyze(board, 2)
        assert len(result.moves) == 1
