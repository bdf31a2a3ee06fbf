"""
Learning Advisor - move suggestions for learning mode

Turns one probability analysis into ranked moves a player can learn from:
certain reveals and flags first, then the least risky guess when nothing
is certain. The advisor only reads the board; it never changes game rules.
"""

from typing import Dict, List, Optional, Any
import logging
import time
from dataclasses import dataclass, field
import numpy as np

from .game_state import MinesweeperBoard
from .probability_engine import ProbabilityAnalysis, ProbabilityEngine, split_definitive


@dataclass
class Move:
    """Represents a suggested move"""
    row: int
    col: int
    action: str  # 'reveal' or 'flag'
    confidence: float
    reasoning: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AdvisorResult:
    """Complete advisor analysis result"""
    moves: List[Move]
    statistics: Dict[str, Any]
    analysis_time: float
    analysis: Optional[ProbabilityAnalysis] = None


class LearningAdvisor:
    """
    Ranks moves from the probability engine's output

    Features:
    - Guaranteed moves from exact 0 / 1 probabilities
    - Lowest-risk guess when no safe cell is known
    - Summary statistics of the probability map
    """

    def __init__(self, engine: Optional[ProbabilityEngine] = None, max_moves: int = 10):
        self.engine = engine or ProbabilityEngine()
        self.max_moves = max_moves
        self.logger = logging.getLogger(__name__)

    def analyze(self, board: MinesweeperBoard, mines_remaining: Optional[int] = None) -> AdvisorResult:
        """
        Analyze the board and suggest moves

        Args:
            board: Board snapshot to analyze
            mines_remaining: Unflagged mines; defaults to the board's own count
        """
        start_time = time.time()
        if mines_remaining is None:
            mines_remaining = board.remaining_mines

        analysis = self.engine.analyze(board, mines_remaining)
        probabilities = analysis.probabilities
        definitive = split_definitive(probabilities)

        moves = []
        for row, col in definitive['safe']:
            moves.append(Move(
                row=row, col=col, action='reveal', confidence=1.0,
                reasoning="Guaranteed safe - every consistent layout leaves it clear"
            ))

        for row, col in definitive['mines']:
            moves.append(Move(
                row=row, col=col, action='flag', confidence=1.0,
                reasoning="Guaranteed mine - every consistent layout places a mine here"
            ))

        if not definitive['safe']:
            guess = self._best_guess(probabilities)
            if guess is not None:
                moves.append(guess)

        final_moves = self._rank_moves(moves)
        analysis_time = time.time() - start_time

        self.logger.info(
            f"Advisor: {len(definitive['safe'])} safe, {len(definitive['mines'])} mines, "
            f"{len(final_moves)} moves in {analysis_time:.3f}s")

        return AdvisorResult(
            moves=final_moves,
            statistics=self._compile_statistics(board, analysis, definitive),
            analysis_time=analysis_time,
            analysis=analysis
        )

    def _best_guess(self, probabilities: Dict) -> Optional[Move]:
        """Lowest-probability cell that is not a known mine"""
        candidates = [(p, cell) for cell, p in probabilities.items() if p < 1.0]
        if not candidates:
            return None

        probability, (row, col) = min(candidates)
        return Move(
            row=row, col=col, action='reveal',
            confidence=1.0 - probability,
            reasoning=f"Best guess (mine probability: {probability:.3f})",
            metadata={'probability': probability}
        )

    def _rank_moves(self, moves: List[Move]) -> List[Move]:
        """Deduplicate and rank moves by confidence, reveals before flags"""
        if not moves:
            return []

        # Remove duplicates while preserving best confidence
        move_dict = {}
        for move in moves:
            key = (move.row, move.col, move.action)
            if key not in move_dict or move.confidence > move_dict[key].confidence:
                move_dict[key] = move

        unique_moves = list(move_dict.values())
        unique_moves.sort(key=lambda m: (-m.confidence, m.action != 'reveal', m.row, m.col))

        # Limit to top moves
        return unique_moves[:self.max_moves]

    def _compile_statistics(self, board: MinesweeperBoard, analysis: ProbabilityAnalysis,
                            definitive: Dict[str, list]) -> Dict[str, Any]:
        probs = np.array(list(analysis.probabilities.values()), dtype=float)

        return {
            'total_cells': len(probs),
            'mean_probability': float(np.mean(probs)) if probs.size else 0.0,
            'std_probability': float(np.std(probs)) if probs.size else 0.0,
            'min_probability': float(np.min(probs)) if probs.size else 0.0,
            'max_probability': float(np.max(probs)) if probs.size else 0.0,
            'safe_moves_count': len(definitive['safe']),
            'mine_moves_count': len(definitive['mines']),
            'engine': analysis.summary(),
            'board_statistics': board.get_game_statistics(),
        }
