"""
Board Evaluator - Scores positions for bot decision-making.

The evaluator assigns each player a score from:
- Line fragments: every maximal contiguous same-owner run, counted once
  from its head, keyed by (length, open ends)
- Position: a small bonus for stones near the center
- Tempo: a penalty per pending skipped turn

The relative score (own total minus opponent total) is the single
currency the bots compare candidate moves in.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..engine_core.board import DIRECTIONS, EMPTY, WIN_LENGTH, opponent

if TYPE_CHECKING:
    from ..engine_core.board import Board
    from ..engine_core.state import GameState


@dataclass
class EvaluationWeights:
    """
    Weights for the board evaluator.

    fragment_scores maps (length, open_ends) to a score; lengths of
    WIN_LENGTH or more always score five_score regardless of ends.
    Fragments with no open end cannot grow and score nothing.
    """
    five_score: float = 100_000.0
    fragment_scores: dict[tuple[int, int], float] = field(default_factory=lambda: {
        (4, 2): 10_000.0,
        (4, 1): 1_000.0,
        (3, 2): 500.0,
        (3, 1): 100.0,
        (2, 2): 50.0,
        (2, 1): 10.0,
        (1, 2): 2.0,
        (1, 1): 1.0,
    })

    # Per stone, scaled by closeness to the center
    center_bonus: float = 1.0

    # Per pending skipped turn
    skip_penalty: float = 300.0


@dataclass
class StateEvaluation:
    """Result of evaluating a position from one player's side."""
    total_score: float
    player_scores: dict[int, float] = field(default_factory=dict)
    feature_breakdown: dict[str, float] = field(default_factory=dict)


class BoardEvaluator:
    """
    Evaluates positions using line-fragment heuristics.

    Used by bots for 1-ply lookahead:
    1. Simulate a card with apply_ops
    2. Evaluate the resulting state
    3. Keep the candidate with the best relative score
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()

    def evaluate(self, state: GameState, for_player: int) -> StateEvaluation:
        """Positive when the position favors for_player."""
        scores: dict[int, float] = {}
        features: dict[str, float] = {}
        for player in (1, 2):
            lines = self.line_score(state.board, player)
            center = self.center_score(state.board, player)
            tempo = -self.weights.skip_penalty * state.status.pending_skips(player)
            features[f"p{player}_lines"] = lines
            features[f"p{player}_center"] = center
            features[f"p{player}_tempo"] = tempo
            scores[player] = lines + center + tempo

        total = scores[for_player] - scores[opponent(for_player)]
        return StateEvaluation(total_score=total, player_scores=scores, feature_breakdown=features)

    def relative_score(self, state: GameState, for_player: int) -> float:
        return self.evaluate(state, for_player).total_score

    def line_score(self, board: Board, player: int) -> float:
        """Sum over every maximal fragment of player's stones."""
        total = 0.0
        size = board.size
        cells = board.cells
        for y in range(size):
            for x in range(size):
                if cells[y][x] != player:
                    continue
                for dx, dy in DIRECTIONS:
                    px, py = x - dx, y - dy
                    if 0 <= px < size and 0 <= py < size and cells[py][px] == player:
                        continue  # not the head of this fragment

                    length = 1
                    nx, ny = x + dx, y + dy
                    while 0 <= nx < size and 0 <= ny < size and cells[ny][nx] == player:
                        length += 1
                        nx, ny = nx + dx, ny + dy

                    open_ends = 0
                    if 0 <= px < size and 0 <= py < size and cells[py][px] == EMPTY:
                        open_ends += 1
                    if 0 <= nx < size and 0 <= ny < size and cells[ny][nx] == EMPTY:
                        open_ends += 1

                    total += self.fragment_score(length, open_ends)
        return total

    def fragment_score(self, length: int, open_ends: int) -> float:
        if length >= WIN_LENGTH:
            return self.weights.five_score
        return self.weights.fragment_scores.get((length, open_ends), 0.0)

    def center_score(self, board: Board, player: int) -> float:
        """Small bonus per stone, larger toward the center."""
        if self.weights.center_bonus == 0:
            return 0.0
        center = (board.size - 1) / 2
        total = 0.0
        for x, y in board.stones_of(player):
            distance = max(abs(x - center), abs(y - center))
            total += self.weights.center_bonus * (center - distance)
        return total
