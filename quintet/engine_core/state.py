"""
Game State - Aggregate of board, turn owner, deck and status.

Design principles:
- Owned-and-replaced: every change produces a new GameState
- Copy-on-write of the small mutable parts (cell grid, piles, skip map)
- Plain data only: serializable without the registry
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Union

from .board import Board, Player
from .deck import DeckState

DRAW: Literal["draw"] = "draw"

Winner = Union[int, Literal["draw"], None]


class SimultaneousFivePolicy(str, Enum):
    """Who wins when both players complete a line in the same resolution."""
    ATTACKER = "attacker"  # the acting player
    DRAW = "draw"


@dataclass
class StatusState:
    """Per-player status counters."""
    skip_next_turns: dict[int, int] = field(default_factory=dict)

    def pending_skips(self, player: int) -> int:
        return self.skip_next_turns.get(player, 0)

    def copy(self) -> StatusState:
        return StatusState(skip_next_turns=dict(self.skip_next_turns))


@dataclass
class GameState:
    """
    Complete match state at a point in time.

    Never mutated once handed out; the reducer and the turn machine
    derive new values with _copy_with().
    """
    board: Board
    current_player: Player = 1
    deck: DeckState = field(default_factory=DeckState)
    status: StatusState = field(default_factory=StatusState)
    winner: Winner = None

    @classmethod
    def create(
        cls,
        board_size: int,
        first_player: Player = 1,
        draw_pile: list[str] | None = None,
    ) -> GameState:
        """Fresh match state with an empty board."""
        return cls(
            board=Board.create(board_size),
            current_player=first_player,
            deck=DeckState(draw_pile=list(draw_pile or []), discard_pile=[]),
            status=StatusState(),
        )

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced (shallow for the rest)."""
        return GameState(
            board=kwargs.get("board", self.board),
            current_player=kwargs.get("current_player", self.current_player),
            deck=kwargs.get("deck", self.deck),
            status=kwargs.get("status", self.status),
            winner=kwargs.get("winner", self.winner),
        )

    def with_deck(self, deck: DeckState) -> GameState:
        return self._copy_with(deck=deck)

    def with_skips(self, player: int, count: int) -> GameState:
        """Return new state with player's pending skip counter set to count."""
        status = self.status.copy()
        status.skip_next_turns[player] = count
        return self._copy_with(status=status)
