"""
Engine Core - Deterministic state and mutation primitives.

The engine is the runtime that:
1. Seeds all randomness from one PRNG
2. Holds the board, deck and status in an immutable-by-convention GameState
3. Applies card effects as DomainOps via the reducer
4. Resolves wins, including simultaneous fives
5. Round-trips state to plain data
"""

from .errors import (
    QuintetError,
    InvalidSizeError,
    OutOfBoundsError,
    CellOccupiedError,
    CellEmptyError,
    EmptyInputError,
    DuplicateCardError,
    UnknownCardError,
)
from .rng import Prng, Seed, create_prng
from .board import (
    Board,
    Point,
    LastMove,
    WinLine,
    EMPTY,
    PLAYER_ONE,
    PLAYER_TWO,
    WIN_LENGTH,
    DIRECTIONS,
    create_board,
    opponent,
)
from .deck import (
    CardId,
    DeckState,
    create_deck,
    build_deck_from_counts,
    build_shuffled_deck,
    draw,
    discard,
)
from .ops import DomainOp, PlaceOp, RemoveOp, SwapAllOp, FreezeOp
from .state import GameState, StatusState, SimultaneousFivePolicy, DRAW
from .reducer import apply_ops, resolve_wins
from .serialize import serialize_game_state, deserialize_game_state

__all__ = [
    "QuintetError",
    "InvalidSizeError",
    "OutOfBoundsError",
    "CellOccupiedError",
    "CellEmptyError",
    "EmptyInputError",
    "DuplicateCardError",
    "UnknownCardError",
    "Prng",
    "Seed",
    "create_prng",
    "Board",
    "Point",
    "LastMove",
    "WinLine",
    "EMPTY",
    "PLAYER_ONE",
    "PLAYER_TWO",
    "WIN_LENGTH",
    "DIRECTIONS",
    "create_board",
    "opponent",
    "CardId",
    "DeckState",
    "create_deck",
    "build_deck_from_counts",
    "build_shuffled_deck",
    "draw",
    "discard",
    "DomainOp",
    "PlaceOp",
    "RemoveOp",
    "SwapAllOp",
    "FreezeOp",
    "GameState",
    "StatusState",
    "SimultaneousFivePolicy",
    "DRAW",
    "apply_ops",
    "resolve_wins",
    "serialize_game_state",
    "deserialize_game_state",
]
