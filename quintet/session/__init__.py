"""
Session Module - Turn sequencing and in-memory matches.

A match is one play-through:
- Created from a MatchConfig
- Holds the authoritative game state
- Runs one TurnMachine per turn, for humans and bots alike
- Dropped when it ends

Matches are EPHEMERAL: nothing is persisted.
"""

from .turn_machine import (
    TurnPhase,
    TurnContext,
    TurnLogEntry,
    TurnMachine,
    ChooseCard,
    SelectTarget,
    start_turn,
    transition,
)
from .config import MatchConfig, default_deck_counts
from .match import Match, CompletedTurn
from .manager import SessionManager

__all__ = [
    "TurnPhase",
    "TurnContext",
    "TurnLogEntry",
    "TurnMachine",
    "ChooseCard",
    "SelectTarget",
    "start_turn",
    "transition",
    "MatchConfig",
    "default_deck_counts",
    "Match",
    "CompletedTurn",
    "SessionManager",
]
