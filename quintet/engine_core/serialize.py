"""
Serialization - Lossless round-trip between GameState and plain data.

The serialized form holds only dicts, lists, ints and strings (no registry
references, no functions) so it can be stored or sent as JSON. Both
directions deep-copy every collection.
"""

from __future__ import annotations
from typing import Any

from .board import Board, LastMove
from .deck import DeckState
from .state import GameState, StatusState


def serialize_game_state(state: GameState) -> dict[str, Any]:
    board = state.board
    last_move = None
    if board.last_move is not None:
        last_move = {"x": board.last_move.x, "y": board.last_move.y, "player": board.last_move.player}

    return {
        "board": {
            "size": board.size,
            "cells": [row.copy() for row in board.cells],
            "last_move": last_move,
        },
        "current_player": state.current_player,
        "deck": {
            "draw_pile": state.deck.draw_pile.copy(),
            "discard_pile": state.deck.discard_pile.copy(),
        },
        "status": {
            # String keys so the form survives a JSON round-trip unchanged
            "skip_next_turns": {str(p): n for p, n in state.status.skip_next_turns.items()},
        },
        "winner": state.winner,
    }


def deserialize_game_state(data: dict[str, Any]) -> GameState:
    """
    Rebuild a GameState from serialize_game_state() output.

    Raises KeyError / ValueError on malformed input.
    """
    board_data = data["board"]
    size = int(board_data["size"])
    cells = [[int(v) for v in row] for row in board_data["cells"]]
    if len(cells) != size or any(len(row) != size for row in cells):
        raise ValueError(f"Cell grid does not match board size {size}")

    last_move = None
    lm = board_data.get("last_move")
    if lm is not None:
        last_move = LastMove(int(lm["x"]), int(lm["y"]), int(lm["player"]))

    deck_data = data["deck"]
    skips = data.get("status", {}).get("skip_next_turns", {})

    winner = data.get("winner")
    if winner is not None and winner != "draw":
        winner = int(winner)

    return GameState(
        board=Board(size=size, cells=cells, last_move=last_move),
        current_player=int(data["current_player"]),
        deck=DeckState(
            draw_pile=list(deck_data["draw_pile"]),
            discard_pile=list(deck_data["discard_pile"]),
        ),
        status=StatusState(skip_next_turns={int(p): int(n) for p, n in skips.items()}),
        winner=winner,
    )
