"""
Reducer - Applies domain operations and resolves wins.

The reducer is the single point of state mutation.
All board and status changes must go through apply_ops().

Design principles:
- Pure function: (state, ops) -> new_state
- The input state is never touched; the board and status are copied once
- Board contract violations (off-board, occupied, empty) propagate
- Bots call these same functions to simulate candidate moves
"""

from __future__ import annotations
from typing import Sequence

from .board import PLAYER_ONE, PLAYER_TWO, WinLine
from .ops import DomainOp, FreezeOp, PlaceOp, RemoveOp, SwapAllOp
from .state import DRAW, GameState, SimultaneousFivePolicy


def apply_ops(state: GameState, ops: Sequence[DomainOp]) -> GameState:
    """
    Apply ops in list order and return a new GameState.

    Freeze counters are cumulative and never clamped.
    """
    if not ops:
        return state

    board = state.board.copy()
    status = state.status.copy()

    for op in ops:
        if isinstance(op, PlaceOp):
            board.place(op.point, op.player)
        elif isinstance(op, RemoveOp):
            board.remove(op.point)
        elif isinstance(op, SwapAllOp):
            board.swap_all()
        elif isinstance(op, FreezeOp):
            status.skip_next_turns[op.target] = status.pending_skips(op.target) + op.amount
        else:
            raise TypeError(f"Unknown domain op: {op!r}")

    return state._copy_with(board=board, status=status)


def winners_on_board(state: GameState) -> tuple[set[int], list[WinLine]]:
    """Players holding a winning line, plus every line found."""
    wins = state.board.scan_all_wins()
    return {w.player for w in wins}, wins


def resolve_wins(
    state: GameState,
    attacker: int,
    policy: SimultaneousFivePolicy | str,
) -> GameState:
    """
    Set the winner from a full-board scan.

    - nobody has a line: state unchanged
    - exactly one player does: that player wins
    - both do: policy decides (attacker -> acting player, draw -> DRAW)

    A winner once set is terminal; later calls return the state unchanged.
    """
    if state.winner is not None:
        return state

    players, _ = winners_on_board(state)
    if not players:
        return state

    if PLAYER_ONE in players and PLAYER_TWO in players:
        if SimultaneousFivePolicy(policy) == SimultaneousFivePolicy.ATTACKER:
            winner = attacker
        else:
            winner = DRAW
    else:
        winner = next(iter(players))

    return state._copy_with(winner=winner)
