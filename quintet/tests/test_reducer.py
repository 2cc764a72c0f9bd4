"""
Tests for the reducer: op application and win resolution.
"""

import pytest

from ..engine_core.board import Point
from ..engine_core.errors import CellEmptyError, CellOccupiedError, OutOfBoundsError
from ..engine_core.ops import FreezeOp, PlaceOp, RemoveOp, SwapAllOp
from ..engine_core.reducer import apply_ops, resolve_wins, winners_on_board
from ..engine_core.state import DRAW, SimultaneousFivePolicy


class TestApplyOps:

    def test_place_remove_swap(self, make_state):
        state = make_state(stones={1: [(0, 0)], 2: [(1, 1)]})
        after = apply_ops(state, [
            PlaceOp(point=Point(2, 2), player=1),
            RemoveOp(point=Point(1, 1)),
            SwapAllOp(),
        ])
        assert after.board.get((0, 0)) == 2
        assert after.board.get((2, 2)) == 2
        assert after.board.is_empty((1, 1))

    def test_ops_apply_in_order(self, make_state):
        state = make_state()
        after = apply_ops(state, [PlaceOp(point=Point(0, 0), player=1), RemoveOp(point=Point(0, 0))])
        assert after.board.is_empty((0, 0))

    def test_input_state_untouched(self, make_state):
        state = make_state(stones={1: [(0, 0)]})
        before = [row.copy() for row in state.board.cells]
        after = apply_ops(state, [SwapAllOp(), FreezeOp(target=1, amount=1)])
        assert state.board.cells == before
        assert state.status.skip_next_turns == {}
        assert after.board is not state.board
        assert after.status is not state.status

    def test_deck_and_turn_carried_over(self, make_state):
        state = make_state(current_player=2, draw_pile=["Place"])
        after = apply_ops(state, [PlaceOp(point=Point(0, 0), player=2)])
        assert after.current_player == 2
        assert after.deck.draw_pile == ["Place"]

    def test_freeze_is_cumulative(self, make_state):
        state = make_state(skips={2: 1})
        after = apply_ops(state, [FreezeOp(target=2, amount=1), FreezeOp(target=2, amount=2)])
        assert after.status.pending_skips(2) == 4
        assert after.status.pending_skips(1) == 0

    def test_empty_ops_returns_same_state(self, make_state):
        state = make_state()
        assert apply_ops(state, []) is state

    def test_unknown_op(self, make_state):
        with pytest.raises(TypeError):
            apply_ops(make_state(), [object()])

    @pytest.mark.parametrize("op,error", [
        (PlaceOp(point=Point(0, 0), player=2), CellOccupiedError),
        (RemoveOp(point=Point(1, 1)), CellEmptyError),
        (PlaceOp(point=Point(-1, 0), player=1), OutOfBoundsError),
    ])
    def test_board_contract_errors_propagate(self, make_state, op, error):
        state = make_state(stones={1: [(0, 0)]})
        with pytest.raises(error):
            apply_ops(state, [op])
        assert state.board.get((0, 0)) == 1


class TestResolveWins:

    def test_no_line(self, make_state):
        state = make_state(stones={1: [(0, 0), (1, 0), (2, 0), (3, 0)]})
        assert resolve_wins(state, 1, "attacker") is state

    def test_single_winner_regardless_of_attacker(self, make_state):
        state = make_state(stones={2: [(x, 0) for x in range(5)]})
        assert resolve_wins(state, 1, SimultaneousFivePolicy.ATTACKER).winner == 2

    @pytest.mark.parametrize("policy,attacker,expected", [
        (SimultaneousFivePolicy.ATTACKER, 1, 1),
        (SimultaneousFivePolicy.ATTACKER, 2, 2),
        ("attacker", 2, 2),
        (SimultaneousFivePolicy.DRAW, 1, DRAW),
        ("draw", 2, DRAW),
    ])
    def test_simultaneous_fives(self, make_state, policy, attacker, expected):
        state = make_state(stones={
            1: [(x, 0) for x in range(5)],
            2: [(x, 2) for x in range(5)],
        })
        assert resolve_wins(state, attacker, policy).winner == expected

    def test_winner_is_terminal(self, make_state):
        state = make_state(stones={1: [(x, 0) for x in range(5)]})
        won = resolve_wins(state, 1, "attacker")
        flipped = apply_ops(won, [SwapAllOp()])
        assert resolve_wins(flipped, 2, "attacker").winner == 1

    def test_winners_on_board(self, make_state):
        state = make_state(stones={1: [(x, 0) for x in range(6)], 2: [(0, y) for y in range(2, 7)]})
        players, lines = winners_on_board(state)
        assert players == {1, 2}
        assert sorted(w.length for w in lines) == [5, 6]
