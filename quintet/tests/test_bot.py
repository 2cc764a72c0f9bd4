"""
Tests for the bots and the board evaluator.

Tests:
- Heuristic cascade: win, block, break lethal, lookahead, fallback
- Bot contract: purity, determinism, never raising
- Evaluator fragment scoring
"""

import pytest

from ..bots import STRATEGIES, BoardEvaluator, HeuristicBot, RandomBot, get_strategy
from ..bots.heuristic_bot import empty_cells_near, is_place_type, is_take_type, winning_cells
from ..bots.policy import match_context
from ..cards.types import TargetKind, TargetValue
from ..engine_core.board import Point
from ..engine_core.rng import create_prng
from ..engine_core.serialize import serialize_game_state


@pytest.fixture
def bot():
    return HeuristicBot()


class TestCascade:

    def test_immediate_win(self, bot, make_state, registry):
        state = make_state(current_player=2, stones={2: [(x, 0) for x in range(4)]})
        decision = bot.decide(state, ["Place", "Take"], registry, create_prng("b"))
        assert decision.card_id == "Place"
        assert decision.target == TargetValue.cell((4, 0))
        assert "Immediate win" in decision.explanation

    def test_block(self, bot, make_state, registry):
        state = make_state(current_player=2, stones={1: [(x, 1) for x in range(4)]})
        decision = bot.decide(state, ["Place", "Take"], registry, create_prng("b"))
        assert decision.card_id == "Place"
        assert decision.target == TargetValue.cell((4, 1))
        assert "Block" in decision.explanation

    def test_break_lethal_with_take(self, bot, make_state, registry):
        state = make_state(current_player=2, stones={1: [(x, 2) for x in range(4)]})
        decision = bot.decide(state, ["Take", "PolarityInversion"], registry, create_prng("b"))
        assert decision.card_id == "Take"
        assert decision.target == TargetValue.cell((3, 2))
        assert "Take to break lethal" in decision.explanation

    def test_lookahead_prefers_inversion_over_spawn(self, bot, make_state, registry):
        state = make_state(current_player=2, stones={1: [(x, 3) for x in range(3, 8)]})
        decision = bot.decide(state, ["PolarityInversion", "SpontaneousGeneration"], registry, create_prng("b"))
        assert decision.card_id == "PolarityInversion"
        assert decision.target is None
        assert "Invert polarity" in decision.explanation

    def test_fallback_when_nothing_playable(self, bot, make_state, registry):
        decision = bot.decide(make_state(), ["Take"], registry, create_prng("b"))
        assert decision.card_id == "Take"
        assert decision.explanation

    def test_nothing_drawn(self, bot, make_state, registry):
        decision = bot.decide(make_state(), [], registry, create_prng("b"))
        assert decision.card_id == "Place"
        assert decision.explanation

    def test_opening_move_is_central(self, bot, make_state, registry):
        decision = bot.decide(make_state(), ["Place", "Place"], registry, create_prng("b"))
        assert decision.card_id == "Place"
        assert decision.target == TargetValue.cell((4, 4))

    def test_chosen_target_is_legal(self, bot, make_state, registry):
        state = make_state(stones={1: [(4, 4), (5, 5)], 2: [(3, 3), (6, 6)]})
        decision = bot.decide(state, ["Take", "Place"], registry, create_prng("b"))
        definition = registry.require(decision.card_id)
        target = decision.target or TargetValue.none()
        assert definition.validate_target(match_context(state), target).ok


class TestContract:

    @pytest.mark.parametrize("strategy_id", sorted(STRATEGIES))
    def test_decide_does_not_mutate(self, strategy_id, make_state, registry):
        state = make_state(
            stones={1: [(4, 4), (4, 5)], 2: [(5, 5)]},
            draw_pile=["Place", "Take"],
            skips={2: 1},
        )
        before = serialize_game_state(state)
        get_strategy(strategy_id).decide(
            state, ["SpontaneousGeneration", "Take"], registry, create_prng("p"),
        )
        assert serialize_game_state(state) == before
        assert len(registry) == 5

    @pytest.mark.parametrize("strategy_id", sorted(STRATEGIES))
    def test_deterministic(self, strategy_id, make_state, registry):
        state = make_state(stones={1: [(4, 4)], 2: [(3, 4)]})
        drawn = ["SpontaneousGeneration", "Place"]
        a = get_strategy(strategy_id).decide(state, drawn, registry, create_prng("d"))
        b = get_strategy(strategy_id).decide(state, drawn, registry, create_prng("d"))
        assert a == b

    def test_random_bot_plays_drawn_card(self, make_state, registry):
        state = make_state(stones={2: [(0, 0)]})
        for seed in range(5):
            decision = RandomBot().decide(state, ["Take", "TimeFreeze"], registry, create_prng(seed))
            assert decision.card_id in ("Take", "TimeFreeze")
            assert decision.target is not None

    def test_random_bot_fallbacks(self, make_state, registry):
        assert RandomBot().decide(make_state(), ["Take"], registry, create_prng(1)).card_id == "Take"
        assert RandomBot().decide(make_state(), [], registry, create_prng(1)).card_id == "Place"

    def test_unknown_strategy(self):
        with pytest.raises(KeyError):
            get_strategy("minimax-9000")

    def test_strategy_ids(self):
        assert get_strategy("heuristic-v1").get_name() == "heuristic-v1"
        assert isinstance(get_strategy("random-baseline"), RandomBot)

    def test_decision_to_dict(self, bot, make_state, registry):
        state = make_state(current_player=2, stones={2: [(x, 0) for x in range(4)]})
        data = bot.decide(state, ["Place"], registry, create_prng("b")).to_dict()
        assert data["card_id"] == "Place"
        assert data["target"] == {"kind": "cell", "point": {"x": 4, "y": 0}}


class TestHelpers:

    def test_card_roles_from_target_spec(self, registry):
        assert is_place_type(registry.require("Place"))
        assert is_take_type(registry.require("Take"))
        for card_id in ("PolarityInversion", "TimeFreeze", "SpontaneousGeneration"):
            definition = registry.require(card_id)
            assert not is_place_type(definition)
            assert not is_take_type(definition)
        assert registry.require("TimeFreeze").target.kind == TargetKind.PLAYER

    def test_empty_cells_near_corner(self, make_state):
        state = make_state(stones={1: [(0, 0)]})
        assert empty_cells_near(state.board, [Point(0, 0)], 1) == [Point(1, 0), Point(0, 1), Point(1, 1)]

    def test_winning_cells(self, make_state):
        state = make_state(stones={1: [(2, 4), (3, 4), (4, 4), (5, 4)]})
        assert winning_cells(state, 1) == [Point(1, 4), Point(6, 4)]
        assert winning_cells(state, 2) == []


class TestEvaluator:

    def test_open_four_beats_closed_four(self, make_state):
        evaluator = BoardEvaluator()
        open_four = make_state(stones={1: [(x, 4) for x in range(1, 5)]})
        closed_four = make_state(stones={1: [(x, 4) for x in range(0, 4)]})
        assert evaluator.line_score(open_four.board, 1) > evaluator.line_score(closed_four.board, 1)

    def test_fragment_scores(self):
        evaluator = BoardEvaluator()
        assert evaluator.fragment_score(5, 0) == 100_000
        assert evaluator.fragment_score(7, 2) == 100_000
        assert evaluator.fragment_score(4, 2) == 10_000
        assert evaluator.fragment_score(3, 1) == 100
        assert evaluator.fragment_score(3, 0) == 0

    def test_relative_score_is_antisymmetric(self, make_state):
        evaluator = BoardEvaluator()
        state = make_state(stones={1: [(4, 4), (5, 4)], 2: [(0, 0)]}, skips={2: 1})
        assert evaluator.relative_score(state, 1) == -evaluator.relative_score(state, 2)
        assert evaluator.relative_score(state, 1) > 0

    def test_skip_penalty(self, make_state):
        evaluator = BoardEvaluator()
        plain = make_state()
        frozen = make_state(skips={1: 1})
        assert evaluator.relative_score(frozen, 1) == evaluator.relative_score(plain, 1) - 300

    def test_center_score(self, make_state):
        evaluator = BoardEvaluator()
        center = make_state(stones={1: [(4, 4)]})
        corner = make_state(stones={1: [(0, 0)]})
        assert evaluator.center_score(center.board, 1) == 4
        assert evaluator.center_score(corner.board, 1) == 0

    def test_evaluation_breakdown(self, make_state):
        evaluation = BoardEvaluator().evaluate(make_state(stones={1: [(4, 4)]}), 1)
        assert set(evaluation.player_scores) == {1, 2}
        assert "p1_lines" in evaluation.feature_breakdown
        assert evaluation.total_score == evaluation.player_scores[1] - evaluation.player_scores[2]
