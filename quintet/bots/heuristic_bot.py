"""
Heuristic Bot - Tactical cascade over a one-ply lookahead.

Decision priority (first step that yields a move wins):
1. Immediate win: a Place-type card completes a line for us
2. Block: the opponent could complete a line next turn; place on that cell,
   preferring the block with the best resulting evaluation
3. Break lethal: no Place-type card, but a Take-type card can remove a
   stone from the opponent's threat lines
4. Lookahead: simulate every playable card and target with apply_ops and
   keep the best relative evaluation (averaged over seeded rollouts for
   stochastic cards)
5. Fallback: a random drawn card

Card roles are read from each card's TargetSpec, never from its id:
an empty-cell target is Place-type, an opponent-stone target is Take-type.
"""

from __future__ import annotations
from collections import Counter
from typing import TYPE_CHECKING, Iterable, Sequence
import logging

from ..cards.types import CardDefinition, MatchContext, TargetKind, TargetValue
from ..cards.validate import enumerate_targets
from ..engine_core.board import DIRECTIONS, EMPTY, Board, Point, opponent
from ..engine_core.errors import QuintetError
from ..engine_core.ops import PlaceOp
from ..engine_core.reducer import apply_ops, winners_on_board
from .evaluator import BoardEvaluator
from .policy import FALLBACK_CARD, BotDecision, BotPolicy, match_context

if TYPE_CHECKING:
    from ..cards.registry import CardRegistry
    from ..engine_core.rng import Prng
    from ..engine_core.state import GameState

logger = logging.getLogger(__name__)

IMMEDIATE_WIN_SCORE = 1_000_000.0
STOCHASTIC_SAMPLES = 4
CANDIDATE_RADIUS = 2


def is_place_type(definition: CardDefinition) -> bool:
    spec = definition.target
    return spec.kind == TargetKind.CELL and spec.must_be_empty


def is_take_type(definition: CardDefinition) -> bool:
    spec = definition.target
    return spec.kind == TargetKind.CELL and spec.must_be_owned_by == "opponent"


def empty_cells_near(board: Board, stones: Iterable[Point], radius: int) -> list[Point]:
    """Empty cells within radius (Chebyshev) of any of stones, row-major."""
    near: set[Point] = set()
    for sx, sy in stones:
        for dy in range(-radius, radius + 1):
            for dx in range(-radius, radius + 1):
                x, y = sx + dx, sy + dy
                if board.is_on_board((x, y)) and board.cells[y][x] == EMPTY:
                    near.add(Point(x, y))
    return sorted(near, key=lambda p: (p.y, p.x))


def winning_cells(state: GameState, player: int) -> list[Point]:
    """Empty cells where a stone of player would complete a line."""
    cells = []
    board = state.board
    for point in empty_cells_near(board, board.stones_of(player), 1):
        simulated = apply_ops(state, [PlaceOp(point=point, player=player)])
        win = simulated.board.check_win_from_last_move()
        if win is not None and win.player == player:
            cells.append(point)
    return cells


class HeuristicBot(BotPolicy):
    """
    Deterministic heuristic bot.

    Identical inputs (including the rng seed) give identical decisions.
    All simulation goes through the engine's own apply_ops, and every
    stochastic rollout uses a child generator, so the rng passed in is
    only consumed by the random fallback.
    """

    strategy_id = "heuristic-v1"

    def __init__(self, evaluator: BoardEvaluator | None = None, samples: int = STOCHASTIC_SAMPLES):
        self.evaluator = evaluator or BoardEvaluator()
        self.samples = max(1, samples)

    def decide(
        self,
        state: GameState,
        drawn: Sequence[str],
        registry: CardRegistry,
        rng: Prng,
    ) -> BotDecision:
        me = state.current_player
        ctx = match_context(state)
        playable = self._playable(drawn, registry, ctx)
        place_cards = [(cid, d) for cid, d in playable if is_place_type(d)]
        take_cards = [(cid, d) for cid, d in playable if is_take_type(d)]

        decision = None
        if place_cards:
            decision = self._immediate_win(state, ctx, place_cards, rng)

        if decision is None:
            threats = winning_cells(state, opponent(me))
            if threats and place_cards:
                decision = self._block(state, ctx, place_cards, threats, rng)
            elif threats and take_cards:
                decision = self._break_lethal(state, ctx, take_cards, threats, rng)

        if decision is None:
            decision = self._best_simulated(state, ctx, playable, rng)

        if decision is None:
            if drawn:
                card_id = drawn[rng.randint(0, len(drawn) - 1)]
            else:
                card_id = FALLBACK_CARD
            decision = BotDecision(card_id=card_id, explanation="Fallback random (no heuristic move)")

        logger.debug("P%s decided %s: %s", me, decision.card_id, decision.explanation)
        return decision

    # -------------------------------------------------------------------------
    # Cascade steps
    # -------------------------------------------------------------------------

    def _immediate_win(self, state, ctx, place_cards, rng) -> BotDecision | None:
        me = state.current_player
        candidates = empty_cells_near(state.board, state.board.stones_of(me), 1)
        for card_id, definition in place_cards:
            for point in candidates:
                target = TargetValue.cell(point)
                simulated = self._simulate(state, ctx, definition, target, rng.child(card_id, "win"))
                if simulated is None:
                    continue
                players, _ = winners_on_board(simulated)
                if me in players:
                    return BotDecision(
                        card_id=card_id,
                        target=target,
                        score=IMMEDIATE_WIN_SCORE,
                        explanation=f"Immediate win at ({point.x},{point.y})",
                    )
        return None

    def _block(self, state, ctx, place_cards, threats, rng) -> BotDecision | None:
        me = state.current_player
        best: BotDecision | None = None
        evaluated = 0
        for card_id, definition in place_cards:
            for point in threats:
                target = TargetValue.cell(point)
                simulated = self._simulate(state, ctx, definition, target, rng.child(card_id, "block"))
                if simulated is None:
                    continue
                evaluated += 1
                score = self.evaluator.relative_score(simulated, me)
                if best is None or score > best.score:
                    best = BotDecision(
                        card_id=card_id,
                        target=target,
                        score=score,
                        explanation=f"Block opponent win at ({point.x},{point.y})",
                    )
        if best is not None:
            best.evaluated_options = evaluated
        return best

    def _break_lethal(self, state, ctx, take_cards, threats, rng) -> BotDecision | None:
        """Remove the opponent stone shared by the most threat lines."""
        board = state.board
        opp = opponent(state.current_player)
        frequency: Counter[Point] = Counter()
        for tx, ty in threats:
            for dx, dy in DIRECTIONS:
                for sign in (1, -1):
                    x, y = tx + sign * dx, ty + sign * dy
                    while board.is_on_board((x, y)) and board.cells[y][x] == opp:
                        frequency[Point(x, y)] += 1
                        x, y = x + sign * dx, y + sign * dy
        if not frequency:
            return None

        center = board.size / 2

        def rank(point: Point):
            distance = abs(point.x - center) + abs(point.y - center)
            return (-frequency[point], distance, point.y, point.x)

        for card_id, definition in take_cards:
            for point in sorted(frequency, key=rank):
                target = TargetValue.cell(point)
                simulated = self._simulate(state, ctx, definition, target, rng.child(card_id, "take"))
                if simulated is None:
                    continue
                return BotDecision(
                    card_id=card_id,
                    target=target,
                    score=self.evaluator.relative_score(simulated, state.current_player),
                    explanation=f"Take to break lethal line at ({point.x},{point.y})",
                    evaluation_details={"threat_cells": [tuple(p) for p in threats]},
                )
        return None

    def _best_simulated(self, state, ctx, playable, rng) -> BotDecision | None:
        me = state.current_player
        baseline = self.evaluator.relative_score(state, me)
        best: BotDecision | None = None
        evaluated = 0

        for card_id, definition in playable:
            for target in self._candidate_targets(ctx, definition):
                rollouts = self.samples if definition.stochastic else 1
                scores = []
                log = ""
                for i in range(rollouts):
                    child = rng.child(card_id, i)
                    try:
                        output = definition.effect(ctx, child, target)
                        simulated = apply_ops(state, output.ops)
                    except QuintetError as exc:
                        logger.debug("Skipping %s %s: %s", card_id, target.describe(), exc)
                        break
                    log = output.log
                    scores.append(self.evaluator.relative_score(simulated, me))
                if not scores:
                    continue

                evaluated += 1
                score = sum(scores) / len(scores)
                if best is None or score > best.score:
                    delta = score - baseline
                    if definition.stochastic:
                        explanation = f"{definition.meta.name}: expected {delta:+.0f} over {len(scores)} rollouts"
                    else:
                        explanation = f"{log or definition.meta.name} ({delta:+.0f} vs baseline)"
                    best = BotDecision(
                        card_id=card_id,
                        target=None if target.kind == TargetKind.NONE else target,
                        score=score,
                        explanation=explanation,
                    )
                    logger.debug("New best %s %s score=%.1f", card_id, target.describe(), score)

        if best is not None:
            best.evaluated_options = evaluated
        return best

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _playable(self, drawn, registry, ctx) -> list[tuple[str, CardDefinition]]:
        """Distinct drawn cards that pass can_play, in drawn order."""
        playable = []
        seen = set()
        for card_id in drawn:
            if card_id in seen:
                continue
            seen.add(card_id)
            definition = registry.get(card_id)
            if definition is not None and definition.can_play(ctx).ok:
                playable.append((card_id, definition))
        return playable

    def _candidate_targets(self, ctx: MatchContext, definition: CardDefinition) -> list[TargetValue]:
        spec = definition.target
        if spec.kind == TargetKind.NONE:
            return [TargetValue.none()]
        if not is_place_type(definition):
            return enumerate_targets(ctx, spec)

        # Empty-cell targets: only cells near existing stones matter
        board = ctx.board
        stones = [p for p in board.points() if board.get(p) != EMPTY]
        if stones:
            points = empty_cells_near(board, stones, CANDIDATE_RADIUS)
        else:
            points = [Point(board.size // 2, board.size // 2)]
        targets = [TargetValue.cell(p) for p in points]
        return [t for t in targets if definition.validate_target(ctx, t).ok]

    def _simulate(self, state, ctx, definition, target, rng) -> GameState | None:
        """Resulting state if definition were played on target, or None if illegal."""
        validated = definition.validate_target(ctx, target)
        if not validated.ok:
            return None
        try:
            output = definition.effect(ctx, rng, validated.value)
            return apply_ops(state, output.ops)
        except QuintetError as exc:
            logger.debug("Simulation of %s failed: %s", definition.id, exc)
            return None
