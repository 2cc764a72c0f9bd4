r"""
Turn Machine - One player-turn as an explicit finite-state machine.

    maybeSkip -> drawTwo -> choose -> maybeTarget -> selectTarget -> resolve -> checkWin -> endTurn
        \__________________________________________________________________________________/
                                         (pending skip)

Only `choose` and `selectTarget` wait for input; every other phase runs
to completion inside the same call. transition() is a plain function of
(context, event) -> context: the audit log is threaded through the
returned context, and the input context is never modified. An event that
is not legal in the current phase is ignored (the same context comes back).
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import ClassVar, Union
import logging

from ..cards.registry import CardRegistry
from ..cards.types import MatchContext, TargetKind, TargetValue
from ..cards.validate import enumerate_targets
from ..engine_core.board import opponent
from ..engine_core.deck import CardId, discard, draw
from ..engine_core.reducer import apply_ops, resolve_wins
from ..engine_core.rng import Prng
from ..engine_core.state import DRAW, GameState, SimultaneousFivePolicy

logger = logging.getLogger(__name__)

CARDS_PER_TURN = 2


class TurnPhase(Enum):
    """Phases of a single turn."""
    MAYBE_SKIP = "maybeSkip"
    DRAW_TWO = "drawTwo"
    CHOOSE = "choose"
    MAYBE_TARGET = "maybeTarget"
    SELECT_TARGET = "selectTarget"
    RESOLVE = "resolve"
    CHECK_WIN = "checkWin"
    END_TURN = "endTurn"


WAITING_PHASES = frozenset({TurnPhase.CHOOSE, TurnPhase.SELECT_TARGET})


@dataclass(frozen=True)
class ChooseCard:
    """Play one of the drawn cards."""
    card_id: CardId
    type: ClassVar[str] = "CHOOSE_CARD"


@dataclass(frozen=True)
class SelectTarget:
    """Target for the chosen card."""
    target: TargetValue
    type: ClassVar[str] = "SELECT_TARGET"


TurnEvent = Union[ChooseCard, SelectTarget]


@dataclass(frozen=True)
class TurnLogEntry:
    tag: str
    message: str


@dataclass(frozen=True)
class TurnContext:
    """
    Everything one turn needs.

    game is replaced (never mutated) as the turn progresses. rng is the
    match generator and is consumed by draws and stochastic effects.
    """
    game: GameState
    rng: Prng
    registry: CardRegistry
    policy: SimultaneousFivePolicy = SimultaneousFivePolicy.ATTACKER
    phase: TurnPhase = TurnPhase.MAYBE_SKIP
    drawn: tuple[CardId, ...] = ()
    chosen: CardId | None = None
    target: TargetValue | None = None
    logs: tuple[TurnLogEntry, ...] = ()

    @property
    def done(self) -> bool:
        return self.phase == TurnPhase.END_TURN

    def match_context(self) -> MatchContext:
        return MatchContext(
            board=self.game.board,
            current_player=self.game.current_player,
            skip_next_turns=dict(self.game.status.skip_next_turns),
        )

    def _log(self, tag: str, message: str, **changes) -> TurnContext:
        logger.debug("turn P%s %s", self.game.current_player, message)
        return replace(self, logs=self.logs + (TurnLogEntry(tag=tag, message=message),), **changes)


# =============================================================================
# Transition function
# =============================================================================

def start_turn(
    game: GameState,
    rng: Prng,
    registry: CardRegistry,
    policy: SimultaneousFivePolicy | str = SimultaneousFivePolicy.ATTACKER,
) -> TurnContext:
    """Create a turn context and run it to its first waiting phase (or the end)."""
    ctx = TurnContext(game=game, rng=rng, registry=registry, policy=SimultaneousFivePolicy(policy))
    return _run_automatic(ctx)


def transition(ctx: TurnContext, event: TurnEvent) -> TurnContext:
    """
    Feed one external event.

    Returns the same object when the event is ignored (wrong phase, card
    not drawn, target rejected), otherwise a new context advanced to the
    next waiting phase or to endTurn.
    """
    if ctx.phase == TurnPhase.CHOOSE and isinstance(event, ChooseCard):
        return _run_automatic(_on_choose(ctx, event))
    if ctx.phase == TurnPhase.SELECT_TARGET and isinstance(event, SelectTarget):
        advanced = _on_select_target(ctx, event)
        if advanced is ctx:
            return ctx
        return _run_automatic(advanced)
    logger.debug("Ignored %s in phase %s", getattr(event, "type", event), ctx.phase.value)
    return ctx


def _run_automatic(ctx: TurnContext) -> TurnContext:
    """Follow unconditional transitions until input is needed or the turn ends."""
    handlers = {
        TurnPhase.MAYBE_SKIP: _maybe_skip,
        TurnPhase.DRAW_TWO: _draw_two,
        TurnPhase.MAYBE_TARGET: _maybe_target,
        TurnPhase.RESOLVE: _resolve,
        TurnPhase.CHECK_WIN: _check_win,
    }
    while ctx.phase in handlers:
        ctx = handlers[ctx.phase](ctx)
    return ctx


def _end_turn(ctx: TurnContext) -> TurnContext:
    """Hand the move to the opponent. The only mutation done in endTurn."""
    game = ctx.game._copy_with(current_player=opponent(ctx.game.current_player))
    return replace(ctx, game=game, phase=TurnPhase.END_TURN)


def _maybe_skip(ctx: TurnContext) -> TurnContext:
    player = ctx.game.current_player
    pending = ctx.game.status.pending_skips(player)
    if pending <= 0:
        return replace(ctx, phase=TurnPhase.DRAW_TWO)

    game = ctx.game.with_skips(player, pending - 1)
    ctx = ctx._log("skip", f"skip: player {player} skips this turn ({pending - 1} pending)", game=game)
    return _end_turn(ctx)


def _draw_two(ctx: TurnContext) -> TurnContext:
    drawn, deck = draw(ctx.game.deck, CARDS_PER_TURN, ctx.rng)
    game = ctx.game.with_deck(deck)
    if not drawn:
        ctx = ctx._log("drawTwo", "drawTwo: no cards left", game=game)
        return _end_turn(ctx)
    return ctx._log(
        "drawTwo",
        f"drawTwo: {', '.join(drawn)}",
        game=game,
        drawn=tuple(drawn),
        phase=TurnPhase.CHOOSE,
    )


def _on_choose(ctx: TurnContext, event: ChooseCard) -> TurnContext:
    if event.card_id not in ctx.drawn:
        return ctx

    # One copy of the chosen card stays in hand; everything else is discarded
    rest = list(ctx.drawn)
    rest.remove(event.card_id)
    game = ctx.game.with_deck(discard(ctx.game.deck, rest))
    message = f"choose: {event.card_id}"
    if rest:
        message += f" (discarded {', '.join(rest)})"
    return ctx._log("choose", message, game=game, chosen=event.card_id, phase=TurnPhase.MAYBE_TARGET)


def _maybe_target(ctx: TurnContext) -> TurnContext:
    definition = ctx.registry.get(ctx.chosen) if ctx.chosen else None
    if definition is None or definition.target.kind == TargetKind.NONE:
        return replace(ctx, target=TargetValue.none(), phase=TurnPhase.RESOLVE)
    if not enumerate_targets(ctx.match_context(), definition.target):
        # Nothing could ever be accepted in selectTarget; resolve as a no-op
        return replace(ctx, target=None, phase=TurnPhase.RESOLVE)
    return replace(ctx, phase=TurnPhase.SELECT_TARGET)


def _on_select_target(ctx: TurnContext, event: SelectTarget) -> TurnContext:
    definition = ctx.registry.get(ctx.chosen) if ctx.chosen else None
    if definition is None:
        return ctx
    result = definition.validate_target(ctx.match_context(), event.target)
    if not result.ok:
        logger.debug("Rejected target %s: %s", event.target, result.error_code)
        return ctx
    return ctx._log(
        "selectTarget",
        f"selectTarget: {result.value.describe()}",
        target=result.value,
        phase=TurnPhase.RESOLVE,
    )


def _resolve(ctx: TurnContext) -> TurnContext:
    """
    Apply the chosen card.

    Any failed check here is a no-op application rather than an error.
    The chosen card is discarded either way so no card leaves the game.
    """
    chosen = ctx.chosen
    game = ctx.game
    definition = ctx.registry.get(chosen) if chosen else None

    if definition is None:
        message = f"resolve: unknown card {chosen}, no effect"
    else:
        mc = ctx.match_context()
        can_play = definition.can_play(mc)
        validated = definition.validate_target(mc, ctx.target or TargetValue.none()) if can_play.ok else None
        if not can_play.ok:
            message = f"resolve: {chosen} not playable ({can_play.error_code}), no effect"
        elif not validated.ok:
            message = f"resolve: {chosen} target rejected ({validated.error_code}), no effect"
        else:
            output = definition.effect(mc, ctx.rng, validated.value)
            game = apply_ops(game, output.ops)
            message = f"resolve: {chosen} - {output.log}" if output.log else f"resolve: {chosen}"

    if chosen is not None:
        game = game.with_deck(discard(game.deck, [chosen]))
    return ctx._log("resolve", message, game=game, phase=TurnPhase.CHECK_WIN)


def _check_win(ctx: TurnContext) -> TurnContext:
    game = ctx.game
    if game.winner is None:
        game = resolve_wins(game, game.current_player, ctx.policy)

    if game.winner is None:
        message = "checkWin: no winner"
    elif game.winner == DRAW:
        message = "checkWin: draw"
    else:
        message = f"checkWin: player {game.winner} wins"
    return _end_turn(ctx._log("checkWin", message, game=game))


# =============================================================================
# Stateful wrapper
# =============================================================================

class TurnMachine:
    """
    Holds the current TurnContext for a driver.

    Usage:
        machine = TurnMachine(game, rng, registry)
        machine.send(ChooseCard("Place"))
        machine.send(SelectTarget(TargetValue.cell((4, 0))))
        if machine.done:
            game = machine.game

    Disposing a machine mid-turn is just dropping it: the game it was
    built from is never modified.
    """

    def __init__(
        self,
        game: GameState,
        rng: Prng,
        registry: CardRegistry,
        policy: SimultaneousFivePolicy | str = SimultaneousFivePolicy.ATTACKER,
    ):
        self.context = start_turn(game, rng, registry, policy)

    def send(self, event: TurnEvent) -> bool:
        """Feed an event; True if it was accepted."""
        next_ctx = transition(self.context, event)
        accepted = next_ctx is not self.context
        self.context = next_ctx
        return accepted

    def choose_card(self, card_id: CardId) -> bool:
        return self.send(ChooseCard(card_id=card_id))

    def select_target(self, target: TargetValue) -> bool:
        return self.send(SelectTarget(target=target))

    @property
    def phase(self) -> TurnPhase:
        return self.context.phase

    @property
    def done(self) -> bool:
        return self.context.done

    @property
    def game(self) -> GameState:
        return self.context.game

    @property
    def drawn(self) -> tuple[CardId, ...]:
        return self.context.drawn

    @property
    def chosen(self) -> CardId | None:
        return self.context.chosen

    @property
    def logs(self) -> tuple[TurnLogEntry, ...]:
        return self.context.logs

    @property
    def awaiting_target(self) -> bool:
        return self.context.phase == TurnPhase.SELECT_TARGET
