"""
Base card set.

| Card                  | Legal when                 | Target              | Ops                      |
|-----------------------|----------------------------|---------------------|--------------------------|
| Place                 | an empty cell exists       | empty cell          | place(point, current)    |
| Take                  | an opponent stone exists   | opponent's stone    | remove(point)            |
| PolarityInversion     | always                     | none                | swapAll                  |
| TimeFreeze            | always                     | opponent player     | freeze(opponent, 1)      |
| SpontaneousGeneration | at least 5 empty cells     | none                | 5 random places          |
"""

from __future__ import annotations

from ..engine_core.board import opponent
from ..engine_core.ops import FreezeOp, PlaceOp, RemoveOp, SwapAllOp
from ..engine_core.rng import Prng
from .registry import CardRegistry
from .types import (
    CardDefinition,
    CardErrorCode,
    CardMeta,
    CardResult,
    EffectOutput,
    MatchContext,
    TargetSpec,
    TargetValue,
)
from .validate import can_play_by_target_spec, validate_target_by_spec

PLACE = "Place"
TAKE = "Take"
POLARITY_INVERSION = "PolarityInversion"
TIME_FREEZE = "TimeFreeze"
SPONTANEOUS_GENERATION = "SpontaneousGeneration"

SPAWN_COUNT = 5


def _always(ctx: MatchContext) -> CardResult:
    return CardResult.success()


def _validator_for(spec: TargetSpec):
    """Bind a TargetSpec into a validate_target callable."""
    def validate(ctx: MatchContext, target: TargetValue) -> CardResult[TargetValue]:
        return validate_target_by_spec(ctx, spec, target)
    return validate


# 1) Place Stone

_PLACE_TARGET = TargetSpec.cell(must_be_empty=True)


def _place_effect(ctx: MatchContext, rng: Prng, target: TargetValue) -> EffectOutput:
    point = target.point
    return EffectOutput(
        ops=[PlaceOp(point=point, player=ctx.current_player)],
        log=f"Place at ({point.x},{point.y})",
    )


PlaceCard = CardDefinition(
    id=PLACE,
    meta=CardMeta(name="Place Stone", description="Place one stone on an empty cell.", icon="●"),
    target=_PLACE_TARGET,
    can_play=lambda ctx: can_play_by_target_spec(ctx, _PLACE_TARGET),
    validate_target=_validator_for(_PLACE_TARGET),
    effect=_place_effect,
)


# 2) Take Stone

_TAKE_TARGET = TargetSpec.cell(must_be_owned_by="opponent")


def _take_can_play(ctx: MatchContext) -> CardResult:
    if ctx.board.has_stone_of(opponent(ctx.current_player)):
        return CardResult.success()
    return CardResult.failure(CardErrorCode.CARD_NOT_PLAYABLE, "No opponent stones")


def _take_effect(ctx: MatchContext, rng: Prng, target: TargetValue) -> EffectOutput:
    point = target.point
    return EffectOutput(ops=[RemoveOp(point=point)], log=f"Remove at ({point.x},{point.y})")


TakeCard = CardDefinition(
    id=TAKE,
    meta=CardMeta(name="Take Stone", description="Remove an opponent's stone.", icon="×"),
    target=_TAKE_TARGET,
    can_play=_take_can_play,
    validate_target=_validator_for(_TAKE_TARGET),
    effect=_take_effect,
)


# 3) Polarity Inversion

PolarityInversionCard = CardDefinition(
    id=POLARITY_INVERSION,
    meta=CardMeta(
        name="Polarity Inversion",
        description="Swap ownership of all stones (1 <-> 2).",
        icon="↔",
    ),
    target=TargetSpec.none(),
    can_play=_always,
    validate_target=_validator_for(TargetSpec.none()),
    effect=lambda ctx, rng, target: EffectOutput(ops=[SwapAllOp()], log="Invert polarity of all stones"),
)


# 4) Time Freeze

_FREEZE_TARGET = TargetSpec.player("opponent")

TimeFreezeCard = CardDefinition(
    id=TIME_FREEZE,
    meta=CardMeta(name="Time Freeze", description="Opponent skips their next turn.", icon="🕒"),
    target=_FREEZE_TARGET,
    can_play=_always,
    validate_target=_validator_for(_FREEZE_TARGET),
    effect=lambda ctx, rng, target: EffectOutput(
        ops=[FreezeOp(target=target.player, amount=1)],
        log=f"Freeze P{target.player} for 1 turn",
    ),
)


# 5) Spontaneous Generation

def _spawn_can_play(ctx: MatchContext) -> CardResult:
    if ctx.board.count_empty() < SPAWN_COUNT:
        return CardResult.failure(
            CardErrorCode.INSUFFICIENT_EMPTIES,
            f"Needs {SPAWN_COUNT} empty cells",
        )
    return CardResult.success()


def _spawn_effect(ctx: MatchContext, rng: Prng, target: TargetValue) -> EffectOutput:
    picks = rng.shuffle(ctx.board.empty_points())[:SPAWN_COUNT]
    # Owner draws are taken after the shuffle, one per pick, in pick order
    ops = [PlaceOp(point=p, player=rng.randint(1, 2)) for p in picks]
    return EffectOutput(ops=ops, log=f"Spawn {len(ops)} random stones")


SpontaneousGenerationCard = CardDefinition(
    id=SPONTANEOUS_GENERATION,
    meta=CardMeta(
        name="Spontaneous Generation",
        description="Randomly place 5 stones with random colors on empty cells.",
        icon="✨",
    ),
    target=TargetSpec.none(),
    can_play=_spawn_can_play,
    validate_target=_validator_for(TargetSpec.none()),
    effect=_spawn_effect,
    stochastic=True,
)


BASE_CARDS: tuple[CardDefinition, ...] = (
    PlaceCard,
    TakeCard,
    PolarityInversionCard,
    TimeFreezeCard,
    SpontaneousGenerationCard,
)


def register_default_base_cards(registry: CardRegistry) -> CardRegistry:
    """Register the five base cards into registry and return it."""
    for card in BASE_CARDS:
        registry.register(card)
    return registry


def create_default_registry() -> CardRegistry:
    return register_default_base_cards(CardRegistry())
