"""
Card types - Target specs, target values, results and card definitions.

A card is data plus three pure callables:
- can_play(ctx): coarse pre-check, ignoring any particular target
- validate_target(ctx, target): legality of one proposed target
- effect(ctx, rng, target): the DomainOps to apply, plus a log line

Cards differ only in their TargetSpec and callables, so the turn machine
and bots never branch on card ids.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Generic, Literal, Mapping, TypeVar

from ..engine_core.board import Board, Point
from ..engine_core.ops import DomainOp

if TYPE_CHECKING:
    from ..engine_core.rng import Prng

T = TypeVar("T")

Relation = Literal["self", "opponent"]


class CardErrorCode(str, Enum):
    """Stable codes for expected legality failures."""
    CARD_NOT_PLAYABLE = "CardNotPlayable"
    INVALID_TARGET = "InvalidTarget"
    OUT_OF_BOUNDS = "OutOfBounds"
    CELL_OCCUPIED = "CellOccupied"
    CELL_EMPTY = "CellEmpty"
    TARGET_IS_SELF = "TargetIsSelf"
    TARGET_NOT_OPPONENT = "TargetNotOpponent"
    INSUFFICIENT_EMPTIES = "InsufficientEmpties"


@dataclass(frozen=True)
class CardError:
    code: CardErrorCode
    message: str = ""


@dataclass(frozen=True)
class CardResult(Generic[T]):
    """
    Outcome of a legality check.

    Failures are ordinary values, not exceptions: callers treat them as
    "this option is unavailable" and move on.
    """
    ok: bool
    value: T | None = None
    error: CardError | None = None

    @classmethod
    def success(cls, value: T | None = None) -> CardResult[T]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, code: CardErrorCode, message: str = "") -> CardResult[T]:
        return cls(ok=False, error=CardError(code=code, message=message))

    @property
    def error_code(self) -> str | None:
        return self.error.code.value if self.error else None


# =============================================================================
# Targets
# =============================================================================

class TargetKind(str, Enum):
    NONE = "none"
    CELL = "cell"
    PLAYER = "player"


@dataclass(frozen=True)
class TargetSpec:
    """What kind of target a card expects, with its constraints."""
    kind: TargetKind
    must_be_empty: bool = False
    must_be_owned_by: Relation | None = None
    relation: Relation | None = None

    @classmethod
    def none(cls) -> TargetSpec:
        return cls(kind=TargetKind.NONE)

    @classmethod
    def cell(cls, must_be_empty: bool = False, must_be_owned_by: Relation | None = None) -> TargetSpec:
        return cls(kind=TargetKind.CELL, must_be_empty=must_be_empty, must_be_owned_by=must_be_owned_by)

    @classmethod
    def player(cls, relation: Relation) -> TargetSpec:
        return cls(kind=TargetKind.PLAYER, relation=relation)


@dataclass(frozen=True)
class TargetValue:
    """A concrete target; the populated field depends on kind."""
    kind: TargetKind
    point: Point | None = None
    player: int | None = None

    @classmethod
    def none(cls) -> TargetValue:
        return cls(kind=TargetKind.NONE)

    @classmethod
    def cell(cls, point: Point | tuple[int, int]) -> TargetValue:
        return cls(kind=TargetKind.CELL, point=Point(*point))

    @classmethod
    def for_player(cls, player: int) -> TargetValue:
        return cls(kind=TargetKind.PLAYER, player=player)

    def to_dict(self) -> dict[str, Any]:
        if self.kind == TargetKind.CELL and self.point is not None:
            return {"kind": "cell", "point": {"x": self.point.x, "y": self.point.y}}
        if self.kind == TargetKind.PLAYER:
            return {"kind": "player", "player": self.player}
        return {"kind": "none"}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TargetValue:
        """Parse the plain form sent by drivers. Raises ValueError/KeyError if malformed."""
        kind = TargetKind(data.get("kind", "none"))
        if kind == TargetKind.CELL:
            point = data["point"]
            return cls.cell((int(point["x"]), int(point["y"])))
        if kind == TargetKind.PLAYER:
            return cls.for_player(int(data["player"]))
        return cls.none()

    def describe(self) -> str:
        if self.kind == TargetKind.CELL and self.point is not None:
            return f"cell ({self.point.x},{self.point.y})"
        if self.kind == TargetKind.PLAYER:
            return f"player {self.player}"
        return "none"


# =============================================================================
# Context and definitions
# =============================================================================

@dataclass(frozen=True)
class MatchContext:
    """Read-only view a card sees when checking or resolving."""
    board: Board
    current_player: int
    skip_next_turns: Mapping[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class EffectOutput:
    ops: list[DomainOp]
    log: str = ""


@dataclass(frozen=True)
class CardMeta:
    """Display-only metadata; ignored by game logic."""
    name: str
    description: str
    icon: str = ""


CanPlayFn = Callable[[MatchContext], CardResult]
ValidateTargetFn = Callable[[MatchContext, TargetValue], CardResult]
EffectFn = Callable[[MatchContext, "Prng", TargetValue], EffectOutput]


@dataclass(frozen=True)
class CardDefinition:
    """
    Immutable card behavior, registered once into a CardRegistry.

    effect must be pure given (ctx, rng, target): it may consume PRNG draws
    but reads and writes nothing else. stochastic marks effects whose ops
    depend on those draws, so bots know to sample several rollouts.
    """
    id: str
    meta: CardMeta
    target: TargetSpec
    can_play: CanPlayFn
    validate_target: ValidateTargetFn
    effect: EffectFn
    stochastic: bool = False
