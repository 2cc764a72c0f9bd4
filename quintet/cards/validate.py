"""
Target validation shared by all cards.

can_play_by_target_spec is the coarse check; validate_target_by_spec
re-derives legality for one target. Any target passing the latter is one
the former would have found by enumerating targets.
"""

from __future__ import annotations

from ..engine_core.board import EMPTY, Point, opponent
from .types import CardErrorCode, CardResult, MatchContext, TargetKind, TargetSpec, TargetValue


def can_play_by_target_spec(ctx: MatchContext, spec: TargetSpec) -> CardResult:
    """Playable unless the spec needs an empty cell and none exists."""
    if spec.kind == TargetKind.CELL and spec.must_be_empty:
        if ctx.board.count_empty() == 0:
            return CardResult.failure(CardErrorCode.INSUFFICIENT_EMPTIES, "No empty cells available")
    return CardResult.success()


def validate_target_by_spec(ctx: MatchContext, spec: TargetSpec, target: TargetValue) -> CardResult[TargetValue]:
    if not isinstance(target, TargetValue):
        return CardResult.failure(CardErrorCode.INVALID_TARGET, f"Not a target: {target!r}")

    if spec.kind == TargetKind.NONE:
        if target.kind != TargetKind.NONE:
            return CardResult.failure(CardErrorCode.INVALID_TARGET, "Card takes no target")
        return CardResult.success(target)

    if spec.kind == TargetKind.PLAYER:
        if target.kind != TargetKind.PLAYER:
            return CardResult.failure(CardErrorCode.INVALID_TARGET, "Card targets a player")
        if spec.relation == "self":
            expected, code = ctx.current_player, CardErrorCode.TARGET_IS_SELF
        else:
            expected, code = opponent(ctx.current_player), CardErrorCode.TARGET_NOT_OPPONENT
        if target.player != expected:
            return CardResult.failure(code, f"Player {target.player} is not a valid {spec.relation} target")
        return CardResult.success(target)

    if spec.kind == TargetKind.CELL:
        if target.kind != TargetKind.CELL or target.point is None:
            return CardResult.failure(CardErrorCode.INVALID_TARGET, "Card targets a cell")
        point = target.point
        if not ctx.board.is_on_board(point):
            return CardResult.failure(CardErrorCode.OUT_OF_BOUNDS, f"{tuple(point)} is off the board")
        value = ctx.board.get(point)
        if spec.must_be_empty and value != EMPTY:
            return CardResult.failure(CardErrorCode.CELL_OCCUPIED, f"{tuple(point)} is occupied")
        if spec.must_be_owned_by == "self" and value != ctx.current_player:
            return CardResult.failure(CardErrorCode.INVALID_TARGET, f"{tuple(point)} is not your stone")
        if spec.must_be_owned_by == "opponent" and value == ctx.current_player:
            return CardResult.failure(CardErrorCode.INVALID_TARGET, f"{tuple(point)} is your own stone")
        if spec.must_be_owned_by is not None and value == EMPTY:
            return CardResult.failure(CardErrorCode.CELL_EMPTY, f"{tuple(point)} is empty")
        return CardResult.success(target)

    return CardResult.failure(CardErrorCode.INVALID_TARGET, f"Unsupported target kind {spec.kind}")


def enumerate_targets(ctx: MatchContext, spec: TargetSpec) -> list[TargetValue]:
    """Every target the spec accepts in ctx, in row-major / player order."""
    if spec.kind == TargetKind.NONE:
        return [TargetValue.none()]
    if spec.kind == TargetKind.PLAYER:
        candidates = [TargetValue.for_player(p) for p in (1, 2)]
    else:
        candidates = [TargetValue.cell(Point(x, y)) for x, y in ctx.board.points()]
    return [t for t in candidates if validate_target_by_spec(ctx, spec, t).ok]
