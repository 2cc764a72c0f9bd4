"""
Pytest fixtures for Quintet tests.
"""

import pytest

from ..cards import CardDefinition, CardMeta, CardRegistry, CardResult, EffectOutput, TargetSpec
from ..cards import create_default_registry, validate_target_by_spec
from ..engine_core.board import Point
from ..engine_core.ops import PlaceOp
from ..engine_core.reducer import apply_ops
from ..engine_core.rng import create_prng
from ..engine_core.state import GameState


@pytest.fixture
def registry() -> CardRegistry:
    """Fresh registry with the base cards."""
    return create_default_registry()


@pytest.fixture
def rng():
    return create_prng("test-seed")


@pytest.fixture
def make_state():
    """
    Factory for game states.

    stones maps a player to the (x, y) cells they occupy, placed in order.
    """
    def _make(size=9, current_player=1, stones=None, draw_pile=None, skips=None):
        state = GameState.create(size, first_player=current_player, draw_pile=draw_pile)
        for player, points in (stones or {}).items():
            state = apply_ops(state, [PlaceOp(point=Point(x, y), player=player) for x, y in points])
        for player, count in (skips or {}).items():
            state = state.with_skips(player, count)
        return state
    return _make


@pytest.fixture
def dummy_registry() -> CardRegistry:
    """Registry with a single no-op card "A", for deck tests."""
    spec = TargetSpec.none()
    registry = CardRegistry()
    registry.register(CardDefinition(
        id="A",
        meta=CardMeta(name="A", description="Does nothing"),
        target=spec,
        can_play=lambda ctx: CardResult.success(),
        validate_target=lambda ctx, target: validate_target_by_spec(ctx, spec, target),
        effect=lambda ctx, rng, target: EffectOutput(ops=[]),
    ))
    return registry
