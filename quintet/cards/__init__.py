"""
Cards - Card definitions, target validation and the registry.
"""

from .types import (
    CardDefinition,
    CardError,
    CardErrorCode,
    CardMeta,
    CardResult,
    EffectOutput,
    MatchContext,
    TargetKind,
    TargetSpec,
    TargetValue,
)
from .validate import can_play_by_target_spec, validate_target_by_spec, enumerate_targets
from .registry import CardRegistry
from .base_cards import (
    BASE_CARDS,
    PLACE,
    TAKE,
    POLARITY_INVERSION,
    TIME_FREEZE,
    SPONTANEOUS_GENERATION,
    register_default_base_cards,
    create_default_registry,
)

__all__ = [
    "CardDefinition",
    "CardError",
    "CardErrorCode",
    "CardMeta",
    "CardResult",
    "EffectOutput",
    "MatchContext",
    "TargetKind",
    "TargetSpec",
    "TargetValue",
    "can_play_by_target_spec",
    "validate_target_by_spec",
    "enumerate_targets",
    "CardRegistry",
    "BASE_CARDS",
    "PLACE",
    "TAKE",
    "POLARITY_INVERSION",
    "TIME_FREEZE",
    "SPONTANEOUS_GENERATION",
    "register_default_base_cards",
    "create_default_registry",
]
