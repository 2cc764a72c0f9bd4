"""
Match configuration.

Accepts both snake_case and camelCase keys, so a UI can post
{"boardSize": 15, "simultaneousFivePolicy": "draw"} as-is.
"""

from __future__ import annotations
from typing import Any, Literal, Union

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from ..bots import STRATEGIES
from ..engine_core.state import SimultaneousFivePolicy

DEFAULT_BOARD_SIZE = 15
DEFAULT_SEED = "demo"
DEFAULT_STRATEGY_ID = "heuristic-v1"


def default_deck_counts() -> dict[str, int]:
    return {
        "Place": 12,
        "Take": 6,
        "PolarityInversion": 3,
        "SpontaneousGeneration": 5,
    }


class MatchConfig(BaseModel):
    """Options for one match. Invalid values raise pydantic.ValidationError."""
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "forbid",
    }

    board_size: int = Field(DEFAULT_BOARD_SIZE, ge=1, le=99, description="Width and height of the board")
    first_player: Literal[1, 2] = 1
    seed: Union[int, str] = Field(DEFAULT_SEED, description="PRNG seed; same seed, same match")
    simultaneous_five_policy: SimultaneousFivePolicy = SimultaneousFivePolicy.ATTACKER
    deck_counts: dict[str, int] = Field(default_factory=default_deck_counts)

    # Driver options
    opponent: Literal["human", "bot"] = "human"
    bot_player: Literal[1, 2] = 2
    bot_strategy_id: str = DEFAULT_STRATEGY_ID

    @field_validator("deck_counts")
    @classmethod
    def _counts_not_negative(cls, value: dict[str, int]) -> dict[str, int]:
        for card_id, count in value.items():
            if count < 0:
                raise ValueError(f"Negative count for {card_id}: {count}")
        return value

    @field_validator("bot_strategy_id")
    @classmethod
    def _known_strategy(cls, value: str) -> str:
        if value not in STRATEGIES:
            raise ValueError(f"Unknown bot strategy {value!r}, expected one of {sorted(STRATEGIES)}")
        return value

    def merged(self, **overrides: Any) -> MatchConfig:
        """
        New config with overrides applied on top of this one.

        Overrides may use either key style; None values keep the current setting.
        """
        data = self.model_dump()
        for key, value in overrides.items():
            if value is None:
                continue
            data[_field_name(key)] = value
        return MatchConfig.model_validate(data)

    def to_public_dict(self) -> dict[str, Any]:
        """camelCase form, as a UI would send it."""
        return self.model_dump(mode="json", by_alias=True)


def _field_name(key: str) -> str:
    for name in MatchConfig.model_fields:
        if key == name or key == to_camel(name):
            return name
    return key
