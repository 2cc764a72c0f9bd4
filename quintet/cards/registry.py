"""
Card Registry - Catalog of card definitions keyed by id.
"""

from __future__ import annotations

from ..engine_core.errors import DuplicateCardError, UnknownCardError
from .types import CardDefinition, CardMeta


class CardRegistry:
    """
    Pluggable card catalog.

    Each match builds its own registry, so registration order never leaks
    between matches.
    """

    def __init__(self):
        self._defs: dict[str, CardDefinition] = {}

    def register(self, definition: CardDefinition) -> None:
        if definition.id in self._defs:
            raise DuplicateCardError(f"Card already registered: {definition.id}")
        self._defs[definition.id] = definition

    def get(self, card_id: str) -> CardDefinition | None:
        return self._defs.get(card_id)

    def require(self, card_id: str) -> CardDefinition:
        definition = self.get(card_id)
        if definition is None:
            raise UnknownCardError(f"Unknown card id: {card_id}")
        return definition

    def list(self) -> list[CardDefinition]:
        return list(self._defs.values())

    def get_meta_map(self) -> dict[str, CardMeta]:
        """id -> meta, for display."""
        return {card_id: d.meta for card_id, d in self._defs.items()}

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._defs

    def __len__(self) -> int:
        return len(self._defs)
