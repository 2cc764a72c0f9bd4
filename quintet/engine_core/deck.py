"""
Deck - Draw and discard piles with reshuffle on exhaustion.

The back of draw_pile is the next card drawn. Every operation returns a
new DeckState; the input piles are never mutated.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Mapping, Sequence

from .rng import Prng

if TYPE_CHECKING:
    from ..cards.registry import CardRegistry

CardId = str

# Cards that are always playable on a non-full board, in tie-break order
PRIMARY_CARD_IDS: tuple[CardId, ...] = ("Place",)


@dataclass
class DeckState:
    """
    Draw and discard piles.

    Invariant: across draw/discard the multiset
    draw_pile + discard_pile + cards in hand never changes.
    """
    draw_pile: list[CardId] = field(default_factory=list)
    discard_pile: list[CardId] = field(default_factory=list)

    @property
    def draw_count(self) -> int:
        return len(self.draw_pile)

    @property
    def discard_count(self) -> int:
        return len(self.discard_pile)

    def copy(self) -> DeckState:
        return DeckState(draw_pile=self.draw_pile.copy(), discard_pile=self.discard_pile.copy())


def create_deck(initial: Sequence[CardId], rng: Prng) -> DeckState:
    """New deck with a shuffled draw pile and empty discard."""
    return DeckState(draw_pile=rng.shuffle(initial), discard_pile=[])


def build_deck_from_counts(counts: Mapping[CardId, int], registry: CardRegistry) -> list[CardId]:
    """
    Expand {card_id: count} into a flat multiset.

    Unknown card ids and non-positive counts are dropped so deck
    configurations survive registry changes.
    """
    cards: list[CardId] = []
    for card_id, count in counts.items():
        if registry.get(card_id) is None:
            continue
        if not isinstance(count, int) or count <= 0:
            continue
        cards.extend([card_id] * count)
    return cards


def build_shuffled_deck(
    rng: Prng,
    counts: Mapping[CardId, int],
    registry: CardRegistry,
    ensure_first_playable: bool = True,
    primary_ids: Sequence[CardId] = PRIMARY_CARD_IDS,
) -> list[CardId]:
    """
    Build and shuffle a draw pile.

    With ensure_first_playable, the first primary card found (in
    primary_ids order) is swapped to the back of the pile so the opening
    draw always holds an unconditionally legal action.
    """
    deck = rng.shuffle(build_deck_from_counts(counts, registry))
    if not ensure_first_playable or not deck:
        return deck

    for primary in primary_ids:
        # Nearest to the top first
        for idx in range(len(deck) - 1, -1, -1):
            if deck[idx] == primary:
                deck[idx], deck[-1] = deck[-1], deck[idx]
                return deck
    return deck


def draw(state: DeckState, n: int, rng: Prng) -> tuple[list[CardId], DeckState]:
    """
    Draw up to n cards from the back of the draw pile.

    When the draw pile runs out mid-draw, the discard pile is reshuffled
    into a fresh draw pile with rng. If both are empty, fewer than n
    cards come back; that is not an error.
    """
    if n <= 0:
        return [], state

    draw_pile = state.draw_pile.copy()
    discard_pile = state.discard_pile.copy()
    out: list[CardId] = []
    for _ in range(n):
        if not draw_pile:
            if not discard_pile:
                break
            draw_pile = rng.shuffle(discard_pile)
            discard_pile = []
        out.append(draw_pile.pop())
    return out, DeckState(draw_pile=draw_pile, discard_pile=discard_pile)


def discard(state: DeckState, cards: Iterable[CardId]) -> DeckState:
    """Append cards to the discard pile in the given order."""
    cards = list(cards)
    if not cards:
        return state
    return DeckState(draw_pile=state.draw_pile.copy(), discard_pile=state.discard_pile + cards)
