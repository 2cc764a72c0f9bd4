"""
Tests for deck construction, draw and discard.

Tests:
- Building from counts and first-draw playability
- Draw order, reshuffle on exhaustion and short draws
- Conservation of cards across any draw/discard sequence
"""

from collections import Counter

import pytest

from ..engine_core.deck import (
    DeckState,
    build_deck_from_counts,
    build_shuffled_deck,
    create_deck,
    discard,
    draw,
)
from ..engine_core.rng import create_prng


class TestBuild:

    def test_counts_expand_in_order(self, registry):
        cards = build_deck_from_counts({"Place": 2, "Take": 1}, registry)
        assert cards == ["Place", "Place", "Take"]

    def test_unknown_and_non_positive_counts_skipped(self, registry):
        cards = build_deck_from_counts({"Place": 1, "Bogus": 4, "Take": 0, "TimeFreeze": -2}, registry)
        assert cards == ["Place"]

    def test_shuffled_deck_same_multiset(self, registry):
        counts = {"Place": 12, "Take": 6, "PolarityInversion": 3, "SpontaneousGeneration": 5}
        deck = build_shuffled_deck(create_prng("demo"), counts, registry)
        assert Counter(deck) == Counter(counts)

    @pytest.mark.parametrize("seed", ["demo", "a", "b", "c", 1, 2, 3])
    def test_first_draw_is_playable(self, registry, seed):
        counts = {"Place": 1, "Take": 6, "PolarityInversion": 6}
        deck = build_shuffled_deck(create_prng(seed), counts, registry)
        # draw pops from the back
        assert deck[-1] == "Place"

    def test_without_primary_card_order_is_plain_shuffle(self, registry):
        counts = {"Take": 3, "PolarityInversion": 3}
        a = build_shuffled_deck(create_prng("s"), counts, registry)
        b = create_prng("s").shuffle(build_deck_from_counts(counts, registry))
        assert a == b

    def test_ensure_first_playable_can_be_disabled(self, registry):
        counts = {"Place": 2, "Take": 5}
        a = build_shuffled_deck(create_prng("s"), counts, registry, ensure_first_playable=False)
        b = create_prng("s").shuffle(build_deck_from_counts(counts, registry))
        assert a == b

    def test_primary_ids_tried_in_order(self, registry):
        counts = {"Take": 1, "PolarityInversion": 6}
        deck = build_shuffled_deck(create_prng("x"), counts, registry, primary_ids=("Place", "Take"))
        assert deck[-1] == "Take"

    def test_empty_counts(self, registry):
        assert build_shuffled_deck(create_prng("x"), {}, registry) == []

    def test_create_deck(self):
        deck = create_deck(["a", "b", "c"], create_prng("x"))
        assert sorted(deck.draw_pile) == ["a", "b", "c"]
        assert deck.discard_pile == []


class TestDraw:

    def test_draw_pops_from_back(self, rng):
        deck = DeckState(draw_pile=["a", "b", "c"])
        cards, after = draw(deck, 2, rng)
        assert cards == ["c", "b"]
        assert after.draw_pile == ["a"]

    def test_draw_does_not_mutate_input(self, rng):
        deck = DeckState(draw_pile=["a", "b"], discard_pile=["c"])
        draw(deck, 3, rng)
        assert deck.draw_pile == ["a", "b"]
        assert deck.discard_pile == ["c"]

    def test_reshuffle_mid_draw(self, rng):
        deck = DeckState(draw_pile=["a"], discard_pile=["b", "c"])
        cards, after = draw(deck, 3, rng)
        assert cards[0] == "a"
        assert sorted(cards) == ["a", "b", "c"]
        assert after.draw_pile == []
        assert after.discard_pile == []

    def test_short_draw_when_exhausted(self, rng):
        cards, after = draw(DeckState(draw_pile=["a"]), 2, rng)
        assert cards == ["a"]
        cards, after = draw(after, 2, rng)
        assert cards == []
        assert after.draw_count == 0

    def test_draw_zero(self, rng):
        deck = DeckState(draw_pile=["a"])
        cards, after = draw(deck, 0, rng)
        assert cards == []
        assert after is deck

    def test_discard_appends_in_order(self):
        deck = DeckState(draw_pile=["a"], discard_pile=["b"])
        after = discard(deck, ["c", "d"])
        assert after.discard_pile == ["b", "c", "d"]
        assert deck.discard_pile == ["b"]
        assert discard(deck, []) is deck

    def test_three_card_deck_scenario(self, dummy_registry):
        """Deck of three: draw 2, discard 1, draw 3 reshuffles and comes up short."""
        rng = create_prng("x")
        deck = DeckState(draw_pile=build_shuffled_deck(rng, {"A": 3}, dummy_registry))
        assert deck.draw_pile == ["A", "A", "A"]

        hand, deck = draw(deck, 2, rng)
        assert len(hand) == 2
        deck = discard(deck, [hand.pop()])
        assert deck.draw_count == 1 and deck.discard_count == 1

        second, deck = draw(deck, 3, rng)
        # one from the pile, one from the reshuffled discard, then nothing left
        assert len(second) == 2
        assert len(hand) + len(second) <= 3
        assert deck.draw_count == 0 and deck.discard_count == 0

    def test_conservation(self, registry):
        """draw_pile + discard_pile + held never changes as a multiset."""
        rng = create_prng("conservation")
        counts = {"Place": 5, "Take": 3, "PolarityInversion": 2}
        original = Counter(build_deck_from_counts(counts, registry))
        deck = DeckState(draw_pile=build_shuffled_deck(rng, counts, registry))
        held: list[str] = []

        for step in range(200):
            if held and rng.next() < 0.5:
                k = rng.randint(1, len(held))
                deck = discard(deck, held[:k])
                held = held[k:]
            else:
                cards, deck = draw(deck, rng.randint(0, 3), rng)
                held.extend(cards)
            assert Counter(deck.draw_pile) + Counter(deck.discard_pile) + Counter(held) == original
