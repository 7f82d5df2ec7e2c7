"""Deck construction and shuffling tests"""
import random
from collections import Counter

import pytest

from poker_rush.engine.deck import (
    Card, Suit, create_deck, shuffle_deck, create_bonus_friendly_deck,
    remove_cards, recycle_cards, consume_cards, parse_card, parse_cards,
)


class TestCreateDeck:
    """Standard deck"""

    def test_fifty_two_unique_cards(self):
        deck = create_deck()
        assert len(deck) == 52
        assert len({c.id for c in deck}) == 52

    def test_thirteen_per_suit(self):
        counts = Counter(c.suit for c in create_deck())
        assert all(counts[suit] == 13 for suit in Suit)

    def test_values(self):
        deck = create_deck()
        ace = next(c for c in deck if c.rank == "A")
        king = next(c for c in deck if c.rank == "K")
        assert ace.value == 14
        assert king.value == 13
        assert sorted({c.value for c in deck}) == list(range(2, 15))

    def test_card_id_and_str(self):
        card = Card.of("10", Suit.HEARTS)
        assert card.id == "10-hearts"
        assert str(card) == "10♥"


class TestShuffle:
    """Shuffling keeps the deck composition"""

    def test_same_multiset(self):
        for seed in range(20):
            shuffled = shuffle_deck(create_deck(), random.Random(seed))
            assert len(shuffled) == 52
            assert Counter(c.id for c in shuffled) == Counter(c.id for c in create_deck())

    def test_does_not_mutate_input(self):
        deck = create_deck()
        shuffle_deck(deck, random.Random(3))
        assert deck == create_deck()

    def test_seeded_is_reproducible(self):
        a = shuffle_deck(create_deck(), random.Random(42))
        b = shuffle_deck(create_deck(), random.Random(42))
        assert a == b

    def test_positions_are_uniform(self):
        """Every card lands in every slot about equally often."""
        deck = create_deck()[:4]
        trials = 20000
        rng = random.Random(2024)
        counts = Counter()
        for _ in range(trials):
            for position, card in enumerate(shuffle_deck(deck, rng)):
                counts[(card.id, position)] += 1

        expected = trials / len(deck)
        assert len(counts) == len(deck) ** 2
        for hits in counts.values():
            assert abs(hits - expected) < expected * 0.05


class TestBonusFriendlyDeck:
    """Bonus round decks"""

    @pytest.mark.parametrize("round_number", [1, 2, 3, 4, 7])
    def test_full_composition(self, round_number, rng):
        deck = create_bonus_friendly_deck(round_number, rng)
        assert len(deck) == 52
        assert {c.id for c in deck} == {c.id for c in create_deck()}

    def test_first_round_pairs_up_front(self, rng):
        deck = create_bonus_friendly_deck(1, rng)
        # Pair cards land at 0, 2, 4, 6, 8 and 9
        front = [deck[i] for i in (0, 2, 4, 6, 8, 9)]
        counts = Counter(c.value for c in front)
        assert sorted(counts.values()) == [2, 2, 2]

    def test_visible_window_grows(self, rng):
        deck = create_bonus_friendly_deck(3, rng)
        front = [deck[i] for i in (0, 2, 4, 6, 8, 29)]
        assert sorted(Counter(c.value for c in front).values()) == [2, 2, 2]


class TestCardMovement:
    """Consume and recycle"""

    def test_consume_moves_cards(self):
        deck = create_deck()
        hand = deck[:5]
        remaining, used = consume_cards(deck, [], hand)
        assert len(remaining) == 47
        assert used == hand

    def test_recycle_returns_cards(self):
        deck = create_deck()
        hand = deck[:5]
        remaining = remove_cards(deck, hand)
        assert len(recycle_cards(remaining, hand)) == 52


class TestParseCard:
    """Short card notation"""

    def test_parse(self):
        assert parse_card("Qs") == Card.of("Q", Suit.SPADES)
        assert parse_card("10h") == Card.of("10", Suit.HEARTS)
        assert parse_card("Td") == Card.of("10", Suit.DIAMONDS)
        assert parse_card("A♠") == Card.of("A", Suit.SPADES)

    def test_parse_list(self):
        assert len(parse_cards("Ah, Kh Qh  Jh,10h")) == 5

    @pytest.mark.parametrize("text", ["", "Z", "1h", "Ax", "11s"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_card(text)
