"""Hand synthesis tests"""
import random

import pytest

from poker_rush.engine.deck import create_deck, shuffle_deck
from poker_rush.engine.hand_detector import HandType, evaluate_hand
from poker_rush.engine.synthesizer import generate_specific_hand


class TestGenerateFromFullDeck:
    """A full deck can make every category"""

    @pytest.mark.parametrize("hand_type", list(HandType))
    def test_round_trip(self, hand_type):
        for seed in range(10):
            hand = generate_specific_hand(hand_type, create_deck(), random.Random(seed))
            assert hand is not None
            assert len(hand) == 5
            assert len({c.id for c in hand}) == 5
            assert evaluate_hand(hand).hand_type == hand_type

    def test_accepts_display_name(self, rng):
        hand = generate_specific_hand("Full House", create_deck(), rng)
        assert evaluate_hand(hand).hand_type == HandType.FULL_HOUSE

    def test_unknown_name_returns_none(self, rng):
        assert generate_specific_hand("Five of a Kind", create_deck(), rng) is None


class TestGenerateFromPartialPool:
    """Smaller pools"""

    def test_cards_come_from_pool(self, rng):
        pool = shuffle_deck(create_deck(), rng)[:20]
        ids = {c.id for c in pool}
        for hand_type in HandType:
            hand = generate_specific_hand(hand_type, pool, rng)
            if hand is not None:
                assert {c.id for c in hand} <= ids
                assert evaluate_hand(hand).hand_type == hand_type

    def test_impossible_returns_none(self, cards, rng):
        pool = cards("2h 5d 8c Js Kh 3c")
        assert generate_specific_hand(HandType.ONE_PAIR, pool, rng) is None
        assert generate_specific_hand(HandType.FLUSH, pool, rng) is None
        assert generate_specific_hand(HandType.ROYAL_FLUSH, pool, rng) is None

    def test_pool_too_small(self, cards, rng):
        assert generate_specific_hand(HandType.HIGH_CARD, cards("2h 5d 8c"), rng) is None

    def test_royal_not_returned_as_straight_flush(self, cards, rng):
        pool = cards("10h Jh Qh Kh Ah 2c")
        assert generate_specific_hand(HandType.STRAIGHT_FLUSH, pool, rng) is None
        assert evaluate_hand(generate_specific_hand(HandType.ROYAL_FLUSH, pool, rng)).hand_type == HandType.ROYAL_FLUSH

    def test_flush_pool_cannot_make_straight(self, cards, rng):
        pool = cards("5s 6s 7s 8s 9s")
        assert generate_specific_hand(HandType.STRAIGHT, pool, rng) is None
        assert generate_specific_hand(HandType.FLUSH, pool, rng) is None

    def test_kickers_never_pair_up(self, cards, rng):
        pool = cards("7h 7d 7c 4s 4h")
        assert generate_specific_hand(HandType.THREE_OF_A_KIND, pool, rng) is None
        assert evaluate_hand(generate_specific_hand(HandType.FULL_HOUSE, pool, rng)).hand_type == HandType.FULL_HOUSE

    def test_duplicate_pool_cards_ignored(self, cards, rng):
        pool = cards("7h 7h 7h 7h 2c")
        assert generate_specific_hand(HandType.FOUR_OF_A_KIND, pool, rng) is None
