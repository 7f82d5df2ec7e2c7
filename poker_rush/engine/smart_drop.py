"""
Smart drop: spot a four-card selection that is one card away from a strong
hand and find the card in the deck that completes it.
"""

import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from .deck import Card
from .hand_detector import HandType, STRAIGHT_WINDOWS, rank_mask

SMART_DROP_MIN_DELAY_MS = 1000
SMART_DROP_MAX_DELAY_MS = 10000


@dataclass
class SmartDropResult:
    is_one_away: bool = False
    target_hand: Optional[HandType] = None
    needed_cards: list[Card] = field(default_factory=list)


def _values_in_mask(mask: int) -> list[int]:
    return [v for v in range(2, 15) if mask & (1 << (v - 2))]


def _find(deck: list[Card], predicate) -> Optional[Card]:
    return next((c for c in deck if predicate(c)), None)


def _one_away_four_of_a_kind(cards: list[Card], deck: list[Card]) -> Optional[Card]:
    for value, count in Counter(c.value for c in cards).items():
        if count == 3:
            return _find(deck, lambda c: c.value == value)
    return None


def _one_away_flush(cards: list[Card], deck: list[Card]) -> Optional[Card]:
    for suit, count in Counter(c.suit for c in cards).items():
        if count == 4:
            return _find(deck, lambda c: c.suit == suit)
    return None


def _one_away_straight(cards: list[Card], deck: list[Card]) -> Optional[Card]:
    mask = rank_mask(cards)
    if len(_values_in_mask(mask)) != 4:
        return None
    # Windows run from the highest straight down, so the high end wins
    for window in STRAIGHT_WINDOWS:
        if (mask & window) != mask:
            continue
        missing = _values_in_mask(window & ~mask)
        if len(missing) == 1:
            card = _find(deck, lambda c: c.value == missing[0])
            if card:
                return card
    return None


def _one_away_full_house(cards: list[Card], deck: list[Card]) -> Optional[Card]:
    counts = Counter(c.value for c in cards)
    trips = [v for v, n in counts.items() if n == 3]
    singles = [v for v, n in counts.items() if n == 1]
    if trips and singles:
        card = _find(deck, lambda c: c.value == singles[0])
        if card:
            return card

    pairs = [v for v, n in counts.items() if n == 2]
    if len(pairs) == 2:
        return _find(deck, lambda c: c.value in pairs)
    return None


ONE_AWAY_CHECKS = [
    (HandType.FOUR_OF_A_KIND, _one_away_four_of_a_kind),
    (HandType.FLUSH, _one_away_flush),
    (HandType.STRAIGHT, _one_away_straight),
    (HandType.FULL_HOUSE, _one_away_full_house),
]


def analyze_one_away_hand(selected: list[Card], deck: list[Card]) -> SmartDropResult:
    """Check whether four selected cards are one card away from a strong hand."""
    if len(selected) != 4:
        return SmartDropResult()

    for hand_type, check in ONE_AWAY_CHECKS:
        card = check(selected, deck)
        if card is not None:
            return SmartDropResult(is_one_away=True, target_hand=hand_type, needed_cards=[card])
    return SmartDropResult()


def get_smart_drop_delay(rng: Optional[random.Random] = None) -> float:
    """Random delay before the smart drop card appears, in milliseconds."""
    rng = rng or random
    return rng.uniform(SMART_DROP_MIN_DELAY_MS, SMART_DROP_MAX_DELAY_MS)
