"""
Hand detection for Poker Rush.
Classifies five-card poker hands and computes their points.
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum

from .deck import Card, Suit

HAND_SIZE = 5


class HandType(Enum):
    """Poker hand categories. Lower rank is stronger."""
    ROYAL_FLUSH = ("Royal Flush", 4000, 1)
    STRAIGHT_FLUSH = ("Straight Flush", 2400, 2)
    FOUR_OF_A_KIND = ("Four of a Kind", 1600, 3)
    FULL_HOUSE = ("Full House", 1000, 4)
    FLUSH = ("Flush", 600, 5)
    STRAIGHT = ("Straight", 400, 6)
    THREE_OF_A_KIND = ("Three of a Kind", 240, 7)
    TWO_PAIR = ("Two Pair", 160, 8)
    ONE_PAIR = ("One Pair", 80, 9)
    HIGH_CARD = ("High Card", 20, 10)

    def __init__(self, display_name: str, base_points: int, rank: int):
        self.display_name = display_name
        self.base_points = base_points
        self.rank = rank

    def is_stronger_than(self, other: "HandType") -> bool:
        return self.rank < other.rank

    @classmethod
    def from_name(cls, name: str) -> "HandType":
        """Resolve a display name ('Full House') or enum name ('FULL_HOUSE')."""
        key = name.strip()
        for hand_type in cls:
            if key == hand_type.display_name or key.upper().replace(" ", "_") == hand_type.name:
                return hand_type
        raise ValueError(f"Unknown hand type: {name!r}")

    def __str__(self) -> str:
        return self.display_name


# Strongest first
HAND_TYPES_BY_STRENGTH = sorted(HandType, key=lambda h: h.rank)


def _bit(value: int) -> int:
    return 1 << (value - 2)


def _window(low: int) -> int:
    mask = 0
    for value in range(low, low + 5):
        mask |= _bit(value)
    return mask


# 5-consecutive rank windows over bits 2..14, plus the wheel (A-2-3-4-5)
WHEEL_MASK = _bit(14) | _bit(2) | _bit(3) | _bit(4) | _bit(5)
STRAIGHT_WINDOWS = [_window(low) for low in range(10, 1, -1)] + [WHEEL_MASK]
ROYAL_MASK = _window(10)

COUNT_PATTERNS = {
    (4, 1): HandType.FOUR_OF_A_KIND,
    (3, 2): HandType.FULL_HOUSE,
    (3, 1, 1): HandType.THREE_OF_A_KIND,
    (2, 2, 1): HandType.TWO_PAIR,
    (2, 1, 1, 1): HandType.ONE_PAIR,
    (1, 1, 1, 1, 1): HandType.HIGH_CARD,
}


@dataclass(frozen=True)
class HandResult:
    """Result of hand evaluation."""
    hand_type: HandType
    cards: tuple
    value_bonus: int
    total_points: int

    @property
    def base_points(self) -> int:
        return self.hand_type.base_points


_SUIT_ORDER = {suit: i for i, suit in enumerate(Suit)}


def sort_cards(cards: list[Card]) -> list[Card]:
    """Canonical order: highest value first, ties broken by suit."""
    return sorted(cards, key=lambda c: (-c.value, _SUIT_ORDER[c.suit]))


def rank_mask(cards: list[Card]) -> int:
    """Bitmask with one bit per rank present."""
    mask = 0
    for card in cards:
        mask |= _bit(card.value)
    return mask


def has_straight(mask: int) -> bool:
    return any((mask & window) == window for window in STRAIGHT_WINDOWS)


def classify_hand(cards: list[Card]) -> HandType:
    """Classify exactly five cards. Anything else is treated as High Card."""
    if len(cards) != HAND_SIZE:
        return HandType.HIGH_CARD

    suit_masks = {suit: 0 for suit in Suit}
    for card in cards:
        suit_masks[card.suit] |= _bit(card.value)
    combined = rank_mask(cards)
    counts = tuple(sorted(Counter(c.value for c in cards).values(), reverse=True))

    flush_mask = next((m for m in suit_masks.values() if bin(m).count("1") >= 5), None)
    is_straight = has_straight(combined)

    if flush_mask is not None:
        if (flush_mask & ROYAL_MASK) == ROYAL_MASK:
            return HandType.ROYAL_FLUSH
        if has_straight(flush_mask):
            return HandType.STRAIGHT_FLUSH

    pattern = COUNT_PATTERNS.get(counts, HandType.HIGH_CARD)
    if pattern in (HandType.FOUR_OF_A_KIND, HandType.FULL_HOUSE):
        return pattern
    if flush_mask is not None:
        return HandType.FLUSH
    if is_straight:
        return HandType.STRAIGHT
    return pattern


def evaluate_hand(cards: list[Card]) -> HandResult:
    """
    Evaluate a hand and compute its points.

    Points are the category's base points plus the sum of card values.
    Partial selections are scored as High Card so callers can preview them.
    """
    value_bonus = sum(c.value for c in cards)
    hand_type = classify_hand(cards)
    return HandResult(
        hand_type=hand_type,
        cards=tuple(sort_cards(cards)),
        value_bonus=value_bonus,
        total_points=hand_type.base_points + value_bonus,
    )


def calculate_hand_strength(cards: list[Card]) -> int:
    """Tie-break strength within a category (higher is better)."""
    if len(cards) != HAND_SIZE:
        return 0

    counts = Counter(c.value for c in cards)
    sorted_values = sorted((c.value for c in cards), reverse=True)
    groups = sorted(counts.items(), key=lambda kv: (kv[1], kv[0]), reverse=True)

    strength = 0
    for i, value in enumerate(sorted_values):
        strength += value * 15 ** (4 - i)

    strength += groups[0][0] * 1_000_000
    if len(groups) > 1:
        strength += groups[1][0] * 10_000
    return strength
