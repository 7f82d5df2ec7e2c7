"""
Hand synthesis for power-ups.
Finds a five-card hand of a requested category inside a card pool.
"""

import logging
import random
from itertools import combinations
from typing import Callable, Optional, Union

from .deck import Card, Suit, shuffle_deck
from .hand_detector import HandType, rank_mask, has_straight, HAND_SIZE

logger = logging.getLogger(__name__)

# Ascending straight windows; the wheel is tried after the regular ones
STRAIGHT_RUNS = [list(range(low, low + 5)) for low in range(2, 11)] + [[14, 2, 3, 4, 5]]
ROYAL_RUN = [10, 11, 12, 13, 14]


def _group_by_value(cards: list[Card]) -> dict[int, list[Card]]:
    groups: dict[int, list[Card]] = {}
    for card in cards:
        groups.setdefault(card.value, []).append(card)
    return groups


def _group_by_suit(cards: list[Card]) -> dict[Suit, list[Card]]:
    groups: dict[Suit, list[Card]] = {}
    for card in cards:
        groups.setdefault(card.suit, []).append(card)
    return groups


def _kickers(cards: list[Card], exclude_values: set, count: int) -> Optional[list[Card]]:
    """Pick `count` cards of distinct values outside `exclude_values`."""
    picked = []
    seen = set(exclude_values)
    for card in cards:
        if card.value in seen:
            continue
        picked.append(card)
        seen.add(card.value)
        if len(picked) == count:
            return picked
    return None


def _one_per_value(groups: list[list[Card]]) -> Optional[list[Card]]:
    """Pick one card from each value group without making a flush."""
    hand = [group[0] for group in groups]
    if len({c.suit for c in hand}) > 1:
        return hand
    suit = hand[0].suit
    for i, group in enumerate(groups):
        other = next((c for c in group if c.suit != suit), None)
        if other is not None:
            return hand[:i] + [other] + hand[i + 1:]
    return None


def _find_royal_flush(cards: list[Card]) -> Optional[list[Card]]:
    for suited in _group_by_suit(cards).values():
        by_value = _group_by_value(suited)
        if all(v in by_value for v in ROYAL_RUN):
            return [by_value[v][0] for v in ROYAL_RUN]
    return None


def _find_straight_flush(cards: list[Card]) -> Optional[list[Card]]:
    runs = [STRAIGHT_RUNS[-1]] + [run for run in STRAIGHT_RUNS[:-1] if run != ROYAL_RUN]
    for suited in _group_by_suit(cards).values():
        if len(suited) < HAND_SIZE:
            continue
        by_value = _group_by_value(suited)
        for run in runs:
            if all(v in by_value for v in run):
                return [by_value[v][0] for v in run]
    return None


def _find_four_of_a_kind(cards: list[Card]) -> Optional[list[Card]]:
    for value, group in _group_by_value(cards).items():
        if len(group) >= 4:
            kicker = _kickers(cards, {value}, 1)
            return group[:4] + kicker if kicker else None
    return None


def _find_full_house(cards: list[Card]) -> Optional[list[Card]]:
    by_value = _group_by_value(cards)
    trips_value = next((v for v, g in by_value.items() if len(g) >= 3), None)
    if trips_value is None:
        return None
    pair_value = next((v for v, g in by_value.items() if v != trips_value and len(g) >= 2), None)
    if pair_value is None:
        return None
    return by_value[trips_value][:3] + by_value[pair_value][:2]


def _find_flush(cards: list[Card]) -> Optional[list[Card]]:
    for suited in _group_by_suit(cards).values():
        if len(suited) < HAND_SIZE:
            continue
        for combo in combinations(suited, HAND_SIZE):
            if not has_straight(rank_mask(list(combo))):
                return list(combo)
    return None


def _find_straight(cards: list[Card]) -> Optional[list[Card]]:
    by_value = _group_by_value(cards)
    for run in STRAIGHT_RUNS:
        if all(v in by_value for v in run):
            hand = _one_per_value([by_value[v] for v in run])
            if hand:
                return hand
    return None


def _find_three_of_a_kind(cards: list[Card]) -> Optional[list[Card]]:
    for value, group in _group_by_value(cards).items():
        if len(group) >= 3:
            kickers = _kickers(cards, {value}, 2)
            if kickers:
                return group[:3] + kickers
    return None


def _find_two_pair(cards: list[Card]) -> Optional[list[Card]]:
    pairs = [(v, g[:2]) for v, g in _group_by_value(cards).items() if len(g) >= 2][:2]
    if len(pairs) < 2:
        return None
    kicker = _kickers(cards, {pairs[0][0], pairs[1][0]}, 1)
    return pairs[0][1] + pairs[1][1] + kicker if kicker else None


def _find_one_pair(cards: list[Card]) -> Optional[list[Card]]:
    for value, group in _group_by_value(cards).items():
        if len(group) >= 2:
            kickers = _kickers(cards, {value}, 3)
            if kickers:
                return group[:2] + kickers
    return None


def _find_high_card(cards: list[Card]) -> Optional[list[Card]]:
    by_value = _group_by_value(cards)
    for values in combinations(list(by_value), HAND_SIZE):
        groups = [by_value[v] for v in values]
        if has_straight(rank_mask([g[0] for g in groups])):
            continue
        hand = _one_per_value(groups)
        if hand:
            return hand
    return None


FINDERS: dict[HandType, Callable[[list[Card]], Optional[list[Card]]]] = {
    HandType.ROYAL_FLUSH: _find_royal_flush,
    HandType.STRAIGHT_FLUSH: _find_straight_flush,
    HandType.FOUR_OF_A_KIND: _find_four_of_a_kind,
    HandType.FULL_HOUSE: _find_full_house,
    HandType.FLUSH: _find_flush,
    HandType.STRAIGHT: _find_straight,
    HandType.THREE_OF_A_KIND: _find_three_of_a_kind,
    HandType.TWO_PAIR: _find_two_pair,
    HandType.ONE_PAIR: _find_one_pair,
    HandType.HIGH_CARD: _find_high_card,
}


def generate_specific_hand(hand_type: Union[HandType, str], pool: list[Card],
                           rng: Optional[random.Random] = None) -> Optional[list[Card]]:
    """
    Build a hand of the requested category from the pool.

    Returns None when the pool cannot make the category. Callers treat that
    as "effect not applied" and keep whatever resource triggered the call.
    """
    if isinstance(hand_type, str):
        try:
            hand_type = HandType.from_name(hand_type)
        except ValueError:
            logger.debug("Unknown hand type requested: %r", hand_type)
            return None

    unique = list({card.id: card for card in pool}.values())
    shuffled = shuffle_deck(unique, rng)
    hand = FINDERS[hand_type](shuffled)

    if hand is None:
        logger.debug("Pool of %d cards cannot make %s", len(unique), hand_type)
    return hand

