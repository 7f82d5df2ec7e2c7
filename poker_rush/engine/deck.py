"""
Deck management for Poker Rush.
Handles card creation, shuffling and the consume/recycle pool operations.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Suit(Enum):
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    @property
    def symbol(self) -> str:
        return SUIT_SYMBOLS[self]


SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}

RANKS = ["A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K"]
RANK_VALUES = {
    "2": 2, "3": 3, "4": 4, "5": 5, "6": 6, "7": 7, "8": 8, "9": 9, "10": 10,
    "J": 11, "Q": 12, "K": 13, "A": 14
}

# Bonus rounds that get a pair-friendly deck, and how many pairs they get
BONUS_FRIENDLY_ROUNDS = 3
BONUS_PAIR_GROUPS = 3


@dataclass(frozen=True)
class Card:
    id: str
    suit: Suit
    rank: str
    value: int

    @classmethod
    def of(cls, rank: str, suit: Suit) -> "Card":
        """Build a card with the canonical id and value."""
        return cls(id=f"{rank}-{suit.value}", suit=suit, rank=rank, value=RANK_VALUES[rank])

    def __str__(self) -> str:
        return f"{self.rank}{self.suit.symbol}"

    def __repr__(self) -> str:
        return self.__str__()


def create_deck() -> list[Card]:
    """Create a standard, unshuffled 52-card deck."""
    cards = []
    for suit in Suit:
        for rank in RANKS:
            cards.append(Card.of(rank, suit))
    return cards


def shuffle_deck(deck: list[Card], rng: Optional[random.Random] = None) -> list[Card]:
    """Return a uniformly shuffled copy of the deck (Fisher-Yates)."""
    rng = rng or random
    shuffled = list(deck)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def create_bonus_friendly_deck(bonus_round_number: int,
                               rng: Optional[random.Random] = None) -> list[Card]:
    """
    Create a deck for a bonus round.

    The first three bonus rounds front-load three same-rank pairs into the
    visible part of the deck so a new player can always build a hand. Later
    rounds get a plain shuffle. The composition is always the full 52 cards.
    """
    if not 1 <= bonus_round_number <= BONUS_FRIENDLY_ROUNDS:
        return shuffle_deck(create_deck(), rng)

    shuffled = shuffle_deck(create_deck(), rng)

    by_value: dict[int, list[Card]] = {}
    for card in shuffled:
        by_value.setdefault(card.value, []).append(card)

    pair_cards = []
    other_cards = []
    pairs_found = 0
    for cards in by_value.values():
        if len(cards) >= 2 and pairs_found < BONUS_PAIR_GROUPS:
            pair_cards.extend(cards[:2])
            other_cards.extend(cards[2:])
            pairs_found += 1
        else:
            other_cards.extend(cards)

    others = shuffle_deck(other_cards, rng)

    visible_count = min(bonus_round_number * 10, 52)
    pair_positions = [0, 2, 4, 6, 8, visible_count - 1][:len(pair_cards)]

    result = []
    pair_index = 0
    other_index = 0
    for i in range(52):
        if i in pair_positions and pair_index < len(pair_cards):
            result.append(pair_cards[pair_index])
            pair_index += 1
        elif other_index < len(others):
            result.append(others[other_index])
            other_index += 1
        elif pair_index < len(pair_cards):
            result.append(pair_cards[pair_index])
            pair_index += 1
    return result


def remove_cards(deck: list[Card], cards: list[Card]) -> list[Card]:
    """Return the deck without the given cards (matched by id)."""
    ids = {c.id for c in cards}
    return [c for c in deck if c.id not in ids]


def recycle_cards(deck: list[Card], cards: list[Card]) -> list[Card]:
    """Return consumed cards to the live pool."""
    return list(deck) + list(cards)


def consume_cards(deck: list[Card], used: list[Card],
                  cards: list[Card]) -> tuple[list[Card], list[Card]]:
    """Move cards out of the deck and into the used pile for good."""
    return remove_cards(deck, cards), list(used) + list(cards)


_SUIT_ALIASES = {
    "h": Suit.HEARTS, "♥": Suit.HEARTS,
    "d": Suit.DIAMONDS, "♦": Suit.DIAMONDS,
    "c": Suit.CLUBS, "♣": Suit.CLUBS,
    "s": Suit.SPADES, "♠": Suit.SPADES,
}


def parse_card(text: str) -> Card:
    """Parse short card notation such as '10h', 'Qs' or 'A♠'."""
    text = text.strip()
    if len(text) < 2:
        raise ValueError(f"Invalid card: {text!r}")
    rank, suit_char = text[:-1].upper(), text[-1].lower()
    if rank == "T":
        rank = "10"
    if rank not in RANK_VALUES or suit_char not in _SUIT_ALIASES:
        raise ValueError(f"Invalid card: {text!r}")
    return Card.of(rank, _SUIT_ALIASES[suit_char])


def parse_cards(text: str) -> list[Card]:
    """Parse a whitespace or comma separated list of cards."""
    return [parse_card(t) for t in text.replace(",", " ").split()]
