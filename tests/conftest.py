import random

import pytest

from poker_rush.engine.deck import parse_cards


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def cards():
    """Parse short notation: cards("Ah Kh Qh Jh 10h")."""
    return parse_cards
