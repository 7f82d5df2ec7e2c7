"""
Power-ups and bonus-round rewards.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .hand_detector import HandType


class RewardTier(Enum):
    BRONZE = 1
    SILVER = 2
    GOLD = 3


GOLD_THRESHOLD = 1200    # strictly above
SILVER_THRESHOLD = 500   # at or above


@dataclass(frozen=True)
class PowerUp:
    id: str
    name: str
    hand_type: Optional[HandType]   # None for utility power-ups
    unlocked_at_level: int
    tier: RewardTier
    is_reusable: bool = False
    sitting_duck_only: bool = False


POWER_UPS = {
    p.id: p for p in [
        PowerUp("reshuffle", "Reshuffle", None, 1, RewardTier.BRONZE, sitting_duck_only=True),
        PowerUp("two_pair", "Two Pair", HandType.TWO_PAIR, 3, RewardTier.BRONZE),
        PowerUp("three_kind", "Three of a Kind", HandType.THREE_OF_A_KIND, 7, RewardTier.BRONZE),
        PowerUp("straight", "Straight", HandType.STRAIGHT, 10, RewardTier.SILVER),
        PowerUp("add_time", "Add Time", None, 11, RewardTier.BRONZE, is_reusable=True),
        PowerUp("flush", "Flush", HandType.FLUSH, 15, RewardTier.SILVER),
        PowerUp("full_house", "Full House", HandType.FULL_HOUSE, 20, RewardTier.SILVER),
        PowerUp("four_kind", "Four of a Kind", HandType.FOUR_OF_A_KIND, 25, RewardTier.GOLD),
        PowerUp("straight_flush", "Straight Flush", HandType.STRAIGHT_FLUSH, 30, RewardTier.GOLD),
        PowerUp("royal_flush", "Royal Flush", HandType.ROYAL_FLUSH, 35, RewardTier.GOLD),
    ]
}


def get_power_up(power_up_id: str) -> Optional[PowerUp]:
    return POWER_UPS.get(power_up_id)


def get_reward_tier(points: int) -> RewardTier:
    """Tier earned by a bonus-round hand."""
    if points > GOLD_THRESHOLD:
        return RewardTier.GOLD
    if points >= SILVER_THRESHOLD:
        return RewardTier.SILVER
    return RewardTier.BRONZE


def get_power_ups_for_tier(tier: RewardTier) -> list[str]:
    return [p.id for p in POWER_UPS.values() if p.tier == tier]


def select_reward_power_up(points: int, rng: Optional[random.Random] = None) -> Optional[str]:
    """Pick a random power-up from the tier the points earned."""
    rng = rng or random
    available = get_power_ups_for_tier(get_reward_tier(points))
    if not available:
        return None
    return available[rng.randrange(len(available))]


def get_unlocked_power_ups(level: int) -> list[str]:
    """Power-ups available from a given SSC level."""
    return [p.id for p in POWER_UPS.values() if p.unlocked_at_level <= level]
