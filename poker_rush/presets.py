"""
Preset configurations for Poker Rush simulation.
Allows easy setup of different modes, playstyles and rule tweaks.
"""

from dataclasses import dataclass, field
from typing import Optional
from enum import Enum

from .engine.game import GameMode


class StrategyType(Enum):
    BASIC = "basic"
    GREEDY = "greedy"
    STREAK = "streak"


@dataclass
class Preset:
    """A complete preset configuration for a run."""
    name: str
    description: str
    mode: GameMode = GameMode.SSC
    strategy: StrategyType = StrategyType.GREEDY
    visible_cards: int = 10
    seconds_per_hand: int = 4
    config_overrides: dict = field(default_factory=dict)
    max_levels: Optional[int] = None  # SSC only; None plays until game over


# Built-in presets
PRESETS = {
    "classic": Preset(
        name="Classic",
        description="Ten hands from one deck, fastest finish wins the time bonus",
        mode=GameMode.CLASSIC_FC,
        strategy=StrategyType.GREEDY,
    ),

    "classic_casual": Preset(
        name="Classic Casual",
        description="Classic with a player who grabs the first five cards",
        mode=GameMode.CLASSIC_CB,
        strategy=StrategyType.BASIC,
        seconds_per_hand=8,
    ),

    "blitz": Preset(
        name="Blitz",
        description="Sixty seconds of recycled cards, raw score times hands",
        mode=GameMode.BLITZ_FC,
        strategy=StrategyType.GREEDY,
        seconds_per_hand=3,
    ),

    "blitz_speed": Preset(
        name="Blitz Speed",
        description="Blitz played as fast as possible without looking",
        mode=GameMode.BLITZ_CB,
        strategy=StrategyType.BASIC,
        seconds_per_hand=1,
    ),

    "ssc": Preset(
        name="Sharp Shooter",
        description="Level-based challenge with bonus rounds and power-ups",
        mode=GameMode.SSC,
        strategy=StrategyType.GREEDY,
        max_levels=50,
    ),

    "ssc_streak": Preset(
        name="Streak Climber",
        description="Sharp Shooter playing for the better-hand multiplier",
        mode=GameMode.SSC,
        strategy=StrategyType.STREAK,
        max_levels=50,
    ),

    "ssc_wide": Preset(
        name="Wide View",
        description="Sharp Shooter seeing the whole table at a slower pace",
        mode=GameMode.SSC,
        strategy=StrategyType.GREEDY,
        visible_cards=15,
        seconds_per_hand=6,
        max_levels=50,
    ),

    "ssc_short_clock": Preset(
        name="Short Clock",
        description="Sharp Shooter with forty-second levels",
        mode=GameMode.SSC,
        strategy=StrategyType.GREEDY,
        config_overrides={"timed_round_seconds": 40},
        max_levels=50,
    ),
}


def get_preset(name: str) -> Optional[Preset]:
    """Get a preset by name."""
    return PRESETS.get(name.lower().replace(" ", "_"))


def list_presets() -> list[str]:
    """List all available preset names."""
    return list(PRESETS.keys())


def get_preset_info(name: str) -> Optional[dict]:
    """Get info about a preset."""
    preset = get_preset(name)
    if preset:
        return {
            "name": preset.name,
            "description": preset.description,
            "mode": preset.mode.value,
            "strategy": preset.strategy.value,
            "visible_cards": preset.visible_cards,
            "seconds_per_hand": preset.seconds_per_hand,
            "max_levels": preset.max_levels,
            "is_ssc": preset.mode.is_ssc,
        }
    return None
