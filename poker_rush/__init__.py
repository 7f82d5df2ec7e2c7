"""
Poker Rush rules engine and simulator
"""

from .engine.deck import Card, Suit, create_deck, shuffle_deck, create_bonus_friendly_deck
from .engine.hand_detector import HandType, HandResult, evaluate_hand
from .engine.synthesizer import generate_specific_hand
from .engine.scoring import (
    ScoringEngine, ScoreBreakdown, calculate_score, score_breakdown,
    calculate_time_bonus, calculate_leftover_penalty, get_better_hand_multiplier,
)
from .engine.progression import (
    calculate_level_goal, get_ssc_level_info, should_trigger_bonus_round, calculate_star_rating,
)
from .engine.game import GameMode, GameConfig, GameSession, start_game

__version__ = "0.1.0"
