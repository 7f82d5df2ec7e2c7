"""
Poker Rush rules engine components.
"""

from .deck import Card, Suit, RANKS, RANK_VALUES, create_deck, shuffle_deck, create_bonus_friendly_deck, parse_card, parse_cards
from .hand_detector import HandType, HandResult, evaluate_hand, classify_hand, calculate_hand_strength
from .synthesizer import generate_specific_hand
from .scoring import (
    ScoringEngine, ScoringContext, ScoreBreakdown, calculate_score, score_breakdown,
    calculate_time_bonus, calculate_leftover_penalty, get_better_hand_multiplier,
    calculate_classic_final_score, calculate_blitz_final_score,
)
from .progression import (
    Phase, SSCLevelInfo, LevelStatus, LevelProgress, ProgressionConfig,
    calculate_level_goal, get_ssc_level_info, should_trigger_bonus_round, calculate_star_rating,
)
from .power_ups import PowerUp, RewardTier, POWER_UPS, get_reward_tier, select_reward_power_up
from .smart_drop import SmartDropResult, analyze_one_away_hand
from .game import GameMode, GameConfig, GameSession, start_game, select_card, submit_hand, tick
