"""
Scoring engine for Poker Rush.
Applies streak and final-stretch multipliers to evaluated hands, and computes
the end-of-run tallies for Classic and Blitz.
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from .deck import Card
from .hand_detector import HandResult, HandType

CLASSIC_TIME_TARGET = 60
CLASSIC_TIME_BONUS = 1000
LEFTOVER_PENALTY_PER_VALUE = 10
FINAL_STRETCH_SECONDS = 10
FINAL_STRETCH_MULTIPLIER = 2
BONUS_POINTS_PER_SECOND = 10

STREAK_MULTIPLIERS = {0: 1, 1: 1.2, 2: 1.5}
MAX_STREAK_MULTIPLIER = 2


def calculate_time_bonus(elapsed_seconds: int) -> int:
    """Classic mode: +1000 at one minute or under, then -1 per extra second."""
    if elapsed_seconds <= CLASSIC_TIME_TARGET:
        return CLASSIC_TIME_BONUS
    return -(elapsed_seconds - CLASSIC_TIME_TARGET)


def calculate_leftover_penalty(cards: list[Card]) -> int:
    """Penalty for cards never played: ten times their value."""
    return sum(card.value * LEFTOVER_PENALTY_PER_VALUE for card in cards)


def is_final_stretch(time_remaining: int) -> bool:
    return 0 < time_remaining <= FINAL_STRETCH_SECONDS


def get_better_hand_multiplier(streak: int) -> float:
    """Multiplier for a run of consecutive, strictly stronger hands."""
    if streak <= 0:
        return 1
    return STREAK_MULTIPLIERS.get(streak, MAX_STREAK_MULTIPLIER)


def update_streak(previous_hand: Optional[HandType], hand: HandType,
                  streak: int) -> tuple[int, float]:
    """Advance or reset the better-hand streak. Returns (streak, multiplier)."""
    if previous_hand is None or not hand.is_stronger_than(previous_hand):
        return 0, 1
    streak += 1
    return streak, get_better_hand_multiplier(streak)


def calculate_blitz_final_score(raw_score: int, hands_played: int) -> int:
    return raw_score * hands_played


def calculate_bonus_time_points(time_remaining: int) -> int:
    """Bonus rounds pay ten points per second left on the clock."""
    return max(0, time_remaining) * BONUS_POINTS_PER_SECOND


@dataclass
class ClassicTally:
    """End-of-run tally for Classic mode."""
    raw_score: int
    time_bonus: int
    leftover_penalty: int
    final_score: int


def calculate_classic_final_score(raw_score: int, elapsed_seconds: int,
                                  remaining_deck: list[Card]) -> ClassicTally:
    time_bonus = calculate_time_bonus(elapsed_seconds)
    penalty = calculate_leftover_penalty(remaining_deck)
    return ClassicTally(
        raw_score=raw_score,
        time_bonus=time_bonus,
        leftover_penalty=penalty,
        final_score=raw_score + time_bonus - penalty,
    )


@dataclass
class ScoreBreakdown:
    """Detailed breakdown of how a hand's points were calculated."""
    hand_type: HandType
    base_points: int
    value_bonus: int
    streak: int
    streak_multiplier: float
    final_stretch_multiplier: int
    final_points: int
    raw_points: int
    details: list[str] = field(default_factory=list)

    def add_detail(self, msg: str):
        self.details.append(msg)


@dataclass
class ScoringContext:
    """Context passed through the scoring pipeline."""
    result: HandResult
    points: int = 0
    details: list[str] = field(default_factory=list)

    def add_points(self, amount: int, source: str = ""):
        self.points += amount
        if source:
            self.details.append(f"+{amount} ({source})")

    def multiply(self, factor: float, source: str = ""):
        self.points = math.floor(self.points * factor)
        if source:
            self.details.append(f"x{factor} ({source})")


class ScoringEngine:
    """
    Scores submitted hands.

    Points = floor(floor((Base + Card Values) x Streak) x Final Stretch)
    """

    def score_hand(self, result: HandResult, *, timed: bool = False,
                   apply_streak: bool = False, time_remaining: int = 0,
                   previous_hand: Optional[HandType] = None, streak: int = 0,
                   raw_excludes_final_stretch: bool = False) -> ScoreBreakdown:
        """
        Calculate the points for a submitted hand.

        Args:
            result: The evaluated hand
            timed: Whether the mode runs on a countdown (final stretch applies)
            apply_streak: Whether the better-hand streak applies (SSC outside
                bonus rounds)
            time_remaining: Seconds left on the countdown
            previous_hand: Category of the previous submitted hand, if any
            streak: Current better-hand streak
            raw_excludes_final_stretch: Report raw points without the final
                stretch doubling (Blitz multiplies raw score at the end)
        """
        ctx = ScoringContext(result=result)

        # 1. Base points and card values
        ctx.add_points(result.hand_type.base_points, f"{result.hand_type} base")
        ctx.add_points(result.value_bonus, "card values")

        # 2. Better-hand streak
        new_streak, streak_multiplier = 0, 1
        if apply_streak:
            new_streak, streak_multiplier = update_streak(previous_hand, result.hand_type, streak)
            if streak_multiplier != 1:
                ctx.multiply(streak_multiplier, f"better-hand streak {new_streak}")

        # 3. Final stretch doubling
        stretch_multiplier = 1
        if timed and is_final_stretch(time_remaining):
            stretch_multiplier = FINAL_STRETCH_MULTIPLIER
            ctx.multiply(stretch_multiplier, "final stretch")

        raw_points = result.total_points if raw_excludes_final_stretch else ctx.points

        return ScoreBreakdown(
            hand_type=result.hand_type,
            base_points=result.hand_type.base_points,
            value_bonus=result.value_bonus,
            streak=new_streak,
            streak_multiplier=streak_multiplier,
            final_stretch_multiplier=stretch_multiplier,
            final_points=ctx.points,
            raw_points=raw_points,
            details=ctx.details,
        )


def score_breakdown(result: HandResult, **kwargs) -> ScoreBreakdown:
    """Get a detailed score breakdown."""
    engine = ScoringEngine()
    return engine.score_hand(result, **kwargs)


def calculate_score(result: HandResult, **kwargs) -> int:
    """Convenience function to calculate points for a hand."""
    return score_breakdown(result, **kwargs).final_points
