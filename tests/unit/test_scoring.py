"""Scoring tests"""
import pytest

from poker_rush.engine.deck import create_deck
from poker_rush.engine.hand_detector import HandType, evaluate_hand
from poker_rush.engine.scoring import (
    ScoringEngine, calculate_score, score_breakdown,
    calculate_time_bonus, calculate_leftover_penalty, get_better_hand_multiplier,
    update_streak, is_final_stretch, calculate_blitz_final_score,
    calculate_classic_final_score, calculate_bonus_time_points,
)


class TestTimeBonus:
    """Classic time bonus"""

    def test_under_a_minute(self):
        assert calculate_time_bonus(45) == 1000
        assert calculate_time_bonus(60) == 1000

    def test_over_a_minute(self):
        assert calculate_time_bonus(61) == -1
        assert calculate_time_bonus(75) == -15


class TestLeftoverPenalty:
    """Cards never played"""

    def test_empty(self):
        assert calculate_leftover_penalty([]) == 0

    def test_values(self, cards):
        assert calculate_leftover_penalty(cards("Ah 2d")) == 160

    def test_full_deck(self):
        assert calculate_leftover_penalty(create_deck()) == 4 * sum(range(2, 15)) * 10


class TestStreak:
    """Better-hand streak"""

    def test_multipliers(self):
        assert get_better_hand_multiplier(0) == 1
        assert get_better_hand_multiplier(1) == 1.2
        assert get_better_hand_multiplier(2) == 1.5
        assert get_better_hand_multiplier(3) == 2
        assert get_better_hand_multiplier(9) == 2

    def test_first_hand_starts_nothing(self):
        assert update_streak(None, HandType.ONE_PAIR, 0) == (0, 1)

    def test_stronger_hand_extends(self):
        assert update_streak(HandType.ONE_PAIR, HandType.TWO_PAIR, 0) == (1, 1.2)
        assert update_streak(HandType.TWO_PAIR, HandType.FLUSH, 1) == (2, 1.5)

    def test_equal_or_weaker_resets(self):
        assert update_streak(HandType.TWO_PAIR, HandType.TWO_PAIR, 2) == (0, 1)
        assert update_streak(HandType.FLUSH, HandType.ONE_PAIR, 2) == (0, 1)


class TestFinalStretch:
    """Last ten seconds"""

    @pytest.mark.parametrize("remaining,expected", [(11, False), (10, True), (1, True), (0, False)])
    def test_window(self, remaining, expected):
        assert is_final_stretch(remaining) == expected


class TestScoringEngine:
    """Per-hand points"""

    def test_plain_hand(self, cards):
        result = evaluate_hand(cards("10h Jh Qh Kh Ah"))
        assert calculate_score(result) == 4060

    def test_final_stretch_doubles(self, cards):
        result = evaluate_hand(cards("5h 5d 8c 9s Kh"))
        breakdown = score_breakdown(result, timed=True, time_remaining=5)
        assert breakdown.final_stretch_multiplier == 2
        assert breakdown.final_points == (80 + 40) * 2

    def test_untimed_ignores_clock(self, cards):
        result = evaluate_hand(cards("5h 5d 8c 9s Kh"))
        assert calculate_score(result, timed=False, time_remaining=5) == 120

    def test_first_hand_has_no_streak(self, cards):
        breakdown = ScoringEngine().score_hand(
            evaluate_hand(cards("2h 5d 8c 9s Kh")), timed=True, apply_streak=True,
            time_remaining=30, previous_hand=None, streak=0,
        )
        assert breakdown.streak == 0
        assert breakdown.final_points == 57

    def test_streak_then_stretch_floors(self, cards):
        # 111 * 1.2 = 133.2 -> 133, then doubled
        result = evaluate_hand(cards("6h 6d 8c 9s 2h"))
        assert result.total_points == 111
        breakdown = ScoringEngine().score_hand(
            result, timed=True, apply_streak=True,
            time_remaining=8, previous_hand=HandType.HIGH_CARD, streak=0,
        )
        assert breakdown.streak == 1
        assert breakdown.streak_multiplier == 1.2
        assert breakdown.final_points == 266

    def test_raw_excludes_final_stretch(self, cards):
        result = evaluate_hand(cards("5h 5d 8c 9s Kh"))
        breakdown = score_breakdown(result, timed=True, time_remaining=3, raw_excludes_final_stretch=True)
        assert breakdown.raw_points == 120
        assert breakdown.final_points == 240

    def test_details_recorded(self, cards):
        breakdown = score_breakdown(evaluate_hand(cards("5h 5d 8c 9s Kh")), timed=True, time_remaining=3)
        assert any("final stretch" in d for d in breakdown.details)


class TestFinalScores:
    """End-of-run tallies"""

    def test_blitz(self):
        assert calculate_blitz_final_score(1200, 7) == 8400

    def test_classic(self, cards):
        tally = calculate_classic_final_score(2000, 75, cards("2h 3h"))
        assert tally.time_bonus == -15
        assert tally.leftover_penalty == 50
        assert tally.final_score == 2000 - 15 - 50

    def test_bonus_time_points(self):
        assert calculate_bonus_time_points(42) == 420
        assert calculate_bonus_time_points(-3) == 0
