"""
Game sessions for Poker Rush.

A GameSession is an immutable snapshot owned by the caller. Every operation
here takes a session and returns a new one; rejected actions return the
session unchanged. The caller drives the clock by calling tick() once a
second and serializes actions against a single session.
"""

import logging
import random
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from .deck import (
    Card, create_deck, shuffle_deck, create_bonus_friendly_deck,
    remove_cards, recycle_cards, consume_cards,
)
from .hand_detector import HandResult, HandType, evaluate_hand
from .power_ups import RewardTier, get_power_up, get_reward_tier, select_reward_power_up
from .progression import (
    LevelProgress, LevelStatus, Phase, ProgressionConfig,
    calculate_level_goal, get_ssc_level_info,
    record_score, expire_time, advance_level,
    start_bonus_round as progress_start_bonus_round,
    finish_bonus_round as progress_finish_bonus_round,
    skip_bonus_round as progress_skip_bonus_round,
)
from .scoring import (
    ScoreBreakdown, ScoringEngine, is_final_stretch,
    calculate_blitz_final_score, calculate_classic_final_score,
    calculate_bonus_time_points,
)
from .synthesizer import generate_specific_hand

logger = logging.getLogger(__name__)


class GameMode(Enum):
    CLASSIC_FC = "classic_fc"
    CLASSIC_CB = "classic_cb"
    BLITZ_FC = "blitz_fc"
    BLITZ_CB = "blitz_cb"
    SSC = "ssc"

    @property
    def is_classic(self) -> bool:
        return self in (GameMode.CLASSIC_FC, GameMode.CLASSIC_CB)

    @property
    def is_blitz(self) -> bool:
        return self in (GameMode.BLITZ_FC, GameMode.BLITZ_CB)

    @property
    def is_ssc(self) -> bool:
        return self == GameMode.SSC

    @property
    def is_timed(self) -> bool:
        """Runs on a countdown (final stretch applies)."""
        return self.is_blitz or self.is_ssc

    @property
    def recycles(self) -> bool:
        """Submitted cards go back into the deck."""
        return self.is_blitz or self.is_ssc

    @classmethod
    def from_value(cls, value: str) -> "GameMode":
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(f"Unknown game mode: {value!r}. "
                             f"Available: {[m.value for m in cls]}") from None


@dataclass
class GameConfig:
    """Configuration for a game."""
    hand_size: int = 5
    classic_hand_limit: int = 10
    classic_time_limit: int = 600
    timed_round_seconds: int = 60
    bonus_round_seconds: int = 60
    add_time_seconds: int = 15
    pick_gate_ms: int = 50
    progression: ProgressionConfig = field(default_factory=ProgressionConfig)


@dataclass(frozen=True)
class GameSession:
    """Everything a game needs between two actions."""
    mode: GameMode
    config: GameConfig = field(default_factory=GameConfig)

    # Cards
    deck: tuple = ()
    used_cards: tuple = ()
    selected_cards: tuple = ()

    # Score
    score: int = 0
    raw_score: int = 0
    level_score: int = 0
    cumulative_score: int = 0
    hands_played: int = 0
    cards_selected: int = 0
    current_hand: Optional[HandResult] = None
    last_breakdown: Optional[ScoreBreakdown] = None
    hand_results: tuple = ()

    # Clock
    time_elapsed: int = 0
    time_remaining: int = 0
    is_playing: bool = False
    is_paused: bool = False
    is_game_over: bool = False

    # SSC levels
    progress: LevelProgress = LevelProgress()
    level_goal: int = 0
    phase: Phase = Phase.SITTING_DUCK
    round: int = 1
    previous_hand: Optional[HandType] = None
    streak: int = 0
    current_multiplier: float = 1

    # End-of-run tallies
    time_bonus: int = 0
    leftover_penalty: int = 0
    bonus_time_points: int = 0

    # Power-ups
    earned_power_ups: tuple = ()
    active_power_ups: tuple = ()
    pending_reward: Optional[str] = None
    reward_tier: Optional[RewardTier] = None

    # Selection gate (replaces a shared last-pick timestamp)
    last_pick_ms: Optional[int] = None

    @property
    def level(self) -> int:
        return self.progress.level

    @property
    def is_bonus_round(self) -> bool:
        return self.progress.status == LevelStatus.BONUS_ROUND

    @property
    def is_level_complete(self) -> bool:
        return self.progress.status in (LevelStatus.LEVEL_COMPLETE, LevelStatus.BONUS_FAILED)

    @property
    def is_bonus_failed(self) -> bool:
        return self.progress.status == LevelStatus.BONUS_FAILED

    @property
    def pending_bonus_round(self) -> bool:
        return self.progress.pending_bonus_round

    @property
    def in_final_stretch(self) -> bool:
        return self.mode.is_timed and is_final_stretch(self.time_remaining)

    @property
    def accepts_input(self) -> bool:
        return self.is_playing and not self.is_paused and not self.is_game_over


def _remove_one(items: tuple, item) -> tuple:
    if item not in items:
        return items
    index = items.index(item)
    return items[:index] + items[index + 1:]


def start_game(mode: GameMode, config: Optional[GameConfig] = None,
               rng: Optional[random.Random] = None, start_level: int = 1,
               force_bonus: bool = False) -> GameSession:
    """Create a fresh session for a mode."""
    config = config or GameConfig()
    level = start_level if mode.is_ssc else 1

    if force_bonus:
        deck = create_bonus_friendly_deck(1, rng)
        progress = LevelProgress(level=level, status=LevelStatus.BONUS_ROUND,
                                 bonus_round_count=1)
    else:
        deck = shuffle_deck(create_deck(), rng)
        progress = LevelProgress(level=level)

    if mode.is_timed:
        time_remaining = config.bonus_round_seconds if force_bonus else config.timed_round_seconds
    else:
        time_remaining = config.classic_time_limit

    session = GameSession(
        mode=mode,
        config=config,
        deck=tuple(deck),
        is_playing=True,
        time_remaining=time_remaining,
        progress=progress,
    )
    if mode.is_ssc:
        info = get_ssc_level_info(level, config.progression.orbit_start_level,
                                  config.progression.levels_per_phase)
        session = replace(
            session,
            level_goal=calculate_level_goal(level, config.progression),
            phase=info.phase,
            round=info.round,
        )

    logger.debug("Started %s game at level %d", mode.value, level)
    return session


def select_card(session: GameSession, card: Card, now_ms: Optional[int] = None) -> GameSession:
    """Add a card from the deck to the current selection."""
    if not session.accepts_input:
        return session
    if len(session.selected_cards) >= session.config.hand_size:
        return session
    if any(c.id == card.id for c in session.selected_cards):
        return session
    if not any(c.id == card.id for c in session.deck):
        logger.debug("Card %s is not in the deck", card)
        return session
    if (now_ms is not None and session.last_pick_ms is not None
            and now_ms - session.last_pick_ms < session.config.pick_gate_ms):
        return session

    if session.mode.recycles:
        deck, used = remove_cards(list(session.deck), [card]), list(session.used_cards)
    else:
        deck, used = consume_cards(list(session.deck), list(session.used_cards), [card])
    return replace(
        session,
        selected_cards=session.selected_cards + (card,),
        used_cards=tuple(used),
        deck=tuple(deck),
        cards_selected=session.cards_selected + 1,
        last_pick_ms=now_ms if now_ms is not None else session.last_pick_ms,
    )


def deselect_card(session: GameSession, card: Card) -> GameSession:
    """Put a selected card back into the deck."""
    if not session.accepts_input or card not in session.selected_cards:
        return session
    used = session.used_cards if session.mode.recycles else _remove_one(session.used_cards, card)
    return replace(
        session,
        selected_cards=_remove_one(session.selected_cards, card),
        used_cards=used,
        deck=session.deck + (card,),
    )


def submit_hand(session: GameSession, rng: Optional[random.Random] = None) -> GameSession:
    """Score the five selected cards."""
    if not session.accepts_input or len(session.selected_cards) != session.config.hand_size:
        return session
    if session.is_bonus_round:
        return submit_bonus_hand(session, rng)

    mode = session.mode
    result = evaluate_hand(list(session.selected_cards))
    breakdown = ScoringEngine().score_hand(
        result,
        timed=mode.is_timed,
        apply_streak=mode.is_ssc,
        time_remaining=session.time_remaining,
        previous_hand=session.previous_hand,
        streak=session.streak,
        raw_excludes_final_stretch=mode.is_blitz,
    )
    points = breakdown.final_points
    hands_played = session.hands_played + 1
    raw_score = session.raw_score + breakdown.raw_points

    logger.debug("Hand %d: %s for %d points", hands_played, result.hand_type, points)

    if mode.recycles:
        deck = tuple(recycle_cards(list(session.deck), list(session.selected_cards)))
    else:
        deck = session.deck

    session = replace(
        session,
        score=session.score + points,
        raw_score=raw_score,
        level_score=session.level_score + points,
        cumulative_score=session.cumulative_score + points,
        hands_played=hands_played,
        selected_cards=(),
        current_hand=result,
        last_breakdown=breakdown,
        hand_results=session.hand_results + (breakdown,),
        deck=deck,
        previous_hand=result.hand_type,
        streak=breakdown.streak,
        current_multiplier=breakdown.streak_multiplier,
    )

    if mode.is_classic and hands_played >= session.config.classic_hand_limit:
        return _finish_classic(session, session.time_elapsed)

    if mode.is_ssc:
        progress = record_score(session.progress, session.score, session.level_goal,
                                session.config.progression)
        if progress.status == LevelStatus.LEVEL_COMPLETE:
            logger.debug("Level %d complete with %d stars", progress.level, progress.star_rating)
            session = replace(session, progress=progress, is_playing=False)

    return session


def _finish_classic(session: GameSession, elapsed: int) -> GameSession:
    tally = calculate_classic_final_score(session.raw_score, elapsed, list(session.deck))
    logger.debug("Classic game over: %d raw %+d time %d leftover",
                 tally.raw_score, tally.time_bonus, -tally.leftover_penalty)
    return replace(
        session,
        score=tally.final_score,
        time_elapsed=elapsed,
        time_bonus=tally.time_bonus,
        leftover_penalty=tally.leftover_penalty,
        is_game_over=True,
        is_playing=False,
    )


def _finish_blitz(session: GameSession) -> GameSession:
    final_score = calculate_blitz_final_score(session.raw_score, session.hands_played)
    logger.debug("Blitz game over: %d x %d hands = %d",
                 session.raw_score, session.hands_played, final_score)
    return replace(session, score=final_score, is_game_over=True, is_playing=False)


def tick(session: GameSession, seconds: int = 1) -> GameSession:
    """Advance the clock and resolve any time-out."""
    if not session.accepts_input:
        return session

    elapsed = session.time_elapsed + seconds

    if not session.mode.is_timed:
        limit = session.config.classic_time_limit
        if elapsed >= limit:
            return _finish_classic(replace(session, time_remaining=0), limit)
        return replace(session, time_elapsed=elapsed, time_remaining=limit - elapsed)

    remaining = session.time_remaining - seconds
    session = replace(session, time_elapsed=elapsed, time_remaining=max(0, remaining))
    if remaining > 0:
        return session

    if session.mode.is_blitz:
        return _finish_blitz(session)

    progress = expire_time(session.progress, session.score, session.level_goal,
                           session.config.progression)
    if progress.status == LevelStatus.GAME_OVER:
        logger.debug("Level %d failed: %d / %d", progress.level, session.score, session.level_goal)
        return replace(session, progress=progress, is_game_over=True, is_playing=False)
    return replace(session, progress=progress, is_playing=False)


def end_game(session: GameSession) -> GameSession:
    """Quit the run and compute the final score."""
    if session.is_game_over:
        return session
    if session.mode.is_blitz:
        return _finish_blitz(session)
    if session.mode.is_classic:
        return _finish_classic(session, session.time_elapsed)
    progress = replace(session.progress, status=LevelStatus.GAME_OVER)
    return replace(session, progress=progress, is_game_over=True, is_playing=False)


def pause_game(session: GameSession) -> GameSession:
    return replace(session, is_paused=not session.is_paused)


def set_paused(session: GameSession, paused: bool) -> GameSession:
    return replace(session, is_paused=paused)


def reshuffle_deck(session: GameSession, rng: Optional[random.Random] = None) -> GameSession:
    """Shuffle the cards not currently selected."""
    return replace(session, deck=tuple(shuffle_deck(list(session.deck), rng)))


def _level_reset(session: GameSession, deck: list[Card], time_remaining: int) -> GameSession:
    return replace(
        session,
        deck=tuple(deck),
        used_cards=(),
        selected_cards=(),
        score=0,
        raw_score=0,
        level_score=0,
        hands_played=0,
        cards_selected=0,
        current_hand=None,
        last_breakdown=None,
        hand_results=(),
        time_elapsed=0,
        time_remaining=time_remaining,
        time_bonus=0,
        leftover_penalty=0,
        bonus_time_points=0,
        previous_hand=None,
        streak=0,
        current_multiplier=1,
        is_playing=True,
        is_paused=False,
        is_game_over=False,
        last_pick_ms=None,
    )


def next_level(session: GameSession, rng: Optional[random.Random] = None) -> GameSession:
    """Proceed to the next numbered SSC level."""
    if not session.mode.is_ssc:
        return session
    progress = advance_level(session.progress)
    if progress is session.progress:
        return session

    config = session.config
    info = get_ssc_level_info(progress.level, config.progression.orbit_start_level,
                              config.progression.levels_per_phase)
    session = _level_reset(session, shuffle_deck(create_deck(), rng), config.timed_round_seconds)
    logger.debug("Level %d: %s, round %d", progress.level, info.phase.value, info.round)
    return replace(
        session,
        progress=progress,
        level_goal=calculate_level_goal(progress.level, config.progression),
        phase=info.phase,
        round=info.round,
        active_power_ups=session.earned_power_ups,
    )


def start_bonus_round(session: GameSession, rng: Optional[random.Random] = None) -> GameSession:
    """Enter the pending bonus round."""
    progress = progress_start_bonus_round(session.progress)
    if progress is session.progress:
        return session
    deck = create_bonus_friendly_deck(progress.bonus_round_count, rng)
    logger.debug("Bonus round %d after level %d", progress.bonus_round_count, progress.level)
    session = _level_reset(session, deck, session.config.bonus_round_seconds)
    return replace(session, progress=progress, pending_reward=None, reward_tier=None)


def submit_bonus_hand(session: GameSession, rng: Optional[random.Random] = None) -> GameSession:
    """Score the single bonus-round hand and roll its reward."""
    if not session.is_bonus_round or len(session.selected_cards) != session.config.hand_size:
        return session

    result = evaluate_hand(list(session.selected_cards))
    time_points = calculate_bonus_time_points(session.time_remaining)
    total = result.total_points + time_points
    reward = select_reward_power_up(total, rng)

    logger.debug("Bonus hand %s: %d + %d time points", result.hand_type,
                 result.total_points, time_points)
    return replace(
        session,
        score=session.score + total,
        raw_score=session.raw_score + total,
        level_score=session.level_score + total,
        cumulative_score=session.cumulative_score + total,
        hands_played=session.hands_played + 1,
        selected_cards=(),
        current_hand=result,
        bonus_time_points=time_points,
        pending_reward=reward,
        reward_tier=get_reward_tier(total),
        progress=progress_finish_bonus_round(session.progress),
        is_playing=False,
    )


def skip_bonus_round(session: GameSession) -> GameSession:
    progress = progress_skip_bonus_round(session.progress)
    if progress is session.progress:
        return session
    return replace(session, progress=progress, is_playing=False)


def use_power_up(session: GameSession, power_up_id: str,
                 rng: Optional[random.Random] = None) -> GameSession:
    """
    Spend an active power-up.

    Hand power-ups replace the selection with a synthesized hand drawn from
    the deck. If the deck cannot make that hand the session is returned
    unchanged and the power-up is kept.
    """
    power_up = get_power_up(power_up_id)
    if power_up is None or power_up_id not in session.active_power_ups:
        logger.debug("Power-up %s is not available", power_up_id)
        return session
    if not session.accepts_input:
        return session
    if power_up.sitting_duck_only and session.mode.is_ssc and session.phase != Phase.SITTING_DUCK:
        logger.debug("Power-up %s only works on sitting duck levels", power_up_id)
        return session

    active = _remove_one(session.active_power_ups, power_up_id)
    earned = session.earned_power_ups
    if not power_up.is_reusable:
        earned = _remove_one(earned, power_up_id)

    if power_up.id == "reshuffle":
        session = reshuffle_deck(session, rng)
    elif power_up.id == "add_time":
        session = replace(session, time_remaining=session.time_remaining + session.config.add_time_seconds)
    else:
        pool = list(session.deck) + list(session.selected_cards)
        hand = generate_specific_hand(power_up.hand_type, pool, rng)
        if hand is None:
            logger.debug("Could not build %s from %d cards", power_up.hand_type, len(pool))
            return session
        if session.mode.recycles:
            used = session.used_cards
        else:
            used = tuple(c for c in session.used_cards if c not in session.selected_cards) + tuple(hand)
        session = replace(
            session,
            selected_cards=tuple(hand),
            deck=tuple(remove_cards(pool, hand)),
            used_cards=used,
        )

    logger.debug("Used power-up %s", power_up_id)
    return replace(session, active_power_ups=active, earned_power_ups=earned)


def claim_reward(session: GameSession) -> GameSession:
    """Add the pending bonus-round reward to the inventory."""
    if session.pending_reward is None:
        return session
    return replace(
        session,
        earned_power_ups=session.earned_power_ups + (session.pending_reward,),
        active_power_ups=session.active_power_ups + (session.pending_reward,),
        pending_reward=None,
        reward_tier=None,
    )


def discard_reward(session: GameSession) -> GameSession:
    return replace(session, pending_reward=None, reward_tier=None)


def swap_power_up(session: GameSession, discard_id: str) -> GameSession:
    """Replace an owned power-up with the pending reward."""
    if session.pending_reward is None:
        return session
    return replace(
        session,
        earned_power_ups=_remove_one(session.earned_power_ups, discard_id) + (session.pending_reward,),
        active_power_ups=_remove_one(session.active_power_ups, discard_id) + (session.pending_reward,),
        pending_reward=None,
        reward_tier=None,
    )
