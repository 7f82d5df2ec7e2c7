"""
Main API for Poker Rush simulation.
Provides clean interface for running simulations.
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Union

from .engine.game import (
    GameConfig, GameSession, start_game, select_card, submit_hand, tick, end_game,
    use_power_up, next_level, start_bonus_round, claim_reward,
)
from .engine.hand_detector import HandType
from .engine.history import RunHistory
from .engine.power_ups import get_power_up
from .engine.strategy import STRATEGIES, GreedyStrategy
from .presets import Preset, StrategyType, get_preset, list_presets

logger = logging.getLogger(__name__)


@dataclass
class LevelDetail:
    """Details of a single SSC level attempt."""
    level: int
    phase: str
    score: int
    goal: int
    success: bool
    stars: int
    hands_used: int
    best_hand: Optional[str]

    @property
    def margin_pct(self) -> float:
        if self.goal == 0:
            return 0
        return (self.score - self.goal) / self.goal * 100


@dataclass
class RunSummary:
    """Summary of a simulation run."""
    victory: bool
    mode: str
    final_score: int
    hands_played: int
    level_reached: int
    levels_cleared: int
    bonus_rounds: int
    power_ups_used: int
    best_hand: Optional[str]
    hand_counts: dict[str, int]
    preset_used: str
    seed: Optional[int] = None
    level_history: list[LevelDetail] = field(default_factory=list)

    def __str__(self):
        result = "VICTORY!" if self.victory else "GAME OVER"
        lines = [
            f"{'='*50}",
            f"  {result} - {self.preset_used} ({self.mode})",
            f"{'='*50}",
            f"  Final score: {self.final_score:,}",
            f"  Hands played: {self.hands_played}",
            f"  Best hand: {self.best_hand or 'None'}",
        ]
        if self.level_history:
            lines.append(f"  Levels cleared: {self.levels_cleared} (reached {self.level_reached})")
            lines.append(f"  Bonus rounds: {self.bonus_rounds}, power-ups used: {self.power_ups_used}")

        common = sorted(self.hand_counts.items(), key=lambda x: -x[1])[:5]
        if common:
            lines.append(f"  Hands: {', '.join(f'{k}:{v}' for k, v in common)}")

        lines.append(f"{'='*50}")
        return "\n".join(lines)

    def to_dict(self):
        return {
            "victory": self.victory,
            "mode": self.mode,
            "final_score": self.final_score,
            "hands_played": self.hands_played,
            "level_reached": self.level_reached,
            "levels_cleared": self.levels_cleared,
            "bonus_rounds": self.bonus_rounds,
            "power_ups_used": self.power_ups_used,
            "best_hand": self.best_hand,
            "hand_counts": self.hand_counts,
            "preset_used": self.preset_used,
            "seed": self.seed,
        }


@dataclass
class BatchResult:
    """Results from multiple simulation runs."""
    runs: int
    victories: int
    win_rate: float
    avg_score: float
    max_score: int
    min_score: int
    avg_hands: float
    avg_levels: float
    max_level: int
    level_distribution: dict[int, int]
    hand_counts: dict[str, int]
    preset_used: str
    scores: list[int] = field(default_factory=list)

    def __str__(self):
        lines = [
            f"{'='*50}",
            f"  BATCH RESULTS ({self.runs} runs)",
            f"  Preset: {self.preset_used}",
            f"{'='*50}",
            f"  Win rate: {self.victories}/{self.runs} ({self.win_rate:.1f}%)",
            f"  Avg score: {self.avg_score:,.0f} (min {self.min_score:,}, max {self.max_score:,})",
            f"  Avg hands played: {self.avg_hands:.1f}",
        ]

        if len(self.level_distribution) > 1 or self.max_level > 1:
            lines.append(f"  Avg levels cleared: {self.avg_levels:.1f}")
            lines.append(f"  Max level reached: {self.max_level}")
            lines.append("")
            lines.append("  Level distribution:")
            for level in sorted(self.level_distribution.keys()):
                count = self.level_distribution[level]
                pct = count / self.runs * 100
                bar = "█" * int(pct / 2)
                lines.append(f"    Level {level:>2}: {count:>3} ({pct:>5.1f}%) {bar}")

        lines.append(f"{'='*50}")
        return "\n".join(lines)

    def to_dict(self):
        return {
            "runs": self.runs,
            "victories": self.victories,
            "win_rate": self.win_rate,
            "avg_score": self.avg_score,
            "max_score": self.max_score,
            "min_score": self.min_score,
            "avg_hands": self.avg_hands,
            "avg_levels": self.avg_levels,
            "max_level": self.max_level,
            "level_distribution": self.level_distribution,
            "hand_counts": self.hand_counts,
            "preset_used": self.preset_used,
        }


def _best_hand(session: GameSession) -> Optional[HandType]:
    if not session.hand_results:
        return None
    return min((b.hand_type for b in session.hand_results), key=lambda h: h.rank)


class Simulator:
    """
    Main simulator class.

    Usage:
        sim = Simulator()
        result = sim.run("ssc", seed=7)
        print(result)

        # Or run many:
        batch = sim.run_batch("blitz", runs=100)
        print(batch)
    """

    def __init__(self, log_dir: Union[str, Path, None] = None):
        """Optionally save every run's history as JSON under log_dir."""
        self.log_dir = Path(log_dir) if log_dir else None

    def _get_strategy(self, strategy_type: StrategyType, preset: Preset):
        """Get strategy instance from type."""
        cls = STRATEGIES.get(strategy_type.value, GreedyStrategy)
        return cls(visible_cards=preset.visible_cards, seconds_per_hand=preset.seconds_per_hand)

    def _resolve(self, preset: Union[str, Preset]) -> tuple[Preset, str]:
        if isinstance(preset, str):
            p = get_preset(preset)
            if p is None:
                raise ValueError(f"Unknown preset: {preset}. Available: {list_presets()}")
            return p, preset
        return preset, preset.name

    def _play(self, session: GameSession, strategy, history: RunHistory,
              rng: random.Random) -> GameSession:
        """Play hands until the session stops accepting input."""
        while session.accepts_input:
            power_up_id = strategy.choose_power_up(session)
            if power_up_id:
                used = use_power_up(session, power_up_id, rng)
                if used is not session:
                    power_up = get_power_up(power_up_id)
                    history.add_power_up_used(
                        session.level, power_up_id,
                        str(power_up.hand_type) if power_up.hand_type else None,
                    )
                    session = used

            for card in strategy.choose_hand(session):
                session = select_card(session, card)

            session = tick(session, strategy.decision_seconds())
            if not session.accepts_input:
                break

            bonus = session.is_bonus_round
            submitted = submit_hand(session, rng)
            if submitted is session:
                logger.debug("No playable hand left, ending run")
                return end_game(session)
            session = submitted

            if not bonus:
                breakdown = session.last_breakdown
                history.add_hand_played(
                    session.level,
                    str(breakdown.hand_type),
                    breakdown.final_points,
                    [str(c) for c in session.current_hand.cards],
                    session.time_remaining,
                    breakdown.streak_multiplier,
                )
        return session

    def _play_levels(self, session: GameSession, preset: Preset, strategy,
                     history: RunHistory, rng: random.Random,
                     level_history: list[LevelDetail]) -> tuple[GameSession, bool]:
        """Play SSC levels until game over or the preset's last level."""
        while True:
            session = self._play(session, strategy, history, rng)
            level = session.level
            success = not session.is_game_over
            best = _best_hand(session)

            detail = LevelDetail(
                level=level,
                phase=session.phase.value,
                score=session.score,
                goal=session.level_goal,
                success=success,
                stars=session.progress.star_rating,
                hands_used=session.hands_played,
                best_hand=str(best) if best else None,
            )
            level_history.append(detail)
            history.add_level_result(
                level=level, phase=detail.phase, score=detail.score, goal=detail.goal,
                success=success, stars=detail.stars, hands_used=detail.hands_used,
                best_hand=detail.best_hand,
            )
            logger.debug("Level %d %s: %d/%d", level, "cleared" if success else "failed",
                         detail.score, detail.goal)

            if not success:
                return session, False
            if preset.max_levels and level >= preset.max_levels:
                return end_game(session), True

            if session.pending_bonus_round:
                session = start_bonus_round(session, rng)
                bonus_number = session.progress.bonus_round_count
                session = self._play(session, strategy, history, rng)
                hand = session.current_hand if not session.is_bonus_failed else None
                history.add_bonus_round(
                    level=level,
                    bonus_round=bonus_number,
                    success=not session.is_bonus_failed,
                    hand_type=str(hand.hand_type) if hand else None,
                    points=hand.total_points if hand else 0,
                    time_points=session.bonus_time_points,
                    tier=session.reward_tier.name if session.reward_tier else None,
                    reward=session.pending_reward,
                )
                if session.pending_reward:
                    session = claim_reward(session)

            session = next_level(session, rng)

    def run(self, preset: Union[str, Preset] = "ssc", seed: Optional[int] = None,
            strategy_override: Optional[StrategyType] = None) -> RunSummary:
        """
        Run a single simulation.

        Args:
            preset: Preset name (string) or Preset object
            seed: Seed for the run's random generator; same seed, same run
            strategy_override: StrategyType to override preset's default strategy

        Returns:
            RunSummary with results. Victory means clearing the preset's last
            level in SSC, and finishing the run in Classic and Blitz.
        """
        p, preset_name = self._resolve(preset)

        # Build config
        config = GameConfig()
        for key, value in p.config_overrides.items():
            if hasattr(config, key):
                setattr(config, key, value)

        strategy = self._get_strategy(strategy_override or p.strategy, p)
        rng = random.Random(seed)

        history = RunHistory(preset_name=preset_name, mode=p.mode.value)
        history.add_run_start(strategy=strategy.name, seed=seed)

        session = start_game(p.mode, config, rng)
        level_history: list[LevelDetail] = []

        if p.mode.is_ssc:
            session, victory = self._play_levels(session, p, strategy, history, rng, level_history)
            final_score = session.cumulative_score
        else:
            session = self._play(session, strategy, history, rng)
            if not session.is_game_over:
                session = end_game(session)
            final_score = session.score
            victory = session.mode.is_blitz or session.hands_played >= config.classic_hand_limit

        hand_counts = history.get_hand_counts()
        played = [HandType.from_name(name) for name in hand_counts]
        best_hand = min(played, key=lambda h: h.rank) if played else None
        levels_cleared = sum(1 for d in level_history if d.success)
        summary_data = history.to_dict()["summary"]

        history.add_run_end(
            final_score=final_score,
            level=session.level,
            levels_cleared=levels_cleared,
            hands_played=sum(hand_counts.values()),
            victory=victory,
            power_ups=list(session.earned_power_ups),
        )
        logger.debug("Run finished: %s score %d", preset_name, final_score)

        if self.log_dir:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            history.save(str(self.log_dir / f"run_{timestamp}_{preset_name}.json"))

        return RunSummary(
            victory=victory,
            mode=p.mode.value,
            final_score=final_score,
            hands_played=sum(hand_counts.values()),
            level_reached=session.level,
            levels_cleared=levels_cleared,
            bonus_rounds=summary_data["bonus_rounds"],
            power_ups_used=summary_data["power_ups_used"],
            best_hand=str(best_hand) if best_hand else None,
            hand_counts=hand_counts,
            preset_used=preset_name,
            seed=seed,
            level_history=level_history,
        )

    def run_batch(self, preset: Union[str, Preset] = "ssc", runs: int = 100,
                  seed: Optional[int] = None,
                  strategy_override: Optional[StrategyType] = None,
                  on_progress: Optional[Callable[[int, int], None]] = None) -> BatchResult:
        """
        Run multiple simulations and aggregate results.

        Args:
            preset: Preset name or Preset object
            runs: Number of runs
            seed: Base seed; run i uses seed + i
            strategy_override: StrategyType to override preset's default strategy
            on_progress: Called with (runs done, runs) after each run

        Returns:
            BatchResult with aggregated stats
        """
        if runs < 1:
            raise ValueError(f"runs must be at least 1, got {runs}")

        _, preset_name = self._resolve(preset)

        victories = 0
        scores = []
        total_hands = 0
        total_levels = 0
        max_level = 0
        level_distribution: dict[int, int] = {}
        hand_counts: dict[str, int] = {}

        for i in range(runs):
            if (i + 1) % 10 == 0:
                logger.info("Run %d/%d...", i + 1, runs)

            run_seed = seed + i if seed is not None else None
            summary = self.run(preset, seed=run_seed, strategy_override=strategy_override)

            if summary.victory:
                victories += 1
            scores.append(summary.final_score)
            total_hands += summary.hands_played
            total_levels += summary.levels_cleared
            max_level = max(max_level, summary.level_reached)
            level_distribution[summary.level_reached] = level_distribution.get(summary.level_reached, 0) + 1
            for name, count in summary.hand_counts.items():
                hand_counts[name] = hand_counts.get(name, 0) + count

            if on_progress:
                on_progress(i + 1, runs)

        return BatchResult(
            runs=runs,
            victories=victories,
            win_rate=victories / runs * 100,
            avg_score=sum(scores) / runs,
            max_score=max(scores),
            min_score=min(scores),
            avg_hands=total_hands / runs,
            avg_levels=total_levels / runs,
            max_level=max_level,
            level_distribution=level_distribution,
            hand_counts=hand_counts,
            preset_used=preset_name,
            scores=scores,
        )


# Convenience functions
def run(preset: str = "ssc", seed: Optional[int] = None) -> RunSummary:
    """Quick run with default simulator."""
    sim = Simulator()
    return sim.run(preset, seed)


def run_batch(preset: str = "ssc", runs: int = 100, seed: Optional[int] = None) -> BatchResult:
    """Quick batch run with default simulator."""
    sim = Simulator()
    return sim.run_batch(preset, runs, seed)
