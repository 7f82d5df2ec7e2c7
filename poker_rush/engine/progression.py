"""
Level progression for the Sharp Shooter Challenge (SSC) mode.

Numbered levels rotate through card layouts (phases) in blocks of three.
Before the orbit threshold a 9-level cycle is used:

    sitting_duck x3, conveyor x3, falling x3

From the threshold on, a 12-level cycle adds orbit x3. Bonus rounds sit
between numbered levels after every third level and never advance the level
counter.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional

BASE_LEVEL_GOAL = 500
LEVEL_GOAL_GROWTH = 1.05
ORBIT_START_LEVEL = 37
LEVELS_PER_PHASE = 3
BONUS_ROUND_INTERVAL = 3


class Phase(Enum):
    SITTING_DUCK = "sitting_duck"
    CONVEYOR = "conveyor"
    FALLING = "falling"
    ORBIT = "orbit"


CLASSIC_CYCLE = [Phase.SITTING_DUCK, Phase.CONVEYOR, Phase.FALLING]
ORBIT_CYCLE = CLASSIC_CYCLE + [Phase.ORBIT]

# Card speed per phase, before level scaling
PHASE_BASE_SPEED = {
    Phase.SITTING_DUCK: 0,
    Phase.CONVEYOR: 1.2,
    Phase.FALLING: 1.8,
    Phase.ORBIT: 1.5,
}
FIRST_FALLING_SPEED = 1.53
SPEED_SCALING_START = 10


@dataclass
class ProgressionConfig:
    """Tunable numbers for the level-based mode."""
    base_goal: int = BASE_LEVEL_GOAL
    goal_growth: float = LEVEL_GOAL_GROWTH
    orbit_start_level: int = ORBIT_START_LEVEL
    levels_per_phase: int = LEVELS_PER_PHASE
    bonus_round_interval: int = BONUS_ROUND_INTERVAL


@dataclass(frozen=True)
class SSCLevelInfo:
    phase: Phase
    round: int
    difficulty_multiplier: float


def calculate_level_goal(level: int, config: Optional[ProgressionConfig] = None) -> int:
    """Points needed to clear a level: 500, compounding 5% per level."""
    config = config or ProgressionConfig()
    return math.floor(config.base_goal * config.goal_growth ** (level - 1))


def get_ssc_level_info(level: int, orbit_start_level: int = ORBIT_START_LEVEL,
                       levels_per_phase: int = LEVELS_PER_PHASE) -> SSCLevelInfo:
    """Phase and round for a numbered level (not a bonus round)."""
    classic_cycle_length = len(CLASSIC_CYCLE) * levels_per_phase
    orbit_cycle_length = len(ORBIT_CYCLE) * levels_per_phase

    if level < orbit_start_level:
        position = (level - 1) % classic_cycle_length
        phase = CLASSIC_CYCLE[position // levels_per_phase]
        round_number = math.ceil(level / classic_cycle_length)
    else:
        level_in_orbit_era = level - orbit_start_level + 1
        position = (level_in_orbit_era - 1) % orbit_cycle_length
        phase = ORBIT_CYCLE[position // levels_per_phase]
        rounds_before = math.ceil((orbit_start_level - 1) / classic_cycle_length)
        round_number = rounds_before + math.ceil(level_in_orbit_era / orbit_cycle_length)

    return SSCLevelInfo(
        phase=phase,
        round=round_number,
        difficulty_multiplier=1 + (round_number - 1) * 0.1,
    )


def get_ssc_phase(level: int, orbit_start_level: int = ORBIT_START_LEVEL) -> Phase:
    return get_ssc_level_info(level, orbit_start_level).phase


def should_trigger_bonus_round(completed_level: int,
                               interval: int = BONUS_ROUND_INTERVAL) -> bool:
    """A bonus round follows every third completed level."""
    return completed_level > 0 and completed_level % interval == 0


def calculate_star_rating(score: int, goal: int) -> int:
    """0-3 stars for a level result."""
    if score >= goal * 1.5:
        return 3
    if score >= goal * 1.25:
        return 2
    if score >= goal:
        return 1
    return 0


def get_ssc_speed(level: int, orbit_start_level: int = ORBIT_START_LEVEL) -> float:
    """Card movement speed for a level's layout."""
    phase = get_ssc_phase(level, orbit_start_level)
    if phase == Phase.SITTING_DUCK:
        return 0

    base_speed = PHASE_BASE_SPEED[phase]
    if phase == Phase.FALLING and 7 <= level <= 9:
        base_speed = FIRST_FALLING_SPEED

    if level > SPEED_SCALING_START:
        levels_above = level - SPEED_SCALING_START
        per_level = 0.005 if phase == Phase.FALLING else 0.02
        return base_speed * (1 + levels_above * per_level)
    return base_speed


def get_orbit_ring_speed(level: int, ring_index: int, total_rings: int,
                         orbit_start_level: int = ORBIT_START_LEVEL) -> float:
    """Outer orbit rings move up to 50% faster than the innermost."""
    base_speed = get_ssc_speed(level, orbit_start_level)
    return base_speed * (1 + (ring_index / total_rings) * 0.5)


class LevelStatus(Enum):
    PLAYING = auto()
    LEVEL_COMPLETE = auto()
    BONUS_ROUND = auto()
    BONUS_FAILED = auto()
    GAME_OVER = auto()


@dataclass(frozen=True)
class LevelProgress:
    """
    Where a run stands in the level state machine.

    Playing -> LevelComplete (goal reached) or GameOver (time out short of
    the goal). LevelComplete with a pending bonus round -> BonusRound ->
    LevelComplete / BonusFailed. Either of those -> Playing at the next level.
    GameOver is terminal.
    """
    level: int = 1
    status: LevelStatus = LevelStatus.PLAYING
    pending_bonus_round: bool = False
    bonus_round_count: int = 0
    star_rating: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.status == LevelStatus.GAME_OVER


def record_score(progress: LevelProgress, score: int, goal: int,
                 config: Optional[ProgressionConfig] = None) -> LevelProgress:
    """Complete the level once the score reaches the goal."""
    if progress.status != LevelStatus.PLAYING or score < goal:
        return progress
    config = config or ProgressionConfig()
    return replace(
        progress,
        status=LevelStatus.LEVEL_COMPLETE,
        star_rating=calculate_star_rating(score, goal),
        pending_bonus_round=should_trigger_bonus_round(progress.level, config.bonus_round_interval),
    )


def expire_time(progress: LevelProgress, score: int, goal: int,
                config: Optional[ProgressionConfig] = None) -> LevelProgress:
    """Resolve the clock running out."""
    if progress.status == LevelStatus.BONUS_ROUND:
        return replace(progress, status=LevelStatus.BONUS_FAILED)
    if progress.status != LevelStatus.PLAYING:
        return progress
    if score >= goal:
        return record_score(progress, score, goal, config)
    return replace(progress, status=LevelStatus.GAME_OVER)


def start_bonus_round(progress: LevelProgress) -> LevelProgress:
    if progress.status != LevelStatus.LEVEL_COMPLETE or not progress.pending_bonus_round:
        return progress
    return replace(
        progress,
        status=LevelStatus.BONUS_ROUND,
        pending_bonus_round=False,
        bonus_round_count=progress.bonus_round_count + 1,
        star_rating=0,
    )


def finish_bonus_round(progress: LevelProgress) -> LevelProgress:
    if progress.status != LevelStatus.BONUS_ROUND:
        return progress
    return replace(progress, status=LevelStatus.LEVEL_COMPLETE)


def skip_bonus_round(progress: LevelProgress) -> LevelProgress:
    if progress.status == LevelStatus.BONUS_ROUND or (
            progress.status == LevelStatus.LEVEL_COMPLETE and progress.pending_bonus_round):
        return replace(progress, status=LevelStatus.BONUS_FAILED, pending_bonus_round=False)
    return progress


def advance_level(progress: LevelProgress) -> LevelProgress:
    """Move on to the next numbered level."""
    if progress.status not in (LevelStatus.LEVEL_COMPLETE, LevelStatus.BONUS_FAILED):
        return progress
    return LevelProgress(
        level=progress.level + 1,
        status=LevelStatus.PLAYING,
        bonus_round_count=progress.bonus_round_count,
    )
