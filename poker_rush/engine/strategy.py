"""
Card selection strategies for Poker Rush simulation.
"""

from itertools import combinations
from dataclasses import dataclass
from typing import Optional

from .deck import Card
from .hand_detector import HandType, HandResult, evaluate_hand
from .game import GameSession
from .power_ups import get_power_up
from .progression import Phase

DEFAULT_VISIBLE_CARDS = 10
DEFAULT_SECONDS_PER_HAND = 4


@dataclass
class PlayOption:
    """A possible play with its points."""
    cards: list[Card]
    result: HandResult

    @property
    def hand_type(self) -> HandType:
        return self.result.hand_type

    @property
    def points(self) -> int:
        return self.result.total_points


def evaluate_all_plays(window: list[Card], hand_size: int = 5) -> list[PlayOption]:
    """Every hand_size combination of the window, best first."""
    options = [
        PlayOption(cards=list(cards), result=evaluate_hand(list(cards)))
        for cards in combinations(window, hand_size)
    ]
    options.sort(key=lambda opt: opt.points, reverse=True)
    return options


class BasicStrategy:
    """
    Plays the first five cards it sees.
    Fast, but leaves the hand to chance.
    """

    name = "basic"
    search_seconds = 0

    def __init__(self, visible_cards: int = DEFAULT_VISIBLE_CARDS,
                 seconds_per_hand: int = DEFAULT_SECONDS_PER_HAND):
        self.visible_cards = visible_cards
        self.seconds_per_hand = seconds_per_hand

    def visible_window(self, session: GameSession) -> list[Card]:
        return list(session.deck[:self.visible_cards])

    def decision_seconds(self) -> int:
        """Simulated time to pick and submit one hand."""
        return max(1, self.seconds_per_hand + self.search_seconds)

    def choose_hand(self, session: GameSession) -> list[Card]:
        needed = session.config.hand_size - len(session.selected_cards)
        return self.visible_window(session)[:needed]

    def choose_power_up(self, session: GameSession) -> Optional[str]:
        return None


class GreedyStrategy(BasicStrategy):
    """
    Scans every five-card combination in view and plays the highest scoring.
    Spends power-ups when they beat the best hand on the table.
    """

    name = "greedy"
    search_seconds = 2

    def choose_hand(self, session: GameSession) -> list[Card]:
        if session.selected_cards:
            return BasicStrategy.choose_hand(self, session)
        options = evaluate_all_plays(self.visible_window(session), session.config.hand_size)
        if not options:
            return []
        return self.pick(options, session).cards

    def pick(self, options: list[PlayOption], session: GameSession) -> PlayOption:
        return options[0]

    def choose_power_up(self, session: GameSession) -> Optional[str]:
        if session.selected_cards:
            return None

        active = [get_power_up(p) for p in session.active_power_ups]
        active = [p for p in active if p is not None]
        if not active:
            return None

        goal_missed = session.mode.is_ssc and session.score < session.level_goal
        for p in active:
            if p.id == "add_time" and goal_missed and session.time_remaining <= self.decision_seconds():
                return p.id

        options = evaluate_all_plays(self.visible_window(session), session.config.hand_size)
        best = options[0].hand_type if options else HandType.HIGH_CARD

        hand_ups = [p for p in active if p.hand_type is not None and p.hand_type.is_stronger_than(best)]
        if hand_ups:
            # Strongest first
            return min(hand_ups, key=lambda p: p.hand_type.rank).id

        for p in active:
            if (p.id == "reshuffle" and best == HandType.HIGH_CARD
                    and session.phase == Phase.SITTING_DUCK):
                return p.id
        return None


class StreakStrategy(GreedyStrategy):
    """
    Climbs the better-hand streak: plays the weakest hand that still beats
    the previous one, falling back to the best hand when nothing does.
    """

    name = "streak"

    def pick(self, options: list[PlayOption], session: GameSession) -> PlayOption:
        previous = session.previous_hand
        if previous is None:
            return options[-1]
        climbing = [opt for opt in options if opt.hand_type.is_stronger_than(previous)]
        if not climbing:
            return options[0]
        weakest = max(opt.hand_type.rank for opt in climbing)
        return next(opt for opt in climbing if opt.hand_type.rank == weakest)


STRATEGIES = {
    BasicStrategy.name: BasicStrategy,
    GreedyStrategy.name: GreedyStrategy,
    StreakStrategy.name: StreakStrategy,
}
