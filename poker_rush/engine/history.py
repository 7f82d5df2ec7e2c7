"""
Run history tracking.
Captures the key events of a simulated run for later review.
"""

from dataclasses import dataclass, asdict
from typing import Optional
import json
from pathlib import Path


@dataclass
class RunEvent:
    """Single event in a run."""
    level: int
    event_type: str  # "run_start", "hand_played", "level_result", "bonus_round", etc.
    data: dict
    timestamp: int = 0  # event sequence number


class RunHistory:
    """Captures the story of a run."""

    def __init__(self, preset_name: str, mode: str):
        self.events: list[RunEvent] = []
        self.metadata = {
            "preset": preset_name,
            "mode": mode,
        }
        self._event_counter = 0

    def add_event(self, level: int, event_type: str, data: dict):
        """Add an event to the history."""
        self.events.append(RunEvent(
            level=level,
            event_type=event_type,
            data=data,
            timestamp=self._event_counter
        ))
        self._event_counter += 1

    def add_run_start(self, strategy: str, seed: Optional[int] = None, start_level: int = 1):
        self.add_event(
            level=start_level,
            event_type="run_start",
            data={
                "strategy": strategy,
                "seed": seed,
            }
        )

    def add_hand_played(self, level: int, hand_type: str, points: int,
                        cards: list[str], time_remaining: int, multiplier: float = 1):
        """Log a submitted hand."""
        self.add_event(
            level=level,
            event_type="hand_played",
            data={
                "hand_type": hand_type,
                "points": points,
                "cards": cards,
                "time_remaining": time_remaining,
                "multiplier": multiplier,
            }
        )

    def add_power_up_used(self, level: int, power_up_id: str, hand_type: str = None):
        self.add_event(
            level=level,
            event_type="power_up_used",
            data={
                "power_up": power_up_id,
                "hand_type": hand_type,
            }
        )

    def add_level_result(self, level: int, phase: str, score: int, goal: int,
                         success: bool, stars: int, hands_used: int,
                         best_hand: str = None):
        """Log the outcome of a numbered level."""
        margin = score - goal
        margin_pct = (margin / goal * 100) if goal > 0 else 0

        self.add_event(
            level=level,
            event_type="level_result",
            data={
                "phase": phase,
                "score": score,
                "goal": goal,
                "success": success,
                "stars": stars,
                "margin": margin,
                "margin_pct": round(margin_pct, 1),
                "hands_used": hands_used,
                "best_hand": best_hand,
                "close_call": abs(margin_pct) < 20,
            }
        )

    def add_bonus_round(self, level: int, bonus_round: int, success: bool,
                        hand_type: str = None, points: int = 0, time_points: int = 0,
                        tier: str = None, reward: str = None):
        """Log a bonus round played (or failed) after a level."""
        self.add_event(
            level=level,
            event_type="bonus_round",
            data={
                "bonus_round": bonus_round,
                "success": success,
                "hand_type": hand_type,
                "points": points,
                "time_points": time_points,
                "tier": tier,
                "reward": reward,
            }
        )

    def add_run_end(self, final_score: int, level: int, levels_cleared: int,
                    hands_played: int, victory: bool, power_ups: list = None):
        self.add_event(
            level=level,
            event_type="run_end",
            data={
                "final_score": final_score,
                "levels_cleared": levels_cleared,
                "hands_played": hands_played,
                "victory": victory,
                "power_ups": power_ups or [],
            }
        )

    def get_close_calls(self) -> list[RunEvent]:
        """Get all close call events."""
        return [e for e in self.events
                if e.event_type == "level_result" and e.data.get("close_call")]

    def get_hand_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for e in self.events:
            if e.event_type == "hand_played":
                name = e.data["hand_type"]
                counts[name] = counts.get(name, 0) + 1
        return counts

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization."""
        return {
            "metadata": self.metadata,
            "events": [asdict(e) for e in self.events],
            "summary": self._generate_summary()
        }

    def _generate_summary(self) -> dict:
        level_results = [e for e in self.events if e.event_type == "level_result"]
        bonus_rounds = [e for e in self.events if e.event_type == "bonus_round"]
        run_end = next((e for e in self.events if e.event_type == "run_end"), None)

        return {
            "hands_played": sum(1 for e in self.events if e.event_type == "hand_played"),
            "levels_attempted": len(level_results),
            "levels_cleared": sum(1 for e in level_results if e.data.get("success")),
            "close_calls": len([e for e in level_results if e.data.get("close_call")]),
            "bonus_rounds": len(bonus_rounds),
            "bonus_rounds_won": sum(1 for e in bonus_rounds if e.data.get("success")),
            "power_ups_used": sum(1 for e in self.events if e.event_type == "power_up_used"),
            "final_score": run_end.data.get("final_score") if run_end else 0,
            "victory": run_end.data.get("victory") if run_end else False
        }

    def save(self, filepath: str):
        """Save run history to JSON."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> 'RunHistory':
        """Load run history from JSON."""
        with open(filepath) as f:
            data = json.load(f)

        history = cls(
            preset_name=data["metadata"]["preset"],
            mode=data["metadata"]["mode"]
        )
        history.metadata = data["metadata"]

        for event_data in data["events"]:
            history.events.append(RunEvent(**event_data))
            history._event_counter = max(history._event_counter, event_data["timestamp"] + 1)

        return history
