"""Run history tests"""
from poker_rush.engine.history import RunHistory


def sample_history():
    history = RunHistory(preset_name="ssc", mode="ssc")
    history.add_run_start(strategy="greedy", seed=3)
    history.add_hand_played(1, "One Pair", 111, ["6♥", "6♦", "9♣", "8♠", "2♥"], 54)
    history.add_hand_played(1, "One Pair", 100, ["5♥", "5♦", "9♣", "8♠", "2♥"], 48)
    history.add_hand_played(1, "Flush", 640, ["2♥", "6♥", "9♥", "J♥", "K♥"], 40)
    history.add_level_result(1, "sitting_duck", 851, 500, True, 3, 3, "Flush")
    history.add_level_result(2, "sitting_duck", 480, 525, False, 0, 4, "Two Pair")
    history.add_run_end(final_score=1331, level=2, levels_cleared=1, hands_played=3, victory=False)
    return history


class TestRunHistory:
    """Event log"""

    def test_event_sequence(self):
        history = sample_history()
        assert [e.timestamp for e in history.events] == list(range(len(history.events)))
        assert history.events[0].event_type == "run_start"
        assert history.events[-1].event_type == "run_end"

    def test_close_calls(self):
        close = sample_history().get_close_calls()
        assert len(close) == 1
        assert close[0].level == 2
        assert close[0].data["margin"] == -45

    def test_hand_counts(self):
        assert sample_history().get_hand_counts() == {"One Pair": 2, "Flush": 1}

    def test_summary(self):
        summary = sample_history().to_dict()["summary"]
        assert summary["hands_played"] == 3
        assert summary["levels_attempted"] == 2
        assert summary["levels_cleared"] == 1
        assert summary["final_score"] == 1331
        assert summary["victory"] is False

    def test_save_and_load(self, tmp_path):
        history = sample_history()
        path = tmp_path / "logs" / "run.json"
        history.save(str(path))

        loaded = RunHistory.load(str(path))
        assert loaded.metadata == history.metadata
        assert loaded.events == history.events

        loaded.add_power_up_used(2, "flush", "Flush")
        assert loaded.events[-1].timestamp == len(history.events)
