"""Simulator, strategy and CLI tests"""
import json

import pytest

from poker_rush.compare import main
from poker_rush.engine.game import GameMode, start_game
from poker_rush.engine.hand_detector import HandType, evaluate_hand
from poker_rush.engine.strategy import (
    STRATEGIES, BasicStrategy, GreedyStrategy, StreakStrategy, evaluate_all_plays,
)
from poker_rush.presets import Preset, StrategyType, get_preset, get_preset_info, list_presets
from poker_rush.simulator import Simulator


class TestStrategies:
    """Card choice"""

    def test_basic_takes_first_five(self, rng):
        session = start_game(GameMode.BLITZ_FC, rng=rng)
        assert BasicStrategy().choose_hand(session) == list(session.deck[:5])

    def test_greedy_plays_best_in_view(self, rng):
        session = start_game(GameMode.BLITZ_FC, rng=rng)
        strategy = GreedyStrategy(visible_cards=8)
        chosen = evaluate_hand(strategy.choose_hand(session))
        best = max(opt.points for opt in evaluate_all_plays(list(session.deck[:8])))
        assert chosen.total_points == best

    def test_streak_climbs(self, rng, cards):
        from dataclasses import replace
        session = replace(start_game(GameMode.SSC, rng=rng),
                          deck=tuple(cards("Ah Ad Kc Ks Qh 2c 7d")),
                          previous_hand=HandType.HIGH_CARD)
        hand = StreakStrategy().choose_hand(session)
        assert evaluate_hand(hand).hand_type == HandType.ONE_PAIR

    def test_greedy_spends_stronger_power_up(self, rng):
        from dataclasses import replace
        session = replace(start_game(GameMode.SSC, rng=rng),
                          active_power_ups=("royal_flush",), earned_power_ups=("royal_flush",))
        assert GreedyStrategy().choose_power_up(session) == "royal_flush"
        assert BasicStrategy().choose_power_up(session) is None

    def test_decision_time(self):
        assert BasicStrategy(seconds_per_hand=3).decision_seconds() == 3
        assert GreedyStrategy(seconds_per_hand=3).decision_seconds() == 5
        assert BasicStrategy(seconds_per_hand=0).decision_seconds() == 1


class TestPresets:
    """Preset lookup"""

    def test_lookup(self):
        assert get_preset("SSC").mode == GameMode.SSC
        assert get_preset("Blitz Speed").strategy == StrategyType.BASIC
        assert get_preset("nope") is None
        assert "classic" in list_presets()

    def test_info(self):
        info = get_preset_info("ssc")
        assert info["name"] == "Sharp Shooter"
        assert info["mode"] == "ssc"
        assert info["strategy"] == "greedy"
        assert info["max_levels"] == 50
        assert info["is_ssc"] is True
        assert get_preset_info("classic")["is_ssc"] is False
        assert get_preset_info("nope") is None

    def test_every_strategy_type_has_a_class(self):
        assert set(STRATEGIES) == {s.value for s in StrategyType}


class TestSimulator:
    """Full runs"""

    @pytest.mark.parametrize("preset", ["classic", "classic_casual", "blitz", "blitz_speed"])
    def test_non_level_modes(self, preset):
        summary = Simulator().run(preset, seed=11)
        assert summary.victory
        assert summary.hands_played > 0
        assert summary.level_history == []

    def test_classic_plays_ten_hands(self):
        summary = Simulator().run("classic", seed=2)
        assert summary.hands_played == 10

    def test_ssc_run(self):
        summary = Simulator().run("ssc", seed=5)
        assert summary.level_history
        assert summary.levels_cleared == sum(1 for d in summary.level_history if d.success)
        assert [d.level for d in summary.level_history] == list(range(1, len(summary.level_history) + 1))
        assert summary.final_score > 0

    def test_seeded_runs_repeat(self):
        sim = Simulator()
        assert sim.run("ssc_streak", seed=9).to_dict() == sim.run("ssc_streak", seed=9).to_dict()

    def test_max_levels_victory(self):
        preset = Preset(name="Short", description="two levels", mode=GameMode.SSC,
                        strategy=StrategyType.GREEDY, max_levels=2)
        summary = Simulator().run(preset, seed=1)
        if summary.levels_cleared == 2:
            assert summary.victory
        assert len(summary.level_history) <= 2

    def test_strategy_follows_preset(self):
        preset = get_preset("blitz_speed")
        strategy = Simulator()._get_strategy(StrategyType.STREAK, preset)
        assert isinstance(strategy, StreakStrategy)
        assert strategy.visible_cards == preset.visible_cards
        assert strategy.seconds_per_hand == preset.seconds_per_hand

    def test_unknown_preset(self):
        with pytest.raises(ValueError):
            Simulator().run("poker_night")

    def test_batch(self):
        batch = Simulator().run_batch("blitz", runs=5, seed=100)
        assert batch.runs == 5
        assert len(batch.scores) == 5
        assert batch.min_score <= batch.avg_score <= batch.max_score
        assert "BATCH RESULTS" in str(batch)

    def test_batch_progress(self):
        seen = []
        Simulator().run_batch("classic", runs=3, seed=0, on_progress=lambda done, total: seen.append(done))
        assert seen == [1, 2, 3]

    def test_batch_needs_runs(self):
        with pytest.raises(ValueError):
            Simulator().run_batch("blitz", runs=0)

    def test_log_dir(self, tmp_path):
        Simulator(log_dir=tmp_path).run("blitz", seed=4)
        files = list(tmp_path.glob("run_*_blitz.json"))
        assert len(files) == 1
        data = json.loads(files[0].read_text())
        assert data["metadata"]["mode"] == "blitz_fc"
        assert data["events"][-1]["event_type"] == "run_end"


class TestCompareCli:
    """Command line"""

    def test_detailed_run(self, capsys):
        main(["--preset", "blitz", "--detailed", "greedy", "--seed", "1"])
        assert "DETAILED RUN" in capsys.readouterr().out

    def test_comparison(self, capsys):
        main(["--preset", "classic", "--runs", "2", "--seed", "1"])
        out = capsys.readouterr().out
        assert "STRATEGY COMPARISON" in out
        assert "Greedy" in out
