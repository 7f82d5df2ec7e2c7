#!/usr/bin/env python3
"""
Compare card selection strategies for Poker Rush simulation.

    python -m poker_rush.compare --preset ssc --runs 50
    python -m poker_rush.compare --preset blitz --detailed greedy --seed 3
"""

import argparse
import logging
import time

from .presets import StrategyType, list_presets
from .simulator import Simulator

STRATEGY_LABELS = {
    StrategyType.BASIC: "Basic (first five)",
    StrategyType.GREEDY: "Greedy (best in view)",
    StrategyType.STREAK: "Streak (climb the ladder)",
}


def compare_strategies(preset: str = "ssc", num_runs: int = 100, seed: int = None,
                       log_dir: str = None) -> dict:
    """Run simulations with each strategy and compare results."""
    sim = Simulator(log_dir=log_dir)

    print("=" * 70)
    print(f"STRATEGY COMPARISON - {preset} ({num_runs} runs each)")
    print("=" * 70)

    results = {}

    for strategy, name in STRATEGY_LABELS.items():
        print(f"\nTesting: {name}...", end=" ", flush=True)

        start_time = time.time()
        batch = sim.run_batch(preset, runs=num_runs, seed=seed, strategy_override=strategy)
        elapsed = time.time() - start_time

        results[name] = {
            "win_rate": batch.win_rate,
            "avg_score": batch.avg_score,
            "max_score": batch.max_score,
            "avg_levels": batch.avg_levels,
            "max_level": batch.max_level,
            "level_dist": batch.level_distribution,
            "time": elapsed,
        }

        print(f"Done ({elapsed:.1f}s)")

    print("\n" + "=" * 70)
    print("RESULTS")
    print("=" * 70)
    print(f"{'Strategy':<30} {'Win %':>8} {'Avg Score':>12} {'Max Score':>11} {'Avg Lvls':>9}")
    print("-" * 70)

    for name, stats in results.items():
        print(f"{name:<30} {stats['win_rate']:>7.1f}% {stats['avg_score']:>12,.0f} "
              f"{stats['max_score']:>11,} {stats['avg_levels']:>9.1f}")

    best_strategy = max(results.keys(), key=lambda k: results[k]['avg_score'])
    dist = results[best_strategy]['level_dist']
    if len(dist) > 1:
        print(f"\n{best_strategy} - Level Distribution:")
        for level in sorted(dist.keys()):
            pct = dist[level] / num_runs * 100
            bar = "█" * int(pct / 2)
            print(f"  Level {level:>2}: {dist[level]:>3} ({pct:>5.1f}%) {bar}")

    return results


def detailed_single_run(preset: str = "ssc", strategy_name: str = "greedy", seed: int = None,
                        log_dir: str = None):
    """Run a single game with detailed output."""
    strategy = StrategyType(strategy_name.lower())
    sim = Simulator(log_dir=log_dir)
    result = sim.run(preset, seed=seed, strategy_override=strategy)

    print("=" * 70)
    print(f"DETAILED RUN - {preset}, {strategy.value} strategy")
    print("=" * 70)

    for level in result.level_history:
        print(f"Level {level.level} - {level.phase}")
        print(f"  Goal:     {level.goal:,}")
        print(f"  Achieved: {level.score:,}")
        print(f"  {'✓ CLEARED' if level.success else '✗ FAILED'} {'*' * level.stars}")
        print(f"  Hands: {level.hands_used}, best: {level.best_hand}")
        print()

    print(result)
    return result


def main(argv=None):
    parser = argparse.ArgumentParser(description="Test Poker Rush strategies")
    parser.add_argument("--preset", default="ssc", choices=list_presets(), help="Preset to simulate")
    parser.add_argument("--runs", type=int, default=100, help="Number of runs per strategy")
    parser.add_argument("--seed", type=int, default=None, help="Base seed for reproducible runs")
    parser.add_argument("--detailed", type=str, choices=[s.value for s in StrategyType],
                        help="Run detailed single game with strategy")
    parser.add_argument("--log-dir", default=None, help="Save each run's history as JSON here")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.detailed:
        detailed_single_run(args.preset, args.detailed, args.seed, args.log_dir)
    else:
        compare_strategies(args.preset, num_runs=args.runs, seed=args.seed, log_dir=args.log_dir)


if __name__ == "__main__":
    main()
