#!/usr/bin/env python3
"""Quick race example with a synthetic roster.

Runs one seeded race with full console output, replays the first seconds
through the timeline player, then a small Monte Carlo batch.

Usage:
    python examples/quick_race.py
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np

from duckrace.analysis import MonteCarloRunner, distance_matrix, skill_usage
from duckrace.logging_config import configure_logging
from duckrace.models import Participant
from duckrace.output import ConsoleOutput, Exporter
from duckrace.simulation import RaceSimulator, TimelinePlayer


def create_roster() -> list[Participant]:
    """A small roster; two ducks rely on the 'Duck {n}' fallback name."""
    ducks = [
        ("quackers", "Quackers", "#f4c542"),
        ("waddles", "Sir Waddles", "#4287f5"),
        ("puddle", "Puddle Jumper", "#42f58d"),
        ("feathers", "Feathers", "#f54242"),
        ("anon-1", None, None),
        ("anon-2", None, None),
    ]
    return [Participant(id=pid, name=name, color=color) for pid, name, color in ducks]


def main():
    configure_logging(log_level="INFO")

    print("Duck Race - Quick Example")
    print("=" * 50)

    roster = create_roster()
    print(f"Racers: {len(roster)}")
    print()

    simulator = RaceSimulator(rng=np.random.default_rng(42))
    result = simulator.simulate(roster)

    ConsoleOutput.print_race_results(result)
    ConsoleOutput.print_event_log(result, limit=25)

    # Replay the first ten seconds the way a client would
    print("\nPLAYBACK (first 10s):")
    player = TimelinePlayer(result)
    for elapsed in range(2000, 10001, 2000):
        player.advance(elapsed)
        leader_id, leader_meters = max(player.positions().items(), key=lambda kv: kv[1])
        print(f"  {elapsed / 1000:4.1f}s leader={leader_id:<10} {leader_meters:7.1f}m")

    print("\nSKILL USAGE PER RACER:")
    print(skill_usage(result).to_string())

    print("\nDISTANCES (every 10s):")
    print(distance_matrix(result).iloc[::20].round(1).to_string())

    print("\n" + "=" * 50)
    print("Running Monte Carlo simulation (200 races)...")
    print("=" * 50)

    runner = MonteCarloRunner(participants=roster, seed=123)
    results = runner.run_quick(num_simulations=200)

    ConsoleOutput.print_monte_carlo_summary(results)
    ConsoleOutput.print_participant_deep_dive(results, "quackers")

    print("\nExporting results...")
    exporter = Exporter(output_dir="output")
    files = exporter.export_all(result, prefix="quick")
    files["statistics_json"] = exporter.export_statistics_json(results, "quick_statistics.json")
    for fmt, path in files.items():
        print(f"  {fmt}: {path}")

    print("\nDone!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
