#!/usr/bin/env python3
"""Example: Run a batch of duck races from a roster file.

This script demonstrates the full workflow:
1. Load a roster (and optionally a race config) from JSON
2. Run one detailed race or a Monte Carlo batch
3. Display and export results

Usage:
    python examples/simulate_races.py ROSTER [--simulations N] [--config FILE]

Examples:
    python examples/simulate_races.py roster.json --single --seed 7 --export
    python examples/simulate_races.py roster.json --simulations 1000 --no-skills

A roster file is a JSON list of objects with an ``id`` and optional
``name``, ``avatar`` and ``color``.
"""

import argparse
import json
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from duckrace.analysis import MonteCarloRunner
from duckrace.exceptions import DuckRaceError
from duckrace.logging_config import configure_logging, get_logger
from duckrace.models import RaceConfig
from duckrace.output import ConsoleOutput, Exporter
from duckrace.simulation import simulate_race, validate_participants


def load_json(path: str):
    with open(path) as f:
        return json.load(f)


def main():
    parser = argparse.ArgumentParser(description="Simulate duck races")
    parser.add_argument("roster", help="JSON file with the participant list")
    parser.add_argument(
        "--simulations",
        "-n",
        type=int,
        default=100,
        help="Number of simulations (default: 100)",
    )
    parser.add_argument(
        "--single",
        action="store_true",
        help="Run one race and print its event log instead of a batch",
    )
    parser.add_argument("--config", help="JSON file with race configuration overrides")
    parser.add_argument(
        "--no-skills",
        action="store_true",
        help="Disable every skill",
    )
    parser.add_argument("--seed", type=int, help="Random seed (default: random)")
    parser.add_argument(
        "--no-parallel",
        action="store_false",
        dest="parallel",
        help="Disable parallel processing",
    )
    parser.add_argument(
        "--export",
        action="store_true",
        help="Export results to CSV/JSON",
    )
    parser.add_argument(
        "--output-dir",
        default="output",
        help="Output directory for exports (default: output)",
    )
    parser.add_argument(
        "--participant",
        help="Show detailed analysis for a specific participant id",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Log level (default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=["console", "json"],
        default="console",
        help="Log output format (default: console)",
    )
    args = parser.parse_args()

    configure_logging(log_level=args.log_level, log_format=args.log_format)
    logger = get_logger("simulate_races")

    try:
        roster = validate_participants(load_json(args.roster))
        config = RaceConfig.from_dict(load_json(args.config)) if args.config else RaceConfig()
    except (OSError, json.JSONDecodeError, DuckRaceError) as e:
        logger.error("input_rejected", error=str(e))
        return 1

    if args.no_skills:
        config = config.without_skills()

    print("Duck Race Simulation")
    print(f"{'=' * 40}")
    print(f"Racers: {len(roster)}")
    print(f"Distance: {config.distance:.0f}m")
    print(f"Skills: {', '.join(k.value for k in config.enabled_skills) or 'none'}")
    print()

    exporter = Exporter(output_dir=args.output_dir) if args.export else None

    if args.single:
        result = simulate_race(roster, config=config, seed=args.seed)
        ConsoleOutput.print_race_results(result)
        ConsoleOutput.print_event_log(result)

        if exporter:
            files = exporter.export_all(result, prefix="race")
            print("\nExported files:")
            for fmt, path in files.items():
                print(f"  {fmt}: {path}")
        return 0

    print(f"Running {args.simulations} simulations...")
    runner = MonteCarloRunner(participants=roster, config=config, seed=args.seed)
    results = runner.run(num_simulations=args.simulations, parallel=args.parallel)

    ConsoleOutput.print_monte_carlo_summary(results)

    if args.participant:
        ConsoleOutput.print_participant_deep_dive(results, args.participant)

    if exporter:
        path = exporter.export_statistics_json(results, "batch_statistics.json")
        print(f"\nExported statistics: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
