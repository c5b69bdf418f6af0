"""Export race results to CSV and JSON."""

import csv
import json
import math
from pathlib import Path
from typing import Any

from duckrace.analysis.montecarlo import SimulationResults
from duckrace.analysis.timeline import snapshots_frame
from duckrace.simulation.events import (
    BombEvent,
    BoostEvent,
    FinishEvent,
    ImmuneEvent,
    LightningEvent,
    MagnetEvent,
    RaceEvent,
    SkillEvent,
    SplashEvent,
)
from duckrace.simulation.race import RaceResult


def compact_event(event: RaceEvent) -> dict[str, Any]:
    """Short-key encoding of one event for bandwidth-sensitive relays.

    Finish events are recognised by the presence of ``ft``. Durations and
    finish times are floored to integer milliseconds.
    """
    data: dict[str, Any] = {"t": event.timestamp, "id": event.racer_id}

    if isinstance(event, FinishEvent):
        data["ft"] = math.floor(event.finish_time)
        return data

    if isinstance(event, SkillEvent):
        data["s"] = event.skill.value

    match event:
        case BoostEvent() | ImmuneEvent():
            data["d"] = event.duration
        case BombEvent():
            if not event.fizzled:
                data["ta"] = event.target_name
                data["sd"] = event.stun_duration
        case SplashEvent():
            data["ac"] = event.affected_count
            data["d"] = event.duration
        case LightningEvent():
            data["sc"] = event.affected_count
            data["sd"] = event.stun_duration
        case MagnetEvent():
            data["ta"] = event.target_name
            data["bp"] = event.boost_percent
            data["d"] = event.duration

    return data


def compact_result(result: RaceResult) -> dict[str, Any]:
    """Short-key encoding of a whole race.

    Snapshot distances are rounded to 0.1 m and standing distances to whole
    meters.
    """
    return {
        "standings": [
            {
                "position": s.position,
                "id": s.id,
                "name": s.name,
                "avatar": s.avatar,
                "color": s.color,
                "metersTraveled": round(s.meters_traveled),
                "finished": s.finished,
                "finishTime": s.finish_time,
            }
            for s in result.standings
        ],
        "events": [compact_event(e) for e in result.events],
        "progress": [
            {
                "t": snapshot.timestamp,
                "p": [{"i": p.racer_id, "mt": round(p.meters_traveled, 1)} for p in snapshot.positions],
            }
            for snapshot in result.snapshots
        ],
        "duration": result.duration,
    }


class Exporter:
    """Exports race results to various formats."""

    def __init__(self, output_dir: str | Path = "output"):
        """Initialize exporter.

        Args:
            output_dir: Directory for output files
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def export_result_json(
        self,
        result: RaceResult,
        filename: str = "race.json",
    ) -> Path:
        """Export a full race result to JSON.

        Args:
            result: Race result
            filename: Output filename

        Returns:
            Path to created file
        """
        filepath = self.output_dir / filename

        with open(filepath, "w") as f:
            json.dump(result.to_dict(), f, indent=2)

        return filepath

    def export_compact_json(
        self,
        result: RaceResult,
        filename: str = "race_compact.json",
    ) -> Path:
        """Export a race in the short-key relay format.

        Args:
            result: Race result
            filename: Output filename

        Returns:
            Path to created file
        """
        filepath = self.output_dir / filename

        with open(filepath, "w") as f:
            json.dump(compact_result(result), f, separators=(",", ":"))

        return filepath

    def export_standings_csv(
        self,
        result: RaceResult,
        filename: str = "standings.csv",
    ) -> Path:
        """Export final standings to CSV.

        Args:
            result: Race result
            filename: Output filename

        Returns:
            Path to created file
        """
        filepath = self.output_dir / filename

        with open(filepath, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow([
                "position", "racer_id", "name", "meters_traveled",
                "finished", "finish_time_ms",
            ])

            for standing in result.standings:
                writer.writerow([
                    standing.position,
                    standing.id,
                    standing.name,
                    f"{standing.meters_traveled:.1f}",
                    standing.finished,
                    f"{standing.finish_time:.3f}" if standing.finish_time is not None else "",
                ])

        return filepath

    def export_snapshots_csv(
        self,
        result: RaceResult,
        filename: str = "snapshots.csv",
    ) -> Path:
        """Export progress snapshots to CSV in long format.

        Args:
            result: Race result
            filename: Output filename

        Returns:
            Path to created file
        """
        filepath = self.output_dir / filename
        snapshots_frame(result).to_csv(filepath, index=False)
        return filepath

    def export_statistics_json(
        self,
        results: SimulationResults,
        filename: str = "statistics.json",
    ) -> Path:
        """Export aggregated Monte Carlo statistics to JSON.

        Args:
            results: Simulation results
            filename: Output filename

        Returns:
            Path to created file
        """
        filepath = self.output_dir / filename

        stats_dict: dict[str, Any] = {
            "metadata": {
                "num_simulations": results.num_simulations,
                "timed_out_races": results.timed_out_races,
                "avg_duration_ms": results.avg_duration,
            },
            "win_probabilities": results.get_win_probabilities(),
            "skill_usage": {
                kind.value: {
                    "uses": uses,
                    "fizzles": results.skill_stats.fizzles.get(kind, 0),
                    "fizzle_rate": results.skill_stats.fizzle_rate(kind),
                }
                for kind, uses in results.skill_stats.uses.items()
            },
            "participant_statistics": {},
        }

        for pid, stats in results.participant_stats.items():
            stats_dict["participant_statistics"][pid] = {
                "name": stats.name,
                "wins": stats.wins,
                "win_rate": stats.win_rate,
                "podiums": stats.podiums,
                "podium_rate": stats.podium_rate,
                "finishes": stats.finishes,
                "finish_rate": stats.finish_rate,
                "avg_position": stats.avg_position,
                "avg_finish_time_ms": stats.avg_finish_time,
                "best_position": stats.best_position,
                "worst_position": stats.worst_position,
                "skills_used": {kind.value: n for kind, n in stats.skills_used.items()},
                "position_distribution": results.get_position_distribution(pid),
            }

        with open(filepath, "w") as f:
            json.dump(stats_dict, f, indent=2)

        return filepath

    def export_all(
        self,
        result: RaceResult,
        prefix: str = "",
    ) -> dict[str, Path]:
        """Export every single-race format.

        Args:
            result: Race result
            prefix: Optional prefix for filenames

        Returns:
            Dictionary of format -> filepath
        """
        prefix = f"{prefix}_" if prefix else ""

        return {
            "result_json": self.export_result_json(result, f"{prefix}race.json"),
            "compact_json": self.export_compact_json(result, f"{prefix}race_compact.json"),
            "standings_csv": self.export_standings_csv(result, f"{prefix}standings.csv"),
            "snapshots_csv": self.export_snapshots_csv(result, f"{prefix}snapshots.csv"),
        }
