"""Tests for result export and console output."""

import csv
import json

import numpy as np
import pytest

from duckrace.analysis import MonteCarloRunner
from duckrace.models import SkillKind
from duckrace.output import ConsoleOutput, Exporter, compact_event, compact_result, describe_event
from duckrace.simulation import (
    BombEvent,
    BoostEvent,
    FinishEvent,
    LightningEvent,
    MagnetEvent,
    RaceSimulator,
    SplashEvent,
)


@pytest.fixture
def result(participants):
    return RaceSimulator(rng=np.random.default_rng(17), verbose=False).simulate(participants)


class TestCompactFormat:
    """Test the short-key relay encoding."""

    def test_finish_event(self):
        event = FinishEvent(timestamp=40_000, racer_id="a", finish_time=39_987.6)
        assert compact_event(event) == {"t": 40_000, "id": "a", "ft": 39_987}

    def test_boost_event(self):
        event = BoostEvent(timestamp=3000, racer_id="a", meters=300.0, duration=2500, multiplier=1.3)
        assert compact_event(event) == {"t": 3000, "id": "a", "s": "boost", "d": 2500}

    def test_bomb_event(self):
        hit = BombEvent(
            timestamp=3000, racer_id="a", meters=300.0,
            target_id="b", target_name="Bravo", stun_duration=2400,
        )
        assert compact_event(hit) == {"t": 3000, "id": "a", "s": "bomb", "ta": "Bravo", "sd": 2400}

        miss = BombEvent(
            timestamp=3000, racer_id="a", meters=300.0,
            target_id=None, target_name=None, stun_duration=0,
        )
        assert compact_event(miss) == {"t": 3000, "id": "a", "s": "bomb"}

    def test_splash_and_lightning_counts(self):
        splash = SplashEvent(
            timestamp=1, racer_id="a", meters=0.0, affected_ids=("b", "c"), duration=2100,
        )
        lightning = LightningEvent(
            timestamp=2, racer_id="a", meters=0.0, affected_ids=("b",), stun_duration=1500,
        )
        assert compact_event(splash)["ac"] == 2
        assert compact_event(splash)["d"] == 2100
        assert compact_event(lightning)["sc"] == 1
        assert compact_event(lightning)["sd"] == 1500

    def test_magnet_event(self):
        event = MagnetEvent(
            timestamp=5000, racer_id="d", meters=100.0,
            target_id="a", target_name="Alpha", boost_percent=0.4, duration=3200,
        )
        assert compact_event(event) == {
            "t": 5000, "id": "d", "s": "magnet", "ta": "Alpha", "bp": 0.4, "d": 3200,
        }

    def test_compact_result(self, result):
        data = compact_result(result)

        assert set(data) == {"standings", "events", "progress", "duration"}
        assert len(data["events"]) == len(result.events)
        assert data["progress"][0]["t"] == 0
        for frame in data["progress"]:
            for entry in frame["p"]:
                assert set(entry) == {"i", "mt"}
                assert entry["mt"] == round(entry["mt"], 1)
        assert all(isinstance(s["metersTraveled"], int) for s in data["standings"])


class TestExporter:
    """Test written files."""

    def test_export_all(self, result, tmp_path):
        files = Exporter(output_dir=tmp_path / "out").export_all(result, prefix="demo")

        assert set(files) == {"result_json", "compact_json", "standings_csv", "snapshots_csv"}
        assert all(path.exists() for path in files.values())
        assert files["result_json"].name == "demo_race.json"

    def test_result_json(self, result, tmp_path):
        path = Exporter(tmp_path).export_result_json(result)
        data = json.loads(path.read_text())
        assert data["duration"] == result.duration
        assert [s["id"] for s in data["standings"]] == [s.id for s in result.standings]

    def test_standings_csv(self, result, tmp_path):
        path = Exporter(tmp_path).export_standings_csv(result)
        with open(path, newline="") as f:
            rows = list(csv.DictReader(f))

        assert len(rows) == 4
        assert rows[0]["position"] == "1"
        assert rows[0]["racer_id"] == result.winner.id

    def test_snapshots_csv(self, result, tmp_path):
        path = Exporter(tmp_path).export_snapshots_csv(result)
        lines = path.read_text().splitlines()
        assert lines[0] == "timestamp,racer_id,meters_traveled"
        assert len(lines) == 1 + len(result.snapshots) * 4

    def test_statistics_json(self, participants, tmp_path):
        results = MonteCarloRunner(participants, seed=2).run_quick(num_simulations=5)
        path = Exporter(tmp_path).export_statistics_json(results)
        data = json.loads(path.read_text())

        assert data["metadata"]["num_simulations"] == 5
        assert set(data["participant_statistics"]) == {"a", "b", "c", "d"}
        assert set(data["skill_usage"]) <= {kind.value for kind in SkillKind}


class TestConsoleOutput:
    """Smoke tests for console printing."""

    def test_race_results(self, result, capsys):
        ConsoleOutput.print_race_results(result)
        out = capsys.readouterr().out
        assert "RACE RESULTS" in out
        assert result.winner.name in out

    def test_event_log_limit(self, result, capsys):
        ConsoleOutput.print_event_log(result, limit=3)
        out = capsys.readouterr().out
        assert f"{len(result.events) - 3} more events" in out

    def test_monte_carlo_summary(self, participants, capsys):
        results = MonteCarloRunner(participants, seed=2).run_quick(num_simulations=3)
        ConsoleOutput.print_monte_carlo_summary(results)
        ConsoleOutput.print_participant_deep_dive(results, "a")
        out = capsys.readouterr().out
        assert "WIN PROBABILITIES" in out
        assert "DETAILED ANALYSIS: Alpha" in out

    def test_describe_event(self):
        names = {"a": "Alpha", "b": "Bravo"}
        bomb = BombEvent(
            timestamp=1, racer_id="a", meters=0.0,
            target_id="b", target_name="Bravo", stun_duration=2000,
        )
        assert describe_event(bomb, names) == "Alpha bombed Bravo (stunned 2.0s)"
        finish = FinishEvent(timestamp=40_000, racer_id="b", finish_time=39_950.0)
        assert describe_event(finish, names) == "Bravo finished in 39.950s"
