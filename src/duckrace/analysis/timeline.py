"""DataFrame views of a race timeline."""

import pandas as pd

from duckrace.simulation.events import FinishEvent, SkillEvent
from duckrace.simulation.race import RaceResult


def snapshots_frame(result: RaceResult) -> pd.DataFrame:
    """Progress snapshots in long format.

    Columns: timestamp, racer_id, meters_traveled.
    """
    rows = [
        {
            "timestamp": snapshot.timestamp,
            "racer_id": progress.racer_id,
            "meters_traveled": progress.meters_traveled,
        }
        for snapshot in result.snapshots
        for progress in snapshot.positions
    ]
    return pd.DataFrame(rows, columns=["timestamp", "racer_id", "meters_traveled"])


def events_frame(result: RaceResult) -> pd.DataFrame:
    """Event log, one row per event.

    Columns: timestamp, racer_id, kind ('finish' or the skill name), fizzled,
    finish_time. Skill payloads stay in the typed events.
    """
    rows = []
    for event in result.events:
        if isinstance(event, FinishEvent):
            rows.append({
                "timestamp": event.timestamp,
                "racer_id": event.racer_id,
                "kind": "finish",
                "fizzled": False,
                "finish_time": event.finish_time,
            })
        elif isinstance(event, SkillEvent):
            rows.append({
                "timestamp": event.timestamp,
                "racer_id": event.racer_id,
                "kind": event.skill.value,
                "fizzled": event.fizzled,
                "finish_time": None,
            })
    return pd.DataFrame(rows, columns=["timestamp", "racer_id", "kind", "fizzled", "finish_time"])


def standings_frame(result: RaceResult) -> pd.DataFrame:
    """Final standings indexed by position."""
    frame = pd.DataFrame(
        [
            {
                "position": s.position,
                "racer_id": s.id,
                "name": s.name,
                "meters_traveled": s.meters_traveled,
                "finished": s.finished,
                "finish_time": s.finish_time,
            }
            for s in result.standings
        ],
        columns=["position", "racer_id", "name", "meters_traveled", "finished", "finish_time"],
    )
    return frame.set_index("position")


def distance_matrix(result: RaceResult) -> pd.DataFrame:
    """Snapshot distances pivoted to one column per racer, indexed by timestamp.

    Columns keep roster order.
    """
    frame = snapshots_frame(result)
    roster = [p.racer_id for p in result.snapshots[0].positions]
    return frame.pivot(index="timestamp", columns="racer_id", values="meters_traveled")[roster]


def skill_usage(result: RaceResult) -> pd.DataFrame:
    """Count of skill uses per racer (rows) and skill (columns)."""
    events = events_frame(result)
    skills = events[events["kind"] != "finish"]
    if skills.empty:
        return pd.DataFrame()
    return pd.crosstab(skills["racer_id"], skills["kind"])
