"""Simulation engine components."""

from .events import (
    BombEvent,
    BoostEvent,
    FinishEvent,
    ImmuneEvent,
    LightningEvent,
    MagnetEvent,
    ProgressSnapshot,
    RaceEvent,
    RacerProgress,
    SkillEvent,
    SplashEvent,
)
from .playback import TimelinePlayer
from .race import RaceResult, RaceSimulator, Standing, simulate_race, validate_participants
from .racer import Racer, RacerStatus
from .skills import SkillResolver, is_last_place

__all__ = [
    "BombEvent",
    "BoostEvent",
    "FinishEvent",
    "ImmuneEvent",
    "LightningEvent",
    "MagnetEvent",
    "ProgressSnapshot",
    "RaceEvent",
    "RaceResult",
    "RaceSimulator",
    "Racer",
    "RacerProgress",
    "RacerStatus",
    "SkillEvent",
    "SkillResolver",
    "SplashEvent",
    "Standing",
    "TimelinePlayer",
    "is_last_place",
    "simulate_race",
    "validate_participants",
]
