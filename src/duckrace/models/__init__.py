"""Data models for the race engine."""

from .config import DEFAULT_RACE_CONFIG, RaceConfig
from .effects import Boost, Buff, Debuff, Immune, Magnet, Splash, Stun
from .participant import Participant
from .skills import (
    BombSkill,
    BoostSkill,
    ImmuneSkill,
    LightningSkill,
    MagnetSkill,
    Range,
    SkillConfig,
    SkillKind,
    SplashSkill,
    sample,
)

__all__ = [
    "DEFAULT_RACE_CONFIG",
    "BombSkill",
    "Boost",
    "BoostSkill",
    "Buff",
    "Debuff",
    "Immune",
    "ImmuneSkill",
    "LightningSkill",
    "Magnet",
    "MagnetSkill",
    "Participant",
    "RaceConfig",
    "Range",
    "SkillConfig",
    "SkillKind",
    "Splash",
    "SplashSkill",
    "Stun",
    "sample",
]
