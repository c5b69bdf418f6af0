"""Skill tunables: kinds, randomized ranges and per-skill parameters."""

from enum import Enum

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator


class SkillKind(str, Enum):
    """Skills a racer can use."""

    BOOST = "boost"
    BOMB = "bomb"
    SPLASH = "splash"
    IMMUNE = "immune"
    LIGHTNING = "lightning"
    MAGNET = "magnet"

    @property
    def last_place_only(self) -> bool:
        """Whether only the last unfinished racer may use this skill."""
        return self in (SkillKind.LIGHTNING, SkillKind.MAGNET)


class Range(BaseModel):
    """Interval [min, max) of seconds used for randomized durations and delays."""

    model_config = ConfigDict(frozen=True)

    min: float = Field(..., ge=0.0, description="Lower bound")
    max: float = Field(..., ge=0.0, description="Upper bound")

    @model_validator(mode="after")
    def _ordered(self) -> "Range":
        if self.min > self.max:
            raise ValueError(f"range min {self.min} is greater than max {self.max}")
        return self


def sample(value_range: Range, rng: np.random.Generator) -> float:
    """Draw a value uniformly from ``value_range``.

    Args:
        value_range: Interval to draw from
        rng: Random number generator

    Returns:
        A float in [min, max); exactly ``min`` for a degenerate range
    """
    if value_range.min == value_range.max:
        return value_range.min
    return float(rng.uniform(value_range.min, value_range.max))


DEFAULT_COOLDOWN = Range(min=5.0, max=8.0)


class BoostSkill(BaseModel):
    """Self speed multiplier."""

    model_config = ConfigDict(frozen=True)

    speed_multiplier: float = Field(default=1.3, gt=1.0, description="Speed multiplier while boosted")
    duration: Range = Field(default=Range(min=2.0, max=4.0), description="Boost duration in seconds")
    cooldown: Range = Field(default=DEFAULT_COOLDOWN, description="Cooldown in seconds")


class BombSkill(BaseModel):
    """Stuns the nearest racer ahead."""

    model_config = ConfigDict(frozen=True)

    stun_duration: Range = Field(default=Range(min=2.0, max=3.0), description="Stun duration in seconds")
    cooldown: Range = Field(default=DEFAULT_COOLDOWN, description="Cooldown in seconds")


class SplashSkill(BaseModel):
    """Slows every racer close to the caster."""

    model_config = ConfigDict(frozen=True)

    speed_reduction: float = Field(
        default=0.2,
        ge=0.0,
        lt=1.0,
        description="Fraction of speed lost while splashed",
    )
    radius: float = Field(
        default=200.0,
        ge=0.0,
        description="Distance window in meters, ahead and behind the caster",
    )
    duration: Range = Field(default=Range(min=2.0, max=3.0), description="Slow duration in seconds")
    cooldown: Range = Field(default=DEFAULT_COOLDOWN, description="Cooldown in seconds")


class ImmuneSkill(BaseModel):
    """Protects the caster from incoming debuffs."""

    model_config = ConfigDict(frozen=True)

    duration: Range = Field(default=Range(min=3.0, max=5.0), description="Immunity duration in seconds")
    cooldown: Range = Field(default=DEFAULT_COOLDOWN, description="Cooldown in seconds")


class LightningSkill(BaseModel):
    """Last-place skill stunning everybody else."""

    model_config = ConfigDict(frozen=True)

    stun_duration: float = Field(default=1.5, gt=0.0, description="Fixed stun duration in seconds")
    cooldown: Range = Field(default=DEFAULT_COOLDOWN, description="Cooldown in seconds")


class MagnetSkill(BaseModel):
    """Last-place skill pulling the caster towards the leader."""

    model_config = ConfigDict(frozen=True)

    max_boost: float = Field(
        default=0.8,
        gt=0.0,
        description="Largest speed bonus (0.8 = +80%)",
    )
    full_boost_gap: float = Field(
        default=400.0,
        gt=0.0,
        description="Gap to the leader in meters at which the full bonus applies",
    )
    duration: Range = Field(default=Range(min=3.0, max=4.0), description="Boost duration in seconds")
    cooldown: Range = Field(default=DEFAULT_COOLDOWN, description="Cooldown in seconds")

    def boost_percent(self, gap_to_leader: float) -> float:
        """Speed bonus for a caster ``gap_to_leader`` meters behind the leader."""
        if gap_to_leader <= 0:
            return 0.0
        return self.max_boost * min(1.0, gap_to_leader / self.full_boost_gap)


class SkillConfig(BaseModel):
    """Tunables for every skill."""

    model_config = ConfigDict(frozen=True)

    boost: BoostSkill = Field(default_factory=BoostSkill)
    bomb: BombSkill = Field(default_factory=BombSkill)
    splash: SplashSkill = Field(default_factory=SplashSkill)
    immune: ImmuneSkill = Field(default_factory=ImmuneSkill)
    lightning: LightningSkill = Field(default_factory=LightningSkill)
    magnet: MagnetSkill = Field(default_factory=MagnetSkill)

    def cooldown(self, kind: SkillKind) -> Range:
        """Cooldown range of the given skill."""
        return getattr(self, kind.value).cooldown
