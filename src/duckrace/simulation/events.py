"""Race timeline records: skill and finish events, progress snapshots."""

from dataclasses import dataclass
from typing import Any, ClassVar

from duckrace.models.skills import SkillKind


@dataclass(frozen=True)
class RaceEvent:
    """Base class of every event-log entry."""

    timestamp: int  # ms since race start
    racer_id: str

    def to_dict(self) -> dict[str, Any]:
        """JSON-shaped representation for playback clients."""
        return {"timestamp": self.timestamp, "id": self.racer_id}


@dataclass(frozen=True)
class FinishEvent(RaceEvent):
    """A racer crossed the line."""

    finish_time: float  # ms, interpolated inside the step

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "finishTime": self.finish_time}


@dataclass(frozen=True)
class SkillEvent(RaceEvent):
    """A racer used a skill. ``meters`` is the caster's distance at cast time."""

    skill: ClassVar[SkillKind]

    meters: float

    @property
    def fizzled(self) -> bool:
        """Whether the skill resolved without changing any racer."""
        return False

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "skill": self.skill.value, "meters": self.meters}


@dataclass(frozen=True)
class BoostEvent(SkillEvent):
    skill: ClassVar[SkillKind] = SkillKind.BOOST

    duration: int  # ms
    multiplier: float

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "duration": self.duration, "multiplier": self.multiplier}


@dataclass(frozen=True)
class BombEvent(SkillEvent):
    skill: ClassVar[SkillKind] = SkillKind.BOMB

    target_id: str | None
    target_name: str | None
    stun_duration: int  # ms, 0 when nobody was hit

    @property
    def fizzled(self) -> bool:
        return self.target_id is None

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "targetId": self.target_id,
            "targetName": self.target_name,
            "stunDuration": self.stun_duration,
        }


@dataclass(frozen=True)
class SplashEvent(SkillEvent):
    skill: ClassVar[SkillKind] = SkillKind.SPLASH

    affected_ids: tuple[str, ...]
    duration: int  # ms

    @property
    def affected_count(self) -> int:
        return len(self.affected_ids)

    @property
    def fizzled(self) -> bool:
        return not self.affected_ids

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "affectedIds": list(self.affected_ids),
            "affectedCount": self.affected_count,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class ImmuneEvent(SkillEvent):
    skill: ClassVar[SkillKind] = SkillKind.IMMUNE

    duration: int  # ms

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "duration": self.duration}


@dataclass(frozen=True)
class LightningEvent(SkillEvent):
    skill: ClassVar[SkillKind] = SkillKind.LIGHTNING

    affected_ids: tuple[str, ...]
    stun_duration: int  # ms

    @property
    def affected_count(self) -> int:
        return len(self.affected_ids)

    @property
    def fizzled(self) -> bool:
        return not self.affected_ids

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "affectedIds": list(self.affected_ids),
            "affectedCount": self.affected_count,
            "stunDuration": self.stun_duration,
        }


@dataclass(frozen=True)
class MagnetEvent(SkillEvent):
    """Magnet use. On a fizzle the caster is its own target and nothing changes."""

    skill: ClassVar[SkillKind] = SkillKind.MAGNET

    target_id: str
    target_name: str
    boost_percent: float
    duration: int  # ms, 0 on a fizzle

    @property
    def fizzled(self) -> bool:
        return self.boost_percent == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "targetId": self.target_id,
            "targetName": self.target_name,
            "boostPercent": self.boost_percent,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class RacerProgress:
    """Distance of one racer at a snapshot."""

    racer_id: str
    meters_traveled: float


@dataclass(frozen=True)
class ProgressSnapshot:
    """Distances of every racer at a point in simulated time."""

    timestamp: int  # ms
    positions: tuple[RacerProgress, ...]

    def meters_of(self, racer_id: str) -> float:
        """Distance of ``racer_id`` at this snapshot."""
        for progress in self.positions:
            if progress.racer_id == racer_id:
                return progress.meters_traveled
        raise KeyError(racer_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "positions": [
                {"id": p.racer_id, "metersTraveled": p.meters_traveled}
                for p in self.positions
            ],
        }
