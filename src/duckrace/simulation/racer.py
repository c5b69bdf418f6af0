"""Per-racer simulation state."""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from duckrace.models import (
    Boost,
    Buff,
    Debuff,
    Immune,
    Magnet,
    Participant,
    RaceConfig,
    SkillKind,
    Splash,
    Stun,
    sample,
)
from duckrace.models.effects import tick


class RacerStatus(str, Enum):
    """Racer lifecycle. Status effects are modifiers on RACING, not states."""

    RACING = "racing"
    FINISHED = "finished"


@dataclass
class Racer:
    """Mutable state of one participant during a single race."""

    id: str
    name: str
    index: int  # roster order, used as the final tiebreak everywhere
    base_speed: float
    position: int  # rank among unfinished racers, for consumers; frozen once finished
    avatar: str | None = None
    color: str | None = None
    meters_traveled: float = 0.0
    current_speed: float = 0.0
    status: RacerStatus = RacerStatus.RACING
    finish_time: float | None = None
    active_buff: Buff | None = None
    active_debuff: Debuff | None = None
    cooldowns: dict[SkillKind, float] = field(default_factory=dict)
    next_skill_attempt_time: float = 0.0  # ms

    @classmethod
    def from_participant(
        cls,
        participant: Participant,
        index: int,
        config: RaceConfig,
        rng: np.random.Generator,
    ) -> "Racer":
        """Create the starting state for a participant.

        Args:
            participant: Roster entry
            index: 0-based roster index (also the starting position - 1)
            config: Race configuration
            rng: Random number generator for the staggered skill timers

        Returns:
            A racer at the start line
        """
        cooldowns = {kind: sample(config.initial_cooldown, rng) for kind in SkillKind}
        first_attempt = sample(config.initial_attempt_delay, rng) * 1000

        return cls(
            id=participant.id,
            name=participant.display_name(index),
            index=index,
            base_speed=config.base_speed,
            position=index + 1,
            avatar=participant.avatar,
            color=participant.color,
            current_speed=config.base_speed,
            cooldowns=cooldowns,
            next_skill_attempt_time=first_attempt,
        )

    @property
    def finished(self) -> bool:
        return self.status == RacerStatus.FINISHED

    # Timer views over the two effect slots
    @property
    def stunned(self) -> float:
        return self.active_debuff.remaining if isinstance(self.active_debuff, Stun) else 0.0

    @property
    def splash_affected(self) -> float:
        return self.active_debuff.remaining if isinstance(self.active_debuff, Splash) else 0.0

    @property
    def boosted(self) -> float:
        return self.active_buff.remaining if isinstance(self.active_buff, Boost) else 0.0

    @property
    def immune(self) -> float:
        return self.active_buff.remaining if isinstance(self.active_buff, Immune) else 0.0

    @property
    def magnet_boosted(self) -> float:
        return self.active_buff.remaining if isinstance(self.active_buff, Magnet) else 0.0

    def apply_buff(self, buff: Buff) -> None:
        """Replace the buff slot (last applied wins)."""
        self.active_buff = buff

    def apply_debuff(self, debuff: Debuff) -> None:
        """Replace the debuff slot (last applied wins)."""
        self.active_debuff = debuff

    def tick(self, seconds: float) -> None:
        """Run down status effects and skill cooldowns."""
        self.active_buff = tick(self.active_buff, seconds)
        self.active_debuff = tick(self.active_debuff, seconds)
        for kind, remaining in self.cooldowns.items():
            self.cooldowns[kind] = max(0.0, remaining - seconds)

    def compute_speed(self) -> float:
        """Speed from base speed and active effects. Stun is handled by the mover."""
        speed = self.base_speed
        if isinstance(self.active_buff, Boost):
            speed *= self.active_buff.multiplier
        elif isinstance(self.active_buff, Magnet):
            speed *= 1 + self.active_buff.boost_percent
        if isinstance(self.active_debuff, Splash):
            speed *= 1 - self.active_debuff.reduction
        return speed

    def is_off_cooldown(self, kind: SkillKind) -> bool:
        return self.cooldowns.get(kind, 0.0) <= 0

    def finish(self, finish_time: float, distance: float) -> None:
        """Cross the line. Happens exactly once per racer."""
        if self.finished:
            raise RuntimeError(f"Racer {self.id} already finished at {self.finish_time}")
        self.status = RacerStatus.FINISHED
        self.finish_time = finish_time
        self.meters_traveled = distance
