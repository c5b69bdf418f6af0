"""Skill selection, targeting and effect application."""

import math

import numpy as np

from duckrace.models import (
    Boost,
    Immune,
    Magnet,
    RaceConfig,
    SkillKind,
    Splash,
    Stun,
    sample,
)
from duckrace.simulation.events import (
    BombEvent,
    BoostEvent,
    ImmuneEvent,
    LightningEvent,
    MagnetEvent,
    SkillEvent,
    SplashEvent,
)
from duckrace.simulation.racer import Racer


def _to_ms(seconds: float) -> int:
    return math.floor(seconds * 1000)


def is_last_place(racer: Racer, racers: list[Racer]) -> bool:
    """Whether ``racer`` is strictly last among unfinished racers.

    Unfinished racers are ordered by distance, ties broken by roster order,
    so of two racers level at the back the later roster entry is last.
    Distances are read live: ``Racer.position`` is only refreshed after the
    whole roster has moved, so it can lag behind within a step.
    """
    unfinished = [r for r in racers if not r.finished]
    if not unfinished:
        return False
    ordered = sorted(unfinished, key=lambda r: -r.meters_traveled)
    return ordered[-1] is racer


def _is_vulnerable(target: Racer, caster: Racer) -> bool:
    return target is not caster and not target.finished and target.immune <= 0


class SkillResolver:
    """Decides when racers use skills and applies their effects."""

    def __init__(self, config: RaceConfig, rng: np.random.Generator | None = None):
        """Initialize the resolver.

        Args:
            config: Race configuration (skill tunables and attempt pacing)
            rng: Random number generator
        """
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng()

    def available_skills(self, racer: Racer, racers: list[Racer]) -> list[SkillKind]:
        """Skills ``racer`` could use right now, in declaration order."""
        last_place: bool | None = None
        skills = []
        for kind in self.config.enabled_skills:
            if not racer.is_off_cooldown(kind):
                continue
            if kind.last_place_only:
                if last_place is None:
                    last_place = is_last_place(racer, racers)
                if not last_place:
                    continue
            skills.append(kind)
        return skills

    def try_use_skill(self, racer: Racer, now: int, racers: list[Racer]) -> SkillEvent | None:
        """Attempt a skill use if the racer is due for one.

        Args:
            racer: Racer attempting
            now: Current simulated time in ms
            racers: Full roster

        Returns:
            The logged event, or None when no skill was used
        """
        # Stunned racers cannot use skills
        if racer.stunned > 0:
            return None
        if now < racer.next_skill_attempt_time:
            return None

        available = self.available_skills(racer, racers)
        if not available:
            racer.next_skill_attempt_time = now + self.config.retry_delay * 1000
            return None

        kind = available[int(self.rng.integers(len(available)))]
        event = self.use_skill(racer, kind, now, racers)

        racer.next_skill_attempt_time = now + sample(self.config.attempt_interval, self.rng) * 1000
        return event

    def use_skill(self, caster: Racer, kind: SkillKind, now: int, racers: list[Racer]) -> SkillEvent:
        """Put ``kind`` on cooldown and resolve its effect.

        Eligibility is the caller's concern; this always resolves the skill.
        """
        caster.cooldowns[kind] = sample(self.config.skills.cooldown(kind), self.rng)

        if kind == SkillKind.BOOST:
            return self._boost(caster, now)
        elif kind == SkillKind.BOMB:
            return self._bomb(caster, now, racers)
        elif kind == SkillKind.SPLASH:
            return self._splash(caster, now, racers)
        elif kind == SkillKind.IMMUNE:
            return self._immune(caster, now)
        elif kind == SkillKind.LIGHTNING:
            return self._lightning(caster, now, racers)
        else:
            return self._magnet(caster, now, racers)

    def _boost(self, caster: Racer, now: int) -> BoostEvent:
        skill = self.config.skills.boost
        duration = sample(skill.duration, self.rng)
        caster.apply_buff(Boost(remaining=duration, multiplier=skill.speed_multiplier))
        return BoostEvent(
            timestamp=now,
            racer_id=caster.id,
            meters=caster.meters_traveled,
            duration=_to_ms(duration),
            multiplier=skill.speed_multiplier,
        )

    def _immune(self, caster: Racer, now: int) -> ImmuneEvent:
        duration = sample(self.config.skills.immune.duration, self.rng)
        caster.apply_buff(Immune(remaining=duration))
        return ImmuneEvent(
            timestamp=now,
            racer_id=caster.id,
            meters=caster.meters_traveled,
            duration=_to_ms(duration),
        )

    def _bomb(self, caster: Racer, now: int, racers: list[Racer]) -> BombEvent:
        ahead = [
            r for r in racers
            if _is_vulnerable(r, caster) and r.meters_traveled > caster.meters_traveled
        ]
        if not ahead:
            return BombEvent(
                timestamp=now,
                racer_id=caster.id,
                meters=caster.meters_traveled,
                target_id=None,
                target_name=None,
                stun_duration=0,
            )

        # Nearest racer ahead; min() keeps roster order on ties
        target = min(ahead, key=lambda r: r.meters_traveled)
        duration = sample(self.config.skills.bomb.stun_duration, self.rng)
        target.apply_debuff(Stun(remaining=duration))
        return BombEvent(
            timestamp=now,
            racer_id=caster.id,
            meters=caster.meters_traveled,
            target_id=target.id,
            target_name=target.name,
            stun_duration=_to_ms(duration),
        )

    def _splash(self, caster: Racer, now: int, racers: list[Racer]) -> SplashEvent:
        skill = self.config.skills.splash
        duration = sample(skill.duration, self.rng)
        affected = []
        for racer in racers:
            if not _is_vulnerable(racer, caster):
                continue
            if abs(racer.meters_traveled - caster.meters_traveled) > skill.radius:
                continue
            racer.apply_debuff(Splash(remaining=duration, reduction=skill.speed_reduction))
            affected.append(racer.id)

        return SplashEvent(
            timestamp=now,
            racer_id=caster.id,
            meters=caster.meters_traveled,
            affected_ids=tuple(affected),
            duration=_to_ms(duration),
        )

    def _lightning(self, caster: Racer, now: int, racers: list[Racer]) -> LightningEvent:
        stun_duration = self.config.skills.lightning.stun_duration
        affected = []
        for racer in racers:
            if _is_vulnerable(racer, caster):
                racer.apply_debuff(Stun(remaining=stun_duration))
                affected.append(racer.id)

        return LightningEvent(
            timestamp=now,
            racer_id=caster.id,
            meters=caster.meters_traveled,
            affected_ids=tuple(affected),
            stun_duration=_to_ms(stun_duration),
        )

    def _magnet(self, caster: Racer, now: int, racers: list[Racer]) -> MagnetEvent:
        skill = self.config.skills.magnet
        ahead = [
            r for r in racers
            if r is not caster and not r.finished and r.meters_traveled > caster.meters_traveled
        ]
        if not ahead:
            # Fizzle: the buff slot is left untouched
            return MagnetEvent(
                timestamp=now,
                racer_id=caster.id,
                meters=caster.meters_traveled,
                target_id=caster.id,
                target_name=caster.name,
                boost_percent=0.0,
                duration=0,
            )

        leader = max(ahead, key=lambda r: r.meters_traveled)
        boost_percent = skill.boost_percent(leader.meters_traveled - caster.meters_traveled)
        duration = sample(skill.duration, self.rng)
        caster.apply_buff(Magnet(remaining=duration, boost_percent=boost_percent))
        return MagnetEvent(
            timestamp=now,
            racer_id=caster.id,
            meters=caster.meters_traveled,
            target_id=leader.id,
            target_name=leader.name,
            boost_percent=boost_percent,
            duration=_to_ms(duration),
        )
