"""Race simulation engine.

The whole race is computed up front. Playback layers consume the resulting
timeline and never feed anything back into the simulation.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
from pydantic import ValidationError

from duckrace.exceptions import InvalidParticipantsError
from duckrace.logging_config import get_logger
from duckrace.models import DEFAULT_RACE_CONFIG, Participant, RaceConfig
from duckrace.simulation.events import (
    FinishEvent,
    ProgressSnapshot,
    RaceEvent,
    RacerProgress,
    SkillEvent,
)
from duckrace.simulation.racer import Racer
from duckrace.simulation.skills import SkillResolver


@dataclass(frozen=True)
class Standing:
    """Final classification entry for one racer."""

    position: int
    id: str
    name: str
    avatar: str | None
    color: str | None
    meters_traveled: float
    finished: bool
    finish_time: float | None  # ms

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.position,
            "id": self.id,
            "name": self.name,
            "avatar": self.avatar,
            "color": self.color,
            "metersTraveled": self.meters_traveled,
            "finished": self.finished,
            "finishTime": self.finish_time,
        }


@dataclass(frozen=True)
class RaceResult:
    """Complete, immutable outcome of one race."""

    standings: tuple[Standing, ...]
    events: tuple[RaceEvent, ...]
    snapshots: tuple[ProgressSnapshot, ...]
    duration: int  # ms of simulated time
    config: RaceConfig

    @property
    def winner(self) -> Standing:
        return self.standings[0]

    @property
    def finish_events(self) -> list[FinishEvent]:
        return [e for e in self.events if isinstance(e, FinishEvent)]

    @property
    def skill_events(self) -> list[SkillEvent]:
        return [e for e in self.events if isinstance(e, SkillEvent)]

    def standing_of(self, racer_id: str) -> Standing:
        """Standing entry for ``racer_id``."""
        for standing in self.standings:
            if standing.id == racer_id:
                return standing
        raise KeyError(racer_id)

    def to_dict(self) -> dict[str, Any]:
        """JSON-shaped result for playback and reporting clients."""
        return {
            "standings": [s.to_dict() for s in self.standings],
            "events": [e.to_dict() for e in self.events],
            "progressSnapshots": [s.to_dict() for s in self.snapshots],
            "duration": self.duration,
            "config": self.config.model_dump(mode="json"),
        }


class RaceSimulator:
    """Simulates a full race on a fixed time step."""

    def __init__(
        self,
        config: RaceConfig | None = None,
        rng: np.random.Generator | None = None,
        verbose: bool = True,
    ):
        """Initialize race simulator.

        Args:
            config: Race configuration (defaults to DEFAULT_RACE_CONFIG)
            rng: Random number generator
            verbose: Log race progress; batch runs turn this off
        """
        self.config = config if config is not None else DEFAULT_RACE_CONFIG
        self.rng = rng if rng is not None else np.random.default_rng()
        self.skill_resolver = SkillResolver(self.config, rng=self.rng)
        self.verbose = verbose
        self.logger = get_logger(__name__)

    def simulate(self, participants: Sequence[Participant | Mapping[str, Any]]) -> RaceResult:
        """Simulate a complete race.

        Args:
            participants: Roster in starting order; plain mappings are validated
                into Participant models

        Returns:
            RaceResult with standings, event log and progress snapshots

        Raises:
            InvalidParticipantsError: If the roster is empty or malformed
        """
        roster = validate_participants(participants)
        return self.run(self.create_racers(roster))

    def create_racers(self, participants: Sequence[Participant]) -> list[Racer]:
        """Build starting racer states for an already validated roster."""
        return [
            Racer.from_participant(p, i, self.config, self.rng)
            for i, p in enumerate(participants)
        ]

    def run(self, racers: list[Racer]) -> RaceResult:
        """Run the time-step loop over prepared racers until everyone finishes or time runs out.

        Args:
            racers: Racer states in roster order (mutated in place)

        Returns:
            RaceResult for these racers
        """
        if not racers:
            raise InvalidParticipantsError("Cannot run a race without racers")

        config = self.config
        events: list[RaceEvent] = []
        snapshots = [self._snapshot(0, racers)]

        if self.verbose:
            self.logger.info("race_started", racers=len(racers), distance=config.distance)

        current_time = 0
        last_snapshot = 0

        while current_time < config.max_duration and any(not r.finished for r in racers):
            current_time += config.time_step

            for racer in racers:
                self._update_racer(racer, current_time, racers, events)

            self._update_positions(racers)

            if current_time - last_snapshot >= config.snapshot_interval:
                snapshots.append(self._snapshot(current_time, racers))
                last_snapshot = current_time

        result = RaceResult(
            standings=self._build_standings(racers),
            events=tuple(events),
            snapshots=tuple(snapshots),
            duration=current_time,
            config=config,
        )

        if self.verbose:
            unfinished = sum(1 for s in result.standings if not s.finished)
            log = self.logger.warning if unfinished else self.logger.info
            log(
                "race_completed",
                duration_ms=result.duration,
                events=len(result.events),
                winner=result.winner.name,
                unfinished=unfinished,
            )

        return result

    def _update_racer(
        self,
        racer: Racer,
        now: int,
        racers: list[Racer],
        events: list[RaceEvent],
    ) -> None:
        """Advance one racer by one step."""
        if racer.finished:
            return

        step_seconds = self.config.step_seconds
        racer.tick(step_seconds)
        racer.current_speed = racer.compute_speed()

        skill_event = self.skill_resolver.try_use_skill(racer, now, racers)
        if skill_event is not None:
            events.append(skill_event)
            if self.verbose:
                self.logger.debug(
                    "skill_used",
                    t=now,
                    racer=racer.name,
                    skill=skill_event.skill.value,
                    fizzled=skill_event.fizzled,
                )

        if racer.stunned > 0:
            return

        start_meters = racer.meters_traveled
        racer.meters_traveled += racer.current_speed * step_seconds

        if racer.meters_traveled >= self.config.distance:
            # Back-solve the crossing moment inside this step
            remaining = self.config.distance - start_meters
            finish_time = min(
                float(now),
                (now - self.config.time_step) + remaining / racer.current_speed * 1000,
            )
            racer.finish(finish_time, self.config.distance)
            events.append(FinishEvent(timestamp=now, racer_id=racer.id, finish_time=finish_time))
            if self.verbose:
                self.logger.debug("racer_finished", t=now, racer=racer.name, finish_time=finish_time)

    def _update_positions(self, racers: list[Racer]) -> None:
        """Rank unfinished racers by distance; finished racers keep their last position."""
        racing = sorted(
            (r for r in racers if not r.finished),
            key=lambda r: -r.meters_traveled,
        )
        for pos, racer in enumerate(racing, 1):
            racer.position = pos

    def _snapshot(self, timestamp: int, racers: list[Racer]) -> ProgressSnapshot:
        return ProgressSnapshot(
            timestamp=timestamp,
            positions=tuple(RacerProgress(r.id, r.meters_traveled) for r in racers),
        )

    def _build_standings(self, racers: list[Racer]) -> tuple[Standing, ...]:
        """Finished racers by finish time, then the rest by distance; ties keep roster order."""
        ordered = sorted(
            racers,
            key=lambda r: (
                not r.finished,
                r.finish_time if r.finished else 0.0,
                0.0 if r.finished else -r.meters_traveled,
            ),
        )
        return tuple(
            Standing(
                position=pos,
                id=r.id,
                name=r.name,
                avatar=r.avatar,
                color=r.color,
                meters_traveled=r.meters_traveled,
                finished=r.finished,
                finish_time=r.finish_time,
            )
            for pos, r in enumerate(ordered, 1)
        )


def validate_participants(
    participants: Sequence[Participant | Mapping[str, Any]],
) -> list[Participant]:
    """Check the roster before a race starts.

    Args:
        participants: Participants or plain mappings (e.g. decoded JSON)

    Returns:
        Validated Participant models in the same order

    Raises:
        InvalidParticipantsError: If the roster is empty, contains invalid
            entries or repeats an id
    """
    if participants is None or isinstance(participants, (str, bytes)) or len(participants) == 0:
        raise InvalidParticipantsError("Participants list is required and must not be empty")

    roster: list[Participant] = []
    seen: set[str] = set()
    for i, entry in enumerate(participants):
        if isinstance(entry, Participant):
            participant = entry
        elif isinstance(entry, Mapping):
            try:
                participant = Participant.model_validate(entry)
            except ValidationError as e:
                raise InvalidParticipantsError(f"Participant #{i + 1} is invalid: {e}") from e
        else:
            raise InvalidParticipantsError(
                f"Participant #{i + 1} must be a Participant or mapping, got {type(entry).__name__}"
            )

        if participant.id in seen:
            raise InvalidParticipantsError(f"Duplicate participant id: {participant.id!r}")
        seen.add(participant.id)
        roster.append(participant)

    return roster


def simulate_race(
    participants: Sequence[Participant | Mapping[str, Any]],
    config: RaceConfig | None = None,
    seed: int | None = None,
) -> RaceResult:
    """Simulate one race with a fresh, optionally seeded, random source."""
    simulator = RaceSimulator(config=config, rng=np.random.default_rng(seed))
    return simulator.simulate(participants)
