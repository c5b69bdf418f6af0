"""Monte Carlo batch runner and statistics."""

from collections import Counter, defaultdict
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field

import numpy as np

from duckrace.logging_config import get_logger
from duckrace.models import Participant, RaceConfig, SkillKind
from duckrace.simulation.events import SkillEvent
from duckrace.simulation.race import RaceSimulator, Standing, validate_participants

logger = get_logger(__name__)


@dataclass
class ParticipantStatistics:
    """Aggregated statistics for a participant across simulations."""

    participant_id: str
    name: str
    wins: int = 0
    podiums: int = 0
    finishes: int = 0
    best_position: int = 0
    worst_position: int = 0
    avg_position: float = 0.0
    avg_finish_time: float | None = None  # ms, over finished races only
    positions: list[int] = field(default_factory=list)
    finish_times: list[float] = field(default_factory=list)
    skills_used: Counter = field(default_factory=Counter)

    @property
    def races(self) -> int:
        return len(self.positions)

    @property
    def win_rate(self) -> float:
        """Win percentage."""
        return self.wins / self.races * 100 if self.races else 0

    @property
    def podium_rate(self) -> float:
        """Podium percentage."""
        return self.podiums / self.races * 100 if self.races else 0

    @property
    def finish_rate(self) -> float:
        """Percentage of races this participant finished before the time ceiling."""
        return self.finishes / self.races * 100 if self.races else 0


@dataclass
class SkillStatistics:
    """Skill usage across simulations."""

    uses: Counter = field(default_factory=Counter)
    fizzles: Counter = field(default_factory=Counter)

    @property
    def total_uses(self) -> int:
        return sum(self.uses.values())

    def fizzle_rate(self, kind: SkillKind) -> float:
        """Percentage of uses of ``kind`` that fizzled."""
        uses = self.uses.get(kind, 0)
        return self.fizzles.get(kind, 0) / uses * 100 if uses else 0


@dataclass
class RaceSummary:
    """What a worker sends back for one race."""

    seed: int
    standings: tuple[Standing, ...]
    duration: int
    skill_uses: dict[str, Counter]  # participant id -> skill kind -> count
    fizzles: Counter


@dataclass
class SimulationResults:
    """Results from a Monte Carlo batch."""

    num_simulations: int
    participant_stats: dict[str, ParticipantStatistics]
    race_summaries: list[RaceSummary]
    skill_stats: SkillStatistics = field(default_factory=SkillStatistics)
    timed_out_races: int = 0
    avg_duration: float = 0.0

    def get_win_probabilities(self) -> dict[str, float]:
        """Win percentage for each participant, best first."""
        return {
            pid: stats.win_rate
            for pid, stats in sorted(
                self.participant_stats.items(),
                key=lambda x: x[1].wins,
                reverse=True,
            )
        }

    def get_position_distribution(self, participant_id: str) -> dict[int, float]:
        """Position probability distribution (percent) for a participant."""
        if participant_id not in self.participant_stats:
            return {}

        positions = self.participant_stats[participant_id].positions
        counts: dict[int, int] = defaultdict(int)
        for pos in positions:
            counts[pos] += 1

        return {
            pos: count / len(positions) * 100
            for pos, count in sorted(counts.items())
        }


def _run_single_simulation(args: tuple) -> RaceSummary:
    """Run one race (for multiprocessing).

    Args:
        args: Tuple of (participants_data, config_data, seed)

    Returns:
        RaceSummary of the race
    """
    participants_data, config_data, seed = args

    # Rebuild everything inside the worker; nothing mutable crosses runs
    participants = [Participant.model_validate(p) for p in participants_data]
    config = RaceConfig.model_validate(config_data)

    simulator = RaceSimulator(config=config, rng=np.random.default_rng(seed), verbose=False)
    result = simulator.simulate(participants)

    skill_uses: dict[str, Counter] = defaultdict(Counter)
    fizzles: Counter = Counter()
    for event in result.events:
        if isinstance(event, SkillEvent):
            skill_uses[event.racer_id][event.skill] += 1
            if event.fizzled:
                fizzles[event.skill] += 1

    return RaceSummary(
        seed=seed,
        standings=result.standings,
        duration=result.duration,
        skill_uses=dict(skill_uses),
        fizzles=fizzles,
    )


class MonteCarloRunner:
    """Runs many independently seeded races over the same roster."""

    def __init__(
        self,
        participants: list[Participant],
        config: RaceConfig | None = None,
        seed: int | None = None,
    ):
        """Initialize Monte Carlo runner.

        Args:
            participants: Roster raced in every simulation
            config: Race configuration
            seed: Base seed; race i uses seed + i

        Raises:
            InvalidParticipantsError: If the roster is empty or malformed
        """
        self.participants = validate_participants(participants)
        self.config = config if config is not None else RaceConfig()
        self.base_seed = seed if seed is not None else int(np.random.default_rng().integers(0, 2**31))

    def run(
        self,
        num_simulations: int = 1000,
        parallel: bool = True,
        max_workers: int | None = None,
    ) -> SimulationResults:
        """Run Monte Carlo simulations.

        Args:
            num_simulations: Number of races to simulate
            parallel: Whether to use a process pool
            max_workers: Maximum parallel workers (None = CPU count)

        Returns:
            SimulationResults with aggregated statistics
        """
        if num_simulations < 1:
            raise ValueError("num_simulations must be at least 1")

        participants_data = [p.model_dump() for p in self.participants]
        config_data = self.config.model_dump()
        seeds = [self.base_seed + i for i in range(num_simulations)]
        args_list = [(participants_data, config_data, seed) for seed in seeds]

        logger.info(
            "batch_started",
            simulations=num_simulations,
            participants=len(self.participants),
            parallel=parallel,
            base_seed=self.base_seed,
        )

        if parallel and num_simulations > 1:
            with ProcessPoolExecutor(max_workers=max_workers) as executor:
                summaries = list(executor.map(_run_single_simulation, args_list))
        else:
            summaries = [_run_single_simulation(args) for args in args_list]

        results = SimulationResults(
            num_simulations=num_simulations,
            participant_stats=self._aggregate_statistics(summaries),
            race_summaries=summaries,
            skill_stats=self._aggregate_skill_statistics(summaries),
            timed_out_races=sum(1 for s in summaries if any(not st.finished for st in s.standings)),
            avg_duration=float(np.mean([s.duration for s in summaries])),
        )

        logger.info(
            "batch_completed",
            simulations=num_simulations,
            timed_out=results.timed_out_races,
            avg_duration_ms=results.avg_duration,
        )
        return results

    def _aggregate_statistics(self, summaries: list[RaceSummary]) -> dict[str, ParticipantStatistics]:
        """Aggregate per-participant statistics from all races."""
        stats: dict[str, ParticipantStatistics] = {}
        for i, participant in enumerate(self.participants):
            stats[participant.id] = ParticipantStatistics(
                participant_id=participant.id,
                name=participant.display_name(i),
                best_position=len(self.participants),
                worst_position=1,
            )

        for summary in summaries:
            for standing in summary.standings:
                stat = stats[standing.id]
                stat.positions.append(standing.position)

                if standing.position == 1:
                    stat.wins += 1
                if standing.position <= 3:
                    stat.podiums += 1
                if standing.finished and standing.finish_time is not None:
                    stat.finishes += 1
                    stat.finish_times.append(standing.finish_time)

                stat.best_position = min(stat.best_position, standing.position)
                stat.worst_position = max(stat.worst_position, standing.position)

            for pid, counts in summary.skill_uses.items():
                stats[pid].skills_used.update(counts)

        for stat in stats.values():
            if stat.positions:
                stat.avg_position = float(np.mean(stat.positions))
            if stat.finish_times:
                stat.avg_finish_time = float(np.mean(stat.finish_times))

        return stats

    def _aggregate_skill_statistics(self, summaries: list[RaceSummary]) -> SkillStatistics:
        """Aggregate skill usage and fizzles from all races."""
        stats = SkillStatistics()
        for summary in summaries:
            for counts in summary.skill_uses.values():
                stats.uses.update(counts)
            stats.fizzles.update(summary.fizzles)
        return stats

    def run_quick(self, num_simulations: int = 100) -> SimulationResults:
        """Run without a process pool.

        Useful for testing or when running in environments
        where multiprocessing is problematic.
        """
        return self.run(num_simulations=num_simulations, parallel=False)
