"""Console output formatting."""

from duckrace.analysis.montecarlo import SimulationResults
from duckrace.models import SkillKind
from duckrace.simulation.events import (
    BombEvent,
    BoostEvent,
    FinishEvent,
    ImmuneEvent,
    LightningEvent,
    MagnetEvent,
    RaceEvent,
    SplashEvent,
)
from duckrace.simulation.race import RaceResult


def describe_event(event: RaceEvent, names: dict[str, str]) -> str:
    """One-line human readable description of an event.

    Args:
        event: Event to describe
        names: Racer id -> display name

    Returns:
        Description without timestamp
    """
    who = names.get(event.racer_id, event.racer_id)

    match event:
        case FinishEvent():
            return f"{who} finished in {event.finish_time / 1000:.3f}s"
        case BoostEvent():
            return f"{who} used Boost (x{event.multiplier:.2f} for {event.duration / 1000:.1f}s)"
        case ImmuneEvent():
            return f"{who} became immune for {event.duration / 1000:.1f}s"
        case BombEvent():
            if event.fizzled:
                return f"{who} threw a Bomb but nobody was in range"
            return f"{who} bombed {event.target_name} (stunned {event.stun_duration / 1000:.1f}s)"
        case SplashEvent():
            return f"{who} splashed {event.affected_count} racer(s) for {event.duration / 1000:.1f}s"
        case LightningEvent():
            return f"{who} called Lightning on {event.affected_count} racer(s)"
        case MagnetEvent():
            if event.fizzled:
                return f"{who} used Magnet but is already in front"
            return f"{who} used Magnet on {event.target_name} (+{event.boost_percent * 100:.0f}%)"
        case _:
            return f"{who}: {type(event).__name__}"


class ConsoleOutput:
    """Formats simulation results for console display."""

    @staticmethod
    def print_race_results(result: RaceResult) -> None:
        """Print final standings to console.

        Args:
            result: Race result
        """
        print("\n" + "=" * 64)
        print("RACE RESULTS")
        print("=" * 64)
        print(f"{'Pos':<4} {'Racer':<24} {'Time/Gap':<14} {'Meters':<10} {'Status':<10}")
        print("-" * 64)

        leader_time = None
        for standing in result.standings:
            if standing.finished and standing.finish_time is not None:
                if leader_time is None:
                    leader_time = standing.finish_time
                    time_str = f"{standing.finish_time / 1000:.3f}s"
                else:
                    time_str = f"+{(standing.finish_time - leader_time) / 1000:.3f}s"
                status_str = ""
            else:
                time_str = "-"
                status_str = "DNF"

            print(
                f"{standing.position:<4} "
                f"{standing.name:<24} "
                f"{time_str:<14} "
                f"{standing.meters_traveled:<10.1f} "
                f"{status_str:<10}"
            )

        print("-" * 64)
        print(f"Race time: {result.duration / 1000:.1f}s   Events: {len(result.events)}")
        print("=" * 64)

    @staticmethod
    def print_event_log(result: RaceResult, limit: int | None = None) -> None:
        """Print the chronological event log.

        Args:
            result: Race result
            limit: Print at most this many events
        """
        names = {s.id: s.name for s in result.standings}
        events = result.events if limit is None else result.events[:limit]

        print("\nEVENT LOG:")
        print("-" * 64)
        for event in events:
            print(f"[{event.timestamp / 1000:6.1f}s] {describe_event(event, names)}")
        if limit is not None and len(result.events) > limit:
            print(f"... {len(result.events) - limit} more events")

    @staticmethod
    def print_monte_carlo_summary(results: SimulationResults) -> None:
        """Print Monte Carlo batch summary.

        Args:
            results: Aggregated simulation results
        """
        print("\n" + "=" * 72)
        print("MONTE CARLO RACE RESULTS")
        print(f"({results.num_simulations} simulations)")
        print("=" * 72)

        print("\nWIN PROBABILITIES:")
        print("-" * 50)
        for pid, prob in results.get_win_probabilities().items():
            stats = results.participant_stats[pid]
            bar = "#" * int(prob / 2)
            print(f"{stats.name:<20} {prob:5.1f}% {bar}")

        print("\nAVERAGE FINISHING POSITION:")
        print("-" * 50)
        avg_sorted = sorted(
            results.participant_stats.values(),
            key=lambda s: s.avg_position,
        )
        for stats in avg_sorted:
            if stats.positions:
                avg_time = f"{stats.avg_finish_time / 1000:6.2f}s" if stats.avg_finish_time else "     -"
                print(
                    f"{stats.name:<20} "
                    f"Avg: {stats.avg_position:5.2f}  "
                    f"Best: {stats.best_position:2d}  "
                    f"Worst: {stats.worst_position:2d}  "
                    f"Time: {avg_time}  "
                    f"Finished: {stats.finish_rate:5.1f}%"
                )

        skill_stats = results.skill_stats
        print("\nSKILL USAGE:")
        print("-" * 50)
        per_race = results.num_simulations or 1
        for kind in SkillKind:
            uses = skill_stats.uses.get(kind, 0)
            print(
                f"  {kind.value.capitalize():<10} {uses:6d} total "
                f"({uses / per_race:5.2f}/race, {skill_stats.fizzle_rate(kind):4.1f}% fizzled)"
            )

        print(f"\n  Avg race time:   {results.avg_duration / 1000:.2f}s")
        print(f"  Timed-out races: {results.timed_out_races}")
        print("=" * 72)

    @staticmethod
    def print_participant_deep_dive(results: SimulationResults, participant_id: str) -> None:
        """Print detailed analysis for one participant.

        Args:
            results: Simulation results
            participant_id: Participant to analyze
        """
        if participant_id not in results.participant_stats:
            print(f"Participant {participant_id} not found in results")
            return

        stats = results.participant_stats[participant_id]

        print("\n" + "=" * 60)
        print(f"DETAILED ANALYSIS: {stats.name}")
        print("=" * 60)

        print(f"\nOverall Statistics ({stats.races} races):")
        print(f"  Wins:     {stats.wins:4d} ({stats.win_rate:.1f}%)")
        print(f"  Podiums:  {stats.podiums:4d} ({stats.podium_rate:.1f}%)")
        print(f"  Finishes: {stats.finishes:4d} ({stats.finish_rate:.1f}%)")

        print("\nSkills used:")
        for kind in SkillKind:
            print(f"  {kind.value.capitalize():<10} {stats.skills_used.get(kind, 0):5d}")

        print("\nPosition Distribution:")
        for pos, pct in results.get_position_distribution(participant_id).items():
            bar = "#" * int(pct / 2)
            print(f"  P{pos:2d}: {pct:5.1f}% {bar}")

        print("=" * 60)
