"""Forward-only playback over a finished race timeline.

A rendering layer owns the clock and calls ``advance`` with the elapsed
race time on every frame. The player only reads the result; it never
changes what happened in the race.
"""

from bisect import bisect_right

from duckrace.simulation.events import RaceEvent
from duckrace.simulation.race import RaceResult


class TimelinePlayer:
    """Walks a RaceResult from start to finish."""

    def __init__(self, result: RaceResult):
        """Initialize the player at t=0.

        Args:
            result: Race to play back
        """
        self.result = result
        self.cursor = 0
        self._next_event = 0

        # Keyframes: every snapshot plus the final distances at race end
        self._times = [s.timestamp for s in result.snapshots]
        self._frames = [
            {p.racer_id: p.meters_traveled for p in s.positions}
            for s in result.snapshots
        ]
        if not self._times or self._times[-1] < result.duration:
            self._times.append(result.duration)
            self._frames.append({s.id: s.meters_traveled for s in result.standings})

    @property
    def done(self) -> bool:
        """Whether the cursor reached the end of the race."""
        return self.cursor >= self.result.duration

    def advance(self, elapsed: int) -> list[RaceEvent]:
        """Move the cursor to ``elapsed`` ms and return the events that became due.

        Args:
            elapsed: Race time in ms, never smaller than the current cursor

        Returns:
            Events with timestamp in (previous cursor, elapsed], in log order

        Raises:
            ValueError: If asked to move backwards
        """
        if elapsed < self.cursor:
            raise ValueError(f"Cannot rewind playback from {self.cursor} to {elapsed}")

        events = self.result.events
        start = self._next_event
        while self._next_event < len(events) and events[self._next_event].timestamp <= elapsed:
            self._next_event += 1

        self.cursor = elapsed
        return list(events[start:self._next_event])

    def positions(self) -> dict[str, float]:
        """Interpolated distance of every racer at the cursor."""
        return self.positions_at(self.cursor)

    def positions_at(self, elapsed: float) -> dict[str, float]:
        """Distances at ``elapsed`` ms, linearly interpolated between keyframes.

        Args:
            elapsed: Race time in ms; clamped to [0, duration]

        Returns:
            Mapping of racer id to meters traveled
        """
        idx = bisect_right(self._times, elapsed)
        if idx <= 0:
            return dict(self._frames[0])
        if idx >= len(self._times):
            return dict(self._frames[-1])

        t0, t1 = self._times[idx - 1], self._times[idx]
        before, after = self._frames[idx - 1], self._frames[idx]
        ratio = (elapsed - t0) / (t1 - t0)
        return {
            racer_id: meters + (after[racer_id] - meters) * ratio
            for racer_id, meters in before.items()
        }

    def finished_racers(self) -> list[str]:
        """Ids of racers whose finish time has passed at the cursor, in finishing order."""
        return [
            s.id for s in self.result.standings
            if s.finished and s.finish_time is not None and s.finish_time <= self.cursor
        ]
