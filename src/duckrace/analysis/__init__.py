"""Monte Carlo analysis and timeline statistics."""

from .montecarlo import MonteCarloRunner, ParticipantStatistics, SimulationResults, SkillStatistics
from .timeline import distance_matrix, events_frame, skill_usage, snapshots_frame, standings_frame

__all__ = [
    "MonteCarloRunner",
    "ParticipantStatistics",
    "SimulationResults",
    "SkillStatistics",
    "distance_matrix",
    "events_frame",
    "skill_usage",
    "snapshots_frame",
    "standings_frame",
]
