"""Shared fixtures for the race engine tests."""

import numpy as np
import pytest

from duckrace.logging_config import configure_logging
from duckrace.models import Participant, RaceConfig, SkillKind
from duckrace.simulation.racer import Racer


def pytest_configure(config):
    """Register custom markers and keep engine logs quiet during tests."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    configure_logging(log_level="WARNING", enable_colors=False)


@pytest.fixture
def rng():
    """Seeded random number generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def participants():
    """Four named ducks in roster order."""
    return [
        Participant(id="a", name="Alpha"),
        Participant(id="b", name="Bravo"),
        Participant(id="c", name="Charlie"),
        Participant(id="d", name="Delta"),
    ]


@pytest.fixture
def config():
    return RaceConfig()


@pytest.fixture
def make_racer():
    """Factory for racers placed directly on the track, all skills ready."""

    def _make(racer_id: str, meters: float = 0.0, index: int = 0, **kwargs) -> Racer:
        kwargs.setdefault("cooldowns", {kind: 0.0 for kind in SkillKind})
        return Racer(
            id=racer_id,
            name=kwargs.pop("name", racer_id.upper()),
            index=index,
            base_speed=kwargs.pop("base_speed", 100.0),
            position=index + 1,
            meters_traveled=meters,
            **kwargs,
        )

    return _make
