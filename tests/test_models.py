"""Tests for participant, skill and race configuration models."""

import numpy as np
import pytest
from pydantic import ValidationError

from duckrace.exceptions import DuckRaceError, InvalidConfigError
from duckrace.models import (
    Boost,
    Participant,
    RaceConfig,
    Range,
    SkillConfig,
    SkillKind,
    Stun,
    sample,
)
from duckrace.models.effects import tick


class TestParticipant:
    """Test Participant validation and display names."""

    def test_minimal_participant(self):
        p = Participant(id="duck-1")
        assert p.id == "duck-1"
        assert p.name is None
        assert p.avatar is None
        assert p.color is None

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            Participant(id="")

    def test_blank_id_rejected(self):
        with pytest.raises(ValidationError):
            Participant(id="   ")

    def test_display_name_uses_name(self):
        assert Participant(id="x", name="Quackers").display_name(3) == "Quackers"

    def test_display_name_fallback_is_one_based(self):
        """Missing names fall back to 'Duck N' with the 1-based roster index."""
        assert Participant(id="x").display_name(0) == "Duck 1"
        assert Participant(id="x", name="  ").display_name(4) == "Duck 5"

    def test_participant_is_frozen(self):
        p = Participant(id="x")
        with pytest.raises(ValidationError):
            p.name = "changed"


class TestRange:
    """Test Range validation and sampling."""

    def test_valid_range(self):
        r = Range(min=2.0, max=4.0)
        assert r.min == 2.0
        assert r.max == 4.0

    def test_inverted_range_rejected(self):
        with pytest.raises(ValidationError):
            Range(min=4.0, max=2.0)

    def test_negative_bound_rejected(self):
        with pytest.raises(ValidationError):
            Range(min=-1.0, max=2.0)

    def test_sample_within_bounds(self):
        rng = np.random.default_rng(0)
        r = Range(min=5.0, max=8.0)
        values = [sample(r, rng) for _ in range(500)]
        assert all(5.0 <= v < 8.0 for v in values)
        assert all(isinstance(v, float) for v in values)

    def test_degenerate_range_returns_min(self):
        rng = np.random.default_rng(0)
        assert sample(Range(min=1.5, max=1.5), rng) == 1.5


class TestSkillConfig:
    """Test default skill tunables."""

    def test_defaults(self):
        skills = SkillConfig()
        assert skills.boost.speed_multiplier == 1.3
        assert skills.boost.duration == Range(min=2.0, max=4.0)
        assert skills.bomb.stun_duration == Range(min=2.0, max=3.0)
        assert skills.splash.speed_reduction == 0.2
        assert skills.splash.radius == 200.0
        assert skills.immune.duration == Range(min=3.0, max=5.0)
        assert skills.lightning.stun_duration == 1.5
        assert skills.magnet.max_boost == 0.8
        assert skills.magnet.duration == Range(min=3.0, max=4.0)

    def test_every_cooldown_defaults_to_five_to_eight_seconds(self):
        skills = SkillConfig()
        for kind in SkillKind:
            assert skills.cooldown(kind) == Range(min=5.0, max=8.0)

    def test_magnet_boost_scales_with_gap(self):
        magnet = SkillConfig().magnet
        assert magnet.boost_percent(0.0) == 0.0
        assert magnet.boost_percent(200.0) == pytest.approx(0.4)
        assert magnet.boost_percent(400.0) == pytest.approx(0.8)
        assert magnet.boost_percent(1500.0) == pytest.approx(0.8)

    def test_last_place_only_skills(self):
        assert {k for k in SkillKind if k.last_place_only} == {SkillKind.LIGHTNING, SkillKind.MAGNET}


class TestRaceConfig:
    """Test RaceConfig defaults and construction from plain data."""

    def test_defaults(self, config):
        assert config.distance == 4000.0
        assert config.base_speed == 100.0
        assert config.time_step == 100
        assert config.max_duration == 60_000
        assert config.snapshot_interval == 500
        assert config.step_seconds == pytest.approx(0.1)
        assert config.enabled_skills == tuple(SkillKind)

    def test_enabled_skills_kept_in_declaration_order(self):
        config = RaceConfig(enabled_skills=(SkillKind.MAGNET, SkillKind.BOOST, SkillKind.BOMB))
        assert config.enabled_skills == (SkillKind.BOOST, SkillKind.BOMB, SkillKind.MAGNET)

    def test_without_skills(self, config):
        assert config.without_skills().enabled_skills == ()
        assert config.enabled_skills == tuple(SkillKind)

    def test_from_dict_nested_values(self):
        config = RaceConfig.from_dict({
            "distance": 1000,
            "enabled_skills": ["boost", "immune"],
            "skills": {"boost": {"speed_multiplier": 2.0}},
        })
        assert config.distance == 1000.0
        assert config.enabled_skills == (SkillKind.BOOST, SkillKind.IMMUNE)
        assert config.skills.boost.speed_multiplier == 2.0
        assert config.skills.bomb.stun_duration == Range(min=2.0, max=3.0)

    def test_from_dict_rejects_bad_values(self):
        with pytest.raises(InvalidConfigError):
            RaceConfig.from_dict({"time_step": 0})

    def test_from_dict_rejects_unknown_skill(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            RaceConfig.from_dict({"enabled_skills": ["teleport"]})
        assert isinstance(exc_info.value, DuckRaceError)
        assert isinstance(exc_info.value, ValueError)

    def test_json_round_trip(self, config):
        assert RaceConfig.model_validate(config.model_dump(mode="json")) == config


class TestEffects:
    """Test effect timers."""

    def test_tick_reduces_remaining(self):
        boost = tick(Boost(remaining=2.0, multiplier=1.3), 0.5)
        assert boost == Boost(remaining=1.5, multiplier=1.3)

    def test_tick_drops_expired_effect(self):
        assert tick(Stun(remaining=0.1), 0.1) is None
        assert tick(Stun(remaining=0.05), 0.1) is None

    def test_tick_empty_slot(self):
        assert tick(None, 0.1) is None
