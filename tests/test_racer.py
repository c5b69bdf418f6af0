"""Tests for per-racer state."""

import pytest

from duckrace.models import (
    Boost,
    Immune,
    Magnet,
    Participant,
    RaceConfig,
    Range,
    SkillKind,
    Splash,
    Stun,
)
from duckrace.simulation.racer import Racer, RacerStatus


class TestRacerCreation:
    """Test building racers from participants."""

    def test_from_participant(self, config, rng):
        p = Participant(id="q", name="Quackers", avatar="q.png", color="#fff")
        racer = Racer.from_participant(p, 2, config, rng)

        assert racer.id == "q"
        assert racer.name == "Quackers"
        assert racer.index == 2
        assert racer.position == 3
        assert racer.avatar == "q.png"
        assert racer.color == "#fff"
        assert racer.meters_traveled == 0.0
        assert racer.current_speed == 100.0
        assert racer.status == RacerStatus.RACING
        assert racer.finish_time is None
        assert racer.active_buff is None
        assert racer.active_debuff is None

    def test_staggered_timers_within_ranges(self, config, rng):
        racer = Racer.from_participant(Participant(id="q"), 0, config, rng)

        assert set(racer.cooldowns) == set(SkillKind)
        assert all(2.0 <= cd <= 4.0 for cd in racer.cooldowns.values())
        assert 2000 <= racer.next_skill_attempt_time <= 4000

    def test_fixed_timers_with_degenerate_ranges(self, rng):
        config = RaceConfig(
            initial_cooldown=Range(min=3.0, max=3.0),
            initial_attempt_delay=Range(min=2.5, max=2.5),
        )
        racer = Racer.from_participant(Participant(id="q"), 0, config, rng)

        assert all(cd == 3.0 for cd in racer.cooldowns.values())
        assert racer.next_skill_attempt_time == 2500

    def test_fallback_name(self, config, rng):
        racer = Racer.from_participant(Participant(id="q"), 6, config, rng)
        assert racer.name == "Duck 7"


class TestRacerEffects:
    """Test the single buff and debuff slots."""

    def test_last_buff_wins(self, make_racer):
        racer = make_racer("a")
        racer.apply_buff(Boost(remaining=3.0, multiplier=1.3))
        racer.apply_buff(Immune(remaining=4.0))

        assert racer.immune == 4.0
        assert racer.boosted == 0.0
        assert racer.magnet_boosted == 0.0

    def test_last_debuff_wins(self, make_racer):
        racer = make_racer("a")
        racer.apply_debuff(Splash(remaining=2.0, reduction=0.2))
        racer.apply_debuff(Stun(remaining=1.5))

        assert racer.stunned == 1.5
        assert racer.splash_affected == 0.0

    def test_buff_and_debuff_coexist(self, make_racer):
        racer = make_racer("a")
        racer.apply_buff(Boost(remaining=3.0, multiplier=1.3))
        racer.apply_debuff(Splash(remaining=2.0, reduction=0.2))

        assert racer.boosted == 3.0
        assert racer.splash_affected == 2.0

    def test_tick_expires_effects_and_cooldowns(self, make_racer):
        racer = make_racer("a", cooldowns={SkillKind.BOOST: 0.3, SkillKind.BOMB: 0.05})
        racer.apply_buff(Immune(remaining=0.2))
        racer.apply_debuff(Stun(remaining=0.1))

        racer.tick(0.1)
        assert racer.active_debuff is None
        assert racer.immune == pytest.approx(0.1)
        assert racer.cooldowns[SkillKind.BOOST] == pytest.approx(0.2)
        assert racer.cooldowns[SkillKind.BOMB] == 0.0
        assert racer.is_off_cooldown(SkillKind.BOMB)
        assert not racer.is_off_cooldown(SkillKind.BOOST)


class TestRacerSpeed:
    """Test speed derivation from effects."""

    def test_base_speed(self, make_racer):
        assert make_racer("a").compute_speed() == 100.0

    def test_boost(self, make_racer):
        racer = make_racer("a")
        racer.apply_buff(Boost(remaining=2.0, multiplier=1.3))
        assert racer.compute_speed() == pytest.approx(130.0)

    def test_magnet(self, make_racer):
        racer = make_racer("a")
        racer.apply_buff(Magnet(remaining=3.0, boost_percent=0.5))
        assert racer.compute_speed() == pytest.approx(150.0)

    def test_splash(self, make_racer):
        racer = make_racer("a")
        racer.apply_debuff(Splash(remaining=2.0, reduction=0.2))
        assert racer.compute_speed() == pytest.approx(80.0)

    def test_boost_and_splash_stack(self, make_racer):
        racer = make_racer("a")
        racer.apply_buff(Boost(remaining=2.0, multiplier=1.3))
        racer.apply_debuff(Splash(remaining=2.0, reduction=0.2))
        assert racer.compute_speed() == pytest.approx(104.0)

    def test_immune_does_not_change_speed(self, make_racer):
        racer = make_racer("a")
        racer.apply_buff(Immune(remaining=2.0))
        assert racer.compute_speed() == 100.0


class TestRacerFinish:
    """Test crossing the line."""

    def test_finish_clamps_distance(self, make_racer):
        racer = make_racer("a", meters=4010.0)
        racer.finish(39_980.0, 4000.0)

        assert racer.finished
        assert racer.status == RacerStatus.FINISHED
        assert racer.finish_time == 39_980.0
        assert racer.meters_traveled == 4000.0

    def test_finish_only_once(self, make_racer):
        racer = make_racer("a")
        racer.finish(40_000.0, 4000.0)
        with pytest.raises(RuntimeError):
            racer.finish(40_100.0, 4000.0)
