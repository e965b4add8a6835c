"""
Tests for smoke particles and screen shake.
"""

import random

import pytest

from liftoff.rocket_core.config_loader import load_config
from liftoff.rocket_core.effects import ParticleSystem, ScreenShake


@pytest.fixture
def config():
    return load_config()


class TestParticleSystem:
    """Test particle emission and decay."""

    def test_emit_within_ranges(self, config):
        cfg = config.particles
        system = ParticleSystem(config, random.Random(0))
        for _ in range(50):
            p = system.emit()
            assert (p.x, p.y) == (cfg.emit_x, cfg.emit_y)
            assert cfg.radius_min <= p.radius <= cfg.radius_min + cfg.radius_jitter
            assert cfg.velocity_min <= p.velocity <= cfg.velocity_min + cfg.velocity_jitter
            assert p.opacity == 1.0

        assert len(system) == 50

    def test_update_moves_grows_and_fades(self, config):
        cfg = config.particles
        dt = config.timing.dt
        system = ParticleSystem(config, random.Random(1))
        p = system.emit()
        radius, velocity = p.radius, p.velocity

        system.update(dt)

        assert p.y == pytest.approx(cfg.emit_y + velocity * dt)
        assert p.radius == pytest.approx(radius * cfg.growth)
        assert p.opacity == pytest.approx(1.0 - cfg.fade)

    def test_removed_when_faded(self, config):
        """Lifetime is ceil(1 / fade) ticks and no survivor is transparent."""
        dt = config.timing.dt
        system = ParticleSystem(config, random.Random(2))
        system.emit()

        for _ in range(66):
            system.update(dt)
            assert all(p.opacity > 0 for p in system.particles)
        assert len(system) == 1

        removed = system.update(dt)
        assert removed == 1
        assert len(system) == 0

    def test_same_seed_same_particles(self, config):
        a = ParticleSystem(config, random.Random(7))
        b = ParticleSystem(config, random.Random(7))
        for _ in range(10):
            a.emit()
            b.emit()

        assert [p.as_tuple() for p in a.particles] == [p.as_tuple() for p in b.particles]

    def test_clear(self, config):
        system = ParticleSystem(config, random.Random(3))
        system.emit()
        system.clear()
        assert len(system) == 0


class TestScreenShake:
    """Test decaying camera offset."""

    def test_offset_bounded_by_magnitude(self, config):
        shake = ScreenShake(random.Random(0))
        shake.start_from(config.shake)
        magnitude = config.shake.launch_magnitude

        while shake.active:
            shake.update(config.timing.dt)
            ox, oy = shake.offset
            assert abs(ox) <= magnitude
            assert abs(oy) <= magnitude

    def test_offset_zero_after_duration(self, config):
        shake = ScreenShake(random.Random(0))
        shake.start(0.1, 6.0)
        for _ in range(20):
            shake.update(config.timing.dt)

        assert not shake.active
        assert shake.offset == (0.0, 0.0)

    def test_rejects_non_positive_duration(self):
        shake = ScreenShake(random.Random(0))
        with pytest.raises(ValueError):
            shake.start(0.0, 6.0)

    def test_inactive_update_keeps_zero(self, config):
        shake = ScreenShake(random.Random(0))
        shake.update(config.timing.dt)
        assert shake.offset == (0.0, 0.0)
