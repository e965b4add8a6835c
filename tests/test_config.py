"""
Tests for configuration loading and validation.
"""

import pytest
import yaml

from liftoff.rocket_core.config_loader import get_config, load_config, reload_config


@pytest.fixture
def raw_config():
    """Default YAML contents as a dict, for writing variants."""
    config = load_config()
    return {
        "timing": {
            "dt": config.timing.dt,
            "intro_steps": config.timing.intro_steps,
            "countdown_start": config.timing.countdown_start,
        },
        "charge": {
            "power_max": config.charge.power_max,
            "base_power_gain": config.charge.base_power_gain,
            "combo_bonus": config.charge.combo_bonus,
            "combo_timeout": config.charge.combo_timeout,
        },
        "flight": {
            "speed_max": config.flight.speed_max,
            "gravity": config.flight.gravity,
            "thrust_accel": config.flight.thrust_accel,
            "burn_rate": config.flight.burn_rate,
            "fall_decel": config.flight.fall_decel,
            "sky_ceiling": config.flight.sky_ceiling,
        },
        "particles": {
            "emit_x": config.particles.emit_x,
            "emit_y": config.particles.emit_y,
            "radius_min": config.particles.radius_min,
            "velocity_min": config.particles.velocity_min,
            "fade": config.particles.fade,
        },
    }


def write_config(tmp_path, data):
    path = tmp_path / "game_config.yaml"
    path.write_text(yaml.safe_dump(data))
    return str(path)


class TestDefaults:
    """Test the shipped configuration."""

    def test_arcade_constants(self):
        config = load_config()

        assert config.charge.power_max == 900.0
        assert config.charge.combo_timeout == pytest.approx(0.35)
        assert config.flight.speed_max == 20.0
        assert config.flight.gravity == -40.0
        assert config.timing.countdown_start == 10
        assert config.timing.dt == pytest.approx(1 / 60)
        assert config.display.width == 480
        assert config.display.height == 640
        assert config.fps == 60

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_reload_replaces_cache(self):
        before = get_config()
        after = reload_config()
        assert after is not before
        assert get_config() is after


class TestCustomFiles:
    """Test loading and rejecting variant files."""

    def test_optional_sections_default(self, tmp_path, raw_config):
        config = load_config(write_config(tmp_path, raw_config))

        assert config.shake.launch_duration == pytest.approx(0.6)
        assert config.highscore.path == "highscore.json"
        assert config.flight.ground_level == 0.0
        assert config.particles.growth == 1.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    @pytest.mark.parametrize("section,key,value", [
        ("timing", "dt", 0.0),
        ("charge", "power_max", -1.0),
        ("charge", "combo_timeout", 0.0),
        ("flight", "gravity", 25.0),
        ("flight", "gravity", 0.0),
        ("flight", "thrust_accel", 0.0),
        ("flight", "burn_rate", -60.0),
        ("flight", "fall_decel", 0.0),
        ("flight", "sky_ceiling", -10.0),
        ("particles", "fade", 0.0),
    ])
    def test_invalid_values_rejected(self, tmp_path, raw_config, section, key, value):
        raw_config[section][key] = value
        with pytest.raises(ValueError):
            load_config(write_config(tmp_path, raw_config))

    def test_config_is_frozen(self):
        config = load_config()
        with pytest.raises(AttributeError):
            config.charge.power_max = 1.0
