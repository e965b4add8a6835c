"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml


@dataclass(frozen=True)
class TimingConfig:
    """Fixed timestep and phase timer settings."""
    dt: float                      # Seconds per simulation tick
    intro_steps: int               # Ready/Set/Go frames before the countdown
    intro_step_seconds: float
    countdown_start: int           # First number announced
    countdown_tick_seconds: float


@dataclass(frozen=True)
class ChargeConfig:
    """Power meter and combo parameters."""
    power_max: float
    base_power_gain: float
    combo_bonus: float
    combo_timeout: float

    def gain_for_combo(self, combo: int) -> float:
        """Power added by a press that brings the chain to ``combo``."""
        return self.base_power_gain + max(0, combo - 1) * self.combo_bonus


@dataclass(frozen=True)
class FlightConfig:
    """Ascent and freefall integration parameters."""
    speed_max: float
    gravity: float
    thrust_accel: float
    burn_rate: float
    fall_decel: float
    ground_level: float
    sky_ceiling: float


@dataclass(frozen=True)
class ParticleConfig:
    """Exhaust smoke emission parameters."""
    emit_x: float
    emit_y: float
    radius_min: float
    radius_jitter: float
    velocity_min: float
    velocity_jitter: float
    growth: float
    fade: float


@dataclass(frozen=True)
class ShakeConfig:
    """Screen shake triggered on launch."""
    launch_duration: float
    launch_magnitude: float


@dataclass(frozen=True)
class DisplayConfig:
    """Window geometry and cosmetic scrolling."""
    width: int
    height: int
    fps: int
    cloud_speed: float
    title: str


@dataclass(frozen=True)
class HighscoreConfig:
    """Highscore record location."""
    path: str
    default: float


@dataclass(frozen=True)
class EnvConfig:
    """Gymnasium wrapper limits."""
    max_episode_frames: int
    max_particles_obs: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    timing: TimingConfig
    charge: ChargeConfig
    flight: FlightConfig
    particles: ParticleConfig
    shake: ShakeConfig
    display: DisplayConfig
    highscore: HighscoreConfig
    env: EnvConfig

    @property
    def fps(self) -> int:
        """Target frames per second for the human loop."""
        return self.display.fps


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.timing.dt <= 0:
        raise ValueError(f"timing.dt must be positive, got {config.timing.dt}")

    if config.timing.intro_steps < 1:
        raise ValueError(f"timing.intro_steps must be >= 1, got {config.timing.intro_steps}")

    if config.timing.countdown_start < 0:
        raise ValueError(
            f"timing.countdown_start must be >= 0, got {config.timing.countdown_start}"
        )

    if config.charge.power_max <= 0:
        raise ValueError(f"charge.power_max must be positive, got {config.charge.power_max}")

    if config.charge.combo_timeout <= 0:
        raise ValueError(
            f"charge.combo_timeout must be positive, got {config.charge.combo_timeout}"
        )

    flight = config.flight
    if flight.gravity >= 0:
        raise ValueError(f"flight.gravity must be negative, got {flight.gravity}")

    for name in ("thrust_accel", "burn_rate", "fall_decel"):
        value = getattr(flight, name)
        if value <= 0:
            raise ValueError(f"flight.{name} must be positive, got {value}")

    if flight.gravity >= flight.speed_max:
        raise ValueError(
            f"flight.gravity ({flight.gravity}) must be below "
            f"flight.speed_max ({flight.speed_max})"
        )

    if flight.sky_ceiling <= flight.ground_level:
        raise ValueError(
            f"flight.sky_ceiling ({flight.sky_ceiling}) must be above "
            f"flight.ground_level ({flight.ground_level})"
        )

    if not 0 < config.particles.fade <= 1:
        raise ValueError(f"particles.fade must be in (0, 1], got {config.particles.fade}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    timing_data = raw["timing"]
    timing = TimingConfig(
        dt=float(timing_data["dt"]),
        intro_steps=int(timing_data.get("intro_steps", 3)),
        intro_step_seconds=float(timing_data.get("intro_step_seconds", 1.0)),
        countdown_start=int(timing_data.get("countdown_start", 10)),
        countdown_tick_seconds=float(timing_data.get("countdown_tick_seconds", 1.0))
    )

    charge_data = raw["charge"]
    charge = ChargeConfig(
        power_max=float(charge_data["power_max"]),
        base_power_gain=float(charge_data["base_power_gain"]),
        combo_bonus=float(charge_data["combo_bonus"]),
        combo_timeout=float(charge_data["combo_timeout"])
    )

    flight_data = raw["flight"]
    flight = FlightConfig(
        speed_max=float(flight_data["speed_max"]),
        gravity=float(flight_data["gravity"]),
        thrust_accel=float(flight_data["thrust_accel"]),
        burn_rate=float(flight_data["burn_rate"]),
        fall_decel=float(flight_data["fall_decel"]),
        ground_level=float(flight_data.get("ground_level", 0.0)),
        sky_ceiling=float(flight_data["sky_ceiling"])
    )

    particle_data = raw["particles"]
    particles = ParticleConfig(
        emit_x=float(particle_data["emit_x"]),
        emit_y=float(particle_data["emit_y"]),
        radius_min=float(particle_data["radius_min"]),
        radius_jitter=float(particle_data.get("radius_jitter", 0.0)),
        velocity_min=float(particle_data["velocity_min"]),
        velocity_jitter=float(particle_data.get("velocity_jitter", 0.0)),
        growth=float(particle_data.get("growth", 1.0)),
        fade=float(particle_data["fade"])
    )

    shake_data = raw.get("shake", {})
    shake = ShakeConfig(
        launch_duration=float(shake_data.get("launch_duration", 0.6)),
        launch_magnitude=float(shake_data.get("launch_magnitude", 6.0))
    )

    display_data = raw.get("display", {})
    display = DisplayConfig(
        width=int(display_data.get("width", 480)),
        height=int(display_data.get("height", 640)),
        fps=int(display_data.get("fps", 60)),
        cloud_speed=float(display_data.get("cloud_speed", 30.0)),
        title=str(display_data.get("title", "Liftoff"))
    )

    highscore_data = raw.get("highscore", {})
    highscore = HighscoreConfig(
        path=str(highscore_data.get("path", "highscore.json")),
        default=float(highscore_data.get("default", 0.0))
    )

    env_data = raw.get("env", {})
    env = EnvConfig(
        max_episode_frames=int(env_data.get("max_episode_frames", 20000)),
        max_particles_obs=int(env_data.get("max_particles_obs", 128))
    )

    config = GameConfig(
        timing=timing,
        charge=charge,
        flight=flight,
        particles=particles,
        shake=shake,
        display=display,
        highscore=highscore,
        env=env
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
