"""
Flight Model
============

Fixed-step speed and altitude integration for the launched rocket.

Altitude is measured in meters above ``ground_level``. Speed is in meters
per tick: altitude advances by the current speed once per simulation step.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from liftoff.rocket_core.charge_meter import ChargeMeter
from liftoff.rocket_core.config_loader import GameConfig, get_config


@dataclass
class FlightTick:
    """Outcome of one integration step."""
    altitude_before: float
    altitude: float
    speed: float
    powered: bool

    @property
    def delta_altitude(self) -> float:
        return self.altitude - self.altitude_before


class FlightModel:
    """
    Rocket kinematics.

    While power remains, speed rises by ``thrust_accel * dt`` and power burns
    at ``burn_rate * dt``. Without power, speed falls by ``fall_decel * dt``
    until it reaches the gravity floor. Speed always stays within
    ``[gravity, speed_max]`` and altitude never drops below ground.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize flight model.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config.flight
        self.altitude: float = self._config.ground_level
        self.speed: float = 0.0
        self.peak_speed: float = 0.0
        self.peak_altitude: float = self._config.ground_level
        self.run_duration: float = 0.0

    @property
    def ground_level(self) -> float:
        return self._config.ground_level

    @property
    def speed_max(self) -> float:
        return self._config.speed_max

    @property
    def gravity(self) -> float:
        return self._config.gravity

    @property
    def on_ground(self) -> bool:
        return self.altitude <= self._config.ground_level

    @property
    def height_above_ground(self) -> float:
        return self.altitude - self._config.ground_level

    def begin_run(self) -> None:
        """Clear the per-run metrics at launch."""
        self.run_duration = 0.0
        self.peak_speed = 0.0

    def step(self, dt: float, meter: ChargeMeter) -> FlightTick:
        """
        Advance the rocket by one tick.

        Args:
            dt: Tick length in seconds.
            meter: Charge meter supplying (and losing) power.

        Returns:
            FlightTick with the new altitude and speed.
        """
        cfg = self._config
        altitude_before = self.altitude
        powered = meter.power > 0
        self.run_duration += dt

        if powered:
            self.speed = min(self.speed + cfg.thrust_accel * dt, cfg.speed_max)
            meter.drain(cfg.burn_rate * dt)
        elif self.speed > cfg.gravity and self.altitude >= cfg.ground_level:
            self.speed = max(self.speed - cfg.fall_decel * dt, cfg.gravity)

        if self.speed > self.peak_speed:
            self.peak_speed = self.speed

        # Past the ceiling the background has run out; only descent moves the rocket.
        if self.speed <= 0 or self.altitude - cfg.sky_ceiling < self.speed:
            self.altitude += self.speed
        if self.altitude < cfg.ground_level:
            self.altitude = cfg.ground_level

        if self.altitude > self.peak_altitude:
            self.peak_altitude = self.altitude

        return FlightTick(
            altitude_before=altitude_before,
            altitude=self.altitude,
            speed=self.speed,
            powered=powered
        )

    def land(self) -> None:
        """Put the rocket back on the pad after a run."""
        self.altitude = self._config.ground_level
        self.speed = 0.0

    def reset(self) -> None:
        """Reset to a fresh pre-launch state."""
        self.land()
        self.peak_speed = 0.0
        self.peak_altitude = self._config.ground_level
        self.run_duration = 0.0
