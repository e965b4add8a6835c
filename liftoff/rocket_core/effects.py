"""
Visual Effects
==============

Exhaust smoke particles and screen shake.

Both effects draw from a ``random.Random`` injected by the game, so a fixed
seed gives a repeatable picture. Neither feeds back into the flight.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from liftoff.rocket_core.config_loader import GameConfig, ShakeConfig, get_config


@dataclass
class Particle:
    """A single smoke puff."""
    x: float
    y: float
    radius: float
    velocity: float   # Downward speed in pixels per second
    opacity: float

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.radius, self.opacity)


class ParticleSystem:
    """
    Unpooled list of smoke puffs.

    Puffs sink, grow by ``growth`` and fade by ``fade`` every tick. A puff is
    dropped on the same tick its opacity reaches zero, so callers never see a
    non-positive opacity.
    """

    def __init__(self, config: Optional[GameConfig] = None, rng: Optional[random.Random] = None):
        if config is None:
            config = get_config()

        self._config = config.particles
        self._rng = rng if rng is not None else random.Random()
        self.particles: List[Particle] = []

    def __len__(self) -> int:
        return len(self.particles)

    def emit(self) -> Particle:
        """Spawn one puff at the nozzle with a randomized size and speed."""
        cfg = self._config
        particle = Particle(
            x=cfg.emit_x,
            y=cfg.emit_y,
            radius=cfg.radius_min + self._rng.random() * cfg.radius_jitter,
            velocity=cfg.velocity_min + self._rng.random() * cfg.velocity_jitter,
            opacity=1.0
        )
        self.particles.append(particle)
        return particle

    def update(self, dt: float) -> int:
        """
        Advance every puff by one tick.

        Returns:
            Number of puffs removed.
        """
        cfg = self._config
        removed = 0
        i = 0
        while i < len(self.particles):
            p = self.particles[i]
            p.y += p.velocity * dt
            p.opacity -= cfg.fade
            p.radius *= cfg.growth
            if p.opacity <= 0:
                del self.particles[i]
                removed += 1
                continue
            i += 1
        return removed

    def clear(self) -> None:
        self.particles.clear()


class ScreenShake:
    """
    Decaying random camera offset.

    Intensity falls linearly from ``magnitude`` to zero over ``duration``.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng if rng is not None else random.Random()
        self.timer: float = 0.0
        self.duration: float = 0.0
        self.magnitude: float = 0.0
        self.offset_x: float = 0.0
        self.offset_y: float = 0.0

    @property
    def active(self) -> bool:
        return self.timer > 0

    @property
    def offset(self) -> Tuple[float, float]:
        return (self.offset_x, self.offset_y)

    def start(self, duration: float, magnitude: float) -> None:
        if duration <= 0:
            raise ValueError(f"Shake duration must be positive, got {duration}")
        self.duration = duration
        self.timer = duration
        self.magnitude = magnitude

    def start_from(self, config: ShakeConfig) -> None:
        """Start the launch shake described by ``config``."""
        self.start(config.launch_duration, config.launch_magnitude)

    def update(self, dt: float) -> None:
        if self.timer <= 0:
            self.offset_x = 0.0
            self.offset_y = 0.0
            return

        self.timer = max(0.0, self.timer - dt)
        intensity = self.magnitude * (self.timer / self.duration)
        self.offset_x = (self._rng.random() * 2 - 1) * intensity
        self.offset_y = (self._rng.random() * 2 - 1) * intensity

    def reset(self) -> None:
        self.timer = 0.0
        self.offset_x = 0.0
        self.offset_y = 0.0
