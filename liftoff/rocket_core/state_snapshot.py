"""
State Snapshot
==============

Frozen per-frame view of the game for renderers and agents.

The renderer reads only snapshots, never the live game, so drawing can't
mutate simulation state. ``to_obs_dict`` packs the same data into fixed-size
numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, TYPE_CHECKING
import numpy as np

from liftoff.rocket_core.config_loader import GameConfig, get_config
from liftoff.rocket_core.results import ResultStats
from liftoff.rocket_core.rules import GamePhase

if TYPE_CHECKING:
    from liftoff.rocket_core.game import LaunchGame

# Phase order used for the integer phase observation
PHASE_INDEX: Dict[GamePhase, int] = {phase: i for i, phase in enumerate(GamePhase)}


@dataclass(frozen=True)
class GameSnapshot:
    """
    Everything a frame needs to be drawn.

    Particles are (x, y, radius, opacity) tuples in screen space.
    """
    # Phase
    phase: GamePhase
    intro_step: int
    count: int
    frame: int

    # Flight
    altitude: float               # Meters above ground
    speed: float
    run_highscore: float
    saved_highscore: float

    # Charge
    power: float
    power_max: float
    power_fraction: float
    combo_count: int
    combo_fraction: float
    tap_count: int
    prep_duration: float

    # Flags
    counting: bool
    launched: bool
    power_down: bool
    game_over: bool
    charge_a_held: bool
    charge_b_held: bool

    # Cosmetics
    shake_offset: Tuple[float, float]
    cloud_offset: float
    particles: Tuple[Tuple[float, float, float, float], ...]

    # Result of the last landed run, if any
    last_result: Optional[ResultStats] = None

    @property
    def taps_per_second(self) -> float:
        """Live tap rate during charging."""
        if self.prep_duration <= 0:
            return 0.0
        return self.tap_count / self.prep_duration

    @property
    def show_power_meter(self) -> bool:
        """Fuel bar is visible from the countdown until power runs out."""
        return (self.counting and not self.power_down) or self.launched

    @property
    def show_combo_meter(self) -> bool:
        return self.counting and not self.launched and self.combo_count > 0

    def to_obs_dict(self, max_particles: int = 128) -> Dict[str, np.ndarray]:
        """
        Convert to Gymnasium observation dictionary.

        Args:
            max_particles: Size of the padded particle arrays.
        """
        count = min(len(self.particles), max_particles)
        particle_xy = np.zeros((max_particles, 2), dtype=np.float32)
        particle_radius = np.zeros(max_particles, dtype=np.float32)
        particle_opacity = np.zeros(max_particles, dtype=np.float32)
        particle_mask = np.zeros(max_particles, dtype=np.int8)

        if count:
            arr = np.asarray(self.particles[:count], dtype=np.float32)
            particle_xy[:count] = arr[:, 0:2]
            particle_radius[:count] = arr[:, 2]
            particle_opacity[:count] = arr[:, 3]
            particle_mask[:count] = 1

        return {
            "phase": np.array(PHASE_INDEX[self.phase], dtype=np.int32),
            "intro_step": np.array(self.intro_step, dtype=np.int32),
            "count": np.array(self.count, dtype=np.int32),
            "altitude": np.array(self.altitude, dtype=np.float32),
            "speed": np.array(self.speed, dtype=np.float32),
            "power": np.array(self.power, dtype=np.float32),
            "power_fraction": np.array(self.power_fraction, dtype=np.float32),
            "combo_count": np.array(self.combo_count, dtype=np.int32),
            "combo_fraction": np.array(self.combo_fraction, dtype=np.float32),
            "tap_count": np.array(self.tap_count, dtype=np.int32),
            "run_highscore": np.array(self.run_highscore, dtype=np.float32),
            "saved_highscore": np.array(self.saved_highscore, dtype=np.float32),
            "particle_xy": particle_xy,
            "particle_radius": particle_radius,
            "particle_opacity": particle_opacity,
            "particle_mask": particle_mask,
        }


class SnapshotBuilder:
    """Builds GameSnapshot instances from a live game."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()
        self._config = config

    def build(self, game: "LaunchGame") -> GameSnapshot:
        """Copy the game's current state into a frozen snapshot."""
        meter = game.meter
        flight = game.flight
        rules = game.rules

        return GameSnapshot(
            phase=game.phase,
            intro_step=rules.intro.step,
            count=rules.countdown.count,
            frame=game.frame,
            altitude=flight.height_above_ground,
            speed=flight.speed,
            run_highscore=game.run_highscore,
            saved_highscore=game.highscores.best,
            power=meter.power,
            power_max=meter.power_max,
            power_fraction=meter.power_fraction,
            combo_count=meter.combo_count,
            combo_fraction=meter.combo_fraction,
            tap_count=meter.tap_count,
            prep_duration=rules.countdown.prep_duration,
            counting=rules.countdown.started,
            launched=game.launched,
            power_down=game.power_down,
            game_over=game.game_over,
            charge_a_held=game.inputs.charge_a,
            charge_b_held=game.inputs.charge_b,
            shake_offset=game.shake.offset,
            cloud_offset=game.cloud_offset,
            particles=tuple(p.as_tuple() for p in game.particles.particles),
            last_result=game.last_result
        )
