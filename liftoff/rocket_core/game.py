"""
Core Game
=========

Main game orchestrator combining the launch timers, charge meter, flight
model, effects and highscore persistence.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from liftoff.rocket_core.audio import AudioBackend
from liftoff.rocket_core.charge_meter import ChargeEvent, ChargeMeter
from liftoff.rocket_core.config_loader import GameConfig, get_config
from liftoff.rocket_core.controls import (
    CHARGE_KEYS,
    NO_INPUT,
    ControlKey,
    InputFrame,
    KeyEdgeTracker,
)
from liftoff.rocket_core.effects import ParticleSystem, ScreenShake
from liftoff.rocket_core.flight_model import FlightModel
from liftoff.rocket_core.highscore import HighscoreStore
from liftoff.rocket_core.results import ResultStats
from liftoff.rocket_core.rules import GamePhase, LaunchRules
from liftoff.rocket_core.state_snapshot import GameSnapshot, SnapshotBuilder

logger = logging.getLogger(__name__)


@dataclass
class StepResult:
    """Result of a single frame."""
    snapshot: GameSnapshot
    phase: GamePhase
    events: List[str] = field(default_factory=list)
    charges: List[ChargeEvent] = field(default_factory=list)
    delta_altitude: float = 0.0
    landed: bool = False
    new_highscore: bool = False


class LaunchGame:
    """
    Main game simulation class.

    Orchestrates:
    - Ready/set/go and countdown timers
    - Charge presses and combos
    - Flight integration and landing
    - Smoke particles and screen shake
    - Highscore persistence
    - State snapshots

    One step = one fixed-length frame. All randomness comes from a single
    seeded ``random.Random`` and only touches cosmetic effects, so flight
    results depend on the inputs alone.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        audio: Optional[AudioBackend] = None,
        highscores: Optional[HighscoreStore] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for the cosmetic effects.
            audio: Sound collaborator. Silent if None.
            highscores: Highscore store. Memory-only if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._rng = random.Random(seed)

        # Collaborators
        self.audio = audio if audio is not None else AudioBackend()
        self.highscores = (
            highscores if highscores is not None
            else HighscoreStore(None, config.highscore.default)
        )

        # Subsystems
        self.meter = ChargeMeter(config)
        self.flight = FlightModel(config)
        self.rules = LaunchRules(config)
        self.particles = ParticleSystem(config, self._rng)
        self.shake = ScreenShake(self._rng)
        self._edges = KeyEdgeTracker()
        self._snapshot_builder = SnapshotBuilder(config)

        # Game state
        self.inputs: InputFrame = NO_INPUT
        self.frame: int = 0
        self.launched: bool = False
        self.power_down: bool = False
        self.game_over: bool = False
        self.cloud_offset: float = 0.0
        self.run_highscore: float = 0.0
        self.last_result: Optional[ResultStats] = None
        self._events: List[str] = []

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    @property
    def phase(self) -> GamePhase:
        """Current phase, derived from the state flags."""
        if self.game_over:
            return GamePhase.GAME_OVER
        if self.launched:
            return GamePhase.LAUNCHED
        if self.rules.countdown.started:
            return GamePhase.COUNTDOWN
        return GamePhase.INTRO

    @property
    def altitude(self) -> float:
        """Height above ground in meters."""
        return self.flight.height_above_ground

    @property
    def is_over(self) -> bool:
        """True if the last run has landed and restart is pending."""
        return self.game_over

    def reset(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Reset game to initial state.

        Unlike ``restart`` this also forgets input history, the frame counter
        and the last result.

        Args:
            seed: New random seed. Uses previous if None.

        Returns:
            Initial game snapshot.
        """
        if seed is not None:
            self._seed = seed
        self._rng.seed(self._seed)

        self.restart()
        self._edges.reset()
        self.inputs = NO_INPUT
        self.frame = 0
        self.cloud_offset = 0.0
        self.last_result = None
        self._events = []

        return self.snapshot()

    def restart(self) -> None:
        """Re-initialize the run: back to ready/set/go with zeroed counters."""
        self.flight.reset()
        self.meter.reset()
        self.rules.reset()
        self.particles.clear()
        self.shake.reset()
        self.audio.stop_all()

        self.launched = False
        self.power_down = False
        self.game_over = False
        self.run_highscore = 0.0
        self._emit("restart")
        logger.debug("Run restarted")

    def step(self, inputs: InputFrame = NO_INPUT) -> StepResult:
        """
        Advance the simulation by one frame.

        Args:
            inputs: Held state of the controls this frame.

        Returns:
            StepResult with the new snapshot and this frame's events.
        """
        dt = self._config.timing.dt
        self._events = []
        charges: List[ChargeEvent] = []
        altitude_before = self.altitude

        self.frame += 1
        self.inputs = inputs
        self._edges.update(inputs)

        self.shake.update(dt)
        self.meter.tick(dt)

        if self.game_over:
            if self._edges.just_pressed(ControlKey.RESTART):
                self.restart()
            return self._step_result(altitude_before, charges)

        self._scroll_clouds(dt)
        self._update_intro(dt)

        if self._edges.just_pressed(ControlKey.RESTART):
            self.restart()
            return self._step_result(altitude_before, charges)

        charging = self.rules.charging_open and not self.launched

        if charging and not self.rules.countdown.started:
            self._begin_countdown()

        if charging:
            for key in CHARGE_KEYS:
                if self._edges.just_pressed(key):
                    charges.append(self._charge(key))
            self._update_countdown(dt)

        if self.launched and self.meter.power <= 0 and not self.power_down:
            self._cut_engine()

        if self.launched and not self.power_down:
            self.particles.emit()
        self.particles.update(dt)

        landed = False
        new_highscore = False
        if self.launched:
            tick = self.flight.step(dt, self.meter)
            if tick.altitude > self.run_highscore:
                self.run_highscore = tick.altitude
            if self.power_down and self.flight.on_ground:
                new_highscore = self._finalize_run()
                landed = True

        return self._step_result(altitude_before, charges, landed, new_highscore)

    def _emit(self, event: str) -> None:
        self._events.append(event)

    def _step_result(
        self,
        altitude_before: float,
        charges: List[ChargeEvent],
        landed: bool = False,
        new_highscore: bool = False
    ) -> StepResult:
        return StepResult(
            snapshot=self.snapshot(),
            phase=self.phase,
            events=list(self._events),
            charges=charges,
            delta_altitude=self.altitude - altitude_before,
            landed=landed,
            new_highscore=new_highscore
        )

    def _scroll_clouds(self, dt: float) -> None:
        width = self._config.display.width
        self.cloud_offset -= self._config.display.cloud_speed * dt
        if self.cloud_offset <= -width:
            self.cloud_offset = 0.0

    def _update_intro(self, dt: float) -> None:
        if self.rules.intro.update(dt):
            self.audio.play("count")
            self._emit("intro_step")

    def _begin_countdown(self) -> None:
        """Countdown starts: per-run counters reset and the first number is called."""
        countdown = self.rules.countdown
        self.audio.play("countdown")
        countdown.begin()
        self.meter.reset_run_stats()
        self.audio.play_voice(countdown.count)
        self._emit("countdown_started")
        logger.debug("Countdown started at %d", countdown.count)

    def _charge(self, key: ControlKey) -> ChargeEvent:
        event = self.meter.press(key)
        self.audio.play("charge")
        self._emit("charge")
        return event

    def _update_countdown(self, dt: float) -> None:
        countdown = self.rules.countdown
        was_expired = countdown.expired
        if countdown.update(dt):
            self.audio.play_voice(countdown.count)
            self._emit("count")
        elif was_expired:
            self._launch()

    def _launch(self) -> None:
        if not self.audio.is_playing("launch"):
            self.audio.play("launch")
        self.launched = True
        self.power_down = False
        self.flight.begin_run()
        self.shake.start_from(self._config.shake)
        self.meter.clear_combo()
        self._emit("launch")
        logger.info("Launch with %.1f power after %d taps", self.meter.power, self.meter.tap_count)

    def _cut_engine(self) -> None:
        """Power ran out: stop the engine sound and start the fall."""
        self.audio.stop("launch")
        self.audio.play("powerdown")
        self.power_down = True
        self._emit("power_down")

    def _finalize_run(self) -> bool:
        """
        Land the rocket, capture the results and persist a new record.

        Returns:
            True if this run beat the saved highscore.
        """
        countdown = self.rules.countdown
        result = ResultStats.capture(
            altitude=self.run_highscore,
            peak_speed=self.flight.peak_speed,
            duration=self.flight.run_duration,
            prep_duration=countdown.prep_duration,
            tap_count=self.meter.tap_count,
            max_combo=self.meter.max_combo,
            fuel_collected=self.meter.total_fuel
        )

        self.flight.land()
        self.meter.power = 0.0
        self.meter.clear_combo()
        countdown.stop()
        self.launched = False
        self.power_down = False
        self.game_over = True
        self.last_result = result
        self._emit("landed")
        logger.info("Landed: %.0fm in %.1fs", result.altitude, result.duration)

        new_record = self.highscores.submit(self.run_highscore)
        if new_record:
            self._emit("new_highscore")
        return new_record

    def snapshot(self) -> GameSnapshot:
        """Build current game state snapshot."""
        return self._snapshot_builder.build(self)

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "phase": self.phase.value,
            "frame": self.frame,
            "altitude": self.altitude,
            "speed": self.flight.speed,
            "power": self.meter.power,
            "combo": self.meter.combo_count,
            "tap_count": self.meter.tap_count,
            "run_highscore": self.run_highscore,
            "saved_highscore": self.highscores.best,
        }
