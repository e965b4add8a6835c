"""
Game Rules
==========

Phase definitions and the pre-launch timers (ready-set-go and countdown).
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from liftoff.rocket_core.config_loader import GameConfig, get_config


class GamePhase(Enum):
    """
    Where the run currently is.

    Charging is open for the whole COUNTDOWN phase.
    """
    INTRO = "intro"
    COUNTDOWN = "countdown"
    LAUNCHED = "launched"
    GAME_OVER = "game_over"


class IntroSequence:
    """
    Ready / Set / Go.

    The step index advances once per ``intro_step_seconds`` until it
    reaches ``intro_steps``.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize intro sequence.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._steps = config.timing.intro_steps
        self._step_seconds = config.timing.intro_step_seconds
        self.step: int = 0
        self.timer: float = 0.0

    @property
    def finished(self) -> bool:
        return self.step >= self._steps

    @property
    def total_steps(self) -> int:
        return self._steps

    def update(self, dt: float) -> bool:
        """
        Accumulate time.

        Returns:
            True if the step index advanced this tick.
        """
        if self.finished:
            return False

        self.timer += dt
        if self.timer >= self._step_seconds:
            self.step += 1
            self.timer = 0.0
            return True
        return False

    def reset(self) -> None:
        self.step = 0
        self.timer = 0.0


class CountdownSequence:
    """
    Counts from ``countdown_start`` down to zero, one number per tick period.

    ``started`` flips when the countdown begins; prep time accumulates from
    then on until launch.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize countdown.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._start = config.timing.countdown_start
        self._tick_seconds = config.timing.countdown_tick_seconds
        self.count: int = self._start
        self.timer: float = 0.0
        self.started: bool = False
        self.prep_duration: float = 0.0

    @property
    def start_value(self) -> int:
        return self._start

    @property
    def expired(self) -> bool:
        """True once the count has reached zero."""
        return self.count <= 0

    def begin(self) -> None:
        """Start counting; prep time restarts from zero."""
        self.started = True
        self.prep_duration = 0.0

    def update(self, dt: float) -> bool:
        """
        Accumulate prep time and tick the count.

        Returns:
            True if the count dropped this tick.
        """
        if not self.started:
            return False

        self.prep_duration += dt
        if self.count <= 0:
            return False

        self.timer += dt
        if self.timer >= self._tick_seconds:
            self.count -= 1
            self.timer = 0.0
            return True
        return False

    def stop(self) -> None:
        """Leave the counting state (run ended)."""
        self.started = False

    def reset(self) -> None:
        self.count = self._start
        self.timer = 0.0
        self.started = False
        self.prep_duration = 0.0


class LaunchRules:
    """
    Combined interface for the pre-launch timers.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize launch rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self.intro = IntroSequence(config)
        self.countdown = CountdownSequence(config)

    @property
    def charging_open(self) -> bool:
        """Charge presses count only after the intro."""
        return self.intro.finished

    def reset(self) -> None:
        """Reset all rule state."""
        self.intro.reset()
        self.countdown.reset()
