"""
Charge Meter
============

Power accumulation from alternating key presses, with combo bonuses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from liftoff.rocket_core.config_loader import GameConfig, get_config
from liftoff.rocket_core.controls import ControlKey


@dataclass
class ChargeEvent:
    """Record of a single charge press."""
    key: ControlKey
    combo: int
    added: float          # Power credited before clamping
    power_after: float

    def __repr__(self) -> str:
        return f"ChargeEvent({self.key.value}, combo=x{self.combo}, +{self.added:.1f})"


class ChargeMeter:
    """
    Tracks power, the combo chain and tap statistics for one run.

    Combo rules:
    - A press of the *other* key while the combo timer is running extends the chain.
    - Any other press starts a new chain at 1.
    - When the timer runs out the chain drops to 0.

    Each press adds ``base_power_gain + (combo - 1) * combo_bonus``. Power is
    clamped to ``power_max``; ``total_fuel`` keeps the unclamped sum.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize charge meter.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config.charge
        self.power: float = 0.0
        self.combo_count: int = 0
        self.combo_timer: float = 0.0
        self.max_combo: int = 0
        self.tap_count: int = 0
        self.total_fuel: float = 0.0
        self._last_key: Optional[ControlKey] = None

    @property
    def power_max(self) -> float:
        return self._config.power_max

    @property
    def combo_timeout(self) -> float:
        return self._config.combo_timeout

    @property
    def power_fraction(self) -> float:
        """Power as a fraction of capacity, in [0, 1]."""
        return max(0.0, min(1.0, self.power / self._config.power_max))

    @property
    def combo_fraction(self) -> float:
        """Remaining combo window as a fraction, in [0, 1]."""
        return max(0.0, min(1.0, self.combo_timer / self._config.combo_timeout))

    @property
    def last_key(self) -> Optional[ControlKey]:
        return self._last_key

    def press(self, key: ControlKey) -> ChargeEvent:
        """
        Apply one charge press.

        Args:
            key: Which charge key went down.

        Returns:
            ChargeEvent describing the credited power.
        """
        chained = (
            self._last_key is not None
            and self._last_key != key
            and self.combo_timer > 0
        )
        if chained:
            self.combo_count += 1
        else:
            self.combo_count = 1

        self._last_key = key
        self.combo_timer = self._config.combo_timeout

        added = self._config.gain_for_combo(self.combo_count)
        self.power = min(self.power + added, self._config.power_max)
        self.total_fuel += added
        self.tap_count += 1
        if self.combo_count > self.max_combo:
            self.max_combo = self.combo_count

        return ChargeEvent(key=key, combo=self.combo_count, added=added, power_after=self.power)

    def tick(self, dt: float) -> None:
        """Run down the combo window; an expired window breaks the chain."""
        if self.combo_timer > 0:
            self.combo_timer -= dt
            if self.combo_timer <= 0:
                self.clear_combo()

    def drain(self, amount: float) -> float:
        """
        Burn power, never going below zero.

        Returns:
            Power left after draining.
        """
        self.power = max(0.0, self.power - amount)
        return self.power

    def clear_combo(self) -> None:
        """Drop the current chain without touching the run statistics."""
        self.combo_count = 0
        self.combo_timer = 0.0
        self._last_key = None

    def reset_run_stats(self) -> None:
        """Zero the per-run counters at the start of a countdown."""
        self.clear_combo()
        self.max_combo = 0
        self.tap_count = 0
        self.total_fuel = 0.0

    def reset(self) -> None:
        """Reset everything, power included."""
        self.reset_run_stats()
        self.power = 0.0
