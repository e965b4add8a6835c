"""
Controls
========

Per-frame input sampling with just-pressed edge detection.

The game only knows three logical inputs: the two alternating charge keys
and restart. Hosts sample the held state once per frame and hand an
``InputFrame`` to the game; ``KeyEdgeTracker`` turns that into rising edges.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class ControlKey(Enum):
    """Logical inputs understood by the simulation."""
    CHARGE_A = "charge_a"   # Z on keyboard
    CHARGE_B = "charge_b"   # X on keyboard
    RESTART = "restart"     # R on keyboard


# Evaluation order for same-tick presses
CHARGE_KEYS: Tuple[ControlKey, ...] = (ControlKey.CHARGE_A, ControlKey.CHARGE_B)


@dataclass(frozen=True)
class InputFrame:
    """Held state of every logical input for one frame."""
    charge_a: bool = False
    charge_b: bool = False
    restart: bool = False

    def is_held(self, key: ControlKey) -> bool:
        return getattr(self, key.value)

    def as_tuple(self) -> Tuple[bool, bool, bool]:
        """Compact form used by replays and the agent action space."""
        return (self.charge_a, self.charge_b, self.restart)

    @classmethod
    def from_sequence(cls, values) -> "InputFrame":
        """Build from any 3-element sequence of truthy values."""
        if len(values) != 3:
            raise ValueError(f"Input frame needs 3 values, got {len(values)}")
        return cls(bool(values[0]), bool(values[1]), bool(values[2]))


NO_INPUT = InputFrame()


class KeyEdgeTracker:
    """
    Derives just-pressed events by comparing against the previous frame.

    A key is just-pressed when it is held now and was not held on the
    previous call to ``update``.
    """

    def __init__(self):
        self._previous: Dict[ControlKey, bool] = {key: False for key in ControlKey}
        self._pressed: Dict[ControlKey, bool] = {key: False for key in ControlKey}

    def update(self, frame: InputFrame) -> None:
        """Consume this frame's held state."""
        for key in ControlKey:
            held = frame.is_held(key)
            self._pressed[key] = held and not self._previous[key]
            self._previous[key] = held

    def just_pressed(self, key: ControlKey) -> bool:
        """True if ``key`` went down on the last update."""
        return self._pressed[key]

    def reset(self) -> None:
        """Forget all history, as if every key had been released."""
        for key in ControlKey:
            self._previous[key] = False
            self._pressed[key] = False
