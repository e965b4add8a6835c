"""
Flight Results
==============

Immutable summary captured when a run lands.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List


@dataclass(frozen=True)
class ResultStats:
    """End-of-run statistics shown on the result panel."""
    altitude: float          # Peak height above ground, meters
    peak_speed: float
    duration: float          # Seconds from launch to landing
    prep_duration: float     # Seconds spent charging
    tap_count: int
    max_combo: int
    average_tps: float       # Taps per second over the prep time
    fuel_collected: float    # Unclamped power credited by presses

    @classmethod
    def capture(
        cls,
        altitude: float,
        peak_speed: float,
        duration: float,
        prep_duration: float,
        tap_count: int,
        max_combo: int,
        fuel_collected: float
    ) -> "ResultStats":
        """Build a snapshot, deriving the average tap rate."""
        average_tps = tap_count / prep_duration if prep_duration > 0 else 0.0
        return cls(
            altitude=altitude,
            peak_speed=peak_speed,
            duration=duration,
            prep_duration=prep_duration,
            tap_count=tap_count,
            max_combo=max_combo,
            average_tps=average_tps,
            fuel_collected=fuel_collected
        )

    def summary_lines(self, best: float) -> List[str]:
        """
        Text rows for the result panel.

        Args:
            best: Saved highscore to show next to this run.
        """
        return [
            f"Altitude: {self.altitude:.0f}m",
            f"Best: {best:.0f}m",
            f"Flight Time: {self.duration:.1f}s",
            f"Prep Time: {self.prep_duration:.1f}s",
            f"Peak Speed: {self.peak_speed:.1f}",
            f"Fuel Collected: {self.fuel_collected:.0f}",
            f"Combo Max: x{self.max_combo}",
            f"Taps: {self.tap_count} ({self.average_tps:.1f} TPS)",
        ]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

