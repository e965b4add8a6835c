"""
Highscore Store
===============

Best-effort persistence of the best altitude as a tiny JSON record::

    {"score": 4312.5}

Reading never fails: a missing or unreadable file yields the default.
Writing never fails either: errors are logged and the in-memory value stays.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

from liftoff.rocket_core.config_loader import GameConfig, get_config

logger = logging.getLogger(__name__)


class HighscoreStore:
    """
    Holds the saved highscore and mirrors it to disk.

    With ``path=None`` the store is memory-only (agents, tests).
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        default: float = 0.0
    ):
        """
        Initialize store. Does not touch the disk until ``load``.

        Args:
            path: JSON file location, or None for memory-only.
            default: Value used when nothing valid is on disk.
        """
        self._path = Path(path) if path is not None else None
        self._default = float(default)
        self._best = float(default)

    @classmethod
    def from_config(cls, config: Optional[GameConfig] = None) -> "HighscoreStore":
        """Create a store at the configured path and load it."""
        if config is None:
            config = get_config()
        store = cls(config.highscore.path, config.highscore.default)
        store.load()
        return store

    @property
    def best(self) -> float:
        """Saved highscore."""
        return self._best

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def load(self) -> float:
        """
        Read the record from disk.

        Returns:
            The loaded score, or the default on any failure.
        """
        self._best = self._default
        if self._path is None:
            return self._best

        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            logger.debug("No highscore file at %s, starting from %.1f", self._path, self._default)
            return self._best
        except OSError as exc:
            logger.warning("Could not read highscore file %s: %s", self._path, exc)
            return self._best

        try:
            payload = json.loads(raw.decode("utf-8"))
            self._best = float(payload["score"])
        except (ValueError, TypeError, KeyError) as exc:
            logger.warning("Failed to parse highscore file %s: %s", self._path, exc)
            self._best = self._default
        return self._best

    def save(self) -> bool:
        """
        Write the current value.

        Returns:
            True if written (or memory-only), False if the write failed.
        """
        if self._path is None:
            return True

        try:
            self._path.write_text(json.dumps({"score": self._best}))
        except OSError as exc:
            logger.warning("Failed to save highscore to %s: %s", self._path, exc)
            return False
        return True

    def submit(self, altitude: float) -> bool:
        """
        Offer a run result.

        The stored value becomes ``max(best, altitude)``; it is flushed to
        disk only when it actually improved.

        Returns:
            True if ``altitude`` set a new record.
        """
        if altitude <= self._best:
            return False

        logger.info("New highscore: %.0fm (was %.0fm)", altitude, self._best)
        self._best = float(altitude)
        self.save()
        return True
