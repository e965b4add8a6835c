"""
Replay Recorder
===============

Records the held inputs of every frame so a session can be re-simulated.

Usage:
    from liftoff.rocket_core import LaunchGame, ReplayRecorder

    game = LaunchGame()
    recorder = ReplayRecorder(game, agent_name="player")

    recorder.reset(seed=42)
    while playing:
        recorder.step(sample_inputs())

    recorder.save("flight.json")

Flight results depend only on the inputs, so ``replay_run`` reproduces the
recorded outcome whatever seed the cosmetic effects used.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from liftoff.rocket_core.config_loader import GameConfig, get_config
from liftoff.rocket_core.controls import InputFrame
from liftoff.rocket_core.game import LaunchGame, StepResult
from liftoff.rocket_core.results import ResultStats

logger = logging.getLogger(__name__)


def generate_replay_filename(
    agent_name: str = "replay",
    seed: Optional[int] = None,
    directory: Optional[Union[str, Path]] = None
) -> Path:
    """
    Generate a timestamped replay filename.

    Format: {agent_name}_{YYYYMMDD_HHMMSS}_s{seed}.json

    Args:
        agent_name: Name of the player or agent.
        seed: Random seed (optional, included if provided).
        directory: Directory for the file. Defaults to current directory.

    Returns:
        Path object for the replay file.
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    if seed is not None:
        filename = f"{agent_name}_{timestamp}_s{seed}.json"
    else:
        filename = f"{agent_name}_{timestamp}.json"

    if directory:
        return Path(directory) / filename
    return Path(filename)


def _compute_config_hash(config: Optional[GameConfig] = None) -> str:
    """Hash the sections that affect gameplay, for replay validation."""
    if config is None:
        config = get_config()
    hash_data = {
        "timing": asdict(config.timing),
        "charge": asdict(config.charge),
        "flight": asdict(config.flight),
    }
    return hashlib.md5(json.dumps(hash_data, sort_keys=True).encode()).hexdigest()[:8]


class ReplayRecorder:
    """
    Wrapper that records game frames for replay.

    Attributes:
        game: The wrapped game.
        agent_name: Stored in the replay metadata.
    """

    def __init__(self, game: LaunchGame, agent_name: str = "unknown"):
        self.game = game
        self.agent_name = agent_name

        self._recording = False
        self._seed: Optional[int] = None
        self._inputs: List[List[int]] = []
        self._results: List[Dict[str, Any]] = []
        self._config_hash = _compute_config_hash(game.config)

    @property
    def recording(self) -> bool:
        """Whether currently recording."""
        return self._recording

    @property
    def frame_count(self) -> int:
        return len(self._inputs)

    def reset(self, seed: Optional[int] = None):
        """
        Reset the game and start a new recording.

        Args:
            seed: Random seed for the cosmetic effects.

        Returns:
            Initial game snapshot.
        """
        self._inputs = []
        self._results = []
        self._seed = seed
        self._recording = True
        return self.game.reset(seed=seed)

    def step(self, inputs: InputFrame) -> StepResult:
        """Advance the game one frame and record its inputs."""
        result = self.game.step(inputs)

        if self._recording:
            self._inputs.append([int(held) for held in inputs.as_tuple()])
            if result.landed and self.game.last_result is not None:
                self._results.append(self.game.last_result.to_dict())

        return result

    def get_replay_data(self) -> Dict[str, Any]:
        """
        Get the current replay data as a dictionary.

        Returns:
            Dictionary containing all replay data.
        """
        return {
            "seed": self._seed,
            "agent": self.agent_name,
            "config_hash": self._config_hash,
            "inputs": [list(frame) for frame in self._inputs],
            "results": list(self._results),
            "total_frames": len(self._inputs),
            "best_altitude": max((r["altitude"] for r in self._results), default=0.0),
        }

    def save(
        self,
        path: Optional[Union[str, Path]] = None,
        overwrite: bool = True,
        directory: Optional[Union[str, Path]] = None
    ) -> Path:
        """
        Save the replay to a JSON file.

        Args:
            path: Path to save the replay. If None, auto-generates a timestamped name.
            overwrite: If True, overwrite existing file.
            directory: Directory for auto-generated filename (only used if path is None).

        Returns:
            Path where the replay was saved.

        Raises:
            FileExistsError: If the file exists and ``overwrite`` is False.
        """
        if path is None:
            path = generate_replay_filename(
                agent_name=self.agent_name,
                seed=self._seed,
                directory=directory
            )
        else:
            path = Path(path)

        if path.exists() and not overwrite:
            raise FileExistsError(f"Replay file already exists: {path}")

        path.parent.mkdir(parents=True, exist_ok=True)

        replay_data = self.get_replay_data()
        with open(path, "w") as f:
            json.dump(replay_data, f, indent=2)

        logger.info(
            "Replay saved: %s (%d frames, %d runs)",
            path, replay_data["total_frames"], len(replay_data["results"])
        )
        return path


def load_replay(path: Union[str, Path]) -> Dict[str, Any]:
    """Read replay data written by ``ReplayRecorder.save``."""
    with open(path, "r") as f:
        return json.load(f)


def replay_run(
    data: Dict[str, Any],
    config: Optional[GameConfig] = None
) -> Optional[ResultStats]:
    """
    Re-simulate a recording headless.

    Args:
        data: Replay data from ``get_replay_data`` or ``load_replay``.
        config: Game configuration. Uses default if None.

    Returns:
        Result of the last landed run, or None if no run landed.

    Raises:
        ValueError: If the replay was recorded with different gameplay settings.
    """
    if config is None:
        config = get_config()

    expected = _compute_config_hash(config)
    if data.get("config_hash") != expected:
        raise ValueError(
            f"Replay config hash {data.get('config_hash')} does not match {expected}"
        )

    game = LaunchGame(config=config, seed=data.get("seed"))
    game.reset(seed=data.get("seed"))
    for frame in data["inputs"]:
        game.step(InputFrame.from_sequence(frame))

    return game.last_result
