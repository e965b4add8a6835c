"""
Rocket Core - The launch simulation and its collaborators.

This module provides the headless game simulation, the Gymnasium
environment wrapper and the supporting systems (charge meter, flight
model, effects, highscores, replays).

Main exports:
- LaunchGame: Frame-stepped game simulation
- RocketLaunchEnv: Gymnasium environment for agents
- InputFrame: Held state of the three controls for one frame
- HighscoreStore: Persistent best altitude
- ReplayRecorder: Input recording and re-simulation
- GameConfig: Configuration loaded from game_config.yaml

Rendering and sound live in render_pygame and audio; import them directly
so the core stays usable without a display.
"""

from liftoff.rocket_core.config_loader import GameConfig, get_config, load_config
from liftoff.rocket_core.controls import ControlKey, InputFrame, NO_INPUT
from liftoff.rocket_core.game import LaunchGame, StepResult
from liftoff.rocket_core.highscore import HighscoreStore
from liftoff.rocket_core.results import ResultStats
from liftoff.rocket_core.rules import GamePhase
from liftoff.rocket_core.state_snapshot import GameSnapshot
from liftoff.rocket_core.env_gym import RocketLaunchEnv
from liftoff.rocket_core.replay_recorder import (
    ReplayRecorder,
    generate_replay_filename,
    load_replay,
    replay_run,
)

__all__ = [
    "GameConfig",
    "get_config",
    "load_config",
    "ControlKey",
    "InputFrame",
    "NO_INPUT",
    "LaunchGame",
    "StepResult",
    "HighscoreStore",
    "ResultStats",
    "GamePhase",
    "GameSnapshot",
    "RocketLaunchEnv",
    "ReplayRecorder",
    "generate_replay_filename",
    "load_replay",
    "replay_run",
]
