"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the launch game.
Reward is always 0.0 - agents compute their own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from liftoff.rocket_core.config_loader import GameConfig, load_config
from liftoff.rocket_core.controls import InputFrame
from liftoff.rocket_core.game import LaunchGame
from liftoff.rocket_core.rules import GamePhase
from liftoff.rocket_core.state_snapshot import GameSnapshot


class RocketLaunchEnv(gym.Env):
    """
    Rocket launch game as a Gymnasium environment.

    Action Space:
        MultiBinary(3): held state of [charge A, charge B, restart] for one frame.
        Presses register on the frame a key goes from 0 to 1, so an agent has
        to release a key before it can press it again.

    Observation Space:
        Dict of phase counters, flight values, charge meter and padded
        particle arrays.

    Reward:
        Always 0.0. Agents compute their own reward from the info dict.

    Info:
        Contains altitude, delta_altitude, power, combo, phase, etc.
    """

    metadata = {
        "render_modes": ["human"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        use_sprites: bool = False,
        assets_dir: Optional[str] = None,
    ):
        """
        Initialize launch environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "human" for a window, None for headless.
            use_sprites: Draw with the image assets instead of shapes.
            assets_dir: Asset directory for sprite rendering.
        """
        super().__init__()

        self._config = load_config(config_path)
        self.render_mode = render_mode
        self._use_sprites = use_sprites
        self._assets_dir = assets_dir
        self._max_frames = self._config.env.max_episode_frames
        self._max_particles = self._config.env.max_particles_obs

        # Memory-only highscores: agents never write the player's record
        self._game = LaunchGame(config=self._config)
        self._last_snapshot: Optional[GameSnapshot] = None

        self._renderer = None

        self.action_space = spaces.MultiBinary(3)
        self.observation_space = self._build_observation_space()

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        cfg = self._config
        max_p = self._max_particles
        ceiling = cfg.flight.sky_ceiling - cfg.flight.ground_level + 2 * cfg.flight.speed_max
        screen = float(max(cfg.display.width, cfg.display.height)) * 4

        return spaces.Dict({
            "phase": spaces.Box(low=0, high=len(GamePhase) - 1, shape=(), dtype=np.int32),
            "intro_step": spaces.Box(low=0, high=cfg.timing.intro_steps, shape=(), dtype=np.int32),
            "count": spaces.Box(low=0, high=cfg.timing.countdown_start, shape=(), dtype=np.int32),
            "altitude": spaces.Box(low=0, high=ceiling, shape=(), dtype=np.float32),
            "speed": spaces.Box(
                low=cfg.flight.gravity, high=cfg.flight.speed_max, shape=(), dtype=np.float32
            ),
            "power": spaces.Box(low=0, high=cfg.charge.power_max, shape=(), dtype=np.float32),
            "power_fraction": spaces.Box(low=0, high=1, shape=(), dtype=np.float32),
            "combo_count": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "combo_fraction": spaces.Box(low=0, high=1, shape=(), dtype=np.float32),
            "tap_count": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "run_highscore": spaces.Box(low=0, high=ceiling, shape=(), dtype=np.float32),
            "saved_highscore": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "particle_xy": spaces.Box(low=-screen, high=screen, shape=(max_p, 2), dtype=np.float32),
            "particle_radius": spaces.Box(low=0, high=np.inf, shape=(max_p,), dtype=np.float32),
            "particle_opacity": spaces.Box(low=0, high=1, shape=(max_p,), dtype=np.float32),
            "particle_mask": spaces.MultiBinary(max_p),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for the cosmetic effects.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        snapshot = self._game.reset(seed=seed)
        self._last_snapshot = snapshot

        info = self._game.get_info()
        info["delta_altitude"] = 0.0
        info["events"] = []

        return snapshot.to_obs_dict(self._max_particles), info

    def step(
        self,
        action: Union[np.ndarray, Tuple[int, int, int]]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one frame.

        Args:
            action: Held state of [charge A, charge B, restart].

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        frame = InputFrame.from_sequence(np.asarray(action).reshape(-1).tolist())
        result = self._game.step(frame)
        self._last_snapshot = result.snapshot

        obs = result.snapshot.to_obs_dict(self._max_particles)
        reward = 0.0
        terminated = result.landed or self._game.is_over
        truncated = (not terminated) and self._game.frame >= self._max_frames

        info = self._game.get_info()
        info["delta_altitude"] = result.delta_altitude
        info["events"] = result.events
        if result.landed and self._game.last_result is not None:
            info["result"] = self._game.last_result.to_dict()

        return obs, reward, terminated, truncated, info

    def render(self) -> None:
        """Draw the latest snapshot to a window in human mode."""
        if self.render_mode != "human" or self._last_snapshot is None:
            return None

        if self._renderer is None:
            from liftoff.rocket_core.render_pygame import PygameRenderer
            self._renderer = PygameRenderer(
                self._config,
                use_sprites=self._use_sprites,
                assets_dir=self._assets_dir
            )
        self._renderer.render_to_screen(self._last_snapshot)
        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> LaunchGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
