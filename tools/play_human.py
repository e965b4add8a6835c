"""
Human Play Mode
================

Play the launch game interactively in a pygame window.

Controls:
    - Z / X: Charge (alternate them quickly to build a combo)
    - R: Restart
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--assets DIR] [--no-sprites]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from liftoff.rocket_core.audio import AudioBackend, PygameAudio
from liftoff.rocket_core.config_loader import GameConfig, load_config
from liftoff.rocket_core.controls import InputFrame
from liftoff.rocket_core.game import LaunchGame
from liftoff.rocket_core.highscore import HighscoreStore
from liftoff.rocket_core.replay_recorder import ReplayRecorder
from liftoff.rocket_core.sprite_loader import ASSETS_DIR, AssetError

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    """Configure console logging once for the session."""
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[logging.StreamHandler(sys.stdout)]
        )


class HumanPlayer:
    """
    Fixed-step game loop: sample keys, step the game, draw, wait.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        target_fps: Optional[int] = None,
        assets_dir: Optional[Path] = None,
        highscore_path: Optional[str] = None,
        use_sprites: bool = True,
        use_audio: bool = True,
        record_path: Optional[str] = None
    ):
        """
        Initialize the window, audio and game.

        Raises:
            AssetError: If a required image, font or sound is missing.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._seed = seed
        self._target_fps = target_fps or config.display.fps
        self._record_path = record_path
        assets_dir = Path(assets_dir) if assets_dir is not None else ASSETS_DIR

        pygame.init()

        from liftoff.rocket_core.render_pygame import PygameRenderer
        self._renderer = PygameRenderer(config, use_sprites=use_sprites, assets_dir=assets_dir)

        audio: AudioBackend
        if use_audio:
            audio = PygameAudio(assets_dir / "sounds")
        else:
            audio = AudioBackend()

        highscores = HighscoreStore(
            highscore_path or config.highscore.path,
            config.highscore.default
        )
        highscores.load()

        self._game = LaunchGame(config=config, seed=seed, audio=audio, highscores=highscores)
        self._recorder: Optional[ReplayRecorder] = None
        if record_path:
            self._recorder = ReplayRecorder(self._game, agent_name="human")
        self._clock = pygame.time.Clock()
        self._running = True

    def run(self) -> float:
        """Run until the window closes. Returns the saved highscore."""
        logger.info("Z/X to charge, R to restart, ESC to quit")

        if self._recorder is not None:
            self._recorder.reset(seed=self._seed)
        else:
            self._game.reset(seed=self._seed)
        self._game.audio.play_loop("bossa_nova")

        while self._running:
            self._handle_events()
            if not self._running:
                break

            inputs = self._sample_inputs()
            if self._recorder is not None:
                result = self._recorder.step(inputs)
            else:
                result = self._game.step(inputs)
            if result.new_highscore:
                logger.info("New highscore: %.0fm", self._game.highscores.best)

            self._renderer.render_to_screen(result.snapshot)
            self._clock.tick(self._target_fps)

        self._shutdown()
        return self._game.highscores.best

    def _handle_events(self) -> None:
        """Window close and ESC; gameplay keys are sampled as held state."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self._running = False

    def _sample_inputs(self) -> InputFrame:
        keys = pygame.key.get_pressed()
        return InputFrame(
            charge_a=bool(keys[pygame.K_z]),
            charge_b=bool(keys[pygame.K_x]),
            restart=bool(keys[pygame.K_r])
        )

    def _shutdown(self) -> None:
        if self._recorder is not None:
            self._recorder.save(self._record_path)
        self._game.audio.close()
        self._renderer.close()
        pygame.quit()


def main():
    parser = argparse.ArgumentParser(description="Play the rocket launch game")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for effects")
    parser.add_argument("--fps", type=int, default=None, help="Target FPS (default: from config)")
    parser.add_argument("--assets", type=str, default=str(ASSETS_DIR), help="Asset directory")
    parser.add_argument("--highscore", type=str, default=None, help="Highscore file path")
    parser.add_argument("--no-sprites", action="store_true", help="Draw with plain shapes")
    parser.add_argument("--no-audio", action="store_true", help="Disable sound")
    parser.add_argument("--record", type=str, default=None, help="Save a replay to this path")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")

    args = parser.parse_args()
    setup_logging(logging.DEBUG if args.debug else logging.INFO)

    try:
        config = load_config()
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            target_fps=args.fps,
            assets_dir=Path(args.assets),
            highscore_path=args.highscore,
            use_sprites=not args.no_sprites,
            use_audio=not args.no_audio,
            record_path=args.record
        )
    except (AssetError, FileNotFoundError, ValueError) as e:
        logger.error("Startup failed: %s", e)
        return 1
    except ImportError as e:
        logger.error("%s", e)
        return 1

    best = player.run()
    logger.info("Best altitude: %.0fm", best)
    return 0


if __name__ == "__main__":
    sys.exit(main())
