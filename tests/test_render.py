"""
Tests for the pygame renderer in shape mode (no asset files, no window).
"""

import os

import numpy as np
import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
pygame = pytest.importorskip("pygame")

from liftoff.rocket_core.config_loader import load_config
from liftoff.rocket_core.controls import InputFrame, NO_INPUT
from liftoff.rocket_core.game import LaunchGame
from liftoff.rocket_core.render_pygame import PygameRenderer
from liftoff.rocket_core.rules import GamePhase


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def renderer(config):
    renderer = PygameRenderer(config, use_sprites=False)
    yield renderer
    renderer.close()


def snapshots_through_run(config):
    """Snapshots from intro, charging, flight and game over."""
    game = LaunchGame(config=config, seed=2)
    game.reset(seed=2)
    wanted = {}
    for i in range(6000):
        if game.launched:
            inputs = NO_INPUT
        else:
            inputs = InputFrame(charge_a=i % 4 == 0, charge_b=i % 4 == 2)
        result = game.step(inputs)
        wanted.setdefault(result.phase, result.snapshot)
        if result.landed:
            break
    return wanted


class TestShapeRenderer:
    """Test drawing without sprites."""

    def test_array_shape(self, renderer, config):
        game = LaunchGame(config=config, seed=1)
        frame = renderer.render(game.reset())

        assert frame.shape == (config.display.height, config.display.width, 3)
        assert frame.dtype == np.uint8
        assert frame.any()

    def test_every_phase_draws(self, renderer, config):
        frames = [renderer.render(s) for s in snapshots_through_run(config).values()]

        assert len(frames) == 4
        for frame in frames:
            assert frame.shape == (config.display.height, config.display.width, 3)

    def test_result_panel_dims_scene(self, renderer, config):
        snaps = snapshots_through_run(config)
        intro = renderer.render(snaps[GamePhase.INTRO])
        result = renderer.render(snaps[GamePhase.GAME_OVER])

        assert not renderer.uses_sprites
        assert result.mean() < intro.mean()
