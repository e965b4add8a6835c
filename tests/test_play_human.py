"""
Tests for the interactive front end, run headless with a dummy video driver.
"""

import os
import sys

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
pytest.importorskip("pygame")

from tools import play_human
from tools.play_human import HumanPlayer


def make_player(tmp_path, record_path=None):
    return HumanPlayer(
        seed=4,
        highscore_path=str(tmp_path / "highscore.json"),
        use_sprites=False,
        use_audio=False,
        record_path=record_path
    )


def stop_after(player, frames):
    """Replace event polling with a countdown that closes the window."""
    calls = {"n": 0}

    def handle_events():
        calls["n"] += 1
        if calls["n"] > frames:
            player._running = False

    player._handle_events = handle_events


class TestSession:
    """Test the frame loop."""

    def test_plain_session_keeps_no_replay(self, tmp_path):
        player = make_player(tmp_path)
        stop_after(player, 5)
        player.run()

        assert player._recorder is None
        assert player._game.frame == 5

    def test_recorded_session_saves_replay(self, tmp_path):
        path = tmp_path / "session.json"
        player = make_player(tmp_path, record_path=str(path))
        stop_after(player, 5)
        player.run()

        assert player._recorder.frame_count == 5
        assert path.exists()


class TestMain:
    """Test exit codes."""

    def test_startup_error_returns_one(self, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "argv", [
            "play_human", "--assets", str(tmp_path / "missing"), "--no-audio",
        ])
        assert play_human.main() == 1

    def test_runtime_error_is_not_reported_as_startup(self, tmp_path, monkeypatch):
        def fail(self):
            raise ValueError("bad frame")

        monkeypatch.setattr(HumanPlayer, "run", fail)
        monkeypatch.setattr(sys, "argv", [
            "play_human", "--no-sprites", "--no-audio",
            "--highscore", str(tmp_path / "highscore.json"),
        ])

        with pytest.raises(ValueError, match="bad frame"):
            play_human.main()
