"""
Tests for replay recording and re-simulation.
"""

import json

import pytest

from liftoff.rocket_core.config_loader import load_config
from liftoff.rocket_core.controls import InputFrame, NO_INPUT
from liftoff.rocket_core.game import LaunchGame
from liftoff.rocket_core.replay_recorder import (
    ReplayRecorder,
    generate_replay_filename,
    load_replay,
    replay_run,
)


@pytest.fixture
def config():
    return load_config()


def record_session(config, seed=11, pattern=(1, 0, 0, 1, 0, 0, 0)):
    """Record one full run with a fixed press rhythm."""
    game = LaunchGame(config=config)
    recorder = ReplayRecorder(game, agent_name="test")
    recorder.reset(seed=seed)

    i = 0
    while True:
        if game.launched:
            inputs = NO_INPUT
        else:
            a = pattern[i % len(pattern)]
            b = pattern[(i + 3) % len(pattern)]
            inputs = InputFrame(charge_a=bool(a), charge_b=bool(b))
        result = recorder.step(inputs)
        i += 1
        if result.landed:
            break
    return game, recorder


class TestReplayRecorder:
    """Test recording metadata."""

    def test_records_every_frame(self, config):
        game, recorder = record_session(config)
        data = recorder.get_replay_data()

        assert recorder.recording
        assert data["seed"] == 11
        assert data["agent"] == "test"
        assert data["total_frames"] == game.frame == recorder.frame_count
        assert len(data["inputs"]) == data["total_frames"]
        assert all(len(frame) == 3 for frame in data["inputs"])
        assert len(data["results"]) == 1
        assert data["best_altitude"] == pytest.approx(game.last_result.altitude)

    def test_save_and_load(self, config, tmp_path):
        _, recorder = record_session(config)
        path = recorder.save(tmp_path / "replays" / "run.json")

        assert path.exists()
        data = load_replay(path)
        assert data == json.loads(json.dumps(recorder.get_replay_data()))

    def test_save_refuses_overwrite(self, config, tmp_path):
        _, recorder = record_session(config)
        path = recorder.save(tmp_path / "run.json")

        with pytest.raises(FileExistsError):
            recorder.save(path, overwrite=False)

    def test_generated_filename(self, tmp_path):
        path = generate_replay_filename("bot", seed=4, directory=tmp_path)
        assert path.parent == tmp_path
        assert path.name.startswith("bot_")
        assert path.name.endswith("_s4.json")


class TestReplayRun:
    """Test re-simulation."""

    def test_replay_reproduces_result(self, config, tmp_path):
        game, recorder = record_session(config)
        path = recorder.save(tmp_path / "run.json")

        replayed = replay_run(load_replay(path), config)

        assert replayed is not None
        assert replayed == game.last_result

    def test_replay_with_other_seed_same_flight(self, config):
        game, recorder = record_session(config)
        data = recorder.get_replay_data()
        data["seed"] = 999

        assert replay_run(data, config).altitude == pytest.approx(game.last_result.altitude)

    def test_config_mismatch_rejected(self, config):
        _, recorder = record_session(config)
        data = recorder.get_replay_data()
        data["config_hash"] = "00000000"

        with pytest.raises(ValueError, match="config hash"):
            replay_run(data, config)
