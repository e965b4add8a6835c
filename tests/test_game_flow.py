"""
Tests for the launch game state machine.
"""

import json
from dataclasses import replace

import pytest

from liftoff.rocket_core.audio import AudioBackend
from liftoff.rocket_core.config_loader import load_config
from liftoff.rocket_core.controls import ControlKey, InputFrame, NO_INPUT
from liftoff.rocket_core.game import LaunchGame
from liftoff.rocket_core.highscore import HighscoreStore
from liftoff.rocket_core.rules import GamePhase


PRESS_A = InputFrame(charge_a=True)
PRESS_B = InputFrame(charge_b=True)
PRESS_BOTH = InputFrame(charge_a=True, charge_b=True)
PRESS_R = InputFrame(restart=True)


class RecordingAudio(AudioBackend):
    """Audio backend that remembers every call."""

    def __init__(self):
        self.calls = []

    def play(self, name):
        self.calls.append(("play", name))

    def stop(self, name):
        self.calls.append(("stop", name))

    def play_voice(self, number):
        self.calls.append(("voice", number))


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    game = LaunchGame(config=config, seed=42)
    game.reset(seed=42)
    return game


def run_until(game, predicate, inputs=NO_INPUT, limit=6000):
    """Step with fixed inputs until ``predicate(result)`` holds."""
    results = []
    for _ in range(limit):
        result = game.step(inputs)
        results.append(result)
        if predicate(result):
            return results
    raise AssertionError("Condition not reached")


def advance_to_charging(game):
    return run_until(game, lambda r: "countdown_started" in r.events)


def mash_inputs(frame):
    """Alternate A and B with a release frame between presses."""
    return (PRESS_A, NO_INPUT, PRESS_B, NO_INPUT)[frame % 4]


def play_scripted_run(game, limit=8000):
    """Mash through the countdown, then let the rocket fly and land."""
    for i in range(limit):
        inputs = NO_INPUT if game.launched else mash_inputs(i)
        result = game.step(inputs)
        if result.landed:
            return result
    raise AssertionError("Run never landed")


class TestIntroAndCountdown:
    """Test the pre-launch phases."""

    def test_starts_in_intro(self, game):
        assert game.phase == GamePhase.INTRO
        assert game.rules.countdown.count == 10
        assert game.altitude == 0.0

    def test_intro_steps_then_countdown(self, game):
        results = advance_to_charging(game)
        intro_events = [r for r in results if "intro_step" in r.events]

        assert len(intro_events) == 3
        # Countdown opens on the tick the last intro step lands
        assert "intro_step" in results[-1].events
        assert game.phase == GamePhase.COUNTDOWN

    def test_presses_ignored_during_intro(self, game):
        for i in range(60):
            result = game.step(mash_inputs(i))
            assert not result.charges

        assert game.meter.power == 0.0
        assert game.meter.tap_count == 0

    def test_countdown_announces_every_number(self, config):
        audio = RecordingAudio()
        game = LaunchGame(config=config, seed=1, audio=audio)
        run_until(game, lambda r: "launch" in r.events)

        voices = [arg for kind, arg in audio.calls if kind == "voice"]
        assert voices == list(range(10, -1, -1))

        plays = [arg for kind, arg in audio.calls if kind == "play"]
        assert plays[:4] == ["count", "count", "count", "countdown"]

    def test_launch_follows_count_zero(self, game):
        results = run_until(game, lambda r: "launch" in r.events)

        assert game.rules.countdown.count == 0
        assert "count" not in results[-1].events
        assert "count" in results[-2].events


class TestCharging:
    """Test presses during the countdown."""

    def test_single_press(self, game):
        advance_to_charging(game)
        result = game.step(PRESS_A)

        assert len(result.charges) == 1
        assert result.charges[0].combo == 1
        assert game.meter.power == pytest.approx(5.0)

    def test_held_key_counts_once(self, game):
        advance_to_charging(game)
        for _ in range(10):
            game.step(PRESS_A)

        assert game.meter.tap_count == 1

    def test_alternating_pair_builds_combo(self, game):
        """Z then X within the window: combo 2, second press adds 6.5."""
        advance_to_charging(game)
        first = game.step(PRESS_A).charges[0]
        game.step(NO_INPUT)
        second = game.step(PRESS_B).charges[0]

        assert first.added == pytest.approx(5.0)
        assert second.combo == 2
        assert second.added == pytest.approx(6.5)
        assert game.meter.power == pytest.approx(11.5)

    def test_same_tick_presses_resolve_a_then_b(self, game):
        advance_to_charging(game)
        result = game.step(PRESS_BOTH)

        assert [c.key for c in result.charges] == [ControlKey.CHARGE_A, ControlKey.CHARGE_B]
        assert [c.combo for c in result.charges] == [1, 2]
        assert game.meter.power == pytest.approx(11.5)

    def test_combo_expires(self, game, config):
        advance_to_charging(game)
        game.step(PRESS_A)
        frames = int(config.charge.combo_timeout / config.timing.dt) + 2
        for _ in range(frames):
            game.step(NO_INPUT)

        assert game.meter.combo_count == 0
        assert game.step(PRESS_B).charges[0].combo == 1

    def test_power_within_bounds(self, game):
        for i in range(1200):
            if game.launched:
                break
            game.step(mash_inputs(i))
            assert 0 <= game.meter.power <= game.meter.power_max


class TestZeroPressRun:
    """No presses at all: the rocket never leaves the pad."""

    def test_lands_on_launch_tick(self, config):
        audio = RecordingAudio()
        game = LaunchGame(config=config, seed=5, audio=audio)
        results = run_until(game, lambda r: r.landed)
        last = results[-1]

        assert "launch" in last.events
        assert "power_down" in last.events
        assert "landed" in last.events
        assert game.phase == GamePhase.GAME_OVER
        assert game.altitude == 0.0
        assert game.last_result.altitude == 0.0
        assert game.last_result.tap_count == 0

        tail = audio.calls[-3:]
        assert tail == [("play", "launch"), ("stop", "launch"), ("play", "powerdown")]

    def test_no_particles_without_power(self, game):
        run_until(game, lambda r: r.landed)
        assert len(game.particles) == 0


class TestScriptedRun:
    """Full run with steady alternating presses."""

    def test_fills_tank_and_flies(self, game, config):
        result = play_scripted_run(game)
        stats = game.last_result

        assert result.landed
        assert game.phase == GamePhase.GAME_OVER
        assert stats.fuel_collected > config.charge.power_max
        assert stats.max_combo > 10
        assert 0 < stats.altitude < config.flight.sky_ceiling
        assert stats.altitude == pytest.approx(game.run_highscore)
        assert stats.peak_speed <= config.flight.speed_max
        assert stats.average_tps > 0
        assert game.altitude == 0.0

    def test_particles_never_shrink_while_powered(self, game):
        for i in range(2000):
            if game.launched:
                break
            game.step(mash_inputs(i))

        previous = len(game.particles)
        while game.launched and not game.power_down:
            result = game.step(NO_INPUT)
            if game.power_down:
                break
            assert len(game.particles) >= previous
            assert all(p[3] > 0 for p in result.snapshot.particles)
            previous = len(game.particles)

        assert previous > 0

    def test_particles_drain_after_power_down(self, game):
        for i in range(4000):
            if game.power_down:
                break
            game.step(NO_INPUT if game.launched else mash_inputs(i))

        previous = len(game.particles)
        assert previous > 0
        for _ in range(100):
            game.step(NO_INPUT)
            assert len(game.particles) <= previous
            previous = len(game.particles)

        assert previous == 0
        assert not game.game_over

    def test_altitude_independent_of_seed(self, config):
        outcomes = []
        for seed in (1, 99, 12345):
            game = LaunchGame(config=config, seed=seed)
            game.reset(seed=seed)
            play_scripted_run(game)
            stats = game.last_result
            outcomes.append((game.frame, stats.altitude, stats.duration, stats.tap_count))

        assert outcomes[0] == outcomes[1] == outcomes[2]


class TestRestart:
    """Test restart from game over and mid-run."""

    def test_restart_after_game_over(self, game):
        play_scripted_run(game)
        result = game.step(PRESS_R)

        assert "restart" in result.events
        assert game.phase == GamePhase.INTRO
        assert game.meter.tap_count == 0
        assert game.meter.max_combo == 0
        assert game.meter.total_fuel == 0.0
        assert game.meter.power == 0.0
        assert game.rules.countdown.count == 10
        assert game.last_result is not None

    def test_game_over_ignores_charges(self, game):
        run_until(game, lambda r: r.landed)
        for i in range(20):
            game.step(mash_inputs(i))

        assert game.phase == GamePhase.GAME_OVER
        assert game.meter.tap_count == 0

    def test_restart_during_countdown(self, game):
        advance_to_charging(game)
        game.step(PRESS_A)
        game.step(PRESS_R)

        assert game.phase == GamePhase.INTRO
        assert game.meter.power == 0.0

    def test_reset_clears_last_result(self, game):
        run_until(game, lambda r: r.landed)
        snapshot = game.reset()

        assert game.last_result is None
        assert snapshot.phase == GamePhase.INTRO
        assert game.frame == 0


class TestHighscore:
    """Test the saved-record rule through full runs."""

    def test_first_run_sets_record(self, config, tmp_path):
        path = tmp_path / "highscore.json"
        store = HighscoreStore(path)
        store.load()
        game = LaunchGame(config=config, seed=3, highscores=store)

        result = play_scripted_run(game)

        assert result.new_highscore
        assert "new_highscore" in result.events
        assert store.best == pytest.approx(game.last_result.altitude)
        assert json.loads(path.read_text())["score"] == pytest.approx(store.best)

    def test_worse_run_keeps_record(self, config, tmp_path):
        path = tmp_path / "highscore.json"
        path.write_text(json.dumps({"score": 99999.0}))
        store = HighscoreStore(path)
        store.load()
        game = LaunchGame(config=config, seed=3, highscores=store)

        result = play_scripted_run(game)

        assert not result.new_highscore
        assert store.best == 99999.0
        assert json.loads(path.read_text()) == {"score": 99999.0}

    def test_zero_press_run_never_lowers_record(self, config):
        store = HighscoreStore(None)
        store.submit(250.0)
        game = LaunchGame(config=config, seed=3, highscores=store)
        run_until(game, lambda r: r.landed)

        assert store.best == 250.0
        assert game.snapshot().saved_highscore == 250.0


class TestSnapshot:
    """Test the values the renderer reads."""

    def test_meters_visible_while_charging(self, game):
        advance_to_charging(game)
        snap = game.step(PRESS_A).snapshot

        assert snap.counting
        assert snap.show_power_meter
        assert snap.show_combo_meter
        assert snap.charge_a_held
        assert snap.tap_count == 1

    def test_meters_hidden_during_intro(self, game):
        snap = game.step(NO_INPUT).snapshot
        assert not snap.show_power_meter
        assert not snap.show_combo_meter

    def test_game_over_snapshot_carries_result(self, game):
        run_until(game, lambda r: r.landed)
        snap = game.snapshot()

        assert snap.game_over
        assert snap.last_result is game.last_result
        assert len(snap.last_result.summary_lines(snap.saved_highscore)) == 8

    def test_clouds_scroll_and_wrap(self, game, config):
        for _ in range(10):
            game.step(NO_INPUT)
        assert game.cloud_offset < 0

        for _ in range(2000):
            game.step(NO_INPUT)
            assert -config.display.width < game.cloud_offset <= 0


class TestTunedFlights:
    """Runs must still come down when the flight tunables change."""

    def test_big_tank_passes_ceiling_and_lands(self, config):
        tuned = replace(config, charge=replace(config.charge, power_max=1500.0))
        game = LaunchGame(config=tuned, seed=8)
        game.reset(seed=8)

        result = play_scripted_run(game)

        assert result.landed
        assert game.phase == GamePhase.GAME_OVER
        assert game.last_result.altitude >= tuned.flight.sky_ceiling
        assert game.altitude == 0.0

    def test_low_speed_cap_burns_tank_and_lands(self, config):
        tuned = replace(config, flight=replace(config.flight, speed_max=3.0))
        game = LaunchGame(config=tuned, seed=8)
        game.reset(seed=8)

        result = play_scripted_run(game)

        assert result.landed
        assert 0 < game.last_result.altitude < tuned.flight.sky_ceiling
        assert game.last_result.peak_speed == pytest.approx(3.0)
