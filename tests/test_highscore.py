"""
Tests for highscore persistence.
"""

import json
import logging

import pytest

from liftoff.rocket_core.highscore import HighscoreStore


@pytest.fixture
def path(tmp_path):
    return tmp_path / "highscore.json"


class TestLoad:
    """Test reading the record."""

    def test_missing_file_uses_default(self, path):
        store = HighscoreStore(path, default=0.0)
        assert store.load() == 0.0
        assert not path.exists()

    def test_reads_score(self, path):
        path.write_text(json.dumps({"score": 1234.5}))
        store = HighscoreStore(path)
        assert store.load() == pytest.approx(1234.5)
        assert store.best == pytest.approx(1234.5)

    @pytest.mark.parametrize("content", [
        "not json",
        json.dumps({"points": 5}),
        json.dumps({"score": "high"}),
        json.dumps([1, 2, 3]),
        b"\xff\xfe\x00garbage",
    ])
    def test_corrupt_file_falls_back_with_warning(self, path, caplog, content):
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)
        store = HighscoreStore(path, default=0.0)

        with caplog.at_level(logging.WARNING):
            assert store.load() == 0.0
        assert "Failed to parse highscore" in caplog.text

    def test_memory_only_store(self):
        store = HighscoreStore(None, default=3.0)
        assert store.load() == 3.0
        assert store.path is None


class TestSubmit:
    """Test the max rule and write-on-improvement."""

    def test_improvement_is_saved(self, path):
        store = HighscoreStore(path)
        store.load()

        assert store.submit(800.0)
        assert store.best == 800.0
        assert json.loads(path.read_text()) == {"score": 800.0}

    def test_lower_result_does_not_write(self, path):
        path.write_text(json.dumps({"score": 900.0}))
        store = HighscoreStore(path)
        store.load()
        before = path.stat().st_mtime_ns

        assert not store.submit(100.0)
        assert store.best == 900.0
        assert path.stat().st_mtime_ns == before

    def test_never_decreases(self, path):
        store = HighscoreStore(path)
        best = 0.0
        for altitude in (10.0, 500.0, 20.0, 499.0, 501.0, 0.0):
            store.submit(altitude)
            best = max(best, altitude)
            assert store.best == best

    def test_write_failure_is_logged(self, tmp_path, caplog):
        """Unwritable location keeps the value in memory."""
        store = HighscoreStore(tmp_path / "missing_dir" / "highscore.json")

        with caplog.at_level(logging.WARNING):
            assert store.submit(50.0)
        assert store.best == 50.0
        assert "Failed to save highscore" in caplog.text
        assert not store.save()
