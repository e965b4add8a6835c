"""
Tests for sprite-sheet frame tables and asset loading failures.
"""

import pytest

from liftoff.rocket_core.sprite_loader import (
    IMAGE_FILES,
    SHEET_LAYOUTS,
    AssetError,
    frame_region,
)


class TestFrameTables:
    """Test frame lookups without touching pygame."""

    @pytest.mark.parametrize("index,expected", [
        (0, (0, 4, 303, 118)),
        (1, (303, 4, 303, 118)),
        (3, (909, 4, 303, 118)),
    ])
    def test_ready_set_go(self, index, expected):
        assert frame_region("ready_set_go", index) == expected

    def test_countdown_has_frame_per_number(self):
        assert SHEET_LAYOUTS["countdown"].frame_count == 11
        assert frame_region("countdown", 10) == (1590, 4, 159, 118)

    @pytest.mark.parametrize("sheet", ["zbutton", "xbutton"])
    def test_button_states(self, sheet):
        assert frame_region(sheet, 0) == (0, 2, 135, 135)
        assert frame_region(sheet, 1) == (135, 2, 135, 135)

    def test_out_of_range_frame(self):
        with pytest.raises(IndexError):
            frame_region("countdown", 11)
        with pytest.raises(IndexError):
            frame_region("zbutton", -1)

    def test_unknown_sheet(self):
        with pytest.raises(KeyError):
            frame_region("explosion", 0)

    def test_every_sheet_has_an_image(self):
        for sheet in SHEET_LAYOUTS:
            assert sheet in IMAGE_FILES


class TestSpriteLoader:
    """Test startup failures with pygame installed."""

    def test_missing_assets_raise(self, tmp_path):
        pytest.importorskip("pygame")
        from liftoff.rocket_core.sprite_loader import SpriteLoader

        with pytest.raises(AssetError, match="not found"):
            SpriteLoader(tmp_path)
