"""
Sprite Loader
=============

Loads the fixed image set and slices sprite-sheet frames.

Frame geometry lives in plain lookup tables so it can be queried (and
tested) without pygame.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

ASSETS_DIR = Path("assets")


class AssetError(RuntimeError):
    """A required image, font or sound is missing or unreadable."""


@dataclass(frozen=True)
class SheetLayout:
    """Horizontal strip of equally sized frames."""
    frame_width: int
    frame_height: int
    origin_y: int
    frame_count: int

    def region(self, index: int) -> Tuple[int, int, int, int]:
        """
        Source rectangle of frame ``index`` as (x, y, width, height).

        Raises:
            IndexError: If the sheet has no such frame.
        """
        if not 0 <= index < self.frame_count:
            raise IndexError(f"Frame {index} out of range 0..{self.frame_count - 1}")
        return (index * self.frame_width, self.origin_y, self.frame_width, self.frame_height)


# Frame strips, indexed by intro step / countdown number / held state
SHEET_LAYOUTS: Dict[str, SheetLayout] = {
    "ready_set_go": SheetLayout(frame_width=303, frame_height=118, origin_y=4, frame_count=4),
    "countdown": SheetLayout(frame_width=159, frame_height=118, origin_y=4, frame_count=11),
    "zbutton": SheetLayout(frame_width=135, frame_height=135, origin_y=2, frame_count=2),
    "xbutton": SheetLayout(frame_width=135, frame_height=135, origin_y=2, frame_count=2),
}

IMAGE_FILES: Dict[str, str] = {
    "background": "background.png",
    "player": "player.png",
    "ready_set_go": "ready_set_go.png",
    "countdown": "countdown.png",
    "clouds": "clouds.png",
    "record": "record.png",
    "zbutton": "zbutton.png",
    "xbutton": "xbutton.png",
    "smoke": "smoke.png",
}

FONT_FILE = "font.ttf"
FONT_SIZE = 36


def frame_region(sheet: str, index: int) -> Tuple[int, int, int, int]:
    """Look up the source rectangle for ``sheet`` frame ``index``."""
    try:
        layout = SHEET_LAYOUTS[sheet]
    except KeyError:
        raise KeyError(f"Unknown sprite sheet: {sheet}") from None
    return layout.region(index)


class SpriteLoader:
    """
    Loads and caches the game's images and font.

    Every file is required; the game cannot run with a partial set.
    """

    def __init__(self, assets_dir: Optional[Union[str, Path]] = None):
        """
        Initialize sprite loader.

        Args:
            assets_dir: Directory holding the images and font. Uses default if None.

        Raises:
            AssetError: If any file is missing or cannot be decoded.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required for sprite loading")

        self._assets_dir = Path(assets_dir) if assets_dir is not None else ASSETS_DIR
        self._images: Dict[str, pygame.Surface] = {}
        self._frames: Dict[Tuple[str, int], pygame.Surface] = {}
        self._font: Optional[pygame.font.Font] = None

        self._load_images()
        self._load_font()

    def _load_images(self) -> None:
        """Load every image, converting to the display format if one exists."""
        for name, filename in IMAGE_FILES.items():
            path = self._assets_dir / filename
            if not path.exists():
                raise AssetError(f"Image not found: {path}")
            try:
                image = pygame.image.load(str(path))
            except pygame.error as exc:
                raise AssetError(f"Could not decode image {path}: {exc}") from exc
            if pygame.display.get_surface() is not None:
                image = image.convert_alpha()
            self._images[name] = image

    def _load_font(self) -> None:
        path = self._assets_dir / FONT_FILE
        if not path.exists():
            raise AssetError(f"Font not found: {path}")
        if not pygame.font.get_init():
            pygame.font.init()
        try:
            self._font = pygame.font.Font(str(path), FONT_SIZE)
        except (pygame.error, OSError) as exc:
            raise AssetError(f"Could not load font {path}: {exc}") from exc

    @property
    def font(self) -> "pygame.font.Font":
        return self._font

    def image(self, name: str) -> "pygame.Surface":
        """Full image by name."""
        return self._images[name]

    def frame(self, sheet: str, index: int) -> "pygame.Surface":
        """
        One frame of a sprite sheet, cached.

        Args:
            sheet: Sheet name from SHEET_LAYOUTS.
            index: Frame index.
        """
        key = (sheet, index)
        if key not in self._frames:
            rect = pygame.Rect(frame_region(sheet, index))
            self._frames[key] = self._images[sheet].subsurface(rect)
        return self._frames[key]
