"""
Pygame Renderer
===============

Draws a GameSnapshot: sky and clouds scrolled by altitude, the highscore
marker, exhaust smoke, the rocket, ready/set/go and countdown frames, the
fuel and combo meters and the result panel.

With ``use_sprites=True`` every image and the font are required. With
sprites disabled the scene is drawn from primitive shapes and pygame's
default font, which needs no asset files.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Optional, Tuple, Union

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

import numpy as np

from liftoff.rocket_core.config_loader import GameConfig, get_config
from liftoff.rocket_core.state_snapshot import GameSnapshot
from liftoff.rocket_core.sprite_loader import SHEET_LAYOUTS, SpriteLoader

# Screen-space anchors, in pixels
PLAYER_POS = (195, 300)
BANNER_Y = 130
HEADER_Y = 80
ZBUTTON_POS = (280, 270)
XBUTTON_POS = (310, 340)
FUEL_BAR = (300.0, 20.0, 560.0)     # width, height, y
COMBO_BAR = (220.0, 16.0, 520.0)
PANEL = (360.0, 280.0, 150.0)       # width, height, y

# Background art offsets relative to the sky ceiling
CLOUDS_BELOW_CEILING = 23
RECORD_MARKER_OFFSET = 252
RECORD_LABEL_OFFSET = 317

INTRO_LABELS = ("READY", "SET", "GO!", "")


class PygameRenderer:
    """
    Snapshot renderer using pygame.

    Supports:
    - Sprite-based drawing with a primitive-shape fallback
    - Screen display for human mode
    - RGB array output
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        use_sprites: bool = True,
        assets_dir: Optional[Union[str, Path]] = None
    ):
        """
        Initialize renderer.

        Args:
            config: Game configuration.
            use_sprites: Whether to load and use the image assets.
            assets_dir: Asset directory. Uses default if None.

        Raises:
            AssetError: If sprites are requested and an asset is missing.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameRenderer")

        if config is None:
            config = get_config()

        self._config = config
        self._width = config.display.width
        self._height = config.display.height
        self._ceiling = config.flight.sky_ceiling

        if not pygame.get_init():
            pygame.init()
        pygame.font.init()

        self._screen: Optional[pygame.Surface] = None

        self._sprites: Optional[SpriteLoader] = None
        if use_sprites:
            self._sprites = SpriteLoader(assets_dir)
            self._font = self._sprites.font
        else:
            self._font = pygame.font.Font(None, 36)

        # Colors
        self._sky_low = (110, 170, 230)
        self._sky_high = (10, 14, 40)
        self._ground_color = (70, 110, 60)
        self._record_color = (9, 27, 162, 127)
        self._fuel_color = (255, 165, 0)
        self._combo_color = (255, 94, 0)
        self._meter_back = (0, 0, 0, 180)
        self._panel_color = (18, 22, 36, 230)
        self._white = (255, 255, 255)
        self._black = (0, 0, 0)

    @property
    def uses_sprites(self) -> bool:
        return self._sprites is not None

    def render(self, snapshot: GameSnapshot) -> np.ndarray:
        """
        Render to RGB array.

        Returns:
            (height, width, 3) uint8 array.
        """
        surface = pygame.Surface((self._width, self._height))
        self._render_to_surface(surface, snapshot)
        array = pygame.surfarray.array3d(surface)
        return np.transpose(array, (1, 0, 2))

    def render_to_screen(self, snapshot: GameSnapshot) -> None:
        """Render to the game window, creating it on first use."""
        if self._screen is None:
            self._screen = pygame.display.set_mode((self._width, self._height))
            pygame.display.set_caption(self._config.display.title)

        self._render_to_surface(self._screen, snapshot)
        pygame.display.flip()

    def _render_to_surface(self, surface: "pygame.Surface", snapshot: GameSnapshot) -> None:
        """Draw one frame, back to front."""
        sx, sy = snapshot.shake_offset
        # Background art is anchored so its top sits at the sky ceiling
        bg_y = snapshot.altitude - self._ceiling

        surface.fill(self._black)
        self._draw_background(surface, snapshot, bg_y, sx, sy)
        self._draw_record(surface, snapshot, bg_y, sx, sy)
        self._draw_particles(surface, snapshot, sx, sy)
        self._draw_player(surface, sx, sy)
        self._draw_banners(surface, snapshot, sx, sy)
        self._draw_header(surface, snapshot, sx, sy)

        if snapshot.show_power_meter:
            self._draw_fuel_meter(surface, snapshot, sx, sy)
        if snapshot.show_combo_meter:
            self._draw_combo_meter(surface, snapshot, sx, sy)
        if snapshot.game_over:
            self._draw_results(surface, snapshot)

    def _draw_background(
        self,
        surface: "pygame.Surface",
        snapshot: GameSnapshot,
        bg_y: float,
        sx: float,
        sy: float
    ) -> None:
        clouds_y = bg_y + self._ceiling - CLOUDS_BELOW_CEILING + sy

        if self._sprites is not None:
            surface.blit(self._sprites.image("background"), (sx, bg_y + sy))
            clouds = self._sprites.image("clouds")
            cloud_width = clouds.get_width()
            surface.blit(clouds, (snapshot.cloud_offset + sx, clouds_y))
            surface.blit(clouds, (snapshot.cloud_offset + cloud_width + sx, clouds_y))
            return

        # Sky darkens with height
        t = max(0.0, min(1.0, snapshot.altitude / self._ceiling))
        sky = tuple(
            int(low * (1 - t) + high * t)
            for low, high in zip(self._sky_low, self._sky_high)
        )
        surface.fill(sky)

        ground_top = int(bg_y + self._ceiling + PLAYER_POS[1] + 120 + sy)
        if ground_top < self._height:
            pygame.draw.rect(
                surface, self._ground_color,
                pygame.Rect(0, ground_top, self._width, self._height - ground_top)
            )

        for i in range(2):
            cx = int(snapshot.cloud_offset + i * self._width + sx)
            cy = int(clouds_y)
            for dx, r in ((60, 28), (100, 36), (145, 26), (300, 30), (340, 40), (385, 24)):
                pygame.draw.circle(surface, (235, 240, 250), (cx + dx, cy + 40), r)

    def _draw_record(
        self,
        surface: "pygame.Surface",
        snapshot: GameSnapshot,
        bg_y: float,
        sx: float,
        sy: float
    ) -> None:
        """Marker line at the saved highscore, scrolling with the sky."""
        best = snapshot.saved_highscore
        marker_y = bg_y + self._ceiling + RECORD_MARKER_OFFSET - best + sy
        label_y = bg_y + self._ceiling + RECORD_LABEL_OFFSET - best + sy

        if self._sprites is not None:
            surface.blit(self._sprites.image("record"), (sx, marker_y))
        else:
            line_y = int(marker_y + 40)
            for x in range(0, self._width, 24):
                pygame.draw.line(surface, self._record_color[:3], (x, line_y), (x + 12, line_y), 3)

        label = f"{best:.0f}m"
        text = self._font.render(label, True, self._record_color[:3])
        text.set_alpha(self._record_color[3])
        x = (self._width - text.get_width()) // 2 + round(sx)
        surface.blit(text, (x, int(label_y) - self._font.get_ascent()))

    def _draw_particles(
        self,
        surface: "pygame.Surface",
        snapshot: GameSnapshot,
        sx: float,
        sy: float
    ) -> None:
        if not snapshot.particles:
            return

        smoke = self._sprites.image("smoke") if self._sprites is not None else None
        for x, y, radius, opacity in snapshot.particles:
            alpha = int(max(0.0, min(1.0, opacity)) * 255)
            size = max(1, int(radius * 2))
            if smoke is not None:
                puff = pygame.transform.smoothscale(smoke, (size, size))
                puff.set_alpha(alpha)
            else:
                puff = pygame.Surface((size, size), pygame.SRCALPHA)
                pygame.draw.circle(puff, (*self._white, alpha), (size // 2, size // 2), size // 2)
            surface.blit(puff, (x - radius + sx, y - radius + sy))

    def _draw_player(self, surface: "pygame.Surface", sx: float, sy: float) -> None:
        px, py = PLAYER_POS[0] + sx, PLAYER_POS[1] + sy
        if self._sprites is not None:
            surface.blit(self._sprites.image("player"), (px, py))
            return

        # Rocket body: nose cone, hull, fins
        cx = px + 45
        body = pygame.Rect(int(cx - 18), int(py + 60), 36, 150)
        pygame.draw.rect(surface, (225, 225, 230), body, border_radius=6)
        pygame.draw.polygon(surface, (210, 60, 60), [(cx, py), (cx - 18, py + 62), (cx + 18, py + 62)])
        pygame.draw.polygon(surface, (210, 60, 60), [
            (cx - 18, py + 170), (cx - 40, py + 215), (cx - 18, py + 205)
        ])
        pygame.draw.polygon(surface, (210, 60, 60), [
            (cx + 18, py + 170), (cx + 40, py + 215), (cx + 18, py + 205)
        ])
        pygame.draw.circle(surface, (90, 160, 220), (int(cx), int(py + 100)), 10)

    def _draw_banners(
        self,
        surface: "pygame.Surface",
        snapshot: GameSnapshot,
        sx: float,
        sy: float
    ) -> None:
        """Ready/set/go frame, then the countdown number on top of it."""
        rsg = SHEET_LAYOUTS["ready_set_go"]
        intro_index = min(snapshot.intro_step, rsg.frame_count - 1)
        rsg_pos = ((self._width - rsg.frame_width) // 2 + sx, BANNER_Y + sy)

        if self._sprites is not None:
            surface.blit(self._sprites.frame("ready_set_go", intro_index), rsg_pos)
        elif INTRO_LABELS[intro_index]:
            self._draw_centered(surface, INTRO_LABELS[intro_index], BANNER_Y + 70 + sy, sx)

        if not snapshot.counting or snapshot.launched or snapshot.game_over:
            return

        countdown = SHEET_LAYOUTS["countdown"]
        count_index = max(0, min(snapshot.count, countdown.frame_count - 1))
        if self._sprites is not None:
            pos = ((self._width - countdown.frame_width) // 2 - 5 + sx, BANNER_Y + sy)
            surface.blit(self._sprites.frame("countdown", count_index), pos)
        else:
            self._draw_centered(surface, str(count_index), BANNER_Y + 70 + sy, sx)

    def _draw_header(
        self,
        surface: "pygame.Surface",
        snapshot: GameSnapshot,
        sx: float,
        sy: float
    ) -> None:
        ox, oy = round(sx), round(sy)
        if snapshot.launched:
            label = f"{abs(snapshot.altitude):.0f}m"
            self._draw_centered(surface, label, HEADER_Y + oy, ox, outline=True)
        elif snapshot.counting:
            self._draw_text(surface, "Charge Your Rocket!", 60 + ox, HEADER_Y + oy, outline=True)
            self._draw_button(surface, "zbutton", "Z", snapshot.charge_a_held, ZBUTTON_POS, sx, sy)
            self._draw_button(surface, "xbutton", "X", snapshot.charge_b_held, XBUTTON_POS, sx, sy)

    def _draw_button(
        self,
        surface: "pygame.Surface",
        sheet: str,
        letter: str,
        held: bool,
        pos: Tuple[int, int],
        sx: float,
        sy: float
    ) -> None:
        x, y = pos[0] + sx, pos[1] + sy
        if self._sprites is not None:
            surface.blit(self._sprites.frame(sheet, int(held)), (x, y))
            return

        size = SHEET_LAYOUTS[sheet].frame_width // 2
        rect = pygame.Rect(int(x) + size // 2, int(y) + size // 2, size, size)
        fill = (200, 200, 200) if held else (250, 250, 250)
        pygame.draw.rect(surface, fill, rect, border_radius=10)
        pygame.draw.rect(surface, self._black, rect, 3, border_radius=10)
        text = self._font.render(letter, True, self._black)
        surface.blit(text, text.get_rect(center=rect.center))

    def _draw_fuel_meter(
        self,
        surface: "pygame.Surface",
        snapshot: GameSnapshot,
        sx: float,
        sy: float
    ) -> None:
        bar_w, bar_h, bar_y = FUEL_BAR
        bar_x = (self._width - bar_w) / 2
        self._fill_rect(surface, bar_x + sx, bar_y + sy, bar_w, bar_h, self._meter_back)

        if snapshot.power_max <= 0:
            return

        percent = snapshot.power_fraction
        self._fill_rect(
            surface, bar_x + 2 + sx, bar_y + 2 + sy,
            (bar_w - 4) * percent, bar_h - 4, self._fuel_color
        )
        label = f"Fuel {percent * 100:3.0f}%"
        text_w = self._font.size(label)[0]
        text_x = int(bar_x + (bar_w - text_w) / 2)
        text_y = int(bar_y + bar_h - 4)
        self._draw_text(surface, label, text_x + round(sx), text_y + round(sy), outline=True)

    def _draw_combo_meter(
        self,
        surface: "pygame.Surface",
        snapshot: GameSnapshot,
        sx: float,
        sy: float
    ) -> None:
        bar_w, bar_h, bar_y = COMBO_BAR
        bar_x = (self._width - bar_w) / 2
        self._fill_rect(surface, bar_x - 2 + sx, bar_y - 2 + sy, bar_w + 4, bar_h + 4, self._meter_back)
        self._fill_rect(
            surface, bar_x + sx, bar_y + sy,
            bar_w * snapshot.combo_fraction, bar_h, self._combo_color
        )

        ox, oy = round(sx), round(sy)
        self._draw_text(
            surface, f"Combo x{snapshot.combo_count}",
            int(bar_x) + ox, int(bar_y) - 10 + oy, outline=True
        )
        if snapshot.prep_duration > 0:
            self._draw_text(
                surface, f"TPS {snapshot.taps_per_second:.1f}",
                40 + ox, int(bar_y) + 12 + oy, outline=True
            )

    def _draw_results(self, surface: "pygame.Surface", snapshot: GameSnapshot) -> None:
        """Dimmed overlay with the last run's statistics."""
        self._fill_rect(surface, 0, 0, self._width, self._height, (0, 0, 0, 160))

        panel_w, panel_h, panel_y = PANEL
        panel_x = (self._width - panel_w) / 2
        self._fill_rect(surface, panel_x, panel_y, panel_w, panel_h, self._panel_color)

        title_y = int(panel_y) + 48
        self._draw_text(surface, "Flight Results", int(panel_x) + 46, title_y, outline=True)
        instr_y = title_y + 36
        self._draw_text(surface, "Press R to relaunch", int(panel_x) + 40, instr_y, outline=True)

        if snapshot.last_result is None:
            return

        line_y = instr_y + 44
        for line in snapshot.last_result.summary_lines(snapshot.saved_highscore):
            self._draw_text(surface, line, int(panel_x) + 40, line_y)
            line_y += 36

    def _fill_rect(
        self,
        surface: "pygame.Surface",
        x: float,
        y: float,
        w: float,
        h: float,
        color: Tuple[int, ...]
    ) -> None:
        """Filled rectangle, alpha-blended when the color has 4 channels."""
        if w <= 0 or h <= 0:
            return
        rect = pygame.Rect(int(x), int(y), int(math.ceil(w)), int(math.ceil(h)))
        if len(color) == 4:
            overlay = pygame.Surface(rect.size, pygame.SRCALPHA)
            overlay.fill(color)
            surface.blit(overlay, rect.topleft)
        else:
            pygame.draw.rect(surface, color, rect)

    def _draw_text(
        self,
        surface: "pygame.Surface",
        text: str,
        x: int,
        baseline_y: int,
        color: Tuple[int, int, int] = (255, 255, 255),
        outline: bool = False
    ) -> None:
        """Draw ``text`` with its baseline at ``baseline_y``."""
        y = baseline_y - self._font.get_ascent()
        if outline:
            shadow = self._font.render(text, True, self._black)
            thickness = 3
            for i in range(8):
                angle = i * math.pi / 4
                dx = round(math.cos(angle) * thickness)
                dy = round(math.sin(angle) * thickness)
                surface.blit(shadow, (x + dx, y + dy))
        surface.blit(self._font.render(text, True, color), (x, y))

    def _draw_centered(
        self,
        surface: "pygame.Surface",
        text: str,
        baseline_y: float,
        offset_x: float = 0,
        outline: bool = True
    ) -> None:
        width = self._font.size(text)[0]
        x = (self._width - width) // 2 + round(offset_x)
        self._draw_text(surface, text, x, int(baseline_y), outline=outline)

    def close(self) -> None:
        """Clean up pygame resources."""
        if self._screen is not None:
            self._screen = None
