"""
Audio
=====

Sound collaborator used by the game at phase transitions and presses.

``AudioBackend`` is silent and is what headless runs (tests, agents) use.
``PygameAudio`` plays the fixed clip set through ``pygame.mixer`` and
synthesizes the countdown voice tones with numpy.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from liftoff.rocket_core.sprite_loader import AssetError

logger = logging.getLogger(__name__)

# Default location, resolved relative to the working directory like the
# image assets.
SOUNDS_DIR = Path("assets") / "sounds"

# One-shot clips the game triggers, by cue name
SFX_FILES: Dict[str, str] = {
    "count": "count.mp3",
    "launch": "launch.mp3",
    "countdown": "countdown.mp3",
    "powerdown": "powerdown.mp3",
    "charge": "charge.mp3",
}

MUSIC_FILES: Dict[str, str] = {
    "bossa_nova": "bossa_nova.mp3",
}

VOICE_SAMPLE_RATE = 44000
VOICE_DURATION = 0.45


def voice_frequency(number: int) -> float:
    """Pitch of the tone announcing ``number``: higher numbers sound higher."""
    if number == 0:
        return 220.0
    return 260.0 + number * 22.0


def synthesize_voice(
    number: int,
    sample_rate: int = VOICE_SAMPLE_RATE,
    duration: float = VOICE_DURATION
) -> np.ndarray:
    """
    Generate the countdown tone for ``number``.

    A sine at ``voice_frequency(number)`` with an exponential decay
    envelope ``exp(-3.4 * t / duration)``.

    Returns:
        (samples,) int16 mono PCM.
    """
    samples = int(sample_rate * duration)
    t = np.arange(samples, dtype=np.float64) / sample_rate
    envelope = np.exp(-3.4 * t / duration)
    wave = np.sin(2 * np.pi * voice_frequency(number) * t)
    return (wave * envelope * 32767).astype(np.int16)


class AudioBackend:
    """
    Silent audio backend.

    Subclasses override the hooks; the game never depends on any of them
    doing something except ``is_playing``.
    """

    def play(self, name: str) -> None:
        """Fire a one-shot clip."""

    def play_loop(self, name: str) -> None:
        """Start a looping track."""

    def is_playing(self, name: str) -> bool:
        """Whether the last ``play(name)`` is still audible."""
        return False

    def stop(self, name: str) -> None:
        """Stop and rewind a clip."""

    def play_voice(self, number: int) -> None:
        """Announce a countdown number, cutting off the previous one."""

    def stop_all(self) -> None:
        """Silence every clip the game started."""

    def close(self) -> None:
        """Release resources."""


class PygameAudio(AudioBackend):
    """
    ``pygame.mixer`` implementation.

    Missing clip files are fatal (``AssetError``). A clip that exists but
    cannot be decoded is logged and stays silent for the session.
    """

    def __init__(self, sounds_dir: Optional[Union[str, Path]] = None, volume: float = 1.0):
        """
        Load every clip and build the voice tones.

        Args:
            sounds_dir: Directory with the clip files. Uses default if None.
            volume: Master volume in [0, 1].
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameAudio")

        self._sounds_dir = Path(sounds_dir) if sounds_dir is not None else SOUNDS_DIR
        self._volume = max(0.0, min(1.0, volume))

        if not pygame.mixer.get_init():
            try:
                pygame.mixer.init(frequency=VOICE_SAMPLE_RATE)
            except pygame.error as exc:
                raise AssetError(f"Audio device unavailable: {exc}") from exc

        self._clips: Dict[str, Optional[pygame.mixer.Sound]] = {}
        self._channels: Dict[str, pygame.mixer.Channel] = {}
        self._voices: Dict[int, pygame.mixer.Sound] = {}
        self._voice_channel: Optional[pygame.mixer.Channel] = None

        for name, filename in SFX_FILES.items():
            self._clips[name] = self._load_clip(self._sounds_dir / filename)

        for name, filename in MUSIC_FILES.items():
            path = self._sounds_dir / filename
            if not path.exists():
                raise AssetError(f"Music track not found: {path}")

        self._build_voices()

    def _load_clip(self, path: Path) -> Optional["pygame.mixer.Sound"]:
        """Load one clip; None if it exists but cannot be decoded."""
        if not path.exists():
            raise AssetError(f"Sound clip not found: {path}")
        try:
            clip = pygame.mixer.Sound(str(path))
        except pygame.error as exc:
            logger.warning("Error decoding sound %s: %s", path, exc)
            return None
        clip.set_volume(self._volume)
        return clip

    def _build_voices(self) -> None:
        """Synthesize the 0..10 countdown tones at the mixer's format."""
        frequency, _size, channels = pygame.mixer.get_init()
        for number in range(0, 11):
            pcm = synthesize_voice(number, sample_rate=frequency)
            if channels > 1:
                pcm = np.repeat(pcm[:, np.newaxis], channels, axis=1)
            try:
                voice = pygame.sndarray.make_sound(np.ascontiguousarray(pcm))
            except (pygame.error, ValueError) as exc:
                logger.warning("Error building voice clip %d: %s", number, exc)
                continue
            voice.set_volume(self._volume)
            self._voices[number] = voice

    def play(self, name: str) -> None:
        clip = self._clips.get(name)
        if clip is None:
            return
        channel = clip.play()
        if channel is not None:
            self._channels[name] = channel

    def play_loop(self, name: str) -> None:
        filename = MUSIC_FILES.get(name)
        if filename is None:
            logger.warning("Unknown music track: %s", name)
            return
        try:
            pygame.mixer.music.load(str(self._sounds_dir / filename))
            pygame.mixer.music.set_volume(self._volume)
            pygame.mixer.music.play(loops=-1)
        except pygame.error as exc:
            logger.warning("Error playing music %s: %s", name, exc)

    def is_playing(self, name: str) -> bool:
        channel = self._channels.get(name)
        clip = self._clips.get(name)
        if channel is None or clip is None:
            return False
        return channel.get_busy() and channel.get_sound() is clip

    def stop(self, name: str) -> None:
        if self.is_playing(name):
            self._channels[name].stop()
        self._channels.pop(name, None)

    def play_voice(self, number: int) -> None:
        voice = self._voices.get(number)
        if voice is None:
            return
        if self._voice_channel is not None:
            self._voice_channel.stop()
        self._voice_channel = voice.play()

    def stop_all(self) -> None:
        for name in list(self._channels):
            self.stop(name)
        if self._voice_channel is not None:
            self._voice_channel.stop()
            self._voice_channel = None

    def close(self) -> None:
        self.stop_all()
        pygame.mixer.music.stop()
