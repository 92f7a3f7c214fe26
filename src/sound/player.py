"""Sounddevice-backed playback of transition sounds."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

import sounddevice as sd

from .decode import load_sound
from .errors import SoundError


class SoundDevicePlayer:
    """Plays sound files on a background thread so the poll loop never blocks."""
    def __init__(
        self,
        output_device_index: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._output_device_index = output_device_index
        self._logger = logger or logging.getLogger("sound")

    def play(self, path: Path) -> None:
        if not path.is_file():
            self._logger.warning("Sound file not found: %s", path)
            return

        threading.Thread(
            target=self._play_logged,
            args=(path,),
            daemon=True,
            name="sound-playback",
        ).start()

    def _play_logged(self, path: Path) -> None:
        try:
            self.play_blocking(path)
        except SoundError as error:
            self._logger.warning("Failed to play sound %s: %s", path, error)

    def play_blocking(self, path: Path) -> None:
        samples, sample_rate_hz = load_sound(path)
        self._logger.debug(
            "Playing %d frames of %s at %d Hz",
            len(samples),
            path.name,
            sample_rate_hz,
        )
        try:
            sd.play(samples, sample_rate_hz, device=self._output_device_index)
            sd.wait()
        except Exception as error:
            raise SoundError(f"Audio playback failed: {error}") from error
