"""Decoding of transition sound files into float32 sample buffers."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import soundfile as sf

from .errors import SoundError


def load_sound(path: Path) -> tuple[np.ndarray, int]:
    """Decode an OGG/Vorbis, WAV or MP3 file into float32 (frames, channels).

    The container is detected from the file contents, so freedesktop `.oga`
    theme sounds decode like `.ogg` ones.
    """
    try:
        samples, sample_rate_hz = sf.read(str(path), dtype="float32", always_2d=True)
    except (OSError, RuntimeError, sf.SoundFileError) as error:
        raise SoundError(f"Cannot decode sound file {path}: {error}") from error

    if len(samples) == 0:
        raise SoundError(f"Sound file has no audio frames: {path}")
    return samples, int(sample_rate_hz)
