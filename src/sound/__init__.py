"""Transition sound lookup. Decoding and playback live in `sound.decode` and `sound.player`."""

from .errors import SoundError
from .resolve import SOUND_EXTENSIONS, resolve_sound

__all__ = [
    "SOUND_EXTENSIONS",
    "SoundError",
    "resolve_sound",
]
