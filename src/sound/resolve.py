"""Lookup of transition sounds by path or freedesktop sound theme name."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, Optional

SOUND_EXTENSIONS: tuple[str, ...] = ("oga", "ogg", "wav", "mp3")
_DEFAULT_DATA_DIRS = "/usr/local/share:/usr/share"


def resolve_sound(name: str) -> Optional[Path]:
    """Resolve a configured sound to an existing file.

    Accepts absolute paths, `./` or `../` relative paths, and bare theme
    names such as `alarm-clock-elapsed`, which are searched for in the
    `sounds` directory of every XDG data directory.
    """
    if not name:
        return None

    path = Path(name)
    if path.is_absolute() or name.startswith(("./", "../")):
        return path if path.is_file() else None

    for sounds_dir in _xdg_sound_dirs():
        found = _find_sound_in_dir(sounds_dir, name)
        if found is not None:
            return found
    return None


def _xdg_sound_dirs() -> Iterator[Path]:
    data_dirs = os.getenv("XDG_DATA_DIRS") or _DEFAULT_DATA_DIRS
    for raw in data_dirs.split(":"):
        if raw:
            yield Path(raw) / "sounds"

    data_home = os.getenv("XDG_DATA_HOME")
    home = Path(data_home) if data_home else Path.home() / ".local" / "share"
    yield home / "sounds"


def _find_sound_in_dir(directory: Path, name: str) -> Optional[Path]:
    if not directory.is_dir():
        return None

    for subdir in (directory, directory / "stereo"):
        for extension in SOUND_EXTENSIONS:
            candidate = subdir / f"{name}.{extension}"
            if candidate.is_file():
                return candidate

    # Theme directories, e.g. sounds/freedesktop/stereo/bell.oga
    for entry in sorted(directory.iterdir()):
        if entry.is_dir():
            found = _find_sound_in_dir(entry, name)
            if found is not None:
                return found
    return None
