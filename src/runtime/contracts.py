"""Protocols describing the optional collaborators of the poll loop."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol


class SoundPlayerLike(Protocol):
    """Non-blocking playback of a resolved sound file."""
    def play(self, path: Path) -> None:
        ...


class UIServerLike(Protocol):
    """Sink for state events consumed by external renderers."""
    def publish(self, event_type: str, **payload: Any) -> None:
        ...
