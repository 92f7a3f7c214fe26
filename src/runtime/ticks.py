"""Side effects of tick-driven phase transitions: sounds and state events."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pomodoro import PomodoroSnapshot, Transition
from sound import SoundError

from .contracts import SoundPlayerLike
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class TickDependencies:
    """Dependencies required for reacting to phase transitions."""
    sound_player: Optional[SoundPlayerLike]
    logger: logging.Logger
    ui: RuntimeUIPublisher
    sounds: dict[Transition, Path] = field(default_factory=dict)


class TickProcessor:
    """Plays the phase-appropriate sound and announces the transition."""
    def __init__(self, dependencies: TickDependencies):
        self._dependencies = dependencies

    def handle_transition(
        self,
        transition: Transition,
        snapshot: PomodoroSnapshot,
    ) -> None:
        if transition is Transition.NONE:
            return

        deps = self._dependencies
        deps.logger.info(
            "Phase transition %s, now %s",
            transition.value,
            snapshot.phase.value,
        )
        deps.ui.publish_transition(transition, snapshot)

        sound_path = deps.sounds.get(transition)
        if deps.sound_player is None or sound_path is None:
            return
        try:
            deps.sound_player.play(sound_path)
        except SoundError as error:
            deps.logger.error("Transition sound playback failed: %s", error)
