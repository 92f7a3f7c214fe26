"""Host-driven poll loop: drain control commands, then tick once per second."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from app_config_schema import AppConfig
from control import (
    Command,
    CommandChannel,
    ControlError,
    ControlListener,
    apply_command,
)
from pomodoro import PomodoroSnapshot, PomodoroTimer, Transition
from sound import resolve_sound

from .contracts import SoundPlayerLike, UIServerLike
from .ticks import TickDependencies, TickProcessor
from .ui import RuntimeUIPublisher

TICK_INTERVAL_SECONDS = 1.0


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine."""
    logger: logging.Logger
    app_config: AppConfig
    sound_player: Optional[SoundPlayerLike] = None
    ui_server: Optional[UIServerLike] = None


@dataclass(frozen=True)
class PollResult:
    """Display state after one poll cycle."""
    snapshot: PomodoroSnapshot
    transition: Transition = Transition.NONE

    @property
    def text(self) -> str:
        """Compact `MM:SS|R` (running) or `MM:SS|P` (paused) state string."""
        flag = "R" if self.snapshot.running else "P"
        return f"{self.snapshot.remaining_formatted}|{flag}"


class RuntimeEngine:
    """Owns the timer and applies queued commands from the poll thread.

    The timer is only touched from the thread calling `poll`; the control
    listener hands commands over through a `CommandChannel`.
    """
    def __init__(self, bootstrap: RuntimeBootstrap):
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        self._config = bootstrap.app_config

        self._timer = PomodoroTimer.from_settings(
            self._config.pomodoro,
            logger=logging.getLogger("pomodoro"),
        )
        self._channel = CommandChannel()
        self._listener: Optional[ControlListener] = None
        self._last_tick: Optional[float] = None
        self._ui = RuntimeUIPublisher(bootstrap.ui_server)
        self._tick_processor = TickProcessor(
            TickDependencies(
                sound_player=bootstrap.sound_player,
                logger=self._logger,
                ui=self._ui,
                sounds=self._resolve_sounds(),
            )
        )

    @property
    def timer(self) -> PomodoroTimer:
        return self._timer

    @property
    def control_enabled(self) -> bool:
        return self._listener is not None

    @property
    def interval_seconds(self) -> float:
        return self._config.pomodoro.interval_ms / 1000.0

    def start(self) -> None:
        """Start the control listener; failures leave the timer local-only."""
        pomodoro = self._config.pomodoro
        self._logger.info(
            "Pomodoro initialized (work=%dm short_break=%dm long_break=%dm)",
            pomodoro.work,
            pomodoro.short_break,
            pomodoro.long_break,
        )

        control = self._config.control
        if not control.enabled:
            self._logger.info("Socket control disabled by configuration")
            self._ui.publish_control_status(False, message="disabled")
        elif self._listener is None:
            try:
                self._listener = ControlListener(
                    self._channel,
                    runtime_dir=control.runtime_dir or None,
                    logger=logging.getLogger("control"),
                )
            except ControlError as error:
                self._logger.warning(
                    "Failed to start socket listener, control disabled: %s",
                    error,
                )
                self._ui.publish_control_status(False, message=str(error))
            else:
                self._logger.info("Socket control enabled")
                self._ui.publish_control_status(True)

        self._ui.publish_pomodoro_state(
            self._timer.snapshot(),
            reason="startup",
            force=True,
        )

    def submit(self, command: Command) -> None:
        """Queue a command from the host itself, e.g. a key press."""
        self._channel.send(command)

    def poll(self) -> PollResult:
        self._process_commands()
        transition = self._maybe_tick(time.monotonic())
        snapshot = self._timer.snapshot()
        self._tick_processor.handle_transition(transition, snapshot)
        self._ui.publish_pomodoro_state(snapshot)
        return PollResult(snapshot=snapshot, transition=transition)

    def run(self, stop_event: threading.Event) -> int:
        """Poll every configured interval until `stop_event` is set."""
        self.start()
        try:
            while not stop_event.is_set():
                self.poll()
                stop_event.wait(self.interval_seconds)
        except KeyboardInterrupt:
            self._logger.info("Shutdown requested by keyboard interrupt.")
        except Exception as error:
            self._logger.error("Unexpected error: %s", error, exc_info=True)
            return 1
        finally:
            self.shutdown()
        return 0

    def shutdown(self) -> None:
        listener = self._listener
        if listener is not None:
            self._logger.info("Stopping control listener...")
            listener.shutdown()
            self._listener = None
        self._channel.close()

    def _process_commands(self) -> None:
        for command in self._channel.drain():
            self._logger.debug("Processing command: %s", command.value)
            apply_command(command, self._timer)

    def _maybe_tick(self, now: float) -> Transition:
        # Missed seconds are dropped, never replayed as a burst of ticks.
        if self._last_tick is None:
            self._last_tick = now
            return Transition.NONE
        if now - self._last_tick < TICK_INTERVAL_SECONDS:
            return Transition.NONE
        self._last_tick = now
        return self._timer.tick()

    def _resolve_sounds(self) -> dict[Transition, Path]:
        settings = self._config.sound
        if not settings.enabled:
            return {}

        sounds: dict[Transition, Path] = {}
        for transition, name in (
            (Transition.WORK_COMPLETE, settings.work_sound),
            (Transition.BREAK_COMPLETE, settings.break_sound),
        ):
            if not name:
                continue
            path = resolve_sound(name)
            if path is None:
                self._logger.warning("Sound not found: %s", name)
                continue
            self._logger.info("Sound configured for %s: %s", transition.value, path)
            sounds[transition] = path
        return sounds
