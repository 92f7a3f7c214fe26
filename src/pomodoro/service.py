"""Single-owner pomodoro state machine driven by one-second ticks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import ITERATIONS_PER_SESSION, SECONDS_PER_MINUTE


class Phase(str, Enum):
    """Phase of the work/break cycle."""

    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def is_break(self) -> bool:
        return self in (Phase.SHORT_BREAK, Phase.LONG_BREAK)


class Transition(str, Enum):
    """Marker returned by `tick` and `skip` describing the phase just left."""

    NONE = "none"
    WORK_COMPLETE = "work_complete"
    BREAK_COMPLETE = "break_complete"


@dataclass(frozen=True)
class PomodoroSnapshot:
    """Immutable timer snapshot exposed to renderers and publishers."""
    phase: Phase
    running: bool
    elapsed_seconds: int
    duration_seconds: int
    remaining_seconds: int
    remaining_formatted: str
    progress: float
    at_phase_boundary: bool
    iterations: int
    sessions_completed: int


class PomodoroTimer:
    """Work/short-break/long-break countdown.

    The timer is not thread-safe. It is owned by the poll loop thread and
    every mutation happens there, including commands received over the
    control channel.
    """

    def __init__(
        self,
        *,
        work_seconds: int,
        short_break_seconds: int,
        long_break_seconds: int,
        auto_start_work: bool = False,
        auto_start_break: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        for name, value in (
            ("work_seconds", work_seconds),
            ("short_break_seconds", short_break_seconds),
            ("long_break_seconds", long_break_seconds),
        ):
            if value <= 0:
                raise ValueError(f"{name} must be greater than zero")

        self._work_seconds = int(work_seconds)
        self._short_break_seconds = int(short_break_seconds)
        self._long_break_seconds = int(long_break_seconds)
        self._auto_start_work = bool(auto_start_work)
        self._auto_start_break = bool(auto_start_break)
        self._logger = logger or logging.getLogger("pomodoro")

        self._phase = Phase.WORK
        self._elapsed_seconds = 0
        self._iterations = 0
        self._sessions_completed = 0
        self._running = False

    @classmethod
    def from_settings(
        cls,
        settings,
        logger: Optional[logging.Logger] = None,
    ) -> "PomodoroTimer":
        """Build a timer from minute-based `[pomodoro]` settings."""
        return cls(
            work_seconds=settings.work * SECONDS_PER_MINUTE,
            short_break_seconds=settings.short_break * SECONDS_PER_MINUTE,
            long_break_seconds=settings.long_break * SECONDS_PER_MINUTE,
            auto_start_work=settings.auto_start_work,
            auto_start_break=settings.auto_start_break,
            logger=logger,
        )

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed_seconds

    @property
    def iterations(self) -> int:
        return self._iterations

    @property
    def sessions_completed(self) -> int:
        return self._sessions_completed

    def duration_seconds(self, phase: Optional[Phase] = None) -> int:
        phase = phase or self._phase
        if phase is Phase.WORK:
            return self._work_seconds
        if phase is Phase.SHORT_BREAK:
            return self._short_break_seconds
        return self._long_break_seconds

    def remaining_seconds(self) -> int:
        return max(0, self.duration_seconds() - self._elapsed_seconds)

    def remaining_formatted(self) -> str:
        """Remaining time as `MM:SS`, or `H:MM:SS` from one hour upwards."""
        return format_remaining(self.remaining_seconds())

    def progress(self) -> float:
        duration = self.duration_seconds()
        return min(1.0, self._elapsed_seconds / duration)

    def at_phase_boundary(self) -> bool:
        return self._elapsed_seconds == 0

    def snapshot(self) -> PomodoroSnapshot:
        return PomodoroSnapshot(
            phase=self._phase,
            running=self._running,
            elapsed_seconds=self._elapsed_seconds,
            duration_seconds=self.duration_seconds(),
            remaining_seconds=self.remaining_seconds(),
            remaining_formatted=self.remaining_formatted(),
            progress=self.progress(),
            at_phase_boundary=self.at_phase_boundary(),
            iterations=self._iterations,
            sessions_completed=self._sessions_completed,
        )

    def toggle(self) -> None:
        self._running = not self._running

    def start(self) -> None:
        self._running = True

    def pause(self) -> None:
        self._running = False

    def reset(self) -> None:
        """Return to the first work phase, keeping the session counter."""
        self._phase = Phase.WORK
        self._elapsed_seconds = 0
        self._iterations = 0
        self._running = False
        self._logger.info(
            "Pomodoro reset (sessions_completed=%d)",
            self._sessions_completed,
        )

    def skip(self) -> Transition:
        """Move to the next phase immediately, running or not."""
        return self._advance_phase()

    def tick(self) -> Transition:
        """Advance one second; transition when the phase duration is reached."""
        if not self._running:
            return Transition.NONE

        self._elapsed_seconds += 1
        if self._elapsed_seconds >= self.duration_seconds():
            return self._advance_phase()
        return Transition.NONE

    def _advance_phase(self) -> Transition:
        self._elapsed_seconds = 0
        left = self._phase

        if left is Phase.WORK:
            self._iterations += 1
            if self._iterations >= ITERATIONS_PER_SESSION:
                self._phase = Phase.LONG_BREAK
            else:
                self._phase = Phase.SHORT_BREAK
            self._running = self._auto_start_break
        elif left is Phase.SHORT_BREAK:
            self._phase = Phase.WORK
            self._running = self._auto_start_work
        else:
            self._phase = Phase.WORK
            self._iterations = 0
            self._sessions_completed += 1
            self._running = self._auto_start_work

        self._logger.info(
            "Pomodoro phase %s -> %s (iterations=%d sessions=%d running=%s)",
            left.value,
            self._phase.value,
            self._iterations,
            self._sessions_completed,
            self._running,
        )
        if left is Phase.WORK:
            return Transition.WORK_COMPLETE
        return Transition.BREAK_COMPLETE


def format_remaining(seconds: int) -> str:
    hours, remainder = divmod(max(0, int(seconds)), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"
