from .constants import (
    DEFAULT_INTERVAL_MS,
    DEFAULT_LONG_BREAK_MINUTES,
    DEFAULT_SHORT_BREAK_MINUTES,
    DEFAULT_WORK_MINUTES,
    ITERATIONS_PER_SESSION,
)
from .service import (
    Phase,
    PomodoroSnapshot,
    PomodoroTimer,
    Transition,
    format_remaining,
)

__all__ = [
    "DEFAULT_INTERVAL_MS",
    "DEFAULT_LONG_BREAK_MINUTES",
    "DEFAULT_SHORT_BREAK_MINUTES",
    "DEFAULT_WORK_MINUTES",
    "ITERATIONS_PER_SESSION",
    "Phase",
    "PomodoroSnapshot",
    "PomodoroTimer",
    "Transition",
    "format_remaining",
]
