"""Default durations and fixed limits used by the pomodoro state machine."""

from __future__ import annotations

DEFAULT_WORK_MINUTES = 25
DEFAULT_SHORT_BREAK_MINUTES = 5
DEFAULT_LONG_BREAK_MINUTES = 15
DEFAULT_INTERVAL_MS = 1000
MIN_INTERVAL_MS = 50

SECONDS_PER_MINUTE = 60

# Completed work phases before a long break is due.
ITERATIONS_PER_SESSION = 4
