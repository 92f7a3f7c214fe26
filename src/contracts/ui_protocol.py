"""Websocket event types published to external renderers."""

from __future__ import annotations

EVENT_HELLO = "hello"
EVENT_POMODORO = "pomodoro"
EVENT_TRANSITION = "transition"
EVENT_CONTROL = "control"

STICKY_EVENT_TYPES: frozenset[str] = frozenset(
    {
        EVENT_POMODORO,
        EVENT_TRANSITION,
        EVENT_CONTROL,
    }
)

# Replay order for late joiners: latest state last so it wins.
STICKY_EVENT_ORDER: tuple[str, ...] = (
    EVENT_CONTROL,
    EVENT_TRANSITION,
    EVENT_POMODORO,
)
