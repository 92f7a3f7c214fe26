"""Serialization of state events and the sticky replay cache."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from contracts.ui_protocol import STICKY_EVENT_ORDER, STICKY_EVENT_TYPES


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def make_event(
    event_type: str,
    *,
    now_fn: Optional[Callable[[], datetime]] = None,
    **payload: Any,
) -> str:
    """Encode one event as JSON with its `type` and an ISO-8601 `timestamp`."""
    timestamp = (now_fn or _utc_now)().isoformat()
    event = {"type": event_type, "timestamp": timestamp}
    event.update(payload)
    return json.dumps(event)


class StickyEventStore:
    """Latest message per sticky event type, shared across threads."""

    def __init__(self):
        self._latest: dict[str, str] = {}
        self._lock = threading.Lock()

    def remember(self, event_type: str, message: str) -> None:
        if event_type in STICKY_EVENT_TYPES:
            with self._lock:
                self._latest[event_type] = message

    def latest(self, event_type: str) -> Optional[str]:
        with self._lock:
            return self._latest.get(event_type)

    def snapshot(self) -> list[str]:
        """Messages to replay to a new client, in `STICKY_EVENT_ORDER`."""
        with self._lock:
            latest = dict(self._latest)
        return [latest[event_type] for event_type in STICKY_EVENT_ORDER if event_type in latest]
