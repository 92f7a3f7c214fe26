from __future__ import annotations

from typing import Any, Optional

from contracts.ui_protocol import EVENT_CONTROL, EVENT_POMODORO, EVENT_TRANSITION
from pomodoro import PomodoroSnapshot, Transition

from .contracts import UIServerLike


def snapshot_payload(snapshot: PomodoroSnapshot) -> dict[str, Any]:
    return {
        "phase": snapshot.phase.value,
        "running": snapshot.running,
        "elapsed_seconds": snapshot.elapsed_seconds,
        "duration_seconds": snapshot.duration_seconds,
        "remaining_seconds": snapshot.remaining_seconds,
        "remaining_formatted": snapshot.remaining_formatted,
        "progress": round(snapshot.progress, 4),
        "at_phase_boundary": snapshot.at_phase_boundary,
        "iterations": snapshot.iterations,
        "sessions_completed": snapshot.sessions_completed,
    }


class RuntimeUIPublisher:
    """Publishes display state changes to an optional state server."""
    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server
        self._last_snapshot: Optional[PomodoroSnapshot] = None

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def publish_pomodoro_state(
        self,
        snapshot: PomodoroSnapshot,
        *,
        reason: str = "",
        force: bool = False,
    ) -> bool:
        """Publish the snapshot unless it equals the last one published."""
        if not force and snapshot == self._last_snapshot:
            return False
        self._last_snapshot = snapshot

        payload = snapshot_payload(snapshot)
        if reason:
            payload["reason"] = reason
        self.publish(EVENT_POMODORO, **payload)
        return True

    def publish_transition(
        self,
        transition: Transition,
        snapshot: PomodoroSnapshot,
    ) -> None:
        self.publish(
            EVENT_TRANSITION,
            transition=transition.value,
            phase=snapshot.phase.value,
            iterations=snapshot.iterations,
            sessions_completed=snapshot.sessions_completed,
        )

    def publish_control_status(self, enabled: bool, *, message: str = "") -> None:
        payload: dict[str, Any] = {"enabled": enabled}
        if message:
            payload["message"] = message
        self.publish(EVENT_CONTROL, **payload)
