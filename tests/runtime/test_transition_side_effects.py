import logging
import unittest
from pathlib import Path
from typing import Any

from pomodoro import Phase, PomodoroTimer, Transition
from runtime.ticks import TickDependencies, TickProcessor
from runtime.ui import RuntimeUIPublisher
from sound import SoundError


class _RecordingPlayer:
    def __init__(self, error: Exception | None = None):
        self.played: list[Path] = []
        self._error = error

    def play(self, path: Path) -> None:
        self.played.append(path)
        if self._error is not None:
            raise self._error


class _RecordingUIServer:
    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def publish(self, event_type: str, **payload: Any) -> None:
        self.events.append((event_type, payload))


def _processor(player, ui_server=None) -> TickProcessor:
    return TickProcessor(
        TickDependencies(
            sound_player=player,
            logger=logging.getLogger("test.ticks"),
            ui=RuntimeUIPublisher(ui_server),
            sounds={
                Transition.WORK_COMPLETE: Path("/sounds/work.wav"),
                Transition.BREAK_COMPLETE: Path("/sounds/break.wav"),
            },
        )
    )


def _snapshot_after_skip(skips: int):
    timer = PomodoroTimer(work_seconds=60, short_break_seconds=60, long_break_seconds=60)
    for _ in range(skips):
        timer.skip()
    return timer.snapshot()


class TransitionSideEffectTests(unittest.TestCase):
    def test_work_complete_plays_work_sound(self) -> None:
        player = _RecordingPlayer()
        _processor(player).handle_transition(Transition.WORK_COMPLETE, _snapshot_after_skip(1))
        self.assertEqual([Path("/sounds/work.wav")], player.played)

    def test_break_complete_plays_break_sound(self) -> None:
        player = _RecordingPlayer()
        _processor(player).handle_transition(Transition.BREAK_COMPLETE, _snapshot_after_skip(2))
        self.assertEqual([Path("/sounds/break.wav")], player.played)

    def test_no_transition_has_no_side_effects(self) -> None:
        player = _RecordingPlayer()
        ui_server = _RecordingUIServer()
        _processor(player, ui_server).handle_transition(
            Transition.NONE,
            _snapshot_after_skip(0),
        )
        self.assertEqual([], player.played)
        self.assertEqual([], ui_server.events)

    def test_playback_error_is_logged_not_raised(self) -> None:
        player = _RecordingPlayer(error=SoundError("no device"))
        with self.assertLogs("test.ticks", level="ERROR") as logs:
            _processor(player).handle_transition(
                Transition.WORK_COMPLETE,
                _snapshot_after_skip(1),
            )
        self.assertIn("no device", logs.output[0])

    def test_transition_event_is_published_without_player(self) -> None:
        ui_server = _RecordingUIServer()
        snapshot = _snapshot_after_skip(7)
        self.assertIs(Phase.LONG_BREAK, snapshot.phase)

        _processor(None, ui_server).handle_transition(Transition.WORK_COMPLETE, snapshot)

        self.assertEqual(
            [
                (
                    "transition",
                    {
                        "transition": "work_complete",
                        "phase": "long_break",
                        "iterations": 4,
                        "sessions_completed": 0,
                    },
                )
            ],
            ui_server.events,
        )


if __name__ == "__main__":
    unittest.main()
