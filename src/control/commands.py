"""Control commands accepted over the local socket and their timer mapping."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pomodoro import PomodoroTimer


class Command(str, Enum):
    TOGGLE = "toggle"
    START = "start"
    STOP = "stop"
    RESET = "reset"
    SKIP = "skip"


COMMAND_NAMES: tuple[str, ...] = tuple(command.value for command in Command)


def parse_command(text: str) -> Optional[Command]:
    """Decode a payload into a command; unknown text yields `None`."""
    token = text.strip().lower()
    try:
        return Command(token)
    except ValueError:
        return None


def apply_command(command: Command, timer: PomodoroTimer) -> None:
    if command is Command.TOGGLE:
        timer.toggle()
    elif command is Command.START:
        timer.start()
    elif command is Command.STOP:
        timer.pause()
    elif command is Command.RESET:
        timer.reset()
    elif command is Command.SKIP:
        # Only tick-driven transitions trigger sounds; the marker is dropped.
        timer.skip()
