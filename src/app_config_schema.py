"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from pomodoro.constants import (
    DEFAULT_INTERVAL_MS,
    DEFAULT_LONG_BREAK_MINUTES,
    DEFAULT_SHORT_BREAK_MINUTES,
    DEFAULT_WORK_MINUTES,
)

DEFAULT_CONFIG_FILE = "config.toml"
CONFIG_FILE_ENV = "POMODORO_CONFIG_FILE"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class PomodoroSettings:
    """Phase durations in minutes and auto-start flags from `[pomodoro]`."""
    work: int = DEFAULT_WORK_MINUTES
    short_break: int = DEFAULT_SHORT_BREAK_MINUTES
    long_break: int = DEFAULT_LONG_BREAK_MINUTES
    auto_start_work: bool = False
    auto_start_break: bool = False
    interval_ms: int = DEFAULT_INTERVAL_MS


@dataclass(frozen=True)
class ControlSettings:
    """Local control socket settings from `[control]`."""
    enabled: bool = True
    runtime_dir: str = ""


@dataclass(frozen=True)
class SoundSettings:
    """Transition sounds from `[sound]`; names or paths, empty disables."""
    enabled: bool = True
    work_sound: str = ""
    break_sound: str = ""
    output_device: Optional[int] = None


@dataclass(frozen=True)
class StateServerSettings:
    """Websocket state broadcast settings from `[state_server]`."""
    enabled: bool = False
    host: str = "127.0.0.1"
    port: int = 8766


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    pomodoro: PomodoroSettings = field(default_factory=PomodoroSettings)
    control: ControlSettings = field(default_factory=ControlSettings)
    sound: SoundSettings = field(default_factory=SoundSettings)
    state_server: StateServerSettings = field(default_factory=StateServerSettings)
    source_file: str = ""
