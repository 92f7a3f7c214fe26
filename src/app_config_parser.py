"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    AppConfig,
    AppConfigurationError,
    ControlSettings,
    PomodoroSettings,
    SoundSettings,
    StateServerSettings,
)
from pomodoro.constants import (
    DEFAULT_INTERVAL_MS,
    DEFAULT_LONG_BREAK_MINUTES,
    DEFAULT_SHORT_BREAK_MINUTES,
    DEFAULT_WORK_MINUTES,
    MIN_INTERVAL_MS,
)


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    return AppConfig(
        pomodoro=_parse_pomodoro_settings(_section(raw, "pomodoro")),
        control=_parse_control_settings(_section(raw, "control"), base_dir=base_dir),
        sound=_parse_sound_settings(_section(raw, "sound"), base_dir=base_dir),
        state_server=_parse_state_server_settings(_section(raw, "state_server")),
        source_file=source_file,
    )


def _parse_pomodoro_settings(section: Mapping[str, Any]) -> PomodoroSettings:
    # Durations are clamped so the timer never sees a zero-length phase.
    return PomodoroSettings(
        work=max(
            1,
            _as_int(section.get("work", DEFAULT_WORK_MINUTES), "pomodoro.work"),
        ),
        short_break=max(
            1,
            _as_int(
                section.get("short_break", DEFAULT_SHORT_BREAK_MINUTES),
                "pomodoro.short_break",
            ),
        ),
        long_break=max(
            1,
            _as_int(
                section.get("long_break", DEFAULT_LONG_BREAK_MINUTES),
                "pomodoro.long_break",
            ),
        ),
        auto_start_work=_as_bool(
            section.get("auto_start_work", False),
            "pomodoro.auto_start_work",
        ),
        auto_start_break=_as_bool(
            section.get("auto_start_break", False),
            "pomodoro.auto_start_break",
        ),
        interval_ms=max(
            MIN_INTERVAL_MS,
            _as_int(
                section.get("interval_ms", DEFAULT_INTERVAL_MS),
                "pomodoro.interval_ms",
            ),
        ),
    )


def _parse_control_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> ControlSettings:
    runtime_dir = _as_str(section.get("runtime_dir", ""), "control.runtime_dir")
    return ControlSettings(
        enabled=_as_bool(section.get("enabled", True), "control.enabled"),
        runtime_dir=_resolve_path(base_dir, runtime_dir),
    )


def _parse_sound_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> SoundSettings:
    return SoundSettings(
        enabled=_as_bool(section.get("enabled", True), "sound.enabled"),
        work_sound=_resolve_sound_name(
            base_dir,
            _as_str(section.get("work_sound", ""), "sound.work_sound"),
        ),
        break_sound=_resolve_sound_name(
            base_dir,
            _as_str(section.get("break_sound", ""), "sound.break_sound"),
        ),
        output_device=(
            _as_int(section.get("output_device"), "sound.output_device")
            if "output_device" in section
            else None
        ),
    )


def _parse_state_server_settings(section: Mapping[str, Any]) -> StateServerSettings:
    return StateServerSettings(
        enabled=_as_bool(section.get("enabled", False), "state_server.enabled"),
        host=_as_str(section.get("host", "127.0.0.1"), "state_server.host"),
        port=_as_int(section.get("port", 8766), "state_server.port"),
    )


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)


def _resolve_sound_name(base_dir: Path, raw: str) -> str:
    # Bare names are looked up in the XDG sound theme directories later.
    if raw.startswith(("./", "../", "~")):
        return _resolve_path(base_dir, raw)
    return raw
