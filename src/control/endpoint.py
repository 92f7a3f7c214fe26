"""Control endpoint location inside the XDG runtime directory."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

from .errors import RuntimeDirectoryError

SOCKET_DIR = "pomodoro-widget"
SOCKET_NAME = "pomodoro.socket"

PathLike = Union[str, Path]


def resolve_runtime_dir(runtime_dir: Optional[PathLike] = None) -> Path:
    """Return the runtime base directory, preferring an explicit override."""
    raw = str(runtime_dir) if runtime_dir else os.getenv("XDG_RUNTIME_DIR", "")
    if not raw:
        raise RuntimeDirectoryError("XDG_RUNTIME_DIR is not set")

    path = Path(raw).expanduser()
    if not path.is_absolute():
        raise RuntimeDirectoryError(f"Runtime directory must be absolute: {path}")
    if not path.is_dir():
        raise RuntimeDirectoryError(f"Runtime directory does not exist: {path}")
    return path


def get_socket_path(runtime_dir: Optional[PathLike] = None) -> Path:
    """Return the endpoint path, creating the namespace directory if needed."""
    namespace = resolve_runtime_dir(runtime_dir) / SOCKET_DIR
    try:
        namespace.mkdir(mode=0o700, parents=True, exist_ok=True)
    except OSError as error:
        raise RuntimeDirectoryError(
            f"Cannot create runtime directory {namespace}: {error}"
        ) from error
    return namespace / SOCKET_NAME


def find_socket(runtime_dir: Optional[PathLike] = None) -> Optional[Path]:
    """Locate an existing endpoint for a client, or `None` if absent."""
    try:
        namespace = resolve_runtime_dir(runtime_dir) / SOCKET_DIR
    except RuntimeDirectoryError:
        return None
    if not namespace.is_dir():
        return None

    for entry in sorted(namespace.iterdir()):
        if entry.name == SOCKET_NAME:
            return entry
    return None
