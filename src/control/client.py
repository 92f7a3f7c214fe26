"""Client side of the control channel used by external controllers."""

from __future__ import annotations

import socket
from typing import Optional, Union

from .commands import Command
from .endpoint import PathLike, find_socket
from .errors import EndpointNotFoundError

CONNECT_TIMEOUT_SECONDS = 2.0


def send_command(
    command: Union[Command, str],
    *,
    runtime_dir: Optional[PathLike] = None,
) -> None:
    """Write one command to the running instance. Fire and forget."""
    socket_path = find_socket(runtime_dir)
    if socket_path is None:
        raise EndpointNotFoundError("No running pomodoro instance found")

    payload = command.value if isinstance(command, Command) else str(command)
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as client:
        client.settimeout(CONNECT_TIMEOUT_SECONDS)
        client.connect(str(socket_path))
        client.sendall(payload.encode("utf-8"))
