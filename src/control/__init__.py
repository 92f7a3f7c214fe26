"""Local control channel: command protocol, listener, and client."""

from .channel import CommandChannel
from .client import send_command
from .commands import COMMAND_NAMES, Command, apply_command, parse_command
from .endpoint import (
    SOCKET_DIR,
    SOCKET_NAME,
    find_socket,
    get_socket_path,
    resolve_runtime_dir,
)
from .errors import (
    AlreadyRunningError,
    ControlError,
    EndpointNotFoundError,
    ListenerBindError,
    RuntimeDirectoryError,
)
from .listener import ControlListener

__all__ = [
    "AlreadyRunningError",
    "COMMAND_NAMES",
    "Command",
    "CommandChannel",
    "ControlError",
    "ControlListener",
    "EndpointNotFoundError",
    "ListenerBindError",
    "RuntimeDirectoryError",
    "SOCKET_DIR",
    "SOCKET_NAME",
    "apply_command",
    "find_socket",
    "get_socket_path",
    "parse_command",
    "resolve_runtime_dir",
    "send_command",
]
