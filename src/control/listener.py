"""Background Unix socket listener that feeds decoded commands to a channel."""

from __future__ import annotations

import contextlib
import logging
import socket
import threading
import time
from pathlib import Path
from typing import Optional

from .channel import CommandChannel
from .commands import parse_command
from .endpoint import PathLike, get_socket_path
from .errors import AlreadyRunningError, ListenerBindError

ACCEPT_POLL_INTERVAL_SECONDS = 0.05
READ_TIMEOUT_SECONDS = 1.0
MAX_PAYLOAD_BYTES = 1024
_PROBE_TIMEOUT_SECONDS = 0.5


class ControlListener:
    """Owns the control endpoint and the worker thread accepting on it.

    Each connection carries exactly one command and receives no reply.
    Connections are read one at a time on the worker thread, so a client
    that connects and stays silent delays later commands and `shutdown()`
    by up to `READ_TIMEOUT_SECONDS`. Only local processes can reach the
    endpoint.
    """

    def __init__(
        self,
        channel: CommandChannel,
        *,
        runtime_dir: Optional[PathLike] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._channel = channel
        self._logger = logger or logging.getLogger("control")
        self._socket_path = get_socket_path(runtime_dir)
        self._stop_event = threading.Event()

        _claim_endpoint(self._socket_path, self._logger)
        server = _bind(self._socket_path)

        # The worker gets only what it needs so that dropping the listener
        # object still triggers shutdown via __del__.
        self._thread: Optional[threading.Thread] = threading.Thread(
            target=_listen_loop,
            args=(server, channel, self._stop_event, self._socket_path, self._logger),
            daemon=True,
            name="control-listener",
        )
        self._thread.start()
        self._logger.info("Control listener started: %s", self._socket_path)

    @property
    def socket_path(self) -> Path:
        return self._socket_path

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def shutdown(self, timeout_seconds: Optional[float] = None) -> None:
        """Stop the worker, wait for it, and remove the endpoint. Idempotent."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None:
            thread.join(timeout=timeout_seconds)
            if thread.is_alive():
                self._logger.error("Control listener thread did not stop in time")
            else:
                self._thread = None
        with contextlib.suppress(FileNotFoundError):
            self._socket_path.unlink()

    def __enter__(self) -> "ControlListener":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def __del__(self) -> None:
        # Partially constructed instances have no thread attribute.
        if getattr(self, "_thread", None) is not None:
            self.shutdown()


def _claim_endpoint(socket_path: Path, logger: logging.Logger) -> None:
    if not socket_path.exists():
        return

    probe = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    probe.settimeout(_PROBE_TIMEOUT_SECONDS)
    try:
        probe.connect(str(socket_path))
    except OSError:
        logger.info("Removing stale control endpoint: %s", socket_path)
        with contextlib.suppress(FileNotFoundError):
            socket_path.unlink()
        return
    finally:
        probe.close()

    raise AlreadyRunningError("Another pomodoro instance is already running")


def _bind(socket_path: Path) -> socket.socket:
    server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        server.bind(str(socket_path))
        server.listen()
        server.setblocking(False)
    except OSError as error:
        server.close()
        raise ListenerBindError(
            f"Cannot bind control endpoint {socket_path}: {error}"
        ) from error
    return server


def _listen_loop(
    server: socket.socket,
    channel: CommandChannel,
    stop_event: threading.Event,
    socket_path: Path,
    logger: logging.Logger,
) -> None:
    try:
        while not stop_event.is_set():
            try:
                connection, _ = server.accept()
            except BlockingIOError:
                time.sleep(ACCEPT_POLL_INTERVAL_SECONDS)
                continue
            except OSError as error:
                logger.warning("Control socket accept error: %s", error)
                time.sleep(ACCEPT_POLL_INTERVAL_SECONDS)
                continue

            with connection:
                message = _read_message(connection, logger)
            if message is None:
                continue

            logger.debug("Received control message: %r", message.strip())
            command = parse_command(message)
            if command is None:
                logger.warning("Unknown control command: %r", message.strip())
                continue

            if not channel.send(command):
                logger.warning("Command channel closed, stopping listener")
                break
    finally:
        server.close()
        with contextlib.suppress(FileNotFoundError):
            socket_path.unlink()
        logger.info("Control listener stopped")


def _read_message(
    connection: socket.socket,
    logger: logging.Logger,
) -> Optional[str]:
    connection.settimeout(READ_TIMEOUT_SECONDS)
    chunks: list[bytes] = []
    received = 0
    try:
        while received < MAX_PAYLOAD_BYTES:
            chunk = connection.recv(MAX_PAYLOAD_BYTES - received)
            if not chunk:
                break
            chunks.append(chunk)
            received += len(chunk)
    except OSError as error:
        logger.warning("Failed to read from control socket: %s", error)
        return None

    try:
        return b"".join(chunks).decode("utf-8")
    except UnicodeDecodeError as error:
        logger.warning("Control message is not valid UTF-8: %s", error)
        return None
