import contextlib
import gc
import socket
import tempfile
import time
import unittest
from pathlib import Path
from typing import Callable, Optional

from control import (
    AlreadyRunningError,
    Command,
    CommandChannel,
    ControlListener,
    EndpointNotFoundError,
    get_socket_path,
    send_command,
)
from control.listener import MAX_PAYLOAD_BYTES, READ_TIMEOUT_SECONDS


def _wait_for(predicate: Callable[[], bool], timeout: float = 3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def _receive(channel: CommandChannel, timeout: float = 3.0) -> Optional[Command]:
    received: list[Command] = []

    def poll() -> bool:
        command = channel.try_receive()
        if command is not None:
            received.append(command)
        return bool(received)

    _wait_for(poll, timeout)
    return received[0] if received else None


class ControlListenerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        self.runtime_dir = self._temp_dir.name
        self.addCleanup(self._temp_dir.cleanup)

    def _start(self, channel: Optional[CommandChannel] = None) -> ControlListener:
        listener = ControlListener(channel or CommandChannel(), runtime_dir=self.runtime_dir)
        self.addCleanup(listener.shutdown)
        return listener

    def test_start_binds_endpoint(self) -> None:
        listener = self._start()

        self.assertTrue(listener.is_running)
        self.assertEqual(get_socket_path(self.runtime_dir), listener.socket_path)
        self.assertTrue(listener.socket_path.exists())

    def test_commands_reach_channel(self) -> None:
        channel = CommandChannel()
        self._start(channel)

        send_command("toggle", runtime_dir=self.runtime_dir)
        self.assertIs(Command.TOGGLE, _receive(channel))

        send_command(Command.SKIP, runtime_dir=self.runtime_dir)
        self.assertIs(Command.SKIP, _receive(channel))

    def test_payload_is_case_and_whitespace_insensitive(self) -> None:
        channel = CommandChannel()
        listener = self._start(channel)

        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as client:
            client.connect(str(listener.socket_path))
            client.sendall(b"  ReSeT \n")

        self.assertIs(Command.RESET, _receive(channel))

    def test_unknown_payload_is_discarded(self) -> None:
        channel = CommandChannel()
        self._start(channel)

        send_command("explode", runtime_dir=self.runtime_dir)
        send_command("start", runtime_dir=self.runtime_dir)

        self.assertIs(Command.START, _receive(channel))
        time.sleep(0.1)
        self.assertIsNone(channel.try_receive())

    def test_bad_payloads_are_logged_and_skipped(self) -> None:
        channel = CommandChannel()
        listener = self._start(channel)

        with self.assertLogs("control", level="WARNING") as logs:
            with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as client:
                client.connect(str(listener.socket_path))
                client.sendall(b"\xff\xfe")

            silent = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            self.addCleanup(silent.close)
            silent.connect(str(listener.socket_path))

            send_command("start", runtime_dir=self.runtime_dir)
            received = _receive(channel, timeout=READ_TIMEOUT_SECONDS + 3.0)

        self.assertIs(Command.START, received)
        self.assertTrue(listener.is_running)
        output = "\n".join(logs.output)
        self.assertIn("not valid UTF-8", output)
        self.assertIn("Failed to read from control socket", output)

    def test_oversized_payload_is_truncated(self) -> None:
        channel = CommandChannel()
        listener = self._start(channel)
        payload = b"stop" + b" " * (MAX_PAYLOAD_BYTES - 4) + b"trailing garbage"

        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as client:
            client.connect(str(listener.socket_path))
            with contextlib.suppress(BrokenPipeError, ConnectionResetError):
                client.sendall(payload)

        self.assertIs(Command.STOP, _receive(channel))

    def test_second_instance_is_rejected_until_first_shuts_down(self) -> None:
        first = self._start()

        with self.assertRaises(AlreadyRunningError):
            ControlListener(CommandChannel(), runtime_dir=self.runtime_dir)
        self.assertTrue(first.socket_path.exists())

        first.shutdown()
        self.assertFalse(first.socket_path.exists())

        third = self._start()
        self.assertTrue(third.is_running)
        self.assertTrue(third.socket_path.exists())

    def test_stale_endpoint_is_replaced(self) -> None:
        path = get_socket_path(self.runtime_dir)
        stale = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        stale.bind(str(path))
        stale.close()
        self.assertTrue(path.exists())

        channel = CommandChannel()
        self._start(channel)

        send_command("start", runtime_dir=self.runtime_dir)
        self.assertIs(Command.START, _receive(channel))

    def test_stale_regular_file_is_replaced(self) -> None:
        path = get_socket_path(self.runtime_dir)
        path.write_text("left over", encoding="utf-8")

        listener = self._start()
        self.assertTrue(listener.is_running)

    def test_shutdown_is_idempotent(self) -> None:
        listener = self._start()
        listener.shutdown()
        listener.shutdown()

        self.assertFalse(listener.is_running)
        self.assertFalse(listener.socket_path.exists())

    def test_context_manager_shuts_down(self) -> None:
        with ControlListener(CommandChannel(), runtime_dir=self.runtime_dir) as listener:
            path = listener.socket_path
            self.assertTrue(path.exists())
        self.assertFalse(path.exists())

    def test_dropping_listener_triggers_shutdown(self) -> None:
        listener = ControlListener(CommandChannel(), runtime_dir=self.runtime_dir)
        path = listener.socket_path
        self.assertTrue(path.exists())

        del listener
        gc.collect()

        self.assertTrue(_wait_for(lambda: not path.exists()))

    def test_closed_channel_stops_worker(self) -> None:
        channel = CommandChannel()
        listener = self._start(channel)
        channel.close()

        send_command("toggle", runtime_dir=self.runtime_dir)

        self.assertTrue(_wait_for(lambda: not listener.is_running))
        self.assertFalse(listener.socket_path.exists())

    def test_send_without_instance_fails(self) -> None:
        with self.assertRaises(EndpointNotFoundError):
            send_command("toggle", runtime_dir=self.runtime_dir)

    def test_send_to_other_runtime_dir_fails(self) -> None:
        self._start()
        with tempfile.TemporaryDirectory() as other:
            with self.assertRaises(EndpointNotFoundError):
                send_command("toggle", runtime_dir=Path(other))


if __name__ == "__main__":
    unittest.main()
