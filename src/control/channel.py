"""Hand-off queue between the listener thread and the poll loop."""

from __future__ import annotations

import threading
from queue import Empty, Queue
from typing import Iterator, Optional

from .commands import Command


class CommandChannel:
    """Unbounded command queue whose consumer can hang up.

    `send` reports whether the command was queued so the producer can stop
    once the consumer side is closed.
    """

    def __init__(self):
        self._queue: Queue[Command] = Queue()
        self._closed = threading.Event()

    @property
    def is_closed(self) -> bool:
        return self._closed.is_set()

    def send(self, command: Command) -> bool:
        if self._closed.is_set():
            return False
        self._queue.put(command)
        return True

    def try_receive(self) -> Optional[Command]:
        try:
            return self._queue.get_nowait()
        except Empty:
            return None

    def drain(self) -> Iterator[Command]:
        """Yield queued commands in arrival order without blocking."""
        while True:
            command = self.try_receive()
            if command is None:
                return
            yield command

    def close(self) -> None:
        self._closed.set()
