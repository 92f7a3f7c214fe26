from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Callable, Coroutine, Optional
from urllib.parse import urlsplit

import websockets
from websockets.asyncio.server import ServerConnection
from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from contracts.ui_protocol import EVENT_HELLO, EVENT_POMODORO

from .config import HEALTHZ_PATH, STATE_PATH, StateServerConfig
from .events import StickyEventStore, make_event

_TEXT = "text/plain; charset=utf-8"
_JSON = "application/json; charset=utf-8"


def _http_response(status: int, reason: str, body: bytes, content_type: str) -> Response:
    headers = Headers()
    headers["Content-Type"] = content_type
    headers["Content-Length"] = str(len(body))
    headers["Cache-Control"] = "no-store"
    return Response(status, reason, headers, body)


class StateServer:
    """Broadcasts timer events to renderers from a background asyncio loop.

    Every published event is serialized once. Sticky ones (state, last
    transition, control status) are kept and replayed to clients that connect
    later, and the latest state is also served as plain JSON on `/state`.
    """

    def __init__(
        self,
        config: StateServerConfig,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("state_server")
        self._sticky = StickyEventStore()
        self._clients: set[ServerConnection] = set()
        self._routes: dict[str, Callable[[], Response]] = {
            STATE_PATH: self._state_response,
            HEALTHZ_PATH: lambda: _http_response(200, "OK", b"ok\n", _TEXT),
        }

        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._shutdown: Optional[asyncio.Event] = None
        self._ready = threading.Event()
        self._failure: Optional[Exception] = None

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def client_count(self) -> int:
        return len(self._clients)

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and self._failure is None

    def start(self, timeout_seconds: float = 5.0) -> None:
        if self.is_running:
            self._logger.warning("State server is already running")
            return

        self._failure = None
        self._ready.clear()
        self._thread = threading.Thread(
            target=self._thread_main,
            name="state-server",
            daemon=True,
        )
        self._thread.start()

        if not self._ready.wait(timeout_seconds):
            raise RuntimeError(f"State server did not start within {timeout_seconds:.1f}s")
        if self._failure is not None:
            raise RuntimeError(f"State server startup failed: {self._failure}")

    def stop(self, timeout_seconds: float = 5.0) -> None:
        thread = self._thread
        if thread is None:
            return

        loop, shutdown = self._loop, self._shutdown
        if loop is not None and shutdown is not None and not loop.is_closed():
            loop.call_soon_threadsafe(shutdown.set)

        thread.join(timeout=timeout_seconds)
        if thread.is_alive():
            self._logger.error("State server thread did not stop within %.1fs", timeout_seconds)

        self._thread = None
        self._loop = None
        self._shutdown = None

    def publish(self, event_type: str, **payload) -> None:
        """Record and broadcast one event. Safe to call from any thread."""
        message = make_event(event_type, **payload)
        self._sticky.remember(event_type, message)

        loop = self._loop
        if loop is None or not self.is_running:
            return
        self._submit(self._broadcast(message), loop)

    def _submit(self, coroutine: Coroutine[Any, Any, None], loop: asyncio.AbstractEventLoop) -> None:
        try:
            future = asyncio.run_coroutine_threadsafe(coroutine, loop)
        except RuntimeError:
            # Loop closed between the check and the submit.
            coroutine.close()
            return
        future.add_done_callback(self._log_broadcast_failure)

    def _log_broadcast_failure(self, future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self._logger.debug("Broadcast failed: %s", error)

    def _thread_main(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._shutdown = asyncio.Event()
        try:
            loop.run_until_complete(self._serve())
        except Exception as error:
            self._failure = error
            self._logger.error("State server failed: %s", error, exc_info=True)
            self._ready.set()
        finally:
            leftovers = asyncio.all_tasks(loop)
            for task in leftovers:
                task.cancel()
            loop.run_until_complete(asyncio.gather(*leftovers, return_exceptions=True))
            loop.close()

    async def _serve(self) -> None:
        async with websockets.serve(
            self._handle_client,
            host=self._config.host,
            port=self._config.port,
            process_request=self._route_http,
            logger=self._logger,
        ):
            self._logger.info(
                "State server listening on %s:%d (websocket: %s)",
                self._config.host,
                self._config.port,
                self._config.websocket_path,
            )
            self._ready.set()
            await self._shutdown.wait()
            await self._disconnect_all()

    async def _handle_client(self, websocket: ServerConnection) -> None:
        request = websocket.request
        if request is None or urlsplit(request.path).path != self._config.websocket_path:
            await websocket.close(code=1008, reason="Invalid websocket path")
            return

        self._clients.add(websocket)
        self._logger.info("Renderer connected: %s", websocket.remote_address)
        try:
            await websocket.send(make_event(EVENT_HELLO, message="State stream connected"))
            for message in self._sticky.snapshot():
                await websocket.send(message)
            # Renderers are read-only; drain until they hang up.
            async for _ in websocket:
                pass
        except websockets.exceptions.ConnectionClosed:
            pass
        finally:
            self._clients.discard(websocket)
            self._logger.info("Renderer disconnected: %s", websocket.remote_address)

    async def _route_http(
        self,
        connection: ServerConnection,
        request: Request,
    ) -> Response | None:
        del connection
        path = urlsplit(request.path).path
        if path == self._config.websocket_path:
            return None
        route = self._routes.get(path)
        if route is None:
            return _http_response(404, "Not Found", b"not found\n", _TEXT)
        return route()

    def _state_response(self) -> Response:
        state = self._sticky.latest(EVENT_POMODORO)
        if state is None:
            return _http_response(503, "Service Unavailable", b"no state yet\n", _TEXT)
        return _http_response(200, "OK", state.encode("utf-8"), _JSON)

    async def _disconnect_all(self) -> None:
        clients = tuple(self._clients)
        self._clients.clear()
        await asyncio.gather(
            *(client.close(code=1001, reason="Server shutting down") for client in clients),
            return_exceptions=True,
        )

    async def _broadcast(self, message: str) -> None:
        clients = tuple(self._clients)
        if not clients:
            return
        results = await asyncio.gather(
            *(client.send(message) for client in clients),
            return_exceptions=True,
        )
        for client, result in zip(clients, results):
            if isinstance(result, Exception):
                self._clients.discard(client)
                self._logger.warning("Dropping renderer after failed send: %s", result)
