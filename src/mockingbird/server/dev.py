"""Development server.

Starts a uvicorn ASGI server with the live MockServer object, either
blocking the calling thread (``run_server``) or in a background thread
that hands back a ``ServerHandle`` (``start_server``).
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

import uvicorn

from mockingbird.errors import MockingbirdError

if TYPE_CHECKING:
    from mockingbird.app import MockServer

logger = logging.getLogger("mockingbird.server")


def _uvicorn_config(app: MockServer, host: str, port: int) -> uvicorn.Config:
    return uvicorn.Config(
        app,
        host=host,
        port=port,
        lifespan="on",
        log_level=app.config.log_level,
        access_log=app.config.access_log,
    )


def run_server(app: MockServer, host: str, port: int) -> None:
    """Serve *app* on *host*:*port* until the process is interrupted.

    uvicorn's ``run()`` accepts an import string, but we have a live
    ``MockServer`` instance, so ``uvicorn.Server`` is driven directly.
    """
    server = uvicorn.Server(_uvicorn_config(app, host, port))
    server.run()


class ServerHandle:
    """A uvicorn server running in a background thread.

    Usage::

        with serve(mappings, port=0) as handle:
            urllib.request.urlopen(f"{handle.url}/hi")
    """

    __slots__ = ("_server", "_thread", "host", "port")

    def __init__(self, server: uvicorn.Server, thread: threading.Thread, host: str, port: int) -> None:
        self._server = server
        self._thread = thread
        self.host = host
        self.port = port

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Ask the server to exit and wait for its thread to finish."""
        self._server.should_exit = True
        self._thread.join(timeout)

    def wait(self) -> None:
        """Block until the server thread exits (Ctrl-C stops it)."""
        try:
            while self._thread.is_alive():
                self._thread.join(0.5)
        except KeyboardInterrupt:
            self.stop()

    def __enter__(self) -> ServerHandle:
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()

    def __repr__(self) -> str:
        return f"ServerHandle({self.url!r}, running={self.running})"


def start_server(app: MockServer, host: str, port: int, *, startup_timeout: float = 10.0) -> ServerHandle:
    """Start *app* in a daemon thread and wait until its socket is bound.

    ``port=0`` binds an ephemeral port; the handle reports the real one.

    Raises:
        MockingbirdError: If the server fails to start (port in use, for
            instance) or does not come up within *startup_timeout* seconds.
    """
    server = uvicorn.Server(_uvicorn_config(app, host, port))
    thread = threading.Thread(target=server.run, name=f"mockingbird-{port}", daemon=True)
    thread.start()

    deadline = time.monotonic() + startup_timeout
    while not server.started:
        if not thread.is_alive():
            msg = f"Server failed to start on {host}:{port}"
            raise MockingbirdError(msg)
        if time.monotonic() > deadline:
            server.should_exit = True
            msg = f"Server did not start on {host}:{port} within {startup_timeout}s"
            raise MockingbirdError(msg)
        time.sleep(0.01)

    bound_port = port
    if server.servers and server.servers[0].sockets:
        bound_port = server.servers[0].sockets[0].getsockname()[1]
    return ServerHandle(server, thread, host, bound_port)
