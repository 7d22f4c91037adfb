"""Mockingbird application class.

A ``MockServer`` is built once from an ordered mapping list and never
changes afterwards; every request reads the same frozen state.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from mockingbird._internal.asgi import Receive, Scope, Send
from mockingbird.config import ServerConfig
from mockingbird.errors import ConfigurationError
from mockingbird.routing.definition import ResponseDefinition, UrlMapping, merge_status_responses
from mockingbird.routing.resolver import Resolver
from mockingbird.server.dev import ServerHandle, run_server, start_server
from mockingbird.server.handler import handle_request

logger = logging.getLogger("mockingbird.server")


class MockServer:
    """An ASGI application that answers requests from a mapping list.

    Mappings may be ``UrlMapping`` instances, ``(pattern, response)``
    pairs, or ``{"pattern": ..., "response": ...}`` dicts::

        app = MockServer([
            ("/hi", {"content": "hi there"}),
            (re.compile(r"^/api/users/\\d+$"), {"file": "fixtures/user.json"}),
            ("/me", {"redirect_to": "/api/users/1"}),
        ])
        app.run(port=3000)
    """

    __slots__ = ("_resolver", "config")

    def __init__(
        self,
        mappings: Iterable[UrlMapping | tuple[Any, Any] | Mapping[str, Any]] = (),
        config: ServerConfig | None = None,
        *,
        status_responses: Mapping[int, ResponseDefinition | Mapping[str, Any]] | None = None,
    ) -> None:
        if isinstance(mappings, str | bytes | Mapping):
            msg = f"mappings must be a sequence of URL mappings, got {type(mappings).__name__}"
            raise ConfigurationError(msg)
        self.config: ServerConfig = config or ServerConfig()
        self._resolver = Resolver(
            (UrlMapping.coerce(m) for m in mappings),
            root=self.config.root,
            status_responses=merge_status_responses(status_responses),
            max_redirects=self.config.max_redirects,
            index=self.config.index,
        )

    @property
    def resolver(self) -> Resolver:
        return self._resolver

    @property
    def mappings(self) -> tuple[UrlMapping, ...]:
        return self._resolver.mappings

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve until the process is interrupted."""
        port = self._port(port)
        logger.info("Listening on port %d", port)
        run_server(self, host or self.config.host, port)

    def start(self, host: str | None = None, port: int | None = None) -> ServerHandle:
        """Serve from a background thread and return a handle to it."""
        return start_server(self, host or self.config.host, self._port(port))

    def _port(self, port: int | None) -> int:
        return self.config.port if port is None else port

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            resolver=self._resolver,
            default_content_type=self.config.default_content_type,
            debug=self.config.debug,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                logger.info(
                    "Serving %d mapping(s) from %s",
                    len(self._resolver.mappings),
                    self._resolver.root,
                )
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return


def serve(
    mappings: Iterable[UrlMapping | tuple[Any, Any] | Mapping[str, Any]],
    port: int | None = None,
    *,
    host: str | None = None,
    config: ServerConfig | None = None,
    status_responses: Mapping[int, ResponseDefinition | Mapping[str, Any]] | None = None,
) -> ServerHandle:
    """Start a mock server for *mappings* and return its running handle.

    Listens on *port* from a background thread. *port* defaults to
    ``config.port`` (3000); ``0`` picks a free port. Call ``handle.wait()``
    to block, or use the handle as a context manager to stop it on exit.
    """
    app = MockServer(mappings, config, status_responses=status_responses)
    handle = app.start(host, port)
    logger.info("Listening on port %d", handle.port)
    return handle
