"""Immutable HTTP request.

Frozen metadata handed to response handlers. The resolver only ever
inspects ``url``; method and headers are carried for handlers that want
them.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any
from urllib.parse import parse_qs

from mockingbird.http.headers import Headers


def split_url(url: str) -> str:
    """Return the path component of *url* (anything before ``?`` or ``#``)."""
    for index, char in enumerate(url):
        if char in "?#":
            return url[:index]
    return url


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``url`` is the raw request target exactly as the resolver sees it,
    query string included. After an internal ``redirect_to`` hop the
    handler receives a copy whose ``url`` is the redirect target.
    """

    method: str
    url: str
    headers: Headers
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    # -- Computed properties --

    @property
    def path(self) -> str:
        """The URL with query string and fragment removed."""
        return split_url(self.url)

    @property
    def query_string(self) -> str:
        """Raw query string (without the leading ``?``), fragment removed."""
        _, sep, rest = self.url.partition("?")
        if not sep:
            return ""
        return rest.partition("#")[0]

    @property
    def query(self) -> dict[str, list[str]]:
        """Parsed query string as field name -> list of values."""
        return parse_qs(self.query_string, keep_blank_values=True)

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    def with_url(self, url: str) -> Request:
        """Return a copy of this request pointing at *url*."""
        return replace(self, url=url)

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> Request:
        """Create a Request from an ASGI scope.

        The URL is rebuilt from ``raw_path`` when the server provides it so
        percent-encoding survives untouched; otherwise from ``path``.
        """
        raw_path: bytes = scope.get("raw_path") or b""
        path = raw_path.decode("latin-1") if raw_path else scope["path"]
        query_string: bytes = scope.get("query_string", b"")
        url = f"{path}?{query_string.decode('latin-1')}" if query_string else path

        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            url=url,
            headers=Headers(tuple(scope.get("headers", ()))),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
        )
