"""Mockingbird exception hierarchy.

Shared across the resolver, the request handler and the CLI so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class MockingbirdError(Exception):
    """Base for all mockingbird-specific errors."""


class ConfigurationError(MockingbirdError):
    """Raised when mappings or server configuration are invalid.

    Typically raised while building a ``MockServer``, before any request
    is served.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(MockingbirdError):
    """An error that maps directly to an HTTP status code.

    Raised by the resolver. The request handler catches these and answers
    with the status definition registered for ``status``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class RedirectLoopError(HTTPError):
    """500 — a ``redirect_to`` chain exceeded the configured hop limit."""

    def __init__(self, url: str, limit: int) -> None:
        super().__init__(
            status=500,
            detail=f"Redirect limit of {limit} exceeded while resolving {url!r}",
        )


class FileDirectiveError(HTTPError):
    """500 — a file named by a ``file`` directive could not be read."""

    def __init__(self, path: str, reason: str = "") -> None:
        detail = f"Could not read {path!r}"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(status=500, detail=detail)


class HandlerError(HTTPError):
    """500 — a handler returned something other than str or bytes."""

    def __init__(self, handler_name: str, result_type: str) -> None:
        super().__init__(
            status=500,
            detail=f"Handler {handler_name!r} returned {result_type}, expected str or bytes",
        )
