"""Outgoing HTTP response."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Response:
    """A fully resolved response, ready to be encoded for the wire.

    ``headers`` holds extra headers only; ``Content-Type`` lives in
    ``content_type`` and ``Content-Length`` is computed when sending.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/plain"
    headers: tuple[tuple[str, str], ...] = ()

    @property
    def body_bytes(self) -> bytes:
        """Body as UTF-8 bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body
