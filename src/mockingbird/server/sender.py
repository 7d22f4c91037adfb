"""ASGI response sending: encodes a Response and emits its messages.

Encoding is split from sending so the dispatcher can turn an
unencodable response into a 500 before anything reaches the wire.
"""

from dataclasses import dataclass

from mockingbird._internal.asgi import Send
from mockingbird.http.response import Response


@dataclass(frozen=True, slots=True)
class EncodedResponse:
    """Status, raw header pairs and body bytes for one ASGI response."""

    status: int
    headers: tuple[tuple[bytes, bytes], ...]
    body: bytes


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def encode_response(response: Response) -> EncodedResponse:
    """Encode header values as latin-1 and the body as UTF-8.

    Raises:
        UnicodeEncodeError: A header name or value is not latin-1, or a
            ``str`` body holds a lone surrogate.
    """
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    for name, value in response.headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    body = response.body_bytes if _body_allowed(response.status) else b""
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))
    return EncodedResponse(response.status, tuple(raw_headers), body)


async def send_response(encoded: EncodedResponse, send: Send) -> None:
    """Emit exactly one start and one body message."""
    await send(
        {
            "type": "http.response.start",
            "status": encoded.status,
            "headers": list(encoded.headers),
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": encoded.body,
        }
    )
