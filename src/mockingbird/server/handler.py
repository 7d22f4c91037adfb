"""ASGI handler — translates ASGI scope/messages to mockingbird types.

The only component that touches raw ASGI directly. Converts the scope
to a typed Request, runs it through the resolver, and sends the
resulting Response back through ASGI send().
"""

import logging

from mockingbird._internal.asgi import Receive, Scope, Send
from mockingbird.errors import HTTPError
from mockingbird.http.request import Request
from mockingbird.http.response import Response
from mockingbird.routing.definition import ResponseDefinition
from mockingbird.routing.resolver import Resolver
from mockingbird.server.errors import handle_http_error, handle_internal_error
from mockingbird.server.sender import EncodedResponse, encode_response, send_response

logger = logging.getLogger("mockingbird.server")


def definition_to_response(
    definition: ResponseDefinition,
    default_content_type: str = "text/plain",
) -> Response:
    """Build the outgoing Response for a resolved definition.

    ``Content-Type`` falls back to *default_content_type*; a
    ``Content-Type`` entry in the definition's own headers overrides both.
    """
    content_type = definition.content_type or default_content_type
    extra: list[tuple[str, str]] = []
    for name, value in definition.headers:
        if name.lower() == "content-type":
            content_type = value
        else:
            extra.append((name, value))
    return Response(
        body=definition.content,
        status=definition.status,
        content_type=content_type,
        headers=tuple(extra),
    )


async def handle_request(
    scope: Scope,
    receive: Receive,  # noqa: ARG001
    send: Send,
    *,
    resolver: Resolver,
    default_content_type: str = "text/plain",
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)
    logger.debug("received request for %s %s", request.method, request.url)

    def encode(definition: ResponseDefinition) -> EncodedResponse:
        return encode_response(definition_to_response(definition, default_content_type))

    # An unencodable header or body is a fault of this request too.
    try:
        encoded = encode(await resolver.resolve(request))
    except HTTPError as exc:
        encoded = encode(handle_http_error(exc, request, resolver.status_response, debug))
    except Exception as exc:
        encoded = encode(handle_internal_error(exc, request, resolver.status_response, debug))

    await send_response(encoded, send)
