"""Error handling pipeline for mockingbird requests.

Maps HTTPError exceptions and unexpected failures (a handler raising,
for instance) to status definitions, so a fault never escapes the
request that caused it.
"""

import html
import logging
import traceback
from collections.abc import Callable

from mockingbird.errors import HTTPError
from mockingbird.http.request import Request
from mockingbird.routing.definition import ResponseDefinition

logger = logging.getLogger("mockingbird.server")

StatusLookup = Callable[[int], ResponseDefinition]


def _debug_body(base: ResponseDefinition, text: str) -> ResponseDefinition:
    """Append *text* (escaped) to an HTML status body."""
    content = base.content
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    return base.with_content(f"{content}<pre>{html.escape(text)}</pre>")


def handle_http_error(
    exc: HTTPError,
    request: Request,
    status_response: StatusLookup,
    debug: bool,
) -> ResponseDefinition:
    """Map an HTTPError to the status definition for its code."""
    logger.error("%d %s %s: %s", exc.status, request.method, request.url, exc.detail)

    definition = status_response(exc.status)
    if exc.headers:
        definition = ResponseDefinition(
            status=definition.status,
            content_type=definition.content_type,
            headers=(*definition.headers, *exc.headers),
            directive=definition.directive,
        )
    if debug and exc.detail:
        definition = _debug_body(definition, str(exc))
    return definition


def handle_internal_error(
    exc: Exception,
    request: Request,
    status_response: StatusLookup,
    debug: bool,
) -> ResponseDefinition:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.url)

    definition = status_response(500)
    if debug:
        formatted = "".join(traceback.format_exception(exc))
        definition = _debug_body(definition, formatted)
    return definition
