"""Response definitions and URL mappings.

A ``ResponseDefinition`` describes how to answer a request: a status,
an optional content type, extra headers, and exactly one directive.

Directives (checked in this precedence when built from loose fields):

- ``Redirect``: restart resolution with another URL (internal re-route,
  never an HTTP 3xx).
- ``File``: serve the bytes of a local file; the content type is guessed
  from the file name unless the definition sets one.
- ``Handler``: call a function with the request; its str/bytes return
  value becomes the body.
- ``Literal``: send ``content`` as given.

Usage::

    UrlMapping("/api/users", ResponseDefinition.build(
        content='[{"id": 1}]',
        content_type="application/json",
    ))
    UrlMapping(re.compile(r"^/old/"), {"redirect_to": "/new"})
"""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, TypeAlias

from mockingbird.errors import ConfigurationError
from mockingbird.http.request import Request
from mockingbird.routing.patterns import Pattern, as_pattern

HandlerFunc: TypeAlias = Callable[[Request], str | bytes | None | Awaitable[str | bytes | None]]


@dataclass(frozen=True, slots=True)
class Literal:
    """Send ``content`` as the body."""

    content: str | bytes = ""


@dataclass(frozen=True, slots=True)
class Redirect:
    """Resolve ``to`` instead of the current URL."""

    to: str


@dataclass(frozen=True, slots=True)
class File:
    """Serve a local file, relative to the serving root unless absolute."""

    path: str | Path


@dataclass(frozen=True, slots=True)
class Handler:
    """Call ``func(request)`` once per matching request."""

    func: HandlerFunc

    @property
    def name(self) -> str:
        return getattr(self.func, "__qualname__", repr(self.func))


Directive: TypeAlias = Literal | Redirect | File | Handler

# Loose field names accepted by ``from_mapping``, including the camelCase
# spellings used by JavaScript-style route tables.
_FIELD_ALIASES = {
    "status": "status",
    "content_type": "content_type",
    "contentType": "content_type",
    "content": "content",
    "redirect_to": "redirect_to",
    "redirectTo": "redirect_to",
    "handler": "handler",
    "headers": "headers",
    "file": "file",
}


def _header_pairs(headers: Mapping[str, str] | tuple[tuple[str, str], ...] | None) -> tuple[tuple[str, str], ...]:
    if not headers:
        return ()
    items = headers.items() if isinstance(headers, Mapping) else headers
    return tuple((str(name), str(value)) for name, value in items)


@dataclass(frozen=True, slots=True)
class ResponseDefinition:
    """How to answer a matched request.

    A definition whose directive is ``Literal`` is fully resolved: it can
    be written to the wire as is.
    """

    status: int = 200
    content_type: str | None = None
    headers: tuple[tuple[str, str], ...] = ()
    directive: Directive = field(default_factory=Literal)

    @classmethod
    def build(
        cls,
        *,
        status: int = 200,
        content_type: str | None = None,
        content: str | bytes | None = None,
        redirect_to: str | None = None,
        handler: HandlerFunc | None = None,
        headers: Mapping[str, str] | tuple[tuple[str, str], ...] | None = None,
        file: str | Path | None = None,
    ) -> "ResponseDefinition":
        """Build a definition from loose fields.

        When several directives are given, precedence is
        ``redirect_to > file > handler > content``; the others are ignored.
        """
        directive: Directive
        if redirect_to is not None:
            directive = Redirect(redirect_to)
        elif file is not None:
            directive = File(file)
        elif handler is not None:
            if not callable(handler):
                msg = f"handler must be callable, got {type(handler).__name__}"
                raise ConfigurationError(msg)
            directive = Handler(handler)
        else:
            directive = Literal(content if content is not None else "")
        return cls(
            status=int(status),
            content_type=content_type,
            headers=_header_pairs(headers),
            directive=directive,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ResponseDefinition":
        """Build a definition from a dict such as ``{"contentType": ..., "file": ...}``."""
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _FIELD_ALIASES.get(key)
            if name is None:
                msg = f"Unknown response field {key!r}; expected one of {sorted(set(_FIELD_ALIASES))}"
                raise ConfigurationError(msg)
            kwargs[name] = value
        return cls.build(**kwargs)

    @classmethod
    def coerce(cls, value: "ResponseDefinition | Mapping[str, Any]") -> "ResponseDefinition":
        if isinstance(value, ResponseDefinition):
            return value
        if isinstance(value, Mapping):
            return cls.from_mapping(value)
        msg = f"Expected a ResponseDefinition or a dict, got {type(value).__name__}"
        raise ConfigurationError(msg)

    # -- Resolution helpers --

    @property
    def is_resolved(self) -> bool:
        return isinstance(self.directive, Literal)

    @property
    def content(self) -> str | bytes:
        """Body of a resolved definition (empty for unresolved ones)."""
        if isinstance(self.directive, Literal):
            return self.directive.content
        return ""

    def with_content(self, content: str | bytes, content_type: str | None = None) -> "ResponseDefinition":
        """Return a resolved copy carrying *content*.

        An explicit ``content_type`` on this definition wins over the
        *content_type* argument.
        """
        return replace(
            self,
            directive=Literal(content),
            content_type=self.content_type or content_type,
        )


@dataclass(frozen=True, slots=True, init=False)
class UrlMapping:
    """An ordered pairing of a URL pattern with a response definition."""

    pattern: Pattern
    response: ResponseDefinition

    def __init__(
        self,
        pattern: "str | Pattern | Any",
        response: ResponseDefinition | Mapping[str, Any],
    ) -> None:
        object.__setattr__(self, "pattern", as_pattern(pattern))
        object.__setattr__(self, "response", ResponseDefinition.coerce(response))

    @classmethod
    def coerce(cls, value: "UrlMapping | tuple[Any, Any] | Mapping[str, Any]") -> "UrlMapping":
        """Accept a ``UrlMapping``, a ``(pattern, response)`` pair or a dict."""
        if isinstance(value, UrlMapping):
            return value
        if isinstance(value, tuple) and len(value) == 2:
            return cls(*value)
        if isinstance(value, Mapping) and "pattern" in value and "response" in value:
            return cls(value["pattern"], value["response"])
        msg = f"Cannot build a URL mapping from {value!r}"
        raise ConfigurationError(msg)


_NOT_FOUND_BODY = "<h1>Not found</h1><p>Could not find the resource you requested.</p>"
_FORBIDDEN_BODY = "<h1>Forbidden</h1><p>You do not have permission to view this resource.</p>"
_SERVER_ERROR_BODY = "<h1>Internal server error</h1><p>The server could not build a response.</p>"

STATUS_RESPONSES: Mapping[int, ResponseDefinition] = MappingProxyType(
    {
        403: ResponseDefinition(403, "text/html", directive=Literal(_FORBIDDEN_BODY)),
        404: ResponseDefinition(404, "text/html", directive=Literal(_NOT_FOUND_BODY)),
        500: ResponseDefinition(500, "text/html", directive=Literal(_SERVER_ERROR_BODY)),
    }
)
"""Default definitions used when no mapping or file answers a request."""


def merge_status_responses(
    overrides: Mapping[int, ResponseDefinition | Mapping[str, Any]] | None,
) -> Mapping[int, ResponseDefinition]:
    """Return the default status table with *overrides* applied, read-only."""
    if not overrides:
        return STATUS_RESPONSES
    merged = dict(STATUS_RESPONSES)
    for status, definition in overrides.items():
        merged[int(status)] = ResponseDefinition.coerce(definition)
    return MappingProxyType(merged)
