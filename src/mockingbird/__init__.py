"""Mockingbird — a tiny mock backend for frontend development.

Matches request URLs against an ordered list of patterns and answers
with canned content, a local file, a callback's output, or whatever
another URL resolves to.

Basic usage::

    import re
    from mockingbird import serve

    handle = serve([
        ("/hi", {"content": "hi there"}),
        ("/styles.css", {"file": "fixtures/test.css"}),
        (re.compile(r"^/api/echo"), {"handler": lambda req: f"hello-{req.url}"}),
        ("/home", {"redirect_to": "/index.html"}),
    ], port=3000)
    handle.wait()
"""

__version__ = "0.1.0"
__all__ = [
    "STATUS_RESPONSES",
    "ConfigurationError",
    "ExactPattern",
    "File",
    "Handler",
    "HTTPError",
    "Literal",
    "MockServer",
    "MockingbirdError",
    "Redirect",
    "RegexPattern",
    "Request",
    "Resolver",
    "Response",
    "ResponseDefinition",
    "ServerConfig",
    "ServerHandle",
    "UrlMapping",
    "serve",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import mockingbird`` fast while providing a clean top-level API.
    """
    if name in ("MockServer", "serve"):
        from mockingbird import app as _app

        return getattr(_app, name)

    if name == "ServerHandle":
        from mockingbird.server.dev import ServerHandle

        return ServerHandle

    if name == "ServerConfig":
        from mockingbird.config import ServerConfig

        return ServerConfig

    if name == "Request":
        from mockingbird.http.request import Request

        return Request

    if name == "Response":
        from mockingbird.http.response import Response

        return Response

    if name in (
        "STATUS_RESPONSES",
        "ExactPattern",
        "File",
        "Handler",
        "Literal",
        "Redirect",
        "RegexPattern",
        "Resolver",
        "ResponseDefinition",
        "UrlMapping",
    ):
        from mockingbird import routing as _routing

        return getattr(_routing, name)

    if name in ("ConfigurationError", "HTTPError", "MockingbirdError"):
        from mockingbird import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
