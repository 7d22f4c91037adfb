"""Route resolution.

Turns a request URL plus an ordered mapping list into a fully resolved
``ResponseDefinition``.

Lookup order (first match wins at every step):

1. Exact pass: a pattern equal to the raw URL, query and fragment
   included.
2. Normalized pass: string patterns against the URL path, regex
   patterns against the raw URL.
3. Filesystem: the URL path joined to the serving root.
4. The 404 status definition.

The winning definition's directive is then expanded. ``Redirect`` swaps
the working URL and starts over at step 1 against the same mappings,
bounded by ``max_redirects`` hops.
"""

import logging
import mimetypes
from collections.abc import Iterable, Mapping
from pathlib import Path
from urllib.parse import unquote

import anyio

from mockingbird._internal.invoke import invoke
from mockingbird.errors import FileDirectiveError, HandlerError, RedirectLoopError
from mockingbird.http.request import Request, split_url
from mockingbird.routing.definition import (
    STATUS_RESPONSES,
    File,
    Handler,
    Literal,
    Redirect,
    ResponseDefinition,
    UrlMapping,
)

logger = logging.getLogger("mockingbird.routing")

_FALLBACK_CONTENT_TYPE = "application/octet-stream"


def guess_content_type(path: str | Path) -> str:
    """MIME type for *path* based on its extension."""
    content_type, _ = mimetypes.guess_type(str(path))
    return content_type or _FALLBACK_CONTENT_TYPE


class Resolver:
    """Resolves request URLs against an immutable mapping list.

    Holds no per-request state; one instance is shared by every request.

    Usage::

        resolver = Resolver([UrlMapping("/hi", {"content": "hi there"})])
        definition = await resolver.resolve(request)
    """

    __slots__ = ("_index", "_mappings", "_max_redirects", "_root", "_status_responses")

    def __init__(
        self,
        mappings: Iterable[UrlMapping],
        *,
        root: str | Path = ".",
        status_responses: Mapping[int, ResponseDefinition] = STATUS_RESPONSES,
        max_redirects: int = 10,
        index: str = "index.html",
    ) -> None:
        self._mappings: tuple[UrlMapping, ...] = tuple(mappings)
        self._root = Path(root).resolve()
        self._status_responses = status_responses
        self._max_redirects = max_redirects
        self._index = index

    @property
    def mappings(self) -> tuple[UrlMapping, ...]:
        return self._mappings

    @property
    def root(self) -> Path:
        return self._root

    @property
    def status_responses(self) -> Mapping[int, ResponseDefinition]:
        return self._status_responses

    def status_response(self, status: int) -> ResponseDefinition:
        """The status table entry for *status*, or a bare empty definition."""
        definition = self._status_responses.get(status)
        if definition is None:
            return ResponseDefinition(status=status, content_type="text/html")
        return definition

    # -- Lookup --

    def match(self, url: str) -> UrlMapping | None:
        """Find the mapping for *url* using the exact and normalized passes."""
        for mapping in self._mappings:
            if mapping.pattern.matches_raw(url):
                return mapping
        for mapping in self._mappings:
            if mapping.pattern.matches_normalized(url):
                return mapping
        return None

    async def lookup(self, url: str) -> ResponseDefinition:
        """Find the definition for *url*, falling back to the filesystem.

        Never raises for an unmatched URL; returns the 403 definition for
        paths escaping the serving root and the 404 definition otherwise.
        Filesystem checks run in worker threads.
        """
        mapping = self.match(url)
        if mapping is not None:
            logger.info("matched %s", mapping.pattern)
            return mapping.response

        relative = unquote(split_url(url)).lstrip("/")
        try:
            file_path = await anyio.Path(self._root / relative).resolve()
        except (OSError, ValueError):
            logger.warning("Path not found: %s", url)
            return self.status_response(404)
        if not Path(file_path).is_relative_to(self._root):
            logger.warning("Refusing path outside serving root: %s", url)
            return self.status_response(403)

        if await file_path.is_dir():
            file_path = file_path / self._index
        if await file_path.is_file():
            logger.info("returning file %s", file_path)
            return ResponseDefinition(directive=File(Path(file_path)))

        logger.warning("Path not found: %s", url)
        return self.status_response(404)

    # -- Resolution --

    async def resolve(self, request: Request) -> ResponseDefinition:
        """Resolve *request* into a definition with a ``Literal`` directive.

        Raises:
            RedirectLoopError: More than ``max_redirects`` redirect hops.
            FileDirectiveError: A ``file`` directive names an unreadable file.
            HandlerError: A handler returned something other than str/bytes.
        """
        hops = 0
        logger.debug("url: %s", request.url)
        definition = await self.lookup(request.url)

        while isinstance(definition.directive, Redirect):
            if hops >= self._max_redirects:
                raise RedirectLoopError(request.url, self._max_redirects)
            hops += 1
            target = definition.directive.to
            logger.info("redirect %s -> %s", request.url, target)
            request = request.with_url(target)
            definition = await self.lookup(target)

        directive = definition.directive
        if isinstance(directive, File):
            return await self._expand_file(definition, directive)
        if isinstance(directive, Handler):
            return await self._expand_handler(definition, directive, request)
        if isinstance(directive, Literal):
            return definition
        msg = f"Unknown directive {directive!r}"
        raise TypeError(msg)

    async def _expand_file(self, definition: ResponseDefinition, directive: File) -> ResponseDefinition:
        path = self._root / directive.path
        try:
            content = await anyio.Path(path).read_bytes()
        except OSError as exc:
            logger.error("Cannot read file %s: %s", path, exc)
            raise FileDirectiveError(str(directive.path), exc.strerror or type(exc).__name__) from exc
        return definition.with_content(content, guess_content_type(path))

    async def _expand_handler(
        self,
        definition: ResponseDefinition,
        directive: Handler,
        request: Request,
    ) -> ResponseDefinition:
        result = await invoke(directive.func, request)
        if result is None:
            result = ""
        if not isinstance(result, str | bytes):
            raise HandlerError(directive.name, type(result).__name__)
        return definition.with_content(result)
