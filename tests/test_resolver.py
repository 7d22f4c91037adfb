"""Tests for mockingbird.routing.resolver — two-pass matching and directives."""

import re
from pathlib import Path

import pytest

from mockingbird.errors import FileDirectiveError, HandlerError, RedirectLoopError
from mockingbird.http.headers import Headers
from mockingbird.http.request import Request
from mockingbird.routing.definition import (
    STATUS_RESPONSES,
    File,
    Literal,
    ResponseDefinition,
    UrlMapping,
)
from mockingbird.routing.resolver import Resolver, guess_content_type


def _request(url: str, method: str = "GET") -> Request:
    return Request(method=method, url=url, headers=Headers())


def _resolver(*mappings: tuple, root: Path | str = ".", **kwargs) -> Resolver:
    return Resolver([UrlMapping(p, r) for p, r in mappings], root=root, **kwargs)


class TestMatch:
    async def test_exact_raw_first_in_list_wins(self) -> None:
        resolver = _resolver(
            ("/page", {"content": "first"}),
            ("/page", {"content": "second"}),
        )
        assert (await resolver.lookup("/page")).content == "first"

    async def test_raw_pass_beats_earlier_normalized_match(self) -> None:
        resolver = _resolver(
            ("/page", {"content": "path only"}),
            ("/page?x=1", {"content": "with query"}),
        )
        assert (await resolver.lookup("/page?x=1")).content == "with query"

    async def test_raw_pass_beats_earlier_regex(self) -> None:
        resolver = _resolver(
            (re.compile(r"^/page"), {"content": "regex"}),
            ("/page", {"content": "exact"}),
        )
        assert (await resolver.lookup("/page")).content == "exact"

    async def test_normalized_pass_strips_query_and_fragment(self) -> None:
        resolver = _resolver(("/page", {"content": "page"}))
        assert (await resolver.lookup("/page?x=1#y")).content == "page"

    async def test_regex_tested_against_raw_url(self) -> None:
        resolver = _resolver(
            (re.compile(r"\?page=2$"), {"content": "second page"}),
            ("/items", {"content": "items"}),
        )
        assert (await resolver.lookup("/items?page=2")).content == "second page"
        assert (await resolver.lookup("/items?page=3")).content == "items"

    async def test_normalized_pass_respects_list_order_across_kinds(self) -> None:
        resolver = _resolver(
            (re.compile(r"^/api/"), {"content": "regex"}),
            ("/api/users", {"content": "string"}),
        )
        assert (await resolver.lookup("/api/users?limit=1")).content == "regex"

    def test_no_match_returns_none(self) -> None:
        resolver = _resolver(("/a", {}))
        assert resolver.match("/b") is None

    def test_mappings_are_frozen(self) -> None:
        resolver = _resolver(("/a", {}))
        assert isinstance(resolver.mappings, tuple)


class TestFilesystemFallback:
    async def test_existing_file(self, site_root: Path) -> None:
        resolver = _resolver(root=site_root)
        definition = await resolver.lookup("/hello.txt?cache=1")
        assert definition.directive == File(site_root / "hello.txt")

    async def test_directory_serves_index(self, site_root: Path) -> None:
        resolver = _resolver(root=site_root)
        assert (await resolver.lookup("/docs/")).directive == File(site_root / "docs" / "index.html")
        assert (await resolver.lookup("/")).directive == File(site_root / "index.html")

    async def test_directory_without_index_is_not_found(self, site_root: Path) -> None:
        resolver = _resolver(root=site_root)
        assert await resolver.lookup("/empty") is STATUS_RESPONSES[404]

    async def test_missing_file_is_not_found(self, site_root: Path) -> None:
        resolver = _resolver(root=site_root)
        assert await resolver.lookup("/missing") is STATUS_RESPONSES[404]

    async def test_percent_encoded_path(self, site_root: Path) -> None:
        (site_root / "with space.txt").write_text("spaced")
        resolver = _resolver(root=site_root)
        assert (await resolver.lookup("/with%20space.txt")).directive == File(site_root / "with space.txt")

    async def test_traversal_is_forbidden(self, site_root: Path) -> None:
        resolver = _resolver(root=site_root / "docs")
        assert await resolver.lookup("/../hello.txt") is STATUS_RESPONSES[403]
        assert await resolver.lookup("/%2e%2e/hello.txt") is STATUS_RESPONSES[403]

    async def test_mapping_wins_over_file(self, site_root: Path) -> None:
        resolver = _resolver(("/hello.txt", {"content": "mapped"}), root=site_root)
        assert (await resolver.lookup("/hello.txt")).content == "mapped"

    async def test_custom_status_table(self, site_root: Path) -> None:
        custom = {404: ResponseDefinition(404, "text/plain", directive=Literal("gone"))}
        resolver = _resolver(root=site_root, status_responses=custom)
        assert (await resolver.lookup("/missing")).content == "gone"

    def test_status_without_table_entry(self) -> None:
        resolver = _resolver(status_responses={})
        definition = resolver.status_response(404)
        assert definition.status == 404
        assert definition.content == ""


class TestResolve:
    async def test_literal_content(self) -> None:
        resolver = _resolver(("/hi", {"content": "hi there"}))
        definition = await resolver.resolve(_request("/hi"))
        assert definition.status == 200
        assert definition.content == "hi there"
        assert definition.content_type is None

    async def test_not_found(self, site_root: Path) -> None:
        resolver = _resolver(root=site_root)
        definition = await resolver.resolve(_request("/missing"))
        assert definition.status == 404
        assert definition.content_type == "text/html"
        assert "Not found" in definition.content

    async def test_redirect_returns_target_response(self) -> None:
        resolver = _resolver(
            ("/old", {"redirect_to": "/other", "content": "ignored", "status": 301}),
            ("/other", {"content": "other content", "status": 202}),
        )
        definition = await resolver.resolve(_request("/old"))
        assert definition.content == "other content"
        assert definition.status == 202

    async def test_redirect_chain(self) -> None:
        resolver = _resolver(
            ("/a", {"redirect_to": "/b"}),
            ("/b", {"redirect_to": "/c"}),
            ("/c", {"content": "c"}),
        )
        assert (await resolver.resolve(_request("/a"))).content == "c"

    async def test_redirect_to_file(self, site_root: Path) -> None:
        resolver = _resolver(("/home", {"redirect_to": "/hello.txt"}), root=site_root)
        definition = await resolver.resolve(_request("/home"))
        assert definition.content == b"hello from disk"
        assert definition.content_type == "text/plain"

    async def test_redirect_to_nowhere_is_not_found(self, site_root: Path) -> None:
        resolver = _resolver(("/home", {"redirect_to": "/nowhere"}), root=site_root)
        definition = await resolver.resolve(_request("/home"))
        assert definition.status == 404

    async def test_handler_sees_redirected_url(self) -> None:
        resolver = _resolver(
            ("/a", {"redirect_to": "/b?from=a"}),
            ("/b", {"handler": lambda req: req.url}),
        )
        assert (await resolver.resolve(_request("/a"))).content == "/b?from=a"

    async def test_redirect_cycle_raises(self) -> None:
        resolver = _resolver(
            ("/a", {"redirect_to": "/b"}),
            ("/b", {"redirect_to": "/a"}),
            max_redirects=5,
        )
        with pytest.raises(RedirectLoopError) as exc_info:
            await resolver.resolve(_request("/a"))
        assert exc_info.value.status == 500
        assert "5" in exc_info.value.detail

    async def test_redirect_limit_is_inclusive(self) -> None:
        resolver = _resolver(
            ("/a", {"redirect_to": "/b"}),
            ("/b", {"redirect_to": "/c"}),
            ("/c", {"content": "c"}),
            max_redirects=2,
        )
        assert (await resolver.resolve(_request("/a"))).content == "c"

    async def test_zero_redirect_limit(self) -> None:
        resolver = _resolver(
            ("/a", {"redirect_to": "/b"}),
            ("/b", {"content": "b"}),
            max_redirects=0,
        )
        with pytest.raises(RedirectLoopError):
            await resolver.resolve(_request("/a"))

    async def test_file_directive(self, site_root: Path) -> None:
        resolver = _resolver(("/style", {"file": "./fixtures/test.css"}), root=site_root)
        definition = await resolver.resolve(_request("/style"))
        assert definition.content_type == "text/css"
        assert definition.content == (site_root / "fixtures" / "test.css").read_bytes()

    async def test_file_directive_explicit_content_type(self, site_root: Path) -> None:
        resolver = _resolver(
            ("/style", {"file": "fixtures/test.css", "content_type": "text/plain"}),
            root=site_root,
        )
        definition = await resolver.resolve(_request("/style"))
        assert definition.content_type == "text/plain"

    async def test_file_directive_keeps_status_and_headers(self, site_root: Path) -> None:
        resolver = _resolver(
            ("/users", {"file": "fixtures/users.json", "status": 201, "headers": {"X-Mock": "yes"}}),
            root=site_root,
        )
        definition = await resolver.resolve(_request("/users"))
        assert definition.status == 201
        assert definition.headers == (("X-Mock", "yes"),)
        assert definition.content_type == "application/json"

    async def test_file_directive_absolute_path(self, site_root: Path) -> None:
        absolute = site_root / "hello.txt"
        resolver = _resolver(("/abs", {"file": str(absolute)}))
        assert (await resolver.resolve(_request("/abs"))).content == b"hello from disk"

    async def test_file_directive_unknown_extension(self, site_root: Path) -> None:
        resolver = _resolver(("/blob", {"file": "fixtures/blob.unknownext"}), root=site_root)
        definition = await resolver.resolve(_request("/blob"))
        assert definition.content_type == "application/octet-stream"

    async def test_missing_file_directive_raises(self, site_root: Path) -> None:
        resolver = _resolver(("/gone", {"file": "fixtures/gone.css"}), root=site_root)
        with pytest.raises(FileDirectiveError) as exc_info:
            await resolver.resolve(_request("/gone"))
        assert exc_info.value.status == 500
        assert "fixtures/gone.css" in exc_info.value.detail

    async def test_handler(self) -> None:
        resolver = _resolver(("/echo", {"handler": lambda req: "hello-" + req.url}))
        definition = await resolver.resolve(_request("/echo?x=1"))
        assert definition.content == "hello-/echo?x=1"

    async def test_async_handler(self) -> None:
        async def handler(request: Request) -> bytes:
            return request.method.encode()

        resolver = _resolver(("/method", {"handler": handler}))
        definition = await resolver.resolve(_request("/method", method="POST"))
        assert definition.content == b"POST"

    async def test_handler_invoked_each_time(self) -> None:
        calls: list[str] = []

        def handler(request: Request) -> str:
            calls.append(request.url)
            return str(len(calls))

        resolver = _resolver(("/count", {"handler": handler}))
        assert (await resolver.resolve(_request("/count"))).content == "1"
        assert (await resolver.resolve(_request("/count"))).content == "2"
        assert calls == ["/count", "/count"]

    async def test_handler_returning_none_is_empty(self) -> None:
        resolver = _resolver(("/none", {"handler": lambda req: None}))
        assert (await resolver.resolve(_request("/none"))).content == ""

    async def test_handler_bad_return_type(self) -> None:
        resolver = _resolver(("/dict", {"handler": lambda req: {"a": 1}}))
        with pytest.raises(HandlerError, match="dict"):
            await resolver.resolve(_request("/dict"))

    async def test_handler_exception_propagates(self) -> None:
        def boom(request: Request) -> str:
            raise RuntimeError("boom")

        resolver = _resolver(("/boom", {"handler": boom}))
        with pytest.raises(RuntimeError, match="boom"):
            await resolver.resolve(_request("/boom"))

    async def test_resolution_does_not_mutate_mappings(self, site_root: Path) -> None:
        resolver = _resolver(("/style", {"file": "fixtures/test.css"}), root=site_root)
        before = resolver.mappings[0].response
        await resolver.resolve(_request("/style"))
        assert resolver.mappings[0].response is before
        assert isinstance(before.directive, File)


class TestGuessContentType:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("a.css", "text/css"),
            ("a.html", "text/html"),
            ("a.json", "application/json"),
            ("a.txt", "text/plain"),
            ("a", "application/octet-stream"),
        ],
    )
    def test_known_types(self, name: str, expected: str) -> None:
        assert guess_content_type(name) == expected
