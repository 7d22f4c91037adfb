"""Shared pytest fixtures for mockingbird tests."""

from pathlib import Path

import pytest


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """A serving root with a few fixture files."""
    fixtures = tmp_path / "fixtures"
    fixtures.mkdir()
    (fixtures / "test.css").write_text("body { color: red; }")
    (fixtures / "users.json").write_text('[{"id": 1}]')
    (fixtures / "blob.unknownext").write_bytes(b"\x00\x01\x02")

    (tmp_path / "index.html").write_text("<h1>Home</h1>")
    (tmp_path / "hello.txt").write_text("hello from disk")

    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "index.html").write_text("<h1>Docs</h1>")

    (tmp_path / "empty").mkdir()
    return tmp_path.resolve()
