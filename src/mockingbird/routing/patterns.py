"""URL patterns.

A pattern answers two questions, one per resolution pass:

- ``matches_raw(url)`` — does the raw request URL (query string and
  fragment included) match exactly?  Used by the first pass.
- ``matches_normalized(url)`` — used by the second pass.  Exact-string
  patterns compare against the URL with ``?query`` and ``#fragment``
  stripped; regular-expression patterns are tested against the raw URL.

Regex patterns therefore see the query string in both passes.
"""

import re
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from mockingbird.errors import ConfigurationError
from mockingbird.http.request import split_url


@runtime_checkable
class Pattern(Protocol):
    """Anything the resolver can match a URL against."""

    def matches_raw(self, url: str) -> bool: ...
    def matches_normalized(self, url: str) -> bool: ...


@dataclass(frozen=True, slots=True)
class ExactPattern:
    """Exact string match on the raw URL, then on its path component."""

    text: str

    def matches_raw(self, url: str) -> bool:
        return url == self.text

    def matches_normalized(self, url: str) -> bool:
        return split_url(url) == self.text

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class RegexPattern:
    """Regular expression searched anywhere in the raw URL."""

    regex: re.Pattern[str]

    def matches_raw(self, url: str) -> bool:  # noqa: ARG002
        # The first pass is an exact-string pass; regexes never take part.
        return False

    def matches_normalized(self, url: str) -> bool:
        return self.regex.search(url) is not None

    def __str__(self) -> str:
        return f"/{self.regex.pattern}/"


def as_pattern(value: object) -> Pattern:
    """Coerce a mapping's ``pattern`` value into a ``Pattern``.

    Accepts a ``str`` (exact match), a compiled ``re.Pattern``, or any
    object already providing ``matches_raw``/``matches_normalized``.

    Raises:
        ConfigurationError: For anything else, including ``bytes``
            regexes, which can never match a decoded URL.
    """
    if isinstance(value, str):
        return ExactPattern(value)
    if isinstance(value, re.Pattern):
        if not isinstance(value.pattern, str):
            msg = f"Pattern {value.pattern!r} must be a str regex, not bytes"
            raise ConfigurationError(msg)
        return RegexPattern(value)
    if isinstance(value, Pattern):
        return value
    msg = (
        f"Unsupported URL pattern {value!r} ({type(value).__name__}). "
        "Use a str for exact matches or re.compile(...) for expressions."
    )
    raise ConfigurationError(msg)
