"""URL mapping and route resolution.

Public API::

    from mockingbird.routing import Resolver, ResponseDefinition, UrlMapping
"""

from mockingbird.routing.definition import (
    STATUS_RESPONSES,
    Directive,
    File,
    Handler,
    Literal,
    Redirect,
    ResponseDefinition,
    UrlMapping,
)
from mockingbird.routing.patterns import ExactPattern, Pattern, RegexPattern, as_pattern
from mockingbird.routing.resolver import Resolver

__all__ = [
    "STATUS_RESPONSES",
    "Directive",
    "ExactPattern",
    "File",
    "Handler",
    "Literal",
    "Pattern",
    "Redirect",
    "RegexPattern",
    "Resolver",
    "ResponseDefinition",
    "UrlMapping",
    "as_pattern",
]
