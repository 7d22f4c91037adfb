"""Target import resolution — resolves ``"module:attribute"`` strings.

The attribute may be a ``MockServer``, a sequence of URL mappings, or a
zero-argument factory returning either.
"""

import importlib
from collections.abc import Mapping
from typing import Any

from mockingbird.app import MockServer
from mockingbird.config import ServerConfig

DEFAULT_ATTRIBUTE = "mappings"


def resolve_target(import_string: str) -> MockServer | list[Any]:
    """Resolve an import string to a MockServer or a list of mappings.

    Accepts ``"module:attribute"`` format.  When the attribute portion
    is omitted, defaults to ``"mappings"``.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is neither a MockServer nor a
            sequence of mappings, or a factory raised.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = DEFAULT_ATTRIBUTE

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, MockServer):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if isinstance(obj, MockServer):
        return obj
    if isinstance(obj, list | tuple) and not isinstance(obj, Mapping):
        return list(obj)

    msg = f"{import_string!r} resolved to {type(obj).__name__}, not a MockServer or a list of mappings"
    raise TypeError(msg)


def build_app(import_string: str, config: ServerConfig) -> MockServer:
    """Resolve *import_string* and wrap bare mappings in a ``MockServer``."""
    target = resolve_target(import_string)
    if isinstance(target, MockServer):
        return target
    return MockServer(target, config)
