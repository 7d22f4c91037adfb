"""``mockingbird run`` — start a mock server from an import string."""

import argparse
import logging
import sys
from dataclasses import replace

from mockingbird.app import MockServer
from mockingbird.cli._resolve import build_app
from mockingbird.config import ServerConfig
from mockingbird.errors import ConfigurationError


def _config_from_args(args: argparse.Namespace, base: ServerConfig) -> ServerConfig:
    """Apply CLI flags on top of *base*; flags left unset keep base values."""
    overrides: dict[str, object] = {}
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.root is not None:
        overrides["root"] = args.root
    if args.max_redirects is not None:
        overrides["max_redirects"] = args.max_redirects
    if args.debug:
        overrides["debug"] = True
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    return replace(base, **overrides) if overrides else base


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.target`` and serve it until interrupted.

    When the target is a ready-made ``MockServer`` its own config is the
    base; CLI flags override it.
    """
    try:
        app = build_app(args.target, _config_from_args(args, ServerConfig()))
        config = _config_from_args(args, app.config)
        if config != app.config:
            app = MockServer(app.mappings, config, status_responses=app.resolver.status_responses)
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    logging.basicConfig(
        level=app.config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run()
