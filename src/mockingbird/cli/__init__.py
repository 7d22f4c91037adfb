"""Mockingbird CLI — start a mock server from a Python mapping list.

Entry point registered as ``mockingbird`` in ``pyproject.toml``::

    [project.scripts]
    mockingbird = "mockingbird.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``mockingbird`` command."""
    parser = argparse.ArgumentParser(
        prog="mockingbird",
        description="Mockingbird — a tiny mock backend for frontend development.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- mockingbird run --------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the mock server")
    run_parser.add_argument(
        "target",
        help="Import string (e.g. mocks:mappings, mocks:app, mocks:create_mappings)",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--root",
        default=None,
        help="Serving root for file lookups (default: current directory)",
    )
    run_parser.add_argument(
        "--max-redirects",
        type=int,
        default=None,
        help="Maximum redirect_to hops per request",
    )
    run_parser.add_argument(
        "--debug",
        action="store_true",
        help="Include tracebacks in 500 responses",
    )
    run_parser.add_argument(
        "--log-level",
        default=None,
        choices=["critical", "error", "warning", "info", "debug"],
        help="Logging level for mockingbird and uvicorn",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from mockingbird.cli._run import run_server

        run_server(args)
