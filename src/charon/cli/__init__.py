"""Charon CLI — route listing and server startup.

Entry point registered as ``charon`` in ``pyproject.toml``::

    [project.scripts]
    charon = "charon.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``charon`` command."""
    parser = argparse.ArgumentParser(
        prog="charon",
        description="Charon — exact-match HTTP request dispatch.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- charon run -------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the server")
    run_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:dispatcher)",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument("--workers", type=int, default=None, help="Worker count")

    # -- charon routes ----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:dispatcher)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from charon.cli._run import run_server

        run_server(args)
    elif args.command == "routes":
        from charon.cli._routes import run_routes

        run_routes(args)
