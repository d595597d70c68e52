"""sncustomws CLI: serve an app or inspect its resolved routes.

Entry point registered as ``sncustomws`` in ``pyproject.toml``::

    [project.scripts]
    sncustomws = "sncustomws.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``sncustomws`` command."""
    parser = argparse.ArgumentParser(
        prog="sncustomws",
        description="Storefront web services with priority-based route overrides.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- sncustomws run ---------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the server")
    run_parser.add_argument("app", help="Import string (e.g. myws:app)")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--properties",
        action="append",
        default=[],
        metavar="FILE",
        help="Properties file applied on top of the app's properties (repeatable)",
    )

    # -- sncustomws routes ------------------------------------------------
    routes_parser = subparsers.add_parser(
        "routes", help="List active routes and their override priorities"
    )
    routes_parser.add_argument("app", help="Import string (e.g. myws:app)")
    routes_parser.add_argument(
        "--properties",
        action="append",
        default=[],
        metavar="FILE",
        help="Properties file applied on top of the app's properties (repeatable)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from sncustomws.cli._run import run_server

        run_server(args)
    elif args.command == "routes":
        from sncustomws.cli._routes import run_routes

        run_routes(args)
