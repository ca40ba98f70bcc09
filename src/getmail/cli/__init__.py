"""getmail CLI: serve the app or inspect its route table.

Entry point registered as ``getmail`` in ``pyproject.toml``::

    [project.scripts]
    getmail = "getmail.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``getmail`` command."""
    parser = argparse.ArgumentParser(
        prog="getmail",
        description="getmail: fetch the latest email matching a subject, over HTTP.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- getmail run ------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the server")
    run_parser.add_argument("--config", default=None, help="Directory of *.toml config files")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")

    # -- getmail routes ---------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List the route table")
    routes_parser.add_argument("--config", default=None, help="Directory of *.toml config files")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from getmail.cli._run import run_server

        run_server(args)
    elif args.command == "routes":
        from getmail.cli._routes import run_routes

        run_routes(args)
