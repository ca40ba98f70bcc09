"""``getmail run``: serve the app with pounce."""

import argparse

from getmail.cli._load import load_app


def run_server(args: argparse.Namespace) -> None:
    """Load config, freeze the app, and serve. CLI flags override config."""
    app = load_app(args)
    app.run(host=args.host, port=args.port)
