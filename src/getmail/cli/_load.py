"""Shared app construction for CLI commands."""

import argparse
import sys

from getmail.app import App, create_app
from getmail.errors import ConfigurationError


def load_app(args: argparse.Namespace) -> App:
    """Build and freeze the app, exiting with status 1 on bad configuration."""
    try:
        app = create_app(args.config)
        app.dispatcher  # noqa: B018 -- freezes and validates the route table
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    return app
