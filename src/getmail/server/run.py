"""Serve the app with pounce.

Pounce's ``run()`` takes an import string, but getmail hands over a
live ``App`` object, so ``pounce.Server`` is used directly.
"""

import logging

from pounce.config import ServerConfig
from pounce.server import Server

logger = logging.getLogger("getmail.server")


def run_server(app: object, host: str, port: int, *, reload: bool = False) -> None:
    """Start a single-worker pounce server for *app*.

    ``reload`` watches the working directory and restarts on changes,
    for development only.
    """
    config = ServerConfig(host=host, port=port, workers=1, reload=reload)
    logger.info("Serving on http://%s:%d", host, port)
    Server(config, app).run()
