"""Logging setup.

One line per record on stdout::

    [2024-05-01T10:00:00.123456+00:00] [INFO] [GETMAIL production] message [REQUEST <id> GET /api/mail]

The ``REQUEST`` block is present only while a request is being served.
Newlines and tabs are flattened so every record stays on one line.
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from getmail.context import current_request_or_none

if TYPE_CHECKING:
    from getmail.config import AppConfig

_HANDLER_NAME = "getmail"


def _flatten(text: str) -> str:
    return text.replace("\r", " ").replace("\n", " ").replace("\t", " ")


class RequestFormatter(logging.Formatter):
    """Text formatter that appends the current request's correlation id."""

    def __init__(self, tag: str, environment: str) -> None:
        super().__init__()
        self.tag = tag
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, UTC).isoformat()
        message = record.getMessage()
        if record.exc_info:
            message = f"{message} {self.formatException(record.exc_info)}"
        parts = [
            f"[{stamp}]",
            f"[{record.levelname}]",
            f"[{self.tag} {self.environment}]",
            _flatten(message),
        ]
        request = current_request_or_none()
        if request is not None:
            parts.append(f"[REQUEST {request.request_id} {request.method} {request.path}]")
        return " ".join(parts)


def configure_logging(config: AppConfig, *, stream=None) -> logging.Handler:
    """Install the getmail handler on the ``getmail`` logger.

    Replaces a handler installed by an earlier call, so reconfiguring
    (tests, reloads) never duplicates output.
    """
    logger = logging.getLogger("getmail")
    for existing in list(logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(RequestFormatter(config.log_tag, config.deployment_environment))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    return handler
