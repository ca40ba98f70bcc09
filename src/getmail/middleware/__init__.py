"""Middleware: protocol-based, no inheritance required.

A middleware is any callable matching::

    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    SessionMiddleware -- Signed cookie sessions (itsdangerous)
"""

from getmail.middleware.protocol import Middleware, Next
from getmail.middleware.sessions import (
    SessionConfig,
    SessionMiddleware,
    current_session,
    get_session,
)

__all__ = [
    "Middleware",
    "Next",
    "SessionConfig",
    "SessionMiddleware",
    "current_session",
    "get_session",
]
