"""ASGI handler: translates ASGI scope/messages to getmail types.

The only component that touches raw ASGI for HTTP. Converts the scope
to a Request, assigns the correlation id, runs the middleware chain
around the dispatcher, and sends the Response back.
"""

import logging
import time
from collections.abc import Callable, Sequence
from contextvars import Token
from typing import Any

from getmail._internal.asgi import Receive, Scope, Send
from getmail._internal.ids import make_request_id
from getmail.config import AppConfig
from getmail.context import request_var
from getmail.errors import HTTPError
from getmail.http.request import ATTR_REQUEST_ID, Request
from getmail.http.response import Response
from getmail.middleware.protocol import Next
from getmail.server.errors import handle_http_error, handle_internal_error
from getmail.server.sender import send_response

logger = logging.getLogger("getmail.server")

REQUEST_ID_HEADER = "X-Request-Id"
_MAX_REQUEST_ID_LENGTH = 200


def inbound_request_id(value: str | None) -> str:
    """Return a usable correlation id: the inbound one if sane, else a new one."""
    if value:
        value = value.strip()
        if 0 < len(value) <= _MAX_REQUEST_ID_LENGTH and value.isprintable():
            return value
    return make_request_id()


def build_chain(middleware: Sequence[Callable[..., Any]], innermost: Next) -> Next:
    """Wrap *innermost* in *middleware*, first entry outermost."""
    handler = innermost
    for mw in reversed(middleware):

        async def make_next(req: Request, _mw: Any = mw, _next: Next = handler) -> Response:
            return await _mw(req, _next)

        handler = make_next
    return handler


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    pipeline: Next,
    config: AppConfig,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    request_id = inbound_request_id(request.headers.get(REQUEST_ID_HEADER))
    request = request.with_attributes(**{ATTR_REQUEST_ID: request_id})

    token: Token[Request] = request_var.set(request)
    started = time.perf_counter()
    try:
        try:
            response = await pipeline(request)
        except HTTPError as exc:
            response = handle_http_error(exc, request, config)
        except Exception as exc:
            response = handle_internal_error(exc, request, config)
        logger.info(
            "%d %s %s (%.1f ms)",
            response.status,
            request.method,
            request.url,
            (time.perf_counter() - started) * 1000,
        )
    finally:
        request_var.reset(token)

    response = response.with_header(REQUEST_ID_HEADER, request_id)
    await send_response(response, send, head=request.method == "HEAD")
