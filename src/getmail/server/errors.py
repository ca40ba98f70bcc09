"""Error responses for failures that escape the controllers.

Requests under ``/api`` get the JSON envelope the API controllers use;
everything else gets plain text. Internal errors never expose their
message or traceback to the client, only to the log.
"""

import logging
from http import HTTPStatus

from getmail.config import AppConfig
from getmail.controllers.api.response import api_response
from getmail.errors import HTTPError
from getmail.http.request import Request
from getmail.http.response import Response

logger = logging.getLogger("getmail.server")


def is_api_path(path: str) -> bool:
    return path == "/api" or path.startswith("/api/")


def _phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Error"


def handle_http_error(exc: HTTPError, request: Request, config: AppConfig) -> Response:
    """Map an HTTPError raised during dispatch to a Response."""
    logger.info("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    message = exc.detail or _phrase(exc.status)
    if is_api_path(request.path):
        response = api_response(config, request, exc.status, error_message=message)
    else:
        response = Response.plain(message, status=exc.status)
    return response.with_headers(exc.headers)


def handle_internal_error(exc: Exception, request: Request, config: AppConfig) -> Response:
    """Log an unexpected exception and return a generic 500."""
    logger.error(
        "Unhandled %s in %s %s",
        type(exc).__name__,
        request.method,
        request.path,
        exc_info=exc,
    )
    message = _phrase(500)
    if is_api_path(request.path):
        return api_response(config, request, 500, error_message=message)
    return Response.plain(message, status=500)
