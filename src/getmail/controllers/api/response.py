"""JSON envelope shared by every API response.

::

    {
        "data": {...} | null,
        "error": {"message": "..."} | null,
        "meta": {"request_id": "...", "status": 200, "version": "..."}
    }

``data`` is null for error statuses (400 and up) and ``error`` is null
otherwise.
"""

from collections.abc import Mapping
from typing import Any

from getmail.config import AppConfig
from getmail.http.request import Request
from getmail.http.response import Response


def api_response(
    config: AppConfig,
    request: Request,
    status: int = 200,
    error_message: str = "",
    data: Mapping[str, Any] | None = None,
    *,
    headers: tuple[tuple[str, str], ...] = (),
) -> Response:
    is_error = status >= 400
    payload = {
        "data": None if is_error else dict(data or {}),
        "error": {"message": error_message} if is_error else None,
        "meta": {
            "request_id": request.request_id,
            "status": status,
            "version": config.version,
        },
    }
    return Response.from_json(payload, status=status).with_headers(headers)
