"""Request-scoped context via ContextVar.

``request_var`` holds the inbound ``Request`` for the current task. It is
set by the ASGI handler before the middleware chain runs and reset once
the response is sent. Internally forwarded requests do not replace it.
"""

from contextvars import ContextVar

from getmail.http.request import Request

request_var: ContextVar[Request] = ContextVar("getmail_request")
"""The current inbound request. Set by the ASGI handler before dispatch."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()


def current_request_or_none() -> Request | None:
    return request_var.get(None)
