"""Controller base class.

A controller is instantiated once per dispatch with the app config and
the dispatcher. Actions take the request and return a ``Response``, a
``Redirect``, or ``None`` for "not handled". Actions may be ``def`` or
``async def``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from getmail.http.request import Request
from getmail.http.response import Response

if TYPE_CHECKING:
    from getmail.config import AppConfig
    from getmail.routing.dispatcher import Dispatcher


class Controller:
    """Base for all controllers.

    ``handle`` is the default action of a route. ``error_action`` is the
    fallback action, invoked when the controller's route matched but
    none of its children did, or when nothing matched at all and this is
    the table-level fallback controller.
    """

    def __init__(self, config: AppConfig, dispatcher: Dispatcher) -> None:
        self.config = config
        self.dispatcher = dispatcher

    def handle(self, request: Request) -> Response | None:
        return None

    def error_action(self, request: Request) -> Response | None:
        return Response.plain("Not Found", status=404)

    def service(self, annotation: type) -> Any:
        """Return the service the app provides for *annotation*."""
        return self.dispatcher.provide(annotation)
