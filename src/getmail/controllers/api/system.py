"""System endpoints."""

from getmail.controllers.api.response import api_response
from getmail.controllers.base import Controller
from getmail.http.request import Request
from getmail.http.response import Response


class SystemController(Controller):
    def healthcheck(self, request: Request) -> Response:
        """Liveness probe. Touches nothing but the process itself."""
        return api_response(self.config, request, data={"message": "OK"})

    def error_action(self, request: Request) -> Response:
        return api_response(self.config, request, 404, "Endpoint not found.")
