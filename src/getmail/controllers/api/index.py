"""API root: greeting, plus the 404 for unknown endpoints under ``/api``."""

from getmail.controllers.api.response import api_response
from getmail.controllers.base import Controller
from getmail.http.request import Request
from getmail.http.response import Response


class IndexController(Controller):
    def handle(self, request: Request) -> Response:
        return api_response(self.config, request, data={"message": "Hello World!"})

    def error_action(self, request: Request) -> Response:
        return api_response(self.config, request, 404, "Endpoint not found.")
