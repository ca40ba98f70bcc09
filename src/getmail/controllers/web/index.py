"""Landing page of the web UI."""

from getmail.controllers.base import Controller
from getmail.controllers.web.views import render_view
from getmail.http.request import Request
from getmail.http.response import Response


class IndexController(Controller):
    def handle(self, request: Request) -> Response:
        return render_view(self.config, request, "index.html")

    def error_action(self, request: Request) -> Response:
        return render_view(
            self.config, request, "error.html", {"message": "Page not found."}, status=404
        )
