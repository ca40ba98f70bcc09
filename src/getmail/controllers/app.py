"""Site root controller. Also the table-level fallback controller."""

from getmail.controllers.base import Controller
from getmail.controllers.web.views import render_view
from getmail.http.request import Request
from getmail.http.response import Redirect, Response


class IndexController(Controller):
    def handle(self, request: Request) -> Redirect:
        """Send visitors to the web UI, keeping the query string."""
        target = "/web"
        if request.query_string:
            target = f"{target}?{request.query_string}"
        return Redirect(target)

    def error_action(self, request: Request) -> Response:
        return render_view(
            self.config, request, "error.html", {"message": "Page not found."}, status=404
        )
