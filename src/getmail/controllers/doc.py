"""Static documents under ``/doc/<name>``.

Served from the configured assets directory, or from the assets shipped
with the package. The requested name comes from the route's regex
capture; ``..`` is stripped and the resolved path must stay inside the
assets directory.
"""

import mimetypes
from pathlib import Path

from getmail.controllers.base import Controller
from getmail.errors import NotFound
from getmail.http.request import Request
from getmail.http.response import Response

PACKAGE_ASSETS = Path(__file__).resolve().parent.parent / "assets"


class IndexController(Controller):
    def handle(self, request: Request) -> Response:
        matches = request.matches
        name = matches[1] if len(matches) > 1 else ""
        path = self._locate(name.replace("..", ""))
        if path is None:
            raise NotFound("File not found.")
        content_type, _ = mimetypes.guess_type(path.name)
        return Response(
            body=path.read_bytes(),
            content_type=content_type or "application/octet-stream",
        )

    def error_action(self, request: Request) -> Response:
        return Response.plain("File not found.", status=404)

    def _locate(self, name: str) -> Path | None:
        if not name:
            return None
        base = Path(self.config.assets_dir) if self.config.assets_dir else PACKAGE_ASSETS
        base = base.resolve()
        path = (base / name).resolve()
        if not path.is_relative_to(base) or not path.is_file():
            return None
        return path
