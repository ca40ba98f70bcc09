"""Render kida templates for the web UI.

Views render into ``layout.html`` unless the request carries the
``layout`` attribute set to false, which lets a page fetch a bare
fragment of another view. Every view and the layout receive the shared
values ``render_id``, ``request_id`` and ``version``.
"""

import time
import uuid
from functools import cache
from typing import Any

from kida import Environment, PackageLoader
from kida.template import Markup

from getmail.config import AppConfig
from getmail.http.request import ATTR_LAYOUT, Request
from getmail.http.response import Response

LAYOUT = "layout.html"


@cache
def environment() -> Environment:
    """The template environment. Built on first use, then shared."""
    return Environment(
        loader=PackageLoader("getmail.controllers.web", "templates"),
        autoescape=True,
    )


def make_render_id() -> str:
    """Unique enough to tag the elements of one rendering in client scripts."""
    return f"{time.time():.6f}-{uuid.uuid4().hex}"


def render_view(
    config: AppConfig,
    request: Request,
    template: str,
    context: dict[str, Any] | None = None,
    *,
    status: int = 200,
) -> Response:
    """Render *template* (wrapped in the layout) to an HTML Response."""
    env = environment()
    shared = {
        "render_id": make_render_id(),
        "request_id": request.request_id,
        "version": config.version,
        "app_name": config.app_name,
    }
    html = env.get_template(template).render({**(context or {}), **shared})
    if request.attribute(ATTR_LAYOUT, True) not in (False, 0, "0"):
        html = env.get_template(LAYOUT).render({"body": Markup(html), **shared})
    return Response(body=html, status=status)
