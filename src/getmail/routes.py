"""Default router configuration.

Same shape as the ``[router]`` table of a TOML config file. Routes are
tried in declared order, so the catch-all ``root`` route comes last.
Children without ``controller``/``action`` inherit them from the parent.
"""

from typing import Any

DEFAULT_ROUTER: dict[str, Any] = {
    # Used when no route matches at all
    "error_controller": "app.index",
    # Action invoked on a parent route when none of its children match
    "error_action": "error_action",
    "routes": {
        "api": {
            "type": "literal",
            "route": "/api",
            "controller": "api.index",
            "action": "handle",
            "children": {
                "healthcheck": {
                    "route": "/healthcheck",
                    "controller": "api.system",
                    "action": "healthcheck",
                },
                "mail": {
                    "route": "/mail",
                    "controller": "api.mail",
                },
            },
        },
        "web": {
            "type": "literal",
            "route": "/web",
            "controller": "web.index",
            "action": "handle",
            "children": {
                "mail": {
                    "route": "/mail",
                    "controller": "web.mail",
                },
            },
        },
        "doc": {
            "type": "regex",
            "route": r"/doc/([a-z0-9\-]+\.[a-z]+)",
            "controller": "doc.index",
            "action": "handle",
        },
        "root": {
            "type": "literal",
            "route": "/",
            "controller": "app.index",
            "action": "handle",
        },
    },
}
