"""Route table construction.

Turns the ``[router]`` configuration section into an immutable tree of
``RouteDefinition`` objects. All validation happens here, once, at
startup: a table that builds is a table the matcher can walk without
further checks.
"""

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from getmail.errors import ConfigurationError
from getmail.routing.route import MatchType, RouteDefinition

_CHILD_KEYS = ("children", "child_routes")


@dataclass(frozen=True, slots=True)
class RouteTable:
    """Ordered root routes plus the table-level fallback handler/action.

    Immutable and shared by every request.
    """

    routes: tuple[RouteDefinition, ...]
    fallback_handler: str
    fallback_action: str

    def walk(self) -> Iterator[tuple[int, RouteDefinition]]:
        """Depth-first ``(depth, route)`` pairs in declared order."""
        for route in self.routes:
            yield from route.walk()

    def handler_actions(self) -> set[tuple[str, str]]:
        """Every ``(handler, action)`` pair dispatch may invoke.

        Includes each parent's handler with the fallback action, and the
        table-level fallback itself.
        """
        pairs = {(self.fallback_handler, self.fallback_action)}
        for _depth, route in self.walk():
            pairs.add((route.handler, route.action))
            if route.match_type is MatchType.LITERAL:
                pairs.add((route.handler, self.fallback_action))
        return pairs


def build_route_table(options: Mapping[str, Any]) -> RouteTable:
    """Build a ``RouteTable`` from the router configuration section.

    Expected shape::

        {
            "error_controller": "app.index",
            "error_action": "error_action",
            "routes": {
                "api": {
                    "type": "literal",          # optional, default literal
                    "route": "/api",
                    "controller": "api.index",
                    "action": "handle",
                    "children": {...},          # or "child_routes"
                },
            },
        }

    Raises ``ConfigurationError`` on the first problem found.
    """
    if not isinstance(options, Mapping):
        msg = "Router configuration must be a mapping."
        raise ConfigurationError(msg)

    fallback_handler = options.get("error_controller")
    fallback_action = options.get("error_action")
    if not fallback_handler or not isinstance(fallback_handler, str):
        msg = "Router configuration is missing 'error_controller'."
        raise ConfigurationError(msg)
    if not fallback_action or not isinstance(fallback_action, str):
        msg = "Router configuration is missing 'error_action'."
        raise ConfigurationError(msg)

    routes = _build_level(options.get("routes") or {}, parent=None, trail="routes")
    return RouteTable(
        routes=routes,
        fallback_handler=fallback_handler,
        fallback_action=fallback_action,
    )


def _build_level(
    entries: Any,
    *,
    parent: RouteDefinition | None,
    trail: str,
) -> tuple[RouteDefinition, ...]:
    if not isinstance(entries, Mapping):
        msg = f"{trail}: expected a mapping of route name to options."
        raise ConfigurationError(msg)
    return tuple(
        _build_route(str(name), options, parent=parent, trail=f"{trail}.{name}")
        for name, options in entries.items()
    )


def _build_route(
    name: str,
    options: Any,
    *,
    parent: RouteDefinition | None,
    trail: str,
) -> RouteDefinition:
    if not isinstance(options, Mapping):
        msg = f"{trail}: route options must be a mapping."
        raise ConfigurationError(msg)

    raw_type = str(options.get("type", MatchType.LITERAL)).lower()
    try:
        match_type = MatchType(raw_type)
    except ValueError:
        msg = f"{trail}: unknown route type {raw_type!r} (expected 'literal' or 'regex')."
        raise ConfigurationError(msg) from None

    pattern = options.get("route")
    if not pattern or not isinstance(pattern, str):
        msg = f"{trail}: missing 'route'."
        raise ConfigurationError(msg)

    compiled = None
    if match_type is MatchType.REGEX:
        try:
            compiled = re.compile(pattern)
        except re.error as exc:
            msg = f"{trail}: invalid regex {pattern!r}: {exc}"
            raise ConfigurationError(msg) from exc

    handler = options.get("controller") or (parent.handler if parent else None)
    action = options.get("action") or (parent.action if parent else None)
    if not handler:
        msg = f"{trail}: no 'controller' and none to inherit."
        raise ConfigurationError(msg)
    if not action:
        msg = f"{trail}: no 'action' and none to inherit."
        raise ConfigurationError(msg)

    # Children inherit from this route, so build it first without them
    route = RouteDefinition(
        name=name,
        match_type=match_type,
        pattern=pattern,
        handler=str(handler),
        action=str(action),
        compiled=compiled,
    )

    child_key = next((key for key in _CHILD_KEYS if key in options), None)
    if child_key is None:
        return route
    if match_type is MatchType.REGEX:
        msg = f"{trail}: regex routes cannot have children."
        raise ConfigurationError(msg)
    children = _build_level(options[child_key], parent=route, trail=f"{trail}.{child_key}")
    return RouteDefinition(
        name=route.name,
        match_type=route.match_type,
        pattern=route.pattern,
        handler=route.handler,
        action=route.action,
        children=children,
    )
