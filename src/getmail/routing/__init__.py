"""Routing: route table, matcher, controller registry, dispatcher.

The table is built from the ``[router]`` config section when the app
freezes and never changes afterwards.
"""

from getmail.routing.dispatcher import Dispatcher
from getmail.routing.matcher import match_route
from getmail.routing.registry import ControllerRegistry, import_string
from getmail.routing.route import MatchType, RouteDefinition, RouteMatch
from getmail.routing.table import RouteTable, build_route_table

__all__ = [
    "ControllerRegistry",
    "Dispatcher",
    "MatchType",
    "RouteDefinition",
    "RouteMatch",
    "RouteTable",
    "build_route_table",
    "import_string",
    "match_route",
]
