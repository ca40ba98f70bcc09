"""Path matching against the route tree.

Depth-first, first match wins among siblings. A literal route consumes
its prefix only at a segment boundary, then hands the remainder to its
children. When a literal route matches but none of its children do, the
route itself is returned with the fallback action, so a request under
``/api`` that no API route handles still reaches the API's controller.
"""

from collections.abc import Sequence

from getmail.routing.route import MatchType, RouteDefinition, RouteMatch


def match_route(
    path: str,
    routes: Sequence[RouteDefinition],
    fallback_action: str,
) -> RouteMatch | None:
    """Resolve *path* against *routes*. Return ``None`` if nothing matches.

    Pure function of its inputs: the same path and table always give
    the same result.

    Examples with the default table::

        /api/healthcheck  -> healthcheck (api.system / healthcheck)
        /api/unknown      -> api (api.index / error_action, is_fallback)
        /apiextra         -> None
        /doc/file1.txt    -> doc, matches ("/doc/file1.txt", "file1.txt")
    """
    for route in routes:
        if route.match_type is MatchType.REGEX:
            found = route.compiled.fullmatch(path) if route.compiled else None
            if found is not None:
                return RouteMatch(
                    route=route,
                    handler=route.handler,
                    action=route.action,
                    matches=(found.group(0), *(g or "" for g in found.groups())),
                )
            continue

        if path == route.pattern:
            return RouteMatch(route=route, handler=route.handler, action=route.action)

        if not path.startswith(route.pattern):
            continue
        remainder = path[len(route.pattern) :]
        if not remainder.startswith("/"):
            # "/apiextra" is not under "/api"
            continue

        if route.children:
            child = match_route(remainder, route.children, fallback_action)
            if child is not None:
                return child
        return RouteMatch(
            route=route,
            handler=route.handler,
            action=fallback_action,
            is_fallback=True,
        )
    return None
