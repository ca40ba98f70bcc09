"""Route definition and match result frozen dataclasses."""

import re
from dataclasses import dataclass, field
from enum import StrEnum


class MatchType(StrEnum):
    """How a route's pattern is compared with the request path."""

    LITERAL = "literal"  # path prefix, followed by "/" or end of path
    REGEX = "regex"  # full match, no children


@dataclass(frozen=True, slots=True)
class RouteDefinition:
    """A frozen route definition.

    Built once from the ``[router]`` config section. ``handler`` and
    ``action`` are already resolved against the parent, so a child that
    did not declare them carries the parent's values.
    """

    name: str
    match_type: MatchType
    pattern: str
    handler: str
    action: str
    children: tuple[RouteDefinition, ...] = ()
    compiled: re.Pattern[str] | None = field(default=None, repr=False, compare=False)

    @property
    def is_regex(self) -> bool:
        return self.match_type is MatchType.REGEX

    def walk(self, depth: int = 0):
        """Yield ``(depth, route)`` for this route and its descendants."""
        yield depth, self
        for child in self.children:
            yield from child.walk(depth + 1)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of resolving a path against the route tree.

    ``action`` is what the dispatcher invokes: the route's own action, or
    the fallback action when a parent matched but none of its children
    did. ``route`` is ``None`` only for the table-level fallback.
    """

    route: RouteDefinition | None
    handler: str
    action: str
    matches: tuple[str, ...] = ()
    is_fallback: bool = False

    @property
    def name(self) -> str | None:
        return self.route.name if self.route is not None else None
