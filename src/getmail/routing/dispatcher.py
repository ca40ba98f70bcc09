"""Dispatcher and internal forwarder.

``process()`` is the innermost stage of the request pipeline: it matches
the path, instantiates the controller, and invokes the action.
``route()`` lets a controller run another route in-process and inspect
its response, the way the web form calls the JSON API.
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from getmail._internal.invoke import invoke
from getmail.config import AppConfig
from getmail.errors import ConfigurationError, ForwardingError
from getmail.http.request import ATTR_MATCHES, Request
from getmail.http.response import Redirect, Response
from getmail.routing.matcher import match_route
from getmail.routing.registry import ControllerRegistry
from getmail.routing.route import RouteMatch
from getmail.routing.table import RouteTable

logger = logging.getLogger("getmail.routing")

type Fallback = Callable[[Request], Awaitable[Response | None] | Response | None]


class Dispatcher:
    """Matches requests to controller actions and runs them.

    Built once at app freeze. Construction checks that every
    controller/action pair the table can produce resolves, so a typo in
    the route config fails at startup instead of on the first request.
    """

    __slots__ = ("_config", "_providers", "_registry", "_table")

    def __init__(
        self,
        table: RouteTable,
        registry: ControllerRegistry,
        config: AppConfig,
        *,
        providers: Mapping[type, Callable[[], Any]] | None = None,
    ) -> None:
        self._table = table
        self._registry = registry
        self._config = config
        self._providers = dict(providers or {})
        self._validate()

    @property
    def table(self) -> RouteTable:
        return self._table

    @property
    def config(self) -> AppConfig:
        return self._config

    def _validate(self) -> None:
        for handler, action in sorted(self._table.handler_actions()):
            factory = self._registry.resolve(handler)
            if isinstance(factory, type) and not callable(getattr(factory, action, None)):
                msg = f"Controller {handler!r} has no action {action!r}."
                raise ConfigurationError(msg)

    # -- Services --

    def provide(self, annotation: type) -> Any:
        """Return the service registered for *annotation*.

        Raises ``LookupError`` if nothing was provided for it.
        """
        try:
            factory = self._providers[annotation]
        except KeyError:
            msg = f"No provider registered for {annotation.__name__}."
            raise LookupError(msg) from None
        return factory()

    # -- Matching --

    def resolve(self, path: str) -> RouteMatch:
        """Match *path*, falling back to the table-level fallback pair."""
        found = match_route(path, self._table.routes, self._table.fallback_action)
        if found is not None:
            return found
        return RouteMatch(
            route=None,
            handler=self._table.fallback_handler,
            action=self._table.fallback_action,
            is_fallback=True,
        )

    # -- Dispatch --

    async def process(self, request: Request, fallback: Fallback | None = None) -> Response:
        """Run the controller action matched by *request*.

        If the action returns ``None`` the request was not handled:
        *fallback* is awaited instead, or, without one, the table-level
        fallback action runs. Never writes to the transport.
        """
        match = self.resolve(request.path)
        request = request.with_attributes(**{ATTR_MATCHES: match.matches})
        logger.debug(
            "Dispatching %s %s to %s.%s%s",
            request.method,
            request.path,
            match.handler,
            match.action,
            " (fallback)" if match.is_fallback else "",
        )

        response = await self._run(match.handler, match.action, request)
        if response is None:
            if fallback is not None:
                response = _normalize(await invoke(fallback, request), "fallback")
            else:
                response = await self.not_handled(request)
        if response is None:
            return Response.plain("Not Found", status=404)
        return response

    async def not_handled(self, request: Request) -> Response | None:
        """Invoke the table-level fallback controller's fallback action."""
        return await self._run(self._table.fallback_handler, self._table.fallback_action, request)

    async def route(
        self,
        caller: Request,
        path: str,
        method: str = "GET",
        data: Mapping[str, Any] | None = None,
    ) -> Response:
        """Run the route at *path* as an internal request derived from *caller*.

        The forwarded request keeps the caller's correlation id, is marked
        as a proxy request, and carries *data* as its body.

        Raises ``ForwardingError`` when forwarding would nest deeper than
        ``max_forward_depth``.
        """
        depth = caller.forward_depth + 1
        if depth > self._config.max_forward_depth:
            msg = (
                f"Forwarding to {path!r} would nest {depth} internal calls deep "
                f"(limit {self._config.max_forward_depth})."
            )
            raise ForwardingError(msg)
        forwarded = caller.forward(path, method=method, data=data)
        logger.debug("Forwarding %s %s (depth %d)", forwarded.method, path, depth)
        return await self.process(forwarded, fallback=self.not_handled)

    async def __call__(self, request: Request) -> Response:
        """Innermost handler of the middleware chain."""
        return await self.process(request)

    async def _run(self, handler: str, action: str, request: Request) -> Response | None:
        factory = self._registry.resolve(handler)
        controller = factory(self._config, self)
        method = getattr(controller, action, None)
        if method is None:
            msg = f"Controller {handler!r} has no action {action!r}."
            raise ConfigurationError(msg)
        return _normalize(await invoke(method, request), f"{handler}.{action}")


def _normalize(result: Any, source: str) -> Response | None:
    if result is None or isinstance(result, Response):
        return result
    if isinstance(result, Redirect):
        return result.to_response()
    msg = f"{source} returned {type(result).__name__}; expected Response, Redirect or None."
    raise TypeError(msg)
