"""getmail application class.

Mutable during setup (controllers, services, middleware, hooks).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import inspect
import logging
import threading
from collections.abc import Callable
from typing import Any

from getmail._internal.asgi import Receive, Scope, Send
from getmail.config import AppConfig
from getmail.controllers import BUILTIN_CONTROLLERS
from getmail.logs import configure_logging
from getmail.middleware.protocol import Middleware, Next
from getmail.middleware.sessions import SessionConfig, SessionMiddleware
from getmail.routing.dispatcher import Dispatcher
from getmail.routing.registry import ControllerRegistry
from getmail.routing.table import build_route_table
from getmail.server.handler import build_chain, handle_request

logger = logging.getLogger("getmail.server")


class App:
    """The getmail application.

    Mutable during setup. Frozen at runtime when ``app.run()`` or
    ``__call__()`` is first invoked: the route table is built, every
    controller/action pair it names is resolved, and the middleware
    chain is composed around the dispatcher. Configuration errors
    surface at that point, before any request is served.

    Thread safety:
        The setup phase is single-threaded. The freeze transition uses a
        Lock + double-check so exactly one thread compiles the app, even
        when several workers receive their first request together.
    """

    __slots__ = (
        "_dispatcher",
        "_freeze_lock",
        "_frozen",
        "_middleware_list",
        "_pipeline",
        "_providers",
        "_registry",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None, *, setup_logging: bool = True) -> None:
        self.config: AppConfig = config or AppConfig()
        self._registry = ControllerRegistry(BUILTIN_CONTROLLERS)
        self._middleware_list: list[Middleware] = []
        self._providers: dict[type, Callable[[], Any]] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._dispatcher: Dispatcher | None = None
        self._pipeline: Next | None = None
        if setup_logging:
            configure_logging(self.config)

    # -- Setup --

    def controller(self, controller_id: str) -> Callable[[type], type]:
        """Register a controller class under *controller_id*.

        Usage::

            @app.controller("api.reports")
            class ReportController(Controller):
                def handle(self, request): ...

        Registering a built-in id replaces the built-in controller.
        """

        def decorator(cls: type) -> type:
            self._check_not_frozen()
            self._registry.register(controller_id, cls)
            return cls

        return decorator

    def register_controller(self, controller_id: str, factory: Callable[..., Any] | str) -> None:
        """Register a controller class, factory, or ``"module:Class"`` string."""
        self._check_not_frozen()
        self._registry.register(controller_id, factory)

    def provide(self, annotation: type, factory: Callable[[], Any]) -> None:
        """Register a zero-argument factory for a service.

        Controllers fetch it with ``self.service(annotation)``::

            app.provide(MailSearch, lambda: MailSearch(config, client_factory=FakeIMAP))
        """
        self._check_not_frozen()
        self._providers[annotation] = factory

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware. First added is outermost."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a hook run once when the server starts (sync or async)."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a hook run once when the server stops (sync or async)."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    @property
    def dispatcher(self) -> Dispatcher:
        """The compiled dispatcher. Freezes the app if needed."""
        self._ensure_frozen()
        assert self._dispatcher is not None
        return self._dispatcher

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Freeze the app and serve it with pounce."""
        self._ensure_frozen()
        from getmail.server.run import run_server

        run_server(self, host or self.config.host, port or self.config.port, reload=self.config.debug)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()
        assert self._pipeline is not None
        await handle_request(scope, receive, send, pipeline=self._pipeline, config=self.config)

    async def _handle_lifespan(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup so a broken route table fails the
        server start instead of the first request.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    await self.startup()
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        for hook in self._startup_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def shutdown(self) -> None:
        for hook in self._shutdown_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        # 1. Route table and dispatcher (validates every controller/action)
        table = build_route_table(self.config.router)
        dispatcher = Dispatcher(table, self._registry, self.config, providers=self._providers)

        # 2. Middleware: user middleware outermost, sessions next to dispatch
        middleware = list(self._middleware_list)
        if self.config.secret_key:
            middleware.append(
                SessionMiddleware(
                    SessionConfig(
                        secret_key=self.config.secret_key,
                        cookie_name=self.config.session_cookie,
                    )
                )
            )

        self._dispatcher = dispatcher
        self._pipeline = build_chain(middleware, dispatcher)
        self._frozen = True
        logger.debug(
            "App frozen: %d routes, %d middleware",
            sum(1 for _ in table.walk()),
            len(middleware),
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register controllers, services and middleware before calling app.run()."
            )
            raise RuntimeError(msg)


def create_app(config_dir: str | None = None, **overrides: Any) -> App:
    """Build an ``App`` from a config directory and environment variables.

    Used by the ``getmail`` command and as an ASGI factory::

        pounce 'getmail.app:create_app()'
    """
    from getmail.config import load_config

    return App(load_config(config_dir, **overrides))
