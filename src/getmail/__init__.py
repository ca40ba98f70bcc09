"""getmail: fetch the latest email matching a subject, over HTTP.

A small ASGI application with a JSON API (``POST /api/mail``) and an HTML
form (``/web/mail``) in front of an IMAP mailbox. Requests are routed
through a configurable tree of literal and regex routes to controller
actions; controllers can call other routes in-process.

Basic usage::

    from getmail import App, load_config

    app = App(load_config("config/"))
    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "Controller",
    "ForwardingError",
    "GetmailError",
    "HTTPError",
    "Middleware",
    "Next",
    "Redirect",
    "Request",
    "Response",
    "create_app",
    "get_request",
    "load_config",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import getmail`` fast while providing a clean top-level API.
    """
    if name in ("App", "create_app"):
        from getmail import app as _app

        return getattr(_app, name)

    if name in ("AppConfig", "load_config"):
        from getmail import config as _config

        return getattr(_config, name)

    if name == "Controller":
        from getmail.controllers.base import Controller

        return Controller

    if name == "Request":
        from getmail.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from getmail.http import response as _resp

        return getattr(_resp, name)

    if name in ("Middleware", "Next"):
        from getmail.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "get_request":
        from getmail.context import get_request

        return get_request

    if name in ("GetmailError", "ConfigurationError", "ForwardingError", "HTTPError"):
        from getmail import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
