"""Session middleware: signed cookie sessions.

Session data is serialized as JSON and signed with ``itsdangerous``.
The session dict lives in a ContextVar for the duration of the request,
reachable through ``get_session()`` from any controller.

The app installs this middleware automatically when
``AppConfig.secret_key`` is set.
"""

from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

from itsdangerous import BadSignature, URLSafeTimedSerializer

from getmail.errors import ConfigurationError
from getmail.http.request import Request
from getmail.http.response import Response
from getmail.middleware.protocol import Next

_session_var: ContextVar[dict[str, Any] | None] = ContextVar("getmail_session", default=None)


def get_session() -> dict[str, Any]:
    """Return the current session dict.

    Raises ``LookupError`` if called outside a request with
    ``SessionMiddleware`` active.
    """
    session = _session_var.get()
    if session is None:
        msg = "No active session. Set secret_key to enable SessionMiddleware."
        raise LookupError(msg)
    return session


def current_session() -> dict[str, Any] | None:
    """Return the current session dict, or ``None`` when sessions are off."""
    return _session_var.get()


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Session middleware configuration.

    ``secret_key`` is required. Sessions are signed, not encrypted.
    """

    secret_key: str
    cookie_name: str = "getmail_session"
    max_age: int = 86400
    path: str = "/"
    secure: bool = False
    httponly: bool = True
    samesite: str = "lax"


class SessionMiddleware:
    """Signed cookie session middleware.

    Reads the session cookie, verifies the signature, exposes the dict
    through ``get_session()``, then writes it back as a Set-Cookie on
    the response. Tampered or expired cookies start an empty session.
    """

    __slots__ = ("_config", "_serializer")

    def __init__(self, config: SessionConfig) -> None:
        if not config.secret_key:
            msg = "SessionConfig.secret_key must not be empty."
            raise ConfigurationError(msg)
        self._config = config
        self._serializer = URLSafeTimedSerializer(config.secret_key, salt="getmail.session")

    def _load_session(self, request: Request) -> dict[str, Any]:
        cookie_value = request.cookies.get(self._config.cookie_name)
        if not cookie_value:
            return {}
        try:
            data = self._serializer.loads(cookie_value, max_age=self._config.max_age)
        except BadSignature:
            return {}
        return data if isinstance(data, dict) else {}

    def _save_session(self, response: Response, session: dict[str, Any]) -> Response:
        cfg = self._config
        return response.with_cookie(
            name=cfg.cookie_name,
            value=self._serializer.dumps(session),
            max_age=cfg.max_age,
            path=cfg.path,
            secure=cfg.secure,
            httponly=cfg.httponly,
            samesite=cfg.samesite,
        )

    async def __call__(self, request: Request, next: Next) -> Response:
        session = self._load_session(request)
        token = _session_var.set(session)
        try:
            response = await next(request)
        finally:
            _session_var.reset(token)
        # Always re-sign so the expiry slides with activity
        return self._save_session(response, session)
