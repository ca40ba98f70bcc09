"""getmail exception hierarchy.

Shared across the route table builder, dispatcher, controllers, and the
ASGI handler so every module raises and catches the same types.
"""

from dataclasses import dataclass


class GetmailError(Exception):
    """Base for all getmail-specific errors."""


class ConfigurationError(GetmailError):
    """Raised when configuration or the route table is invalid.

    Raised while loading config files or during ``App._freeze()``.
    Fatal: the app never starts serving with a broken route table.
    """


class ForwardingError(GetmailError):
    """Raised when an internal route call nests deeper than allowed.

    Guards against a controller forwarding to a route that forwards
    back to it.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(GetmailError):
    """An error that maps directly to an HTTP status code.

    Raised by request body parsing or by controllers. The ASGI handler
    catches these and renders them in the response shape of the path
    (JSON envelope under ``/api``, plain text elsewhere).
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):
    """404 Not Found."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):
    """405 Method Not Allowed. Carries the ``Allow`` header."""

    def __init__(self, allowed: frozenset[str], detail: str = "Method Not Allowed") -> None:
        allow = ", ".join(sorted(allowed))
        super().__init__(status=405, detail=detail, headers=(("Allow", allow),))


class MailError(GetmailError):
    """Raised when the IMAP mailbox cannot be reached or searched."""
