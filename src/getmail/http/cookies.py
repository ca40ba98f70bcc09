"""Cookie handling for both directions.

``parse_cookies`` reads the inbound ``Cookie`` header; ``SetCookie``
renders one outbound ``Set-Cookie`` directive.
"""

from dataclasses import dataclass


def parse_cookies(header: str) -> dict[str, str]:
    """Parse a ``Cookie`` header value into a name-value dict."""
    cookies: dict[str, str] = {}
    for pair in header.split(";"):
        name, sep, value = pair.strip().partition("=")
        if sep and name.strip():
            cookies[name.strip()] = value.strip()
    return cookies


@dataclass(frozen=True, slots=True)
class SetCookie:
    """A ``Set-Cookie`` directive attached to a Response.

    ``max_age=0`` deletes the cookie on the client.
    """

    name: str
    value: str
    max_age: int | None = None
    path: str = "/"
    secure: bool = False
    httponly: bool = True
    samesite: str = "lax"

    def to_header_value(self) -> str:
        attrs = [f"{self.name}={self.value}"]
        if self.max_age is not None:
            attrs.append(f"Max-Age={self.max_age}")
        if self.path:
            attrs.append(f"Path={self.path}")
        if self.secure:
            attrs.append("Secure")
        if self.httponly:
            attrs.append("HttpOnly")
        if self.samesite:
            attrs.append(f"SameSite={self.samesite.capitalize()}")
        return "; ".join(attrs)
