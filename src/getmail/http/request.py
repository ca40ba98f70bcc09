"""Immutable HTTP request.

Frozen metadata with async body access. Attributes carry per-call
context that is not part of the HTTP message itself: the correlation id,
whether the request was forwarded internally, regex captures from the
matched route.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any
from urllib.parse import parse_qs

from getmail._internal.asgi import Receive
from getmail.errors import HTTPError
from getmail.http.cookies import parse_cookies
from getmail.http.headers import Headers

# Well-known attribute names
ATTR_REQUEST_ID = "request_id"
ATTR_PROXY = "proxy"
ATTR_FORWARD_DEPTH = "forward_depth"
ATTR_MATCHES = "matches"
ATTR_LAYOUT = "layout"

_FORM_TYPES = ("application/x-www-form-urlencoded", "")


async def _empty_body() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Body is accessed asynchronously via ``.body()``, ``.json()``, ``.data()``.
    Derived requests (regex captures attached, internal forwards) are new
    instances built with ``with_attributes()`` and ``forward()``.
    """

    method: str
    path: str
    query_string: str
    headers: Headers
    cookies: Mapping[str, str]
    attributes: Mapping[str, Any]
    client: tuple[str, int] | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: body and parsed data cache, shared with derived requests
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Attributes --

    def attribute(self, name: str, default: Any = None) -> Any:
        """Return a request attribute, or *default* if unset."""
        return self.attributes.get(name, default)

    @property
    def request_id(self) -> str:
        """Correlation id shared by this request and anything it forwards to."""
        return self.attributes.get(ATTR_REQUEST_ID, "")

    @property
    def is_proxy(self) -> bool:
        """True if this request was forwarded internally by a controller."""
        return bool(self.attributes.get(ATTR_PROXY, False))

    @property
    def forward_depth(self) -> int:
        return int(self.attributes.get(ATTR_FORWARD_DEPTH, 0))

    @property
    def matches(self) -> tuple[str, ...]:
        """Regex captures of the matched route, full match first."""
        return tuple(self.attributes.get(ATTR_MATCHES, ()))

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def query(self) -> dict[str, str]:
        """Query parameters, first value per name."""
        parsed = parse_qs(self.query_string, keep_blank_values=True)
        return {name: values[0] for name, values in parsed.items()}

    @property
    def url(self) -> str:
        """Path plus query string."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    # -- Derived requests --

    def with_attributes(self, **attributes: Any) -> Request:
        """Return a copy with extra attributes. Shares the body cache."""
        merged = MappingProxyType({**self.attributes, **attributes})
        return replace(self, attributes=merged)

    def forward(
        self,
        path: str,
        *,
        method: str = "GET",
        data: Mapping[str, Any] | None = None,
    ) -> Request:
        """Derive a request for an internal call to another route.

        Keeps client info, headers, cookies, query string and the
        correlation id. Replaces path, method, and body (sent as JSON),
        marks the request as a proxy request, and bumps the forward depth.
        """
        payload = dict(data or {})
        body = json_module.dumps(payload).encode("utf-8")
        headers = self.headers.replace("content-type", "application/json").replace(
            "content-length", str(len(body))
        )
        attributes = {
            **self.attributes,
            ATTR_PROXY: True,
            ATTR_FORWARD_DEPTH: self.forward_depth + 1,
            ATTR_MATCHES: (),
        }
        return replace(
            self,
            method=method.upper(),
            path=path,
            headers=headers,
            attributes=MappingProxyType(attributes),
            _receive=_empty_body,
            _cache={"_body": body, "_data": payload},
        )

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body. Cached after the first read."""
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        raw = await self.body()
        return raw.decode("utf-8")

    async def json(self) -> Any:
        """Parse the body as JSON.

        Raises ``HTTPError(400)`` for malformed JSON.
        """
        raw = await self.body()
        try:
            return json_module.loads(raw or b"null")
        except ValueError:
            raise HTTPError(status=400, detail="Malformed JSON body.") from None

    async def data(self) -> dict[str, Any]:
        """Parsed body as a dict, from JSON or a URL-encoded form.

        Form fields keep their first value. The result is cached and is
        what a forwarded request was built with.

        Raises ``HTTPError(400)`` when a JSON body is not an object and
        ``HTTPError(415)`` for other content types.
        """
        if "_data" in self._cache:
            return self._cache["_data"]

        ct = (self.content_type or "").split(";", 1)[0].strip().lower()
        if ct == "application/json" or ct.endswith("+json"):
            value = await self.json()
            if value is None:
                value = {}
            if not isinstance(value, dict):
                raise HTTPError(status=400, detail="JSON body must be an object.")
            result: dict[str, Any] = value
        elif ct in _FORM_TYPES:
            parsed = parse_qs((await self.body()).decode("utf-8"), keep_blank_values=True)
            result = {name: values[0] for name, values in parsed.items()}
        else:
            raise HTTPError(status=415, detail="Unsupported body encoding.")

        self._cache["_data"] = result
        return result

    # -- Factory --

    @classmethod
    def from_asgi(
        cls,
        scope: Mapping[str, Any],
        receive: Receive,
        attributes: Mapping[str, Any] | None = None,
    ) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        headers = Headers.from_raw(scope.get("headers", ()))
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            query_string=scope.get("query_string", b"").decode("latin-1"),
            headers=headers,
            cookies=MappingProxyType(parse_cookies(headers.get("cookie", ""))),
            attributes=MappingProxyType(dict(attributes or {})),
            client=tuple(client) if client else None,
            _receive=receive,
        )
