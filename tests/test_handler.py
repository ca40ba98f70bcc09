"""Tests for getmail.server.handler and getmail.server.sender."""

from typing import Any

import pytest

from getmail._internal.ids import make_request_id
from getmail.http.response import Response
from getmail.server.handler import build_chain, inbound_request_id
from getmail.server.sender import send_response


class TestInboundRequestId:
    def test_reuses_sane_value(self) -> None:
        assert inbound_request_id("  abc-123 ") == "abc-123"

    @pytest.mark.parametrize("value", [None, "", "   ", "x" * 201, "bad\x00id"])
    def test_generates_otherwise(self, value: str | None) -> None:
        generated = inbound_request_id(value)

        assert generated != value
        assert len(generated.split("-", 1)[0]) == len("1669950476.198900")

    def test_make_request_id_format(self) -> None:
        assert make_request_id(1669950476.1989).startswith("1669950476.198900-")


class TestBuildChain:
    async def test_no_middleware(self) -> None:
        async def innermost(request: Any) -> Response:
            return Response(f"got {request}")

        chain = build_chain([], innermost)
        assert (await chain("r")).text == "got r"

    async def test_middleware_can_replace_request(self) -> None:
        async def innermost(request: Any) -> Response:
            return Response(str(request))

        async def upper(request: Any, next: Any) -> Response:
            return await next(request.upper())

        chain = build_chain([upper], innermost)
        assert (await chain("abc")).text == "ABC"


class TestSendResponse:
    async def _send(self, response: Response, *, head: bool = False) -> list[dict[str, Any]]:
        sent: list[dict[str, Any]] = []

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        await send_response(response, send, head=head)
        return sent

    async def test_messages(self) -> None:
        response = Response("héllo").with_header("X-A", "1").with_cookie("s", "v")
        start, body = await self._send(response)

        assert start["status"] == 200
        headers = dict(start["headers"])
        assert headers[b"content-type"] == b"text/html; charset=utf-8"
        assert headers[b"x-a"] == b"1"
        assert headers[b"set-cookie"].startswith(b"s=v;")
        assert headers[b"content-length"] == b"6"
        assert body == {"type": "http.response.body", "body": "héllo".encode()}

    async def test_head_keeps_length_drops_body(self) -> None:
        start, body = await self._send(Response("abc"), head=True)

        assert dict(start["headers"])[b"content-length"] == b"3"
        assert body["body"] == b""

    async def test_no_body_for_304(self) -> None:
        start, body = await self._send(Response("abc", status=304))

        assert dict(start["headers"])[b"content-length"] == b"0"
        assert body["body"] == b""
