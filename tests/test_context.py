"""Tests for getmail.context: the current request during dispatch."""

import pytest

from getmail.context import current_request_or_none, get_request
from getmail.controllers.base import Controller
from getmail.http.request import Request
from getmail.http.response import Response
from getmail.testing import TestClient


class TestOutsideRequest:
    def test_get_request_raises(self) -> None:
        with pytest.raises(LookupError):
            get_request()

    def test_or_none(self) -> None:
        assert current_request_or_none() is None


class TestDuringRequest:
    async def test_inbound_request_visible(self, make_app) -> None:
        app = make_app()
        seen: list[tuple[str, str, bool]] = []

        @app.controller("api.system")
        class Probe(Controller):
            def healthcheck(self, request: Request) -> Response:
                current = get_request()
                seen.append((current.path, current.request_id, current is request))
                return Response.plain("ok")

        async with TestClient(app) as client:
            response = await client.get("/api/healthcheck", headers={"X-Request-Id": "ctx-1"})

        # The dispatcher hands the action a copy carrying route captures
        assert seen == [("/api/healthcheck", "ctx-1", False)]
        assert response.text == "ok"
        assert current_request_or_none() is None
