"""End-to-end tests for the JSON API under ``/api``."""

import pytest

from getmail.testing import TestClient

from conftest import API_KEY, API_TOKEN, FakeMailbox

CREDENTIALS = {"api_key": API_KEY, "api_token": API_TOKEN}


class TestIndex:
    async def test_hello(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get("/api")

        body = response.json()
        assert response.status == 200
        assert body["data"] == {"message": "Hello World!"}
        assert body["error"] is None
        assert body["meta"]["status"] == 200
        assert body["meta"]["version"] == "1.2.3"
        assert body["meta"]["request_id"] == response.header("X-Request-Id")

    async def test_unknown_endpoint(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get("/api/nope")

        body = response.json()
        assert response.status == 404
        assert body["data"] is None
        assert body["error"] == {"message": "Endpoint not found."}
        assert body["meta"]["status"] == 404

    async def test_healthcheck(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get("/api/healthcheck")

        assert response.status == 200
        assert response.json()["data"] == {"message": "OK"}

    async def test_below_healthcheck_falls_back_to_system(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get("/api/healthcheck/deep")

        assert response.status == 404
        assert response.json()["error"]["message"] == "Endpoint not found."


class TestMail:
    async def test_get_not_allowed(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get("/api/mail")

        assert response.status == 405
        assert response.header("Allow") == "POST"
        assert response.json()["error"]["message"] == "Method not allowed."

    @pytest.mark.parametrize(
        ("pattern", "message"),
        [
            ("", "Subject pattern must be at least 5 characters."),
            ("abcd", "Subject pattern must be at least 5 characters."),
            ("reset.*", "Invalid chars in subject pattern."),
        ],
    )
    async def test_bad_pattern(self, make_app, pattern: str, message: str) -> None:
        async with TestClient(make_app()) as client:
            response = await client.post("/api/mail", json={"subject_pattern": pattern, **CREDENTIALS})

        assert response.status == 400
        assert response.json()["error"]["message"] == message

    @pytest.mark.parametrize(
        "credentials",
        [
            {"api_key": API_KEY, "api_token": "wrong"},
            {"api_key": "wrong", "api_token": API_TOKEN},
            {},
        ],
    )
    async def test_bad_credentials(self, make_app, mailbox: FakeMailbox, credentials) -> None:
        async with TestClient(make_app()) as client:
            response = await client.post("/api/mail", json={"subject_pattern": "reset", **credentials})

        assert response.status == 401
        assert response.json()["error"]["message"] == "Invalid credentials."
        assert mailbox.calls == []

    async def test_unconfigured_credentials_reject_everything(self, make_app) -> None:
        async with TestClient(make_app(api_key="", api_token="")) as client:
            response = await client.post(
                "/api/mail", json={"subject_pattern": "reset", "api_key": "", "api_token": ""}
            )

        assert response.status == 401

    async def test_latest_match(self, make_app, mailbox: FakeMailbox) -> None:
        async with TestClient(make_app()) as client:
            response = await client.post("/api/mail", json={"subject_pattern": "password reset", **CREDENTIALS})

        body = response.json()
        assert response.status == 200
        assert body["data"]["mail_body"] == "new reset link"
        overview = body["data"]["mail_overview"]
        assert overview["uid"] == 3
        assert overview["subject"] == "PASSWORD reset requested"
        assert overview["from"] == "Sender <sender@example.test>"
        assert overview["to"] == "reader@example.test"
        assert overview["message_id"] == "<3@example.test>"
        assert mailbox.logged_out is True

    async def test_form_encoded_body(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.post("/api/mail", form={"subject_pattern": "lunch", **CREDENTIALS})

        assert response.json()["data"]["mail_body"] == "pizza?"

    async def test_no_match(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.post("/api/mail", json={"subject_pattern": "invoice", **CREDENTIALS})

        assert response.status == 200
        assert response.json()["data"] == {"mail_body": "", "mail_overview": None}

    async def test_mailbox_unreachable(self, make_app) -> None:
        box = FakeMailbox(fail_login=True)
        async with TestClient(make_app(box)) as client:
            response = await client.post("/api/mail", json={"subject_pattern": "reset", **CREDENTIALS})

        assert response.status == 502
        assert response.json()["error"]["message"] == "Unable to retrieve mail."
        assert box.logged_out is True

    async def test_malformed_json(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.post(
                "/api/mail", body=b"{oops", headers={"content-type": "application/json"}
            )

        assert response.status == 400
        assert response.json()["error"]["message"] == "Malformed JSON body."


class TestRequestId:
    async def test_generated(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            first = await client.get("/api/healthcheck")
            second = await client.get("/api/healthcheck")

        assert first.header("X-Request-Id")
        assert first.header("X-Request-Id") != second.header("X-Request-Id")

    async def test_inbound_id_reused(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get("/api/healthcheck", headers={"X-Request-Id": "trace-42"})

        assert response.header("X-Request-Id") == "trace-42"
        assert response.json()["meta"]["request_id"] == "trace-42"
