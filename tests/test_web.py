"""End-to-end tests for the HTML UI under ``/web`` and the site root."""

from conftest import API_KEY, API_TOKEN, FakeMailbox

from getmail.testing import TestClient

FORM = {"subject_pattern": "password reset", "api_key": API_KEY, "api_token": API_TOKEN, "submit": "Submit"}


class TestRoot:
    async def test_redirects_to_web(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get("/")

        assert response.status == 302
        assert response.header("Location") == "/web"

    async def test_redirect_keeps_query(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get("/?lang=en&x=1")

        assert response.header("Location") == "/web?lang=en&x=1"

    async def test_unknown_path_renders_error_page(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get("/other")

        assert response.status == 404
        assert response.content_type.startswith("text/html")
        assert "Page not found." in response.text
        assert "<!DOCTYPE html>" in response.text


class TestIndex:
    async def test_landing_page(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get("/web")

        assert response.status == 200
        assert "/web/mail" in response.text
        assert "1.2.3" in response.text
        assert response.header("X-Request-Id") in response.text

    async def test_unknown_page(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get("/web/nope")

        assert response.status == 404
        assert "Page not found." in response.text

    async def test_unknown_page_below_mail(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get("/web/mail/extra")

        assert response.status == 404


class TestMailForm:
    async def test_empty_form(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get("/web/mail")

        assert response.status == 200
        assert 'name="subject_pattern"' in response.text
        assert 'type="password"' in response.text
        assert "mail-body" not in response.text

    async def test_required_field(self, make_app, mailbox: FakeMailbox) -> None:
        async with TestClient(make_app()) as client:
            response = await client.post("/web/mail", form={**FORM, "subject_pattern": ""})

        assert response.status == 200
        assert "Cannot be empty." in response.text
        assert mailbox.calls == []

    async def test_short_pattern(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.post("/web/mail", form={**FORM, "subject_pattern": "abc"})

        assert "Subject pattern must be at least 5 characters." in response.text

    async def test_bad_credentials_reported_by_api(self, make_app, mailbox: FakeMailbox) -> None:
        async with TestClient(make_app()) as client:
            response = await client.post("/web/mail", form={**FORM, "api_token": "nope"})

        assert response.status == 200
        assert "Invalid credentials." in response.text
        assert mailbox.calls == []

    async def test_mailbox_failure(self, make_app) -> None:
        async with TestClient(make_app(FakeMailbox(fail_connect=True))) as client:
            response = await client.post("/web/mail", form=FORM)

        assert "Unable to retrieve mail." in response.text

    async def test_success_shows_mail_and_clears_form(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.post("/web/mail", form=FORM)

        assert response.status == 200
        assert "new reset link" in response.text
        assert "PASSWORD reset requested" in response.text
        assert API_TOKEN not in response.text
        assert 'value="password reset"' not in response.text

    async def test_session_remembers_pattern(self, make_app) -> None:
        async with TestClient(make_app(secret_key="web-secret")) as client:
            await client.post("/web/mail", form=FORM)
            response = await client.get("/web/mail")

        assert 'value="password reset"' in response.text

    async def test_without_sessions_pattern_not_remembered(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            await client.post("/web/mail", form=FORM)
            response = await client.get("/web/mail")

        assert 'value="password reset"' not in response.text
        assert client.cookies == {}
