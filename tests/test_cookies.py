"""Tests for getmail.http.cookies."""

from getmail.http.cookies import SetCookie, parse_cookies


class TestParseCookies:
    def test_pairs(self) -> None:
        assert parse_cookies("a=1; b = two ;c=") == {"a": "1", "b": "two", "c": ""}

    def test_ignores_garbage(self) -> None:
        assert parse_cookies("novalue; =x; ") == {}

    def test_empty(self) -> None:
        assert parse_cookies("") == {}


class TestSetCookie:
    def test_defaults(self) -> None:
        assert SetCookie("s", "v").to_header_value() == "s=v; Path=/; HttpOnly; SameSite=Lax"

    def test_all_attributes(self) -> None:
        cookie = SetCookie("s", "v", max_age=60, path="/web", secure=True, httponly=False, samesite="strict")
        assert cookie.to_header_value() == "s=v; Max-Age=60; Path=/web; Secure; SameSite=Strict"

    def test_deletion(self) -> None:
        assert "Max-Age=0" in SetCookie("s", "", max_age=0).to_header_value()
