"""Shared fixtures: app config, an in-memory IMAP server, app factory."""

import logging
from datetime import datetime

import pytest
from imapclient.exceptions import LoginError
from imapclient.response_types import Address, Envelope

from getmail.app import App
from getmail.config import AppConfig
from getmail.mail.client import MailSearch

API_KEY = "key-123"
API_TOKEN = "token-456"


def build_config(**overrides: object) -> AppConfig:
    values: dict[str, object] = {
        "api_key": API_KEY,
        "api_token": API_TOKEN,
        "mail_imap_host": "imap.example.test",
        "mail_username": "reader@example.test",
        "mail_password": "pw",
        "version": "1.2.3",
        "deployment_environment": "test",
    }
    values.update(overrides)
    return AppConfig(**values)


class FakeMailbox:
    """Stands in for ``imapclient.IMAPClient``.

    Call it like the class (it is its own ``client_factory``). Messages
    map uid to ``(subject, body)``.
    """

    def __init__(
        self,
        messages: dict[int, tuple[str | bytes, str]] | None = None,
        *,
        fail_login: bool = False,
        fail_connect: bool = False,
    ) -> None:
        self.messages = dict(messages or {})
        self.fail_login = fail_login
        self.fail_connect = fail_connect
        self.calls: list[tuple[object, ...]] = []
        self.logged_out = False

    def __call__(self, host: str, port: int = 993, ssl: bool = True) -> FakeMailbox:
        self.calls.append(("connect", host, port, ssl))
        if self.fail_connect:
            raise ConnectionRefusedError("connection refused")
        return self

    def login(self, username: str, password: str) -> None:
        self.calls.append(("login", username))
        if self.fail_login:
            raise LoginError("authentication failed")

    def select_folder(self, folder: str, readonly: bool = False) -> dict:
        self.calls.append(("select", folder, readonly))
        return {}

    def search(self, criteria: list[str]) -> list[int]:
        self.calls.append(("search", tuple(criteria)))
        return sorted(self.messages)

    def fetch(self, uids: list[int], items: list[str]) -> dict[int, dict[bytes, object]]:
        self.calls.append(("fetch", tuple(uids), tuple(items)))
        result: dict[int, dict[bytes, object]] = {}
        for uid in uids:
            subject, body = self.messages[uid]
            if "BODY.PEEK[TEXT]" in items:
                result[uid] = {b"BODY[TEXT]": body.encode("utf-8"), b"SEQ": uid}
                continue
            raw_subject = subject if isinstance(subject, bytes) else subject.encode("utf-8")
            envelope = Envelope(
                datetime(2024, 1, uid % 28 + 1, 9, 30),
                raw_subject,
                (Address(b"Sender", None, b"sender", b"example.test"),),
                None,
                None,
                (Address(None, None, b"reader", b"example.test"),),
                None,
                None,
                None,
                f"<{uid}@example.test>".encode(),
            )
            result[uid] = {b"ENVELOPE": envelope, b"RFC822.SIZE": len(body), b"SEQ": uid}
        return result

    def logout(self) -> None:
        self.logged_out = True


@pytest.fixture
def config() -> AppConfig:
    return build_config()


@pytest.fixture
def mailbox() -> FakeMailbox:
    return FakeMailbox(
        {
            1: ("Your password reset", "old reset link"),
            2: ("Weekly newsletter", "news"),
            3: ("PASSWORD reset requested", "new reset link"),
            4: ("Lunch plans", "pizza?"),
        }
    )


@pytest.fixture
def make_app(mailbox: FakeMailbox):
    """Factory: ``make_app(**config_overrides)`` wired to the fake mailbox."""

    def factory(box: FakeMailbox | None = None, **overrides: object) -> App:
        cfg = build_config(**overrides)
        app = App(cfg, setup_logging=False)
        target = box if box is not None else mailbox
        app.provide(MailSearch, lambda: MailSearch(cfg, client_factory=target))
        return app

    return factory


@pytest.fixture(autouse=True)
def _restore_getmail_logger():
    """Undo handlers installed by ``App(...)`` or ``configure_logging()``."""
    logger = logging.getLogger("getmail")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
