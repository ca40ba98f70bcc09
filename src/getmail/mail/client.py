"""Search an IMAP mailbox for the latest message by subject.

Wraps ``imapclient`` with the one workflow the application needs:
log in, select the mailbox read-only, walk the envelopes newest first,
and peek at the body of the first subject match without marking it
seen.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import asdict, dataclass
from datetime import datetime
from email.header import decode_header, make_header
from typing import Any

from imapclient import IMAPClient
from imapclient.exceptions import IMAPClientError

from getmail.config import AppConfig
from getmail.errors import MailError

logger = logging.getLogger("getmail.mail")

_BODY_REQUEST = "BODY.PEEK[TEXT]"
_BODY_KEY = b"BODY[TEXT]"


@dataclass(frozen=True, slots=True)
class MailOverview:
    """Envelope summary of one message, JSON-ready via ``to_dict()``."""

    uid: int
    subject: str
    from_: str
    to: str
    date: str | None
    message_id: str
    size: int

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["from"] = data.pop("from_")
        return data


@dataclass(frozen=True, slots=True)
class MailResult:
    """Latest matching message. ``overview`` is ``None`` when nothing matched."""

    overview: MailOverview | None = None
    body: str = ""


def _text(value: bytes | str | None) -> str:
    """Decode an envelope field, including RFC 2047 encoded words."""
    if value is None:
        return ""
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    try:
        return str(make_header(decode_header(value)))
    except (LookupError, UnicodeDecodeError, ValueError):
        return value


def _address(addresses: Any) -> str:
    if not addresses:
        return ""
    parts = []
    for addr in addresses:
        mailbox = _text(addr.mailbox)
        host = _text(addr.host)
        email = f"{mailbox}@{host}" if host else mailbox
        name = _text(addr.name)
        parts.append(f"{name} <{email}>" if name else email)
    return ", ".join(parts)


def _overview(uid: int, data: dict[bytes, Any]) -> MailOverview:
    envelope = data[b"ENVELOPE"]
    date = envelope.date
    return MailOverview(
        uid=uid,
        subject=_text(envelope.subject),
        from_=_address(envelope.from_),
        to=_address(envelope.to),
        date=date.isoformat() if isinstance(date, datetime) else None,
        message_id=_text(envelope.message_id),
        size=int(data.get(b"RFC822.SIZE", 0)),
    )


class MailSearch:
    """Finds the most recent message whose subject matches a pattern.

    One connection per search. *client_factory* is called as
    ``client_factory(host, port=..., ssl=True)`` and defaults to
    ``IMAPClient``.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        client_factory: Callable[..., Any] = IMAPClient,
    ) -> None:
        self._config = config
        self._client_factory = client_factory

    def find_latest(self, subject_pattern: str) -> MailResult:
        """Return the newest message whose subject matches *subject_pattern*.

        Matching is a case-insensitive regex search. Blocking; run it in a
        worker thread from async code.

        Raises ``MailError`` if the server cannot be reached or refuses
        the login or the mailbox.
        """
        cfg = self._config
        if not cfg.mail_imap_host:
            msg = "No IMAP host configured."
            raise MailError(msg)
        regex = re.compile(subject_pattern, re.IGNORECASE)

        try:
            client = self._client_factory(cfg.mail_imap_host, port=cfg.mail_imap_port, ssl=True)
        except (IMAPClientError, OSError) as exc:
            msg = f"Cannot connect to {cfg.mail_imap_host}:{cfg.mail_imap_port}: {exc}"
            raise MailError(msg) from exc

        try:
            client.login(cfg.mail_username, cfg.mail_password)
            client.select_folder(cfg.mail_mailbox, readonly=True)
            uids = client.search(["ALL"])
            if not uids:
                return MailResult()
            envelopes = client.fetch(uids, ["ENVELOPE", "RFC822.SIZE"])
            for uid in sorted(envelopes, reverse=True):
                overview = _overview(uid, envelopes[uid])
                if not regex.search(overview.subject):
                    continue
                fetched = client.fetch([uid], [_BODY_REQUEST])
                raw = fetched.get(uid, {}).get(_BODY_KEY, b"")
                logger.info("Matched message %d for pattern %r", uid, subject_pattern)
                return MailResult(overview=overview, body=raw.decode("utf-8", errors="replace"))
            logger.info("No message matches pattern %r", subject_pattern)
            return MailResult()
        except (IMAPClientError, OSError) as exc:
            msg = f"IMAP search in {cfg.mail_mailbox!r} failed: {exc}"
            raise MailError(msg) from exc
        finally:
            try:
                client.logout()
            except (IMAPClientError, OSError):
                logger.debug("IMAP logout failed", exc_info=True)


_PATTERN_CHARS = re.compile(r"[a-z0-9 _\-]*", re.IGNORECASE)


def check_subject_pattern(pattern: str, min_length: int) -> str:
    """Return an error message for an unusable subject pattern, else ``""``.

    Patterns are restricted to letters, digits, spaces, ``-`` and ``_``
    so they are safe to compile as a regex.
    """
    if len(pattern) < min_length:
        return f"Subject pattern must be at least {min_length} characters."
    if not _PATTERN_CHARS.fullmatch(pattern):
        return "Invalid chars in subject pattern."
    return ""
