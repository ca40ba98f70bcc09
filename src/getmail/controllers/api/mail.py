"""``POST /api/mail``: latest message matching a subject pattern."""

import hmac
import logging

import anyio

from getmail.controllers.api.response import api_response
from getmail.controllers.base import Controller
from getmail.errors import MailError, MethodNotAllowed
from getmail.http.request import Request
from getmail.http.response import Response
from getmail.mail.client import MailSearch, check_subject_pattern

logger = logging.getLogger("getmail.mail")


def _same(given: str, expected: str) -> bool:
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


class MailController(Controller):
    """Searches the configured mailbox.

    Reads only ``subject_pattern``, ``api_key`` and ``api_token`` from the
    body, so a forwarded form submission with extra fields works as is.
    """

    async def handle(self, request: Request) -> Response:
        if request.method != "POST":
            raise MethodNotAllowed(frozenset({"POST"}), "Method not allowed.")

        body = await request.data()
        subject_pattern = str(body.get("subject_pattern") or "").strip()
        api_key = str(body.get("api_key") or "")
        api_token = str(body.get("api_token") or "")

        problem = check_subject_pattern(subject_pattern, self.config.min_subject_length)
        if problem:
            return api_response(self.config, request, 400, problem)
        if not self._authorized(api_key, api_token):
            # Never say which credential was wrong
            return api_response(self.config, request, 401, "Invalid credentials.")

        try:
            result = await anyio.to_thread.run_sync(self._search().find_latest, subject_pattern)
        except MailError as exc:
            logger.warning("Mail search failed: %s", exc)
            return api_response(self.config, request, 502, "Unable to retrieve mail.")

        overview = result.overview.to_dict() if result.overview is not None else None
        return api_response(
            self.config,
            request,
            data={"mail_body": result.body, "mail_overview": overview},
        )

    def _authorized(self, api_key: str, api_token: str) -> bool:
        expected_key = self.config.api_key
        expected_token = self.config.api_token
        if not expected_key or not expected_token:
            logger.warning("api_key/api_token not configured; rejecting mail request")
            return False
        # Both are always compared
        key_ok = _same(api_key, expected_key)
        token_ok = _same(api_token, expected_token)
        return key_ok and token_ok

    def _search(self) -> MailSearch:
        try:
            return self.service(MailSearch)
        except LookupError:
            return MailSearch(self.config)
