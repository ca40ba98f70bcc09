"""Mail lookup form.

Validates the submission locally, then forwards it to ``/api/mail`` with
``Dispatcher.route()`` so the browser UI and the JSON API share one
implementation of the search.
"""

import json
import logging

from getmail.controllers.base import Controller
from getmail.controllers.web.forms import MailForm
from getmail.controllers.web.views import render_view
from getmail.http.request import Request
from getmail.http.response import Response
from getmail.middleware.sessions import current_session

logger = logging.getLogger("getmail.web")

SESSION_KEY = "last_subject_pattern"


class MailController(Controller):
    async def handle(self, request: Request) -> Response:
        form = MailForm(self.config)
        session = current_session()

        if request.method != "POST":
            if session is not None and session.get(SESSION_KEY):
                form["subject_pattern"].value = str(session[SESSION_KEY])
            return self._render(request, form)

        body = await request.data()
        form.set_data(body)
        if not form.validate():
            return self._render(request, form)

        api = await self.dispatcher.route(request, "/api/mail", "POST", form.data())
        try:
            payload = api.json()
        except ValueError:
            logger.warning("Non-JSON answer from /api/mail (status %d)", api.status)
            payload = {}
        error = payload.get("error") if isinstance(payload, dict) else None
        if error or not isinstance(payload, dict) or payload.get("data") is None:
            message = error.get("message") if isinstance(error, dict) else None
            form.set_error(message or "Error retrieving mail.")
            return self._render(request, form)

        if session is not None:
            session[SESSION_KEY] = form["subject_pattern"].value
        data = payload["data"]
        form.set_data()
        return self._render(
            request,
            form,
            searched=True,
            mail_body=data.get("mail_body", ""),
            mail_overview=json.dumps(data.get("mail_overview"), indent=4),
        )

    def error_action(self, request: Request) -> Response:
        return render_view(
            self.config, request, "error.html", {"message": "Page not found."}, status=404
        )

    def _render(self, request: Request, form: MailForm, **extra: object) -> Response:
        context = {
            "form": form,
            "fields": list(form),
            "searched": False,
            "mail_body": "",
            "mail_overview": "",
            **extra,
        }
        return render_view(self.config, request, "mail.html", context)
