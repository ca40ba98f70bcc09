"""Built-in controllers.

Maps the controller ids used by the default route table to their
classes. Import strings keep controller modules (and their template
and IMAP dependencies) unimported until the app freezes.
"""

BUILTIN_CONTROLLERS: dict[str, str] = {
    "app.index": "getmail.controllers.app:IndexController",
    "api.index": "getmail.controllers.api.index:IndexController",
    "api.system": "getmail.controllers.api.system:SystemController",
    "api.mail": "getmail.controllers.api.mail:MailController",
    "web.index": "getmail.controllers.web.index:IndexController",
    "web.mail": "getmail.controllers.web.mail:MailController",
    "doc.index": "getmail.controllers.doc:IndexController",
}
