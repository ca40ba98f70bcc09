"""Declarative HTML forms with two-pass validation.

Validation first checks every required field, then runs the custom
validators. Running the passes separately means a missing password is
reported before a wrong username is, so an attacker cannot learn which
credential was rejected. Fields with ``hide_error`` report their
validator error as the form-level message instead of next to the field.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from getmail.config import AppConfig
from getmail.mail.client import check_subject_pattern

type Validator = Callable[[str, str], str]


@dataclass(slots=True)
class Field:
    """One form field. Mutable: holds the submitted value and its error."""

    name: str
    type: str = "text"
    label: str = ""
    placeholder: str = ""
    value: str = ""
    required: bool = False
    error: str = ""
    hide_error: bool = False
    validator: Validator | None = field(default=None, repr=False)


class Form:
    """Base form. Subclasses define ``build_fields()``."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.fields: dict[str, Field] = {f.name: f for f in self.build_fields()}
        self.error_message = ""
        self.is_valid = False

    def build_fields(self) -> list[Field]:
        return []

    def __getitem__(self, name: str) -> Field:
        return self.fields[name]

    def __iter__(self):
        return iter(self.fields.values())

    def set_data(self, data: Mapping[str, Any] | None = None) -> None:
        """Load submitted values, trimmed. ``set_data()`` clears the form.

        Submit buttons keep their caption.
        """
        data = data or {}
        for f in self.fields.values():
            if f.type == "submit":
                continue
            f.value = str(data.get(f.name) or "").strip()
            f.error = ""
        self.error_message = ""

    def set_error(self, message: str) -> None:
        self.error_message = message
        self.is_valid = False

    def validate(self) -> bool:
        """Validate, stopping at the first error."""
        for f in self.fields.values():
            if f.required and f.value == "":
                f.error = "Cannot be empty."
                self.is_valid = False
                return False

        for f in self.fields.values():
            if f.validator is None:
                continue
            error = f.validator(f.name, f.value)
            if error:
                if f.hide_error:
                    self.error_message = error
                else:
                    f.error = error
                self.is_valid = False
                return False

        self.is_valid = True
        return True

    def data(self) -> dict[str, str]:
        """Current values, without submit buttons."""
        return {f.name: f.value for f in self.fields.values() if f.type != "submit"}


class MailForm(Form):
    """Subject pattern plus API credentials, posted through to ``/api/mail``."""

    def build_fields(self) -> list[Field]:
        min_length = self.config.min_subject_length
        return [
            Field(
                "subject_pattern",
                label="Subject Pattern",
                placeholder="E.g. password",
                required=True,
                validator=lambda _name, value: check_subject_pattern(value, min_length),
            ),
            Field("api_key", label="API Key", required=True, hide_error=True),
            Field("api_token", type="password", label="API Token", required=True, hide_error=True),
            Field("submit", type="submit", value="Submit"),
        ]
