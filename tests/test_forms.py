"""Tests for getmail.controllers.web.forms."""

from getmail.config import AppConfig
from getmail.controllers.web.forms import Field, Form, MailForm


def _form(**data: str) -> MailForm:
    form = MailForm(AppConfig())
    form.set_data({"subject_pattern": "reset", "api_key": "k", "api_token": "t", **data})
    return form


class TestMailForm:
    def test_fields_in_order(self) -> None:
        names = [f.name for f in MailForm(AppConfig())]
        assert names == ["subject_pattern", "api_key", "api_token", "submit"]

    def test_valid(self) -> None:
        form = _form()

        assert form.validate() is True
        assert form.is_valid is True
        assert form.data() == {"subject_pattern": "reset", "api_key": "k", "api_token": "t"}

    def test_values_trimmed(self) -> None:
        assert _form(subject_pattern="  reset  ")["subject_pattern"].value == "reset"

    def test_required_checked_before_validators(self) -> None:
        form = _form(subject_pattern="ab", api_token="")

        assert form.validate() is False
        assert form["api_token"].error == "Cannot be empty."
        assert form["subject_pattern"].error == ""

    def test_validator_error_on_field(self) -> None:
        form = _form(subject_pattern="a*b*c")

        assert form.validate() is False
        assert form["subject_pattern"].error == "Invalid chars in subject pattern."
        assert form.error_message == ""

    def test_min_length_from_config(self) -> None:
        form = MailForm(AppConfig(min_subject_length=8))
        form.set_data({"subject_pattern": "reset", "api_key": "k", "api_token": "t"})

        assert form.validate() is False
        assert form["subject_pattern"].error == "Subject pattern must be at least 8 characters."

    def test_submit_keeps_caption(self) -> None:
        form = _form()
        form.set_data()

        assert form["submit"].value == "Submit"
        assert form["subject_pattern"].value == ""

    def test_set_data_clears_errors(self) -> None:
        form = _form(api_key="")
        form.validate()
        form.set_error("boom")
        form.set_data({"subject_pattern": "reset", "api_key": "k", "api_token": "t"})

        assert form["api_key"].error == ""
        assert form.error_message == ""


class HiddenErrorForm(Form):
    def build_fields(self) -> list[Field]:
        return [
            Field(
                "code",
                required=True,
                hide_error=True,
                validator=lambda _name, value: "" if value == "42" else "Wrong code.",
            )
        ]


class TestHiddenErrors:
    def test_error_moves_to_form_message(self) -> None:
        form = HiddenErrorForm(AppConfig())
        form.set_data({"code": "7"})

        assert form.validate() is False
        assert form.error_message == "Wrong code."
        assert form["code"].error == ""

    def test_passes(self) -> None:
        form = HiddenErrorForm(AppConfig())
        form.set_data({"code": "42"})
        assert form.validate() is True
