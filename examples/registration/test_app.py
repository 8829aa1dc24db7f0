"""Tests for the registration example — rendering, validation, echo-back."""

from urllib.parse import urlencode


def _body(**overrides: str) -> bytes:
    fields = {
        "name": "Miles Johnson",
        "email": "miles@example.com",
        "password": "secret123",
        "website": "",
        "age": "",
        "tos": "yes",
        "gender": "male",
        "register": "Submit",
    }
    fields.update(overrides)
    return urlencode({f"User[{key}]": value for key, value in fields.items()}).encode()


class TestRegistrationPage:
    def test_blank_page(self, example_module) -> None:
        html, clean = example_module.handle()
        assert clean is None
        assert '<form id="UserForm" action="" method="post"><fieldset>' in html
        assert "<legend>Create an account</legend>" in html
        assert '<label for="UserEmail">Email</label>' in html
        assert '<input name="User[email]" type="text" id="UserEmail" value="">' in html
        assert "</fieldset></form>" in html
        assert "<ul>" not in html

    def test_default_radio_checked(self, example_module) -> None:
        html, _ = example_module.handle()
        assert 'id="UserGenderMale" checked="checked"' in html
        assert 'id="UserGenderFemale">' in html


class TestRegistrationSubmit:
    def test_valid_submission(self, example_module) -> None:
        html, clean = example_module.handle(_body())
        assert clean is not None
        assert clean["name"] == "Miles Johnson"
        assert clean["email"] == "miles@example.com"
        assert clean["website"] == ""
        assert "<ul>" not in html

    def test_invalid_submission_lists_errors(self, example_module) -> None:
        html, clean = example_module.handle(_body(email="nope", password="abc", tos=""))
        assert clean is None
        assert "<li>Your email is invalid</li>" in html
        assert "<li>Password must be between 6-12 characters</li>" in html
        assert "<li>You must agree to the TOS</li>" in html
        assert '<p class="input-error"><input value="yes" name="User[tos]"' in html

    def test_failed_fields_echo_and_flag(self, example_module) -> None:
        html, _ = example_module.handle(_body(email="nope"))
        assert 'id="UserEmail" value="nope" class="input-error"' in html
        assert 'id="UserName" value="Miles Johnson">' in html

    def test_submitted_radio_overrides_default(self, example_module) -> None:
        html, _ = example_module.handle(_body(gender="female"))
        assert 'id="UserGenderFemale" checked="checked"' in html
        assert 'id="UserGenderMale">' in html

    def test_empty_submit_value_still_submits(self, example_module) -> None:
        _, clean = example_module.handle(_body(register=""))
        assert clean is not None

    def test_missing_submit_button(self, example_module) -> None:
        body = urlencode({"User[name]": "Miles"}).encode()
        html, clean = example_module.handle(body)
        assert clean is None
        assert "<ul>" not in html
