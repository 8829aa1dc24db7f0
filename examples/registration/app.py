"""Registration — a sign-up page built and validated with formation.

Demonstrates the full round trip on a single page:

- ``parse_form_data`` for the request body (URL-encoded or multipart)
- ``Form.process`` scoped to the ``User`` model and its submit button
- A dict schema with optional fields and parameterized rules
- Controls that echo submitted values and carry the error class
- kida rendering with the formation filters installed by ``register``

``handle()`` stands in for a request handler: give it a body and content
type and it returns the rendered page plus the cleaned data, if any.

Run:
    python app.py
"""

from kida import Environment

from formation import Form, parse_form_data
from formation.templating.filters import register

SCHEMA = {
    "name": {
        "notEmpty": "Your name is required",
        "isAllChars": "Your name contains invalid characters",
    },
    "email": {
        "notEmpty": "Your email is required",
        "isEmail": "Your email is invalid",
    },
    "website": {
        "isWebsite": "Your website URL is invalid",
        "required": False,
    },
    "password": {
        "notEmpty": "Your password is required",
        "isAlnum": "Your password may only be alpha-numeric",
        "checkLength": ("Password must be between 6-12 characters", 12, 6),
    },
    "age": {
        "isNumeric": "Your age must be numeric",
        "required": False,
    },
    "tos": {
        "notEmpty": "You must agree to the TOS",
    },
}

PAGE = """\
<!DOCTYPE html>
<html>
<head><title>Registration</title></head>
<body>
{% if form.errors %}
<ul>
{% for error in form.errors.values() %}<li>{{ error }}</li>
{% end %}</ul>
{% end %}
{{ form.create(legend="Create an account") }}
<p>{{ form.label("name", "Name") }}<br>{{ form.text("name") }}</p>
<p>{{ form.label("email", "Email") }}<br>{{ form.text("email") }}</p>
<p>{{ form.label("password", "Password") }}<br>{{ form.password("password") }}</p>
<p>{{ form.label("website", "Website") }}<br>{{ form.text("website") }}</p>
<p>{{ form.label("age", "Age") }}<br>{{ form.text("age", size=1) }}</p>
<p{{ form.errors | error_class("tos") | attr("class") }}>{{ form.checkbox("tos", value="yes") }}
{{ form.label("tos", "Do you agree to the Terms of Service?") }}</p>
<p>{{ form.radio("gender", value="male", default=True) }} Male
{{ form.radio("gender", value="female") }} Female</p>
<p>{{ form.submit("Submit", name="User[register]") }}
{{ form.reset("Reset", class_="button") }}</p>
{{ form.close() }}
</body>
</html>
"""

env = register(Environment(autoescape=True))


def handle(
    body: bytes | None = None,
    content_type: str = "application/x-www-form-urlencoded",
) -> tuple[str, dict | None]:
    """Render the page; on a valid submission also return the cleaned data."""
    form = Form(model="User")
    clean = None

    if body is not None:
        data = parse_form_data(body, content_type)
        if form.process(data, data.files, submit="register") and form.validates(SCHEMA):
            clean = form.clean()

    html = env.from_string(PAGE).render({"form": form})
    return html, clean


if __name__ == "__main__":
    print(handle()[0])
