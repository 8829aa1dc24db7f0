"""Template filters for rendering formation forms with kida.

Register them on an Environment together with the form itself::

    env = Environment(loader=FileSystemLoader("templates"), autoescape=True)
    register(env, form)

    {{ form.text("email") }}
    {% if form.errors | field_error("email") %}
      <span class="{{ form.errors | error_class("email") }}">{{ form.errors | field_error("email") }}</span>
    {% end %}
"""

import html
from typing import Any

from kida.template import Markup


def field_error(errors: Any, field_name: str) -> str:
    """The error message recorded for *field_name*, or ``""``.

    Safely handles *errors* being None or not a mapping.
    """
    if not isinstance(errors, dict):
        return ""
    message = errors.get(field_name)
    return str(message) if message else ""


def error_class(errors: Any, field_name: str, cls: str = "input-error") -> str:
    """*cls* when *field_name* has an error, else ``""``."""
    return cls if field_error(errors, field_name) else ""


def attr(value: Any, name: str) -> str | Markup:
    """Render `` name="value"`` for a wrapper element, or nothing for a falsy value.

    Chained after ``error_class`` it flags the element around a control that
    failed validation::

        <p{{ form.errors | error_class("tos") | attr("class") }}>{{ form.checkbox("tos", value="yes") }}</p>
    """
    if not value:
        return ""
    escaped = html.escape(str(value), quote=True)
    return Markup(f' {name}="{escaped}"')


BUILTIN_FILTERS: dict[str, Any] = {
    "attr": attr,
    "error_class": error_class,
    "field_error": field_error,
}


def register(env: Any, form: Any = None) -> Any:
    """Install the filters on a kida Environment, optionally exposing *form*.

    Returns the environment for chaining.
    """
    env.update_filters(BUILTIN_FILTERS)
    if form is not None:
        env.add_global("form", form)
    return env
