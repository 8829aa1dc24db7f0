"""HTML plumbing shared by the form renderer.

Tag templates, attribute serialization, id inflection, and the
``cleanse()`` sanitizer used for both echoed values and ``Form.clean()``.
Everything here is stateless.
"""

import html
import re
from collections.abc import Mapping
from typing import Any

# Void elements carry an (html, xhtml) pair; the rest are single templates
TAGS: dict[str, str | tuple[str, str]] = {
    "form_open": "<form%s>",
    "form_close": "</form>",
    "input": ("<input%s>", "<input%s />"),
    "textarea": "<textarea%s>%s</textarea>",
    "select": "<select%s>%s</select>",
    "option": "<option%s>%s</option>",
    "optgroup_open": "<optgroup%s>",
    "optgroup_close": "</optgroup>",
    "fieldset_open": "<fieldset%s>",
    "fieldset_close": "</fieldset>",
    "legend": "<legend%s>%s</legend>",
    "label": "<label%s>%s</label>",
    "button": "<button%s>%s</button>",
}

_TAG_RE = re.compile(r"<!--.*?-->|<[^>]*>", re.DOTALL)
_INFLECT_RE = re.compile(r"[^-_a-zA-Z0-9]")


def tag(name: str, xhtml: bool = False) -> str:
    """Return the template for *name*, picking the XHTML form of void tags."""
    template = TAGS[name]
    if isinstance(template, tuple):
        return template[1] if xhtml else template[0]
    return template


def inflect(value: Any) -> str:
    """Strip everything but ``[-_a-zA-Z0-9]`` and upper-case the first letter.

    Used to build element ids: ``inflect("first name")`` → ``"Firstname"``.
    """
    cleaned = _INFLECT_RE.sub("", str(value))
    return cleaned[:1].upper() + cleaned[1:]


def strip_tags(value: str) -> str:
    """Remove HTML tags and comments, keeping their text content."""
    return _TAG_RE.sub("", value)


def escape_entities(value: str) -> str:
    """Escape ``& < > "`` — single quotes are left alone."""
    return html.escape(value, quote=False).replace('"', "&quot;")


def cleanse(value: Any, escape_quotes: bool = True, strip_html: bool = False) -> Any:
    """Trim, optionally strip tags, optionally escape a submitted value.

    Lists and mappings are cleansed element-wise. Numbers are converted to
    strings first; any other object (e.g. a file upload) passes through.
    """
    if isinstance(value, list | tuple):
        return [cleanse(v, escape_quotes, strip_html) for v in value]
    if isinstance(value, Mapping):
        return {k: cleanse(v, escape_quotes, strip_html) for k, v in value.items()}
    if isinstance(value, int | float) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return value

    value = value.strip()
    if strip_html:
        value = strip_tags(value)
    if escape_quotes:
        value = escape_entities(value)
    return value


def content(value: Any) -> str:
    """Element text: markup objects pass through, everything else is escaped."""
    if hasattr(value, "__html__"):
        return value.__html__()
    return html.escape(str(value), quote=False)


def attributes(attrs: Mapping[str, Any]) -> str:
    """Serialize attributes to `` key="value"`` pairs.

    Every value except ``value`` itself is stripped of tags and escaped.
    ``value`` is emitted as-is: echoed submissions are cleansed during
    value resolution and must not be escaped twice. ``None`` drops the key.
    """
    parts = []
    for name, raw in attrs.items():
        if raw is None:
            continue
        if name == "value":
            rendered = _scalar(raw)
        else:
            rendered = cleanse(_scalar(raw), True, True)
        parts.append(f'{name}="{rendered}"')
    if not parts:
        return ""
    return " " + " ".join(parts)


def _scalar(raw: Any) -> str:
    if raw is True:
        return "1"
    if raw is False:
        return ""
    return str(raw)
