"""Form — builds form controls and validates their submitted values.

One ``Form`` instance holds one submission: the submitted data scoped to
its model, the error map from ``validates()``, and the cleaned copy from
``clean()``. Every render method consults that state, so controls echo
back what the user typed and pick up an error class after a failed
validation::

    form = Form(model="User")

    if form.process(post, files):
        if form.validates({
            "email": {"notEmpty": "Email is required", "isEmail": "Email is invalid"},
            "website": {"isWebsite": "Website is invalid", "required": False},
        }):
            save(form.clean())

    form.create({"legend": "Sign up"})
    form.text("email")
    form.radio("gender", value="male", default=True)
    form.close()

Render methods return kida ``Markup`` so autoescaping templates emit them
untouched.
"""

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from kida.template import Markup

from formation import markup
from formation._internal.multimap import MultiValueMapping
from formation.config import FormConfig
from formation.defaults import Default, MarkSelected, NoDefault, Value, as_default
from formation.errors import MissingValueError
from formation.http.forms import FileUpload, as_upload, split_key
from formation.validation import RULES, RuleRegistry, validate
from formation.validation.schema import SchemaLike

logger = logging.getLogger("formation.form")

_CHECKABLE = frozenset({"checkbox", "radio"})
_STATES = ("disabled", "readonly", "multiple")
_FILE_KEYS = frozenset({"name", "type", "tmp_name", "tmp_path", "size", "error"})


class Form:
    """Form builder and validator for one model.

    Args:
        config: Base configuration. Defaults to ``FormConfig()``.
        registry: Rule registry used by ``validates()``.
        **overrides: Any ``FormConfig`` field, e.g. ``model="User"``.
    """

    def __init__(
        self,
        config: FormConfig | None = None,
        *,
        registry: RuleRegistry = RULES,
        **overrides: Any,
    ) -> None:
        config = dataclasses.replace(config or FormConfig(), **overrides)
        model = config.model
        if not model or str(model).isdigit():
            model = "Form"
        self.config = dataclasses.replace(config, model=markup.inflect(model))
        self.registry = registry
        self._fieldset_open = False
        self.flush()

    # -- state --------------------------------------------------------------

    @property
    def model(self) -> str:
        return self.config.model

    @property
    def errors(self) -> dict[str, str]:
        """Field name → error message."""
        return dict(self._errors)

    @property
    def cleaned(self) -> dict[str, Any]:
        """The last result of ``clean()``."""
        return dict(self._cleaned)

    def flush(self) -> None:
        """Forget submitted data, errors and cleaned values."""
        self._data: dict[str, Any] = {}
        self._errors: dict[str, str] = {}
        self._cleaned: dict[str, Any] = {}

    def get(self, key: str | None = None) -> Any:
        """Return a submitted value, or all submitted data when *key* is None."""
        if key is None:
            return dict(self._data)
        return self._data.get(key)

    def error(self, field: str, message: str) -> None:
        """Record an error for *field*, replacing any previous one."""
        self._errors[field] = message

    def get_class(self, field: str, cls: str | None = None) -> str:
        """The error class if *field* has an error, else ``""``."""
        if field in self._errors:
            return cls if cls is not None else self.config.error_class
        return ""

    @staticmethod
    def inflect(value: Any) -> str:
        return markup.inflect(value)

    @staticmethod
    def cleanse(value: Any, escape_quotes: bool = True, strip_html: bool = False) -> Any:
        return markup.cleanse(value, escape_quotes, strip_html)

    # -- submission ---------------------------------------------------------

    def process(
        self,
        data: Mapping[str, Any],
        files: Mapping[str, Any] | None = None,
        submit: str | None = None,
    ) -> bool:
        """Read this model's fields from request data.

        *data* may be nested (``{"User": {"email": ...}}``) or flat
        (``{"User[email]": ...}``); multi-valued mappings supply lists for
        ``User[tags][]`` keys. *files* is keyed the same way, or uses the
        column-major layout of PHP's ``$_FILES``.

        Returns True when the named *submit* button is among the submitted
        fields, or, without *submit*, when anything was submitted for this
        model.
        """
        submitted = _scope(data, self.model)
        if files:
            for field, upload in _scope_files(files, self.model).items():
                submitted[field] = upload
        self._data = submitted
        logger.debug("Processed %d fields for model %r", len(submitted), self.model)

        if submit:
            return submit in self._data
        return bool(self._data)

    def validates(self, schema: SchemaLike | None = None) -> bool:
        """Run *schema* over the submitted data; True when no errors are recorded.

        Errors are merged into the form's error map, so errors added with
        ``error()`` also make this return False.

        Raises:
            ConfigurationError: The schema is malformed or names an unknown rule.
        """
        if schema:
            result = validate(schema, self._data, self.registry)
            self._errors.update(result.errors)
        return not self._errors

    def clean(
        self,
        fields: str | Iterable[str] | None = None,
        escape_quotes: bool | None = None,
        strip_html: bool | None = None,
    ) -> dict[str, Any]:
        """Sanitize submitted values into ``cleaned`` and return them.

        *fields* is one field name or several; only fields present in the
        submission are included. Submitted data itself is never modified.
        """
        if escape_quotes is None:
            escape_quotes = self.config.escape_quotes
        if strip_html is None:
            strip_html = self.config.strip_html

        if isinstance(fields, str):
            fields = [fields]
        for field in self._data if fields is None else fields:
            if field not in self._data:
                continue
            raw = self._data[field]
            if raw == "":
                self._cleaned[field] = ""
            else:
                self._cleaned[field] = markup.cleanse(raw, escape_quotes, strip_html)
        return self.cleaned

    def value(self, control: str, field: str, candidate: Any = "", default: Any = None) -> Any:
        """Resolve what a control displays.

        Text-like controls return the cleansed submitted value or the
        default. Radios and checkboxes return whether *candidate* is
        selected. Selects return the raw submitted value or the default.
        """
        default = as_default(default)
        present = field in self._data and self._data[field] is not None
        submitted = self._data.get(field)

        if control == "select":
            if present:
                return submitted
            return default.value if isinstance(default, Value) else None

        if control in _CHECKABLE:
            if control == "checkbox" and isinstance(submitted, list | tuple):
                return any(_loose_equal(item, candidate) for item in submitted)
            if present:
                return _loose_equal(submitted, candidate)
            return _default_selects(default, candidate)

        if present:
            return markup.cleanse(submitted)
        return default.value if isinstance(default, Value) else ""

    # -- form tags ----------------------------------------------------------

    def create(self, attributes: Mapping[str, Any] | None = None, **extra: Any) -> Markup:
        """Opening ``<form>`` tag, plus a fieldset when xhtml or a legend asks for one."""
        attrs = _merge(attributes, extra)
        attrs = {**attrs, **{k: v for k, v in self._form_defaults().items() if k not in attrs}}

        kind = attrs.pop("type", None)
        if kind == "file":
            attrs["enctype"] = "multipart/form-data"
        elif kind == "app":
            attrs["enctype"] = "application/x-www-form-urlencoded"
        legend = attrs.pop("legend", None)

        output = self._tag("form_open") % markup.attributes(attrs)
        self._fieldset_open = bool(self.config.xhtml or legend)
        if self._fieldset_open:
            output += self._tag("fieldset_open") % ""
            if legend:
                output += self._tag("legend") % ("", markup.content(legend))
        return Markup(output)

    def close(self) -> Markup:
        """Closing tag; closes the fieldset if ``create()`` opened one."""
        output = self._tag("form_close")
        if self._fieldset_open:
            output = self._tag("fieldset_close") + output
            self._fieldset_open = False
        return Markup(output)

    # -- inputs -------------------------------------------------------------

    def text(self, name: str, attributes: Mapping[str, Any] | None = None, **extra: Any) -> Markup:
        return self._void(self._input(name, "text", _merge(attributes, extra)))

    def password(self, name: str, attributes: Mapping[str, Any] | None = None, **extra: Any) -> Markup:
        return self._void(self._input(name, "password", _merge(attributes, extra)))

    def hidden(self, name: str, attributes: Mapping[str, Any] | None = None, **extra: Any) -> Markup:
        return self._void(self._input(name, "hidden", _merge(attributes, extra)))

    def file(self, name: str, attributes: Mapping[str, Any] | None = None, **extra: Any) -> Markup:
        attrs = self._input(name, "file", _merge(attributes, extra))
        attrs.pop("value", None)
        return self._void(attrs)

    def checkbox(self, name: str, attributes: Mapping[str, Any] | None = None, **extra: Any) -> Markup:
        """Checkbox input. ``value`` is required; ``multiple=True`` posts a list."""
        return self._void(self._input(name, "checkbox", _merge(attributes, extra)))

    def radio(self, name: str, attributes: Mapping[str, Any] | None = None, **extra: Any) -> Markup:
        """Radio input. ``value`` is required and suffixes the element id."""
        return self._void(self._input(name, "radio", _merge(attributes, extra)))

    def textarea(self, name: str, attributes: Mapping[str, Any] | None = None, **extra: Any) -> Markup:
        attrs = self._input(
            name,
            "textarea",
            _merge(attributes, extra),
            cols=self.config.textarea_cols,
            rows=self.config.textarea_rows,
        )
        value = attrs.pop("value", "")
        attrs.pop("type", None)
        return Markup(self._tag("textarea") % (markup.attributes(attrs), value))

    def select(
        self,
        name: str,
        options: Mapping[Any, Any],
        attributes: Mapping[str, Any] | None = None,
        **extra: Any,
    ) -> Markup:
        """Select box. Nested mappings in *options* become optgroups.

        Selection: the submitted value, else ``value``, else ``default``,
        else the first option.
        """
        attrs = _merge(attributes, extra)
        explicit = attrs.get("value")
        if explicit not in (None, ""):
            attrs["default"] = explicit
        elif attrs.get("default") is None:
            attrs["default"] = next(iter(options), None)

        attrs = self._input(name, "select", attrs)
        selected = attrs.pop("value", None)
        attrs.pop("type", None)
        return Markup(self._tag("select") % (markup.attributes(attrs), self._options(options, selected)))

    # -- labels and buttons ---------------------------------------------------

    def label(self, name: str, title: Any, attributes: Mapping[str, Any] | None = None, **extra: Any) -> Markup:
        attrs = _merge(attributes, extra)
        attrs.setdefault("for", self.model + markup.inflect(name))
        return Markup(self._tag("label") % (markup.attributes(attrs), markup.content(title)))

    def button(self, text: Any, attributes: Mapping[str, Any] | None = None, **extra: Any) -> Markup:
        attrs = {**_merge(attributes, extra), "type": "button"}
        return Markup(self._tag("button") % (markup.attributes(attrs), markup.content(text)))

    def submit(self, text: Any = "Submit", attributes: Mapping[str, Any] | None = None, **extra: Any) -> Markup:
        attrs = _merge(attributes, extra)
        attrs.setdefault("id", f"{self.model}SubmitButton")
        attrs.setdefault("type", "submit")
        return Markup(self._tag("button") % (markup.attributes(attrs), markup.content(text)))

    def reset(self, text: Any = "Reset", attributes: Mapping[str, Any] | None = None, **extra: Any) -> Markup:
        attrs = _merge(attributes, extra)
        attrs.setdefault("id", f"{self.model}ResetButton")
        attrs.setdefault("type", "reset")
        return Markup(self._tag("button") % (markup.attributes(attrs), markup.content(text)))

    def image(self, title: str, attributes: Mapping[str, Any] | None = None, **extra: Any) -> Markup:
        attrs = _merge(attributes, extra)
        for key, value in (
            ("id", f"{self.model}ImageButton"),
            ("alt", title),
            ("type", "image"),
            ("src", ""),
        ):
            attrs.setdefault(key, value)
        return self._void(attrs)

    # -- internals ----------------------------------------------------------

    def _tag(self, name: str) -> str:
        return markup.tag(name, self.config.xhtml)

    def _void(self, attrs: Mapping[str, Any]) -> Markup:
        return Markup(self._tag("input") % markup.attributes(attrs))

    def _form_defaults(self) -> dict[str, str]:
        return {"id": f"{self.model}Form", "action": "", "method": "post"}

    def _input(self, name: str, control: str, attributes: dict[str, Any], **params: Any) -> dict[str, Any]:
        """Merge caller attributes over the control's own and resolve its value.

        Caller attributes win, except ``name`` and ``type`` which are forced.
        """
        attrs = dict(attributes)
        for key, value in params.items():
            attrs.setdefault(key, value)
        attrs["name"] = f"{self.model}[{name}]"
        attrs["type"] = control

        if "id" not in attrs:
            attrs["id"] = self.model + markup.inflect(name)

        default: Default = as_default(attrs.pop("default", None))
        candidate = attrs.get("value", "")
        if candidate is None:
            candidate = ""

        if control in _CHECKABLE:
            if candidate == "":
                raise MissingValueError(name, control)
            if control == "radio":
                attrs["id"] += markup.inflect(candidate)
            attrs["value"] = candidate
            if self.value(control, name, candidate, default):
                attrs["checked"] = "checked"
        else:
            if isinstance(default, NoDefault) and candidate != "":
                default = Value(candidate)
            attrs["value"] = self.value(control, name, candidate, default)

        for state in _STATES:
            if state not in attrs:
                continue
            flag = attrs[state]
            if flag is not True and flag != state:
                del attrs[state]
                continue
            attrs[state] = state
            if state == "multiple":
                if control == "checkbox":
                    attrs["name"] += "[]"
                    attrs["id"] += markup.inflect(candidate)
                    del attrs["multiple"]
                elif control == "select":
                    attrs["name"] += "[]"

        error_class = self.get_class(name)
        if error_class:
            existing = attrs.get("class")
            attrs["class"] = f"{error_class} {existing}" if existing else error_class

        return attrs

    def _options(self, options: Mapping[Any, Any], selected: Any) -> str:
        if not isinstance(selected, list | tuple):
            selected = [selected]
        chosen = {_text(item) for item in selected if item is not None}

        output = []
        for value, label in options.items():
            if isinstance(label, Mapping):
                output.append(self._tag("optgroup_open") % markup.attributes({"label": value}))
                output.append(self._options(label, selected))
                output.append(self._tag("optgroup_close"))
                continue
            attrs: dict[str, Any] = {"value": markup.escape_entities(_text(value))}
            if _text(value) in chosen:
                attrs["selected"] = "selected"
            output.append(self._tag("option") % (markup.attributes(attrs), markup.content(label)))
        return "".join(output)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _merge(attributes: Mapping[str, Any] | None, extra: Mapping[str, Any]) -> dict[str, Any]:
    """Combine an attribute mapping with keyword attributes (``class_`` → ``class``)."""
    merged = dict(attributes or {})
    for key, value in extra.items():
        merged[key.rstrip("_").replace("_", "-")] = value
    return merged


def _text(value: Any) -> str:
    if value is True:
        return "1"
    if value is False or value is None:
        return ""
    return str(value)


def _loose_equal(left: Any, right: Any) -> bool:
    return left == right or _text(left) == _text(right)


def _default_selects(default: Default, candidate: Any) -> bool:
    if isinstance(default, MarkSelected):
        return True
    if isinstance(default, Value):
        return _loose_equal(candidate, default.value)
    return False


def _scope(data: Mapping[str, Any], model: str) -> dict[str, Any]:
    """Pull *model*'s fields out of nested or flat request data."""
    nested = data.get(model) if model in data else None
    if isinstance(nested, Mapping):
        return {field: _descriptor(value) for field, value in nested.items()}

    multi = isinstance(data, MultiValueMapping)
    scoped: dict[str, Any] = {}
    for key in data:
        owner, field, is_list = split_key(key)
        if owner != model or field is None:
            continue
        if is_list:
            scoped[field] = data.get_list(key) if multi else _as_list(data[key])
        else:
            scoped[field] = _descriptor(data[key])
    return scoped


def _scope_files(files: Mapping[str, Any], model: str) -> dict[str, FileUpload]:
    """Pull *model*'s uploads out of nested, flat or column-major file maps."""
    entry = files.get(model) if model in files else None
    if isinstance(entry, Mapping):
        if entry and set(entry) <= _FILE_KEYS and all(isinstance(v, Mapping) for v in entry.values()):
            # Column-major: {"name": {field: ...}, "tmp_name": {field: ...}, ...}
            rows: dict[str, dict[str, Any]] = {}
            for column, values in entry.items():
                for field, value in values.items():
                    rows.setdefault(field, {})[column] = value
            return {field: FileUpload.from_mapping(row) for field, row in rows.items()}
        return {field: _as_upload(upload) for field, upload in entry.items()}

    scoped = {}
    for key, upload in files.items():
        owner, field, _ = split_key(key)
        if owner == model and field is not None:
            scoped[field] = _as_upload(upload)
    return scoped


def _descriptor(value: Any) -> Any:
    """File descriptor mappings become ``FileUpload``; other values are kept."""
    upload = as_upload(value)
    return value if upload is None else upload


def _as_upload(upload: Any) -> FileUpload:
    if isinstance(upload, FileUpload):
        return upload
    return FileUpload.from_mapping(upload)


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, list | tuple):
        return list(value)
    return [value]
