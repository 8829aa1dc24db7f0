"""Form configuration.

FormConfig is a frozen dataclass — immutable after creation, no string-key
dict lookups. ``Form`` builds one from keyword overrides::

    form = Form(model="User", xhtml=True)
    form.config.error_class  # "input-error"
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FormConfig:
    """Per-form settings. Immutable after creation."""

    # Namespacing key for wire names (``User[email]``) and element ids
    model: str = "Form"

    # Markup: self-closing void elements and an unconditional fieldset
    xhtml: bool = False

    # Class prepended to inputs whose field has a recorded error
    error_class: str = "input-error"

    # Textarea defaults
    textarea_cols: int = 30
    textarea_rows: int = 5

    # clean() defaults
    escape_quotes: bool = True
    strip_html: bool = False
