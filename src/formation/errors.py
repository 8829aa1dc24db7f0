"""Formation exception hierarchy.

Validation failures are never raised; they are collected into error maps.
Everything here signals a broken integration: a schema naming a rule that
does not exist, a checkbox rendered without a value, a missing optional
dependency.
"""


class FormationError(Exception):
    """Base for all formation-specific errors."""


class ConfigurationError(FormationError):
    """Raised when a form, schema, or environment is set up incorrectly."""


class UnknownRuleError(ConfigurationError):
    """A schema references a rule name that is not in the registry."""

    def __init__(self, rule: str, field: str | None = None) -> None:
        self.rule = rule
        self.field = field
        if field is None:
            msg = f"Unknown validation rule {rule!r}"
        else:
            msg = f"Unknown validation rule {rule!r} for field {field!r}"
        super().__init__(msg)


class MissingValueError(ConfigurationError):
    """A checkbox or radio input was rendered without a ``value`` attribute."""

    def __init__(self, field: str, control: str) -> None:
        self.field = field
        self.control = control
        super().__init__(
            f"The {control} input {field!r} requires a value attribute."
        )
