"""Validation result — immutable container for accepted data and errors."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of running a schema over submitted data.

    ``is_valid`` is True when there are no errors. The result is falsy when
    invalid, so you can write::

        result = validate(schema, data)
        if not result:
            return render(errors=result.errors)

    ``errors`` maps each failing field to the message of the first rule it
    failed — one message per field::

        {"email": "Email is invalid"}

    ``data`` holds the submitted values of the schema fields that passed.
    """

    data: dict[str, Any]
    errors: dict[str, str]

    @property
    def is_valid(self) -> bool:
        """True if validation passed with no errors."""
        return not self.errors

    def __bool__(self) -> bool:
        """Falsy when invalid — enables ``if not result:`` pattern."""
        return self.is_valid
