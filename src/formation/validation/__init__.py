"""Schema-driven validation — named rules, one message per failing field.

Usage::

    from formation.validation import validate

    result = validate(
        {
            "email": {"notEmpty": "Email is required", "isEmail": "Email is invalid"},
            "age": {"inRange": ("Age must be 18-99", 99, 18), "required": False},
        },
        {"email": "foo@bar.com", "age": "27"},
    )
    if not result:
        ...  # result.errors == {"field": "message"}

Each field's rules run in declared order and stop at the first failure.
Every field is processed regardless of failures in other fields. A field
marked ``required: False`` that was left empty skips its rules entirely.
"""

import logging
from collections.abc import Mapping
from typing import Any

from formation.http.forms import as_upload
from formation.validation.registry import RULES, RuleRegistry
from formation.validation.result import ValidationResult
from formation.validation.rules import Rule
from formation.validation.schema import (
    Check,
    CompiledField,
    FieldSchema,
    SchemaLike,
    compile_schema,
)

__all__ = [
    "RULES",
    "Check",
    "FieldSchema",
    "Rule",
    "RuleRegistry",
    "ValidationResult",
    "compile_schema",
    "is_blank",
    "validate",
]

logger = logging.getLogger("formation.validation")


def is_blank(value: Any) -> bool:
    """True for a value that counts as "not submitted" for optional fields.

    Files count as blank when no temp file was received.
    """
    upload = as_upload(value)
    if upload is not None:
        return not upload.tmp_path
    if value is None:
        return True
    if isinstance(value, str | list | tuple | Mapping):
        return len(value) == 0
    return False


def validate(
    schema: SchemaLike,
    data: Mapping[str, Any],
    registry: RuleRegistry = RULES,
) -> ValidationResult:
    """Validate submitted data against a schema.

    Args:
        schema: Field names mapped to rule chains (see
            ``formation.validation.schema``).
        data: The submitted values for one form, already scoped to its model.
        registry: Where rule names are looked up.

    Returns:
        A ``ValidationResult`` with ``.errors`` (field → first failing
        message) and ``.data`` (values of the fields that passed).

    Raises:
        ConfigurationError: The schema is malformed or names an unknown
            rule. Raised before any rule runs.
    """
    compiled = compile_schema(schema, registry)

    errors: dict[str, str] = {}
    accepted: dict[str, Any] = {}

    for field in compiled:
        value = data.get(field.name)
        message = _run_chain(field, value)
        if message is not None:
            errors[field.name] = message
        elif field.name in data:
            accepted[field.name] = value

    return ValidationResult(data=accepted, errors=errors)


def _run_chain(field: CompiledField, value: Any) -> str | None:
    """Return the message of the first failing rule, or None."""
    if not field.required and is_blank(value):
        return None

    for check, rule in field.chain:
        if not rule(value, *check.params):
            logger.debug("Field %r failed rule %r", field.name, check.rule)
            return check.message
    return None
