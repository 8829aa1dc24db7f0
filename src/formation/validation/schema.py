"""Validation schemas — which rules run for which field, in what order.

A schema maps field names to an ordered rule chain plus a ``required``
flag. Two literal shapes are accepted, both compiled up front::

    # dict shape: rule name -> message, or (message, *params)
    {
        "password": {
            "notEmpty": "Password is required",
            "checkLength": ("Password must be 6-12 characters", 12, 6),
        },
        "website": {"isWebsite": "Invalid URL", "required": False},
    }

    # tuple shape: (rule name, message, *params)
    {"password": [("notEmpty", "Password is required"), ("checkLength", "...", 12, 6)]}
"""

import inspect
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from formation.errors import ConfigurationError
from formation.validation.registry import RULES, RuleRegistry
from formation.validation.rules import Rule


@dataclass(frozen=True, slots=True)
class Check:
    """One rule application: the rule name, its failure message, extra params."""

    rule: str
    message: str
    params: tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class FieldSchema:
    """The rule chain for one field."""

    checks: tuple[Check, ...] = ()
    required: bool = True


@dataclass(frozen=True, slots=True)
class CompiledField:
    """A field schema with every rule name resolved to its function."""

    name: str
    required: bool
    chain: tuple[tuple[Check, Rule], ...]


type SchemaLike = Mapping[str, FieldSchema | Mapping[str, Any] | list[Any] | tuple[Any, ...] | None]


def compile_schema(schema: SchemaLike, registry: RuleRegistry = RULES) -> tuple[CompiledField, ...]:
    """Parse and resolve a schema, preserving field and rule order.

    Raises:
        UnknownRuleError: A rule name is not in *registry*.
        ConfigurationError: A rule has no message, its parameters do not fit
            the rule, or a field's ``required`` flag is not a bool.
    """
    compiled = []
    for field, spec in schema.items():
        field_schema = parse_field(field, spec)
        chain = tuple((check, _resolve(check, field, registry)) for check in field_schema.checks)
        compiled.append(CompiledField(name=field, required=field_schema.required, chain=chain))
    return tuple(compiled)


def parse_field(field: str, spec: Any) -> FieldSchema:
    """Normalize one field's literal spec into a ``FieldSchema``."""
    if isinstance(spec, FieldSchema):
        return spec
    if not spec:
        return FieldSchema()

    required: Any = True
    checks: list[Check] = []

    if isinstance(spec, Mapping):
        for rule, args in spec.items():
            if rule == "required":
                required = args
                continue
            if isinstance(args, tuple | list):
                checks.append(_check(field, rule, *args))
            else:
                checks.append(_check(field, rule, args))
    elif isinstance(spec, list | tuple):
        for entry in spec:
            if isinstance(entry, Check):
                checks.append(entry)
                continue
            if not isinstance(entry, tuple | list) or not entry:
                msg = f"Invalid rule entry {entry!r} for field {field!r}"
                raise ConfigurationError(msg)
            if entry[0] == "required":
                required = entry[1] if len(entry) > 1 else True
                continue
            checks.append(_check(field, *entry))
    else:
        msg = f"Invalid schema for field {field!r}: {spec!r}"
        raise ConfigurationError(msg)

    if not isinstance(required, bool):
        msg = f"The required flag for field {field!r} must be a bool, got {required!r}"
        raise ConfigurationError(msg)

    return FieldSchema(checks=tuple(checks), required=required)


def _check(field: str, rule: Any, message: Any = None, *params: Any) -> Check:
    if not isinstance(rule, str):
        msg = f"Rule names must be strings, got {rule!r} for field {field!r}"
        raise ConfigurationError(msg)
    if not isinstance(message, str) or not message:
        msg = f"The rule {rule!r} for field {field!r} has no error message"
        raise ConfigurationError(msg)
    return Check(rule=rule, message=message, params=params)


def _resolve(check: Check, field: str, registry: RuleRegistry) -> Rule:
    """Look up *check*'s rule and make sure its parameters can be passed to it."""
    rule = registry.resolve(check.rule, field)
    try:
        signature = inspect.signature(rule)
    except (TypeError, ValueError):
        # Builtins and C callables without introspectable signatures
        return rule
    try:
        signature.bind(None, *check.params)
    except TypeError as exc:
        msg = f"Invalid parameters {check.params!r} for rule {check.rule!r} on field {field!r}: {exc}"
        raise ConfigurationError(msg) from None
    return rule
