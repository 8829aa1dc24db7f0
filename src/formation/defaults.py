"""Declared defaults for form controls.

A control's ``default`` attribute means one of three things, kept apart
here so they cannot be confused:

- ``NoDefault`` — nothing was declared.
- ``Value(v)`` — fall back to ``v`` when nothing was submitted.
- ``MarkSelected`` — declared as ``default=True``; whichever checkbox or
  radio carries it is checked when nothing was submitted, regardless of
  its own value.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class NoDefault:
    pass


@dataclass(frozen=True, slots=True)
class Value:
    value: Any


@dataclass(frozen=True, slots=True)
class MarkSelected:
    pass


type Default = NoDefault | Value | MarkSelected

NO_DEFAULT = NoDefault()
MARK_SELECTED = MarkSelected()


def as_default(raw: Any) -> Default:
    """Convert a raw ``default`` attribute into a ``Default``.

    ``None`` means no default and the literal ``True`` (identity, not
    truthiness) marks the control as fallback-selected.
    """
    if isinstance(raw, NoDefault | Value | MarkSelected):
        return raw
    if raw is None:
        return NO_DEFAULT
    if raw is True:
        return MARK_SELECTED
    return Value(raw)
