"""Rule registry — rule names mapped to check functions.

Built once at import time. Schemas refer to rules by name; an unknown name
raises ``UnknownRuleError`` when the schema is compiled, never halfway
through validating a submission.

Register your own rules on a copy so the shared default stays intact::

    registry = RULES.copy()

    @registry.register("isSlug")
    def is_slug(value):
        return re.fullmatch(r"[a-z0-9-]+", value) is not None
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping

from formation.errors import UnknownRuleError
from formation.validation import images, rules
from formation.validation.rules import Rule


class RuleRegistry(Mapping[str, Rule]):
    """Read-only mapping of rule names to predicates, plus ``register``."""

    __slots__ = ("_rules",)

    def __init__(self, entries: Mapping[str, Rule] | None = None) -> None:
        self._rules: dict[str, Rule] = dict(entries or {})

    def __getitem__(self, name: str) -> Rule:
        return self._rules[name]

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def resolve(self, name: str, field: str | None = None) -> Rule:
        """Return the rule called *name* or raise ``UnknownRuleError``."""
        try:
            return self._rules[name]
        except KeyError:
            raise UnknownRuleError(name, field) from None

    def register(self, name: str) -> Callable[[Rule], Rule]:
        """Decorator adding a rule under *name* (replacing any existing one)."""

        def decorator(func: Rule) -> Rule:
            self._rules[name] = func
            return func

        return decorator

    def copy(self) -> RuleRegistry:
        return RuleRegistry(self._rules)


RULES = RuleRegistry(
    {
        "notEmpty": rules.not_empty,
        "isAlpha": rules.is_alpha,
        "isAlnum": rules.is_alnum,
        "isNumeric": rules.is_numeric,
        "isAllChars": rules.is_all_chars,
        "checkLength": rules.check_length,
        "checkMatch": rules.check_match,
        "custom": rules.custom,
        "isEmail": rules.is_email,
        "isWebsite": rules.is_website,
        "isIp": rules.is_ip,
        "isPhone": rules.is_phone,
        "isDate": rules.is_date,
        "isTime": rules.is_time,
        "isDecimal": rules.is_decimal,
        "inList": rules.in_list,
        "inRange": rules.in_range,
        "isBoolean": rules.is_boolean,
        "isFile": rules.is_file,
        "isExt": rules.is_ext,
        "minFilesize": rules.min_filesize,
        "maxFilesize": rules.max_filesize,
        "minWidth": images.min_width,
        "minHeight": images.min_height,
        "maxWidth": images.max_width,
        "maxHeight": images.max_height,
    }
)
