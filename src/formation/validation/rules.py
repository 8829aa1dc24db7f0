"""Built-in validation rules.

Each rule is a pure predicate over the submitted value plus rule-specific
parameters::

    def rule(value: Any, *params) -> bool:
        '''True when the value passes.'''

Rules are looked up by name (``notEmpty``, ``checkLength``, ...) through
``formation.validation.registry.RULES``; call them directly in your own code
with their snake_case names.
"""

import re
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any

from formation.http.forms import as_upload

type Rule = Callable[..., bool]

DEFAULT_EXTENSIONS = frozenset({"gif", "jpeg", "png", "jpg"})
DEFAULT_MAX_FILESIZE = 5 * 1024 * 1024

_ALL_CHARS = "!@#$%^&*()-_=+~`[]{}\\|;:\"'?/.><,"


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    return str(value)


def _charset(base: str, exceptions: str | Iterable[str] = ()) -> re.Pattern[str]:
    extra = exceptions if isinstance(exceptions, str) else "".join(exceptions)
    return re.compile(f"[{base}{re.escape(extra)}]+")


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def not_empty(value: Any) -> bool:
    """Value is present and not the empty string. ``"0"`` is not empty."""
    upload = as_upload(value)
    if upload is not None:
        return upload.uploaded
    if isinstance(value, list | tuple | Mapping):
        return len(value) > 0
    return _text(value) != ""


# ---------------------------------------------------------------------------
# Character classes
# ---------------------------------------------------------------------------


def is_alpha(value: Any, exceptions: str | Iterable[str] = ()) -> bool:
    """Letters and whitespace, plus any literal *exceptions*."""
    return _charset(r"a-zA-Z\s", exceptions).fullmatch(_text(value)) is not None


def is_alnum(value: Any, exceptions: str | Iterable[str] = ()) -> bool:
    """Letters, digits and whitespace, plus any literal *exceptions*."""
    return _charset(r"a-zA-Z0-9\s", exceptions).fullmatch(_text(value)) is not None


def is_numeric(value: Any, exceptions: str | Iterable[str] = ()) -> bool:
    """Digits and whitespace, plus any literal *exceptions*."""
    return _charset(r"0-9\s", exceptions).fullmatch(_text(value)) is not None


def is_all_chars(value: Any) -> bool:
    """Letters, digits, whitespace and the punctuation of a US keyboard."""
    return _charset(r"\s0-9a-zA-Z", _ALL_CHARS).fullmatch(_text(value)) is not None


# ---------------------------------------------------------------------------
# Length and comparison
# ---------------------------------------------------------------------------


def check_length(value: Any, maximum: int = 2500, minimum: int = 1) -> bool:
    """Character count (not bytes) within ``[minimum, maximum]``."""
    return int(minimum) <= len(_text(value)) <= int(maximum)


def check_match(value: Any, match: Any, strict: bool = False) -> bool:
    """Equal to *match*; *strict* also requires the same type."""
    if strict:
        return type(value) is type(match) and value == match
    return value == match or _text(value) == _text(match)


def custom(value: Any, expression: str | re.Pattern[str] = "") -> bool:
    """The whole value matches the caller's regular expression."""
    if not expression:
        return False
    return re.fullmatch(expression, _text(value)) is not None


def in_list(value: Any, choices: Iterable[Any] = ()) -> bool:
    """Member of *choices*, comparing type as well as value."""
    if isinstance(choices, str) or not isinstance(choices, Iterable):
        return False
    return any(type(choice) is type(value) and choice == value for choice in choices)


def in_range(value: Any, maximum: float, minimum: float = 1) -> bool:
    """Numeric value within ``[minimum, maximum]``. Non-numbers fail."""
    if isinstance(value, bool):
        return False
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return float(minimum) <= number <= float(maximum)


def is_boolean(value: Any) -> bool:
    """One of ``0``, ``1``, ``"0"``, ``"1"``, ``True``, ``False`` exactly."""
    if isinstance(value, bool):
        return True
    if type(value) is int:
        return value in (0, 1)
    return isinstance(value, str) and value in ("0", "1")


# ---------------------------------------------------------------------------
# Formats
# ---------------------------------------------------------------------------

_EMAIL_RE = re.compile(
    r"[+0-9a-z]+([.\-_][0-9a-z]+)*@[0-9a-z]+([.\-][0-9a-z-]+)*\.[a-z]{2,4}"
)
_WEBSITE_RE = re.compile(
    r"(?:http|ftp)s?://(?:[-a-z0-9]+\.)+[a-z]{2,4}(?:[-a-z0-9._/&=+%?#:~]+)?"
)
_IP_OCTET = r"(?:[1-9]?[0-9]|1[0-9]{2}|2[0-4][0-9]|25[0-5])"
_IP_RE = re.compile(rf"(?:{_IP_OCTET}\.){{3}}{_IP_OCTET}")
_PHONE_RE = re.compile(r"\([0-9]{3}\)\s[0-9]{3}-?[0-9]{4}")

_DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y/%m/%d",
    "%Y-%m-%d",
    "%B %d, %Y",
    "%B %d %Y",
    "%b %d, %Y",
    "%b %d %Y",
)
_MONTH_DAY_FORMATS = ("%B %d %Y", "%b %d %Y")
_TIME_FORMATS = ("%I:%M:%S %p", "%I:%M %p", "%H:%M:%S", "%H:%M")
_ORDINAL_RE = re.compile(r"(?<=\d)(st|nd|rd|th)\b", re.IGNORECASE)


def is_email(value: Any) -> bool:
    """``local@domain.tld`` with a two to four letter TLD."""
    return _EMAIL_RE.fullmatch(_text(value).lower()) is not None


def is_website(value: Any) -> bool:
    """``http(s)://`` or ``ftp(s)://`` URL with a dotted host."""
    return _WEBSITE_RE.fullmatch(_text(value).lower()) is not None


def is_ip(value: Any) -> bool:
    """Dotted-quad IPv4 address."""
    return _IP_RE.fullmatch(_text(value)) is not None


def is_phone(value: Any) -> bool:
    """US phone number: ``(xxx) xxx-xxxx``, dash optional."""
    return _PHONE_RE.fullmatch(_text(value)) is not None


def _parses(value: str, formats: Iterable[str]) -> bool:
    for fmt in formats:
        try:
            datetime.strptime(value, fmt)
        except ValueError:
            continue
        return True
    return False


def is_date(value: Any) -> bool:
    """A real calendar date: ``mm/dd/yyyy``, ``yyyy-mm-dd`` or ``February 26th, 1988``."""
    text = _ORDINAL_RE.sub("", _text(value).strip())
    if not text:
        return False
    if _parses(text, _DATE_FORMATS):
        return True
    # Month and day only; a leap year keeps February 29 valid
    return _parses(f"{text} 2000", _MONTH_DAY_FORMATS)


def is_time(value: Any) -> bool:
    """``hh:mm[:ss] AM|PM`` or 24-hour ``HH:MM[:SS]``."""
    return _parses(_text(value).strip().upper(), _TIME_FORMATS)


def is_decimal(value: Any, places: int = 2) -> bool:
    """A number with exactly *places* digits after the point."""
    pattern = rf"-?[0-9]+\.[0-9]{{{int(places)}}}"
    return re.fullmatch(pattern, _text(value)) is not None


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


def is_file(value: Any) -> bool:
    """A received upload: non-empty temp path and a zero error code."""
    upload = as_upload(value)
    return upload is not None and upload.uploaded


def is_ext(value: Any, extensions: Iterable[str] | None = None) -> bool:
    """The file name's last extension, lower-cased, is in *extensions*."""
    if not extensions or isinstance(extensions, str):
        extensions = DEFAULT_EXTENSIONS
    upload = as_upload(value)
    name = upload.name if upload is not None else _text(value)
    _, dot, ext = name.rpartition(".")
    if not dot:
        return False
    return ext.lower() in set(extensions)


def _size_param(size: Any, fallback: int) -> int:
    if isinstance(size, bool):
        return fallback
    try:
        return int(size) if size else fallback
    except (TypeError, ValueError):
        return fallback


def min_filesize(value: Any, size: Any = 0) -> bool:
    """Upload is strictly larger than *size* bytes."""
    upload = as_upload(value)
    if upload is None or not upload.uploaded:
        return False
    return upload.size > _size_param(size, 0)


def max_filesize(value: Any, size: Any = DEFAULT_MAX_FILESIZE) -> bool:
    """Upload is at most *size* bytes (5 MiB by default)."""
    upload = as_upload(value)
    if upload is None or not upload.uploaded:
        return False
    return upload.size <= _size_param(size, DEFAULT_MAX_FILESIZE)
