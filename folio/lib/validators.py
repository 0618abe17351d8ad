"""
Useful validation methods.

Everything here either returns a cleaned value or raises one of Django's
exceptions: ``ValidationError`` for bad input, ``SuspiciousFileOperation``
for file names that try to escape their directory.
"""
from __future__ import annotations

from datetime import datetime, timezone

from django.core.exceptions import SuspiciousFileOperation, ValidationError
from django.utils.translation import gettext_lazy as _

# Control characters and space, mirroring what form input tends to carry.
_TRIM_CHARS = "".join(chr(i) for i in range(33))


def validate_utc_datetime(dt: datetime):
    if dt.tzinfo != timezone.utc:
        raise ValidationError(
            _("The timezone for %(datetime)s is not UTC."),
            params={"datetime": dt},
        )


def is_utf8(value: str) -> bool:
    """
    True if ``value`` can be encoded as UTF-8 (i.e. has no lone surrogates).
    """
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def trim_string(value) -> str:
    """
    Cast to str and strip leading/trailing whitespace and control characters.

    Invalid UTF-8 comes back as an empty string.
    """
    if value is None:
        return ""
    value = str(value)
    if not is_utf8(value):
        return ""
    return value.strip(_TRIM_CHARS)


def has_traversal_or_null_byte(path: str) -> bool:
    return "\x00" in path or "../" in path or "..\\" in path


def check_file_name(path: str) -> str:
    """
    Raise ``SuspiciousFileOperation`` if ``path`` could escape its directory.
    """
    if has_traversal_or_null_byte(path):
        raise SuspiciousFileOperation(
            f"Directory traversal or null byte in file name {path!r}"
        )
    return path


def clean_int(value, *, field: str, minimum: int = 0, maximum: int | None = None) -> int:
    """
    Coerce ``value`` to an int within [minimum, maximum].

    Digit strings are accepted (form data), bools are not.
    """
    if isinstance(value, bool):
        raise ValidationError(
            _("%(field)s must be an integer."), params={"field": field}, code="invalid",
        )
    if isinstance(value, str):
        value = value.strip()
        if not value.lstrip("-").isdigit():
            raise ValidationError(
                _("%(field)s must be an integer."), params={"field": field}, code="invalid",
            )
        value = int(value)
    if not isinstance(value, int):
        raise ValidationError(
            _("%(field)s must be an integer."), params={"field": field}, code="invalid",
        )
    if value < minimum or (maximum is not None and value > maximum):
        raise ValidationError(
            _("%(field)s is out of range."), params={"field": field}, code="out_of_range",
        )
    return value


def clean_bool(value, *, field: str) -> bool:
    """
    Accept real booleans plus the usual form spellings ("1", "0", "on"...).
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "on", "yes"):
            return True
        if lowered in ("0", "false", "off", "no", ""):
            return False
    raise ValidationError(
        _("%(field)s must be a boolean."), params={"field": field}, code="invalid",
    )


def file_extension(file_name: str) -> str:
    """
    Lower-cased extension without the dot, or "" if there is none.
    """
    base = file_name.rsplit("/", 1)[-1]
    if "." not in base:
        return ""
    return base.rsplit(".", 1)[-1].lower()
