# formsafe/services/validation_service.py
"""
Field validation for storage entities.

Every entity field is declared with one of the validators below. A validator
takes the raw external value (form field, storage column, Python object) and
either returns the normalized value or raises a typed error carrying the
field name and the offending value:

- MalformedInputError: the value is not the expected type or syntax
- OutOfRangeError: the value is well-formed but violates a domain rule

Free-text sanitization here is input normalization only. It is not an
output-escaping scheme; render values with context-appropriate escaping.
"""

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from formsafe.core.exceptions import FieldValidationError, malformed_input, out_of_range

logger = logging.getLogger(__name__)

MYSQL_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$", re.ASCII)
_DATETIME_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})$", re.ASCII)
_STATE_PATTERN = re.compile(r"^[A-Z]{2}$")
_ZIP_PATTERN = re.compile(r"^\d{5}(-\d{4})?$", re.ASCII)
_EMAIL_PATTERN = re.compile(r"^[^@\s<>\"',;]+@[^@\s<>\"',;]+\.[^@\s<>\"',;]+$")
_TAG_PATTERN = re.compile(r"<[^>]*>?")
# C0 controls except tab, newline and carriage return, plus DEL
_CONTROL_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

Validator = Callable[[Any, str], Any]

# Signed 64-bit column range
_INT_MIN = -2 ** 63
_INT_MAX = 2 ** 63 - 1


def _in_int_range(number: int, value: Any, field: str) -> int:
    if not _INT_MIN <= number <= _INT_MAX:
        raise malformed_input(f"{field} is outside the 64-bit integer range", field=field, value=value)
    return number


def _as_text(value: Any, field: str) -> str:
    """Coerce strings and integers to a trimmed string; reject everything else."""
    if value is None:
        raise malformed_input(f"{field} is missing", field=field)
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise malformed_input(
            f"{field} of type {type(value).__name__} is not a text value",
            field=field,
            value=value
        )
    if isinstance(value, int):
        return str(_in_int_range(value, value, field))
    return value.strip()


def _parse_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise malformed_input(f"{field} {value} is not numeric", field=field, value=value)
    if isinstance(value, int):
        return _in_int_range(value, value, field)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return _in_int_range(int(value), value, field)
        raise malformed_input(f"{field} {value} is not numeric", field=field, value=value)
    if isinstance(value, str) and _INTEGER_PATTERN.match(value.strip()):
        digits = value.strip().lstrip("+-").lstrip("0")
        # Checked before int() so oversized strings are never converted
        if len(digits) > 19:
            raise malformed_input(f"{field} is outside the 64-bit integer range", field=field, value=value)
        return _in_int_range(int(value.strip()), value, field)
    if isinstance(value, str):
        raise malformed_input(f"{field} {value} is not numeric", field=field, value=value)
    raise malformed_input(f"{field} of type {type(value).__name__} is not numeric", field=field, value=value)


def _parse_float(value: Any, field: str) -> float:
    if isinstance(value, bool) or value is None:
        raise malformed_input(f"{field} {value} is not numeric", field=field, value=value)
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError as e:
            raise malformed_input(f"{field} is too large to be a number", field=field, value=value) from e
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError as e:
            raise malformed_input(f"{field} {value} is not numeric", field=field, value=value) from e
    else:
        raise malformed_input(f"{field} of type {type(value).__name__} is not numeric", field=field, value=value)

    if not math.isfinite(number):
        raise malformed_input(f"{field} {value} is not a finite number", field=field, value=value)
    return number


# ===========================================
# NUMERIC VALIDATORS
# ===========================================

def positive_int(value: Any, field: str) -> int:
    """Integer strictly greater than zero (ids, foreign keys, quantities)."""
    number = _parse_int(value, field)
    if number <= 0:
        raise out_of_range(f"{field} {number} is not positive", field=field, value=value)
    return number


def optional_positive_int(value: Any, field: str) -> Optional[int]:
    """Surrogate id: None until the row has been persisted."""
    if value is None:
        return None
    return positive_int(value, field)


def positive_money(value: Any, field: str) -> float:
    amount = _parse_float(value, field)
    if amount <= 0:
        raise out_of_range(f"{field} {amount} is not positive", field=field, value=value)
    return amount


def negative_discount(value: Any, field: str) -> float:
    """Discounts are stored as negative deltas."""
    amount = _parse_float(value, field)
    if amount >= 0:
        raise out_of_range(f"{field} {amount} is not negative", field=field, value=value)
    return amount


# ===========================================
# TEXT VALIDATORS
# ===========================================

def sanitize_text(text: str) -> str:
    """Strip markup tags and control characters from already-trimmed text."""
    text = _TAG_PATTERN.sub("", text)
    text = _CONTROL_PATTERN.sub("", text)
    return text.strip()


def free_text(value: Any, field: str) -> str:
    return sanitize_text(_as_text(value, field))


def optional_free_text(value: Any, field: str) -> Optional[str]:
    if value is None:
        return None
    return free_text(value, field)


def state_code(value: Any, field: str) -> str:
    """USPS two letter abbreviation, upper case only."""
    state = _as_text(value, field)
    if not _STATE_PATTERN.match(state):
        raise malformed_input(f"{field} {state} is not a postal abbreviation", field=field, value=value)
    return state


def zip_code(value: Any, field: str) -> str:
    zip_value = _as_text(value, field)
    if not _ZIP_PATTERN.match(zip_value):
        raise malformed_input(f"{field} {zip_value} is not a ZIP code", field=field, value=value)
    return zip_value


def email(value: Any, field: str) -> str:
    """Loose syntactic check only; deliverability is never tested."""
    address = _as_text(value, field)
    if not _EMAIL_PATTERN.match(address):
        raise malformed_input(
            f"{field} {address} does not appear to be an email address",
            field=field,
            value=value
        )
    return address


def hex_digest(length: int, nullable: bool = False) -> Validator:
    """
    Build a validator for a fixed-width lowercase hex string.

    Args:
        length: Exact number of hex characters
        nullable: Whether None is accepted (pending tokens only)

    Returns:
        Validator normalizing to lower case
    """
    pattern = re.compile(r"^[\da-f]{%d}$" % length, re.ASCII)

    def validate(value: Any, field: str) -> Optional[str]:
        if value is None and nullable:
            return None
        digest = _as_text(value, field).lower()
        if not pattern.match(digest):
            # Never echo secrets back into the error
            raise malformed_input(
                f"{field} is not {length} hexadecimal characters",
                field=field
            )
        return digest

    validate.__name__ = f"hex_digest_{length}"
    return validate

password_hash = hex_digest(128)
salt = hex_digest(64)
authentication_token = hex_digest(32, nullable=True)


# ===========================================
# DATE VALIDATORS
# ===========================================

def mysql_datetime(value: Any, field: str) -> datetime:
    """
    Parse a MySQL formatted date-time into a datetime.

    datetime instances are accepted as-is. Strings must read
    YYYY-MM-DD HH:MM:SS and name a real Gregorian date.
    """
    if isinstance(value, datetime):
        return value

    text = sanitize_text(_as_text(value, field))
    match = _DATETIME_PATTERN.match(text)
    if match is None:
        raise malformed_input(f"{field} {text} is not a mySQL formatted date", field=field, value=value)

    year, month, day, hour, minute, second = (int(part) for part in match.groups())
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError as e:
        raise out_of_range(
            f"{field} {text} is not a Gregorian date",
            field=field,
            value=value
        ) from e


def format_mysql_datetime(value: datetime) -> str:
    return value.strftime(MYSQL_DATETIME_FORMAT)


@dataclass
class ValidationResult:
    """Result of a non-raising validation check"""
    valid: bool
    error_type: Optional[str] = None
    message: Optional[str] = None
    value: Any = None


def check(validator: Validator, value: Any, field: str) -> ValidationResult:
    """
    Run a validator without raising, for form pre-checks.

    Args:
        validator: One of the validators in this module
        value: Raw input
        field: Field name used in messages

    Returns:
        ValidationResult with the normalized value when valid
    """
    try:
        normalized = validator(value, field)
    except FieldValidationError as e:
        logger.debug(f"Validation of {field} failed: {e.message}")
        return ValidationResult(
            valid=False,
            error_type=type(e).__name__,
            message=e.message
        )
    return ValidationResult(valid=True, value=normalized)
