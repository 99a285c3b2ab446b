"""Validation helpers shared across expense tracker services."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from .exceptions import ValidationError
from .models import isoformat_utc, parse_datetime

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")
INTEGER_PATTERN = re.compile(r"^[+-]?[0-9]+$")


def _parse_int(raw: object, field: str, message: str) -> int:
    if isinstance(raw, bool):
        raise ValidationError(f"{field} {message}")
    if isinstance(raw, int):
        return raw
    if not isinstance(raw, str) or not INTEGER_PATTERN.fullmatch(raw.strip()):
        # int() alone would also take "1_000" and non-ASCII digits.
        raise ValidationError(f"{field} {message}")
    return int(raw.strip(), 10)


def parse_amount(raw: object, field: str = "amount") -> int:
    """Convert raw input to a whole, non-negative amount."""
    amount = _parse_int(raw, field, "must be non-negative")
    if amount < 0:
        raise ValidationError(f"{field} must be non-negative")
    return amount


def parse_id(raw: object, field: str = "id") -> int:
    expense_id = _parse_int(raw, field, "must be positive")
    if expense_id <= 0:
        raise ValidationError(f"{field} must be positive")
    return expense_id


def parse_month(raw: object, field: str = "month") -> int:
    month = _parse_int(raw, field, "must be a number between 1 and 12")
    if not 1 <= month <= 12:
        raise ValidationError(f"{field} must be a number between 1 and 12")
    return month


def parse_year(raw: object, field: str = "year") -> int:
    year = _parse_int(raw, field, "must be a calendar year")
    if not 1 <= year <= 9999:
        raise ValidationError(f"{field} must be a calendar year")
    return year


def validate_required_str(value: object, field: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} required")
    return trimmed


def validate_optional_str(value: object, field: str) -> Optional[str]:
    if value is None:
        return None
    return validate_required_str(value, field)


def validate_datetime(value: object, field: str = "date") -> str:
    """Return the canonical UTC text form of a datetime or ISO 8601 string."""
    if isinstance(value, datetime):
        return isoformat_utc(value)
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a datetime or ISO 8601 string")
    try:
        return isoformat_utc(parse_datetime(value))
    except ValueError as exc:
        raise ValidationError(f"{field} must be an ISO 8601 datetime") from exc


def validate_table_name(value: object) -> str:
    if not isinstance(value, str) or not IDENTIFIER_PATTERN.fullmatch(value):
        raise ValidationError("table name must be a plain SQL identifier")
    return value
