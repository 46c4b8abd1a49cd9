from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..core.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Any, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long")
    return value


def require_length(value: str, field_name: str, min_len: int, max_len: int) -> str:
    value = require_non_empty(value, field_name)
    if not min_len <= len(value) <= max_len:
        raise ValidationError(f"{field_name} must be between {min_len} and {max_len} characters")
    return value


def require_email(value: Any) -> str:
    value = value.strip().lower() if isinstance(value, str) else ""
    if not _EMAIL_RE.match(value):
        raise ValidationError("Please provide a valid email address")
    return value


def require_int(value: Any, field_name: str, *, minimum: Optional[int] = None) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{field_name} must be an integer")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field_name} must be at least {minimum}")
    return number


def require_positive_int(value: Any, field_name: str) -> int:
    return require_int(value, field_name, minimum=1)


def require_non_negative_int(value: Any, field_name: str) -> int:
    return require_int(value, field_name, minimum=0)


def require_positive_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be a positive number")
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a positive number")
    if not number.is_finite() or number <= 0:
        raise ValidationError(f"{field_name} must be a positive number")
    return number


def parse_pagination(page: Any, limit: Any) -> tuple[int, int, int]:
    """Return (page, limit, offset) from raw query-string values."""
    page_n = require_int(page or 1, "page", minimum=1)
    limit_n = require_int(limit or DEFAULT_PAGE_LIMIT, "limit", minimum=1)
    limit_n = min(limit_n, MAX_PAGE_LIMIT)
    return page_n, limit_n, (page_n - 1) * limit_n


def require_non_negative_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be a non-negative number")
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a non-negative number")
    if not number.is_finite() or number < 0:
        raise ValidationError(f"{field_name} must be a non-negative number")
    return number
