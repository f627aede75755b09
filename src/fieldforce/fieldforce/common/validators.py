from __future__ import annotations

import math
from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    text = "" if value is None else str(value).strip()
    if len(text) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return text


def require_positive_int(value, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a whole number")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{field_name} must be a whole number")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field_name} must be a whole number")
    if number <= 0:
        raise ValidationError(f"{field_name} must be a positive whole number")
    return number


def optional_positive_int(value, field_name: str) -> Optional[int]:
    """Like ``require_positive_int`` but lets ``None`` and "" through as None."""
    if value is None or value == "":
        return None
    return require_positive_int(value, field_name)


def require_positive_amount(value, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(amount):
        raise ValidationError(f"{field_name} must be a finite number")
    if amount <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return amount


def require_date_range(start: Optional[date], end: Optional[date]) -> tuple[date, date]:
    if start is None or end is None:
        raise ValidationError("Both start and end dates are required")
    if end < start:
        raise ValidationError("End date must not be before start date")
    return start, end
