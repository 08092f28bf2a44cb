from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..core.exceptions import ValidationError

# Plain decimal notation only: no exponents, digit separators or spaces inside.
_AMOUNT_TEXT = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)", re.ASCII)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_text(value: Optional[str]) -> str:
    return (value or "").strip()


def parse_amount(value: Any, field_name: str) -> Decimal:
    """Parse a user supplied money amount into a finite Decimal."""

    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    if isinstance(value, str) and not _AMOUNT_TEXT.fullmatch(value.strip()):
        raise ValidationError(f"{field_name} must be a number")
    try:
        # str() first so floats keep their short repr (0.1 -> Decimal("0.1")).
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    return amount


def require_non_negative(amount: Decimal, message: str) -> Decimal:
    if amount < 0:
        raise ValidationError(message)
    return amount


def require_positive(amount: Decimal, message: str) -> Decimal:
    if amount <= 0:
        raise ValidationError(message)
    return amount
