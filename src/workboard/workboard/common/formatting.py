from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ..core.constants import DEFAULT_CURRENCY_LABEL

_CENTS = Decimal("0.01")


def format_currency(amount: Decimal, label: str = DEFAULT_CURRENCY_LABEL) -> str:
    """``LKR 1,234.50`` style; negative balances keep their sign."""

    value = Decimal(amount).quantize(_CENTS, rounding=ROUND_HALF_UP)
    return f"{label} {value:,.2f}"


def safe_filename_part(text: str) -> str:
    return "_".join(text.split())
