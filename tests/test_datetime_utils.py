from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.workboard.workboard.common.datetime_utils import (
    convert_date_to_display,
    convert_date_to_iso,
    format_display_date,
    normalize_date,
)
from src.workboard.workboard.common.formatting import format_currency, safe_filename_part
from src.workboard.workboard.core.exceptions import ValidationError


def test_display_and_iso_conversions():
    assert convert_date_to_iso("05/03/2024") == "2024-03-05"
    assert convert_date_to_iso("5/3/2024") == "2024-03-05"
    assert convert_date_to_iso("2024-03-05") == "2024-03-05"
    assert convert_date_to_iso("") == ""
    assert convert_date_to_display("2024-03-05") == "05/03/2024"
    assert convert_date_to_display("not a date") == "not a date"


def test_normalize_date_accepts_both_forms_and_date_objects():
    assert normalize_date("01/02/2024") == "2024-02-01"
    assert normalize_date("2024-2-1") == "2024-02-01"
    assert normalize_date(date(2024, 2, 1)) == "2024-02-01"
    assert normalize_date(datetime(2024, 2, 1, 13, 30)) == "2024-02-01"


@pytest.mark.parametrize("value", ["31/02/2024", "2024-13-01", "yesterday"])
def test_normalize_date_rejects_impossible_dates(value):
    with pytest.raises(ValidationError, match="Invalid date"):
        normalize_date(value)


def test_normalize_date_requires_a_value():
    with pytest.raises(ValidationError, match="Date is required"):
        normalize_date("  ")


def test_format_helpers():
    assert format_display_date(date(2024, 3, 5)) == "05/03/2024"
    assert format_currency(Decimal("1234.5")) == "LKR 1,234.50"
    assert format_currency(Decimal("-250"), "USD") == "USD -250.00"
    assert safe_filename_part("Alice  de Silva") == "Alice_de_Silva"
