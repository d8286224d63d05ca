from __future__ import annotations

from datetime import date

import pytest

from src.hr_records.hr_records.common.datetime_utils import inclusive_day_count, parse_clock, parse_iso_date
from src.hr_records.hr_records.common.validators import normalize_phone, normalize_tax_id, require_month, require_year
from src.hr_records.hr_records.core.exceptions import ValidationError


@pytest.mark.parametrize("raw", ["9876543210", "+919876543210", "+91 98765 43210", " 9876543210 "])
def test_normalize_phone(raw):
    assert normalize_phone(raw) == "9876543210"


def test_empty_phone_rejected():
    with pytest.raises(ValidationError):
        normalize_phone("  ")


@pytest.mark.parametrize("raw", ["ABCDE1234", "ABCD12345F", "12345ABCDE", ""])
def test_invalid_pan(raw):
    with pytest.raises(ValidationError):
        normalize_tax_id(raw)


def test_inclusive_day_count():
    assert inclusive_day_count(date(2024, 1, 1), date(2024, 1, 3)) == 3
    assert inclusive_day_count(date(2024, 1, 1), date(2024, 1, 1)) == 1
    assert inclusive_day_count(date(2024, 1, 3), date(2024, 1, 1)) == 1
    assert inclusive_day_count(date(2024, 2, 28), date(2024, 3, 1)) == 3


def test_parse_helpers():
    assert parse_iso_date("2024-01-05T10:00:00") == date(2024, 1, 5)
    assert parse_clock("18:00").hour == 18
    with pytest.raises(ValidationError):
        parse_iso_date("05/01/2024")


def test_month_and_year_bounds():
    assert require_month("12") == 12
    assert require_year(2024) == 2024
    with pytest.raises(ValidationError):
        require_year(1899)
