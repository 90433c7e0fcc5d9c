"""Tests for amount, date and privacy helpers."""
from datetime import date, datetime
from decimal import Decimal

import pytest

from procvisual.utils.dates import add_months, days_in_month, parse_date, previous_month
from procvisual.utils.money import parse_amount, quantize_cents, round_half_up
from procvisual.utils.privacy import mask_email, obfuscate_description


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("12.5", Decimal("12.5")),
        ("12.5abc", Decimal("12.5")),
        ("  7 ", Decimal("7")),
        ("1e2", Decimal("100")),
        (".5", Decimal("0.5")),
        (42, Decimal("42")),
        (19.99, Decimal("19.99")),
        ("abc", Decimal("0")),
        ("", Decimal("0")),
        (None, Decimal("0")),
        (float("nan"), Decimal("0")),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_rounding_helpers():
    assert quantize_cents(Decimal("33.335")) == Decimal("33.34")
    assert round_half_up(Decimal("14.5")) == 15
    assert round_half_up(Decimal("14.49")) == 14


@pytest.mark.parametrize(
    "raw",
    ["2024-03-01", "2024-03-01T10:00:00Z", "2024-03-01T23:59:59.123+00:00", date(2024, 3, 1), datetime(2024, 3, 1, 8)],
)
def test_parse_date(raw):
    assert parse_date(raw) == date(2024, 3, 1)


@pytest.mark.parametrize("raw", ["", "   ", "not a date"])
def test_parse_date_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_date(raw)


def test_calendar_helpers():
    assert add_months(date(2024, 3, 31), 1) == date(2024, 4, 30)
    assert add_months(date(2024, 12, 31), 2) == date(2025, 2, 28)
    assert days_in_month(2024, 1) == 29
    assert days_in_month(2023, 1) == 28
    assert previous_month(0, 2024) == (11, 2023)
    assert previous_month(5, 2024) == (4, 2024)


def test_mask_email():
    assert mask_email("maria@example.com") == "m****@example.com"
    assert mask_email("a@example.com") == "a*@example.com"
    assert mask_email("nonsense") == "***"


def test_obfuscate_description_keeps_installment_suffix():
    assert obfuscate_description("Sofa 2 (3/12)") == "**** * (3/12)"
    assert obfuscate_description("") == ""


def test_round_half_up_has_no_precision_limit():
    assert round_half_up(Decimal("1e30")) == 10 ** 30
    assert round_half_up(Decimal("123456789012345678901234567890.5")) == 123456789012345678901234567891
