from decimal import Decimal

import pytest

from expense_importer.normalize.amounts import parse_amount


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1.234,56", Decimal("1234.56")),
        ("12.345.678,90", Decimal("12345678.90")),
        ("R$ 1.500,00", Decimal("1500")),
        ("R$35,00", Decimal("35")),
    ],
)
def test_brazilian_convention(raw, expected):
    assert parse_amount(raw) == expected


def test_comma_only_is_decimal():
    assert parse_amount("1500,50") == Decimal("1500.50")
    assert parse_amount(" 35,00 ") == Decimal("35")


def test_dot_with_two_fraction_digits_is_decimal():
    assert parse_amount("200.00") == Decimal("200.00")
    assert parse_amount("200.00") != Decimal("20000")


def test_dot_groups_are_thousands():
    assert parse_amount("1.000") == Decimal("1000")
    assert parse_amount("1.234.567") == Decimal("1234567")


def test_dot_with_one_fraction_digit_is_treated_as_grouping():
    # only an exact two-digit fraction marks a decimal dot
    assert parse_amount("12.5") == Decimal("125")


def test_plain_digits():
    assert parse_amount("1500") == Decimal("1500")


@pytest.mark.parametrize("raw", ["", None, "abc", "R$", "-", "."])
def test_unparseable_is_zero(raw):
    assert parse_amount(raw) == 0


def test_trailing_text_is_ignored():
    assert parse_amount("12abc") == Decimal("12")


def test_negative_text_is_kept():
    assert parse_amount("-50,00") == Decimal("-50")


@pytest.mark.parametrize(
    "raw, expected",
    [
        (2.5, Decimal("2500")),
        (35, Decimal("35000")),
        (99.99, Decimal("99990")),
    ],
)
def test_small_numbers_get_truncation_correction(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", [100, 250.0, 1500, -5, -0.5])
def test_other_numbers_are_unchanged(raw):
    assert parse_amount(raw) == Decimal(str(raw))


def test_zero_and_nan_numbers():
    assert parse_amount(0) == 0
    assert parse_amount(0.0) == 0
    assert parse_amount(float("nan")) == 0


def test_correction_is_logged(caplog):
    with caplog.at_level("WARNING", logger="expense_importer"):
        parse_amount(2.5)
    assert "Suspicious amount" in caplog.text
