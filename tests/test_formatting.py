"""
Tests for display formatting helpers.
"""

import pytest
from mortgagelab.core.currency import Currency
from mortgagelab.formatting import format_currency, format_percent


@pytest.mark.parametrize(
    "value, expected",
    [
        (1234.5, "RM 1,234.50"),
        (2019.6, "RM 2,019.60"),
        (0, "RM 0.00"),
        (None, "RM 0.00"),
        ("450,000", "RM 450,000.00"),
        (-20, "-RM 20.00"),
    ],
)
def test_format_currency(value, expected):
    assert format_currency(value) == expected


def test_format_currency_other_code():
    assert format_currency(1500, Currency("SGD")) == "SGD 1,500.00"


@pytest.mark.parametrize(
    "ratio, expected",
    [(0.6, "60.0%"), (0.4857, "48.6%"), (0, "0.0%"), ("abc", "0.0%")],
)
def test_format_percent(ratio, expected):
    assert format_percent(ratio) == expected
