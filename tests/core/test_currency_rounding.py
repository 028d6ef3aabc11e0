"""
Tests for currency quantization and rounding.
"""

from decimal import Decimal

import pytest
from mortgagelab.core.currency import (
    MYR,
    Currency,
    RoundingPolicy,
    get_currency,
    round_half_up2,
    round_up2,
)


class TestCurrencyQuantization:
    """Test currency quantization with different rounding policies."""

    def test_ceiling_rounds_any_fraction_up(self):
        """CEILING is the default for installments and levies."""
        assert MYR.quantize(Decimal("1992.721")) == Decimal("1992.73")
        assert MYR.quantize(Decimal("1992.72")) == Decimal("1992.72")
        assert MYR.quantize(Decimal("0.001")) == Decimal("0.01")

    def test_half_up_rounding(self):
        """HALF_UP rounds .5 away from zero."""
        myr = Currency("MYR", decimals=2, rounding=RoundingPolicy.HALF_UP)

        assert myr.quantize(Decimal("1.235")) == Decimal("1.24")
        assert myr.quantize(Decimal("1.225")) == Decimal("1.23")
        assert myr.quantize(Decimal("1.234")) == Decimal("1.23")

    def test_bankers_rounding(self):
        myr = Currency("MYR", decimals=2, rounding=RoundingPolicy.BANKERS)

        assert myr.quantize(Decimal("1.235")) == Decimal("1.24")
        assert myr.quantize(Decimal("1.225")) == Decimal("1.22")

    def test_zero_decimal_currency(self):
        jpy = Currency("jpy", decimals=0)

        assert jpy.code == "JPY"
        assert jpy.quantize(Decimal("123.01")) == Decimal("124")

    def test_float_noise_is_not_rounded_up(self):
        """0.1 + 0.2 must not become 0.31 under ceiling rounding."""
        assert round_up2(0.1 + 0.2) == 0.30
        assert round_up2(1000.0000000001) == 1000.0

    def test_round_returns_zero_for_non_finite(self):
        assert MYR.round(float("nan")) == 0.0
        assert MYR.round(float("inf")) == 0.0


class TestRoundingHelpers:
    """Test the module-level helpers used by calculators."""

    @pytest.mark.parametrize(
        "value, expected",
        [(1992.721, 1992.73), (1992.72, 1992.72), (12000.0, 12000.0), (-1.239, -1.23)],
    )
    def test_round_up2(self, value, expected):
        assert round_up2(value) == expected

    @pytest.mark.parametrize(
        "value, expected",
        [(1.005, 1.01), (1.004, 1.0), (1566.9863, 1566.99), (-1.005, -1.01)],
    )
    def test_round_half_up2(self, value, expected):
        assert round_half_up2(value) == expected

    def test_get_currency(self):
        assert get_currency("MYR") is MYR
        unknown = get_currency("SGD")
        assert unknown.code == "SGD"
        assert unknown.decimals == 2
        assert str(unknown) == "SGD"
