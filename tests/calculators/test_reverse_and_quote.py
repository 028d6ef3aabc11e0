"""
Tests for reverse affordability and the snap quote.
"""

import pytest
from mortgagelab.calculators.amortization import compute_installment
from mortgagelab.calculators.quote import net_price_and_cash_back
from mortgagelab.calculators.reverse import (
    budget_from_income,
    max_principal_from_payment,
    max_property_price,
    reverse_affordability,
)


class TestReverseAffordability:
    def test_round_trip_with_installment(self):
        payment = compute_installment(450_000, 4.1, 35)
        principal = max_principal_from_payment(payment, 4.1, 35)

        assert principal >= 450_000
        assert principal == pytest.approx(450_000, abs=5.0)

    def test_zero_rate(self):
        assert max_principal_from_payment(1_000, 0, 10) == 120_000.0

    @pytest.mark.parametrize("payment, years", [(0, 35), (-100, 35), (2_000, 0)])
    def test_invalid_input(self, payment, years):
        assert max_principal_from_payment(payment, 4.1, years) == 0.0

    def test_property_price_from_margin(self):
        assert max_property_price(450_000, 0.9) == 500_000.0
        assert max_property_price(450_000, 0) == 0.0

    def test_reverse_bundle(self):
        result = reverse_affordability(2_000, 0, 10, 0.8)

        assert result.max_loan_amount == 240_000.0
        assert result.max_property_price == 300_000.0
        assert result.implied_dsr == 0.6

    def test_budget_from_income(self):
        assert budget_from_income(5_000, 1_000) == 2_000.0
        assert budget_from_income(1_000, 2_000) == 0.0
        assert budget_from_income(5_000, 0, dsr_limit=0.7) == 3_500.0

    def test_budget_is_truncated_to_the_cent(self):
        assert budget_from_income(3_333.33) == 1_999.99


class TestSnapQuote:
    def test_cash_back(self):
        quote = net_price_and_cash_back(500_000, 90, 15)

        assert quote.loan_amount == 450_000.0
        assert quote.net_price == 425_000.0
        assert quote.cash_back == 25_000.0

    def test_no_cash_back_when_rebate_is_small(self):
        quote = net_price_and_cash_back(500_000, 90, 5)

        assert quote.net_price == 475_000.0
        assert quote.cash_back == 0.0

    def test_zero_price(self):
        quote = net_price_and_cash_back(0, 90, 10)
        assert (quote.net_price, quote.loan_amount, quote.cash_back) == (0.0, 0.0, 0.0)
