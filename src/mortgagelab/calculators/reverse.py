"""
Reverse affordability: from a monthly budget to the largest loan and property.
"""

from __future__ import annotations

from dataclasses import dataclass

from mortgagelab.core.currency import round_up2
from mortgagelab.core.utils import coerce_non_negative

from .amortization import MONTHS_IN_YEAR

# Reference DSR line reported alongside reverse results. It is independent of
# the affordability band thresholds.
REFERENCE_DSR = 0.60


@dataclass(frozen=True)
class ReverseResult:
    max_loan_amount: float
    max_property_price: float
    implied_dsr: float = REFERENCE_DSR


def max_principal_from_payment(
    monthly_payment, annual_rate_pct, tenure_years
) -> float:
    """
    Inverse annuity: ``P = payment · (1 − (1 + r)^−n) / r``.

    Zero rate falls back to ``payment · n``. Ceiling-rounded to the cent;
    0.0 for invalid input.
    """
    payment = coerce_non_negative(monthly_payment)
    rate = coerce_non_negative(annual_rate_pct)
    years = coerce_non_negative(tenure_years)
    if payment <= 0 or years <= 0:
        return 0.0

    n = years * MONTHS_IN_YEAR
    r = rate / 100.0 / MONTHS_IN_YEAR
    if r == 0:
        return round_up2(payment * n)
    return round_up2(payment * (1.0 - (1.0 + r) ** -n) / r)


def max_property_price(max_principal, margin_ratio) -> float:
    """Property price financeable at ``margin_ratio`` (0.9 for a 90% loan)."""
    principal = coerce_non_negative(max_principal)
    margin = coerce_non_negative(margin_ratio)
    if principal <= 0 or margin <= 0:
        return 0.0
    return round_up2(principal / margin)


def reverse_affordability(
    monthly_payment, annual_rate_pct, tenure_years, margin_ratio
) -> ReverseResult:
    """Maximum loan and property price for a monthly budget."""
    loan = max_principal_from_payment(monthly_payment, annual_rate_pct, tenure_years)
    return ReverseResult(
        max_loan_amount=loan,
        max_property_price=max_property_price(loan, margin_ratio),
    )


def budget_from_income(
    net_income, total_commitment=0.0, dsr_limit=REFERENCE_DSR
) -> float:
    """
    Installment headroom that keeps DSR at ``dsr_limit``.

    ``net_income · dsr_limit − existing commitments``, never negative. Not
    rounded up: a budget is a ceiling, so it is truncated to the cent.
    """
    income = coerce_non_negative(net_income)
    commitment = coerce_non_negative(total_commitment)
    limit = coerce_non_negative(dsr_limit)
    headroom = max(income * limit - commitment, 0.0)
    return -round_up2(-headroom)
