"""
Snap quote: net price, loan amount and cash back for a developer rebate.
"""

from __future__ import annotations

from dataclasses import dataclass

from mortgagelab.core.currency import round_up2
from mortgagelab.core.utils import coerce_non_negative


@dataclass(frozen=True)
class SnapQuote:
    net_price: float
    loan_amount: float
    cash_back: float


def net_price_and_cash_back(price, margin_pct, rebate_pct) -> SnapQuote:
    """
    Loan at ``margin_pct`` of list price against a rebated net price.

    When the loan exceeds the net price the difference is cash back to the
    buyer. Percentages are whole numbers (90 for a 90% margin).
    """
    p = coerce_non_negative(price)
    margin = coerce_non_negative(margin_pct)
    rebate = coerce_non_negative(rebate_pct)
    if p <= 0 or margin <= 0:
        return SnapQuote(0.0, 0.0, 0.0)

    loan = p * margin / 100.0
    net = p * (1.0 - rebate / 100.0)
    return SnapQuote(
        net_price=round_up2(max(net, 0.0)),
        loan_amount=round_up2(loan),
        cash_back=round_up2(max(0.0, loan - net)),
    )
