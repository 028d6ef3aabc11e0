"""
Fixed-rate annuity installment and amortization schedule.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from functools import lru_cache

import pandas as pd

from mortgagelab.core.currency import round_half_up2, round_up2
from mortgagelab.core.specs import MAX_TENURE_YEARS, LoanTerms
from mortgagelab.core.utils import add_months, coerce_non_negative

log = logging.getLogger(__name__)

MONTHS_IN_YEAR = 12
RESIDUAL_EPSILON = 0.01


@dataclass(frozen=True)
class AmortizationRow:
    """One period of an amortization schedule; amounts are in whole cents."""

    period_index: int
    date: date
    opening_balance: float
    payment: float
    principal_component: float
    interest_component: float
    closing_balance: float


@dataclass(frozen=True)
class ScheduleTotals:
    total_payment: float
    total_interest: float
    payoff_date: date | None
    periods: int


@dataclass(frozen=True)
class AmortizationResult:
    """Installment, schedule rows and totals for one set of LoanTerms."""

    installment: float
    rows: list[AmortizationRow]
    totals: ScheduleTotals

    def frame(self) -> pd.DataFrame:
        return schedule_frame(self.rows)

    def annual(self) -> pd.DataFrame:
        return annual_summary(self.rows)


def compute_installment(principal, annual_rate_pct, tenure_years) -> float:
    """
    Monthly installment using the standard annuity (PMT) formula.

    ``payment = P·r / (1 − (1 + r)^−n)`` with ``r = rate/100/12`` and
    ``n = years·12``; a zero rate falls back to straight-line ``P / n``.
    The result is rounded *up* to the cent.

    Args:
        principal: Loan amount
        annual_rate_pct: Annual rate in percent (4.1 means 4.1%)
        tenure_years: Term in years

    Returns:
        Installment in currency units; 0.0 for non-positive or invalid input
    """
    p = coerce_non_negative(principal)
    rate = coerce_non_negative(annual_rate_pct)
    years = coerce_non_negative(tenure_years)
    if p <= 0 or years <= 0:
        return 0.0

    n = years * MONTHS_IN_YEAR
    r = rate / 100.0 / MONTHS_IN_YEAR
    if r == 0:
        return round_up2(p / n)
    return round_up2(p * r / (1.0 - (1.0 + r) ** -n))


def build_schedule(terms: LoanTerms) -> list[AmortizationRow]:
    """
    Build the period-by-period amortization schedule.

    Row ``i`` is dated ``add_months(start_date, i)``. Each period's interest is
    the opening balance times the monthly rate, rounded half-up to the cent;
    the principal component is the installment minus interest, clamped to the
    balance. The loop stops as soon as the closing balance would be within
    one cent of zero, folding that residual into the final row so the
    schedule ends exactly at zero.

    Returns an empty list for invalid terms (non-positive principal or tenure,
    negative rate, missing start date).
    """
    if not isinstance(terms, LoanTerms) or not terms.is_valid:
        log.debug("Empty schedule for invalid terms %r", terms)
        return []
    return list(_cached_schedule(terms))


@lru_cache(maxsize=128)
def _cached_schedule(terms: LoanTerms) -> tuple[AmortizationRow, ...]:
    log.debug("Building schedule %s", terms.fingerprint())
    principal = round_half_up2(terms.principal)
    payment = compute_installment(
        principal, terms.annual_rate_pct, terms.tenure_years
    )
    r = terms.monthly_rate
    n = min(terms.months, MAX_TENURE_YEARS * MONTHS_IN_YEAR)

    rows: list[AmortizationRow] = []
    balance = principal
    for i in range(1, n + 1):
        interest = round_half_up2(balance * r)
        principal_part = round_half_up2(min(max(payment - interest, 0.0), balance))
        closing = round_half_up2(balance - principal_part)
        if closing <= RESIDUAL_EPSILON or i == n:
            principal_part = balance
            closing = 0.0
        rows.append(
            AmortizationRow(
                period_index=i,
                date=add_months(terms.start_date, i),
                opening_balance=balance,
                payment=round_half_up2(principal_part + interest),
                principal_component=principal_part,
                interest_component=interest,
                closing_balance=closing,
            )
        )
        balance = closing
        if balance <= 0:
            break
    return tuple(rows)


def schedule_totals(rows: list[AmortizationRow]) -> ScheduleTotals:
    if not rows:
        return ScheduleTotals(0.0, 0.0, None, 0)
    return ScheduleTotals(
        total_payment=round_half_up2(sum(r.payment for r in rows)),
        total_interest=round_half_up2(sum(r.interest_component for r in rows)),
        payoff_date=rows[-1].date,
        periods=len(rows),
    )


def amortize(terms: LoanTerms) -> AmortizationResult:
    """Installment, schedule and totals in one call."""
    rows = build_schedule(terms)
    installment = 0.0
    if rows:
        installment = compute_installment(
            terms.principal, terms.annual_rate_pct, terms.tenure_years
        )
    return AmortizationResult(
        installment=installment, rows=rows, totals=schedule_totals(rows)
    )


_COLUMNS = [
    "period_index",
    "date",
    "opening_balance",
    "payment",
    "principal_component",
    "interest_component",
    "closing_balance",
]


def schedule_frame(rows: list[AmortizationRow]) -> pd.DataFrame:
    """Schedule rows as a DataFrame with a datetime ``date`` column."""
    df = pd.DataFrame([asdict(r) for r in rows], columns=_COLUMNS)
    df["date"] = pd.to_datetime(df["date"])
    return df


def annual_summary(rows: list[AmortizationRow]) -> pd.DataFrame:
    """
    Roll the schedule up by calendar year.

    Payment, principal and interest are summed per year; the opening balance
    comes from the year's first row and the closing balance from its last.
    """
    df = schedule_frame(rows)
    if df.empty:
        return pd.DataFrame(
            columns=[
                "year",
                "opening_balance",
                "payment",
                "principal_component",
                "interest_component",
                "closing_balance",
            ]
        )
    grouped = df.groupby(df["date"].dt.year, sort=True)
    annual = grouped.agg(
        opening_balance=("opening_balance", "first"),
        payment=("payment", "sum"),
        principal_component=("principal_component", "sum"),
        interest_component=("interest_component", "sum"),
        closing_balance=("closing_balance", "last"),
    )
    annual = annual.round(2)
    annual.index.name = "year"
    return annual.reset_index()
