"""
Specification classes and value objects for MortgageLab.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import date
from typing import Any

from .utils import coerce_date, coerce_non_negative, coerce_number

MAX_TENURE_YEARS = 35


@dataclass(frozen=True)
class LoanTerms:
    """
    Immutable loan parameters for a single calculation request.

    Attributes:
        principal: Loan amount (e.g., 450_000.0)
        annual_rate_pct: Annual interest rate in percent (e.g., 4.1 for 4.1%)
        tenure_years: Repayment term in whole years, 1..35
        start_date: Drawdown date; the first installment falls one month later
    """

    principal: float
    annual_rate_pct: float
    tenure_years: int
    start_date: date | None = None

    def __post_init__(self) -> None:
        # Loose values are normalized once so calculators only see plain numbers
        tenure = coerce_number(self.tenure_years)
        object.__setattr__(self, "principal", coerce_number(self.principal))
        object.__setattr__(
            self, "annual_rate_pct", coerce_number(self.annual_rate_pct)
        )
        object.__setattr__(
            self, "tenure_years", int(tenure) if tenure.is_integer() else tenure
        )
        object.__setattr__(self, "start_date", coerce_date(self.start_date))

    @classmethod
    def from_raw(
        cls,
        principal: Any,
        annual_rate_pct: Any,
        tenure_years: Any,
        start_date: Any = None,
    ) -> LoanTerms:
        """Build terms from loose form input; invalid values degrade to zero/None."""
        tenure = int(coerce_non_negative(tenure_years))
        return cls(
            principal=coerce_non_negative(principal),
            annual_rate_pct=coerce_non_negative(annual_rate_pct),
            tenure_years=min(tenure, MAX_TENURE_YEARS),
            start_date=coerce_date(start_date),
        )

    @property
    def months(self) -> int:
        return int(self.tenure_years) * 12 if self.tenure_years > 0 else 0

    @property
    def monthly_rate(self) -> float:
        return self.annual_rate_pct / 100.0 / 12.0

    @property
    def is_valid(self) -> bool:
        """True when a schedule can be produced from these terms.

        Tenure must be a whole number of years.
        """
        return (
            self.principal > 0
            and self.annual_rate_pct >= 0
            and isinstance(self.tenure_years, int)
            and 0 < self.tenure_years <= MAX_TENURE_YEARS
            and self.start_date is not None
        )

    def fingerprint(self) -> str:
        """Stable hash of the terms, used as a cache key."""
        start = self.start_date.isoformat() if self.start_date else "-"
        raw = f"{self.principal!r}|{self.annual_rate_pct!r}|{self.tenure_years!r}|{start}"
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:16]


@dataclass(frozen=True)
class LevyBand:
    """
    One progressive band of a tiered levy.

    ``upper_bound`` is cumulative (the 2% MOT band runs up to 500_000, not
    400_000); ``None`` marks the unbounded final band.
    """

    upper_bound: float | None
    rate: float


@dataclass(frozen=True)
class CommitmentLine:
    """
    A monthly debt commitment.

    ``visible=False`` marks hidden debts (co-op, pawn, informal obligations)
    that still count toward the total but are absent from bank records.
    """

    label: str
    monthly_installment: float
    outstanding_balance: float = 0.0
    visible: bool = True
    id: str | None = None

    @property
    def installment(self) -> float:
        return coerce_non_negative(self.monthly_installment)

    @property
    def balance(self) -> float:
        return coerce_non_negative(self.outstanding_balance)
