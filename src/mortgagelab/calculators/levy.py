"""
Tiered one-off transaction levies (stamp duties and legal fees).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from mortgagelab.core.currency import round_up2
from mortgagelab.core.specs import LevyBand
from mortgagelab.core.utils import coerce_non_negative

log = logging.getLogger(__name__)

# Memorandum of Transfer duty: 1% first 100k, 2% next 400k, 3% next 500k, 4% rest
MOT_BANDS: tuple[LevyBand, ...] = (
    LevyBand(100_000.0, 0.01),
    LevyBand(500_000.0, 0.02),
    LevyBand(1_000_000.0, 0.03),
    LevyBand(None, 0.04),
)

# Conveyancing scale for sale & purchase
LEGAL_FEE_BANDS: tuple[LevyBand, ...] = (
    LevyBand(500_000.0, 0.01),
    LevyBand(1_000_000.0, 0.008),
    LevyBand(3_000_000.0, 0.007),
    LevyBand(5_000_000.0, 0.006),
    LevyBand(None, 0.005),
)

LOAN_DUTY_BANDS: tuple[LevyBand, ...] = (LevyBand(None, 0.005),)

LEGAL_FEE_MINIMUM = 500.0


@dataclass(frozen=True)
class LevySlice:
    """Contribution of one band to a tiered levy."""

    lower_bound: float
    upper_bound: float | None
    rate: float
    taxed_amount: float
    levy: float


@dataclass(frozen=True)
class EntryCosts:
    """One-off costs of a property purchase."""

    legal_fee: float
    mot_stamp_duty: float
    loan_stamp_duty: float
    total: float

    def to_dict(self) -> dict[str, float]:
        return {
            "legal_fee": self.legal_fee,
            "mot_stamp_duty": self.mot_stamp_duty,
            "loan_stamp_duty": self.loan_stamp_duty,
            "total": self.total,
        }


def tiered_breakdown(amount, bands: Sequence[LevyBand]) -> list[LevySlice]:
    """
    Split ``amount`` across progressive bands.

    Each band taxes the slice between the previous band's upper bound and its
    own, so 600_000 over MOT_BANDS yields slices of 100k, 400k and 100k.
    Slices are unrounded; ``sum(s.levy for s in slices)`` is the exact total.
    Negative or non-finite amounts produce no slices.
    """
    remaining = coerce_non_negative(amount)
    slices: list[LevySlice] = []
    lower = 0.0
    for band in bands:
        if remaining <= 0:
            break
        if band.upper_bound is None:
            taxed = remaining
        else:
            taxed = max(min(remaining, band.upper_bound - lower), 0.0)
        if taxed > 0:
            slices.append(
                LevySlice(
                    lower_bound=lower,
                    upper_bound=band.upper_bound,
                    rate=band.rate,
                    taxed_amount=taxed,
                    levy=taxed * band.rate,
                )
            )
            remaining -= taxed
        if band.upper_bound is not None:
            lower = band.upper_bound
    if remaining > 0:
        log.debug("Bands exhausted with %.2f untaxed; final band is bounded", remaining)
    return slices


def compute_tiered_amount(amount, bands: Sequence[LevyBand]) -> float:
    """
    Progressive levy on ``amount``, ceiling-rounded to the cent.

    **Example:**
        ```python
        compute_tiered_amount(600_000, MOT_BANDS)  # 1_000 + 8_000 + 3_000 = 12_000.0
        ```
    """
    return round_up2(sum(s.levy for s in tiered_breakdown(amount, bands)))


def mot_stamp_duty(property_value) -> float:
    """Transfer-of-title (MOT) stamp duty."""
    return compute_tiered_amount(property_value, MOT_BANDS)


def legal_fee(property_value, min_fee: float = LEGAL_FEE_MINIMUM) -> float:
    """Legal fee on the conveyancing scale, floored at ``min_fee``; zero value, zero fee."""
    if coerce_non_negative(property_value) <= 0:
        return 0.0
    return max(compute_tiered_amount(property_value, LEGAL_FEE_BANDS), min_fee)


def loan_stamp_duty(loan_amount) -> float:
    """Loan-instrument stamp duty, a flat 0.5% of the loan."""
    return compute_tiered_amount(loan_amount, LOAN_DUTY_BANDS)


def entry_costs(property_value, loan_amount) -> EntryCosts:
    """Legal fee, MOT duty and loan duty for a purchase."""
    fee = legal_fee(property_value)
    mot = mot_stamp_duty(property_value)
    duty = loan_stamp_duty(loan_amount)
    return EntryCosts(
        legal_fee=fee,
        mot_stamp_duty=mot,
        loan_stamp_duty=duty,
        total=round_up2(fee + mot + duty),
    )
