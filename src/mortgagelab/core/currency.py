"""
Currency and precision handling for MortgageLab.

Installments, levies and remediation gaps are rounded *up* to the cent so a
borrower is never short-paid by a fractional cent. Interest components and
reported balances use half-up rounding.
"""

from __future__ import annotations

import math
from decimal import ROUND_CEILING, ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal, localcontext
from enum import Enum

# Binary floats carry noise such as 0.1 + 0.2 == 0.30000000000000004; values
# are snapped to this many places before the policy rounding is applied.
_NOISE_PLACES = 9


class RoundingPolicy(Enum):
    """Rounding policies for currency calculations."""

    CEILING = ROUND_CEILING
    HALF_UP = ROUND_HALF_UP
    BANKERS = ROUND_HALF_EVEN


class Currency:
    """
    Currency definition with precision and rounding rules.

    Attributes:
        code: ISO currency code (e.g., 'MYR')
        decimals: Number of decimal places for this currency
        rounding: Rounding policy for calculations
    """

    def __init__(
        self,
        code: str,
        decimals: int = 2,
        rounding: RoundingPolicy = RoundingPolicy.CEILING,
    ):
        self.code = code.upper()
        self.decimals = decimals
        self.rounding = rounding

    def quantize(self, amount: Decimal) -> Decimal:
        """Quantize amount to currency precision."""
        quantum = Decimal("1").scaleb(-self.decimals)  # e.g., 0.01 for 2 dp
        with localcontext() as ctx:
            ctx.prec = 60
            snapped = amount.quantize(
                Decimal("1").scaleb(-_NOISE_PLACES), rounding=ROUND_HALF_EVEN
            )
            return snapped.quantize(quantum, rounding=self.rounding.value)

    def round(self, value: float) -> float:
        """Round a float amount and return a float."""
        if not math.isfinite(value):
            return 0.0
        return float(self.quantize(Decimal(repr(float(value)))))

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency('{self.code}', decimals={self.decimals})"


MYR = Currency("MYR", decimals=2, rounding=RoundingPolicy.CEILING)
_MYR_HALF_UP = Currency("MYR", decimals=2, rounding=RoundingPolicy.HALF_UP)

CURRENCIES: dict[str, Currency] = {"MYR": MYR}


def get_currency(code: str) -> Currency:
    """Get currency by code."""
    if code not in CURRENCIES:
        # Default to 2 decimal places for unknown currencies
        return Currency(code, decimals=2)
    return CURRENCIES[code]


def round_up2(value: float) -> float:
    """Ceiling-round to cents (1992.721 -> 1992.73, 1992.72 -> 1992.72)."""
    return MYR.round(value)


def round_half_up2(value: float) -> float:
    """Half-up round to cents (used for interest and reported balances)."""
    return _MYR_HALF_UP.round(value)
