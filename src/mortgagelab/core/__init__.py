"""
Core module for MortgageLab.

This module contains the value objects, rounding rules and configuration that
every calculator builds on.
"""

from .currency import (
    CURRENCIES,
    MYR,
    Currency,
    RoundingPolicy,
    get_currency,
    round_half_up2,
    round_up2,
)
from .errors import ConfigError
from .events import EventKind, EventLog, FlexiEvent
from .handbook import (
    DEFAULT_HANDBOOK,
    BankStrategies,
    BankTier,
    GlobalPolicy,
    IncomeRule,
    PolicyHandbook,
    load_handbook,
)
from .specs import MAX_TENURE_YEARS, CommitmentLine, LevyBand, LoanTerms
from .utils import (
    add_months,
    coerce_date,
    coerce_non_negative,
    coerce_number,
    days_between,
    month_range,
)

__all__ = [
    # Errors
    "ConfigError",
    # Currency
    "Currency",
    "RoundingPolicy",
    "MYR",
    "CURRENCIES",
    "get_currency",
    "round_up2",
    "round_half_up2",
    # Specs
    "LoanTerms",
    "LevyBand",
    "CommitmentLine",
    "MAX_TENURE_YEARS",
    # Events
    "EventKind",
    "EventLog",
    "FlexiEvent",
    # Handbook
    "PolicyHandbook",
    "GlobalPolicy",
    "IncomeRule",
    "BankTier",
    "BankStrategies",
    "DEFAULT_HANDBOOK",
    "load_handbook",
    # Utilities
    "coerce_number",
    "coerce_non_negative",
    "coerce_date",
    "add_months",
    "days_between",
    "month_range",
]
