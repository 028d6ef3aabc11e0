"""
MortgageLab - Mortgage Finance Calculation Toolkit

MortgageLab computes the numbers behind a home-loan consultation: installment
and amortization schedule, entry costs, debt-service ratio, reverse
affordability and a flexi (offset) loan simulation.

Key Features:
- **Deterministic**: Pure functions over immutable value objects
- **Cent-exact**: Schedules are kept in whole cents and end at exactly zero
- **Explicit configuration**: Lending policy travels as a PolicyHandbook value
- **Tolerant input**: Loose form values degrade to zero instead of raising

Quick Start:
    ```python
    from datetime import date
    from mortgagelab import LoanTerms, amortize, compute_affordability

    terms = LoanTerms(principal=450_000, annual_rate_pct=4.1, tenure_years=35,
                      start_date=date(2026, 1, 1))
    result = amortize(terms)
    result.installment          # monthly payment, ceiling-rounded
    result.annual()             # pandas roll-up by calendar year

    compute_affordability(3000, 5000, 1500).band   # RiskBand.YELLOW
    ```

Flexi loans:
    ```python
    from mortgagelab import AdvancePayment, simulate_flexi_loan

    result = simulate_flexi_loan(
        terms,
        advances=[AdvancePayment(date(2026, 2, 1), 50_000)],
        loan_type="full-flexi",
    )
    result.summary.interest_savings
    result.events_frame()
    ```
"""

# Version information
__version__ = "0.1.0"
__description__ = "Mortgage finance calculation toolkit"

from .calculators import (
    AdvancePayment,
    AffordabilityResult,
    AmortizationRow,
    FlexiResult,
    LoanType,
    PaymentMethod,
    RiskBand,
    amortize,
    build_schedule,
    compute_affordability,
    compute_gap,
    compute_installment,
    compute_tiered_amount,
    entry_costs,
    legal_fee,
    loan_stamp_duty,
    max_principal_from_payment,
    max_property_price,
    mot_stamp_duty,
    recognize_income,
    reverse_affordability,
    simulate_flexi_loan,
)
from .core import (
    DEFAULT_HANDBOOK,
    CommitmentLine,
    ConfigError,
    LevyBand,
    LoanTerms,
    PolicyHandbook,
    load_handbook,
)
from .formatting import format_currency, format_percent
from .kpi import (
    balance_gap,
    dsti,
    interest_paid_cum,
    interest_share,
    ltv,
    payoff_month,
    principal_paid_cum,
)

__all__ = [
    # Core
    "LoanTerms",
    "LevyBand",
    "CommitmentLine",
    "ConfigError",
    "PolicyHandbook",
    "DEFAULT_HANDBOOK",
    "load_handbook",
    # Calculators
    "compute_installment",
    "build_schedule",
    "amortize",
    "AmortizationRow",
    "compute_tiered_amount",
    "mot_stamp_duty",
    "legal_fee",
    "loan_stamp_duty",
    "entry_costs",
    "compute_affordability",
    "compute_gap",
    "AffordabilityResult",
    "RiskBand",
    "recognize_income",
    "max_principal_from_payment",
    "max_property_price",
    "reverse_affordability",
    "LoanType",
    "PaymentMethod",
    "AdvancePayment",
    "FlexiResult",
    "simulate_flexi_loan",
    # Formatting
    "format_currency",
    "format_percent",
    # KPI utilities
    "balance_gap",
    "dsti",
    "interest_paid_cum",
    "interest_share",
    "ltv",
    "payoff_month",
    "principal_paid_cum",
]
