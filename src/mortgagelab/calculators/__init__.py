"""
Calculators for MortgageLab.

Each module is a set of pure functions over plain numbers and core value
objects:

    - levy: tiered transfer duty, legal fee and loan stamp duty
    - amortization: annuity installment and amortization schedule
    - affordability: DSR / NDI banding, remediation gaps and mitigation
    - income: statutory deductions and income haircuts
    - reverse: largest loan and property price for a monthly budget
    - flexi: offset-account loan simulation with daily-rest interest
    - quote: net price and cash back for developer rebates
"""

from .affordability import (
    AffordabilityGap,
    AffordabilityResult,
    BankAssessment,
    BankTierDecision,
    CommitmentSummary,
    DsrThresholds,
    MitigationOutcome,
    RiskBand,
    assess_banks,
    best_settlement_candidate,
    classify_dsr,
    compute_affordability,
    compute_gap,
    credit_card_commitment,
    max_tenure_for_age,
    simulate_debt_settlement,
    simulate_tenure_extension,
    summarize_commitments,
)
from .amortization import (
    AmortizationResult,
    AmortizationRow,
    ScheduleTotals,
    amortize,
    annual_summary,
    build_schedule,
    compute_installment,
    schedule_frame,
    schedule_totals,
)
from .flexi import (
    AdvancePayment,
    FlexiResult,
    FlexiState,
    FlexiSummary,
    LoanType,
    PaymentMethod,
    simulate_flexi_loan,
    transition,
)
from .income import (
    INCOME_TYPES,
    IncomeRecognition,
    IncomeRow,
    StatutoryDeductions,
    recognize_income,
    statutory_deductions,
)
from .levy import (
    LEGAL_FEE_BANDS,
    LOAN_DUTY_BANDS,
    MOT_BANDS,
    EntryCosts,
    LevySlice,
    compute_tiered_amount,
    entry_costs,
    legal_fee,
    loan_stamp_duty,
    mot_stamp_duty,
    tiered_breakdown,
)
from .quote import SnapQuote, net_price_and_cash_back
from .reverse import (
    ReverseResult,
    budget_from_income,
    max_principal_from_payment,
    max_property_price,
    reverse_affordability,
)

__all__ = [
    # Levy
    "MOT_BANDS",
    "LEGAL_FEE_BANDS",
    "LOAN_DUTY_BANDS",
    "LevySlice",
    "EntryCosts",
    "tiered_breakdown",
    "compute_tiered_amount",
    "mot_stamp_duty",
    "legal_fee",
    "loan_stamp_duty",
    "entry_costs",
    # Amortization
    "AmortizationRow",
    "AmortizationResult",
    "ScheduleTotals",
    "compute_installment",
    "build_schedule",
    "schedule_totals",
    "schedule_frame",
    "annual_summary",
    "amortize",
    # Affordability
    "RiskBand",
    "BankTierDecision",
    "DsrThresholds",
    "AffordabilityResult",
    "AffordabilityGap",
    "CommitmentSummary",
    "BankAssessment",
    "MitigationOutcome",
    "classify_dsr",
    "compute_affordability",
    "compute_gap",
    "credit_card_commitment",
    "summarize_commitments",
    "assess_banks",
    "max_tenure_for_age",
    "simulate_tenure_extension",
    "best_settlement_candidate",
    "simulate_debt_settlement",
    # Income
    "INCOME_TYPES",
    "StatutoryDeductions",
    "IncomeRow",
    "IncomeRecognition",
    "statutory_deductions",
    "recognize_income",
    # Reverse
    "ReverseResult",
    "max_principal_from_payment",
    "max_property_price",
    "reverse_affordability",
    "budget_from_income",
    # Flexi
    "LoanType",
    "PaymentMethod",
    "AdvancePayment",
    "FlexiState",
    "FlexiSummary",
    "FlexiResult",
    "transition",
    "simulate_flexi_loan",
    # Quote
    "SnapQuote",
    "net_price_and_cash_back",
]
