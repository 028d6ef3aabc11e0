"""
Debt-service ratio (DSR), net disposable income (NDI) and risk banding.

Commitment totals are supplied by the caller. ``summarize_commitments`` helps
aggregate them, including hidden debts that banks cannot see.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from mortgagelab.core.currency import round_half_up2, round_up2
from mortgagelab.core.handbook import DEFAULT_HANDBOOK, RED_DSR_LINE, PolicyHandbook
from mortgagelab.core.specs import CommitmentLine
from mortgagelab.core.utils import coerce_non_negative, coerce_number

log = logging.getLogger(__name__)

GAP_TARGET_DSR = 0.60


class RiskBand(str, Enum):
    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"
    FAIL_COST = "FAIL_COST"


class BankTierDecision(str, Enum):
    TIER_1 = "TIER_1"
    TIER_2 = "TIER_2"
    DECLINE = "DECLINE"


@dataclass(frozen=True)
class DsrThresholds:
    """Band edges; YELLOW starts at ``yellow`` (inclusive), RED at ``red``."""

    yellow: float = 0.60
    red: float = RED_DSR_LINE

    @classmethod
    def from_handbook(cls, handbook: PolicyHandbook) -> DsrThresholds:
        """YELLOW starts at the handbook limit; RED is never below it."""
        limit = handbook.bank_strategies.default_dsr_limit
        return cls(yellow=limit, red=max(RED_DSR_LINE, limit))


@dataclass(frozen=True)
class AffordabilityResult:
    dsr_ratio: float
    net_disposable_income: float
    band: RiskBand

    @property
    def passes_cost_check(self) -> bool:
        return self.band is not RiskBand.FAIL_COST

    def to_dict(self) -> dict:
        return {
            "dsr_ratio": self.dsr_ratio,
            "net_disposable_income": self.net_disposable_income,
            "band": self.band.value,
        }


@dataclass(frozen=True)
class AffordabilityGap:
    """Two independent what-ifs to reach the target DSR line."""

    extra_income_needed: float
    debt_clearance_needed: float


@dataclass(frozen=True)
class CommitmentSummary:
    bank_commitment: float
    hidden_commitment: float
    total_commitment: float


@dataclass(frozen=True)
class BankAssessment:
    bank_id: str
    bank_name: str
    decision: BankTierDecision
    tier1_limit: float
    tier2_limit: float


@dataclass(frozen=True)
class MitigationOutcome:
    """Commitment, DSR and NDI after a what-if adjustment."""

    total_commitment: float
    dsr_ratio: float
    net_disposable_income: float
    note: str = ""


def classify_dsr(
    dsr_ratio: float, thresholds: DsrThresholds = DsrThresholds()
) -> RiskBand:
    """Band a DSR ratio: ``< yellow`` GREEN, ``[yellow, red)`` YELLOW, ``>= red`` RED."""
    if dsr_ratio >= thresholds.red:
        return RiskBand.RED
    if dsr_ratio >= thresholds.yellow:
        return RiskBand.YELLOW
    return RiskBand.GREEN


def compute_affordability(
    total_commitment,
    net_income,
    living_cost_baseline=0.0,
    *,
    thresholds: DsrThresholds | None = None,
) -> AffordabilityResult:
    """
    DSR, NDI and risk band.

    Classification is NDI-first: when the income left after commitments is
    below the cost-of-living baseline the result is FAIL_COST whatever the
    ratio. Otherwise the DSR is banded with ``thresholds`` (60% / 70% by
    default).

    Args:
        total_commitment: Sum of monthly debt installments (visible and hidden)
        net_income: Recognized net monthly income
        living_cost_baseline: Minimum NDI required for the household profile
        thresholds: Band edges; see DsrThresholds.from_handbook

    Returns:
        AffordabilityResult. DSR is 0 when income is not positive; NDI may be
        negative.
    """
    commitment = coerce_non_negative(total_commitment)
    income = coerce_number(net_income)
    baseline = coerce_non_negative(living_cost_baseline)

    dsr = commitment / income if income > 0 else 0.0
    ndi = income - commitment

    if ndi < baseline:
        band = RiskBand.FAIL_COST
    else:
        band = classify_dsr(dsr, thresholds or DsrThresholds())

    return AffordabilityResult(
        dsr_ratio=dsr, net_disposable_income=round_half_up2(ndi), band=band
    )


def compute_gap(
    total_commitment, net_income, target: float = GAP_TARGET_DSR
) -> AffordabilityGap:
    """
    Remediation targets to bring DSR down to ``target``.

    ``extra_income_needed`` keeps debt fixed and raises income;
    ``debt_clearance_needed`` keeps income fixed and cuts monthly debt. They
    are alternatives, not a combined plan.
    """
    commitment = coerce_non_negative(total_commitment)
    income = coerce_non_negative(net_income)
    if target <= 0:
        return AffordabilityGap(0.0, 0.0)
    return AffordabilityGap(
        extra_income_needed=round_up2(max(0.0, commitment / target - income)),
        debt_clearance_needed=round_up2(max(0.0, commitment - income * target)),
    )


def credit_card_commitment(amount, basis: str = "outstanding") -> float:
    """Monthly credit-card commitment: 5% of outstanding, or 1% of the card limit."""
    rate = 0.01 if basis == "limit" else 0.05
    return round_half_up2(coerce_non_negative(amount) * rate)


def summarize_commitments(lines: Iterable[CommitmentLine]) -> CommitmentSummary:
    """Split commitments into bank-visible and hidden totals."""
    bank = 0.0
    hidden = 0.0
    for line in lines:
        if line.visible:
            bank += line.installment
        else:
            hidden += line.installment
    return CommitmentSummary(
        bank_commitment=round_half_up2(bank),
        hidden_commitment=round_half_up2(hidden),
        total_commitment=round_half_up2(bank + hidden),
    )


def assess_banks(
    dsr_ratio, handbook: PolicyHandbook = DEFAULT_HANDBOOK
) -> list[BankAssessment]:
    """Place a DSR against each bank's tier limits (both limits inclusive)."""
    dsr = coerce_non_negative(dsr_ratio)
    out: list[BankAssessment] = []
    for bank in handbook.bank_strategies.banks:
        if dsr <= bank.tier1_limit:
            decision = BankTierDecision.TIER_1
        elif dsr <= bank.tier2_limit:
            decision = BankTierDecision.TIER_2
        else:
            decision = BankTierDecision.DECLINE
        out.append(
            BankAssessment(
                bank_id=bank.id,
                bank_name=bank.name,
                decision=decision,
                tier1_limit=bank.tier1_limit,
                tier2_limit=bank.tier2_limit,
            )
        )
    return out


def max_tenure_for_age(age, handbook: PolicyHandbook = DEFAULT_HANDBOOK) -> int:
    """Longest tenure (years) that matures by the handbook's maximum age."""
    years = int(coerce_non_negative(age))
    policy = handbook.global_policy
    if years <= 0:
        return policy.max_tenure
    return min(policy.max_tenure, max(policy.max_age - years, 0))


def _outcome(total: float, income: float, note: str = "") -> MitigationOutcome:
    return MitigationOutcome(
        total_commitment=round_half_up2(total),
        dsr_ratio=total / income if income > 0 else 0.0,
        net_disposable_income=round_half_up2(income - total),
        note=note,
    )


def simulate_tenure_extension(
    total_commitment,
    net_income,
    housing_installment,
    current_tenure,
    handbook: PolicyHandbook = DEFAULT_HANDBOOK,
) -> MitigationOutcome | None:
    """
    "Soft fix": stretch the housing loan to the handbook's maximum tenure.

    The housing installment is scaled by ``current_tenure / max_tenure``.
    Returns None when the loan already runs at the maximum tenure or there is
    no housing installment to stretch.
    """
    max_tenure = handbook.global_policy.max_tenure
    tenure = coerce_non_negative(current_tenure)
    housing = coerce_non_negative(housing_installment)
    if housing <= 0 or tenure <= 0 or tenure >= max_tenure:
        return None
    commitment = coerce_non_negative(total_commitment)
    new_housing = housing * tenure / max_tenure
    return _outcome(
        commitment - housing + new_housing,
        coerce_number(net_income),
        note=f"tenure {tenure:g}y -> {max_tenure}y",
    )


def best_settlement_candidate(
    lines: Iterable[CommitmentLine], exclude_ids: Iterable[str] = ("housing",)
) -> CommitmentLine | None:
    """
    Debt whose settlement frees the most installment per unit of balance.

    Lines without an installment or balance, and the subject housing loan,
    are skipped.
    """
    excluded = set(exclude_ids)
    best: CommitmentLine | None = None
    best_score = 0.0
    for line in lines:
        if line.id in excluded:
            continue
        if line.installment <= 0 or line.balance <= 0:
            continue
        score = line.installment / line.balance
        if score > best_score:
            best, best_score = line, score
    return best


def simulate_debt_settlement(
    lines: Iterable[CommitmentLine], net_income
) -> MitigationOutcome | None:
    """Outcome of settling the best candidate debt; None when nothing qualifies."""
    lines = list(lines)
    candidate = best_settlement_candidate(lines)
    if candidate is None:
        return None
    total = summarize_commitments(lines).total_commitment - candidate.installment
    return _outcome(
        total,
        coerce_number(net_income),
        note=f"settle {candidate.label} ({round_half_up2(candidate.balance):.2f})",
    )
