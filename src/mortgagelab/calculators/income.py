"""
Income recognition: statutory deductions and per-type haircuts.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from mortgagelab.core.currency import round_half_up2
from mortgagelab.core.handbook import DEFAULT_HANDBOOK, PolicyHandbook
from mortgagelab.core.utils import coerce_non_negative, coerce_number

BASIC_SALARY = "basicSalary"

INCOME_TYPES: tuple[str, ...] = (
    BASIC_SALARY,
    "fixedAllowance",
    "commission",
    "bonus",
    "rental",
    "other",
)

EPF_RATE = 0.11
SOCSO_RATE = 0.005
SOCSO_CAP = 80.0
PCB_PERSONAL_RELIEF = 2500.0
PCB_CHILD_RELIEF = 100.0
PCB_CHILD_RELIEF_CAP = 500.0


@dataclass(frozen=True)
class StatutoryDeductions:
    epf: float
    socso: float
    pcb: float
    total: float


@dataclass(frozen=True)
class IncomeRow:
    """Recognition of one income type."""

    income_type: str
    raw: float
    haircut: float
    statutory_deduction: float
    net_recognized: float
    manual_haircut: bool = False
    manual_statutory: bool = False


@dataclass(frozen=True)
class IncomeRecognition:
    rows: tuple[IncomeRow, ...]
    total_raw: float
    total_recognized: float


def statutory_deductions(basic_salary, children=0) -> StatutoryDeductions:
    """
    Rough monthly EPF, SOCSO and PCB (income tax) on a basic salary.

    EPF is 11%; SOCSO 0.5% capped at 80; PCB is a flat 3% / 8% / 15% on the
    salary above personal and child relief, stepping at 4,000 and 8,000 of
    taxable base.
    """
    salary = coerce_non_negative(basic_salary)
    if salary <= 0:
        return StatutoryDeductions(0.0, 0.0, 0.0, 0.0)

    epf = salary * EPF_RATE
    socso = min(salary * SOCSO_RATE, SOCSO_CAP)
    child_relief = min(
        int(coerce_non_negative(children)) * PCB_CHILD_RELIEF, PCB_CHILD_RELIEF_CAP
    )
    taxable = max(salary - PCB_PERSONAL_RELIEF - child_relief, 0.0)
    if taxable > 8000:
        pcb_rate = 0.15
    elif taxable > 4000:
        pcb_rate = 0.08
    else:
        pcb_rate = 0.03
    pcb = taxable * pcb_rate
    return StatutoryDeductions(
        epf=round_half_up2(epf),
        socso=round_half_up2(socso),
        pcb=round_half_up2(pcb),
        total=round_half_up2(epf + socso + pcb),
    )


def recognize_income(
    incomes: Mapping[str, float],
    handbook: PolicyHandbook = DEFAULT_HANDBOOK,
    *,
    children=0,
    haircut_overrides: Mapping[str, float] | None = None,
    statutory_override=None,
) -> IncomeRecognition:
    """
    Net recognized income per type.

    Basic salary is reduced by statutory deductions before its haircut; every
    other type is simply multiplied by the handbook haircut for that type.

    Args:
        incomes: Raw monthly amount per income type (keys as in INCOME_TYPES;
            unknown keys are recognized with a haircut of 1.0)
        handbook: Supplies the default haircut per income type
        children: Number of children, for PCB child relief
        haircut_overrides: Manual haircut ratios per type (0.8 == 80%)
        statutory_override: Manual statutory deduction for basic salary

    Returns:
        IncomeRecognition with one row per known income type plus any extra
        keys in ``incomes``.
    """
    overrides = dict(haircut_overrides or {})
    keys = list(INCOME_TYPES) + [k for k in incomes if k not in INCOME_TYPES]

    if statutory_override is not None:
        stat_total = coerce_non_negative(statutory_override)
    else:
        stat_total = statutory_deductions(incomes.get(BASIC_SALARY), children).total

    rows: list[IncomeRow] = []
    for key in keys:
        raw = coerce_non_negative(incomes.get(key))
        manual = key in overrides
        haircut = (
            min(max(coerce_number(overrides[key]), 0.0), 1.0)
            if manual
            else handbook.haircut_for(key)
        )
        deduction = stat_total if key == BASIC_SALARY else 0.0
        base = max(raw - deduction, 0.0) if key == BASIC_SALARY else raw
        rows.append(
            IncomeRow(
                income_type=key,
                raw=raw,
                haircut=haircut,
                statutory_deduction=deduction,
                net_recognized=round_half_up2(base * haircut),
                manual_haircut=manual,
                manual_statutory=(
                    key == BASIC_SALARY and statutory_override is not None
                ),
            )
        )

    return IncomeRecognition(
        rows=tuple(rows),
        total_raw=round_half_up2(sum(r.raw for r in rows)),
        total_recognized=round_half_up2(sum(r.net_recognized for r in rows)),
    )
