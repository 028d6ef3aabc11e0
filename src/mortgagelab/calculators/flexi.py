"""
Flexi (offset) housing loan simulation with daily-rest interest.

Surplus cash parked against the loan is split into two pots:

- **Bucket**: offsets the balance interest is charged on.
- **Reserve**: earmarked to auto-pay upcoming installments; earns no offset.

Interest for a period is ``max(loan − bucket, 0) × rate × days / 365`` over
the actual days between consecutive due dates.

The simulation is a fold of a pure transition function over a sequence of
transition inputs::

    state, drafts = transition(state, DueTransition(...), context)

``FlexiState`` snapshots are immutable and each transition returns the event
drafts it emits, so a run can be replayed step by step from any state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import asdict, dataclass, replace
from datetime import date
from enum import Enum
from typing import Any

import pandas as pd

from mortgagelab.core.currency import round_half_up2
from mortgagelab.core.events import EventKind, EventLog, FlexiEvent
from mortgagelab.core.specs import LoanTerms
from mortgagelab.core.utils import (
    add_months,
    coerce_date,
    coerce_non_negative,
    days_between,
    month_range,
)

from .amortization import build_schedule, compute_installment

log = logging.getLogger(__name__)

DAYS_IN_YEAR = 365
HORIZON_CAP_MONTHS = 360
SEMI_FLEXI_BUCKET_SHARE = 0.8


class LoanType(str, Enum):
    """
    Semi-flexi parks 80% of an advance in the bucket and 20% in the reserve,
    and never taps the bucket for installments. Full-flexi parks everything
    in the bucket and draws installments from it when the reserve runs dry.
    """

    SEMI_FLEXI = "semi-flexi"
    FULL_FLEXI = "full-flexi"


class PaymentMethod(str, Enum):
    """
    How the monthly installment is settled.

    Auto-debit draws it from the savings pots (reserve, then bucket for
    full-flexi). Principal-repayment pays it from fresh cash so the pots are
    left untouched.
    """

    AUTO_DEBIT = "auto-debit"
    PRINCIPAL_REPAYMENT = "principal-repayment"


@dataclass(frozen=True)
class AdvancePayment:
    """Surplus cash placed into the flexi account on ``date``."""

    date: date
    amount: float


@dataclass(frozen=True)
class FlexiState:
    housing_loan_balance: float
    savings_reserve_balance: float = 0.0
    offset_bucket_balance: float = 0.0
    cumulative_interest: float = 0.0

    @classmethod
    def opening(cls, principal: float) -> FlexiState:
        return cls(housing_loan_balance=principal)

    @property
    def effective_balance(self) -> float:
        """Balance interest is charged on; only the bucket offsets."""
        return max(self.housing_loan_balance - self.offset_bucket_balance, 0.0)

    @property
    def paid_off(self) -> bool:
        return self.housing_loan_balance <= 0


@dataclass(frozen=True)
class FlexiContext:
    """Fixed parameters shared by every transition of one run."""

    annual_rate_pct: float
    installment: float
    loan_type: LoanType
    payment_method: PaymentMethod = PaymentMethod.AUTO_DEBIT


@dataclass(frozen=True)
class AdvanceTransition:
    when: date
    amount: float


@dataclass(frozen=True)
class DueTransition:
    when: date
    period_index: int
    days: int


Transition = AdvanceTransition | DueTransition
EventDraft = tuple[date, EventKind, dict[str, Any]]


@dataclass(frozen=True)
class FlexiPoint:
    """Balances after one month's due date, for charting."""

    period_index: int
    date: date
    housing_loan_balance: float
    savings_reserve_balance: float
    offset_bucket_balance: float


@dataclass(frozen=True)
class FlexiSummary:
    total_interest_baseline: float
    total_interest_flexi: float
    interest_savings: float
    earlier_payoff_date: date | None
    earlier_by_months: int
    months: int
    truncated: bool
    final_balance: float

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["earlier_payoff_date"] = (
            self.earlier_payoff_date.isoformat() if self.earlier_payoff_date else None
        )
        return out


@dataclass(frozen=True)
class FlexiResult:
    points: tuple[FlexiPoint, ...]
    events: tuple[FlexiEvent, ...]
    summary: FlexiSummary

    def points_frame(self) -> pd.DataFrame:
        df = pd.DataFrame(
            [asdict(p) for p in self.points],
            columns=[
                "period_index",
                "date",
                "housing_loan_balance",
                "savings_reserve_balance",
                "offset_bucket_balance",
            ],
        )
        df["date"] = pd.to_datetime(df["date"])
        if self.points:
            df.insert(1, "month", month_range(self.points[0].date, len(self.points)))
        return df

    def events_frame(self) -> pd.DataFrame:
        return pd.DataFrame([e.to_dict() for e in self.events])


def _balances(state: FlexiState) -> dict[str, float]:
    return {
        "housing_loan_balance": round_half_up2(state.housing_loan_balance),
        "savings_reserve_balance": round_half_up2(state.savings_reserve_balance),
        "offset_bucket_balance": round_half_up2(state.offset_bucket_balance),
    }


def apply_advance(
    state: FlexiState, event: AdvanceTransition, ctx: FlexiContext
) -> tuple[FlexiState, list[EventDraft]]:
    """Split an advance between bucket and reserve according to the loan type."""
    amount = coerce_non_negative(event.amount)
    if ctx.loan_type is LoanType.SEMI_FLEXI:
        to_bucket = amount * SEMI_FLEXI_BUCKET_SHARE
    else:
        to_bucket = amount
    to_reserve = amount - to_bucket

    new_state = replace(
        state,
        offset_bucket_balance=state.offset_bucket_balance + to_bucket,
        savings_reserve_balance=state.savings_reserve_balance + to_reserve,
    )
    details = {
        "amount": round_half_up2(amount),
        "to_bucket": round_half_up2(to_bucket),
        "to_reserve": round_half_up2(to_reserve),
        **_balances(new_state),
    }
    return new_state, [(event.when, EventKind.ADVANCE, details)]


def apply_due_date(
    state: FlexiState, event: DueTransition, ctx: FlexiContext
) -> tuple[FlexiState, list[EventDraft]]:
    """
    Charge daily-rest interest for the elapsed days and settle the installment.

    Under auto-debit the installment is drawn from the reserve first and, for
    full-flexi only, from the bucket. Anything left, or the whole installment
    under principal-repayment, is paid from fresh cash and not tracked.
    In the terminal month the installment shrinks to ``balance + interest``.
    """
    balance = state.housing_loan_balance
    effective = state.effective_balance
    interest = effective * (ctx.annual_rate_pct / 100.0) * (event.days / DAYS_IN_YEAR)

    installment = ctx.installment
    if balance + interest <= installment:
        installment = balance + interest
        principal_paid = balance
    else:
        principal_paid = min(max(installment - interest, 0.0), balance)

    remaining = installment
    from_reserve = 0.0
    from_bucket = 0.0
    if ctx.payment_method is PaymentMethod.AUTO_DEBIT:
        from_reserve = min(state.savings_reserve_balance, remaining)
        remaining -= from_reserve
        if ctx.loan_type is LoanType.FULL_FLEXI and remaining > 0:
            from_bucket = min(state.offset_bucket_balance, remaining)
            remaining -= from_bucket

    new_state = FlexiState(
        housing_loan_balance=balance - principal_paid,
        savings_reserve_balance=state.savings_reserve_balance - from_reserve,
        offset_bucket_balance=state.offset_bucket_balance - from_bucket,
        cumulative_interest=state.cumulative_interest + interest,
    )

    drafts: list[EventDraft] = [
        (
            event.when,
            EventKind.DUE_DATE,
            {
                "period_index": event.period_index,
                "days": event.days,
                "effective_balance": round_half_up2(effective),
                "installment": round_half_up2(installment),
                "interest": round_half_up2(interest),
                "principal_paid": round_half_up2(principal_paid),
                "paid_from_reserve": round_half_up2(from_reserve),
                "paid_from_bucket": round_half_up2(from_bucket),
                "paid_from_cash": round_half_up2(remaining),
                **_balances(new_state),
            },
        )
    ]
    if from_bucket > 0:
        drafts.append(
            (
                event.when,
                EventKind.SMART_LOGIC_TRIGGER,
                {
                    "bucket_used": round_half_up2(from_bucket),
                    "reserve_shortfall": round_half_up2(installment - from_reserve),
                    **_balances(new_state),
                },
            )
        )
    return new_state, drafts


def transition(
    state: FlexiState, event: Transition, ctx: FlexiContext
) -> tuple[FlexiState, list[EventDraft]]:
    """Pure state transition: ``(state, event) -> (state, emitted drafts)``."""
    if isinstance(event, AdvanceTransition):
        return apply_advance(state, event, ctx)
    if isinstance(event, DueTransition):
        return apply_due_date(state, event, ctx)
    raise TypeError(f"Unknown flexi transition {event!r}")


def iter_transitions(
    start: date, horizon: int, advances: Sequence[AdvancePayment]
) -> Iterator[Transition]:
    """
    Transition inputs for ``horizon`` months in firing order.

    Due date ``i`` is ``add_months(start, i)``. Each advance fires once, in
    the first month whose due date is on or after the advance date, ahead of
    that month's due-date transition.
    """
    pending = sorted(advances, key=lambda a: a.date)
    previous = start
    for i in range(1, horizon + 1):
        due = add_months(start, i)
        while pending and due >= pending[0].date:
            advance = pending.pop(0)
            yield AdvanceTransition(when=due, amount=advance.amount)
        yield DueTransition(when=due, period_index=i, days=days_between(previous, due))
        previous = due


def _normalize_advances(advances: Iterable[Any] | None) -> list[AdvancePayment]:
    out: list[AdvancePayment] = []
    for raw in advances or ():
        if isinstance(raw, AdvancePayment):
            when, amount = raw.date, raw.amount
        elif isinstance(raw, dict):
            when, amount = raw.get("date"), raw.get("amount")
        elif isinstance(raw, (tuple, list)) and len(raw) == 2:
            when, amount = raw
        else:
            when, amount = None, 0.0
        when = coerce_date(when)
        amount = coerce_non_negative(amount)
        if when is None or amount <= 0:
            log.debug("Ignoring advance without a date or positive amount: %r", raw)
            continue
        out.append(AdvancePayment(date=when, amount=amount))
    return out


def _empty_result() -> FlexiResult:
    return FlexiResult(
        points=(),
        events=(),
        summary=FlexiSummary(
            total_interest_baseline=0.0,
            total_interest_flexi=0.0,
            interest_savings=0.0,
            earlier_payoff_date=None,
            earlier_by_months=0,
            months=0,
            truncated=False,
            final_balance=0.0,
        ),
    )


def simulate_flexi_loan(
    terms: LoanTerms,
    advances: Iterable[AdvancePayment | dict | tuple] | None = None,
    loan_type: LoanType | str = LoanType.SEMI_FLEXI,
    *,
    installment: float | None = None,
    payment_method: PaymentMethod | str = PaymentMethod.AUTO_DEBIT,
) -> FlexiResult:
    """
    Simulate a flexi loan month by month and compare it with a plain schedule.

    Args:
        terms: Loan terms; the first due date is one month after start_date
        advances: Advance payments as AdvancePayment, ``{"date", "amount"}``
            dicts or ``(date, amount)`` tuples; invalid entries are skipped
        loan_type: "semi-flexi" or "full-flexi"
        installment: Fixed monthly installment; defaults to the annuity
            installment of ``terms``
        payment_method: "auto-debit" (installments drawn from the savings
            pots) or "principal-repayment" (paid from fresh cash)

    Returns:
        FlexiResult with one point per simulated month, the ordered event log
        and a summary. The run stops at payoff or after
        ``min(tenure_years × 12, 360)`` months; a run that hits the cap with
        debt outstanding is flagged ``truncated``.
    """
    if not isinstance(terms, LoanTerms) or not terms.is_valid:
        log.debug("Empty flexi simulation for invalid terms %r", terms)
        return _empty_result()
    loan_type = LoanType(loan_type)
    payment_method = PaymentMethod(payment_method)

    baseline_rows = build_schedule(terms)
    base_installment = coerce_non_negative(installment) or compute_installment(
        terms.principal, terms.annual_rate_pct, terms.tenure_years
    )
    ctx = FlexiContext(
        annual_rate_pct=terms.annual_rate_pct,
        installment=base_installment,
        loan_type=loan_type,
        payment_method=payment_method,
    )
    horizon = min(terms.months, HORIZON_CAP_MONTHS)

    state = FlexiState.opening(terms.principal)
    event_log = EventLog()
    event_log.append(
        terms.start_date,
        EventKind.LOAN_START,
        {
            "principal": round_half_up2(terms.principal),
            "annual_rate_pct": terms.annual_rate_pct,
            "tenure_years": terms.tenure_years,
            "installment": base_installment,
            "loan_type": loan_type.value,
            "payment_method": payment_method.value,
            **_balances(state),
        },
    )

    points: list[FlexiPoint] = []
    payoff_date: date | None = None
    for step in iter_transitions(
        terms.start_date, horizon, _normalize_advances(advances)
    ):
        state, drafts = transition(state, step, ctx)
        event_log.extend(drafts)
        if isinstance(step, DueTransition):
            points.append(
                FlexiPoint(
                    period_index=step.period_index,
                    date=step.when,
                    housing_loan_balance=round_half_up2(state.housing_loan_balance),
                    savings_reserve_balance=round_half_up2(
                        state.savings_reserve_balance
                    ),
                    offset_bucket_balance=round_half_up2(state.offset_bucket_balance),
                )
            )
            if state.paid_off:
                payoff_date = step.when
                break

    months = len(points)
    truncated = payoff_date is None
    if truncated:
        log.info(
            "Flexi simulation hit the %d-month horizon with %.2f outstanding",
            horizon,
            state.housing_loan_balance,
        )

    baseline_interest = round_half_up2(
        sum(row.interest_component for row in baseline_rows[:horizon])
    )
    flexi_interest = round_half_up2(state.cumulative_interest)
    earlier_by = 0
    earlier_date = None
    if payoff_date is not None and months < len(baseline_rows):
        earlier_by = len(baseline_rows) - months
        earlier_date = payoff_date

    return FlexiResult(
        points=tuple(points),
        events=event_log.snapshot(),
        summary=FlexiSummary(
            total_interest_baseline=baseline_interest,
            total_interest_flexi=flexi_interest,
            interest_savings=round_half_up2(max(0.0, baseline_interest - flexi_interest)),
            earlier_payoff_date=earlier_date,
            earlier_by_months=earlier_by,
            months=months,
            truncated=truncated,
            final_balance=round_half_up2(state.housing_loan_balance),
        ),
    )
