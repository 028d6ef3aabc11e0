"""
Tests for KPI utility functions.
"""

from datetime import date

import numpy as np
import pandas as pd
import pytest
from mortgagelab.calculators.amortization import build_schedule, schedule_frame
from mortgagelab.calculators.flexi import AdvancePayment, simulate_flexi_loan
from mortgagelab.core.specs import LoanTerms
from mortgagelab.kpi import (
    balance_gap,
    dsti,
    interest_paid_cum,
    interest_share,
    ltv,
    payoff_month,
    principal_paid_cum,
)


class TestKPIUtilities:
    """Test KPI utility functions."""

    @pytest.fixture
    def terms(self):
        return LoanTerms(120_000, 4.0, 5, date(2026, 1, 1))

    @pytest.fixture
    def schedule_df(self, terms):
        return schedule_frame(build_schedule(terms))

    def test_interest_paid_cum(self, schedule_df):
        cum = interest_paid_cum(schedule_df)

        assert cum.name == "interest_paid_cum"
        assert cum.is_monotonic_increasing
        assert cum.iloc[-1] == pytest.approx(schedule_df["interest_component"].sum())

    def test_interest_paid_cum_missing_column(self):
        df = pd.DataFrame({"payment": [1.0, 2.0]})
        assert (interest_paid_cum(df) == 0.0).all()

    def test_principal_paid_cum(self, schedule_df):
        cum = principal_paid_cum(schedule_df)
        assert cum.iloc[-1] == pytest.approx(120_000, abs=0.01)

    def test_interest_share_declines(self, schedule_df):
        share = interest_share(schedule_df)

        assert share.iloc[0] > share.iloc[-1]
        assert ((share >= 0) & (share <= 1)).all()

    def test_dsti_with_scalar_income(self, schedule_df):
        ratio = dsti(schedule_df, 5_000)

        assert ratio.name == "dsti"
        assert ratio.iloc[0] == pytest.approx(schedule_df["payment"].iloc[0] / 5_000)

    def test_dsti_with_income_column(self, schedule_df):
        df = schedule_df.assign(net_income=0.0)
        assert dsti(df).isna().all()
        assert dsti(schedule_df, "salary").isna().all()

    def test_ltv(self, schedule_df):
        ratio = ltv(schedule_df, 150_000)

        assert ratio.iloc[-1] == 0.0
        assert ratio.iloc[0] < 0.8
        assert ltv(schedule_df, 0).isna().all()

    def test_payoff_month(self, schedule_df):
        assert payoff_month(schedule_df) == 60
        assert payoff_month(pd.DataFrame({"closing_balance": [10.0, 5.0]})) is None
        assert payoff_month(pd.DataFrame()) is None

    def test_flexi_balance_gap(self, terms, schedule_df):
        result = simulate_flexi_loan(terms, [AdvancePayment(date(2026, 1, 1), 20_000)])
        gap = balance_gap(result.points_frame(), schedule_df)

        assert gap.name == "balance_gap"
        assert len(gap) == len(result.points)
        assert (gap > 0).all()
        assert ltv(result.points_frame(), 150_000, "housing_loan_balance").notna().all()
        assert np.isfinite(gap.to_numpy()).all()
