"""
KPI calculation utilities for loan analysis.

This module provides standalone functions for computing indicators from the
schedule DataFrame (``schedule_frame``) and the flexi points DataFrame
(``FlexiResult.points_frame``). All functions return pandas Series or plain
scalars and never modify their input.
"""

from __future__ import annotations

import numpy as np
import pandas as pd


def interest_paid_cum(
    df: pd.DataFrame,
    interest_col: str = "interest_component",
) -> pd.Series:
    """
    Calculate cumulative interest paid.

    Args:
        df: Schedule DataFrame
        interest_col: Column name for interest

    Returns:
        Series with cumulative interest paid (zeros if the column is missing)
    """
    if interest_col not in df.columns:
        return pd.Series(0.0, index=df.index, name="interest_paid_cum")

    return df[interest_col].cumsum().rename("interest_paid_cum")


def principal_paid_cum(
    df: pd.DataFrame,
    principal_col: str = "principal_component",
) -> pd.Series:
    """Cumulative principal repaid (zeros if the column is missing)."""
    if principal_col not in df.columns:
        return pd.Series(0.0, index=df.index, name="principal_paid_cum")

    return df[principal_col].cumsum().rename("principal_paid_cum")


def interest_share(
    df: pd.DataFrame,
    interest_col: str = "interest_component",
    payment_col: str = "payment",
) -> pd.Series:
    """
    Share of each payment that goes to interest.

    Returns:
        Series in [0, 1] (NaN where the payment is zero)
    """
    payment = df[payment_col]
    share = np.where(payment > 0, df[interest_col] / payment, np.nan)
    return pd.Series(share, index=df.index, name="interest_share")


def dsti(
    df: pd.DataFrame,
    net_income: float | str = "net_income",
    payment_col: str = "payment",
) -> pd.Series:
    """
    Calculate Debt Service to Income ratio per period.

    DSTI = payment / net_income

    Args:
        df: Schedule DataFrame
        net_income: Monthly net income, either a number or a column name
        payment_col: Column name for installments

    Returns:
        Series with DSTI ratio (NaN where income is unavailable or not positive)
    """
    if payment_col not in df.columns:
        return pd.Series(np.nan, index=df.index, name="dsti")

    if isinstance(net_income, str):
        if net_income not in df.columns:
            return pd.Series(np.nan, index=df.index, name="dsti")
        income = df[net_income]
    else:
        income = pd.Series(float(net_income), index=df.index)

    ratio = np.where(income > 0, df[payment_col] / income, np.nan)
    return pd.Series(ratio, index=df.index, name="dsti")


def ltv(
    df: pd.DataFrame,
    property_value: float,
    balance_col: str = "closing_balance",
) -> pd.Series:
    """
    Calculate Loan to Value ratio against a fixed property value.

    Args:
        df: Schedule DataFrame, or a flexi points DataFrame with
            ``balance_col="housing_loan_balance"``
        property_value: Property value the loan is secured on
        balance_col: Column name for the outstanding balance

    Returns:
        Series with LTV ratio (NaN when the property value is not positive)
    """
    if balance_col not in df.columns or property_value <= 0:
        return pd.Series(np.nan, index=df.index, name="ltv")

    return (df[balance_col] / property_value).rename("ltv")


def payoff_month(
    df: pd.DataFrame,
    balance_col: str = "closing_balance",
) -> int | None:
    """
    First month (1-based) whose balance is fully repaid.

    Returns:
        Month number, or None if the balance never reaches zero
    """
    if balance_col not in df.columns or df.empty:
        return None

    paid = df[balance_col] <= 0
    if not paid.any():
        return None

    return int(np.where(paid)[0][0]) + 1


def balance_gap(
    flexi_df: pd.DataFrame,
    schedule_df: pd.DataFrame,
    flexi_balance_col: str = "housing_loan_balance",
    schedule_balance_col: str = "closing_balance",
    date_col: str = "date",
) -> pd.Series:
    """
    How far the flexi loan is ahead of the plain schedule, per due date.

    Gap = schedule balance − flexi balance. Positive values mean the flexi
    loan owes less at that date.

    Returns:
        Series indexed by date (inner join on ``date_col``)
    """
    merged = pd.merge(
        flexi_df[[date_col, flexi_balance_col]],
        schedule_df[[date_col, schedule_balance_col]],
        on=date_col,
        how="inner",
    )

    gap = merged[schedule_balance_col] - merged[flexi_balance_col]
    gap.index = merged[date_col]
    return gap.rename("balance_gap")
