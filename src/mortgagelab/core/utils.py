"""
Utility functions for MortgageLab.
"""

from __future__ import annotations

import calendar
import math
from datetime import date, datetime
from typing import Any

import numpy as np


def coerce_number(value: Any, default: float = 0.0) -> float:
    """
    Coerce loose form input into a finite float.

    A half-filled form must never crash the calculation layer, so anything
    that is not a finite number (None, "", "abc", NaN, inf) becomes ``default``.
    Strings may carry thousands separators ("450,000").

    **Example:**
        ```python
        coerce_number("450,000")   # 450000.0
        coerce_number(None)        # 0.0
        coerce_number(float("nan"))  # 0.0
        ```
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        text = value.replace(",", "").strip()
        if not text:
            return default
        try:
            number = float(text)
        except ValueError:
            return default
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return default
    if not math.isfinite(number):
        return default
    return number


def coerce_non_negative(value: Any) -> float:
    """Coerce to a finite float, clamping negatives to zero."""
    return max(coerce_number(value), 0.0)


def coerce_date(value: Any) -> date | None:
    """Coerce a date, datetime or ISO 'YYYY-MM-DD' string; anything else is None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, np.datetime64):
        if np.isnat(value):
            return None
        return value.astype("datetime64[D]").item()
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def add_months(start: date, months: int) -> date:
    """
    Step a date by whole months, clamping to the last valid day of the month.

    Always computed from ``start`` so a schedule anchored on the 31st returns
    to the 31st after a short month:

        add_months(date(2024, 1, 31), 1)  # 2024-02-29
        add_months(date(2024, 1, 31), 2)  # 2024-03-31
    """
    total = start.month - 1 + months
    year = start.year + total // 12
    month = total % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def days_between(start: date, end: date) -> int:
    """Whole days from ``start`` to ``end``, never negative."""
    return max((end - start).days, 0)


def month_range(start: date, months: int) -> np.ndarray:
    """
    Generate a range of monthly datetime64 values starting from a given date.

    Used as the ``month`` column of the flexi points DataFrame.

    **Example:**
        ```python
        month_range(date(2026, 1, 1), 3)
        # array(['2026-01', '2026-02', '2026-03'], dtype='datetime64[M]')
        ```
    """
    s = np.datetime64(start, "M")
    return s + np.arange(months).astype("timedelta64[M]")
