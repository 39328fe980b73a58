"""Week boundary helpers.

Weeks start on Sunday. Both the budget partition key and the lower
bound of "this week's" expenses are the ISO date string returned by
:func:`week_start`. Comparisons are done on zero-padded ``YYYY-MM-DD``
strings, which sort the same way the dates do.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Optional


def week_start(today: Optional[date] = None) -> str:
    """Return the most recent Sunday on or before ``today`` as ``YYYY-MM-DD``.

    Example:
        >>> week_start(date(2024, 5, 15))  # a Wednesday
        '2024-05-12'
    """
    if today is None:
        today = date.today()
    elif isinstance(today, datetime):
        today = today.date()
    # isoweekday(): Monday=1 .. Sunday=7, so Sunday maps to offset 0
    offset = today.isoweekday() % 7
    return (today - timedelta(days=offset)).isoformat()


def to_iso_date(value: Any) -> str:
    """Normalise a date-like value to a zero-padded ``YYYY-MM-DD`` string.

    Raises:
        ValueError: If ``value`` cannot be read as a calendar date.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        text = value.strip()
        if 'T' in text:
            text = text.split('T')[0]
        return date.fromisoformat(text).isoformat()
    raise ValueError(f"Unsupported date value: {value!r}")


def is_in_week(expense_date: str, start: str) -> bool:
    """True when ``expense_date`` falls on or after ``start``.

    There is no upper bound: future-dated expenses count toward the
    current week.
    """
    return expense_date >= start
