"""Formatting utilities for currency and percentages."""

from __future__ import annotations

from typing import Union


def format_currency(amount: Union[float, int], include_sign: bool = True) -> str:
    """Format a currency amount with two decimals and thousands separators.

    Negative amounts keep their sign in front of the currency symbol.

    Example:
        >>> format_currency(1234.5)
        '$1,234.50'
        >>> format_currency(-20)
        '-$20.00'
        >>> format_currency(1234.56, include_sign=False)
        '1,234.56'
    """
    formatted = f"{abs(amount):,.2f}"
    prefix = '-' if amount < 0 else ''
    return f"{prefix}${formatted}" if include_sign else f"{prefix}{formatted}"


def escape_dollar_for_markdown(text: str) -> str:
    """Escape dollar signs so Streamlit markdown does not read them as LaTeX."""
    return text.replace("$", "\\$")


def format_percent(value: float) -> str:
    """Whole-number percentage, e.g. ``'80%'``."""
    return f"{value:.0f}%"
