"""Budget attention rule."""

from __future__ import annotations

from .config import ALERT_THRESHOLD_PERCENT


def needs_alert(progress_percent: float, has_budget: bool) -> bool:
    """True once at least ``ALERT_THRESHOLD_PERCENT`` of a set budget is spent.

    Without a budget there is never an alert, whatever the spend.
    """
    return has_budget and progress_percent >= ALERT_THRESHOLD_PERCENT


def alert_message(progress_percent: float) -> str:
    return f"Heads up! You have already spent {progress_percent:.0f}% of your weekly budget."
