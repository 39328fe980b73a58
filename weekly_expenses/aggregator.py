"""Weekly spending derivations.

Everything here is a pure function of the expense list, the week
boundary and the optional budget. Nothing is cached; callers recompute
after every store mutation and on load.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import pandas as pd

from .alerts import needs_alert
from .config import RECENT_EXPENSE_LIMIT, load_categories
from .models import Category, Expense, WeeklyBudget
from .week import is_in_week


@dataclass(frozen=True)
class WeeklySummary:
    """Derived numbers for one week."""

    week_start: str
    weekly_spent: float
    category_totals: Dict[str, float] = field(default_factory=dict)
    budget_amount: Optional[float] = None
    progress_percent: float = 0.0
    remaining: Optional[float] = None
    needs_alert: bool = False

    @property
    def has_budget(self) -> bool:
        return self.budget_amount is not None


def this_week_expenses(expenses: Sequence[Expense], week_start: str) -> List[Expense]:
    """Expenses dated on or after ``week_start``, in their given order."""
    return [expense for expense in expenses if is_in_week(expense.date, week_start)]


def category_totals(
    expenses: Sequence[Expense],
    categories: Optional[Sequence[Category]] = None,
) -> Dict[str, float]:
    """Sum amounts per category in category-set order, dropping zero totals.

    Expenses whose category is not in the configured set are left out
    of the breakdown.
    """
    order = [category.value for category in (categories or load_categories())]
    if not expenses:
        return {}
    df = pd.DataFrame([{'category': e.category, 'amount': e.amount} for e in expenses])
    totals = df.groupby('category')['amount'].sum().reindex(order).fillna(0.0)
    return {name: float(total) for name, total in totals.items() if total > 0}


def budget_progress(weekly_spent: float, budget: Optional[WeeklyBudget]) -> float:
    """Percentage of the budget spent; 0 without a budget or for a zero budget."""
    if budget is None or budget.amount <= 0:
        return 0.0
    return (weekly_spent / budget.amount) * 100


def summarize_week(
    expenses: Sequence[Expense],
    week_start: str,
    budget: Optional[WeeklyBudget] = None,
    categories: Optional[Sequence[Category]] = None,
) -> WeeklySummary:
    """Compute spend, per-category totals and budget progress for a week."""
    current = this_week_expenses(expenses, week_start)
    spent = float(sum(expense.amount for expense in current))
    progress = budget_progress(spent, budget)
    return WeeklySummary(
        week_start=week_start,
        weekly_spent=spent,
        category_totals=category_totals(current, categories),
        budget_amount=budget.amount if budget else None,
        progress_percent=progress,
        remaining=(budget.amount - spent) if budget else None,
        needs_alert=needs_alert(progress, budget is not None),
    )


def recent_expenses(
    expenses: Sequence[Expense],
    week_start: str,
    limit: int = RECENT_EXPENSE_LIMIT,
) -> List[Expense]:
    """The ``limit`` most recent expenses of the week, newest first.

    ``expenses`` must already be newest first, as every store returns them.
    """
    return this_week_expenses(expenses, week_start)[:limit]
