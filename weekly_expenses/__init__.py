"""Top‑level package for the weekly expense tracker.

The primary modules are:

* ``week`` – the Sunday-anchored week boundary
* ``storage`` / ``local_storage`` / ``db`` – expense and budget stores
* ``aggregator`` and ``alerts`` – weekly totals, budget progress and the
  attention rule
* ``tracker`` – the per-user session controller the UI drives
* ``dashboard`` – a Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run weekly_expenses/dashboard.py
```
"""

from .aggregator import WeeklySummary, recent_expenses, summarize_week  # noqa: F401
from .errors import AuthError, ExpenseTrackerError, StoreError, ValidationError  # noqa: F401
from .models import Category, Expense, User, WeeklyBudget  # noqa: F401
from .tracker import ExpenseTracker  # noqa: F401
from .week import week_start  # noqa: F401

__all__ = [
    "AuthError",
    "Category",
    "Expense",
    "ExpenseTracker",
    "ExpenseTrackerError",
    "StoreError",
    "User",
    "ValidationError",
    "WeeklyBudget",
    "WeeklySummary",
    "recent_expenses",
    "summarize_week",
    "week_start",
]
