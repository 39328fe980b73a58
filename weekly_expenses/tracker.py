"""Session controller for one user's weekly expense view.

:class:`ExpenseTracker` holds the loaded expenses and the current
week's budget, validates user intents before they reach a store, only
updates its in-memory state after the store confirms a write, and
keeps the short-lived feedback messages the UI shows after budget
changes.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, List, Optional, Sequence

from .aggregator import WeeklySummary, recent_expenses, summarize_week
from .config import FEEDBACK_DISMISS_SECONDS, RECENT_EXPENSE_LIMIT, load_categories
from .errors import StoreError, ValidationError
from .models import Category, Expense, WeeklyBudget
from .storage import BudgetStore, ExpenseStore
from .week import week_start

logger = logging.getLogger(__name__)

EXPENSE_SAVE_FAILED = "Could not save the expense. Please try again."
BUDGET_SAVED = "Budget updated successfully!"
BUDGET_SAVE_FAILED = "Could not update the budget. Please try again."
BUDGET_DELETED = "Budget deleted successfully!"
BUDGET_DELETE_FAILED = "Could not delete the budget. Please try again."


@dataclass(frozen=True)
class Feedback:
    """A message for the user. Success messages dismiss themselves."""

    text: str
    success: bool
    shown_at: float

    def expired(self, now: float) -> bool:
        return self.success and now - self.shown_at >= FEEDBACK_DISMISS_SECONDS


def parse_amount(value: Any, field: str = 'amount') -> float:
    """Read a user-entered amount as a non-negative float.

    Accepts numbers and strings such as ``"12.50"`` or ``"$1,200"``.

    Raises:
        ValidationError: If the value is missing, not a number or negative.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field.capitalize()} is required", field)
    if isinstance(value, bool):
        raise ValidationError(f"{field.capitalize()} must be a number", field)
    if isinstance(value, str):
        value = value.strip().replace('$', '').replace(',', '')
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field.capitalize()} must be a number", field) from None
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{field.capitalize()} must be a number", field)
    if number < 0:
        raise ValidationError(f"{field.capitalize()} cannot be negative", field)
    return number


class ExpenseTracker:
    """Expenses and weekly budget for a single owner."""

    def __init__(
        self,
        expense_store: ExpenseStore,
        budget_store: BudgetStore,
        owner: Optional[str] = None,
        categories: Optional[Sequence[Category]] = None,
        today: Optional[Callable[[], date]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.expense_store = expense_store
        self.budget_store = budget_store
        self.owner = owner
        self.categories = list(categories or load_categories())
        self._today = today or date.today
        self._clock = clock or time.monotonic

        self.expenses: List[Expense] = []
        self.budget: Optional[WeeklyBudget] = None
        self.loaded = False
        self.submitting = False
        self.editor_open = False
        self.expense_feedback: Optional[Feedback] = None
        self.budget_feedback: Optional[Feedback] = None

    @property
    def week_start(self) -> str:
        return week_start(self._today())

    def load(self) -> None:
        """Load all expenses and this week's budget.

        Raises:
            StoreError: If either store cannot be read.
        """
        self.expenses = self.expense_store.list(self.owner)
        self.budget = self.budget_store.get_for_week(self.owner, self.week_start)
        self.loaded = True
        logger.debug("Loaded %d expenses for owner %s", len(self.expenses), self.owner)

    @property
    def summary(self) -> WeeklySummary:
        return summarize_week(self.expenses, self.week_start, self.budget, self.categories)

    def recent(self, limit: int = RECENT_EXPENSE_LIMIT) -> List[Expense]:
        return recent_expenses(self.expenses, self.week_start, limit)

    def category_values(self) -> List[str]:
        return [category.value for category in self.categories]

    def add_expense(self, amount: Any, category: Optional[str], description: str = '') -> Optional[Expense]:
        """Validate and store a new expense dated today.

        Returns the stored expense, or ``None`` when the store rejected
        it (see ``expense_feedback``) or another intent is in flight.

        Raises:
            ValidationError: If amount or category is missing or invalid.
        """
        if self.submitting:
            return None
        value = parse_amount(amount)
        if not category:
            raise ValidationError("Category is required", 'category')
        if category not in self.category_values():
            raise ValidationError(f"Unknown category '{category}'", 'category')

        self.submitting = True
        self.expense_feedback = None
        try:
            expense = self.expense_store.insert(
                self.owner,
                value,
                category,
                description,
                self._today().isoformat(),
            )
        except StoreError as exc:
            logger.error("Expense insert failed: %s", exc)
            self.expense_feedback = Feedback(EXPENSE_SAVE_FAILED, False, self._clock())
            return None
        finally:
            self.submitting = False
        self.expenses = [expense] + self.expenses
        return expense

    def open_editor(self) -> None:
        self.editor_open = True
        self.budget_feedback = None

    def close_editor(self) -> None:
        self.editor_open = False
        self.budget_feedback = None

    def set_budget(self, amount: Any) -> Optional[WeeklyBudget]:
        """Create or replace this week's budget.

        Raises:
            ValidationError: If the amount is missing or invalid.
        """
        if self.submitting:
            return None
        value = parse_amount(amount)

        self.submitting = True
        self.budget_feedback = None
        try:
            budget = self.budget_store.upsert(self.owner, self.week_start, value)
        except StoreError as exc:
            logger.error("Budget upsert failed: %s", exc)
            self.budget_feedback = Feedback(BUDGET_SAVE_FAILED, False, self._clock())
            return None
        finally:
            self.submitting = False
        self.budget = budget
        self.budget_feedback = Feedback(BUDGET_SAVED, True, self._clock())
        return budget

    def delete_budget(self) -> bool:
        """Remove this week's budget. Returns True on success."""
        if self.submitting:
            return False
        self.submitting = True
        self.budget_feedback = None
        try:
            self.budget_store.delete(self.owner, self.week_start)
        except StoreError as exc:
            logger.error("Budget delete failed: %s", exc)
            self.budget_feedback = Feedback(BUDGET_DELETE_FAILED, False, self._clock())
            return False
        finally:
            self.submitting = False
        self.budget = None
        self.budget_feedback = Feedback(BUDGET_DELETED, True, self._clock())
        return True

    def dismiss_expired_feedback(self, now: Optional[float] = None) -> bool:
        """Clear a success message and close the editor once its delay passed.

        Returns True when something was dismissed.
        """
        now = self._clock() if now is None else now
        feedback = self.budget_feedback
        if feedback is None or not feedback.expired(now):
            return False
        self.close_editor()
        return True
