"""Store contracts for expenses and weekly budgets.

Two persistence backends implement these contracts:

* :mod:`weekly_expenses.local_storage` – a single JSON file on the
  device, one implicit user.
* :mod:`weekly_expenses.db` – a shared SQLite database where every row
  is scoped by owner id.

The in-memory classes at the bottom of this module implement the same
contracts without touching disk and are what the tracker tests run
against.

Every implementation returns expenses newest first from
:meth:`ExpenseStore.list`.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Tuple

from .config import DEFAULT_DESCRIPTION
from .models import Expense, WeeklyBudget
from .week import to_iso_date


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_expense(
    owner: Optional[str],
    amount: float,
    category: str,
    description: Optional[str] = None,
    expense_date: Optional[str] = None,
) -> Expense:
    """Create a new expense record with a generated id and defaulted fields."""
    created_at = utc_timestamp()
    return Expense(
        id=str(uuid.uuid4()),
        owner=owner,
        amount=float(amount),
        category=category,
        description=(description or '').strip() or DEFAULT_DESCRIPTION,
        date=to_iso_date(expense_date) if expense_date else date.today().isoformat(),
        created_at=created_at,
        updated_at=created_at,
    )


class ExpenseStore(ABC):
    """Persistence for one owner's expenses."""

    @abstractmethod
    def list(self, owner: Optional[str]) -> List[Expense]:
        """Return all of ``owner``'s expenses, most recent first.

        Raises:
            StoreError: If the backing store cannot be read.
        """

    @abstractmethod
    def insert(
        self,
        owner: Optional[str],
        amount: float,
        category: str,
        description: Optional[str] = None,
        expense_date: Optional[str] = None,
    ) -> Expense:
        """Persist a new expense and return the stored record.

        Raises:
            StoreError: If the write is rejected. Nothing is stored.
        """


class BudgetStore(ABC):
    """Persistence for at most one budget per (owner, week_start)."""

    @abstractmethod
    def get_for_week(self, owner: Optional[str], week_start: str) -> Optional[WeeklyBudget]:
        """Return the budget for the week, or ``None`` when none is set."""

    @abstractmethod
    def upsert(self, owner: Optional[str], week_start: str, amount: float) -> WeeklyBudget:
        """Create or wholesale replace the budget for the week."""

    @abstractmethod
    def delete(self, owner: Optional[str], week_start: str) -> None:
        """Remove the budget for the week. A missing budget is not an error."""


class InMemoryExpenseStore(ExpenseStore):
    """Process-local expense store."""

    def __init__(self) -> None:
        self._rows: List[Expense] = []

    def list(self, owner: Optional[str]) -> List[Expense]:
        rows = [row for row in self._rows if row.owner == owner]
        return rows[::-1]

    def insert(
        self,
        owner: Optional[str],
        amount: float,
        category: str,
        description: Optional[str] = None,
        expense_date: Optional[str] = None,
    ) -> Expense:
        expense = build_expense(owner, amount, category, description, expense_date)
        self._rows.append(expense)
        return expense


class InMemoryBudgetStore(BudgetStore):
    """Process-local budget store keyed by (owner, week_start)."""

    def __init__(self) -> None:
        self._rows: Dict[Tuple[Optional[str], str], WeeklyBudget] = {}

    def get_for_week(self, owner: Optional[str], week_start: str) -> Optional[WeeklyBudget]:
        return self._rows.get((owner, week_start))

    def upsert(self, owner: Optional[str], week_start: str, amount: float) -> WeeklyBudget:
        now = utc_timestamp()
        existing = self._rows.get((owner, week_start))
        budget = WeeklyBudget(
            id=existing.id if existing else str(uuid.uuid4()),
            owner=owner,
            week_start=week_start,
            amount=float(amount),
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        self._rows[(owner, week_start)] = budget
        return budget

    def delete(self, owner: Optional[str], week_start: str) -> None:
        self._rows.pop((owner, week_start), None)
