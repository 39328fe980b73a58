"""Single-user persistence in a JSON file on the device.

The file holds two keys, mirroring browser local storage:

* ``"expenses"`` – a flat list of expense objects in insertion order
  (oldest first).
* ``"weeklyBudget"`` – a single budget object, or ``null``. There is
  only ever one budget in this variant; it applies to the week named
  by its ``week_start``.

There is no owner scoping; the ``owner`` argument of the store methods
is accepted for interface compatibility and ignored.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import LOCAL_STORAGE_PATH, ensure_data_directories
from .errors import StoreError
from .models import Expense, WeeklyBudget
from .storage import BudgetStore, ExpenseStore, build_expense, utc_timestamp

logger = logging.getLogger(__name__)

EXPENSES_KEY = 'expenses'
BUDGET_KEY = 'weeklyBudget'


class LocalStorage:
    """Key/value access to the device storage file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else LOCAL_STORAGE_PATH

    def load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError) as exc:
            logger.error("Could not read %s: %s", self.path, exc)
            raise StoreError(f"Could not read local storage at {self.path}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"Local storage at {self.path} is not a JSON object")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self.load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self.load()
        data[key] = value
        # a failed write must leave the previous file in place
        tmp_name = None
        try:
            ensure_data_directories(self.path.parent)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
            with os.fdopen(fd, 'w', encoding='utf-8') as handle:
                json.dump(data, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            logger.error("Could not write %s: %s", self.path, exc)
            raise StoreError(f"Could not write local storage at {self.path}") from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.remove(tmp_name)


class LocalExpenseStore(ExpenseStore):
    """Expenses for the single device user."""

    def __init__(self, storage: Optional[LocalStorage] = None):
        self.storage = storage or LocalStorage()

    def _rows(self) -> List[Dict[str, Any]]:
        rows = self.storage.get(EXPENSES_KEY, [])
        if not isinstance(rows, list):
            raise StoreError(f"'{EXPENSES_KEY}' in local storage is not a list")
        return rows

    def list(self, owner: Optional[str] = None) -> List[Expense]:
        try:
            expenses = [Expense.from_dict(row) for row in self._rows()]
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreError("Local storage holds a malformed expense") from exc
        # stored oldest first
        expenses.reverse()
        return expenses

    def insert(
        self,
        owner: Optional[str],
        amount: float,
        category: str,
        description: Optional[str] = None,
        expense_date: Optional[str] = None,
    ) -> Expense:
        rows = self._rows()
        expense = build_expense(None, amount, category, description, expense_date)
        rows.append(expense.to_dict())
        self.storage.set(EXPENSES_KEY, rows)
        logger.info("Inserted expense %s into local storage", expense.id)
        return expense


class LocalBudgetStore(BudgetStore):
    """The single weekly budget of the device user."""

    def __init__(self, storage: Optional[LocalStorage] = None):
        self.storage = storage or LocalStorage()

    def _current(self) -> Optional[WeeklyBudget]:
        data = self.storage.get(BUDGET_KEY)
        if not data:
            return None
        try:
            return WeeklyBudget.from_dict(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreError("Local storage holds a malformed budget") from exc

    def get_for_week(self, owner: Optional[str], week_start: str) -> Optional[WeeklyBudget]:
        budget = self._current()
        if budget is None or budget.week_start != week_start:
            return None
        return budget

    def upsert(self, owner: Optional[str], week_start: str, amount: float) -> WeeklyBudget:
        now = utc_timestamp()
        existing = self.get_for_week(owner, week_start)
        budget = WeeklyBudget(
            id=existing.id if existing else str(uuid.uuid4()),
            week_start=week_start,
            amount=float(amount),
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        self.storage.set(BUDGET_KEY, budget.to_dict())
        logger.info("Saved local budget %.2f for week %s", budget.amount, week_start)
        return budget

    def delete(self, owner: Optional[str], week_start: str) -> None:
        if self.get_for_week(owner, week_start) is None:
            return
        self.storage.set(BUDGET_KEY, None)
        logger.info("Deleted local budget for week %s", week_start)
