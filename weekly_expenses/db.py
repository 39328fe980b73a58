"""Multi-user persistence in a shared SQLite database.

Every row carries the ``user_id`` of its owner and every query filters
on it, so one user's session never reads or writes another user's
records. Weekly budgets are unique on ``(user_id, week_start)`` and
written with an upsert, so re-saving a week's budget replaces it.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import pandas as pd

from .config import DB_PATH, ensure_data_directories
from .errors import StoreError
from .models import Expense, WeeklyBudget
from .storage import BudgetStore, ExpenseStore, build_expense, utc_timestamp

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;

CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS expenses (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    amount REAL NOT NULL CHECK (amount >= 0),
    category TEXT NOT NULL,
    description TEXT,
    date TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS ix_expenses_user_created ON expenses (user_id, created_at);

CREATE TABLE IF NOT EXISTS weekly_budgets (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    amount REAL NOT NULL CHECK (amount >= 0),
    week_start TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS ux_budget_user_week ON weekly_budgets (user_id, week_start);
"""

EXPENSE_COLUMNS = "id, user_id AS owner, amount, category, description, date, created_at, updated_at"
BUDGET_COLUMNS = "id, user_id AS owner, amount, week_start, created_at, updated_at"


class Database:
    """Connection factory bound to one SQLite file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else DB_PATH

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        try:
            ensure_data_directories(self.path.parent)
        except OSError as exc:
            logger.error("Could not create database directory for %s: %s", self.path, exc)
            raise StoreError(f"Could not open database at {self.path}") from exc
        conn = sqlite3.connect(str(self.path))
        try:
            yield conn
        finally:
            conn.close()

    def init_db(self) -> None:
        try:
            with self.connect() as conn:
                conn.executescript(SCHEMA_SQL)
                conn.commit()
        except (sqlite3.Error, OSError) as exc:
            logger.error("Could not initialise database %s: %s", self.path, exc)
            raise StoreError(f"Could not initialise database at {self.path}") from exc


class SqliteExpenseStore(ExpenseStore):
    """Owner-scoped expenses, newest first by creation time."""

    def __init__(self, database: Optional[Database] = None):
        self.database = database or Database()
        self.database.init_db()

    def list(self, owner: Optional[str]) -> List[Expense]:
        if not owner:
            raise StoreError("An owner is required to list expenses")
        sql = (
            f"SELECT {EXPENSE_COLUMNS} FROM expenses WHERE user_id = ? "
            "ORDER BY created_at DESC, rowid DESC"
        )
        try:
            with self.database.connect() as conn:
                df = pd.read_sql_query(sql, conn, params=[owner])
        except (sqlite3.Error, pd.errors.DatabaseError) as exc:
            logger.error("Could not load expenses for owner %s: %s", owner, exc)
            raise StoreError("Could not load expenses") from exc
        if df.empty:
            return []
        df['description'] = df['description'].fillna('')
        return [Expense.from_dict(row) for row in df.to_dict('records')]

    def insert(
        self,
        owner: Optional[str],
        amount: float,
        category: str,
        description: Optional[str] = None,
        expense_date: Optional[str] = None,
    ) -> Expense:
        if not owner:
            raise StoreError("An owner is required to insert an expense")
        expense = build_expense(owner, amount, category, description, expense_date)
        insert_sql = (
            "INSERT INTO expenses (id, user_id, amount, category, description, date, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)"
        )
        try:
            with self.database.connect() as conn:
                conn.execute(insert_sql, (
                    expense.id,
                    owner,
                    expense.amount,
                    expense.category,
                    expense.description,
                    expense.date,
                    expense.created_at,
                    expense.updated_at,
                ))
                conn.commit()
        except sqlite3.Error as exc:
            logger.error("Could not insert expense for owner %s: %s", owner, exc)
            raise StoreError("Could not save the expense") from exc
        logger.info("Inserted expense %s for owner %s", expense.id, owner)
        return expense


class SqliteBudgetStore(BudgetStore):
    """One budget row per (owner, week_start)."""

    def __init__(self, database: Optional[Database] = None):
        self.database = database or Database()
        self.database.init_db()

    def get_for_week(self, owner: Optional[str], week_start: str) -> Optional[WeeklyBudget]:
        if not owner:
            raise StoreError("An owner is required to read a budget")
        sql = f"SELECT {BUDGET_COLUMNS} FROM weekly_budgets WHERE user_id = ? AND week_start = ?"
        try:
            with self.database.connect() as conn:
                conn.row_factory = sqlite3.Row
                row = conn.execute(sql, (owner, week_start)).fetchone()
        except sqlite3.Error as exc:
            logger.error("Could not load budget for owner %s: %s", owner, exc)
            raise StoreError("Could not load the weekly budget") from exc
        return WeeklyBudget.from_dict(dict(row)) if row else None

    def upsert(self, owner: Optional[str], week_start: str, amount: float) -> WeeklyBudget:
        if not owner:
            raise StoreError("An owner is required to save a budget")
        now = utc_timestamp()
        upsert_sql = (
            "INSERT INTO weekly_budgets (id, user_id, amount, week_start, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?) "
            "ON CONFLICT (user_id, week_start) DO UPDATE SET "
            "amount = excluded.amount, updated_at = excluded.updated_at"
        )
        select_sql = f"SELECT {BUDGET_COLUMNS} FROM weekly_budgets WHERE user_id = ? AND week_start = ?"
        try:
            with self.database.connect() as conn:
                conn.row_factory = sqlite3.Row
                conn.execute(upsert_sql, (str(uuid.uuid4()), owner, float(amount), week_start, now, now))
                conn.commit()
                row = conn.execute(select_sql, (owner, week_start)).fetchone()
        except sqlite3.Error as exc:
            logger.error("Could not save budget for owner %s: %s", owner, exc)
            raise StoreError("Could not save the weekly budget") from exc
        logger.info("Saved budget %.2f for owner %s week %s", float(amount), owner, week_start)
        return WeeklyBudget.from_dict(dict(row))

    def delete(self, owner: Optional[str], week_start: str) -> None:
        if not owner:
            raise StoreError("An owner is required to delete a budget")
        try:
            with self.database.connect() as conn:
                cursor = conn.execute(
                    "DELETE FROM weekly_budgets WHERE user_id = ? AND week_start = ?",
                    (owner, week_start),
                )
                conn.commit()
        except sqlite3.Error as exc:
            logger.error("Could not delete budget for owner %s: %s", owner, exc)
            raise StoreError("Could not delete the weekly budget") from exc
        logger.info("Deleted %d budget row(s) for owner %s week %s", cursor.rowcount, owner, week_start)
