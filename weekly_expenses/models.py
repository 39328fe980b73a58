"""Record types shared by the stores, the aggregator and the UI."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Category:
    """A selectable expense category and how it is displayed."""

    value: str
    label: str
    color: str


@dataclass(frozen=True)
class Expense:
    """A single recorded expense.

    ``date`` is a zero-padded ISO ``YYYY-MM-DD`` string so that plain
    string comparison orders dates correctly. ``owner`` is ``None`` in
    the single-user variant.
    """

    id: str
    amount: float
    category: str
    description: str
    date: str
    created_at: str
    owner: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Expense":
        return cls(
            id=str(data['id']),
            amount=float(data['amount']),
            category=str(data['category']),
            description=str(data.get('description') or ''),
            date=str(data['date']),
            created_at=str(data['created_at']),
            owner=data.get('owner'),
            updated_at=data.get('updated_at'),
        )


@dataclass(frozen=True)
class WeeklyBudget:
    """Spending limit for one owner and one Sunday-anchored week."""

    week_start: str
    amount: float
    owner: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeeklyBudget":
        return cls(
            week_start=str(data['week_start']),
            amount=float(data['amount']),
            owner=data.get('owner'),
            id=data.get('id'),
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at'),
        )


@dataclass(frozen=True)
class User:
    """A signed-in identity. ``id`` is the owner key for all records."""

    id: str
    email: str
    created_at: Optional[str] = None
