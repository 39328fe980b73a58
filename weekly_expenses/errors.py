"""Exception types raised by the weekly expense tracker."""

from __future__ import annotations


class ExpenseTrackerError(Exception):
    """Base class for all tracker errors."""


class ValidationError(ExpenseTrackerError):
    """User input was rejected before reaching any store."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class StoreError(ExpenseTrackerError):
    """A read or write was rejected by the backing store."""


class AuthError(ExpenseTrackerError):
    """Sign-in or sign-up failed."""
