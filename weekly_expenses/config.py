"""Configuration management for the weekly expense tracker.

This module centralizes all configuration values including paths,
the category set, fixed thresholds and environment variable overrides.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from .models import Category

# Base project root - assumes this file is in weekly_expenses/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("WEEKLY_EXPENSES_DATA_DIR", _PROJECT_ROOT / "data"))

# Multi-user database
DB_PATH = Path(
    os.getenv("WEEKLY_EXPENSES_DB_PATH", DATA_DIR / "weekly_expenses.db")
).resolve()

# Single-user device storage
LOCAL_STORAGE_PATH = Path(
    os.getenv("WEEKLY_EXPENSES_LOCAL_PATH", DATA_DIR / "local_storage.json")
).resolve()

MODE_LOCAL = "local"
MODE_MULTI = "multi"
STORAGE_MODE = os.getenv("WEEKLY_EXPENSES_MODE", MODE_MULTI).strip().lower()

CATEGORIES_PATH = os.getenv("WEEKLY_EXPENSES_CATEGORIES")
LOG_LEVEL = os.getenv("WEEKLY_EXPENSES_LOG_LEVEL", "INFO")

ALERT_THRESHOLD_PERCENT = 80.0
FEEDBACK_DISMISS_SECONDS = 1.5
DEFAULT_DESCRIPTION = "No description"
RECENT_EXPENSE_LIMIT = 5

DEFAULT_CATEGORIES: List[Category] = [
    Category("food", "Food", "#FF6384"),
    Category("transport", "Transport", "#36A2EB"),
    Category("housing", "Housing", "#FFCE56"),
    Category("entertainment", "Entertainment", "#4BC0C0"),
    Category("other", "Other", "#9966FF"),
    Category("health", "Health", "#43A047"),
    Category("education", "Education", "#1E88E5"),
    Category("shopping", "Shopping", "#F06292"),
    Category("travel", "Travel", "#8D6E63"),
    Category("investments", "Investments", "#FFD600"),
]


def load_categories(path: Optional[Path | str] = None) -> List[Category]:
    """Return the configured category set.

    With no path and no ``WEEKLY_EXPENSES_CATEGORIES`` override the
    built-in list is returned. A category file holds a JSON list of
    ``{"value", "label", "color"}`` objects; ``label`` and ``color``
    are optional.

    Raises:
        ValueError: If the file is not a non-empty list of categories
            or repeats a value.
    """
    target = path or CATEGORIES_PATH
    if not target:
        return list(DEFAULT_CATEGORIES)

    with Path(target).open('r', encoding='utf-8') as handle:
        data = json.load(handle)
    if not isinstance(data, list) or not data:
        raise ValueError(f"Category file {target} must hold a non-empty JSON list")

    categories: List[Category] = []
    seen = set()
    for entry in data:
        if not isinstance(entry, dict) or not str(entry.get('value') or '').strip():
            raise ValueError(f"Invalid category entry in {target}: {entry!r}")
        value = str(entry['value']).strip()
        if value in seen:
            raise ValueError(f"Duplicate category '{value}' in {target}")
        seen.add(value)
        categories.append(Category(
            value=value,
            label=str(entry.get('label') or value.title()),
            color=str(entry.get('color') or '#9E9E9E'),
        ))
    return categories


def ensure_data_directories(*directories: Path) -> None:
    """Create data directories if they don't exist.

    With no arguments the configured data, database and local storage
    directories are created.
    """
    targets = directories or (DATA_DIR, DB_PATH.parent, LOCAL_STORAGE_PATH.parent)
    for directory in targets:
        Path(directory).mkdir(parents=True, exist_ok=True)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the dashboard process."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
