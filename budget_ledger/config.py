"""Configuration management for the budget ledger.

This module centralizes all configuration values including paths,
thresholds, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in budget_ledger/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("BUDGET_LEDGER_DATA_DIR", _PROJECT_ROOT / "data"))

# Database
DB_PATH = Path(
    os.getenv("BUDGET_LEDGER_DB_PATH", DATA_DIR / "budget_ledger.db")
).resolve()

LOG_LEVEL = os.getenv("BUDGET_LEDGER_LOG_LEVEL", "INFO")

# Alert once remaining budget drops to this share (percent) of the allocation
NEAR_LIMIT_PERCENT = int(os.getenv("BUDGET_LEDGER_NEAR_LIMIT_PERCENT", 10))

# Default look-back window for expense history
HISTORY_WINDOW_DAYS = int(os.getenv("BUDGET_LEDGER_HISTORY_DAYS", 30))

CURRENCY_SYMBOL = os.getenv("BUDGET_LEDGER_CURRENCY", "₹")


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)


def get_db_path() -> str:
    """Get the database path as a string."""
    return str(DB_PATH)
