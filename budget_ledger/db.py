"""SQLite persistence for users, salary cycles and expense records.

Amounts are stored as TEXT so they round-trip as exact ``Decimal``
values.  Timestamps are UTC ISO-8601 strings with a fixed microsecond
width, which keeps lexical and chronological order identical for the
range filters below.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterator, List, Optional, Union

from budget_ledger.categories import BudgetGroup
from budget_ledger.config import DB_PATH, ensure_data_directories
from budget_ledger.exceptions import UpstreamUnavailable, ValidationError
from budget_ledger.logger import get_logger
from budget_ledger.models import ExpenseRecord, User

logger = get_logger(__name__)

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;

CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    salary TEXT NOT NULL,
    cycle_start TEXT NOT NULL,
    cycle_start_expense_id INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS expenses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users (id),
    amount TEXT NOT NULL,
    category TEXT NOT NULL,
    budget_group TEXT NOT NULL,
    note TEXT,
    expense_date TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS ix_exp_user_created ON expenses (user_id, created_at);
CREATE INDEX IF NOT EXISTS ix_exp_user_date ON expenses (user_id, expense_date);
"""

_EXPENSE_COLUMNS = "id, user_id, amount, category, budget_group, note, expense_date, created_at"
_USER_COLUMNS = "id, name, email, salary, cycle_start, cycle_start_expense_id, created_at"


def to_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec='microseconds')


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row['id'],
        name=row['name'],
        email=row['email'],
        salary=Decimal(row['salary']),
        cycle_start=datetime.fromisoformat(row['cycle_start']),
        cycle_start_expense_id=row['cycle_start_expense_id'],
        created_at=datetime.fromisoformat(row['created_at']),
    )


def _row_to_expense(row: sqlite3.Row) -> ExpenseRecord:
    return ExpenseRecord(
        id=row['id'],
        user_id=row['user_id'],
        amount=Decimal(row['amount']),
        category=row['category'],
        budget_group=BudgetGroup(row['budget_group']),
        note=row['note'],
        expense_date=date.fromisoformat(row['expense_date']),
        created_at=datetime.fromisoformat(row['created_at']),
    )


class SQLiteStore:
    """Persistence and salary-store collaborator backed by SQLite."""

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        """Initialize the store.

        Args:
            db_path: Optional database file. Defaults to DB_PATH from config.
        """
        if db_path is None:
            ensure_data_directories()
            db_path = DB_PATH
        self.db_path = str(db_path)

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as exc:
            logger.error("Could not open database %s", self.db_path, exc_info=True)
            raise UpstreamUnavailable("persistence", str(exc)) from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        except sqlite3.Error as exc:
            logger.error("Database operation failed on %s", self.db_path, exc_info=True)
            raise UpstreamUnavailable("persistence", str(exc)) from exc
        finally:
            conn.close()

    def init_db(self) -> None:
        with self.connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    # Users / salary --------------------------------------------------------

    def create_user(self, name: str, email: str, salary: Decimal, created_at: datetime) -> User:
        """Insert a user. Raises ValidationError when the email is already registered."""
        stamp = to_timestamp(created_at)
        with self.connect() as conn:
            try:
                with conn:
                    cur = conn.execute(
                        "INSERT INTO users (name, email, salary, cycle_start, created_at) VALUES (?, ?, ?, ?, ?)",
                        (name, email, str(salary), stamp, stamp),
                    )
            except sqlite3.IntegrityError:
                raise ValidationError("email", email, "already registered") from None
            user_id = cur.lastrowid
        return self.get_user(user_id)

    def get_user(self, user_id: int) -> Optional[User]:
        with self.connect() as conn:
            row = conn.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (user_id,)).fetchone()
        return _row_to_user(row) if row else None

    def get_salary(self, user_id: int) -> Optional[Decimal]:
        user = self.get_user(user_id)
        return user.salary if user else None

    def set_salary(self, user_id: int, salary: Decimal) -> bool:
        """Store a new salary. Returns False if the user does not exist."""
        with self.connect() as conn:
            with conn:
                cur = conn.execute("UPDATE users SET salary = ? WHERE id = ?", (str(salary), user_id))
            return cur.rowcount > 0

    def reload_cycle(self, user_id: int, cycle_start: datetime) -> Optional[datetime]:
        """Start a new salary cycle. Returns the stored start, or None for unknown users.

        The user's newest expense id is stored as the cycle watermark, so
        records created at the same instant as the reload stay in the old cycle.
        """
        stamp = to_timestamp(cycle_start)
        with self.connect() as conn:
            with conn:
                cur = conn.execute(
                    "UPDATE users SET cycle_start = ?, "
                    "cycle_start_expense_id = (SELECT COALESCE(MAX(id), 0) FROM expenses WHERE user_id = ?) "
                    "WHERE id = ?",
                    (stamp, user_id, user_id),
                )
            if cur.rowcount == 0:
                return None
        return datetime.fromisoformat(stamp)

    # Expenses --------------------------------------------------------------

    def append_expense(self, record: ExpenseRecord) -> int:
        """Insert one expense inside its own transaction and return its id."""
        params: List[Any] = [
            record.user_id,
            str(record.amount),
            record.category,
            record.budget_group.value,
            record.note,
            record.expense_date.isoformat(),
            to_timestamp(record.created_at),
        ]
        with self.connect() as conn:
            with conn:
                cur = conn.execute(
                    "INSERT INTO expenses (user_id, amount, category, budget_group, note, expense_date, created_at) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?)",
                    params,
                )
            return cur.lastrowid

    def fetch_expenses(
        self,
        user_id: int,
        since: Optional[datetime] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        after_id: Optional[int] = None,
    ) -> List[ExpenseRecord]:
        """Fetch a user's expenses in insertion order.

        Args:
            user_id: Owner of the records
            since: Only records created at or after this instant
            date_from: Only records with ``expense_date`` on or after this day
            date_to: Only records with ``expense_date`` on or before this day
            after_id: Only records with an id greater than this
        """
        where: List[str] = ["user_id = ?"]
        params: List[Any] = [user_id]

        if since is not None:
            where.append("created_at >= ?")
            params.append(to_timestamp(since))
        if date_from is not None:
            where.append("expense_date >= ?")
            params.append(date_from.isoformat())
        if date_to is not None:
            where.append("expense_date <= ?")
            params.append(date_to.isoformat())
        if after_id is not None:
            where.append("id > ?")
            params.append(after_id)

        sql = f"SELECT {_EXPENSE_COLUMNS} FROM expenses WHERE " + " AND ".join(where)
        sql += " ORDER BY created_at ASC, id ASC"

        with self.connect() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [_row_to_expense(row) for row in rows]
