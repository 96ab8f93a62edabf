"""Append-only expense ledger on top of a persistence collaborator."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from typing import Callable, List, Optional

from budget_ledger.admission import parse_amount
from budget_ledger.categories import classify
from budget_ledger.config import HISTORY_WINDOW_DAYS
from budget_ledger.models import ExpenseRecord, User


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerStore:
    """Per-user expense log. Records can be appended and queried, never changed."""

    def __init__(self, store, clock: Optional[Callable[[], datetime]] = None):
        """Initialize the ledger.

        Args:
            store: Persistence collaborator exposing ``append_expense`` and
                   ``fetch_expenses`` (see :class:`budget_ledger.db.SQLiteStore`)
            clock: Returns the current UTC time; used for ``created_at``
        """
        self.store = store
        self.clock = clock or utcnow

    def append(self, record: ExpenseRecord) -> ExpenseRecord:
        """Persist ``record`` and return it with its generated id and timestamp.

        The budget group is always derived from the category at write
        time, whatever the caller put on the record.
        """
        stamped = replace(
            record,
            amount=parse_amount(record.amount),
            budget_group=classify(record.category),
            created_at=self.clock(),
            id=None,
        )
        new_id = self.store.append_expense(stamped)
        return replace(stamped, id=new_id)

    def query(
        self,
        user_id: int,
        since: Optional[datetime] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        after_id: Optional[int] = None,
    ) -> List[ExpenseRecord]:
        """Records for ``user_id`` in ascending insertion order."""
        return self.store.fetch_expenses(
            user_id, since=since, date_from=date_from, date_to=date_to, after_id=after_id
        )

    def cycle_records(self, user: User) -> List[ExpenseRecord]:
        """Records appended since the user's last reload."""
        return self.query(user.id, after_id=user.cycle_start_expense_id)

    def history(
        self,
        user_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[ExpenseRecord]:
        """Records by expense date, defaulting to the last ``HISTORY_WINDOW_DAYS`` days."""
        if end is None:
            end = self.clock().date()
        if start is None:
            start = end - timedelta(days=HISTORY_WINDOW_DAYS)
        return self.query(user_id, date_from=start, date_to=end)
