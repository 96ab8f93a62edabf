"""Domain records shared by the ledger, engine and service layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from budget_ledger.categories import TRACKED_GROUPS, BudgetGroup


@dataclass
class User:
    id: int
    name: str
    email: str
    salary: Decimal
    cycle_start: datetime
    created_at: datetime
    # Expenses with an id at or below this belong to earlier cycles
    cycle_start_expense_id: int = 0


@dataclass(frozen=True)
class ExpenseRecord:
    """A single committed expense. Records are never edited or deleted."""
    user_id: int
    amount: Decimal
    category: str
    budget_group: BudgetGroup
    expense_date: date
    note: Optional[str] = None
    id: Optional[int] = None  # assigned by the store on append
    created_at: Optional[datetime] = None  # assigned by the store on append

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'amount': self.amount,
            'category': self.category,
            'budget_group': self.budget_group.value,
            'note': self.note,
            'expense_date': self.expense_date,
            'created_at': self.created_at,
        }


@dataclass(frozen=True)
class GroupAllocation:
    group: BudgetGroup
    allocated: Decimal
    spent: Decimal
    remaining: Decimal
    percent_used: Decimal  # unclamped, may exceed 100


@dataclass(frozen=True)
class AllocationSnapshot:
    """Derived budget state for one salary cycle. Never persisted."""
    salary: Decimal
    groups: Dict[BudgetGroup, GroupAllocation]
    other_spent: Decimal
    total_spent: Decimal

    @property
    def remaining_salary(self) -> Decimal:
        return self.salary - self.total_spent

    def __getitem__(self, group: BudgetGroup) -> GroupAllocation:
        return self.groups[group]

    def remaining(self, group: BudgetGroup) -> Decimal:
        return self.groups[group].remaining

    def to_rows(self) -> List[Dict[str, Any]]:
        """One row per tracked group, suitable for ``pd.DataFrame``."""
        return [
            {
                'Group': group.value,
                'Allocated': self.groups[group].allocated,
                'Spent': self.groups[group].spent,
                'Remaining': self.groups[group].remaining,
                'Percent Used': self.groups[group].percent_used,
            }
            for group in TRACKED_GROUPS
        ]


@dataclass(frozen=True)
class SeriesPoint:
    key: str
    value: Decimal


@dataclass(frozen=True)
class NotificationEvent:
    title: str
    body: str
    group: Optional[BudgetGroup] = None


@dataclass(frozen=True)
class Accepted:
    record: ExpenseRecord
    snapshot: AllocationSnapshot
    alerts: List[NotificationEvent] = field(default_factory=list)

    accepted = True


@dataclass(frozen=True)
class Rejected:
    reason: Exception  # ValidationError or BudgetExceeded

    accepted = False


AdmissionResult = Union[Accepted, Rejected]
