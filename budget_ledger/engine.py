"""Budget engine: derive the allocation snapshot for a salary cycle.

The snapshot is recomputed from the salary and the cycle's expense
records every time it is needed.  Nothing here caches or mutates state,
so the persisted ledger stays the only source of truth.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable

from budget_ledger import allocation
from budget_ledger.categories import TRACKED_GROUPS, BudgetGroup, classify
from budget_ledger.models import AllocationSnapshot, ExpenseRecord, GroupAllocation

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def percent_used(spent: Decimal, allocated: Decimal) -> Decimal:
    """``spent / allocated * 100`` without clamping.

    A zero allocation reports 0 when nothing was spent and infinity
    otherwise.
    """
    if allocated == 0:
        return ZERO if spent == 0 else Decimal("Infinity")
    return spent / allocated * HUNDRED


def spent_by_group(records: Iterable[ExpenseRecord]) -> Dict[BudgetGroup, Decimal]:
    """Sum record amounts per budget group in a single pass.

    Groups are re-derived from the category so records written with a
    stale ``budget_group`` still land in the right bucket.
    """
    totals: Dict[BudgetGroup, Decimal] = {group: ZERO for group in BudgetGroup}
    for record in records:
        group = classify(record.category)
        totals[group] += record.amount
    return totals


def compute_snapshot(salary: Decimal, records: Iterable[ExpenseRecord]) -> AllocationSnapshot:
    """Build the allocation snapshot for ``salary`` and the cycle's records.

    Args:
        salary: Current salary (non-negative)
        records: Expense records inside the active salary cycle

    Returns:
        AllocationSnapshot with allocated/spent/remaining/percent_used per
        tracked group plus the uncapped ``other_spent`` total.

    Example:
        >>> snap = compute_snapshot(Decimal('10000'), [])
        >>> snap.remaining(BudgetGroup.BASIC)
        Decimal('5000.00')
    """
    salary = Decimal(salary)
    spent = spent_by_group(records)
    allocations = allocation.allocate(salary)

    groups: Dict[BudgetGroup, GroupAllocation] = {}
    for group in TRACKED_GROUPS:
        allocated = allocations[group]
        group_spent = spent[group]
        groups[group] = GroupAllocation(
            group=group,
            allocated=allocated,
            spent=group_spent,
            remaining=allocated - group_spent,
            percent_used=percent_used(group_spent, allocated),
        )

    return AllocationSnapshot(
        salary=salary,
        groups=groups,
        other_spent=spent[BudgetGroup.OTHER],
        total_spent=sum(spent.values(), ZERO),
    )
