"""Allocation policy: split a salary across the 50/30/20 budget groups.

Amounts stay unrounded ``Decimal`` values; rounding is a display concern
handled in :mod:`budget_ledger.formatting`.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict

from budget_ledger.categories import TRACKED_GROUPS, BudgetGroup

WEIGHTS: Dict[BudgetGroup, Decimal] = {
    BudgetGroup.BASIC: Decimal("0.50"),
    BudgetGroup.LIFESTYLE: Decimal("0.30"),
    BudgetGroup.SAVINGS: Decimal("0.20"),
}

ZERO = Decimal("0")


def weight(group: BudgetGroup) -> Decimal:
    """Share of salary for a group; OTHER has no allocation."""
    return WEIGHTS.get(group, ZERO)


def allocated(group: BudgetGroup, salary: Decimal) -> Decimal:
    """Amount of ``salary`` allocated to ``group``.

    Example:
        >>> allocated(BudgetGroup.LIFESTYLE, Decimal('10000'))
        Decimal('3000.00')
    """
    return Decimal(salary) * weight(group)


def allocate(salary: Decimal) -> Dict[BudgetGroup, Decimal]:
    """Allocations for every tracked group.

    The weights sum to exactly one, so with ``Decimal`` arithmetic the
    three allocations always add back up to ``salary``.
    """
    return {group: allocated(group, salary) for group in TRACKED_GROUPS}
