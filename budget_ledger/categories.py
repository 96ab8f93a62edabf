"""Category registry for the 50/30/20 budget.

This module is the single source of truth for which expense categories
count against which budget group.  Every caller (admission checks,
snapshots, analytics) classifies through :func:`classify` so there is
exactly one table to maintain.

To add, remove, or move a category, edit ``CATEGORY_GROUPS`` below.
Categories that are not listed classify as ``BudgetGroup.OTHER``: they
show up in totals but are never capped.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Tuple


class BudgetGroup(str, Enum):
    """Budget groups of the 50/30/20 rule plus the uncapped catch-all."""

    BASIC = "basic"
    LIFESTYLE = "lifestyle"
    SAVINGS = "savings"
    OTHER = "other"

    @property
    def is_tracked(self) -> bool:
        return self is not BudgetGroup.OTHER


TRACKED_GROUPS: Tuple[BudgetGroup, ...] = (
    BudgetGroup.BASIC,
    BudgetGroup.LIFESTYLE,
    BudgetGroup.SAVINGS,
)

CATEGORY_GROUPS: Dict[BudgetGroup, Tuple[str, ...]] = {
    BudgetGroup.BASIC: (
        "Rent / Housing",
        "Utilities",
        "Groceries",
        "Transportation",
        "Insurance",
        "Loan / EMI Payments",
        "Medical & Healthcare",
        "Childcare / Education Fees",
        "Phone & Internet Bills",
    ),
    BudgetGroup.LIFESTYLE: (
        "Dining Out / Restaurants",
        "Entertainment",
        "Shopping",
        "Travel & Vacation",
        "Fitness",
        "Gifts & Celebrations",
        "Home Décor / Luxury Items",
        "Emergency Repair",
    ),
    BudgetGroup.SAVINGS: (
        "Emergency Fund",
        "FD / RD",
        "Mutual Funds / SIP",
        "Stock Market Investments",
        "Retirement Fund",
        "Insurance Savings Plan",
        "Gold / Real Estate",
        "Debt Repayment",
        "Digital Wallet / Savings Account",
    ),
}

GROUP_NAMES: Dict[BudgetGroup, str] = {
    BudgetGroup.BASIC: "Basic Needs",
    BudgetGroup.LIFESTYLE: "Lifestyle",
    BudgetGroup.SAVINGS: "Savings",
    BudgetGroup.OTHER: "Other",
}

GROUP_LABELS: Dict[BudgetGroup, str] = {
    BudgetGroup.BASIC: "50% - Basic Needs",
    BudgetGroup.LIFESTYLE: "30% - Lifestyle",
    BudgetGroup.SAVINGS: "20% - Savings",
    BudgetGroup.OTHER: "Other",
}

# Flattened lookup built once at import time
_LOOKUP: Dict[str, BudgetGroup] = {
    category: group
    for group, categories in CATEGORY_GROUPS.items()
    for category in categories
}


def classify(category: Optional[str]) -> BudgetGroup:
    """Return the budget group a category belongs to.

    Matching is exact on the registered name; anything unknown (including
    ``None`` or an empty string) is ``BudgetGroup.OTHER``.

    Example:
        >>> classify('Groceries')
        <BudgetGroup.BASIC: 'basic'>
        >>> classify('Pet Supplies')
        <BudgetGroup.OTHER: 'other'>
    """
    if not category:
        return BudgetGroup.OTHER
    return _LOOKUP.get(category, BudgetGroup.OTHER)


def categories_for(group: BudgetGroup) -> List[str]:
    """List the registered categories of a group (empty for OTHER)."""
    return list(CATEGORY_GROUPS.get(group, ()))


def all_categories() -> List[str]:
    """All registered categories in display order."""
    return [category for group in TRACKED_GROUPS for category in CATEGORY_GROUPS[group]]


def group_name(group: BudgetGroup) -> str:
    return GROUP_NAMES[group]


def group_label(group: BudgetGroup) -> str:
    """Label including the allocation share, e.g. ``'50% - Basic Needs'``."""
    return GROUP_LABELS[group]
