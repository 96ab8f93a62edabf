"""Admission control: validate a prospective expense before it is committed.

The check runs against a point-in-time snapshot.  Two writers for the
same user can both pass against the same snapshot and jointly overrun a
group; no lock is taken here.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from budget_ledger.categories import BudgetGroup, classify
from budget_ledger.exceptions import BudgetExceeded, ValidationError
from budget_ledger.models import AllocationSnapshot

_CURRENCY_MARKERS = ("₹", "$", "Rs.", "Rs", "INR", ",")

# Bounds keep every sum of stored amounts exact in the default 28-digit context
MAX_AMOUNT = Decimal("1000000000000000")
_CENT = Decimal("0.01")


@dataclass(frozen=True)
class AdmissionDecision:
    group: BudgetGroup
    amount: Decimal
    reason: Optional[BudgetExceeded] = None

    @property
    def accepted(self) -> bool:
        return self.reason is None


def _to_decimal(value: Any, field: str) -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValidationError(field, value, "a number is required")
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        # str() keeps 0.1 as Decimal('0.1') rather than its binary expansion
        number = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.strip()
        for marker in _CURRENCY_MARKERS:
            cleaned = cleaned.replace(marker, "")
        cleaned = cleaned.strip()
        if not cleaned:
            raise ValidationError(field, value, "a number is required")
        try:
            number = Decimal(cleaned)
        except InvalidOperation:
            raise ValidationError(field, value, "not a number") from None
    else:
        raise ValidationError(field, value, "not a number")

    if not number.is_finite():
        raise ValidationError(field, value, "must be finite")
    if abs(number) > MAX_AMOUNT:
        raise ValidationError(field, value, f"must not exceed {MAX_AMOUNT}")
    if number != number.quantize(_CENT):
        raise ValidationError(field, value, "at most two decimal places are allowed")
    return number


def parse_amount(value: Any) -> Decimal:
    """Convert user input into a positive ``Decimal`` expense amount.

    Raises:
        ValidationError: if the value is missing, non-numeric, not > 0,
            above MAX_AMOUNT or finer than one cent

    Example:
        >>> parse_amount('₹1,200.50')
        Decimal('1200.50')
    """
    number = _to_decimal(value, "amount")
    if number <= 0:
        raise ValidationError("amount", value, "must be greater than zero")
    return number


def parse_salary(value: Any) -> Decimal:
    """Convert user input into a non-negative ``Decimal`` salary."""
    number = _to_decimal(value, "salary")
    if number < 0:
        raise ValidationError("salary", value, "must not be negative")
    return number


def validate(amount: Decimal, category: Optional[str], snapshot: AllocationSnapshot) -> AdmissionDecision:
    """Decide whether an expense fits the remaining budget of its group.

    An amount equal to the remaining budget is accepted.  Expenses that
    classify as OTHER are never capped.
    """
    group = classify(category)
    if not group.is_tracked:
        return AdmissionDecision(group=group, amount=amount)

    remaining = snapshot.remaining(group)
    if amount > remaining:
        return AdmissionDecision(
            group=group,
            amount=amount,
            reason=BudgetExceeded(group=group, remaining=remaining, amount=amount),
        )
    return AdmissionDecision(group=group, amount=amount)
