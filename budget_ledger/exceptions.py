"""Typed exceptions for the budget ledger.

Every error carries a machine-readable ``code`` plus the structured data
a caller needs to build a message, so nobody has to parse ``str(exc)``.

    BudgetLedgerError (base)
    |
    +-- ValidationError        INVALID_AMOUNT / INVALID_SALARY / INVALID_INTERVAL / INVALID_EMAIL
    +-- BudgetExceeded         BUDGET_EXCEEDED
    +-- NotFoundError          USER_NOT_FOUND
    +-- UpstreamUnavailable    UPSTREAM_UNAVAILABLE

``ValidationError`` and ``BudgetExceeded`` are handed back to the caller
inside a rejected result; the other two are raised.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Optional

from budget_ledger.categories import BudgetGroup, group_name
from budget_ledger.formatting import format_currency


class BudgetLedgerError(Exception):
    """Base exception for all budget ledger errors."""

    code: str = "BUDGET_LEDGER_ERROR"


class ValidationError(BudgetLedgerError):
    """An input value was missing, malformed or out of range."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        self.code = f"INVALID_{field.upper()}"
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class BudgetExceeded(BudgetLedgerError):
    """The expense is larger than what is left in its budget group."""

    code: str = "BUDGET_EXCEEDED"

    def __init__(self, group: BudgetGroup, remaining: Decimal, amount: Decimal):
        self.group = group
        self.remaining = remaining
        self.amount = amount
        super().__init__(
            f"You only have {format_currency(remaining)} remaining for {group_name(group)}. "
            "Reduce the expense amount to stay within your budget."
        )


class NotFoundError(BudgetLedgerError):
    """No user exists with the given id."""

    code: str = "USER_NOT_FOUND"

    def __init__(self, user_id: Any):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class UpstreamUnavailable(BudgetLedgerError):
    """A persistence or notification collaborator failed."""

    code: str = "UPSTREAM_UNAVAILABLE"

    def __init__(
        self,
        collaborator: str,
        detail: str,
        record: Optional[Any] = None,
        events: Optional[List[Any]] = None,
    ):
        self.collaborator = collaborator
        self.detail = detail
        # Set when the expense was committed before the failure happened
        self.record = record
        # Alerts that were not delivered; the policy will not emit them again
        self.events = list(events or [])
        super().__init__(f"{collaborator} unavailable: {detail}")
