"""Near-limit alerts for budget groups.

An alert fires when a group's remaining budget drops to
``NEAR_LIMIT_PERCENT`` of its allocation or below, but only on the
observation that crosses that line.  The last seen ``percent_used`` per
user and group is kept so repeated recomputations stay quiet.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from budget_ledger.categories import TRACKED_GROUPS, BudgetGroup
from budget_ledger.config import NEAR_LIMIT_PERCENT
from budget_ledger.models import AllocationSnapshot, NotificationEvent

ALERT_TITLE = "⚠️ Budget Almost Used"

ALERT_BODIES: Dict[BudgetGroup, str] = {
    BudgetGroup.BASIC: "Your Basic Needs budget is almost exhausted!",
    BudgetGroup.LIFESTYLE: "Your Lifestyle budget is nearly complete!",
    BudgetGroup.SAVINGS: "Your Savings allocation is about to finish!",
}


class NotificationPolicy:
    """Tracks per-group usage and emits one alert per threshold crossing."""

    def __init__(self, threshold_percent: Optional[Decimal] = None):
        """Initialize the policy.

        Args:
            threshold_percent: Remaining share (in percent) at or below which
                               a group counts as near its limit.
        """
        if threshold_percent is None:
            threshold_percent = Decimal(NEAR_LIMIT_PERCENT)
        self.threshold_percent = Decimal(threshold_percent)
        self._last_percent_used: Dict[Tuple[int, BudgetGroup], Decimal] = {}

    def _is_near_limit(self, percent_used: Decimal) -> bool:
        # remaining/allocated*100 <= threshold  <=>  percent_used >= 100 - threshold
        return percent_used >= 100 - self.threshold_percent

    def last_percent_used(self, user_id: int, group: BudgetGroup) -> Optional[Decimal]:
        return self._last_percent_used.get((user_id, group))

    def observe(self, user_id: int, snapshot: AllocationSnapshot) -> None:
        """Record the snapshot as the new baseline without emitting anything."""
        for group in TRACKED_GROUPS:
            self._last_percent_used[(user_id, group)] = snapshot[group].percent_used

    def evaluate(self, user_id: int, snapshot: AllocationSnapshot) -> List[NotificationEvent]:
        """Return alerts for groups that just crossed into the near-limit zone."""
        events: List[NotificationEvent] = []
        for group in TRACKED_GROUPS:
            current = snapshot[group]
            previous = self._last_percent_used.get((user_id, group))
            self._last_percent_used[(user_id, group)] = current.percent_used

            # Nothing allocated, nothing to warn about
            if current.allocated <= 0:
                continue
            if not self._is_near_limit(current.percent_used):
                continue
            if previous is not None and self._is_near_limit(previous):
                continue
            events.append(NotificationEvent(title=ALERT_TITLE, body=ALERT_BODIES[group], group=group))
        return events

