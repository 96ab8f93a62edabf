"""Budget service: the operations exposed to callers.

Wires the ledger, engine, admission control and notification policy
together on top of the persistence/salary store and an optional
notification sink.  All I/O goes through those collaborators.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Union

from budget_ledger import admission, aggregation, engine
from budget_ledger.categories import BudgetGroup, classify
from budget_ledger.exceptions import NotFoundError, UpstreamUnavailable, ValidationError
from budget_ledger.ledger import LedgerStore, utcnow
from budget_ledger.logger import get_logger
from budget_ledger.models import (
    Accepted,
    AdmissionResult,
    AllocationSnapshot,
    ExpenseRecord,
    NotificationEvent,
    Rejected,
    SeriesPoint,
    User,
)
from budget_ledger.notifications import NotificationPolicy

logger = get_logger(__name__)

Notifier = Callable[[NotificationEvent], Any]


class BudgetService:
    """Expense tracking against a salary with the 50/30/20 rule."""

    def __init__(
        self,
        store,
        notifier: Optional[Notifier] = None,
        policy: Optional[NotificationPolicy] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the service.

        Args:
            store: Persistence and salary-store collaborator
                   (see :class:`budget_ledger.db.SQLiteStore`)
            notifier: Callable that delivers a NotificationEvent; alerts are
                      only returned to the caller when omitted
            policy: Notification policy holding per-group alert state
            clock: Returns the current UTC time
        """
        self.store = store
        self.notifier = notifier
        self.policy = policy or NotificationPolicy()
        self.clock = clock or utcnow
        self.ledger = LedgerStore(store, clock=self.clock)

    # Users -----------------------------------------------------------------

    def register_user(self, name: str, email: str, salary: Union[Decimal, str, int] = 0) -> User:
        """Create a user; their first salary cycle starts now."""
        user = self.store.create_user(name, email, admission.parse_salary(salary), self.clock())
        logger.info("Registered user %s with salary %s", user.id, user.salary)
        return user

    def _require_user(self, user_id: int) -> User:
        user = self.store.get_user(user_id)
        if user is None:
            raise NotFoundError(user_id)
        return user

    def _snapshot_for(self, user: User) -> AllocationSnapshot:
        return engine.compute_snapshot(user.salary, self.ledger.cycle_records(user))

    # Queries ---------------------------------------------------------------

    def classify(self, category: Optional[str]) -> BudgetGroup:
        return classify(category)

    def get_snapshot(self, user_id: int) -> AllocationSnapshot:
        return self._snapshot_for(self._require_user(user_id))

    def get_series(self, user_id: int, interval: Union[aggregation.Interval, str]) -> List[SeriesPoint]:
        """Bucketed spending over the user's full history."""
        self._require_user(user_id)
        return aggregation.bucket(self.ledger.query(user_id), interval)

    def history(self, user_id: int, start: Optional[date] = None, end: Optional[date] = None) -> List[ExpenseRecord]:
        self._require_user(user_id)
        return self.ledger.history(user_id, start=start, end=end)

    def category_summary(self, user_id: int) -> Dict[str, object]:
        """Total and per-category spend for the active salary cycle."""
        user = self._require_user(user_id)
        return aggregation.spending_summary(self.ledger.cycle_records(user))

    # Commands --------------------------------------------------------------

    def add_expense(
        self,
        user_id: int,
        amount: Any,
        category: str,
        note: Optional[str] = None,
        expense_date: Optional[date] = None,
    ) -> AdmissionResult:
        """Validate and commit an expense.

        Returns:
            Accepted with the stored record, the recomputed snapshot and any
            near-limit alerts, or Rejected carrying a ValidationError or
            BudgetExceeded.

        Raises:
            NotFoundError: unknown ``user_id``
            UpstreamUnavailable: the store or the notifier failed; after a
                notifier failure the exception carries the committed record
                and the undelivered alerts
        """
        try:
            value = admission.parse_amount(amount)
        except ValidationError as exc:
            logger.info("Rejected expense for user %s: %s", user_id, exc)
            return Rejected(reason=exc)

        user = self._require_user(user_id)
        snapshot = self._snapshot_for(user)
        decision = admission.validate(value, category, snapshot)
        if not decision.accepted:
            logger.info("Rejected expense for user %s: %s", user_id, decision.reason)
            return Rejected(reason=decision.reason)

        record = self.ledger.append(
            ExpenseRecord(
                user_id=user_id,
                amount=value,
                category=category,
                budget_group=decision.group,
                note=note or None,
                expense_date=expense_date or self.clock().date(),
            )
        )
        logger.info(
            "Accepted expense %s for user %s: %s in %s (%s)",
            record.id, user_id, record.amount, record.category, record.budget_group.value,
        )

        snapshot = self._snapshot_for(user)
        alerts = self.policy.evaluate(user_id, snapshot)
        for event in alerts:
            logger.warning("User %s: %s", user_id, event.body)
        self._deliver(alerts, record)
        return Accepted(record=record, snapshot=snapshot, alerts=alerts)

    def _deliver(self, alerts: List[NotificationEvent], record: ExpenseRecord) -> None:
        """Hand every alert to the notifier, then report any that failed."""
        if self.notifier is None:
            return
        undelivered: List[NotificationEvent] = []
        errors: List[Exception] = []
        for event in alerts:
            try:
                self.notifier(event)
            except Exception as exc:
                logger.error(
                    "Notification delivery failed for expense %s (%s)",
                    record.id, event.group.value, exc_info=True,
                )
                undelivered.append(event)
                errors.append(exc)
        if undelivered:
            detail = "; ".join(str(exc) for exc in errors)
            raise UpstreamUnavailable(
                "notifications", detail, record=record, events=undelivered
            ) from errors[0]

    def update_salary(self, user_id: int, salary: Any) -> AllocationSnapshot:
        """Change the salary and return the recomputed snapshot.

        Raises:
            ValidationError: negative or non-numeric salary
            NotFoundError: unknown ``user_id``
        """
        value = admission.parse_salary(salary)
        if not self.store.set_salary(user_id, value):
            raise NotFoundError(user_id)
        logger.info("Updated salary for user %s to %s", user_id, value)
        snapshot = self.get_snapshot(user_id)
        self.policy.observe(user_id, snapshot)
        return snapshot

    def reload(self, user_id: int) -> datetime:
        """Start a new salary cycle; history is kept, spent restarts at zero."""
        cycle_start = self.store.reload_cycle(user_id, self.clock())
        if cycle_start is None:
            raise NotFoundError(user_id)
        logger.info("Reloaded salary cycle for user %s at %s", user_id, cycle_start.isoformat())
        self.policy.observe(user_id, self.get_snapshot(user_id))
        return cycle_start
