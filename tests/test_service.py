"""End-to-end tests for BudgetService on a temporary SQLite database."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from budget_ledger.categories import BudgetGroup
from budget_ledger.db import SQLiteStore
from budget_ledger.exceptions import BudgetExceeded, NotFoundError, UpstreamUnavailable, ValidationError
from budget_ledger.models import Accepted, ExpenseRecord, Rejected, SeriesPoint
from budget_ledger.service import BudgetService


class FakeClock:
    """Starts at a fixed instant and advances one second per call."""

    def __init__(self, start=datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def store(tmp_path):
    store = SQLiteStore(tmp_path / 'ledger.db')
    store.init_db()
    return store


@pytest.fixture
def service(store):
    return BudgetService(store, clock=FakeClock())


@pytest.fixture
def user(service):
    return service.register_user('Asha', 'asha@example.com', salary='10000')


def test_fifty_thirty_twenty_scenario(service, user):
    snap = service.get_snapshot(user.id)
    assert snap[BudgetGroup.BASIC].allocated == Decimal('5000')
    assert snap[BudgetGroup.LIFESTYLE].allocated == Decimal('3000')
    assert snap[BudgetGroup.SAVINGS].allocated == Decimal('2000')

    first = service.add_expense(user.id, '4000', 'Groceries')
    assert isinstance(first, Accepted)
    assert first.snapshot.remaining(BudgetGroup.BASIC) == Decimal('1000')

    second = service.add_expense(user.id, '1500', 'Groceries')
    assert isinstance(second, Rejected)
    assert isinstance(second.reason, BudgetExceeded)
    assert second.reason.group is BudgetGroup.BASIC
    assert second.reason.remaining == Decimal('1000')

    third = service.add_expense(user.id, '1000', 'Groceries')
    assert third.accepted
    assert service.get_snapshot(user.id).remaining(BudgetGroup.BASIC) == 0


def test_rejected_expense_is_not_stored(service, user):
    service.add_expense(user.id, '3000.01', 'Shopping')
    assert service.ledger.query(user.id) == []


@pytest.mark.parametrize('amount', ['0', '-10', 'abc', '', None])
def test_invalid_amounts_return_validation_error(service, user, amount):
    result = service.add_expense(user.id, amount, 'Groceries')
    assert not result.accepted
    assert isinstance(result.reason, ValidationError)


def test_validation_happens_regardless_of_budget_state(service, user):
    service.update_salary(user.id, '0')
    assert isinstance(service.add_expense(user.id, '-1', 'Pet Supplies').reason, ValidationError)
    assert isinstance(service.add_expense(999, '-1', 'Groceries').reason, ValidationError)


def test_record_fields_are_filled_in(service, user):
    result = service.add_expense(user.id, '₹250.75', 'Dining Out / Restaurants', note='lunch')
    record = result.record
    assert record.id is not None
    assert record.created_at is not None
    assert record.amount == Decimal('250.75')
    assert record.budget_group is BudgetGroup.LIFESTYLE
    assert record.note == 'lunch'
    assert record.expense_date == date(2024, 1, 10)


def test_spent_matches_accepted_records(service, user):
    amounts = ['120.10', '80.05', '99.85']
    for amount in amounts:
        service.add_expense(user.id, amount, 'Transportation')
    service.add_expense(user.id, '10', 'Fitness')
    snap = service.get_snapshot(user.id)
    assert snap[BudgetGroup.BASIC].spent == sum(Decimal(a) for a in amounts)
    assert snap[BudgetGroup.BASIC].remaining == Decimal('5000') - Decimal('300.00')
    assert snap[BudgetGroup.LIFESTYLE].spent == Decimal('10')


def test_other_category_is_uncapped_but_counts_toward_salary(service, user):
    result = service.add_expense(user.id, '20000', 'Pet Supplies')
    assert result.accepted
    snap = result.snapshot
    assert snap.other_spent == Decimal('20000')
    assert snap.remaining(BudgetGroup.BASIC) == Decimal('5000')
    assert snap.remaining_salary == Decimal('-10000')


def test_reload_resets_spent_but_keeps_history(service, user):
    service.add_expense(user.id, '4000', 'Groceries', expense_date=date(2024, 1, 5))
    service.add_expense(user.id, '500', 'Shopping', expense_date=date(2024, 1, 6))

    service.reload(user.id)
    snap = service.get_snapshot(user.id)
    assert all(snap[group].spent == 0 for group in snap.groups)
    assert snap.salary == Decimal('10000')
    assert snap[BudgetGroup.BASIC].allocated == Decimal('5000')
    assert len(service.ledger.query(user.id)) == 2
    assert service.get_series(user.id, 'monthly') == [
        SeriesPoint('2024-01', Decimal('4500')),
        SeriesPoint('2024-02', Decimal('0')),
    ]

    assert service.add_expense(user.id, '5000', 'Groceries').accepted


def test_update_salary_recomputes_allocations(service, user):
    service.add_expense(user.id, '1000', 'Groceries')
    snap = service.update_salary(user.id, '20000')
    assert snap[BudgetGroup.BASIC].allocated == Decimal('10000')
    assert snap.remaining(BudgetGroup.BASIC) == Decimal('9000')
    with pytest.raises(ValidationError):
        service.update_salary(user.id, '-5')


def test_unknown_user(service):
    with pytest.raises(NotFoundError) as info:
        service.get_snapshot(42)
    assert info.value.user_id == 42
    with pytest.raises(NotFoundError):
        service.add_expense(42, '10', 'Groceries')
    with pytest.raises(NotFoundError):
        service.reload(42)
    with pytest.raises(NotFoundError):
        service.update_salary(42, '10')


def test_near_limit_alert_delivered_once(store):
    delivered = []
    service = BudgetService(store, notifier=delivered.append, clock=FakeClock())
    user = service.register_user('Asha', 'asha@example.com', salary='10000')

    result = service.add_expense(user.id, '4600', 'Groceries')
    assert [e.group for e in result.alerts] == [BudgetGroup.BASIC]
    assert service.add_expense(user.id, '100', 'Groceries').alerts == []
    assert len(delivered) == 1


def test_alert_rearms_after_reload(service, user):
    assert service.add_expense(user.id, '1900', 'Emergency Fund').alerts
    service.reload(user.id)
    assert service.add_expense(user.id, '1900', 'Emergency Fund').alerts


def test_notifier_failure_surfaces_after_commit(store):
    def broken(event):
        raise RuntimeError('push gateway down')

    service = BudgetService(store, notifier=broken, clock=FakeClock())
    user = service.register_user('Asha', 'asha@example.com', salary='10000')
    with pytest.raises(UpstreamUnavailable) as info:
        service.add_expense(user.id, '2000', 'Retirement Fund')
    assert info.value.collaborator == 'notifications'
    assert info.value.record.id is not None
    assert [e.group for e in info.value.events] == [BudgetGroup.SAVINGS]
    assert service.get_snapshot(user.id)[BudgetGroup.SAVINGS].spent == Decimal('2000')


def test_history_defaults_to_last_30_days(service, user):
    service.add_expense(user.id, '10', 'Groceries', expense_date=date(2023, 11, 1))
    service.add_expense(user.id, '20', 'Groceries', expense_date=date(2024, 1, 1))
    records = service.history(user.id)
    assert [r.amount for r in records] == [Decimal('20')]
    assert len(service.history(user.id, start=date(2023, 1, 1))) == 2


def test_category_summary_and_classify(service, user):
    service.add_expense(user.id, '10', 'Groceries')
    service.add_expense(user.id, '15', 'Groceries')
    summary = service.category_summary(user.id)
    assert summary['total'] == Decimal('25')
    assert summary['by_category'] == {'Groceries': Decimal('25')}
    assert service.classify('Fitness') is BudgetGroup.LIFESTYLE


def test_every_alert_is_attempted_and_failures_are_handed_back(store):
    quiet = BudgetService(store, clock=FakeClock())
    user = quiet.register_user('Asha', 'asha@example.com', salary='10000')
    quiet.add_expense(user.id, '4600', 'Groceries')
    quiet.add_expense(user.id, '1900', 'Emergency Fund')

    attempted = []

    def flaky(event):
        attempted.append(event.group)
        if event.group is BudgetGroup.BASIC:
            raise RuntimeError('push gateway down')

    service = BudgetService(store, notifier=flaky, clock=FakeClock())
    with pytest.raises(UpstreamUnavailable) as info:
        service.add_expense(user.id, '1', 'Pet Supplies')
    assert attempted == [BudgetGroup.BASIC, BudgetGroup.SAVINGS]
    assert [e.group for e in info.value.events] == [BudgetGroup.BASIC]
    assert info.value.events[0].body == 'Your Basic Needs budget is almost exhausted!'


def test_oversized_amount_is_rejected_and_account_stays_usable(service, user):
    result = service.add_expense(user.id, '1e1000000', 'Pet Supplies')
    assert isinstance(result.reason, ValidationError)
    assert service.ledger.query(user.id) == []
    assert service.get_snapshot(user.id).other_spent == 0
    assert service.add_expense(user.id, '10', 'Groceries').accepted


def test_large_amounts_sum_exactly(service, user):
    service.add_expense(user.id, '999999999999999.99', 'Pet Supplies')
    service.add_expense(user.id, '0.01', 'Pet Supplies')
    service.add_expense(user.id, '0.01', 'Pet Supplies')
    assert service.get_snapshot(user.id).other_spent == Decimal('1000000000000000.01')


def test_reload_at_the_same_instant_as_an_expense(store):
    instant = datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)
    service = BudgetService(store, clock=lambda: instant)
    user = service.register_user('Asha', 'asha@example.com', salary='10000')
    service.add_expense(user.id, '100', 'Groceries')

    service.reload(user.id)
    assert service.get_snapshot(user.id)[BudgetGroup.BASIC].spent == 0

    service.add_expense(user.id, '40', 'Groceries')
    assert service.get_snapshot(user.id)[BudgetGroup.BASIC].spent == Decimal('40')


def test_duplicate_email_is_rejected_as_invalid_input(service, user):
    with pytest.raises(ValidationError) as info:
        service.register_user('Asha B', 'asha@example.com', salary='500')
    assert info.value.field == 'email'
    assert info.value.reason == 'already registered'


def test_ledger_append_stores_the_parsed_amount(service, user):
    record = service.ledger.append(
        ExpenseRecord(
            user_id=user.id,
            amount='₹1,012.50',
            category='Groceries',
            budget_group=BudgetGroup.OTHER,
            expense_date=date(2024, 1, 10),
        )
    )
    assert record.amount == Decimal('1012.50')
    assert record.budget_group is BudgetGroup.BASIC
    (stored,) = service.ledger.query(user.id)
    assert stored.amount == Decimal('1012.50')
