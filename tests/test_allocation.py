from decimal import Decimal

import pytest

from budget_ledger import allocation
from budget_ledger.categories import BudgetGroup


@pytest.mark.parametrize('salary', ['0', '1', '10000', '12345.67', '0.03', '99999999.99'])
def test_allocations_sum_to_salary(salary):
    amounts = allocation.allocate(Decimal(salary))
    assert sum(amounts.values()) == Decimal(salary)


def test_fifty_thirty_twenty_split():
    amounts = allocation.allocate(Decimal('10000'))
    assert amounts[BudgetGroup.BASIC] == Decimal('5000')
    assert amounts[BudgetGroup.LIFESTYLE] == Decimal('3000')
    assert amounts[BudgetGroup.SAVINGS] == Decimal('2000')


def test_allocations_are_not_rounded():
    assert allocation.allocated(BudgetGroup.SAVINGS, Decimal('0.03')) == Decimal('0.006')


def test_other_has_no_allocation():
    assert allocation.allocated(BudgetGroup.OTHER, Decimal('10000')) == 0
    assert BudgetGroup.OTHER not in allocation.allocate(Decimal('10000'))
