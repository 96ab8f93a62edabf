"""Bucket expense records into calendar-aligned windows for trend charts.

Bucket keys are plain strings that sort chronologically:

* weekly  - ISO date of the Sunday on or before the expense date
* monthly - ``YYYY-MM``
* yearly  - ``YYYY``

Charts need at least two points, so an empty ledger yields a single
``"No Data"`` placeholder and a ledger that fills exactly one bucket is
padded with a zero-value bucket for the following period.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Union

import pandas as pd

from budget_ledger.categories import BudgetGroup, classify
from budget_ledger.exceptions import ValidationError
from budget_ledger.models import ExpenseRecord, SeriesPoint

NO_DATA_KEY = "No Data"
ZERO = Decimal("0")


class Interval(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


def _as_interval(value: Union[Interval, str]) -> Interval:
    try:
        return Interval(str(getattr(value, 'value', value)).strip().lower())
    except ValueError:
        raise ValidationError("interval", value, "expected weekly, monthly or yearly") from None


def _decimal_sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def _sum_by(df: pd.DataFrame, column: str) -> Dict[str, Decimal]:
    """Exact per-key totals of the ``Amount`` column, keys in sorted order."""
    return {str(key): _decimal_sum(group) for key, group in df.groupby(column, sort=True)['Amount']}


def records_frame(records: Iterable[ExpenseRecord]) -> pd.DataFrame:
    """Tabulate records; amounts stay ``Decimal`` (object dtype)."""
    rows = [
        {
            'Expense Date': record.expense_date,
            'Amount': record.amount,
            'Category': record.category,
            'Group': classify(record.category).value,
        }
        for record in records
    ]
    return pd.DataFrame(rows, columns=['Expense Date', 'Amount', 'Category', 'Group'])


def _bucket_keys(dates: pd.Series, interval: Interval) -> pd.Series:
    if interval is Interval.WEEKLY:
        # dayofweek: Monday=0 ... Sunday=6
        offset = pd.to_timedelta((dates.dt.dayofweek + 1) % 7, unit='D')
        return (dates - offset).dt.strftime('%Y-%m-%d')
    if interval is Interval.MONTHLY:
        return dates.dt.strftime('%Y-%m')
    return dates.dt.strftime('%Y')


def _next_key(key: str, interval: Interval) -> str:
    if interval is Interval.WEEKLY:
        return (date.fromisoformat(key) + timedelta(days=7)).isoformat()
    if interval is Interval.MONTHLY:
        return str(pd.Period(key, freq='M') + 1)
    return str(int(key) + 1)


def bucket(records: Iterable[ExpenseRecord], interval: Union[Interval, str]) -> List[SeriesPoint]:
    """Total expense amounts per time bucket, oldest first.

    Args:
        records: Expense records to aggregate
        interval: ``'weekly'``, ``'monthly'`` or ``'yearly'``

    Returns:
        List of SeriesPoint with at least one point (``"No Data"``) and,
        whenever real data exists, at least two.

    Raises:
        ValidationError: for an unknown interval

    Example:
        >>> bucket([], 'weekly')
        [SeriesPoint(key='No Data', value=Decimal('0'))]
    """
    interval = _as_interval(interval)
    df = records_frame(records)
    if df.empty:
        return [SeriesPoint(NO_DATA_KEY, ZERO)]

    dates = pd.to_datetime(df['Expense Date'])
    df['Bucket'] = _bucket_keys(dates, interval)
    points = [SeriesPoint(key, value) for key, value in _sum_by(df, 'Bucket').items()]
    if len(points) == 1:
        points.append(SeriesPoint(_next_key(points[0].key, interval), ZERO))
    return points


def category_totals(records: Iterable[ExpenseRecord]) -> Dict[str, Decimal]:
    """Amount spent per category, largest first."""
    df = records_frame(records)
    if df.empty:
        return {}
    ordered = sorted(_sum_by(df, 'Category').items(), key=lambda item: (-item[1], item[0]))
    return dict(ordered)


def group_totals(records: Iterable[ExpenseRecord]) -> Dict[BudgetGroup, Decimal]:
    """Amount spent per budget group; every group is present."""
    totals = {group: ZERO for group in BudgetGroup}
    df = records_frame(records)
    if df.empty:
        return totals
    for group_value, amount in _sum_by(df, 'Group').items():
        totals[BudgetGroup(group_value)] = amount
    return totals


def spending_summary(records: Iterable[ExpenseRecord]) -> Dict[str, object]:
    """Total spend plus the per-category breakdown."""
    records = list(records)
    by_category = category_totals(records)
    return {
        'total': _decimal_sum(by_category.values()),
        'by_category': by_category,
        'count': len(records),
    }


def series_frame(points: Iterable[SeriesPoint]) -> pd.DataFrame:
    """Series as a two-column frame (``Period``, ``Amount``) for charting."""
    return pd.DataFrame(
        [{'Period': point.key, 'Amount': float(point.value)} for point in points],
        columns=['Period', 'Amount'],
    )
