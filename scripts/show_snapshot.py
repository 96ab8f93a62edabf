#!/usr/bin/env python3
"""Show a user's current budget snapshot and spending trend."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pandas as pd

from budget_ledger import BudgetService, NotFoundError, SQLiteStore
from budget_ledger.categories import TRACKED_GROUPS, group_label
from budget_ledger.formatting import format_currency, remaining_label


def main(user_id: int, interval: str = 'monthly', db_path: str | None = None) -> int:
    store = SQLiteStore(db_path)
    store.init_db()
    service = BudgetService(store)

    try:
        snapshot = service.get_snapshot(user_id)
    except NotFoundError as exc:
        print(exc)
        return 1

    print(f"Salary: {format_currency(snapshot.salary)}")
    print(f"Remaining Salary: {format_currency(snapshot.remaining_salary)}")
    for group in TRACKED_GROUPS:
        print(f"  {group_label(group)}: {remaining_label(snapshot[group])}")
    if snapshot.other_spent:
        print(f"  Other: {format_currency(snapshot.other_spent)} spent")

    series = service.get_series(user_id, interval)
    print(f"\n{interval.capitalize()} spending:")
    df = pd.DataFrame([{'Period': p.key, 'Amount': format_currency(p.value)} for p in series])
    print(df.to_string(index=False))
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Show budget snapshot for a user.')
    parser.add_argument('user_id', type=int, help='User id to report on')
    parser.add_argument('--interval', default='monthly', choices=['weekly', 'monthly', 'yearly'])
    parser.add_argument('--db', default=None, help='SQLite database path (defaults to config)')
    args = parser.parse_args()
    raise SystemExit(main(args.user_id, interval=args.interval, db_path=args.db))
