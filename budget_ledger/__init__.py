"""Top-level package for the budget ledger.

Tracks expenses against a salary using the fixed 50/30/20 rule
(Basic Needs / Lifestyle / Savings).  The primary modules are:

* ``categories`` – category → budget group registry
* ``engine`` – allocation snapshots (allocated / spent / remaining)
* ``admission`` – amount parsing and the pre-commit budget check
* ``aggregation`` – weekly / monthly / yearly spending series
* ``service`` – :class:`BudgetService`, the operations callers use
* ``db`` – SQLite persistence for users, salary cycles and expenses

Typical use:

```python
from budget_ledger import BudgetService, SQLiteStore

store = SQLiteStore("budget.db")
store.init_db()
service = BudgetService(store)
user = service.register_user("Asha", "asha@example.com", salary="10000")
service.add_expense(user.id, "4000", "Groceries")
```
"""

from .categories import BudgetGroup, classify  # noqa: F401
from .db import SQLiteStore  # noqa: F401
from .exceptions import (  # noqa: F401
    BudgetExceeded,
    BudgetLedgerError,
    NotFoundError,
    UpstreamUnavailable,
    ValidationError,
)
from .models import Accepted, AllocationSnapshot, ExpenseRecord, Rejected, SeriesPoint  # noqa: F401
from .service import BudgetService  # noqa: F401

__all__ = [
    "Accepted",
    "AllocationSnapshot",
    "BudgetExceeded",
    "BudgetGroup",
    "BudgetLedgerError",
    "BudgetService",
    "ExpenseRecord",
    "NotFoundError",
    "Rejected",
    "SQLiteStore",
    "SeriesPoint",
    "UpstreamUnavailable",
    "ValidationError",
    "classify",
]
