"""Formatting utilities for currency and budget display.

Amounts are kept as exact ``Decimal`` values everywhere else; this is the
only place they get rounded.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from budget_ledger.config import CURRENCY_SYMBOL
from budget_ledger.models import GroupAllocation

Number = Union[Decimal, int, str]


def round_amount(amount: Number, decimals: int = 0) -> Decimal:
    """Round half-up to ``decimals`` places.

    Example:
        >>> round_amount(Decimal('2.5'))
        Decimal('3')
    """
    exponent = Decimal(1).scaleb(-decimals)
    return Decimal(amount).quantize(exponent, rounding=ROUND_HALF_UP)


def format_currency(
    amount: Number,
    decimals: int = 0,
    include_sign: bool = True,
    symbol: Optional[str] = None,
) -> str:
    """Format a currency amount with thousands separators.

    Args:
        amount: The amount to format
        decimals: Number of decimal places to show
        include_sign: Whether to include the currency symbol
        symbol: Override for the configured currency symbol

    Returns:
        Formatted currency string (e.g., "₹1,234" or "1,234.56")

    Example:
        >>> format_currency(Decimal('1234.56'), decimals=2, symbol='$')
        '$1,234.56'
        >>> format_currency(Decimal('1234.56'), include_sign=False)
        '1,235'
    """
    rounded = round_amount(amount, decimals)
    formatted = f"{rounded:,.{decimals}f}"
    if not include_sign:
        return formatted
    sign = CURRENCY_SYMBOL if symbol is None else symbol
    if formatted.startswith('-'):
        return f"-{sign}{formatted[1:]}"
    return f"{sign}{formatted}"


def fill_percent(allocation: GroupAllocation) -> Decimal:
    """Share of the allocation still available, clamped to [0, 100]."""
    if allocation.allocated <= 0:
        return Decimal(0)
    raw = allocation.remaining / allocation.allocated * 100
    return max(Decimal(0), min(raw, Decimal(100)))


def remaining_label(allocation: GroupAllocation, symbol: Optional[str] = None) -> str:
    """Label such as ``'Remaining: ₹1,000 / ₹5,000'``."""
    return (
        f"Remaining: {format_currency(allocation.remaining, symbol=symbol)}"
        f" / {format_currency(allocation.allocated, symbol=symbol)}"
    )
