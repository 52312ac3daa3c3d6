"""Display formatting for amounts and transactions."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from finance_tracker.models.ledger import Transaction


CENT = Decimal("0.01")


def format_currency(amount: Union[Decimal, int, float], symbol: str = "$") -> str:
    """Magnitude with thousands separators, e.g. 1200 -> "$1,200.00"."""
    value = abs(Decimal(str(amount))).quantize(CENT, rounding=ROUND_HALF_UP)
    return f"{symbol}{value:,.2f}"


def format_signed_amount(transaction: Transaction, symbol: str = "$") -> str:
    """Amount with the sign of its type: "+$3,200.00" or "-$120.50"."""
    sign = "-" if transaction.is_expense else "+"
    return f"{sign}{format_currency(transaction.amount, symbol)}"


def format_balance(amount: Decimal, symbol: str = "$") -> str:
    """Signed balance: negative values get a leading minus."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{format_currency(amount, symbol)}"


def format_percent(value: float) -> str:
    return f"{value:.0f}%"
