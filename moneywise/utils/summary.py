# moneywise/utils/summary.py
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from moneywise.core.errors import InvalidRangeError


def as_date(value) -> Optional[date]:
    """Normalise a date, datetime or ISO string to a calendar date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def validate_range(start_date, end_date):
    start = as_date(start_date)
    end = as_date(end_date)
    if start is None or end is None or end < start:
        raise InvalidRangeError(start, end)
    return start, end


def filter_by_range(transactions: Iterable[Any], start_date, end_date) -> List[Any]:
    """Transactions whose calendar date falls inside [start_date, end_date]."""
    start, end = validate_range(start_date, end_date)
    return [t for t in transactions if start <= as_date(t.date) <= end]


def summarize(transactions: Iterable[Any], start_date, end_date) -> Dict[str, Any]:
    """
    Income / expense / net totals over an inclusive date range.

    Only the calendar date of each transaction is compared, never the time
    of day.
    """
    in_range = filter_by_range(transactions, start_date, end_date)

    total_income = 0.0
    total_expense = 0.0
    for tx in in_range:
        if tx.type == "income":
            total_income += float(tx.amount)
        elif tx.type == "expense":
            total_expense += float(tx.amount)

    return {
        "total_income": total_income,
        "total_expense": total_expense,
        "net_balance": total_income - total_expense,
        "transaction_count": len(in_range),
    }


def savings_ratio(summary: Dict[str, Any]) -> float:
    """Net balance as a percentage of income; 0 when there is no income."""
    total_income = summary["total_income"]
    if total_income <= 0:
        return 0.0
    return summary["net_balance"] / total_income * 100
