# moneywise/utils/aggregation.py
from collections import OrderedDict
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional

from moneywise.utils.summary import as_date

OTHER_CATEGORY_NAME = "Other"
OTHER_CATEGORY_COLOR = "#8884d8"

DASHBOARD_TOP_CATEGORIES = 5

# Bucket counts used when a trend request gives no start date
DEFAULT_TREND_BUCKETS = {"month": 12, "week": 26}


# ────────────────────────────────────────────────────────────────────────────────
# BUCKET KEYS
# ────────────────────────────────────────────────────────────────────────────────
def week_start(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def bucket_key(day, bucket_by: str) -> str:
    day = as_date(day)
    if bucket_by == "month":
        return f"{day.year:04d}-{day.month:02d}"
    if bucket_by == "week":
        return week_start(day).isoformat()
    raise ValueError(f"Unsupported bucket granularity: {bucket_by!r}")


def bucket_window_start(end, bucket_by: str, count: int) -> date:
    """First day of the oldest of ``count`` buckets, the newest being the one holding ``end``."""
    end = as_date(end)
    if bucket_by == "week":
        return week_start(end) - timedelta(weeks=count - 1)
    if bucket_by == "month":
        index = end.year * 12 + end.month - 1 - (count - 1)
        return date(index // 12, index % 12 + 1, 1)
    raise ValueError(f"Unsupported bucket granularity: {bucket_by!r}")


# ────────────────────────────────────────────────────────────────────────────────
# TIME BUCKETS
# ────────────────────────────────────────────────────────────────────────────────
def bucket_transactions(
    transactions: Iterable[Any],
    bucket_by: str = "month",
) -> "OrderedDict[str, Dict[str, float]]":
    """
    Group transactions into month (``YYYY-MM``) or Sunday-aligned week
    (``YYYY-MM-DD``) buckets of income, expense and net.

    Keys are zero padded, so ordering by string is chronological.
    """
    if bucket_by not in ("month", "week"):
        raise ValueError(f"Unsupported bucket granularity: {bucket_by!r}")

    buckets: Dict[str, Dict[str, float]] = {}
    for tx in transactions:
        key = bucket_key(tx.date, bucket_by)
        bucket = buckets.setdefault(key, {"income": 0.0, "expense": 0.0, "net": 0.0})
        if tx.type == "income":
            bucket["income"] += float(tx.amount)
        elif tx.type == "expense":
            bucket["expense"] += float(tx.amount)
        bucket["net"] = bucket["income"] - bucket["expense"]

    return OrderedDict(sorted(buckets.items()))


def trend_series(buckets: Dict[str, Dict[str, float]], last: Optional[int] = None) -> List[Dict[str, Any]]:
    rows = [{"period": key, **values} for key, values in buckets.items()]
    if last is not None:
        rows = rows[-last:]
    return rows


# ────────────────────────────────────────────────────────────────────────────────
# CATEGORY BUCKETS
# ────────────────────────────────────────────────────────────────────────────────
def bucket_by_category(
    transactions: Iterable[Any],
    categories: Iterable[Any],
    limit: Optional[int] = None,
    transaction_type: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Sum amounts per category, largest first.

    Transactions whose category is unknown land in a shared "Other" bucket.
    ``limit`` keeps only the top N rows; ``transaction_type`` restricts the
    rollup to income or expense rows.
    """
    by_id = {c.id: c for c in categories}
    totals: Dict[Any, Dict[str, Any]] = {}

    for tx in transactions:
        if transaction_type is not None and tx.type != transaction_type:
            continue
        category = by_id.get(tx.category_id)
        key = category.id if category is not None else None
        row = totals.get(key)
        if row is None:
            row = {
                "category_id": str(category.id) if category is not None else None,
                "name": category.name if category is not None else OTHER_CATEGORY_NAME,
                "amount": 0.0,
                "color": (category.color if category is not None else None) or OTHER_CATEGORY_COLOR,
                "count": 0,
            }
            totals[key] = row
        row["amount"] += float(tx.amount)
        row["count"] += 1

    rows = sorted(totals.values(), key=lambda r: r["amount"], reverse=True)
    if limit is not None:
        rows = rows[:limit]
    return rows
