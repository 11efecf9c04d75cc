# moneywise/utils/reports.py
"""
Report assembly: combines the aggregator, summary calculator and goal
projection engine into one denormalised, JSON-serialisable payload that the
API returns, stores in ``reports.metadata`` and hands to the mailer.
"""
import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from moneywise.utils.aggregation import bucket_by_category, week_start
from moneywise.utils.projection import as_datetime, goal_progress, month_difference, project
from moneywise.utils.summary import as_date, filter_by_range, savings_ratio, summarize, validate_range

BUDGET_ALERT_THRESHOLD = 80  # percent of the budget already spent

CATEGORY_FIELDS = ("id", "name", "type", "color", "icon")
BUDGET_FIELDS = ("id", "category_id", "amount", "period", "is_active")
GOAL_FIELDS = (
    "id", "name", "description", "target_amount", "current_amount",
    "target_date", "icon", "color", "is_completed",
)
TRANSACTION_FIELDS = ("id", "category_id", "amount", "type", "date", "description")


# ────────────────────────────────────────────────────────────────────────────────
# SERIALISATION
# ────────────────────────────────────────────────────────────────────────────────
def jsonable(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    return value


def to_record(obj: Any, fields: Tuple[str, ...]) -> Dict[str, Any]:
    return {field: jsonable(getattr(obj, field, None)) for field in fields}


# ────────────────────────────────────────────────────────────────────────────────
# BUDGETS
# ────────────────────────────────────────────────────────────────────────────────
def budget_period_window(period: str, today: date) -> Tuple[date, date]:
    """Current window of a budget period, ending today (inclusive)."""
    if period == "weekly":
        return week_start(today), today
    if period == "yearly":
        return date(today.year, 1, 1), today
    # monthly and anything unrecognised
    return date(today.year, today.month, 1), today


def budget_usage(transactions: Iterable[Any], category_id, period: str, today: date) -> float:
    """Sum of the category's expenses inside the budget's current window."""
    start, end = budget_period_window(period, today)
    return sum(
        float(tx.amount)
        for tx in transactions
        if tx.type == "expense"
        and tx.category_id == category_id
        and start <= as_date(tx.date) <= end
    )


def analyze_budget(budget: Any, transactions: Iterable[Any], today: date) -> Dict[str, Any]:
    amount = float(budget.amount)
    usage = budget_usage(transactions, budget.category_id, budget.period, today)
    usage_percentage = (usage / amount * 100) if amount > 0 else 0.0
    return {
        **to_record(budget, BUDGET_FIELDS),
        "usage": usage,
        "usage_percentage": usage_percentage,
        "is_over_budget": usage_percentage > BUDGET_ALERT_THRESHOLD,
        "remaining_budget": max(0.0, amount - usage),
    }


# ────────────────────────────────────────────────────────────────────────────────
# SAVINGS GOALS
# ────────────────────────────────────────────────────────────────────────────────
def analyze_goal(goal: Any, now: datetime) -> Dict[str, Any]:
    """
    Progress plus the on-track heuristic: a goal is on track when its
    progress is at least ``100 - months_remaining / 12 * 100``. This is not
    a time-value-of-money calculation.
    """
    target_amount = float(goal.target_amount)
    current_amount = float(goal.current_amount or 0)
    status = goal_progress(target_amount, current_amount, goal.target_date, now)
    progress = status["progress"]

    months_remaining = max(1, month_difference(now, as_date(goal.target_date)))
    remaining_amount = status["remaining_amount"]

    projection = None
    if as_datetime(goal.target_date) > now:
        projection = project(target_amount, current_amount, goal.target_date, now)

    return {
        **to_record(goal, GOAL_FIELDS),
        "progress": progress,
        "remaining_amount": remaining_amount,
        "months_remaining": months_remaining,
        "required_monthly_savings": remaining_amount / months_remaining,
        "is_on_track": progress >= (100 - (months_remaining / 12) * 100),
        "is_overdue": status["is_overdue"],
        "projection": projection,
    }


# ────────────────────────────────────────────────────────────────────────────────
# MAIN ENTRY
# ────────────────────────────────────────────────────────────────────────────────
def assemble_report(
    user_id,
    period_start,
    period_end,
    transactions: Iterable[Any],
    categories: Iterable[Any],
    budgets: Iterable[Any],
    savings_goals: Iterable[Any],
    report_type: str = "custom",
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build the full report payload for one user.

    ``transactions`` may cover more than the report period: the summary and
    category totals only use rows inside ``[period_start, period_end]``,
    while budget usage always looks at each budget's current window.
    """
    start, end = validate_range(period_start, period_end)
    now = as_datetime(now) if now is not None else datetime.now()
    today = now.date()

    transactions = list(transactions)
    categories = list(categories)
    in_period = filter_by_range(transactions, start, end)

    summary = summarize(in_period, start, end)
    category_totals = bucket_by_category(in_period, categories)
    expense_totals = bucket_by_category(in_period, categories, transaction_type="expense")

    budget_analysis = [analyze_budget(b, transactions, today) for b in budgets]
    savings_analysis = [analyze_goal(g, now) for g in savings_goals]

    categories_by_id = {c.id: c for c in categories}
    transaction_rows = []
    for tx in sorted(in_period, key=lambda t: as_date(t.date), reverse=True):
        row = to_record(tx, TRANSACTION_FIELDS)
        category = categories_by_id.get(tx.category_id)
        row["category"] = (
            {"name": category.name, "icon": category.icon, "color": category.color}
            if category is not None else None
        )
        transaction_rows.append(row)

    insights = {
        "net_balance": summary["net_balance"],
        "savings_rate": savings_ratio(summary),
        "top_expense_category": expense_totals[0] if expense_totals else None,
        "budget_alerts": [b for b in budget_analysis if b["is_over_budget"]],
        "savings_goals_behind": [g for g in savings_analysis if not g["is_on_track"]],
    }

    return {
        "user_id": jsonable(user_id),
        "summary": summary,
        "transactions": transaction_rows,
        "category_totals": category_totals,
        "budget_analysis": budget_analysis,
        "savings_analysis": savings_analysis,
        "insights": insights,
        "metadata": {
            "period_start": start.isoformat(),
            "period_end": end.isoformat(),
            "report_type": report_type,
            "generated_at": now.isoformat(),
            "total_transactions": len(in_period),
        },
    }
