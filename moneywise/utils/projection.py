# moneywise/utils/projection.py
import math
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from moneywise.core.errors import InvalidGoalDateError

ONE_DAY = timedelta(days=1)

# (upper bound of required daily saving, score); anything above the last
# bound scores FEASIBILITY_FLOOR
FEASIBILITY_BANDS = (
    (10_000, 90),
    (25_000, 75),
    (50_000, 60),
    (100_000, 40),
)
FEASIBILITY_FLOOR = 20

EXTRA_INCOME_MONTHLY_THRESHOLD = 500_000
NEAR_DEADLINE_DAYS = 30


# ────────────────────────────────────────────────────────────────────────────────
# HELPERS
# ────────────────────────────────────────────────────────────────────────────────
def as_datetime(value) -> datetime:
    """
    A calendar date counts from midnight at the start of that day.

    Aware values are converted to naive local time so they compare with ``datetime.now()``.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    else:
        parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def month_difference(start, end) -> int:
    """
    Calendar month difference (year * 12 + month), ignoring the day.

    31 Jan -> 1 Feb counts as one month; 1 Jan -> 31 Jan counts as zero.
    """
    return (end.year - start.year) * 12 + (end.month - start.month)


def days_until(target, now) -> int:
    return math.ceil((as_datetime(target) - as_datetime(now)) / ONE_DAY)


def feasibility_score(daily_amount: float) -> int:
    for upper_bound, score in FEASIBILITY_BANDS:
        if daily_amount <= upper_bound:
            return score
    return FEASIBILITY_FLOOR


def savings_recommendations(daily_amount: float, monthly_amount: float) -> List[str]:
    recommendations = []

    if daily_amount <= 10_000:
        recommendations.append("Your target is very realistic! Saving consistently is the key to success.")
    elif daily_amount <= 25_000:
        recommendations.append("This target is fairly challenging. Consider cutting back on non-essential spending.")
    else:
        recommendations.append("This target is very ambitious. Consider extending the deadline or lowering the target.")

    if monthly_amount > EXTRA_INCOME_MONTHLY_THRESHOLD:
        recommendations.append("Consider looking for an additional source of income.")

    recommendations.append("Use the app to track your progress every day.")
    recommendations.append("Set up an automatic transfer to your savings account.")
    return recommendations


# ────────────────────────────────────────────────────────────────────────────────
# SIMULATION
# ────────────────────────────────────────────────────────────────────────────────
def project(
    target_amount: float,
    current_amount: float,
    target_date,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Required daily / weekly / monthly contributions to reach a savings
    target, with a 0-100 feasibility score and advice.

    ``total_months`` is the calendar month difference, so results near a
    month boundary are approximate.
    """
    now = as_datetime(now) if now is not None else datetime.now()
    target = as_datetime(target_date)
    if target <= now:
        raise InvalidGoalDateError(target_date, now)

    target_amount = float(target_amount)
    current_amount = float(current_amount or 0)
    remaining_amount = max(0.0, target_amount - current_amount)

    total_days = max(1, days_until(target, now))
    total_weeks = max(1, math.ceil(total_days / 7))
    total_months = max(1, month_difference(now, target))

    daily_amount = remaining_amount / total_days
    weekly_amount = remaining_amount / total_weeks
    monthly_amount = remaining_amount / total_months

    return {
        "target_amount": target_amount,
        "current_amount": current_amount,
        "target_date": target.isoformat(),
        "remaining_amount": remaining_amount,
        "total_days": total_days,
        "total_weeks": total_weeks,
        "total_months": total_months,
        "daily_amount": daily_amount,
        "weekly_amount": weekly_amount,
        "monthly_amount": monthly_amount,
        "feasibility_score": feasibility_score(daily_amount),
        "recommendations": savings_recommendations(daily_amount, monthly_amount),
    }


# ────────────────────────────────────────────────────────────────────────────────
# PROGRESS
# ────────────────────────────────────────────────────────────────────────────────
def goal_progress(
    target_amount: float,
    current_amount: float,
    target_date,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Progress and deadline flags for a stored savings goal."""
    now = as_datetime(now) if now is not None else datetime.now()
    target = as_datetime(target_date)

    target_amount = float(target_amount)
    current_amount = float(current_amount or 0)
    progress = (current_amount / target_amount * 100) if target_amount > 0 else 0.0
    is_completed = progress >= 100
    remaining_amount = max(0.0, target_amount - current_amount)

    days_remaining = max(0, days_until(target, now))
    months_remaining = max(0, month_difference(now, target))

    return {
        "progress": progress,
        "is_completed": is_completed,
        "is_overdue": now > target and not is_completed,
        "is_near_deadline": 0 < days_remaining <= NEAR_DEADLINE_DAYS,
        "days_remaining": days_remaining,
        "months_remaining": months_remaining,
        "remaining_amount": remaining_amount,
        "required_daily_savings": remaining_amount / days_remaining if days_remaining > 0 else 0.0,
        "required_monthly_savings": remaining_amount / months_remaining if months_remaining > 0 else 0.0,
    }
