# moneywise/api/v1/routes/dashboard.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, Dict, Any
from datetime import date, datetime

from moneywise.core.database import get_async_session
from moneywise.core.auth import User
from moneywise.crud.category import get_categories_for_user
from moneywise.crud.savings_goal import get_savings_goals_for_user
from moneywise.crud.transaction import get_transactions_in_range
from moneywise.utils.aggregation import (
    DASHBOARD_TOP_CATEGORIES,
    bucket_by_category,
    bucket_transactions,
    bucket_window_start,
    trend_series,
)
from moneywise.utils.projection import goal_progress
from moneywise.utils.summary import filter_by_range, savings_ratio, summarize, validate_range
from moneywise.api.deps import get_current_user

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

MONTHLY_TREND_LENGTH = 12
WEEKLY_TREND_LENGTH = 8

@router.get("/summary")
async def get_dashboard_summary(
    start_date: Optional[date] = Query(None, description="Defaults to the first day of the current month"),
    end_date: Optional[date] = Query(None, description="Defaults to today"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    """
    Returns everything the dashboard renders in one call:
    - Cards: income, expenses, net balance, savings ratio
    - Charts: last 12 months, last 8 weeks, top 5 expense categories
    - Goals: progress overview for every savings goal
    """
    now = datetime.now()
    today = now.date()
    start, end = validate_range(start_date or today.replace(day=1), end_date or today)

    # Trends end with the bucket holding today, or the period end when it is later
    trend_end = max(end, today)
    monthly_start = bucket_window_start(trend_end, "month", MONTHLY_TREND_LENGTH)
    weekly_start = bucket_window_start(trend_end, "week", WEEKLY_TREND_LENGTH)

    categories = await get_categories_for_user(user.id, db)
    transactions = await get_transactions_in_range(
        user.id, min(start, monthly_start, weekly_start), trend_end, db
    )
    goals = await get_savings_goals_for_user(user.id, db)

    period_transactions = filter_by_range(transactions, start, end)
    monthly_transactions = filter_by_range(transactions, monthly_start, trend_end)
    weekly_transactions = filter_by_range(transactions, weekly_start, trend_end)
    summary = summarize(period_transactions, start, end)

    goal_overview = []
    for goal in goals:
        status = goal_progress(goal.target_amount, goal.current_amount, goal.target_date, now)
        goal_overview.append({
            "id": str(goal.id),
            "name": goal.name,
            "target_amount": float(goal.target_amount),
            "current_amount": float(goal.current_amount or 0),
            "target_date": goal.target_date.isoformat(),
            "progress": min(100.0, status["progress"]),
            "is_completed": goal.is_completed or status["is_completed"],
            "is_overdue": status["is_overdue"],
            "is_near_deadline": status["is_near_deadline"],
            "days_remaining": status["days_remaining"],
        })

    return {
        "period": {"start_date": start.isoformat(), "end_date": end.isoformat()},
        "summary": {**summary, "savings_ratio": savings_ratio(summary)},
        "monthly_trend": trend_series(bucket_transactions(monthly_transactions, "month")),
        "weekly_trend": trend_series(bucket_transactions(weekly_transactions, "week")),
        "top_expense_categories": bucket_by_category(
            period_transactions,
            categories,
            limit=DASHBOARD_TOP_CATEGORIES,
            transaction_type="expense",
        ),
        "savings_goals": {
            "total": len(goals),
            "completed": sum(1 for g in goal_overview if g["is_completed"]),
            "total_target": sum(g["target_amount"] for g in goal_overview),
            "total_saved": sum(g["current_amount"] for g in goal_overview),
            "goals": goal_overview,
        },
    }
