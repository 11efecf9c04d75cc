# moneywise/crud/report.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import desc
from moneywise.core.db_utils import with_db_retry
from moneywise.models.budget import Budget
from moneywise.models.category import Category
from moneywise.models.report import Report
from moneywise.models.savings_goal import SavingsGoal
from moneywise.models.transaction import Transaction
from moneywise.utils.reports import budget_period_window
from typing import Any, Dict, List, Optional
from datetime import date, datetime
import logging
import uuid

logger = logging.getLogger(__name__)

async def get_reports_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Report]:
    result = await db.execute(
        select(Report).where(Report.user_id == user_id).order_by(desc(Report.created_at))
    )
    return result.scalars().all()

async def get_report_by_id(report_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Report]:
    result = await db.execute(
        select(Report).where(Report.id == report_id, Report.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def create_pending_report(
    user_id: uuid.UUID,
    name: str,
    report_type: str,
    period_start: date,
    period_end: date,
    db: AsyncSession,
) -> Report:
    report = Report(
        user_id=user_id,
        name=name,
        type=report_type,
        period_start=period_start,
        period_end=period_end,
        status="pending",
    )
    db.add(report)
    await db.commit()
    await db.refresh(report)
    return report

async def complete_report(report: Report, payload: Dict[str, Any], db: AsyncSession) -> Report:
    report.payload = payload
    report.status = "completed"
    report.completed_at = datetime.utcnow()
    db.add(report)
    await db.commit()
    await db.refresh(report)
    return report

async def mark_report_failed(report: Report, db: AsyncSession) -> Report:
    report.status = "failed"
    db.add(report)
    await db.commit()
    await db.refresh(report)
    return report

async def delete_report(report: Report, db: AsyncSession) -> None:
    await db.delete(report)
    await db.commit()


@with_db_retry()
async def load_report_snapshot(
    user_id: uuid.UUID,
    period_start: date,
    period_end: date,
    today: date,
    db: AsyncSession,
) -> Dict[str, List[Any]]:
    """
    Read every input of a report through one session, inside one transaction.

    The session autobegins on the first SELECT and nothing here commits, so
    all four reads see the same snapshot. Transactions are fetched for the
    report period widened to cover the current window of each active budget.
    Pass ``db`` by keyword so retries can roll the session back.
    """
    categories = (await db.execute(
        select(Category).where(Category.user_id == user_id)
    )).scalars().all()
    budgets = (await db.execute(
        select(Budget).where(Budget.user_id == user_id, Budget.is_active.is_(True))
    )).scalars().all()
    savings_goals = (await db.execute(
        select(SavingsGoal).where(SavingsGoal.user_id == user_id)
    )).scalars().all()

    window_start = min(
        [period_start] + [budget_period_window(b.period, today)[0] for b in budgets]
    )
    window_end = max(period_end, today)
    transactions = (await db.execute(
        select(Transaction).where(
            Transaction.user_id == user_id,
            Transaction.date >= window_start,
            Transaction.date <= window_end,
        )
    )).scalars().all()

    logger.info(
        f"Loaded report snapshot for user {user_id}: {len(transactions)} transactions, "
        f"{len(budgets)} budgets, {len(savings_goals)} goals"
    )
    return {
        "transactions": transactions,
        "categories": categories,
        "budgets": budgets,
        "savings_goals": savings_goals,
    }
