# moneywise/api/v1/routes/advice.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import date, timedelta
import logging

from moneywise.schemas.advice import (
    FinancialAdvice,
    FinancialProfile,
    PurchaseDecision,
    PurchaseDecisionRequest,
)
from moneywise.crud.savings_goal import get_savings_goals_for_user
from moneywise.crud.transaction import get_transactions_in_range
from moneywise.core.database import get_async_session
from moneywise.core.auth import User
from moneywise.api.deps import get_current_user
from moneywise.utils.advice import (
    FinancialAdvisor,
    financial_profile,
    get_financial_advisor,
    price_to_income_ratio,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/advice", tags=["advice"])

# Monthly figures cover the last 30 days, today included
PROFILE_WINDOW_DAYS = 30

async def load_profile(user: User, db: AsyncSession):
    today = date.today()
    transactions = await get_transactions_in_range(
        user.id, today - timedelta(days=PROFILE_WINDOW_DAYS - 1), today, db
    )
    goals = await get_savings_goals_for_user(user.id, db)
    return financial_profile(transactions, goals)

@router.get("/financial-summary", response_model=FinancialProfile)
async def read_financial_summary(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await load_profile(user, db)

@router.post("/purchase-decision", response_model=PurchaseDecision)
async def decide_purchase(
    request: PurchaseDecisionRequest,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
    advisor: FinancialAdvisor = Depends(get_financial_advisor),
):
    """Recommends to **buy**, **wait** or **skip** a purchase given the last 30 days of cash flow."""
    profile = await load_profile(user, db)
    decision = await advisor.purchase_decision(request.item, request.price, request.description or "", profile)
    logger.info(f"Purchase decision for {user.email}: {request.item} -> {decision['recommendation']}")
    return PurchaseDecision(
        **decision,
        price_to_income_ratio=price_to_income_ratio(request.price, profile),
    )

@router.post("/financial-advice", response_model=FinancialAdvice)
async def generate_financial_advice(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
    advisor: FinancialAdvisor = Depends(get_financial_advisor),
):
    profile = await load_profile(user, db)
    advice = await advisor.financial_advice(profile)
    return FinancialAdvice(advice=advice, profile=profile)
