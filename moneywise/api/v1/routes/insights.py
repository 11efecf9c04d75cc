# moneywise/api/v1/routes/insights.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging
import uuid

from moneywise.schemas.ai_insight import AiInsightRead, InsightGenerationResult
from moneywise.crud.ai_insight import get_insights_for_user, mark_insight_as_read, replace_insights
from moneywise.crud.transaction import get_transactions_for_user
from moneywise.core.database import get_async_session
from moneywise.core.auth import User
from moneywise.api.deps import get_current_user
from moneywise.utils.insights import InsightGenerator, get_insight_generator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/insights", tags=["insights"])

# Insights are generated from the most recent transactions only
INSIGHT_TRANSACTION_WINDOW = 20

@router.get("", response_model=List[AiInsightRead])
async def read_insights(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await get_insights_for_user(user.id, db)

@router.post("/generate", response_model=InsightGenerationResult)
async def generate_insights(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
    generator: InsightGenerator = Depends(get_insight_generator),
):
    transactions = await get_transactions_for_user(user.id, db, limit=INSIGHT_TRANSACTION_WINDOW)
    if not transactions:
        return InsightGenerationResult(
            message="Add some transactions to receive personalised insights",
            count=0,
            insights=[],
        )

    generated = await generator.generate(transactions)
    stored = await replace_insights(user.id, generated, db)
    logger.info(f"Stored {len(stored)} insights for {user.email}")
    return InsightGenerationResult(
        message=f"Generated {len(stored)} insights",
        count=len(stored),
        insights=[AiInsightRead.model_validate(i) for i in stored],
    )

@router.patch("/{insight_id}/read", response_model=AiInsightRead)
async def mark_insight_read(
    insight_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    insight = await mark_insight_as_read(insight_id, user.id, db)
    if not insight:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Insight not found")
    return insight
