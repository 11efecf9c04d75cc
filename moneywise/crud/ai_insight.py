# moneywise/crud/ai_insight.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, desc
from moneywise.models.ai_insight import AiInsight
from typing import Any, Dict, List, Optional
import uuid

async def get_insights_for_user(user_id: uuid.UUID, db: AsyncSession, limit: int = 10) -> List[AiInsight]:
    """Latest insights first"""
    result = await db.execute(
        select(AiInsight)
        .where(AiInsight.user_id == user_id)
        .order_by(desc(AiInsight.created_at))
        .limit(limit)
    )
    return result.scalars().all()

async def replace_insights(user_id: uuid.UUID, insights: List[Dict[str, Any]], db: AsyncSession) -> List[AiInsight]:
    """Drop the user's previous insights and store the new batch in one transaction."""
    await db.execute(delete(AiInsight).where(AiInsight.user_id == user_id))
    rows = [
        AiInsight(
            user_id=user_id,
            type=item["type"],
            title=item["title"],
            message=item["message"],
            priority=item.get("priority") or "medium",
            actionable=item.get("actionable", True),
            is_read=False,
        )
        for item in insights
    ]
    db.add_all(rows)
    await db.commit()
    for row in rows:
        await db.refresh(row)
    return rows

async def mark_insight_as_read(insight_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[AiInsight]:
    """Mark an insight as read, ensuring it belongs to the specified user"""
    result = await db.execute(
        select(AiInsight).where(AiInsight.id == insight_id, AiInsight.user_id == user_id)
    )
    insight = result.scalars().first()

    if insight:
        insight.is_read = True
        await db.commit()
        await db.refresh(insight)
    return insight
