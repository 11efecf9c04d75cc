# moneywise/schemas/ai_insight.py
from typing import List, Literal
from pydantic import BaseModel
from datetime import datetime
import uuid

class AiInsightRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    type: str
    title: str
    message: str
    priority: Literal["high", "medium", "low"]
    actionable: bool
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True

class InsightGenerationResult(BaseModel):
    message: str
    count: int
    insights: List[AiInsightRead]
