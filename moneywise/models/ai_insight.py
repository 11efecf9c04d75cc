# moneywise/models/ai_insight.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Text, ForeignKey, Boolean, DateTime, Uuid
from moneywise.core.database import Base

class AiInsight(Base):
    __tablename__ = "ai_insights"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(length=50), nullable=False)  # e.g. 'budget_alert', 'saving_tip', 'spending_pattern'
    title = Column(String(length=200), nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(String(length=10), default="medium")  # 'high', 'medium', 'low'
    actionable = Column(Boolean, default=True)
    is_read = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
