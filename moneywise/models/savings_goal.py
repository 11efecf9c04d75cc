# moneywise/models/savings_goal.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Text, Numeric, Date, DateTime, ForeignKey, Boolean, Uuid
from moneywise.core.database import Base

class SavingsGoal(Base):
    __tablename__ = "savings_goals"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=200), nullable=False)
    description = Column(Text, nullable=True)
    target_amount = Column(Numeric(15, 2, asdecimal=False), nullable=False)
    # Only ever changed through an atomic increment or an explicit edit
    current_amount = Column(Numeric(15, 2, asdecimal=False), nullable=False, default=0)
    target_date = Column(Date, nullable=False)
    icon = Column(String(length=50), default="fas fa-piggy-bank")
    color = Column(String(length=20), default="#3B82F6")
    # Flips to True once current_amount reaches target_amount, never back
    is_completed = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<SavingsGoal name={self.name} target={self.target_amount} user_id={self.user_id}>"
