# moneywise/models/budget.py
import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, ForeignKey, Numeric, Boolean, DateTime, Enum, Uuid
from moneywise.core.database import Base

class BudgetPeriod(str, enum.Enum):
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"

class Budget(Base):
    __tablename__ = "budgets"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Uuid, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Numeric(15, 2, asdecimal=False), nullable=False)
    # Usage is measured over the current week (from Sunday), month or year
    period = Column(Enum(BudgetPeriod, name="budget_period"), default=BudgetPeriod.monthly, nullable=False)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Budget category_id={self.category_id} amount={self.amount} period={self.period}>"
