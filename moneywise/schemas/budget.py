# moneywise/schemas/budget.py
from typing import Optional, Literal
from pydantic import BaseModel, Field
from decimal import Decimal
import uuid
from moneywise.models.budget import BudgetPeriod

class BudgetCreate(BaseModel):
    category_id: uuid.UUID
    amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    period: Literal["weekly", "monthly", "yearly"] = "monthly"
    is_active: bool = True

class BudgetUpdate(BaseModel):
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=15, decimal_places=2)
    period: Optional[Literal["weekly", "monthly", "yearly"]] = None
    is_active: Optional[bool] = None

class BudgetRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    category_id: uuid.UUID
    amount: float
    period: BudgetPeriod
    is_active: bool

    class Config:
        from_attributes = True

class BudgetUsage(BaseModel):
    id: uuid.UUID
    category_id: uuid.UUID
    amount: float
    period: str
    is_active: Optional[bool] = None
    usage: float
    usage_percentage: float
    is_over_budget: bool
    remaining_budget: float
