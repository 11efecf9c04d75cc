# moneywise/schemas/savings_goal.py
from typing import Optional, List
from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
import uuid

class SavingsGoalBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    target_amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    current_amount: Decimal = Field(Decimal("0"), ge=0, max_digits=15, decimal_places=2)
    target_date: date
    icon: str = Field("fas fa-piggy-bank", max_length=50)
    color: str = Field("#3B82F6", max_length=20)

class SavingsGoalCreate(SavingsGoalBase):
    pass

class SavingsGoalUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    target_amount: Optional[Decimal] = Field(None, gt=0, max_digits=15, decimal_places=2)
    current_amount: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    target_date: Optional[date] = None
    icon: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, max_length=20)

class SavingsGoalRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    description: Optional[str] = None
    target_amount: float
    current_amount: float
    target_date: date
    icon: Optional[str] = None
    color: Optional[str] = None
    is_completed: bool

    class Config:
        from_attributes = True

class Contribution(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)

class SimulationRequest(BaseModel):
    target_amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    current_amount: Decimal = Field(Decimal("0"), ge=0, max_digits=15, decimal_places=2)
    target_date: datetime

class SimulationResult(BaseModel):
    target_amount: float
    current_amount: float
    target_date: str
    remaining_amount: float
    total_days: int
    total_weeks: int
    total_months: int
    daily_amount: float
    weekly_amount: float
    monthly_amount: float
    feasibility_score: int
    recommendations: List[str]

class GoalProgress(BaseModel):
    goal_id: uuid.UUID
    progress: float
    is_completed: bool
    is_overdue: bool
    is_near_deadline: bool
    days_remaining: int
    months_remaining: int
    remaining_amount: float
    required_daily_savings: float
    required_monthly_savings: float
