# moneywise/schemas/advice.py
from typing import Literal, Optional
from pydantic import BaseModel, Field
from decimal import Decimal

class FinancialProfile(BaseModel):
    monthly_income: float
    monthly_expenses: float
    net_balance: float
    current_savings: float
    savings_goals: int
    total_savings_target: float
    total_current_savings: float

class PurchaseDecisionRequest(BaseModel):
    item: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    description: Optional[str] = Field(None, max_length=500)

class PurchaseDecision(BaseModel):
    recommendation: Literal["buy", "wait", "skip"]
    reasoning: str
    alternatives: Optional[str] = None
    price_to_income_ratio: float

class FinancialAdvice(BaseModel):
    advice: str
    profile: FinancialProfile
