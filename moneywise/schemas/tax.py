# moneywise/schemas/tax.py
from typing import Literal
from pydantic import BaseModel, Field
from decimal import Decimal

class TaxCalculationRequest(BaseModel):
    gross_income: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2, description="Monthly gross income")
    marital_status: Literal["TK/0", "K/0", "K/1", "K/2", "K/3"] = "TK/0"
    job_expenses: Decimal = Field(Decimal("0"), ge=0, max_digits=15, decimal_places=2, description="Monthly")
    pension_contribution: Decimal = Field(Decimal("0"), ge=0, max_digits=15, decimal_places=2, description="Monthly")

class TaxCalculationResult(BaseModel):
    gross_income: float
    deductions: float
    net_income: float
    ptkp: int
    taxable_income: float
    annual_tax: int
    monthly_tax: int
    effective_rate: float
    marginal_rate: int
