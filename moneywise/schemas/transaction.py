# moneywise/schemas/transaction.py
from typing import Optional, Literal
from pydantic import BaseModel, Field
import datetime as dt
from decimal import Decimal
import uuid
from moneywise.models.category import EntryType

# Amounts are positive with at most two decimal places; anything else is
# rejected here, before it reaches the calculation code
Amount = Field(..., gt=0, max_digits=15, decimal_places=2)

class TransactionBase(BaseModel):
    category_id: uuid.UUID
    amount: Decimal = Amount
    type: Literal["income", "expense"]
    date: dt.date = Field(default_factory=dt.date.today, description="Calendar date of the transaction")
    description: str = Field(..., min_length=1, max_length=255, description="E.g. Groceries at the market")

class TransactionCreate(TransactionBase):
    pass

class TransactionUpdate(BaseModel):
    category_id: Optional[uuid.UUID] = None
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=15, decimal_places=2)
    type: Optional[Literal["income", "expense"]] = None
    date: Optional[dt.date] = None
    description: Optional[str] = Field(None, min_length=1, max_length=255)

class CategoryBrief(BaseModel):
    name: str
    icon: str
    color: str

    class Config:
        from_attributes = True

class TransactionRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    category_id: uuid.UUID
    amount: float
    type: EntryType
    date: dt.date
    description: str
    category: Optional[CategoryBrief] = None

    class Config:
        from_attributes = True

class TransactionSummary(BaseModel):
    start_date: dt.date
    end_date: dt.date
    total_income: float
    total_expense: float
    net_balance: float
    transaction_count: int
    savings_ratio: float

class TrendPoint(BaseModel):
    period: str
    income: float
    expense: float
    net: float
