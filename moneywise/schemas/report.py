# moneywise/schemas/report.py
from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, EmailStr, Field, model_validator
from datetime import date, datetime
import uuid

class ReportRequest(BaseModel):
    type: Literal["monthly", "quarterly", "yearly", "custom"] = "custom"
    period_start: date
    period_end: date
    name: Optional[str] = Field(None, max_length=200)

    @model_validator(mode="after")
    def check_order(self):
        if self.period_end < self.period_start:
            raise ValueError("period_end must not be before period_start")
        return self

class ReportRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    type: str
    period_start: date
    period_end: date
    status: str
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ReportWithData(BaseModel):
    report: ReportRead
    data: Optional[Dict[str, Any]] = None

class ReportEmailRequest(BaseModel):
    email: EmailStr

class ReportEmailResult(BaseModel):
    success: bool
    message: str
