# moneywise/schemas/category.py
from typing import List, Optional, Literal
from pydantic import BaseModel, Field
from datetime import datetime
import uuid
from moneywise.models.category import EntryType

class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: Literal["income", "expense"]
    icon: str = Field("fas fa-tag", max_length=50)
    color: str = Field("#6B7280", max_length=20)

class CategoryCreate(CategoryBase):
    pass

class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    icon: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, max_length=20)

class CategoryRead(CategoryBase):
    type: EntryType
    id: uuid.UUID
    user_id: uuid.UUID
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class DefaultCategoriesResult(BaseModel):
    created_count: int
    categories: List[CategoryRead]
