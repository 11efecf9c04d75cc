# moneywise/models/category.py
import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, DateTime, Enum, Uuid
from moneywise.core.database import Base

class EntryType(str, enum.Enum):
    income = "income"
    expense = "expense"

class Category(Base):
    __tablename__ = "categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=100), nullable=False)
    # Transactions filed under this category must carry the same type
    type = Column(Enum(EntryType, name="entry_type"), nullable=False)
    icon = Column(String(length=50), nullable=False, default="fas fa-tag")
    color = Column(String(length=20), nullable=False, default="#6B7280")

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Category name={self.name} type={self.type} user_id={self.user_id}>"
