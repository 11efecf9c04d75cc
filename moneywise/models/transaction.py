# moneywise/models/transaction.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Numeric, Date, DateTime, Enum, Uuid
from sqlalchemy.orm import relationship
from moneywise.core.database import Base
from moneywise.models.category import EntryType

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Uuid, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Numeric(15, 2, asdecimal=False), nullable=False)
    type = Column(Enum(EntryType, name="entry_type"), nullable=False)
    # Calendar date only; range filters are inclusive on both ends
    date = Column(Date, nullable=False, index=True)
    description = Column(String(length=255), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    category = relationship("Category", lazy="joined")

    def __repr__(self):
        return f"<Transaction {self.type} amount={self.amount} date={self.date} user_id={self.user_id}>"
