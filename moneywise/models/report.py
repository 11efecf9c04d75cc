# moneywise/models/report.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Date, DateTime, JSON, Uuid
from moneywise.core.database import Base

class Report(Base):
    __tablename__ = "reports"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=200), nullable=False)
    type = Column(String(length=50), nullable=False)  # 'monthly', 'quarterly', 'yearly', 'custom'
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    status = Column(String(length=20), default="pending")  # 'pending', 'completed', 'failed'
    # Assembled report payload; plain JSON only
    payload = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<Report name={self.name} status={self.status} user_id={self.user_id}>"
