from datetime import datetime
from sqlalchemy import Column, String, DateTime, Boolean, Integer

from docapproval.db.base import Base


class ApprovalConfigRecord(Base):
    """
    Persisted approval configuration.

    A single row is active; administrators overwrite it in place.
    """
    __tablename__ = "approval_configs"

    id = Column(Integer, primary_key=True)
    mode = Column(String(50), nullable=False, default="majority")
    threshold_value = Column(Integer, nullable=False, default=0)
    comments_required = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<ApprovalConfigRecord {self.mode} threshold={self.threshold_value}>"
