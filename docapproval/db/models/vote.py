"""Approval vote model.

One row per (document, approver); a re-vote overwrites the row.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from docapproval.db.base import Base


class ApprovalVote(Base):
    __tablename__ = "approval_votes"
    __table_args__ = (
        UniqueConstraint("document_id", "approver_id", name="uq_approval_votes_document_approver"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    document_id = Column(Uuid(as_uuid=True), ForeignKey("document_requests.id", ondelete="CASCADE"), nullable=False, index=True)
    approver_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    
    decision = Column(String(20), nullable=False)  # approve, reject
    comments = Column(Text, nullable=True)
    voted_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    
    # Relationships
    document = relationship("DocumentRequest", back_populates="votes")
    approver = relationship("User", back_populates="votes")
    
    def __repr__(self) -> str:
        return f"<ApprovalVote {self.approver_id} {self.decision}>"
