"""Document review models.

Stores documents submitted for approval and their status history.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Integer, Uuid
from sqlalchemy.orm import relationship

from docapproval.db.base import Base


class DocumentRequest(Base):
    """
    A document awaiting (or past) approval.

    ``version`` is the optimistic-concurrency token: every flush that
    changes the row bumps it, and a flush against a stale version fails.
    """
    __tablename__ = "document_requests"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    document_path = Column(String(512), nullable=False, default="")
    comments = Column(Text, nullable=True)
    
    # Workflow state
    status = Column(String(50), nullable=False, default="pending", index=True)
    
    # Request tracking
    requested_by_user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    
    # Last actor whose vote decided the document
    approved_by_user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    decided_at = Column(DateTime, nullable=True)
    
    version = Column(Integer, nullable=False, default=1)
    
    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    requester = relationship("User", foreign_keys=[requested_by_user_id])
    decided_by = relationship("User", foreign_keys=[approved_by_user_id])
    votes = relationship("ApprovalVote", back_populates="document", cascade="all, delete-orphan")
    history = relationship("DocumentHistory", back_populates="document", order_by="DocumentHistory.created_at")
    
    __mapper_args__ = {"version_id_col": version}
    
    def __repr__(self) -> str:
        return f"<DocumentRequest {self.title} [{self.status}]>"


class DocumentHistory(Base):
    """
    Records status transitions of documents.
    
    Provides the audit trail of how each decision was reached.
    """
    __tablename__ = "document_history"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    document_id = Column(Uuid(as_uuid=True), ForeignKey("document_requests.id", ondelete="CASCADE"), nullable=False, index=True)
    
    # Transition details
    action = Column(String(50), nullable=False)
    from_state = Column(String(50), nullable=False)
    to_state = Column(String(50), nullable=False)
    
    # Actor
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    
    notes = Column(Text, nullable=True)
    
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    
    # Relationships
    document = relationship("DocumentRequest", back_populates="history")
    user = relationship("User")
    
    def __repr__(self) -> str:
        return f"<DocumentHistory {self.from_state} -> {self.to_state}>"
