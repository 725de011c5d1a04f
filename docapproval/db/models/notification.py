"""In-app notification and delivery log models."""

import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, JSON, ForeignKey, Boolean, Text, Integer, Uuid
from sqlalchemy.orm import relationship

from docapproval.db.base import Base


class NotificationChannel(str, Enum):
    """Available notification channels."""
    IN_APP = "in_app"
    EMAIL = "email"
    WEBHOOK = "webhook"


class NotificationEventType(str, Enum):
    """Events that can trigger notifications."""
    DOCUMENT_APPROVED = "document_approved"
    DOCUMENT_REJECTED = "document_rejected"


class Notification(Base):
    """
    In-app notification shown to a user.
    """
    __tablename__ = "notifications"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    link = Column(String(512), nullable=True)
    type = Column(String(20), nullable=False, default="info")  # info, success, warning, error
    is_read = Column(Boolean, nullable=False, default=False)
    
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    
    # Relationships
    user = relationship("User")
    
    def __repr__(self) -> str:
        return f"<Notification {self.title} to {self.user_id}>"


class NotificationLog(Base):
    """
    Log of outbound notification attempts for audit and debugging.
    """
    __tablename__ = "notification_logs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    
    # Notification details
    channel = Column(String(50), nullable=False)  # email, webhook
    event_type = Column(String(50), nullable=False)
    recipient = Column(String(512), nullable=False)  # Email address or webhook URL
    
    document_id = Column(Uuid(as_uuid=True), ForeignKey("document_requests.id", ondelete="SET NULL"), nullable=True)
    
    # Payload
    subject = Column(String(512), nullable=True)
    body = Column(Text, nullable=True)
    payload = Column(JSON, nullable=True)
    
    # Status
    status = Column(String(50), nullable=False, default="pending")  # pending, sent, failed
    error_message = Column(Text, nullable=True)
    attempts = Column(Integer, default=0)
    
    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    sent_at = Column(DateTime, nullable=True)
    
    def __repr__(self) -> str:
        return f"<NotificationLog {self.event_type} to {self.recipient}>"
