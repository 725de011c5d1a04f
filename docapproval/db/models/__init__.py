"""Database models for docapproval."""

from docapproval.db.models.role import Role
from docapproval.db.models.user import User
from docapproval.db.models.document import DocumentRequest, DocumentHistory
from docapproval.db.models.vote import ApprovalVote
from docapproval.db.models.approval_config import ApprovalConfigRecord
from docapproval.db.models.notification import (
    Notification,
    NotificationLog,
    NotificationChannel,
    NotificationEventType,
)

__all__ = [
    "Role",
    "User",
    "DocumentRequest",
    "DocumentHistory",
    "ApprovalVote",
    "ApprovalConfigRecord",
    "Notification",
    "NotificationLog",
    "NotificationChannel",
    "NotificationEventType",
]
