"""Errors raised by the approval decision engine.

Decision-path errors propagate to the caller. ``NotificationDeliveryFailure``
belongs to the best-effort notification path and is always handled there.
"""

from typing import Any, Dict, Optional
from uuid import UUID


class ApprovalError(Exception):
    """Base class for approval engine errors."""

    code = "approval_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


class InvalidStateError(ApprovalError):
    """Raised when a vote targets a document that was already decided."""

    code = "invalid_state"

    def __init__(self, document_id: UUID, status: str):
        super().__init__(f"Document {document_id} is already {status}; no further votes accepted")
        self.document_id = document_id
        self.status = status


class UnknownDocumentError(ApprovalError):
    """Raised when the referenced document does not exist."""

    code = "unknown_document"

    def __init__(self, document_id: UUID):
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class UnknownApproverError(ApprovalError):
    """Raised when the voter does not exist or is not an active approver."""

    code = "unknown_approver"

    def __init__(self, approver_id: UUID, reason: Optional[str] = None):
        message = f"Approver {approver_id} not found"
        if reason:
            message = f"Approver {approver_id} {reason}"
        super().__init__(message)
        self.approver_id = approver_id


class PolicyConfigurationError(ApprovalError):
    """Raised when the approval configuration cannot be evaluated."""

    code = "policy_configuration"


class ConcurrentVoteError(ApprovalError):
    """Raised when a vote keeps losing the optimistic-concurrency race."""

    code = "concurrent_vote"

    def __init__(self, document_id: UUID, attempts: int):
        super().__init__(
            f"Document {document_id} was modified concurrently; gave up after {attempts} attempts"
        )
        self.document_id = document_id
        self.attempts = attempts


class NotificationDeliveryFailure(ApprovalError):
    """Raised by a single outbound delivery attempt that failed or timed out."""

    code = "notification_delivery_failure"

    def __init__(self, channel: str, recipient: str, message: str):
        super().__init__(f"{channel} delivery to {recipient} failed: {message}")
        self.channel = channel
        self.recipient = recipient
