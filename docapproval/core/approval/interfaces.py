"""Collaborator interfaces consumed by the decision coordinator."""

from typing import Optional, Protocol, runtime_checkable
from uuid import UUID

from .policy import ApprovalConfig
from .states import DocumentStatus


@runtime_checkable
class RoleMembership(Protocol):
    """Who currently holds the approver role. Queried fresh on each evaluation."""

    def count_approvers(self) -> int:
        ...

    def is_approver(self, user_id: UUID) -> bool:
        ...


@runtime_checkable
class ConfigStore(Protocol):
    """Source of the single active approval configuration."""

    def current_approval_config(self) -> ApprovalConfig:
        ...


@runtime_checkable
class NotificationSink(Protocol):
    """Fire-and-forget hook called after a decision is committed."""

    def document_decided(
        self,
        document_id: UUID,
        outcome: DocumentStatus,
        requester_id: Optional[UUID],
    ) -> None:
        ...
