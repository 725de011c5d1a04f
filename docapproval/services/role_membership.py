"""Approver role lookup backed by the users and roles tables."""

from typing import Optional
from uuid import UUID

from sqlalchemy import and_
from sqlalchemy.orm import Session

from docapproval.core.config import get_settings
from docapproval.db.models import Role, User


class DatabaseRoleMembership:
    """
    Answers who currently holds the approver role.

    Nothing is cached: every call reflects role membership at that moment.
    """

    def __init__(self, db: Session, role_name: Optional[str] = None):
        self.db = db
        self.role_name = role_name or get_settings().approver_role_name

    def count_approvers(self) -> int:
        """Number of active users holding the approver role."""
        return self._approvers().count()

    def is_approver(self, user_id: UUID) -> bool:
        """Whether the user is active and holds the approver role."""
        return self._approvers().filter(User.id == user_id).first() is not None

    def _approvers(self):
        return self.db.query(User).join(Role, User.role_id == Role.id).filter(
            and_(
                Role.name == self.role_name,
                User.is_active == True,  # noqa: E712
            )
        )
