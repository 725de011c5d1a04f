"""Factory functions for creating test database records.

Each factory creates a model instance, adds it to the session, and flushes
so that database-generated fields (id, created_at, etc.) are populated.
All fields have sensible defaults but can be overridden via keyword arguments.

Usage::

    from tests.factories import create_approver, create_document

    def test_something(db_session):
        approver = create_approver(db_session)
        document = create_document(db_session, title="Budget 2027")
        assert document.status == "pending"
"""

from typing import Optional

from sqlalchemy.orm import Session

from docapproval.db.models import ApprovalConfigRecord, ApprovalVote, DocumentRequest, Role, User


_counter = 0


def _next_id() -> int:
    """Return a monotonically increasing integer for unique default values."""
    global _counter
    _counter += 1
    return _counter


# ---------------------------------------------------------------------------
# Role
# ---------------------------------------------------------------------------


def get_or_create_role(session: Session, name: str = "Approver") -> Role:
    role = session.query(Role).filter_by(name=name).first()
    if role is None:
        role = Role(name=name)
        session.add(role)
        session.flush()
    return role


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------


def create_user(
    session: Session,
    *,
    role: Optional[Role] = None,
    email: Optional[str] = None,
    name: Optional[str] = None,
    is_active: bool = True,
) -> User:
    n = _next_id()
    user = User(
        email=email or f"user{n}@example.com",
        name=name or f"Test User {n}",
        role_id=role.id if role else None,
        is_active=is_active,
    )
    session.add(user)
    session.flush()
    return user


def create_approver(session: Session, **kwargs) -> User:
    """User holding the Approver role."""
    return create_user(session, role=get_or_create_role(session, "Approver"), **kwargs)


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


def create_document(
    session: Session,
    *,
    requester: Optional[User] = None,
    title: Optional[str] = None,
    status: str = "pending",
) -> DocumentRequest:
    n = _next_id()
    document = DocumentRequest(
        title=title or f"Document {n}",
        description="Quarterly report",
        document_path=f"/docs/document-{n}.pdf",
        status=status,
        requested_by_user_id=requester.id if requester else None,
    )
    session.add(document)
    session.flush()
    return document


# ---------------------------------------------------------------------------
# Vote / config
# ---------------------------------------------------------------------------


def create_vote(
    session: Session,
    *,
    document: DocumentRequest,
    approver: User,
    decision: str = "approve",
    comments: Optional[str] = None,
) -> ApprovalVote:
    vote = ApprovalVote(
        document_id=document.id,
        approver_id=approver.id,
        decision=decision,
        comments=comments,
    )
    session.add(vote)
    session.flush()
    return vote


def set_approval_config(
    session: Session,
    mode: str = "majority",
    threshold_value: int = 0,
    comments_required: bool = False,
) -> ApprovalConfigRecord:
    record = session.get(ApprovalConfigRecord, 1)
    if record is None:
        record = ApprovalConfigRecord(id=1)
        session.add(record)
    record.mode = mode
    record.threshold_value = threshold_value
    record.comments_required = comments_required
    session.flush()
    return record
