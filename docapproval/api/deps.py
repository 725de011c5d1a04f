from typing import Generator, Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from docapproval.core.approval import DecisionCoordinator
from docapproval.core.approval.interfaces import NotificationSink
from docapproval.core.config import get_settings
from docapproval.db.models import User
from docapproval.db.session import SessionLocal
from docapproval.services import CeleryNotificationSink, DatabaseConfigStore, DatabaseRoleMembership


def get_db() -> Generator:
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    db: Session = Depends(get_db),
    x_user_id: Optional[str] = Header(None),
) -> User:
    """Resolve the acting user from the ``X-User-Id`` header set by the auth proxy."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not identify user",
    )
    if not x_user_id:
        raise credentials_exception
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise credentials_exception

    user = db.get(User, user_id)
    if user is None or not user.is_active:
        raise credentials_exception
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Only administrators may change the approval configuration."""
    role_name = current_user.role.name if current_user.role else None
    if role_name != get_settings().admin_role_name:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrator role required")
    return current_user


def get_config_store(db: Session = Depends(get_db)) -> DatabaseConfigStore:
    return DatabaseConfigStore(db)


def get_notification_sink() -> NotificationSink:
    return CeleryNotificationSink()


def get_coordinator(
    db: Session = Depends(get_db),
    config_store: DatabaseConfigStore = Depends(get_config_store),
    sink: NotificationSink = Depends(get_notification_sink),
) -> DecisionCoordinator:
    return DecisionCoordinator(
        db,
        role_membership=DatabaseRoleMembership(db),
        config_store=config_store,
        notification_sink=sink,
    )
