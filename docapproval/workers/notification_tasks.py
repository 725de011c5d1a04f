"""Celery tasks for decision notifications.

The vote path only enqueues; delivery happens here, in its own session,
after the decision is committed.
"""

from typing import Optional, Dict, Any
from uuid import UUID
import logging

from celery import Celery

from docapproval.core.approval.states import DocumentStatus
from docapproval.core.config import get_settings
from docapproval.db.session import SessionLocal
from docapproval.services.notifications import send_decision_notification_sync

logger = logging.getLogger(__name__)
settings = get_settings()

celery_app = Celery(
    'docapproval',
    broker=settings.celery_broker,
    backend=settings.celery_backend,
)

celery_app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,
    task_routes={
        'docapproval.workers.notification_tasks.deliver_decision_notification': {'queue': 'notifications'},
    },
    task_default_queue='default',
)


@celery_app.task(bind=True, max_retries=0)
def deliver_decision_notification(
    self,
    document_id: str,
    outcome: str,
    requester_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Deliver the notifications for a decided document.
    
    Args:
        document_id: Decided document ID
        outcome: "approved" or "rejected"
        requester_id: User who submitted the document
        
    Returns:
        Summary with the created notification IDs
    """
    db = SessionLocal()
    try:
        notification_ids = send_decision_notification_sync(
            db,
            UUID(document_id),
            DocumentStatus(outcome),
            UUID(requester_id) if requester_id else None,
        )
        logger.info(f"Decision notifications for document {document_id}: {len(notification_ids)} created")
        return {"document_id": document_id, "notifications": notification_ids}
        
    except Exception:
        logger.exception(f"Decision notification failed for document {document_id}")
        raise
        
    finally:
        db.close()
