"""Celery workers for docapproval."""

from docapproval.workers.notification_tasks import (
    celery_app,
    deliver_decision_notification,
)

__all__ = [
    "celery_app",
    "deliver_decision_notification",
]
