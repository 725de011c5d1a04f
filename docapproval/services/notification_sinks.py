"""Notification sinks handed to the decision coordinator."""

import logging
from typing import Any, Optional
from uuid import UUID

from docapproval.core.approval.states import DocumentStatus

logger = logging.getLogger(__name__)


class CeleryNotificationSink:
    """
    Enqueues decision notifications on the Celery ``notifications`` queue.

    The call returns as soon as the message is published; delivery latency
    and failures stay in the worker. Publishing is attempted once, so an
    unreachable broker raises straight away instead of holding up the vote.
    """

    def __init__(self, task: Optional[Any] = None):
        if task is None:
            from docapproval.workers.notification_tasks import deliver_decision_notification
            task = deliver_decision_notification
        self.task = task

    def document_decided(
        self,
        document_id: UUID,
        outcome: DocumentStatus,
        requester_id: Optional[UUID],
    ) -> None:
        self.task.apply_async(
            args=(
                str(document_id),
                DocumentStatus(outcome).value,
                str(requester_id) if requester_id else None,
            ),
            retry=False,
        )
        logger.debug(f"Queued decision notification for document {document_id}")
