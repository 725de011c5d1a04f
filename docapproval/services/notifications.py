"""Notification service for decided documents.

Handles:
- In-app notification for the requester
- Email notification via SMTP
- Webhook notification to an external system

Every outbound attempt is bounded by ``notification_timeout``. A failed or
timed-out attempt is logged and recorded; it is never retried here.
"""

import asyncio
import json
import logging
from datetime import datetime
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional, Dict, Any, List, Awaitable
from uuid import UUID

import aiosmtplib
import httpx
from jinja2 import Template
from sqlalchemy.orm import Session

from docapproval.core.approval.errors import NotificationDeliveryFailure
from docapproval.core.approval.states import DocumentStatus
from docapproval.core.config import Settings, get_settings
from docapproval.db.models import (
    DocumentRequest,
    Notification,
    NotificationChannel,
    NotificationEventType,
    NotificationLog,
    User,
)

logger = logging.getLogger(__name__)


# Email templates
EMAIL_TEMPLATES = {
    NotificationEventType.DOCUMENT_APPROVED: {
        "subject": "[{app_name}] Document Approved: {title}",
        "body": """
Your document has been approved:

Document: {title}
Status: {status}
Decided At: {decided_at}

View it at: {document_url}

---
{app_name}
        """,
    },
    NotificationEventType.DOCUMENT_REJECTED: {
        "subject": "[{app_name}] Document Rejected: {title}",
        "body": """
Your document has been rejected:

Document: {title}
Status: {status}
Decided At: {decided_at}

Review the approver comments at: {document_url}

---
{app_name}
        """,
    },
}

IN_APP_TEMPLATES = {
    NotificationEventType.DOCUMENT_APPROVED: ("Document approved", "Your document '{title}' was approved.", "success"),
    NotificationEventType.DOCUMENT_REJECTED: ("Document rejected", "Your document '{title}' was rejected.", "error"),
}

OUTCOME_EVENTS = {
    DocumentStatus.APPROVED: NotificationEventType.DOCUMENT_APPROVED,
    DocumentStatus.REJECTED: NotificationEventType.DOCUMENT_REJECTED,
}


class NotificationService:
    """
    Delivers "document decided" notifications to the requester.
    """

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        """
        Initialize notification service.

        Args:
            db: Database session
            settings: Application settings (process settings if omitted)
        """
        self.db = db
        self.settings = settings or get_settings()

    async def notify_document_decided(
        self,
        document_id: UUID,
        outcome: DocumentStatus,
        requester_id: Optional[UUID] = None,
    ) -> List[str]:
        """
        Send all notifications for a decided document.

        Args:
            document_id: The decided document
            outcome: APPROVED or REJECTED
            requester_id: User who submitted the document

        Returns:
            List of notification IDs (in-app and delivery logs)
        """
        outcome = DocumentStatus(outcome)
        event_type = OUTCOME_EVENTS.get(outcome)
        if event_type is None:
            logger.warning(f"No notification for non-terminal outcome {outcome.value} of document {document_id}")
            return []

        document = self.db.get(DocumentRequest, document_id)
        if document is None:
            logger.warning(f"Document {document_id} not found, skipping notification")
            return []

        requester = self.db.get(User, requester_id) if requester_id else None
        context = self._build_decision_context(document, outcome)
        notification_ids = []

        if requester is not None:
            notification_ids.append(self._create_in_app(requester, event_type, context))
            if requester.email and self.settings.smtp_host:
                notification_ids.append(await self._send_email(
                    to_email=requester.email,
                    event_type=event_type,
                    context=context,
                    document_id=document.id,
                ))
            elif requester.email:
                logger.warning(f"SMTP not configured, no email sent for document {document_id}")
        else:
            logger.warning(f"Requester not found for document {document_id}")

        if self.settings.decision_webhook_url:
            notification_ids.append(await self._send_webhook(
                url=self.settings.decision_webhook_url,
                event_type=event_type,
                context=context,
                document_id=document.id,
            ))

        self.db.commit()
        return notification_ids

    def _create_in_app(
        self,
        user: User,
        event_type: NotificationEventType,
        context: Dict[str, Any],
    ) -> str:
        title, message, kind = IN_APP_TEMPLATES[event_type]
        notification = Notification(
            user_id=user.id,
            title=title,
            message=message.format(**context),
            link=f"documents/{context['document_id']}",
            type=kind,
        )
        self.db.add(notification)
        self.db.flush()
        return str(notification.id)

    async def _send_email(
        self,
        to_email: str,
        event_type: NotificationEventType,
        context: Dict[str, Any],
        document_id: Optional[UUID] = None,
    ) -> str:
        """Send an email notification and record the attempt."""
        template = EMAIL_TEMPLATES[event_type]
        subject = template["subject"].format(**context)
        body = template["body"].format(**context)

        log = NotificationLog(
            channel=NotificationChannel.EMAIL.value,
            event_type=event_type.value,
            recipient=to_email,
            document_id=document_id,
            subject=subject,
            body=body,
            status="pending",
        )
        self.db.add(log)
        self.db.flush()

        await self._attempt(log, self._deliver_email(to_email, subject, body))
        return str(log.id)

    async def _deliver_email(self, to_email: str, subject: str, body: str) -> None:
        """Actually deliver the email via SMTP."""
        msg = MIMEMultipart()
        msg["From"] = f"{self.settings.smtp_from_name} <{self.settings.smtp_from_email}>"
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.attach(MIMEText(body, "plain"))

        await aiosmtplib.send(
            msg,
            hostname=self.settings.smtp_host,
            port=self.settings.smtp_port,
            username=self.settings.smtp_user,
            password=self.settings.smtp_password,
            start_tls=self.settings.smtp_use_tls,
            timeout=self.settings.notification_timeout,
        )

    async def _send_webhook(
        self,
        url: str,
        event_type: NotificationEventType,
        context: Dict[str, Any],
        document_id: Optional[UUID] = None,
    ) -> str:
        """Send a webhook notification and record the attempt."""
        if self.settings.decision_webhook_template:
            try:
                template = Template(self.settings.decision_webhook_template)
                payload = json.loads(template.render(event_type=event_type.value, **context))
            except Exception as e:
                logger.warning(f"Failed to render webhook template: {e}")
                payload = self._build_default_webhook_payload(event_type, context)
        else:
            payload = self._build_default_webhook_payload(event_type, context)

        log = NotificationLog(
            channel=NotificationChannel.WEBHOOK.value,
            event_type=event_type.value,
            recipient=url,
            document_id=document_id,
            payload=payload,
            status="pending",
        )
        self.db.add(log)
        self.db.flush()

        await self._attempt(log, self._deliver_webhook(url, payload))
        return str(log.id)

    async def _deliver_webhook(self, url: str, payload: Dict[str, Any]) -> None:
        """Actually deliver the webhook."""
        async with httpx.AsyncClient(timeout=self.settings.notification_timeout) as client:
            response = await client.post(url, json=payload)
            response.raise_for_status()

    async def _attempt(self, log: NotificationLog, delivery: Awaitable[None]) -> None:
        """Run one bounded delivery attempt and record its result on the log."""
        log.attempts = (log.attempts or 0) + 1
        try:
            await self._bounded(log.channel, log.recipient, delivery)
        except NotificationDeliveryFailure as e:
            logger.warning(f"Notification {log.event_type} not delivered: {e}")
            log.status = "failed"
            log.error_message = str(e)
        else:
            log.status = "sent"
            log.sent_at = datetime.utcnow()

    async def _bounded(self, channel: str, recipient: str, delivery: Awaitable[None]) -> None:
        """
        Await a delivery within the configured timeout.

        Raises:
            NotificationDeliveryFailure: On timeout or any delivery error
        """
        timeout = self.settings.notification_timeout
        try:
            await asyncio.wait_for(delivery, timeout=timeout)
        except asyncio.TimeoutError:
            raise NotificationDeliveryFailure(channel, recipient, f"timed out after {timeout}s")
        except Exception as e:
            raise NotificationDeliveryFailure(channel, recipient, str(e)) from e

    def _build_default_webhook_payload(
        self,
        event_type: NotificationEventType,
        context: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Build default webhook payload."""
        return {
            "event": event_type.value,
            "timestamp": datetime.utcnow().isoformat(),
            "data": context,
        }

    def _build_decision_context(self, document: DocumentRequest, outcome: DocumentStatus) -> Dict[str, Any]:
        """Build template context for a decided document."""
        return {
            "app_name": self.settings.app_name,
            "document_id": str(document.id),
            "title": document.title,
            "status": outcome.value,
            "requester_id": str(document.requested_by_user_id) if document.requested_by_user_id else None,
            "decided_by": str(document.approved_by_user_id) if document.approved_by_user_id else None,
            "decided_at": document.decided_at.isoformat() if document.decided_at else "N/A",
            "document_url": f"{self.settings.app_base_url}/documents/{document.id}",
        }


def send_decision_notification_sync(
    db: Session,
    document_id: UUID,
    outcome: DocumentStatus,
    requester_id: Optional[UUID] = None,
) -> List[str]:
    """Synchronous wrapper for worker code."""
    service = NotificationService(db)
    return asyncio.run(service.notify_document_decided(document_id, outcome, requester_id))
