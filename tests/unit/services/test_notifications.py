"""Tests for decision notification delivery."""

import asyncio
from datetime import datetime
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from docapproval.core.approval.errors import NotificationDeliveryFailure
from docapproval.core.approval.states import DocumentStatus
from docapproval.core.config import Settings
from docapproval.db.models import Notification, NotificationLog
from docapproval.services.notifications import NotificationService

from tests.factories import create_document, create_user


WEBHOOK_URL = "https://hooks.example.com/decisions"


def make_settings(**overrides) -> Settings:
    values = {
        "smtp_host": "smtp.example.com",
        "decision_webhook_url": WEBHOOK_URL,
        "notification_timeout": 0.5,
        "app_base_url": "https://docs.example.com",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def decided_document(db_session, requester):
    document = create_document(db_session, requester=requester, title="Budget 2027", status="approved")
    document.decided_at = datetime(2026, 10, 1, 12, 0, 0)
    db_session.flush()
    return document


def notify(service, document, outcome=DocumentStatus.APPROVED):
    return asyncio.run(service.notify_document_decided(
        document.id, outcome, document.requested_by_user_id
    ))


class TestNotifyDocumentDecided:

    def test_all_channels(self, db_session, decided_document, requester):
        service = NotificationService(db_session, settings=make_settings())

        with patch.object(NotificationService, "_deliver_email", new_callable=AsyncMock) as email, \
                patch.object(NotificationService, "_deliver_webhook", new_callable=AsyncMock) as webhook:
            ids = notify(service, decided_document)

        assert len(ids) == 3
        email.assert_awaited_once()
        to_email, subject, body = email.await_args.args
        assert to_email == requester.email
        assert subject == "[Document Approval] Document Approved: Budget 2027"
        assert f"https://docs.example.com/documents/{decided_document.id}" in body

        url, payload = webhook.await_args.args
        assert url == WEBHOOK_URL
        assert payload["event"] == "document_approved"
        assert payload["data"]["status"] == "approved"

        in_app = db_session.query(Notification).filter_by(user_id=requester.id).one()
        assert in_app.title == "Document approved"
        assert in_app.type == "success"
        assert "Budget 2027" in in_app.message

        logs = db_session.query(NotificationLog).all()
        assert {log.channel for log in logs} == {"email", "webhook"}
        assert all(log.status == "sent" for log in logs)
        assert all(log.attempts == 1 for log in logs)

    def test_rejection_uses_rejection_templates(self, db_session, decided_document, requester):
        decided_document.status = "rejected"
        service = NotificationService(db_session, settings=make_settings(decision_webhook_url=None))

        with patch.object(NotificationService, "_deliver_email", new_callable=AsyncMock) as email:
            ids = notify(service, decided_document, DocumentStatus.REJECTED)

        assert len(ids) == 2
        assert "Document Rejected" in email.await_args.args[1]
        in_app = db_session.query(Notification).filter_by(user_id=requester.id).one()
        assert in_app.type == "error"

    def test_no_email_recorded_without_smtp_host(self, db_session, decided_document, requester):
        service = NotificationService(db_session, settings=make_settings(smtp_host=None, decision_webhook_url=None))

        with patch("docapproval.services.notifications.aiosmtplib.send", new_callable=AsyncMock) as send:
            ids = notify(service, decided_document)

        send.assert_not_awaited()
        in_app = db_session.query(Notification).filter_by(user_id=requester.id).one()
        assert ids == [str(in_app.id)]
        assert db_session.query(NotificationLog).count() == 0

    def test_pending_outcome_sends_nothing(self, db_session, decided_document):
        service = NotificationService(db_session, settings=make_settings())
        assert notify(service, decided_document, DocumentStatus.PENDING) == []
        assert db_session.query(Notification).count() == 0

    def test_missing_document(self, db_session, requester):
        from uuid import uuid4

        service = NotificationService(db_session, settings=make_settings())
        result = asyncio.run(service.notify_document_decided(uuid4(), DocumentStatus.APPROVED, requester.id))
        assert result == []

    def test_requester_unknown_still_sends_webhook(self, db_session):
        document = create_document(db_session, status="approved")
        service = NotificationService(db_session, settings=make_settings())

        with patch.object(NotificationService, "_deliver_webhook", new_callable=AsyncMock) as webhook:
            ids = notify(service, document)

        assert len(ids) == 1
        webhook.assert_awaited_once()
        assert db_session.query(Notification).count() == 0


class TestDeliveryFailures:

    def test_webhook_error_recorded_not_raised(self, db_session, decided_document):
        service = NotificationService(db_session, settings=make_settings())
        webhook = AsyncMock(side_effect=httpx.ConnectError("connection refused"))

        with patch.object(NotificationService, "_deliver_email", new_callable=AsyncMock), \
                patch.object(NotificationService, "_deliver_webhook", webhook):
            ids = notify(service, decided_document)

        assert len(ids) == 3
        log = db_session.query(NotificationLog).filter_by(channel="webhook").one()
        assert log.status == "failed"
        assert "connection refused" in log.error_message
        assert log.attempts == 1
        assert log.sent_at is None

        email_log = db_session.query(NotificationLog).filter_by(channel="email").one()
        assert email_log.status == "sent"

    def test_timeout_is_a_delivery_failure(self, db_session, decided_document):
        service = NotificationService(
            db_session, settings=make_settings(notification_timeout=0.05, decision_webhook_url=None)
        )

        async def slow_email(*args):
            await asyncio.sleep(1)

        with patch.object(NotificationService, "_deliver_email", side_effect=slow_email):
            notify(service, decided_document)

        log = db_session.query(NotificationLog).filter_by(channel="email").one()
        assert log.status == "failed"
        assert "timed out" in log.error_message

    def test_bounded_raises_delivery_failure(self, db_session):
        service = NotificationService(db_session, settings=make_settings(notification_timeout=0.05))

        async def failing():
            raise OSError("smtp unreachable")

        with pytest.raises(NotificationDeliveryFailure) as exc_info:
            asyncio.run(service._bounded("email", "a@example.com", failing()))

        assert exc_info.value.channel == "email"
        assert exc_info.value.recipient == "a@example.com"
        assert "smtp unreachable" in str(exc_info.value)


class TestWebhookPayload:

    def test_custom_template(self, db_session, decided_document):
        template = '{"text": "{{ title }} was {{ status }}", "kind": "{{ event_type }}"}'
        service = NotificationService(db_session, settings=make_settings(decision_webhook_template=template))

        with patch.object(NotificationService, "_deliver_email", new_callable=AsyncMock), \
                patch.object(NotificationService, "_deliver_webhook", new_callable=AsyncMock) as webhook:
            notify(service, decided_document)

        assert webhook.await_args.args[1] == {"text": "Budget 2027 was approved", "kind": "document_approved"}

    def test_broken_template_falls_back_to_default(self, db_session, decided_document):
        service = NotificationService(db_session, settings=make_settings(decision_webhook_template="{not json"))

        with patch.object(NotificationService, "_deliver_email", new_callable=AsyncMock), \
                patch.object(NotificationService, "_deliver_webhook", new_callable=AsyncMock) as webhook:
            notify(service, decided_document)

        payload = webhook.await_args.args[1]
        assert payload["event"] == "document_approved"
        assert payload["data"]["title"] == "Budget 2027"


class TestEmailDelivery:

    def test_sends_via_smtp(self, db_session):
        service = NotificationService(db_session, settings=make_settings(smtp_port=2525))

        with patch("docapproval.services.notifications.aiosmtplib.send", new_callable=AsyncMock) as send:
            asyncio.run(service._deliver_email("r@example.com", "Subject", "Body"))

        send.assert_awaited_once()
        message = send.await_args.args[0]
        assert message["To"] == "r@example.com"
        assert message["Subject"] == "Subject"
        assert send.await_args.kwargs["hostname"] == "smtp.example.com"
        assert send.await_args.kwargs["port"] == 2525
