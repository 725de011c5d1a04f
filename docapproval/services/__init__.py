"""Collaborator services for the approval engine."""

from docapproval.services.role_membership import DatabaseRoleMembership
from docapproval.services.config_store import DatabaseConfigStore, YamlConfigStore
from docapproval.services.notifications import NotificationService, send_decision_notification_sync
from docapproval.services.notification_sinks import CeleryNotificationSink

__all__ = [
    "DatabaseRoleMembership",
    "DatabaseConfigStore",
    "YamlConfigStore",
    "NotificationService",
    "send_decision_notification_sync",
    "CeleryNotificationSink",
]
