"""Approval decision engine.

Implements vote recording, approval policy evaluation and the document
status state machine.
"""

from .states import ApprovalMode, DocumentStatus, DocumentTransition, VoteDecision, TERMINAL_STATES
from .errors import (
    ApprovalError,
    ConcurrentVoteError,
    InvalidStateError,
    NotificationDeliveryFailure,
    PolicyConfigurationError,
    UnknownApproverError,
    UnknownDocumentError,
)
from .policy import ApprovalConfig, ApprovalPolicy, VoteTally
from .machine import DocumentStateMachine, TransitionError
from .ledger import VoteLedger
from .coordinator import DecisionCoordinator, DocumentLockRegistry, VoteOutcome

__all__ = [
    "ApprovalMode",
    "DocumentStatus",
    "DocumentTransition",
    "VoteDecision",
    "TERMINAL_STATES",
    "ApprovalError",
    "ConcurrentVoteError",
    "InvalidStateError",
    "NotificationDeliveryFailure",
    "PolicyConfigurationError",
    "UnknownApproverError",
    "UnknownDocumentError",
    "ApprovalConfig",
    "ApprovalPolicy",
    "VoteTally",
    "DocumentStateMachine",
    "TransitionError",
    "VoteLedger",
    "DecisionCoordinator",
    "DocumentLockRegistry",
    "VoteOutcome",
]
