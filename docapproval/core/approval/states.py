"""Document statuses, vote decisions and status transitions.

State Machine Diagram:

    ┌──────────┐
    │ PENDING  │ ← Initial state (document submitted for review)
    └────┬─────┘
         │
         ├─────────────────────┐
         │                     │
    ┌────▼─────┐         ┌─────▼────┐
    │ APPROVED │         │ REJECTED │
    └──────────┘         └──────────┘

Both outcomes are terminal: once a document has been decided no vote
can move it again.
"""

from enum import Enum
from typing import Set, Dict, Optional, NamedTuple


class DocumentStatus(str, Enum):
    """Review status of a document."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class VoteDecision(str, Enum):
    """Decision an approver casts on a document."""

    APPROVE = "approve"
    REJECT = "reject"


class ApprovalMode(str, Enum):
    """How votes are turned into a decision."""

    MAJORITY = "majority"              # more than half of eligible approvers
    UNANIMOUS = "unanimous"            # every eligible approver
    MIN_VOTES = "min_votes"            # at least N approvals
    MIN_PERCENTAGE = "min_percentage"  # at least N% of eligible approvers


class DocumentTransition(str, Enum):
    """Actions that move a document out of review."""

    APPROVE = "approve"    # PENDING → APPROVED
    REJECT = "reject"      # PENDING → REJECTED


class TransitionRule(NamedTuple):
    """Defines a valid status transition."""
    from_state: DocumentStatus
    to_state: DocumentStatus
    transition: DocumentTransition


TRANSITION_RULES: list[TransitionRule] = [
    TransitionRule(DocumentStatus.PENDING, DocumentStatus.APPROVED, DocumentTransition.APPROVE),
    TransitionRule(DocumentStatus.PENDING, DocumentStatus.REJECTED, DocumentTransition.REJECT),
]

TRANSITION_TARGETS: Dict[tuple[DocumentStatus, DocumentTransition], TransitionRule] = {}

for rule in TRANSITION_RULES:
    TRANSITION_TARGETS[(rule.from_state, rule.transition)] = rule


TERMINAL_STATES: Set[DocumentStatus] = {
    DocumentStatus.APPROVED,
    DocumentStatus.REJECTED,
}

# Policy outcome → the transition that produces it
OUTCOME_TRANSITIONS: Dict[DocumentStatus, DocumentTransition] = {
    DocumentStatus.APPROVED: DocumentTransition.APPROVE,
    DocumentStatus.REJECTED: DocumentTransition.REJECT,
}


def is_terminal(status: DocumentStatus) -> bool:
    """Check whether a status accepts no further votes."""
    return DocumentStatus(status) in TERMINAL_STATES


def get_transition_rule(from_state: DocumentStatus, transition: DocumentTransition) -> Optional[TransitionRule]:
    """Get the transition rule for a state/action combination."""
    return TRANSITION_TARGETS.get((from_state, transition))
