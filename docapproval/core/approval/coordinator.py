"""Decision coordinator.

Records a vote, re-evaluates the approval policy over the document's full
vote set and, when the outcome becomes terminal, persists the transition
and hands the decision to the notification sink.

Submissions for the same document are serialized twice over: an
in-process lock per document, and the document row's version column
(optimistic concurrency) plus ``SELECT ... FOR UPDATE`` across processes.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from docapproval.core.config import get_settings
from docapproval.db.models import ApprovalVote, DocumentHistory, DocumentRequest, User

from .errors import (
    ConcurrentVoteError,
    InvalidStateError,
    UnknownApproverError,
    UnknownDocumentError,
)
from .interfaces import ConfigStore, NotificationSink, RoleMembership
from .ledger import VoteLedger
from .machine import DocumentStateMachine, TransitionError
from .policy import ApprovalPolicy, VoteTally
from .states import (
    DocumentStatus,
    VoteDecision,
    OUTCOME_TRANSITIONS,
    TERMINAL_STATES,
    is_terminal,
)

logger = logging.getLogger(__name__)


class DocumentLockRegistry:
    """Hands out one lock per document; unused locks are dropped."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[UUID, threading.Lock] = {}
        self._holders: Dict[UUID, int] = {}

    @contextmanager
    def hold(self, document_id: UUID) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(document_id, threading.Lock())
            self._holders[document_id] = self._holders.get(document_id, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._holders[document_id] -= 1
                if self._holders[document_id] == 0:
                    del self._holders[document_id]
                    del self._locks[document_id]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


# Shared by every coordinator in the process
document_locks = DocumentLockRegistry()


@dataclass
class VoteOutcome:
    """Result of a vote submission."""
    vote: ApprovalVote
    status: DocumentStatus
    changed: bool
    tally: VoteTally

    def to_dict(self) -> Dict[str, Any]:
        return {
            "document_id": str(self.vote.document_id),
            "approver_id": str(self.vote.approver_id),
            "decision": self.vote.decision,
            "comments": self.vote.comments,
            "voted_at": self.vote.voted_at.isoformat() if self.vote.voted_at else None,
            "status": self.status.value,
            "changed": self.changed,
            "tally": self.tally.to_dict(),
        }


class DecisionCoordinator:
    """
    Drives a document from PENDING to APPROVED or REJECTED.

    Handles:
    - Vote recording through the ledger (upsert)
    - Policy evaluation with live approver count and fresh configuration
    - Status transition, history record and commit
    - Best-effort notification after commit
    """

    def __init__(
        self,
        db: Session,
        role_membership: RoleMembership,
        config_store: ConfigStore,
        notification_sink: NotificationSink,
        *,
        policy: Optional[ApprovalPolicy] = None,
        ledger: Optional[VoteLedger] = None,
        locks: Optional[DocumentLockRegistry] = None,
        max_attempts: Optional[int] = None,
    ):
        """
        Initialize the coordinator.

        Args:
            db: Database session; the coordinator commits it
            role_membership: Approver role lookup
            config_store: Source of the active approval configuration
            notification_sink: Receives decisions after commit
            policy: Policy evaluator (default mode table if omitted)
            ledger: Vote ledger (built on ``db`` if omitted)
            locks: Per-document lock registry (process-wide if omitted)
            max_attempts: Optimistic-concurrency attempts per call
        """
        self.db = db
        self.role_membership = role_membership
        self.config_store = config_store
        self.notification_sink = notification_sink
        self.policy = policy or ApprovalPolicy()
        self.ledger = ledger or VoteLedger(db)
        self.locks = locks or document_locks
        self.max_attempts = max_attempts or get_settings().vote_max_attempts

    def submit_vote(
        self,
        document_id: UUID,
        approver_id: UUID,
        decision: VoteDecision,
        comments: Optional[str] = None,
    ) -> VoteOutcome:
        """
        Record a vote and re-evaluate the document.

        Args:
            document_id: Document being voted on
            approver_id: Voting user
            decision: APPROVE or REJECT
            comments: Optional comment stored with the vote

        Returns:
            VoteOutcome with the stored vote and resulting status

        Raises:
            UnknownDocumentError: If the document does not exist
            UnknownApproverError: If the voter is unknown, inactive or not an approver
            InvalidStateError: If the document was already decided
            PolicyConfigurationError: If the active configuration is invalid
            ConcurrentVoteError: If concurrent writers kept winning the race
        """
        decision = VoteDecision(decision)

        def attempt() -> Tuple[VoteOutcome, Optional[UUID]]:
            document = self._load_document(document_id)
            self._check_approver(approver_id)
            if is_terminal(document.status):
                raise InvalidStateError(document_id, document.status)

            vote = self.ledger.record_vote(document_id, approver_id, decision, comments)
            # Touch the row so the version token guards this read-modify-write
            document.updated_at = datetime.utcnow()

            status, changed, tally = self._apply_policy(document, actor_id=approver_id)
            requester_id = document.requested_by_user_id
            self.db.commit()

            return VoteOutcome(vote=vote, status=status, changed=changed, tally=tally), requester_id

        outcome, requester_id = self._run_serialized(document_id, attempt)
        if outcome.changed:
            self._emit(document_id, outcome.status, requester_id)
        return outcome

    def check_status(self, document_id: UUID) -> DocumentStatus:
        """
        Re-evaluate a pending document without a new vote.

        Decided documents are returned as stored and never re-evaluated.

        Raises:
            UnknownDocumentError: If the document does not exist
            PolicyConfigurationError: If the active configuration is invalid
        """
        def attempt() -> Tuple[Tuple[DocumentStatus, bool], Optional[UUID]]:
            document = self._load_document(document_id)
            current = DocumentStatus(document.status)
            if current in TERMINAL_STATES:
                self.db.rollback()
                return (current, False), None

            status, changed, _ = self._apply_policy(document, actor_id=None)
            requester_id = document.requested_by_user_id
            self.db.commit()
            return (status, changed), requester_id

        (status, changed), requester_id = self._run_serialized(document_id, attempt)
        if changed:
            self._emit(document_id, status, requester_id)
        return status

    def votes_for(self, document_id: UUID) -> List[ApprovalVote]:
        """
        All votes on a document.

        Raises:
            UnknownDocumentError: If the document does not exist
        """
        self._require_document(document_id)
        return self.ledger.votes_for(document_id)

    def has_voted(self, document_id: UUID, approver_id: UUID) -> bool:
        """
        Whether the approver has voted on the document.

        Raises:
            UnknownDocumentError: If the document does not exist
        """
        self._require_document(document_id)
        return self.ledger.has_voted(document_id, approver_id)

    def _run_serialized(self, document_id: UUID, attempt: Callable[[], Any]) -> Any:
        """Run ``attempt`` under the document lock, retrying on stale versions."""
        with self.locks.hold(document_id):
            for number in range(1, self.max_attempts + 1):
                try:
                    return attempt()
                except StaleDataError:
                    self.db.rollback()
                    logger.warning(
                        f"Document {document_id} changed concurrently "
                        f"(attempt {number}/{self.max_attempts}); retrying"
                    )
                except Exception:
                    self.db.rollback()
                    raise
        raise ConcurrentVoteError(document_id, self.max_attempts)

    def _require_document(self, document_id: UUID) -> None:
        if self.db.get(DocumentRequest, document_id) is None:
            raise UnknownDocumentError(document_id)

    def _load_document(self, document_id: UUID) -> DocumentRequest:
        document = self.db.query(DocumentRequest).filter(
            DocumentRequest.id == document_id
        ).with_for_update().first()
        if document is None:
            raise UnknownDocumentError(document_id)
        return document

    def _check_approver(self, approver_id: UUID) -> None:
        user = self.db.get(User, approver_id)
        if user is None or not user.is_active:
            raise UnknownApproverError(approver_id)
        if not self.role_membership.is_approver(approver_id):
            raise UnknownApproverError(approver_id, "does not hold the approver role")

    def _apply_policy(
        self,
        document: DocumentRequest,
        actor_id: Optional[UUID],
    ) -> Tuple[DocumentStatus, bool, VoteTally]:
        """Evaluate the policy and transition the document if it was decided."""
        votes = self.ledger.votes_for(document.id)
        tally = VoteTally.from_votes(votes, self.role_membership.count_approvers())
        config = self.config_store.current_approval_config()
        outcome = self.policy.evaluate(tally, config)

        current = DocumentStatus(document.status)
        if outcome not in TERMINAL_STATES or outcome == current:
            return current, False, tally

        machine = DocumentStateMachine(document.id, current)
        try:
            record = machine.transition(
                OUTCOME_TRANSITIONS[outcome],
                user_id=actor_id,
                metadata={"tally": tally.to_dict(), "config": config.to_dict()},
            )
        except TransitionError:
            raise InvalidStateError(document.id, current.value)

        document.status = outcome.value
        document.approved_by_user_id = actor_id
        document.decided_at = record["timestamp"]
        self.db.add(DocumentHistory(
            document_id=document.id,
            action=record["transition"],
            from_state=record["from_state"],
            to_state=record["to_state"],
            user_id=actor_id,
            notes=(
                f"{config.mode.value}: {tally.approve_count} approve, "
                f"{tally.reject_count} reject of {tally.total_eligible_approvers} approvers"
            ),
        ))

        logger.info(f"Document {document.id} {current.value} -> {outcome.value} ({config.mode.value})")
        return outcome, True, tally

    def _emit(self, document_id: UUID, outcome: DocumentStatus, requester_id: Optional[UUID]) -> None:
        """Hand the committed decision to the sink; failures never reach the voter."""
        try:
            self.notification_sink.document_decided(document_id, outcome, requester_id)
        except Exception:
            logger.exception(f"Failed to dispatch decision notification for document {document_id}")
