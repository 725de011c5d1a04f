"""Vote ledger: one vote per (document, approver).

Backed by the ``approval_votes`` table. The ledger never evaluates the
approval policy; it only stores and returns votes.
"""

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_
from sqlalchemy.orm import Session

from docapproval.db.models import ApprovalVote
from .states import VoteDecision

logger = logging.getLogger(__name__)


class VoteLedger:
    """
    Stores approver votes with upsert semantics.

    A second vote from the same approver on the same document overwrites
    decision, comments and timestamp of the existing row.
    """

    def __init__(self, db: Session):
        """
        Initialize the ledger.

        Args:
            db: Database session; the caller owns the transaction
        """
        self.db = db

    def record_vote(
        self,
        document_id: UUID,
        approver_id: UUID,
        decision: VoteDecision,
        comments: Optional[str] = None,
    ) -> ApprovalVote:
        """
        Insert or overwrite the approver's vote on a document.

        Returns:
            The stored vote row (flushed, not committed)
        """
        decision = VoteDecision(decision)
        vote = self._find(document_id, approver_id, for_update=True)

        if vote is not None:
            vote.decision = decision.value
            vote.comments = comments
            vote.voted_at = datetime.utcnow()
            logger.debug(f"Re-vote by {approver_id} on document {document_id}: {decision.value}")
        else:
            vote = ApprovalVote(
                document_id=document_id,
                approver_id=approver_id,
                decision=decision.value,
                comments=comments,
                voted_at=datetime.utcnow(),
            )
            self.db.add(vote)
            logger.debug(f"Vote by {approver_id} on document {document_id}: {decision.value}")

        self.db.flush()
        return vote

    def votes_for(self, document_id: UUID) -> List[ApprovalVote]:
        """All active votes for a document."""
        return self.db.query(ApprovalVote).filter(
            ApprovalVote.document_id == document_id
        ).all()

    def has_voted(self, document_id: UUID, approver_id: UUID) -> bool:
        """Check whether the approver has a vote on the document."""
        return self._find(document_id, approver_id) is not None

    def _find(self, document_id: UUID, approver_id: UUID, for_update: bool = False) -> Optional[ApprovalVote]:
        query = self.db.query(ApprovalVote).filter(
            and_(
                ApprovalVote.document_id == document_id,
                ApprovalVote.approver_id == approver_id,
            )
        )
        if for_update:
            query = query.with_for_update()
        return query.first()
