"""Tests for the vote ledger."""

from docapproval.core.approval.ledger import VoteLedger
from docapproval.core.approval.states import VoteDecision
from docapproval.db.models import ApprovalVote

from tests.factories import create_approver, create_document


class TestRecordVote:

    def test_first_vote_creates_row(self, db_session, document, approvers):
        ledger = VoteLedger(db_session)
        vote = ledger.record_vote(document.id, approvers[0].id, VoteDecision.APPROVE, "looks good")

        assert vote.id is not None
        assert vote.decision == "approve"
        assert vote.comments == "looks good"
        assert vote.voted_at is not None
        assert ledger.has_voted(document.id, approvers[0].id)
        assert not ledger.has_voted(document.id, approvers[1].id)

    def test_revote_overwrites_in_place(self, db_session, document, approvers):
        ledger = VoteLedger(db_session)
        first = ledger.record_vote(document.id, approvers[0].id, VoteDecision.APPROVE, "ok")
        first_id = first.id

        second = ledger.record_vote(document.id, approvers[0].id, "reject", "found a typo")

        assert second.id == first_id
        assert second.decision == "reject"
        assert second.comments == "found a typo"
        assert db_session.query(ApprovalVote).count() == 1

    def test_same_vote_twice_is_idempotent(self, db_session, document, approvers):
        ledger = VoteLedger(db_session)
        ledger.record_vote(document.id, approvers[0].id, VoteDecision.APPROVE)
        ledger.record_vote(document.id, approvers[0].id, VoteDecision.APPROVE)

        votes = ledger.votes_for(document.id)
        assert len(votes) == 1
        assert votes[0].decision == "approve"

    def test_revote_clears_comments(self, db_session, document, approvers):
        ledger = VoteLedger(db_session)
        ledger.record_vote(document.id, approvers[0].id, VoteDecision.REJECT, "needs work")
        vote = ledger.record_vote(document.id, approvers[0].id, VoteDecision.APPROVE)
        assert vote.comments is None


class TestQueries:

    def test_votes_are_per_document(self, db_session, requester, approvers):
        ledger = VoteLedger(db_session)
        doc_a = create_document(db_session, requester=requester)
        doc_b = create_document(db_session, requester=requester)

        ledger.record_vote(doc_a.id, approvers[0].id, VoteDecision.APPROVE)
        ledger.record_vote(doc_a.id, approvers[1].id, VoteDecision.REJECT)
        ledger.record_vote(doc_b.id, approvers[0].id, VoteDecision.REJECT)

        assert len(ledger.votes_for(doc_a.id)) == 2
        assert len(ledger.votes_for(doc_b.id)) == 1
        assert [v.decision for v in ledger.votes_for(doc_b.id)] == ["reject"]
        assert ledger.has_voted(doc_b.id, approvers[0].id)
        assert not ledger.has_voted(doc_b.id, approvers[1].id)

    def test_count_never_exceeds_voters(self, db_session, document):
        ledger = VoteLedger(db_session)
        voters = [create_approver(db_session) for _ in range(4)]

        for _ in range(3):
            for i, voter in enumerate(voters):
                decision = VoteDecision.APPROVE if i % 2 else VoteDecision.REJECT
                ledger.record_vote(document.id, voter.id, decision)

        assert len(ledger.votes_for(document.id)) == len(voters)
