"""Tests for the document status state machine."""

import pytest
from uuid import uuid4

from docapproval.core.approval.states import (
    DocumentStatus, DocumentTransition,
    TERMINAL_STATES, OUTCOME_TRANSITIONS,
    get_transition_rule, is_terminal,
)
from docapproval.core.approval.machine import DocumentStateMachine, TransitionError


class TestDocumentStates:

    def test_terminal_states(self):
        assert DocumentStatus.APPROVED in TERMINAL_STATES
        assert DocumentStatus.REJECTED in TERMINAL_STATES
        assert DocumentStatus.PENDING not in TERMINAL_STATES

    def test_is_terminal_accepts_strings(self):
        assert is_terminal("approved")
        assert not is_terminal("pending")

    def test_outcome_transitions(self):
        assert OUTCOME_TRANSITIONS[DocumentStatus.APPROVED] == DocumentTransition.APPROVE
        assert OUTCOME_TRANSITIONS[DocumentStatus.REJECTED] == DocumentTransition.REJECT


class TestTransitions:

    def test_pending_transitions(self):
        approve = get_transition_rule(DocumentStatus.PENDING, DocumentTransition.APPROVE)
        reject = get_transition_rule(DocumentStatus.PENDING, DocumentTransition.REJECT)
        assert approve.to_state == DocumentStatus.APPROVED
        assert reject.to_state == DocumentStatus.REJECTED

    def test_no_transition_out_of_terminal_states(self):
        for state in TERMINAL_STATES:
            for transition in DocumentTransition:
                assert get_transition_rule(state, transition) is None


class TestDocumentStateMachine:

    def test_initial_state(self):
        machine = DocumentStateMachine(uuid4(), "pending")
        assert machine.state == DocumentStatus.PENDING

    def test_transition_record(self):
        document_id = uuid4()
        user_id = uuid4()
        machine = DocumentStateMachine(document_id, DocumentStatus.PENDING)

        record = machine.transition(
            DocumentTransition.APPROVE,
            user_id=user_id,
            metadata={"tally": {"approve_count": 2}},
        )

        assert machine.state == DocumentStatus.APPROVED
        assert record["document_id"] == document_id
        assert record["from_state"] == "pending"
        assert record["to_state"] == "approved"
        assert record["transition"] == "approve"
        assert record["user_id"] == user_id
        assert record["metadata"] == {"tally": {"approve_count": 2}}
        assert record["timestamp"] is not None

    def test_record_defaults(self):
        record = DocumentStateMachine(uuid4(), DocumentStatus.PENDING).transition(DocumentTransition.REJECT)
        assert record["user_id"] is None
        assert record["comment"] is None
        assert record["metadata"] == {}

    def test_terminal_state_rejects_transition(self):
        machine = DocumentStateMachine(uuid4(), DocumentStatus.REJECTED)
        with pytest.raises(TransitionError) as exc_info:
            machine.transition(DocumentTransition.APPROVE)
        assert exc_info.value.from_state == DocumentStatus.REJECTED
        assert exc_info.value.transition == DocumentTransition.APPROVE
        assert machine.state == DocumentStatus.REJECTED
