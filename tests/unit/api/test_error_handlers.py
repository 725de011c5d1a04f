"""Tests for approval error to HTTP status mapping."""

from uuid import uuid4

from fastapi import FastAPI
from fastapi.testclient import TestClient

from docapproval.api.error_handlers import register_error_handlers, status_for
from docapproval.core.approval.errors import (
    ApprovalError,
    ConcurrentVoteError,
    InvalidStateError,
    PolicyConfigurationError,
    UnknownApproverError,
    UnknownDocumentError,
)


class TestStatusFor:

    def test_mapping(self):
        document_id = uuid4()
        assert status_for(UnknownDocumentError(document_id)) == 404
        assert status_for(UnknownApproverError(uuid4())) == 404
        assert status_for(InvalidStateError(document_id, "approved")) == 409
        assert status_for(ConcurrentVoteError(document_id, 3)) == 409
        assert status_for(PolicyConfigurationError("bad mode")) == 500

    def test_unmapped_error_is_bad_request(self):
        assert status_for(ApprovalError("something")) == 400


class TestRegisteredHandler:

    def test_error_body(self):
        app = FastAPI()
        register_error_handlers(app)
        document_id = uuid4()

        @app.get("/boom")
        def boom():
            raise ConcurrentVoteError(document_id, 3)

        response = TestClient(app).get("/boom")
        assert response.status_code == 409
        body = response.json()["error"]
        assert body["code"] == "concurrent_vote"
        assert str(document_id) in body["message"]
