"""Voting and approval configuration endpoints."""

from typing import List, Optional
from uuid import UUID
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from docapproval.api.deps import (
    get_config_store,
    get_coordinator,
    get_current_user,
    get_db,
    require_admin,
)
from docapproval.core.approval import (
    ApprovalConfig,
    ApprovalMode,
    DecisionCoordinator,
    DocumentStatus,
    PolicyConfigurationError,
    VoteDecision,
)
from docapproval.db.models import User
from docapproval.services import DatabaseConfigStore

router = APIRouter(tags=["approvals"])


# Schemas
class VoteRequest(BaseModel):
    decision: VoteDecision
    comments: Optional[str] = None


class TallyResponse(BaseModel):
    approve_count: int
    reject_count: int
    total_votes_cast: int
    total_eligible_approvers: int


class VoteOutcomeResponse(BaseModel):
    document_id: UUID
    approver_id: UUID
    decision: VoteDecision
    comments: Optional[str]
    voted_at: datetime
    status: DocumentStatus
    changed: bool
    tally: TallyResponse


class VoteResponse(BaseModel):
    document_id: UUID
    approver_id: UUID
    decision: VoteDecision
    comments: Optional[str]
    voted_at: datetime

    model_config = ConfigDict(from_attributes=True)


class HasVotedResponse(BaseModel):
    has_voted: bool


class DocumentStatusResponse(BaseModel):
    document_id: UUID
    status: DocumentStatus


class ApprovalConfigSchema(BaseModel):
    mode: ApprovalMode = ApprovalMode.MAJORITY
    threshold_value: int = Field(0, ge=0)
    comments_required: bool = False


# Endpoints
@router.post("/documents/{document_id}/votes", response_model=VoteOutcomeResponse)
def submit_vote(
    document_id: UUID,
    vote: VoteRequest,
    coordinator: DecisionCoordinator = Depends(get_coordinator),
    config_store: DatabaseConfigStore = Depends(get_config_store),
    current_user: User = Depends(get_current_user),
):
    """Cast or replace the current user's vote on a document."""
    config = config_store.current_approval_config()
    if config.comments_required and not (vote.comments or "").strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comments are required when voting")

    outcome = coordinator.submit_vote(
        document_id,
        current_user.id,
        vote.decision,
        comments=vote.comments,
    )
    return VoteOutcomeResponse(**outcome.to_dict())


@router.get("/documents/{document_id}/votes", response_model=List[VoteResponse])
def list_votes(
    document_id: UUID,
    coordinator: DecisionCoordinator = Depends(get_coordinator),
    current_user: User = Depends(get_current_user),
):
    """List all votes cast on a document."""
    votes = sorted(coordinator.votes_for(document_id), key=lambda v: v.voted_at)
    return [VoteResponse.model_validate(v) for v in votes]


@router.get("/documents/{document_id}/votes/me", response_model=HasVotedResponse)
def has_voted(
    document_id: UUID,
    coordinator: DecisionCoordinator = Depends(get_coordinator),
    current_user: User = Depends(get_current_user),
):
    """Whether the current user already voted on the document."""
    return HasVotedResponse(has_voted=coordinator.has_voted(document_id, current_user.id))


@router.post("/documents/{document_id}/evaluate", response_model=DocumentStatusResponse)
def evaluate_document(
    document_id: UUID,
    coordinator: DecisionCoordinator = Depends(get_coordinator),
    current_user: User = Depends(get_current_user),
):
    """Re-evaluate a pending document against current approvers and config."""
    return DocumentStatusResponse(document_id=document_id, status=coordinator.check_status(document_id))


@router.get("/approval-config", response_model=ApprovalConfigSchema)
def get_approval_config(
    config_store: DatabaseConfigStore = Depends(get_config_store),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get the active approval configuration."""
    config = config_store.current_approval_config()
    db.commit()
    return ApprovalConfigSchema(**config.to_dict())


@router.put("/approval-config", response_model=ApprovalConfigSchema)
def update_approval_config(
    payload: ApprovalConfigSchema,
    config_store: DatabaseConfigStore = Depends(get_config_store),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Replace the approval configuration; takes effect on the next vote."""
    try:
        config = ApprovalConfig(
            mode=payload.mode,
            threshold_value=payload.threshold_value,
            comments_required=payload.comments_required,
        )
    except PolicyConfigurationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    config_store.update_approval_config(config)
    db.commit()
    return ApprovalConfigSchema(**config.to_dict())
