"""Milestone decision and audit endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from releasegate.config import settings
from releasegate.database import async_session_maker, get_db
from releasegate.engine.orchestrator import DecisionOrchestrator
from releasegate.exceptions import CriticalDataMissingError, InvalidRecordError
from releasegate.schemas.decision import (
    AuditTrail,
    DecisionRequest,
    DecisionResponse,
    StoredDecision,
)
from releasegate.storage.protocols import RecordStore
from releasegate.storage.repositories import SqlRecordStore
from releasegate.utils.canonical import verify_decision

router = APIRouter()


def get_store(db: Annotated[AsyncSession, Depends(get_db)]) -> RecordStore:
    """Dependency for the record store."""
    return SqlRecordStore(db, event_sessions=async_session_maker)


StoreDep = Annotated[RecordStore, Depends(get_store)]


@router.post("/milestones/{milestone_id}/decisions", response_model=DecisionResponse)
async def decide_milestone(
    milestone_id: str,
    body: DecisionRequest,
    store: StoreDep,
):
    """
    Evaluate a milestone and record the decision.
    Only recommends an action; releasing funds is the caller's job.
    """
    orchestrator = DecisionOrchestrator(
        store, default_rule_version=settings.default_rule_version
    )
    try:
        result = await orchestrator.evaluate_and_record(
            milestone_id, body.project_id, body.freelancer_id
        )
    except CriticalDataMissingError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e
    except InvalidRecordError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e
    return DecisionResponse(**result.model_dump())


@router.get("/projects/{project_id}/audit", response_model=AuditTrail)
async def get_project_audit(project_id: str, store: StoreDep):
    """Event and decision logs for a project, newest first."""
    events = await store.list_events(project_id)
    decisions = await store.list_decisions(project_id)
    return AuditTrail(project_id=project_id, events=events, decisions=decisions)


@router.get("/decisions/{decision_id}", response_model=StoredDecision)
async def get_decision(decision_id: str, store: StoreDep):
    """Stored decision with its hash re-verified."""
    record = await store.get_decision(decision_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Decision not found",
        )
    return StoredDecision(**record.model_dump(), hash_valid=verify_decision(record))
