"""Record shapes exchanged with the record store."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class MilestoneRecord(BaseModel):
    """Milestone as read by the engine."""

    model_config = {"from_attributes": True}

    id: str
    project_id: str
    freelancer_id: str | None = None
    amount: Any  # raw stored value, parsed during scoring
    due_date: datetime | None = None
    status: str = "pending"
    submission_file_url: str | None = None


class ProjectRecord(BaseModel):
    """Project as read by the engine."""

    model_config = {"from_attributes": True}

    id: str
    status: str = "open"
    rule_version: str | None = None


class ProfileRecord(BaseModel):
    """Freelancer profile as read by the engine."""

    model_config = {"from_attributes": True}

    id: str
    trust_score: float | None = None


class NewEventLog(BaseModel):
    """Event log entry before insertion."""

    project_id: str
    milestone_id: str | None = None
    event_type: str
    actor_role: str
    payload: dict[str, Any] = Field(default_factory=dict)
    payload_hash: str | None = None
    created_at: str


class EventLogEntry(NewEventLog):
    """Stored event log entry."""

    model_config = {"from_attributes": True}

    id: str


class NewDecisionLog(BaseModel):
    """Decision log entry before insertion."""

    project_id: str
    milestone_id: str | None = None
    event_type: str
    actor_id: str | None = None
    input_event_ids: list[str] = Field(default_factory=list)
    risk_score: int
    confidence_score: int
    final_decision: str
    recommendation: str
    rule_id: str
    rule_version: str
    system_hash: str
    log_hash: str
    decision_timestamp: int
    prev_state: dict[str, Any] = Field(default_factory=dict)
    next_state: dict[str, Any] = Field(default_factory=dict)
    created_at: str


class DecisionLogEntry(NewDecisionLog):
    """Stored decision log entry."""

    model_config = {"from_attributes": True}

    id: str
