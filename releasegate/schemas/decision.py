"""Decision orchestration schemas."""

from pydantic import BaseModel, Field, computed_field

from releasegate.schemas.records import DecisionLogEntry, EventLogEntry
from releasegate.schemas.rules import Decision


class ScoreCard(BaseModel):
    """Component scores and the action they imply."""

    delivery_score: int
    behavior_score: int
    risk_score: int
    history_score: int | float
    action: Decision
    rule_id: str
    reasons: list[str] = Field(default_factory=list)


class DecisionScores(BaseModel):
    """Component scores reported to the caller."""

    delivery_score: int
    behavior_score: int
    risk_score: int
    history_score: int | float


class DecisionResult(BaseModel):
    """What evaluate_and_record hands back to its caller."""

    action: Decision
    scores: DecisionScores
    reasons: list[str] = Field(default_factory=list)
    decision_hash: str
    rule_id: str
    rule_version: str
    decision_timestamp: int
    event_id: str
    decision_id: str


class DecisionRequest(BaseModel):
    """POST /v1/milestones/{milestone_id}/decisions request."""

    project_id: str
    freelancer_id: str | None = None


class DecisionResponse(DecisionResult):
    """Decision result plus the legacy `reason` field and a `terminal` flag."""

    @computed_field
    @property
    def reason(self) -> list[str]:
        return list(self.reasons)

    @computed_field
    @property
    def terminal(self) -> bool:
        """True when the action hands the milestone off for payout or dispute."""
        return self.action.is_terminal


class StoredDecision(DecisionLogEntry):
    """GET /v1/decisions/{decision_id} response."""

    hash_valid: bool


class AuditTrail(BaseModel):
    """Event and decision history for one project, newest first."""

    project_id: str
    events: list[EventLogEntry] = Field(default_factory=list)
    decisions: list[DecisionLogEntry] = Field(default_factory=list)
