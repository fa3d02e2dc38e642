"""Rule evaluator input/output schemas."""

from enum import Enum

from pydantic import BaseModel


class Decision(str, Enum):
    """Action recommended for a milestone's escrowed funds."""

    RELEASE = "RELEASE"
    HOLD = "HOLD"
    DISPUTE = "DISPUTE"
    PENDING = "PENDING"

    @property
    def is_terminal(self) -> bool:
        """RELEASE and DISPUTE hand off to downstream collaborators."""
        return self in (Decision.RELEASE, Decision.DISPUTE)


class RuleSettings(BaseModel):
    """Per-project thresholds."""

    model_config = {"frozen": True}

    min_sentiment: float
    auto_release_days: float


class RuleInputs(BaseModel):
    """Snapshot of everything the rule table looks at."""

    model_config = {"frozen": True}

    project_status: str
    wallet_balance: float
    budget_required: float
    file_uploaded: bool
    client_sentiment: float
    dispute_active: bool
    days_since_submission: float
    settings: RuleSettings


class RuleOutcome(BaseModel):
    """Single decision produced by the rule table."""

    model_config = {"frozen": True}

    decision: Decision
    rule_id: str
    reason: str
    confidence: int
    risk_score: int


class RuleEvaluationRequest(RuleInputs):
    """POST /v1/rules/evaluate request - thresholds fall back to configured defaults."""

    settings: RuleSettings | None = None
