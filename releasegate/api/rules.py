"""Pure rule evaluation endpoint."""

from fastapi import APIRouter

from releasegate.config import settings as app_settings
from releasegate.engine.rules import evaluate_project_rules
from releasegate.schemas.rules import (
    RuleEvaluationRequest,
    RuleInputs,
    RuleOutcome,
    RuleSettings,
)

router = APIRouter()


@router.post("/rules/evaluate", response_model=RuleOutcome)
async def evaluate_rules(body: RuleEvaluationRequest):
    """
    Run the release policy against a caller-supplied snapshot.
    Nothing is read or written; the same body always yields the same outcome.
    """
    rule_settings = body.settings or RuleSettings(
        min_sentiment=app_settings.default_min_sentiment,
        auto_release_days=app_settings.default_auto_release_days,
    )
    inputs = RuleInputs(**body.model_dump(exclude={"settings"}), settings=rule_settings)
    return evaluate_project_rules(inputs)
