"""Health and metrics endpoints."""

from fastapi import APIRouter

from releasegate.engine.orchestrator import DEFAULT_RULE_VERSION
from releasegate.engine.rules import RULE_SET_VERSION

router = APIRouter()


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/metrics")
async def metrics():
    """Basic metrics endpoint for observability."""
    return {
        "service": "releasegate",
        "version": "0.1.0",
        "rule_set_version": RULE_SET_VERSION,
        "decision_rule_version": DEFAULT_RULE_VERSION,
    }
