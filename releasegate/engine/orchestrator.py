"""Decision orchestrator - binds live scoring to stored state and the audit trail.

Each call to `evaluate_and_record` performs exactly two appends:

1. a DECISION_REQUESTED event, written before any scoring happens
2. a RULE_EVALUATION decision citing that event, carrying a SHA256 hash over
   project|milestone|action|rule|risk|timestamp

Errors from either append propagate to the caller unchanged.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

from releasegate.engine.scoring import score_milestone
from releasegate.exceptions import CriticalDataMissingError
from releasegate.schemas.decision import DecisionResult, DecisionScores
from releasegate.schemas.records import MilestoneRecord, NewDecisionLog, NewEventLog
from releasegate.storage.protocols import RecordStore
from releasegate.utils.canonical import decision_hash, snapshot_hash

logger = logging.getLogger(__name__)

DEFAULT_RULE_VERSION = "2.1.0"

EVENT_DECISION_REQUESTED = "DECISION_REQUESTED"
EVENT_RULE_EVALUATION = "RULE_EVALUATION"
SYSTEM_ACTOR_ROLE = "system"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def epoch_millis(ts: datetime) -> int:
    """Milliseconds since the Unix epoch (naive datetimes are UTC)."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return (ts - _EPOCH) // timedelta(milliseconds=1)


def iso_timestamp(ts: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2026-02-20T10:00:00.000Z."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return iso_timestamp(value)
    return value


class DecisionOrchestrator:
    """Evaluate a milestone against live data and record the decision."""

    def __init__(
        self,
        store: RecordStore,
        clock: Callable[[], datetime] = utc_now,
        default_rule_version: str = DEFAULT_RULE_VERSION,
    ):
        self.store = store
        self.clock = clock
        self.default_rule_version = default_rule_version

    async def evaluate_and_record(
        self,
        milestone_id: str,
        project_id: str,
        freelancer_id: str | None = None,
    ) -> DecisionResult:
        milestone = await self.store.get_milestone(milestone_id)
        if milestone is None:
            logger.warning("Decision aborted: milestone %s not found", milestone_id)
            raise CriticalDataMissingError("milestone", milestone_id)
        project = await self.store.get_project(project_id)
        if project is None:
            logger.warning("Decision aborted: project %s not found", project_id)
            raise CriticalDataMissingError("project", project_id)

        target_freelancer = freelancer_id or milestone.freelancer_id
        profile = await self.store.get_profile(target_freelancer) if target_freelancer else None
        trust_score = profile.trust_score if profile else None

        async with self.store.milestone_lock(milestone_id):
            event_id = await self._log_request(project_id, milestone)
            logger.info(
                "Decision requested milestone=%s project=%s event=%s",
                milestone_id,
                project_id,
                event_id,
            )

            decided_at = self.clock()
            card = score_milestone(milestone, trust_score, decided_at)
            decision_timestamp = epoch_millis(decided_at)
            digest = decision_hash(
                project_id,
                milestone_id,
                card.action.value,
                card.rule_id,
                card.risk_score,
                decision_timestamp,
            )
            rule_version = project.rule_version or self.default_rule_version

            decision_id = await self.store.append_decision(
                NewDecisionLog(
                    project_id=project_id,
                    milestone_id=milestone_id,
                    event_type=EVENT_RULE_EVALUATION,
                    actor_id=None,
                    input_event_ids=[event_id],
                    risk_score=card.risk_score,
                    # delivery score doubles as the recorded confidence
                    confidence_score=card.delivery_score,
                    final_decision=card.action.value,
                    recommendation=card.action.value,
                    rule_id=card.rule_id,
                    rule_version=rule_version,
                    system_hash=digest,
                    log_hash=digest,
                    decision_timestamp=decision_timestamp,
                    prev_state={"status": milestone.status},
                    next_state={
                        "recommended_action": card.action.value,
                        "reasons": list(card.reasons),
                    },
                    created_at=iso_timestamp(decided_at),
                )
            )

        logger.info(
            "Decision recorded milestone=%s action=%s rule=%s risk=%s hash=%s",
            milestone_id,
            card.action.value,
            card.rule_id,
            card.risk_score,
            digest,
        )

        return DecisionResult(
            action=card.action,
            scores=DecisionScores(
                delivery_score=card.delivery_score,
                behavior_score=card.behavior_score,
                risk_score=card.risk_score,
                history_score=card.history_score,
            ),
            reasons=card.reasons,
            decision_hash=digest,
            rule_id=card.rule_id,
            rule_version=rule_version,
            decision_timestamp=decision_timestamp,
            event_id=event_id,
            decision_id=decision_id,
        )

    async def _log_request(self, project_id: str, milestone: MilestoneRecord) -> str:
        """Append the raw request event. Must run before scoring."""
        captured_at = self.clock()
        payload = {
            "milestone_status": milestone.status,
            "submission_url": milestone.submission_file_url,
            "amount": _jsonable(milestone.amount),
            "due_date": _jsonable(milestone.due_date),
            "timestamp": iso_timestamp(captured_at),
        }
        return await self.store.append_event(
            NewEventLog(
                project_id=project_id,
                milestone_id=milestone.id,
                event_type=EVENT_DECISION_REQUESTED,
                actor_role=SYSTEM_ACTOR_ROLE,
                payload=payload,
                payload_hash=snapshot_hash(payload),
                created_at=iso_timestamp(captured_at),
            )
        )
