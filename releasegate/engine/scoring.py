"""Live milestone scoring - delivery, lateness, trust history and amount risk."""

import math
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from releasegate.exceptions import InvalidRecordError
from releasegate.schemas.decision import ScoreCard
from releasegate.schemas.records import MilestoneRecord
from releasegate.schemas.rules import Decision
from releasegate.utils.canonical import format_number

SECONDS_PER_DAY = 86400

MIN_SUBMISSION_LENGTH = 5
LATE_PENALTY_PER_DAY = 5
LOW_TRUST_THRESHOLD = 80
LOW_TRUST_RISK = 20
HIGH_VALUE_AMOUNT = 1000
HIGH_VALUE_RISK = 50
BASE_AMOUNT_RISK = 10


def parse_amount(raw: Any) -> float:
    """Numeric parse of a stored milestone amount."""
    if isinstance(raw, bool) or raw is None:
        raise InvalidRecordError("amount", raw)
    try:
        return float(Decimal(str(raw).strip()))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidRecordError("amount", raw) from exc


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_late(due_date: datetime, now: datetime) -> int:
    """Whole days past due, rounded up. Zero when on time."""
    due = _as_utc(due_date)
    current = _as_utc(now)
    if current <= due:
        return 0
    return math.ceil((current - due).total_seconds() / SECONDS_PER_DAY)


def has_delivery(submission_reference: str | None) -> bool:
    return bool(submission_reference) and len(submission_reference) > MIN_SUBMISSION_LENGTH


def choose_action(
    delivery_score: int, behavior_score: int, risk_score: int
) -> tuple[Decision, str, str | None]:
    """
    Map component scores to (action, rule_id, reason).

    Thresholds are checked in order: auto release, high-risk hold,
    quality failure, then manual review as the catch-all.
    """
    if delivery_score >= 75 and behavior_score >= 70 and risk_score <= 40:
        return Decision.RELEASE, "RULE_AUTO_RELEASE_PASS", None
    if risk_score >= 70:
        return Decision.HOLD, "RULE_HIGH_RISK_HOLD", "Risk score exceeded safety threshold."
    if delivery_score < 50:
        return (
            Decision.DISPUTE,
            "RULE_QUALITY_FAIL",
            "Delivery quality/presence failed minimum checks.",
        )
    return Decision.HOLD, "RULE_MANUAL_REVIEW_NEEDED", None


def score_milestone(
    milestone: MilestoneRecord,
    trust_score: float | None,
    now: datetime,
) -> ScoreCard:
    """Score a milestone against live data and pick an action."""
    reasons: list[str] = []
    risk_score = 0

    # Delivery
    if has_delivery(milestone.submission_file_url):
        delivery_score = 100
        reasons.append("File submission detected.")
    else:
        delivery_score = 0
        reasons.append("No file submission found.")

    # Timing; an undated milestone cannot clear the behavior threshold
    behavior_score = 100
    if milestone.due_date is None:
        behavior_score = 0
        reasons.append("No due date recorded.")
    else:
        late = days_late(milestone.due_date, now)
        if late > 0:
            behavior_score = max(0, behavior_score - late * LATE_PENALTY_PER_DAY)
            reasons.append(f"Submission is {late} days late.")
        else:
            reasons.append("Submission is on time.")

    # Trust history
    history_score = 100 if trust_score is None else trust_score
    if history_score < LOW_TRUST_THRESHOLD:
        reasons.append(f"User trust score is low ({format_number(history_score)}%).")
        risk_score += LOW_TRUST_RISK

    # Amount risk
    amount = parse_amount(milestone.amount)
    if amount > HIGH_VALUE_AMOUNT:
        risk_score += HIGH_VALUE_RISK
        reasons.append("High value transaction (>1000 USDT) triggers enhanced security.")
    else:
        risk_score += BASE_AMOUNT_RISK

    action, rule_id, reason = choose_action(delivery_score, behavior_score, risk_score)
    if reason:
        reasons.append(reason)

    return ScoreCard(
        delivery_score=delivery_score,
        behavior_score=behavior_score,
        risk_score=risk_score,
        history_score=history_score,
        action=action,
        rule_id=rule_id,
        reasons=reasons,
    )
