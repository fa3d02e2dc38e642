"""Canonical JSON and decision hashing utilities."""

import hashlib
import json
from decimal import Decimal
from typing import Any


def format_number(value: int | float | Decimal) -> str:
    """Render a number the way it appears in hash payloads and reasons.

    Integral values drop the fractional part (500.0 -> "500"); everything
    else uses the shortest round-trip form.
    """
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, Decimal):
        value = float(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _canonical_value(obj: Any) -> Any:
    """Convert value for canonical representation."""
    if obj is None:
        return None
    if isinstance(obj, bool):
        return obj
    if isinstance(obj, (int, float, Decimal)):
        return float(obj) if isinstance(obj, (float, Decimal)) else int(obj)
    if isinstance(obj, dict):
        return {k: _canonical_value(v) for k, v in sorted(obj.items())}
    if isinstance(obj, list):
        return [_canonical_value(v) for v in obj]
    if isinstance(obj, str):
        return obj
    return str(obj)


def canonical_json(obj: Any) -> str:
    """Produce canonical JSON string (sorted keys, consistent formatting)."""
    canonical = _canonical_value(obj)
    return json.dumps(canonical, sort_keys=True, separators=(",", ":"))


def snapshot_hash(obj: Any) -> str:
    """Compute SHA256 hash of a canonical JSON snapshot."""
    return hashlib.sha256(canonical_json(obj).encode()).hexdigest()


def decision_hash_payload(
    project_id: str,
    milestone_id: str,
    action: str,
    rule_id: str,
    risk_score: int | float,
    decision_timestamp: int,
) -> str:
    """Pipe-delimited string the decision hash is computed over."""
    return "|".join(
        [
            project_id,
            milestone_id,
            action,
            rule_id,
            format_number(risk_score),
            str(decision_timestamp),
        ]
    )


def decision_hash(
    project_id: str,
    milestone_id: str,
    action: str,
    rule_id: str,
    risk_score: int | float,
    decision_timestamp: int,
) -> str:
    """SHA256 hex digest binding a decision to its key fields."""
    payload = decision_hash_payload(
        project_id, milestone_id, action, rule_id, risk_score, decision_timestamp
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def verify_decision(record: Any) -> bool:
    """
    Recompute the hash of a stored decision log entry.
    True only when both stored hash fields match the recomputed digest.
    """
    expected = decision_hash(
        str(record.project_id),
        str(record.milestone_id),
        record.final_decision,
        record.rule_id,
        record.risk_score,
        record.decision_timestamp,
    )
    return record.system_hash == expected and record.log_hash == expected
