"""Tests for the decision orchestrator against an in-memory record store."""

import asyncio
from datetime import timedelta

import pytest

from releasegate.engine.orchestrator import DecisionOrchestrator, epoch_millis, iso_timestamp
from releasegate.exceptions import CriticalDataMissingError, InvalidRecordError
from releasegate.schemas.rules import Decision
from releasegate.utils.canonical import decision_hash, verify_decision

from tests.conftest import FIXED_NOW, FIXED_NOW_MS


def seed_happy_path(store):
    store.add_project()
    store.add_milestone()
    store.add_profile("fl-1", trust_score=95)


def test_epoch_millis_and_iso_timestamp():
    assert epoch_millis(FIXED_NOW) == FIXED_NOW_MS
    assert epoch_millis(FIXED_NOW.replace(tzinfo=None)) == FIXED_NOW_MS
    assert iso_timestamp(FIXED_NOW + timedelta(microseconds=123456)) == "2026-02-20T12:00:00.123Z"


@pytest.mark.asyncio
async def test_release_scenario(store, orchestrator):
    """Delivered, on time, trusted freelancer, small amount -> RELEASE."""
    seed_happy_path(store)

    result = await orchestrator.evaluate_and_record("ms-1", "proj-1", "fl-1")

    assert result.action == Decision.RELEASE
    assert result.rule_id == "RULE_AUTO_RELEASE_PASS"
    assert result.scores.delivery_score == 100
    assert result.scores.behavior_score == 100
    assert result.scores.risk_score == 10
    assert result.scores.history_score == 95
    assert result.reasons == ["File submission detected.", "Submission is on time."]


@pytest.mark.asyncio
async def test_high_risk_hold_scenario(store, orchestrator):
    """Undelivered, 10 days late, low trust, high value -> risk gate wins."""
    store.add_project()
    store.add_milestone(
        submission_file_url=None,
        due_date=FIXED_NOW - timedelta(days=10),
        amount=2000,
    )
    store.add_profile("fl-1", trust_score=60)

    result = await orchestrator.evaluate_and_record("ms-1", "proj-1", "fl-1")

    assert result.scores.delivery_score == 0
    assert result.scores.behavior_score == 50
    assert result.scores.risk_score == 70
    assert result.scores.history_score == 60
    assert result.action == Decision.HOLD
    assert result.rule_id == "RULE_HIGH_RISK_HOLD"


@pytest.mark.asyncio
async def test_undated_milestone_goes_to_manual_review(store, orchestrator):
    store.add_project()
    store.add_milestone(due_date=None)
    store.add_profile("fl-1", trust_score=95)

    result = await orchestrator.evaluate_and_record("ms-1", "proj-1", "fl-1")

    assert result.action == Decision.HOLD
    assert result.rule_id == "RULE_MANUAL_REVIEW_NEEDED"
    assert result.scores.behavior_score == 0
    assert store.events[0].payload["due_date"] is None
    assert store.decisions[0].final_decision == "HOLD"


@pytest.mark.asyncio
async def test_event_logged_before_decision(store, orchestrator):
    seed_happy_path(store)

    result = await orchestrator.evaluate_and_record("ms-1", "proj-1")

    assert store.calls == ["append_event", "append_decision"]
    event = store.events[0]
    assert event.event_type == "DECISION_REQUESTED"
    assert event.actor_role == "system"
    assert event.milestone_id == "ms-1"
    assert event.payload == {
        "milestone_status": "submitted",
        "submission_url": "https://files.example.com/work.zip",
        "amount": 500,
        "due_date": "2026-02-23T12:00:00.000Z",
        "timestamp": "2026-02-20T12:00:00.000Z",
    }
    assert len(event.payload_hash) == 64

    decision = store.decisions[0]
    assert decision.input_event_ids == [event.id]
    assert result.event_id == event.id
    assert result.decision_id == decision.id


@pytest.mark.asyncio
async def test_decision_record_contents(store, orchestrator):
    seed_happy_path(store)

    result = await orchestrator.evaluate_and_record("ms-1", "proj-1")
    decision = store.decisions[0]

    assert decision.event_type == "RULE_EVALUATION"
    assert decision.actor_id is None
    assert decision.final_decision == "RELEASE"
    assert decision.recommendation == "RELEASE"
    assert decision.rule_id == "RULE_AUTO_RELEASE_PASS"
    assert decision.risk_score == 10
    assert decision.confidence_score == result.scores.delivery_score
    assert decision.system_hash == decision.log_hash == result.decision_hash
    assert decision.decision_timestamp == FIXED_NOW_MS
    assert decision.prev_state == {"status": "submitted"}
    assert decision.next_state == {
        "recommended_action": "RELEASE",
        "reasons": result.reasons,
    }


@pytest.mark.asyncio
async def test_hash_is_recomputable(store, orchestrator):
    seed_happy_path(store)

    result = await orchestrator.evaluate_and_record("ms-1", "proj-1")

    assert result.decision_timestamp == FIXED_NOW_MS
    assert result.decision_hash == decision_hash(
        "proj-1", "ms-1", "RELEASE", "RULE_AUTO_RELEASE_PASS", 10, FIXED_NOW_MS
    )
    assert verify_decision(store.decisions[0])


@pytest.mark.asyncio
async def test_repeat_evaluation_same_clock_same_hash(store, orchestrator):
    """Two evaluations at the same instant produce the same hash and two audit rows."""
    seed_happy_path(store)

    first = await orchestrator.evaluate_and_record("ms-1", "proj-1")
    second = await orchestrator.evaluate_and_record("ms-1", "proj-1")

    assert first.decision_hash == second.decision_hash
    assert len(store.events) == 2
    assert len(store.decisions) == 2


@pytest.mark.asyncio
async def test_rule_version_from_project(store, orchestrator):
    seed_happy_path(store)
    store.add_project(rule_version="3.0.0")

    result = await orchestrator.evaluate_and_record("ms-1", "proj-1")

    assert result.rule_version == "3.0.0"
    assert store.decisions[0].rule_version == "3.0.0"


@pytest.mark.asyncio
async def test_rule_version_defaults_to_baseline(store, orchestrator):
    seed_happy_path(store)

    result = await orchestrator.evaluate_and_record("ms-1", "proj-1")

    assert result.rule_version == "2.1.0"


@pytest.mark.asyncio
async def test_freelancer_derived_from_milestone(store, orchestrator):
    store.add_project()
    store.add_milestone(freelancer_id="fl-2")
    store.add_profile("fl-2", trust_score=60)

    result = await orchestrator.evaluate_and_record("ms-1", "proj-1")

    assert result.scores.history_score == 60
    assert result.scores.risk_score == 30


@pytest.mark.asyncio
async def test_explicit_freelancer_overrides_milestone(store, orchestrator):
    store.add_project()
    store.add_milestone(freelancer_id="fl-2")
    store.add_profile("fl-2", trust_score=60)
    store.add_profile("fl-3", trust_score=90)

    result = await orchestrator.evaluate_and_record("ms-1", "proj-1", "fl-3")

    assert result.scores.history_score == 90


@pytest.mark.asyncio
async def test_missing_profile_defaults_trust(store, orchestrator):
    store.add_project()
    store.add_milestone(freelancer_id="ghost")

    result = await orchestrator.evaluate_and_record("ms-1", "proj-1")

    assert result.scores.history_score == 100


@pytest.mark.asyncio
async def test_missing_milestone_aborts_before_writes(store, orchestrator):
    store.add_project()

    with pytest.raises(CriticalDataMissingError) as exc:
        await orchestrator.evaluate_and_record("nope", "proj-1")

    assert exc.value.record == "milestone"
    assert store.calls == []


@pytest.mark.asyncio
async def test_missing_project_aborts_before_writes(store, orchestrator):
    store.add_milestone()

    with pytest.raises(CriticalDataMissingError) as exc:
        await orchestrator.evaluate_and_record("ms-1", "nope")

    assert exc.value.record == "project"
    assert store.calls == []


@pytest.mark.asyncio
async def test_event_write_failure_propagates(store, orchestrator):
    seed_happy_path(store)
    store.fail_on.add("append_event")

    with pytest.raises(RuntimeError, match="append_event failed"):
        await orchestrator.evaluate_and_record("ms-1", "proj-1")

    assert store.calls == ["append_event"]
    assert store.decisions == []


@pytest.mark.asyncio
async def test_decision_write_failure_propagates(store, orchestrator):
    """The request event stays as a trace; the error is not swallowed."""
    seed_happy_path(store)
    store.fail_on.add("append_decision")

    with pytest.raises(RuntimeError, match="append_decision failed"):
        await orchestrator.evaluate_and_record("ms-1", "proj-1")

    assert len(store.events) == 1
    assert store.decisions == []


@pytest.mark.asyncio
async def test_unparsable_amount_leaves_trace(store, orchestrator):
    store.add_project()
    store.add_milestone(amount="twelve")

    with pytest.raises(InvalidRecordError):
        await orchestrator.evaluate_and_record("ms-1", "proj-1")

    assert len(store.events) == 1
    assert store.events[0].payload["amount"] == "twelve"
    assert store.decisions == []


@pytest.mark.asyncio
async def test_same_milestone_evaluations_are_serialized(store):
    seed_happy_path(store)
    store.write_delay = 0.01
    orchestrator = DecisionOrchestrator(store, clock=lambda: FIXED_NOW)

    await asyncio.gather(
        orchestrator.evaluate_and_record("ms-1", "proj-1"),
        orchestrator.evaluate_and_record("ms-1", "proj-1"),
    )

    assert store.max_active == 1
    assert store.calls == [
        "append_event",
        "append_decision",
        "append_event",
        "append_decision",
    ]


@pytest.mark.asyncio
async def test_different_milestones_do_not_contend(store):
    seed_happy_path(store)
    store.add_milestone(id="ms-2")
    store.write_delay = 0.01
    orchestrator = DecisionOrchestrator(store, clock=lambda: FIXED_NOW)

    await asyncio.gather(
        orchestrator.evaluate_and_record("ms-1", "proj-1"),
        orchestrator.evaluate_and_record("ms-2", "proj-1"),
    )

    assert store.max_active == 2
