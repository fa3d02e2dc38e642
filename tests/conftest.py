"""Shared fixtures - in-memory record store and a fixed clock."""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

import pytest

from releasegate.engine.orchestrator import DecisionOrchestrator
from releasegate.schemas.records import (
    DecisionLogEntry,
    EventLogEntry,
    MilestoneRecord,
    ProfileRecord,
    ProjectRecord,
)

FIXED_NOW = datetime(2026, 2, 20, 12, 0, tzinfo=timezone.utc)
FIXED_NOW_MS = 1771588800000


class StorageError(RuntimeError):
    """Raised by the in-memory store when a write is set to fail."""


class InMemoryRecordStore:
    """RecordStore double. Records every write in call order."""

    def __init__(self):
        self.milestones: dict[str, MilestoneRecord] = {}
        self.projects: dict[str, ProjectRecord] = {}
        self.profiles: dict[str, ProfileRecord] = {}
        self.events: list[EventLogEntry] = []
        self.decisions: list[DecisionLogEntry] = []
        self.calls: list[str] = []
        self.fail_on: set[str] = set()
        self.write_delay = 0.0
        self.active = 0
        self.max_active = 0
        self._locks: dict[str, asyncio.Lock] = {}

    def add_milestone(self, **fields) -> MilestoneRecord:
        data = {
            "id": "ms-1",
            "project_id": "proj-1",
            "freelancer_id": "fl-1",
            "amount": 500,
            "due_date": FIXED_NOW + timedelta(days=3),
            "status": "submitted",
            "submission_file_url": "https://files.example.com/work.zip",
        }
        data.update(fields)
        record = MilestoneRecord(**data)
        self.milestones[record.id] = record
        return record

    def add_project(self, **fields) -> ProjectRecord:
        data = {"id": "proj-1", "status": "active", "rule_version": None}
        data.update(fields)
        record = ProjectRecord(**data)
        self.projects[record.id] = record
        return record

    def add_profile(self, profile_id: str = "fl-1", trust_score: float | None = 95) -> ProfileRecord:
        record = ProfileRecord(id=profile_id, trust_score=trust_score)
        self.profiles[profile_id] = record
        return record

    async def get_milestone(self, milestone_id):
        return self.milestones.get(milestone_id)

    async def get_project(self, project_id):
        return self.projects.get(project_id)

    async def get_profile(self, profile_id):
        return self.profiles.get(profile_id)

    async def _write(self, name: str):
        self.calls.append(name)
        if self.write_delay:
            await asyncio.sleep(self.write_delay)
        if name in self.fail_on:
            raise StorageError(f"{name} failed")

    async def append_event(self, entry):
        await self._write("append_event")
        event_id = f"evt-{len(self.events) + 1}"
        self.events.append(EventLogEntry(id=event_id, **entry.model_dump()))
        return event_id

    async def append_decision(self, entry):
        await self._write("append_decision")
        decision_id = f"dec-{len(self.decisions) + 1}"
        self.decisions.append(DecisionLogEntry(id=decision_id, **entry.model_dump()))
        return decision_id

    @asynccontextmanager
    async def milestone_lock(self, milestone_id):
        lock = self._locks.setdefault(milestone_id, asyncio.Lock())
        async with lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
            try:
                yield
            finally:
                self.active -= 1

    async def list_events(self, project_id):
        return [e for e in reversed(self.events) if e.project_id == project_id]

    async def list_decisions(self, project_id):
        return [d for d in reversed(self.decisions) if d.project_id == project_id]

    async def get_decision(self, decision_id):
        return next((d for d in self.decisions if d.id == decision_id), None)


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def orchestrator(store) -> DecisionOrchestrator:
    return DecisionOrchestrator(store, clock=lambda: FIXED_NOW)
