"""Record store contract consumed by the decision orchestrator.

No SQLAlchemy imports in this module - the orchestrator only sees this
interface, so tests can hand it an in-memory double.
"""

from contextlib import AbstractAsyncContextManager
from typing import Protocol, runtime_checkable

from releasegate.schemas.records import (
    DecisionLogEntry,
    EventLogEntry,
    MilestoneRecord,
    NewDecisionLog,
    NewEventLog,
    ProfileRecord,
    ProjectRecord,
)


@runtime_checkable
class RecordStore(Protocol):
    """Reads project state and appends audit entries."""

    async def get_milestone(self, milestone_id: str) -> MilestoneRecord | None:
        """Milestone by id, or None."""
        ...

    async def get_project(self, project_id: str) -> ProjectRecord | None:
        """Project by id, or None."""
        ...

    async def get_profile(self, profile_id: str) -> ProfileRecord | None:
        """Profile by id, or None."""
        ...

    async def append_event(self, entry: NewEventLog) -> str:
        """Insert an event log entry and return its generated id."""
        ...

    async def append_decision(self, entry: NewDecisionLog) -> str:
        """Insert a decision log entry and return its generated id."""
        ...

    def milestone_lock(self, milestone_id: str) -> AbstractAsyncContextManager[None]:
        """Serialize evaluations of one milestone while held."""
        ...

    async def list_events(self, project_id: str) -> list[EventLogEntry]:
        """Event log for a project, newest first."""
        ...

    async def list_decisions(self, project_id: str) -> list[DecisionLogEntry]:
        """Decision log for a project, newest first."""
        ...

    async def get_decision(self, decision_id: str) -> DecisionLogEntry | None:
        """Decision log entry by id, or None."""
        ...
