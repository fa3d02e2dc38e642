"""SQLAlchemy record store - project reads and append-only audit writes."""

import asyncio
import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID, uuid4

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from releasegate.models import DecisionLog, EventLog, Milestone, Profile, Project
from releasegate.schemas.records import (
    DecisionLogEntry,
    EventLogEntry,
    MilestoneRecord,
    NewDecisionLog,
    NewEventLog,
    ProfileRecord,
    ProjectRecord,
)

# Per-process locks keyed by milestone id; entries vanish once no task holds them
_milestone_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


def is_valid_uuid(value: str | None) -> bool:
    if not value:
        return False
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True


def _process_lock(milestone_id: str) -> asyncio.Lock:
    lock = _milestone_locks.get(milestone_id)
    if lock is None:
        lock = asyncio.Lock()
        _milestone_locks[milestone_id] = lock
    return lock


class SqlRecordStore:
    """
    RecordStore over an AsyncSession. The caller owns commit/rollback.

    When `event_sessions` is given, events are committed through their own
    short-lived session so the request trace survives a later rollback of
    the main transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        event_sessions: async_sessionmaker[AsyncSession] | None = None,
    ):
        self.session = session
        self.event_sessions = event_sessions

    async def get_milestone(self, milestone_id: str) -> MilestoneRecord | None:
        """Get milestone by ID."""
        if not is_valid_uuid(milestone_id):
            return None
        row = await self.session.get(Milestone, milestone_id)
        return MilestoneRecord.model_validate(row) if row else None

    async def get_project(self, project_id: str) -> ProjectRecord | None:
        """Get project by ID."""
        if not is_valid_uuid(project_id):
            return None
        row = await self.session.get(Project, project_id)
        return ProjectRecord.model_validate(row) if row else None

    async def get_profile(self, profile_id: str) -> ProfileRecord | None:
        """Get profile by ID."""
        if not is_valid_uuid(profile_id):
            return None
        row = await self.session.get(Profile, profile_id)
        return ProfileRecord.model_validate(row) if row else None

    async def append_event(self, entry: NewEventLog) -> str:
        """Insert event log record."""
        event_id = str(uuid4())
        ev = EventLog(id=event_id, **entry.model_dump())
        if self.event_sessions is None:
            self.session.add(ev)
            await self.session.flush()
            return event_id
        async with self.event_sessions() as event_session:
            event_session.add(ev)
            await event_session.commit()
        return event_id

    async def append_decision(self, entry: NewDecisionLog) -> str:
        """Insert decision log record."""
        dl = DecisionLog(id=str(uuid4()), **entry.model_dump())
        self.session.add(dl)
        await self.session.flush()
        return str(dl.id)

    @asynccontextmanager
    async def milestone_lock(self, milestone_id: str) -> AsyncIterator[None]:
        """
        Serialize evaluations of one milestone.
        On PostgreSQL a transaction-scoped advisory lock also covers other
        processes; it is released when the session's transaction ends.
        """
        async with _process_lock(milestone_id):
            if self.session.get_bind().dialect.name == "postgresql":
                await self.session.execute(
                    text("SELECT pg_advisory_xact_lock(hashtext(:key))"),
                    {"key": f"milestone:{milestone_id}"},
                )
            yield

    async def list_events(self, project_id: str) -> list[EventLogEntry]:
        """Event log for a project, newest first."""
        if not is_valid_uuid(project_id):
            return []
        result = await self.session.execute(
            select(EventLog)
            .where(EventLog.project_id == project_id)
            .order_by(EventLog.created_at.desc())
        )
        return [EventLogEntry.model_validate(r) for r in result.scalars().all()]

    async def list_decisions(self, project_id: str) -> list[DecisionLogEntry]:
        """Decision log for a project, newest first."""
        if not is_valid_uuid(project_id):
            return []
        result = await self.session.execute(
            select(DecisionLog)
            .where(DecisionLog.project_id == project_id)
            .order_by(DecisionLog.created_at.desc())
        )
        return [DecisionLogEntry.model_validate(r) for r in result.scalars().all()]

    async def get_decision(self, decision_id: str) -> DecisionLogEntry | None:
        """Get decision log entry by ID."""
        if not is_valid_uuid(decision_id):
            return None
        row = await self.session.get(DecisionLog, decision_id)
        return DecisionLogEntry.model_validate(row) if row else None
