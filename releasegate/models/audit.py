"""Event and decision log models - append-only."""

from sqlalchemy import JSON, BigInteger, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from releasegate.database import Base

JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class EventLog(Base):
    """Raw events - written before any evaluation runs."""

    __tablename__ = "event_logs"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    project_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("projects.id"), nullable=False
    )
    milestone_id: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("milestones.id"), nullable=True
    )
    event_type: Mapped[str] = mapped_column(String(50), nullable=False)
    actor_role: Mapped[str] = mapped_column(String(50), nullable=False)
    payload: Mapped[dict] = mapped_column(JSONDocument, nullable=False)
    payload_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[str] = mapped_column(String(50), nullable=False)


class DecisionLog(Base):
    """Decision audit records - append-only, never updated."""

    __tablename__ = "decision_logs"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    project_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("projects.id"), nullable=False
    )
    milestone_id: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("milestones.id"), nullable=True
    )
    event_type: Mapped[str] = mapped_column(String(50), nullable=False)
    actor_id: Mapped[str | None] = mapped_column(Uuid(as_uuid=False), nullable=True)
    input_event_ids: Mapped[list] = mapped_column(JSONDocument, nullable=False)
    risk_score: Mapped[int] = mapped_column(Integer, nullable=False)
    confidence_score: Mapped[int] = mapped_column(Integer, nullable=False)
    final_decision: Mapped[str] = mapped_column(String(20), nullable=False)
    recommendation: Mapped[str] = mapped_column(String(20), nullable=False)
    rule_id: Mapped[str] = mapped_column(String(64), nullable=False)
    rule_version: Mapped[str] = mapped_column(String(20), nullable=False)
    system_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    log_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    decision_timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    prev_state: Mapped[dict] = mapped_column(JSONDocument, nullable=False)
    next_state: Mapped[dict] = mapped_column(JSONDocument, nullable=False)
    created_at: Mapped[str] = mapped_column(String(50), nullable=False)
