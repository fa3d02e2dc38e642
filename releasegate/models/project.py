"""Project and milestone models."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from releasegate.database import Base


class Project(Base):
    """Contract context - client, freelancer, escrow figures, rule version."""

    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    client_id: Mapped[str | None] = mapped_column(Uuid(as_uuid=False), nullable=True)
    freelancer_id: Mapped[str | None] = mapped_column(Uuid(as_uuid=False), nullable=True)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="open")
    rule_version: Mapped[str | None] = mapped_column(String(20), nullable=True)
    budget: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    escrow_balance: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    created_at: Mapped[str] = mapped_column(String(50), nullable=False)


class Milestone(Base):
    """Payable unit of work. Never deleted, only transitioned."""

    __tablename__ = "milestones"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    project_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("projects.id"), nullable=False
    )
    freelancer_id: Mapped[str | None] = mapped_column(Uuid(as_uuid=False), nullable=True)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending"
    )  # pending|submitted|approved|disputed
    submission_file_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[str] = mapped_column(String(50), nullable=False)
