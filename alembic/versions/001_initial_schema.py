"""Initial schema - projects, milestones, profiles, event_logs, decision_logs.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONDocument = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("client_id", sa.UUID(), nullable=True),
        sa.Column("freelancer_id", sa.UUID(), nullable=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="open"),
        sa.Column("rule_version", sa.String(20), nullable=True),
        sa.Column("budget", sa.Numeric(14, 2), nullable=True),
        sa.Column("escrow_balance", sa.Numeric(14, 2), nullable=True),
        sa.Column("created_at", sa.String(50), nullable=False),
    )

    op.create_table(
        "milestones",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("project_id", sa.UUID(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("freelancer_id", sa.UUID(), nullable=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("due_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("submission_file_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.String(50), nullable=False),
    )
    op.create_index("ix_milestones_project_id", "milestones", ["project_id"])

    op.create_table(
        "profiles",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("user_type", sa.String(20), nullable=False, server_default="freelancer"),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("trust_score", sa.Float(), nullable=True),
    )

    op.create_table(
        "event_logs",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("project_id", sa.UUID(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("milestone_id", sa.UUID(), sa.ForeignKey("milestones.id"), nullable=True),
        sa.Column("event_type", sa.String(50), nullable=False),
        sa.Column("actor_role", sa.String(50), nullable=False),
        sa.Column("payload", JSONDocument, nullable=False),
        sa.Column("payload_hash", sa.Text(), nullable=True),
        sa.Column("created_at", sa.String(50), nullable=False),
    )
    op.create_index("ix_event_logs_project_id", "event_logs", ["project_id"])

    op.create_table(
        "decision_logs",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("project_id", sa.UUID(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("milestone_id", sa.UUID(), sa.ForeignKey("milestones.id"), nullable=True),
        sa.Column("event_type", sa.String(50), nullable=False),
        sa.Column("actor_id", sa.UUID(), nullable=True),
        sa.Column("input_event_ids", JSONDocument, nullable=False),
        sa.Column("risk_score", sa.Integer(), nullable=False),
        sa.Column("confidence_score", sa.Integer(), nullable=False),
        sa.Column("final_decision", sa.String(20), nullable=False),
        sa.Column("recommendation", sa.String(20), nullable=False),
        sa.Column("rule_id", sa.String(64), nullable=False),
        sa.Column("rule_version", sa.String(20), nullable=False),
        sa.Column("system_hash", sa.String(64), nullable=False),
        sa.Column("log_hash", sa.String(64), nullable=False),
        sa.Column("decision_timestamp", sa.BigInteger(), nullable=False),
        sa.Column("prev_state", JSONDocument, nullable=False),
        sa.Column("next_state", JSONDocument, nullable=False),
        sa.Column("created_at", sa.String(50), nullable=False),
    )
    op.create_index("ix_decision_logs_project_id", "decision_logs", ["project_id"])

    # Audit tables are append-only: reject UPDATE and DELETE at the database
    op.execute(
        """
        CREATE OR REPLACE FUNCTION reject_audit_mutation() RETURNS trigger AS $$
        BEGIN
            RAISE EXCEPTION 'audit log % is append-only', TG_TABLE_NAME;
        END;
        $$ LANGUAGE plpgsql;
        """
    )
    for table in ("event_logs", "decision_logs"):
        op.execute(
            f"""
            CREATE TRIGGER {table}_append_only
            BEFORE UPDATE OR DELETE ON {table}
            FOR EACH ROW EXECUTE FUNCTION reject_audit_mutation();
            """
        )


def downgrade() -> None:
    for table in ("event_logs", "decision_logs"):
        op.execute(f"DROP TRIGGER IF EXISTS {table}_append_only ON {table}")
    op.execute("DROP FUNCTION IF EXISTS reject_audit_mutation()")
    op.drop_index("ix_decision_logs_project_id", table_name="decision_logs")
    op.drop_table("decision_logs")
    op.drop_index("ix_event_logs_project_id", table_name="event_logs")
    op.drop_table("event_logs")
    op.drop_table("profiles")
    op.drop_index("ix_milestones_project_id", table_name="milestones")
    op.drop_table("milestones")
    op.drop_table("projects")
