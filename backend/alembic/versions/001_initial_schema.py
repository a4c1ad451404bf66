"""Initial schema with all tables.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

This migration creates the complete StudyCompanion database schema:
- Sequence: record_id_seq (one id space shared by every table)
- Tables: users, units, documents, notes, summaries, assignments,
  study_plan_entries, study_sessions, chat_messages
- Indexes: lookups by user, unit and date
- Triggers: updated_at auto-update on notes
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

RECORD_ID = sa.text("nextval('record_id_seq')")


def _id_column() -> sa.Column:
    return sa.Column("id", sa.Integer(), server_default=RECORD_ID, nullable=False)


def _created_at_column() -> sa.Column:
    return sa.Column(
        "created_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False
    )


def _user_fk_column() -> sa.Column:
    return sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)


def upgrade() -> None:
    # ==========================================================================
    # SHARED ID SEQUENCE
    # ==========================================================================
    op.execute("CREATE SEQUENCE IF NOT EXISTS record_id_seq")

    # ==========================================================================
    # USERS TABLE
    # ==========================================================================
    op.create_table(
        "users",
        _id_column(),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("pace", sa.Integer(), server_default="40", nullable=False),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.CheckConstraint("pace BETWEEN 1 AND 80", name="valid_pace"),
    )

    # ==========================================================================
    # UNITS TABLE
    # ==========================================================================
    op.create_table(
        "units",
        _id_column(),
        _user_fk_column(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(7), server_default="#8FBC8F", nullable=False),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_units_user_id", "units", ["user_id"])

    # ==========================================================================
    # DOCUMENTS TABLE
    # ==========================================================================
    op.create_table(
        "documents",
        _id_column(),
        _user_fk_column(),
        sa.Column("unit_id", sa.Integer(), sa.ForeignKey("units.id", ondelete="CASCADE"), nullable=False),
        sa.Column("filename", sa.String(), nullable=False),
        sa.Column("original_name", sa.String(), nullable=False),
        sa.Column("mime_type", sa.String(), nullable=False),
        sa.Column("size", sa.Integer(), nullable=False),
        sa.Column("storage_location", sa.String(), nullable=False),
        sa.Column("extracted_text", sa.Text(), nullable=True),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_documents_unit_id", "documents", ["unit_id"])

    # ==========================================================================
    # NOTES TABLE
    # ==========================================================================
    op.create_table(
        "notes",
        _id_column(),
        _user_fk_column(),
        sa.Column("unit_id", sa.Integer(), sa.ForeignKey("units.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "document_id", sa.Integer(), sa.ForeignKey("documents.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at_column(),
        sa.Column(
            "updated_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_notes_unit_id", "notes", ["unit_id"])

    # ==========================================================================
    # SUMMARIES TABLE
    # ==========================================================================
    op.create_table(
        "summaries",
        _id_column(),
        _user_fk_column(),
        sa.Column(
            "document_id", sa.Integer(), sa.ForeignKey("documents.id", ondelete="CASCADE"), nullable=True
        ),
        sa.Column("unit_id", sa.Integer(), sa.ForeignKey("units.id", ondelete="CASCADE"), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("approved", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_summaries_user_id", "summaries", ["user_id"])

    # ==========================================================================
    # ASSIGNMENTS TABLE
    # ==========================================================================
    op.create_table(
        "assignments",
        _id_column(),
        _user_fk_column(),
        sa.Column("unit_id", sa.Integer(), sa.ForeignKey("units.id", ondelete="SET NULL"), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(20), server_default="assignment", nullable=False),
        sa.Column("questions", sa.Text(), nullable=True),
        sa.Column("deadline", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("completed", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("type IN ('assignment', 'cat', 'exam')", name="valid_assignment_type"),
    )
    op.create_index("idx_assignments_user_deadline", "assignments", ["user_id", "deadline"])

    # ==========================================================================
    # STUDY_PLAN_ENTRIES TABLE
    # ==========================================================================
    op.create_table(
        "study_plan_entries",
        _id_column(),
        _user_fk_column(),
        sa.Column("unit_id", sa.Integer(), sa.ForeignKey("units.id", ondelete="SET NULL"), nullable=True),
        sa.Column(
            "document_id", sa.Integer(), sa.ForeignKey("documents.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.Column("estimated_minutes", sa.Integer(), nullable=False),
        sa.Column("completed", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("estimated_minutes > 0", name="valid_estimated_minutes"),
    )
    op.create_index("idx_study_plan_user_date", "study_plan_entries", ["user_id", "scheduled_date"])

    # ==========================================================================
    # STUDY_SESSIONS TABLE
    # ==========================================================================
    op.create_table(
        "study_sessions",
        _id_column(),
        _user_fk_column(),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("minutes_studied", sa.Integer(), server_default="0", nullable=False),
        sa.Column("topics_completed", sa.Integer(), server_default="0", nullable=False),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "date", name="unique_user_session_date"),
        sa.CheckConstraint(
            "minutes_studied >= 0 AND topics_completed >= 0", name="valid_session_totals"
        ),
    )

    # ==========================================================================
    # CHAT_MESSAGES TABLE
    # ==========================================================================
    op.create_table(
        "chat_messages",
        _id_column(),
        _user_fk_column(),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_chat_messages_user_id", "chat_messages", ["user_id"])

    # ==========================================================================
    # UPDATED_AT TRIGGER FUNCTION
    # ==========================================================================
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)

    op.execute("""
        CREATE TRIGGER update_notes_updated_at
            BEFORE UPDATE ON notes
            FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();
    """)


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS update_notes_updated_at ON notes")
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")

    # Drop tables in reverse dependency order
    op.drop_table("chat_messages")
    op.drop_table("study_sessions")
    op.drop_table("study_plan_entries")
    op.drop_table("assignments")
    op.drop_table("summaries")
    op.drop_table("notes")
    op.drop_table("documents")
    op.drop_table("units")
    op.drop_table("users")

    op.execute("DROP SEQUENCE IF EXISTS record_id_seq")
