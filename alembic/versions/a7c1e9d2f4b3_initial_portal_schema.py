"""initial portal schema

Revision ID: a7c1e9d2f4b3
Revises:
Create Date: 2026-10-19 09:00:00.000000

This migration creates:
1. users for student and lecturer accounts
2. the submission tables (thesis_registrations, seminars, thesis_defenses, internships)
3. the lecturer directory
4. notifications and their attachments
5. the master document template and per-stage requirement texts

Statuses are plain strings ("Draft", "Diajukan", ...) rather than a
database enum so other clients of the store can read them directly.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a7c1e9d2f4b3"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create all portal tables."""
    user_role = sa.Enum("STUDENT", "LECTURER", name="user_role")

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=True),
        sa.Column("google_id", sa.String(length=255), nullable=True),
        sa.Column("full_name", sa.String(length=200), nullable=True),
        sa.Column("identifier", sa.String(length=50), nullable=True),
        sa.Column("role", user_role, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_google_id", "users", ["google_id"], unique=True)

    op.create_table(
        "thesis_registrations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column("student_name", sa.String(length=200), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("advisor1_id", sa.Uuid(), nullable=True),
        sa.Column("advisor2_id", sa.Uuid(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_thesis_registrations_student_id", "thesis_registrations", ["student_id"]
    )
    op.create_index("ix_thesis_registrations_status", "thesis_registrations", ["status"])

    op.create_table(
        "seminars",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column("student_name", sa.String(length=200), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("file_report_url", sa.Text(), nullable=True),
        sa.Column("advisor1_id", sa.Uuid(), nullable=True),
        sa.Column("advisor2_id", sa.Uuid(), nullable=True),
        sa.Column("scheduled_date", sa.Date(), nullable=True),
        sa.Column("scheduled_time", sa.Time(), nullable=True),
        sa.Column("scheduled_room", sa.String(length=100), nullable=True),
        sa.Column("examiner1_id", sa.Uuid(), nullable=True),
        sa.Column("examiner2_id", sa.Uuid(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_seminars_student_type", "seminars", ["student_id", "type"])
    op.create_index("ix_seminars_status", "seminars", ["status"])

    op.create_table(
        "thesis_defenses",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("thesis_id", sa.Uuid(), nullable=True),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column("student_name", sa.String(length=200), nullable=False),
        sa.Column("file_fixed_url", sa.Text(), nullable=True),
        sa.Column("file_plagiarism_url", sa.Text(), nullable=True),
        sa.Column("file_transcript_url", sa.Text(), nullable=True),
        sa.Column("sks_count", sa.Integer(), nullable=False),
        sa.Column("admin_requirements_met", sa.Boolean(), nullable=False),
        sa.Column("examiner1_id", sa.Uuid(), nullable=True),
        sa.Column("examiner2_id", sa.Uuid(), nullable=True),
        sa.Column("defense_date", sa.Date(), nullable=True),
        sa.Column("defense_time", sa.Time(), nullable=True),
        sa.Column("defense_room", sa.String(length=100), nullable=True),
        sa.Column("letter_number", sa.String(length=100), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_thesis_defenses_student_id", "thesis_defenses", ["student_id"])
    op.create_index("ix_thesis_defenses_status", "thesis_defenses", ["status"])

    op.create_table(
        "internships",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column("student_name", sa.String(length=200), nullable=False),
        sa.Column("company_name", sa.String(length=200), nullable=False),
        sa.Column("advisor_id", sa.Uuid(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_internships_student_id", "internships", ["student_id"])
    op.create_index("ix_internships_status", "internships", ["status"])

    op.create_table(
        "lecturers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("nip", sa.String(length=50), nullable=False),
        sa.Column("specialization", sa.String(length=200), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_notifications_user_created", "notifications", ["user_id", "created_at"]
    )

    op.create_table(
        "notification_attachments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("notification_id", sa.Uuid(), nullable=False),
        sa.Column("filename", sa.String(length=255), nullable=False),
        sa.Column("mime_type", sa.String(length=255), nullable=False),
        sa.Column("content", sa.LargeBinary(), nullable=False),
        sa.ForeignKeyConstraint(
            ["notification_id"], ["notifications.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_notification_attachments_notification_id",
        "notification_attachments",
        ["notification_id"],
    )

    op.create_table(
        "document_templates",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("content", sa.LargeBinary(), nullable=False),
        sa.Column(
            "last_modified",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "requirements",
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("type"),
    )


def downgrade() -> None:
    """Drop all portal tables."""
    op.drop_table("requirements")
    op.drop_table("document_templates")
    op.drop_index(
        "ix_notification_attachments_notification_id", table_name="notification_attachments"
    )
    op.drop_table("notification_attachments")
    op.drop_index("ix_notifications_user_created", table_name="notifications")
    op.drop_table("notifications")
    op.drop_table("lecturers")
    op.drop_index("ix_internships_status", table_name="internships")
    op.drop_index("ix_internships_student_id", table_name="internships")
    op.drop_table("internships")
    op.drop_index("ix_thesis_defenses_status", table_name="thesis_defenses")
    op.drop_index("ix_thesis_defenses_student_id", table_name="thesis_defenses")
    op.drop_table("thesis_defenses")
    op.drop_index("ix_seminars_status", table_name="seminars")
    op.drop_index("ix_seminars_student_type", table_name="seminars")
    op.drop_table("seminars")
    op.drop_index("ix_thesis_registrations_status", table_name="thesis_registrations")
    op.drop_index("ix_thesis_registrations_student_id", table_name="thesis_registrations")
    op.drop_table("thesis_registrations")
    op.drop_index("ix_users_google_id", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    sa.Enum(name="user_role").drop(op.get_bind(), checkfirst=True)
