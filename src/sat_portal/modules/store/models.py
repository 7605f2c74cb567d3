"""
Store Models

Tables backing the portal entities. Column names are snake_case; the
application shape lives in ``schemas.py`` and the translation between
the two in ``mapping.py``.

Statuses are stored verbatim as strings ("Draft", "Diajukan", ...) so the
tables stay readable by other clients of the same database.
"""

import enum
import uuid
from datetime import date, datetime, time

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    String,
    Text,
    Time,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from sat_portal.core.database import Base


class ApplicationStatus(str, enum.Enum):
    """Lifecycle status shared by every submission kind."""

    DRAFT = "Draft"
    SUBMITTED = "Diajukan"
    APPROVED = "Disetujui"
    REJECTED = "Ditolak"
    SCHEDULED = "Dijadwalkan"


class SeminarType(str, enum.Enum):
    """Seminar stage: proposal seminar (Sempro) or results seminar (Semhas)."""

    PROPOSAL = "PROPOSAL"
    HASIL = "HASIL"


class RequirementType(str, enum.Enum):
    """Stage a requirement text belongs to."""

    SEMPRO = "SEMPRO"
    SEMHAS = "SEMHAS"
    SIDANG = "SIDANG"


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class ThesisRegistrationRow(TimestampMixin, Base):
    """A student's thesis proposal (title and two advisors)."""

    __tablename__ = "thesis_registrations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    student_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    advisor1_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    advisor2_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Draft", index=True)


class SeminarRow(TimestampMixin, Base):
    """Seminar registration (Sempro / Semhas) with its schedule."""

    __tablename__ = "seminars"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    student_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    file_report_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    advisor1_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    advisor2_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    scheduled_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    scheduled_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    scheduled_room: Mapped[str | None] = mapped_column(String(100), nullable=True)
    examiner1_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    examiner2_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Draft")

    __table_args__ = (
        Index("ix_seminars_student_type", "student_id", "type"),
        Index("ix_seminars_status", "status"),
    )


class ThesisDefenseRow(TimestampMixin, Base):
    """Final defense (Sidang) registration."""

    __tablename__ = "thesis_defenses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    thesis_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    student_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    file_fixed_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_plagiarism_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_transcript_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    sks_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    admin_requirements_met: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    examiner1_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    examiner2_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    defense_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    defense_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    defense_room: Mapped[str | None] = mapped_column(String(100), nullable=True)
    letter_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Draft", index=True)


class InternshipRow(TimestampMixin, Base):
    """Internship (KP / Magang) registration."""

    __tablename__ = "internships"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    student_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    company_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    advisor_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Draft", index=True)


class LecturerRow(TimestampMixin, Base):
    """Lecturer directory entry."""

    __tablename__ = "lecturers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    nip: Mapped[str] = mapped_column(String(50), nullable=False)
    specialization: Mapped[str | None] = mapped_column(String(200), nullable=True)


class NotificationRow(Base):
    """A message addressed to one user."""

    __tablename__ = "notifications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (Index("ix_notifications_user_created", "user_id", "created_at"),)


class NotificationAttachmentRow(Base):
    """Binary attachment of a notification."""

    __tablename__ = "notification_attachments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    notification_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("notifications.id", ondelete="CASCADE"), nullable=False, index=True
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)


class DocumentTemplateRow(Base):
    """The master .docx template. At most one row exists."""

    __tablename__ = "document_templates"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    last_modified: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class RequirementRow(Base):
    """Requirement text for one stage."""

    __tablename__ = "requirements"

    type: Mapped[str] = mapped_column(String(20), primary_key=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
