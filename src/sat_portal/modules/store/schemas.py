"""
Store Schemas

Pydantic models for the application-side shape of every entity. JSON
field names are camelCase (``studentId``, ``fileReport``); Python
attributes are snake_case.

Entity ids are strings. An id that does not parse as a UUID is a
placeholder generated locally for an entity that was never persisted.
"""

import uuid
from datetime import UTC, date, datetime, time
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sat_portal.modules.store.models import ApplicationStatus, RequirementType, SeminarType


def new_placeholder_id() -> str:
    """Generate a locally unique, non-UUID id for an unsaved entity."""
    return f"tmp-{uuid.uuid4().hex[:12]}"


def is_placeholder_id(entity_id: str | None) -> bool:
    """True when the id was not issued by the store."""
    if not entity_id:
        return True
    try:
        uuid.UUID(entity_id)
    except ValueError:
        return True
    return False


class EntityModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )


class PendingFile(EntityModel):
    """A file selected by the user but not yet uploaded."""

    kind: Literal["pending"] = "pending"
    filename: str
    content: bytes
    content_type: str | None = None


class StoredFile(EntityModel):
    """A durable reference to an uploaded file."""

    kind: Literal["stored"] = "stored"
    url: str


FileRef = Annotated[PendingFile | StoredFile, Field(discriminator="kind")]


class ThesisRegistration(EntityModel):
    id: str = Field(default_factory=new_placeholder_id)
    student_id: str
    student_name: str = ""
    title: str = ""
    advisor1_id: str | None = None
    advisor2_id: str | None = None
    status: ApplicationStatus = ApplicationStatus.DRAFT


class SeminarRegistration(EntityModel):
    id: str = Field(default_factory=new_placeholder_id)
    type: SeminarType
    student_id: str
    student_name: str = ""
    title: str = ""
    file_report: FileRef | None = None
    advisor1_id: str | None = None
    advisor2_id: str | None = None
    scheduled_date: date | None = None
    scheduled_time: time | None = None
    scheduled_room: str | None = None
    examiner1_id: str | None = None
    examiner2_id: str | None = None
    status: ApplicationStatus = ApplicationStatus.DRAFT


class ThesisDefense(EntityModel):
    id: str = Field(default_factory=new_placeholder_id)
    thesis_id: str | None = None
    student_id: str
    student_name: str = ""
    file_fixed: FileRef | None = None
    file_plagiarism: FileRef | None = None
    file_transcript: FileRef | None = None
    sks_count: int = Field(0, ge=0, description="Credits earned so far")
    admin_requirements_met: bool = False
    examiner1_id: str | None = None
    examiner2_id: str | None = None
    defense_date: date | None = None
    defense_time: time | None = None
    defense_room: str | None = None
    letter_number: str | None = None
    status: ApplicationStatus = ApplicationStatus.DRAFT


class InternshipRegistration(EntityModel):
    id: str = Field(default_factory=new_placeholder_id)
    student_id: str
    student_name: str = ""
    company_name: str = ""
    advisor_id: str | None = None
    status: ApplicationStatus = ApplicationStatus.DRAFT


class Lecturer(EntityModel):
    id: str = Field(default_factory=new_placeholder_id)
    name: str
    nip: str
    specialization: str | None = None


class NotificationAttachment(EntityModel):
    id: str = Field(default_factory=new_placeholder_id)
    filename: str
    mime_type: str
    content: bytes


class Notification(EntityModel):
    id: str = Field(default_factory=new_placeholder_id)
    user_id: str
    subject: str
    message: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    is_read: bool = False
    attachments: list[NotificationAttachment] = Field(default_factory=list)


class DocumentTemplate(EntityModel):
    id: str = Field(default_factory=new_placeholder_id)
    name: str
    content: bytes
    last_modified: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Requirement(EntityModel):
    type: RequirementType
    content: str
