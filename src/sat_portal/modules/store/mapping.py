"""
Entity <-> Row Mapping

Each entity kind declares how its application fields map onto store
columns as a table of ``FieldMapping`` triples. ``to_row`` and
``from_row`` are driven entirely by that table, so adding a field means
adding one line here. ``uncovered_fields`` lets tests prove the table is
total.
"""

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel

from sat_portal.core.database import Base
from sat_portal.modules.store.models import (
    ApplicationStatus,
    DocumentTemplateRow,
    InternshipRow,
    LecturerRow,
    NotificationAttachmentRow,
    NotificationRow,
    RequirementRow,
    RequirementType,
    SeminarRow,
    SeminarType,
    ThesisDefenseRow,
    ThesisRegistrationRow,
)
from sat_portal.modules.store.schemas import (
    DocumentTemplate,
    InternshipRegistration,
    Lecturer,
    Notification,
    NotificationAttachment,
    PendingFile,
    Requirement,
    SeminarRegistration,
    StoredFile,
    ThesisDefense,
    ThesisRegistration,
)


@dataclass(frozen=True)
class Transform:
    """A pair of functions converting a value to (dump) and from (load) the store."""

    dump: Callable[[Any], Any]
    load: Callable[[Any], Any]


def _same(value: Any) -> Any:
    return value


def _dump_uuid(value: str | None) -> uuid.UUID | None:
    if value is None or value == "":
        return None
    return uuid.UUID(value)


def _load_uuid(value: uuid.UUID | None) -> str | None:
    return str(value) if value is not None else None


def _dump_file(value: PendingFile | StoredFile | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, PendingFile):
        raise ValueError(f"{value.filename} must be uploaded before it can be stored")
    return value.url


def _load_file(value: str | None) -> StoredFile | None:
    return StoredFile(url=value) if value else None


def enum_transform(enum_cls: type[Enum]) -> Transform:
    return Transform(dump=lambda member: member.value, load=enum_cls)


IDENTITY = Transform(_same, _same)
UUID_REF = Transform(_dump_uuid, _load_uuid)
FILE_URL = Transform(_dump_file, _load_file)
STATUS = enum_transform(ApplicationStatus)


@dataclass(frozen=True)
class FieldMapping:
    app_field: str
    store_field: str
    transform: Transform = IDENTITY


def fields(*entries: str | tuple) -> tuple[FieldMapping, ...]:
    """Build mappings; a bare name maps to the column of the same name."""
    result = []
    for entry in entries:
        if isinstance(entry, str):
            result.append(FieldMapping(entry, entry))
        else:
            result.append(FieldMapping(*entry))
    return tuple(result)


@dataclass(frozen=True)
class EntityMapping:
    """Declarative mapping between one entity class and one table."""

    kind: str
    entity_cls: type[BaseModel]
    model: type[Base]
    fields: tuple[FieldMapping, ...]
    upload_folder: str | None = None
    # Entity fields persisted outside this table
    related: tuple[str, ...] = field(default=())

    @property
    def primary_key(self) -> FieldMapping:
        pk_name = self.model.__mapper__.primary_key[0].name
        return next(fm for fm in self.fields if fm.store_field == pk_name)

    @property
    def file_fields(self) -> tuple[FieldMapping, ...]:
        return tuple(fm for fm in self.fields if fm.transform is FILE_URL)

    def field_for(self, app_field: str) -> FieldMapping:
        for fm in self.fields:
            if fm.app_field == app_field:
                return fm
        raise KeyError(f"{self.kind} has no field {app_field!r}")

    def to_row(self, entity: BaseModel, exclude: set[str] | None = None) -> dict[str, Any]:
        """Column values for ``entity``, skipping the app fields in ``exclude``."""
        exclude = exclude or set()
        return {
            fm.store_field: fm.transform.dump(getattr(entity, fm.app_field))
            for fm in self.fields
            if fm.app_field not in exclude
        }

    def from_row(self, row: Base, **related: Any) -> BaseModel:
        values = {fm.app_field: fm.transform.load(getattr(row, fm.store_field)) for fm in self.fields}
        values.update(related)
        return self.entity_cls(**values)

    def uncovered_fields(self) -> set[str]:
        """Entity fields that neither this table nor a related table persists."""
        mapped = {fm.app_field for fm in self.fields} | set(self.related)
        return set(self.entity_cls.model_fields) - mapped


THESIS = EntityMapping(
    kind="thesis",
    entity_cls=ThesisRegistration,
    model=ThesisRegistrationRow,
    fields=fields(
        ("id", "id", UUID_REF),
        ("student_id", "student_id", UUID_REF),
        "student_name",
        "title",
        ("advisor1_id", "advisor1_id", UUID_REF),
        ("advisor2_id", "advisor2_id", UUID_REF),
        ("status", "status", STATUS),
    ),
)

SEMINAR = EntityMapping(
    kind="seminar",
    entity_cls=SeminarRegistration,
    model=SeminarRow,
    upload_folder="seminars",
    fields=fields(
        ("id", "id", UUID_REF),
        ("type", "type", enum_transform(SeminarType)),
        ("student_id", "student_id", UUID_REF),
        "student_name",
        "title",
        ("file_report", "file_report_url", FILE_URL),
        ("advisor1_id", "advisor1_id", UUID_REF),
        ("advisor2_id", "advisor2_id", UUID_REF),
        "scheduled_date",
        "scheduled_time",
        "scheduled_room",
        ("examiner1_id", "examiner1_id", UUID_REF),
        ("examiner2_id", "examiner2_id", UUID_REF),
        ("status", "status", STATUS),
    ),
)

DEFENSE = EntityMapping(
    kind="defense",
    entity_cls=ThesisDefense,
    model=ThesisDefenseRow,
    upload_folder="defenses",
    fields=fields(
        ("id", "id", UUID_REF),
        ("thesis_id", "thesis_id", UUID_REF),
        ("student_id", "student_id", UUID_REF),
        "student_name",
        ("file_fixed", "file_fixed_url", FILE_URL),
        ("file_plagiarism", "file_plagiarism_url", FILE_URL),
        ("file_transcript", "file_transcript_url", FILE_URL),
        "sks_count",
        "admin_requirements_met",
        ("examiner1_id", "examiner1_id", UUID_REF),
        ("examiner2_id", "examiner2_id", UUID_REF),
        "defense_date",
        "defense_time",
        "defense_room",
        "letter_number",
        ("status", "status", STATUS),
    ),
)

INTERNSHIP = EntityMapping(
    kind="internship",
    entity_cls=InternshipRegistration,
    model=InternshipRow,
    fields=fields(
        ("id", "id", UUID_REF),
        ("student_id", "student_id", UUID_REF),
        "student_name",
        "company_name",
        ("advisor_id", "advisor_id", UUID_REF),
        ("status", "status", STATUS),
    ),
)

LECTURER = EntityMapping(
    kind="lecturer",
    entity_cls=Lecturer,
    model=LecturerRow,
    fields=fields(("id", "id", UUID_REF), "name", "nip", "specialization"),
)

NOTIFICATION = EntityMapping(
    kind="notification",
    entity_cls=Notification,
    model=NotificationRow,
    fields=fields(
        ("id", "id", UUID_REF),
        ("user_id", "user_id", UUID_REF),
        "subject",
        "message",
        ("timestamp", "created_at"),
        "is_read",
    ),
    related=("attachments",),
)

ATTACHMENT = EntityMapping(
    kind="attachment",
    entity_cls=NotificationAttachment,
    model=NotificationAttachmentRow,
    fields=fields(("id", "id", UUID_REF), "filename", "mime_type", "content"),
)

TEMPLATE = EntityMapping(
    kind="template",
    entity_cls=DocumentTemplate,
    model=DocumentTemplateRow,
    fields=fields(("id", "id", UUID_REF), "name", "content", "last_modified"),
)

REQUIREMENT = EntityMapping(
    kind="requirement",
    entity_cls=Requirement,
    model=RequirementRow,
    fields=fields(("type", "type", enum_transform(RequirementType)), "content"),
)

# Kinds reachable through the generic list/save/delete operations
ENTITY_MAPPINGS: dict[str, EntityMapping] = {
    mapping.kind: mapping for mapping in (THESIS, SEMINAR, DEFENSE, INTERNSHIP, LECTURER)
}

ALL_MAPPINGS: tuple[EntityMapping, ...] = (
    *ENTITY_MAPPINGS.values(),
    NOTIFICATION,
    ATTACHMENT,
    TEMPLATE,
    REQUIREMENT,
)


def mapping_for(kind: str | type[BaseModel] | BaseModel) -> EntityMapping:
    """Look up the mapping by kind name, entity class or entity instance."""
    if isinstance(kind, str):
        try:
            return ENTITY_MAPPINGS[kind]
        except KeyError:
            raise KeyError(f"Unknown entity kind: {kind}") from None
    entity_cls = kind if isinstance(kind, type) else type(kind)
    for mapping in ALL_MAPPINGS:
        if mapping.entity_cls is entity_cls:
            return mapping
    raise KeyError(f"No store mapping for {entity_cls.__name__}")
