"""
Store Repository

The data access facade. Every read and write of portal entities goes
through these functions; none of them contain business rules.

Design Principles:
- Entities in, entities out: callers never see ORM rows
- Placeholder ids insert, durable ids update in place
- Pending files are uploaded before the row is written; a failed upload
  leaves the stored URL untouched
- Any store failure rolls back and surfaces as ``RemoteError``
- Writes commit on their own unless ``commit=False``; the caller then
  finishes the unit of work with ``commit_changes``
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.core.exceptions import NotFoundError, RemoteError, ValidationError
from sat_portal.core.storage import FileStorage
from sat_portal.modules.store.mapping import (
    ATTACHMENT,
    NOTIFICATION,
    REQUIREMENT,
    TEMPLATE,
    EntityMapping,
    mapping_for,
)
from sat_portal.modules.store.models import (
    DocumentTemplateRow,
    NotificationAttachmentRow,
    NotificationRow,
    RequirementRow,
    RequirementType,
)
from sat_portal.modules.store.schemas import (
    DocumentTemplate,
    Notification,
    NotificationAttachment,
    PendingFile,
    Requirement,
    StoredFile,
    is_placeholder_id,
)

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)


@dataclass
class SaveResult:
    """Outcome of ``save_entity``: the persisted entity and any files that failed to upload."""

    entity: BaseModel
    failed_uploads: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed_uploads


def _parse_id(kind: str, entity_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(entity_id)
    except ValueError:
        raise NotFoundError(kind, entity_id) from None


async def _fail(db: AsyncSession, action: str, error: SQLAlchemyError) -> RemoteError:
    logger.error(f"[Store] {action} failed: {error}")
    await db.rollback()
    return RemoteError()


async def commit_changes(db: AsyncSession, action: str) -> None:
    """Commit writes staged with ``commit=False``."""
    try:
        await db.commit()
    except SQLAlchemyError as e:
        raise await _fail(db, action, e) from e


def _row_values(mapping: EntityMapping, entity: BaseModel, exclude: set[str]) -> dict[str, Any]:
    try:
        return mapping.to_row(entity, exclude=exclude)
    except ValueError as e:
        raise ValidationError(f"Invalid {mapping.kind} data: {e}") from e


# ============================================
# Generic entities
# ============================================


async def list_entities(db: AsyncSession, kind: str, **filters: Any) -> list[BaseModel]:
    """
    List entities of one kind, oldest first.

    Filters use entity attribute names (``student_id=...``,
    ``status=ApplicationStatus.SUBMITTED``) and are translated to
    columns through the mapping.
    """
    mapping = mapping_for(kind)
    query = select(mapping.model)
    for app_field, value in filters.items():
        fm = mapping.field_for(app_field)
        try:
            stored = fm.transform.dump(value)
        except ValueError:
            # A placeholder can never match a stored row
            return []
        query = query.where(getattr(mapping.model, fm.store_field) == stored)
    if hasattr(mapping.model, "created_at"):
        query = query.order_by(mapping.model.created_at)

    try:
        result = await db.execute(query)
    except SQLAlchemyError as e:
        raise await _fail(db, f"list {kind}", e) from e
    return [mapping.from_row(row) for row in result.scalars().all()]


async def get_entity(db: AsyncSession, kind: str, entity_id: str) -> BaseModel | None:
    """Get one entity by id, or None when it does not exist (or was never saved)."""
    mapping = mapping_for(kind)
    if is_placeholder_id(entity_id):
        return None
    try:
        row = await db.get(mapping.model, uuid.UUID(entity_id))
    except SQLAlchemyError as e:
        raise await _fail(db, f"get {kind} {entity_id}", e) from e
    return mapping.from_row(row) if row else None


async def upload_files(
    entity: EntityT,
    storage: FileStorage | None,
    previous: BaseModel | None = None,
) -> tuple[EntityT, list[str]]:
    """
    Upload every pending file of ``entity`` to its kind's folder.

    A file whose upload fails falls back to the reference held by
    ``previous`` (the stored version of the entity), or None.

    Returns:
        The entity with stored file references, and the names of the
        fields whose upload failed
    """
    mapping = mapping_for(entity)
    updates: dict[str, StoredFile | None] = {}
    failed: list[str] = []
    for fm in mapping.file_fields:
        value = getattr(entity, fm.app_field)
        if not isinstance(value, PendingFile):
            continue
        url = None
        if storage is not None:
            url = await storage.upload(
                value.content,
                value.filename,
                mapping.upload_folder or mapping.kind,
                value.content_type,
            )
        if url is None:
            failed.append(fm.app_field)
            fallback = getattr(previous, fm.app_field, None) if previous is not None else None
            updates[fm.app_field] = fallback if isinstance(fallback, StoredFile) else None
        else:
            updates[fm.app_field] = StoredFile(url=url)

    if failed:
        logger.warning(f"[Store] {mapping.kind} {entity.id}: upload failed for {failed}")
    return entity.model_copy(update=updates), failed


async def save_entity(
    db: AsyncSession,
    entity: EntityT,
    storage: FileStorage | None = None,
    commit: bool = True,
) -> SaveResult:
    """
    Create or update an entity.

    Pending files are uploaded first. A file whose upload fails is left out
    of the write, so an existing row keeps its previous URL; its name is
    reported in ``SaveResult.failed_uploads``. With ``commit=False`` the
    row is only flushed.

    Returns:
        SaveResult whose entity carries the durable id and stored file URLs
    """
    mapping = mapping_for(entity)
    entity, failed = await upload_files(entity, storage)
    pk = mapping.primary_key
    values = _row_values(mapping, entity, exclude={pk.app_field, *failed})

    try:
        row = None
        if not is_placeholder_id(entity.id):
            row = await db.get(mapping.model, uuid.UUID(entity.id))
            if row is None:
                row = mapping.model(id=uuid.UUID(entity.id))
                db.add(row)
        else:
            row = mapping.model()
            db.add(row)

        for column, value in values.items():
            setattr(row, column, value)

        if commit:
            await db.commit()
        else:
            await db.flush()
        await db.refresh(row)
    except SQLAlchemyError as e:
        raise await _fail(db, f"save {mapping.kind}", e) from e

    saved = mapping.from_row(row)
    logger.info(f"[Store] Saved {mapping.kind} {saved.id}")
    return SaveResult(entity=saved, failed_uploads=failed)


async def delete_entity(db: AsyncSession, kind: str, entity_id: str) -> None:
    """
    Delete an entity by id.

    Raises:
        NotFoundError: If no such entity exists
    """
    mapping = mapping_for(kind)
    row_id = _parse_id(kind, entity_id)
    try:
        result = await db.execute(delete(mapping.model).where(mapping.model.id == row_id))
        await db.commit()
    except SQLAlchemyError as e:
        raise await _fail(db, f"delete {kind} {entity_id}", e) from e
    if result.rowcount == 0:
        raise NotFoundError(kind, entity_id)
    logger.info(f"[Store] Deleted {kind} {entity_id}")


# ============================================
# Notifications
# ============================================


async def insert_notification(
    db: AsyncSession, notification: Notification, commit: bool = True
) -> Notification:
    """Persist a notification and its attachments in one transaction."""
    values = _row_values(NOTIFICATION, notification, exclude={"id"})
    row = NotificationRow(**values)
    try:
        db.add(row)
        await db.flush()
        attachment_rows = []
        for attachment in notification.attachments:
            attachment_row = NotificationAttachmentRow(
                notification_id=row.id,
                **ATTACHMENT.to_row(attachment, exclude={"id"}),
            )
            db.add(attachment_row)
            attachment_rows.append(attachment_row)
        if commit:
            await db.commit()
        else:
            await db.flush()
    except SQLAlchemyError as e:
        raise await _fail(db, "insert notification", e) from e

    return NOTIFICATION.from_row(
        row, attachments=[ATTACHMENT.from_row(a) for a in attachment_rows]
    )


async def list_notifications(db: AsyncSession, user_id: str) -> list[Notification]:
    """All notifications of a user, newest first, with attachments."""
    if is_placeholder_id(user_id):
        return []
    try:
        result = await db.execute(
            select(NotificationRow)
            .where(NotificationRow.user_id == uuid.UUID(user_id))
            .order_by(NotificationRow.created_at.desc())
        )
        rows = list(result.scalars().all())
        attachments: dict[uuid.UUID, list[NotificationAttachment]] = {}
        if rows:
            attachment_result = await db.execute(
                select(NotificationAttachmentRow).where(
                    NotificationAttachmentRow.notification_id.in_([row.id for row in rows])
                )
            )
            for attachment_row in attachment_result.scalars().all():
                attachments.setdefault(attachment_row.notification_id, []).append(
                    ATTACHMENT.from_row(attachment_row)
                )
    except SQLAlchemyError as e:
        raise await _fail(db, f"list notifications for {user_id}", e) from e

    return [
        NOTIFICATION.from_row(row, attachments=attachments.get(row.id, [])) for row in rows
    ]


async def set_notification_read(db: AsyncSession, notification_id: str) -> None:
    """
    Flip the read flag on. Already-read notifications are left as they are.

    Raises:
        NotFoundError: If the notification does not exist
    """
    row_id = _parse_id("Notification", notification_id)
    try:
        row = await db.get(NotificationRow, row_id)
        if row is None:
            raise NotFoundError("Notification", notification_id)
        if not row.is_read:
            row.is_read = True
            await db.commit()
    except SQLAlchemyError as e:
        raise await _fail(db, f"mark notification {notification_id} read", e) from e


async def get_notification_owner(db: AsyncSession, notification_id: str) -> str | None:
    """User id a notification is addressed to, or None if it does not exist."""
    row_id = _parse_id("Notification", notification_id)
    try:
        row = await db.get(NotificationRow, row_id)
    except SQLAlchemyError as e:
        raise await _fail(db, f"get notification {notification_id}", e) from e
    return str(row.user_id) if row else None


async def get_attachment(
    db: AsyncSession, notification_id: str, attachment_id: str
) -> NotificationAttachment:
    """
    Get one attachment of a notification.

    Raises:
        NotFoundError: If the attachment does not belong to the notification
    """
    parent_id = _parse_id("Notification", notification_id)
    row_id = _parse_id("Attachment", attachment_id)
    try:
        row = await db.get(NotificationAttachmentRow, row_id)
    except SQLAlchemyError as e:
        raise await _fail(db, f"get attachment {attachment_id}", e) from e
    if row is None or row.notification_id != parent_id:
        raise NotFoundError("Attachment", attachment_id)
    return ATTACHMENT.from_row(row)


# ============================================
# Master template
# ============================================


async def get_template(db: AsyncSession) -> DocumentTemplate | None:
    """The master template, or None if none was uploaded."""
    try:
        result = await db.execute(
            select(DocumentTemplateRow).order_by(DocumentTemplateRow.last_modified.desc()).limit(1)
        )
        row = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        raise await _fail(db, "get template", e) from e
    return TEMPLATE.from_row(row) if row else None


async def replace_template(db: AsyncSession, name: str, content: bytes) -> DocumentTemplate:
    """Replace the master template wholesale."""
    template = DocumentTemplate(name=name, content=content, last_modified=datetime.now(UTC))
    try:
        await db.execute(delete(DocumentTemplateRow))
        row = DocumentTemplateRow(**TEMPLATE.to_row(template, exclude={"id"}))
        db.add(row)
        await db.commit()
    except SQLAlchemyError as e:
        raise await _fail(db, "replace template", e) from e
    logger.info(f"[Store] Master template replaced with {name} ({len(content)} bytes)")
    return TEMPLATE.from_row(row)


# ============================================
# Requirements
# ============================================


async def get_requirement(db: AsyncSession, req_type: RequirementType) -> Requirement | None:
    try:
        row = await db.get(RequirementRow, req_type.value)
    except SQLAlchemyError as e:
        raise await _fail(db, f"get requirement {req_type.value}", e) from e
    return REQUIREMENT.from_row(row) if row else None


async def save_requirement(db: AsyncSession, requirement: Requirement) -> Requirement:
    """Upsert the text for one stage."""
    values = REQUIREMENT.to_row(requirement)
    try:
        row = await db.get(RequirementRow, values["type"])
        if row is None:
            row = RequirementRow(**values)
            db.add(row)
        else:
            row.content = values["content"]
        await db.commit()
    except SQLAlchemyError as e:
        raise await _fail(db, f"save requirement {requirement.type.value}", e) from e
    return REQUIREMENT.from_row(row)
