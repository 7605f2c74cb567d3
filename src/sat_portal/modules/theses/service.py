"""
Theses Service Layer

Orchestrates the thesis track: proposal, seminars (Sempro / Semhas) and
the final defense (Sidang).

Every action reads the entity fresh from the store, applies one workflow
transition and writes the complete entity back. Concurrent edits of the
same submission are not detected; the last write wins.

Scheduling a defense additionally renders the invitation document from
the master template and sends it to the student as a notification
attachment. A missing or broken template does not undo the schedule; the
notification is then sent without the attachment.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.core.auth import CurrentUser
from sat_portal.core.exceptions import NotFoundError, RenderError, TemplateError
from sat_portal.core.storage import FileStorage
from sat_portal.modules.documents import service as documents
from sat_portal.modules.documents.renderer import DOCX_MIME_TYPE
from sat_portal.modules.notifications import dispatcher
from sat_portal.modules.store import repository
from sat_portal.modules.store.models import ApplicationStatus, SeminarType
from sat_portal.modules.store.repository import SaveResult
from sat_portal.modules.store.schemas import (
    NotificationAttachment,
    PendingFile,
    SeminarRegistration,
    ThesisDefense,
    ThesisRegistration,
    is_placeholder_id,
)
from sat_portal.modules.theses.schemas import ProposalSubmit
from sat_portal.modules.workflow import engine
from sat_portal.modules.workflow.schemas import ScheduleRequest

logger = logging.getLogger(__name__)

DEFENSE_NOTIFICATION_SUBJECT = "Undangan & Berkas Sidang Tugas Akhir"

DEFENSE_FILE_FIELDS = ("file_fixed", "file_plagiarism", "file_transcript")


@dataclass
class DefenseScheduleResult:
    defense: ThesisDefense
    document_attached: bool
    notification_id: str | None = None
    warning: str | None = None


def defense_notification_message(defense: ThesisDefense) -> str:
    scheduled_date = defense.defense_date.isoformat() if defense.defense_date else "-"
    scheduled_time = f"{defense.defense_time:%H:%M}" if defense.defense_time else "-"
    return (
        f"Yth. {defense.student_name},\n\n"
        f"Sidang Anda dijadwalkan pada {scheduled_date}, Pukul {scheduled_time}.\n\n"
        "Silahkan unduh dokumen terlampir (Undangan & Berita Acara) yang telah "
        "digenerate dari Template sistem.\n"
        "Harap dicetak dan dibawa saat sidang."
    )


async def _require(db: AsyncSession, kind: str, entity_id: str):
    entity = await repository.get_entity(db, kind, entity_id)
    if entity is None:
        raise NotFoundError(kind.capitalize(), entity_id)
    return entity


# ============================================
# Student: current submissions
# ============================================


async def get_current_proposal(db: AsyncSession, user: CurrentUser) -> ThesisRegistration:
    """The student's stored proposal, or a fresh unsaved draft."""
    proposals = await repository.list_entities(db, "thesis", student_id=user.id)
    if proposals:
        return proposals[0]
    return ThesisRegistration(student_id=user.id, student_name=user.name)


async def get_current_seminar(
    db: AsyncSession, user: CurrentUser, seminar_type: SeminarType
) -> SeminarRegistration:
    """
    The student's seminar of one type, or a draft.

    A draft snapshots title and advisors from the current proposal.
    """
    seminars = await repository.list_entities(
        db, "seminar", student_id=user.id, type=seminar_type
    )
    if seminars:
        return seminars[0]

    proposal = await get_current_proposal(db, user)
    return SeminarRegistration(
        type=seminar_type,
        student_id=user.id,
        student_name=user.name,
        title=proposal.title,
        advisor1_id=proposal.advisor1_id,
        advisor2_id=proposal.advisor2_id,
    )


async def get_current_defense(db: AsyncSession, user: CurrentUser) -> ThesisDefense:
    """The student's defense, or a draft referencing the stored proposal."""
    defenses = await repository.list_entities(db, "defense", student_id=user.id)
    if defenses:
        return defenses[0]

    proposal = await get_current_proposal(db, user)
    return ThesisDefense(
        student_id=user.id,
        student_name=user.name,
        thesis_id=None if is_placeholder_id(proposal.id) else proposal.id,
    )


# ============================================
# Student: submissions
# ============================================


async def submit_proposal(
    db: AsyncSession, user: CurrentUser, data: ProposalSubmit
) -> ThesisRegistration:
    """
    Submit the thesis proposal.

    Raises:
        InvalidStatusTransitionError: If the proposal was already submitted
        ValidationError: If title or an advisor is missing
    """
    current = await get_current_proposal(db, user)
    draft = current.model_copy(
        update={
            "title": data.title.strip(),
            "advisor1_id": data.advisor1_id or None,
            "advisor2_id": data.advisor2_id or None,
            "student_name": current.student_name or user.name,
        }
    )
    submitted = engine.submit(draft)
    result = await repository.save_entity(db, submitted)
    logger.info(f"Proposal {result.entity.id} submitted by {user.id}")
    return result.entity


async def submit_seminar(
    db: AsyncSession,
    user: CurrentUser,
    seminar_type: SeminarType,
    file_report: PendingFile | None,
    storage: FileStorage | None,
) -> SaveResult:
    """
    Submit a seminar registration.

    Title and advisors are copied again from the current proposal so the
    seminar reflects the latest approved data.

    Raises:
        InvalidStatusTransitionError: If the seminar was already submitted
        ValidationError: If no report file is available
    """
    current = await get_current_seminar(db, user, seminar_type)
    proposal = await get_current_proposal(db, user)

    draft = current.model_copy(
        update={
            "title": proposal.title,
            "advisor1_id": proposal.advisor1_id,
            "advisor2_id": proposal.advisor2_id,
            "file_report": file_report or current.file_report,
        }
    )
    # Validate before spending uploads on it
    engine.submit(draft)

    draft, failed = await repository.upload_files(draft, storage, previous=current)
    submitted = engine.submit(draft)
    result = await repository.save_entity(db, submitted)
    logger.info(f"Seminar {seminar_type.value} {result.entity.id} submitted by {user.id}")
    return SaveResult(entity=result.entity, failed_uploads=failed)


async def submit_defense(
    db: AsyncSession,
    user: CurrentUser,
    sks_count: int,
    admin_requirements_met: bool,
    files: Mapping[str, PendingFile | None],
    storage: FileStorage | None,
) -> SaveResult:
    """
    Submit the final defense registration.

    Args:
        files: New uploads keyed by ``file_fixed``, ``file_plagiarism`` and
            ``file_transcript``; fields without a new upload keep their
            stored file

    Raises:
        InvalidStatusTransitionError: If the defense was already submitted
        ValidationError: If fewer than 138 credits were earned or a file is missing
    """
    current = await get_current_defense(db, user)
    updates: dict = {
        "sks_count": sks_count,
        "admin_requirements_met": admin_requirements_met,
    }
    for name in DEFENSE_FILE_FIELDS:
        if files.get(name) is not None:
            updates[name] = files[name]
    if current.thesis_id is None:
        proposal = await get_current_proposal(db, user)
        if not is_placeholder_id(proposal.id):
            updates["thesis_id"] = proposal.id

    draft = current.model_copy(update=updates)
    # Validate before spending uploads on it
    engine.submit(draft)

    draft, failed = await repository.upload_files(draft, storage, previous=current)
    submitted = engine.submit(draft)
    result = await repository.save_entity(db, submitted)
    logger.info(f"Defense {result.entity.id} submitted by {user.id} ({sks_count} SKS)")
    return SaveResult(entity=result.entity, failed_uploads=failed)


# ============================================
# Lecturer: review and scheduling
# ============================================


async def list_pending(db: AsyncSession, kind: str, **filters) -> list:
    """Submissions of one kind waiting for a lecturer."""
    return await repository.list_entities(
        db, kind, status=ApplicationStatus.SUBMITTED, **filters
    )


async def list_scheduled_defenses(db: AsyncSession) -> list[ThesisDefense]:
    return await repository.list_entities(db, "defense", status=ApplicationStatus.SCHEDULED)


async def validate_proposal(
    db: AsyncSession, proposal_id: str, approve: bool
) -> ThesisRegistration:
    """
    Approve or reject a submitted proposal.

    Raises:
        NotFoundError: If the proposal does not exist
        InvalidStatusTransitionError: If it is not waiting for review
    """
    proposal = await _require(db, "thesis", proposal_id)
    validated = engine.validate(proposal, approve)
    result = await repository.save_entity(db, validated)
    logger.info(f"Proposal {proposal_id} {validated.status.value}")
    return result.entity


async def schedule_seminar(
    db: AsyncSession, seminar_id: str, request: ScheduleRequest
) -> SeminarRegistration:
    """
    Schedule a submitted seminar.

    Raises:
        NotFoundError: If the seminar does not exist
        InvalidStatusTransitionError: If it is not Submitted
        IncompleteScheduleError: If date, time or room is missing
    """
    seminar = await _require(db, "seminar", seminar_id)
    scheduled = engine.schedule(seminar, request)
    result = await repository.save_entity(db, scheduled)
    logger.info(
        f"Seminar {seminar_id} scheduled on {request.date} {request.time} in {request.room}"
    )
    return result.entity


async def schedule_defense(
    db: AsyncSession, defense_id: str, request: ScheduleRequest
) -> DefenseScheduleResult:
    """
    Schedule a submitted defense, generate its invitation and notify the student.

    The schedule and the notification are committed together; if either
    write fails nothing is stored and the defense stays Submitted.

    Raises:
        NotFoundError: If the defense does not exist
        InvalidStatusTransitionError: If it is not Submitted
        IncompleteScheduleError: If date, first examiner or letter number is missing
        RemoteError: If the store rejected the schedule or the notification
    """
    defense = await _require(db, "defense", defense_id)
    scheduled = engine.schedule(defense, request)

    attachments: list[NotificationAttachment] = []
    warning = None
    try:
        document = await documents.generate_defense_document(db, scheduled)
        attachments.append(
            NotificationAttachment(
                filename=f"{scheduled.student_name}_Undangan_Sidang.docx",
                mime_type=DOCX_MIME_TYPE,
                content=document,
            )
        )
    except (TemplateError, RenderError) as e:
        warning = f"Dokumen tidak dapat dibuat: {e.message}"
        logger.warning(f"Defense {defense_id} scheduled without document: {e.message}")

    try:
        saved = (await repository.save_entity(db, scheduled, commit=False)).entity
        notification = await dispatcher.notify(
            db,
            saved.student_id,
            DEFENSE_NOTIFICATION_SUBJECT,
            defense_notification_message(saved),
            attachments,
            commit=False,
        )
        await repository.commit_changes(db, f"schedule defense {defense_id}")
    except Exception:
        await db.rollback()
        raise
    logger.info(f"Defense {defense_id} scheduled on {request.date} ({request.letter_number})")

    await dispatcher.send_email_copy(db, notification)
    return DefenseScheduleResult(
        defense=saved,
        document_attached=bool(attachments),
        notification_id=notification.id,
        warning=warning,
    )
