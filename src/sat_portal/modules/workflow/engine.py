"""
Status Workflow Engine

Pure functions that move submissions through their lifecycle. They never
mutate the entity they are given; every successful call returns a new
copy with the new status (and, for scheduling, the schedule fields set
in the same copy).

Transitions:
    Proposal, Internship:  Draft -> Diajukan -> Disetujui | Ditolak
    Seminar, Defense:      Draft -> Diajukan -> Dijadwalkan

The current-state precondition is always checked before completeness,
so a submission in the wrong state reports the state problem first.
"""

import logging
from collections.abc import Iterable
from typing import TypeVar

from sat_portal.core.exceptions import (
    IncompleteScheduleError,
    InvalidStatusTransitionError,
    ValidationError,
)
from sat_portal.modules.store.models import ApplicationStatus
from sat_portal.modules.store.schemas import (
    InternshipRegistration,
    PendingFile,
    SeminarRegistration,
    ThesisDefense,
    ThesisRegistration,
)
from sat_portal.modules.workflow.schemas import ScheduleRequest

logger = logging.getLogger(__name__)

Submission = ThesisRegistration | SeminarRegistration | ThesisDefense | InternshipRegistration
SubmissionT = TypeVar(
    "SubmissionT", ThesisRegistration, SeminarRegistration, ThesisDefense, InternshipRegistration
)

MIN_DEFENSE_CREDITS = 138

_REVIEWED = {
    ApplicationStatus.DRAFT: [ApplicationStatus.SUBMITTED],
    ApplicationStatus.SUBMITTED: [ApplicationStatus.APPROVED, ApplicationStatus.REJECTED],
    ApplicationStatus.APPROVED: [],
    ApplicationStatus.REJECTED: [],
}

_SCHEDULED = {
    ApplicationStatus.DRAFT: [ApplicationStatus.SUBMITTED],
    ApplicationStatus.SUBMITTED: [ApplicationStatus.SCHEDULED],
    ApplicationStatus.SCHEDULED: [],
}

# Valid status transitions per submission kind
VALID_STATUS_TRANSITIONS: dict[type, dict[ApplicationStatus, list[ApplicationStatus]]] = {
    ThesisRegistration: _REVIEWED,
    InternshipRegistration: _REVIEWED,
    SeminarRegistration: _SCHEDULED,
    ThesisDefense: _SCHEDULED,
}

# Fields that must be present before a submission, with the message shown when not
REQUIRED_FIELDS: dict[type, tuple[tuple[str, ...], str]] = {
    ThesisRegistration: (
        ("title", "advisor1_id", "advisor2_id"),
        "Harap lengkapi judul dan pembimbing.",
    ),
    SeminarRegistration: (("file_report",), "Harap upload file laporan/proposal."),
    ThesisDefense: (
        ("file_fixed", "file_plagiarism", "file_transcript"),
        "Harap upload semua file.",
    ),
    InternshipRegistration: (("company_name", "advisor_id"), "Lengkapi data magang."),
}


def can_transition(kind: type, current: ApplicationStatus, new: ApplicationStatus) -> bool:
    """Check whether ``kind`` allows moving from ``current`` to ``new``."""
    return new in VALID_STATUS_TRANSITIONS.get(kind, {}).get(current, [])


def _transition(entity: SubmissionT, new_status: ApplicationStatus, **changes) -> SubmissionT:
    kind = type(entity)
    if not can_transition(kind, entity.status, new_status):
        raise InvalidStatusTransitionError(
            current_status=entity.status.value,
            new_status=new_status.value,
            valid=[s.value for s in VALID_STATUS_TRANSITIONS.get(kind, {}).get(entity.status, [])],
        )
    return entity.model_copy(update={**changes, "status": new_status})


def check_transition(entity: Submission, new_status: ApplicationStatus) -> None:
    """Raise InvalidStatusTransitionError unless the entity may move to ``new_status``."""
    _transition(entity, new_status)


def is_present(value) -> bool:
    """Blank strings and empty uploads count as absent."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, PendingFile):
        return bool(value.content)
    return True


def missing_fields(entity: Submission, required: Iterable[str]) -> list[str]:
    return [name for name in required if not is_present(getattr(entity, name))]


def submit(entity: SubmissionT, required_fields: Iterable[str] | None = None) -> SubmissionT:
    """
    Move a draft to Submitted.

    Args:
        entity: Submission in Draft status
        required_fields: Fields that must be present; defaults per kind

    Raises:
        InvalidStatusTransitionError: If the entity is not a draft
        ValidationError: If a credit gate or a required field is not met
    """
    check_transition(entity, ApplicationStatus.SUBMITTED)

    kind = type(entity)
    default_fields, message = REQUIRED_FIELDS[kind]

    if isinstance(entity, ThesisDefense) and entity.sks_count < MIN_DEFENSE_CREDITS:
        raise ValidationError(
            f"SKS belum mencukupi (Min {MIN_DEFENSE_CREDITS}).", missing_fields=["sks_count"]
        )

    required = default_fields if required_fields is None else tuple(required_fields)
    missing = missing_fields(entity, required)
    if missing:
        raise ValidationError(message, missing_fields=missing)

    logger.debug(f"{kind.__name__} {entity.id} submitted")
    return _transition(entity, ApplicationStatus.SUBMITTED)


def validate(entity: SubmissionT, approve: bool) -> SubmissionT:
    """
    Approve or reject a submitted proposal or internship.

    Raises:
        InvalidStatusTransitionError: If the entity is not Submitted or its
            kind is not reviewed this way
    """
    new_status = ApplicationStatus.APPROVED if approve else ApplicationStatus.REJECTED
    return _transition(entity, new_status)


def schedule(
    entity: SeminarRegistration | ThesisDefense, request: ScheduleRequest
) -> SeminarRegistration | ThesisDefense:
    """
    Schedule a submitted seminar or defense.

    Status and schedule fields change together on the returned copy.

    Raises:
        InvalidStatusTransitionError: If the entity is not Submitted
        IncompleteScheduleError: If a required schedule field is missing
    """
    check_transition(entity, ApplicationStatus.SCHEDULED)

    if isinstance(entity, ThesisDefense):
        missing = missing_fields(request, ("date", "examiner1_id", "letter_number"))
        if missing:
            raise IncompleteScheduleError(
                "Lengkapi data jadwal dan Nomor Surat.", missing_fields=missing
            )
        return _transition(
            entity,
            ApplicationStatus.SCHEDULED,
            defense_date=request.date,
            defense_time=request.time,
            defense_room=request.room,
            examiner1_id=request.examiner1_id,
            examiner2_id=request.examiner2_id,
            letter_number=request.letter_number,
        )

    missing = missing_fields(request, ("date", "time", "room"))
    if missing:
        raise IncompleteScheduleError(
            "Lengkapi tanggal, waktu, dan ruangan seminar.", missing_fields=missing
        )
    return _transition(
        entity,
        ApplicationStatus.SCHEDULED,
        scheduled_date=request.date,
        scheduled_time=request.time,
        scheduled_room=request.room,
        examiner1_id=request.examiner1_id,
        examiner2_id=request.examiner2_id,
    )
