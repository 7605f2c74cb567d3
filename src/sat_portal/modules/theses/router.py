"""
Theses Router (student)

Endpoints:
- GET /theses/proposal - Current proposal (or an unsaved draft)
- POST /theses/proposal/submit - Submit the proposal
- GET /theses/seminars/{type} - Current Sempro / Semhas registration
- POST /theses/seminars/{type}/submit - Submit a seminar with its report file
- GET /theses/defense - Current defense registration
- POST /theses/defense/submit - Submit the defense with its three files
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.core.auth import CurrentUser, require_student
from sat_portal.core.database import get_db
from sat_portal.core.exceptions import PortalError, to_http_exception
from sat_portal.core.storage import FileStorage, get_storage
from sat_portal.modules.store.models import SeminarType
from sat_portal.modules.store.schemas import (
    PendingFile,
    SeminarRegistration,
    ThesisDefense,
    ThesisRegistration,
)
from sat_portal.modules.theses import service
from sat_portal.modules.theses.schemas import (
    DefenseSubmitResponse,
    ProposalSubmit,
    SeminarSubmitResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def to_pending_file(upload: UploadFile | None) -> PendingFile | None:
    """Read an uploaded form file; an empty or missing field yields None."""
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    if not content:
        return None
    return PendingFile(
        filename=upload.filename,
        content=content,
        content_type=upload.content_type,
    )


@router.get("/proposal", response_model=ThesisRegistration)
async def get_proposal(
    db: AsyncSession = Depends(get_db),
    student: CurrentUser = Depends(require_student),
) -> ThesisRegistration:
    """The student's proposal; a draft with a temporary id if none was saved yet."""
    try:
        return await service.get_current_proposal(db, student)
    except PortalError as e:
        raise to_http_exception(e) from e


@router.post("/proposal/submit", response_model=ThesisRegistration)
async def submit_proposal(
    data: ProposalSubmit,
    db: AsyncSession = Depends(get_db),
    student: CurrentUser = Depends(require_student),
) -> ThesisRegistration:
    """Submit the proposal for review."""
    try:
        return await service.submit_proposal(db, student, data)
    except PortalError as e:
        logger.warning(f"Proposal submission rejected for {student.id}: {e.message}")
        raise to_http_exception(e) from e


@router.get("/seminars/{seminar_type}", response_model=SeminarRegistration)
async def get_seminar(
    seminar_type: SeminarType,
    db: AsyncSession = Depends(get_db),
    student: CurrentUser = Depends(require_student),
) -> SeminarRegistration:
    """The student's seminar registration of one type."""
    try:
        return await service.get_current_seminar(db, student, seminar_type)
    except PortalError as e:
        raise to_http_exception(e) from e


@router.post("/seminars/{seminar_type}/submit", response_model=SeminarSubmitResponse)
async def submit_seminar(
    seminar_type: SeminarType,
    file_report: UploadFile | None = File(None, description="Report / proposal document"),
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    student: CurrentUser = Depends(require_student),
) -> SeminarSubmitResponse:
    """Submit a seminar registration. A previously uploaded report is reused."""
    try:
        result = await service.submit_seminar(
            db, student, seminar_type, await to_pending_file(file_report), storage
        )
    except PortalError as e:
        logger.warning(f"Seminar submission rejected for {student.id}: {e.message}")
        raise to_http_exception(e) from e
    return SeminarSubmitResponse(seminar=result.entity, failed_uploads=result.failed_uploads)


@router.get("/defense", response_model=ThesisDefense)
async def get_defense(
    db: AsyncSession = Depends(get_db),
    student: CurrentUser = Depends(require_student),
) -> ThesisDefense:
    """The student's defense registration."""
    try:
        return await service.get_current_defense(db, student)
    except PortalError as e:
        raise to_http_exception(e) from e


@router.post("/defense/submit", response_model=DefenseSubmitResponse)
async def submit_defense(
    sks_count: int = Form(..., ge=0, alias="sksCount"),
    admin_requirements_met: bool = Form(False, alias="adminRequirementsMet"),
    file_fixed: UploadFile | None = File(None, alias="fileFixed"),
    file_plagiarism: UploadFile | None = File(None, alias="filePlagiarism"),
    file_transcript: UploadFile | None = File(None, alias="fileTranscript"),
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    student: CurrentUser = Depends(require_student),
) -> DefenseSubmitResponse:
    """Submit the final defense registration."""
    files = {
        "file_fixed": await to_pending_file(file_fixed),
        "file_plagiarism": await to_pending_file(file_plagiarism),
        "file_transcript": await to_pending_file(file_transcript),
    }
    try:
        result = await service.submit_defense(
            db, student, sks_count, admin_requirements_met, files, storage
        )
    except PortalError as e:
        logger.warning(f"Defense submission rejected for {student.id}: {e.message}")
        raise to_http_exception(e) from e
    return DefenseSubmitResponse(defense=result.entity, failed_uploads=result.failed_uploads)
