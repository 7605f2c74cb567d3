"""
Theses Router (lecturer)

Endpoints:
- GET /lecturer/theses/proposals/pending - Proposals waiting for review
- POST /lecturer/theses/proposals/{id}/validate - Approve or reject
- GET /lecturer/theses/seminars/pending - Seminars waiting for a schedule
- POST /lecturer/theses/seminars/{id}/schedule - Schedule a seminar
- GET /lecturer/theses/defenses/pending - Defenses waiting for a schedule
- GET /lecturer/theses/defenses/scheduled - Scheduled defenses
- POST /lecturer/theses/defenses/{id}/schedule - Schedule a defense and send the invitation
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.core.auth import CurrentUser, require_lecturer
from sat_portal.core.database import get_db
from sat_portal.core.exceptions import PortalError, to_http_exception
from sat_portal.modules.store.models import SeminarType
from sat_portal.modules.store.schemas import SeminarRegistration, ThesisRegistration
from sat_portal.modules.theses import service
from sat_portal.modules.theses.schemas import (
    DefenseListResponse,
    DefenseScheduleResponse,
    ProposalListResponse,
    SeminarListResponse,
)
from sat_portal.modules.workflow.schemas import ScheduleRequest, ValidateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/proposals/pending", response_model=ProposalListResponse)
async def list_pending_proposals(
    db: AsyncSession = Depends(get_db),
    _lecturer: CurrentUser = Depends(require_lecturer),
) -> ProposalListResponse:
    try:
        return ProposalListResponse(items=await service.list_pending(db, "thesis"))
    except PortalError as e:
        raise to_http_exception(e) from e


@router.post("/proposals/{proposal_id}/validate", response_model=ThesisRegistration)
async def validate_proposal(
    proposal_id: str,
    data: ValidateRequest,
    db: AsyncSession = Depends(get_db),
    lecturer: CurrentUser = Depends(require_lecturer),
) -> ThesisRegistration:
    """Approve or reject a submitted proposal."""
    try:
        proposal = await service.validate_proposal(db, proposal_id, data.approve)
    except PortalError as e:
        logger.warning(f"Validation of proposal {proposal_id} failed: {e.message}")
        raise to_http_exception(e) from e
    logger.info(f"Lecturer {lecturer.id} set proposal {proposal_id} to {proposal.status.value}")
    return proposal


@router.get("/seminars/pending", response_model=SeminarListResponse)
async def list_pending_seminars(
    seminar_type: SeminarType | None = None,
    db: AsyncSession = Depends(get_db),
    _lecturer: CurrentUser = Depends(require_lecturer),
) -> SeminarListResponse:
    """Submitted seminars, optionally of one type."""
    filters = {"type": seminar_type} if seminar_type else {}
    try:
        return SeminarListResponse(items=await service.list_pending(db, "seminar", **filters))
    except PortalError as e:
        raise to_http_exception(e) from e


@router.post("/seminars/{seminar_id}/schedule", response_model=SeminarRegistration)
async def schedule_seminar(
    seminar_id: str,
    request: ScheduleRequest,
    db: AsyncSession = Depends(get_db),
    lecturer: CurrentUser = Depends(require_lecturer),
) -> SeminarRegistration:
    """Set date, time and room of a submitted seminar."""
    try:
        seminar = await service.schedule_seminar(db, seminar_id, request)
    except PortalError as e:
        logger.warning(f"Scheduling seminar {seminar_id} failed: {e.message}")
        raise to_http_exception(e) from e
    logger.info(f"Lecturer {lecturer.id} scheduled seminar {seminar_id}")
    return seminar


@router.get("/defenses/pending", response_model=DefenseListResponse)
async def list_pending_defenses(
    db: AsyncSession = Depends(get_db),
    _lecturer: CurrentUser = Depends(require_lecturer),
) -> DefenseListResponse:
    try:
        return DefenseListResponse(items=await service.list_pending(db, "defense"))
    except PortalError as e:
        raise to_http_exception(e) from e


@router.get("/defenses/scheduled", response_model=DefenseListResponse)
async def list_scheduled_defenses(
    db: AsyncSession = Depends(get_db),
    _lecturer: CurrentUser = Depends(require_lecturer),
) -> DefenseListResponse:
    try:
        return DefenseListResponse(items=await service.list_scheduled_defenses(db))
    except PortalError as e:
        raise to_http_exception(e) from e


@router.post("/defenses/{defense_id}/schedule", response_model=DefenseScheduleResponse)
async def schedule_defense(
    defense_id: str,
    request: ScheduleRequest,
    db: AsyncSession = Depends(get_db),
    lecturer: CurrentUser = Depends(require_lecturer),
) -> DefenseScheduleResponse:
    """
    Schedule a defense.

    The invitation document is generated from the master template and sent
    to the student. If generation fails the schedule is still saved and the
    response carries a warning.
    """
    try:
        result = await service.schedule_defense(db, defense_id, request)
    except PortalError as e:
        logger.warning(f"Scheduling defense {defense_id} failed: {e.message}")
        raise to_http_exception(e) from e
    logger.info(f"Lecturer {lecturer.id} scheduled defense {defense_id}")
    return DefenseScheduleResponse(
        defense=result.defense,
        document_attached=result.document_attached,
        notification_id=result.notification_id,
        warning=result.warning,
    )
