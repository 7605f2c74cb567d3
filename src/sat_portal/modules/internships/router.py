"""
Internships Router

Student:
- GET /internships/me - Current registration (or an unsaved draft)
- POST /internships/me/submit - Submit it

Lecturer:
- GET /internships/pending - Registrations waiting for review
- POST /internships/{id}/validate - Approve or reject
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.core.auth import CurrentUser, require_lecturer, require_student
from sat_portal.core.database import get_db
from sat_portal.core.exceptions import PortalError, to_http_exception
from sat_portal.modules.internships import service
from sat_portal.modules.internships.schemas import InternshipListResponse, InternshipSubmit
from sat_portal.modules.store.schemas import InternshipRegistration
from sat_portal.modules.workflow.schemas import ValidateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=InternshipRegistration)
async def get_internship(
    db: AsyncSession = Depends(get_db),
    student: CurrentUser = Depends(require_student),
) -> InternshipRegistration:
    try:
        return await service.get_current_internship(db, student)
    except PortalError as e:
        raise to_http_exception(e) from e


@router.post("/me/submit", response_model=InternshipRegistration)
async def submit_internship(
    data: InternshipSubmit,
    db: AsyncSession = Depends(get_db),
    student: CurrentUser = Depends(require_student),
) -> InternshipRegistration:
    """Submit the internship registration for review."""
    try:
        return await service.submit_internship(db, student, data)
    except PortalError as e:
        logger.warning(f"Internship submission rejected for {student.id}: {e.message}")
        raise to_http_exception(e) from e


@router.get("/pending", response_model=InternshipListResponse)
async def list_pending_internships(
    db: AsyncSession = Depends(get_db),
    _lecturer: CurrentUser = Depends(require_lecturer),
) -> InternshipListResponse:
    try:
        return InternshipListResponse(items=await service.list_pending(db))
    except PortalError as e:
        raise to_http_exception(e) from e


@router.post("/{internship_id}/validate", response_model=InternshipRegistration)
async def validate_internship(
    internship_id: str,
    data: ValidateRequest,
    db: AsyncSession = Depends(get_db),
    lecturer: CurrentUser = Depends(require_lecturer),
) -> InternshipRegistration:
    """Approve or reject a submitted internship."""
    try:
        internship = await service.validate_internship(db, internship_id, data.approve)
    except PortalError as e:
        logger.warning(f"Validation of internship {internship_id} failed: {e.message}")
        raise to_http_exception(e) from e
    logger.info(
        f"Lecturer {lecturer.id} set internship {internship_id} to {internship.status.value}"
    )
    return internship
