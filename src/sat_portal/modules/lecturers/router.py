"""
Lecturers Router

Endpoints:
- GET /lecturers - Directory (any signed-in user)
- POST /lecturers - Add (lecturer)
- PUT /lecturers/{id} - Update (lecturer)
- DELETE /lecturers/{id} - Remove (lecturer)
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.core.auth import CurrentUser, get_current_user, require_lecturer
from sat_portal.core.database import get_db
from sat_portal.core.exceptions import PortalError, to_http_exception
from sat_portal.modules.lecturers import service
from sat_portal.modules.lecturers.schemas import LecturerInput, LecturerListResponse
from sat_portal.modules.store.schemas import Lecturer

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=LecturerListResponse)
async def list_lecturers(
    db: AsyncSession = Depends(get_db),
    _user: CurrentUser = Depends(get_current_user),
) -> LecturerListResponse:
    """All lecturers, sorted by name."""
    try:
        return LecturerListResponse(items=await service.list_lecturers(db))
    except PortalError as e:
        raise to_http_exception(e) from e


@router.post("", response_model=Lecturer, status_code=status.HTTP_201_CREATED)
async def add_lecturer(
    data: LecturerInput,
    db: AsyncSession = Depends(get_db),
    _lecturer: CurrentUser = Depends(require_lecturer),
) -> Lecturer:
    try:
        return await service.add_lecturer(db, data)
    except PortalError as e:
        raise to_http_exception(e) from e


@router.put("/{lecturer_id}", response_model=Lecturer)
async def update_lecturer(
    lecturer_id: str,
    data: LecturerInput,
    db: AsyncSession = Depends(get_db),
    _lecturer: CurrentUser = Depends(require_lecturer),
) -> Lecturer:
    try:
        return await service.update_lecturer(db, lecturer_id, data)
    except PortalError as e:
        raise to_http_exception(e) from e


@router.delete("/{lecturer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lecturer(
    lecturer_id: str,
    db: AsyncSession = Depends(get_db),
    lecturer: CurrentUser = Depends(require_lecturer),
) -> None:
    try:
        await service.delete_lecturer(db, lecturer_id)
    except PortalError as e:
        raise to_http_exception(e) from e
    logger.info(f"Lecturer {lecturer.id} removed lecturer {lecturer_id}")
