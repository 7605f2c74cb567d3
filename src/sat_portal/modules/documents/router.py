"""
Documents Router

Lecturer-only endpoints:
- PUT /documents/template - Upload the master .docx template
- GET /documents/template - Master template metadata
- GET /documents/defenses/export - CSV of scheduled defenses
- GET /documents/defenses/{id} - Generated invitation for one defense
"""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.core.auth import CurrentUser, require_lecturer
from sat_portal.core.database import get_db
from sat_portal.core.exceptions import NotFoundError, PortalError, to_http_exception
from sat_portal.modules.documents import service
from sat_portal.modules.documents.renderer import DOCX_MIME_TYPE
from sat_portal.modules.documents.schemas import TemplateInfo
from sat_portal.modules.store import repository

logger = logging.getLogger(__name__)

router = APIRouter()


def _attachment_headers(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"}


@router.put("/template", response_model=TemplateInfo)
async def upload_template(
    file: UploadFile = File(..., description="Master template (.docx)"),
    db: AsyncSession = Depends(get_db),
    lecturer: CurrentUser = Depends(require_lecturer),
) -> TemplateInfo:
    """Replace the master template used for generated letters."""
    content = await file.read()
    try:
        template = await service.upload_template(db, file.filename or "", content)
    except PortalError as e:
        raise to_http_exception(e) from e
    logger.info(f"Lecturer {lecturer.id} uploaded template {template.name}")
    return TemplateInfo.from_entity(template)


@router.get("/template", response_model=TemplateInfo)
async def get_template(
    db: AsyncSession = Depends(get_db),
    _lecturer: CurrentUser = Depends(require_lecturer),
) -> TemplateInfo:
    """Metadata of the current master template."""
    try:
        template = await service.get_template(db)
    except PortalError as e:
        raise to_http_exception(e) from e
    if template is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "NOT_FOUND", "message": "No master template uploaded"},
        )
    return TemplateInfo.from_entity(template)


@router.get("/defenses/export")
async def export_defense_schedule(
    db: AsyncSession = Depends(get_db),
    _lecturer: CurrentUser = Depends(require_lecturer),
) -> Response:
    """Download the schedule of all scheduled defenses as CSV."""
    try:
        filename, content = await service.export_schedule(db)
    except PortalError as e:
        raise to_http_exception(e) from e
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers=_attachment_headers(filename),
    )


@router.get("/defenses/{defense_id}")
async def download_defense_document(
    defense_id: str,
    db: AsyncSession = Depends(get_db),
    _lecturer: CurrentUser = Depends(require_lecturer),
) -> Response:
    """Generate the invitation document for a defense on demand."""
    try:
        defense = await repository.get_entity(db, "defense", defense_id)
        if defense is None:
            raise NotFoundError("Defense", defense_id)
        document = await service.generate_defense_document(db, defense)
    except PortalError as e:
        raise to_http_exception(e) from e
    return Response(
        content=document,
        media_type=DOCX_MIME_TYPE,
        headers=_attachment_headers(f"{defense.student_name}_Undangan_Sidang.docx"),
    )
