"""
Documents Service

Master template management and generation of the defense invitation
document from it.
"""

import asyncio
import io
import logging
from datetime import date

from docx import Document
from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.core.exceptions import TemplateError, ValidationError
from sat_portal.modules.documents import renderer
from sat_portal.modules.documents.export import export_filename, export_schedule_csv
from sat_portal.modules.documents.fields import build_defense_fields
from sat_portal.modules.store import repository
from sat_portal.modules.store.models import ApplicationStatus
from sat_portal.modules.store.schemas import (
    DocumentTemplate,
    Lecturer,
    ThesisDefense,
    ThesisRegistration,
)
from sat_portal.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


async def upload_template(db: AsyncSession, filename: str, content: bytes) -> DocumentTemplate:
    """
    Replace the master template.

    Raises:
        ValidationError: If the file is not a .docx
        TemplateError: If the file cannot be opened as a Word document
    """
    if not filename.lower().endswith(".docx") or not content:
        raise ValidationError("Harap upload file .docx", missing_fields=["file"])
    try:
        await asyncio.to_thread(Document, io.BytesIO(content))
    except Exception as e:
        raise TemplateError(f"{filename} is not a valid .docx document") from e

    template = await repository.replace_template(db, filename, content)
    logger.info(f"Master template updated: {filename}")
    return template


async def get_template(db: AsyncSession) -> DocumentTemplate | None:
    return await repository.get_template(db)


async def generate_defense_document(db: AsyncSession, defense: ThesisDefense) -> bytes:
    """
    Render the invitation for a defense from the master template.

    Raises:
        TemplateError: If no usable template was uploaded
        RenderError: If rendering fails
    """
    template = await repository.get_template(db)
    if template is None:
        raise TemplateError("No master template uploaded")

    proposal = None
    if defense.thesis_id:
        proposal = await repository.get_entity(db, "thesis", defense.thesis_id)
    lecturers = await repository.list_entities(db, "lecturer")
    student = await UserRepository.get_by_id(db, defense.student_id)

    fields = build_defense_fields(
        defense,
        letter_number=defense.letter_number,
        student_identifier=student.identifier if student else None,
        proposal=proposal if isinstance(proposal, ThesisRegistration) else None,
        lecturers=[lecturer for lecturer in lecturers if isinstance(lecturer, Lecturer)],
    )
    document = await asyncio.to_thread(renderer.render, template.content, fields)
    logger.info(f"Generated defense document for {defense.id} ({len(document)} bytes)")
    return document


async def export_schedule(db: AsyncSession, today: date | None = None) -> tuple[str, str]:
    """
    CSV of all scheduled defenses.

    Returns:
        (file name, CSV text)
    """
    defenses = await repository.list_entities(
        db, "defense", status=ApplicationStatus.SCHEDULED
    )
    lecturers = {
        lecturer.id: lecturer.name
        for lecturer in await repository.list_entities(db, "lecturer")
    }

    def lecturer_name(lecturer_id: str | None) -> str:
        return lecturers.get(lecturer_id, "-") if lecturer_id else "-"

    return export_filename(today or date.today()), export_schedule_csv(defenses, lecturer_name)
