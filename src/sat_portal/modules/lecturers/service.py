"""
Lecturers Service Layer

Directory of lecturers used as advisors and examiners.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.core.exceptions import NotFoundError, ValidationError
from sat_portal.modules.lecturers.schemas import LecturerInput
from sat_portal.modules.store import repository
from sat_portal.modules.store.schemas import Lecturer

logger = logging.getLogger(__name__)


def _validated(data: LecturerInput) -> dict:
    name, nip = data.name.strip(), data.nip.strip()
    missing = [field for field, value in (("name", name), ("nip", nip)) if not value]
    if missing:
        raise ValidationError("Nama dan NIP wajib.", missing_fields=missing)
    return {
        "name": name,
        "nip": nip,
        "specialization": (data.specialization or "").strip() or None,
    }


async def list_lecturers(db: AsyncSession) -> list[Lecturer]:
    lecturers = await repository.list_entities(db, "lecturer")
    return sorted(lecturers, key=lambda lecturer: lecturer.name.lower())


async def add_lecturer(db: AsyncSession, data: LecturerInput) -> Lecturer:
    """
    Add a lecturer.

    Raises:
        ValidationError: If name or NIP is blank
    """
    result = await repository.save_entity(db, Lecturer(**_validated(data)))
    logger.info(f"Lecturer added: {result.entity.id} ({result.entity.nip})")
    return result.entity


async def update_lecturer(db: AsyncSession, lecturer_id: str, data: LecturerInput) -> Lecturer:
    """
    Replace a lecturer's details.

    Raises:
        NotFoundError: If the lecturer does not exist
        ValidationError: If name or NIP is blank
    """
    values = _validated(data)
    current = await repository.get_entity(db, "lecturer", lecturer_id)
    if current is None:
        raise NotFoundError("Lecturer", lecturer_id)
    result = await repository.save_entity(db, current.model_copy(update=values))
    logger.info(f"Lecturer updated: {lecturer_id}")
    return result.entity


async def delete_lecturer(db: AsyncSession, lecturer_id: str) -> None:
    """
    Remove a lecturer from the directory.

    Raises:
        NotFoundError: If the lecturer does not exist
    """
    await repository.delete_entity(db, "lecturer", lecturer_id)
