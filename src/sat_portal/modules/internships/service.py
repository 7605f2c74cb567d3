"""
Internships Service Layer

Student registration of an internship and its review by a lecturer.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.core.auth import CurrentUser
from sat_portal.core.exceptions import NotFoundError
from sat_portal.modules.internships.schemas import InternshipSubmit
from sat_portal.modules.store import repository
from sat_portal.modules.store.models import ApplicationStatus
from sat_portal.modules.store.schemas import InternshipRegistration
from sat_portal.modules.workflow import engine

logger = logging.getLogger(__name__)


async def get_current_internship(db: AsyncSession, user: CurrentUser) -> InternshipRegistration:
    """The student's internship registration, or a fresh unsaved draft."""
    internships = await repository.list_entities(db, "internship", student_id=user.id)
    if internships:
        return internships[0]
    return InternshipRegistration(student_id=user.id, student_name=user.name)


async def submit_internship(
    db: AsyncSession, user: CurrentUser, data: InternshipSubmit
) -> InternshipRegistration:
    """
    Submit the internship registration.

    Raises:
        InvalidStatusTransitionError: If it was already submitted
        ValidationError: If company or advisor is missing
    """
    current = await get_current_internship(db, user)
    draft = current.model_copy(
        update={
            "company_name": data.company_name.strip(),
            "advisor_id": data.advisor_id or None,
        }
    )
    submitted = engine.submit(draft)
    result = await repository.save_entity(db, submitted)
    logger.info(f"Internship {result.entity.id} submitted by {user.id}")
    return result.entity


async def list_pending(db: AsyncSession) -> list[InternshipRegistration]:
    return await repository.list_entities(
        db, "internship", status=ApplicationStatus.SUBMITTED
    )


async def validate_internship(
    db: AsyncSession, internship_id: str, approve: bool
) -> InternshipRegistration:
    """
    Approve or reject a submitted internship.

    Raises:
        NotFoundError: If the internship does not exist
        InvalidStatusTransitionError: If it is not waiting for review
    """
    internship = await repository.get_entity(db, "internship", internship_id)
    if internship is None:
        raise NotFoundError("Internship", internship_id)
    validated = engine.validate(internship, approve)
    result = await repository.save_entity(db, validated)
    logger.info(f"Internship {internship_id} {validated.status.value}")
    return result.entity
