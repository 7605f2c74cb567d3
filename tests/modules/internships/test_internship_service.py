"""
Tests for the internships service layer.
"""

from uuid import uuid4

import pytest

from sat_portal.core.exceptions import (
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)
from sat_portal.modules.internships import service
from sat_portal.modules.internships.schemas import InternshipSubmit
from sat_portal.modules.store.models import ApplicationStatus
from sat_portal.modules.store.schemas import is_placeholder_id


class TestInternshipWorkflow:
    """Submission and review of an internship."""

    @pytest.mark.asyncio
    async def test_current_is_draft(self, db, student):
        internship = await service.get_current_internship(db, student)

        assert is_placeholder_id(internship.id)
        assert internship.status == ApplicationStatus.DRAFT

    @pytest.mark.asyncio
    async def test_submit_and_approve(self, db, student):
        advisor_id = str(uuid4())

        submitted = await service.submit_internship(
            db, student, InternshipSubmit(company_name=" PT Maju ", advisor_id=advisor_id)
        )
        pending = await service.list_pending(db)
        approved = await service.validate_internship(db, submitted.id, approve=True)

        assert submitted.company_name == "PT Maju"
        assert [i.id for i in pending] == [submitted.id]
        assert approved.status == ApplicationStatus.APPROVED
        assert (await service.get_current_internship(db, student)).status == (
            ApplicationStatus.APPROVED
        )

    @pytest.mark.asyncio
    async def test_reject(self, db, student):
        submitted = await service.submit_internship(
            db, student, InternshipSubmit(company_name="PT Maju", advisor_id=str(uuid4()))
        )

        rejected = await service.validate_internship(db, submitted.id, approve=False)

        assert rejected.status == ApplicationStatus.REJECTED

    @pytest.mark.asyncio
    async def test_incomplete(self, db, student):
        with pytest.raises(ValidationError) as exc_info:
            await service.submit_internship(db, student, InternshipSubmit(company_name="PT"))

        assert exc_info.value.message == "Lengkapi data magang."

    @pytest.mark.asyncio
    async def test_validate_draft(self, db, student):
        submitted = await service.submit_internship(
            db, student, InternshipSubmit(company_name="PT Maju", advisor_id=str(uuid4()))
        )
        await service.validate_internship(db, submitted.id, approve=True)

        with pytest.raises(InvalidStatusTransitionError):
            await service.validate_internship(db, submitted.id, approve=False)

    @pytest.mark.asyncio
    async def test_validate_unknown(self, db):
        with pytest.raises(NotFoundError):
            await service.validate_internship(db, str(uuid4()), approve=True)
