"""Internship request schemas."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sat_portal.modules.store.schemas import InternshipRegistration


class InternshipSubmit(BaseModel):
    """Internship details entered by the student."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    company_name: str = Field("", max_length=200)
    advisor_id: str | None = Field(None, description="Lecturer id of the internship advisor")


class InternshipListResponse(BaseModel):
    items: list[InternshipRegistration]
