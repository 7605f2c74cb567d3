"""Lecturer directory schemas."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sat_portal.modules.store.schemas import Lecturer


class LecturerInput(BaseModel):
    """Lecturer fields as entered in the directory form."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field("", max_length=200)
    nip: str = Field("", max_length=50, description="Staff number (NIP)")
    specialization: str | None = Field(None, max_length=200)


class LecturerListResponse(BaseModel):
    items: list[Lecturer]
