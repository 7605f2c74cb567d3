"""
Theses Schemas

Request and response bodies for the student and lecturer thesis endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sat_portal.modules.store.schemas import (
    SeminarRegistration,
    ThesisDefense,
    ThesisRegistration,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProposalSubmit(_CamelModel):
    """Proposal details entered by the student."""

    title: str = Field("", max_length=500)
    advisor1_id: str | None = Field(None, description="Lecturer id of the first advisor")
    advisor2_id: str | None = Field(None, description="Lecturer id of the second advisor")


class SeminarSubmitResponse(_CamelModel):
    seminar: SeminarRegistration
    failed_uploads: list[str] = Field(default_factory=list)


class DefenseSubmitResponse(_CamelModel):
    defense: ThesisDefense
    failed_uploads: list[str] = Field(default_factory=list)


class ProposalListResponse(_CamelModel):
    items: list[ThesisRegistration]


class SeminarListResponse(_CamelModel):
    items: list[SeminarRegistration]


class DefenseListResponse(_CamelModel):
    items: list[ThesisDefense]


class DefenseScheduleResponse(_CamelModel):
    """
    Result of scheduling a defense.

    The schedule is saved even when the invitation document could not be
    generated; ``document_attached`` is False and ``warning`` explains why.
    """

    defense: ThesisDefense
    document_attached: bool
    notification_id: str | None = None
    warning: str | None = None
