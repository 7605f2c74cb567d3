"""
Workflow Schemas

Structured inputs for lecturer scheduling actions.
"""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ScheduleRequest(BaseModel):
    """Schedule details for a seminar or defense."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date: dt.date | None = Field(None, description="Day of the session")
    time: dt.time | None = Field(None, description="Start time of the session")
    room: str | None = Field(None, max_length=100, description="Room name")
    examiner1_id: str | None = Field(None, description="Lecturer id of the first examiner")
    examiner2_id: str | None = Field(None, description="Lecturer id of the second examiner")
    letter_number: str | None = Field(
        None, max_length=100, description="Official letter number (defense only)"
    )


class ValidateRequest(BaseModel):
    """Approve or reject a submission."""

    approve: bool = Field(..., description="True to approve, False to reject")
