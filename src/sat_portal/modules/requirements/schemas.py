"""Requirement text schemas."""

from pydantic import BaseModel, Field


class RequirementUpdate(BaseModel):
    content: str = Field(..., max_length=10_000)
