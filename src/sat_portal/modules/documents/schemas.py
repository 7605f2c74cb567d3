"""Document template schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sat_portal.modules.store.schemas import DocumentTemplate


class TemplateInfo(BaseModel):
    """Master template metadata (the content is not returned)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    last_modified: datetime
    size: int = Field(..., description="Size in bytes")

    @classmethod
    def from_entity(cls, template: DocumentTemplate) -> "TemplateInfo":
        return cls(
            id=template.id,
            name=template.name,
            last_modified=template.last_modified,
            size=len(template.content),
        )
