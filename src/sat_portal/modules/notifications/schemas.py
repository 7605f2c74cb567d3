"""Notification response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sat_portal.modules.store.schemas import Notification


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AttachmentInfo(_CamelModel):
    """Attachment metadata; the content is downloaded separately."""

    id: str
    filename: str
    mime_type: str
    size: int = Field(..., description="Size in bytes")


class NotificationResponse(_CamelModel):
    id: str
    user_id: str
    subject: str
    message: str
    timestamp: datetime
    is_read: bool
    attachments: list[AttachmentInfo] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationResponse":
        return cls(
            id=notification.id,
            user_id=notification.user_id,
            subject=notification.subject,
            message=notification.message,
            timestamp=notification.timestamp,
            is_read=notification.is_read,
            attachments=[
                AttachmentInfo(
                    id=a.id, filename=a.filename, mime_type=a.mime_type, size=len(a.content)
                )
                for a in notification.attachments
            ],
        )


class NotificationListResponse(_CamelModel):
    items: list[NotificationResponse]
    unread_count: int
