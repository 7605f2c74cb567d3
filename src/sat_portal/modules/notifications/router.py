"""
Notifications Router

Endpoints:
- GET /notifications - The caller's notifications, newest first
- POST /notifications/{id}/read - Mark one as read
- GET /notifications/{id}/attachments/{attachment_id} - Download an attachment
"""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.core.auth import CurrentUser, get_current_user
from sat_portal.core.database import get_db
from sat_portal.core.exceptions import NotFoundError, PortalError, to_http_exception
from sat_portal.modules.notifications import dispatcher
from sat_portal.modules.notifications.schemas import (
    NotificationListResponse,
    NotificationResponse,
)
from sat_portal.modules.store import repository

logger = logging.getLogger(__name__)

router = APIRouter()


async def _check_owner(db: AsyncSession, notification_id: str, user: CurrentUser) -> None:
    owner = await repository.get_notification_owner(db, notification_id)
    # Someone else's notification is reported as missing
    if owner != user.id:
        raise NotFoundError("Notification", notification_id)


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> NotificationListResponse:
    """List the caller's notifications."""
    try:
        notifications = await dispatcher.list_notifications(db, user.id)
    except PortalError as e:
        raise to_http_exception(e) from e
    return NotificationListResponse(
        items=[NotificationResponse.from_entity(n) for n in notifications],
        unread_count=sum(1 for n in notifications if not n.is_read),
    )


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_read(
    notification_id: str,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> None:
    """Mark a notification as read. Repeating the call is harmless."""
    try:
        await _check_owner(db, notification_id, user)
        await dispatcher.mark_read(db, notification_id)
    except PortalError as e:
        raise to_http_exception(e) from e


@router.get("/{notification_id}/attachments/{attachment_id}")
async def download_attachment(
    notification_id: str,
    attachment_id: str,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> Response:
    """Download the bytes of one attachment."""
    try:
        await _check_owner(db, notification_id, user)
        attachment = await repository.get_attachment(db, notification_id, attachment_id)
    except PortalError as e:
        raise to_http_exception(e) from e

    return Response(
        content=attachment.content,
        media_type=attachment.mime_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(attachment.filename)}"
        },
    )
