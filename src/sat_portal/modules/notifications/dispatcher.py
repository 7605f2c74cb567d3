"""
Notification Dispatcher

Records notifications for a recipient and delivers an e-mail copy.

The database record is the source of truth: it is always written first,
and a failed e-mail never undoes it.
"""

import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.core.email import render_notification_html, send_email
from sat_portal.modules.store import repository
from sat_portal.modules.store.schemas import Notification, NotificationAttachment
from sat_portal.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


async def _send_email_copy(db: AsyncSession, notification: Notification) -> bool:
    try:
        user = await UserRepository.get_by_id(db, notification.user_id)
    except SQLAlchemyError as e:
        logger.warning(f"Could not look up recipient {notification.user_id} for e-mail: {e}")
        return False
    if user is None or not user.email:
        logger.debug(f"No e-mail address for recipient {notification.user_id}")
        return False

    return await send_email(
        to_email=user.email,
        subject=notification.subject,
        html_content=render_notification_html(user.display_name, notification.message),
        attachments=[(a.filename, a.content) for a in notification.attachments],
    )


async def send_email_copy(db: AsyncSession, notification: Notification) -> bool:
    """E-mail a stored notification to its recipient. Failures are logged, never raised."""
    delivered = await _send_email_copy(db, notification)
    if not delivered:
        logger.info(f"Notification {notification.id} recorded without e-mail copy")
    return delivered


async def notify(
    db: AsyncSession,
    recipient_id: str,
    subject: str,
    message: str,
    attachments: Sequence[NotificationAttachment] = (),
    send_copy: bool = True,
    commit: bool = True,
) -> Notification:
    """
    Create an unread notification for ``recipient_id``.

    Args:
        db: Database session
        recipient_id: User the notification is addressed to
        subject: Short subject line
        message: Plain-text body
        attachments: Files stored with the notification
        send_copy: Also e-mail the notification when the recipient has an address
        commit: Commit the record; with False it is only flushed, and the
            caller commits and sends the copy with ``send_email_copy``

    Returns:
        The stored notification

    Raises:
        RemoteError: If the notification could not be stored
    """
    notification = await repository.insert_notification(
        db,
        Notification(
            user_id=recipient_id,
            subject=subject,
            message=message,
            attachments=list(attachments),
        ),
        commit=commit,
    )
    logger.info(
        f"Notification {notification.id} sent to {recipient_id} "
        f"({len(notification.attachments)} attachment(s))"
    )

    if send_copy and commit:
        await send_email_copy(db, notification)

    return notification


async def mark_read(db: AsyncSession, notification_id: str) -> None:
    """
    Mark a notification as read. Calling it again is a no-op.

    Raises:
        NotFoundError: If the notification does not exist
    """
    await repository.set_notification_read(db, notification_id)


async def list_notifications(db: AsyncSession, user_id: str) -> list[Notification]:
    """Notifications of a user, newest first."""
    return await repository.list_notifications(db, user_id)
