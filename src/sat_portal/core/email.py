"""
Email Service using Resend

Sends the e-mail copy of portal notifications, including generated
documents as attachments.
"""

import asyncio
import base64
import logging
from collections.abc import Sequence
from html import escape

import resend

from sat_portal.core.config import settings

logger = logging.getLogger(__name__)

resend.api_key = settings.resend_api_key


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
    attachments: Sequence[tuple[str, bytes]] = (),
) -> bool:
    """
    Send an email using Resend.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML content of the email
        attachments: (filename, content) pairs

    Returns:
        True if email was sent successfully
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(
            f"EMAIL TO: {to_email} | SUBJECT: {subject} | ATTACHMENTS: {len(attachments)}"
        )
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": settings.email_from,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }
        if attachments:
            params["attachments"] = [
                {"filename": filename, "content": base64.b64encode(content).decode("ascii")}
                for filename, content in attachments
            ]

        # Run sync Resend call in thread pool to avoid blocking event loop
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


def render_notification_html(recipient_name: str, message: str) -> str:
    """Wrap a plain-text notification message in the portal's e-mail layout."""
    safe_name = escape(recipient_name)
    safe_message = escape(message).replace("\n", "<br>")
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>
            body {{ font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 40px 20px; }}
            .footer {{ margin-top: 40px; font-size: 12px; color: #6b7280; }}
        </style>
    </head>
    <body>
        <div class="container">
            <p>{safe_message}</p>
            <div class="footer">
                <p>Pesan ini dikirim otomatis oleh SAT Portal kepada {safe_name}.</p>
            </div>
        </div>
    </body>
    </html>
    """
