"""
Notification services - transactional e-mail via Resend.
"""

import logging

from django.conf import settings

import resend

logger = logging.getLogger(__name__)


class EmailError(Exception):
    """Raised when email sending fails."""

    pass


def send_email(to_email: str, subject: str, html: str) -> str:
    """
    Send an HTML email via Resend.

    Args:
        to_email: Recipient email address
        subject: Email subject
        html: Email body as HTML

    Returns:
        Resend email ID

    Raises:
        EmailError: If sending fails
    """
    if not to_email:
        raise EmailError("Recipient email address is required")

    if not subject:
        raise EmailError("Email subject is required")

    if not html:
        raise EmailError("Email body is required")

    # Get Resend API key from settings
    api_key = getattr(settings, "RESEND_API_KEY", None)
    if not api_key:
        raise EmailError("Resend API key not configured")

    resend.api_key = api_key

    from_address = settings.DEFAULT_FROM_EMAIL

    try:
        email_params: dict[str, str] = {
            "from": from_address,
            "to": to_email,
            "subject": subject,
            "html": html,
        }

        response = resend.Emails.send(email_params)  # type: ignore[arg-type]

        email_id = response.get("id", "") if isinstance(response, dict) else ""

        logger.info("Sent email to %s (ID: %s)", to_email, email_id)

        return str(email_id)

    except Exception as e:
        logger.exception("Failed to send email to %s: %s", to_email, e)
        raise EmailError(f"Failed to send email: {e}") from e
