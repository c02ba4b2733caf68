"""
Guest notifications for reservation deposits.

Emails are queued with transaction.on_commit, so they only go out once the
payment state they describe is committed. Delivery failures are logged and
never reach the caller.
"""

import logging
from typing import Any

from django.db import transaction
from django.template.loader import render_to_string

from apps.web.notifications.services import EmailError, send_email
from apps.web.reservations.models import Reservation

logger = logging.getLogger(__name__)

PAYMENT_CONFIRMED_SUBJECT = "Payment Confirmed - Savoria Bistro Reservation"
REFUND_PROCESSED_SUBJECT = "Refund Processed - Savoria Bistro"


def format_amount(amount: int) -> str:
    """Format an amount in cents as dollars, e.g. 2500 -> '25.00'."""
    return f"{amount / 100:.2f}"


def _deliver(
    reservation: Reservation,
    subject: str,
    template_name: str,
    context: dict[str, Any],
) -> None:
    """Render and send one guest email. Failures are logged only."""
    try:
        html = render_to_string(template_name, {"reservation": reservation, **context})
        send_email(reservation.email, subject, html)
    except EmailError as e:
        logger.warning(
            "Guest email not sent: reservation=%s error=%s",
            reservation.confirmation_code,
            e,
        )
    except Exception:
        logger.exception(
            "Unexpected error sending guest email: reservation=%s",
            reservation.confirmation_code,
        )


def send_payment_confirmation(reservation: Reservation, amount: int) -> None:
    """Send the deposit confirmation email (amount, slot, party size, code)."""
    _deliver(
        reservation,
        PAYMENT_CONFIRMED_SUBJECT,
        "payments/email/payment_confirmed.html",
        {"amount": format_amount(amount)},
    )


def send_refund_notice(reservation: Reservation, amount: int, reason: str) -> None:
    """Send the deposit refund email."""
    _deliver(
        reservation,
        REFUND_PROCESSED_SUBJECT,
        "payments/email/refund_processed.html",
        {"amount": format_amount(amount), "reason": reason},
    )


def queue_payment_confirmation(reservation: Reservation, amount: int) -> None:
    """Send the confirmation email after the current transaction commits."""
    transaction.on_commit(lambda: send_payment_confirmation(reservation, amount))


def queue_refund_notice(reservation: Reservation, amount: int, reason: str) -> None:
    """Send the refund email after the current transaction commits."""
    transaction.on_commit(lambda: send_refund_notice(reservation, amount, reason))
