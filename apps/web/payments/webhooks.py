"""
Stripe webhook handlers.

Handles deposit events from Stripe:
- payment_intent.succeeded: Deposit completed, update payment and reservation
- payment_intent.payment_failed: Deposit declined, record the failure reason
"""

import logging
from typing import Any

from django.conf import settings
from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

import stripe

from apps.web.payments.exceptions import GatewayError
from apps.web.payments.gateways.stripe_gateway import authorization_from_intent
from apps.web.payments.models import TransitionSource
from apps.web.payments.services import apply_authorization_outcome
from apps.web.reservations.models import Reservation

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def stripe_webhook(request: HttpRequest) -> HttpResponse:
    """
    Handle Stripe webhook events.

    POST /payments/webhooks/stripe

    Events handled:
    - payment_intent.succeeded: Deposit completed
    - payment_intent.payment_failed: Deposit failed
    """
    payload = request.body
    sig_header = request.headers.get("Stripe-Signature", "")

    # Verify webhook signature
    try:
        event = stripe.Webhook.construct_event(
            payload,
            sig_header,
            settings.STRIPE_WEBHOOK_SECRET,
        )
    except ValueError as e:
        logger.warning("Invalid Stripe webhook payload: %s", e)
        return HttpResponse("Invalid payload", status=400)
    except stripe.SignatureVerificationError as e:
        logger.warning("Invalid Stripe webhook signature: %s", e)
        return HttpResponse("Invalid signature", status=400)

    logger.info("Received Stripe event: %s", event["type"])

    # Route to handler
    match event["type"]:
        case "payment_intent.succeeded" | "payment_intent.payment_failed":
            _handle_payment_intent(event["data"]["object"])
        case _:
            logger.debug("Ignoring unhandled Stripe event: %s", event["type"])

    return HttpResponse(status=200)


def _get_reservation(payment_intent: Any) -> Reservation | None:
    """Resolve the reservation named in the intent's metadata."""
    metadata = payment_intent.get("metadata") or {}
    reservation_id = metadata.get("reservationId")
    if not reservation_id:
        logger.warning(
            "Payment event without reservationId in metadata: %s",
            payment_intent.get("id"),
        )
        return None

    try:
        return Reservation.objects.get(pk=int(reservation_id))
    except Reservation.DoesNotExist:
        logger.error(
            "Reservation not found for payment_intent: reservation_id=%s",
            reservation_id,
        )
    except (ValueError, TypeError):
        logger.error("Invalid reservationId in metadata: %s", reservation_id)
    return None


def _handle_payment_intent(payment_intent: Any) -> None:
    """
    Reconcile a succeeded or failed PaymentIntent with the deposit records.

    Uses the same outcome logic as customer confirmation, so a webhook
    arriving after the confirm call is a no-op.

    Args:
        payment_intent: Stripe PaymentIntent data from webhook
    """
    reservation = _get_reservation(payment_intent)
    if reservation is None:
        return

    try:
        authorization = authorization_from_intent(payment_intent)
    except GatewayError as e:
        logger.error(
            "Cannot reconcile payment_intent %s: %s",
            payment_intent.get("id"),
            e.message,
        )
        return

    result = apply_authorization_outcome(
        reservation, authorization, TransitionSource.WEBHOOK
    )

    logger.info(
        "Deposit reconciled via webhook: reservation=%s status=%s success=%s",
        reservation.confirmation_code,
        authorization.status.value,
        result.success,
    )
