"""
Reservation deposit services.

Provides the deposit workflow on top of a PaymentGateway:
1. Creating a charge authorization for a reservation deposit
2. Reconciling the processor's outcome with the payment and reservation
3. Refunding completed deposits
4. Status queries and staff overrides

Every function takes an optional ``gateway``; callers that pass none get
the configured one from get_gateway().
"""

import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.web.payments.exceptions import (
    ConfigurationError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from apps.web.payments.gateways import PaymentGateway, get_gateway
from apps.web.payments.models import (
    PaymentMethod,
    PaymentStatus,
    PaymentTransition,
    ReservationPayment,
    TransitionSource,
)
from apps.web.payments.notifications import (
    queue_payment_confirmation,
    queue_refund_notice,
)
from apps.web.payments.serializers import (
    AdminPaymentSchema,
    AdminPaymentUpdateResponse,
    ConfirmPaymentResponse,
    CreateIntentResponse,
    PaymentSchema,
    PaymentStatusResponse,
    RefundResponse,
    ReservationSchema,
    VerifyPaymentResponse,
)
from apps.web.reservations.models import DepositStatus, Reservation
from savoria_schemas import ChargeAuthorization

logger = logging.getLogger(__name__)

DEFAULT_REFUND_REASON = "Reservation cancelled"
DEFAULT_DECLINE_REASON = "Payment declined"


# =============================================================================
# Helpers
# =============================================================================


def require_configured(gateway: PaymentGateway | None = None) -> PaymentGateway:
    """
    Return a usable gateway.

    Raises:
        ConfigurationError: If the processor credential is missing.
    """
    gateway = gateway or get_gateway()
    if not gateway.is_configured:
        raise ConfigurationError("Payment service not configured")
    return gateway


def _record_transition(
    payment: ReservationPayment,
    from_status: str,
    source: TransitionSource,
    note: str = "",
) -> None:
    """Append a status change to the payment's history, if there was one."""
    if from_status == payment.status:
        return

    PaymentTransition.objects.create(
        payment=payment,
        from_status=from_status,
        to_status=payment.status,
        source=source,
        note=note,
    )
    logger.info(
        "Payment %s: %s -> %s (%s)",
        payment.pk,
        from_status or "-",
        payment.status,
        source,
    )


def _set_deposit_status(reservation: Reservation, status: str) -> None:
    reservation.payment_status = status
    reservation.save(update_fields=["payment_status", "updated_at"])


def _get_or_create_payment(
    reservation: Reservation, amount: int
) -> tuple[ReservationPayment, bool]:
    """
    Get the reservation's payment record, creating it on first use.

    The unique reservation constraint makes a concurrent insert fail;
    the loser re-reads the winner's row.
    """
    defaults = {
        "amount": amount,
        "currency": settings.PAYMENT_CURRENCY,
        "confirmation_code": reservation.confirmation_code,
        "user_id": reservation.user_id,
        "status": PaymentStatus.PENDING,
    }
    try:
        with transaction.atomic():
            return ReservationPayment.objects.get_or_create(
                reservation=reservation, defaults=defaults
            )
    except IntegrityError:
        logger.info(
            "Concurrent payment insert for reservation %s, reusing existing row",
            reservation.pk,
        )
        return ReservationPayment.objects.get(reservation=reservation), False


def _describe(reservation: Reservation) -> str:
    return (
        f"Reservation deposit for {reservation.name} "
        f"on {reservation.date.isoformat()} at {reservation.time.strftime('%H:%M')}"
    )


# =============================================================================
# Payment intents
# =============================================================================


def create_reservation_intent(
    reservation_id: int | None,
    amount: int | None,
    email: str | None,
    gateway: PaymentGateway | None = None,
) -> CreateIntentResponse:
    """
    Create (or re-create) the deposit charge authorization for a reservation.

    Reuses the reservation's payment record and payer reference across
    retries. The authorization is always for the amount stored on the
    payment record.

    Args:
        reservation_id: Reservation primary key
        amount: Deposit in cents (used only when the record is created)
        email: Payer email, used to find or create the processor payer

    Returns:
        CreateIntentResponse with the client secret for the frontend

    Raises:
        ConfigurationError: Processor credential missing
        ValidationError: Missing field or non-positive amount
        NotFoundError: Reservation does not exist
        InvalidStateError: Deposit already completed or refunded
        GatewayError: Processor call failed
    """
    gateway = require_configured(gateway)

    if not reservation_id or not amount or not email:
        raise ValidationError("Missing required fields")
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError("Amount must be a positive integer in cents")

    try:
        reservation = Reservation.objects.get(pk=reservation_id)
    except Reservation.DoesNotExist as exc:
        raise NotFoundError("Reservation not found") from exc

    payment, created = _get_or_create_payment(reservation, amount)
    if created:
        _record_transition(payment, "", TransitionSource.INTENT, "Deposit created")

    if payment.status in (PaymentStatus.COMPLETED, PaymentStatus.REFUNDED):
        raise InvalidStateError(f"Deposit has already been {payment.status}")

    if payment.status == PaymentStatus.FAILED:
        # New attempt after a decline
        payment.status = PaymentStatus.PENDING
        payment.failure_reason = ""
        payment.save(update_fields=["status", "failure_reason", "updated_at"])
        _record_transition(
            payment, PaymentStatus.FAILED, TransitionSource.INTENT, "Retry after decline"
        )

    metadata = {
        "reservationId": str(reservation.pk),
        "confirmationCode": reservation.confirmation_code,
    }

    if not payment.payer_reference:
        payer = gateway.find_or_create_payer(email, metadata)
        payment.payer_reference = payer.id
        payment.save(update_fields=["payer_reference", "updated_at"])

    authorization = gateway.create_authorization(
        amount=payment.amount,
        currency=payment.currency,
        payer_id=payment.payer_reference,
        metadata={**metadata, "customerEmail": email},
        description=_describe(reservation),
    )

    payment.charge_authorization_id = authorization.id
    payment.save(update_fields=["charge_authorization_id", "updated_at"])

    logger.info(
        "Created deposit authorization %s for reservation %s (%s cents)",
        authorization.id,
        reservation.pk,
        payment.amount,
    )

    return CreateIntentResponse(
        client_secret=authorization.client_secret,
        payment_intent_id=authorization.id,
        amount=payment.amount,
        reservation_id=reservation.pk,
    )


# =============================================================================
# Confirmation
# =============================================================================


def _mark_completed(
    payment: ReservationPayment,
    authorization: ChargeAuthorization,
    source: TransitionSource,
) -> None:
    from_status = payment.status
    payment.status = PaymentStatus.COMPLETED
    payment.transaction_id = authorization.id
    payment.paid_at = timezone.now()
    payment.failure_reason = ""
    if authorization.card:
        # Card details are best-effort
        payment.last4_digits = authorization.card.last4
        payment.card_brand = authorization.card.brand.upper()
    payment.save()
    _record_transition(payment, from_status, source, f"Authorization {authorization.id}")


def _mark_failed(
    payment: ReservationPayment,
    reason: str,
    source: TransitionSource,
) -> None:
    from_status = payment.status
    payment.status = PaymentStatus.FAILED
    payment.failure_reason = reason
    payment.save(update_fields=["status", "failure_reason", "updated_at"])
    _record_transition(payment, from_status, source, reason)


def apply_authorization_outcome(
    reservation: Reservation,
    authorization: ChargeAuthorization,
    source: TransitionSource = TransitionSource.CONFIRM,
) -> ConfirmPaymentResponse:
    """
    Reconcile a processor authorization with the deposit records.

    Shared by customer confirmation and the processor webhook. Payment and
    reservation are updated in one transaction; declines are returned,
    not raised.

    Args:
        reservation: The reservation the authorization belongs to
        authorization: Current processor state of the authorization
        source: What triggered the reconciliation (for the audit log)

    Returns:
        ConfirmPaymentResponse describing the outcome
    """
    if authorization.is_processing:
        return ConfirmPaymentResponse(
            success=False,
            message="Payment is still processing",
            status="processing",
        )

    with transaction.atomic():
        reservation = Reservation.objects.select_for_update().get(pk=reservation.pk)
        payment = (
            ReservationPayment.objects.select_for_update()
            .filter(reservation=reservation)
            .first()
        )

        if payment is None:
            logger.warning(
                "No payment record for reservation %s (authorization %s)",
                reservation.pk,
                authorization.id,
            )

        if payment and payment.status == PaymentStatus.REFUNDED:
            return ConfirmPaymentResponse(
                success=False,
                message="Payment has already been refunded",
                status=PaymentStatus.REFUNDED.value,
            )

        if authorization.succeeded:
            if payment and payment.status == PaymentStatus.COMPLETED:
                if payment.transaction_id == authorization.id:
                    logger.info(
                        "Payment %s already confirmed for %s, skipping",
                        payment.pk,
                        authorization.id,
                    )
                else:
                    # The recorded charge stays the one refunds go to
                    logger.warning(
                        "Second succeeded authorization %s for payment %s "
                        "(settled by %s)",
                        authorization.id,
                        payment.pk,
                        payment.transaction_id,
                    )
                return ConfirmPaymentResponse(
                    success=True,
                    message="Payment confirmed",
                    reservation=ReservationSchema.model_validate(reservation),
                )

            if payment:
                _mark_completed(payment, authorization, source)
            _set_deposit_status(reservation, DepositStatus.COMPLETED)

            amount = payment.amount if payment else authorization.amount
            queue_payment_confirmation(reservation, amount)

            return ConfirmPaymentResponse(
                success=True,
                message="Payment confirmed",
                reservation=ReservationSchema.model_validate(reservation),
            )

        if payment and payment.status == PaymentStatus.COMPLETED:
            # A stale failure must not undo a settled deposit
            logger.warning(
                "Ignoring %s outcome for completed payment %s",
                authorization.status.value,
                payment.pk,
            )
            return ConfirmPaymentResponse(
                success=False,
                message="Payment has already been completed",
                status=PaymentStatus.COMPLETED.value,
            )

        if (
            payment
            and payment.charge_authorization_id
            and payment.charge_authorization_id != authorization.id
        ):
            # Only the current attempt can fail the deposit
            logger.info(
                "Ignoring %s outcome for superseded authorization %s "
                "(payment %s is on %s)",
                authorization.status.value,
                authorization.id,
                payment.pk,
                payment.charge_authorization_id,
            )
            return ConfirmPaymentResponse(
                success=False,
                message="Payment attempt superseded",
                status=payment.status,
            )

        reason = authorization.last_error_message or DEFAULT_DECLINE_REASON
        if payment:
            _mark_failed(payment, reason, source)
        _set_deposit_status(reservation, DepositStatus.FAILED)

    return ConfirmPaymentResponse(
        success=False,
        message=authorization.last_error_message or "Payment failed",
    )


def _belongs_to(
    authorization: ChargeAuthorization,
    reservation: Reservation,
    payment: ReservationPayment | None,
) -> bool:
    """
    Whether an authorization was created for this reservation.

    Any earlier attempt of the same reservation qualifies, identified by the
    reservationId it was tagged with.
    """
    if payment and authorization.id in (
        payment.charge_authorization_id,
        payment.transaction_id,
    ):
        return True

    owner = authorization.metadata.get("reservationId")
    if owner is not None:
        return owner == str(reservation.pk)

    # Untagged authorization: only acceptable before any attempt is recorded
    return not (payment and payment.charge_authorization_id)


def confirm_reservation_payment(
    payment_intent_id: str | None,
    reservation_id: int | None,
    gateway: PaymentGateway | None = None,
) -> ConfirmPaymentResponse:
    """
    Confirm a deposit after the customer completes payment.

    Retrieves the authorization from the processor and applies its outcome.
    A decline or a still-processing payment is a normal return value.

    Raises:
        ConfigurationError: Processor credential missing
        ValidationError: Missing field, or the authorization belongs to a
            different reservation
        NotFoundError: Reservation does not exist
        GatewayError: Processor call failed
    """
    gateway = require_configured(gateway)

    if not payment_intent_id or not reservation_id:
        raise ValidationError("Missing required fields")

    try:
        reservation = Reservation.objects.get(pk=reservation_id)
    except Reservation.DoesNotExist as exc:
        raise NotFoundError("Reservation not found") from exc

    authorization = gateway.retrieve_authorization(payment_intent_id)

    payment = ReservationPayment.objects.filter(reservation=reservation).first()
    if not _belongs_to(authorization, reservation, payment):
        raise ValidationError("Payment intent does not match reservation")

    return apply_authorization_outcome(
        reservation, authorization, TransitionSource.CONFIRM
    )


# =============================================================================
# Refunds
# =============================================================================


def refund_reservation_payment(
    reservation_id: int,
    reason: str | None = None,
    gateway: PaymentGateway | None = None,
) -> RefundResponse:
    """
    Fully refund a completed deposit.

    Refunds are not repeatable: a refunded payment fails the precondition.

    Raises:
        ConfigurationError: Processor credential missing
        NotFoundError: No payment for the reservation
        InvalidStateError: Payment is not completed
        GatewayError: Processor refused the refund
    """
    gateway = require_configured(gateway)
    reason = reason or DEFAULT_REFUND_REASON

    with transaction.atomic():
        payment = (
            ReservationPayment.objects.select_for_update()
            .select_related("reservation")
            .filter(reservation_id=reservation_id)
            .first()
        )
        if payment is None:
            raise NotFoundError("Payment not found")

        if payment.status != PaymentStatus.COMPLETED:
            raise InvalidStateError("Cannot refund payment that is not completed")

        # The paid authorization, which may predate the latest attempt
        charge_id = payment.transaction_id or payment.charge_authorization_id
        if not charge_id:
            raise InvalidStateError("Payment has no charge to refund")

        refund = gateway.create_refund(charge_id, metadata={"reason": reason})

        payment.status = PaymentStatus.REFUNDED
        payment.refund_id = refund.id
        payment.refund_reason = reason
        payment.refunded_at = timezone.now()
        payment.save(
            update_fields=[
                "status",
                "refund_id",
                "refund_reason",
                "refunded_at",
                "updated_at",
            ]
        )
        _record_transition(
            payment, PaymentStatus.COMPLETED, TransitionSource.REFUND, reason
        )

        reservation = payment.reservation
        _set_deposit_status(reservation, DepositStatus.REFUNDED)

        queue_refund_notice(reservation, payment.amount, reason)

    logger.info(
        "Refunded payment %s for reservation %s (refund %s)",
        payment.pk,
        reservation_id,
        refund.id,
    )

    return RefundResponse(
        success=True,
        message="Refund processed",
        refund_id=refund.id,
    )


# =============================================================================
# Queries and staff overrides
# =============================================================================


def get_payment_status(reservation_id: int) -> PaymentStatusResponse:
    """
    Current deposit status for a reservation.

    Raises:
        NotFoundError: Payment or reservation missing
    """
    payment = (
        ReservationPayment.objects.select_related("reservation")
        .filter(reservation_id=reservation_id)
        .first()
    )
    if payment is None:
        raise NotFoundError("Payment or reservation not found")

    return PaymentStatusResponse(
        payment_id=payment.pk,
        status=payment.status,
        amount=payment.amount,
        payment_method=payment.payment_method,
        last4_digits=payment.last4_digits,
        card_brand=payment.card_brand,
        paid_at=payment.paid_at,
        reservation_status=payment.reservation.payment_status,
    )


def list_reservation_payments() -> list[AdminPaymentSchema]:
    """All deposits with their reservation summary, newest first."""
    payments = ReservationPayment.objects.select_related("reservation").order_by(
        "-created_at", "-pk"
    )
    return [AdminPaymentSchema.model_validate(payment) for payment in payments]


def admin_update_payment(
    payment_id: int,
    payment_method: str | None = None,
    status: str | None = None,
) -> AdminPaymentUpdateResponse:
    """
    Staff override of a payment's method and/or status.

    Bypasses the normal state machine. Setting status to completed also
    marks the reservation's deposit completed. Status overrides are logged
    as admin transitions.

    Raises:
        ValidationError: Unknown payment method or status
        NotFoundError: Payment does not exist
    """
    if payment_method is not None and payment_method not in PaymentMethod.values:
        raise ValidationError(f"Invalid payment method: {payment_method}")
    if status is not None and status not in PaymentStatus.values:
        raise ValidationError(f"Invalid payment status: {status}")

    with transaction.atomic():
        try:
            payment = ReservationPayment.objects.select_for_update().get(pk=payment_id)
        except ReservationPayment.DoesNotExist as exc:
            raise NotFoundError("Payment not found") from exc

        from_status = payment.status
        update_fields = ["updated_at"]
        if payment_method is not None:
            payment.payment_method = payment_method
            update_fields.append("payment_method")
        if status is not None:
            payment.status = status
            update_fields.append("status")
        payment.save(update_fields=update_fields)

        _record_transition(payment, from_status, TransitionSource.ADMIN, "Staff override")

        if status == PaymentStatus.COMPLETED:
            _set_deposit_status(payment.reservation, DepositStatus.COMPLETED)

    return AdminPaymentUpdateResponse(
        success=True,
        message="Payment updated",
        payment=PaymentSchema.model_validate(payment),
    )


def verify_payment(
    payment_intent_id: str | None,
    gateway: PaymentGateway | None = None,
) -> VerifyPaymentResponse:
    """
    Read an authorization's state straight from the processor. No mutation.

    Raises:
        ConfigurationError: Processor credential missing
        ValidationError: Missing authorization ID
        GatewayError: Processor call failed
    """
    gateway = require_configured(gateway)

    if not payment_intent_id:
        raise ValidationError("Payment intent ID is required")

    authorization = gateway.retrieve_authorization(payment_intent_id)

    return VerifyPaymentResponse(
        status=authorization.status.value,
        id=authorization.id,
        amount=authorization.amount,
        currency=authorization.currency,
        succeeded=authorization.succeeded,
        last_error=authorization.last_error_message,
    )
