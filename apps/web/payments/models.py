"""
Payment models - reservation deposits and their status history.

One ReservationPayment per Reservation (unique constraint), so the
lookup-or-create in the intent flow can never duplicate a deposit.
"""

from django.db import models

from apps.web.core.models import TimestampedModel
from apps.web.reservations.models import Reservation


class PaymentStatus(models.TextChoices):
    """Deposit payment lifecycle status."""

    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"
    REFUNDED = "refunded", "Refunded"


class PaymentMethod(models.TextChoices):
    """How the deposit was (or will be) paid."""

    CREDIT_CARD = "credit_card", "Credit card"
    DEBIT_CARD = "debit_card", "Debit card"
    CASH_AT_RESTAURANT = "cash_at_restaurant", "Cash at restaurant"


class TransitionSource(models.TextChoices):
    """What caused a payment status change."""

    INTENT = "intent", "Intent created"
    CONFIRM = "confirm", "Customer confirmation"
    WEBHOOK = "webhook", "Processor webhook"
    REFUND = "refund", "Refund"
    ADMIN = "admin", "Admin override"


class ReservationPayment(TimestampedModel):
    """
    Deposit payment for a reservation.

    Status moves pending -> completed | failed, completed -> refunded.
    Staff can override the status from the admin surface.
    """

    reservation = models.OneToOneField(
        Reservation,
        on_delete=models.PROTECT,
        related_name="payment",
    )

    # Denormalized for display / staff lookups
    confirmation_code = models.CharField(max_length=20, blank=True)
    user_id = models.CharField(max_length=64, blank=True)

    # Amount is fixed when the record is created
    amount = models.PositiveIntegerField(
        help_text="Deposit in smallest currency unit, e.g. cents",
    )
    currency = models.CharField(max_length=3, default="usd")
    payment_method = models.CharField(
        max_length=32,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CREDIT_CARD,
    )
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )

    # Processor references
    payer_reference = models.CharField(
        max_length=255,
        blank=True,
        help_text="Stripe Customer ID",
    )
    charge_authorization_id = models.CharField(
        max_length=255,
        blank=True,
        help_text="Stripe PaymentIntent ID",
    )
    transaction_id = models.CharField(max_length=255, blank=True)

    # Outcome
    paid_at = models.DateTimeField(null=True, blank=True)
    failure_reason = models.TextField(blank=True)
    last4_digits = models.CharField(max_length=4, blank=True)
    card_brand = models.CharField(max_length=32, blank=True)

    # Refund
    refund_id = models.CharField(max_length=255, blank=True)
    refund_reason = models.CharField(max_length=255, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="payment_status_idx"),
            models.Index(
                fields=["charge_authorization_id"], name="payment_authorization_idx"
            ),
        ]

    def __str__(self) -> str:
        return f"Deposit {self.confirmation_code or self.pk} - {self.status}"

    @property
    def masked_card(self) -> str:
        """Card summary for display, e.g. 'VISA **** 4242'."""
        if not self.last4_digits:
            return ""
        brand = self.card_brand or "CARD"
        return f"{brand} **** {self.last4_digits}"


class PaymentTransition(models.Model):
    """
    Append-only status history for a ReservationPayment.

    One row per status change. Never updated or deleted.
    """

    payment = models.ForeignKey(
        ReservationPayment,
        on_delete=models.CASCADE,
        related_name="transitions",
    )
    from_status = models.CharField(max_length=20, blank=True)
    to_status = models.CharField(max_length=20, choices=PaymentStatus.choices)
    source = models.CharField(max_length=20, choices=TransitionSource.choices)
    note = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "pk"]

    def __str__(self) -> str:
        return f"{self.from_status or '-'} -> {self.to_status} ({self.source})"
