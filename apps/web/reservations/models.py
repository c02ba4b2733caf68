"""
Reservation models - table bookings.

Reservations are created by the booking flow; the payments app only
ever touches ``payment_status``.
"""

import secrets

from django.db import models

from apps.web.core.models import TimestampedModel


def generate_confirmation_code() -> str:
    """Generate a customer-facing confirmation code, e.g. RES-4F0A9C."""
    return f"RES-{secrets.token_hex(3).upper()}"


class ReservationStatus(models.TextChoices):
    """Booking lifecycle status."""

    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class DepositStatus(models.TextChoices):
    """Deposit payment status as seen from the reservation."""

    UNSET = "", "Unset"
    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"
    REFUNDED = "refunded", "Refunded"


class Reservation(TimestampedModel):
    """
    A table reservation.

    Tracks the guest, the slot, and the deposit payment status.
    """

    # Guest information
    name = models.CharField(max_length=200)
    email = models.EmailField()
    phone = models.CharField(max_length=20, blank=True)
    user_id = models.CharField(
        max_length=64,
        blank=True,
        help_text="Account ID of the booking user (blank = guest checkout)",
    )

    # Slot
    date = models.DateField()
    time = models.TimeField()
    guests = models.PositiveIntegerField(default=2, help_text="Party size")
    notes = models.TextField(blank=True)

    status = models.CharField(
        max_length=20,
        choices=ReservationStatus.choices,
        default=ReservationStatus.PENDING,
    )

    # Confirmation
    confirmation_code = models.CharField(
        max_length=20,
        unique=True,
        default=generate_confirmation_code,
        help_text="Customer-facing confirmation code",
    )

    # Deposit
    payment_status = models.CharField(
        max_length=20,
        choices=DepositStatus.choices,
        default=DepositStatus.UNSET,
        blank=True,
    )

    class Meta:
        ordering = ["-date", "-time"]
        indexes = [
            models.Index(fields=["date", "time"], name="reservation_slot_idx"),
            models.Index(fields=["email"], name="reservation_email_idx"),
            models.Index(
                fields=["payment_status"], name="reservation_deposit_idx"
            ),
        ]

    def __str__(self) -> str:
        return f"Reservation {self.confirmation_code} - {self.name}"
