"""Tests for payment models."""

from django.db import IntegrityError

import pytest

from apps.web.payments.models import PaymentStatus, PaymentTransition, TransitionSource

from .factories import CompletedPaymentFactory, ReservationPaymentFactory


@pytest.mark.django_db
class TestReservationPayment:
    """Tests for ReservationPayment model."""

    def test_one_payment_per_reservation(self) -> None:
        payment = ReservationPaymentFactory()

        with pytest.raises(IntegrityError):
            ReservationPaymentFactory(reservation=payment.reservation)

    def test_masked_card(self) -> None:
        payment = CompletedPaymentFactory()

        assert payment.masked_card == "VISA **** 4242"

    def test_masked_card_without_brand(self) -> None:
        payment = CompletedPaymentFactory(card_brand="")

        assert payment.masked_card == "CARD **** 4242"

    def test_masked_card_empty(self) -> None:
        payment = ReservationPaymentFactory()

        assert payment.masked_card == ""

    def test_str(self) -> None:
        payment = ReservationPaymentFactory(confirmation_code="RES-ABC123")

        assert str(payment) == "Deposit RES-ABC123 - pending"


@pytest.mark.django_db
class TestPaymentTransition:
    """Tests for PaymentTransition model."""

    def test_history_in_order(self) -> None:
        payment = ReservationPaymentFactory()
        PaymentTransition.objects.create(
            payment=payment,
            from_status="",
            to_status=PaymentStatus.PENDING,
            source=TransitionSource.INTENT,
        )
        PaymentTransition.objects.create(
            payment=payment,
            from_status=PaymentStatus.PENDING,
            to_status=PaymentStatus.COMPLETED,
            source=TransitionSource.CONFIRM,
        )

        history = [str(t) for t in payment.transitions.all()]

        assert history == [
            "- -> pending (intent)",
            "pending -> completed (confirm)",
        ]
