"""Factory classes for payment models."""

from django.utils import timezone

import factory

from apps.web.payments.models import PaymentMethod, PaymentStatus, ReservationPayment
from apps.web.reservations.tests.factories import ReservationFactory


class ReservationPaymentFactory(factory.django.DjangoModelFactory):
    """Factory for ReservationPayment model."""

    class Meta:
        model = ReservationPayment

    reservation = factory.SubFactory(ReservationFactory)
    confirmation_code = factory.LazyAttribute(
        lambda obj: obj.reservation.confirmation_code
    )
    amount = 2500
    currency = "usd"
    payment_method = PaymentMethod.CREDIT_CARD
    status = PaymentStatus.PENDING
    payer_reference = factory.Sequence(lambda n: f"cus_test{n:06d}")
    charge_authorization_id = factory.Sequence(lambda n: f"pi_test{n:06d}")


class CompletedPaymentFactory(ReservationPaymentFactory):
    """A deposit that has been paid."""

    status = PaymentStatus.COMPLETED
    transaction_id = factory.LazyAttribute(lambda obj: obj.charge_authorization_id)
    paid_at = factory.LazyFunction(timezone.now)
    last4_digits = "4242"
    card_brand = "VISA"
