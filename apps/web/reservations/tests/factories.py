"""Factory classes for reservation models."""

import datetime

import factory

from apps.web.reservations.models import Reservation, ReservationStatus


class ReservationFactory(factory.django.DjangoModelFactory):
    """Factory for Reservation model."""

    class Meta:
        model = Reservation

    name = factory.Faker("name")
    email = factory.Faker("email")
    phone = factory.Faker("numerify", text="555-###-####")
    date = factory.LazyFunction(lambda: datetime.date.today() + datetime.timedelta(days=7))
    time = datetime.time(19, 30)
    guests = 4
    status = ReservationStatus.PENDING
    payment_status = ""
