"""
Pytest configuration for Django app tests.
"""

import datetime
from collections.abc import Iterator
from unittest.mock import patch

import pytest

from apps.web.payments.gateways import MockPaymentGateway
from apps.web.reservations.models import Reservation
from apps.web.reservations.tests.factories import ReservationFactory


@pytest.fixture
def gateway() -> MockPaymentGateway:
    """A fresh in-memory payment gateway."""
    return MockPaymentGateway()


@pytest.fixture
def use_gateway(gateway: MockPaymentGateway) -> Iterator[MockPaymentGateway]:
    """Make services that are not handed a gateway use the mock one."""
    with patch("apps.web.payments.services.get_gateway", return_value=gateway):
        yield gateway


@pytest.fixture
def reservation(db: None) -> Reservation:
    """A reservation without a deposit yet."""
    return ReservationFactory(
        name="Ada Lovelace",
        email="ada@example.com",
        date=datetime.date(2026, 11, 20),
        time=datetime.time(19, 30),
        guests=4,
    )
