"""Payment gateways - implementations for each card processor."""

from functools import cache

from django.conf import settings

from apps.web.payments.gateways.base import PaymentGateway
from apps.web.payments.gateways.mock import MockPaymentGateway
from apps.web.payments.gateways.stripe_gateway import StripeGateway
from savoria_schemas import GatewayProvider


@cache
def _shared_mock_gateway() -> MockPaymentGateway:
    # One in-memory processor per process, so state survives between requests
    return MockPaymentGateway()


def get_gateway(provider: GatewayProvider | str | None = None) -> PaymentGateway:
    """
    Get a payment gateway instance for the specified provider.

    This is the main entry point for obtaining gateways. Services call it
    when no gateway is injected.

    Args:
        provider: The provider to get a gateway for. Defaults to
            settings.PAYMENT_GATEWAY.

    Returns:
        A gateway instance implementing the PaymentGateway protocol.

    Raises:
        ValueError: If the provider is not supported.

    Example:
        gateway = get_gateway()
        if not gateway.is_configured:
            ...
        authorization = gateway.retrieve_authorization("pi_123")
    """
    if provider is None:
        provider = settings.PAYMENT_GATEWAY

    if provider == GatewayProvider.STRIPE:
        return StripeGateway(api_key=settings.STRIPE_SECRET_KEY)
    elif provider == GatewayProvider.MOCK:
        return _shared_mock_gateway()
    else:
        supported = ", ".join(
            [GatewayProvider.STRIPE.value, GatewayProvider.MOCK.value]
        )
        raise ValueError(
            f"Unsupported payment gateway: {provider}. Supported: {supported}"
        )


__all__ = [
    "MockPaymentGateway",
    "PaymentGateway",
    "StripeGateway",
    "get_gateway",
]
