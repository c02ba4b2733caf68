"""
Stripe payment gateway.

Customers are payers, PaymentIntents are charge authorizations.
The API key is passed per request; nothing is set on the stripe module.
"""

import logging
from typing import Any

import stripe

from apps.web.payments.exceptions import GatewayError
from savoria_schemas import (
    AuthorizationStatus,
    CardDetails,
    ChargeAuthorization,
    GatewayProvider,
    GatewayRefund,
    Payer,
)

logger = logging.getLogger(__name__)


def _gateway_error(e: stripe.StripeError) -> GatewayError:
    """Wrap a Stripe SDK error, keeping the processor's message."""
    return GatewayError(
        message=str(e.user_message or e),
        code=getattr(e, "code", None),
        provider=GatewayProvider.STRIPE.value,
    )


def _card_details(intent: Any) -> CardDetails | None:
    """
    Extract card last4/brand from a PaymentIntent.

    Reads the expanded latest_charge, falling back to the legacy
    charges list. Returns None when no card details are available.
    """
    charge = intent.get("latest_charge")
    if not charge or isinstance(charge, str):
        charges = intent.get("charges") or {}
        data = charges.get("data") or []
        charge = data[0] if data else None

    if not charge or isinstance(charge, str):
        return None

    method_details = charge.get("payment_method_details") or {}
    card = method_details.get("card") or {}
    if not card:
        return None

    return CardDetails(
        last4=card.get("last4") or "",
        brand=card.get("brand") or "",
    )


def authorization_from_intent(intent: Any) -> ChargeAuthorization:
    """
    Convert a Stripe PaymentIntent into a ChargeAuthorization.

    Raises:
        GatewayError: If Stripe reports a status this service does not know.
    """
    try:
        status = AuthorizationStatus(intent.get("status"))
    except ValueError as e:
        raise GatewayError(
            f"Unknown PaymentIntent status: {intent.get('status')}",
            code="unknown_intent_status",
            provider=GatewayProvider.STRIPE.value,
        ) from e

    last_error = intent.get("last_payment_error") or {}
    metadata = intent.get("metadata") or {}

    return ChargeAuthorization(
        id=intent["id"],
        client_secret=intent.get("client_secret"),
        amount=intent.get("amount") or 0,
        currency=intent.get("currency") or "usd",
        status=status,
        last_error_message=last_error.get("message"),
        card=_card_details(intent),
        metadata={str(k): str(v) for k, v in metadata.items()},
    )


class StripeGateway:
    """
    Stripe implementation of the PaymentGateway protocol.

    Args:
        api_key: Stripe secret key. Blank means not configured.
    """

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    @property
    def provider(self) -> GatewayProvider:
        return GatewayProvider.STRIPE

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    # =========================================================================
    # Payers
    # =========================================================================

    def find_or_create_payer(self, email: str, metadata: dict[str, str]) -> Payer:
        """Find a Stripe Customer by email, or create one."""
        try:
            customers = stripe.Customer.list(
                email=email,
                limit=1,
                api_key=self._api_key,
            )
            if customers.data:
                customer = customers.data[0]
                return Payer(id=customer.id, email=email)

            customer = stripe.Customer.create(
                email=email,
                metadata=metadata,
                api_key=self._api_key,
            )
        except stripe.StripeError as e:
            raise _gateway_error(e) from e

        logger.info("Created Stripe customer %s for %s", customer.id, email)
        return Payer(id=customer.id, email=email, created=True)

    # =========================================================================
    # Charge authorizations
    # =========================================================================

    def create_authorization(
        self,
        amount: int,
        currency: str,
        payer_id: str,
        metadata: dict[str, str],
        description: str,
    ) -> ChargeAuthorization:
        """Create a Stripe PaymentIntent."""
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=currency,
                customer=payer_id,
                metadata=metadata,
                description=description,
                automatic_payment_methods={"enabled": True},
                api_key=self._api_key,
            )
        except stripe.StripeError as e:
            raise _gateway_error(e) from e

        return authorization_from_intent(intent)

    def retrieve_authorization(self, authorization_id: str) -> ChargeAuthorization:
        """Retrieve a PaymentIntent with its latest charge expanded."""
        try:
            intent = stripe.PaymentIntent.retrieve(
                authorization_id,
                expand=["latest_charge"],
                api_key=self._api_key,
            )
        except stripe.StripeError as e:
            raise _gateway_error(e) from e

        return authorization_from_intent(intent)

    # =========================================================================
    # Refunds
    # =========================================================================

    def create_refund(
        self, authorization_id: str, metadata: dict[str, str]
    ) -> GatewayRefund:
        """Fully refund a PaymentIntent."""
        try:
            refund = stripe.Refund.create(
                payment_intent=authorization_id,
                metadata=metadata,
                api_key=self._api_key,
            )
        except stripe.StripeError as e:
            raise _gateway_error(e) from e

        return GatewayRefund(
            id=refund.id,
            authorization_id=authorization_id,
            amount=refund.get("amount"),
            status=refund.get("status") or "succeeded",
        )
