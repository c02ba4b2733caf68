"""Base payment gateway protocol - interface for all card processors."""

from typing import Protocol, runtime_checkable

from savoria_schemas import ChargeAuthorization, GatewayProvider, GatewayRefund, Payer


@runtime_checkable
class PaymentGateway(Protocol):
    """
    Protocol defining the interface for payment processor integrations.

    All gateways (Stripe, Mock) must implement this interface. Services
    receive a gateway instance instead of touching a processor SDK directly.
    """

    @property
    def provider(self) -> GatewayProvider:
        """The processor this gateway talks to."""
        ...

    @property
    def is_configured(self) -> bool:
        """False when the processor credential is missing."""
        ...

    # =========================================================================
    # Payers
    # =========================================================================

    def find_or_create_payer(self, email: str, metadata: dict[str, str]) -> Payer:
        """
        Find a payer by email, creating one if none exists.

        Args:
            email: Payer email address.
            metadata: Tags attached when a new payer is created.

        Returns:
            The existing or newly created payer.

        Raises:
            GatewayError: If the processor call fails.
        """
        ...

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
        """
        Request a charge authorization.

        Args:
            amount: Amount in smallest currency unit.
            currency: ISO currency code.
            payer_id: Processor payer ID.
            metadata: Tags stored with the authorization.
            description: Human-readable description shown to staff.

        Returns:
            Authorization with client secret for the frontend.

        Raises:
            GatewayError: If the processor rejects the request.
        """
        ...

    def retrieve_authorization(self, authorization_id: str) -> ChargeAuthorization:
        """
        Retrieve the current state of an authorization.

        Raises:
            GatewayError: If not found or the processor call fails.
        """
        ...

    # =========================================================================
    # Refunds
    # =========================================================================

    def create_refund(
        self, authorization_id: str, metadata: dict[str, str]
    ) -> GatewayRefund:
        """
        Fully refund a succeeded authorization.

        Raises:
            GatewayError: If the refund fails.
        """
        ...
