"""Mock payment gateway for development and testing."""

import uuid

from apps.web.payments.exceptions import GatewayError
from savoria_schemas import (
    AuthorizationStatus,
    CardDetails,
    ChargeAuthorization,
    GatewayProvider,
    GatewayRefund,
    Payer,
)

DECLINE_MESSAGE = "Your card was declined."


def _outcome_for(amount: int) -> tuple[AuthorizationStatus, str | None]:
    """
    Deterministic outcome a customer reaches for a given amount.

    Amounts ending in 13 are declined, amounts ending in 99 stay
    processing, everything else succeeds.
    """
    if amount % 100 == 13:
        return AuthorizationStatus.REQUIRES_PAYMENT_METHOD, DECLINE_MESSAGE
    if amount % 100 == 99:
        return AuthorizationStatus.PROCESSING, None
    return AuthorizationStatus.SUCCEEDED, None


class MockPaymentGateway:
    """
    Mock payment gateway for development and testing.

    Keeps payers, authorizations and refunds in memory. A freshly created
    authorization is returned as requires_payment_method; retrieving it
    returns the outcome the customer would reach (see _outcome_for),
    unless a test overrides it with set_authorization_status.

    Usage:
        gateway = MockPaymentGateway()
        gateway.set_authorization_status(
            "pi_mock_123", AuthorizationStatus.CANCELED
        )

        gateway = MockPaymentGateway(fail_requests=True)
    """

    def __init__(
        self,
        configured: bool = True,
        fail_requests: bool = False,
        card: CardDetails | None = None,
    ) -> None:
        """
        Initialize mock gateway.

        Args:
            configured: If False, is_configured reports a missing credential.
            fail_requests: If True, every processor call raises GatewayError.
            card: Card attached to succeeded authorizations.
        """
        self._configured = configured
        self._fail_requests = fail_requests
        self._card = card or CardDetails(last4="4242", brand="visa")

        self._payers: dict[str, Payer] = {}
        self._authorizations: dict[str, ChargeAuthorization] = {}
        self._refunds: dict[str, GatewayRefund] = {}

    @property
    def provider(self) -> GatewayProvider:
        return GatewayProvider.MOCK

    @property
    def is_configured(self) -> bool:
        return self._configured

    # =========================================================================
    # Configuration methods (for test setup)
    # =========================================================================

    def add_payer(self, email: str) -> Payer:
        """Register an existing payer for an email."""
        payer = Payer(id=f"cus_mock_{uuid.uuid4().hex[:12]}", email=email)
        self._payers[email] = payer
        return payer

    def set_authorization_status(
        self,
        authorization_id: str,
        status: AuthorizationStatus,
        last_error_message: str | None = None,
    ) -> None:
        """Override the outcome of a tracked authorization."""
        if authorization_id in self._authorizations:
            authorization = self._authorizations[authorization_id]
            self._authorizations[authorization_id] = authorization.model_copy(
                update={
                    "status": status,
                    "last_error_message": last_error_message,
                    "card": self._card
                    if status == AuthorizationStatus.SUCCEEDED
                    else None,
                }
            )

    @property
    def refunds(self) -> list[GatewayRefund]:
        """Refunds issued so far, oldest first."""
        return list(self._refunds.values())

    def _check_available(self) -> None:
        if self._fail_requests:
            raise GatewayError(
                "Mock processor unavailable",
                code="api_connection_error",
                provider=GatewayProvider.MOCK.value,
            )

    # =========================================================================
    # Payers
    # =========================================================================

    def find_or_create_payer(self, email: str, metadata: dict[str, str]) -> Payer:
        """Find a payer by email, or create one."""
        self._check_available()

        if email in self._payers:
            return self._payers[email]

        payer = Payer(
            id=f"cus_mock_{uuid.uuid4().hex[:12]}",
            email=email,
            created=True,
        )
        self._payers[email] = payer.model_copy(update={"created": False})
        return payer

    # =========================================================================
    # Charge authorizations
    # =========================================================================

    def create_authorization(
        self,
        amount: int,
        currency: str,
        payer_id: str,  # noqa: ARG002
        metadata: dict[str, str],
        description: str,  # noqa: ARG002
    ) -> ChargeAuthorization:
        """Create an authorization awaiting the customer's card."""
        self._check_available()

        if amount <= 0:
            raise GatewayError(
                "Amount must be a positive integer",
                code="parameter_invalid_integer",
                provider=GatewayProvider.MOCK.value,
            )

        authorization_id = f"pi_mock_{uuid.uuid4().hex[:16]}"
        status, error_message = _outcome_for(amount)

        # Track the outcome the customer will reach
        self._authorizations[authorization_id] = ChargeAuthorization(
            id=authorization_id,
            client_secret=f"{authorization_id}_secret_{uuid.uuid4().hex[:8]}",
            amount=amount,
            currency=currency,
            status=status,
            last_error_message=error_message,
            card=self._card if status == AuthorizationStatus.SUCCEEDED else None,
            metadata=dict(metadata),
        )

        return self._authorizations[authorization_id].model_copy(
            update={
                "status": AuthorizationStatus.REQUIRES_PAYMENT_METHOD,
                "last_error_message": None,
                "card": None,
            }
        )

    def retrieve_authorization(self, authorization_id: str) -> ChargeAuthorization:
        """Get the current state of a tracked authorization."""
        self._check_available()

        if authorization_id in self._authorizations:
            return self._authorizations[authorization_id]

        raise GatewayError(
            f"No such payment_intent: '{authorization_id}'",
            code="resource_missing",
            provider=GatewayProvider.MOCK.value,
        )

    # =========================================================================
    # Refunds
    # =========================================================================

    def create_refund(
        self, authorization_id: str, metadata: dict[str, str]  # noqa: ARG002
    ) -> GatewayRefund:
        """Refund a succeeded authorization in full."""
        authorization = self.retrieve_authorization(authorization_id)

        if not authorization.succeeded:
            raise GatewayError(
                "This PaymentIntent does not have a successful charge to refund.",
                code="charge_not_refundable",
                provider=GatewayProvider.MOCK.value,
            )

        refund = GatewayRefund(
            id=f"re_mock_{uuid.uuid4().hex[:16]}",
            authorization_id=authorization_id,
            amount=authorization.amount,
        )
        self._refunds[refund.id] = refund
        return refund
