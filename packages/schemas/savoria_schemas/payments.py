"""Payment gateway schemas - data contracts for card processors."""

from enum import Enum

from pydantic import BaseModel, Field

# =============================================================================
# Enums
# =============================================================================


class GatewayProvider(str, Enum):
    """Supported payment gateways."""

    STRIPE = "stripe"
    MOCK = "mock"


class AuthorizationStatus(str, Enum):
    """
    Processor-side status of a charge authorization.

    Mirrors the Stripe PaymentIntent lifecycle.
    """

    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    REQUIRES_CONFIRMATION = "requires_confirmation"
    REQUIRES_ACTION = "requires_action"
    PROCESSING = "processing"
    REQUIRES_CAPTURE = "requires_capture"
    SUCCEEDED = "succeeded"
    CANCELED = "canceled"


# =============================================================================
# Payers
# =============================================================================


class Payer(BaseModel):
    """A payer identity held by the processor (Stripe Customer)."""

    id: str = Field(description="Payer ID in the processor")
    email: str
    created: bool = Field(
        default=False,
        description="True when the payer was created by this call",
    )


# =============================================================================
# Authorizations
# =============================================================================


class CardDetails(BaseModel):
    """Card used for a charge. Best-effort, may be absent."""

    last4: str = ""
    brand: str = ""


class ChargeAuthorization(BaseModel):
    """A request to charge a payer a fixed amount (Stripe PaymentIntent)."""

    id: str
    client_secret: str | None = None
    amount: int = Field(..., ge=0, description="Smallest currency unit")
    currency: str = "usd"
    status: AuthorizationStatus
    last_error_message: str | None = None
    card: CardDetails | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == AuthorizationStatus.SUCCEEDED

    @property
    def is_processing(self) -> bool:
        return self.status == AuthorizationStatus.PROCESSING


# =============================================================================
# Refunds
# =============================================================================


class GatewayRefund(BaseModel):
    """Result of reversing a completed charge."""

    id: str
    authorization_id: str
    amount: int | None = None
    status: str = "succeeded"
