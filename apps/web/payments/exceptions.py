"""Reservation payment exceptions."""


class PaymentServiceError(Exception):
    """Base exception for reservation payment errors."""

    status_code = 500
    default_code = "PAYMENT_SERVICE_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)


class ConfigurationError(PaymentServiceError):
    """Payment processor credential is missing - service unavailable."""

    status_code = 503
    default_code = "PAYMENTS_NOT_CONFIGURED"


class ValidationError(PaymentServiceError):
    """Required field missing or malformed."""

    status_code = 400
    default_code = "VALIDATION_ERROR"


class NotFoundError(PaymentServiceError):
    """Reservation or payment record does not exist."""

    status_code = 404
    default_code = "NOT_FOUND"


class InvalidStateError(PaymentServiceError):
    """Operation not allowed in the payment's current status."""

    status_code = 400
    default_code = "INVALID_STATE"


class GatewayError(PaymentServiceError):
    """Payment processor call failed."""

    status_code = 500
    default_code = "GATEWAY_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        provider: str | None = None,
    ) -> None:
        super().__init__(message, code)
        self.provider = provider
