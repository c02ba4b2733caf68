"""
Pydantic schemas for reservation payment API requests and responses.

JSON keys are camelCase on the wire; Python attributes stay snake_case.
"""

import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from apps.web.payments.models import PaymentMethod, PaymentStatus


class CamelSchema(BaseModel):
    """Base schema that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# Requests
# =============================================================================


class CreateIntentRequest(CamelSchema):
    """Request body for POST /payments/reservation/create-intent."""

    reservation_id: int
    amount: int = Field(..., gt=0, description="Deposit in cents")
    email: str = Field(..., min_length=1, pattern=r"^[^@]+@[^@]+\.[^@]+$")


class ConfirmPaymentRequest(CamelSchema):
    """Request body for POST /payments/reservation/confirm."""

    payment_intent_id: str = Field(..., min_length=1)
    reservation_id: int


class RefundRequest(CamelSchema):
    """Request body for POST /payments/reservation/refund/{reservation_id}."""

    reason: str | None = Field(default=None, max_length=255)


class AdminPaymentUpdateRequest(CamelSchema):
    """Request body for PATCH /payments/admin/reservation/{payment_id}."""

    payment_method: PaymentMethod | None = None
    status: PaymentStatus | None = None


class VerifyPaymentRequest(CamelSchema):
    """Request body for POST /payments/verify-payment."""

    payment_intent_id: str = Field(..., min_length=1)


# =============================================================================
# Responses
# =============================================================================


class CreateIntentResponse(CamelSchema):
    """Response for POST /payments/reservation/create-intent."""

    client_secret: str | None
    payment_intent_id: str
    amount: int
    reservation_id: int


class ReservationSchema(CamelSchema):
    """A reservation as returned after confirmation."""

    id: int
    name: str
    email: str
    phone: str
    date: dt.date
    time: dt.time
    guests: int
    status: str
    confirmation_code: str
    payment_status: str


class ConfirmPaymentResponse(CamelSchema):
    """
    Response for POST /payments/reservation/confirm.

    success=False is a business outcome (decline or processing), not an error.
    """

    success: bool
    message: str
    status: str | None = None
    reservation: ReservationSchema | None = None


class RefundResponse(CamelSchema):
    """Response for POST /payments/reservation/refund/{reservation_id}."""

    success: bool
    message: str
    refund_id: str


class PaymentStatusResponse(CamelSchema):
    """Response for GET /payments/reservation/status/{reservation_id}."""

    payment_id: int
    status: str
    amount: int
    payment_method: str
    last4_digits: str
    card_brand: str
    paid_at: dt.datetime | None
    reservation_status: str


class ReservationSummarySchema(CamelSchema):
    """Minimal reservation fields joined onto admin payment listings."""

    id: int
    name: str
    email: str
    date: dt.date
    time: dt.time
    guests: int
    confirmation_code: str


class PaymentSchema(CamelSchema):
    """A full payment record for the admin surface."""

    id: int
    reservation_id: int
    confirmation_code: str
    user_id: str
    amount: int
    currency: str
    payment_method: str
    status: str
    payer_reference: str
    charge_authorization_id: str
    transaction_id: str
    paid_at: dt.datetime | None
    failure_reason: str
    last4_digits: str
    card_brand: str
    refund_id: str
    refund_reason: str
    refunded_at: dt.datetime | None
    created_at: dt.datetime
    updated_at: dt.datetime


class AdminPaymentSchema(PaymentSchema):
    """A payment joined with its reservation summary."""

    reservation: ReservationSummarySchema


class AdminPaymentUpdateResponse(CamelSchema):
    """Response for PATCH /payments/admin/reservation/{payment_id}."""

    success: bool
    message: str
    payment: PaymentSchema


class VerifyPaymentResponse(CamelSchema):
    """Response for POST /payments/verify-payment."""

    status: str
    id: str
    amount: int
    currency: str
    succeeded: bool
    last_error: str | None


# =============================================================================
# Errors
# =============================================================================


class ValidationErrorDetail(BaseModel):
    """A single validation error."""

    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    """Response for validation errors."""

    error: Literal["validation_error"]
    details: list[ValidationErrorDetail]
