"""
Reservation deposit API views.

These endpoints are used by the booking frontend and the staff dashboard:
- At booking: create the deposit intent, then confirm it
- After booking: status polling and cancellation refunds
- Staff: list all deposits and correct them by hand
"""

import json
import logging
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from apps.web.payments import services
from apps.web.payments.exceptions import GatewayError, PaymentServiceError
from apps.web.payments.serializers import (
    AdminPaymentUpdateRequest,
    ConfirmPaymentRequest,
    CreateIntentRequest,
    RefundRequest,
    ValidationErrorDetail,
    ValidationErrorResponse,
    VerifyPaymentRequest,
)

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class _InvalidBody(Exception):
    def __init__(self, response: JsonResponse) -> None:
        self.response = response


def _json_response(data: Any, status: int = 200) -> JsonResponse:
    """Create a JSON response; lists are allowed."""
    return JsonResponse(data, status=status, safe=False)


def _dump(schema: BaseModel) -> dict[str, Any]:
    return schema.model_dump(mode="json", by_alias=True)


def _parse_body(request: HttpRequest, schema: type[SchemaT]) -> SchemaT:
    """
    Parse and validate a JSON request body.

    An empty body is treated as an empty object.

    Raises:
        _InvalidBody: With the 400 response to return.
    """
    try:
        body = json.loads(request.body or b"{}")
        return schema.model_validate(body)
    except json.JSONDecodeError as e:
        response = ValidationErrorResponse(
            error="validation_error",
            details=[
                ValidationErrorDetail(field="body", message="Invalid JSON in request body")
            ],
        )
        raise _InvalidBody(_json_response(response.model_dump(), status=400)) from e
    except PydanticValidationError as e:
        errors = [
            ValidationErrorDetail(
                field=".".join(str(loc) for loc in err["loc"]) or "body",
                message=err["msg"],
            )
            for err in e.errors()
        ]
        response = ValidationErrorResponse(error="validation_error", details=errors)
        raise _InvalidBody(_json_response(response.model_dump(), status=400)) from e


def _error_response(error: PaymentServiceError) -> JsonResponse:
    """Translate a service error into its JSON response."""
    data: dict[str, Any] = {"error": error.message, "code": error.code}
    if isinstance(error, GatewayError):
        data["details"] = error.message
    return _json_response(data, status=error.status_code)


def handles_payment_errors(
    view: Callable[..., JsonResponse],
) -> Callable[..., JsonResponse]:
    """Map payment service errors and invalid bodies to JSON responses."""

    @wraps(view)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> JsonResponse:
        try:
            return view(request, *args, **kwargs)
        except _InvalidBody as e:
            return e.response
        except PaymentServiceError as e:
            if e.status_code >= 500:
                logger.error("%s %s failed: %s", request.method, request.path, e.message)
            return _error_response(e)

    return wrapper


# =============================================================================
# Customer endpoints
# =============================================================================


@csrf_exempt
@require_POST
@handles_payment_errors
def create_intent(request: HttpRequest) -> JsonResponse:
    """
    POST /payments/reservation/create-intent

    Create the deposit payment intent for a reservation.

    Request body: CreateIntentRequest schema
    Response: CreateIntentResponse schema (200) or error
    """
    # Unconfigured service is reported before request validation
    gateway = services.require_configured()

    body = _parse_body(request, CreateIntentRequest)
    result = services.create_reservation_intent(
        body.reservation_id,
        body.amount,
        body.email,
        gateway=gateway,
    )
    return _json_response(_dump(result))


@csrf_exempt
@require_POST
@handles_payment_errors
def confirm_payment(request: HttpRequest) -> JsonResponse:
    """
    POST /payments/reservation/confirm

    Confirm the deposit after the customer completes payment.

    Request body: ConfirmPaymentRequest schema
    Response: ConfirmPaymentResponse schema (200). success=false on decline
    or while processing.
    """
    body = _parse_body(request, ConfirmPaymentRequest)
    result = services.confirm_reservation_payment(
        body.payment_intent_id,
        body.reservation_id,
    )
    return _json_response(_dump(result))


@require_GET
@handles_payment_errors
def payment_status(request: HttpRequest, reservation_id: int) -> JsonResponse:
    """
    GET /payments/reservation/status/{reservation_id}

    Response: PaymentStatusResponse schema (200) or 404
    """
    result = services.get_payment_status(reservation_id)
    return _json_response(_dump(result))


@csrf_exempt
@require_POST
@handles_payment_errors
def refund_payment(request: HttpRequest, reservation_id: int) -> JsonResponse:
    """
    POST /payments/reservation/refund/{reservation_id}

    Refund a completed deposit, e.g. when the reservation is cancelled.

    Request body: RefundRequest schema (reason optional)
    Response: RefundResponse schema (200) or error
    """
    gateway = services.require_configured()

    body = _parse_body(request, RefundRequest)
    result = services.refund_reservation_payment(
        reservation_id,
        reason=body.reason,
        gateway=gateway,
    )
    return _json_response(_dump(result))


@csrf_exempt
@require_POST
@handles_payment_errors
def verify_payment(request: HttpRequest) -> JsonResponse:
    """
    POST /payments/verify-payment

    Read an intent's status straight from the processor.

    Request body: VerifyPaymentRequest schema
    Response: VerifyPaymentResponse schema (200) or error
    """
    gateway = services.require_configured()

    body = _parse_body(request, VerifyPaymentRequest)
    result = services.verify_payment(body.payment_intent_id, gateway=gateway)
    return _json_response(_dump(result))


# =============================================================================
# Staff endpoints
# =============================================================================


@require_GET
@handles_payment_errors
def admin_list_payments(request: HttpRequest) -> JsonResponse:
    """
    GET /payments/admin/reservations

    All deposits joined with reservation details, newest first.
    """
    payments = services.list_reservation_payments()
    return _json_response([_dump(payment) for payment in payments])


@csrf_exempt
@require_http_methods(["PATCH"])
@handles_payment_errors
def admin_update_payment(request: HttpRequest, payment_id: int) -> JsonResponse:
    """
    PATCH /payments/admin/reservation/{payment_id}

    Staff override of payment method and/or status.

    Request body: AdminPaymentUpdateRequest schema
    Response: AdminPaymentUpdateResponse schema (200) or error
    """
    body = _parse_body(request, AdminPaymentUpdateRequest)
    result = services.admin_update_payment(
        payment_id,
        payment_method=body.payment_method,
        status=body.status,
    )
    return _json_response(_dump(result))
