"""Savoria Schemas - Pydantic models for data contracts."""

from savoria_schemas.payments import (
    AuthorizationStatus,
    CardDetails,
    ChargeAuthorization,
    GatewayProvider,
    GatewayRefund,
    Payer,
)

__all__ = [
    "AuthorizationStatus",
    "CardDetails",
    "ChargeAuthorization",
    "GatewayProvider",
    "GatewayRefund",
    "Payer",
]
