"""Shopify order status codes used by filters and labels."""

from enum import Enum


class FulfillmentStatus(str, Enum):
    """Estados de cumplimiento de pedidos (displayFulfillmentStatus)."""

    UNFULFILLED = "UNFULFILLED"
    PARTIALLY_FULFILLED = "PARTIALLY_FULFILLED"
    FULFILLED = "FULFILLED"
    SCHEDULED = "SCHEDULED"
    ON_HOLD = "ON_HOLD"


class FinancialStatus(str, Enum):
    """Estados financieros de pedidos (displayFinancialStatus)."""

    PENDING = "PENDING"
    AUTHORIZED = "AUTHORIZED"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    PAID = "PAID"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"
    REFUNDED = "REFUNDED"
    VOIDED = "VOIDED"
    EXPIRED = "EXPIRED"
