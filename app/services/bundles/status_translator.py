"""
French labels for Shopify order status codes.

Unknown codes are returned unchanged so that statuses Shopify introduces
later still show up instead of failing the listing or the export.
"""

from enum import Enum
from typing import Optional


class StatusKind(str, Enum):
    FINANCIAL = "financial"
    FULFILLMENT = "fulfillment"


FINANCIAL_STATUS_LABELS = {
    "PENDING": "En attente",
    "AUTHORIZED": "Autorisé",
    "PARTIALLY_PAID": "Partiellement payé",
    "PAID": "Payé",
    "PARTIALLY_REFUNDED": "Partiellement remboursé",
    "REFUNDED": "Remboursé",
    "VOIDED": "Annulé",
    "EXPIRED": "Expiré",
}

FULFILLMENT_STATUS_LABELS = {
    "UNFULFILLED": "Non traitée",
    "PARTIALLY_FULFILLED": "Partiellement traitée",
    "FULFILLED": "Traitée",
    "SCHEDULED": "Planifiée",
    "ON_HOLD": "En attente",
}

_TABLES = {
    StatusKind.FINANCIAL: FINANCIAL_STATUS_LABELS,
    StatusKind.FULFILLMENT: FULFILLMENT_STATUS_LABELS,
}


def translate(code: Optional[str], kind: StatusKind) -> str:
    """
    Label for a status code.

    Args:
        code: Shopify status code (str or status Enum member)
        kind: Table to look the code up in

    Returns:
        str: French label, the code itself when unknown, "" for None
    """
    if code is None:
        return ""
    value = code.value if isinstance(code, Enum) else str(code)
    return _TABLES[StatusKind(kind)].get(value, value)


def translate_financial_status(code: Optional[str]) -> str:
    return translate(code, StatusKind.FINANCIAL)


def translate_fulfillment_status(code: Optional[str]) -> str:
    return translate(code, StatusKind.FULFILLMENT)
