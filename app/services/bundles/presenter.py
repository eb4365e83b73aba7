"""
Display formatting for the order list, the order detail and the export.

Labels are French, as shown to the merchant in the Shopify admin.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

import pytz

from app.domain.models.order_view import OrderView
from app.domain.models.page_state import PageState
from app.services.bundles.status_translator import translate_financial_status, translate_fulfillment_status

SHIPPING_UNSPECIFIED = "Non spécifié"
DATE_FORMAT = "%d/%m/%Y"


class EmptyResultKind(str, Enum):
    NO_ORDERS = "no_orders"
    NO_MATCHES = "no_matches"


EMPTY_RESULT_MESSAGES = {
    EmptyResultKind.NO_ORDERS: "Votre store n'a pas encore de commandes.",
    EmptyResultKind.NO_MATCHES: "Aucune commande ne correspond à votre recherche.",
}


@dataclass(frozen=True)
class FilterChip:
    """Applied filter shown above the list, removable by ``key``."""

    key: str
    label: str


def format_order_date(created_at: datetime, timezone_name: str = "Europe/Paris") -> str:
    """
    Format a creation timestamp as dd/mm/YYYY in the shop's display timezone.

    Naive datetimes are taken as UTC.
    """
    if created_at.tzinfo is None:
        created_at = pytz.utc.localize(created_at)
    return created_at.astimezone(pytz.timezone(timezone_name)).strftime(DATE_FORMAT)


def format_filter_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def shipping_label(order: OrderView) -> str:
    return order.shipping_method or SHIPPING_UNSPECIFIED


def item_count_label(count: int) -> str:
    """'1 produit', '3 produits'."""
    return f"{count} produit{'s' if count > 1 else ''}"


def admin_order_url(shop_domain: str, order: OrderView) -> str:
    """Link to the order in the Shopify admin."""
    return f"https://{shop_domain}/admin/orders/{order.legacy_id}"


def date_range_label(date_from: Optional[date], date_to: Optional[date]) -> Optional[str]:
    if date_from and date_to:
        return f"Date: {format_filter_date(date_from)} - {format_filter_date(date_to)}"
    if date_from:
        return f"Date: À partir du {format_filter_date(date_from)}"
    if date_to:
        return f"Date: Jusqu'au {format_filter_date(date_to)}"
    return None


def applied_filter_chips(state: PageState) -> list[FilterChip]:
    """Chips for the filters currently applied to the list."""
    chips = []
    if state.query_text:
        chips.append(FilterChip("query", f"Recherche: {state.query_text}"))
    if state.status_filter:
        chips.append(FilterChip("status", f"Statut livraison: {translate_fulfillment_status(state.status_filter)}"))
    if state.payment_status_filter:
        chips.append(
            FilterChip("paymentStatus", f"Statut paiement: {translate_financial_status(state.payment_status_filter)}")
        )
    date_label = date_range_label(state.date_from, state.date_to)
    if date_label:
        chips.append(FilterChip("date", date_label))
    return chips


def empty_result_kind(state: PageState) -> EmptyResultKind:
    """Tell "no orders at all" from "no orders match the filters"."""
    return EmptyResultKind.NO_MATCHES if state.has_active_filters else EmptyResultKind.NO_ORDERS


def empty_result_message(state: PageState) -> str:
    return EMPTY_RESULT_MESSAGES[empty_result_kind(state)]
