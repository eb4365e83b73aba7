"""
Order view domain models.

An OrderView is the slice of a Shopify order the listing, detail and export
need. Status codes are kept as raw strings so that values Shopify adds later
still flow through to labels unchanged.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from app.domain.models.line_item import LineItem
from app.domain.value_objects.money import Money


@dataclass(frozen=True)
class OrderView:
    """
    Order as displayed and exported.

    Attributes:
        id: Shopify Order gid (gid://shopify/Order/123)
        name: Display name (#1001)
        created_at: Creation timestamp (timezone-aware, UTC)
        financial_status: displayFinancialStatus code
        fulfillment_status: displayFulfillmentStatus code
        shipping_method: Shipping line title, if any
        total_price: Order total in shop currency
        line_items: Line items in Shopify order
    """

    id: str
    name: str
    created_at: datetime
    financial_status: Optional[str]
    fulfillment_status: Optional[str]
    shipping_method: Optional[str]
    total_price: Money
    line_items: tuple[LineItem, ...] = ()

    @property
    def legacy_id(self) -> str:
        """Numeric id used in admin URLs (tail of the gid)."""
        return self.id.rsplit("/", 1)[-1]

    @property
    def currency(self) -> str:
        return self.total_price.currency


@dataclass(frozen=True)
class PageInfo:
    """Cursor metadata of a fetched page."""

    has_next_page: bool = False
    has_previous_page: bool = False
    start_cursor: Optional[str] = None
    end_cursor: Optional[str] = None


@dataclass(frozen=True)
class OrderPage:
    """One page of orders plus its upstream page info."""

    orders: tuple[OrderView, ...]
    page_info: PageInfo
