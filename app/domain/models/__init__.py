"""
Domain models for business entities.

These models represent core business concepts and contain
business logic and invariants.
"""

from .line_item import (
    BundleAggregate,
    BundleProduct,
    BundleRef,
    BundleSource,
    GroupingResult,
    LineItem,
    LineItemGroupRef,
    StandaloneProduct,
)
from .order_view import OrderPage, OrderView, PageInfo
from .page_state import Direction, FetchParams, PageState
from .statuses import FinancialStatus, FulfillmentStatus

__all__ = [
    "BundleAggregate",
    "BundleProduct",
    "BundleRef",
    "BundleSource",
    "Direction",
    "FetchParams",
    "FinancialStatus",
    "FulfillmentStatus",
    "GroupingResult",
    "LineItem",
    "LineItemGroupRef",
    "OrderPage",
    "OrderView",
    "PageInfo",
    "PageState",
    "StandaloneProduct",
]
