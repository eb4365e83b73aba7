"""
Shopify order client for the bundle order list.

Fetches one page of orders (or one order) and returns the raw GraphQL JSON;
conversion into domain values happens in the services layer.
"""

import logging
from typing import Any, Optional, Protocol

from app.db.queries import ORDER_DETAIL_QUERY, ORDERS_PAGE_QUERY
from app.domain.models.page_state import FetchParams

from .base_client import BaseShopifyGraphQLClient

logger = logging.getLogger(__name__)

ORDER_GID_PREFIX = "gid://shopify/Order/"


class OrderFetcher(Protocol):
    """Order-fetch collaborator consumed by the order list service."""

    async def fetch_orders_page(self, params: FetchParams) -> dict[str, Any]: ...

    async def fetch_order(self, order_id: str) -> Optional[dict[str, Any]]: ...


def to_order_gid(order_id: str) -> str:
    """Accept a numeric id or a full gid and return the gid."""
    order_id = str(order_id).strip()
    return order_id if order_id.startswith("gid://") else f"{ORDER_GID_PREFIX}{order_id}"


class ShopifyOrderClient(BaseShopifyGraphQLClient):
    """
    Specialized client for listing orders with their line items.
    """

    def __init__(self, line_items_per_order: Optional[int] = None):
        super().__init__()
        self.line_items_per_order = line_items_per_order or self.settings.LINE_ITEMS_PER_ORDER

    async def fetch_orders_page(self, params: FetchParams) -> dict[str, Any]:
        """
        Fetch one page of the ``orders`` connection.

        Args:
            params: Pagination and search arguments

        Returns:
            Dict: The ``orders`` connection (edges + pageInfo), or {} when
                the response has none

        Raises:
            ShopifyAPIException: If the query fails
        """
        variables = {**params.to_variables(), "lineItemsFirst": self.line_items_per_order}
        logger.debug(f"Fetching orders page with variables: {variables}")

        data = await self._execute_query(ORDERS_PAGE_QUERY, variables)
        connection = data.get("orders") or {}

        logger.info(f"📦 Fetched {len(connection.get('edges') or [])} orders from Shopify")
        return connection

    async def fetch_order(self, order_id: str) -> Optional[dict[str, Any]]:
        """
        Fetch a single order by numeric id or gid.

        Returns:
            Dict: Order node, or None if the order does not exist
        """
        data = await self._execute_query(
            ORDER_DETAIL_QUERY,
            {"id": to_order_gid(order_id), "lineItemsFirst": self.line_items_per_order},
        )
        return data.get("order")
