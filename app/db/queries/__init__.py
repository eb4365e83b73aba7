"""
GraphQL queries used against the Shopify Admin API.
"""

from .orders import ORDER_DETAIL_QUERY, ORDERS_PAGE_QUERY, SHOP_INFO_QUERY

__all__ = ["ORDERS_PAGE_QUERY", "ORDER_DETAIL_QUERY", "SHOP_INFO_QUERY"]
