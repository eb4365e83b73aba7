"""
Shopify GraphQL clients organized by responsibility.
"""

from .base_client import BaseShopifyGraphQLClient
from .order_client import OrderFetcher, ShopifyOrderClient, to_order_gid

__all__ = [
    "BaseShopifyGraphQLClient",
    "OrderFetcher",
    "ShopifyOrderClient",
    "to_order_gid",
]
