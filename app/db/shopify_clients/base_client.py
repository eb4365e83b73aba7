"""
Base Shopify GraphQL client with common functionality.

This module provides the foundation for the Shopify GraphQL clients,
including connection management, rate limiting, and basic query execution.
"""

import asyncio
import logging
import time
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import ClientTimeout

from app.core.config import get_settings
from app.db.queries import SHOP_INFO_QUERY
from app.utils.error_handler import ShopifyAPIException

logger = logging.getLogger(__name__)


class BaseShopifyGraphQLClient:
    """
    Base client for Shopify GraphQL API operations.

    Provides connection management, rate limiting, error handling and query
    execution that the specialized clients inherit.
    """

    def __init__(self):
        """Initialize the base Shopify GraphQL client."""
        self.settings = get_settings()
        self.shop_domain = self.settings.shop_domain
        self.api_version = self.settings.SHOPIFY_API_VERSION
        self.graphql_url = self.settings.shopify_graphql_url
        self.max_retries = self.settings.SHOPIFY_MAX_RETRIES

        self.session: Optional[aiohttp.ClientSession] = None
        self._last_request_time = 0.0
        self._min_request_interval = 0.5  # 500ms between requests for rate limiting

        logger.info(f"Initialized Shopify GraphQL client for {self.shop_domain}")

    async def initialize(self, test_connection: bool = True):
        """
        Initialize the HTTP session and optionally test the connection.

        Raises:
            ShopifyAPIException: If initialization fails
        """
        try:
            timeout = ClientTimeout(total=self.settings.SHOPIFY_REQUEST_TIMEOUT, connect=10)
            connector = aiohttp.TCPConnector(limit=100, limit_per_host=30)

            self.session = aiohttp.ClientSession(
                timeout=timeout,
                connector=connector,
                headers=self.settings.get_shopify_headers(),
            )

            if test_connection:
                await self.test_connection()
            logger.info("✅ Shopify GraphQL client initialized successfully")

        except Exception as e:
            logger.error(f"❌ Failed to initialize Shopify GraphQL client: {e}")
            await self.close()
            raise ShopifyAPIException(f"Client initialization failed: {str(e)}") from e

    async def close(self):
        """Close the HTTP session and clean up resources."""
        if self.session:
            await self.session.close()
            self.session = None
            logger.info("Shopify GraphQL client closed")

    async def __aenter__(self):
        await self.initialize(test_connection=False)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def _execute_query(
        self, query: str, variables: Optional[Dict[str, Any]] = None, max_retries: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Execute a GraphQL query with rate limiting and error handling.

        Network errors and 429 responses are retried; HTTP and GraphQL errors
        are raised immediately.

        Args:
            query: GraphQL query string
            variables: Query variables
            max_retries: Maximum number of attempts (default from settings)

        Returns:
            Dict: ``data`` member of the response

        Raises:
            ShopifyAPIException: If the query fails after retries
        """
        if not self.session:
            raise ShopifyAPIException("Client not initialized. Call initialize() first.")

        attempts = max(1, max_retries or self.max_retries)

        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        last_exception: Optional[ShopifyAPIException] = None

        for attempt in range(attempts):
            await self._check_rate_limit()

            try:
                async with self.session.post(self.graphql_url, json=payload) as response:
                    self._last_request_time = time.time()

                    if response.status == 429:
                        retry_after = int(response.headers.get("Retry-After", 2))
                        logger.warning(f"Rate limit exceeded, waiting {retry_after}s (attempt {attempt + 1})")
                        last_exception = ShopifyAPIException(
                            "Rate limit exceeded",
                            api_response_code=429,
                            endpoint=self.graphql_url,
                            rate_limited=True,
                            retry_after=retry_after,
                        )
                        await asyncio.sleep(retry_after)
                        continue

                    if response.status != 200:
                        body = await response.text()
                        raise ShopifyAPIException(
                            f"HTTP {response.status}: {body[:200]}",
                            api_response_code=response.status,
                            endpoint=self.graphql_url,
                        )

                    try:
                        response_data = await response.json()
                    except ValueError as e:
                        raise ShopifyAPIException(
                            f"Invalid JSON response: {str(e)}",
                            api_response_code=502,
                            endpoint=self.graphql_url,
                        ) from e

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exception = ShopifyAPIException(f"Network error: {str(e)}", endpoint=self.graphql_url)
                if attempt < attempts - 1:
                    wait_time = min(2**attempt, 10)  # Exponential backoff, max 10s
                    logger.warning(f"Network error, retrying in {wait_time}s (attempt {attempt + 1})")
                    await asyncio.sleep(wait_time)
                continue

            self._handle_graphql_errors(response_data)
            return response_data.get("data") or {}

        raise last_exception or ShopifyAPIException("Query execution failed after retries")

    async def _check_rate_limit(self):
        """
        Implement basic rate limiting to avoid overwhelming Shopify's API.
        """
        time_since_last_request = time.time() - self._last_request_time

        if time_since_last_request < self._min_request_interval:
            await asyncio.sleep(self._min_request_interval - time_since_last_request)

    async def test_connection(self) -> bool:
        """
        Test the connection to Shopify GraphQL API.

        Returns:
            bool: True if connection is successful

        Raises:
            ShopifyAPIException: If connection test fails
        """
        try:
            result = await self._execute_query(SHOP_INFO_QUERY, max_retries=1)
            shop_info = result.get("shop", {})
            logger.info(
                f"✅ Connected to Shopify store: {shop_info.get('name', 'Unknown')} "
                f"({shop_info.get('currencyCode', 'Unknown')})"
            )
            return True

        except Exception as e:
            logger.error(f"❌ Connection test failed: {e}")
            raise ShopifyAPIException(f"Connection test failed: {str(e)}") from e

    def _handle_graphql_errors(self, response_data: Dict[str, Any], operation: str = "query"):
        """
        Handle GraphQL errors consistently across all clients.

        Raises:
            ShopifyAPIException: If the response carries GraphQL errors
        """
        if response_data.get("errors"):
            error_messages = [err.get("message", str(err)) for err in response_data["errors"]]
            raise ShopifyAPIException(
                f"{operation} GraphQL errors: {', '.join(error_messages)}",
                endpoint=self.graphql_url,
            )

    def __repr__(self):
        """Detailed string representation of the client."""
        return (
            f"{self.__class__.__name__}("
            f"shop='{self.shop_domain}', "
            f"api_version='{self.api_version}', "
            f"initialized={self.session is not None})"
        )
