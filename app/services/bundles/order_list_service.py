"""
Order list orchestration.

Issues exactly one fetch per navigation action through the order-fetch
collaborator, converts the page, applies the client-side status filters and
tracks the pager status (IDLE -> FETCHING -> IDLE | ERROR). A failed fetch
leaves the page state where it was.
"""

import logging
from dataclasses import dataclass, replace
from typing import AsyncIterator, Optional

from app.db.shopify_clients.order_client import OrderFetcher
from app.domain.models.order_view import OrderView, PageInfo
from app.domain.models.page_state import Direction, PageState
from app.services.bundles.order_converter import convert_order, convert_orders_connection
from app.services.bundles.pager import (
    NavigationAction,
    PagerEvent,
    PagerStatus,
    advance_status,
    apply_client_filters,
    apply_navigation,
    build_fetch_request,
    needs_fetch,
)
from app.services.bundles.presenter import EmptyResultKind, empty_result_kind
from app.utils.error_handler import (
    AppException,
    MalformedPriceError,
    OrderNotFoundException,
    UpstreamFetchError,
    log_error,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderListResult:
    """
    Outcome of loading one page.

    Attributes:
        state: Page state the orders belong to (unchanged on error)
        status: Pager status after the fetch
        orders: Orders left after client-side filtering
        page_info: Upstream page info
        fetched_count: Orders returned upstream before client-side filtering
        error: Fetch failure, when status is ERROR
    """

    state: PageState
    status: PagerStatus
    orders: tuple[OrderView, ...] = ()
    page_info: PageInfo = PageInfo()
    fetched_count: int = 0
    error: Optional[UpstreamFetchError] = None

    @property
    def is_empty(self) -> bool:
        return not self.orders

    @property
    def empty_kind(self) -> Optional[EmptyResultKind]:
        if not self.is_empty or self.error:
            return None
        return empty_result_kind(self.state)


class OrderListService:
    """
    Loads pages of the bundle order list.

    Args:
        fetcher: Order-fetch collaborator (ShopifyOrderClient in production)
        page_size: Orders requested per page
    """

    def __init__(self, fetcher: OrderFetcher, page_size: int = 50):
        self.fetcher = fetcher
        self.page_size = page_size
        self.status = PagerStatus.IDLE

    async def load_page(self, state: PageState) -> OrderListResult:
        """
        Fetch the page described by ``state``.

        Returns:
            OrderListResult: IDLE with orders, or ERROR with the upstream error

        Raises:
            MalformedPriceError: If a price in the page cannot be parsed
        """
        self.status = advance_status(self.status, PagerEvent.NAVIGATE)
        params = build_fetch_request(state, self.page_size)

        try:
            connection = await self.fetcher.fetch_orders_page(params)
            page = convert_orders_connection(connection)
        except MalformedPriceError:
            self.status = advance_status(self.status, PagerEvent.FAILED)
            raise
        except (AppException, OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            self.status = advance_status(self.status, PagerEvent.FAILED)
            error = UpstreamFetchError(
                f"Failed to fetch orders page: {e}",
                details={"variables": params.to_variables(), "cause": type(e).__name__},
            )
            log_error(error, {"page_state": state.to_query_params()})
            return OrderListResult(state=state, status=self.status, error=error)
        except BaseException:
            # The pager must never stay in FETCHING
            self.status = advance_status(self.status, PagerEvent.FAILED)
            raise

        self.status = advance_status(self.status, PagerEvent.SUCCEEDED)
        orders = apply_client_filters(page.orders, state)

        logger.info(
            f"📄 Orders page loaded: {len(orders)}/{len(page.orders)} after filters "
            f"(next={page.page_info.has_next_page}, previous={page.page_info.has_previous_page})"
        )
        return OrderListResult(
            state=state,
            status=self.status,
            orders=tuple(orders),
            page_info=page.page_info,
            fetched_count=len(page.orders),
        )

    async def navigate(
        self, state: PageState, action: NavigationAction, page_info: Optional[PageInfo] = None
    ) -> Optional[OrderListResult]:
        """
        Apply a user action and load the resulting page.

        Returns:
            OrderListResult, or None when the action is a no-op and no
            request was issued
        """
        new_state = apply_navigation(state, action, page_info)
        if not needs_fetch(state, new_state):
            logger.debug(f"Navigation '{action.kind.value}' is a no-op")
            return None
        return await self.load_page(new_state)

    async def iter_pages(self, state: PageState, max_pages: int) -> AsyncIterator[OrderListResult]:
        """
        Walk forward from the first page of the filters in ``state``.

        Raises:
            UpstreamFetchError: If any page fails to load
        """
        current = replace(state, cursor=None, direction=Direction.NEXT)

        for page_number in range(1, max_pages + 1):
            result = await self.load_page(current)
            if result.error:
                raise result.error

            yield result

            following = apply_navigation(current, NavigationAction.next(), result.page_info)
            if not needs_fetch(current, following):
                return
            current = following

            if page_number == max_pages:
                logger.warning(f"⚠️ Export truncated after {max_pages} pages, more orders exist")

    async def collect_orders(self, state: PageState, max_pages: int) -> list[OrderView]:
        """Every order matching the filters of ``state``, up to ``max_pages`` pages."""
        orders: list[OrderView] = []
        async for result in self.iter_pages(state, max_pages):
            orders.extend(result.orders)
        return orders

    async def get_order(self, order_id: str) -> OrderView:
        """
        Fetch and convert one order.

        Raises:
            OrderNotFoundException: If Shopify has no such order
            UpstreamFetchError: If the fetch fails
        """
        try:
            node = await self.fetcher.fetch_order(order_id)
        except (AppException, OSError, ValueError) as e:
            raise UpstreamFetchError(f"Failed to fetch order {order_id}: {e}", operation="fetch_order") from e

        if not node:
            raise OrderNotFoundException(order_id)
        return convert_order(node)
