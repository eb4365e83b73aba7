"""Tests unitarios para OrderListService con un colaborador de pedidos simulado."""

import json
from unittest.mock import AsyncMock

import pytest

from app.domain.models.order_view import PageInfo
from app.domain.models.page_state import Direction, FetchParams, PageState
from app.domain.models.statuses import FinancialStatus
from app.services.bundles.order_list_service import OrderListService
from app.services.bundles.pager import NavigationAction, PagerStatus
from app.services.bundles.presenter import EmptyResultKind
from app.utils.error_handler import (
    MalformedPriceError,
    OrderNotFoundException,
    ShopifyAPIException,
    UpstreamFetchError,
)


@pytest.fixture
def fetcher():
    mock = AsyncMock()
    mock.fetch_orders_page = AsyncMock()
    mock.fetch_order = AsyncMock()
    return mock


class TestLoadPage:
    """Tests para load_page."""

    @pytest.mark.asyncio
    async def test_one_fetch_per_load(self, fetcher, make_connection, make_order_node):
        """Debe hacer exactamente una llamada con first/after y devolver la página."""
        fetcher.fetch_orders_page.return_value = make_connection(
            [make_order_node("1"), make_order_node("2")], has_next=True
        )
        service = OrderListService(fetcher, page_size=25)

        result = await service.load_page(PageState(cursor="abc", direction=Direction.NEXT))

        fetcher.fetch_orders_page.assert_awaited_once_with(FetchParams(first=25, after="abc"))
        assert result.status == PagerStatus.IDLE
        assert service.status == PagerStatus.IDLE
        assert [o.name for o in result.orders] == ["#1", "#2"]
        assert result.page_info.has_next_page
        assert result.fetched_count == 2
        assert result.error is None

    @pytest.mark.asyncio
    async def test_client_filters_keep_upstream_page_info(self, fetcher, make_connection, make_order_node):
        """El post-filtro reduce la página pero no cambia hasNextPage."""
        fetcher.fetch_orders_page.return_value = make_connection(
            [make_order_node("1", financial_status="PENDING")], has_next=True
        )
        service = OrderListService(fetcher)

        result = await service.load_page(PageState(payment_status_filter=FinancialStatus.PAID))

        assert result.orders == ()
        assert result.fetched_count == 1
        assert result.page_info.has_next_page
        assert result.empty_kind == EmptyResultKind.NO_MATCHES

    @pytest.mark.asyncio
    async def test_upstream_failure_sets_error(self, fetcher):
        """Un fallo del colaborador deja el estado en ERROR y el PageState intacto."""
        fetcher.fetch_orders_page.side_effect = ShopifyAPIException("boom", api_response_code=500)
        service = OrderListService(fetcher)
        state = PageState(cursor="c2", query_text="10")

        result = await service.load_page(state)

        assert result.status == PagerStatus.ERROR
        assert service.status == PagerStatus.ERROR
        assert result.state is state
        assert result.orders == ()
        assert isinstance(result.error, UpstreamFetchError)
        assert result.error.details["cause"] == "ShopifyAPIException"
        assert result.empty_kind is None

    @pytest.mark.asyncio
    async def test_invalid_json_body_sets_error(self, fetcher):
        """Un cuerpo JSON ilegible debe dar ERROR y permitir recargar la página."""
        fetcher.fetch_orders_page.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)
        service = OrderListService(fetcher)

        first = await service.load_page(PageState())
        second = await service.load_page(PageState())

        assert first.status == PagerStatus.ERROR
        assert isinstance(first.error, UpstreamFetchError)
        assert first.error.details["cause"] == "JSONDecodeError"
        assert second.status == PagerStatus.ERROR
        assert fetcher.fetch_orders_page.await_count == 2

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_lock_pager(self, fetcher, make_connection):
        """Cualquier excepción debe sacar al paginador de FETCHING."""
        fetcher.fetch_orders_page.side_effect = [RuntimeError("unexpected"), make_connection([])]
        service = OrderListService(fetcher)

        with pytest.raises(RuntimeError):
            await service.load_page(PageState())

        assert service.status == PagerStatus.ERROR
        assert (await service.load_page(PageState())).status == PagerStatus.IDLE

    @pytest.mark.asyncio
    async def test_retry_after_error(self, fetcher, make_connection, make_order_node):
        """Desde ERROR se puede volver a cargar la misma página."""
        fetcher.fetch_orders_page.side_effect = [OSError("connection reset"), make_connection([make_order_node()])]
        service = OrderListService(fetcher)

        failed = await service.load_page(PageState())
        retried = await service.load_page(PageState())

        assert failed.status == PagerStatus.ERROR
        assert retried.status == PagerStatus.IDLE
        assert len(retried.orders) == 1

    @pytest.mark.asyncio
    async def test_malformed_price_propagates(self, fetcher, make_connection, make_order_node, make_line_item_node):
        """Un precio ilegible no se convierte en cero ni en error de red."""
        fetcher.fetch_orders_page.return_value = make_connection(
            [make_order_node(line_items=[make_line_item_node(amount="n/a")])]
        )
        service = OrderListService(fetcher)

        with pytest.raises(MalformedPriceError):
            await service.load_page(PageState())

        assert service.status == PagerStatus.ERROR

    @pytest.mark.asyncio
    async def test_empty_store(self, fetcher, make_connection):
        """Sin pedidos ni filtros el vacío es NO_ORDERS."""
        fetcher.fetch_orders_page.return_value = make_connection([])

        result = await OrderListService(fetcher).load_page(PageState())

        assert result.is_empty
        assert result.empty_kind == EmptyResultKind.NO_ORDERS


class TestNavigate:
    """Tests para navigate."""

    @pytest.mark.asyncio
    async def test_noop_issues_no_request(self, fetcher):
        """next sin página siguiente no debe llamar al colaborador."""
        service = OrderListService(fetcher)

        result = await service.navigate(PageState(), NavigationAction.next(), PageInfo(has_next_page=False))

        assert result is None
        fetcher.fetch_orders_page.assert_not_awaited()
        assert service.status == PagerStatus.IDLE

    @pytest.mark.asyncio
    async def test_previous_uses_last_before(self, fetcher, make_connection):
        """previous debe pedir last/before con el startCursor."""
        fetcher.fetch_orders_page.return_value = make_connection([])
        service = OrderListService(fetcher, page_size=10)
        page_info = PageInfo(has_next_page=True, has_previous_page=True, start_cursor="s", end_cursor="e")

        result = await service.navigate(PageState(cursor="x"), NavigationAction.previous(), page_info)

        fetcher.fetch_orders_page.assert_awaited_once_with(FetchParams(last=10, before="s"))
        assert result.state.direction == Direction.PREVIOUS

    @pytest.mark.asyncio
    async def test_filter_change_restarts_at_first_page(self, fetcher, make_connection):
        """Cambiar un filtro vuelve a la primera página."""
        fetcher.fetch_orders_page.return_value = make_connection([])
        service = OrderListService(fetcher, page_size=10)

        result = await service.navigate(PageState(cursor="deep"), NavigationAction.set_filter(query_text="1001"))

        fetcher.fetch_orders_page.assert_awaited_once_with(FetchParams(first=10, query="name:1001"))
        assert result.state.cursor is None


class TestCollectOrders:
    """Tests para el recorrido de todas las páginas (exportación completa)."""

    @pytest.mark.asyncio
    async def test_walks_all_pages(self, fetcher, make_connection, make_order_node):
        """Debe seguir endCursor hasta que no haya página siguiente."""
        fetcher.fetch_orders_page.side_effect = [
            make_connection([make_order_node("1")], has_next=True, end="e1"),
            make_connection([make_order_node("2")], has_next=False, end="e2"),
        ]
        service = OrderListService(fetcher, page_size=1)

        orders = await service.collect_orders(PageState(cursor="ignored"), max_pages=10)

        assert [o.name for o in orders] == ["#1", "#2"]
        calls = [call.args[0] for call in fetcher.fetch_orders_page.await_args_list]
        assert calls == [FetchParams(first=1), FetchParams(first=1, after="e1")]

    @pytest.mark.asyncio
    async def test_stops_at_max_pages(self, fetcher, make_connection, make_order_node):
        """Debe detenerse en max_pages aunque existan más páginas."""
        fetcher.fetch_orders_page.side_effect = [
            make_connection([make_order_node(str(i))], has_next=True, end=f"e{i}") for i in range(5)
        ]
        service = OrderListService(fetcher)

        orders = await service.collect_orders(PageState(), max_pages=2)

        assert len(orders) == 2
        assert fetcher.fetch_orders_page.await_count == 2

    @pytest.mark.asyncio
    async def test_failure_raises(self, fetcher):
        """Un fallo en cualquier página debe propagarse."""
        fetcher.fetch_orders_page.side_effect = ShopifyAPIException("down")

        with pytest.raises(UpstreamFetchError):
            await OrderListService(fetcher).collect_orders(PageState(), max_pages=3)


class TestGetOrder:
    """Tests para get_order."""

    @pytest.mark.asyncio
    async def test_returns_converted_order(self, fetcher, make_order_node):
        """Debe convertir el nodo devuelto."""
        fetcher.fetch_order.return_value = make_order_node("1001")

        order = await OrderListService(fetcher).get_order("1001")

        assert order.name == "#1001"
        fetcher.fetch_order.assert_awaited_once_with("1001")

    @pytest.mark.asyncio
    async def test_not_found(self, fetcher):
        """Un pedido inexistente debe lanzar OrderNotFoundException."""
        fetcher.fetch_order.return_value = None

        with pytest.raises(OrderNotFoundException):
            await OrderListService(fetcher).get_order("999")

    @pytest.mark.asyncio
    async def test_upstream_failure(self, fetcher):
        """Un fallo de Shopify debe llegar como UpstreamFetchError."""
        fetcher.fetch_order.side_effect = ShopifyAPIException("boom")

        with pytest.raises(UpstreamFetchError) as exc_info:
            await OrderListService(fetcher).get_order("1")

        assert exc_info.value.operation == "fetch_order"
