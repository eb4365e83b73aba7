"""
Endpoints del listado de pedidos con bundles.

Listado paginado y filtrable, detalle de un pedido y exportación CSV. El
estado de la página viaja en los query params (cursor, direction, query,
status, paymentStatus, dateFrom, dateTo).
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Optional

import pytz
from fastapi import APIRouter, Depends, Query, Request, Response, status

from app.api.v1.schemas.order_schemas import (
    FilterChipResponse,
    OrderDetailResponse,
    OrderListResponse,
    OrderRowResponse,
    PageInfoResponse,
)
from app.core.config import Settings, get_settings
from app.db.shopify_clients.order_client import OrderFetcher
from app.domain.models.page_state import PageState
from app.services.bundles.csv_exporter import OrderCSVExporter, export_filename
from app.services.bundles.grouper import LineItemGrouper
from app.services.bundles.order_list_service import OrderListService
from app.services.bundles.pager import NavigationAction, apply_navigation, needs_fetch
from app.services.bundles.presenter import EMPTY_RESULT_MESSAGES, applied_filter_chips
from app.utils.error_handler import ShopifyAPIException

logger = logging.getLogger(__name__)

router = APIRouter()


class ExportScope(str, Enum):
    PAGE = "page"
    ALL = "all"


# === DEPENDENCIAS ===


def get_order_fetcher(request: Request) -> OrderFetcher:
    """Cliente de pedidos creado en el lifespan de la aplicación."""
    client = getattr(request.app.state, "order_client", None)
    if client is None:
        raise ShopifyAPIException("Shopify order client not initialized")
    return client


def get_order_list_service(
    fetcher: OrderFetcher = Depends(get_order_fetcher),
    settings: Settings = Depends(get_settings),
) -> OrderListService:
    return OrderListService(fetcher, page_size=settings.ORDERS_PAGE_SIZE)


def get_page_state(
    cursor: Optional[str] = Query(None, description="Cursor opaco de Shopify"),
    direction: Optional[str] = Query(None, description="next | prev"),
    query: Optional[str] = Query(None, description="Búsqueda por número de pedido"),
    order_status: Optional[str] = Query(None, alias="status", description="Estado de envío"),
    payment_status: Optional[str] = Query(None, alias="paymentStatus", description="Estado de pago"),
    date_from: Optional[str] = Query(None, alias="dateFrom", description="YYYY-MM-DD inclusive"),
    date_to: Optional[str] = Query(None, alias="dateTo", description="YYYY-MM-DD inclusive"),
) -> PageState:
    """Estado de la página a partir de los query params."""
    return PageState.from_query_params(
        {
            "cursor": cursor,
            "direction": direction,
            "query": query,
            "status": order_status,
            "paymentStatus": payment_status,
            "dateFrom": date_from,
            "dateTo": date_to,
        }
    )


def _navigation_params(state: PageState, action: NavigationAction, page_info) -> Optional[dict[str, str]]:
    target = apply_navigation(state, action, page_info)
    return target.to_query_params() if needs_fetch(state, target) else None


# === ENDPOINTS ===


@router.get("", response_model=OrderListResponse, status_code=status.HTTP_200_OK)
async def list_orders(
    state: PageState = Depends(get_page_state),
    service: OrderListService = Depends(get_order_list_service),
    settings: Settings = Depends(get_settings),
) -> OrderListResponse:
    """
    Lista una página de pedidos con sus productos agrupados por bundle.

    Returns:
        OrderListResponse con filas, paginación y filtros aplicados

    Raises:
        UpstreamFetchError: Si Shopify no responde (502)
        ValidationException: Si un filtro no es válido (422)
    """
    result = await service.load_page(state)
    if result.error:
        result.error.details["page_state"] = state.to_query_params()
        raise result.error

    grouper = LineItemGrouper()
    rows = [
        OrderRowResponse.from_domain(order, grouper.group(order.line_items), settings.shop_domain, settings.DISPLAY_TIMEZONE)
        for order in result.orders
    ]

    return OrderListResponse(
        orders=rows,
        page_info=PageInfoResponse.from_domain(
            result.page_info,
            next_params=_navigation_params(state, NavigationAction.next(), result.page_info),
            previous_params=_navigation_params(state, NavigationAction.previous(), result.page_info),
        ),
        filters=state.to_query_params(),
        applied_filters=[FilterChipResponse.from_domain(chip) for chip in applied_filter_chips(state)],
        fetched_count=result.fetched_count,
        empty_message=EMPTY_RESULT_MESSAGES[result.empty_kind] if result.empty_kind else None,
    )


@router.get("/export", status_code=status.HTTP_200_OK)
async def export_orders(
    scope: ExportScope = Query(ExportScope.PAGE, description="page: página actual | all: todas las páginas"),
    state: PageState = Depends(get_page_state),
    service: OrderListService = Depends(get_order_list_service),
    settings: Settings = Depends(get_settings),
) -> Response:
    """
    Exporta los pedidos en CSV (separador ';', UTF-8 con BOM).

    Con ``scope=all`` recorre todas las páginas de los filtros activos, hasta
    EXPORT_MAX_PAGES.
    """
    if scope == ExportScope.ALL:
        orders = await service.collect_orders(state, settings.EXPORT_MAX_PAGES)
    else:
        result = await service.load_page(state)
        if result.error:
            raise result.error
        orders = list(result.orders)

    exporter = OrderCSVExporter(timezone_name=settings.DISPLAY_TIMEZONE)
    content = exporter.export(orders)
    filename = export_filename(datetime.now(pytz.timezone(settings.DISPLAY_TIMEZONE)).date())

    logger.info(f"📤 Exporting {len(orders)} orders as {filename} (scope={scope.value})")
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{order_id}", response_model=OrderDetailResponse, status_code=status.HTTP_200_OK)
async def get_order(
    order_id: str,
    service: OrderListService = Depends(get_order_list_service),
    settings: Settings = Depends(get_settings),
) -> OrderDetailResponse:
    """
    Detalle de un pedido con sus bundles.

    Raises:
        OrderNotFoundException: Si el pedido no existe (404)
    """
    order = await service.get_order(order_id)
    grouped = LineItemGrouper().group(order.line_items)
    return OrderDetailResponse(
        order=OrderRowResponse.from_domain(order, grouped, settings.shop_domain, settings.DISPLAY_TIMEZONE)
    )
