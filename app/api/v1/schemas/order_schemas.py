"""
Modelos Pydantic de respuesta para el listado de pedidos con bundles.

Los modelos se construyen a partir de los objetos de dominio (OrderView,
GroupingResult, PageState) con las etiquetas ya traducidas para la tienda.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from app.domain.models.line_item import BundleAggregate, GroupingResult, StandaloneProduct
from app.domain.models.order_view import OrderView, PageInfo
from app.services.bundles.presenter import (
    FilterChip,
    admin_order_url,
    format_order_date,
    item_count_label,
    shipping_label,
)
from app.services.bundles.status_translator import translate_financial_status, translate_fulfillment_status


class BundleProductResponse(BaseModel):
    """Producto dentro de un bundle."""

    title: str
    quantity: int
    unit_price: str


class BundleResponse(BaseModel):
    """Bundle agrupado de un pedido."""

    bundle_key: str
    name: str
    source: str
    quantity: Optional[int] = Field(None, description="Unidades del bundle (solo grupos estructurales)")
    products: List[BundleProductResponse]
    products_label: str
    total_quantity: int
    total_price: str
    currency: str

    @classmethod
    def from_domain(cls, bundle: BundleAggregate) -> "BundleResponse":
        return cls(
            bundle_key=bundle.bundle_key,
            name=bundle.display_name,
            source=bundle.source.value,
            quantity=bundle.quantity,
            products=[
                BundleProductResponse(
                    title=product.title,
                    quantity=product.quantity,
                    unit_price=product.unit_price.formatted(),
                )
                for product in bundle.products
            ],
            products_label=bundle.products_label,
            total_quantity=bundle.total_quantity,
            total_price=bundle.total_price.formatted(),
            currency=bundle.total_price.currency,
        )


class StandaloneProductResponse(BaseModel):
    """Producto sin bundle."""

    title: str
    quantity: int
    unit_price: str
    total_price: str
    currency: str

    @classmethod
    def from_domain(cls, product: StandaloneProduct) -> "StandaloneProductResponse":
        return cls(
            title=product.title,
            quantity=product.quantity,
            unit_price=product.unit_price.formatted(),
            total_price=product.total_price.formatted(),
            currency=product.total_price.currency,
        )


class OrderRowResponse(BaseModel):
    """Fila del listado (y del detalle) de pedidos."""

    id: str
    legacy_id: str
    name: str
    date: str = Field(..., description="Fecha de creación dd/mm/YYYY en la zona horaria de la tienda")
    financial_status: Optional[str] = None
    financial_status_label: str
    fulfillment_status: Optional[str] = None
    fulfillment_status_label: str
    shipping_method: str
    item_count: int
    item_count_label: str
    total_price: str
    currency: str
    admin_url: str
    bundles: List[BundleResponse]
    standalone_products: List[StandaloneProductResponse]

    @classmethod
    def from_domain(
        cls, order: OrderView, grouped: GroupingResult, shop_domain: str, timezone_name: str
    ) -> "OrderRowResponse":
        return cls(
            id=order.id,
            legacy_id=order.legacy_id,
            name=order.name,
            date=format_order_date(order.created_at, timezone_name),
            financial_status=order.financial_status,
            financial_status_label=translate_financial_status(order.financial_status),
            fulfillment_status=order.fulfillment_status,
            fulfillment_status_label=translate_fulfillment_status(order.fulfillment_status),
            shipping_method=shipping_label(order),
            item_count=len(order.line_items),
            item_count_label=item_count_label(len(order.line_items)),
            total_price=order.total_price.formatted(),
            currency=order.currency,
            admin_url=admin_order_url(shop_domain, order),
            bundles=[BundleResponse.from_domain(bundle) for bundle in grouped.bundles],
            standalone_products=[
                StandaloneProductResponse.from_domain(product) for product in grouped.standalone_products
            ],
        )


class PageInfoResponse(BaseModel):
    """Metadatos de paginación del listado."""

    has_next_page: bool
    has_previous_page: bool
    start_cursor: Optional[str] = None
    end_cursor: Optional[str] = None
    next_params: Optional[dict[str, str]] = Field(None, description="Query params de la página siguiente")
    previous_params: Optional[dict[str, str]] = Field(None, description="Query params de la página anterior")

    @classmethod
    def from_domain(
        cls,
        page_info: PageInfo,
        next_params: Optional[dict[str, str]],
        previous_params: Optional[dict[str, str]],
    ) -> "PageInfoResponse":
        return cls(
            has_next_page=page_info.has_next_page,
            has_previous_page=page_info.has_previous_page,
            start_cursor=page_info.start_cursor,
            end_cursor=page_info.end_cursor,
            next_params=next_params,
            previous_params=previous_params,
        )


class FilterChipResponse(BaseModel):
    """Filtro aplicado mostrado sobre el listado."""

    key: str
    label: str

    @classmethod
    def from_domain(cls, chip: FilterChip) -> "FilterChipResponse":
        return cls(key=chip.key, label=chip.label)


class OrderListResponse(BaseModel):
    """Respuesta del listado de pedidos."""

    status: str = "success"
    orders: List[OrderRowResponse]
    page_info: PageInfoResponse
    filters: dict[str, str] = Field(default_factory=dict, description="Filtros activos como query params")
    applied_filters: List[FilterChipResponse] = Field(default_factory=list)
    fetched_count: int = 0
    empty_message: Optional[str] = None


class OrderDetailResponse(BaseModel):
    """Respuesta del detalle de un pedido."""

    status: str = "success"
    order: OrderRowResponse
