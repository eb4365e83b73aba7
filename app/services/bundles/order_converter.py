"""
Conversion of Shopify GraphQL order payloads into domain values.

Input is the already-parsed JSON of the ``orders`` connection (or a single
``order`` node); output is OrderView / LineItem / PageInfo values ready for
grouping. Prices are read from ``originalUnitPriceSet.shopMoney`` and are
never defaulted: a missing or unparseable amount raises MalformedPriceError.
"""

import logging
from datetime import UTC, datetime
from typing import Any, Optional

from app.domain.models.line_item import LineItem, LineItemGroupRef
from app.domain.models.order_view import OrderPage, OrderView, PageInfo
from app.domain.value_objects.money import Money
from app.utils.error_handler import ErrorCode, MalformedPriceError, ValidationException

logger = logging.getLogger(__name__)


def _ensure_utc_datetime(dt: datetime) -> datetime:
    """
    Asegura que un datetime tenga timezone UTC.

    Args:
        dt: Datetime que puede ser naive o aware

    Returns:
        Datetime con timezone
    """
    if dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=UTC)


def parse_timestamp(raw: Any, field: str = "createdAt") -> datetime:
    """Parse an ISO-8601 Shopify timestamp ('2025-01-15T10:30:00Z')."""
    try:
        return _ensure_utc_datetime(datetime.fromisoformat(str(raw).replace("Z", "+00:00")))
    except (TypeError, ValueError) as e:
        raise ValidationException(
            message=f"Invalid {field}: {raw!r}",
            field=field,
            invalid_value=raw,
            expected_format="ISO-8601 timestamp",
            error_code=ErrorCode.INVALID_ORDER_DATA,
        ) from e


def _shop_money(price_set: Any, owner_id: Optional[str], field: str) -> Money:
    if not isinstance(price_set, dict) or not isinstance(price_set.get("shopMoney"), dict):
        raise MalformedPriceError(price_set, line_item_id=owner_id, field=field)

    shop_money = price_set["shopMoney"]
    return Money.parse(shop_money.get("amount"), shop_money.get("currencyCode") or "", line_item_id=owner_id)


def _edges_or_nodes(connection: Any) -> list[dict[str, Any]]:
    """Nodes of a GraphQL connection, accepting both ``edges`` and ``nodes`` shapes."""
    if not connection:
        return []
    if isinstance(connection, list):
        return connection
    if "nodes" in connection:
        return list(connection["nodes"] or [])
    return [edge["node"] for edge in connection.get("edges") or [] if edge and edge.get("node")]


def _parse_quantity(raw: Any, line_item_id: Optional[str]) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise ValidationException(
            message=f"Invalid quantity {raw!r} on line item {line_item_id}",
            field="quantity",
            invalid_value=raw,
            expected_format="integer >= 0",
            error_code=ErrorCode.INVALID_ORDER_DATA,
        )
    return raw


def convert_line_item(node: dict[str, Any]) -> LineItem:
    """
    Convert a ``LineItem`` node.

    Args:
        node: Line item node with title, quantity, customAttributes,
            originalUnitPriceSet and optional lineItemGroup

    Raises:
        MalformedPriceError: If the unit price is missing or unparseable
        ValidationException: If the quantity is not a non-negative integer
    """
    line_item_id = node.get("id")

    group = node.get("lineItemGroup")
    group_ref = None
    if group and group.get("id"):
        group_ref = LineItemGroupRef(
            id=str(group["id"]),
            title=group.get("title"),
            quantity=group.get("quantity"),
        )

    attributes = {
        str(attr["key"]): "" if attr.get("value") is None else str(attr["value"])
        for attr in node.get("customAttributes") or []
        if attr and attr.get("key") is not None
    }

    return LineItem(
        id=str(line_item_id or ""),
        title=node.get("title") or "",
        quantity=_parse_quantity(node.get("quantity"), line_item_id),
        unit_price=_shop_money(node.get("originalUnitPriceSet"), line_item_id, "originalUnitPriceSet"),
        group_ref=group_ref,
        custom_attributes=attributes,
    )


def convert_order(node: dict[str, Any]) -> OrderView:
    """
    Convert an ``Order`` node into an OrderView.

    Raises:
        MalformedPriceError: If the order total or a line item price is malformed
        ValidationException: If required order fields are invalid
    """
    order_id = node.get("id")
    if not order_id:
        raise ValidationException(
            message="Order node without id",
            field="id",
            error_code=ErrorCode.INVALID_ORDER_DATA,
        )

    shipping_line = node.get("shippingLine") or {}

    return OrderView(
        id=str(order_id),
        name=node.get("name") or str(order_id),
        created_at=parse_timestamp(node.get("createdAt")),
        financial_status=node.get("displayFinancialStatus"),
        fulfillment_status=node.get("displayFulfillmentStatus"),
        shipping_method=(shipping_line.get("title") or None),
        total_price=_shop_money(node.get("totalPriceSet"), None, "totalPriceSet"),
        line_items=tuple(convert_line_item(item) for item in _edges_or_nodes(node.get("lineItems"))),
    )


def convert_page_info(raw: Optional[dict[str, Any]]) -> PageInfo:
    raw = raw or {}
    return PageInfo(
        has_next_page=bool(raw.get("hasNextPage")),
        has_previous_page=bool(raw.get("hasPreviousPage")),
        start_cursor=raw.get("startCursor"),
        end_cursor=raw.get("endCursor"),
    )


def convert_orders_connection(connection: Optional[dict[str, Any]]) -> OrderPage:
    """
    Convert an ``orders`` connection into an OrderPage.

    A missing connection yields an empty page without further pages.
    """
    if not connection:
        logger.warning("Orders connection missing from response, returning empty page")
        return OrderPage(orders=(), page_info=PageInfo())

    orders = tuple(convert_order(node) for node in _edges_or_nodes(connection))
    return OrderPage(orders=orders, page_info=convert_page_info(connection.get("pageInfo")))
