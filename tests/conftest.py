"""Fixtures compartidos: constructores de line items, pedidos y payloads GraphQL."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from app.domain.models.line_item import LineItem, LineItemGroupRef
from app.domain.models.order_view import OrderView
from app.domain.value_objects.money import Money


def build_line_item(
    title="Shirt",
    quantity=1,
    price="10.00",
    currency="EUR",
    attributes=None,
    group=None,
    item_id=None,
):
    return LineItem(
        id=item_id or f"gid://shopify/LineItem/{title.lower()}",
        title=title,
        quantity=quantity,
        unit_price=Money(Decimal(price), currency),
        group_ref=group,
        custom_attributes=attributes or {},
    )


def build_order(
    order_id="1001",
    name=None,
    line_items=(),
    financial_status="PAID",
    fulfillment_status="UNFULFILLED",
    shipping_method="Colissimo",
    total="0.00",
    currency="EUR",
    created_at=None,
):
    return OrderView(
        id=f"gid://shopify/Order/{order_id}",
        name=name or f"#{order_id}",
        created_at=created_at or datetime(2025, 1, 15, 10, 30, tzinfo=UTC),
        financial_status=financial_status,
        fulfillment_status=fulfillment_status,
        shipping_method=shipping_method,
        total_price=Money(Decimal(total), currency),
        line_items=tuple(line_items),
    )


def build_line_item_node(
    title="Shirt",
    quantity=1,
    amount="10.00",
    currency="EUR",
    attributes=None,
    group=None,
    item_id=None,
):
    return {
        "id": item_id or f"gid://shopify/LineItem/{title.lower()}",
        "title": title,
        "quantity": quantity,
        "customAttributes": [{"key": key, "value": value} for key, value in (attributes or {}).items()],
        "originalUnitPriceSet": {"shopMoney": {"amount": amount, "currencyCode": currency}},
        "lineItemGroup": group,
    }


def build_order_node(
    order_id="1001",
    line_items=(),
    financial_status="PAID",
    fulfillment_status="UNFULFILLED",
    shipping_title="Colissimo",
    total="45.00",
    created_at="2025-01-15T10:30:00Z",
):
    return {
        "id": f"gid://shopify/Order/{order_id}",
        "name": f"#{order_id}",
        "createdAt": created_at,
        "displayFinancialStatus": financial_status,
        "displayFulfillmentStatus": fulfillment_status,
        "shippingLine": {"title": shipping_title} if shipping_title else None,
        "totalPriceSet": {"shopMoney": {"amount": total, "currencyCode": "EUR"}},
        "lineItems": {"edges": [{"node": node} for node in line_items]},
    }


def build_connection(order_nodes=(), has_next=False, has_previous=False, start="c-start", end="c-end"):
    return {
        "edges": [{"cursor": f"c-{i}", "node": node} for i, node in enumerate(order_nodes)],
        "pageInfo": {
            "hasNextPage": has_next,
            "hasPreviousPage": has_previous,
            "startCursor": start if order_nodes else None,
            "endCursor": end if order_nodes else None,
        },
    }


@pytest.fixture
def make_line_item():
    return build_line_item


@pytest.fixture
def make_order():
    return build_order


@pytest.fixture
def make_line_item_node():
    return build_line_item_node


@pytest.fixture
def make_order_node():
    return build_order_node


@pytest.fixture
def make_connection():
    return build_connection


@pytest.fixture
def bundle_order(make_line_item, make_order):
    """Pedido con un bundle B1 (Shirt x2 @10, Hat x1 @5) y Socks x3 @2 suelto."""
    return make_order(
        order_id="1001",
        total="31.00",
        line_items=[
            make_line_item("Shirt", 2, "10.00", attributes={"bundle_id": "B1", "bundle_name": "Summer Pack"}),
            make_line_item("Hat", 1, "5.00", attributes={"bundle_id": "B1", "bundle_name": "Summer Pack"}),
            make_line_item("Socks", 3, "2.00"),
        ],
    )


@pytest.fixture
def grouped_line_item_ref():
    return LineItemGroupRef(id="gid://shopify/LineItemGroup/7", title="Coffret Noël", quantity=1)
