"""
Tests de integración de los endpoints de pedidos.

La aplicación se levanta sin lifespan (sin conexión a Shopify) y el
colaborador de pedidos se sustituye por un AsyncMock.
"""

import csv
import io
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from app.api.v1.endpoints.orders import get_order_fetcher
from app.main import app
from app.services.bundles.csv_exporter import BOM
from app.utils.error_handler import ShopifyAPIException

ORDERS_URL = "/api/v1/orders"


@pytest.fixture
def fetcher():
    mock = AsyncMock()
    mock.fetch_orders_page = AsyncMock()
    mock.fetch_order = AsyncMock()
    return mock


@pytest.fixture
def client(fetcher):
    app.dependency_overrides[get_order_fetcher] = lambda: fetcher
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def bundle_connection(make_connection, make_order_node, make_line_item_node):
    bundle = {"bundle_id": "B1", "bundle_name": "Summer Pack"}
    return make_connection(
        [
            make_order_node(
                "1001",
                line_items=[
                    make_line_item_node("Shirt", 2, "10.00", attributes=bundle),
                    make_line_item_node("Hat", 1, "5.00", attributes=bundle),
                    make_line_item_node("Socks", 3, "2.00"),
                ],
            ),
            make_order_node(
                "1002",
                line_items=[make_line_item_node("Poster", 1, "12.50")],
                financial_status="PENDING",
                fulfillment_status="FULFILLED",
                shipping_title=None,
            ),
        ],
        has_next=True,
        start="s1",
        end="e1",
    )


class TestListOrders:
    """Tests para GET /api/v1/orders."""

    def test_lists_grouped_orders(self, client, fetcher, bundle_connection):
        """Debe devolver las filas con bundles, etiquetas y paginación."""
        fetcher.fetch_orders_page.return_value = bundle_connection

        response = client.get(ORDERS_URL)

        assert response.status_code == 200
        body = response.json()
        first, second = body["orders"]

        assert first["name"] == "#1001"
        assert first["date"] == "15/01/2025"
        assert first["financial_status_label"] == "Payé"
        assert first["item_count_label"] == "3 produits"
        assert first["bundles"][0]["name"] == "Summer Pack"
        assert first["bundles"][0]["products_label"] == "Shirt (x2), Hat (x1)"
        assert first["bundles"][0]["total_price"] == "25.00"
        assert [p["title"] for p in first["standalone_products"]] == ["Socks"]

        assert second["shipping_method"] == "Non spécifié"
        assert second["fulfillment_status_label"] == "Traitée"
        assert second["item_count_label"] == "1 produit"

        assert body["page_info"]["has_next_page"] is True
        assert body["page_info"]["next_params"] == {"cursor": "e1", "direction": "next"}
        assert body["page_info"]["previous_params"] is None
        assert body["empty_message"] is None

    def test_filters_are_forwarded(self, client, fetcher, make_connection):
        """Los filtros de la URL deben llegar al query y volver como chips."""
        fetcher.fetch_orders_page.return_value = make_connection([])

        response = client.get(ORDERS_URL, params={"query": "1001", "paymentStatus": "PAID"})

        assert response.status_code == 200
        params = fetcher.fetch_orders_page.await_args.args[0]
        assert params.query == "name:1001"
        body = response.json()
        assert body["filters"] == {"query": "1001", "paymentStatus": "PAID"}
        assert [chip["key"] for chip in body["applied_filters"]] == ["query", "paymentStatus"]
        assert body["empty_message"] is not None

    def test_invalid_status_filter(self, client, fetcher):
        """Un estado desconocido debe devolver 422 sin llamar a Shopify."""
        response = client.get(ORDERS_URL, params={"status": "SHIPPED"})

        assert response.status_code == 422
        assert response.json()["field"] == "status"
        fetcher.fetch_orders_page.assert_not_awaited()

    def test_upstream_failure(self, client, fetcher):
        """Un fallo de Shopify debe dar 502 con el estado de la página pedida."""
        fetcher.fetch_orders_page.side_effect = ShopifyAPIException("boom", api_response_code=500)

        response = client.get(ORDERS_URL, params={"cursor": "c2"})

        assert response.status_code == 502
        body = response.json()
        assert body["error_type"] == "upstream_fetch_error"
        assert body["page_state"] == {"cursor": "c2", "direction": "next"}

    def test_malformed_price(self, client, fetcher, make_connection, make_order_node, make_line_item_node):
        """Un precio ilegible debe dar 422 con el line item implicado."""
        fetcher.fetch_orders_page.return_value = make_connection(
            [make_order_node(line_items=[make_line_item_node(amount="abc", item_id="gid://shopify/LineItem/9")])]
        )

        response = client.get(ORDERS_URL)

        assert response.status_code == 422
        assert response.json()["line_item_id"] == "gid://shopify/LineItem/9"


class TestExportOrders:
    """Tests para GET /api/v1/orders/export."""

    def test_exports_current_page(self, client, fetcher, bundle_connection):
        """Debe devolver un CSV con BOM, separador ';' y nombre fechado."""
        fetcher.fetch_orders_page.return_value = bundle_connection

        response = client.get(f"{ORDERS_URL}/export")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="commandes_bundles_')
        assert disposition.endswith('.csv"')

        text = response.content.decode("utf-8")
        assert text.startswith(BOM)
        rows = list(csv.reader(io.StringIO(text[len(BOM):]), delimiter=";"))
        assert len(rows) == 4
        assert rows[1][5] == "Summer Pack"
        assert rows[2][5] == "Produit seul"
        fetcher.fetch_orders_page.assert_awaited_once()

    def test_exports_all_pages(self, client, fetcher, make_connection, make_order_node, make_line_item_node):
        """scope=all debe recorrer las páginas siguientes."""
        fetcher.fetch_orders_page.side_effect = [
            make_connection([make_order_node("1", line_items=[make_line_item_node()])], has_next=True, end="e1"),
            make_connection([make_order_node("2", line_items=[make_line_item_node()])]),
        ]

        response = client.get(f"{ORDERS_URL}/export", params={"scope": "all"})

        assert response.status_code == 200
        rows = list(csv.reader(io.StringIO(response.content.decode("utf-8")[len(BOM):]), delimiter=";"))
        assert [row[0] for row in rows[1:]] == ["#1", "#2"]
        assert fetcher.fetch_orders_page.await_count == 2

    def test_empty_export_has_header(self, client, fetcher, make_connection):
        """Sin pedidos el CSV solo contiene la cabecera."""
        fetcher.fetch_orders_page.return_value = make_connection([])

        response = client.get(f"{ORDERS_URL}/export")

        rows = list(csv.reader(io.StringIO(response.content.decode("utf-8")[len(BOM):]), delimiter=";"))
        assert len(rows) == 1
        assert rows[0][0] == "Numéro de commande"

    def test_invalid_scope(self, client):
        """Un scope desconocido debe devolver 422."""
        assert client.get(f"{ORDERS_URL}/export", params={"scope": "everything"}).status_code == 422


class TestOrderDetail:
    """Tests para GET /api/v1/orders/{order_id}."""

    def test_order_detail(self, client, fetcher, make_order_node):
        """Debe devolver el pedido con su enlace al admin."""
        fetcher.fetch_order.return_value = make_order_node("1001")

        response = client.get(f"{ORDERS_URL}/1001")

        assert response.status_code == 200
        order = response.json()["order"]
        assert order["legacy_id"] == "1001"
        assert order["admin_url"].endswith("/admin/orders/1001")

    def test_structural_bundle_quantity(self, client, fetcher, make_order_node, make_line_item_node):
        """El detalle debe incluir las unidades del bundle estructural."""
        group = {"id": "gid://shopify/LineItemGroup/7", "title": "Coffret Noël", "quantity": 3}
        fetcher.fetch_order.return_value = make_order_node(
            "1001",
            line_items=[
                make_line_item_node("Thé", 3, "4.00", group=group),
                make_line_item_node("Tasse", 3, "6.00", group=group),
                make_line_item_node("Socks", 1, "2.00", attributes={"bundle_id": "B1"}),
            ],
        )

        response = client.get(f"{ORDERS_URL}/1001")

        assert response.status_code == 200
        structural, attribute = response.json()["order"]["bundles"]
        assert structural["name"] == "Coffret Noël"
        assert structural["source"] == "line_item_group"
        assert structural["quantity"] == 3
        assert structural["total_quantity"] == 6
        assert attribute["quantity"] is None

    def test_order_not_found(self, client, fetcher):
        """Un pedido inexistente debe devolver 404."""
        fetcher.fetch_order.return_value = None

        response = client.get(f"{ORDERS_URL}/999")

        assert response.status_code == 404
        assert response.json()["error_code"] == "ORDER_NOT_FOUND"
