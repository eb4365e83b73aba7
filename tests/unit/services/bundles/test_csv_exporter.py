"""Tests unitarios para la exportación CSV de pedidos con bundles."""

import csv
import io
from datetime import date

from app.services.bundles.csv_exporter import BOM, HEADERS, OrderCSVExporter, export_filename


def _parse(content):
    assert content.startswith(BOM)
    return list(csv.reader(io.StringIO(content[len(BOM):]), delimiter=";"))


class TestOrderCSVExporter:
    """Tests para OrderCSVExporter.export."""

    def test_two_order_fixture_shape(self, bundle_order, make_order, make_line_item):
        """Pedido A (1 bundle + 1 suelto) y pedido B (1 suelto) deben dar 3 filas más cabecera."""
        order_b = make_order(
            order_id="1002",
            financial_status="PENDING",
            fulfillment_status="FULFILLED",
            shipping_method=None,
            line_items=[make_line_item("Poster", 1, "12.50")],
        )

        rows = _parse(OrderCSVExporter().export([bundle_order, order_b]))

        assert rows[0] == HEADERS
        assert len(rows) == 4
        assert rows[1] == [
            "#1001",
            "15/01/2025",
            "Payé",
            "Non traitée",
            "Colissimo",
            "Summer Pack",
            "Shirt (x2), Hat (x1)",
            "3",
            "25.00",
            "EUR",
        ]
        assert rows[2][5:] == ["Produit seul", "Socks (x3)", "3", "6.00", "EUR"]
        assert rows[3] == [
            "#1002",
            "15/01/2025",
            "En attente",
            "Traitée",
            "Non spécifié",
            "Produit seul",
            "Poster (x1)",
            "1",
            "12.50",
            "EUR",
        ]

    def test_bundle_quantity_is_sum_of_products(self, bundle_order):
        """La cantidad del bundle es la suma de las cantidades de sus productos."""
        bundle_row = OrderCSVExporter().rows([bundle_order])[0]

        assert bundle_row[7] == "3"

    def test_header_emitted_for_no_orders(self):
        """Sin pedidos debe emitirse solo la cabecera."""
        content = OrderCSVExporter().export([])

        assert _parse(content) == [HEADERS]
        assert content == BOM + ";".join(HEADERS) + "\n"

    def test_order_without_line_items_has_no_rows(self, make_order):
        """Un pedido sin line items no produce filas."""
        assert OrderCSVExporter().rows([make_order(line_items=[])]) == []

    def test_fields_are_escaped(self, make_order, make_line_item):
        """Campos con ';', comillas o saltos de línea deben ir entre comillas."""
        order = make_order(
            shipping_method="Relais; point retrait",
            line_items=[make_line_item('Mug "Paris"\nEdition', 1, "9.00")],
        )

        content = OrderCSVExporter().export([order])
        rows = _parse(content)

        assert '"Relais; point retrait"' in content
        assert '"Mug ""Paris""\nEdition (x1)"' in content
        assert rows[1][4] == "Relais; point retrait"
        assert rows[1][6] == 'Mug "Paris"\nEdition (x1)'

    def test_unknown_status_passes_through(self, make_order, make_line_item):
        """Un estado desconocido se exporta tal cual."""
        order = make_order(financial_status="NEW_STATUS", line_items=[make_line_item()])

        assert OrderCSVExporter().rows([order])[0][2] == "NEW_STATUS"

    def test_standalone_price_is_line_total(self, make_order, make_line_item):
        """El precio de un producto suelto es precio unitario por cantidad."""
        order = make_order(line_items=[make_line_item("Socks", 4, "2.25")])

        assert OrderCSVExporter().rows([order])[0][8] == "9.00"

    def test_date_uses_display_timezone(self, make_order, make_line_item):
        """La fecha se formatea en la zona horaria configurada."""
        from datetime import UTC, datetime

        order = make_order(created_at=datetime(2025, 3, 31, 23, 0, tzinfo=UTC), line_items=[make_line_item()])

        assert OrderCSVExporter(timezone_name="Europe/Paris").rows([order])[0][1] == "01/04/2025"
        assert OrderCSVExporter(timezone_name="UTC").rows([order])[0][1] == "31/03/2025"


class TestExportFilename:
    """Tests para el nombre del archivo exportado."""

    def test_iso_dated_filename(self):
        """Debe seguir el formato commandes_bundles_<YYYY-MM-DD>.csv."""
        assert export_filename(date(2025, 1, 9)) == "commandes_bundles_2025-01-09.csv"
