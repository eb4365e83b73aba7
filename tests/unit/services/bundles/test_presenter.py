"""Tests unitarios para el formateo de listado y filtros."""

from datetime import UTC, date, datetime

from app.domain.models.page_state import PageState
from app.domain.models.statuses import FinancialStatus, FulfillmentStatus
from app.services.bundles.presenter import (
    EmptyResultKind,
    admin_order_url,
    applied_filter_chips,
    date_range_label,
    empty_result_kind,
    empty_result_message,
    format_order_date,
    item_count_label,
    shipping_label,
)


class TestFormatting:
    """Tests para fechas, envío y enlaces."""

    def test_order_date_in_paris_timezone(self):
        """Debe convertir a Europe/Paris antes de formatear."""
        late_evening_utc = datetime(2025, 1, 15, 23, 30, tzinfo=UTC)

        assert format_order_date(late_evening_utc) == "16/01/2025"

    def test_naive_date_is_utc(self):
        """Debe tratar un datetime naive como UTC."""
        assert format_order_date(datetime(2025, 6, 1, 12, 0), "UTC") == "01/06/2025"

    def test_shipping_placeholder(self, make_order):
        """Debe mostrar 'Non spécifié' sin método de envío."""
        assert shipping_label(make_order(shipping_method=None)) == "Non spécifié"
        assert shipping_label(make_order(shipping_method="Chronopost")) == "Chronopost"

    def test_item_count_label(self):
        """Debe pluralizar 'produit' a partir de 2."""
        assert item_count_label(1) == "1 produit"
        assert item_count_label(3) == "3 produits"

    def test_admin_url_uses_legacy_id(self, make_order):
        """Debe enlazar al pedido en el admin de Shopify con el id numérico."""
        url = admin_order_url("demo.myshopify.com", make_order(order_id="5551234"))

        assert url == "https://demo.myshopify.com/admin/orders/5551234"


class TestFilterChips:
    """Tests para las etiquetas de filtros aplicados."""

    def test_no_filters_no_chips(self):
        """Sin filtros no debe haber chips."""
        assert applied_filter_chips(PageState()) == []

    def test_all_filters(self):
        """Debe generar un chip por filtro con etiquetas traducidas."""
        state = PageState(
            query_text="1001",
            status_filter=FulfillmentStatus.UNFULFILLED,
            payment_status_filter=FinancialStatus.PAID,
            date_from=date(2025, 1, 1),
            date_to=date(2025, 1, 31),
        )

        chips = {chip.key: chip.label for chip in applied_filter_chips(state)}

        assert chips == {
            "query": "Recherche: 1001",
            "status": "Statut livraison: Non traitée",
            "paymentStatus": "Statut paiement: Payé",
            "date": "Date: 01/01/2025 - 31/01/2025",
        }

    def test_open_date_ranges(self):
        """Debe describir rangos abiertos por un lado."""
        assert date_range_label(date(2025, 3, 2), None) == "Date: À partir du 02/03/2025"
        assert date_range_label(None, date(2025, 3, 2)) == "Date: Jusqu'au 02/03/2025"
        assert date_range_label(None, None) is None


class TestEmptyResult:
    """Tests para distinguir 'sin pedidos' de 'sin coincidencias'."""

    def test_no_orders_without_filters(self):
        """Sin filtros activos la tienda no tiene pedidos."""
        assert empty_result_kind(PageState()) == EmptyResultKind.NO_ORDERS
        assert empty_result_message(PageState()) == "Votre store n'a pas encore de commandes."

    def test_no_matches_with_filters(self):
        """Con algún filtro activo ningún pedido coincide."""
        state = PageState(query_text="9999")

        assert empty_result_kind(state) == EmptyResultKind.NO_MATCHES
        assert empty_result_message(state) == "Aucune commande ne correspond à votre recherche."

    def test_cursor_alone_is_not_a_filter(self):
        """Un cursor sin filtros no cuenta como filtro."""
        assert empty_result_kind(PageState(cursor="abc")) == EmptyResultKind.NO_ORDERS
