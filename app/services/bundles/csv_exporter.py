"""
CSV export of grouped orders.

One row per bundle, then one row per standalone product, for each order. The
file is ``;``-delimited and starts with a UTF-8 byte-order mark so that
spreadsheet applications detect the encoding and the delimiter used by
French locales.
"""

import csv
import io
import logging
from datetime import date
from typing import Iterable, Optional

from app.domain.models.order_view import OrderView
from app.services.bundles.grouper import LineItemGrouper
from app.services.bundles.presenter import format_order_date, shipping_label
from app.services.bundles.status_translator import translate_financial_status, translate_fulfillment_status

logger = logging.getLogger(__name__)

BOM = "\ufeff"
DELIMITER = ";"
STANDALONE_GROUP_NAME = "Produit seul"
EXPORT_FILENAME_PREFIX = "commandes_bundles_"

HEADERS = [
    "Numéro de commande",
    "Date",
    "Statut paiement",
    "Statut livraison",
    "Mode de livraison",
    "Nom du bundle",
    "Produits du bundle",
    "Quantité totale",
    "Prix total",
    "Devise",
]


def export_filename(today: date) -> str:
    """commandes_bundles_<YYYY-MM-DD>.csv"""
    return f"{EXPORT_FILENAME_PREFIX}{today.isoformat()}.csv"


class OrderCSVExporter:
    """
    Serializes orders into the bundle report.

    Args:
        grouper: Grouping engine applied to each order
        timezone_name: Timezone used to format order dates
    """

    def __init__(self, grouper: Optional[LineItemGrouper] = None, timezone_name: str = "Europe/Paris"):
        self.grouper = grouper or LineItemGrouper()
        self.timezone_name = timezone_name

    def rows(self, orders: Iterable[OrderView]) -> list[list[str]]:
        """Body rows, without header."""
        rows = []

        for order in orders:
            grouped = self.grouper.group(order.line_items)
            common = [
                order.name,
                format_order_date(order.created_at, self.timezone_name),
                translate_financial_status(order.financial_status),
                translate_fulfillment_status(order.fulfillment_status),
                shipping_label(order),
            ]

            for bundle in grouped.bundles:
                rows.append(
                    common
                    + [
                        bundle.display_name,
                        bundle.products_label,
                        str(bundle.total_quantity),
                        bundle.total_price.formatted(),
                        order.currency,
                    ]
                )

            for product in grouped.standalone_products:
                rows.append(
                    common
                    + [
                        STANDALONE_GROUP_NAME,
                        product.label,
                        str(product.quantity),
                        product.total_price.formatted(),
                        order.currency,
                    ]
                )

        return rows

    def export(self, orders: Iterable[OrderView]) -> str:
        """
        Build the complete CSV document.

        Args:
            orders: Orders to export, in display order

        Returns:
            str: BOM + header + one line per bundle/standalone product
        """
        orders = list(orders)
        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=DELIMITER, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")

        writer.writerow(HEADERS)
        body = self.rows(orders)
        writer.writerows(body)

        logger.info(f"📄 CSV export built: {len(orders)} orders, {len(body)} rows")
        return BOM + buffer.getvalue()
