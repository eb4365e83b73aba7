#!/usr/bin/env python3
"""
Export bundle orders from Shopify to CSV.

Walks every page of orders matching the filters and writes the bundle report
(one row per bundle, one row per standalone product) to
commandes_bundles_<YYYY-MM-DD>.csv.

Usage:
    # Export every order (up to EXPORT_MAX_PAGES pages)
    python scripts/export_orders.py

    # Unfulfilled paid orders of January
    python scripts/export_orders.py --status UNFULFILLED --payment-status PAID \
        --date-from 2025-01-01 --date-to 2025-01-31

    # Single order by name into a given directory
    python scripts/export_orders.py --query 1001 --output-dir exports/
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

import pytz

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.core.config import get_settings  # noqa: E402
from app.db.shopify_clients.order_client import ShopifyOrderClient  # noqa: E402
from app.domain.models.page_state import PageState  # noqa: E402
from app.services.bundles.csv_exporter import OrderCSVExporter, export_filename  # noqa: E402
from app.services.bundles.order_list_service import OrderListService  # noqa: E402
from app.utils.error_handler import AppException  # noqa: E402

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Export Shopify bundle orders to CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--query", type=str, help="Order name search (e.g. 1001)")
    parser.add_argument("--status", type=str, help="Fulfillment status (e.g. UNFULFILLED)")
    parser.add_argument("--payment-status", type=str, help="Financial status (e.g. PAID)")
    parser.add_argument("--date-from", type=str, help="Inclusive start date YYYY-MM-DD")
    parser.add_argument("--date-to", type=str, help="Inclusive end date YYYY-MM-DD")
    parser.add_argument("--max-pages", type=int, help="Maximum pages to fetch (default: EXPORT_MAX_PAGES)")
    parser.add_argument("--output-dir", type=Path, default=Path("."), help="Directory for the CSV file")
    return parser.parse_args(argv)


def build_page_state(args: argparse.Namespace) -> PageState:
    """
    Raises:
        ValidationException: If a filter value is invalid
    """
    return PageState.from_query_params(
        {
            "query": args.query,
            "status": args.status,
            "paymentStatus": args.payment_status,
            "dateFrom": args.date_from,
            "dateTo": args.date_to,
        }
    )


async def export_orders(args: argparse.Namespace) -> Path:
    """
    Fetch every matching order and write the CSV.

    Returns:
        Path: Written file
    """
    settings = get_settings()
    state = build_page_state(args)
    max_pages = args.max_pages or settings.EXPORT_MAX_PAGES

    async with ShopifyOrderClient() as client:
        service = OrderListService(client, page_size=settings.ORDERS_PAGE_SIZE)
        orders = await service.collect_orders(state, max_pages)

    content = OrderCSVExporter(timezone_name=settings.DISPLAY_TIMEZONE).export(orders)

    today = datetime.now(pytz.timezone(settings.DISPLAY_TIMEZONE)).date()
    args.output_dir.mkdir(parents=True, exist_ok=True)
    path = args.output_dir / export_filename(today)
    path.write_text(content, encoding="utf-8", newline="")

    logger.info(f"✅ {len(orders)} orders exported to {path}")
    return path


async def main():
    """Main execution function."""
    args = parse_args()

    try:
        await export_orders(args)
    except AppException as e:
        logger.error(f"❌ Export failed: {e}")
        logger.debug(f"Error details: {e.to_dict()}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("\nOperation interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    asyncio.run(main())
