"""
Line item grouping engine.

Partitions the line items of one order into bundle aggregates and standalone
products. Pure and deterministic: each call starts from an empty mapping and
the result only depends on the input order of the line items.
"""

import logging
from typing import Iterable, Optional

from app.domain.models.line_item import (
    BundleAggregate,
    GroupingResult,
    LineItem,
    StandaloneProduct,
)
from app.domain.value_objects.money import Money
from app.services.bundles.resolvers import BundleResolver, default_resolver

logger = logging.getLogger(__name__)


class LineItemGrouper:
    """
    Groups line items by bundle.

    Bundles are returned in the order their key is first seen, standalone
    products in line item order. A bundle's display name is captured from the
    first line item that opens it, falling back to ``"Bundle <key>"`` until a
    later line item of the same bundle carries a name.
    """

    def __init__(self, resolver: Optional[BundleResolver] = None):
        self.resolver = resolver or default_resolver()

    def group(self, line_items: Iterable[LineItem]) -> GroupingResult:
        """
        Partition line items into bundles and standalone products.

        Args:
            line_items: Line items of a single order

        Returns:
            GroupingResult: Bundles in first-seen order, standalone products
                in input order
        """
        bundles: dict[str, BundleAggregate] = {}
        unnamed: set[str] = set()
        standalone: list[StandaloneProduct] = []

        for line_item in line_items:
            ref = self.resolver.resolve(line_item)

            if ref is None:
                standalone.append(StandaloneProduct.from_line_item(line_item))
                continue

            bundle = bundles.get(ref.key)
            if bundle is None:
                bundle = BundleAggregate(
                    bundle_key=ref.key,
                    display_name=ref.name or f"Bundle {ref.key}",
                    source=ref.source,
                    quantity=ref.quantity,
                    total_price=Money.zero(line_item.unit_price.currency),
                )
                bundles[ref.key] = bundle
                if not ref.name:
                    unnamed.add(ref.key)
            elif ref.key in unnamed and ref.name:
                # El nombre sintético cede ante el primer nombre real
                bundle.display_name = ref.name
                unnamed.discard(ref.key)

            bundle.add(line_item)

        result = GroupingResult(bundles=tuple(bundles.values()), standalone_products=tuple(standalone))
        logger.debug(
            f"Grouped {result.line_count} line items into "
            f"{len(result.bundles)} bundles and {len(result.standalone_products)} standalone products"
        )
        return result


_default_grouper = LineItemGrouper()


def group_line_items(line_items: Iterable[LineItem]) -> GroupingResult:
    """Group line items with the default resolver chain."""
    return _default_grouper.group(line_items)
