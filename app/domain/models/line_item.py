"""
Line item and bundle grouping domain models.

A line item belongs to at most one bundle. The bundle relation can come from
Shopify's structural ``lineItemGroup`` or from custom attributes written by a
bundle app on the cart line.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

from app.domain.value_objects.money import Money


class BundleSource(str, Enum):
    """Mechanism that established the bundle relation of a line item."""

    LINE_ITEM_GROUP = "line_item_group"
    CUSTOM_ATTRIBUTE = "custom_attribute"


@dataclass(frozen=True)
class LineItemGroupRef:
    """Structural ``lineItemGroup`` object attached to a line item."""

    id: str
    title: Optional[str] = None
    quantity: Optional[int] = None


@dataclass(frozen=True)
class BundleRef:
    """
    Resolved bundle association of one line item.

    Attributes:
        key: Identifier shared by every line item of the bundle
        name: Display name, when the source carries one
        quantity: Nominal number of bundle units (structural groups only)
        source: Mechanism the reference was read from
    """

    key: str
    name: Optional[str]
    quantity: Optional[int]
    source: BundleSource


@dataclass(frozen=True)
class LineItem:
    """
    Order line item as read from Shopify.

    Attributes:
        id: Shopify LineItem gid
        title: Product title
        quantity: Ordered quantity (>= 0)
        unit_price: Original unit price
        group_ref: Structural line item group, if any
        custom_attributes: Cart line properties (key -> value)
    """

    id: str
    title: str
    quantity: int
    unit_price: Money
    group_ref: Optional[LineItemGroupRef] = None
    custom_attributes: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError(f"Quantity must be an integer: {self.quantity!r}")
        if self.quantity < 0:
            raise ValueError(f"Quantity cannot be negative: {self.quantity}")

    @property
    def line_total(self) -> Money:
        """Unit price times quantity."""
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class BundleProduct:
    """Product entry displayed inside a bundle."""

    title: str
    quantity: int
    unit_price: Money

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity

    @property
    def label(self) -> str:
        """Export label, e.g. 'Shirt (x2)'."""
        return f"{self.title} (x{self.quantity})"


@dataclass
class BundleAggregate:
    """
    Products of one bundle within one order.

    Created on the first line item seen for ``bundle_key`` during a grouping
    pass, then extended for each following line item sharing the key.
    ``total_price`` always equals the sum of unit price times quantity of
    ``products`` in encounter order.
    """

    bundle_key: str
    display_name: str
    source: BundleSource
    total_price: Money
    quantity: Optional[int] = None
    products: list[BundleProduct] = field(default_factory=list)

    def add(self, line_item: LineItem) -> None:
        """Append a line item to the bundle and accumulate its total."""
        self.products.append(
            BundleProduct(
                title=line_item.title,
                quantity=line_item.quantity,
                unit_price=line_item.unit_price,
            )
        )
        self.total_price = self.total_price + line_item.line_total

    @property
    def total_quantity(self) -> int:
        """Sum of the constituent product quantities."""
        return sum(product.quantity for product in self.products)

    @property
    def products_label(self) -> str:
        return ", ".join(product.label for product in self.products)


@dataclass(frozen=True)
class StandaloneProduct:
    """Line item without bundle association."""

    title: str
    quantity: int
    unit_price: Money
    total_price: Money

    @classmethod
    def from_line_item(cls, line_item: LineItem) -> "StandaloneProduct":
        return cls(
            title=line_item.title,
            quantity=line_item.quantity,
            unit_price=line_item.unit_price,
            total_price=line_item.line_total,
        )

    @property
    def label(self) -> str:
        return f"{self.title} (x{self.quantity})"


@dataclass(frozen=True)
class GroupingResult:
    """
    Partition of an order's line items into bundles and standalone products.

    Every input line item appears exactly once: inside one bundle's
    products or as one standalone product.
    """

    bundles: tuple[BundleAggregate, ...] = ()
    standalone_products: tuple[StandaloneProduct, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.bundles and not self.standalone_products

    @property
    def line_count(self) -> int:
        """Number of line items covered by the partition."""
        return sum(len(bundle.products) for bundle in self.bundles) + len(self.standalone_products)

    def grand_total(self, currency: str) -> Money:
        """Sum of every bundle and standalone total."""
        total = Money.zero(currency)
        for bundle in self.bundles:
            total = total + bundle.total_price
        for product in self.standalone_products:
            total = total + product.total_price
        return total
