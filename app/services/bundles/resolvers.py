"""
Bundle association resolvers.

A line item can be tied to a bundle in two ways: Shopify's structural
``lineItemGroup`` or the ``bundle_id``/``bundle_name`` cart attributes written
by bundle apps (optionally prefixed with ``_`` to hide them at checkout).
Each mechanism is one resolver; ``ChainedBundleResolver`` tries them in a
fixed priority and the first hit wins.

Precedence:
    1. lineItemGroup
    2. custom attributes; ``bundle_id`` before ``_bundle_id`` and
       ``bundle_name`` before ``_bundle_name``
"""

import logging
from typing import Mapping, Optional, Protocol, Sequence

from app.domain.models.line_item import BundleRef, BundleSource, LineItem

logger = logging.getLogger(__name__)

BUNDLE_ID_KEYS = ("bundle_id", "_bundle_id")
BUNDLE_NAME_KEYS = ("bundle_name", "_bundle_name")


class BundleResolver(Protocol):
    """Extracts the bundle association of a line item, if any."""

    def resolve(self, line_item: LineItem) -> Optional[BundleRef]: ...


class LineItemGroupResolver:
    """Reads the structural ``lineItemGroup`` relation."""

    def resolve(self, line_item: LineItem) -> Optional[BundleRef]:
        group = line_item.group_ref
        if group is None or not group.id:
            return None

        return BundleRef(
            key=group.id,
            name=(group.title or "").strip() or None,
            quantity=group.quantity,
            source=BundleSource.LINE_ITEM_GROUP,
        )


class CustomAttributeResolver:
    """Reads the ``bundle_id`` / ``bundle_name`` custom attribute pair."""

    def __init__(
        self,
        id_keys: Sequence[str] = BUNDLE_ID_KEYS,
        name_keys: Sequence[str] = BUNDLE_NAME_KEYS,
    ):
        self.id_keys = tuple(id_keys)
        self.name_keys = tuple(name_keys)

    def resolve(self, line_item: LineItem) -> Optional[BundleRef]:
        bundle_id = first_attribute(line_item.custom_attributes, self.id_keys)
        if bundle_id is None:
            return None

        return BundleRef(
            key=bundle_id,
            name=first_attribute(line_item.custom_attributes, self.name_keys),
            quantity=None,
            source=BundleSource.CUSTOM_ATTRIBUTE,
        )


class ChainedBundleResolver:
    """Tries resolvers in order and returns the first association found."""

    def __init__(self, resolvers: Sequence[BundleResolver]):
        self.resolvers = tuple(resolvers)

    def resolve(self, line_item: LineItem) -> Optional[BundleRef]:
        for resolver in self.resolvers:
            ref = resolver.resolve(line_item)
            if ref is not None:
                return ref
        return None


def first_attribute(attributes: Mapping[str, str], keys: Sequence[str]) -> Optional[str]:
    """
    Value of the first key present with a non-blank value.

    Args:
        attributes: Custom attributes of the line item
        keys: Candidate keys in priority order

    Returns:
        Stripped value or None
    """
    for key in keys:
        value = attributes.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def default_resolver() -> ChainedBundleResolver:
    """Resolver chain with the documented precedence."""
    return ChainedBundleResolver([LineItemGroupResolver(), CustomAttributeResolver()])
