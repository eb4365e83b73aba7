"""
Cursor pagination and filter reconciliation for the order list.

Everything here is a pure function of PageState:

- ``build_fetch_request`` turns a state into the arguments of one ``orders``
  query;
- ``apply_navigation`` derives the next state from the current one, a user
  action and the page info of the last fetch;
- ``apply_client_filters`` narrows a fetched page by the status filters,
  which Shopify's order search does not apply for us.

Every filter mutation clears the cursor, so a new filter set always restarts
from the first page. ``has_next_page``/``has_previous_page`` come from
upstream only: a page shortened by client-side filtering says nothing about
whether more pages exist.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from app.domain.models.order_view import OrderView, PageInfo
from app.domain.models.page_state import FILTER_FIELDS, Direction, FetchParams, PageState
from app.utils.error_handler import InvalidPagerTransition, ValidationException

logger = logging.getLogger(__name__)


class NavigationKind(str, Enum):
    NEXT = "next"
    PREVIOUS = "previous"
    SET_FILTER = "set_filter"
    CLEAR_FILTERS = "clear_filters"


@dataclass(frozen=True)
class NavigationAction:
    """
    User action on the order list.

    ``changes`` is only used by SET_FILTER; a None value clears that filter.
    The resulting date range must stay ordered, so moving a range past its
    other bound takes both ``date_from`` and ``date_to`` in one action.
    """

    kind: NavigationKind
    changes: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def next(cls) -> "NavigationAction":
        return cls(NavigationKind.NEXT)

    @classmethod
    def previous(cls) -> "NavigationAction":
        return cls(NavigationKind.PREVIOUS)

    @classmethod
    def set_filter(cls, **changes: Any) -> "NavigationAction":
        unknown = sorted(set(changes) - set(FILTER_FIELDS))
        if unknown:
            raise ValidationException(
                message=f"Unknown filter fields: {', '.join(unknown)}",
                field="filters",
                invalid_value=unknown,
                expected_format=", ".join(FILTER_FIELDS),
            )
        return cls(NavigationKind.SET_FILTER, dict(changes))

    @classmethod
    def clear_filters(cls) -> "NavigationAction":
        return cls(NavigationKind.CLEAR_FILTERS)

    @property
    def mutates_filters(self) -> bool:
        return self.kind in (NavigationKind.SET_FILTER, NavigationKind.CLEAR_FILTERS)


def build_search_query(state: PageState) -> Optional[str]:
    """
    Shopify order search string for the server-side filters.

    Only the free text (matched on the order name) and the inclusive date
    range narrow the upstream query.
    """
    terms = []
    if state.query_text:
        terms.append(f"name:{state.query_text}")
    if state.date_from:
        terms.append(f"created_at:>='{state.date_from.isoformat()}'")
    if state.date_to:
        terms.append(f"created_at:<='{state.date_to.isoformat()}'")
    return " ".join(terms) or None


def build_fetch_request(state: PageState, page_size: int) -> FetchParams:
    """
    Arguments of the ``orders`` query for a page state.

    Args:
        state: Current page state
        page_size: Orders per page

    Returns:
        FetchParams: ``first/after`` going forward, ``last/before`` going back
    """
    query = build_search_query(state)

    if state.cursor and state.direction == Direction.PREVIOUS:
        return FetchParams(last=page_size, before=state.cursor, query=query)

    return FetchParams(first=page_size, after=state.cursor, query=query)


def apply_navigation(state: PageState, action: NavigationAction, page_info: Optional[PageInfo] = None) -> PageState:
    """
    Next page state for a user action.

    Args:
        state: Current page state
        action: User action
        page_info: Page info of the page currently displayed

    Returns:
        PageState: New state; the very same ``state`` object when the action
            is a no-op (no page in that direction)
    """
    page_info = page_info or PageInfo()

    if action.kind == NavigationKind.NEXT:
        if not page_info.has_next_page or not page_info.end_cursor:
            logger.debug("Next page requested without next page, ignoring")
            return state
        return replace(state, cursor=page_info.end_cursor, direction=Direction.NEXT)

    if action.kind == NavigationKind.PREVIOUS:
        if not page_info.has_previous_page or not page_info.start_cursor:
            logger.debug("Previous page requested without previous page, ignoring")
            return state
        return replace(state, cursor=page_info.start_cursor, direction=Direction.PREVIOUS)

    if action.kind == NavigationKind.CLEAR_FILTERS:
        return PageState()

    # SET_FILTER: cursor reset is part of the transition itself
    changes = {name: _normalize_filter_value(name, value) for name, value in action.changes.items()}
    return replace(state, cursor=None, direction=Direction.NEXT, **changes)


def needs_fetch(previous: PageState, current: PageState) -> bool:
    """Whether moving from ``previous`` to ``current`` requires a request."""
    return current != previous


def apply_client_filters(orders: Iterable[OrderView], state: PageState) -> list[OrderView]:
    """
    Keep the orders matching the status filters of ``state``.

    Args:
        orders: Orders of the fetched page
        state: Page state carrying the filters

    Returns:
        list: Orders in the original order
    """
    result = list(orders)
    if state.status_filter:
        result = [order for order in result if order.fulfillment_status == state.status_filter.value]
    if state.payment_status_filter:
        result = [order for order in result if order.financial_status == state.payment_status_filter.value]
    return result


def _normalize_filter_value(name: str, value: Any) -> Any:
    if name == "query_text":
        return (value or "").strip()
    if isinstance(value, str) and not value.strip():
        return None
    # Raw strings go through the URL parsers
    if isinstance(value, str):
        url_name = {
            "status_filter": "status",
            "payment_status_filter": "paymentStatus",
            "date_from": "dateFrom",
            "date_to": "dateTo",
        }[name]
        return getattr(PageState.from_query_params({url_name: value}), name)
    return value


# === MÁQUINA DE ESTADOS ===


class PagerStatus(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    ERROR = "error"


class PagerEvent(str, Enum):
    NAVIGATE = "navigate"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


_TRANSITIONS = {
    (PagerStatus.IDLE, PagerEvent.NAVIGATE): PagerStatus.FETCHING,
    (PagerStatus.ERROR, PagerEvent.NAVIGATE): PagerStatus.FETCHING,
    (PagerStatus.FETCHING, PagerEvent.SUCCEEDED): PagerStatus.IDLE,
    (PagerStatus.FETCHING, PagerEvent.FAILED): PagerStatus.ERROR,
}


def advance_status(status: PagerStatus, event: PagerEvent) -> PagerStatus:
    """
    Pager status after an event.

    Raises:
        InvalidPagerTransition: If the event is not allowed in ``status``
    """
    try:
        return _TRANSITIONS[(status, event)]
    except KeyError as e:
        raise InvalidPagerTransition(status.value, event.value) from e
