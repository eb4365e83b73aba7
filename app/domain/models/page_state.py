"""
Page state of the paginated, filtered order list.

PageState is owned by the caller (URL query string, CLI arguments) and is
never mutated: every navigation produces a new value.
"""

from dataclasses import dataclass, fields
from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional

from app.domain.models.statuses import FinancialStatus, FulfillmentStatus
from app.utils.error_handler import ValidationException


class Direction(str, Enum):
    """Pagination direction, with the values used in the URL."""

    NEXT = "next"
    PREVIOUS = "prev"


# Campos de PageState que cuentan como filtro
FILTER_FIELDS = ("query_text", "status_filter", "payment_status_filter", "date_from", "date_to")


@dataclass(frozen=True)
class PageState:
    """
    Serializable listing state.

    Attributes:
        cursor: Opaque Shopify cursor of the page boundary, None for first page
        direction: Whether ``cursor`` is an ``after`` or ``before`` boundary
        query_text: Free-text search on the order name
        status_filter: Fulfillment status post-filter
        payment_status_filter: Financial status post-filter
        date_from: Inclusive lower bound on creation date
        date_to: Inclusive upper bound on creation date
    """

    cursor: Optional[str] = None
    direction: Direction = Direction.NEXT
    query_text: str = ""
    status_filter: Optional[FulfillmentStatus] = None
    payment_status_filter: Optional[FinancialStatus] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    def __post_init__(self) -> None:
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValidationException(
                message="dateFrom must not be after dateTo",
                field="dateFrom",
                invalid_value=self.date_from.isoformat(),
            )

    @property
    def has_active_filters(self) -> bool:
        return any(getattr(self, name) for name in FILTER_FIELDS)

    @property
    def is_first_page(self) -> bool:
        return self.cursor is None

    def to_query_params(self) -> dict[str, str]:
        """
        Render the state with the URL parameter names.

        Empty values are omitted; ``direction`` is only written next to a cursor.
        """
        params: dict[str, str] = {}
        if self.cursor:
            params["cursor"] = self.cursor
            params["direction"] = self.direction.value
        if self.query_text:
            params["query"] = self.query_text
        if self.status_filter:
            params["status"] = self.status_filter.value
        if self.payment_status_filter:
            params["paymentStatus"] = self.payment_status_filter.value
        if self.date_from:
            params["dateFrom"] = self.date_from.isoformat()
        if self.date_to:
            params["dateTo"] = self.date_to.isoformat()
        return params

    @classmethod
    def from_query_params(cls, params: Mapping[str, Optional[str]]) -> "PageState":
        """
        Build a state from URL parameters.

        Args:
            params: cursor, direction, query, status, paymentStatus,
                dateFrom, dateTo

        Raises:
            ValidationException: If a parameter has an unknown value
        """
        return cls(
            cursor=_clean(params.get("cursor")),
            direction=_parse_enum(Direction, "direction", params.get("direction")) or Direction.NEXT,
            query_text=_clean(params.get("query")) or "",
            status_filter=_parse_enum(FulfillmentStatus, "status", params.get("status")),
            payment_status_filter=_parse_enum(FinancialStatus, "paymentStatus", params.get("paymentStatus")),
            date_from=_parse_date("dateFrom", params.get("dateFrom")),
            date_to=_parse_date("dateTo", params.get("dateTo")),
        )


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_enum(enum_cls, field: str, raw: Optional[str]):
    value = _clean(raw)
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError as e:
        raise ValidationException(
            message=f"Unknown {field} value: {value}",
            field=field,
            invalid_value=value,
            expected_format=" | ".join(member.value for member in enum_cls),
        ) from e


def _parse_date(field: str, raw: Optional[str]) -> Optional[date]:
    value = _clean(raw)
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValidationException(
            message=f"Invalid {field}: {value}",
            field=field,
            invalid_value=value,
            expected_format="YYYY-MM-DD",
        ) from e


@dataclass(frozen=True)
class FetchParams:
    """
    Arguments of one ``orders`` connection query.

    Forward pages use ``first``/``after``; backward pages use
    ``last``/``before``.
    """

    first: Optional[int] = None
    last: Optional[int] = None
    after: Optional[str] = None
    before: Optional[str] = None
    query: Optional[str] = None
    reverse: bool = True

    def to_variables(self) -> dict[str, Any]:
        """GraphQL variables, omitting unset arguments."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}
