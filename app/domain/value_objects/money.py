"""
Money value object for handling monetary amounts with currency.

Amounts are kept as Decimal exactly as Shopify sends them; rounding only
happens when a value is formatted for display or export.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from app.utils.error_handler import MalformedPriceError

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """
    Immutable value object representing a monetary amount with currency.

    Attributes:
        amount: The monetary amount as Decimal for precision
        currency: ISO 4217 currency code (e.g., "EUR")

    Example:
        >>> price = Money.parse("10.00", "EUR")
        >>> (price * 2).formatted()
        '20.00'
    """

    amount: Decimal
    currency: str = "EUR"

    def __post_init__(self) -> None:
        """Validate money object after initialization."""
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))

        if not self.amount.is_finite():
            raise ValueError(f"Money amount must be finite: {self.amount}")

        if self.amount < 0:
            raise ValueError(f"Money amount cannot be negative: {self.amount}")

        if not self.currency or len(self.currency) != 3:
            raise ValueError(f"Invalid currency code: {self.currency}")

    def __add__(self, other: "Money") -> "Money":
        """Add two Money objects with the same currency."""
        if not isinstance(other, Money):
            raise TypeError(f"Cannot add Money with {type(other)}")

        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")

        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __mul__(self, multiplier: int | Decimal) -> "Money":
        """Multiply money by a quantity. Floats are rejected to avoid binary rounding."""
        if isinstance(multiplier, bool) or not isinstance(multiplier, (int, Decimal)):
            raise TypeError(f"Cannot multiply Money by {type(multiplier)}")

        return Money(amount=self.amount * Decimal(multiplier), currency=self.currency)

    def __str__(self) -> str:
        """String representation of Money."""
        return f"{self.formatted()} {self.currency}"

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"Money(amount=Decimal('{self.amount}'), currency='{self.currency}')"

    def formatted(self) -> str:
        """Amount rounded half-up to two decimals, e.g. '25.00'."""
        return str(self.amount.quantize(CENTS, rounding=ROUND_HALF_UP))

    @classmethod
    def zero(cls, currency: str = "EUR") -> "Money":
        """Create a zero Money object."""
        return cls(amount=Decimal("0"), currency=currency)

    @classmethod
    def parse(cls, raw: Any, currency: str, line_item_id: Optional[str] = None) -> "Money":
        """
        Create Money from a Shopify amount field.

        Args:
            raw: Amount as received ("19.90", 19, 19.9, Decimal); floats go
                through their shortest repr, never their binary value
            currency: Currency code of the amount
            line_item_id: Line item owning the price, for error context

        Raises:
            MalformedPriceError: If the amount is missing, not numeric,
                not finite or negative
        """
        if raw is None or isinstance(raw, bool):
            raise MalformedPriceError(raw, line_item_id=line_item_id)

        try:
            amount = raw if isinstance(raw, Decimal) else Decimal(str(raw).strip())
        except InvalidOperation as e:
            raise MalformedPriceError(raw, line_item_id=line_item_id) from e

        if not amount.is_finite() or amount < 0:
            raise MalformedPriceError(raw, line_item_id=line_item_id)

        try:
            return cls(amount=amount, currency=currency)
        except ValueError as e:
            raise MalformedPriceError(raw, line_item_id=line_item_id, field="currencyCode") from e
