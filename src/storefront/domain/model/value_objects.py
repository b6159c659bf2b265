"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
Monetary amounts are integer minor units (cents) so that no binary
floating-point value ever takes part in a currency calculation.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from storefront.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Money:
    """Monetary amount in minor units with an ISO 4217 currency code."""

    cents: int
    currency: str = "EUR"

    def __post_init__(self) -> None:
        if not isinstance(self.cents, int) or isinstance(self.cents, bool):
            raise ValidationError(
                f"Money amount must be integer cents, got {type(self.cents).__name__}"
            )

    @staticmethod
    def of(amount: str | int | Decimal, currency: str = "EUR") -> Money:
        """Parse a major-unit amount such as ``"15.00"`` into cents."""
        try:
            value = Decimal(str(amount).strip())
        except InvalidOperation:
            raise ValidationError(f"Invalid money amount: {amount}", field="price")
        if not value.is_finite():
            raise ValidationError(f"Invalid money amount: {amount}", field="price")
        cents = int((value * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))
        return Money(cents, currency.upper())

    # --- Display --------------------------------------------------------------

    def format(self, position: str = "before") -> str:
        """Render as ``EUR 12.50`` or ``12.50 EUR`` depending on *position*."""
        sign = "-" if self.cents < 0 else ""
        whole, frac = divmod(abs(self.cents), 100)
        amount = f"{sign}{whole:,}.{frac:02d}"
        if position == "after":
            return f"{amount} {self.currency}"
        return f"{self.currency} {amount}"

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True)
class Quantity:
    """A line quantity, always at least one.

    Carts never hold zero or negative lines: raw input below one collapses
    to one instead of being rejected.
    """

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    @staticmethod
    def coerce(raw: object) -> Quantity:
        """Build a quantity from loosely-typed input, clamping to >= 1."""
        try:
            value = int(raw)  # type: ignore[call-overload]
        except (TypeError, ValueError):
            value = 1
        return Quantity(max(1, value))

    def __str__(self) -> str:
        return str(self.value)
