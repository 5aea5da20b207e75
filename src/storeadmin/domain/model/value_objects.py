"""Money and quantity values used by orders and the catalog."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from storeadmin.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "BOB"
CURRENCY_LABELS = {"BOB": "Bs."}

_ZERO = Decimal("0")


@dataclass(frozen=True)
class Money:
    """Non-negative amount in the store's single currency.

    Backed by Decimal so summing order totals never drifts.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < _ZERO:
            raise ValidationError(f"Money amount cannot be negative, got {self.amount}")

    @classmethod
    def of(cls, amount: str | float | int | Decimal) -> Money:
        """Build from user input; floats go through ``str`` first."""
        try:
            return cls(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @classmethod
    def zero(cls) -> Money:
        return cls(Decimal("0.00"))

    @property
    def is_zero(self) -> bool:
        return self.amount == _ZERO

    def exceeds(self, other: Money) -> bool:
        return self._amount_of(other) < self.amount

    def __add__(self, other: Money) -> Money:
        return Money(self.amount + self._amount_of(other), self.currency)

    def __sub__(self, other: Money) -> Money:
        remainder = self.amount - self._amount_of(other)
        if remainder < _ZERO:
            raise ValidationError("Money subtraction would result in a negative amount")
        return Money(remainder, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __str__(self) -> str:
        return format_amount(self.amount, self.currency)

    def _amount_of(self, other: Money) -> Decimal:
        if other.currency != self.currency:
            raise ValidationError(f"Cannot combine {self.currency} with {other.currency}")
        return other.amount


def format_amount(amount: Decimal, currency: str = DEFAULT_CURRENCY) -> str:
    """Render an amount the way the back office shows it, e.g. ``Bs. 35.00``."""
    label = CURRENCY_LABELS.get(currency, currency)
    return f"{label} {amount:.2f}"


@dataclass(frozen=True)
class Quantity:
    """Line item quantity; always a positive int."""

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass, reject it explicitly
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)
