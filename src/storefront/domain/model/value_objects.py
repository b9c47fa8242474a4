"""Money and quantity: the two values every cart and order line carries.

Both are frozen dataclasses.  Constructing one with a bad value raises
``ValidationError`` immediately, so the aggregates never have to re-check.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import total_ordering

from storefront.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "VND"

# Currencies whose smallest unit is the whole unit (Stripe's list).
ZERO_DECIMAL_CURRENCIES = frozenset(
    {
        "BIF", "CLP", "DJF", "GNF", "JPY", "KMF", "KRW", "MGA",
        "PYG", "RWF", "UGX", "VND", "VUV", "XAF", "XOF", "XPF",
    }
)

_ONE = Decimal("1")


@total_ordering
@dataclass(frozen=True)
class Money:
    """A non-negative Decimal amount tagged with an ISO currency code.

    Lines and totals in one cart or order always share a currency; mixing
    two currencies in arithmetic or comparison is a ``ValidationError``.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount.is_signed() and self.amount != 0:
            raise ValidationError(f"Money amount cannot be negative, got {self.amount}")

    @classmethod
    def of(cls, amount: str | int | Decimal, currency: str = DEFAULT_CURRENCY) -> Money:
        """Build from user or file input; floats go through ``str`` first."""
        try:
            value = Decimal(str(amount))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        return cls(value, currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls(Decimal("0"), currency)

    def __add__(self, other: Money) -> Money:
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def to_minor_units(
        self, zero_decimal_currencies: frozenset[str] = ZERO_DECIMAL_CURRENCIES
    ) -> int:
        """Integer amount for the payment gateway, rounded half up.

        VND 120000 stays 120000; USD 12.34 becomes 1234.
        """
        scaled = self.amount if self._is_zero_decimal(zero_decimal_currencies) else self.amount * 100
        return int(scaled.quantize(_ONE, rounding=ROUND_HALF_UP))

    def __str__(self) -> str:
        if self._is_zero_decimal(ZERO_DECIMAL_CURRENCIES):
            return f"{self.amount:,.0f} {self.currency}"
        return f"{self.amount:,.2f} {self.currency}"

    def _is_zero_decimal(self, codes: frozenset[str]) -> bool:
        return self.currency.upper() in codes

    def _check_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(f"Cannot combine {self.currency} with {other.currency}")


@dataclass(frozen=True)
class Quantity:
    """Units on an order line; always a positive int."""

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass, but True is not a quantity
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value < 1:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)
