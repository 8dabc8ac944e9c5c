"""Fixed-point money arithmetic (two fraction digits).

All monetary values are ``Decimal`` quantized to cents.  ``float`` input is
rejected outright: binary floating point cannot represent most cent values
exactly and must never reach a total or subtotal computation.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Iterable, Union

MoneyInput = Union[Decimal, int, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
# Largest value a DecimalField(max_digits=10, decimal_places=2) column holds.
MAX_AMOUNT = Decimal("99999999.99")


class InvalidMoneyAmount(ValueError):
    """The value is not a finite amount representable with two fraction digits."""


def to_money(value: MoneyInput) -> Decimal:
    """Convert *value* to a cent-quantized ``Decimal``.

    Raises:
        TypeError: *value* is a ``float``, ``bool`` or unsupported type.
        InvalidMoneyAmount: *value* is not finite or has more than two
            significant fraction digits.
    """
    if isinstance(value, (bool, float)) or not isinstance(value, (Decimal, int, str)):
        raise TypeError(
            f"Money values must be Decimal, int or str, got {type(value).__name__}."
        )
    try:
        amount = Decimal(value) if not isinstance(value, Decimal) else value
    except InvalidOperation as exc:
        raise InvalidMoneyAmount(f"Invalid money amount: {value!r}.") from exc

    if not amount.is_finite():
        raise InvalidMoneyAmount(f"Invalid money amount: {value!r}.")

    quantized = amount.quantize(CENT)
    if quantized != amount:
        raise InvalidMoneyAmount(
            f"Money amount {value!r} has more than two fraction digits."
        )
    return quantized


def multiply(quantity: int, unit_price: MoneyInput) -> Decimal:
    """Return ``quantity * unit_price`` at cent precision."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise TypeError("Quantity must be an integer.")
    return (to_money(unit_price) * quantity).quantize(CENT)


def add(a: MoneyInput, b: MoneyInput) -> Decimal:
    return (to_money(a) + to_money(b)).quantize(CENT)


def total(amounts: Iterable[MoneyInput]) -> Decimal:
    """Sum *amounts*; an empty iterable totals ``0.00``."""
    result = ZERO
    for amount in amounts:
        result = add(result, amount)
    return result
